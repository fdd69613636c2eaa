"""SRT-style caption formatter.

WHY: The segmenter produces numbered, timed cues; editors and players
expect them as a plain-text caption file.

HOW: Each cue becomes a block of index line, ``start --> end`` line, and
text line. Blocks are separated by one blank line.

RULES:
- Timestamps use format_timestamp (``HH:MM:SS.mmm``) on both sides
- The file ends with a single newline after the last cue's text
- No cues → empty string
"""

from __future__ import annotations

from typing import Sequence

from transcribe_captions.core.ir import SubtitleCue
from transcribe_captions.core.timecode import format_timestamp
from transcribe_captions.formatters.base import BaseFormatter


def format_cue(cue: SubtitleCue) -> str:
    """Render one cue as a three-line block (no trailing newline)."""
    return "{}\n{} --> {}\n{}".format(
        cue.index,
        format_timestamp(cue.start),
        format_timestamp(cue.end),
        cue.text,
    )


def format_srt(cues: Sequence[SubtitleCue]) -> str:
    """Render all cues as caption file content."""
    if not cues:
        return ""
    return "\n\n".join(format_cue(cue) for cue in cues) + "\n"


class SRTCaptionFormatter(BaseFormatter):
    """Formatter producing one SRT-style caption file."""

    @property
    def name(self) -> str:
        return "SRT Captions"

    def format(self, cues: Sequence[SubtitleCue]) -> str:
        return format_srt(cues)
