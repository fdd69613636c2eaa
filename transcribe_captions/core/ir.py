"""Intermediate representation dataclasses for transcripts and captions.

WHY: Amazon Transcribe returns a flat, ordered list of word and
punctuation items. The segmenter groups them into timed caption cues.
Both ends of that conversion need a small, well-typed form that does not
depend on the service's JSON layout.

HOW: Three types:
  ItemKind       word or punctuation
  TranscriptItem one token with timing, text, and confidence
  SubtitleCue    one numbered caption with start/end and text

RULES:
- All times are float seconds from the start of the media
- Items are immutable once parsed and are consumed once by the segmenter
- Cue indices are 1-based and gap-free; end >= start
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


class ItemKind(str, enum.Enum):
    """Kind of a transcript item."""

    WORD = "word"
    PUNCTUATION = "punctuation"


@dataclass(frozen=True)
class TranscriptItem:
    """A single word or punctuation mark from the transcription result.

    RULES:
    - text: content of the top-ranked alternative only
    - start_time <= end_time, non-decreasing across the sequence
    - confidence: informational, never used by segmentation
    """

    start_time: float
    end_time: float
    kind: ItemKind
    text: str
    confidence: float = 0.0

    @property
    def is_punctuation(self) -> bool:
        return self.kind is ItemKind.PUNCTUATION


@dataclass(frozen=True)
class SubtitleCue:
    """One timed caption entry."""

    index: int
    start: float
    end: float
    text: str
