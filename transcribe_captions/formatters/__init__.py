"""Caption output formatters.

WHY: Rendering is kept apart from segmentation so the cue model stays
format-agnostic.

HOW: base.py defines the formatter interface, srt_captions.py the only
supported output format.
"""

from transcribe_captions.formatters.base import BaseFormatter
from transcribe_captions.formatters.srt_captions import SRTCaptionFormatter, format_srt

__all__ = ["BaseFormatter", "SRTCaptionFormatter", "format_srt"]
