"""Transcript segmentation: flat word/punctuation items → subtitle cues.

WHY: Amazon Transcribe returns one long ordered list of words and
punctuation marks. Captions need short, numbered, timed chunks. This
module decides where one cue ends and the next begins.

HOW: A single forward pass folds an immutable accumulator (cue start,
text buffer) over the items; closed cues are appended to one list owned
by the pass, so each item costs constant work. Two heuristics close a cue:
  1. A punctuation item always closes the current cue, with the
     punctuation attached to the preceding word.
  2. A word whose end lies more than MAX_CUE_DURATION_S after the cue's
     start closes the current cue before that word; the word opens the
     next one.
Whatever remains in the buffer after the pass becomes one final cue.

RULES:
- A closed cue ends at the end time of the item just before the one
  that closed it; a trailing cue ends at the last word's end time
- The threshold compares the candidate item's end with the cue's start,
  not the buffered duration, so a long pause alone can force a split
- Consecutive punctuation produces a cue holding only the punctuation
- Cue indices count emitted cues only (1-based, no gaps)
- Empty input raises EmptyTranscriptError
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import List, Sequence

from transcribe_captions.core.ir import SubtitleCue, TranscriptItem
from transcribe_captions.errors import EmptyTranscriptError

MAX_CUE_DURATION_S = 5.0


@dataclass(frozen=True)
class _Accumulator:
    """State threaded through the segmentation pass."""

    cue_start: float
    buffer: str = ""

    def close(self, end: float, cues: List[SubtitleCue]) -> None:
        """Append the buffered text to ``cues`` as the next cue."""
        cues.append(SubtitleCue(
            index=len(cues) + 1,
            start=self.cue_start,
            end=max(end, self.cue_start),
            text=self.buffer.strip(),
        ))


def segment_items(
    items: Sequence[TranscriptItem],
    max_cue_duration: float = MAX_CUE_DURATION_S,
) -> list[SubtitleCue]:
    """Group transcript items into subtitle cues.

    Args:
        items: Ordered transcript items, as parsed from the job result.
        max_cue_duration: Longest span (seconds) a cue may cover before
            the next word forces a split.

    Returns:
        Cues in emission order, indexed from 1.

    Raises:
        EmptyTranscriptError: if ``items`` is empty.
    """
    if not items:
        raise EmptyTranscriptError("Transcript contains no items to segment.")

    cues: List[SubtitleCue] = []
    acc = _Accumulator(cue_start=items[0].start_time)
    for index in range(len(items)):
        acc = _step(acc, items, index, max_cue_duration, cues)

    if acc.buffer:
        last = items[-1]
        if last.is_punctuation and len(items) > 1:
            end = items[-2].end_time
        else:
            end = last.end_time
        acc.close(end, cues)
    return cues


def _step(
    acc: _Accumulator,
    items: Sequence[TranscriptItem],
    index: int,
    max_cue_duration: float,
    cues: List[SubtitleCue],
) -> _Accumulator:
    item = items[index]
    # No preceding item at index 0: a cue closed there ends where it starts.
    previous_end = items[index - 1].end_time if index > 0 else acc.cue_start

    if item.is_punctuation:
        buffer = acc.buffer[:-1] if acc.buffer.endswith(" ") else acc.buffer
        replace(acc, buffer=buffer + item.text).close(previous_end, cues)
        if index + 1 < len(items):
            next_start = items[index + 1].start_time
        else:
            next_start = acc.cue_start
        return _Accumulator(cue_start=next_start)

    if item.end_time - acc.cue_start > max_cue_duration:
        if acc.buffer:
            acc.close(previous_end, cues)
        return _Accumulator(cue_start=item.start_time, buffer=item.text + " ")

    return replace(acc, buffer=acc.buffer + item.text + " ")
