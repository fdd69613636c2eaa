"""Amazon Transcribe job and result-document models.

WHY: The Transcribe API reports jobs as nested dicts with upper-case
status strings, and the result document stores timestamps as strings
and ranks several alternatives per item. Typed models keep those
details at the edge so the workflow and segmenter never see raw JSON.

HOW: TranscriptionJob.from_dict parses the ``TranscriptionJob`` object
returned by StartTranscriptionJob / GetTranscriptionJob.
parse_transcript_items turns the fetched result document into
TranscriptItem objects from core.ir.

RULES:
- Service statuses map QUEUED→submitted, IN_PROGRESS→in_progress,
  COMPLETED→completed, FAILED→failed
- result_uri is only set for completed jobs, failure_reason only for
  failed ones
- "pronunciation" items become words; "punctuation" items keep their
  type; anything else is malformed
- Punctuation without timestamps inherits the previous item's end time
  (0.0 for a leading punctuation item)
- Only the first alternative is used
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any

from transcribe_captions.core.ir import ItemKind, TranscriptItem
from transcribe_captions.errors import MalformedTranscriptError


class JobStatus(str, enum.Enum):
    """Status of a remote transcription job."""

    SUBMITTED = "submitted"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


_SERVICE_STATUS = {
    "QUEUED": JobStatus.SUBMITTED,
    "IN_PROGRESS": JobStatus.IN_PROGRESS,
    "COMPLETED": JobStatus.COMPLETED,
    "FAILED": JobStatus.FAILED,
}

_ITEM_KINDS = {
    "pronunciation": ItemKind.WORD,
    "punctuation": ItemKind.PUNCTUATION,
}


@dataclass
class TranscriptionJob:
    """Handle for a remote transcription job.

    RULES:
    - name: the per-run job name submitted to the service
    - status: current JobStatus
    - result_uri: transcript file URI, only when COMPLETED
    - failure_reason: service-reported reason, only when FAILED
    """

    name: str
    status: JobStatus
    result_uri: str | None = None
    failure_reason: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status in (JobStatus.COMPLETED, JobStatus.FAILED)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TranscriptionJob:
        """Parse a ``TranscriptionJob`` object from the Transcribe API."""
        raw_status = data.get("TranscriptionJobStatus", "")
        try:
            status = _SERVICE_STATUS[raw_status]
        except KeyError:
            raise ValueError(
                f"Unknown transcription job status: {raw_status!r}"
            ) from None

        result_uri = None
        if status is JobStatus.COMPLETED:
            result_uri = data.get("Transcript", {}).get("TranscriptFileUri")

        failure_reason = None
        if status is JobStatus.FAILED:
            failure_reason = data.get("FailureReason")

        return cls(
            name=data["TranscriptionJobName"],
            status=status,
            result_uri=result_uri,
            failure_reason=failure_reason,
        )


def parse_transcript_items(document: Any) -> list[TranscriptItem]:
    """Parse the ``results.items`` array of a Transcribe result document.

    Args:
        document: The decoded JSON result document.

    Returns:
        Items in document order. May be empty.

    Raises:
        MalformedTranscriptError: if the document does not match the
            word/punctuation item schema.
    """
    try:
        raw_items = document["results"]["items"]
    except (KeyError, TypeError):
        raise MalformedTranscriptError(
            "Transcript document has no results.items list."
        ) from None
    if not isinstance(raw_items, list):
        raise MalformedTranscriptError("results.items is not a list.")

    items: list[TranscriptItem] = []
    previous_end = 0.0
    for position, raw in enumerate(raw_items):
        item = _parse_item(raw, position, previous_end)
        items.append(item)
        previous_end = item.end_time
    return items


def _parse_item(raw: Any, position: int, previous_end: float) -> TranscriptItem:
    if not isinstance(raw, dict):
        raise MalformedTranscriptError(f"Item {position} is not an object.")

    kind = _ITEM_KINDS.get(str(raw.get("type")))
    if kind is None:
        raise MalformedTranscriptError(
            f"Item {position} has unsupported type {raw.get('type')!r}."
        )

    alternatives = raw.get("alternatives")
    if not isinstance(alternatives, list) or not alternatives or not isinstance(alternatives[0], dict):
        raise MalformedTranscriptError(f"Item {position} has no alternatives.")
    top = alternatives[0]
    if "content" not in top:
        raise MalformedTranscriptError(f"Item {position} has no content.")

    try:
        if kind is ItemKind.PUNCTUATION and "start_time" not in raw:
            start_time = end_time = previous_end
        else:
            start_time = float(raw["start_time"])
            end_time = float(raw["end_time"])
        confidence = float(top.get("confidence") or 0.0)
    except (KeyError, TypeError, ValueError) as exc:
        raise MalformedTranscriptError(
            f"Item {position} has invalid timing or confidence: {exc}"
        ) from exc

    if start_time < 0 or end_time < start_time:
        raise MalformedTranscriptError(
            f"Item {position} has invalid time range {start_time}–{end_time}."
        )

    return TranscriptItem(
        start_time=start_time,
        end_time=end_time,
        kind=kind,
        text=str(top["content"]),
        confidence=confidence,
    )
