"""Exception hierarchy for the transcription-to-captions workflow.

WHY: Every step of a run can fail for a different reason: a missing input
file, a rejected AWS call, a failed transcription job, or an unusable
result document. Callers (the CLI, tests) need typed exceptions to tell
these apart and to report the underlying cause to the operator.

HOW: One base class, TranscribeCaptionsError, with a subclass per failure
kind. Several subclasses also inherit the matching builtin
(FileNotFoundError, ValueError, TimeoutError) so generic handlers keep
working.

RULES:
- Every error is unrecoverable at its point of origin and aborts the run
- Wrappers around third-party errors keep the original as ``cause`` and
  are raised with ``raise ... from exc``
- Messages are complete sentences suitable for printing to the operator
"""

from __future__ import annotations


class TranscribeCaptionsError(Exception):
    """Base class for all errors raised by transcribe_captions."""


class InputFileNotFoundError(TranscribeCaptionsError, FileNotFoundError):
    """Raised when the local media file does not exist.

    Detected before any network call is made.
    """

    def __init__(self, path: object) -> None:
        self.path = path
        super().__init__(f"Input file does not exist: {path}")


class UnsupportedMediaFormatError(TranscribeCaptionsError, ValueError):
    """Raised when the input file extension is not a transcribable format."""


class RemoteOperationFailed(TranscribeCaptionsError):
    """Raised when a storage, transcription, or result-fetch call fails.

    WHY: Network, permission, and quota failures surface from boto3 and
    httpx as many different exception types. The workflow only needs to
    know which remote operation failed and why.

    RULES:
    - operation: short name of the call, e.g. "s3:CreateBucket"
    - cause: the original exception (also chained as __cause__)
    """

    def __init__(self, operation: str, cause: BaseException) -> None:
        self.operation = operation
        self.cause = cause
        super().__init__(f"{operation} failed: {cause}")


class JobFailedError(TranscribeCaptionsError):
    """Raised when the transcription job ends in the FAILED status."""

    def __init__(self, job_name: str, reason: str | None) -> None:
        self.job_name = job_name
        self.reason = reason
        super().__init__(
            f"Transcription job {job_name} failed: {reason or 'no reason reported'}"
        )


class EmptyTranscriptError(TranscribeCaptionsError, ValueError):
    """Raised when a transcript contains no items to segment."""


class MalformedTranscriptError(TranscribeCaptionsError, ValueError):
    """Raised when a result document does not match the item schema."""


class PollingTimeoutError(TranscribeCaptionsError, TimeoutError):
    """Raised when a job is still running after the maximum wait."""


class WorkflowCancelledError(TranscribeCaptionsError):
    """Raised when the cancellation token is set while waiting on a job."""
