"""End-to-end orchestration: media file in, caption file out.

WHY: Producing captions takes a fixed sequence of remote steps (make
sure the bucket exists, upload, submit a transcription job, wait for it,
fetch the result), followed by local segmentation and a file write.
Each step needs the previous step's output, and any failure must stop
the run before a caption file is written.

HOW: TranscriptionWorkflow drives one run as a forward-only state
machine (WorkflowState). The storage and transcription clients are
injected, as is the ``on_status`` callback that receives human-readable
progress messages. An optional asyncio.Event cancels the run: it is
checked before every step and interrupts the polling waits.

States, in order (``?`` = conditional):
  START → BUCKET_CHECK → BUCKET_CREATE? → UPLOAD → JOB_SUBMIT → POLLING
  → FETCH → CONVERT → PERSIST → CLEANUP? → DONE
ABORTED is entered from any state when an exception escapes.

RULES:
- The input file is checked (exists, supported extension) before any
  remote call
- No step is retried; every error propagates unchanged to the caller
- A FAILED job raises JobFailedError with the service's reason
- Polling stops with PollingTimeoutError once max_wait is exceeded
- A set cancel event raises WorkflowCancelledError before the next step
  (DONE excepted) or from a pending poll wait
- The output file is written only after segmentation succeeded, via a
  temporary file that replaces the target
- CLEANUP runs only when delete_after is set; nothing is rolled back on
  failure (created buckets and uploaded objects stay in place)
"""

from __future__ import annotations

import asyncio
import enum
import logging
import re
import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Protocol

from transcribe_captions.api.models import JobStatus, TranscriptionJob
from transcribe_captions.api.storage import S3StorageClient
from transcribe_captions.api.transcribe import TranscribeClient
from transcribe_captions.config import (
    CAPTION_SUFFIX,
    DEFAULT_LANGUAGE_CODE,
    DEFAULT_REGION,
    INITIAL_POLL_DELAY_S,
    MAX_WAIT_S,
    POLL_INTERVAL_S,
    media_format_for,
)
from transcribe_captions.core.ir import TranscriptItem
from transcribe_captions.core.segmenter import segment_items
from transcribe_captions.errors import (
    InputFileNotFoundError,
    JobFailedError,
    MalformedTranscriptError,
    PollingTimeoutError,
    WorkflowCancelledError,
)
from transcribe_captions.formatters.srt_captions import SRTCaptionFormatter

logger = logging.getLogger(__name__)

_JOB_NAME_MAX_LEN = 200
_JOB_NAME_INVALID_RE = re.compile(r"[^0-9A-Za-z._-]")


class WorkflowState(str, enum.Enum):
    """Steps of a transcription run."""

    START = "start"
    BUCKET_CHECK = "bucket_check"
    BUCKET_CREATE = "bucket_create"
    UPLOAD = "upload"
    JOB_SUBMIT = "job_submit"
    POLLING = "polling"
    FETCH = "fetch"
    CONVERT = "convert"
    PERSIST = "persist"
    CLEANUP = "cleanup"
    DONE = "done"
    ABORTED = "aborted"


_STATE_ORDER = [state for state in WorkflowState if state is not WorkflowState.ABORTED]


class StorageClient(Protocol):
    async def list_bucket_names(self) -> set[str]: ...

    async def create_bucket(self, name: str) -> None: ...

    async def put_object(self, bucket: str, object_name: str, file_path: Path) -> None: ...

    async def delete_object(self, bucket: str, object_name: str) -> None: ...


class TranscriptionService(Protocol):
    async def submit_job(
        self, job_name: str, media_uri: str, language_code: str, media_format: str
    ) -> TranscriptionJob: ...

    async def get_job(self, job_name: str) -> TranscriptionJob: ...

    async def fetch_transcript(self, result_uri: str) -> List[TranscriptItem]: ...


@dataclass(frozen=True)
class WorkflowParameters:
    """Immutable input to one run.

    RULES:
    - bucket_name has trailing "/" separators stripped
    - input_file is absolute
    - output_file defaults to input_file with its extension replaced by .srt
    """

    bucket_name: str
    input_file: Path
    output_file: Path
    delete_after: bool = False

    @classmethod
    def create(
        cls,
        bucket_name: str,
        input_file: Path | str,
        output_file: Path | str | None = None,
        delete_after: bool = False,
    ) -> WorkflowParameters:
        input_path = Path(input_file).resolve()
        if output_file:
            output_path = Path(output_file).resolve()
        else:
            output_path = input_path.with_suffix(CAPTION_SUFFIX)
        return cls(
            bucket_name=bucket_name.rstrip("/"),
            input_file=input_path,
            output_file=output_path,
            delete_after=delete_after,
        )


def make_job_name(media_file: str) -> str:
    """Build a per-run job name from a fresh UUID and the media file name.

    Characters the service rejects are replaced by "-" and the result is
    cut to the service's 200-character limit.
    """
    safe_name = _JOB_NAME_INVALID_RE.sub("-", media_file)
    return "transcribe_{}_{}".format(uuid.uuid4(), safe_name)[:_JOB_NAME_MAX_LEN]


class TranscriptionWorkflow:
    """Drives one media file through upload, transcription and captioning.

    Args:
        params: What to transcribe and where to write the result.
        storage: Remote storage client (S3StorageClient in production).
        transcriber: Transcription client (TranscribeClient in production).
        language_code: Language submitted with the job.
        poll_interval: Seconds between status polls.
        initial_delay: Seconds to wait before the first poll.
        max_wait: Longest time (seconds) to keep polling a running job.
        on_status: Optional callback receiving progress messages.
        cancel_event: Optional event; setting it stops the run before the
            next step or during a pending wait.
        clock: Monotonic time source used for the polling deadline.
    """

    def __init__(
        self,
        params: WorkflowParameters,
        storage: StorageClient,
        transcriber: TranscriptionService,
        language_code: str = DEFAULT_LANGUAGE_CODE,
        poll_interval: float = POLL_INTERVAL_S,
        initial_delay: float = INITIAL_POLL_DELAY_S,
        max_wait: float = MAX_WAIT_S,
        on_status: Optional[Callable[[str], None]] = None,
        cancel_event: Optional[asyncio.Event] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.params = params
        self.storage = storage
        self.transcriber = transcriber
        self.language_code = language_code
        self.poll_interval = poll_interval
        self.initial_delay = initial_delay
        self.max_wait = max_wait
        self._on_status = on_status
        self._cancel_event = cancel_event
        self._clock = clock
        self._formatter = SRTCaptionFormatter()

        self.state = WorkflowState.START
        self.history: List[WorkflowState] = [WorkflowState.START]
        self.job: Optional[TranscriptionJob] = None

    # ------------------------------------------------------------------
    # Public entry point
    # ------------------------------------------------------------------

    async def run(self) -> None:
        """Execute the run. Raises on any failure after entering ABORTED."""
        try:
            await self._run()
        finally:
            if self.state is not WorkflowState.DONE:
                self._abort()

    async def _run(self) -> None:
        params = self.params
        bucket = params.bucket_name
        input_file = params.input_file

        if not input_file.is_file():
            raise InputFileNotFoundError(input_file)
        media_format = media_format_for(input_file)
        object_name = input_file.name

        # Step 1: Bucket
        self._enter(WorkflowState.BUCKET_CHECK)
        if bucket not in await self.storage.list_bucket_names():
            self._enter(WorkflowState.BUCKET_CREATE)
            self._status(f"Creating bucket {bucket}...")
            await self.storage.create_bucket(bucket)
            self._status("Bucket created.")

        # Step 2: Upload
        self._enter(WorkflowState.UPLOAD)
        self._status(f"Uploading {input_file}...")
        await self.storage.put_object(bucket, object_name, input_file)
        self._status("File uploaded.")

        # Step 3: Submit job
        self._enter(WorkflowState.JOB_SUBMIT)
        self._status("Starting transcription job...")
        job_name = make_job_name(object_name)
        self.job = await self.transcriber.submit_job(
            job_name=job_name,
            media_uri=f"s3://{bucket}/{object_name}",
            language_code=self.language_code,
            media_format=media_format,
        )
        self._status(f"Transcription job: {self.job.name}")

        # Step 4: Poll until terminal
        self._enter(WorkflowState.POLLING)
        self.job = await self._poll(self.job.name)

        # Step 5: Fetch result
        self._enter(WorkflowState.FETCH)
        if not self.job.result_uri:
            raise MalformedTranscriptError(
                f"Job {self.job.name} completed without a transcript URI."
            )
        self._status("Fetching transcript...")
        items = await self.transcriber.fetch_transcript(self.job.result_uri)

        # Step 6: Convert
        self._enter(WorkflowState.CONVERT)
        self._status(f"Converting to {self._formatter.name}...")
        cues = segment_items(items)
        content = self._formatter.format(cues)
        self._status(f"  {len(cues)} cues from {len(items)} items")

        # Step 7: Persist
        self._enter(WorkflowState.PERSIST)
        self._status(f"Writing {params.output_file}")
        _write_text(params.output_file, content)

        # Step 8: Optional cleanup
        if params.delete_after:
            self._enter(WorkflowState.CLEANUP)
            self._status(f"Deleting s3://{bucket}/{object_name}")
            await self.storage.delete_object(bucket, object_name)

        self._enter(WorkflowState.DONE)
        self._status("Done!")

    # ------------------------------------------------------------------
    # Polling
    # ------------------------------------------------------------------

    async def _poll(self, job_name: str) -> TranscriptionJob:
        started = self._clock()
        await self._wait(self.initial_delay)
        job = await self.transcriber.get_job(job_name)

        while not job.is_terminal:
            elapsed = self._clock() - started
            if elapsed >= self.max_wait:
                raise PollingTimeoutError(
                    f"Transcription job {job_name} still running after "
                    f"{elapsed:.0f}s (limit: {self.max_wait:.0f}s)"
                )
            self._status(
                "Transcribing... (elapsed: {}m {:02d}s)".format(
                    int(elapsed) // 60, int(elapsed) % 60
                )
            )
            await self._wait(min(self.poll_interval, self.max_wait - elapsed))
            job = await self.transcriber.get_job(job_name)

        if job.status is JobStatus.FAILED:
            self._status(f"Transcription failed: {job.failure_reason}")
            raise JobFailedError(job.name, job.failure_reason)

        self._status("Transcription complete.")
        return job

    async def _wait(self, seconds: float) -> None:
        """Sleep, returning early with WorkflowCancelledError if cancelled."""
        if self._cancel_event is None:
            await asyncio.sleep(seconds)
            return

        if not self._cancelled():
            try:
                await asyncio.wait_for(self._cancel_event.wait(), timeout=seconds)
            except asyncio.TimeoutError:
                return
        raise WorkflowCancelledError("Run cancelled while waiting for the transcription job.")

    # ------------------------------------------------------------------
    # State bookkeeping
    # ------------------------------------------------------------------

    def _enter(self, state: WorkflowState) -> None:
        if _STATE_ORDER.index(state) <= _STATE_ORDER.index(self.state):
            raise RuntimeError(
                f"Invalid workflow transition {self.state.value} -> {state.value}"
            )
        if state is not WorkflowState.DONE and self._cancelled():
            raise WorkflowCancelledError(
                f"Run cancelled before entering {state.value}."
            )
        logger.debug("Workflow %s -> %s", self.state.value, state.value)
        self.state = state
        self.history.append(state)

    def _cancelled(self) -> bool:
        return self._cancel_event is not None and self._cancel_event.is_set()

    def _abort(self) -> None:
        logger.debug("Workflow aborted in state %s", self.state.value)
        self.state = WorkflowState.ABORTED
        self.history.append(WorkflowState.ABORTED)

    def _status(self, msg: str) -> None:
        if self._on_status:
            self._on_status(msg)


def _write_text(path: Path, content: str) -> None:
    """Write content to path, replacing any existing file in one step."""
    partial = path.with_name(path.name + ".part")
    try:
        partial.write_text(content, encoding="utf-8")
        partial.replace(path)
    except OSError:
        partial.unlink(missing_ok=True)
        raise


async def run_workflow(
    params: WorkflowParameters,
    region: str = DEFAULT_REGION,
    **options,
) -> TranscriptionWorkflow:
    """Build the AWS clients for ``region`` and run one workflow.

    Keyword options are passed to TranscriptionWorkflow.

    Returns:
        The finished workflow (state DONE).
    """
    storage = S3StorageClient(region)
    async with TranscribeClient(region) as transcriber:
        workflow = TranscriptionWorkflow(params, storage, transcriber, **options)
        await workflow.run()
    return workflow
