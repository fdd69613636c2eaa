"""Shared test fixtures for the transcribe_captions test suite.

WHY: The parser, segmenter, workflow, and client tests all need the same
Amazon Transcribe result document and the same in-memory stand-ins for
S3 and Transcribe. Centralizing them here avoids duplication.

HOW: SAMPLE_DOCUMENT mirrors the layout of a real Transcribe result
(string timestamps, "pronunciation"/"punctuation" types, untimed
punctuation). FakeStorage and FakeTranscriber implement the client
interfaces the workflow expects and record every call in order.

RULES:
- Fakes never sleep or touch the network
- Every fake call is appended to the shared ``calls`` list so tests can
  assert on ordering across both clients
- A fake raises the exception set in ``fail_on[<method name>]``
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

from transcribe_captions.api.models import JobStatus, TranscriptionJob, parse_transcript_items
from transcribe_captions.core.ir import TranscriptItem


# ---------------------------------------------------------------------------
# Sample Amazon Transcribe result document
# ---------------------------------------------------------------------------

SAMPLE_DOCUMENT: Dict[str, Any] = {
    "jobName": "transcribe_sample_interview.mp4",
    "accountId": "123456789012",
    "status": "COMPLETED",
    "results": {
        "transcripts": [{"transcript": "Hello there. How are you doing today?"}],
        "items": [
            {"start_time": "0.04", "end_time": "0.52", "type": "pronunciation",
             "alternatives": [{"confidence": "0.998", "content": "Hello"}]},
            {"start_time": "0.52", "end_time": "0.91", "type": "pronunciation",
             "alternatives": [{"confidence": "0.995", "content": "there"}]},
            {"type": "punctuation",
             "alternatives": [{"confidence": "0.0", "content": "."}]},
            {"start_time": "1.30", "end_time": "1.52", "type": "pronunciation",
             "alternatives": [{"confidence": "0.991", "content": "How"}]},
            {"start_time": "1.52", "end_time": "1.63", "type": "pronunciation",
             "alternatives": [{"confidence": "0.999", "content": "are"}]},
            {"start_time": "1.63", "end_time": "1.80", "type": "pronunciation",
             "alternatives": [{"confidence": "0.998", "content": "you"}]},
            {"start_time": "1.80", "end_time": "2.10", "type": "pronunciation",
             "alternatives": [{"confidence": "0.987", "content": "doing"}]},
            {"start_time": "2.10", "end_time": "2.64", "type": "pronunciation",
             "alternatives": [{"confidence": "0.974", "content": "today"},
                              {"confidence": "0.021", "content": "to day"}]},
            {"type": "punctuation",
             "alternatives": [{"confidence": "0.0", "content": "?"}]},
        ],
    },
}

SAMPLE_CAPTIONS = (
    "1\n"
    "00:00:00.040 --> 00:00:00.910\n"
    "Hello there.\n"
    "\n"
    "2\n"
    "00:00:01.300 --> 00:00:02.640\n"
    "How are you doing today?\n"
)

RESULT_URI = "https://s3.us-east-1.amazonaws.com/aws-transcribe-us-east-1-prod/123/result.json"


@pytest.fixture
def sample_document():
    """A deep copy of the sample Transcribe result document."""
    return copy.deepcopy(SAMPLE_DOCUMENT)


@pytest.fixture
def sample_items():
    """The sample document parsed into TranscriptItem objects."""
    return parse_transcript_items(copy.deepcopy(SAMPLE_DOCUMENT))


@pytest.fixture
def media_file(tmp_path):
    """A small fake media file on disk."""
    path = tmp_path / "interview.mp4"
    path.write_bytes(b"\x00\x00\x00\x18ftypmp42 fake media")
    return path


# ---------------------------------------------------------------------------
# Fake remote clients
# ---------------------------------------------------------------------------


class FakeStorage:
    """In-memory stand-in for S3StorageClient."""

    def __init__(self, calls: List[tuple], buckets=(), fail_on=None) -> None:
        self.calls = calls
        self.buckets = set(buckets)
        self.objects: Dict[tuple, bytes] = {}
        self.fail_on: Dict[str, Exception] = dict(fail_on or {})

    def _record(self, name: str, *args) -> None:
        self.calls.append((name,) + args)
        if name in self.fail_on:
            raise self.fail_on[name]

    async def list_bucket_names(self):
        self._record("list_bucket_names")
        return set(self.buckets)

    async def create_bucket(self, name):
        self._record("create_bucket", name)
        self.buckets.add(name)

    async def put_object(self, bucket, object_name, file_path):
        self._record("put_object", bucket, object_name)
        self.objects[(bucket, object_name)] = Path(file_path).read_bytes()

    async def delete_object(self, bucket, object_name):
        self._record("delete_object", bucket, object_name)
        self.objects.pop((bucket, object_name), None)


class FakeTranscriber:
    """In-memory stand-in for TranscribeClient.

    ``statuses`` is the sequence of statuses returned by successive
    get_job calls; the last one repeats.
    """

    def __init__(
        self,
        calls: List[tuple],
        statuses=(JobStatus.IN_PROGRESS, JobStatus.COMPLETED),
        items: Optional[List[TranscriptItem]] = None,
        failure_reason: Optional[str] = None,
        fail_on=None,
    ) -> None:
        self.calls = calls
        self.statuses = list(statuses)
        self.items = items
        self.failure_reason = failure_reason
        self.fail_on: Dict[str, Exception] = dict(fail_on or {})
        self.submitted: Dict[str, Any] = {}
        self.polls = 0

    def _record(self, name: str, *args) -> None:
        self.calls.append((name,) + args)
        if name in self.fail_on:
            raise self.fail_on[name]

    async def submit_job(self, job_name, media_uri, language_code, media_format):
        self._record("submit_job", job_name)
        self.submitted = {
            "job_name": job_name,
            "media_uri": media_uri,
            "language_code": language_code,
            "media_format": media_format,
        }
        return TranscriptionJob(name=job_name, status=JobStatus.SUBMITTED)

    async def get_job(self, job_name):
        self._record("get_job", job_name)
        status = self.statuses[min(self.polls, len(self.statuses) - 1)]
        self.polls += 1
        return TranscriptionJob(
            name=job_name,
            status=status,
            result_uri=RESULT_URI if status is JobStatus.COMPLETED else None,
            failure_reason=self.failure_reason if status is JobStatus.FAILED else None,
        )

    async def fetch_transcript(self, result_uri):
        self._record("fetch_transcript", result_uri)
        if self.items is None:
            return parse_transcript_items(copy.deepcopy(SAMPLE_DOCUMENT))
        return list(self.items)


@pytest.fixture
def calls():
    """Shared, ordered call log for the fake clients."""
    return []


@pytest.fixture
def make_storage(calls):
    """Factory for FakeStorage instances sharing the ``calls`` log."""
    def _make(**kwargs) -> FakeStorage:
        return FakeStorage(calls, **kwargs)
    return _make


@pytest.fixture
def make_transcriber(calls):
    """Factory for FakeTranscriber instances sharing the ``calls`` log."""
    def _make(**kwargs) -> FakeTranscriber:
        return FakeTranscriber(calls, **kwargs)
    return _make


@pytest.fixture
def sample_captions():
    """Expected caption file content for SAMPLE_DOCUMENT."""
    return SAMPLE_CAPTIONS


@pytest.fixture
def result_uri():
    """The transcript URI reported by FakeTranscriber for completed jobs."""
    return RESULT_URI
