"""Async client for Amazon Transcribe jobs and their result documents.

WHY: The workflow submits one batch transcription job per run, polls it
until it finishes, then downloads the JSON result from the URL the
service hands back. This module hides the boto3 request shapes and the
HTTP fetch behind three methods.

HOW: Job calls go through a boto3 ``transcribe`` client, run in a worker
thread with asyncio.to_thread. The result document is fetched with
httpx.AsyncClient; the client is an async context manager that owns the
HTTP connection pool, like the other HTTP clients in this codebase.
Workflow step order: submit_job → get_job (repeatedly) → fetch_transcript.

RULES:
- Always use the async context manager:
  async with TranscribeClient(region) as client: ...
- Job responses are parsed into TranscriptionJob (api/models.py)
- Any boto3/botocore or HTTP failure raises RemoteOperationFailed
- An undecodable or schema-violating result raises MalformedTranscriptError
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import boto3
import httpx
from botocore.exceptions import BotoCoreError, ClientError

from transcribe_captions.api.models import TranscriptionJob, parse_transcript_items
from transcribe_captions.config import DEFAULT_REGION
from transcribe_captions.core.ir import TranscriptItem
from transcribe_captions.errors import MalformedTranscriptError, RemoteOperationFailed

logger = logging.getLogger(__name__)

_FETCH_OPERATION = "GET transcript"


class TranscribeClient:
    """Async client for the Amazon Transcribe batch API.

    RULES:
    - region defaults to DEFAULT_REGION from config
    - client: optional pre-built boto3 transcribe client (tests stub it)
    - transport: optional httpx transport (tests use httpx.MockTransport)
    """

    def __init__(
        self,
        region: str | None = None,
        client: Any = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.region = region or DEFAULT_REGION
        self._transcribe = client or boto3.client("transcribe", region_name=self.region)
        self._transport = transport
        self._http: httpx.AsyncClient | None = None

    async def __aenter__(self) -> TranscribeClient:
        self._http = httpx.AsyncClient(
            transport=self._transport,
            timeout=httpx.Timeout(300.0, connect=30.0),
            follow_redirects=True,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        if self._http:
            await self._http.aclose()
            self._http = None

    def _ensure_http(self) -> httpx.AsyncClient:
        """Return the active httpx client, raising if not in context manager."""
        if self._http is None:
            raise RuntimeError(
                "TranscribeClient must be used as an async context manager: "
                "async with TranscribeClient() as client: ..."
            )
        return self._http

    # ------------------------------------------------------------------
    # Job submission and status
    # ------------------------------------------------------------------

    async def submit_job(
        self,
        job_name: str,
        media_uri: str,
        language_code: str,
        media_format: str,
    ) -> TranscriptionJob:
        """Start a batch transcription job for an uploaded media object.

        Args:
            job_name: Unique job name for this run.
            media_uri: S3 URI of the uploaded media.
            language_code: BCP-47 language code, e.g. "en-US".
            media_format: Transcribe MediaFormat, e.g. "mp4".

        Returns:
            The job as reported by the service right after submission.
        """
        operation = "transcribe:StartTranscriptionJob"
        response = await self._call(
            operation,
            self._transcribe.start_transcription_job,
            TranscriptionJobName=job_name,
            LanguageCode=language_code,
            MediaFormat=media_format,
            Media={"MediaFileUri": media_uri},
        )
        return _parse_job(operation, response)

    async def get_job(self, job_name: str) -> TranscriptionJob:
        """Return the current state of a transcription job."""
        operation = "transcribe:GetTranscriptionJob"
        response = await self._call(
            operation,
            self._transcribe.get_transcription_job,
            TranscriptionJobName=job_name,
        )
        return _parse_job(operation, response)

    # ------------------------------------------------------------------
    # Result fetch
    # ------------------------------------------------------------------

    async def fetch_transcript(self, result_uri: str) -> list[TranscriptItem]:
        """Download a completed job's result document and parse its items.

        Raises:
            RemoteOperationFailed: on transport errors or non-2xx responses.
            MalformedTranscriptError: if the body is not the expected JSON.
        """
        http = self._ensure_http()
        try:
            resp = await http.get(result_uri)
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            raise RemoteOperationFailed(_FETCH_OPERATION, exc) from exc

        try:
            document = resp.json()
        except ValueError as exc:
            raise MalformedTranscriptError(
                f"Transcript document is not valid JSON: {exc}"
            ) from exc

        items = parse_transcript_items(document)
        logger.debug("Fetched %d transcript items from %s", len(items), result_uri)
        return items

    async def _call(self, operation: str, func: Any, **kwargs: Any) -> Any:
        try:
            return await asyncio.to_thread(func, **kwargs)
        except (BotoCoreError, ClientError) as exc:
            raise RemoteOperationFailed(operation, exc) from exc


def _parse_job(operation: str, response: dict[str, Any]) -> TranscriptionJob:
    try:
        return TranscriptionJob.from_dict(response["TranscriptionJob"])
    except (KeyError, ValueError) as exc:
        raise RemoteOperationFailed(operation, exc) from exc
