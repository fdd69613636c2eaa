"""Async wrapper around the S3 calls the workflow needs.

WHY: The workflow checks for the target bucket, creates it when missing,
uploads the media file, and optionally deletes the upload afterwards.
Keeping those four calls behind one small class lets tests swap in a
fake and keeps boto3 error types out of the workflow.

HOW: Wraps a boto3 S3 client. boto3 is blocking, so every call runs in
a worker thread via asyncio.to_thread; the event loop suspends at each
remote call just as it does for httpx requests. botocore and s3transfer
errors are re-raised as RemoteOperationFailed.

RULES:
- put_object checks the local file BEFORE any network call and raises
  InputFileNotFoundError when it is missing
- create_bucket sends a LocationConstraint outside us-east-1
- No retries beyond what botocore does on its own
- Success is not verified beyond the call's own return
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any

import boto3
from boto3.exceptions import S3UploadFailedError
from botocore.exceptions import BotoCoreError, ClientError

from transcribe_captions.config import DEFAULT_REGION
from transcribe_captions.errors import InputFileNotFoundError, RemoteOperationFailed

logger = logging.getLogger(__name__)

_AWS_ERRORS = (BotoCoreError, ClientError, S3UploadFailedError)


class S3StorageClient:
    """Minimal async S3 client: list/create buckets, put/delete objects.

    RULES:
    - region defaults to DEFAULT_REGION from config
    - client may be injected (tests pass a stubbed boto3 client)
    """

    def __init__(self, region: str | None = None, client: Any = None) -> None:
        self.region = region or DEFAULT_REGION
        self._s3 = client or boto3.client("s3", region_name=self.region)

    async def list_bucket_names(self) -> set[str]:
        """Return the names of all buckets visible to the caller."""
        response = await self._call("s3:ListBuckets", self._s3.list_buckets)
        return {bucket["Name"] for bucket in response.get("Buckets", [])}

    async def create_bucket(self, name: str) -> None:
        """Create a bucket in the client's region."""
        params: dict[str, Any] = {"Bucket": name}
        if self.region != "us-east-1":
            params["CreateBucketConfiguration"] = {"LocationConstraint": self.region}
        await self._call("s3:CreateBucket", self._s3.create_bucket, **params)
        logger.debug("Created bucket %s in %s", name, self.region)

    async def put_object(self, bucket: str, object_name: str, file_path: Path) -> None:
        """Stream a local file to ``bucket/object_name``.

        Raises:
            InputFileNotFoundError: if file_path does not exist. No request
                is made in that case.
            RemoteOperationFailed: if the upload fails.
        """
        file_path = Path(file_path)
        if not file_path.is_file():
            raise InputFileNotFoundError(file_path)

        def _upload() -> None:
            with open(file_path, "rb") as f:
                self._s3.upload_fileobj(f, bucket, object_name)

        await self._call("s3:PutObject", _upload)
        logger.debug("Uploaded %s to s3://%s/%s", file_path, bucket, object_name)

    async def delete_object(self, bucket: str, object_name: str) -> None:
        """Delete ``bucket/object_name``."""
        await self._call(
            "s3:DeleteObject",
            self._s3.delete_object,
            Bucket=bucket,
            Key=object_name,
        )

    async def _call(self, operation: str, func: Any, **kwargs: Any) -> Any:
        try:
            return await asyncio.to_thread(func, **kwargs)
        except _AWS_ERRORS as exc:
            raise RemoteOperationFailed(operation, exc) from exc
