"""AWS client package: async interfaces to S3 and Amazon Transcribe.

WHY: The workflow needs to stage a media file in S3, run a Transcribe
job on it, and download the result. This package encapsulates all AWS
and HTTP communication behind two small async client classes.

HOW: boto3 clients for S3 and Transcribe (run in worker threads) and
httpx.AsyncClient for the result download. Responses are parsed into
typed models defined in models.py.

RULES:
- All AWS calls go through S3StorageClient / TranscribeClient
- Credentials come from boto3's default provider chain
- Third-party errors surface as RemoteOperationFailed
"""

from transcribe_captions.api.models import JobStatus, TranscriptionJob
from transcribe_captions.api.storage import S3StorageClient
from transcribe_captions.api.transcribe import TranscribeClient

__all__ = ["JobStatus", "S3StorageClient", "TranscribeClient", "TranscriptionJob"]
