"""Configuration constants, media format mapping, and .env loading.

WHY: Centralizes every tunable value (region, language, polling cadence,
polling ceiling) so it is easy to find, update, and override without
touching workflow logic.

HOW: python-dotenv loads the .env file on import. Constants are
module-level values read from the environment with sensible defaults.
The media format mapping is a plain dict so new extensions are a
one-line change.

RULES:
- AWS credentials are NEVER read here; boto3 resolves them through its
  default provider chain (env vars, ~/.aws, instance role)
- MEDIA_FORMATS maps lowercase file extensions (with dot) to the
  MediaFormat values accepted by Amazon Transcribe
- All defaults can be overridden via environment variables
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

from transcribe_captions.errors import UnsupportedMediaFormatError

# Load .env from the working directory (where the command is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# AWS / transcription defaults
# ---------------------------------------------------------------------------

DEFAULT_REGION = os.getenv("AWS_REGION", "us-east-1")
DEFAULT_LANGUAGE_CODE = os.getenv("TRANSCRIBE_LANGUAGE_CODE", "en-US")

POLL_INTERVAL_S = float(os.getenv("TRANSCRIBE_POLL_INTERVAL_S", "30"))
INITIAL_POLL_DELAY_S = float(os.getenv("TRANSCRIBE_INITIAL_DELAY_S", "0.5"))
MAX_WAIT_S = float(os.getenv("TRANSCRIBE_MAX_WAIT_S", str(6 * 60 * 60)))

CAPTION_SUFFIX = ".srt"

# ---------------------------------------------------------------------------
# Supported media files
# ---------------------------------------------------------------------------

MEDIA_FORMATS: dict[str, str] = {
    ".amr": "amr",
    ".flac": "flac",
    ".m4a": "m4a",
    ".mp3": "mp3",
    ".mp4": "mp4",
    ".ogg": "ogg",
    ".wav": "wav",
    ".webm": "webm",
}
"""File extension → Amazon Transcribe MediaFormat."""


def media_format_for(path: Path | str) -> str:
    """Return the Transcribe media format for a file, based on its extension.

    Raises:
        UnsupportedMediaFormatError: if the extension is not in MEDIA_FORMATS.
    """
    ext = Path(path).suffix.lower()
    try:
        return MEDIA_FORMATS[ext]
    except KeyError:
        supported = ", ".join(sorted(MEDIA_FORMATS))
        raise UnsupportedMediaFormatError(
            f"Unsupported file type '{ext or Path(path).name}'. "
            f"Supported formats: {supported}"
        ) from None
