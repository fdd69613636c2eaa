"""Command-line interface for transcribe_captions.

WHY: Operators caption one media file at a time from the terminal. The
CLI turns flags into WorkflowParameters, runs the async workflow against
real AWS clients, prints progress, and maps failures to an exit status.

HOW: argparse builds the parser; main() configures logging and runs the
pipeline with asyncio.run(). Status messages go to stderr through the
workflow's on_status callback. SIGTERM sets the workflow's cancellation
event so a run waiting on the service stops cleanly.

RULES:
- Positional argument: input media file; --bucket is required
- --output defaults to the input path with its extension replaced by .srt
- The output directory must exist before any AWS call is made
- Status output goes to stderr (never stdout); --quiet silences it
- Any failed run prints "Error: ..." to stderr and exits 1; Ctrl-C exits 130
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import signal
import sys
from typing import List, Optional

from transcribe_captions import __version__
from transcribe_captions.config import (
    DEFAULT_LANGUAGE_CODE,
    DEFAULT_REGION,
    MAX_WAIT_S,
    POLL_INTERVAL_S,
)
from transcribe_captions.workflow import WorkflowParameters, run_workflow


def _status(msg: str) -> None:
    """Print a status message to stderr.

    RULES:
    - All status messages go to stderr
    - Always flush after writing
    """
    print(msg, file=sys.stderr, flush=True)


def _fail(msg: str, code: int = 1) -> None:
    print("Error: {}".format(msg), file=sys.stderr)
    sys.exit(code)


async def _run_pipeline(args: argparse.Namespace) -> None:
    """Validate arguments and execute one workflow run."""
    params = WorkflowParameters.create(
        bucket_name=args.bucket,
        input_file=args.file,
        output_file=args.output,
        delete_after=args.delete,
    )

    if not params.output_file.parent.is_dir():
        _fail("Output directory does not exist: {}".format(params.output_file.parent))

    cancel_event = asyncio.Event()
    with contextlib.suppress(NotImplementedError):
        asyncio.get_running_loop().add_signal_handler(signal.SIGTERM, cancel_event.set)

    await run_workflow(
        params,
        region=args.region,
        language_code=args.language,
        poll_interval=args.poll_interval,
        max_wait=args.max_wait,
        on_status=None if args.quiet else _status,
        cancel_event=cancel_event,
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    RULES:
    - Positional: file (required)
    - Required: -b/--bucket
    - Optional: --region, --output, --delete, --language, --poll-interval,
      --max-wait, --quiet, --verbose, --version
    """
    parser = argparse.ArgumentParser(
        prog="transcribe-captions",
        description="Transcribe a media file with Amazon Transcribe and "
                    "write the result as SRT-style captions.",
    )

    parser.add_argument(
        "file",
        help="Path to the audio or video file to transcribe.",
    )

    parser.add_argument(
        "-b", "--bucket",
        required=True,
        help="The S3 bucket to create or use.",
    )

    parser.add_argument(
        "-r", "--region",
        default=DEFAULT_REGION,
        help="The AWS region containing the S3 bucket (default: %(default)s).",
    )

    parser.add_argument(
        "-o", "--output",
        default=None,
        help="Output caption filename (default: input file with .srt extension).",
    )

    parser.add_argument(
        "-d", "--delete",
        action="store_true",
        default=False,
        help="Delete the uploaded file from S3 when done.",
    )

    parser.add_argument(
        "-l", "--language",
        default=DEFAULT_LANGUAGE_CODE,
        help="Language code of the media (default: %(default)s).",
    )

    parser.add_argument(
        "--poll-interval",
        type=float,
        default=POLL_INTERVAL_S,
        help="Seconds between job status checks (default: %(default)s).",
    )

    parser.add_argument(
        "--max-wait",
        type=float,
        default=MAX_WAIT_S,
        help="Give up after waiting this many seconds for the job (default: %(default)s).",
    )

    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Do not print progress messages.",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )

    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s {}".format(__version__),
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the ``transcribe-captions`` command.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    try:
        asyncio.run(_run_pipeline(args))
    except KeyboardInterrupt:
        _status("\nCancelled by user.")
        sys.exit(130)
    except Exception as e:
        _fail(str(e))


if __name__ == "__main__":
    main()
