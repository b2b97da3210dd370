"""Command line entry point: upload one local file to a bucket."""
from __future__ import annotations

import argparse
import logging
import math
import re
import sys
import threading
from typing import Any, Callable, Sequence

from s3upload.application.upload_workflow import UploadWorkflow
from s3upload.config import settings
from s3upload.domain.object_store import ObjectStoreClient
from s3upload.domain.upload import UploadRequest
from s3upload.infrastructure.object_storage import S3ObjectStoreClient, create_session

logger = logging.getLogger("s3upload.cli")

_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")


def parse_duration(value: str) -> float:
    """Parse ``1h30m``, ``1.5s`` or ``300ms`` style durations into seconds.

    A bare number is taken as seconds. Negative durations and durations
    too long for a timer are rejected.
    """
    text = value.strip()
    if text.startswith("+"):
        text = text[1:]
    if not text:
        raise argparse.ArgumentTypeError("empty duration")
    try:
        seconds = float(text)
    except ValueError:
        seconds = None
    if seconds is None:
        position = 0
        seconds = 0.0
        for match in _DURATION_PART.finditer(text):
            if match.start() != position:
                break
            seconds += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
            position = match.end()
        if position != len(text) or position == 0:
            raise argparse.ArgumentTypeError(f"invalid duration {value!r}")
    if not math.isfinite(seconds) or seconds < 0:
        raise argparse.ArgumentTypeError(f"invalid duration {value!r}")
    if seconds > threading.TIMEOUT_MAX:
        raise argparse.ArgumentTypeError(f"duration {value!r} out of range")
    return seconds


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="s3upload", description="Upload a file to an S3 bucket")
    parser.add_argument("-b", dest="bucket", default="", help="Bucket name")
    parser.add_argument("-k", dest="key", default="", help="Object key")
    parser.add_argument("-d", dest="timeout", type=parse_duration, default=0.0, help="Timeout (e.g. 10s, 1m30s)")
    parser.add_argument("-f", dest="file", default=settings.upload_source_path, help="Local file to upload")
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level")
    return parser


def _setup_logging(level_name: str) -> None:
    level = getattr(logging, level_name.upper(), logging.WARNING)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def main(
    argv: Sequence[str] | None = None,
    session_factory: Callable[[], Any] = create_session,
    client_factory: Callable[[Any], ObjectStoreClient] = S3ObjectStoreClient.from_session,
) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.log_level)

    try:
        request = UploadRequest(
            bucket_name=args.bucket,
            object_key=args.key,
            timeout=args.timeout,
            source_path=args.file,
        )
    except ValueError as exc:
        parser.error(str(exc))

    print(f"start upload file to {request.bucket_name}/{request.object_key}")
    session = session_factory()
    print("session created")
    store = client_factory(session)
    print("s3 client created")

    workflow = UploadWorkflow(store, pre_upload_delay=settings.upload_pre_delay_seconds)
    outcome = workflow.run(request)
    if outcome.cause is not None:
        logger.debug("upload failed", exc_info=outcome.cause)
    return outcome.exit_code


if __name__ == "__main__":
    sys.exit(main())
