"""Command line entry point: strava-segment-waypoints."""

import argparse
import functools
import logging
import re
import sys
from typing import BinaryIO, Optional, Sequence, TextIO

import anyio
import httpx
from pydantic import ValidationError

from . import __version__
from .config import STRAVA_API_URL, Settings
from .errors import EXIT_FAILURE, EXIT_USAGE, SegmentWaypointsError, UsageError
from .pipeline import run

logger = logging.getLogger(__name__)

USAGE = "Usage: strava-segment-waypoints --token <token> <segment_id> [<segment_id>...]"

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1
SEGMENT_ID_RE = re.compile(r"[+-]?[0-9]+")


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str):
        raise UsageError(message)


def _segment_id(value: str) -> int:
    # int() alone would also take "1_000", " 7 " and non-ASCII digits.
    if not SEGMENT_ID_RE.fullmatch(value):
        raise argparse.ArgumentTypeError(f"invalid segment ID: {value!r}")
    segment_id = int(value, 10)
    if not INT64_MIN <= segment_id <= INT64_MAX:
        raise argparse.ArgumentTypeError(f"segment ID out of range: {value}")
    return segment_id


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="strava-segment-waypoints",
        usage="%(prog)s --token <token> <segment_id> [<segment_id>...]",
        description="Write start/end GPX waypoints for Strava segments to stdout.",
    )
    parser.add_argument("--token", default="", help="Strava API token")
    parser.add_argument("--name", default="", help="GPX document name (default: empty)")
    parser.add_argument(
        "--concurrency", type=int, default=1,
        help="Maximum number of segments fetched in parallel (default: 1)",
    )
    parser.add_argument("--timeout", type=float, default=5.0, help="Per-request timeout in seconds")
    parser.add_argument("--api-url", default=STRAVA_API_URL, help=argparse.SUPPRESS)
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("segment_ids", nargs="*", type=_segment_id, metavar="segment_id")
    return parser


def parse_args(argv: Optional[Sequence[str]]) -> tuple[str, list[int], Settings, bool]:
    """Validate arguments before any network activity. Raises UsageError."""
    args = build_parser().parse_args(argv)
    if not args.token:
        raise UsageError("must provide token using --token flag")
    if not args.segment_ids:
        raise UsageError("must provide at least one segment ID")
    try:
        settings = Settings(
            api_base_url=args.api_url,
            timeout=args.timeout,
            name=args.name,
            max_concurrency=args.concurrency,
        )
    except ValidationError as exc:
        raise UsageError(
            "; ".join(f"{'.'.join(map(str, e['loc']))}: {e['msg']}" for e in exc.errors())
        ) from exc
    return args.token, args.segment_ids, settings, args.verbose


def main(
    argv: Optional[Sequence[str]] = None,
    stdout: Optional[BinaryIO] = None,
    stderr: Optional[TextIO] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> int:
    stdout = stdout if stdout is not None else sys.stdout.buffer
    stderr = stderr if stderr is not None else sys.stderr

    try:
        token, segment_ids, settings, verbose = parse_args(argv)
    except UsageError as exc:
        print(f"Error: {exc}", file=stderr)
        print(USAGE, file=stderr)
        return EXIT_USAGE

    logging.basicConfig(
        stream=stderr,
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        anyio.run(functools.partial(
            run, segment_ids, token, stdout, settings=settings, transport=transport,
        ))
    except SegmentWaypointsError as exc:
        logger.debug("Run failed", exc_info=True)
        print(f"Error: {exc}", file=stderr)
        return EXIT_FAILURE
    return 0


if __name__ == "__main__":
    sys.exit(main())
