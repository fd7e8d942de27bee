"""Fetch segments, build their waypoints, and write one GPX document.

Segments are processed in the order given. The first failing segment aborts
the run before anything is written, so a document either holds every
requested segment or is not produced at all.
"""

import logging
from typing import BinaryIO, Optional, Sequence

import anyio
import httpx

from .config import Settings
from .core.gpx import render_document
from .core.strava import StravaClient
from .core.waypoints import build_waypoints
from .errors import OutputError, SegmentWaypointsError
from .models import RawSegment, Waypoint

logger = logging.getLogger(__name__)


async def collect_waypoints(
    client: StravaClient, segment_ids: Sequence[int], token: str,
) -> list[Waypoint]:
    """Return [seg1 start, seg1 end, seg2 start, ...] for the given segments."""
    if client.settings.max_concurrency > 1 and len(segment_ids) > 1:
        segments = await _fetch_concurrently(client, segment_ids, token)
    else:
        segments = []
        for segment_id in segment_ids:
            try:
                segments.append(await client.fetch_segment(segment_id, token))
            except SegmentWaypointsError as exc:
                raise exc.with_segment_context(segment_id) from exc

    waypoints: list[Waypoint] = []
    for segment in segments:
        waypoints.extend(build_waypoints(segment))
    return waypoints


async def _fetch_concurrently(
    client: StravaClient, segment_ids: Sequence[int], token: str,
) -> list[RawSegment]:
    # Results are stored by input index, never by arrival order.
    results: list[Optional[RawSegment]] = [None] * len(segment_ids)
    failures: list[Optional[Exception]] = [None] * len(segment_ids)
    done = [False] * len(segment_ids)
    limiter = anyio.CapacityLimiter(client.settings.max_concurrency)

    def earliest_failure() -> Optional[int]:
        # Decided once every earlier segment has finished successfully.
        for index, failure in enumerate(failures):
            if failure is not None:
                return index
            if not done[index]:
                return None
        return None

    async with anyio.create_task_group() as tg:

        async def fetch_into(index: int, segment_id: int) -> None:
            async with limiter:
                try:
                    results[index] = await client.fetch_segment(segment_id, token)
                except Exception as exc:
                    failures[index] = exc
                done[index] = True
                if earliest_failure() is not None:
                    tg.cancel_scope.cancel()

        for index, segment_id in enumerate(segment_ids):
            tg.start_soon(fetch_into, index, segment_id)

    index = earliest_failure()
    if index is not None:
        exc = failures[index]
        logger.debug("Cancelled remaining fetches after segment %s failed", segment_ids[index])
        if isinstance(exc, SegmentWaypointsError):
            raise exc.with_segment_context(segment_ids[index]) from exc
        raise exc
    return [segment for segment in results if segment is not None]


async def write_segments(
    sink: BinaryIO, client: StravaClient, segment_ids: Sequence[int], token: str,
) -> None:
    """Write a GPX document with start/end waypoints for every segment to sink."""
    waypoints = await collect_waypoints(client, segment_ids, token)
    xml = render_document(waypoints, client.settings)
    try:
        sink.write(xml)
        sink.flush()
    except OSError as exc:
        raise OutputError(f"writing GPX XML output: {exc}") from exc
    logger.info(
        "Wrote %d waypoints for %d segment(s)", len(waypoints), len(segment_ids),
    )


async def run(
    segment_ids: Sequence[int],
    token: str,
    sink: BinaryIO,
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> None:
    """Open a client for one run and write the GPX document to sink."""
    async with StravaClient(settings, transport=transport) as client:
        await write_segments(sink, client, segment_ids, token)
