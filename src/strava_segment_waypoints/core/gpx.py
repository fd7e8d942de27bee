"""GPX document assembly and parsing."""

import logging
from decimal import Decimal
from typing import Union

import gpxpy
import gpxpy.gpx

from ..config import Settings
from ..errors import SerializationError
from ..models import Waypoint

logger = logging.getLogger(__name__)

GPX_VERSION = "1.1"


def build_document(waypoints: list[Waypoint], settings: Settings) -> gpxpy.gpx.GPX:
    """Build a GPX document holding the waypoints in the given order."""
    gpx = gpxpy.gpx.GPX()
    gpx.creator = settings.creator
    gpx.name = settings.name
    for wp in waypoints:
        # Source is left unset so no <src> tag is written.
        gpx.waypoints.append(gpxpy.gpx.GPXWaypoint(
            latitude=wp.lat,
            longitude=wp.lon,
            elevation=None,
            name=wp.name,
            symbol=wp.symbol,
            type=wp.type,
        ))
    return gpx


def _positional(value: float) -> str:
    """Shortest exact decimal for value, never in scientific notation."""
    return format(Decimal(repr(value)), "f")


def render_document(waypoints: list[Waypoint], settings: Settings) -> bytes:
    """Serialize the waypoints to GPX 1.1 XML bytes."""
    gpx = build_document(waypoints, settings)
    # gpxpy rounds floats it would print in scientific notation to 10 places.
    for wpt in gpx.waypoints:
        wpt.latitude = _positional(wpt.latitude)
        wpt.longitude = _positional(wpt.longitude)
    try:
        xml = gpx.to_xml(version=GPX_VERSION)
    except (gpxpy.gpx.GPXException, ValueError, TypeError) as exc:
        raise SerializationError(f"creating GPX XML output: {exc}") from exc
    logger.debug("Rendered GPX document with %d waypoints", len(gpx.waypoints))
    return xml.encode("utf-8")


def read_waypoints(xml: Union[str, bytes]) -> list[Waypoint]:
    """Parse a GPX document and extract its waypoints."""
    if isinstance(xml, bytes):
        xml = xml.decode("utf-8")
    gpx = gpxpy.parse(xml)

    waypoints = []
    for wp in gpx.waypoints:
        waypoints.append(Waypoint(
            lat=wp.latitude,
            lon=wp.longitude,
            name=wp.name or "",
            symbol=wp.symbol or "",
            type=wp.type or "",
        ))
    return waypoints
