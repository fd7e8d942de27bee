"""Start/end waypoint construction for a decoded segment."""

from ..models import RawSegment, Waypoint

START_SYMBOL = "Flag, Green"
END_SYMBOL = "Flag, Red"
WAYPOINT_TYPE = "user"


def build_waypoints(segment: RawSegment) -> list[Waypoint]:
    """Return the start and end waypoints for a segment, in that order."""
    start_lat, start_lon = segment.start_latlng
    end_lat, end_lon = segment.end_latlng
    return [
        Waypoint(
            lat=start_lat,
            lon=start_lon,
            name=f"{segment.name} (start)",
            symbol=START_SYMBOL,
            type=WAYPOINT_TYPE,
        ),
        Waypoint(
            lat=end_lat,
            lon=end_lon,
            name=f"{segment.name} (end)",
            symbol=END_SYMBOL,
            type=WAYPOINT_TYPE,
        ),
    ]
