"""Turn Strava segments into GPX start/end waypoints."""

__version__ = "0.1.0"
