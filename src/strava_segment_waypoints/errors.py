"""Error types raised by the segment waypoint pipeline."""

from typing import Optional

EXIT_FAILURE = 1
EXIT_USAGE = 22


class SegmentWaypointsError(Exception):
    """Base exception for all pipeline failures."""

    def __init__(self, message: str, *, segment_id: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.segment_id = segment_id

    def with_segment_context(self, segment_id: int) -> "SegmentWaypointsError":
        """Return an error of the same class, prefixed with the failing segment."""
        err = self.__class__.__new__(self.__class__)
        err.__dict__.update(self.__dict__)
        err.message = f"getting segment waypoints for segment {segment_id}: {self.message}"
        err.args = (err.message,)
        err.segment_id = segment_id
        return err


class UsageError(SegmentWaypointsError):
    pass


class NetworkError(SegmentWaypointsError):
    pass


class SegmentTimeoutError(NetworkError):
    pass


class RemoteStatusError(SegmentWaypointsError):
    def __init__(self, message: str, *, status_code: int, segment_id: Optional[int] = None):
        super().__init__(message, segment_id=segment_id)
        self.status_code = status_code


class DecodeError(SegmentWaypointsError):
    pass


class SerializationError(SegmentWaypointsError):
    pass


class OutputError(SegmentWaypointsError):
    pass
