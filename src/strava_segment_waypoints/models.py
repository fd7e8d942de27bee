"""Pydantic models for decoded Strava segments and GPX waypoints."""

from typing import Optional

from pydantic import BaseModel, ConfigDict


class RawSegment(BaseModel):
    """The subset of a Strava segment response that waypoints are built from.

    https://developers.strava.com/docs/reference/#api-models-LatLng
    """
    model_config = ConfigDict(extra="ignore")

    name: str
    id: Optional[int] = None
    start_latlng: tuple[float, float]
    end_latlng: tuple[float, float]


class Waypoint(BaseModel):
    # No source field: waypoints carrying <src> can fail to upload.
    # https://github.com/glynternet/strava-segment-waypoints/issues/2
    model_config = ConfigDict(extra="forbid", frozen=True)

    lat: float
    lon: float
    elevation: None = None
    name: str
    symbol: str
    type: str = "user"
