"""Runtime settings for the segment fetch pipeline."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from . import __version__

STRAVA_API_URL = "https://www.strava.com/api/v3"
CREATOR = "https://www.github.com/glynternet/strava-segment-waypoints"


class Settings(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    api_base_url: str = STRAVA_API_URL
    timeout: float = Field(default=5.0, gt=0)
    creator: str = CREATOR
    name: str = ""
    max_concurrency: int = Field(default=1, ge=1)
    user_agent: str = f"strava-segment-waypoints/{__version__}"

    @field_validator("api_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Invalid API URL '{v}'. Must start with http:// or https://.")
        return v.rstrip("/")

    def segment_url(self, segment_id: int) -> str:
        return f"{self.api_base_url}/segments/{segment_id}"
