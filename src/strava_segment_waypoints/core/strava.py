"""Segment lookups against the Strava API."""

import logging
from typing import Optional

import anyio
import httpx
from pydantic import ValidationError

from ..config import Settings
from ..errors import (
    DecodeError,
    NetworkError,
    RemoteStatusError,
    SegmentTimeoutError,
)
from ..models import RawSegment

logger = logging.getLogger(__name__)


class StravaClient:
    """Async Strava API client shared by every fetch in a run.

    Use as an async context manager:

        async with StravaClient(settings) as client:
            segment = await client.fetch_segment(12345, token)

    Pass ``transport`` to substitute the network layer, e.g. an
    ``httpx.MockTransport`` in tests.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings or Settings()
        self._transport = transport
        self._http: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "StravaClient":
        self._http = httpx.AsyncClient(
            timeout=self.settings.timeout,
            headers={"User-Agent": self.settings.user_agent},
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *args) -> None:
        if self._http is not None:
            await self._http.aclose()
            self._http = None

    async def fetch_segment(self, segment_id: int, token: str) -> RawSegment:
        """Fetch one segment and decode its name and start/end coordinates.

        Raises:
            SegmentTimeoutError: the request did not complete within the timeout.
            NetworkError: the request could not be built or sent.
            RemoteStatusError: the API answered with anything but 200.
            DecodeError: the body was not a segment JSON object.
        """
        if self._http is None:
            raise RuntimeError("StravaClient must be used as an async context manager")

        url = self.settings.segment_url(segment_id)
        headers = {"Authorization": f"Bearer {token}"}
        logger.debug("Requesting segment %s from %s", segment_id, url)

        try:
            with anyio.fail_after(self.settings.timeout):
                response = await self._http.get(url, headers=headers)
        except (TimeoutError, httpx.TimeoutException) as exc:
            logger.warning("Request for segment %s timed out: %s", segment_id, exc)
            raise SegmentTimeoutError(
                f"request for segment {segment_id} timed out after {self.settings.timeout:g}s",
                segment_id=segment_id,
            ) from exc
        except httpx.InvalidURL as exc:
            raise NetworkError(
                f"generating request for segment {segment_id}: {exc}",
                segment_id=segment_id,
            ) from exc
        except httpx.RequestError as exc:
            logger.warning("Request for segment %s failed: %s", segment_id, exc)
            raise NetworkError(
                f"making request for segment {segment_id}: {exc}",
                segment_id=segment_id,
            ) from exc

        if response.status_code != 200:
            status = f"{response.status_code} {response.reason_phrase}".strip()
            logger.warning("Segment %s returned HTTP %s", segment_id, response.status_code)
            raise RemoteStatusError(
                f"request for segment {segment_id} returned non-200 status code: {status}",
                status_code=response.status_code,
                segment_id=segment_id,
            )

        try:
            return RawSegment.model_validate_json(response.content)
        except ValidationError as exc:
            raise DecodeError(
                f"decoding segment response for segment {segment_id}: "
                f"{exc.error_count()} validation error(s): {_summarize(exc)}",
                segment_id=segment_id,
            ) from exc


def _summarize(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "body"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)
