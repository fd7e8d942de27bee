import json

import httpx
import pytest


def segment_payload(segment_id, name, start, end, **extra):
    """Minimal Strava segment response body."""
    body = {
        "id": segment_id,
        "resource_state": 3,
        "name": name,
        "activity_type": "Ride",
        "distance": 1234.5,
        "start_latlng": list(start),
        "end_latlng": list(end),
    }
    body.update(extra)
    return body


class FakeStrava:
    """Records requests and serves canned segment responses by ID."""

    def __init__(self, segments=None):
        self.segments = dict(segments or {})
        self.responses = {}
        self.requests = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        segment_id = int(request.url.path.rsplit("/", 1)[-1])
        if segment_id in self.responses:
            return self.responses[segment_id]
        if segment_id not in self.segments:
            return httpx.Response(404, json={"message": "Record Not Found"})
        return httpx.Response(200, content=json.dumps(self.segments[segment_id]))

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def requested_ids(self) -> list[int]:
        return [int(r.url.path.rsplit("/", 1)[-1]) for r in self.requests]


@pytest.fixture
def fake_strava():
    return FakeStrava({
        101: segment_payload(101, "Hawk Hill", (37.8331, -122.4836), (37.8255, -122.4991)),
        202: segment_payload(202, "Old La Honda", (37.3851, -122.2379), (37.3608, -122.2630)),
        303: segment_payload(303, "Col du Galibier", (45.0644, 6.4078), (45.0642, 6.4075)),
    })
