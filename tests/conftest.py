"""Pytest configuration and shared fixtures."""

import json
from datetime import datetime, timedelta, timezone

import pytest

from strava_miles.config import Credentials


class FakeResponse:
    def __init__(self, status_code=200, payload=None, headers=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self.headers = headers or {}
        if text is None:
            text = json.dumps(payload) if payload is not None else ""
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON body")
        return self._payload


class FakeSession:
    """
    Stand-in for requests.Session. Responses are queued per method and
    every call is recorded as (method, url, kwargs).
    """

    def __init__(self, get=None, post=None):
        self.get_responses = list(get or [])
        self.post_responses = list(post or [])
        self.calls = []

    def _next(self, queue):
        item = queue.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def get(self, url, **kwargs):
        self.calls.append(("GET", url, kwargs))
        return self._next(self.get_responses)

    def post(self, url, **kwargs):
        self.calls.append(("POST", url, kwargs))
        return self._next(self.post_responses)

    def count(self, method):
        return sum(1 for call in self.calls if call[0] == method)


class FakeClock:
    def __init__(self, start=None):
        self.now = start or datetime(2025, 6, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now = self.now + timedelta(seconds=seconds)


@pytest.fixture
def credentials():
    return Credentials(
        client_id="12345",
        client_secret="secret123",
        refresh_token="refresh123",
        access_token="access-old",
    )


@pytest.fixture
def athlete_payload():
    return {
        "id": 42,
        "firstname": "Eric",
        "lastname": "Chan",
        "username": "ericchan",
        "city": "Portland",
        "state": "Oregon",
        "bio": "Chasing 1,000 miles",
    }


@pytest.fixture
def stats_payload():
    return {
        "ytd_run_totals": {
            "distance": 160934,
            "count": 20,
            "moving_time": 36000,
            "elevation_gain": 500,
        }
    }


@pytest.fixture
def token_payload():
    return {"access_token": "access-new", "refresh_token": "refresh123", "expires_at": 1750000000}


@pytest.fixture
def clock():
    return FakeClock()
