"""Tests for strava_miles.config."""

import pytest

from strava_miles import config
from strava_miles.exceptions import ConfigError

ENVIRON = {
    "STRAVA_CLIENT_ID": "12345",
    "STRAVA_CLIENT_SECRET": "secret123",
    "STRAVA_REFRESH_TOKEN": "refresh123",
}


def test_load_credentials_from_mapping():
    credentials = config.load_credentials({**ENVIRON, "STRAVA_ACCESS_TOKEN": "access"})

    assert credentials.client_id == "12345"
    assert credentials.client_secret == "secret123"
    assert credentials.refresh_token == "refresh123"
    assert credentials.access_token == "access"


def test_access_token_is_optional():
    assert config.load_credentials(ENVIRON).access_token == ""


def test_missing_settings_raise_config_error():
    with pytest.raises(ConfigError) as exc_info:
        config.load_credentials({"STRAVA_CLIENT_ID": "12345"})

    assert "STRAVA_CLIENT_SECRET" in str(exc_info.value)
    assert "STRAVA_REFRESH_TOKEN" in str(exc_info.value)


def test_with_access_token_returns_new_value():
    credentials = config.load_credentials(ENVIRON)
    updated = credentials.with_access_token("new")

    assert updated.access_token == "new"
    assert credentials.access_token == ""
    assert updated.refresh_token == credentials.refresh_token


def test_defaults():
    assert config.CACHE_COOLDOWN == 300
    assert config.REQUEST_TIMEOUT > 0
    assert config.STATS_FILE.endswith("strava_stats.json")
