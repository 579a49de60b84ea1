from unittest.mock import MagicMock
from urllib.parse import parse_qs, urlparse

import pytest
import requests
from conftest import FakeResponse, FakeSession
from dotenv import dotenv_values

from strava_miles.auth import (
    TokenRefresher,
    build_authorize_url,
    exchange_code,
    persist_access_token,
    refresh_access_token,
)
from strava_miles.config import TOKEN_URL
from strava_miles.exceptions import AuthError


def test_refresh_posts_form_encoded_grant(credentials, token_payload):
    session = FakeSession(post=[FakeResponse(200, token_payload)])

    token = refresh_access_token(credentials, session=session)

    assert token == "access-new"
    method, url, kwargs = session.calls[0]
    assert (method, url) == ("POST", TOKEN_URL)
    assert kwargs["data"] == {
        "client_id": "12345",
        "client_secret": "secret123",
        "grant_type": "refresh_token",
        "refresh_token": "refresh123",
    }
    assert kwargs["timeout"] > 0


def test_refresh_non_2xx_raises_auth_error(credentials):
    session = FakeSession(post=[FakeResponse(400, {"message": "Bad Request"})])

    with pytest.raises(AuthError) as exc_info:
        refresh_access_token(credentials, session=session)

    assert exc_info.value.status == 400
    assert "Bad Request" in exc_info.value.body
    assert session.count("POST") == 1


def test_refresh_network_failure_raises_auth_error(credentials):
    session = FakeSession(post=[requests.ConnectionError("dns failure")])

    with pytest.raises(AuthError):
        refresh_access_token(credentials, session=session)


def test_refresh_missing_access_token_raises_auth_error(credentials):
    session = FakeSession(post=[FakeResponse(200, {"token_type": "Bearer"})])

    with pytest.raises(AuthError):
        refresh_access_token(credentials, session=session)


def test_token_refresher_replaces_access_token(credentials, token_payload):
    session = FakeSession(post=[FakeResponse(200, token_payload)])
    on_refresh = MagicMock()
    refresher = TokenRefresher(credentials, session=session, on_refresh=on_refresh)

    assert refresher.access_token == "access-old"
    assert refresher.refresh() == "access-new"
    assert refresher.access_token == "access-new"
    assert refresher.credentials.refresh_token == "refresh123"
    # The original value is untouched
    assert credentials.access_token == "access-old"
    on_refresh.assert_called_once_with("access-new")


def test_persist_access_token_rewrites_env_line(tmp_path):
    env_file = tmp_path / ".local.env"
    env_file.write_text("STRAVA_CLIENT_ID=12345\nSTRAVA_ACCESS_TOKEN=old\n")

    assert persist_access_token(str(env_file), "brand-new") is True

    values = dotenv_values(env_file)
    assert values["STRAVA_ACCESS_TOKEN"] == "brand-new"
    assert values["STRAVA_CLIENT_ID"] == "12345"


def test_persist_access_token_appends_when_missing(tmp_path):
    env_file = tmp_path / ".local.env"
    env_file.write_text("STRAVA_CLIENT_ID=12345\n")

    persist_access_token(str(env_file), "brand-new")

    assert dotenv_values(env_file)["STRAVA_ACCESS_TOKEN"] == "brand-new"


def test_persist_access_token_failure_is_not_raised(tmp_path):
    # A directory cannot be rewritten as an env file
    assert persist_access_token(str(tmp_path), "brand-new") is False


def test_build_authorize_url():
    url = build_authorize_url("12345")
    query = parse_qs(urlparse(url).query)

    assert url.startswith("https://www.strava.com/oauth/authorize?")
    assert query["client_id"] == ["12345"]
    assert query["response_type"] == ["code"]
    assert query["scope"] == ["read,activity:read_all"]


def test_exchange_code(token_payload):
    session = FakeSession(post=[FakeResponse(200, token_payload)])

    tokens = exchange_code("12345", "secret123", "abc", session=session)

    assert tokens["access_token"] == "access-new"
    assert session.calls[0][2]["data"]["grant_type"] == "authorization_code"
    assert session.calls[0][2]["data"]["code"] == "abc"


def test_exchange_code_failure():
    session = FakeSession(post=[FakeResponse(401, {"message": "Authorization Error"})])

    with pytest.raises(AuthError):
        exchange_code("12345", "secret123", "bad", session=session)
