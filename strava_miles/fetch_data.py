from typing import Any, NamedTuple

import requests

from strava_miles import config
from strava_miles.exceptions import ApiError, NetworkError, RateLimitError
from strava_miles.process_data import AthleteStats, summarize_ytd_totals
from strava_miles.utils import get_logger

logger = get_logger(__name__)


class ApiResponse(NamedTuple):
    data: Any
    access_token: str
    refreshed: bool


class FetchResult(NamedTuple):
    stats: AthleteStats
    # Latest token; differs from the input when a refresh happened
    access_token: str


def _retry_after(response):
    value = response.headers.get('Retry-After')
    try:
        return float(value) if value is not None else None
    except ValueError:
        return None


def authenticated_get(url, access_token, refresher=None, session=None, has_retried=False):
    """
    GET url with a bearer token and return an ApiResponse.

    A 401 triggers a single refresh and one retried call. has_retried marks
    that the refresh for this logical request is already spent, so a further
    401 fails instead of refreshing again. 429 never refreshes or retries.
    """
    http = session or requests
    try:
        response = http.get(
            url,
            headers={'Authorization': f"Bearer {access_token}"},
            timeout=config.REQUEST_TIMEOUT
        )
    except requests.RequestException as e:
        raise NetworkError(f"Request to {url} failed: {e}") from e

    if response.status_code == 429:
        raise RateLimitError(response.text, retry_after=_retry_after(response))

    if response.status_code == 401 and not has_retried and refresher is not None:
        logger.info("🔄 Access token expired, refreshing...")
        new_token = refresher.refresh()
        retried = authenticated_get(url, new_token, refresher=refresher, session=session, has_retried=True)
        return retried._replace(refreshed=True)

    if response.status_code != 200:
        raise ApiError(response.status_code, response.text)

    try:
        data = response.json()
    except ValueError as e:
        raise ApiError(response.status_code, response.text, f"Unreadable response from {url}") from e
    if not isinstance(data, dict):
        raise ApiError(response.status_code, response.text, f"Unexpected response from {url}")

    return ApiResponse(data, access_token, False)


def fetch_athlete(access_token, refresher=None, session=None):
    return authenticated_get(f"{config.API_BASE}/athlete", access_token, refresher, session)


def fetch_athlete_stats(athlete_id, access_token, refresher=None, session=None, has_retried=False):
    url = f"{config.API_BASE}/athletes/{athlete_id}/stats"
    return authenticated_get(url, access_token, refresher, session, has_retried)


def fetch_ytd_stats(access_token, refresher=None, session=None):
    """
    Fetches the authenticated athlete, then that athlete's stats, and returns
    the year-to-date running totals as a FetchResult.
    At most one token refresh happens across both calls.
    """
    athlete = fetch_athlete(access_token, refresher, session)
    if 'id' not in athlete.data:
        raise ApiError(200, str(athlete.data), "Athlete response did not contain an id")
    stats = fetch_athlete_stats(
        athlete.data['id'], athlete.access_token, refresher, session,
        has_retried=athlete.refreshed
    )
    return FetchResult(summarize_ytd_totals(athlete.data, stats.data), stats.access_token)


def make_stats_fetcher(refresher, session=None):
    """Zero-argument fetch callable for DistanceCache, bound to a TokenRefresher."""
    def fetch():
        result = fetch_ytd_stats(refresher.access_token, refresher=refresher, session=session)
        return result.stats
    return fetch
