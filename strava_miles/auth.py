from urllib.parse import urlencode

import requests
from dotenv import set_key

from strava_miles import config
from strava_miles.exceptions import AuthError
from strava_miles.utils import get_logger

logger = get_logger(__name__)


# --- Refresh-token exchange ---
def refresh_access_token(credentials, session=None, timeout=None):
    """
    Exchanges the long-lived refresh token for a new access token.
    Raises AuthError on any transport failure or non-2xx response.
    """
    http = session or requests
    try:
        response = http.post(
            url=config.TOKEN_URL,
            data={
                'client_id': credentials.client_id,
                'client_secret': credentials.client_secret,
                'grant_type': 'refresh_token',
                'refresh_token': credentials.refresh_token
            },
            timeout=timeout or config.REQUEST_TIMEOUT
        )
    except requests.RequestException as e:
        raise AuthError(f"Unable to reach Strava token endpoint: {e}") from e

    if not 200 <= response.status_code < 300:
        raise AuthError(
            f"Error refreshing token (HTTP {response.status_code}). Please check your credentials.",
            status=response.status_code,
            body=response.text
        )

    try:
        access_token = response.json()['access_token']
    except (ValueError, KeyError) as e:
        raise AuthError("Token response did not contain an access_token.",
                        status=response.status_code, body=response.text) from e

    logger.info("✅ Token refreshed successfully")
    return access_token


class TokenRefresher:
    """
    Holds the credentials used for refreshing and tracks the latest access token.
    on_refresh, if given, is called with each new token (e.g. to persist it).
    """

    def __init__(self, credentials, session=None, on_refresh=None):
        self.credentials = credentials
        self.session = session
        self.on_refresh = on_refresh

    @property
    def access_token(self):
        return self.credentials.access_token

    def refresh(self):
        token = refresh_access_token(self.credentials, session=self.session)
        self.credentials = self.credentials.with_access_token(token)
        if self.on_refresh is not None:
            self.on_refresh(token)
        return token


def persist_access_token(env_path, access_token):
    """
    Writes the new access token into the env file so the next run can skip a refresh.
    Best effort: a failure is logged and never interrupts the fetch.
    """
    try:
        set_key(env_path, config.ENV_KEYS['access_token'], access_token, quote_mode='never')
    except OSError as e:
        logger.warning("❌ Failed to update %s with new access token: %s", env_path, e)
        return False
    logger.info("💾 Updated %s with new access token", env_path)
    return True


# --- One-time authorization-code flow (used by setup_tokens) ---
def build_authorize_url(client_id, redirect_uri='http://localhost/exchange_token',
                        scope='read,activity:read_all'):
    query = urlencode({
        'client_id': client_id,
        'response_type': 'code',
        'redirect_uri': redirect_uri,
        'approval_prompt': 'force',
        'scope': scope,
    })
    return f"{config.AUTHORIZE_URL}?{query}"


def exchange_code(client_id, client_secret, code, session=None, timeout=None):
    http = session or requests
    try:
        response = http.post(
            url=config.TOKEN_URL,
            data={
                'client_id': client_id,
                'client_secret': client_secret,
                'code': code,
                'grant_type': 'authorization_code'
            },
            timeout=timeout or config.REQUEST_TIMEOUT
        )
    except requests.RequestException as e:
        raise AuthError(f"Unable to reach Strava token endpoint: {e}") from e

    if response.status_code != 200:
        raise AuthError(f"Error exchanging code (HTTP {response.status_code})",
                        status=response.status_code, body=response.text)
    return response.json()
