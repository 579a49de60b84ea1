import os
from dataclasses import dataclass, replace

from dotenv import load_dotenv

from strava_miles.exceptions import ConfigError

# Load environment variables
ENV_FILE = os.getenv('STRAVA_ENV_FILE', '.local.env')
load_dotenv(dotenv_path=ENV_FILE)

# 1. Define Directories
DATA_DIR = 'data'
PROCESSED_DIR = os.path.join(DATA_DIR, 'processed')
IMAGES_DIR = os.path.join(DATA_DIR, 'images')

for d in [DATA_DIR, PROCESSED_DIR, IMAGES_DIR]:
    os.makedirs(d, exist_ok=True)

# 2. Define File Paths
STATS_FILE = os.getenv('STRAVA_STATS_FILE', os.path.join(PROCESSED_DIR, 'strava_stats.json'))

# 3. Strava endpoints
TOKEN_URL = 'https://www.strava.com/oauth/token'
AUTHORIZE_URL = 'https://www.strava.com/oauth/authorize'
API_BASE = 'https://www.strava.com/api/v3'

# 4. Tunables
CACHE_COOLDOWN = int(os.getenv('STRAVA_CACHE_COOLDOWN', '300'))
REQUEST_TIMEOUT = float(os.getenv('STRAVA_REQUEST_TIMEOUT', '10'))

# Env variable names; the access token line is rewritten after a refresh
ENV_KEYS = {
    'client_id': 'STRAVA_CLIENT_ID',
    'client_secret': 'STRAVA_CLIENT_SECRET',
    'refresh_token': 'STRAVA_REFRESH_TOKEN',
    'access_token': 'STRAVA_ACCESS_TOKEN',
}


@dataclass(frozen=True)
class Credentials:
    client_id: str
    client_secret: str
    refresh_token: str
    access_token: str = ''

    def with_access_token(self, access_token):
        return replace(self, access_token=access_token)


def missing_settings(environ=None):
    environ = os.environ if environ is None else environ
    required = ['client_id', 'client_secret', 'refresh_token']
    return [ENV_KEYS[name] for name in required if not environ.get(ENV_KEYS[name])]


def validate_config(environ=None):
    missing = missing_settings(environ)
    if missing:
        raise ConfigError(f"❌ ERROR: Credentials not found in {ENV_FILE}: {', '.join(missing)}")


def load_credentials(environ=None):
    """
    Builds an explicit Credentials value from the environment.
    Downstream code receives this value instead of reading os.environ.
    """
    environ = os.environ if environ is None else environ
    validate_config(environ)
    return Credentials(
        client_id=str(environ[ENV_KEYS['client_id']]),
        client_secret=str(environ[ENV_KEYS['client_secret']]),
        refresh_token=str(environ[ENV_KEYS['refresh_token']]),
        access_token=str(environ.get(ENV_KEYS['access_token'], '')),
    )
