"""
View state for the dashboard.

This is the only layer that turns a failed fetch into a message; everything
below it raises.
"""
from dataclasses import dataclass
from datetime import datetime

from strava_miles.exceptions import ArtifactNotFoundError, AuthError, RateLimitError, StravaError
from strava_miles.process_data import format_miles
from strava_miles.publish_data import read_artifact
from strava_miles.utils import get_logger

logger = get_logger(__name__)

ERROR = 'error'
SUCCESS = 'success'

NOT_GENERATED_MESSAGE = "Stats not generated yet. Check back after the next scheduled update."
RATE_LIMIT_HINT = "⏰ Rate limited. Data is cached for {minutes} minutes to prevent API abuse."


@dataclass(frozen=True)
class DashboardView:
    status: str
    miles: float = 0.0
    last_updated: datetime | None = None
    athlete_name: str = ''
    error: str | None = None
    rate_limited: bool = False
    can_retry: bool = False

    @property
    def miles_label(self):
        return f"{format_miles(self.miles)} miles"


def error_message(error):
    if isinstance(error, RateLimitError):
        return str(error)
    if isinstance(error, AuthError):
        return "Unable to refresh access token. Please check your credentials."
    return str(error) or "Failed to fetch Strava data"


def load_live_view(cache, force_refresh=False):
    try:
        entry = cache.get_stats(force_refresh=force_refresh)
    except StravaError as e:
        logger.error("Error fetching Strava data: %s", e)
        previous = cache.peek()
        rate_limited = isinstance(e, RateLimitError)
        return DashboardView(
            status=ERROR,
            last_updated=previous.computed_at if previous else None,
            error=error_message(e),
            rate_limited=rate_limited,
            can_retry=not rate_limited,
        )

    name = entry.stats.athlete_name if entry.stats else ''
    return DashboardView(status=SUCCESS, miles=entry.miles, last_updated=entry.computed_at, athlete_name=name)


def load_static_view(path):
    try:
        artifact = read_artifact(path)
        last_updated = datetime.fromisoformat(artifact['lastUpdated'].replace('Z', '+00:00'))
        miles = float(artifact['totalMiles'])
    except ArtifactNotFoundError as e:
        logger.warning("%s", e)
        return DashboardView(status=ERROR, error=NOT_GENERATED_MESSAGE)
    except (AttributeError, TypeError, ValueError) as e:
        logger.warning("Unreadable stats file %s: %s", path, e)
        return DashboardView(status=ERROR, error=NOT_GENERATED_MESSAGE)

    return DashboardView(
        status=SUCCESS,
        miles=miles,
        last_updated=last_updated,
        athlete_name=artifact.get('athleteName') or '',
    )


def rate_limit_hint(cooldown_seconds):
    return RATE_LIMIT_HINT.format(minutes=max(1, round(cooldown_seconds / 60)))
