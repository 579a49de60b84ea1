import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Protocol

from strava_miles import config
from strava_miles.process_data import AthleteStats
from strava_miles.utils import get_logger

logger = get_logger(__name__)

# Same key the browser build kept in localStorage
DATA_KEY = 'strava-cached-data'


def utcnow():
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class CacheEntry:
    miles: float
    computed_at: datetime
    stats: AthleteStats | None = None

    def age_seconds(self, now):
        return (now - self.computed_at).total_seconds()


# --- Key-value stores ---
class KeyValueStore(Protocol):
    def get(self, key: str) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...


class MemoryStore:
    def __init__(self):
        self._data = {}

    def get(self, key):
        return self._data.get(key)

    def set(self, key, value):
        self._data[key] = value


class SessionStateStore:
    """Adapts a mapping such as streamlit's st.session_state to KeyValueStore."""

    def __init__(self, state):
        self.state = state

    def get(self, key):
        return self.state.get(key)

    def set(self, key, value):
        self.state[key] = value


# --- Cache ---
class DistanceCache:
    """
    Holds the latest YTD mileage and decides when to refetch.

    fetch is a zero-argument callable returning AthleteStats. Entries younger
    than cooldown seconds are served without a network call unless the caller
    forces a refresh. Failed fetches leave the previous entry in place and
    propagate the error.
    """

    def __init__(self, fetch: Callable[[], AthleteStats], store=None,
                 cooldown=None, clock=utcnow, key=DATA_KEY):
        self.fetch = fetch
        self.store = store if store is not None else MemoryStore()
        self.cooldown = config.CACHE_COOLDOWN if cooldown is None else cooldown
        self.clock = clock
        self.key = key
        self._lock = threading.Lock()

    def peek(self):
        return self.store.get(self.key)

    def is_fresh(self, entry, now=None):
        if entry is None:
            return False
        now = now or self.clock()
        return entry.age_seconds(now) < self.cooldown

    def get_stats(self, force_refresh=False):
        requested_at = self.clock()
        if not force_refresh:
            entry = self.peek()
            if self.is_fresh(entry, requested_at):
                logger.info("Using cached stats from %s", entry.computed_at.isoformat())
                return entry

        # One fetch at a time; callers that queued behind it reuse its result
        with self._lock:
            entry = self.peek()
            if entry is not None:
                if force_refresh and entry.computed_at > requested_at:
                    return entry
                if not force_refresh and self.is_fresh(entry):
                    return entry

            stats = self.fetch()
            entry = CacheEntry(miles=stats.miles, computed_at=self.clock(), stats=stats)
            self._save(entry)
            logger.info("Fetched %.1f YTD miles", entry.miles)
            return entry

    def _save(self, entry):
        # Whole-entry replacement, never a partial update
        self.store.set(self.key, entry)
