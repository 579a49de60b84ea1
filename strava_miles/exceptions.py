"""Error types raised by the Strava fetch flow."""


class StravaError(Exception):
    """Base class for every failure surfaced to the dashboard."""

    pass


class ConfigError(StravaError):
    """Required settings are missing from the environment."""

    pass


class AuthError(StravaError):
    """The refresh-token exchange failed. Terminal for the current fetch."""

    def __init__(self, message: str, status: int | None = None, body: str | None = None):
        super().__init__(message)
        self.status = status
        self.body = body


class ApiError(StravaError):
    """Non-auth HTTP failure, kept with status and body for diagnosis."""

    def __init__(self, status: int, body: str, message: str | None = None):
        super().__init__(message or f"HTTP {status}: {body}")
        self.status = status
        self.body = body


class RateLimitError(ApiError):
    """HTTP 429. Never retried."""

    def __init__(self, body: str, retry_after: float | None = None):
        super().__init__(429, body, "Rate limit exceeded. Please wait before refreshing.")
        self.retry_after = retry_after


class NetworkError(StravaError):
    """Transport-level failure (DNS, connection reset, timeout)."""

    pass


class ArtifactNotFoundError(StravaError):
    """The generated stats file is missing or unreadable."""

    pass
