"""Platform API client exceptions."""

from typing import Any


class PlatformAPIError(Exception):
    """Base exception for platform API errors.

    Carries the HTTP status code (None for transport failures) and the
    decoded error body so callers can report the upstream failure without
    inspecting the response.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.body = body or {}


class PlatformAuthenticationError(PlatformAPIError):
    """Raised when no token is configured or the token is rejected (401)."""

    pass


class PlatformNotFoundError(PlatformAPIError):
    """Raised when an org, target or project does not exist (404)."""

    pass


class PlatformRateLimitError(PlatformAPIError):
    """Raised when requests are still throttled (429) after all retries."""

    def __init__(
        self,
        message: str,
        status_code: int | None = 429,
        body: dict[str, Any] | None = None,
        retry_after: float | None = None,
    ) -> None:
        super().__init__(message, status_code, body)
        self.retry_after = retry_after
