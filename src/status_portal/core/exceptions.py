"""Application-wide exception hierarchy for Status Portal.

All custom exceptions subclass ``StatusPortalError``, enabling
consistent error handling and structured logging across the application.

Hierarchy::

    StatusPortalError
    ├── ConfigurationMissingError
    └── UpstreamFailure
        ├── UpstreamError            (status_code: int)
        └── UpstreamTransportError

None of these escape the Discord proxy: ``StatusProxy`` converts each of
them into a descriptive JSON payload served with HTTP 200.
"""

from __future__ import annotations


class StatusPortalError(Exception):
    """Base class for all Status Portal exceptions."""


# ---------------------------------------------------------------------------
# Configuration exceptions
# ---------------------------------------------------------------------------


class ConfigurationMissingError(StatusPortalError):
    """Raised when a Discord setting required for an upstream call is absent.

    Args:
        missing: Environment variable names that are unset or empty.
    """

    def __init__(self, missing: tuple[str, ...]) -> None:
        super().__init__(f"Missing configuration: {', '.join(missing)}")
        self.missing = missing


# ---------------------------------------------------------------------------
# Upstream exceptions
# ---------------------------------------------------------------------------


class UpstreamFailure(StatusPortalError):
    """Base class for failures talking to the Discord API.

    Args:
        message: Human-readable description of the failure.
        path: API path relative to the Discord base URL.
    """

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class UpstreamError(UpstreamFailure):
    """Raised when the Discord API answers with a non-success HTTP status.

    Args:
        status_code: HTTP status returned by Discord.
        path: API path that was requested.
    """

    def __init__(self, status_code: int, path: str | None = None) -> None:
        super().__init__(f"Discord API Error: {status_code}", path=path)
        self.status_code = status_code


class UpstreamTransportError(UpstreamFailure):
    """Raised when no usable response was received from the Discord API.

    Covers connection errors, timeouts and response bodies that are not
    valid JSON or not of the shape the endpoint returns.
    """
