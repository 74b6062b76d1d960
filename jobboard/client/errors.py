"""
Exception hierarchy raised by the request client, and the user-facing
descriptions a UI layer shows for each of them.

Every exception exposes ``message``, ``status`` and ``data`` so callers can
handle them uniformly.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


class ApiClientError(Exception):
    """Base class for every failure surfaced by :class:`ApiClient`."""

    def __init__(self, message: str, status: int | None = None, data: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.data = data

    def __repr__(self) -> str:
        return f"{type(self).__name__}(message={self.message!r}, status={self.status!r})"


class ApiError(ApiClientError):
    """The server answered with a non-2xx status."""

    def __init__(self, message: str, status: int, data: Any = None) -> None:
        super().__init__(message, status=status, data=data)


class RequestTimeoutError(ApiClientError):
    """A single attempt exceeded its deadline and was cancelled."""

    def __init__(self, message: str = "Request timeout", timeout: float | None = None) -> None:
        super().__init__(message)
        self.timeout = timeout


class NetworkError(ApiClientError):
    """The transport failed before any HTTP response arrived."""


class RefreshError(ApiClientError):
    """The access token could not be refreshed; the session is over."""


# ── User-facing descriptions ────────────────────────────────────────
@dataclass(frozen=True)
class ErrorDescription:
    title: str
    description: str


DEFAULT_ERROR = ErrorDescription(
    title="Something went wrong.",
    description="If the problem persists, please contact support.",
)

ERROR_DESCRIPTIONS: dict[str | int, ErrorDescription] = {
    "network": ErrorDescription(
        title="The service is not reachable right now.",
        description="Check your internet connection and try again.",
    ),
    "timeout": ErrorDescription(
        title="The request timed out.",
        description="The server did not respond in time, so the request was cancelled.",
    ),
    400: ErrorDescription(
        title="The request was invalid.",
        description="The request could not be processed because of invalid data.",
    ),
    401: ErrorDescription(
        title="Authentication required.",
        description="Please sign in to continue.",
    ),
    403: ErrorDescription(
        title="Access denied.",
        description="You do not have permission to access this resource.",
    ),
    404: ErrorDescription(
        title="Not found.",
        description="The requested resource does not exist.",
    ),
    500: DEFAULT_ERROR,
}


def describe_error(error: BaseException) -> ErrorDescription:
    """Map a client exception onto the description a UI should display.

    A server-provided ``message`` replaces the generic description when it
    is present on an :class:`ApiError`.
    """
    if isinstance(error, RequestTimeoutError):
        return ERROR_DESCRIPTIONS["timeout"]
    if isinstance(error, NetworkError):
        return ERROR_DESCRIPTIONS["network"]
    if isinstance(error, RefreshError):
        return ERROR_DESCRIPTIONS[401]
    if isinstance(error, ApiError):
        base = ERROR_DESCRIPTIONS.get(error.status, DEFAULT_ERROR)
        server_message = error.data.get("message") if isinstance(error.data, dict) else None
        if isinstance(server_message, list) and server_message:
            server_message = server_message[0]
        if isinstance(server_message, str) and server_message.strip():
            return ErrorDescription(title=base.title, description=server_message)
        return base
    return DEFAULT_ERROR
