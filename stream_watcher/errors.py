"""Exception hierarchy for the stream watcher.

Hierarchy::

    StreamWatcherError
    ├── ConfigError
    └── PlatformAPIError         (kind: ErrorKind, status_code: int | None)
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Failure categories reported by platform API calls."""

    AUTH_FAILED = "auth_failed"
    UNAUTHORIZED = "unauthorized"
    REQUEST_FAILED = "request_failed"
    INVALID_RESPONSE = "invalid_response"


class StreamWatcherError(Exception):
    """Base class for all stream watcher exceptions."""


class ConfigError(StreamWatcherError):
    """Raised when required configuration is missing or invalid."""


class PlatformAPIError(StreamWatcherError):
    """Raised when a call to the streaming platform API fails.

    Args:
        message: Human-readable description of the failure.
        kind: Failure category.
        status_code: HTTP status of the response, if one was received.
    """

    def __init__(
        self,
        message: str,
        kind: ErrorKind = ErrorKind.REQUEST_FAILED,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.status_code = status_code

    @property
    def is_unauthorized(self) -> bool:
        """True when the bearer token was rejected and must be renewed."""
        return self.kind is ErrorKind.UNAUTHORIZED

    def __repr__(self) -> str:
        return (
            f"PlatformAPIError({str(self)!r}, kind={self.kind.value}, "
            f"status_code={self.status_code})"
        )
