"""Typed exception hierarchy for sync errors.

Provides structured exceptions for differentiated error handling
(auth errors vs transient network errors vs data issues vs storage
failures). The sync pipeline catches all of them and turns them into a
``SyncOutcome`` whose ``error_category`` callers can match on.
"""

from enum import Enum


class ErrorCategory(str, Enum):
    """Category of a failed sync unit."""

    AUTH = "auth"
    REMOTE = "remote"
    PARSE = "parse"
    STORAGE = "storage"
    UNKNOWN = "unknown"


class SyncError(Exception):
    """Base exception for all sync-related errors."""

    category = ErrorCategory.UNKNOWN


class KiteAuthError(SyncError):
    """User not authenticated, or the token exchange was rejected."""

    category = ErrorCategory.AUTH


class KiteRemoteError(SyncError):
    """The Kite API could not be reached or answered with an error."""

    category = ErrorCategory.REMOTE


class KiteConnectionError(KiteRemoteError):
    """Network failures: timeouts, DNS resolution, connection refused."""

    pass


class KiteAPIError(KiteRemoteError):
    """HTTP 4xx/5xx responses from the Kite API."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class KiteDataError(SyncError):
    """Malformed JSON, or a record field that cannot be coerced."""

    category = ErrorCategory.PARSE


class StorageError(SyncError):
    """The persistence layer failed while applying a sync unit."""

    category = ErrorCategory.STORAGE


def categorize(exc: BaseException) -> ErrorCategory:
    """Return the error category for any exception."""
    if isinstance(exc, SyncError):
        return exc.category
    return ErrorCategory.UNKNOWN
