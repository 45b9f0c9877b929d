"""
Error taxonomy shared by every service.

Services raise these; routes translate them into JSON responses (see
optistore.decorators.error_response). Nothing here is retried automatically.
"""

from __future__ import annotations


class ServiceError(Exception):
    """Base class for failures reported to the caller."""

    default_message = "Request failed"

    def __init__(self, message: str | None = None, details: dict | None = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.details = details or {}


class ValidationError(ServiceError):
    """Raised when input is missing a required field or is malformed."""

    default_message = "Invalid input"

    def __init__(self, message: str | None = None, field: str | None = None):
        super().__init__(message, {"field": field} if field else None)
        self.field = field


class AccessDenied(ServiceError):
    """Raised when the access gate refuses an operation."""

    default_message = "Insufficient privileges"


class SessionExpired(AccessDenied):
    """Raised when the acting session was found stale (and cleared) on check."""

    default_message = "Session expired, please log in again"


class NotFound(ServiceError):
    """Raised when an id/store combination matches no row."""

    default_message = "Not found"


class DuplicateError(ServiceError):
    """Raised when a uniqueness pre-check finds an existing record."""

    default_message = "Duplicate record"

    def __init__(self, message: str | None = None, existing: dict | None = None):
        super().__init__(message, {"existing": existing} if existing else None)
        self.existing = existing


class ReferentialConflictError(ServiceError):
    """Raised when a delete is blocked by dependent rows."""

    default_message = "Record is still referenced"

    def __init__(self, message: str | None = None, count: int = 0, blockers: list | None = None):
        super().__init__(message, {"count": count, "blockers": blockers or []})
        self.count = count
        self.blockers = blockers or []


class StorageError(ServiceError):
    """Raised when the database is unreachable or rejects a statement."""

    default_message = "Storage error"
