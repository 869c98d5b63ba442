"""Error types raised by services and repositories.

Every error carries the HTTP status it maps to so the exception handler can
render it without a lookup table. Routers may still raise ``HTTPException``
for request-local checks.
"""

from __future__ import annotations


class AppError(Exception):
    """Base error for all domain exceptions."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(AppError):
    """Raised when a resource does not exist or is not owned by the caller."""

    status_code = 404

    def __init__(self, resource: str, resource_id: str | None = None) -> None:
        if resource_id is None:
            super().__init__(f"{resource} not found")
        else:
            super().__init__(f"{resource} {resource_id} not found")


class ForbiddenError(AppError):
    """Raised when a resource exists but belongs to another user."""

    status_code = 403

    def __init__(self, message: str = "Forbidden") -> None:
        super().__init__(message)


class ConflictError(AppError):
    """Raised on uniqueness violations detected before hitting the database."""

    status_code = 409


class ValidationFailedError(AppError):
    """Raised for semantic validation failures that pydantic cannot express."""

    status_code = 400


class UnauthorizedError(AppError):
    """Raised when no valid session accompanies the request."""

    status_code = 401

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class ServiceUnavailableError(AppError):
    """Raised when an optional integration is not configured."""

    status_code = 503


class UpstreamError(AppError):
    """Raised when a third-party provider call fails."""

    status_code = 502


class InvalidRecurrenceError(ValueError):
    """Raised for recurrence patterns that cannot produce a next occurrence."""


class OccurrenceOutOfRangeError(InvalidRecurrenceError):
    """Raised when the next occurrence would fall past the last representable date."""
