"""Error taxonomy raised by the service layer."""

from __future__ import annotations

from typing import Dict, Optional


class SalesboardError(Exception):
    """Base class for every domain error."""

    status_code = 500
    default_message = "Unexpected error"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(SalesboardError):
    """Client input failed one or more field checks.

    ``errors`` maps a form field (or ``"general"``) to a human readable
    message, so clients can render them next to the offending input.
    """

    status_code = 422
    default_message = "Please correct the highlighted fields."

    def __init__(
        self, errors: Optional[Dict[str, str]] = None, message: Optional[str] = None
    ) -> None:
        self.errors: Dict[str, str] = dict(errors or {})
        if message is None and set(self.errors) == {"general"}:
            message = self.errors["general"]
        super().__init__(message)


class NotFound(SalesboardError):
    status_code = 404
    default_message = "Record not found"


class Conflict(SalesboardError):
    status_code = 409
    default_message = "Record already exists"


class PersistenceError(SalesboardError):
    status_code = 503
    default_message = "Failed to save data. Please try again."


class FetchError(SalesboardError):
    status_code = 503
    default_message = "Failed to load data. Please try again."


class SessionExpired(SalesboardError):
    status_code = 401
    default_message = "Session expired. Please log in to continue."


__all__ = [
    "Conflict",
    "FetchError",
    "NotFound",
    "PersistenceError",
    "SalesboardError",
    "SessionExpired",
    "ValidationError",
]
