"""Exceptions raised by barterpy."""

from __future__ import annotations

from typing import Any


class BarterApiError(Exception):
    """Base class for barterpy errors."""


class RequestError(BarterApiError):
    """A request to the Barter API did not succeed."""

    def __init__(self, message: str, status: int | None = None, body: Any = None):
        """Initialize the error."""
        super().__init__(message)
        self.message = message
        self.status = status
        self.body = body


class SessionExpiredError(RequestError):
    """A request was rejected and the access token could not be refreshed.

    When a refresh was attempted and failed, stored credentials have been
    cleared. Either way the user has to sign in again.
    """


class InvalidInputError(BarterApiError):
    """Client-side validation rejected the input."""

    def __init__(self, errors: dict[str, str]):
        """Initialize the error with per-field messages."""
        super().__init__("; ".join(f"{field}: {msg}" for field, msg in errors.items()))
        self.errors = errors
