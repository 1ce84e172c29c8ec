"""
Error taxonomy for the request pipeline.

Every error the pipeline knows how to answer carries its HTTP status and the
client-facing message. The message is the only thing that reaches the
client; internal detail stays in the logs.
"""

from typing import Optional


class SafetyPortalError(Exception):
    """Base class for errors converted to `{"error": message}` responses."""

    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        if message is not None:
            self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class Unauthenticated(SafetyPortalError):
    status_code = 401
    message = "Unauthenticated"


class TokenMissing(Unauthenticated):
    status_code = 401
    message = "Token required"


class InvalidToken(Unauthenticated):
    status_code = 403
    message = "Invalid token"


class InvalidCredentials(Unauthenticated):
    status_code = 401
    message = "Invalid credentials"


class RateLimited(SafetyPortalError):
    status_code = 429
    message = "Too many requests, please try again later."


class NotFound(SafetyPortalError):
    status_code = 404
    message = "Not found"


class CityNotFound(NotFound):
    message = "City not found"


class InvalidFile(SafetyPortalError):
    status_code = 400
    message = "Invalid file type"


class FileTooLarge(InvalidFile):
    status_code = 413
    message = "File too large"


class UpstreamUnavailable(SafetyPortalError):
    """An external service (geocoder, feed) failed or timed out."""
    status_code = 500
    message = "Server error"


class NewsUnavailable(UpstreamUnavailable):
    message = "Error fetching news"


class StoreUnavailable(SafetyPortalError):
    """The record store could not be reached or rejected the operation."""
    status_code = 500
    message = "Server error"


class NotificationFailed(Exception):
    """
    SMS dispatch failed after the record was persisted.

    Not a pipeline error: the check-in notifier handles it and reports a
    partial success.
    """
