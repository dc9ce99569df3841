"""Typed exception hierarchy for Instapaper-related errors.

This module defines all custom exceptions used by the Instapaper client library.
All exceptions inherit from InstapaperError so the sync engine can treat any
client failure uniformly as a retryable error.
"""

from typing import List, Optional


class SyncError(Exception):
    """Base exception for all instapaper-sync errors.

    Use this to catch any application-level error from the sync tool.
    """
    pass


class InstapaperError(SyncError):
    """Base exception for all Instapaper API errors."""
    pass


class MissingCredentialsError(InstapaperError):
    """Raised when required credential environment variables are not set."""

    def __init__(self, missing: List[str]):
        super().__init__(
            f"Missing Instapaper credentials: {', '.join(missing)}"
        )
        self.missing = missing


class InvalidCredentialsError(InstapaperError):
    """Raised when the API rejects the consumer or access token."""

    def __init__(self, endpoint: str, status_code: Optional[int] = None):
        message = f"Instapaper rejected the credentials (endpoint: {endpoint})"
        if status_code is not None:
            message += f" [HTTP {status_code}]"
        super().__init__(message)
        self.endpoint = endpoint
        self.status_code = status_code


class RateLimitError(InstapaperError):
    """Raised when the API responds with 429 Too Many Requests."""

    def __init__(self, endpoint: str):
        super().__init__(f"Rate limit exceeded at {endpoint}")
        self.endpoint = endpoint


class APIUnreachableError(InstapaperError):
    """Raised when the Instapaper API cannot be reached (network or timeout)."""

    def __init__(self, endpoint: str, reason: Optional[str] = None):
        message = f"API is not available at {endpoint}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.endpoint = endpoint
        self.reason = reason


class APIAccessError(InstapaperError):
    """Raised for unexpected HTTP statuses or malformed API payloads."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
