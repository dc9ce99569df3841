"""Instapaper client library for highlight sync.

This package provides Python abstractions over the Instapaper API, enabling
typed access to paginated highlights and bookmark creation.
"""

from .api_wrapper import InstapaperAPI
from .auth import Authenticator, Credentials
from .errors import (
    SyncError,
    InstapaperError,
    MissingCredentialsError,
    InvalidCredentialsError,
    RateLimitError,
    APIUnreachableError,
    APIAccessError,
)
from .models import AccessToken, Account, Article, Highlight, HighlightsPage, Tag

__all__ = [
    "InstapaperAPI",
    "Authenticator",
    "Credentials",
    "SyncError",
    "InstapaperError",
    "MissingCredentialsError",
    "InvalidCredentialsError",
    "RateLimitError",
    "APIUnreachableError",
    "APIAccessError",
    "AccessToken",
    "Account",
    "Article",
    "Highlight",
    "HighlightsPage",
    "Tag",
]
