"""API wrapper for the Instapaper API.

This module wraps a requests session signed with OAuth 1.0a and provides
error translation from HTTP exceptions to our typed exception hierarchy.
The client never retries; retry policy belongs to the sync engine.
"""

import logging
import re
from typing import Any, Dict, List, Optional

import requests
from requests.exceptions import ConnectionError, RequestException, Timeout
from requests_oauthlib import OAuth1

from .errors import (
    APIAccessError,
    APIUnreachableError,
    InvalidCredentialsError,
    RateLimitError,
)
from .models import AccessToken, Account, Article, Highlight, HighlightsPage

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = 'https://www.instapaper.com/api'


class InstapaperAPI:
    """Thin wrapper over the Instapaper REST API.

    This class:
    1. Signs every request with the consumer pair plus the caller's access token
    2. Translates HTTP and transport errors to typed exceptions
    3. Parses payloads into the dataclasses in models.py

    Example:
        >>> api = InstapaperAPI(consumer_key, consumer_secret)
        >>> page = api.fetch_highlights_page(token, after=0)
    """

    def __init__(
        self,
        consumer_key: str,
        consumer_secret: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30,
        session: Optional[requests.Session] = None,
    ):
        """Initialize the API wrapper.

        Args:
            consumer_key: OAuth consumer key of the application
            consumer_secret: OAuth consumer secret of the application
            base_url: API base URL (overridable for tests)
            timeout: Per-request timeout in seconds
            session: Optional requests session (created lazily if omitted)
        """
        self._consumer_key = consumer_key
        self._consumer_secret = consumer_secret
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self._session = session

    def _get_session(self) -> requests.Session:
        if self._session is None:
            self._session = requests.Session()
        return self._session

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None

    def __enter__(self) -> 'InstapaperAPI':
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def _sanitize_credentials(self, text: str) -> str:
        """Mask OAuth signatures and tokens in error messages.

        Example:
            >>> api._sanitize_credentials('oauth_token="abc123", oauth_signature="xyz"')
            'oauth_token="***REDACTED***", oauth_signature="***REDACTED***"'
        """
        if not text:
            return text

        sanitized = re.sub(
            r'(oauth_[a-z_]+)=(["\']?)[^"\'&,\s]+',
            r'\1=\2***REDACTED***',
            text,
            flags=re.IGNORECASE
        )
        sanitized = re.sub(
            r'(x_auth_password)=[^&\s]+',
            r'\1=***REDACTED***',
            sanitized,
            flags=re.IGNORECASE
        )
        sanitized = re.sub(
            r'Authorization:\s*[^\n\r]+',
            'Authorization: ***REDACTED***',
            sanitized,
            flags=re.IGNORECASE
        )
        return sanitized

    def _translate_error(self, exception: Exception, url: str) -> Exception:
        """Translate requests exceptions to typed Instapaper exceptions.

        Args:
            exception: The original exception from requests
            url: The endpoint being called

        Returns:
            Exception: One of our typed exceptions
        """
        if isinstance(exception, (Timeout, ConnectionError)):
            return APIUnreachableError(
                endpoint=url,
                reason=self._sanitize_credentials(str(exception))
            )

        response = getattr(exception, 'response', None)
        status_code = getattr(response, 'status_code', None)

        if status_code in (401, 403):
            return InvalidCredentialsError(endpoint=url, status_code=status_code)

        if status_code == 429:
            return RateLimitError(endpoint=url)

        safe_error_msg = self._sanitize_credentials(str(exception))
        logger.error(f"API request failed: {url} - {safe_error_msg}")
        if status_code is not None:
            return APIAccessError(
                f"Instapaper API failure at {url} [HTTP {status_code}]",
                status_code=status_code
            )
        return APIAccessError(f"Instapaper API failure at {url}")

    def _request(
        self,
        method: str,
        path: str,
        token: Optional[AccessToken] = None,
        data: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Send a signed request and return the decoded JSON body.

        GET requests carry data as query parameters, other methods as a
        form-encoded body.

        Raises:
            InvalidCredentialsError: On HTTP 401/403
            RateLimitError: On HTTP 429
            APIUnreachableError: On connection errors and timeouts
            APIAccessError: On any other failure or a non-JSON body
        """
        url = f"{self.base_url}{path}"
        auth = OAuth1(
            self._consumer_key,
            client_secret=self._consumer_secret,
            resource_owner_key=token.key if token else None,
            resource_owner_secret=token.secret if token else None,
        )
        params = {k: v for k, v in (data or {}).items() if v is not None}

        logger.debug(f"{method} {url}")
        try:
            if method == 'GET':
                resp = self._get_session().request(
                    method, url, params=params, auth=auth, timeout=self.timeout
                )
            else:
                resp = self._get_session().request(
                    method, url, data=params, auth=auth, timeout=self.timeout
                )
            resp.raise_for_status()
        except RequestException as e:
            raise self._translate_error(e, url) from e

        try:
            return resp.json()
        except ValueError as e:
            raise APIAccessError(f"Invalid JSON from {url}") from e

    def fetch_highlights_page(
        self,
        token: AccessToken,
        after: int,
        sort: str = 'asc',
    ) -> HighlightsPage:
        """Fetch one page of highlights newer than the given watermark.

        Args:
            token: Access token of the account
            after: Highlight ID watermark (exclusive)
            sort: 'asc' so that an advancing watermark converges on an empty page

        Returns:
            HighlightsPage with highlights and their bookmarks

        Raises:
            InstapaperError: Any subclass, on network, auth or payload failure
        """
        payload = self._request('GET', '/highlights', token, {'after': after, 'sort': sort})

        if not isinstance(payload, dict):
            raise APIAccessError("Highlights response must be a JSON object")

        try:
            highlights = [Highlight.from_api(h) for h in payload.get('highlights') or []]
            articles = [Article.from_api(b) for b in payload.get('bookmarks') or []]
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise APIAccessError(f"Malformed highlights payload: {e}") from e

        return HighlightsPage(
            highlights=highlights,
            articles_by_id={str(a.id): a for a in articles},
        )

    def add_bookmark(
        self,
        token: AccessToken,
        url: str,
        title: Optional[str] = None,
        description: Optional[str] = None,
        folder_id: Optional[int] = None,
    ) -> Article:
        """Save a URL to Instapaper.

        Returns:
            The created (or already existing) bookmark as an Article

        Raises:
            InstapaperError: Any subclass, on failure
        """
        payload = self._request('POST', '/1.1/bookmarks/add', token, {
            'url': url,
            'title': title,
            'description': description,
            'folder_id': folder_id,
        })
        bookmark = self._first_of_type(payload, 'bookmark')
        try:
            return Article.from_api(bookmark)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise APIAccessError(f"Malformed bookmark payload: {e}") from e

    def verify_credentials(self, token: AccessToken) -> Account:
        """Return the account the token belongs to.

        Raises:
            InvalidCredentialsError: If the token is not accepted
        """
        payload = self._request('POST', '/1.1/account/verify_credentials', token)
        user = self._first_of_type(payload, 'user')
        try:
            return Account.from_api(user)
        except (KeyError, TypeError, ValueError) as e:
            raise APIAccessError(f"Malformed account payload: {e}") from e

    @staticmethod
    def _first_of_type(payload: Any, item_type: str) -> Dict[str, Any]:
        """Pick the first object of the given type from a 1.1 list response."""
        items: List[Any] = payload if isinstance(payload, list) else [payload]
        for item in items:
            if isinstance(item, dict) and item.get('type') == item_type:
                return item
        raise APIAccessError(f"Response did not contain a '{item_type}' object")
