"""Unit tests for instapaper_client.api_wrapper.InstapaperAPI."""

import pytest
import requests
from unittest.mock import Mock

from requests_oauthlib import OAuth1

from src.instapaper_client.api_wrapper import InstapaperAPI
from src.instapaper_client.errors import (
    APIAccessError,
    APIUnreachableError,
    InstapaperError,
    InvalidCredentialsError,
    RateLimitError,
)
from src.instapaper_client.models import AccessToken
from tests.fixtures.instapaper_data import bookmark_payload, highlights_payload


TOKEN = AccessToken(key="token-key", secret="token-secret")


def _response(payload=None, status_code=200):
    resp = Mock()
    resp.status_code = status_code
    resp.json.return_value = payload
    if status_code >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(
            f"{status_code} Error", response=resp
        )
    else:
        resp.raise_for_status.return_value = None
    return resp


@pytest.fixture
def session():
    return Mock(spec=requests.Session)


@pytest.fixture
def api(session):
    return InstapaperAPI("consumer-key", "consumer-secret", session=session)


class TestFetchHighlightsPage:
    """Test cases for fetch_highlights_page."""

    def test_sends_watermark_and_ascending_order(self, api, session):
        session.request.return_value = _response(highlights_payload())

        api.fetch_highlights_page(TOKEN, after=42)

        args, kwargs = session.request.call_args
        assert args == ('GET', 'https://www.instapaper.com/api/highlights')
        assert kwargs['params'] == {'after': 42, 'sort': 'asc'}
        assert isinstance(kwargs['auth'], OAuth1)
        assert kwargs['timeout'] == 30

    def test_parses_highlights_and_bookmarks(self, api, session):
        session.request.return_value = _response(highlights_payload())

        page = api.fetch_highlights_page(TOKEN, after=0)

        assert [h.id for h in page.highlights] == [11, 12]
        assert page.highlights[0].article_id == "100"
        assert page.highlights[0].note is None
        assert page.highlights[1].note == "worth rereading"
        article = page.articles_by_id["100"]
        assert article.title == "How to Read a Book"
        assert article.published_at == 1690000000
        assert [t.name for t in article.tags] == ["reading list"]

    def test_empty_response_is_empty_page(self, api, session):
        session.request.return_value = _response({"highlights": [], "bookmarks": []})

        page = api.fetch_highlights_page(TOKEN, after=99)

        assert page.highlights == []
        assert page.articles_by_id == {}

    def test_non_object_response_raises(self, api, session):
        session.request.return_value = _response(["unexpected"])

        with pytest.raises(APIAccessError):
            api.fetch_highlights_page(TOKEN, after=0)

    def test_malformed_highlight_raises(self, api, session):
        session.request.return_value = _response({"highlights": [{"text": "no id"}]})

        with pytest.raises(APIAccessError, match="Malformed highlights payload"):
            api.fetch_highlights_page(TOKEN, after=0)

    def test_invalid_json_raises(self, api, session):
        resp = _response()
        resp.json.side_effect = ValueError("not json")
        session.request.return_value = resp

        with pytest.raises(APIAccessError, match="Invalid JSON"):
            api.fetch_highlights_page(TOKEN, after=0)


class TestErrorTranslation:
    """All transport and HTTP failures surface as InstapaperError subclasses."""

    @pytest.mark.parametrize("status_code", [401, 403])
    def test_auth_failures(self, api, session, status_code):
        session.request.return_value = _response(status_code=status_code)

        with pytest.raises(InvalidCredentialsError) as exc_info:
            api.fetch_highlights_page(TOKEN, after=0)

        assert exc_info.value.status_code == status_code

    def test_rate_limit(self, api, session):
        session.request.return_value = _response(status_code=429)

        with pytest.raises(RateLimitError):
            api.fetch_highlights_page(TOKEN, after=0)

    def test_server_error(self, api, session):
        session.request.return_value = _response(status_code=503)

        with pytest.raises(APIAccessError) as exc_info:
            api.fetch_highlights_page(TOKEN, after=0)

        assert exc_info.value.status_code == 503

    @pytest.mark.parametrize("exception", [
        requests.Timeout("read timed out"),
        requests.ConnectionError("connection refused"),
    ])
    def test_transport_failures(self, api, session, exception):
        session.request.side_effect = exception

        with pytest.raises(APIUnreachableError):
            api.fetch_highlights_page(TOKEN, after=0)

    def test_all_errors_share_base_class(self, api, session):
        session.request.return_value = _response(status_code=500)

        with pytest.raises(InstapaperError):
            api.fetch_highlights_page(TOKEN, after=0)


class TestSanitizeCredentials:
    """Test cases for _sanitize_credentials."""

    def test_masks_oauth_values(self, api):
        text = 'oauth_token="abc123", oauth_signature="xyz"'

        result = api._sanitize_credentials(text)

        assert "abc123" not in result
        assert "xyz" not in result
        assert 'oauth_token="***REDACTED***"' in result

    def test_masks_authorization_header(self, api):
        result = api._sanitize_credentials("Authorization: OAuth oauth_nonce=1")

        assert result == "Authorization: ***REDACTED***"

    def test_empty_text(self, api):
        assert api._sanitize_credentials("") == ""


class TestAddBookmark:
    """Test cases for add_bookmark."""

    def test_posts_url_and_omits_unset_fields(self, api, session):
        session.request.return_value = _response(bookmark_payload())

        article = api.add_bookmark(TOKEN, "https://example.com/saved")

        args, kwargs = session.request.call_args
        assert args == ('POST', 'https://www.instapaper.com/api/1.1/bookmarks/add')
        assert kwargs['data'] == {'url': 'https://example.com/saved'}
        assert article.id == 555
        assert article.title == "Saved Article"

    def test_missing_bookmark_object_raises(self, api, session):
        session.request.return_value = _response([{"type": "meta"}])

        with pytest.raises(APIAccessError, match="bookmark"):
            api.add_bookmark(TOKEN, "https://example.com/saved")


class TestVerifyCredentials:
    """Test cases for verify_credentials."""

    def test_returns_account(self, api, session):
        session.request.return_value = _response(
            [{"type": "user", "user_id": 7, "username": "reader@example.com"}]
        )

        account = api.verify_credentials(TOKEN)

        assert account.user_id == 7
        assert account.username == "reader@example.com"


class TestSessionLifecycle:

    def test_close_closes_session(self, api, session):
        api.close()

        session.close.assert_called_once()

    def test_context_manager_closes(self, session):
        with InstapaperAPI("k", "s", session=session):
            pass

        session.close.assert_called_once()
