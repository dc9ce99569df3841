"""Data models for the Instapaper client.

Plain dataclasses mirroring the remote highlight and bookmark records,
plus the classmethods that build them from API payloads.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, NamedTuple, Optional


class AccessToken(NamedTuple):
    """OAuth access token pair for a connected account."""
    key: str
    secret: str


@dataclass(frozen=True)
class Account:
    """The account a token belongs to."""
    user_id: int
    username: str

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'Account':
        return cls(user_id=int(data['user_id']), username=str(data.get('username', '')))


@dataclass(frozen=True)
class Tag:
    """A tag as the API returns it (not yet normalized for the vault)."""
    name: str


@dataclass
class Article:
    """An Instapaper bookmark that highlights belong to.

    Attributes:
        id: Bookmark ID
        title: Article title as saved in Instapaper
        url: Original article URL
        author: Author, None when the API has none
        saved_at: Unix seconds when the article was saved
        published_at: Unix seconds of publication, None when unknown
        tags: Tags in API order
    """
    id: int
    title: str
    url: str
    author: Optional[str] = None
    saved_at: int = 0
    published_at: Optional[int] = None
    tags: List[Tag] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'Article':
        """Build an Article from a bookmark JSON object.

        Raises:
            KeyError: If bookmark_id is missing
            ValueError: If numeric fields are not numeric
        """
        pubtime = data.get('pubtime') or None
        return cls(
            id=int(data['bookmark_id']),
            title=str(data.get('title') or ''),
            url=str(data.get('url') or ''),
            author=data.get('author') or None,
            saved_at=int(data.get('time') or 0),
            published_at=int(pubtime) if pubtime else None,
            tags=[Tag(name=str(t.get('name', ''))) for t in data.get('tags') or []],
        )


@dataclass(frozen=True)
class Highlight:
    """A single highlight. Immutable once fetched.

    Attributes:
        id: Highlight ID, globally ordered and assigned by the remote
        article_id: ID of the owning bookmark (string, as used for lookups)
        timestamp: Unix seconds when the highlight was made
        text: Highlighted text
        note: Optional user note attached to the highlight
    """
    id: int
    article_id: str
    timestamp: int
    text: str
    note: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'Highlight':
        return cls(
            id=int(data['highlight_id']),
            article_id=str(data['article_id']),
            timestamp=int(data.get('time') or 0),
            text=str(data.get('text') or ''),
            note=data.get('note') or None,
        )


@dataclass
class HighlightsPage:
    """One page of the highlights endpoint.

    Attributes:
        highlights: Highlights in the order the API returned them
        articles_by_id: Bookmarks from the same response, keyed by str(bookmark_id)
    """
    highlights: List[Highlight] = field(default_factory=list)
    articles_by_id: Dict[str, Article] = field(default_factory=dict)
