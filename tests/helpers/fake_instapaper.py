"""In-memory stand-in for the Instapaper API.

Serves a fixed set of highlights in ascending pages the way the highlights
endpoint does, and can be told to fail a number of upcoming calls.
"""

from typing import Dict, List, Optional

from src.instapaper_client.errors import APIUnreachableError, InstapaperError
from src.instapaper_client.models import AccessToken, Article, Highlight, HighlightsPage


class FakeInstapaperAPI:
    """Pages through highlights newer than the requested watermark.

    Attributes:
        calls: Watermarks passed to fetch_highlights_page, in call order
    """

    def __init__(
        self,
        highlights: List[Highlight],
        articles: List[Article],
        page_size: int = 2,
    ):
        self.highlights = sorted(highlights, key=lambda h: h.id)
        self.articles: Dict[str, Article] = {str(a.id): a for a in articles}
        self.page_size = page_size
        self.calls: List[int] = []
        self._failures: Dict[Optional[int], int] = {}

    def fail(self, times: int, after: Optional[int] = None) -> None:
        """Fail the next `times` calls (only those for `after`, if given)."""
        self._failures[after] = times

    def add(self, highlight: Highlight, article: Optional[Article] = None) -> None:
        self.highlights = sorted(self.highlights + [highlight], key=lambda h: h.id)
        if article is not None:
            self.articles[str(article.id)] = article

    def fetch_highlights_page(
        self,
        token: AccessToken,
        after: int,
        sort: str = 'asc',
    ) -> HighlightsPage:
        self.calls.append(after)

        for key in (after, None):
            if self._failures.get(key, 0) > 0:
                self._failures[key] -= 1
                raise self._error()

        items = [h for h in self.highlights if h.id > after][:self.page_size]
        wanted = {h.article_id for h in items}
        return HighlightsPage(
            highlights=items,
            articles_by_id={k: a for k, a in self.articles.items() if k in wanted},
        )

    @staticmethod
    def _error() -> InstapaperError:
        return APIUnreachableError(endpoint="https://www.instapaper.com/api/highlights", reason="timed out")
