"""Test fixtures for Instapaper highlight sync tests.

This module provides test fixtures for:
- Highlight, Article and HighlightsPage factories
- Raw Instapaper API payloads
"""

from .instapaper_data import (
    make_article,
    make_highlight,
    make_page,
    highlights_payload,
    bookmark_payload,
)

__all__ = [
    'make_article',
    'make_highlight',
    'make_page',
    'highlights_payload',
    'bookmark_payload',
]
