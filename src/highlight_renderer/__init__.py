"""Highlight rendering and anchor detection."""

from .anchors import already_present, migrate_rendering
from .renderer import (
    DEFAULT_HIGHLIGHT_TEMPLATE,
    block_id_for,
    link_for,
    render,
    render_legacy,
)
from .template import render_template

__all__ = [
    'already_present',
    'migrate_rendering',
    'DEFAULT_HIGHLIGHT_TEMPLATE',
    'block_id_for',
    'link_for',
    'render',
    'render_legacy',
    'render_template',
]
