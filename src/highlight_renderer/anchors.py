"""Anchor-based detection and rewriting of rendered highlights.

Both operations work on raw file text with plain substring matching. Users
may edit anything around a block, so nothing here parses note structure.
"""

import logging
from typing import List, Optional

from src.highlight_renderer.renderer import block_id_for, link_for, render, render_legacy
from src.instapaper_client.models import Highlight

logger = logging.getLogger(__name__)


def already_present(file_text: str, highlight: Highlight) -> bool:
    """Return True if the file already contains this highlight.

    Checks the block identifier and the permalink; notes written before block
    identifiers existed only carry the permalink.
    """
    return block_id_for(highlight) in file_text or link_for(highlight) in file_text


def migrate_rendering(
    file_text: str,
    highlight: Highlight,
    old_template: Optional[str],
    new_template: str,
) -> Optional[str]:
    """Rewrite a previously rendered block using a new template.

    Candidates for the old rendering are tried in order: the rendering under
    old_template (if given), then the legacy fixed format. The first candidate
    found verbatim has its first occurrence replaced by the new rendering.

    Args:
        file_text: Full current file text
        highlight: Highlight whose block should be rewritten
        old_template: Template the block was last rendered with, if known
        new_template: Template to render with now

    Returns:
        The rewritten text, or None when no candidate matched or nothing
        would change
    """
    new_rendering = render(highlight, new_template)

    candidates: List[str] = []
    if old_template is not None:
        candidates.append(render(highlight, old_template))
    candidates.append(render_legacy(highlight))

    for old_rendering in candidates:
        if old_rendering == new_rendering:
            continue
        if old_rendering in file_text:
            return file_text.replace(old_rendering, new_rendering, 1)

    logger.debug(f"No previous rendering of highlight {highlight.id} matched")
    return None
