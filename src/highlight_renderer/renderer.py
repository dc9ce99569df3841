"""Rendering of highlights into Markdown blocks.

Every rendered block carries at least one anchor (the highlight's permalink
or its block identifier) so later runs can detect it with a substring test.
"""

from src.highlight_renderer.template import render_template
from src.instapaper_client.models import Highlight

LINK_SYMBOL = '↗'

READ_URL = 'https://www.instapaper.com/read/{article_id}/{highlight_id}'

# Reproduces the legacy fixed format exactly.
DEFAULT_HIGHLIGHT_TEMPLATE = '{text} [' + LINK_SYMBOL + ']({link}) {blockId}\n\n{#note}{note}{/note}'


def link_for(highlight: Highlight) -> str:
    """Permalink of a highlight inside the Instapaper reader."""
    return READ_URL.format(article_id=highlight.article_id, highlight_id=highlight.id)


def block_id_for(highlight: Highlight) -> str:
    """Obsidian block identifier for a highlight (``^h<id>``)."""
    return f"^h{highlight.id}"


def blockquote(text: str) -> str:
    """Prefix every line of text with ``> ``."""
    return '\n'.join(f"> {line}" for line in text.split('\n'))


def render(highlight: Highlight, template: str = DEFAULT_HIGHLIGHT_TEMPLATE) -> str:
    """Render a highlight with a user template.

    If the template produced neither anchor, the block identifier is appended
    so the block stays detectable. The result always ends in exactly two
    newlines.

    Args:
        highlight: Highlight to render
        template: Template with {text}, {link}, {blockId}, {note} and {#note} sections

    Returns:
        Rendered Markdown block
    """
    link = link_for(highlight)
    block_id = block_id_for(highlight)

    content = render_template(template, {
        'text': blockquote(highlight.text),
        'link': link,
        'blockId': block_id,
        'note': highlight.note or '',
    })

    if link not in content and block_id not in content:
        content = f"{content.rstrip()} {block_id}"

    return content.rstrip() + '\n\n'


def render_legacy(highlight: Highlight) -> str:
    """Render a highlight in the fixed pre-template format."""
    content = blockquote(highlight.text)
    content += f" [{LINK_SYMBOL}]({link_for(highlight)})"
    content += f" {block_id_for(highlight)}"
    content += '\n\n'
    if highlight.note:
        content += highlight.note + '\n\n'
    return content
