"""Unit tests for highlight_renderer.renderer module."""

import pytest

from src.highlight_renderer.renderer import (
    DEFAULT_HIGHLIGHT_TEMPLATE,
    block_id_for,
    blockquote,
    link_for,
    render,
    render_legacy,
)
from tests.fixtures.instapaper_data import make_highlight


TEMPLATES = [
    DEFAULT_HIGHLIGHT_TEMPLATE,
    "{text}",
    "",
    "- {text} ({link})",
    "{text} {blockId}",
    "{#note}Note: {note}{/note}",
    "> {unknown}",
    "{text}\n\n{link}\n\n",
]


class TestAnchors:

    def test_link_format(self):
        h = make_highlight(12, article_id=100)

        assert link_for(h) == "https://www.instapaper.com/read/100/12"

    def test_block_id_format(self):
        assert block_id_for(make_highlight(12)) == "^h12"


class TestBlockquote:

    def test_single_line(self):
        assert blockquote("text") == "> text"

    def test_every_line_prefixed(self):
        assert blockquote("one\ntwo\n\nthree") == "> one\n> two\n> \n> three"


class TestRender:

    def test_default_template(self):
        h = make_highlight(12, article_id=100, text="A passage")

        result = render(h)

        assert result == (
            "> A passage [↗](https://www.instapaper.com/read/100/12) ^h12\n\n"
        )

    def test_default_template_with_note(self):
        h = make_highlight(12, article_id=100, text="A passage", note="My note")

        result = render(h)

        assert result == (
            "> A passage [↗](https://www.instapaper.com/read/100/12) ^h12\n\n"
            "My note\n\n"
        )

    @pytest.mark.parametrize("template", TEMPLATES)
    def test_every_rendering_carries_an_anchor(self, template):
        h = make_highlight(77, article_id=5, note="n")

        result = render(h, template)

        assert block_id_for(h) in result or link_for(h) in result

    def test_anchorless_template_gets_block_id(self):
        h = make_highlight(7, text="quoted")

        assert render(h, "{text}") == "> quoted ^h7\n\n"

    @pytest.mark.parametrize("template", TEMPLATES)
    def test_ends_with_exactly_two_newlines(self, template):
        result = render(make_highlight(3), template)

        assert result.endswith("\n\n")
        assert not result.endswith("\n\n\n")


class TestRenderLegacy:

    @pytest.mark.parametrize("note", [None, "A note", "multi\nline note"])
    def test_default_template_reproduces_legacy_format(self, note):
        h = make_highlight(12, article_id=100, text="line one\nline two", note=note)

        assert render(h, DEFAULT_HIGHLIGHT_TEMPLATE) == render_legacy(h)

    def test_legacy_without_note(self):
        h = make_highlight(1, article_id=2, text="t")

        assert render_legacy(h) == "> t [↗](https://www.instapaper.com/read/2/1) ^h1\n\n"
