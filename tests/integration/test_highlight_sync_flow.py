"""Integration tests for the highlight sync engine.

Runs HighlightSync against a real temporary vault and an in-memory API that
pages highlights the way the remote endpoint does.
"""

import pytest

from src.highlight_renderer.renderer import DEFAULT_HIGHLIGHT_TEMPLATE, render
from src.note_mapper.frontmatter_handler import FrontmatterHandler, format_timestamp
from src.note_mapper.highlight_sync import HighlightSync
from src.note_mapper.models import SyncOptions, TemplateUpdate
from tests.fixtures.instapaper_data import make_article, make_highlight
from tests.helpers.fake_instapaper import FakeInstapaperAPI


NOTES = "Instapaper Notes"


@pytest.fixture
def article():
    return make_article(
        article_id=100,
        title="How to Read a Book: The Classic Guide",
        author="Mortimer Adler",
        saved_at=1700000000,
        tags=["reading list", "2024"],
    )


def _note_path(title):
    return f"{NOTES}/{title}.md"


class TestFreshSync:

    def test_one_page_two_highlights(self, vault, token, article):
        api = FakeInstapaperAPI(
            [make_highlight(11, text="First"), make_highlight(12, text="Second", note="why")],
            [article],
        )
        engine = HighlightSync(api, vault, NOTES)

        result = engine.sync(token, 0)

        assert result.count == 2
        assert result.cursor == 12
        assert api.calls == [0, 12]

        path = _note_path("How to Read a Book The Classic Guide")
        frontmatter, body = FrontmatterHandler.extract_frontmatter_and_content(vault.read(path))
        assert frontmatter == {
            "author": "Mortimer Adler",
            "url": "https://example.com/how-to-read",
            "saved": format_timestamp(1700000000),
            "tags": ["reading-list", "2024_"],
        }
        assert body == (
            render(make_highlight(11, text="First"))
            + render(make_highlight(12, text="Second", note="why"))
        )

    def test_one_note_per_article(self, vault, token, article):
        other = make_article(article_id=200, title="Second Article")
        api = FakeInstapaperAPI(
            [make_highlight(1), make_highlight(2, article_id=200), make_highlight(3)],
            [article, other],
        )

        HighlightSync(api, vault, NOTES).sync(token, 0)

        first = vault.read(_note_path("How to Read a Book The Classic Guide"))
        second = vault.read(_note_path("Second Article"))
        assert "^h1" in first and "^h3" in first
        assert "^h2" in second and "^h2" not in first


class TestIdempotence:

    def test_second_run_appends_nothing(self, vault, token, article):
        api = FakeInstapaperAPI([make_highlight(1), make_highlight(2)], [article])
        engine = HighlightSync(api, vault, NOTES)
        first = engine.sync(token, 0)
        path = _note_path("How to Read a Book The Classic Guide")
        content = vault.read(path)

        second = engine.sync(token, first.cursor)

        assert second.count == 0
        assert second.cursor == first.cursor
        assert vault.read(path) == content

    def test_redelivery_after_lost_cursor_is_harmless(self, vault, token, article):
        api = FakeInstapaperAPI([make_highlight(1), make_highlight(2), make_highlight(3)], [article])
        engine = HighlightSync(api, vault, NOTES)
        engine.sync(token, 0)
        path = _note_path("How to Read a Book The Classic Guide")
        content = vault.read(path)

        replay = engine.sync(token, 0)

        assert replay.count == 0
        assert replay.cursor == 3
        assert vault.read(path) == content

    def test_new_highlight_appended_after_manual_edits(self, vault, token, article):
        api = FakeInstapaperAPI([make_highlight(1)], [article])
        engine = HighlightSync(api, vault, NOTES)
        cursor = engine.sync(token, 0).cursor
        path = _note_path("How to Read a Book The Classic Guide")
        vault.append(path, "My own thoughts.\n\n")

        api.add(make_highlight(2))
        result = engine.sync(token, cursor)

        assert result.count == 1
        content = vault.read(path)
        assert content.index("My own thoughts.") < content.index("^h2")


class TestResumeAfterFailure:

    def test_stops_after_repeated_failures_on_second_page(self, vault, token, article):
        api = FakeInstapaperAPI(
            [make_highlight(i) for i in (1, 2, 3, 4)], [article], page_size=2,
        )
        api.fail(3, after=2)
        engine = HighlightSync(api, vault, NOTES)

        result = engine.sync(token, 0)

        assert result.cursor == 2
        assert result.count == 2
        assert api.calls == [0, 2, 2, 2]

        resumed = engine.sync(token, result.cursor)

        assert resumed.cursor == 4
        assert resumed.count == 2
        content = vault.read(_note_path("How to Read a Book The Classic Guide"))
        assert [content.count(f"^h{i}") for i in (1, 2, 3, 4)] == [1, 1, 1, 1]

    def test_fewer_failures_than_threshold_are_retried(self, vault, token, article):
        api = FakeInstapaperAPI([make_highlight(i) for i in (1, 2, 3)], [article])
        api.fail(2, after=2)

        result = HighlightSync(api, vault, NOTES).sync(token, 0)

        assert result.cursor == 3
        assert result.count == 3


class TestReBaseline:

    def test_missing_folder_forces_cursor_zero(self, vault, token, article):
        api = FakeInstapaperAPI([make_highlight(100), make_highlight(600)], [article])

        result = HighlightSync(api, vault, NOTES).sync(token, 500)

        assert vault.exists(NOTES)
        assert api.calls[0] == 0
        assert result.count == 2
        assert result.cursor == 600

    def test_existing_folder_respects_stored_cursor(self, vault, token, article):
        vault.create_folder(NOTES)
        api = FakeInstapaperAPI([make_highlight(100), make_highlight(600)], [article])

        result = HighlightSync(api, vault, NOTES).sync(token, 500)

        assert api.calls[0] == 500
        assert result.count == 1


class TestTemplateMigration:

    TEMPLATE_A = "- {text} ([source]({link}))"
    TEMPLATE_B = "{text}\n{#note}\n**Note:** {note}\n{/note}\n{blockId}"

    def test_rewrites_block_and_keeps_manual_text(self, vault, token, article):
        h = make_highlight(7, text="Passage", note="my note")
        api = FakeInstapaperAPI([h], [article])
        HighlightSync(api, vault, NOTES, highlight_template=self.TEMPLATE_A).sync(token, 0)
        path = _note_path("How to Read a Book The Classic Guide")
        vault.append(path, "Manual paragraph that must survive.\n")
        before = vault.read(path)

        engine = HighlightSync(api, vault, NOTES, highlight_template=self.TEMPLATE_B)
        result = engine.update_existing_notes(
            token, TemplateUpdate(self.TEMPLATE_A, self.TEMPLATE_B)
        )

        after = vault.read(path)
        assert result.rewritten_count == 1
        assert result.count == 0
        assert after == before.replace(render(h, self.TEMPLATE_A), render(h, self.TEMPLATE_B))
        assert after.endswith("Manual paragraph that must survive.\n")

    def test_legacy_notes_migrate_to_new_template(self, vault, token, article):
        h = make_highlight(7, text="Passage")
        api = FakeInstapaperAPI([h], [article])
        HighlightSync(api, vault, NOTES).sync(token, 0)
        path = _note_path("How to Read a Book The Classic Guide")

        engine = HighlightSync(api, vault, NOTES, highlight_template=self.TEMPLATE_A)
        engine.update_existing_notes(token, TemplateUpdate(None, self.TEMPLATE_A))

        content = vault.read(path)
        assert render(h, self.TEMPLATE_A) in content
        assert render(h, DEFAULT_HIGHLIGHT_TEMPLATE) not in content

    def test_edited_block_left_alone(self, vault, token, article):
        h = make_highlight(7, text="Passage")
        api = FakeInstapaperAPI([h], [article])
        HighlightSync(api, vault, NOTES, highlight_template=self.TEMPLATE_A).sync(token, 0)
        path = _note_path("How to Read a Book The Classic Guide")
        vault.modify(path, vault.read(path).replace("Passage", "Passage, annotated"))
        before = vault.read(path)

        result = HighlightSync(api, vault, NOTES).update_existing_notes(
            token, TemplateUpdate(self.TEMPLATE_A, self.TEMPLATE_B)
        )

        assert result.rewritten_count == 0
        assert vault.read(path) == before

    def test_update_never_creates_notes(self, vault, token, article):
        vault.create_folder(NOTES)
        api = FakeInstapaperAPI([make_highlight(1)], [article])

        result = HighlightSync(api, vault, NOTES).update_existing_notes(
            token, options=SyncOptions(sync_highlights=True)
        )

        assert result.count == 0
        assert not vault.exists(_note_path("How to Read a Book The Classic Guide"))
