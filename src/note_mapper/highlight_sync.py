"""Incremental highlight sync into vault notes.

This module provides the HighlightSync class, the engine that walks the
highlights endpoint from a cursor, maps each highlight to its article note,
refreshes note properties and appends rendered highlight blocks.

Progress model:
    The cursor is advanced to each highlight's ID before that highlight's
    side effects are attempted, and returned to the caller to persist. A run
    that is interrupted re-delivers highlights at most from the last persisted
    cursor, and re-delivery is idempotent because appends are anchor-guarded.
"""

import logging
import threading
from typing import Optional

from src.highlight_renderer.anchors import already_present, migrate_rendering
from src.highlight_renderer.renderer import DEFAULT_HIGHLIGHT_TEMPLATE, render
from src.instapaper_client.api_wrapper import InstapaperAPI
from src.instapaper_client.errors import InstapaperError
from src.instapaper_client.models import AccessToken, Article, Highlight, HighlightsPage

from .errors import NoteMapperError
from .file_resolver import resolve_file
from .frontmatter_handler import FrontmatterHandler
from .models import FrontmatterSettings, NoteFile, SyncOptions, SyncResult, TemplateUpdate
from .vault import Vault, normalize_path

logger = logging.getLogger(__name__)


class HighlightSync:
    """Syncs Instapaper highlights into per-article notes.

    Only one run may be active per instance. A call made while a run is in
    progress returns immediately with zero progress; it is never queued.

    Example:
        >>> engine = HighlightSync(api, Vault("."), "Instapaper Notes", FrontmatterSettings())
        >>> result = engine.sync(token, cursor=state.cursor)
        >>> state.cursor = result.cursor
    """

    def __init__(
        self,
        api: InstapaperAPI,
        vault: Vault,
        notes_folder: str,
        frontmatter: Optional[FrontmatterSettings] = None,
        highlight_template: str = DEFAULT_HIGHLIGHT_TEMPLATE,
    ):
        """Initialize the sync engine.

        Args:
            api: Instapaper API client
            vault: Vault the notes live in
            notes_folder: Vault-relative folder for article notes
            frontmatter: Property configuration (defaults if omitted)
            highlight_template: Template for newly appended highlights
        """
        self.api = api
        self.vault = vault
        self.notes_folder = normalize_path(notes_folder)
        self.frontmatter = frontmatter or FrontmatterSettings()
        self.highlight_template = highlight_template
        self._running = threading.Lock()

    @property
    def is_running(self) -> bool:
        return self._running.locked()

    def sync(
        self,
        token: AccessToken,
        cursor: int,
        options: Optional[SyncOptions] = None,
    ) -> SyncResult:
        """Run one sync pass starting after the given cursor.

        Args:
            token: Access token of the account
            cursor: Last highlight ID already processed
            options: Run options (defaults if omitted)

        Returns:
            SyncResult with the cursor to persist and the number of appended
            highlights. Never raises for remote or per-note failures.
        """
        if not self._running.acquire(blocking=False):
            logger.info("Notes sync is already in progress")
            return SyncResult(cursor=cursor, count=0, completed=False)

        try:
            return self._run(token, cursor, options or SyncOptions())
        finally:
            self._running.release()

    def update_existing_notes(
        self,
        token: AccessToken,
        template_update: Optional[TemplateUpdate] = None,
        options: Optional[SyncOptions] = None,
    ) -> SyncResult:
        """Refresh every existing note from the full highlight history.

        Starts from cursor 0 and never creates notes or the notes folder.
        Properties are refreshed, and when template_update is given, blocks
        rendered with the old template (or the legacy format) are rewritten
        with the new one. Missing highlights are only appended when
        options.sync_highlights is set.

        The returned cursor describes this pass only and must not replace the
        persisted incremental cursor: notes that do not exist were skipped.
        """
        base = options or SyncOptions(sync_highlights=False)
        run_options = SyncOptions(
            create_files=False,
            sync_highlights=base.sync_highlights,
            sync_properties=base.sync_properties,
            remove_disabled_properties=base.remove_disabled_properties,
            update_highlight_template=template_update,
            max_consecutive_errors=base.max_consecutive_errors,
        )
        return self.sync(token, 0, run_options)

    def _run(self, token: AccessToken, cursor: int, options: SyncOptions) -> SyncResult:
        try:
            folder_exists = self.vault.exists(self.notes_folder)
            if not folder_exists and options.create_files:
                self.vault.create_folder(self.notes_folder)
        except NoteMapperError as e:
            logger.error(f"Cannot use notes folder '{self.notes_folder}': {e}")
            return SyncResult(cursor=cursor, count=0, completed=False)

        if not folder_exists:
            if not options.create_files:
                logger.info(f"Notes folder '{self.notes_folder}' does not exist; nothing to update")
                return SyncResult(cursor=cursor, count=0, completed=False)
            # A fresh folder has no history, whatever the stored cursor says.
            logger.info(f"Created notes folder '{self.notes_folder}'; resetting cursor from {cursor} to 0")
            cursor = 0

        result = SyncResult(cursor=cursor)
        errors = 0

        while True:
            try:
                page = self.api.fetch_highlights_page(token, after=result.cursor, sort='asc')
                errors = 0
            except InstapaperError as e:
                errors += 1
                logger.warning(
                    f"Failed to get highlights after {result.cursor} "
                    f"(attempt {errors}/{options.max_consecutive_errors}): {e}"
                )
                if errors >= options.max_consecutive_errors:
                    logger.error(
                        f"Stopping sync after {options.max_consecutive_errors} consecutive errors"
                    )
                    result.completed = False
                    break
                continue

            if not page.highlights:
                break

            page_start = result.cursor
            self._process_page(page, result, options)

            if result.cursor <= page_start:
                logger.warning(
                    f"Highlights page did not advance past {page_start}; stopping"
                )
                result.completed = False
                break

        logger.info(
            f"Sync finished at cursor {result.cursor}: {result.count} appended, "
            f"{result.rewritten_count} rewritten, {len(result.failed_highlight_ids)} failed"
        )
        return result

    def _process_page(self, page: HighlightsPage, result: SyncResult, options: SyncOptions) -> None:
        for highlight in sorted(page.highlights, key=lambda h: h.id):
            if highlight.id <= result.cursor:
                continue
            result.cursor = highlight.id

            article = page.articles_by_id.get(highlight.article_id)
            if article is None:
                continue

            try:
                file = resolve_file(article, self.vault, self.notes_folder, options.create_files)
            except NoteMapperError as e:
                logger.error(f"Cannot resolve note for '{article.title}': {e}")
                result.failed_highlight_ids.append(highlight.id)
                continue
            if file is None:
                continue

            try:
                self._process_highlight(file, article, highlight, result, options)
            except NoteMapperError as e:
                logger.error(f"Failed to update {file.path} for highlight {highlight.id}: {e}")
                result.failed_highlight_ids.append(highlight.id)

    def _process_highlight(
        self,
        file: NoteFile,
        article: Article,
        highlight: Highlight,
        result: SyncResult,
        options: SyncOptions,
    ) -> None:
        if options.sync_properties:
            FrontmatterHandler.apply_properties(
                self.vault,
                file,
                article,
                self.frontmatter,
                remove_disabled=options.remove_disabled_properties,
            )

        update = options.update_highlight_template
        if update is not None:
            content = self.vault.read(file.path)
            if already_present(content, highlight):
                rewritten = migrate_rendering(
                    content, highlight, update.from_template, update.to_template
                )
                if rewritten is not None:
                    self.vault.modify(file.path, rewritten)
                    result.rewritten_count += 1
                    logger.debug(f"Rewrote highlight {highlight.id} in {file.path}")

        if options.sync_highlights:
            content = self.vault.read(file.path)
            if not already_present(content, highlight):
                template = update.to_template if update is not None else self.highlight_template
                self.vault.append(file.path, render(highlight, template))
                result.count += 1
                logger.debug(f"Appended highlight {highlight.id} to {file.path}")
