"""Mapping of articles to their note files."""

import logging
from typing import Optional

from src.instapaper_client.models import Article

from .filesafe_converter import FilesafeConverter
from .models import NoteFile
from .vault import Vault, normalize_path

logger = logging.getLogger(__name__)


def note_path_for(article: Article, folder: str) -> str:
    """Normalized vault path of the note for an article."""
    name = FilesafeConverter.title_to_filename(article.title, article.id)
    return normalize_path(f"{folder}/{name}.md")


def resolve_file(
    article: Article,
    vault: Vault,
    folder: str,
    create_if_missing: bool = True,
) -> Optional[NoteFile]:
    """Resolve the note for an article.

    An existing note is returned untouched. Otherwise an empty note is created
    when allowed.

    Args:
        article: Article owning the highlights
        vault: Vault to look in
        folder: Vault-relative notes folder
        create_if_missing: Whether a missing note may be created

    Returns:
        The note, or None when it does not exist and creation is not allowed

    Raises:
        FilesystemError: If the note cannot be created
    """
    path = note_path_for(article, folder)
    existing = vault.get_file_by_path(path)
    if existing is not None:
        return existing

    if not create_if_missing:
        logger.debug(f"No note for article {article.id} at {path}, creation disabled")
        return None

    return vault.create_file(path, '')
