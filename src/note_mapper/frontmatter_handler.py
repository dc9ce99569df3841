"""YAML frontmatter handling for article notes.

This module reads and rewrites the YAML frontmatter block of a note and
applies the configured article properties to it. Key order of existing
frontmatter is preserved; properties the tool does not own are never touched.
"""

import logging
import re
from datetime import datetime
from typing import Any, Dict, Optional, Set, Tuple
import yaml

from src.instapaper_client.models import Article

from .errors import FrontmatterError
from .models import FrontmatterSettings, NoteFile
from .vault import Vault

logger = logging.getLogger(__name__)

# Properties with built-in meaning in Obsidian; never removed as "disabled".
# https://help.obsidian.md/properties#Default+properties
RESERVED_PROPERTIES = frozenset({'cssclasses', 'aliases', 'tags'})


def normalize_tag(name: str) -> str:
    """Turn an Instapaper tag name into a valid Obsidian tag.

    Obsidian tags cannot contain spaces or be entirely numeric.

    Examples:
        >>> normalize_tag("one two")
        'one-two'
        >>> normalize_tag("123")
        '123_'
    """
    tag = re.sub(r'\s+', '-', name.strip())
    if re.fullmatch(r'\d+', tag):
        tag += '_'
    return tag


def format_timestamp(timestamp: int) -> Optional[str]:
    """Format unix seconds as a local YYYY-MM-DD date.

    Returns None when the platform cannot represent the timestamp (for
    example a value sent in milliseconds), so the property is treated as
    absent.
    """
    try:
        return datetime.fromtimestamp(timestamp).strftime('%Y-%m-%d')
    except (ValueError, OverflowError, OSError) as e:
        logger.warning(f"Ignoring out-of-range timestamp {timestamp}: {e}")
        return None


class FrontmatterHandler:
    """Handles YAML frontmatter operations for note files.

    Frontmatter format:
        A YAML mapping between '---' fences at the very start of the file.
        A file without that block has no frontmatter.
    """

    # Regex pattern to match YAML frontmatter (between --- delimiters)
    FRONTMATTER_PATTERN = re.compile(
        r'\A---[ \t]*\r?\n(.*?)^---[ \t]*(?:\r?\n|\Z)',
        re.DOTALL | re.MULTILINE
    )

    @classmethod
    def extract_frontmatter_and_content(
        cls,
        content: str,
        file_path: str = "<unknown>"
    ) -> Tuple[Dict[str, Any], str]:
        """Extract frontmatter dict and body separately.

        Args:
            content: Full note text
            file_path: Path used in error messages

        Returns:
            Tuple of (frontmatter_dict, body). Returns ({}, content) if no
            frontmatter is found.

        Raises:
            FrontmatterError: If the block is not a valid YAML mapping
        """
        match = cls.FRONTMATTER_PATTERN.match(content)
        if not match:
            return {}, content

        try:
            frontmatter = yaml.safe_load(match.group(1))
        except yaml.YAMLError as e:
            raise FrontmatterError(file_path, f"Invalid YAML syntax: {str(e)}")

        if frontmatter is None:
            frontmatter = {}

        if not isinstance(frontmatter, dict):
            raise FrontmatterError(
                file_path,
                f"Frontmatter must be a YAML dictionary, got {type(frontmatter).__name__}"
            )

        return frontmatter, content[match.end():]

    @classmethod
    def generate(cls, frontmatter: Dict[str, Any], body: str) -> str:
        """Combine a frontmatter dict and a body into note text.

        An empty dict produces no frontmatter block.
        """
        if not frontmatter:
            return body

        yaml_str = yaml.safe_dump(
            frontmatter,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False
        )
        return f"---\n{yaml_str}---\n{body}"

    @classmethod
    def article_properties(
        cls,
        article: Article,
        settings: FrontmatterSettings
    ) -> Dict[str, Optional[Any]]:
        """Compute values for each enabled property.

        None means "remove this property" (the article has no value).
        """
        values: Dict[str, Optional[Any]] = {
            'title': article.title or None,
            'author': article.author or None,
            'url': article.url or None,
            'pubdate': format_timestamp(article.published_at) if article.published_at else None,
            'date': format_timestamp(article.saved_at) if article.saved_at else None,
            'tags': [normalize_tag(t.name) for t in article.tags] if article.tags else None,
        }

        properties: Dict[str, Optional[Any]] = {}
        for name, prop in settings.items():
            if not prop.enabled or not prop.property_name:
                continue
            if name == 'source':
                properties[prop.property_name] = prop.value
            else:
                properties[prop.property_name] = values[name]
        return properties

    @classmethod
    def removable_properties(cls, settings: FrontmatterSettings) -> Set[str]:
        """Names of properties that may be stripped when disabled.

        A key is removable when it is known (a default or configured property
        name), not currently enabled, and not reserved by Obsidian.
        """
        defaults = FrontmatterSettings()

        enabled_names = {
            prop.property_name for _, prop in settings.items()
            if prop.enabled and prop.property_name
        }
        known_names = {
            prop.property_name for _, prop in defaults.items() + settings.items()
            if prop.property_name
        }
        return known_names - enabled_names - RESERVED_PROPERTIES

    @classmethod
    def apply_properties(
        cls,
        vault: Vault,
        file: NoteFile,
        article: Article,
        settings: FrontmatterSettings,
        remove_disabled: bool = False,
    ) -> bool:
        """Write the article's properties into a note's frontmatter.

        Existing keys keep their position; new keys are appended in settings
        order. The note is only rewritten when the frontmatter changed.

        Args:
            vault: Vault holding the note
            file: Note to update
            article: Article supplying the values
            settings: Property configuration
            remove_disabled: Also strip known properties that are disabled

        Returns:
            True if the note was rewritten

        Raises:
            FilesystemError: If the note cannot be read or written
            FrontmatterError: If the existing frontmatter is malformed
        """
        content = vault.read(file.path)
        frontmatter, body = cls.extract_frontmatter_and_content(content, file.path)
        updated = dict(frontmatter)

        for key, value in cls.article_properties(article, settings).items():
            if value is None:
                updated.pop(key, None)
            else:
                updated[key] = value

        if remove_disabled:
            for key in cls.removable_properties(settings) & set(updated):
                logger.debug(f"Removing disabled property '{key}' from {file.path}")
                del updated[key]

        if updated == frontmatter and list(updated) == list(frontmatter):
            return False

        vault.modify(file.path, cls.generate(updated, body))
        return True
