"""Data models for note mapper.

This module defines all data models used by the note mapper library.
All models use dataclasses for clean, type-safe data structures.
"""

from dataclasses import dataclass, field, fields
from typing import Dict, List, Optional

from src.highlight_renderer.renderer import DEFAULT_HIGHLIGHT_TEMPLATE


@dataclass(frozen=True)
class NoteFile:
    """A note inside the vault, identified by its normalized vault-relative path."""
    path: str

    @property
    def basename(self) -> str:
        name = self.path.rsplit('/', 1)[-1]
        return name[:-3] if name.endswith('.md') else name


@dataclass
class PropertyField:
    """Configuration of one frontmatter property.

    Attributes:
        enabled: Whether the property is written
        property_name: Frontmatter key to write
        value: Static value (only used by the 'source' property)
    """
    enabled: bool
    property_name: str
    value: Optional[str] = None


@dataclass
class FrontmatterSettings:
    """Per-property frontmatter configuration.

    Field order is the order in which properties are added to new notes.
    """
    title: PropertyField = field(default_factory=lambda: PropertyField(False, 'title'))
    author: PropertyField = field(default_factory=lambda: PropertyField(True, 'author'))
    url: PropertyField = field(default_factory=lambda: PropertyField(True, 'url'))
    pubdate: PropertyField = field(default_factory=lambda: PropertyField(True, 'published'))
    date: PropertyField = field(default_factory=lambda: PropertyField(True, 'saved'))
    tags: PropertyField = field(default_factory=lambda: PropertyField(True, 'tags'))
    source: PropertyField = field(
        default_factory=lambda: PropertyField(False, 'source', 'instapaper')
    )

    def items(self) -> List[tuple]:
        """(field name, PropertyField) pairs in declaration order."""
        return [(f.name, getattr(self, f.name)) for f in fields(self)]


@dataclass
class TemplateUpdate:
    """A change of highlight template to apply to existing notes.

    Attributes:
        from_template: Template the existing blocks were rendered with
                       (None when only the legacy format is known)
        to_template: Template to render with now
    """
    from_template: Optional[str]
    to_template: str


@dataclass
class SyncOptions:
    """Recognized options of a sync run.

    Attributes:
        create_files: Create the notes folder and missing notes
        sync_highlights: Append highlights; when False only metadata is refreshed
        sync_properties: Refresh frontmatter properties
        remove_disabled_properties: Also strip known properties that are disabled
        update_highlight_template: Enables the migration rewrite step
        max_consecutive_errors: Fetch failures in a row before giving up
    """
    create_files: bool = True
    sync_highlights: bool = True
    sync_properties: bool = True
    remove_disabled_properties: bool = False
    update_highlight_template: Optional[TemplateUpdate] = None
    max_consecutive_errors: int = 3


@dataclass
class SyncResult:
    """Best-effort outcome of a sync run.

    Attributes:
        cursor: Last highlight ID fully processed (persist this)
        count: Number of highlight blocks appended
        rewritten_count: Number of blocks rewritten by the template migration
        failed_highlight_ids: Highlights whose note could not be resolved or written
        completed: True only when the run walked the highlights up to an empty
                   page; False when it was skipped or stopped early
    """
    cursor: int
    count: int = 0
    rewritten_count: int = 0
    failed_highlight_ids: List[int] = field(default_factory=list)
    completed: bool = True


@dataclass
class NotesConfig:
    """Overall configuration with all fields defaulted at construction.

    Attributes:
        vault_path: Root directory of the vault
        notes_folder: Vault-relative folder for article notes
        sync_frequency: Minutes between scheduled syncs (0 = manual)
        sync_on_start: Run a sync when the scheduler starts
        highlight_template: Template for new highlight blocks
        applied_highlight_template: Template last applied to existing notes
                                    (None when notes use the legacy format)
        max_consecutive_errors: Fetch failures in a row before giving up
        frontmatter: Per-property frontmatter configuration
        legacy_cursor: Cursor found under a legacy config key on load; the
                       command layer moves it into the state file. Never saved.
    """
    vault_path: str = '.'
    notes_folder: str = 'Instapaper Notes'
    sync_frequency: int = 0
    sync_on_start: bool = True
    highlight_template: str = DEFAULT_HIGHLIGHT_TEMPLATE
    applied_highlight_template: Optional[str] = None
    max_consecutive_errors: int = 3
    frontmatter: FrontmatterSettings = field(default_factory=FrontmatterSettings)
    legacy_cursor: Optional[int] = None

    def to_dict(self) -> Dict:
        return {
            'vault_path': self.vault_path,
            'notes_folder': self.notes_folder,
            'sync_frequency': self.sync_frequency,
            'sync_on_start': self.sync_on_start,
            'highlight_template': self.highlight_template,
            'applied_highlight_template': self.applied_highlight_template,
            'max_consecutive_errors': self.max_consecutive_errors,
            'frontmatter': {
                name: _property_to_dict(prop) for name, prop in self.frontmatter.items()
            },
        }


def _property_to_dict(prop: PropertyField) -> Dict:
    data = {'enabled': prop.enabled, 'property_name': prop.property_name}
    if prop.value is not None:
        data['value'] = prop.value
    return data
