"""Note mapper library for Instapaper highlight sync.

This package maps Instapaper articles to Markdown notes in a vault, keeps
their YAML frontmatter current and appends rendered highlights to them.
"""

from .highlight_sync import HighlightSync
from .models import (
    NoteFile,
    PropertyField,
    FrontmatterSettings,
    TemplateUpdate,
    SyncOptions,
    SyncResult,
    NotesConfig,
)
from .errors import (
    NoteMapperError,
    FilesystemError,
    VaultPathError,
    ConfigError,
    FrontmatterError,
)
from .config_loader import ConfigLoader
from .file_resolver import resolve_file
from .filesafe_converter import FilesafeConverter
from .frontmatter_handler import FrontmatterHandler, normalize_tag
from .vault import Vault, normalize_path

__all__ = [
    'HighlightSync',
    'NoteFile',
    'PropertyField',
    'FrontmatterSettings',
    'TemplateUpdate',
    'SyncOptions',
    'SyncResult',
    'NotesConfig',
    'NoteMapperError',
    'FilesystemError',
    'VaultPathError',
    'ConfigError',
    'FrontmatterError',
    'ConfigLoader',
    'resolve_file',
    'FilesafeConverter',
    'FrontmatterHandler',
    'normalize_tag',
    'Vault',
    'normalize_path',
]
