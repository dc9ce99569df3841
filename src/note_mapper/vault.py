"""Local filesystem vault.

Implements the storage contract the sync engine relies on (exists, folder
and file creation, read, append, modify, lookup) over a directory on disk.
All paths are vault-relative and normalized the way Obsidian normalizes them.
"""

import logging
import os
import re
import tempfile
import unicodedata
from typing import Optional

from .errors import FilesystemError, VaultPathError
from .models import NoteFile

logger = logging.getLogger(__name__)

# Maximum file size to read into memory (10MB)
MAX_FILE_SIZE = 10 * 1024 * 1024


def normalize_path(path: str) -> str:
    """Normalize a vault-relative path.

    - Backslashes and non-breaking spaces are converted
    - Repeated slashes are collapsed
    - Leading and trailing slashes are stripped
    - Unicode is NFC-normalized
    - An empty result becomes "/" (the vault root)

    Examples:
        >>> normalize_path("Instapaper Notes//Article.md")
        'Instapaper Notes/Article.md'
        >>> normalize_path("/notes/")
        'notes'
    """
    path = path.replace('\\', '/').replace('\u00a0', ' ').replace('\u202f', ' ')
    path = re.sub(r'/+', '/', path).strip('/')
    path = unicodedata.normalize('NFC', path)
    return path or '/'


class Vault:
    """A vault rooted at a directory on the local filesystem.

    Example:
        >>> vault = Vault("/home/me/notes")
        >>> vault.create_folder("Instapaper Notes")
        >>> note = vault.create_file("Instapaper Notes/Article.md", "")
        >>> vault.append(note.path, "> quote\\n\\n")
    """

    def __init__(self, root: str):
        """Initialize the vault.

        Args:
            root: Directory containing the vault
        """
        self.root = os.path.abspath(root)

    def _full_path(self, path: str) -> str:
        """Map a vault-relative path to an absolute one inside the vault.

        Raises:
            VaultPathError: If the path resolves outside the vault root or
                cannot be represented on this file system
        """
        normalized = normalize_path(path)
        full = self.root if normalized == '/' else os.path.join(self.root, normalized)

        try:
            real_base = os.path.realpath(self.root)
            real_path = os.path.realpath(full)
        except ValueError as e:
            raise VaultPathError(path, str(e))
        if not real_path.startswith(real_base + os.sep) and real_path != real_base:
            raise VaultPathError(
                path,
                f'Path traversal detected: {path} is outside vault {self.root}'
            )
        return full

    def exists(self, path: str) -> bool:
        return os.path.exists(self._full_path(path))

    def create_folder(self, path: str) -> None:
        full = self._full_path(path)
        try:
            os.makedirs(full, exist_ok=True)
        except OSError as e:
            raise FilesystemError(path, 'create_directory', str(e))
        logger.info(f"Created folder {normalize_path(path)}")

    def get_file_by_path(self, path: str) -> Optional[NoteFile]:
        """Return the note at path, or None if no regular file exists there."""
        if os.path.isfile(self._full_path(path)):
            return NoteFile(path=normalize_path(path))
        return None

    def create_file(self, path: str, content: str = '') -> NoteFile:
        """Create a new file; fails if it already exists.

        Raises:
            FilesystemError: If the file exists or cannot be written
        """
        full = self._full_path(path)
        try:
            with open(full, 'x', encoding='utf-8', newline='') as f:
                f.write(content)
        except FileExistsError:
            raise FilesystemError(path, 'create', 'File already exists')
        except (OSError, UnicodeEncodeError) as e:
            raise FilesystemError(path, 'create', str(e))
        logger.info(f"Created note {normalize_path(path)}")
        return NoteFile(path=normalize_path(path))

    def read(self, path: str) -> str:
        full = self._full_path(path)
        try:
            size = os.path.getsize(full)
            if size > MAX_FILE_SIZE:
                raise FilesystemError(
                    path,
                    'read',
                    f'File size ({size / (1024 * 1024):.2f} MB) exceeds maximum allowed size'
                )
            with open(full, 'r', encoding='utf-8', newline='') as f:
                return f.read()
        except UnicodeDecodeError as e:
            raise FilesystemError(path, 'read', f'Not valid UTF-8: {e}')
        except OSError as e:
            raise FilesystemError(path, 'read', str(e))

    def append(self, path: str, content: str) -> None:
        full = self._full_path(path)
        try:
            with open(full, 'a', encoding='utf-8', newline='') as f:
                f.write(content)
        except (OSError, UnicodeEncodeError) as e:
            raise FilesystemError(path, 'append', str(e))

    def modify(self, path: str, content: str) -> None:
        """Replace a file's content atomically (temp file + rename).

        Raises:
            FilesystemError: If the file cannot be written
        """
        full = self._full_path(path)
        directory = os.path.dirname(full)
        temp_path = None
        try:
            fd, temp_path = tempfile.mkstemp(dir=directory, prefix='.', suffix='.tmp')
            with os.fdopen(fd, 'w', encoding='utf-8', newline='') as f:
                f.write(content)
            os.replace(temp_path, full)
            temp_path = None
        except (OSError, UnicodeEncodeError) as e:
            raise FilesystemError(path, 'modify', str(e))
        finally:
            if temp_path and os.path.exists(temp_path):
                try:
                    os.remove(temp_path)
                except OSError as e:
                    logger.warning(f"Failed to remove temp file {temp_path}: {e}")
