"""Exceptions raised while mapping articles to vault notes.

NoteMapperError is what the sync engine catches at the per-highlight
boundary: any subclass means "this note could not be handled" and the run
moves on to the next highlight. Note paths in messages are vault-relative,
exactly as the engine passed them in.
"""

from typing import Optional

from src.instapaper_client.errors import SyncError


class NoteMapperError(SyncError):
    """Base exception for failures local to the vault or its config."""
    pass


class FilesystemError(NoteMapperError):
    """Raised when reading or writing a vault path or config file fails.

    Attributes:
        path: Path as given by the caller (vault-relative for notes)
        operation: Short verb such as 'read', 'append' or 'create_directory'
        reason: Underlying OS message, if any
    """

    def __init__(self, path: str, operation: str, reason: Optional[str] = None):
        message = f"Could not {operation.replace('_', ' ')} '{path}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.path = path
        self.operation = operation
        self.reason = reason


class VaultPathError(FilesystemError):
    """Raised when a path cannot name a file inside the vault.

    Covers paths that escape the vault root and names the OS cannot
    represent (for example a title with an embedded NUL).
    """

    def __init__(self, path: str, reason: str):
        super().__init__(path, 'validate', reason)


class ConfigError(NoteMapperError):
    """Raised when config.yaml holds a value the sync cannot use."""

    def __init__(self, message: str, config_field: Optional[str] = None):
        if config_field:
            full_message = f"Invalid '{config_field}' in config: {message}"
        else:
            full_message = f"Invalid config: {message}"
        super().__init__(full_message)
        self.config_field = config_field
        self.original_message = message


class FrontmatterError(NoteMapperError):
    """Raised when a note's properties block is not a YAML mapping."""

    def __init__(self, note_path: str, message: str):
        super().__init__(f"Cannot update properties of '{note_path}': {message}")
        self.note_path = note_path
        self.message = message
