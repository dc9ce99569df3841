"""Command-line interface for Instapaper highlight sync.

This package provides the `instapaper-sync` CLI tool that runs the highlight
sync engine against a vault, with configuration, state persistence, progress
indication and error handling.
"""

from .sync_command import SyncCommand
from .init_command import InitCommand
from .models import ExitCode, SyncState
from .errors import (
    CLIError,
    ConfigNotFoundError,
    InitError,
    StateError,
    StateFilesystemError,
)

__all__ = [
    'SyncCommand',
    'InitCommand',
    'ExitCode',
    'SyncState',
    'CLIError',
    'ConfigNotFoundError',
    'InitError',
    'StateError',
    'StateFilesystemError',
]
