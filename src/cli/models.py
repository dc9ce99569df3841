"""Data models for CLI operations.

This module defines all data models used by the CLI module.
All models use dataclasses for clean, type-safe data structures,
following the patterns established in src/note_mapper/models.py.
"""

from dataclasses import dataclass
from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes for CLI operations.

    - SUCCESS (0): Operation completed (possibly with skipped notes)
    - GENERAL_ERROR (1): General error (config issues, validation failures)
    - AUTH_ERROR (3): Missing or rejected credentials
    - NETWORK_ERROR (4): Network connectivity or API availability issues

    Example:
        >>> exit_code = ExitCode.SUCCESS
        >>> sys.exit(exit_code)
    """
    SUCCESS = 0
    GENERAL_ERROR = 1
    AUTH_ERROR = 3
    NETWORK_ERROR = 4


@dataclass
class SyncState:
    """Sync progress tracked in .instapaper-sync/state.yaml.

    Attributes:
        cursor: ID of the last highlight fully processed (0 if never synced)

    Example:
        >>> state = SyncState(cursor=1234)
        >>> state = SyncState()  # Never synced
    """
    cursor: int = 0
