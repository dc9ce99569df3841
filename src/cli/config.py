"""State file loading and validation.

This module handles loading and saving sync state from YAML files. The state
file holds the highlight cursor, the only progress the sync engine needs.
"""

import os
from typing import Any, Dict, Optional
import yaml

from .errors import StateError, StateFilesystemError
from .models import SyncState


class StateManager:
    """Handles state file loading, validation, and saving.

    State file structure:
        cursor: 123456

    If the file is missing or empty, it's treated as a fresh state
    (never synced) with cursor=0.
    """

    DEFAULT_STATE_DIR = '.instapaper-sync'
    DEFAULT_STATE_FILE = 'state.yaml'

    @classmethod
    def load(cls, state_path: str) -> SyncState:
        """Load and parse state from a YAML file.

        Args:
            state_path: Path to the YAML state file

        Returns:
            SyncState object with parsed state

        Raises:
            StateFilesystemError: If file cannot be read (except FileNotFoundError)
            StateError: If state file is invalid or malformed
        """
        try:
            with open(state_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except FileNotFoundError:
            # Missing state file is normal for first sync
            return SyncState()
        except PermissionError:
            raise StateFilesystemError(
                state_path,
                'read',
                'Permission denied'
            )
        except OSError as e:
            raise StateFilesystemError(
                state_path,
                'read',
                str(e)
            )

        if not content.strip():
            return SyncState()

        try:
            state_dict = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise StateError(
                f"Invalid YAML syntax: {str(e)}",
                state_path=state_path
            )

        if state_dict is None:
            return SyncState()

        if not isinstance(state_dict, dict):
            raise StateError(
                f"State must be a YAML dictionary, got {type(state_dict).__name__}",
                state_path=state_path
            )

        return cls._parse_state(state_dict, state_path)

    @classmethod
    def save(cls, state_path: str, sync_state: SyncState) -> None:
        """Save state to a YAML file.

        The file is written to a temporary name and renamed into place so a
        crash never leaves a truncated cursor behind.

        Args:
            state_path: Path to the YAML state file
            sync_state: SyncState object to save

        Raises:
            StateFilesystemError: If file cannot be written
        """
        yaml_str = yaml.safe_dump(
            {'cursor': sync_state.cursor},
            default_flow_style=False,
            sort_keys=False
        )

        state_dir = os.path.dirname(state_path)
        if state_dir:
            try:
                os.makedirs(state_dir, exist_ok=True)
            except OSError as e:
                raise StateFilesystemError(
                    state_dir,
                    'create_directory',
                    str(e)
                )

        temp_path = f"{state_path}.tmp"
        try:
            with open(temp_path, 'w', encoding='utf-8') as f:
                f.write(yaml_str)
            os.replace(temp_path, state_path)
        except PermissionError:
            raise StateFilesystemError(
                state_path,
                'write',
                'Permission denied'
            )
        except OSError as e:
            raise StateFilesystemError(
                state_path,
                'write',
                str(e)
            )

    @classmethod
    def _parse_state(cls, state_dict: Dict[str, Any], state_path: Optional[str] = None) -> SyncState:
        """Parse and validate state dictionary.

        Raises:
            StateError: If state is invalid
        """
        cursor = state_dict.get('cursor', 0)
        if cursor is None:
            cursor = 0

        if isinstance(cursor, bool) or not isinstance(cursor, int):
            raise StateError(
                f"Field 'cursor' must be an integer, got {type(cursor).__name__}",
                'cursor',
                state_path
            )

        if cursor < 0:
            raise StateError(
                f"Field 'cursor' cannot be negative, got {cursor}",
                'cursor',
                state_path
            )

        return SyncState(cursor=cursor)
