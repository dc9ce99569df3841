"""Exceptions raised by the instapaper-sync command layer.

These cover the command's own files (config and cursor state) and the
--init flow. Engine and client failures keep their own types and are
mapped to exit codes in SyncCommand.
"""

from typing import Optional

from src.instapaper_client.errors import SyncError


class CLIError(SyncError):
    """Base exception for failures of the command itself."""
    pass


class ConfigNotFoundError(CLIError):
    """Raised when a command needs config.yaml before --init has created it."""

    def __init__(self, config_path: str):
        super().__init__(
            f"No configuration at {config_path}; "
            "run 'instapaper-sync --init --vault <path>' first"
        )
        self.config_path = config_path


class InitError(CLIError):
    """Raised when --init cannot set up the vault and config file."""

    def __init__(self, message: str, vault_path: Optional[str] = None):
        super().__init__(message)
        self.vault_path = vault_path


class StateError(CLIError):
    """Raised when the cursor state file does not hold a usable cursor.

    Attributes:
        state_field: Offending key, when one can be named
        state_path: State file the value came from, when known
    """

    def __init__(
        self,
        message: str,
        state_field: Optional[str] = None,
        state_path: Optional[str] = None,
    ):
        location = f" in {state_path}" if state_path else ""
        if state_field:
            full_message = f"Invalid '{state_field}'{location}: {message}"
        else:
            full_message = f"Invalid cursor state{location}: {message}"
        super().__init__(full_message)
        self.state_field = state_field
        self.state_path = state_path
        self.original_message = message


class StateFilesystemError(StateError):
    """Raised when the cursor state file cannot be read or written."""

    def __init__(self, state_path: str, operation: str, reason: Optional[str] = None):
        message = f"could not {operation.replace('_', ' ')} the state file"
        if reason:
            message += f" ({reason})"
        super().__init__(message, state_path=state_path)
        self.operation = operation
        self.reason = reason
