"""InitCommand for configuration initialization.

This module implements the --init command that creates the sync
configuration for a vault and makes sure the notes folder exists.
"""

import logging
import os
from typing import Optional

from src.note_mapper.config_loader import ConfigLoader
from src.note_mapper.errors import NoteMapperError
from src.note_mapper.models import NotesConfig
from src.note_mapper.vault import Vault, normalize_path
from .errors import InitError

logger = logging.getLogger(__name__)


class InitCommand:
    """Handles initialization of sync configuration.

    Example:
        >>> init = InitCommand()
        >>> init.run(vault_path="~/Notes", notes_folder="Reading/Instapaper")
    """

    # Default config file path
    DEFAULT_CONFIG_PATH = ".instapaper-sync/config.yaml"

    def __init__(self, config_path: Optional[str] = None):
        """Initialize the init command.

        Args:
            config_path: Optional config file path (defaults to .instapaper-sync/config.yaml)
        """
        self.config_path = config_path or self.DEFAULT_CONFIG_PATH

    def run(self, vault_path: str, notes_folder: Optional[str] = None) -> NotesConfig:
        """Create the sync configuration.

        Args:
            vault_path: Root directory of the vault
            notes_folder: Vault-relative folder for article notes

        Returns:
            The configuration that was written

        Raises:
            InitError: If initialization fails at any step
        """
        self._check_config_exists()

        vault_path = os.path.normpath(os.path.expanduser(vault_path))
        if not os.path.isdir(vault_path):
            raise InitError(f"Vault directory does not exist: {vault_path}", vault_path)

        config = NotesConfig(vault_path=vault_path)
        if notes_folder is not None:
            folder = normalize_path(notes_folder)
            if folder == '/':
                raise InitError("Notes folder cannot be the vault root", vault_path)
            config.notes_folder = folder

        self._create_notes_folder(Vault(vault_path), config.notes_folder)

        try:
            ConfigLoader.save(self.config_path, config)
            logger.info(f"Configuration saved to {self.config_path}")
        except NoteMapperError as e:
            raise InitError(f"Failed to save configuration: {str(e)}")

        return config

    def _check_config_exists(self) -> None:
        """Raise InitError if the config file already exists."""
        if os.path.exists(self.config_path):
            raise InitError(
                f"Configuration file already exists at {self.config_path}\n"
                "Please delete it first if you want to reinitialize."
            )

    def _create_notes_folder(self, vault: Vault, notes_folder: str) -> None:
        if vault.exists(notes_folder):
            return
        try:
            vault.create_folder(notes_folder)
            logger.info(f"Created notes folder: {notes_folder}")
        except NoteMapperError as e:
            raise InitError(f"Failed to create notes folder {notes_folder}: {str(e)}")
