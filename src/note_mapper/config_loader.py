"""YAML configuration loading and validation.

This module handles loading and saving the notes configuration from YAML.
Every field has a default, so a partial (or empty) file is valid. Keys from
the plugin-era settings format are migrated to their current names on load.
"""

import logging
import os
from typing import Any, Dict, Optional
import yaml

from .errors import ConfigError, FilesystemError
from .models import FrontmatterSettings, NotesConfig, PropertyField

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Handles configuration file loading, validation, and saving.

    Configuration file structure:
        vault_path: "."
        notes_folder: "Instapaper Notes"
        sync_frequency: 0
        sync_on_start: true
        highlight_template: "{text} [↗]({link}) {blockId}\\n\\n{#note}{note}{/note}"
        applied_highlight_template: null
        max_consecutive_errors: 3
        frontmatter:
          author: {enabled: true, property_name: author}
          source: {enabled: false, property_name: source, value: instapaper}
    """

    # Plugin-era key -> current key
    LEGACY_KEYS = {
        'notesFolder': 'notes_folder',
        'notesFrequency': 'sync_frequency',
        'notesSyncOnStart': 'sync_on_start',
    }

    # Plugin-era keys holding secrets; dropped, credentials come from the environment
    LEGACY_SECRET_KEYS = {'token', 'account'}

    @classmethod
    def load(cls, config_path: str) -> NotesConfig:
        """Load and parse configuration from a YAML file.

        Args:
            config_path: Path to the YAML configuration file

        Returns:
            NotesConfig object with parsed configuration

        Raises:
            FilesystemError: If file cannot be read
            ConfigError: If configuration is invalid or malformed
        """
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except FileNotFoundError:
            raise FilesystemError(
                config_path,
                'read',
                'Configuration file not found'
            )
        except PermissionError:
            raise FilesystemError(
                config_path,
                'read',
                'Permission denied'
            )
        except OSError as e:
            raise FilesystemError(
                config_path,
                'read',
                str(e)
            )

        try:
            config_dict = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(
                f"Invalid YAML syntax: {str(e)}"
            )

        if config_dict is None:
            return NotesConfig()

        if not isinstance(config_dict, dict):
            raise ConfigError(
                f"Configuration must be a YAML dictionary, got {type(config_dict).__name__}"
            )

        return cls._parse_config(cls._migrate_legacy_keys(config_dict))

    @classmethod
    def save(cls, config_path: str, config: NotesConfig) -> None:
        """Save configuration to a YAML file.

        Args:
            config_path: Path to the YAML configuration file
            config: NotesConfig object to save

        Raises:
            FilesystemError: If file cannot be written
        """
        yaml_str = yaml.safe_dump(
            config.to_dict(),
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False
        )

        config_dir = os.path.dirname(config_path)
        if config_dir:
            try:
                os.makedirs(config_dir, exist_ok=True)
            except OSError as e:
                raise FilesystemError(
                    config_dir,
                    'create_directory',
                    str(e)
                )

        try:
            with open(config_path, 'w', encoding='utf-8') as f:
                f.write(yaml_str)
        except PermissionError:
            raise FilesystemError(
                config_path,
                'write',
                'Permission denied'
            )
        except OSError as e:
            raise FilesystemError(
                config_path,
                'write',
                str(e)
            )

    @classmethod
    def _migrate_legacy_keys(cls, config_dict: Dict[str, Any]) -> Dict[str, Any]:
        """Rename plugin-era keys. Current keys win when both are present."""
        migrated = dict(config_dict)

        for old_key, new_key in cls.LEGACY_KEYS.items():
            if old_key in migrated:
                value = migrated.pop(old_key)
                if new_key not in migrated:
                    logger.info(f"Migrating legacy config key '{old_key}' to '{new_key}'")
                    migrated[new_key] = value

        for secret_key in cls.LEGACY_SECRET_KEYS & set(migrated):
            logger.warning(
                f"Ignoring legacy config key '{secret_key}'; credentials are read from the environment"
            )
            migrated.pop(secret_key)

        if 'notesCursor' in migrated:
            migrated['legacy_cursor'] = migrated.pop('notesCursor')

        frontmatter = migrated.get('frontmatter')
        if isinstance(frontmatter, dict):
            for name, prop in frontmatter.items():
                if isinstance(prop, dict) and 'propertyName' in prop:
                    prop = dict(prop)
                    legacy_name = prop.pop('propertyName')
                    prop.setdefault('property_name', legacy_name)
                    frontmatter[name] = prop

        return migrated

    @classmethod
    def _parse_config(cls, config_dict: Dict[str, Any]) -> NotesConfig:
        """Parse and validate configuration dictionary.

        Raises:
            ConfigError: If configuration is invalid
        """
        defaults = NotesConfig()

        vault_path = cls._get_str(config_dict, 'vault_path', defaults.vault_path)
        notes_folder = cls._get_str(config_dict, 'notes_folder', defaults.notes_folder)
        highlight_template = cls._get_str(
            config_dict, 'highlight_template', defaults.highlight_template
        )

        applied = config_dict.get('applied_highlight_template')
        if applied is not None and not isinstance(applied, str):
            raise ConfigError(
                f"Field 'applied_highlight_template' must be a string, got {type(applied).__name__}",
                'applied_highlight_template'
            )

        sync_frequency = cls._get_int(config_dict, 'sync_frequency', defaults.sync_frequency)
        if sync_frequency < 0:
            raise ConfigError(
                f"Field 'sync_frequency' cannot be negative, got {sync_frequency}",
                'sync_frequency'
            )

        max_errors = cls._get_int(
            config_dict, 'max_consecutive_errors', defaults.max_consecutive_errors
        )
        if max_errors < 1:
            raise ConfigError(
                f"Field 'max_consecutive_errors' must be at least 1, got {max_errors}",
                'max_consecutive_errors'
            )

        sync_on_start = config_dict.get('sync_on_start', defaults.sync_on_start)
        if not isinstance(sync_on_start, bool):
            raise ConfigError(
                "Field 'sync_on_start' must be a boolean",
                'sync_on_start'
            )

        legacy_cursor: Optional[int] = None
        if config_dict.get('legacy_cursor') is not None:
            legacy_cursor = cls._get_int(config_dict, 'legacy_cursor', 0)

        return NotesConfig(
            vault_path=vault_path,
            notes_folder=notes_folder,
            sync_frequency=sync_frequency,
            sync_on_start=sync_on_start,
            highlight_template=highlight_template,
            applied_highlight_template=applied,
            max_consecutive_errors=max_errors,
            frontmatter=cls._parse_frontmatter(config_dict.get('frontmatter')),
            legacy_cursor=legacy_cursor,
        )

    @classmethod
    def _parse_frontmatter(cls, raw: Any) -> FrontmatterSettings:
        """Overlay configured properties on the default frontmatter settings."""
        settings = FrontmatterSettings()
        if raw is None:
            return settings

        if not isinstance(raw, dict):
            raise ConfigError("Field 'frontmatter' must be a dictionary", 'frontmatter')

        known = dict(settings.items())
        for name, prop in raw.items():
            if name not in known:
                raise ConfigError(
                    f"Unknown frontmatter property '{name}'",
                    f'frontmatter.{name}'
                )
            if not isinstance(prop, dict):
                raise ConfigError(
                    f"Frontmatter property '{name}' must be a dictionary",
                    f'frontmatter.{name}'
                )

            default = known[name]
            enabled = prop.get('enabled', default.enabled)
            if not isinstance(enabled, bool):
                raise ConfigError(
                    "Field 'enabled' must be a boolean",
                    f'frontmatter.{name}.enabled'
                )
            property_name = prop.get('property_name', default.property_name)
            value = prop.get('value', default.value)

            setattr(settings, name, PropertyField(
                enabled=enabled,
                property_name=str(property_name or '').strip(),
                value=None if value is None else str(value),
            ))

        return settings

    @staticmethod
    def _get_str(config_dict: Dict[str, Any], key: str, default: str) -> str:
        value = config_dict.get(key, default)
        if not isinstance(value, str):
            raise ConfigError(
                f"Field '{key}' must be a string, got {type(value).__name__}",
                key
            )
        if not value.strip():
            raise ConfigError(f"Field '{key}' cannot be empty", key)
        return value

    @staticmethod
    def _get_int(config_dict: Dict[str, Any], key: str, default: int) -> int:
        value = config_dict.get(key, default)
        if isinstance(value, bool):
            raise ConfigError(f"Field '{key}' must be an integer, got bool", key)
        try:
            return int(value)
        except (ValueError, TypeError):
            raise ConfigError(
                f"Field '{key}' must be an integer, got {type(value).__name__}",
                key
            )
