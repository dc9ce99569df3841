"""Sync command orchestration for CLI.

This module provides the SyncCommand class that drives the highlight sync
engine from the command line. It loads configuration and state, builds the
Instapaper client and the vault, runs the engine, persists the cursor, and
translates failures into exit codes.
"""

import logging
import time
from pathlib import Path
from typing import Callable, Optional

from src.cli.config import StateManager
from src.cli.errors import CLIError, ConfigNotFoundError
from src.cli.models import ExitCode, SyncState
from src.cli.output import OutputHandler
from src.instapaper_client.api_wrapper import InstapaperAPI
from src.instapaper_client.auth import Authenticator, Credentials
from src.instapaper_client.errors import (
    APIAccessError,
    APIUnreachableError,
    InvalidCredentialsError,
    MissingCredentialsError,
    RateLimitError,
)
from src.note_mapper.config_loader import ConfigLoader
from src.note_mapper.errors import ConfigError, NoteMapperError
from src.note_mapper.highlight_sync import HighlightSync
from src.note_mapper.models import NotesConfig, SyncOptions, SyncResult, TemplateUpdate
from src.note_mapper.vault import Vault

logger = logging.getLogger(__name__)


class SyncCommand:
    """Orchestrates highlight sync for the CLI.

    The sync workflow:
        1. Load configuration and sync state
        2. Move a cursor left in a legacy config into the state file
        3. Load credentials and build the API client and sync engine
        4. Run an incremental sync (or a full note update)
        5. Persist the returned cursor (incremental sync only)
        6. Return appropriate exit code

    Example:
        >>> output = OutputHandler(verbosity=1)
        >>> sync_cmd = SyncCommand(output_handler=output)
        >>> exit_code = sync_cmd.run()
        >>> sys.exit(exit_code)
    """

    def __init__(
        self,
        config_path: str = ".instapaper-sync/config.yaml",
        state_path: str = ".instapaper-sync/state.yaml",
        state_manager: Optional[StateManager] = None,
        output_handler: Optional[OutputHandler] = None,
        authenticator: Optional[Authenticator] = None,
        api: Optional[InstapaperAPI] = None,
        engine: Optional[HighlightSync] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize sync command with dependencies.

        Args:
            config_path: Path to configuration YAML file
            state_path: Path to state YAML file
            state_manager: StateManager for state management (optional)
            output_handler: OutputHandler for terminal output (optional)
            authenticator: Authenticator for credentials (optional)
            api: Instapaper API client (optional)
            engine: HighlightSync engine (optional)
            sleep: Function used to wait between scheduled runs

        Note:
            All dependencies are optional to support testing. In production,
            they are created from the configuration on first use.
        """
        self.config_path = config_path
        self.state_path = state_path

        self.output_handler = output_handler or OutputHandler()
        self.state_manager = state_manager or StateManager()
        self.authenticator = authenticator
        self.api = api
        self.engine = engine
        self.sleep = sleep

        self.config: Optional[NotesConfig] = None
        self.credentials: Optional[Credentials] = None

    def run(self, update_notes: bool = False, remove_disabled: bool = False) -> ExitCode:
        """Execute one sync operation.

        Args:
            update_notes: If True, refresh all existing notes instead of
                syncing new highlights; the stored cursor is not changed
            remove_disabled: If True, strip disabled properties from notes

        Returns:
            ExitCode indicating success or specific failure type
        """
        def action() -> None:
            self._prepare()
            if update_notes:
                self._update_notes(remove_disabled)
            else:
                state = self.state_manager.load(self.state_path)
                self._sync_once(state, remove_disabled)

        return self._execute(action, "sync")

    def run_every(
        self,
        minutes: Optional[int] = None,
        remove_disabled: bool = False,
    ) -> ExitCode:
        """Repeat incremental sync on a fixed interval until interrupted.

        The same engine instance serves every run, so a run that is still in
        progress when the next one is due is reported and skipped.

        Args:
            minutes: Interval between runs (defaults to sync_frequency)
            remove_disabled: If True, strip disabled properties from notes

        Returns:
            ExitCode of the first failure, or SUCCESS when interrupted
        """
        def action() -> None:
            config = self._prepare()
            interval = minutes if minutes is not None else config.sync_frequency
            if interval <= 0:
                raise CLIError(
                    "Sync interval must be a positive number of minutes "
                    "(pass --every or set sync_frequency)"
                )

            self.output_handler.info(f"Syncing every {interval} minute(s); press Ctrl+C to stop")
            first = True
            try:
                while True:
                    if not first or config.sync_on_start:
                        state = self.state_manager.load(self.state_path)
                        self._sync_once(state, remove_disabled)
                    first = False
                    self.sleep(interval * 60)
            except KeyboardInterrupt:
                logger.info("Scheduled sync stopped")
                self.output_handler.info("Stopped")

        return self._execute(action, "scheduled sync")

    def save_url(self, url: str) -> ExitCode:
        """Save a URL to Instapaper.

        Args:
            url: Address of the article to save

        Returns:
            ExitCode indicating success or specific failure type
        """
        def action() -> None:
            api, credentials = self._get_api()
            article = api.add_bookmark(credentials.token, url)
            logger.info(f"Saved bookmark {article.id} for {url}")
            self.output_handler.success(f"Saved to Instapaper: {article.title or url}")

        return self._execute(action, "save")

    def verify(self) -> ExitCode:
        """Check the configured credentials and print the account name."""
        def action() -> None:
            api, credentials = self._get_api()
            account = api.verify_credentials(credentials.token)
            self.output_handler.success(f"Connected to Instapaper as {account.username}")

        return self._execute(action, "verify")

    def _execute(self, action: Callable[[], None], operation: str) -> ExitCode:
        """Run an action, translating exceptions to exit codes."""
        try:
            action()
            return ExitCode.SUCCESS

        except MissingCredentialsError as e:
            logger.error(f"Missing credentials: {e}")
            self.output_handler.error(str(e))
            self.output_handler.info(
                "Set INSTAPAPER_CONSUMER_KEY, INSTAPAPER_CONSUMER_SECRET, "
                "INSTAPAPER_TOKEN_KEY and INSTAPAPER_TOKEN_SECRET in the environment or .env"
            )
            return ExitCode.AUTH_ERROR

        except InvalidCredentialsError as e:
            logger.error(f"Authentication failed: {e}")
            self.output_handler.error(f"Authentication failed: {e}")
            return ExitCode.AUTH_ERROR

        except (APIUnreachableError, APIAccessError, RateLimitError) as e:
            logger.error(f"API error: {e}")
            self.output_handler.error(f"API error: {e}")
            self.output_handler.info("Check your internet connection and try again")
            return ExitCode.NETWORK_ERROR

        except (ConfigError, ConfigNotFoundError) as e:
            logger.error(f"Configuration error: {e}")
            self.output_handler.error(f"Configuration error: {e}")
            return ExitCode.GENERAL_ERROR

        except (CLIError, NoteMapperError) as e:
            logger.error(f"{operation.capitalize()} failed: {e}")
            self.output_handler.error(f"Error: {e}")
            return ExitCode.GENERAL_ERROR

        except Exception as e:
            logger.exception(f"Unexpected error during {operation}")
            self.output_handler.error(f"Unexpected error: {e}")
            return ExitCode.GENERAL_ERROR

    def _load_config(self) -> NotesConfig:
        if self.config is None:
            if not Path(self.config_path).exists():
                self.output_handler.print("No sync configuration found.\n")
                self.output_handler.print("To get started, initialize with your vault:\n")
                self.output_handler.print("  instapaper-sync --init --vault <path> [--folder <name>]\n")
                raise ConfigNotFoundError(self.config_path)

            logger.info(f"Loading configuration from {self.config_path}")
            self.config = ConfigLoader.load(self.config_path)
        return self.config

    def _prepare(self) -> NotesConfig:
        """Load config and state, migrate a legacy cursor, and build the engine."""
        config = self._load_config()
        self._migrate_legacy_cursor(config)

        if self.engine is None:
            api, _ = self._get_api()
            self.engine = HighlightSync(
                api,
                Vault(config.vault_path),
                config.notes_folder,
                frontmatter=config.frontmatter,
                highlight_template=config.highlight_template,
            )
        elif self.credentials is None:
            self._get_api()
        return config

    def _get_api(self):
        if self.credentials is None:
            if self.authenticator is None:
                self.authenticator = Authenticator()
            self.credentials = self.authenticator.get_credentials()
        if self.api is None:
            self.api = InstapaperAPI(
                self.credentials.consumer_key,
                self.credentials.consumer_secret,
            )
        return self.api, self.credentials

    def _migrate_legacy_cursor(self, config: NotesConfig) -> None:
        """Move a cursor found in a legacy config into the state file.

        The state file wins when it already holds progress.
        """
        if config.legacy_cursor is None:
            return

        state = self.state_manager.load(self.state_path)
        if state.cursor == 0 and config.legacy_cursor > 0:
            logger.info(f"Moving legacy cursor {config.legacy_cursor} into {self.state_path}")
            self.state_manager.save(self.state_path, SyncState(cursor=config.legacy_cursor))

        config.legacy_cursor = None
        ConfigLoader.save(self.config_path, config)

    def _sync_once(self, state: SyncState, remove_disabled: bool) -> SyncResult:
        config = self.config
        options = SyncOptions(
            remove_disabled_properties=remove_disabled,
            max_consecutive_errors=config.max_consecutive_errors,
        )

        logger.info(f"Syncing highlights after cursor {state.cursor}")
        with self.output_handler.spinner("Syncing Instapaper highlights..."):
            result = self.engine.sync(self.credentials.token, state.cursor, options)

        if result.cursor != state.cursor:
            self.state_manager.save(self.state_path, SyncState(cursor=result.cursor))
            logger.info(f"Saved cursor {result.cursor}")

        self.output_handler.print_summary(
            appended_count=result.count,
            rewritten_count=result.rewritten_count,
            failed_highlight_ids=result.failed_highlight_ids,
        )
        return result

    def _update_notes(self, remove_disabled: bool) -> SyncResult:
        config = self.config
        template_update = TemplateUpdate(
            from_template=config.applied_highlight_template,
            to_template=config.highlight_template,
        )
        options = SyncOptions(
            sync_highlights=False,
            remove_disabled_properties=remove_disabled,
            max_consecutive_errors=config.max_consecutive_errors,
        )

        with self.output_handler.spinner("Updating existing Instapaper notes..."):
            result = self.engine.update_existing_notes(
                self.credentials.token, template_update, options
            )

        # Blocks in notes the pass did not reach still use the old template.
        if not result.completed or result.failed_highlight_ids:
            logger.warning("Note update did not finish; keeping the previously applied template")
            self.output_handler.warning(
                "Not all notes were updated; run --update-notes again to finish"
            )
        elif config.applied_highlight_template != config.highlight_template:
            config.applied_highlight_template = config.highlight_template
            ConfigLoader.save(self.config_path, config)
            logger.info("Recorded applied highlight template")

        self.output_handler.print_summary(
            appended_count=result.count,
            rewritten_count=result.rewritten_count,
            failed_highlight_ids=result.failed_highlight_ids,
        )
        return result
