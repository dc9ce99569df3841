"""Main CLI entry point for instapaper-sync command.

This module provides the Typer application that serves as the entry point
for the instapaper-sync command-line tool. It uses options on the main command
rather than subcommands for a simpler user experience.
"""

import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer

from src.cli.errors import InitError
from src.cli.init_command import InitCommand
from src.cli.models import ExitCode
from src.cli.output import OutputHandler
from src.cli.sync_command import SyncCommand

__version__ = "0.1.0"

# Create Typer app - no_args_is_help=False allows running without args
app = typer.Typer(
    name="instapaper-sync",
    help="""Sync Instapaper highlights into Markdown notes.

QUICK START:
  instapaper-sync --init --vault <path>      # Initialize
  instapaper-sync                            # Sync new highlights
  instapaper-sync --update-notes             # Refresh existing notes
  instapaper-sync --every 30                 # Sync every 30 minutes""",
    add_completion=False,
    rich_markup_mode=None,
    no_args_is_help=False,
)

# Module logger
logger = logging.getLogger(__name__)

# Help message for when no arguments provided
GETTING_STARTED_MESSAGE = """instapaper-sync                              # Sync new highlights

--init --vault <path> [--folder <name>]      # Initialize
--update-notes                               # Refresh existing notes
--save-url <url>                             # Save an article to Instapaper
--verify                                     # Check credentials
--help                                       # Show all options

Credentials are read from INSTAPAPER_CONSUMER_KEY, INSTAPAPER_CONSUMER_SECRET,
INSTAPAPER_TOKEN_KEY and INSTAPAPER_TOKEN_SECRET (or a .env file)."""


def _configure_logging(verbosity: int, logdir: Optional[str] = None) -> None:
    """Configure logging based on verbosity level.

    Configures only the 'src' namespace logger to avoid affecting third-party
    libraries. The root logger is left unchanged.

    Args:
        verbosity: Verbosity level (0=WARNING, 1=INFO, 2=DEBUG)
        logdir: Optional directory for log files (creates timestamped log file)
    """
    if verbosity == 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:  # verbosity >= 2
        level = logging.DEBUG

    app_logger = logging.getLogger("src")
    app_logger.setLevel(level)

    log_format = "%(asctime)s [%(levelname)8s] %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter(log_format, datefmt=date_format)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    app_logger.addHandler(console_handler)

    if logdir:
        log_path = Path(logdir)
        log_path.mkdir(parents=True, exist_ok=True)

        # Timestamped filename in local time
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_path / f"instapaper-sync_{timestamp}.log"

        file_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        file_formatter = logging.Formatter(file_format, datefmt=date_format)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(file_formatter)
        app_logger.addHandler(file_handler)

        logger.info(f"Logging to file: {log_file}")


def _run_init(
    vault_path: str,
    notes_folder: Optional[str],
    verbosity: int,
    no_color: bool
) -> None:
    """Run initialization command."""
    _configure_logging(verbosity)
    output = OutputHandler(verbosity=verbosity, no_color=no_color)

    try:
        output.info("Initializing sync configuration...")
        output.info(f"  Vault: {vault_path}")

        init_cmd = InitCommand()
        config = init_cmd.run(vault_path=vault_path, notes_folder=notes_folder)

        output.success("Configuration initialized successfully")
        output.info(f"  Config file: {init_cmd.config_path}")
        output.info(f"  Notes folder: {config.notes_folder}")
        output.info("")
        output.info("Next steps:")
        output.info("  1. Put your Instapaper credentials in .env")
        output.info("  2. Run 'instapaper-sync' to start syncing")

        raise typer.Exit(ExitCode.SUCCESS)

    except InitError as e:
        logger.error(f"Initialization failed: {e}")
        output.error(f"Initialization failed: {e}")
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    except typer.Exit:
        raise

    except Exception as e:
        logger.exception("Unexpected error during initialization")
        output.error(f"Unexpected error: {e}")
        raise typer.Exit(ExitCode.GENERAL_ERROR)


@app.command()
def main_command(
    init: bool = typer.Option(
        False,
        "--init",
        help="Initialize sync configuration (requires --vault)",
    ),
    vault_path: Optional[str] = typer.Option(
        None,
        "--vault",
        help="Vault directory (used with --init)",
        metavar="PATH",
    ),
    notes_folder: Optional[str] = typer.Option(
        None,
        "--folder",
        help="Notes folder inside the vault (used with --init)",
        metavar="NAME",
    ),
    update_notes: bool = typer.Option(
        False,
        "--update-notes",
        help="Refresh properties and highlight formatting of existing notes",
    ),
    remove_disabled: bool = typer.Option(
        False,
        "--remove-disabled",
        help="Remove disabled properties from notes",
    ),
    save_url: Optional[str] = typer.Option(
        None,
        "--save-url",
        help="Save a URL to Instapaper",
        metavar="URL",
    ),
    verify: bool = typer.Option(
        False,
        "--verify",
        help="Check Instapaper credentials",
    ),
    every: Optional[int] = typer.Option(
        None,
        "--every",
        help="Repeat sync every N minutes (0 uses sync_frequency from config)",
        metavar="MINUTES",
    ),
    logdir: Optional[str] = typer.Option(
        None,
        "--logdir",
        help="Directory for log files (creates timestamped log file)",
    ),
    verbosity: int = typer.Option(
        0,
        "--verbosity",
        "-v",
        help="Verbosity level: 0=summary, 1=info, 2=debug",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
    ),
) -> None:
    """Sync Instapaper highlights into Markdown notes.

    \b
    QUICK START:
      instapaper-sync --init --vault ~/Notes       # Initialize
      instapaper-sync                              # Sync new highlights
      instapaper-sync --update-notes               # Refresh existing notes
      instapaper-sync --every 30                   # Sync every 30 minutes
      instapaper-sync --save-url <url>             # Save an article
    """
    if version:
        typer.echo(f"instapaper-sync version {__version__}")
        raise typer.Exit()

    if init or vault_path is not None:
        missing = []
        if not init:
            missing.append("--init")
        if vault_path is None:
            missing.append("--vault")

        if missing:
            typer.echo(f"Error: Missing required option(s): {', '.join(missing)}", err=True)
            typer.echo("")
            typer.echo("Example:")
            typer.echo("  instapaper-sync --init --vault ~/Notes --folder \"Instapaper Notes\"")
            raise typer.Exit(ExitCode.GENERAL_ERROR)

        _run_init(vault_path, notes_folder, verbosity, no_color)
        return

    if notes_folder is not None:
        typer.echo("Error: --folder is only valid with --init", err=True)
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    modes = [update_notes, save_url is not None, verify, every is not None]
    if sum(modes) > 1:
        typer.echo(
            "Error: --update-notes, --save-url, --verify and --every cannot be combined",
            err=True,
        )
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    # No options and no config: show getting started message
    if not any(modes) and not remove_disabled and logdir is None and verbosity == 0:
        if not os.path.exists(InitCommand.DEFAULT_CONFIG_PATH):
            typer.echo(GETTING_STARTED_MESSAGE)
            raise typer.Exit()

    _configure_logging(verbosity, logdir)
    output = OutputHandler(verbosity=verbosity, no_color=no_color)
    sync_cmd = SyncCommand(output_handler=output)

    if save_url is not None:
        exit_code = sync_cmd.save_url(save_url)
    elif verify:
        exit_code = sync_cmd.verify()
    elif every is not None:
        exit_code = sync_cmd.run_every(every or None, remove_disabled=remove_disabled)
    else:
        exit_code = sync_cmd.run(update_notes=update_notes, remove_disabled=remove_disabled)

    raise typer.Exit(exit_code)


def main() -> None:
    """Main entry point for the CLI application.

    This function is called when the module is executed directly or
    when the console script is invoked.
    """
    app()


# Allow running as: python -m src.cli.main
if __name__ == "__main__":
    main()
