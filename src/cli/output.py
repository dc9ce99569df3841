"""Terminal output handling using Rich library.

This module provides the OutputHandler class for all CLI terminal output.
Uses Rich library for spinners, colored output, and formatted text.
Supports verbosity levels and --no-color flag.
"""

from contextlib import contextmanager
from typing import Iterator, List, Optional

from rich.console import Console
from rich.live import Live
from rich.spinner import Spinner


class OutputHandler:
    """Handles all terminal output using Rich library.

    Provides methods for displaying messages, spinners, and sync summaries
    with color coding and verbosity level control.

    Attributes:
        verbosity: Verbosity level (0=summary, 1=info, 2=debug)
        console: Rich Console instance for output

    Example:
        >>> handler = OutputHandler(verbosity=1, no_color=False)
        >>> handler.success("Operation completed")
        >>> with handler.spinner("Fetching highlights..."):
        ...     pass
    """

    def __init__(self, verbosity: int = 0, no_color: bool = False):
        """Initialize output handler.

        Args:
            verbosity: Verbosity level (0=summary, 1=info, 2=debug)
            no_color: Disable color output if True
        """
        self.verbosity = verbosity
        self.console = Console(
            no_color=no_color,
            highlight=False,
        )

    def success(self, message: str) -> None:
        """Display success message in green."""
        self.console.print(f"[green]✓[/green] {message}")

    def error(self, message: str) -> None:
        """Display error message in red."""
        self.console.print(f"[red]✗[/red] {message}", style="red")

    def warning(self, message: str) -> None:
        """Display warning message in yellow."""
        self.console.print(f"[yellow]⚠[/yellow] {message}", style="yellow")

    def info(self, message: str) -> None:
        """Display info message (only if verbosity >= 1)."""
        if self.verbosity >= 1:
            self.console.print(message)

    def debug(self, message: str) -> None:
        """Display debug message (only if verbosity >= 2)."""
        if self.verbosity >= 2:
            self.console.print(f"[dim]{message}[/dim]")

    def print(self, message: str) -> None:
        """Display message without formatting."""
        self.console.print(message, markup=False)

    @contextmanager
    def spinner(self, message: str) -> Iterator[None]:
        """Display spinner while a single operation runs.

        Example:
            >>> with handler.spinner("Syncing highlights..."):
            ...     engine.sync(token, cursor)
        """
        spinner = Spinner("dots", text=message)
        with Live(spinner, console=self.console, refresh_per_second=10):
            yield

    def print_summary(
        self,
        appended_count: int = 0,
        rewritten_count: int = 0,
        failed_highlight_ids: Optional[List[int]] = None,
    ) -> None:
        """Display highlight sync summary with color coding.

        Args:
            appended_count: Number of highlights appended to notes
            rewritten_count: Number of highlight blocks rewritten in place
            failed_highlight_ids: Highlights whose note could not be updated
        """
        failed = failed_highlight_ids or []

        self.console.print(f"Updated {appended_count} Instapaper note(s)")

        if rewritten_count > 0:
            self.console.print(f"  [blue]↻[/blue] Rewritten: {rewritten_count} highlight(s)")

        if failed:
            self.console.print(f"  [red]✗[/red] Failed: {len(failed)} highlight(s)")
            if self.verbosity >= 1:
                ids = ", ".join(str(i) for i in failed)
                self.console.print(f"    [dim]{ids}[/dim]")
