"""Terminal output handling using Rich library.

This module provides the OutputHandler class for all CLI terminal output.
Output goes to stderr so stdout can carry the generated Markdown. Supports
verbosity levels and the --no-color flag.
"""

from contextlib import contextmanager
from typing import Iterator

from rich.console import Console
from rich.live import Live
from rich.markup import escape
from rich.spinner import Spinner

from xaml_markdown.models.conversion_result import ConversionResult
from xaml_markdown.models.image_models import failure_summary


class OutputHandler:
    """Handles all terminal output using Rich library.

    Attributes:
        verbosity: Verbosity level (0=summary, 1=info, 2=debug)
        console: Rich Console writing to stderr

    Example:
        >>> handler = OutputHandler(verbosity=1, no_color=False)
        >>> handler.success("Converted note")
    """

    def __init__(self, verbosity: int = 0, no_color: bool = False):
        """Initialize output handler.

        Args:
            verbosity: Verbosity level (0=summary, 1=info, 2=debug)
            no_color: Disable color output if True
        """
        self.verbosity = verbosity
        self.console = Console(
            stderr=True,
            force_terminal=not no_color,
            no_color=no_color,
            highlight=False,
        )

    def success(self, message: str) -> None:
        """Display success message in green."""
        self.console.print(f"[green]✓[/green] {escape(message)}")

    def error(self, message: str) -> None:
        """Display error message in red."""
        self.console.print(f"[red]✗[/red] {escape(message)}", style="red")

    def warning(self, message: str) -> None:
        """Display warning message in yellow."""
        self.console.print(f"[yellow]⚠[/yellow] {escape(message)}", style="yellow")

    def info(self, message: str) -> None:
        """Display info message (only if verbosity >= 1)."""
        if self.verbosity >= 1:
            self.console.print(escape(message))

    def debug(self, message: str) -> None:
        """Display debug message (only if verbosity >= 2)."""
        if self.verbosity >= 2:
            self.console.print(f"[dim]{escape(message)}[/dim]")

    @contextmanager
    def spinner(self, message: str) -> Iterator[None]:
        """Display spinner while a single operation runs.

        Example:
            >>> with handler.spinner("Downloading images..."):
            ...     converter.convert(content)
        """
        spinner = Spinner("dots", text=message)
        with Live(spinner, console=self.console, refresh_per_second=10, transient=True):
            yield

    def print_conversion_summary(self, result: ConversionResult) -> None:
        """Display image statistics, failures and degradation warnings.

        Args:
            result: Conversion result for the note
        """
        stats = result.image_stats

        if result.degraded:
            self.warning("Formatting was lost: the note was converted as plain text")
        for failure in result.element_failures:
            self.warning(f"Conversion problem ({failure.failure_type.value}): {failure.error_message}")

        if stats.images_found == 0:
            return

        self.console.print("\n[bold]Image Summary:[/bold]")
        self.console.print(f"  Found: {stats.images_found}")
        if stats.images_downloaded > 0:
            self.console.print(
                f"  [green]↓[/green] Downloaded: {stats.images_downloaded} "
                f"({stats.total_image_size_mb:.2f} MB)"
            )
        if stats.images_reused > 0:
            self.console.print(f"  [blue]↺[/blue] Reused: {stats.images_reused}")
        if stats.image_downloads_failed > 0:
            self.console.print(f"  [red]✗[/red] Failed: {stats.image_downloads_failed}")

        if result.image_failures:
            summary = failure_summary(result.image_failures)
            self.console.print(
                f"\n[red]Unavailable images ({summary['total']}, "
                f"mostly {summary['most_common']}):[/red]"
            )
            for failure in result.image_failures:
                self.console.print(
                    f"  • {escape('[' + failure.failure_type.value + ']')} {escape(failure.url_preview)}: "
                    f"{escape(failure.error_message)}"
                )
