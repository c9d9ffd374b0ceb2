"""Base logger with shared rich components.

Provides reusable building blocks for component-specific loggers:
- StructuredBlock: Context manager for key-value style output
- BasePipelineLogger: Abstract base with common logging methods

All component loggers should inherit from BasePipelineLogger to ensure
consistent output.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Generator

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from discord_logger.utils.logging import console

if TYPE_CHECKING:
    from typing import Self


class StructuredBlock:
    """A context manager for displaying structured key-value info blocks.

    Usage:
        with logger.block("Discord Logger") as block:
            block.field("user", "logger#0001")
            block.field("api", "http://0.0.0.0:8080", color="cyan")
            block.result("synced 4 commands", success=True)

    Output:
        Discord Logger
            user: logger#0001
            api: http://0.0.0.0:8080
            ✓ synced 4 commands
    """

    def __init__(self, title: str, parent: "BasePipelineLogger") -> None:
        self.title = title
        self.console = parent.console

    def __enter__(self) -> "Self":
        self.console.print(f"\n[bold]{self.title}[/bold]")
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        return None

    def field(self, key: str, value: Any, color: str | None = None) -> None:
        """Add a key-value field to the block."""
        if color:
            self.console.print(f"    [dim]{key}:[/dim] [{color}]{value}[/{color}]")
        else:
            self.console.print(f"    [dim]{key}:[/dim] {value}")

    def result(self, message: str, success: bool = True) -> None:
        """Show the final result of the block."""
        icon = "[green]✓[/green]" if success else "[red]✗[/red]"
        self.console.print(f"    {icon} {message}")

    def skip(self, reason: str) -> None:
        """Show that this block was skipped."""
        self.console.print(f"    [dim]Skipped: {reason}[/dim]")


class BasePipelineLogger(ABC):
    """Abstract base class for component loggers.

    Provides common functionality:
    - Shared console instance
    - Standard logging methods (info, warning, error, debug, exception)
    - Structured block context manager
    - Summary panel

    Subclasses implement domain methods such as summary().
    """

    def __init__(self, logger_name: str | None = None) -> None:
        """Initialize the logger.

        Args:
            logger_name: Name for the Python logger. If None, uses the module name.
        """
        self.console: Console = console
        self._logger = logging.getLogger(logger_name or self.__class__.__module__)

    # -------------------------------------------------------------------------
    # Structured Block Context Manager
    # -------------------------------------------------------------------------

    @contextmanager
    def block(self, title: str) -> Generator[StructuredBlock, None, None]:
        """Create a structured block for key-value style output.

        Args:
            title: The title/header of the block

        Yields:
            StructuredBlock for adding fields and results
        """
        block = StructuredBlock(title, self)
        with block:
            yield block

    # -------------------------------------------------------------------------
    # Standard Logging (goes through Python logging)
    # -------------------------------------------------------------------------

    def info(self, message: str) -> None:
        """Log an info message."""
        self._logger.info(message)

    def warning(self, message: str) -> None:
        """Log a warning message."""
        self._logger.warning(message)

    def error(self, message: str) -> None:
        """Log an error message."""
        self._logger.error(message)

    def exception(self, message: str, exc: BaseException) -> None:
        """Log an error message together with the exception traceback."""
        self._logger.error(message, exc_info=exc)

    def debug(self, message: str) -> None:
        """Log a debug message."""
        self._logger.debug(message)

    def success(self, message: str) -> None:
        """Log a success message with green checkmark."""
        self.console.print(f"[green]✓[/green] {message}")

    # -------------------------------------------------------------------------
    # Summary Table Helper
    # -------------------------------------------------------------------------

    def _print_summary_table(
        self,
        title: str,
        rows: list[tuple[str, str | int]],
        *,
        style: str = "cyan",
    ) -> None:
        """Print a summary panel.

        Args:
            title: Panel title
            rows: List of (label, value) tuples
            style: Border color style (default: cyan)
        """
        self.console.print()

        table = Table.grid(padding=(0, 2))
        table.add_column("Metric", style="bold")
        table.add_column("Value", justify="right", style="green")

        for label, value in rows:
            if isinstance(value, int):
                table.add_row(label, f"{value:,}")
            else:
                table.add_row(label, str(value))

        panel = Panel(
            table,
            title=f"[bold]{title}[/bold]",
            border_style=style,
            padding=(1, 2),
        )
        self.console.print(panel)

    def print_summary(
        self,
        name: str,
        *,
        elapsed: float,
        stats: dict[str, int | str],
        style: str = "cyan",
    ) -> None:
        """Print a unified summary panel.

        Args:
            name: Name of the component being summarized
            elapsed: Time elapsed in seconds
            stats: Main statistics as {label: value}
            style: Border color style
        """
        rows: list[tuple[str, str | int]] = list(stats.items())
        rows.append(("Uptime", f"{elapsed:.1f}s"))

        self._print_summary_table(f"{name} Stopped", rows, style=style)

    @abstractmethod
    def summary(self, **kwargs: Any) -> None:
        """Print final summary. Implementation varies by component."""
        ...
