"""
Rich terminal output utilities for the lasso-unpack CLI.

Provides formatted status lines and tables, with a plain-text mode for
non-interactive use.
"""

from typing import Any, List, Optional
import sys

from rich.console import Console
from rich.markup import escape
from rich.table import Table


class RichOutputManager:
    """Manages terminal output with rich formatting or plain text."""

    def __init__(self, use_rich: bool = True, file: Optional[Any] = None):
        """Initialize the output manager."""
        self.use_rich = use_rich
        self.console = Console(
            file=file or sys.stdout,
            no_color=not use_rich,
            highlight=use_rich,
            markup=use_rich,
            soft_wrap=True,
        )

    def print_success(self, message: str) -> None:
        """Print a success message."""
        if self.use_rich:
            self.console.print(f"[green]✓[/green] {escape(message)}")
        else:
            self.console.print(f"✓ {message}")

    def print_warning(self, message: str) -> None:
        """Print a warning message."""
        if self.use_rich:
            self.console.print(f"[yellow]⚠[/yellow] {escape(message)}")
        else:
            self.console.print(f"⚠ {message}")

    def print_error(self, message: str) -> None:
        """Print an error message."""
        if self.use_rich:
            self.console.print(f"[red]✗[/red] {escape(message)}")
        else:
            self.console.print(f"✗ {message}")

    def create_table(self, title: str, columns: List[str]) -> Table:
        """Create a table with the given column headers."""
        table = Table(title=title, show_header=True, header_style="bold blue" if self.use_rich else None)
        for column in columns:
            table.add_column(column)
        return table

    def add_table_row(self, table: Table, *values) -> None:
        """Add a row to the table."""
        table.add_row(*[str(v) for v in values])

    def print_table(self, table: Table) -> None:
        """Print the table."""
        self.console.print(table)


# Global instance
rich_output = RichOutputManager()


def set_rich_enabled(enabled: bool) -> None:
    """Enable or disable rich output globally."""
    global rich_output
    rich_output = RichOutputManager(use_rich=enabled)


def get_rich_output() -> RichOutputManager:
    """Get the global rich output manager."""
    return rich_output
