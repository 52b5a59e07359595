"""Pretty output utilities using Rich.

Command results go to stdout verbatim; every diagnostic goes to stderr.
"""

from rich.console import Console
from rich.markup import escape
from rich.table import Table

console = Console()
err_console = Console(stderr=True, highlight=False)


def result(text: str) -> None:
    """Print a command result exactly as given."""
    console.print(text, markup=False, highlight=False, emoji=False, soft_wrap=True)


def error(message: str) -> None:
    """Print error message."""
    err_console.print(f"[bold red]✗[/] {escape(message)}")


def detail(message: str) -> None:
    """Print a dimmed diagnostic line."""
    err_console.print(f"  [dim]{escape(message)}[/]")


def create_table(title: str, columns: list[tuple[str, str]]) -> Table:
    """Create a styled table."""
    table = Table(title=title, show_header=True, header_style="bold magenta")
    for col_name, col_style in columns:
        table.add_column(col_name, style=col_style)
    return table
