from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

_console = Console()


def print_step(title: str) -> None:
    """Print a step header."""
    _console.rule(f"[bold blue]{escape(title)}[/]")


def print_success(message: str) -> None:
    _console.print(f"[bold green]SUCCESS:[/] {escape(message)}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    _console.print(f"[bold yellow]WARNING:[/] {escape(message)}")


def print_error(message: str, exit_code: Optional[int] = None) -> None:
    """Print an error message and optionally exit."""
    _console.print(f"[bold red]ERROR:[/] {escape(message)}")

    if exit_code is not None:
        raise SystemExit(exit_code)


def print_table(title: str, columns: List[str], rows: List[List[str]]) -> None:
    """Print a table with a title, or a placeholder line when there are no rows."""
    if not rows:
        _console.print(f"{title}: (No data)")
        return

    table = Table(title=title)
    for col in columns:
        table.add_column(col)
    for row in rows:
        table.add_row(*row)
    _console.print(table)
