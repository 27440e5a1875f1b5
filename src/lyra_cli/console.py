"""Console output utilities.

Usage:
    from lyra_cli.console import console, print_panel, print_success, print_error

    console.print("Hello world", style="bold")
    print_success("Operation completed")
    print_error("Something went wrong")
    print_panel("Title", "Content here")
"""

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

console = Console()


def print_success(message: str) -> None:
    """Print a success message (green checkmark)."""
    console.print(f"[green]✓[/green] {message}")


def print_error(message: str) -> None:
    """Print an error message (red X)."""
    console.print(f"[red]✗[/red] {message}")


def print_warning(message: str) -> None:
    """Print a warning message (yellow warning sign)."""
    console.print(f"[yellow]⚠[/yellow] {message}")


def print_info(message: str) -> None:
    """Print an info message (blue info sign)."""
    console.print(f"[blue]ℹ[/blue] {message}")


def print_panel(title: str, content: str, style: str = "blue") -> None:
    """Print content in a panel/box."""
    console.print(Panel(content, title=title, border_style=style))


def create_table(title: str = "") -> Table:
    """Create a rich Table, titled when a title is given."""
    return Table(title=title) if title else Table()


__all__ = [
    "console",
    "print_success",
    "print_error",
    "print_warning",
    "print_info",
    "print_panel",
    "create_table",
]
