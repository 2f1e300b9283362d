"""Output formatters for CLI commands."""

import json
from typing import Any

from rich.console import Console
from rich.table import Table

from oauth1_gate.cli.config import OutputFormat

console = Console()
error_console = Console(stderr=True)


def mask(value: str, visible: int = 4) -> str:
    """Hide all but the last few characters of a secret."""
    if len(value) <= visible:
        return "*" * len(value)
    return "*" * (len(value) - visible) + value[-visible:]


def format_output(
    data: dict[str, Any],
    output_format: OutputFormat,
    *,
    title: str | None = None,
) -> None:
    """Print a flat mapping as a two-column table or as JSON."""
    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(data, default=str))
        return

    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("Setting")
    table.add_column("Value")
    for key, value in data.items():
        table.add_row(_snake_to_title(key), str(value))
    console.print(table)


def _snake_to_title(s: str) -> str:
    """Convert snake_case to Title Case for table headers."""
    return " ".join(word.capitalize() for word in s.split("_"))


def print_error(message: str) -> None:
    """Print an error message to stderr."""
    error_console.print(f"[red]Error:[/red] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]✓[/green] {message}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning:[/yellow] {message}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]i[/blue] {message}")
