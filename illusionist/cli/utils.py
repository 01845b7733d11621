"""
CLI utility functions for the Illusionist CLI.

Contains:
- The shared rich Console
- Display utilities (bar tables, schedule tables, error panels)
"""

from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..core.types import Bar


# Global Console
console = Console()

DEMO_DATA_NOTE = "This is demo data generated deterministically. Not real market prices."


def format_price(value: Decimal) -> str:
    """Two decimal places, thousands separators."""
    return f"{value:,.2f}"


def format_volume(value: Decimal) -> str:
    """Whole units, thousands separators."""
    return f"{value:,.0f}"


def build_bars_table(bars: Iterable[Bar], title: str) -> Table:
    """Table with one row per bar: Timestamp, Open, High, Low, Close, Volume."""
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("Timestamp", style="cyan")
    table.add_column("Open", justify="right")
    table.add_column("High", justify="right", style="green")
    table.add_column("Low", justify="right", style="red")
    table.add_column("Close", justify="right", style="bold")
    table.add_column("Volume", justify="right", style="dim")

    for bar in bars:
        table.add_row(
            bar.timestamp.strftime("%Y-%m-%d %H:%M:%S"),
            format_price(bar.open),
            format_price(bar.high),
            format_price(bar.low),
            format_price(bar.close),
            format_volume(bar.volume),
        )
    return table


def build_times_table(times: Iterable[datetime], title: str) -> Table:
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Bar Time", style="cyan")
    table.add_column("Weekday")

    for i, ts in enumerate(times, start=1):
        table.add_row(str(i), ts.strftime("%Y-%m-%d %H:%M"), ts.strftime("%A"))
    return table


def print_error(error_message: str, error_details: Optional[str] = None):
    """Print an error panel."""
    error_text = f"[bold red]{error_message}[/]"
    if error_details:
        error_text += f"\n\n[dim]{error_details}[/]"
    console.print(Panel(error_text, border_style="red", title="[bold red]ERROR[/]", padding=(1, 2)))
