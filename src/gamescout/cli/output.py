"""Rich output formatting helpers for the GameScout CLI.

Text-mode rendering only; JSON output is produced by the commands with
``json.dumps`` so it stays byte-for-byte stable.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from gamescout.discovery.models import Catalog, InstallRecord
from gamescout.service import DATE_FORMAT, DATETIME_FORMAT

console = Console()


def _hours(value: float | None) -> Text:
    if value is None:
        return Text("-", style="dim")
    return Text(f"{value:.1f}")


def _date(value: datetime | None, fmt: str = DATE_FORMAT) -> Text:
    if value is None:
        return Text("-", style="dim")
    return Text(value.strftime(fmt))


def _size(size_mb: int) -> str:
    if size_mb >= 1024:
        return f"{size_mb / 1024:.1f} GB"
    return f"{size_mb} MB"


def print_catalog(catalog: Catalog) -> None:
    """Print the discovered games as a table followed by a summary.

    Args:
        catalog: Result of one discovery run.
    """
    if not len(catalog):
        console.print("[dim]No installed games found.[/dim]")
        return

    table = Table(title="Installed Games", show_header=True, header_style="bold")
    table.add_column("Game", style="bold")
    table.add_column("Source", style="cyan")
    table.add_column("Size", justify="right")
    table.add_column("Hours", justify="right")
    table.add_column("Last Active", justify="center")
    table.add_column("Launchable", justify="center")

    for record in catalog:
        launchable = (
            Text("yes", style="green") if record.executable is not None
            else Text("no", style="red")
        )
        table.add_row(
            record.name,
            record.source.value,
            _size(record.size_mb),
            _hours(record.usage_hours),
            _date(record.last_active),
            launchable,
        )

    console.print(table)
    _print_summary(catalog)


def _print_summary(catalog: Catalog) -> None:
    """Print a one-line per-source summary after the catalog table."""
    parts = [f"[bold]{len(catalog)}[/bold] games"]
    parts.extend(f"{label}: {count}" for label, count in catalog.counts_by_source.items())
    console.print(" | ".join(parts))
    if catalog.cancelled:
        console.print("[yellow]Discovery was stopped early; results are partial.[/yellow]")


def print_record_detail(record: InstallRecord) -> None:
    """Print every field of one record in a panel.

    Args:
        record: The install to describe.
    """
    grid = Table.grid(padding=(0, 2))
    grid.add_column(style="bold")
    grid.add_column()
    grid.add_row("Source", record.source.value)
    grid.add_row("Install path", str(record.install_path))
    grid.add_row(
        "Executable",
        str(record.executable) if record.executable else Text("none found", style="red"),
    )
    grid.add_row("Installed", _date(record.install_date, DATETIME_FORMAT))
    grid.add_row("Size", _size(record.size_mb))
    grid.add_row("Last active", _date(record.last_active, DATETIME_FORMAT))
    grid.add_row("Hours", _hours(record.usage_hours))
    console.print(Panel(grid, title=record.name))


def print_sources(rows: list[dict[str, Any]]) -> None:
    """Print the source adapter table.

    Args:
        rows: One dict per adapter with ``priority``, ``key``, ``name``,
            ``enabled`` and ``description``.
    """
    table = Table(title="Sources (priority order)", show_header=True, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("Key", style="cyan")
    table.add_column("Source", style="bold")
    table.add_column("Enabled", justify="center")
    table.add_column("Looks at", style="dim")
    for row in rows:
        enabled = Text("yes", style="green") if row["enabled"] else Text("no", style="dim")
        table.add_row(str(row["priority"]), row["key"], row["name"], enabled, row["description"])
    console.print(table)
