"""Proxy command implementation."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

from sealbot.core.errors import UnsupportedProxyFormat
from sealbot.core.models.proxy import Proxy
from sealbot.core.wallet.loader import load_proxies

if TYPE_CHECKING:
    from pathlib import Path

console = Console()


def run_proxy_command(action: str, file: Path) -> int:
    """Run proxy management commands."""
    if action == "list":
        return list_proxies(file)
    console.print(f"[red]Unknown action: {action}[/red]")
    console.print("Available actions: list")
    return 1


def list_proxies(file: Path) -> int:
    """Show every proxy entry with its parse result."""
    if not file.exists():
        console.print(f"[red]Proxy file not found: {file}[/red]")
        return 1

    entries = load_proxies(file)
    if not entries:
        console.print("[yellow]No proxies in file[/yellow]")
        return 0

    table = Table(title=f"Proxies ({file})")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Proxy", style="cyan")
    table.add_column("Type", style="green")
    table.add_column("Status")

    usable = 0
    for index, entry in enumerate(entries, start=1):
        try:
            proxy = Proxy.from_string(entry)
        except UnsupportedProxyFormat:
            table.add_row(str(index), "-", "-", "[red]unsupported[/red]")
            continue
        usable += 1
        table.add_row(str(index), proxy.masked_url, proxy.proxy_type.value, "[green]usable[/green]")

    console.print(table)
    console.print(f"[bold]{usable}/{len(entries)} usable[/bold]")
    return 0
