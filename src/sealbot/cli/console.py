"""Rich console presentation of event bus traffic."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape

from sealbot.core.events.types import LogLevel

if TYPE_CHECKING:
    from sealbot.core.events.bus import EventBus, LogEvent, StatusSnapshot

LEVEL_STYLES: dict[LogLevel, str] = {
    LogLevel.INFO: "cyan",
    LogLevel.SUCCESS: "green",
    LogLevel.WARN: "yellow",
    LogLevel.ERROR: "bold red",
    LogLevel.WAIT: "magenta",
    LogLevel.DEBUG: "dim",
}


class ConsoleReporter:
    """Prints log events and status changes to a rich console."""

    def __init__(self, console: Console | None = None, show_debug: bool = False) -> None:
        self.console = console or Console()
        self.show_debug = show_debug
        self._last_status: tuple | None = None

    def attach(self, bus: EventBus) -> None:
        """Subscribe to both bus channels."""
        bus.subscribe(self.on_log)
        bus.subscribe_status(self.on_status)

    def on_log(self, event: LogEvent) -> None:
        if event.level == LogLevel.DEBUG and not self.show_debug:
            return
        ts = datetime.fromtimestamp(event.timestamp).strftime("%H:%M:%S")
        style = LEVEL_STYLES.get(event.level, "white")
        self.console.print(
            f"[dim]{ts}[/dim] {event.icon} [{style}]{escape(event.message)}[/{style}]"
        )

    def on_status(self, status: StatusSnapshot) -> None:
        key = (
            status.overall_status,
            status.wallet_index,
            status.repetition,
            status.active_bots,
        )
        if key == self._last_status:
            return
        self._last_status = key
        wallet = status.loaded_wallet or "-"
        self.console.print(
            f"[bold blue]Status:[/bold blue] {escape(status.overall_status)} | "
            f"Wallet {status.wallet_index}/{status.total_wallets} ({wallet}) | "
            f"Repetition {status.repetition}/{status.total_repetitions} | "
            f"Active: {status.active_bots}"
        )
