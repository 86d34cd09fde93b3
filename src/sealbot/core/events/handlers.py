"""Event bus subscribers that are independent of any presentation layer."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from sealbot.core.events.types import LogLevel

if TYPE_CHECKING:
    from sealbot.core.events.bus import EventBus, LogEvent, StatusSnapshot

_LEVEL_METHODS: dict[LogLevel, str] = {
    LogLevel.DEBUG: "debug",
    LogLevel.INFO: "info",
    LogLevel.SUCCESS: "info",
    LogLevel.WAIT: "info",
    LogLevel.WARN: "warning",
    LogLevel.ERROR: "error",
}


class StructlogHandler:
    """Forwards bus traffic to structlog so it lands in the diagnostic log."""

    def __init__(self, min_level: LogLevel = LogLevel.DEBUG) -> None:
        """
        Initialize the handler.

        Args:
            min_level: Events below this level are not forwarded
        """
        self._logger = structlog.get_logger("sealbot.events")
        self._min_rank = _rank(min_level)

    def attach(self, bus: EventBus) -> None:
        """Subscribe to both bus channels."""
        bus.subscribe(self)
        bus.subscribe_status(self.on_status)

    def __call__(self, event: LogEvent) -> None:
        """Log the event."""
        if _rank(event.level) < self._min_rank:
            return
        log = getattr(self._logger, _LEVEL_METHODS[event.level])
        log(event.message, level_tag=event.level.value, event_id=event.id, **event.metadata)

    def on_status(self, status: StatusSnapshot) -> None:
        """Log a status snapshot at debug level."""
        self._logger.debug("Status updated", **status.to_dict())


def _rank(level: LogLevel) -> int:
    order = [LogLevel.DEBUG, LogLevel.INFO, LogLevel.WAIT, LogLevel.SUCCESS, LogLevel.WARN, LogLevel.ERROR]
    return order.index(level)
