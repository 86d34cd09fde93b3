"""Synchronous event bus for decoupled status and log reporting."""

from __future__ import annotations

import time
from collections import deque
from collections.abc import Callable
from dataclasses import asdict, dataclass, field, fields, replace
from typing import Any
from uuid import uuid4

import structlog

from sealbot.core.events.types import LogLevel

logger = structlog.get_logger(__name__)

DEFAULT_HISTORY_SIZE = 1000

# Type aliases for subscribers
LogHandler = Callable[["LogEvent"], None]
StatusHandler = Callable[["StatusSnapshot"], None]


@dataclass(frozen=True)
class LogEvent:
    """A single operator-facing log entry."""

    level: LogLevel
    message: str
    metadata: dict[str, Any] = field(default_factory=dict)
    timestamp: float = field(default_factory=time.time)
    id: str = field(default_factory=lambda: str(uuid4()))

    @property
    def icon(self) -> str:
        """Display icon for this event's level."""
        return self.level.icon

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "level": self.level.value,
            "message": self.message,
            "timestamp": self.timestamp,
            "icon": self.icon,
            "metadata": self.metadata,
        }


@dataclass(frozen=True)
class StatusSnapshot:
    """Run progress as seen by presentation layers."""

    loaded_wallet: str | None = None
    wallet_index: int = 0
    total_wallets: int = 0
    repetition: int = 0
    total_repetitions: int = 0
    active_bots: int = 0
    overall_status: str = "Idle"

    def merged(self, changes: dict[str, Any]) -> StatusSnapshot:
        """Return a new snapshot with the given fields replaced."""
        unknown = set(changes) - {f.name for f in fields(self)}
        if unknown:
            raise ValueError(f"Unknown status fields: {', '.join(sorted(unknown))}")
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)


class EventBus:
    """
    Publish/subscribe channel for log events and status snapshots.

    Notification is synchronous and ordered. A failing subscriber never
    prevents delivery to the others; its error is reported back onto the bus
    as a WARN event.
    """

    def __init__(self, history_size: int = DEFAULT_HISTORY_SIZE) -> None:
        """
        Initialize the event bus.

        Args:
            history_size: Number of most recent log events kept in history
        """
        if history_size < 1:
            raise ValueError("history_size must be at least 1")
        self._history: deque[LogEvent] = deque(maxlen=history_size)
        self._log_handlers: list[LogHandler] = []
        self._status_handlers: list[StatusHandler] = []
        self._status = StatusSnapshot()
        self._reporting_failure = False
        self._stats = {
            "events_emitted": 0,
            "status_updates": 0,
            "handlers_invoked": 0,
            "handler_errors": 0,
        }

    def subscribe(self, handler: LogHandler) -> Callable[[], None]:
        """
        Register a handler for every subsequent log event.

        Returns:
            Unsubscribe function
        """
        self._log_handlers.append(handler)
        return lambda: self._remove(self._log_handlers, handler)

    def subscribe_status(self, handler: StatusHandler) -> Callable[[], None]:
        """
        Register a handler for every subsequent status snapshot.

        Returns:
            Unsubscribe function
        """
        self._status_handlers.append(handler)
        return lambda: self._remove(self._status_handlers, handler)

    def emit(
        self,
        level: LogLevel | str,
        message: str,
        metadata: dict[str, Any] | None = None,
    ) -> LogEvent:
        """
        Record a log event and notify all log subscribers.

        Args:
            level: Event level
            message: Human readable message
            metadata: Optional structured context

        Returns:
            The emitted event
        """
        if isinstance(level, str):
            level = LogLevel.from_string(level)
        event = LogEvent(level=level, message=message, metadata=dict(metadata or {}))
        self._history.append(event)
        self._stats["events_emitted"] += 1
        self._notify(self._log_handlers, event)
        return event

    def publish_status(
        self,
        partial: dict[str, Any] | None = None,
        **changes: Any,
    ) -> StatusSnapshot:
        """
        Merge partial fields into the status snapshot and notify status subscribers.

        Returns:
            The new snapshot
        """
        merged = {**(partial or {}), **changes}
        self._status = self._status.merged(merged)
        self._stats["status_updates"] += 1
        self._notify(self._status_handlers, self._status)
        return self._status

    # Convenience methods for the individual levels

    def info(self, message: str, **metadata: Any) -> LogEvent:
        return self.emit(LogLevel.INFO, message, metadata)

    def success(self, message: str, **metadata: Any) -> LogEvent:
        return self.emit(LogLevel.SUCCESS, message, metadata)

    def warn(self, message: str, **metadata: Any) -> LogEvent:
        return self.emit(LogLevel.WARN, message, metadata)

    def wait(self, message: str, **metadata: Any) -> LogEvent:
        return self.emit(LogLevel.WAIT, message, metadata)

    def debug(self, message: str, **metadata: Any) -> LogEvent:
        return self.emit(LogLevel.DEBUG, message, metadata)

    def error(
        self,
        message: str,
        error: BaseException | str | None = None,
        **metadata: Any,
    ) -> LogEvent:
        """Emit an ERROR event, appending the error's details to the message."""
        if isinstance(error, BaseException):
            message = f"{message} | Error: {error}"
            metadata.setdefault("error_type", type(error).__name__)
        elif error:
            message = f"{message} | Details: {error}"
        return self.emit(LogLevel.ERROR, message, metadata)

    def _notify(self, handlers: list[Callable[[Any], None]], payload: Any) -> None:
        """Invoke each handler in registration order, isolating failures."""
        for handler in list(handlers):
            self._stats["handlers_invoked"] += 1
            try:
                handler(payload)
            except Exception as e:
                self._stats["handler_errors"] += 1
                self._report_handler_error(handler, e)

    def _report_handler_error(self, handler: Callable[..., Any], error: Exception) -> None:
        name = getattr(handler, "__name__", type(handler).__name__)
        logger.exception("Handler error", handler=name, error=str(error))
        # A handler that also fails on the WARN event must not recurse forever.
        if self._reporting_failure:
            return
        self._reporting_failure = True
        try:
            self.warn(
                f"Event subscriber {name} failed: {error}",
                handler=name,
                error_type=type(error).__name__,
            )
        finally:
            self._reporting_failure = False

    @staticmethod
    def _remove(handlers: list[Any], handler: Any) -> None:
        if handler in handlers:
            handlers.remove(handler)

    @property
    def history(self) -> list[LogEvent]:
        """Most recent log events, oldest first."""
        return list(self._history)

    @property
    def history_size(self) -> int:
        """Capacity of the history buffer."""
        return self._history.maxlen or 0

    @property
    def status(self) -> StatusSnapshot:
        """Current status snapshot."""
        return self._status

    @property
    def stats(self) -> dict[str, int]:
        """Get event bus statistics."""
        return self._stats.copy()


__all__ = ["EventBus", "LogEvent", "LogHandler", "LogLevel", "StatusHandler", "StatusSnapshot"]
