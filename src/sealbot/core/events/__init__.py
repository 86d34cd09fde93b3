"""Event system for decoupled status and log reporting."""

from sealbot.core.events.bus import EventBus, LogEvent, StatusSnapshot
from sealbot.core.events.handlers import StructlogHandler
from sealbot.core.events.types import LogLevel

__all__ = [
    "EventBus",
    "LogEvent",
    "LogLevel",
    "StatusSnapshot",
    "StructlogHandler",
]
