"""Core module - events, models, wallet, chain, storage and engine layers."""

from sealbot.core.errors import SealBotError
from sealbot.core.events.bus import EventBus, LogEvent, StatusSnapshot
from sealbot.core.events.types import LogLevel

__all__ = [
    "EventBus",
    "LogEvent",
    "LogLevel",
    "SealBotError",
    "StatusSnapshot",
]
