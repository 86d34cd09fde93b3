"""Event level definitions."""

from __future__ import annotations

from enum import Enum


class LogLevel(str, Enum):
    """Levels of operator-facing log events."""

    INFO = "INFO"
    SUCCESS = "SUCCESS"
    WARN = "WARN"
    ERROR = "ERROR"
    WAIT = "WAIT"
    DEBUG = "DEBUG"

    @property
    def icon(self) -> str:
        """Display icon for the level."""
        return LEVEL_ICONS.get(self, DEFAULT_ICON)

    @classmethod
    def from_string(cls, value: str) -> LogLevel:
        """Parse a level name, case-insensitively."""
        value = value.strip().upper()
        if value == "WARNING":
            return cls.WARN
        return cls(value)


DEFAULT_ICON = "➡️"

LEVEL_ICONS: dict[LogLevel, str] = {
    LogLevel.INFO: "ℹ️",
    LogLevel.SUCCESS: "✅",
    LogLevel.WARN: "⚠️",
    LogLevel.ERROR: "🚨",
    LogLevel.WAIT: "⌛️",
    LogLevel.DEBUG: "🐞",
}
