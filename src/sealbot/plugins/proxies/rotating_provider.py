"""Round-robin proxy rotation."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from sealbot.core.errors import UnsupportedProxyFormat
from sealbot.core.models.proxy import Proxy
from sealbot.core.wallet.loader import load_proxies

if TYPE_CHECKING:
    from sealbot.core.events.bus import EventBus

logger = structlog.get_logger(__name__)


class ProxyRotator:
    """
    Cycles through a fixed list of proxy entries.

    Entries are kept as raw strings and parsed on use; entries in an
    unsupported format are reported and skipped. The cursor persists for the
    lifetime of the rotator.
    """

    def __init__(self, entries: list[str], events: EventBus) -> None:
        """
        Initialize the rotator.

        Args:
            entries: Proxy descriptors in file order
            events: Event bus for reporting
        """
        self._entries = list(entries)
        self._events = events
        self._cursor = 0

    @classmethod
    def from_file(cls, path: Path | str | None, events: EventBus) -> ProxyRotator:
        """Load entries from a proxy list file; a missing file yields an empty rotator."""
        entries = load_proxies(path)
        if entries:
            events.success(f"Loaded {len(entries)} proxies from {path}")
        else:
            events.warn("No proxies loaded or found. Proceeding without proxies.")
        return cls(entries, events)

    def next(self) -> Proxy | None:
        """
        Return the next usable proxy.

        Unsupported entries are skipped, visiting each entry at most once per
        call.

        Returns:
            The next proxy, or None if none is configured or none is usable
        """
        for _ in range(len(self._entries)):
            entry = self._entries[self._cursor]
            self._cursor = (self._cursor + 1) % len(self._entries)
            try:
                proxy = Proxy.from_string(entry)
            except UnsupportedProxyFormat as e:
                self._events.warn(f"Unsupported proxy format skipped: {e.masked_entry}")
                continue
            self._events.debug(f"Using proxy: {proxy.masked_url}")
            return proxy

        if self._entries:
            logger.warning("No usable proxy entries", total=len(self._entries))
        return None
