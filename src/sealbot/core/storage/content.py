"""Resolution of upload content from bytes, URLs or local files."""

from __future__ import annotations

import re
from pathlib import Path
from typing import TYPE_CHECKING

import httpx

from sealbot.core.errors import ContentNotFound, ContentUnavailable
from sealbot.core.storage.http import ClientFactory, create_http_client

if TYPE_CHECKING:
    from sealbot.core.events.bus import EventBus
    from sealbot.plugins.proxies.rotating_provider import ProxyRotator

URL_PATTERN = re.compile(r"^https?://", re.IGNORECASE)

ContentSource = bytes | bytearray | str | Path


class ContentResolver:
    """Turns a content source into bytes: buffer, then URL, then local path."""

    def __init__(
        self,
        events: EventBus,
        *,
        proxies: ProxyRotator | None = None,
        base_dir: Path | str | None = None,
        timeout: float = 30.0,
        client_factory: ClientFactory = create_http_client,
    ) -> None:
        self._events = events
        self._proxies = proxies
        self._base_dir = Path(base_dir) if base_dir else Path.cwd()
        self.timeout = timeout
        self._client_factory = client_factory

    async def resolve(self, source: ContentSource) -> bytes:
        """
        Load the bytes for a content source.

        Raises:
            ContentNotFound: If a local file does not exist
            ContentUnavailable: If fetching or reading fails otherwise
            TypeError: If the source type is not supported
        """
        if isinstance(source, (bytes, bytearray)):
            return bytes(source)
        if isinstance(source, str) and URL_PATTERN.match(source):
            return await self.fetch(source)
        if isinstance(source, (str, Path)):
            return self.read_local(source)
        raise TypeError(f"Invalid content source: {type(source).__name__}")

    async def fetch(self, url: str) -> bytes:
        """Fetch content over HTTP through the next rotated proxy."""
        self._events.info(f"Fetching image from URL: {url}")
        proxy = self._proxies.next() if self._proxies else None
        try:
            async with self._client_factory(proxy.url if proxy else None, self.timeout) as client:
                response = await client.get(url)
                response.raise_for_status()
                data = response.content
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            self._events.error(f"Failed to fetch image from URL: {url}", e)
            raise ContentUnavailable(url, e) from e

        self._events.success(f"Image fetched successfully: {len(data) / 1024:.2f} KB")
        return data

    def read_local(self, path: Path | str) -> bytes:
        """Read content from a local file, relative paths against the base directory."""
        path = Path(path)
        if not path.is_absolute():
            path = self._base_dir / path
        self._events.info(f"Loading local image from: {path}")
        try:
            data = path.read_bytes()
        except FileNotFoundError as e:
            self._events.error(f"Failed to load local image: {path}", e)
            raise ContentNotFound(str(path)) from e
        except OSError as e:
            self._events.error(f"Failed to load local image: {path}", e)
            raise ContentUnavailable(str(path), e) from e

        self._events.success(f"Local image loaded successfully: {len(data) / 1024:.2f} KB")
        return data
