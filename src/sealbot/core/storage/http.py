"""Proxied HTTP client construction."""

from __future__ import annotations

from collections.abc import Callable

import httpx

from sealbot import __version__

# Builds a fresh client for one request, routed through the given proxy URL
ClientFactory = Callable[[str | None, float], httpx.AsyncClient]

USER_AGENT = f"sealbot/{__version__}"


def create_http_client(proxy_url: str | None, timeout: float) -> httpx.AsyncClient:
    """Create an async HTTP client, optionally routed through a proxy."""
    return httpx.AsyncClient(
        proxy=proxy_url,
        timeout=httpx.Timeout(timeout),
        headers={"User-Agent": USER_AGENT},
        follow_redirects=True,
    )
