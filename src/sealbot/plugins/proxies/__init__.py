"""Proxy providers."""

from sealbot.plugins.proxies.rotating_provider import ProxyRotator

__all__ = ["ProxyRotator"]
