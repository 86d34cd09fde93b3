"""Proxy data models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any
from urllib.parse import quote

from sealbot.core.errors import UnsupportedProxyFormat


class ProxyType(str, Enum):
    """Proxy scheme."""

    HTTP = "http"
    HTTPS = "https"

    @classmethod
    def from_string(cls, value: str) -> ProxyType:
        """Parse proxy type from string."""
        value = value.lower().strip()
        if value in ("http", ""):
            return cls.HTTP
        if value == "https":
            return cls.HTTPS
        raise ValueError(f"Unknown proxy type: {value}")


@dataclass(frozen=True)
class Proxy:
    """A parsed proxy endpoint."""

    host: str
    port: int
    username: str | None = None
    password: str | None = None
    proxy_type: ProxyType = ProxyType.HTTP

    @property
    def url(self) -> str:
        """Get proxy URL for HTTP clients, credentials percent-encoded."""
        auth = ""
        if self.username and self.password:
            auth = f"{quote(self.username, safe='')}:{quote(self.password, safe='')}@"
        return f"{self.proxy_type.value}://{auth}{self.host}:{self.port}"

    @property
    def masked_url(self) -> str:
        """Proxy URL with the credentials hidden, safe for logs."""
        auth = f"{quote(self.username or '', safe='')}:***@" if self.has_auth else ""
        return f"{self.proxy_type.value}://{auth}{self.host}:{self.port}"

    @property
    def has_auth(self) -> bool:
        """Check if proxy requires authentication."""
        return bool(self.username and self.password)

    @classmethod
    def from_string(cls, proxy_string: str) -> Proxy:
        """
        Parse proxy from one of the supported string formats.

        Supported formats:
        - host:port
        - host:port:user:pass
        - user:pass@host:port

        Each may carry an ``http://`` or ``https://`` prefix.

        Raises:
            UnsupportedProxyFormat: If the string matches none of them
        """
        raw = proxy_string
        proxy_string = proxy_string.strip()
        proxy_type = ProxyType.HTTP

        if "://" in proxy_string:
            protocol, proxy_string = proxy_string.split("://", 1)
            try:
                proxy_type = ProxyType.from_string(protocol)
            except ValueError as e:
                raise UnsupportedProxyFormat(raw) from e

        username = password = None
        if "@" in proxy_string:
            auth, hostport = proxy_string.rsplit("@", 1)
            auth_parts = auth.split(":")
            parts = hostport.split(":")
            if len(auth_parts) != 2 or len(parts) != 2:
                raise UnsupportedProxyFormat(raw)
            username, password = auth_parts
            host, port = parts
        else:
            parts = proxy_string.split(":")
            if len(parts) == 2:
                host, port = parts
            elif len(parts) == 4:
                host, port, username, password = parts
            else:
                raise UnsupportedProxyFormat(raw)

        if not host or not port.isdigit() or not 0 < int(port) < 65536:
            raise UnsupportedProxyFormat(raw)
        if username is not None and not (username and password):
            raise UnsupportedProxyFormat(raw)

        return cls(
            host=host,
            port=int(port),
            username=username,
            password=password,
            proxy_type=proxy_type,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary, without the password."""
        return {
            "host": self.host,
            "port": self.port,
            "proxy_type": self.proxy_type.value,
            "username": self.username,
            "has_auth": self.has_auth,
        }
