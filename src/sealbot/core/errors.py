"""Error taxonomy.

Each error carries two policy flags read by the orchestrator:

- ``aborts_wallet``: the current wallet's remaining repetitions are skipped.
- ``aborts_run``: the whole run halts before (or instead of) processing wallets.

Everything else is contained at the repetition boundary.
"""

from __future__ import annotations

import re
from typing import Any


class SealBotError(Exception):
    """Base class for all sealbot errors."""

    aborts_wallet: bool = False
    aborts_run: bool = False


class InvalidCredentialFormat(SealBotError):
    """A wallet credential could not be turned into a signing identity."""

    aborts_wallet = True

    def __init__(self, hint: str, cause: BaseException | None = None) -> None:
        self.hint = hint
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"Invalid key/phrase format or derivation failed ({hint}){detail}")


class ChainRpcError(SealBotError):
    """The chain node answered with a JSON-RPC error payload."""

    def __init__(self, method: str, message: str, code: int | None = None) -> None:
        self.method = method
        self.code = code
        super().__init__(f"{method} failed: {message}")


class TransactionFailed(SealBotError):
    """A submitted transaction did not finish with an explicit success status."""

    def __init__(self, label: str, reason: str, digest: str | None = None) -> None:
        self.label = label
        self.reason = reason
        self.digest = digest
        super().__init__(f"Transaction failed: {label}: {reason}")


class ObjectIdResolutionFailed(SealBotError):
    """A creation transaction did not yield the expected owned/shared objects."""

    def __init__(self, label: str, missing: list[str]) -> None:
        self.label = label
        self.missing = missing
        super().__init__(f"Could not resolve {', '.join(missing)} after {label}")


class PublisherResponseError(SealBotError):
    """One upload attempt got a response that carries no usable blob id."""

    def __init__(self, publisher: str, reason: str, body: Any = None) -> None:
        self.publisher = publisher
        self.reason = reason
        self.body = body
        super().__init__(f"Invalid response from publisher {publisher}: {reason}")


class BlobUploadExhausted(SealBotError):
    """Every upload attempt failed; callers must not retry further."""

    def __init__(self, attempts: int, last_error: BaseException | None) -> None:
        self.attempts = attempts
        self.last_error = last_error
        last = str(last_error) if last_error else "Unknown error"
        super().__init__(
            f"Failed to upload blob after {attempts} attempts. Last error: {last}"
        )


class NoPublishersConfigured(SealBotError):
    """No storage publisher endpoints were configured."""

    aborts_run = True

    def __init__(self) -> None:
        super().__init__("No publisher URLs configured.")


class NoWalletsLoaded(SealBotError):
    """The wallet list is missing or holds no usable entries."""

    aborts_run = True

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        super().__init__(f"No wallets loaded from {path}: {reason}")


class UnsupportedProxyFormat(SealBotError, ValueError):
    """A proxy entry is in none of the supported textual shapes."""

    def __init__(self, entry: str) -> None:
        self.entry = entry
        super().__init__(
            f"Unsupported proxy format: {self.masked_entry}. "
            "Expected host:port, user:pass@host:port, or host:port:user:pass."
        )

    @property
    def masked_entry(self) -> str:
        """The entry cut at the first separator, so no credential is shown."""
        text = self.entry.strip().split("://", 1)[-1]
        head = re.split(r"[:@]", text, maxsplit=1)
        return head[0] if len(head) == 1 else f"{head[0]}:***"


class ContentNotFound(SealBotError):
    """The local content file does not exist."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Local image file not found at {path}. Please ensure it exists.")


class ContentUnavailable(SealBotError):
    """Content could not be fetched or read for a reason other than absence."""

    def __init__(self, source: str, cause: BaseException) -> None:
        self.source = source
        self.cause = cause
        super().__init__(f"Failed to load content from {source}: {cause}")
