"""Blob upload to interchangeable storage publishers with retry and backoff."""

from __future__ import annotations

import asyncio
import json
import random
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

import httpx
import structlog

from sealbot.core.errors import BlobUploadExhausted, NoPublishersConfigured, PublisherResponseError
from sealbot.core.models.chain import shorten
from sealbot.core.storage.http import ClientFactory, create_http_client
from sealbot.core.storage.publisher import (
    BlobReference,
    decode_publisher_response,
    publisher_name,
)

if TYPE_CHECKING:
    from sealbot.core.events.bus import EventBus
    from sealbot.plugins.proxies.rotating_provider import ProxyRotator

logger = structlog.get_logger(__name__)

DEFAULT_MAX_RETRIES = 5
DEFAULT_EPOCHS = 1
DEFAULT_TIMEOUT = 30.0

# Errors that fail a single attempt; anything else propagates immediately
ATTEMPT_ERRORS = (httpx.HTTPError, httpx.InvalidURL, PublisherResponseError, ValueError)


@dataclass(frozen=True)
class BackoffPolicy:
    """Exponential delay between attempts, bounded by a ceiling."""

    initial: float = 3.0
    multiplier: float = 2.0
    maximum: float = 30.0

    def __post_init__(self) -> None:
        if self.initial <= 0:
            raise ValueError("initial delay must be positive")
        if self.multiplier < 1:
            raise ValueError("multiplier must be at least 1")
        if self.maximum < self.initial:
            raise ValueError("maximum delay must not be lower than the initial delay")

    def delay_for(self, attempt: int) -> float:
        """Delay after the given failed attempt (1-based)."""
        return min(self.maximum, self.initial * self.multiplier ** (attempt - 1))


@dataclass(frozen=True)
class UploadAttempt:
    """Outcome of one upload attempt."""

    endpoint: str
    attempt: int
    succeeded: bool
    error: BaseException | None = None


class BlobUploadManager:
    """
    Uploads content to one of several storage publishers.

    The publisher order is shuffled once per upload; attempt ``a`` goes to
    ``shuffled[(a - 1) % len(shuffled)]`` through the next rotated proxy.
    """

    def __init__(
        self,
        publishers: Sequence[str],
        events: EventBus,
        *,
        proxies: ProxyRotator | None = None,
        max_retries: int = DEFAULT_MAX_RETRIES,
        backoff: BackoffPolicy | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        client_factory: ClientFactory = create_http_client,
        rng: random.Random | None = None,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    ) -> None:
        """
        Initialize the upload manager.

        Args:
            publishers: Publisher base URLs
            events: Event bus for reporting
            proxies: Optional proxy rotator, advanced once per attempt
            max_retries: Total number of attempts per upload
            backoff: Delay policy between attempts
            timeout: Per-request timeout in seconds
            client_factory: Builds the HTTP client for one attempt
            rng: Random source for the publisher shuffle
            sleep: Coroutine used for inter-attempt delays

        Raises:
            NoPublishersConfigured: If the publisher list is empty
        """
        publishers = [p for p in publishers if p]
        if not publishers:
            raise NoPublishersConfigured()
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")

        self._publishers = publishers
        self._events = events
        self._proxies = proxies
        self.max_retries = max_retries
        self.backoff = backoff or BackoffPolicy()
        self.timeout = timeout
        self._client_factory = client_factory
        self._rng = rng or random.Random()
        self._sleep = sleep
        self.last_attempts: list[UploadAttempt] = []

    @property
    def publishers(self) -> list[str]:
        return list(self._publishers)

    async def upload(self, content: bytes, epochs: int = DEFAULT_EPOCHS) -> str:
        """
        Upload content and return its blob id.

        Args:
            content: Raw bytes to store
            epochs: Number of storage epochs

        Returns:
            The blob id reported by the first publisher that accepts the upload

        Raises:
            BlobUploadExhausted: If every attempt failed
        """
        order = self._rng.sample(self._publishers, k=len(self._publishers))
        attempts: list[UploadAttempt] = []
        self.last_attempts = attempts
        last_error: BaseException | None = None

        self._events.info(
            f"Starting blob upload process ({len(content) / 1024:.2f} KB, {epochs} epochs)"
        )

        for attempt in range(1, self.max_retries + 1):
            index = (attempt - 1) % len(order)
            endpoint = order[index]
            name = publisher_name(endpoint, index)
            self._events.wait(
                f"Attempt {attempt}/{self.max_retries}: Uploading blob to {name}...",
                attempt=attempt,
                publisher=name,
            )

            try:
                reference = await self._put(endpoint, name, content, epochs)
            except ATTEMPT_ERRORS as e:
                last_error = e
                attempts.append(UploadAttempt(endpoint, attempt, succeeded=False, error=e))
                self._events.error(
                    f"Blob upload attempt {attempt} failed with {name} | {_describe(e)}",
                    attempt=attempt,
                    publisher=name,
                )
                if attempt < self.max_retries:
                    delay = self.backoff.delay_for(attempt)
                    self._events.wait(f"Retrying in {delay:g} seconds...", delay=delay)
                    await self._sleep(delay)
                continue

            attempts.append(UploadAttempt(endpoint, attempt, succeeded=True))
            logger.debug("Blob stored", publisher=name, shape=reference.shape.value)
            self._events.success(
                f"Blob uploaded successfully via {name}! Blob ID: {shorten(reference.blob_id)}",
                blob_id=reference.blob_id,
                publisher=name,
            )
            return reference.blob_id

        self._events.error(f"Blob upload failed after {self.max_retries} attempts.")
        raise BlobUploadExhausted(self.max_retries, last_error)

    async def _put(self, endpoint: str, name: str, content: bytes, epochs: int) -> BlobReference:
        proxy = self._proxies.next() if self._proxies else None
        async with self._client_factory(proxy.url if proxy else None, self.timeout) as client:
            response = await client.put(
                endpoint,
                params={"epochs": epochs},
                content=content,
                headers={"Content-Type": "application/octet-stream"},
            )
            response.raise_for_status()
            body = response.json()

        decoded = decode_publisher_response(body)
        if not isinstance(decoded, BlobReference):
            self._events.warn(f"Unexpected response structure from {name}: {_dump(body)}")
            raise PublisherResponseError(name, decoded.reason, body)
        self._events.debug(f"Blob {decoded.shape.value.replace('_', ' ')} by {name}.")
        return decoded


def _describe(error: BaseException) -> str:
    if isinstance(error, httpx.HTTPStatusError):
        return f"Status: {error.response.status_code}, Data: {_truncate(error.response.text)}"
    if isinstance(error, httpx.TransportError):
        return f"No response received. Network issue or timeout? ({type(error).__name__})"
    if isinstance(error, httpx.InvalidURL):
        return "Invalid publisher or proxy URL"
    return f"Error: {error}"


def _dump(body: object) -> str:
    try:
        return _truncate(json.dumps(body))
    except (TypeError, ValueError):
        return _truncate(repr(body))


def _truncate(text: str, limit: int = 200) -> str:
    return text if len(text) <= limit else f"{text[:limit]}..."
