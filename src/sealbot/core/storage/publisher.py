"""Decoding of publisher upload responses.

Publishers answer a successful upload with one of three shapes, tried in
priority order:

- ``{"newlyCreated": {"blobObject": {"blobId": ...}}}``
- ``{"alreadyCertified": {"blobId": ...}}``
- ``{"blobId": ...}``
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any
from urllib.parse import urlsplit


class ResponseShape(str, Enum):
    """Known success shapes of a publisher response."""

    NEWLY_CREATED = "newly_created"
    ALREADY_CERTIFIED = "already_certified"
    FLAT = "flat"


_SHAPE_PATHS: tuple[tuple[ResponseShape, tuple[str, ...]], ...] = (
    (ResponseShape.NEWLY_CREATED, ("newlyCreated", "blobObject", "blobId")),
    (ResponseShape.ALREADY_CERTIFIED, ("alreadyCertified", "blobId")),
    (ResponseShape.FLAT, ("blobId",)),
)


@dataclass(frozen=True)
class BlobReference:
    """A blob id extracted from a recognized response shape."""

    blob_id: str
    shape: ResponseShape


@dataclass(frozen=True)
class ProtocolError:
    """A response that matched no shape, or matched one without an id."""

    reason: str
    body: Any = None


PublisherResponse = BlobReference | ProtocolError


def _lookup(body: Any, path: tuple[str, ...]) -> Any:
    for key in path:
        if not isinstance(body, dict) or key not in body:
            return None
        body = body[key]
    return body


def decode_publisher_response(body: Any) -> PublisherResponse:
    """Decode a publisher response body into a blob reference or a protocol error."""
    matched_without_id = False
    for shape, path in _SHAPE_PATHS:
        container = _lookup(body, path[:-1])
        if not isinstance(container, dict) or path[-1] not in container:
            continue
        blob_id = container[path[-1]]
        if isinstance(blob_id, str) and blob_id:
            return BlobReference(blob_id=blob_id, shape=shape)
        matched_without_id = True

    if matched_without_id:
        return ProtocolError("Blob ID missing in response", body)
    return ProtocolError("Unexpected response structure", body)


def publisher_name(url: str, index: int) -> str:
    """Display name of a publisher: its host, or ``Publisher <n>``."""
    return urlsplit(url).netloc or f"Publisher {index + 1}"
