"""Storage layer - content acquisition and blob upload."""

from sealbot.core.storage.content import ContentResolver
from sealbot.core.storage.publisher import BlobReference, ProtocolError, decode_publisher_response
from sealbot.core.storage.uploader import BackoffPolicy, BlobUploadManager, UploadAttempt

__all__ = [
    "BackoffPolicy",
    "BlobReference",
    "BlobUploadManager",
    "ContentResolver",
    "ProtocolError",
    "UploadAttempt",
    "decode_publisher_response",
]
