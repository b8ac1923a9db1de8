"""Port for durable evidence storage."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True, slots=True)
class StoredBlob:
    """What blob storage hands back; only the reference is kept on the claim."""

    storage_ref: str
    mime_type: str
    size_bytes: int


@runtime_checkable
class BlobStore(Protocol):
    """Accepts an upload and returns an opaque reference to it.

    Implementations raise ``TransientIOError`` when storage is unavailable.
    """

    def put(self, *, original_name: str, mime_type: str, content: bytes) -> StoredBlob: ...
