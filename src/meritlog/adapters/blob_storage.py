"""Filesystem-backed evidence storage."""

from __future__ import annotations

import secrets
import time
from dataclasses import dataclass
from logging import getLogger
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING

from meritlog.domain.errors import TransientIOError
from meritlog.domain.ports.blob_storage import StoredBlob

log = getLogger(__name__)

DEFAULT_EXTENSION = ".bin"
PUBLIC_PREFIX = PurePosixPath("/uploads/achievements")


def _extension_for(original_name: str) -> str:
    suffix = PurePosixPath(original_name.replace("\\", "/")).suffix
    return suffix.lower() if suffix else DEFAULT_EXTENSION


@dataclass(slots=True)
class LocalBlobStore:
    """Writes each upload under ``root`` with a collision-resistant generated name."""

    root: Path

    def put(self, *, original_name: str, mime_type: str, content: bytes) -> StoredBlob:
        file_name = (
            f"evidence_{int(time.time() * 1000)}_{secrets.token_hex(6)}"
            f"{_extension_for(original_name)}"
        )
        target_dir = self.root / "achievements"
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            (target_dir / file_name).write_bytes(content)
        except OSError as exc:
            log.exception("Failed to store evidence %s", original_name)
            raise TransientIOError(f"Evidence storage unavailable: {exc}") from exc

        log.debug("Stored evidence %s as %s (%d bytes)", original_name, file_name, len(content))
        return StoredBlob(
            storage_ref=str(PUBLIC_PREFIX / file_name),
            mime_type=mime_type,
            size_bytes=len(content),
        )

    def resolve(self, storage_ref: str) -> Path:
        """Map a reference returned by ``put`` back to its file."""

        relative = PurePosixPath(storage_ref).relative_to(PUBLIC_PREFIX)
        if ".." in relative.parts:
            raise ValueError(f"Invalid storage reference: {storage_ref}")
        return self.root / "achievements" / relative


if TYPE_CHECKING:
    from meritlog.domain.ports.blob_storage import BlobStore

    _store_check: BlobStore = LocalBlobStore(Path())
