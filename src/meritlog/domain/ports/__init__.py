"""Domain port definitions for adapters."""

from __future__ import annotations

from .blob_storage import BlobStore, StoredBlob
from .gateway import ClaimGateway
from .identity import IdentityProvider
from .persistence import ClaimRepository
from .unit_of_work import (
    ClaimRepositories,
    ClaimUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "BlobStore",
    "ClaimGateway",
    "ClaimRepositories",
    "ClaimRepository",
    "ClaimUnitOfWork",
    "IdentityProvider",
    "RepositoryCollection",
    "StoredBlob",
    "UnitOfWork",
]
