"""SQLAlchemy adapter package for meritlog."""

from __future__ import annotations

from .mappings import (
    achievement_claim_table,
    create_all_tables,
    mapper_registry,
    start_mappers,
)
from .repositories import SqlAlchemyClaimRepository
from .unit_of_work import (
    SqlAlchemyClaimUnitOfWork,
    StartupError,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyClaimRepository",
    "SqlAlchemyClaimUnitOfWork",
    "StartupError",
    "achievement_claim_table",
    "create_all_tables",
    "is_started",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
