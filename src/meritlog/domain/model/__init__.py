"""Public domain model surface."""

from __future__ import annotations

from meritlog.domain.model.base import Entity, new_id, utcnow
from meritlog.domain.model.claim import AchievementClaim, EvidenceFile
from meritlog.domain.model.enums import (
    INSTITUTION_VIEW_ROLES,
    REVIEW_ROLES,
    AchievementCategory,
    ClaimStatus,
    Decision,
    Role,
)
from meritlog.domain.model.identity import Actor

__all__ = [
    "INSTITUTION_VIEW_ROLES",
    "REVIEW_ROLES",
    "AchievementCategory",
    "AchievementClaim",
    "Actor",
    "ClaimStatus",
    "Decision",
    "Entity",
    "EvidenceFile",
    "Role",
    "new_id",
    "utcnow",
]
