"""The achievement claim: a submission plus at most one review decision."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from meritlog.domain.errors import Conflict
from meritlog.domain.model.base import Entity, utcnow
from meritlog.domain.model.enums import AchievementCategory, ClaimStatus

if TYPE_CHECKING:
    from datetime import datetime


@dataclass(frozen=True, slots=True)
class EvidenceFile:
    """Reference to an uploaded evidence blob; the bytes live in blob storage."""

    storage_ref: str
    original_name: str
    mime_type: str
    size_bytes: int
    uploaded_at: datetime


@dataclass(eq=False, kw_only=True)
class AchievementClaim(Entity):
    """A student's evidence-backed claim awaiting (or carrying) a review decision.

    Identity, ownership, institution and submission content are write-once. The
    decision fields (``status``, ``reviewed_by``, ``reviewed_at``,
    ``review_comments``) change exactly once, when the claim leaves ``pending``.
    """

    student_id: str
    student_name: str
    student_email: str
    institution: str

    title: str
    description: str
    date: str
    category: AchievementCategory = AchievementCategory.OTHER
    evidence_files: tuple[EvidenceFile, ...] = ()

    status: ClaimStatus = ClaimStatus.PENDING
    reviewed_by: str | None = None
    reviewed_at: datetime | None = None
    review_comments: str | None = None

    submitted_at: datetime = field(default_factory=utcnow)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def __post_init__(self) -> None:
        self.evidence_files = tuple(self.evidence_files)
        reviewed = self.reviewed_by is not None and self.reviewed_at is not None
        if self.status.is_terminal != reviewed:
            raise ValueError("reviewed_by/reviewed_at must be set iff the claim is decided")

    @property
    def is_pending(self) -> bool:
        return self.status is ClaimStatus.PENDING

    def record_decision(
        self,
        status: ClaimStatus,
        *,
        reviewer_id: str,
        comments: str | None = None,
        at: datetime | None = None,
    ) -> None:
        """Move the claim out of ``pending``; any later attempt raises ``Conflict``."""

        if not status.is_terminal:
            raise ValueError("a decision must move the claim to a terminal status")
        if not self.is_pending:
            raise Conflict(self)
        decided_at = at or utcnow()
        self.status = status
        self.reviewed_by = reviewer_id
        self.reviewed_at = decided_at
        self.review_comments = comments
        self.updated_at = decided_at
