"""Ports for persisting achievement claims."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from meritlog.domain.model import AchievementClaim, ClaimStatus

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID


@runtime_checkable
class ClaimRepository(Protocol):
    """Append-only claim store.

    Claims are created once and decided at most once; there is no delete and no
    general-purpose update. ``transition`` is a compare-and-swap on ``status``.
    """

    def create(self, claim: AchievementClaim) -> UUID: ...

    def get(self, claim_id: UUID) -> AchievementClaim:
        """Return the claim or raise ``NotFound``."""
        ...

    def list_by_student(self, student_id: str) -> list[AchievementClaim]: ...

    def list_by_institution(
        self,
        institution: str,
        status: ClaimStatus | None = None,
    ) -> list[AchievementClaim]: ...

    def transition(
        self,
        claim_id: UUID,
        *,
        new_status: ClaimStatus,
        reviewer_id: str,
        comments: str | None = None,
        expected_status: ClaimStatus = ClaimStatus.PENDING,
        at: datetime | None = None,
    ) -> AchievementClaim:
        """Apply the decision iff the stored status still equals ``expected_status``.

        Raises ``Conflict`` (carrying the stored claim, unmodified) when it does
        not, and ``NotFound`` when the claim does not exist.
        """
        ...
