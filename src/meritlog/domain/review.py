"""Review handling: institution-scoped, compare-and-swap decisions."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from meritlog.domain.errors import Conflict, Forbidden, ValidationError
from meritlog.domain.model import Decision, utcnow

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime
    from uuid import UUID

    from meritlog.domain.model import AchievementClaim, Actor
    from meritlog.domain.ports import ClaimUnitOfWork

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ReviewOutcome:
    """Result of a review attempt.

    ``committed`` is False when the claim had already been decided; ``claim`` is
    then the authoritative state the caller should render instead.
    """

    claim: AchievementClaim
    committed: bool

    @property
    def conflict(self) -> bool:
        return not self.committed


def parse_decision(value: str) -> Decision:
    try:
        return Decision(value.strip().lower())
    except ValueError:
        allowed = ", ".join(member.value for member in Decision)
        raise ValidationError({"decision": f"must be one of: {allowed}"}) from None


def _normalize_comments(comments: str | None) -> str | None:
    if comments is None:
        return None
    stripped = comments.strip()
    return stripped or None


def review_claim(
    actor: Actor,
    claim_id: UUID,
    decision: Decision,
    comments: str | None = None,
    *,
    unit_of_work_factory: Callable[[], ClaimUnitOfWork],
    now: Callable[[], datetime] = utcnow,
) -> ReviewOutcome:
    """Apply ``decision`` to a pending claim of the reviewer's institution."""

    if not actor.can_review:
        raise Forbidden(f"Role {actor.role.value!r} cannot review achievements")

    with unit_of_work_factory() as uow:
        claims = uow.repositories.claims
        claim = claims.get(claim_id)
        if claim.institution != actor.institution:
            raise Forbidden("Institution mismatch")
        try:
            updated = claims.transition(
                claim_id,
                new_status=decision.outcome,
                reviewer_id=actor.actor_id,
                comments=_normalize_comments(comments),
                at=now(),
            )
        except Conflict as exc:
            log.info(
                "Review of claim %s by %s lost: already %s by %s",
                claim_id,
                actor.actor_id,
                exc.current.status.value,
                exc.current.reviewed_by,
            )
            uow.rollback()
            return ReviewOutcome(claim=exc.current, committed=False)
        uow.commit()

    log.info("Claim %s %s by %s", claim_id, updated.status.value, actor.actor_id)
    return ReviewOutcome(claim=updated, committed=True)
