"""Role-scoped claim listing."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from meritlog.domain.errors import Forbidden
from meritlog.domain.model import ClaimStatus, Role

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from meritlog.domain.model import AchievementClaim, Actor
    from meritlog.domain.ports import ClaimUnitOfWork


def newest_first(claims: Iterable[AchievementClaim]) -> tuple[AchievementClaim, ...]:
    return tuple(sorted(claims, key=lambda claim: (claim.created_at, str(claim.id)), reverse=True))


@dataclass(frozen=True, slots=True)
class ClaimListing:
    """Claims visible to one actor, newest first."""

    claims: tuple[AchievementClaim, ...]
    institution: str | None = None

    def with_status(self, status: ClaimStatus) -> tuple[AchievementClaim, ...]:
        return tuple(claim for claim in self.claims if claim.status is status)

    @property
    def pending(self) -> tuple[AchievementClaim, ...]:
        return self.with_status(ClaimStatus.PENDING)

    @property
    def verified(self) -> tuple[AchievementClaim, ...]:
        return self.with_status(ClaimStatus.VERIFIED)

    @property
    def rejected(self) -> tuple[AchievementClaim, ...]:
        return self.with_status(ClaimStatus.REJECTED)


def list_claims(
    actor: Actor,
    status_filter: ClaimStatus | None = None,
    *,
    unit_of_work_factory: Callable[[], ClaimUnitOfWork],
) -> ClaimListing:
    """Students see their own claims; faculty, admins and institutions see their institution's."""

    with unit_of_work_factory() as uow:
        claims = uow.repositories.claims
        if actor.role is Role.STUDENT:
            owned = claims.list_by_student(actor.actor_id)
            if status_filter is not None:
                owned = [claim for claim in owned if claim.status is status_filter]
            return ClaimListing(claims=newest_first(owned))
        if actor.institution_scoped:
            if not actor.institution:
                raise Forbidden("Actor is not attached to an institution")
            scoped = claims.list_by_institution(actor.institution, status_filter)
            return ClaimListing(claims=newest_first(scoped), institution=actor.institution)
    raise Forbidden(f"Role {actor.role.value!r} cannot list achievements")
