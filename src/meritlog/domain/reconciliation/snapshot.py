"""Immutable claim snapshots held by a dashboard."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from types import MappingProxyType
from typing import TYPE_CHECKING

from meritlog.domain.listing import newest_first

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping
    from datetime import datetime
    from uuid import UUID

    from meritlog.domain.model import AchievementClaim, ClaimStatus

log = getLogger(__name__)


def _freeze(claims: Iterable[AchievementClaim]) -> Mapping[UUID, AchievementClaim]:
    return MappingProxyType({claim.id: claim for claim in claims})


@dataclass(frozen=True, slots=True)
class ClaimSnapshot:
    """Claims keyed by id, plus when they were fetched.

    ``fetched_at`` is ``None`` until the first successful fetch; such a snapshot
    is not a baseline and is never diffed against.
    """

    claims: Mapping[UUID, AchievementClaim] = field(
        default_factory=lambda: MappingProxyType({})
    )
    fetched_at: datetime | None = None

    @classmethod
    def from_claims(
        cls,
        claims: Iterable[AchievementClaim],
        *,
        fetched_at: datetime | None = None,
    ) -> ClaimSnapshot:
        return cls(claims=_freeze(claims), fetched_at=fetched_at)

    @property
    def loaded(self) -> bool:
        return self.fetched_at is not None

    def __len__(self) -> int:
        return len(self.claims)

    def __contains__(self, claim_id: object) -> bool:
        return claim_id in self.claims

    def __iter__(self) -> Iterator[AchievementClaim]:
        return iter(self.ordered())

    def get(self, claim_id: UUID) -> AchievementClaim | None:
        return self.claims.get(claim_id)

    def ordered(self) -> tuple[AchievementClaim, ...]:
        return newest_first(self.claims.values())

    def with_status(self, status: ClaimStatus) -> tuple[AchievementClaim, ...]:
        return tuple(claim for claim in self.ordered() if claim.status is status)

    def advance(
        self,
        fetched: Iterable[AchievementClaim],
        *,
        fetched_at: datetime,
    ) -> ClaimSnapshot:
        """Supersede this snapshot with a fetched claim list.

        The fetched list replaces the held one wholesale, except that a claim
        already held in a terminal status never reverts to ``pending``.
        """

        merged: dict[UUID, AchievementClaim] = {}
        for claim in fetched:
            held = self.claims.get(claim.id)
            if held is not None and held.status.is_terminal and claim.is_pending:
                log.debug("Ignoring stale pending state for decided claim %s", claim.id)
                merged[claim.id] = held
                continue
            merged[claim.id] = claim
        return ClaimSnapshot(claims=MappingProxyType(merged), fetched_at=fetched_at)

    def replacing(self, claims: Iterable[AchievementClaim]) -> ClaimSnapshot:
        """Return a copy where each given claim replaces (or adds) its whole record."""

        merged = dict(self.claims)
        for claim in claims:
            merged[claim.id] = claim
        return ClaimSnapshot(claims=MappingProxyType(merged), fetched_at=self.fetched_at)
