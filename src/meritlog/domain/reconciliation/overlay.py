"""Provisional local mutations shown until an authoritative fetch supersedes them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID

    from meritlog.domain.model import AchievementClaim
    from meritlog.domain.reconciliation.snapshot import ClaimSnapshot


@dataclass(frozen=True, slots=True)
class OptimisticMutation:
    claim: AchievementClaim
    generation: int


class OptimisticOverlay:
    """Whole-claim replacements keyed by id, stamped with a generation counter.

    A fetch records the generation current when it was issued; once it lands,
    every mutation up to that generation is settled and dropped. Mutations made
    while the fetch was in flight survive until the next one.
    """

    def __init__(self) -> None:
        self._mutations: dict[UUID, OptimisticMutation] = {}
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    def __len__(self) -> int:
        return len(self._mutations)

    def __contains__(self, claim_id: object) -> bool:
        return claim_id in self._mutations

    def apply(self, claim: AchievementClaim) -> int:
        self._generation += 1
        self._mutations[claim.id] = OptimisticMutation(claim=claim, generation=self._generation)
        return self._generation

    def settle(self, through_generation: int) -> None:
        self._mutations = {
            claim_id: mutation
            for claim_id, mutation in self._mutations.items()
            if mutation.generation > through_generation
        }

    def project(self, snapshot: ClaimSnapshot) -> ClaimSnapshot:
        if not self._mutations:
            return snapshot
        return snapshot.replacing(mutation.claim for mutation in self._mutations.values())
