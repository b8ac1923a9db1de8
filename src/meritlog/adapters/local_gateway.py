"""In-process claim gateway running the workflow against the local store."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING

from meritlog.domain.listing import list_claims
from meritlog.domain.model import utcnow
from meritlog.domain.review import review_claim
from meritlog.domain.submission import submit_claim

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime
    from uuid import UUID

    from meritlog.config.evidence import EvidenceConfig
    from meritlog.domain.model import AchievementClaim, Actor, ClaimStatus, Decision
    from meritlog.domain.ports import BlobStore, ClaimUnitOfWork
    from meritlog.domain.review import ReviewOutcome
    from meritlog.domain.submission import SubmissionRequest


@dataclass(slots=True)
class LocalClaimGateway:
    """Bound to one verified actor; blocking store calls run in a worker thread."""

    actor: Actor
    unit_of_work_factory: Callable[[], ClaimUnitOfWork]
    blob_store: BlobStore
    evidence_limits: EvidenceConfig | None = None
    clock: Callable[[], datetime] = utcnow

    async def list_claims(
        self,
        status_filter: ClaimStatus | None = None,
    ) -> tuple[AchievementClaim, ...]:
        listing = await asyncio.to_thread(
            list_claims,
            self.actor,
            status_filter,
            unit_of_work_factory=self.unit_of_work_factory,
        )
        return listing.claims

    async def submit(self, request: SubmissionRequest) -> AchievementClaim:
        return await asyncio.to_thread(
            submit_claim,
            self.actor,
            request,
            unit_of_work_factory=self.unit_of_work_factory,
            blob_store=self.blob_store,
            evidence_limits=self.evidence_limits,
            now=self.clock,
        )

    async def review(
        self,
        claim_id: UUID,
        decision: Decision,
        comments: str | None = None,
    ) -> ReviewOutcome:
        return await asyncio.to_thread(
            review_claim,
            self.actor,
            claim_id,
            decision,
            comments,
            unit_of_work_factory=self.unit_of_work_factory,
            now=self.clock,
        )
