from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from meritlog.adapters.local_gateway import LocalClaimGateway
from meritlog.domain.model import ClaimStatus, Decision, Role
from meritlog.domain.submission import EvidenceUpload, SubmissionRequest
from tests.helpers.claims import FakeBlobStore, make_actor

if TYPE_CHECKING:
    from collections.abc import Callable

    from meritlog.adapters.sqlalchemy.unit_of_work import SqlAlchemyClaimUnitOfWork


def test_local_gateways_share_the_store(
    sqlite_unit_of_work: Callable[[], SqlAlchemyClaimUnitOfWork],
) -> None:
    blob_store = FakeBlobStore()
    student = LocalClaimGateway(make_actor(Role.STUDENT), sqlite_unit_of_work, blob_store)
    faculty = LocalClaimGateway(make_actor(Role.FACULTY), sqlite_unit_of_work, blob_store)
    rival = LocalClaimGateway(
        make_actor(Role.ADMIN, actor_id="admin-1"), sqlite_unit_of_work, blob_store
    )

    async def scenario() -> None:
        claim = await student.submit(
            SubmissionRequest(
                title="Science fair",
                description="Gold medal",
                date="2025-01-30",
                category="academic",
                evidence=(EvidenceUpload("medal.jpg", "image/jpeg", b"jpeg"),),
            )
        )

        queue = await faculty.list_claims(ClaimStatus.PENDING)
        assert [item.id for item in queue] == [claim.id]

        won = await faculty.review(claim.id, Decision.VERIFY, "Confirmed with organiser")
        lost = await rival.review(claim.id, Decision.REJECT)

        assert won.committed
        assert lost.conflict
        assert lost.claim.status is ClaimStatus.VERIFIED
        assert lost.claim.reviewed_by == "faculty-1"

        (own,) = await student.list_claims()
        assert own.status is ClaimStatus.VERIFIED
        assert own.evidence_files[0].original_name == "medal.jpg"

    asyncio.run(scenario())
