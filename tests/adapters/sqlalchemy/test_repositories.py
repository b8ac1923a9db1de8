"""Tests for the SQLAlchemy claim repository."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import uuid4

import pytest
from sqlalchemy.exc import OperationalError

from meritlog.adapters.sqlalchemy.repositories import translate_storage_errors
from meritlog.domain.errors import Conflict, NotFound, TransientIOError
from meritlog.domain.model import ClaimStatus, EvidenceFile
from tests.helpers.claims import make_claim

if TYPE_CHECKING:
    from collections.abc import Callable

    from meritlog.adapters.sqlalchemy.unit_of_work import SqlAlchemyClaimUnitOfWork
    from meritlog.domain.model import AchievementClaim

type UnitOfWorkFactory = Callable[[], SqlAlchemyClaimUnitOfWork]


def _store(factory: UnitOfWorkFactory, *claims: AchievementClaim) -> None:
    with factory() as uow:
        for claim in claims:
            uow.repositories.claims.create(claim)
        uow.commit()


def test_create_and_get_round_trip_evidence(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    uploaded_at = datetime(2025, 3, 2, 10, 15, tzinfo=UTC)
    claim = make_claim()
    claim.evidence_files = (
        EvidenceFile("/uploads/e1.pdf", "cert.pdf", "application/pdf", 42, uploaded_at),
        EvidenceFile("/uploads/e2.png", "photo.png", "image/png", 7, uploaded_at),
    )
    _store(sqlite_unit_of_work, claim)

    with sqlite_unit_of_work() as uow:
        loaded = uow.repositories.claims.get(claim.id)

        assert loaded.title == claim.title
        assert loaded.status is ClaimStatus.PENDING
        assert loaded.submitted_at == claim.submitted_at
        assert loaded.submitted_at.tzinfo is not None
        assert [item.original_name for item in loaded.evidence_files] == ["cert.pdf", "photo.png"]
        assert loaded.evidence_files[0].uploaded_at == uploaded_at


def test_get_missing_claim_raises_not_found(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    with sqlite_unit_of_work() as uow, pytest.raises(NotFound):
        uow.repositories.claims.get(uuid4())


def test_listing_queries_are_scoped_and_newest_first(
    sqlite_unit_of_work: UnitOfWorkFactory,
) -> None:
    _store(
        sqlite_unit_of_work,
        make_claim("Old", minutes=0),
        make_claim("New", minutes=5),
        make_claim("Peer", student_id="student-2", minutes=3, status=ClaimStatus.VERIFIED),
        make_claim("Elsewhere", institution="south-college", minutes=4),
    )

    with sqlite_unit_of_work() as uow:
        claims = uow.repositories.claims
        assert [c.title for c in claims.list_by_student("student-1")] == ["New", "Old"]
        assert [c.title for c in claims.list_by_institution("north-college")] == [
            "New",
            "Peer",
            "Old",
        ]
        assert [
            c.title for c in claims.list_by_institution("north-college", ClaimStatus.VERIFIED)
        ] == ["Peer"]


def test_transition_applies_decision(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    claim = make_claim()
    _store(sqlite_unit_of_work, claim)
    decided_at = datetime(2025, 3, 5, 16, 0, tzinfo=UTC)

    with sqlite_unit_of_work() as uow:
        updated = uow.repositories.claims.transition(
            claim.id,
            new_status=ClaimStatus.REJECTED,
            reviewer_id="faculty-1",
            comments="No evidence attached",
            at=decided_at,
        )
        uow.commit()

    assert updated.status is ClaimStatus.REJECTED
    with sqlite_unit_of_work() as uow:
        stored = uow.repositories.claims.get(claim.id)
        assert stored.status is ClaimStatus.REJECTED
        assert stored.reviewed_by == "faculty-1"
        assert stored.reviewed_at == decided_at
        assert stored.review_comments == "No evidence attached"
        assert stored.updated_at == decided_at
        assert stored.title == claim.title


def test_interleaved_transitions_commit_exactly_one(
    sqlite_unit_of_work: UnitOfWorkFactory,
) -> None:
    claim = make_claim()
    _store(sqlite_unit_of_work, claim)

    with sqlite_unit_of_work() as first, sqlite_unit_of_work() as second:
        assert first.repositories.claims.get(claim.id).is_pending
        assert second.repositories.claims.get(claim.id).is_pending

        first.repositories.claims.transition(
            claim.id,
            new_status=ClaimStatus.VERIFIED,
            reviewer_id="faculty-1",
        )
        first.commit()

        with pytest.raises(Conflict) as excinfo:
            second.repositories.claims.transition(
                claim.id,
                new_status=ClaimStatus.REJECTED,
                reviewer_id="faculty-2",
            )
        second.rollback()

    current = excinfo.value.current
    assert current.status is ClaimStatus.VERIFIED
    assert current.reviewed_by == "faculty-1"

    with sqlite_unit_of_work() as uow:
        assert uow.repositories.claims.get(claim.id).reviewed_by == "faculty-1"


def test_transition_of_missing_claim_raises_not_found(
    sqlite_unit_of_work: UnitOfWorkFactory,
) -> None:
    with sqlite_unit_of_work() as uow, pytest.raises(NotFound):
        uow.repositories.claims.transition(
            uuid4(),
            new_status=ClaimStatus.VERIFIED,
            reviewer_id="faculty-1",
        )


def test_operational_errors_surface_as_transient() -> None:
    @translate_storage_errors
    def locked() -> None:
        raise OperationalError("UPDATE achievement_claim", {}, Exception("database is locked"))

    with pytest.raises(TransientIOError, match="database is locked"):
        locked()
