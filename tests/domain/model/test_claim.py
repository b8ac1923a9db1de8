from __future__ import annotations

import pytest

from meritlog.domain.errors import Conflict
from meritlog.domain.model import AchievementClaim, ClaimStatus, Decision, Role
from tests.helpers.claims import BASE_TIME, make_claim


def test_record_decision_sets_review_fields_once() -> None:
    claim = make_claim()

    claim.record_decision(ClaimStatus.VERIFIED, reviewer_id="faculty-1", at=BASE_TIME)

    assert claim.status is ClaimStatus.VERIFIED
    assert claim.reviewed_by == "faculty-1"
    assert claim.reviewed_at == BASE_TIME
    assert claim.updated_at == BASE_TIME

    with pytest.raises(Conflict) as excinfo:
        claim.record_decision(ClaimStatus.REJECTED, reviewer_id="faculty-2")

    assert excinfo.value.current is claim
    assert claim.status is ClaimStatus.VERIFIED
    assert claim.reviewed_by == "faculty-1"


def test_record_decision_rejects_pending_target() -> None:
    with pytest.raises(ValueError, match="terminal"):
        make_claim().record_decision(ClaimStatus.PENDING, reviewer_id="faculty-1")


def test_review_fields_must_match_status() -> None:
    with pytest.raises(ValueError, match="decided"):
        AchievementClaim(
            student_id="s",
            student_name="n",
            student_email="e",
            institution="i",
            title="t",
            description="d",
            date="2025-01-01",
            status=ClaimStatus.VERIFIED,
        )


def test_role_and_decision_helpers() -> None:
    assert Role.FACULTY.can_review
    assert Role.ADMIN.can_review
    assert not Role.INSTITUTION.can_review
    assert Role.INSTITUTION.sees_institution
    assert not Role.STUDENT.sees_institution
    assert Decision.VERIFY.outcome is ClaimStatus.VERIFIED
    assert Decision.REJECT.outcome is ClaimStatus.REJECTED
