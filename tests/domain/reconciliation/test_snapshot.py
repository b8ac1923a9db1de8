from __future__ import annotations

from meritlog.domain.model import ClaimStatus
from meritlog.domain.reconciliation import ClaimSnapshot, OptimisticOverlay
from tests.helpers.claims import BASE_TIME, decided, make_claim


def test_empty_snapshot_is_not_a_baseline() -> None:
    snapshot = ClaimSnapshot()

    assert not snapshot.loaded
    assert len(snapshot) == 0


def test_advance_replaces_wholesale() -> None:
    kept = make_claim("Kept", minutes=1)
    dropped = make_claim("Dropped", minutes=2)
    added = make_claim("Added", minutes=3)
    snapshot = ClaimSnapshot.from_claims([kept, dropped], fetched_at=BASE_TIME)

    advanced = snapshot.advance([kept, added], fetched_at=BASE_TIME)

    assert advanced.loaded
    assert [claim.title for claim in advanced] == ["Added", "Kept"]
    assert dropped.id not in advanced
    assert [claim.title for claim in snapshot] == ["Dropped", "Kept"]


def test_advance_never_moves_a_decided_claim_back_to_pending() -> None:
    claim = make_claim()
    verified = decided(claim, ClaimStatus.VERIFIED)
    snapshot = ClaimSnapshot.from_claims([verified], fetched_at=BASE_TIME)

    advanced = snapshot.advance([claim], fetched_at=BASE_TIME)

    assert advanced.get(claim.id) is verified


def test_with_status_filters_in_display_order() -> None:
    older = make_claim("Older", minutes=1)
    newer = make_claim("Newer", minutes=2)
    rejected = decided(make_claim("Rejected", minutes=3), ClaimStatus.REJECTED)
    snapshot = ClaimSnapshot.from_claims([older, rejected, newer])

    assert [claim.title for claim in snapshot.with_status(ClaimStatus.PENDING)] == [
        "Newer",
        "Older",
    ]


def test_overlay_projects_until_settled() -> None:
    claim = make_claim()
    verified = decided(claim, ClaimStatus.VERIFIED)
    snapshot = ClaimSnapshot.from_claims([claim], fetched_at=BASE_TIME)
    overlay = OptimisticOverlay()

    before_fetch = overlay.generation
    generation = overlay.apply(verified)

    assert overlay.project(snapshot).get(claim.id) is verified
    assert snapshot.get(claim.id) is claim

    overlay.settle(before_fetch)
    assert claim.id in overlay

    overlay.settle(generation)
    assert len(overlay) == 0
    assert overlay.project(snapshot) is snapshot
