from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from meritlog.domain.model import ClaimStatus
from meritlog.domain.notifications import (
    REVIEW_QUEUE_URL,
    ClaimEvent,
    ClaimEventKind,
    Notification,
    NotificationInbox,
    NotificationLevel,
    derive_events,
    render_notification,
)
from tests.helpers.claims import BASE_TIME, decided, make_claim

if TYPE_CHECKING:
    from uuid import UUID

    from meritlog.domain.model import AchievementClaim


def _by_id(*claims: AchievementClaim) -> dict[UUID, AchievementClaim]:
    return {claim.id: claim for claim in claims}


def test_new_pending_claim_is_announced_to_reviewers_only() -> None:
    claim = make_claim()

    assert [event.kind for event in derive_events({}, _by_id(claim), reviewer=True)] == [
        ClaimEventKind.NEW_SUBMISSION
    ]
    assert derive_events({}, _by_id(claim), reviewer=False) == []


def test_new_claim_that_is_already_decided_is_not_announced() -> None:
    claim = make_claim(status=ClaimStatus.VERIFIED)

    assert derive_events({}, _by_id(claim), reviewer=True) == []


def test_transition_out_of_pending_yields_one_event() -> None:
    first = make_claim("First", minutes=0)
    second = make_claim("Second", minutes=1)
    previous = _by_id(first, second)
    current = _by_id(
        decided(second, ClaimStatus.REJECTED),
        decided(first, ClaimStatus.VERIFIED),
    )

    events = derive_events(previous, current, reviewer=False)

    assert [(event.kind, event.claim.title) for event in events] == [
        (ClaimEventKind.BECAME_VERIFIED, "First"),
        (ClaimEventKind.BECAME_REJECTED, "Second"),
    ]


def test_unchanged_claims_and_order_changes_yield_nothing() -> None:
    claims = [make_claim(f"Claim {index}", minutes=index) for index in range(3)]
    previous = _by_id(*claims)
    current = _by_id(*reversed(claims))

    assert derive_events(previous, current, reviewer=True) == []


def test_sequence_of_snapshots_emits_each_transition_once() -> None:
    claim = make_claim()
    verified = decided(claim, ClaimStatus.VERIFIED)
    snapshots = [_by_id(claim), _by_id(claim), _by_id(verified), _by_id(verified)]

    events = [
        event
        for before, after in zip(snapshots, snapshots[1:], strict=False)
        for event in derive_events(before, after, reviewer=False)
    ]

    assert [event.kind for event in events] == [ClaimEventKind.BECAME_VERIFIED]


def test_regression_and_removal_yield_nothing() -> None:
    claim = make_claim()
    verified = decided(claim, ClaimStatus.VERIFIED)

    assert derive_events(_by_id(verified), _by_id(claim), reviewer=True) == []
    assert derive_events(_by_id(claim), {}, reviewer=True) == []


def test_render_new_submission_for_reviewer() -> None:
    claim = make_claim("Chess champion")

    notification = render_notification(
        ClaimEvent(ClaimEventKind.NEW_SUBMISSION, claim), reviewer=True
    )

    assert notification.title == "New Achievement Submission"
    assert notification.message == (
        'Ada Student has submitted an achievement "Chess champion" for verification.'
    )
    assert notification.level is NotificationLevel.INFO
    assert notification.action_url == REVIEW_QUEUE_URL


def test_render_decisions_for_student() -> None:
    claim = make_claim("Chess champion")
    verified = render_notification(
        ClaimEvent(ClaimEventKind.BECAME_VERIFIED, decided(claim, ClaimStatus.VERIFIED)),
        reviewer=False,
    )
    rejected = render_notification(
        ClaimEvent(
            ClaimEventKind.BECAME_REJECTED,
            decided(claim, ClaimStatus.REJECTED, comments="Missing certificate"),
        ),
        reviewer=False,
    )

    assert verified.message == '"Chess champion" has been verified!'
    assert verified.level is NotificationLevel.SUCCESS
    assert rejected.message == '"Chess champion" was not approved: Missing certificate'
    assert rejected.level is NotificationLevel.ERROR


def _notice(title: str) -> Notification:
    return Notification(title=title, message=title, level=NotificationLevel.INFO)


def test_inbox_keeps_most_recent_entries_newest_first() -> None:
    inbox = NotificationInbox(limit=3, clock=lambda: BASE_TIME)
    for index in range(5):
        inbox.add(_notice(f"n{index}"))

    assert len(inbox) == 3
    assert [entry.notification.title for entry in inbox] == ["n4", "n3", "n2"]
    assert all(entry.received_at == BASE_TIME for entry in inbox)
    assert inbox.unread_count == 3


def test_inbox_read_tracking() -> None:
    inbox = NotificationInbox()
    first = inbox.add(_notice("first"))
    inbox.add(_notice("second"))
    inbox.add(_notice("third"))

    assert inbox.mark_read(first.id) is True
    assert inbox.unread_count == 2
    assert [entry.notification.title for entry in inbox.unread] == ["third", "second"]

    assert inbox.mark_all_read() == 2
    assert inbox.unread_count == 0
    assert inbox.mark_all_read() == 0


def test_inbox_ignores_evicted_entries() -> None:
    inbox = NotificationInbox(limit=1)
    evicted = inbox.add(_notice("old"))
    inbox.add(_notice("new"))

    assert inbox.mark_read(evicted.id) is False
    assert inbox.unread_count == 1


def test_inbox_rejects_non_positive_limit() -> None:
    with pytest.raises(ValueError, match="positive"):
        NotificationInbox(limit=0)
