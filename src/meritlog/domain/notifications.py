"""Derive semantic events from two consecutive claim snapshots.

The deriver is a pure function of its two inputs. Claims are matched by id, not
position, and only ``status`` is compared, so a claim yields at most one event
per diff and an unchanged claim yields none. Reviewers additionally learn about
ids that appear as ``pending``; submitters already know about their own
submissions.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING
from uuid import uuid4

from meritlog.domain.model import ClaimStatus, utcnow

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Mapping
    from datetime import datetime
    from uuid import UUID

    from meritlog.domain.model import AchievementClaim

REVIEW_QUEUE_URL = "/dashboard/faculty?tab=achievements"
STUDENT_ACHIEVEMENTS_URL = "/dashboard/student?tab=achievements"
INBOX_LIMIT = 50


class ClaimEventKind(StrEnum):
    NEW_SUBMISSION = "new_submission"
    BECAME_VERIFIED = "became_verified"
    BECAME_REJECTED = "became_rejected"


class NotificationLevel(StrEnum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class ClaimEvent:
    kind: ClaimEventKind
    claim: AchievementClaim


@dataclass(frozen=True, slots=True)
class Notification:
    title: str
    message: str
    level: NotificationLevel
    action_url: str | None = None


_TERMINAL_EVENTS = {
    ClaimStatus.VERIFIED: ClaimEventKind.BECAME_VERIFIED,
    ClaimStatus.REJECTED: ClaimEventKind.BECAME_REJECTED,
}


def derive_events(
    previous: Mapping[UUID, AchievementClaim],
    current: Mapping[UUID, AchievementClaim],
    *,
    reviewer: bool,
) -> list[ClaimEvent]:
    events: list[ClaimEvent] = []
    for claim_id, claim in current.items():
        before = previous.get(claim_id)
        if before is None:
            if reviewer and claim.status is ClaimStatus.PENDING:
                events.append(ClaimEvent(ClaimEventKind.NEW_SUBMISSION, claim))
            continue
        if before.status is claim.status or before.status.is_terminal:
            continue
        events.append(ClaimEvent(_TERMINAL_EVENTS[claim.status], claim))
    events.sort(key=lambda event: (event.claim.submitted_at, str(event.claim.id)))
    return events


def render_notification(event: ClaimEvent, *, reviewer: bool) -> Notification:
    claim = event.claim
    match event.kind:
        case ClaimEventKind.NEW_SUBMISSION:
            return Notification(
                title="New Achievement Submission",
                message=(
                    f'{claim.student_name} has submitted an achievement "{claim.title}"'
                    " for verification."
                ),
                level=NotificationLevel.INFO,
                action_url=REVIEW_QUEUE_URL,
            )
        case ClaimEventKind.BECAME_VERIFIED if reviewer:
            return Notification(
                title="Achievement verified",
                message=f'"{claim.title}" by {claim.student_name} has been verified.',
                level=NotificationLevel.SUCCESS,
                action_url=REVIEW_QUEUE_URL,
            )
        case ClaimEventKind.BECAME_VERIFIED:
            return Notification(
                title="Achievement verified",
                message=f'"{claim.title}" has been verified!',
                level=NotificationLevel.SUCCESS,
                action_url=STUDENT_ACHIEVEMENTS_URL,
            )
        case ClaimEventKind.BECAME_REJECTED if reviewer:
            return Notification(
                title="Achievement rejected",
                message=f'"{claim.title}" by {claim.student_name} was rejected.',
                level=NotificationLevel.WARNING,
                action_url=REVIEW_QUEUE_URL,
            )
        case ClaimEventKind.BECAME_REJECTED:
            message = f'"{claim.title}" was not approved'
            if claim.review_comments:
                message = f"{message}: {claim.review_comments}"
            return Notification(
                title="Achievement not approved",
                message=message,
                level=NotificationLevel.ERROR,
                action_url=STUDENT_ACHIEVEMENTS_URL,
            )


@dataclass(slots=True, kw_only=True)
class InboxEntry:
    notification: Notification
    received_at: datetime
    id: UUID = field(default_factory=uuid4)
    read: bool = False


class NotificationInbox:
    """Newest-first notifications with read tracking.

    Only the most recent ``limit`` entries are kept; older ones fall off
    whether or not they were read.
    """

    def __init__(
        self,
        limit: int = INBOX_LIMIT,
        *,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        if limit <= 0:
            raise ValueError("inbox limit must be positive")
        self._entries: deque[InboxEntry] = deque(maxlen=limit)
        self._clock = clock

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[InboxEntry]:
        return iter(self._entries)

    def add(self, notification: Notification) -> InboxEntry:
        entry = InboxEntry(notification=notification, received_at=self._clock())
        self._entries.appendleft(entry)
        return entry

    @property
    def unread(self) -> tuple[InboxEntry, ...]:
        return tuple(entry for entry in self._entries if not entry.read)

    @property
    def unread_count(self) -> int:
        return sum(1 for entry in self._entries if not entry.read)

    def mark_read(self, entry_id: UUID) -> bool:
        """Mark one entry read; False when it is unknown or already evicted."""
        for entry in self._entries:
            if entry.id == entry_id:
                entry.read = True
                return True
        return False

    def mark_all_read(self) -> int:
        count = 0
        for entry in self._entries:
            if not entry.read:
                entry.read = True
                count += 1
        return count
