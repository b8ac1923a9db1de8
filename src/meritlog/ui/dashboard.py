"""Actor sessions and the live dashboard bound to them."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from meritlog.config.polling import PollingConfig, get_polling_config
from meritlog.domain.errors import Unauthorized
from meritlog.domain.listing import ClaimListing
from meritlog.domain.notifications import NotificationInbox, render_notification
from meritlog.domain.reconciliation import ReconciliationLoop

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from types import TracebackType
    from uuid import UUID

    from meritlog.domain.model import AchievementClaim, Actor, Decision
    from meritlog.domain.notifications import ClaimEvent, Notification
    from meritlog.domain.ports import ClaimGateway, IdentityProvider
    from meritlog.domain.reconciliation import ClaimSnapshot, TickResult
    from meritlog.domain.review import ReviewOutcome
    from meritlog.domain.submission import SubmissionRequest

log = getLogger(__name__)


class ActorSession:
    """Holds the verified identity of whoever is signed in."""

    def __init__(self, identity: IdentityProvider) -> None:
        self._identity = identity
        self._actor: Actor | None = None
        self._credential: str | None = None

    def login(self, credential: str) -> Actor:
        actor = self._identity.authenticate(credential)
        self._actor = actor
        self._credential = credential
        log.info("Signed in %s as %s", actor.actor_id, actor.role.value)
        return actor

    def logout(self) -> None:
        if self._actor is not None:
            log.info("Signed out %s", self._actor.actor_id)
        self._actor = None
        self._credential = None

    @property
    def authenticated(self) -> bool:
        return self._actor is not None

    @property
    def actor(self) -> Actor:
        if self._actor is None:
            raise Unauthorized("No actor is signed in")
        return self._actor

    @property
    def credential(self) -> str:
        if self._credential is None:
            raise Unauthorized("No actor is signed in")
        return self._credential


class Dashboard:
    """A signed-in actor's live view of the claims visible to them.

    Reviewers poll on the faster cadence and are told about new submissions;
    students hear about decisions on their own claims. Foreground submissions
    and reviews show up immediately, ahead of the poll that confirms them.
    """

    def __init__(
        self,
        session: ActorSession,
        gateway: ClaimGateway,
        *,
        polling: PollingConfig | None = None,
        on_notification: Callable[[Notification], None] | None = None,
        on_view: Callable[[ClaimSnapshot], None] | None = None,
    ) -> None:
        actor = session.actor
        config = polling or get_polling_config()
        self._session = session
        self._actor = actor
        self._gateway = gateway
        self._on_notification = on_notification
        self.notifications = NotificationInbox()
        self.loop = ReconciliationLoop(
            gateway.list_claims,
            reviewer=actor.can_review,
            interval=config.interval_for(institution_scoped=actor.institution_scoped),
            timeout=config.tick_timeout_seconds,
            on_events=self._notify,
            on_view=on_view,
            name=f"{actor.role.value}:{actor.actor_id}",
        )

    async def __aenter__(self) -> Dashboard:
        self.loop.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    @property
    def actor(self) -> Actor:
        return self._actor

    @property
    def listing(self) -> ClaimListing:
        institution = self._actor.institution if self._actor.institution_scoped else None
        return ClaimListing(claims=self.loop.view.ordered(), institution=institution)

    async def refresh(self) -> TickResult:
        return await self.loop.tick()

    async def submit(self, request: SubmissionRequest) -> AchievementClaim:
        claim = await self._gateway.submit(request)
        self.loop.apply_optimistic(claim)
        return claim

    async def review(
        self,
        claim_id: UUID,
        decision: Decision,
        comments: str | None = None,
    ) -> ReviewOutcome:
        outcome = await self._gateway.review(claim_id, decision, comments)
        # A lost race still returns the authoritative claim, so show it either way.
        self.loop.apply_optimistic(outcome.claim)
        return outcome

    async def close(self) -> None:
        await self.loop.stop()

    async def logout(self) -> None:
        await self.close()
        self._session.logout()

    def _notify(self, events: Sequence[ClaimEvent]) -> None:
        for event in events:
            notification = render_notification(event, reviewer=self._actor.can_review)
            self.notifications.add(notification)
            log.info("%s: %s", notification.title, notification.message)
            if self._on_notification is not None:
                self._on_notification(notification)
