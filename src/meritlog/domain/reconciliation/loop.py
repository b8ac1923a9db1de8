"""Per-dashboard periodic reconciliation against the authoritative claim list."""

from __future__ import annotations

import asyncio
import contextlib
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from meritlog.domain.model import utcnow
from meritlog.domain.notifications import ClaimEvent, derive_events
from meritlog.domain.reconciliation.overlay import OptimisticOverlay
from meritlog.domain.reconciliation.snapshot import ClaimSnapshot

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Sequence
    from datetime import datetime

    from meritlog.domain.model import AchievementClaim

type ClaimFetch = Callable[[], Awaitable[Sequence[AchievementClaim]]]
type EventSink = Callable[[Sequence[ClaimEvent]], None]
type ViewSink = Callable[[ClaimSnapshot], None]

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TickResult:
    """Outcome of one reconciliation tick."""

    applied: bool
    events: tuple[ClaimEvent, ...] = ()
    error: Exception | None = None


class ReconciliationLoop:
    """Fetch, diff and replace the dashboard's claim view on a fixed cadence.

    Ticks are serialized. A failed or timed-out fetch leaves the current view in
    place and is retried on the next tick. After ``stop`` no fetch is issued and
    a result that arrives late is discarded. A callback that raises is logged
    and does not stop later ticks.
    """

    def __init__(
        self,
        fetch: ClaimFetch,
        *,
        reviewer: bool,
        interval: float,
        timeout: float,
        on_events: EventSink | None = None,
        on_view: ViewSink | None = None,
        clock: Callable[[], datetime] = utcnow,
        name: str = "dashboard",
    ) -> None:
        if interval <= 0 or timeout <= 0:
            raise ValueError("interval and timeout must be positive")
        self._fetch = fetch
        self._reviewer = reviewer
        self._interval = interval
        self._timeout = timeout
        self._on_events = on_events
        self._on_view = on_view
        self._clock = clock
        self._name = name

        self._snapshot = ClaimSnapshot()
        self._overlay = OptimisticOverlay()
        self._view = self._snapshot
        self._tick_lock = asyncio.Lock()
        self._stopped = asyncio.Event()
        self._task: asyncio.Task[None] | None = None

    @property
    def view(self) -> ClaimSnapshot:
        """What the dashboard renders: the last fetch with pending optimistic mutations."""
        return self._view

    @property
    def snapshot(self) -> ClaimSnapshot:
        """The last successfully fetched claim list."""
        return self._snapshot

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def stopped(self) -> bool:
        return self._stopped.is_set()

    def apply_optimistic(self, claim: AchievementClaim) -> None:
        """Show ``claim`` immediately, ahead of the fetch that will confirm it."""

        if self.stopped:
            return
        self._overlay.apply(claim)
        self._publish(self._overlay.project(self._snapshot))

    async def tick(self) -> TickResult:
        if self.stopped:
            return TickResult(applied=False)
        async with self._tick_lock:
            issued_at_generation = self._overlay.generation
            try:
                fetched = await asyncio.wait_for(self._fetch(), timeout=self._timeout)
            except TimeoutError as exc:
                log.warning(
                    "[%s] Claim fetch timed out after %.1fs; keeping current view",
                    self._name,
                    self._timeout,
                )
                return TickResult(applied=False, error=exc)
            except Exception as exc:  # noqa: BLE001
                log.warning("[%s] Claim fetch failed; keeping current view: %s", self._name, exc)
                return TickResult(applied=False, error=exc)

            if self.stopped:
                log.debug("[%s] Discarding fetch result that arrived after teardown", self._name)
                return TickResult(applied=False)

            snapshot = self._view.advance(fetched, fetched_at=self._clock())
            self._overlay.settle(issued_at_generation)
            view = self._overlay.project(snapshot)
            events: list[ClaimEvent] = []
            if self._snapshot.loaded:
                events = derive_events(self._view.claims, view.claims, reviewer=self._reviewer)

            self._snapshot = snapshot
            self._publish(view)
            log.debug(
                "[%s] Reconciled %d claims, %d events, %d optimistic",
                self._name,
                len(view),
                len(events),
                len(self._overlay),
            )
            if events and self._on_events is not None:
                self._deliver(self._on_events, events)
            return TickResult(applied=True, events=tuple(events))

    async def run(self) -> None:
        log.info("[%s] Reconciliation started (every %.1fs)", self._name, self._interval)
        while not self.stopped:
            try:
                await self.tick()
            except Exception:
                log.exception("[%s] Reconciliation tick failed", self._name)
            with contextlib.suppress(TimeoutError):
                await asyncio.wait_for(self._stopped.wait(), timeout=self._interval)
        log.info("[%s] Reconciliation stopped", self._name)

    def start(self) -> asyncio.Task[None]:
        if self._task is not None:
            raise RuntimeError("Reconciliation loop already started")
        self._task = asyncio.create_task(self.run(), name=f"reconcile-{self._name}")
        return self._task

    async def stop(self) -> None:
        self._stopped.set()
        task, self._task = self._task, None
        if task is None or task.done():
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    def _publish(self, view: ClaimSnapshot) -> None:
        self._view = view
        if self._on_view is not None:
            self._deliver(self._on_view, view)

    def _deliver[T](self, sink: Callable[[T], None], payload: T) -> None:
        try:
            sink(payload)
        except Exception:
            log.exception("[%s] Dashboard callback failed", self._name)
