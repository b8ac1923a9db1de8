"""Port used by dashboards to reach the claim workflow."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from meritlog.domain.model import AchievementClaim, ClaimStatus, Decision
    from meritlog.domain.review import ReviewOutcome
    from meritlog.domain.submission import SubmissionRequest


@runtime_checkable
class ClaimGateway(Protocol):
    """The request surface, bound to one authenticated actor.

    ``list_claims`` is the reconciliation fetch; ``submit`` and ``review`` are
    foreground actions whose failures propagate to the caller unretried.
    """

    async def list_claims(
        self,
        status_filter: ClaimStatus | None = None,
    ) -> Sequence[AchievementClaim]: ...

    async def submit(self, request: SubmissionRequest) -> AchievementClaim: ...

    async def review(
        self,
        claim_id: UUID,
        decision: Decision,
        comments: str | None = None,
    ) -> ReviewOutcome: ...
