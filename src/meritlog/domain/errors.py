"""Error taxonomy for the verification workflow."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping
    from uuid import UUID

    from meritlog.domain.model.claim import AchievementClaim


class MeritlogError(Exception):
    """Base class for workflow errors."""


class ValidationError(MeritlogError):
    """Malformed or missing submission fields; nothing was persisted."""

    def __init__(self, fields: Mapping[str, str]) -> None:
        self.fields = dict(fields)
        detail = "; ".join(f"{name}: {message}" for name, message in sorted(self.fields.items()))
        super().__init__(f"Invalid submission ({detail})")


class Unauthorized(MeritlogError):
    """Missing or invalid identity."""


class Forbidden(MeritlogError):
    """The actor lacks the role or institution scope for the action."""


class NotFound(MeritlogError):
    """The claim id does not exist."""

    def __init__(self, claim_id: UUID | None = None) -> None:
        self.claim_id = claim_id
        if claim_id is None:
            super().__init__("Achievement claim not found")
        else:
            super().__init__(f"Achievement claim {claim_id} not found")


class Conflict(MeritlogError):
    """The claim already left ``pending``; carries the authoritative claim."""

    def __init__(self, current: AchievementClaim) -> None:
        self.current = current
        super().__init__(
            f"Achievement claim {current.id} was already {current.status.value}"
            f" by {current.reviewed_by}"
        )


class TransientIOError(MeritlogError):
    """Store or blob storage is temporarily unavailable."""
