"""Port for the identity collaborator."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from meritlog.domain.model import Actor


@runtime_checkable
class IdentityProvider(Protocol):
    """Turns a presented credential into a verified actor or raises ``Unauthorized``."""

    def authenticate(self, credential: str | None) -> Actor: ...
