"""Verified actor identity as produced by the identity collaborator."""

from __future__ import annotations

from dataclasses import dataclass

from meritlog.domain.model.enums import Role


@dataclass(frozen=True, slots=True)
class Actor:
    """An authenticated caller.

    Every field comes from a verified credential; nothing here is ever taken from
    request payloads.
    """

    actor_id: str
    role: Role
    institution: str
    display_name: str = ""
    email: str = ""

    @property
    def can_review(self) -> bool:
        return self.role.can_review

    @property
    def institution_scoped(self) -> bool:
        return self.role.sees_institution
