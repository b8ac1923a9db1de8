"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

import functools
from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import select, update
from sqlalchemy.exc import DBAPIError, OperationalError

from meritlog.adapters.sqlalchemy.mappings import achievement_claim_table
from meritlog.domain.errors import Conflict, NotFound, TransientIOError
from meritlog.domain.model import AchievementClaim, ClaimStatus, utcnow

if TYPE_CHECKING:
    import uuid
    from collections.abc import Callable
    from datetime import datetime

    from sqlalchemy import CursorResult
    from sqlalchemy.orm import Session

_claims = achievement_claim_table.c


def translate_storage_errors[**P, T](func: Callable[P, T]) -> Callable[P, T]:
    """Surface connectivity failures as ``TransientIOError``."""

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
        try:
            return func(*args, **kwargs)
        except OperationalError as exc:
            raise TransientIOError(f"Claim store unavailable: {exc.orig}") from exc
        except DBAPIError as exc:
            if exc.connection_invalidated:
                raise TransientIOError("Claim store connection lost") from exc
            raise

    return wrapper


class SqlAlchemyClaimRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    @translate_storage_errors
    def create(self, claim: AchievementClaim) -> uuid.UUID:
        if not claim.is_pending:
            raise ValueError("claims are created pending")
        self.session.add(claim)
        self.session.flush()
        return claim.id

    @translate_storage_errors
    def get(self, claim_id: uuid.UUID) -> AchievementClaim:
        claim = self.session.get(AchievementClaim, claim_id)
        if claim is None:
            raise NotFound(claim_id)
        return claim

    @translate_storage_errors
    def list_by_student(self, student_id: str) -> list[AchievementClaim]:
        stmt = (
            select(AchievementClaim)
            .where(_claims.student_id == student_id)
            .order_by(_claims.created_at.desc())
        )
        return list(self.session.execute(stmt).scalars())

    @translate_storage_errors
    def list_by_institution(
        self,
        institution: str,
        status: ClaimStatus | None = None,
    ) -> list[AchievementClaim]:
        stmt = select(AchievementClaim).where(_claims.institution == institution)
        if status is not None:
            stmt = stmt.where(_claims.status == status)
        stmt = stmt.order_by(_claims.created_at.desc())
        return list(self.session.execute(stmt).scalars())

    @translate_storage_errors
    def transition(
        self,
        claim_id: uuid.UUID,
        *,
        new_status: ClaimStatus,
        reviewer_id: str,
        comments: str | None = None,
        expected_status: ClaimStatus = ClaimStatus.PENDING,
        at: datetime | None = None,
    ) -> AchievementClaim:
        if not new_status.is_terminal:
            raise ValueError("a decision must move the claim to a terminal status")
        decided_at = at or utcnow()
        # The status predicate makes this a compare-and-swap: a concurrent
        # decision leaves zero matching rows.
        stmt = (
            update(achievement_claim_table)
            .where(_claims.id == claim_id)
            .where(_claims.status == expected_status)
            .values(
                status=new_status,
                reviewed_by=reviewer_id,
                reviewed_at=decided_at,
                review_comments=comments,
                updated_at=decided_at,
            )
        )
        result = cast("CursorResult[Any]", self.session.execute(stmt))
        current = self.session.get(AchievementClaim, claim_id, populate_existing=True)
        if current is None:
            raise NotFound(claim_id)
        if result.rowcount != 1:
            # Detached with its loaded state so a later rollback cannot expire it.
            self.session.expunge(current)
            raise Conflict(current)
        return current


if TYPE_CHECKING:
    from meritlog.domain.ports.persistence import ClaimRepository

    _session_stub = cast("Session", object())
    _repo_check: ClaimRepository = SqlAlchemyClaimRepository(_session_stub)
