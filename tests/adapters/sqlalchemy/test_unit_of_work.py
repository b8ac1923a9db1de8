from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine, inspect

from meritlog.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyClaimUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)
from meritlog.domain.errors import NotFound
from tests.helpers.claims import make_claim

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy.engine import Engine


@pytest.fixture(autouse=True)
def reset_unit_of_work_state() -> Iterator[None]:
    shutdown()
    yield
    shutdown()


def test_sqlalchemy_unit_of_work_requires_startup() -> None:
    with pytest.raises(StartupError):
        SqlAlchemyClaimUnitOfWork()


def test_startup_requires_force_for_reconfiguration() -> None:
    engine_a = create_engine("sqlite+pysqlite:///:memory:", future=True)
    engine_b = create_engine("sqlite+pysqlite:///:memory:", future=True)

    startup(engine=engine_a, force=True)

    with pytest.raises(StartupError):
        startup(engine=engine_b)

    startup(engine=engine_b, force=True)
    assert configured_engine() is engine_b
    assert is_started()


def test_startup_applies_migrations(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    inspector = inspect(sqlite_engine)
    assert "achievement_claim" in inspector.get_table_names()
    index_names = {index["name"] for index in inspector.get_indexes("achievement_claim")}
    assert {
        "ix_achievement_claim_institution_status",
        "ix_achievement_claim_student_id",
    } <= index_names


def test_uncommitted_work_is_discarded(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    claim = make_claim()

    with SqlAlchemyClaimUnitOfWork() as uow:
        uow.repositories.claims.create(claim)

    with SqlAlchemyClaimUnitOfWork() as uow, pytest.raises(NotFound):
        uow.repositories.claims.get(claim.id)


def test_exception_rolls_back(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    claim = make_claim()

    with pytest.raises(RuntimeError), SqlAlchemyClaimUnitOfWork() as uow:
        uow.repositories.claims.create(claim)
        raise RuntimeError("boom")

    with SqlAlchemyClaimUnitOfWork() as uow:
        assert uow.repositories.claims.list_by_student(claim.student_id) == []
