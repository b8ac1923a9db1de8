"""SQLAlchemy mapping metadata for the meritlog domain model."""

from __future__ import annotations

import json
import logging
import uuid
from datetime import UTC, datetime
from functools import cache
from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import (
    Column,
    DateTime,
    Dialect,
    Enum,
    Index,
    String,
    Table,
    Text,
    TypeDecorator,
    Uuid,
    orm,
)
from sqlalchemy.orm import configure_mappers

from meritlog.domain.model import (
    AchievementCategory,
    AchievementClaim,
    ClaimStatus,
    EvidenceFile,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]


def _enum_values(enum_cls: type[Any]) -> list[str]:
    return [member.value for member in enum_cls]


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return _as_utc(value)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


class EvidenceListType(TypeDecorator[tuple[EvidenceFile, ...]]):
    """Ordered evidence references stored as a JSON array."""

    impl = Text
    cache_ok = True

    def process_bind_param(
        self,
        value: tuple[EvidenceFile, ...] | None,
        dialect: Dialect,
    ) -> str:
        _ = dialect
        payload = [
            {
                "storageRef": item.storage_ref,
                "originalName": item.original_name,
                "mimeType": item.mime_type,
                "sizeBytes": item.size_bytes,
                "uploadedAt": _as_utc(item.uploaded_at).isoformat(),
            }
            for item in value or ()
        ]
        return json.dumps(payload, separators=(",", ":"))

    def process_result_value(
        self,
        value: str | None,
        dialect: Dialect,
    ) -> tuple[EvidenceFile, ...]:
        _ = dialect
        if not value:
            return ()
        loaded = json.loads(value)
        if not isinstance(loaded, list):
            return ()
        items = cast(list[dict[str, Any]], loaded)
        return tuple(
            EvidenceFile(
                storage_ref=str(item["storageRef"]),
                original_name=str(item["originalName"]),
                mime_type=str(item["mimeType"]),
                size_bytes=int(item["sizeBytes"]),
                uploaded_at=datetime.fromisoformat(str(item["uploadedAt"])),
            )
            for item in items
        )


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

achievement_claim_table = Table(
    "achievement_claim",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("student_id", String(64), nullable=False),
    Column("student_name", String, nullable=False),
    Column("student_email", String, nullable=False),
    Column("institution", String, nullable=False),
    Column("title", String, nullable=False),
    Column("description", Text, nullable=False),
    Column("date", String(32), nullable=False),
    Column(
        "category",
        Enum(
            AchievementCategory,
            native_enum=False,
            length=32,
            values_callable=_enum_values,
        ),
        nullable=False,
    ),
    Column("evidence_files", EvidenceListType, nullable=False),
    Column(
        "status",
        Enum(ClaimStatus, native_enum=False, length=16, values_callable=_enum_values),
        nullable=False,
    ),
    Column("reviewed_by", String(64), nullable=True),
    Column("reviewed_at", UTCDateTime, nullable=True),
    Column("review_comments", Text, nullable=True),
    Column("submitted_at", UTCDateTime, nullable=False),
    Column("created_at", UTCDateTime, nullable=False),
    Column("updated_at", UTCDateTime, nullable=False),
)

Index(
    "ix_achievement_claim_institution_status",
    achievement_claim_table.c.institution,
    achievement_claim_table.c.status,
)
Index("ix_achievement_claim_student_id", achievement_claim_table.c.student_id)


@cache
def start_mappers() -> orm.registry:
    log.debug("Configuring claim mappers")
    mapper_registry.map_imperatively(AchievementClaim, achievement_claim_table)
    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
