"""Pydantic models describing the claims API wire format.

Field names are camelCase on the wire, enums travel as their string values and
timestamps as ISO-8601 strings, which sort chronologically.
"""

from __future__ import annotations

from datetime import datetime  # noqa: TC003
from uuid import UUID  # noqa: TC003

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from meritlog.domain.model import AchievementCategory, ClaimStatus, Decision  # noqa: TC001


class ApiModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, alias_generator=to_camel)


class EvidenceFilePayload(ApiModel):
    storage_ref: str
    original_name: str
    mime_type: str
    size_bytes: int = Field(gt=0)
    uploaded_at: datetime


class ClaimPayload(ApiModel):
    id: UUID
    student_id: str
    student_name: str
    student_email: str
    institution: str
    title: str
    description: str
    date: str
    category: AchievementCategory
    evidence_files: list[EvidenceFilePayload] = Field(default_factory=list)
    status: ClaimStatus
    reviewed_by: str | None = None
    reviewed_at: datetime | None = None
    review_comments: str | None = None
    submitted_at: datetime
    created_at: datetime
    updated_at: datetime


class ClaimListPayload(ApiModel):
    claims: list[ClaimPayload]
    institution: str | None = None


class ReviewRequestPayload(ApiModel):
    decision: Decision
    comments: str | None = None


class ReviewResponsePayload(ApiModel):
    claim: ClaimPayload
    committed: bool


class ErrorPayload(ApiModel):
    error: str
    fields: dict[str, str] = Field(default_factory=dict)
