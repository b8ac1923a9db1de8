"""Submission handling: validate a claim, store its evidence, create it as pending."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from meritlog.domain.errors import Forbidden, ValidationError
from meritlog.domain.model import (
    AchievementCategory,
    AchievementClaim,
    EvidenceFile,
    Role,
    utcnow,
)

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime

    from meritlog.config.evidence import EvidenceConfig
    from meritlog.domain.model import Actor
    from meritlog.domain.ports import BlobStore, ClaimUnitOfWork

log = getLogger(__name__)

DEFAULT_CATEGORY = AchievementCategory.OTHER


@dataclass(frozen=True, slots=True)
class EvidenceUpload:
    """An evidence file as received from the submitter, before storage."""

    original_name: str
    mime_type: str
    content: bytes

    @property
    def size_bytes(self) -> int:
        return len(self.content)


@dataclass(frozen=True, slots=True)
class SubmissionRequest:
    """Client-supplied submission fields. Identity fields are never part of it."""

    title: str
    description: str
    date: str
    category: str | None = None
    evidence: tuple[EvidenceUpload, ...] = ()


def parse_category(value: str | None) -> AchievementCategory:
    """Return the category, defaulting to ``other`` only when none was given."""

    if value is None or not value.strip():
        return DEFAULT_CATEGORY
    try:
        return AchievementCategory(value.strip().lower())
    except ValueError:
        allowed = ", ".join(member.value for member in AchievementCategory)
        raise ValidationError({"category": f"must be one of: {allowed}"}) from None


def validate_submission(
    request: SubmissionRequest,
    *,
    limits: EvidenceConfig | None = None,
) -> AchievementCategory:
    """Check every field and report all problems at once."""

    errors: dict[str, str] = {}
    for name in ("title", "description", "date"):
        value = getattr(request, name)
        if not isinstance(value, str) or not value.strip():
            errors[name] = "is required"

    category = DEFAULT_CATEGORY
    try:
        category = parse_category(request.category)
    except ValidationError as exc:
        errors.update(exc.fields)

    if limits is not None and limits.max_files is not None:
        if len(request.evidence) > limits.max_files:
            errors["evidence"] = f"at most {limits.max_files} files may be attached"

    for index, upload in enumerate(request.evidence):
        key = f"evidence[{index}]"
        if upload.size_bytes <= 0:
            errors[key] = "file is empty"
        elif not upload.mime_type or not upload.mime_type.strip():
            errors[key] = "mime type is required"
        elif not upload.original_name or not upload.original_name.strip():
            errors[key] = "file name is required"
        elif (
            limits is not None
            and limits.max_file_bytes is not None
            and upload.size_bytes > limits.max_file_bytes
        ):
            errors[key] = f"file exceeds {limits.max_file_bytes} bytes"

    if errors:
        raise ValidationError(errors)
    return category


def submit_claim(
    actor: Actor,
    request: SubmissionRequest,
    *,
    unit_of_work_factory: Callable[[], ClaimUnitOfWork],
    blob_store: BlobStore,
    evidence_limits: EvidenceConfig | None = None,
    now: Callable[[], datetime] = utcnow,
) -> AchievementClaim:
    """Create a pending claim owned by ``actor``.

    Student name, email and institution are copied from the verified identity.
    Validation happens before any evidence is stored, and the claim is only
    created once every upload succeeded.
    """

    if actor.role is not Role.STUDENT:
        raise Forbidden(f"Role {actor.role.value!r} cannot submit achievements")
    if not actor.institution:
        raise Forbidden("Actor is not attached to an institution")

    category = validate_submission(request, limits=evidence_limits)

    evidence: list[EvidenceFile] = []
    for upload in request.evidence:
        stored = blob_store.put(
            original_name=upload.original_name,
            mime_type=upload.mime_type,
            content=upload.content,
        )
        evidence.append(
            EvidenceFile(
                storage_ref=stored.storage_ref,
                original_name=upload.original_name,
                mime_type=stored.mime_type,
                size_bytes=stored.size_bytes,
                uploaded_at=now(),
            )
        )

    submitted_at = now()
    claim = AchievementClaim(
        student_id=actor.actor_id,
        student_name=actor.display_name,
        student_email=actor.email,
        institution=actor.institution,
        title=request.title.strip(),
        description=request.description.strip(),
        date=request.date.strip(),
        category=category,
        evidence_files=tuple(evidence),
        submitted_at=submitted_at,
        created_at=submitted_at,
        updated_at=submitted_at,
    )

    with unit_of_work_factory() as uow:
        uow.repositories.claims.create(claim)
        uow.commit()

    log.info(
        "Claim %s submitted by %s (%s, %d evidence files)",
        claim.id,
        actor.actor_id,
        actor.institution,
        len(evidence),
    )
    return claim
