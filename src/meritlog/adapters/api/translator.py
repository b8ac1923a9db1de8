"""Translate between wire payloads and domain claims."""

from __future__ import annotations

from typing import Any

from meritlog.domain.model import AchievementClaim, EvidenceFile

from .schema import ClaimPayload, EvidenceFilePayload


def parse_claim(payload: ClaimPayload | dict[str, Any]) -> AchievementClaim:
    model = (
        payload if isinstance(payload, ClaimPayload) else ClaimPayload.model_validate(payload)
    )
    return AchievementClaim(
        id=model.id,
        student_id=model.student_id,
        student_name=model.student_name,
        student_email=model.student_email,
        institution=model.institution,
        title=model.title,
        description=model.description,
        date=model.date,
        category=model.category,
        evidence_files=tuple(
            EvidenceFile(
                storage_ref=item.storage_ref,
                original_name=item.original_name,
                mime_type=item.mime_type,
                size_bytes=item.size_bytes,
                uploaded_at=item.uploaded_at,
            )
            for item in model.evidence_files
        ),
        status=model.status,
        reviewed_by=model.reviewed_by,
        reviewed_at=model.reviewed_at,
        review_comments=model.review_comments,
        submitted_at=model.submitted_at,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


def claim_to_payload(claim: AchievementClaim) -> ClaimPayload:
    return ClaimPayload(
        id=claim.id,
        student_id=claim.student_id,
        student_name=claim.student_name,
        student_email=claim.student_email,
        institution=claim.institution,
        title=claim.title,
        description=claim.description,
        date=claim.date,
        category=claim.category,
        evidence_files=[
            EvidenceFilePayload(
                storage_ref=item.storage_ref,
                original_name=item.original_name,
                mime_type=item.mime_type,
                size_bytes=item.size_bytes,
                uploaded_at=item.uploaded_at,
            )
            for item in claim.evidence_files
        ],
        status=claim.status,
        reviewed_by=claim.reviewed_by,
        reviewed_at=claim.reviewed_at,
        review_comments=claim.review_comments,
        submitted_at=claim.submitted_at,
        created_at=claim.created_at,
        updated_at=claim.updated_at,
    )


def serialize_claim(claim: AchievementClaim) -> dict[str, Any]:
    """Wire representation of ``claim`` as plain JSON-compatible data."""

    return claim_to_payload(claim).model_dump(mode="json", by_alias=True)
