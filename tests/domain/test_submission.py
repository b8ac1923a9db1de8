from __future__ import annotations

from datetime import UTC, datetime

import pytest

from meritlog.config.evidence import EvidenceConfig
from meritlog.domain.errors import Forbidden, TransientIOError, ValidationError
from meritlog.domain.model import AchievementCategory, ClaimStatus, Role
from meritlog.domain.submission import (
    EvidenceUpload,
    SubmissionRequest,
    parse_category,
    submit_claim,
    validate_submission,
)
from tests.helpers.claims import FakeBlobStore, FakeClaimRepository, FakeClaimUnitOfWork, make_actor

FIXED_NOW = datetime(2025, 4, 2, 12, 0, tzinfo=UTC)


def _request(**overrides: object) -> SubmissionRequest:
    fields: dict[str, object] = {
        "title": "  Hackathon winner ",
        "description": "First place at the regional hackathon",
        "date": "2025-03-20",
        "category": "award",
    }
    fields.update(overrides)
    return SubmissionRequest(**fields)  # type: ignore[arg-type]


def _submit(
    request: SubmissionRequest,
    *,
    repository: FakeClaimRepository | None = None,
    blob_store: FakeBlobStore | None = None,
    limits: EvidenceConfig | None = None,
    role: Role = Role.STUDENT,
) -> tuple[FakeClaimRepository, FakeClaimUnitOfWork]:
    repo = repository or FakeClaimRepository()
    uow = FakeClaimUnitOfWork(repo)
    submit_claim(
        make_actor(role),
        request,
        unit_of_work_factory=lambda: uow,
        blob_store=blob_store or FakeBlobStore(),
        evidence_limits=limits,
        now=lambda: FIXED_NOW,
    )
    return repo, uow


def test_submit_creates_pending_claim_with_identity_from_actor() -> None:
    repo, uow = _submit(_request())

    assert uow.committed is True
    (claim,) = repo.items.values()
    assert claim.status is ClaimStatus.PENDING
    assert claim.student_id == "student-1"
    assert claim.student_name == "Ada Student"
    assert claim.student_email == "ada@example.edu"
    assert claim.institution == "north-college"
    assert claim.title == "Hackathon winner"
    assert claim.category is AchievementCategory.AWARD
    assert claim.reviewed_by is None
    assert claim.reviewed_at is None
    assert claim.submitted_at == claim.created_at == claim.updated_at == FIXED_NOW


def test_submit_records_evidence_in_upload_order() -> None:
    blob_store = FakeBlobStore()
    request = _request(
        evidence=(
            EvidenceUpload("certificate.pdf", "application/pdf", b"%PDF-1.7"),
            EvidenceUpload("photo.jpg", "image/jpeg", b"\xff\xd8\xff"),
        )
    )

    repo, _ = _submit(request, blob_store=blob_store)

    (claim,) = repo.items.values()
    assert [item.original_name for item in claim.evidence_files] == [
        "certificate.pdf",
        "photo.jpg",
    ]
    assert claim.evidence_files[0].size_bytes == 8
    assert claim.evidence_files[1].mime_type == "image/jpeg"
    assert claim.evidence_files[0].storage_ref.startswith("/uploads/achievements/")
    assert [name for name, _ in blob_store.stored] == ["certificate.pdf", "photo.jpg"]


def test_submit_defaults_missing_category_to_other() -> None:
    repo, _ = _submit(_request(category=None))

    (claim,) = repo.items.values()
    assert claim.category is AchievementCategory.OTHER


def test_validation_reports_every_invalid_field() -> None:
    request = _request(title=" ", description="", category="sports")

    with pytest.raises(ValidationError) as excinfo:
        validate_submission(request)

    assert set(excinfo.value.fields) == {"title", "description", "category"}


def test_invalid_submission_creates_nothing_and_stores_no_evidence() -> None:
    blob_store = FakeBlobStore()
    request = _request(
        date="",
        evidence=(EvidenceUpload("ok.pdf", "application/pdf", b"data"),),
    )

    with pytest.raises(ValidationError):
        _submit(request, blob_store=blob_store)

    assert blob_store.stored == []


@pytest.mark.parametrize(
    ("upload", "message"),
    [
        (EvidenceUpload("empty.pdf", "application/pdf", b""), "file is empty"),
        (EvidenceUpload("notype.pdf", "", b"data"), "mime type is required"),
    ],
)
def test_evidence_needs_size_and_mime_type(upload: EvidenceUpload, message: str) -> None:
    with pytest.raises(ValidationError) as excinfo:
        validate_submission(_request(evidence=(upload,)))

    assert excinfo.value.fields == {"evidence[0]": message}


def test_evidence_limits_are_enforced_when_configured() -> None:
    uploads = tuple(
        EvidenceUpload(f"file{index}.txt", "text/plain", b"x" * 10) for index in range(3)
    )

    with pytest.raises(ValidationError) as excinfo:
        validate_submission(
            _request(evidence=uploads),
            limits=EvidenceConfig(max_files=2, max_file_bytes=5),
        )

    assert excinfo.value.fields["evidence"] == "at most 2 files may be attached"
    assert excinfo.value.fields["evidence[2]"] == "file exceeds 5 bytes"


def test_non_student_cannot_submit() -> None:
    repo = FakeClaimRepository()

    with pytest.raises(Forbidden):
        _submit(_request(), repository=repo, role=Role.FACULTY)

    assert repo.items == {}


def test_blob_storage_failure_aborts_submission() -> None:
    repo = FakeClaimRepository()
    request = _request(evidence=(EvidenceUpload("a.pdf", "application/pdf", b"data"),))

    with pytest.raises(TransientIOError):
        _submit(request, repository=repo, blob_store=FakeBlobStore(fail=True))

    assert repo.items == {}


def test_parse_category_is_case_insensitive() -> None:
    assert parse_category(" Certification ") is AchievementCategory.CERTIFICATION
    assert parse_category("") is AchievementCategory.OTHER
