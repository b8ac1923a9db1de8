"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class ClaimStatus(StrEnum):
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        return self is not ClaimStatus.PENDING


class AchievementCategory(StrEnum):
    ACADEMIC = "academic"
    EXTRACURRICULAR = "extracurricular"
    CERTIFICATION = "certification"
    PROJECT = "project"
    AWARD = "award"
    OTHER = "other"


class Role(StrEnum):
    STUDENT = "student"
    FACULTY = "faculty"
    ADMIN = "admin"
    INSTITUTION = "institution"

    @property
    def can_review(self) -> bool:
        return self in REVIEW_ROLES

    @property
    def sees_institution(self) -> bool:
        return self in INSTITUTION_VIEW_ROLES


class Decision(StrEnum):
    VERIFY = "verify"
    REJECT = "reject"

    @property
    def outcome(self) -> ClaimStatus:
        if self is Decision.VERIFY:
            return ClaimStatus.VERIFIED
        return ClaimStatus.REJECTED


REVIEW_ROLES = frozenset({Role.FACULTY, Role.ADMIN})
INSTITUTION_VIEW_ROLES = frozenset({Role.FACULTY, Role.ADMIN, Role.INSTITUTION})
