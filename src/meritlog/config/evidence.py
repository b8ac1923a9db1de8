"""Limits applied to evidence attached to a submission."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_int


@dataclass(frozen=True, slots=True)
class EvidenceConfig:
    """``None`` means no limit."""

    max_files: int | None = None
    max_file_bytes: int | None = None


def get_evidence_config() -> EvidenceConfig:
    return EvidenceConfig(
        max_files=optional_env_int("MERITLOG_MAX_EVIDENCE_FILES"),
        max_file_bytes=optional_env_int("MERITLOG_MAX_EVIDENCE_BYTES"),
    )
