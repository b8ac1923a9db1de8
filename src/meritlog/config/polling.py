"""Reconciliation cadence settings."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_float

DEFAULT_STUDENT_INTERVAL_SECONDS = 5.0
DEFAULT_REVIEWER_INTERVAL_SECONDS = 3.0
DEFAULT_TICK_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True, slots=True)
class PollingConfig:
    student_interval_seconds: float = DEFAULT_STUDENT_INTERVAL_SECONDS
    reviewer_interval_seconds: float = DEFAULT_REVIEWER_INTERVAL_SECONDS
    tick_timeout_seconds: float = DEFAULT_TICK_TIMEOUT_SECONDS

    def interval_for(self, *, institution_scoped: bool) -> float:
        """Reviewers watch a shared queue and poll faster than submitters."""

        if institution_scoped:
            return self.reviewer_interval_seconds
        return self.student_interval_seconds


def get_polling_config() -> PollingConfig:
    return PollingConfig(
        student_interval_seconds=optional_env_float(
            "MERITLOG_STUDENT_POLL_SECONDS", DEFAULT_STUDENT_INTERVAL_SECONDS
        ),
        reviewer_interval_seconds=optional_env_float(
            "MERITLOG_REVIEWER_POLL_SECONDS", DEFAULT_REVIEWER_INTERVAL_SECONDS
        ),
        tick_timeout_seconds=optional_env_float(
            "MERITLOG_POLL_TIMEOUT_SECONDS", DEFAULT_TICK_TIMEOUT_SECONDS
        ),
    )
