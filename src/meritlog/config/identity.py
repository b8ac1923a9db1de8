"""Bearer token verification settings."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .env import require_env_var

DEFAULT_JWT_ALGORITHM = "HS256"
DEFAULT_JWT_ISSUER = "edu-platform"


@dataclass(frozen=True, slots=True)
class IdentityConfig:
    secret: str
    algorithm: str = DEFAULT_JWT_ALGORITHM
    issuer: str = DEFAULT_JWT_ISSUER


def get_identity_config() -> IdentityConfig:
    return IdentityConfig(
        secret=require_env_var("MERITLOG_JWT_SECRET"),
        algorithm=os.getenv("MERITLOG_JWT_ALGORITHM") or DEFAULT_JWT_ALGORITHM,
        issuer=os.getenv("MERITLOG_JWT_ISSUER") or DEFAULT_JWT_ISSUER,
    )
