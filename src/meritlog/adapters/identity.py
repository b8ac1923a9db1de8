"""Bearer-token identity adapter."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from logging import getLogger
from typing import TYPE_CHECKING, Any

from jose import JWTError, jwt

from meritlog.config.identity import IdentityConfig, get_identity_config
from meritlog.domain.errors import Unauthorized
from meritlog.domain.model import Actor, Role

if TYPE_CHECKING:
    from collections.abc import Mapping

log = getLogger(__name__)

DEFAULT_TOKEN_LIFETIME = timedelta(hours=24)
BEARER_PREFIX = "Bearer "


def _actor_from_claims(claims: Mapping[str, Any]) -> Actor:
    try:
        actor_id = str(claims["sub"])
        role = Role(claims["role"])
    except (KeyError, ValueError) as exc:
        raise Unauthorized("Credential is missing a valid subject or role") from exc
    return Actor(
        actor_id=actor_id,
        role=role,
        institution=str(claims.get("institution") or ""),
        display_name=str(claims.get("name") or ""),
        email=str(claims.get("email") or ""),
    )


@dataclass(slots=True)
class JwtIdentityProvider:
    """Verifies signed tokens and turns their claims into an ``Actor``."""

    config: IdentityConfig = field(default_factory=get_identity_config)

    def authenticate(self, credential: str | None) -> Actor:
        if credential is None or not credential.strip():
            raise Unauthorized("Missing credential")
        token = credential.strip().removeprefix(BEARER_PREFIX).strip()
        try:
            claims = jwt.decode(
                token,
                self.config.secret,
                algorithms=[self.config.algorithm],
                issuer=self.config.issuer,
            )
        except JWTError as exc:
            log.debug("Rejected credential: %s", exc)
            raise Unauthorized("Invalid or expired credential") from exc
        return _actor_from_claims(claims)


def issue_token(
    config: IdentityConfig,
    actor: Actor,
    *,
    lifetime: timedelta = DEFAULT_TOKEN_LIFETIME,
    now: datetime | None = None,
) -> str:
    """Sign a token for ``actor``. Intended for local development and tests."""

    issued_at = now or datetime.now(UTC)
    payload = {
        "sub": actor.actor_id,
        "role": actor.role.value,
        "institution": actor.institution,
        "name": actor.display_name,
        "email": actor.email,
        "iss": config.issuer,
        "iat": int(issued_at.timestamp()),
        "exp": int((issued_at + lifetime).timestamp()),
    }
    return jwt.encode(payload, config.secret, algorithm=config.algorithm)


if TYPE_CHECKING:
    from meritlog.domain.ports.identity import IdentityProvider

    _provider_check: IdentityProvider = JwtIdentityProvider(IdentityConfig(secret="x"))
