"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from meritlog.adapters.api import HttpClaimGateway
from meritlog.adapters.blob_storage import LocalBlobStore
from meritlog.adapters.identity import JwtIdentityProvider
from meritlog.adapters.local_gateway import LocalClaimGateway
from meritlog.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyClaimUnitOfWork,
    is_started,
    startup,
)
from meritlog.config import get_api_config, get_evidence_config, get_storage_config
from meritlog.domain.listing import list_claims
from meritlog.domain.ports.unit_of_work import ClaimUnitOfWork
from meritlog.domain.review import review_claim
from meritlog.domain.submission import submit_claim

if TYPE_CHECKING:
    from uuid import UUID

    from meritlog.config.evidence import EvidenceConfig
    from meritlog.domain.listing import ClaimListing
    from meritlog.domain.model import AchievementClaim, Actor, ClaimStatus, Decision
    from meritlog.domain.ports import BlobStore, IdentityProvider
    from meritlog.domain.review import ReviewOutcome
    from meritlog.domain.submission import SubmissionRequest

UnitOfWorkFactory = Callable[[], ClaimUnitOfWork]


log = getLogger(__name__)


def _resolve_unit_of_work(factory: UnitOfWorkFactory | None) -> UnitOfWorkFactory:
    if factory is not None:
        return factory
    if not is_started():
        startup()
    return SqlAlchemyClaimUnitOfWork


def default_blob_store() -> LocalBlobStore:
    return LocalBlobStore(get_storage_config().evidence_root())


def authenticate(credential: str | None, *, identity: IdentityProvider | None = None) -> Actor:
    """Resolve a bearer credential to the actor it identifies."""

    provider = identity or JwtIdentityProvider()
    return provider.authenticate(credential)


def submit_achievement(
    credential: str | None,
    request: SubmissionRequest,
    *,
    identity: IdentityProvider | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    blob_store: BlobStore | None = None,
    evidence_limits: EvidenceConfig | None = None,
) -> AchievementClaim:
    actor = authenticate(credential, identity=identity)
    return submit_claim(
        actor,
        request,
        unit_of_work_factory=_resolve_unit_of_work(unit_of_work_factory),
        blob_store=blob_store or default_blob_store(),
        evidence_limits=evidence_limits or get_evidence_config(),
    )


def list_achievements(
    credential: str | None,
    status_filter: ClaimStatus | None = None,
    *,
    identity: IdentityProvider | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> ClaimListing:
    actor = authenticate(credential, identity=identity)
    return list_claims(
        actor,
        status_filter,
        unit_of_work_factory=_resolve_unit_of_work(unit_of_work_factory),
    )


def review_achievement(
    credential: str | None,
    claim_id: UUID,
    decision: Decision,
    comments: str | None = None,
    *,
    identity: IdentityProvider | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> ReviewOutcome:
    actor = authenticate(credential, identity=identity)
    outcome = review_claim(
        actor,
        claim_id,
        decision,
        comments,
        unit_of_work_factory=_resolve_unit_of_work(unit_of_work_factory),
    )
    if outcome.conflict:
        log.warning(
            "Claim %s was already %s; decision %s not applied",
            claim_id,
            outcome.claim.status.value,
            decision.value,
        )
    return outcome


def build_local_gateway(
    actor: Actor,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    blob_store: BlobStore | None = None,
    evidence_limits: EvidenceConfig | None = None,
) -> LocalClaimGateway:
    return LocalClaimGateway(
        actor=actor,
        unit_of_work_factory=_resolve_unit_of_work(unit_of_work_factory),
        blob_store=blob_store or default_blob_store(),
        evidence_limits=evidence_limits or get_evidence_config(),
    )


def build_http_gateway(credential: str, *, base_url: str | None = None) -> HttpClaimGateway:
    return HttpClaimGateway(credential=credential, config=get_api_config(base_url=base_url))
