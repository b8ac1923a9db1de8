"""HTTP client for the claims API."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Any

import httpx
import pydantic

from meritlog.adapters.http_resilience import ResilienceConfig, ResilientClient
from meritlog.config.api import ApiConfig, get_api_config
from meritlog.domain.errors import (
    Forbidden,
    NotFound,
    TransientIOError,
    Unauthorized,
    ValidationError,
)
from meritlog.domain.review import ReviewOutcome

from .schema import (
    ClaimListPayload,
    ClaimPayload,
    ErrorPayload,
    ReviewRequestPayload,
    ReviewResponsePayload,
)
from .translator import parse_claim

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType
    from uuid import UUID

    from meritlog.domain.model import AchievementClaim, ClaimStatus, Decision
    from meritlog.domain.submission import SubmissionRequest

log = getLogger(__name__)

CLAIMS_PATH = "/claims"


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


def _error_message(response: httpx.Response) -> tuple[str, dict[str, str]]:
    try:
        payload = ErrorPayload.model_validate(response.json())
    except (ValueError, pydantic.ValidationError):
        return response.reason_phrase or f"HTTP {response.status_code}", {}
    return payload.error, payload.fields


def _raise_for_status(response: httpx.Response, *, claim_id: UUID | None = None) -> None:
    status = response.status_code
    if status < 400:
        return
    message, fields = _error_message(response)
    if status == 400:
        raise ValidationError(fields or {"request": message})
    if status == 401:
        raise Unauthorized(message)
    if status == 403:
        raise Forbidden(message)
    if status == 404:
        raise NotFound(claim_id)
    if status >= 500 or status == 429:
        log.warning("Claims API unavailable (%d): %s", status, message)
        raise TransientIOError(f"Claims API unavailable ({status}): {message}")
    log.error("Unexpected claims API response %d: %s", status, message)
    raise TransientIOError(f"Unexpected claims API response ({status}): {message}")


@dataclass(slots=True)
class HttpClaimGateway:
    """Reaches a remote claims API on behalf of one bearer credential.

    The underlying client is created on first use and kept until ``aclose``, so
    a dashboard's polling shares one connection pool and rate limiter.
    """

    credential: str
    config: ApiConfig = field(default_factory=get_api_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )
    _client: ResilientClient | None = field(default=None, init=False, repr=False)

    async def __aenter__(self) -> HttpClaimGateway:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        client, self._client = self._client, None
        if client is not None:
            await client.aclose()

    async def list_claims(
        self,
        status_filter: ClaimStatus | None = None,
    ) -> list[AchievementClaim]:
        params = {"status": status_filter.value} if status_filter is not None else None
        response = await self._perform_request("GET", CLAIMS_PATH, params=params)
        _raise_for_status(response)
        payload = self._parse(ClaimListPayload, response)
        return [parse_claim(item) for item in payload.claims]

    async def submit(self, request: SubmissionRequest) -> AchievementClaim:
        data = {
            "title": request.title,
            "description": request.description,
            "date": request.date,
        }
        if request.category is not None:
            data["category"] = request.category
        files = [
            ("evidence", (upload.original_name, upload.content, upload.mime_type))
            for upload in request.evidence
        ]
        response = await self._perform_request(
            "POST",
            CLAIMS_PATH,
            data=data,
            files=files or None,
        )
        _raise_for_status(response)
        claim = parse_claim(self._parse(ClaimPayload, response))
        log.info("Submitted claim %s", claim.id)
        return claim

    async def review(
        self,
        claim_id: UUID,
        decision: Decision,
        comments: str | None = None,
    ) -> ReviewOutcome:
        body = ReviewRequestPayload(decision=decision, comments=comments)
        response = await self._perform_request(
            "POST",
            f"{CLAIMS_PATH}/{claim_id}/review",
            json=body.model_dump(mode="json", by_alias=True),
        )
        if response.status_code == httpx.codes.CONFLICT:
            payload = self._parse(ReviewResponsePayload, response)
            current = parse_claim(payload.claim)
            log.info("Review of claim %s lost: already %s", claim_id, current.status.value)
            return ReviewOutcome(claim=current, committed=False)
        _raise_for_status(response, claim_id=claim_id)
        payload = self._parse(ReviewResponsePayload, response)
        return ReviewOutcome(claim=parse_claim(payload.claim), committed=payload.committed)

    def _ensure_client(self) -> ResilientClient:
        if self._client is None:
            self._client = self.client_factory(self.config.resilience)
        return self._client

    async def _perform_request(
        self,
        method: str,
        path: str,
        **kwargs: Any,
    ) -> httpx.Response:
        client = self._ensure_client()
        headers = {"Authorization": f"Bearer {self.credential}"}
        try:
            return await client.request(method, path, headers=headers, **kwargs)
        except httpx.TransportError as exc:
            log.warning("Claims API request %s %s failed: %s", method, path, exc)
            raise TransientIOError(f"Claims API unreachable: {exc}") from exc

    @staticmethod
    def _json(response: httpx.Response) -> object:
        try:
            return response.json()
        except ValueError as exc:
            raise TransientIOError("Claims API returned a non-JSON body") from exc

    def _parse[T: pydantic.BaseModel](self, model: type[T], response: httpx.Response) -> T:
        try:
            return model.model_validate(self._json(response))
        except pydantic.ValidationError as exc:
            log.error("Unexpected claims API payload: %s", exc)
            raise TransientIOError("Unexpected claims API response payload") from exc


if TYPE_CHECKING:
    from meritlog.domain.ports.gateway import ClaimGateway

    _gateway_check: ClaimGateway = HttpClaimGateway("token")
