"""Claims API adapter."""

from __future__ import annotations

from .client import HttpClaimGateway
from .translator import claim_to_payload, parse_claim, serialize_claim

__all__ = [
    "HttpClaimGateway",
    "claim_to_payload",
    "parse_claim",
    "serialize_claim",
]
