"""Remote claims API configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import require_env_var
from .http_resilience import RateLimit, ResilienceConfig

API_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True, slots=True)
class ApiConfig:
    """Holds the claims API endpoint and its client policy."""

    base_url: str
    resilience: ResilienceConfig


def default_api_resilience(base_url: str) -> ResilienceConfig:
    return ResilienceConfig(
        name="claims-api",
        base_url=base_url,
        timeout_seconds=API_TIMEOUT_SECONDS,
        ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
    )


def get_api_config(
    *,
    base_url: str | None = None,
    resilience: ResilienceConfig | None = None,
) -> ApiConfig:
    url = base_url or require_env_var("MERITLOG_API_URL")
    return ApiConfig(base_url=url, resilience=resilience or default_api_resilience(url))
