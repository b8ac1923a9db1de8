"""Application configuration helpers."""

from __future__ import annotations

from .api import ApiConfig, get_api_config
from .env import require_env_var, require_env_vars
from .errors import ConfigurationError, InvalidSettingError, MissingConfigurationError
from .evidence import EvidenceConfig, get_evidence_config
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .identity import IdentityConfig, get_identity_config
from .logging import configure_logging
from .polling import PollingConfig, get_polling_config
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "ApiConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "EvidenceConfig",
    "IdentityConfig",
    "InvalidSettingError",
    "MissingConfigurationError",
    "PollingConfig",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "configure_logging",
    "get_api_config",
    "get_database_config",
    "get_evidence_config",
    "get_identity_config",
    "get_polling_config",
    "get_storage_config",
    "require_env_var",
    "require_env_vars",
]
