"""Application configuration helpers."""

from __future__ import annotations

from .backfill import BackfillConfig, get_backfill_config
from .env import optional_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .identity import IdentityStoreConfig, get_identity_config
from .logging import configure_logging
from .storage import DirectoryConfig, StorageConfig, get_directory_config, get_storage_config

__all__ = [
    "BackfillConfig",
    "ConfigurationError",
    "DirectoryConfig",
    "IdentityStoreConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "configure_logging",
    "get_backfill_config",
    "get_directory_config",
    "get_identity_config",
    "get_storage_config",
    "optional_env_var",
    "require_env_vars",
]
