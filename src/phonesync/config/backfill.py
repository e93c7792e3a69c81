"""Batch run defaults for backfill and phone linking."""

from __future__ import annotations

from dataclasses import dataclass

from phonesync.domain.backfill import DEFAULT_CONCURRENCY
from phonesync.domain.backfill.reconcile import DEFAULT_CALL_TIMEOUT_SECONDS

from .env import env_float, env_int, optional_env_var
from .errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class BackfillConfig:
    concurrency: int = DEFAULT_CONCURRENCY
    call_timeout_seconds: float = DEFAULT_CALL_TIMEOUT_SECONDS
    email_domain: str | None = None


def get_backfill_config() -> BackfillConfig:
    concurrency = env_int("PHONESYNC_CONCURRENCY", DEFAULT_CONCURRENCY)
    if concurrency < 1:
        raise ConfigurationError("PHONESYNC_CONCURRENCY must be at least 1")
    timeout = env_float("PHONESYNC_CALL_TIMEOUT", DEFAULT_CALL_TIMEOUT_SECONDS)
    if timeout <= 0:
        raise ConfigurationError("PHONESYNC_CALL_TIMEOUT must be positive")
    return BackfillConfig(
        concurrency=concurrency,
        call_timeout_seconds=timeout,
        email_domain=optional_env_var("PHONESYNC_EMAIL_DOMAIN"),
    )
