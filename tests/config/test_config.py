from __future__ import annotations

import logging
from pathlib import Path

import pytest
from httpx_retries import Retry

from phonesync.config import (
    ConfigurationError,
    MissingConfigurationError,
    RetryPolicy,
    StorageConfig,
    get_backfill_config,
    get_directory_config,
    get_identity_config,
    get_storage_config,
    optional_env_var,
    require_env_vars,
)
from phonesync.config.logging import resolve_log_level
from phonesync.domain.backfill import DEFAULT_CONCURRENCY
from phonesync.domain.backfill.reconcile import DEFAULT_CALL_TIMEOUT_SECONDS


def test_require_env_vars_returns_stripped_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FIRST", " one ")
    monkeypatch.setenv("SECOND", "two")

    assert require_env_vars(("FIRST", "SECOND")) == {"FIRST": "one", "SECOND": "two"}


def test_require_env_vars_lists_every_missing_name(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("FIRST", raising=False)
    monkeypatch.setenv("SECOND", "   ")

    with pytest.raises(MissingConfigurationError, match="FIRST, SECOND"):
        require_env_vars(("SECOND", "FIRST"))


def test_optional_env_var_treats_blank_as_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BLANK", "  ")

    assert optional_env_var("BLANK") is None


def test_backfill_config_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("PHONESYNC_CONCURRENCY", "PHONESYNC_CALL_TIMEOUT", "PHONESYNC_EMAIL_DOMAIN"):
        monkeypatch.delenv(name, raising=False)

    config = get_backfill_config()

    assert config.concurrency == DEFAULT_CONCURRENCY
    assert config.call_timeout_seconds == DEFAULT_CALL_TIMEOUT_SECONDS
    assert config.email_domain is None


def test_backfill_config_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PHONESYNC_CONCURRENCY", "5")
    monkeypatch.setenv("PHONESYNC_CALL_TIMEOUT", "2.5")
    monkeypatch.setenv("PHONESYNC_EMAIL_DOMAIN", "ex.com")

    config = get_backfill_config()

    assert (config.concurrency, config.call_timeout_seconds, config.email_domain) == (
        5,
        2.5,
        "ex.com",
    )


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("PHONESYNC_CONCURRENCY", "lots"),
        ("PHONESYNC_CONCURRENCY", "0"),
        ("PHONESYNC_CALL_TIMEOUT", "soon"),
        ("PHONESYNC_CALL_TIMEOUT", "-1"),
    ],
)
def test_backfill_config_rejects_bad_values(
    monkeypatch: pytest.MonkeyPatch, name: str, value: str
) -> None:
    monkeypatch.setenv(name, value)

    with pytest.raises(ConfigurationError):
        get_backfill_config()


def test_directory_config_prefers_database_uri(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "postgresql+psycopg://db/app")

    assert get_directory_config().uri == "postgresql+psycopg://db/app"


def test_directory_config_falls_back_to_data_dir(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.delenv("DATABASE_URI", raising=False)
    monkeypatch.setenv("PHONESYNC_DATA_DIR", str(tmp_path / "data"))

    uri = get_directory_config().uri

    assert uri == f"sqlite+pysqlite:///{(tmp_path / 'data').resolve() / 'directory.db'}"
    assert (tmp_path / "data").is_dir()


def test_storage_config_defaults_to_xdg_data_home(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.delenv("PHONESYNC_DATA_DIR", raising=False)
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))

    assert get_storage_config() == StorageConfig(data_dir=tmp_path / "phonesync")
    assert not (tmp_path / "phonesync").exists()


def test_retry_policy_builds_retry() -> None:
    retry = RetryPolicy(total=2).build()

    assert isinstance(retry, Retry)


def test_log_level_defaults_to_info(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("PHONESYNC_LOG_LEVEL", raising=False)

    assert resolve_log_level() == logging.INFO


def test_log_level_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PHONESYNC_LOG_LEVEL", "debug")

    assert resolve_log_level() == logging.DEBUG


def test_unknown_log_level_is_a_configuration_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PHONESYNC_LOG_LEVEL", "chatty")

    with pytest.raises(ConfigurationError) as excinfo:
        resolve_log_level()

    assert excinfo.value.code == "failed-precondition"
