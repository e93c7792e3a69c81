from __future__ import annotations

import pytest

from phonesync import main as main_module
from phonesync.config import ConfigurationError
from phonesync.domain.backfill import BackfillRequest, LinkPhonesRequest
from phonesync.domain.errors import NotFoundError
from phonesync.domain.model import BatchResult, LookupResult


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("PHONESYNC_EMAIL_DOMAIN", raising=False)
    monkeypatch.delenv("PHONESYNC_LOG_LEVEL", raising=False)


def _capture_backfill(monkeypatch: pytest.MonkeyPatch) -> list[BackfillRequest]:
    captured: list[BackfillRequest] = []

    def fake_backfill(request: BackfillRequest, **_: object) -> BatchResult:
        captured.append(request)
        return BatchResult()

    monkeypatch.setattr(main_module, "backfill_emails", fake_backfill)
    return captured


def test_main_cli_backfill_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    captured = _capture_backfill(monkeypatch)

    main_module.main(["backfill", "--domain", "ex.com"])

    assert captured == [BackfillRequest(domain="ex.com")]


def test_main_cli_backfill_with_flags(monkeypatch: pytest.MonkeyPatch) -> None:
    captured = _capture_backfill(monkeypatch)

    main_module.main(
        [
            "backfill",
            "--domain=ex.com",
            "--password",
            "secret1",
            "--dry-run",
            "--limit=25",
            "--community=A101",
        ]
    )

    assert captured == [
        BackfillRequest(
            domain="ex.com",
            password="secret1",
            limit=25,
            dry_run=True,
            community_scope="A101",
        )
    ]


def test_main_cli_backfill_domain_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    captured = _capture_backfill(monkeypatch)
    monkeypatch.setenv("PHONESYNC_EMAIL_DOMAIN", "env.example")

    main_module.main(["backfill"])

    assert captured[0].domain == "env.example"


def test_main_cli_backfill_missing_domain(monkeypatch: pytest.MonkeyPatch) -> None:
    captured = _capture_backfill(monkeypatch)

    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["backfill"])

    assert excinfo.value.code == 2
    assert captured == []


@pytest.mark.parametrize("limit", ["-1", "many"])
def test_main_cli_invalid_limit(monkeypatch: pytest.MonkeyPatch, limit: str) -> None:
    _capture_backfill(monkeypatch)

    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["backfill", "--domain", "ex.com", "--limit", limit])

    assert excinfo.value.code == 2


def test_main_cli_link_phones(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: list[LinkPhonesRequest] = []

    def fake_link(request: LinkPhonesRequest, **_: object) -> BatchResult:
        captured.append(request)
        return BatchResult()

    monkeypatch.setattr(main_module, "link_phones", fake_link)

    main_module.main(["link-phones", "--limit", "3", "--community", "B202"])

    assert captured == [LinkPhonesRequest(limit=3, community_scope="B202")]


def test_main_cli_lookup_prints_email_and_id(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    def fake_lookup(phone: str, **_: object) -> LookupResult:
        assert phone == "0912345678"
        return LookupResult(email="p886912345678@ex.com", id="u1")

    monkeypatch.setattr(main_module, "lookup_email", fake_lookup)

    main_module.main(["lookup", "0912345678"])

    assert capsys.readouterr().out == "p886912345678@ex.com\tu1\n"


def test_main_cli_service_error_exits_with_one(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_lookup(phone: str, **_: object) -> LookupResult:
        raise NotFoundError(phone)

    monkeypatch.setattr(main_module, "lookup_email", fake_lookup)

    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["lookup", "0999999999"])

    assert excinfo.value.code == 1


def test_main_cli_unexpected_error_exits_with_one(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_backfill(request: BackfillRequest, **_: object) -> BatchResult:
        raise RuntimeError("boom")

    monkeypatch.setattr(main_module, "backfill_emails", fake_backfill)

    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["backfill", "--domain", "ex.com"])

    assert excinfo.value.code == 1


def test_main_cli_requires_a_command() -> None:
    with pytest.raises(SystemExit) as excinfo:
        main_module.main([])

    assert excinfo.value.code == 2


def test_main_cli_unknown_log_level_exits_with_two(monkeypatch: pytest.MonkeyPatch) -> None:
    captured = _capture_backfill(monkeypatch)
    monkeypatch.setenv("PHONESYNC_LOG_LEVEL", "chatty")

    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["backfill", "--domain", "ex.com"])

    assert excinfo.value.code == 2
    assert captured == []


def test_main_cli_missing_credentials_exit_with_one(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_backfill(request: BackfillRequest, **_: object) -> BatchResult:
        raise ConfigurationError("No Google credentials found")

    monkeypatch.setattr(main_module, "backfill_emails", fake_backfill)

    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["backfill", "--domain", "ex.com"])

    assert excinfo.value.code == 1
