from __future__ import annotations

from typing import TYPE_CHECKING

from phonesync.app import backfill_emails, build_directory_store, link_phones, lookup_email
from phonesync.config import BackfillConfig
from phonesync.domain.backfill import BackfillRequest, LinkPhonesRequest
from phonesync.domain.model import DirectoryRecord, IdentityAccount, LookupResult
from tests.support.directory_rows import seed_directory
from tests.support.fakes import FakeDirectoryStore, FakeIdentityStore

if TYPE_CHECKING:
    from pathlib import Path


def test_backfill_emails_uses_injected_stores_and_settings() -> None:
    directory = FakeDirectoryStore(
        [DirectoryRecord(id=f"u{index}", phone=f"091234567{index}") for index in range(4)]
    )
    identity = FakeIdentityStore()

    result = backfill_emails(
        BackfillRequest(domain="ex.com", password="shared-secret"),
        directory=directory,
        identity=identity,
        settings=BackfillConfig(concurrency=2, call_timeout_seconds=1.0),
    )

    assert result.created == 4
    assert identity.max_in_flight <= 2
    assert set(identity.passwords.values()) == {"shared-secret"}


def test_link_phones_uses_injected_stores() -> None:
    directory = FakeDirectoryStore([DirectoryRecord(id="u1", phone="0912345678")])
    identity = FakeIdentityStore([IdentityAccount(id="u1", email="a@ex.com")])

    result = link_phones(
        LinkPhonesRequest(),
        directory=directory,
        identity=identity,
        settings=BackfillConfig(),
    )

    assert result.updated == 1


def test_build_directory_store_creates_schema(tmp_path: Path) -> None:
    store = build_directory_store(
        database_uri=f"sqlite+pysqlite:///{tmp_path / 'app.db'}", create_schema=True
    )
    try:
        seed_directory(
            store.engine, [DirectoryRecord(id="u1", phone="+886912345678", email="a@ex.com")]
        )

        found = lookup_email("0912345678", directory=store)

        assert found == LookupResult(email="a@ex.com", id="u1")
    finally:
        store.engine.dispose()
