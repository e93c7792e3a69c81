"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy import create_engine

from phonesync.adapters.identity_toolkit import IdentityToolkitStore
from phonesync.adapters.sqlalchemy import SqlAlchemyDirectoryStore, create_all_tables
from phonesync.config import get_backfill_config, get_directory_config, get_identity_config
from phonesync.domain.backfill import run_backfill, run_phone_linking
from phonesync.domain.lookup import resolve_email_by_phone

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from phonesync.config import BackfillConfig
    from phonesync.domain.backfill import BackfillRequest, LinkPhonesRequest
    from phonesync.domain.model import BatchResult, LookupResult
    from phonesync.domain.ports import DirectoryStore, IdentityStore


log = getLogger(__name__)


def build_directory_store(
    *,
    database_uri: str | None = None,
    create_schema: bool = False,
) -> SqlAlchemyDirectoryStore:
    """Create the directory store handle; call once per process."""

    engine = create_engine(database_uri or get_directory_config().uri, future=True)
    if create_schema:
        create_all_tables(engine)
    return SqlAlchemyDirectoryStore(engine)


def build_identity_store() -> IdentityToolkitStore:
    return IdentityToolkitStore(config=get_identity_config())


def backfill_emails(
    request: BackfillRequest,
    *,
    directory: DirectoryStore | None = None,
    identity: IdentityStore | None = None,
    settings: BackfillConfig | None = None,
) -> BatchResult:
    """Backfill derived emails using the configured adapters."""

    effective_settings = settings or get_backfill_config()
    effective_directory = directory or build_directory_store()
    log.info(
        "Starting email backfill: domain=%s, limit=%s, dry_run=%s, community=%s",
        request.domain,
        request.limit,
        request.dry_run,
        request.community_scope,
    )

    def run(store: IdentityStore) -> Awaitable[BatchResult]:
        return run_backfill(
            request,
            directory=effective_directory,
            identity=store,
            concurrency=effective_settings.concurrency,
            call_timeout=effective_settings.call_timeout_seconds,
        )

    return asyncio.run(_with_identity_store(identity, run))


def link_phones(
    request: LinkPhonesRequest,
    *,
    directory: DirectoryStore | None = None,
    identity: IdentityStore | None = None,
    settings: BackfillConfig | None = None,
) -> BatchResult:
    """Copy directory phone numbers onto existing identity accounts."""

    effective_settings = settings or get_backfill_config()
    effective_directory = directory or build_directory_store()
    log.info(
        "Starting phone linking: limit=%s, dry_run=%s, community=%s",
        request.limit,
        request.dry_run,
        request.community_scope,
    )

    def run(store: IdentityStore) -> Awaitable[BatchResult]:
        return run_phone_linking(
            request,
            directory=effective_directory,
            identity=store,
            concurrency=effective_settings.concurrency,
            call_timeout=effective_settings.call_timeout_seconds,
        )

    return asyncio.run(_with_identity_store(identity, run))


def lookup_email(phone: str, *, directory: DirectoryStore | None = None) -> LookupResult:
    effective_directory = directory or build_directory_store()
    return asyncio.run(resolve_email_by_phone(effective_directory, phone))


async def _with_identity_store(
    identity: IdentityStore | None,
    run: Callable[[IdentityStore], Awaitable[BatchResult]],
) -> BatchResult:
    if identity is not None:
        return await run(identity)
    async with build_identity_store() as store:
        return await run(store)
