"""Bounded-concurrency batch runs over directory candidates.

Every candidate is handled by an async handler returning a
:class:`~phonesync.domain.model.ReconciliationOutcome`. A semaphore caps the
number of handlers in flight so the identity store sees a bounded number of
simultaneous requests. Handler failures end up in the result as ``error``
outcomes; only failures to read the directory abort a run.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Final

from phonesync.domain.errors import InvalidArgumentError
from phonesync.domain.model import BatchResult, CandidateEntry, OutcomeKind, ReconciliationOutcome

from .linking import PhoneLinker
from .reconcile import DEFAULT_CALL_TIMEOUT_SECONDS, AccountReconciler, PasswordPolicy
from .selection import select_candidates, select_phone_records

if TYPE_CHECKING:
    from collections.abc import Sequence

    from phonesync.domain.ports import DirectoryStore, IdentityStore

log = getLogger(__name__)

DEFAULT_CONCURRENCY: Final[int] = 20

type CandidateHandler = Callable[[CandidateEntry], Awaitable[ReconciliationOutcome]]


@dataclass(frozen=True, slots=True)
class BackfillRequest:
    domain: str
    password: str | None = None
    limit: int | None = None
    dry_run: bool = False
    community_scope: str | None = None


@dataclass(frozen=True, slots=True)
class LinkPhonesRequest:
    limit: int | None = None
    dry_run: bool = False
    community_scope: str | None = None


async def run_batch(
    candidates: Sequence[CandidateEntry],
    handler: CandidateHandler,
    *,
    concurrency: int = DEFAULT_CONCURRENCY,
) -> BatchResult:
    """Run ``handler`` for every candidate, keeping ``items`` in candidate order."""

    if concurrency < 1:
        raise ValueError("Concurrency must be at least 1")
    semaphore = asyncio.Semaphore(concurrency)

    async def run_one(candidate: CandidateEntry) -> ReconciliationOutcome:
        async with semaphore:
            try:
                outcome = await handler(candidate)
            except Exception as exc:  # noqa: BLE001
                log.exception("Unexpected failure while reconciling %s", candidate.id)
                outcome = ReconciliationOutcome(
                    id=candidate.id,
                    canonical_phone=candidate.canonical_phone,
                    kind=OutcomeKind.ERROR,
                    detail=str(exc) or type(exc).__name__,
                )
        _log_outcome(outcome)
        return outcome

    outcomes = await asyncio.gather(*(run_one(candidate) for candidate in candidates))
    result = BatchResult()
    for outcome in outcomes:
        result.record(outcome)
    return result


async def run_backfill(
    request: BackfillRequest,
    *,
    directory: DirectoryStore,
    identity: IdentityStore,
    concurrency: int = DEFAULT_CONCURRENCY,
    call_timeout: float | None = DEFAULT_CALL_TIMEOUT_SECONDS,
) -> BatchResult:
    """Derive and provision emails for every phone-only directory record."""

    domain = request.domain.strip()
    if not domain:
        raise InvalidArgumentError("Missing email domain")

    records = await directory.list_records()
    candidates = select_candidates(
        records, community_scope=request.community_scope, limit=request.limit
    )
    log.info(
        "Backfilling %s of %s directory records (dry_run=%s, community=%s)",
        len(candidates),
        len(records),
        request.dry_run,
        request.community_scope,
    )
    reconciler = AccountReconciler(
        identity=identity,
        directory=directory,
        domain=domain,
        passwords=PasswordPolicy(explicit=(request.password or "").strip() or None),
        dry_run=request.dry_run,
        call_timeout=call_timeout,
    )
    result = await run_batch(candidates, reconciler, concurrency=concurrency)
    _log_summary("Backfill", result)
    return result


async def run_phone_linking(
    request: LinkPhonesRequest,
    *,
    directory: DirectoryStore,
    identity: IdentityStore,
    concurrency: int = DEFAULT_CONCURRENCY,
    call_timeout: float | None = DEFAULT_CALL_TIMEOUT_SECONDS,
) -> BatchResult:
    """Copy directory phone numbers onto the matching identity accounts."""

    records = await directory.list_records()
    candidates = select_phone_records(
        records, community_scope=request.community_scope, limit=request.limit
    )
    log.info("Linking phone numbers for %s directory records", len(candidates))
    linker = PhoneLinker(identity=identity, dry_run=request.dry_run, call_timeout=call_timeout)
    result = await run_batch(candidates, linker, concurrency=concurrency)
    _log_summary("Phone linking", result)
    return result


def _log_outcome(outcome: ReconciliationOutcome) -> None:
    if outcome.kind.is_failure:
        log.warning(
            "[%s] id=%s phone=%s %s",
            outcome.kind,
            outcome.id,
            outcome.canonical_phone,
            outcome.detail or "",
        )
        return
    log.info(
        "[%s] id=%s phone=%s email=%s",
        outcome.kind,
        outcome.id,
        outcome.canonical_phone,
        outcome.email or "-",
    )


def _log_summary(label: str, result: BatchResult) -> None:
    log.info(
        "%s finished: processed=%s, planned=%s, created=%s, updated=%s, "
        "conflicts=%s, not_found=%s, invalid=%s, errors=%s",
        label,
        result.processed,
        result.planned,
        result.created,
        result.updated,
        result.conflicts,
        result.not_found,
        result.invalid,
        result.errors,
    )


__all__ = [
    "DEFAULT_CONCURRENCY",
    "BackfillRequest",
    "CandidateHandler",
    "LinkPhonesRequest",
    "run_backfill",
    "run_batch",
    "run_phone_linking",
]
