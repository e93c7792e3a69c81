"""Attach directory phone numbers to already existing identity accounts."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from phonesync.domain.errors import IdentityStoreError
from phonesync.domain.model import OutcomeKind, ReconciliationOutcome
from phonesync.domain.phone import is_canonical

from .reconcile import (
    DEFAULT_CALL_TIMEOUT_SECONDS,
    TIMEOUT_DETAIL,
    call_with_timeout,
    classify_failure,
)

if TYPE_CHECKING:
    from phonesync.domain.model import CandidateEntry
    from phonesync.domain.ports import IdentityStore

log = getLogger(__name__)


@dataclass(slots=True)
class PhoneLinker:
    """Set ``phone_number`` on the account sharing the record's id.

    Accounts are never created here; a record without an account is reported
    as ``notFound``.
    """

    identity: IdentityStore
    dry_run: bool = False
    call_timeout: float | None = DEFAULT_CALL_TIMEOUT_SECONDS

    async def __call__(self, candidate: CandidateEntry) -> ReconciliationOutcome:
        phone = candidate.canonical_phone
        if not is_canonical(phone):
            return ReconciliationOutcome(
                id=candidate.id,
                canonical_phone=phone,
                kind=OutcomeKind.INVALID,
                detail=f"unusable phone number: {phone!r}",
            )
        if self.dry_run:
            return ReconciliationOutcome(
                id=candidate.id, canonical_phone=phone, kind=OutcomeKind.PLANNED
            )

        try:
            await call_with_timeout(
                self.identity.update_account(candidate.id, phone_number=phone),
                self.call_timeout,
            )
        except IdentityStoreError as exc:
            return ReconciliationOutcome(
                id=candidate.id,
                canonical_phone=phone,
                kind=classify_failure(exc),
                detail=exc.provider_code,
            )
        except TimeoutError:
            log.warning("Identity store call timed out for %s", candidate.id)
            return ReconciliationOutcome(
                id=candidate.id,
                canonical_phone=phone,
                kind=OutcomeKind.ERROR,
                detail=TIMEOUT_DETAIL,
            )
        return ReconciliationOutcome(
            id=candidate.id, canonical_phone=phone, kind=OutcomeKind.UPDATED
        )


__all__ = ["PhoneLinker"]
