"""Per-candidate reconciliation against the identity-account store."""

from __future__ import annotations

import asyncio
import secrets
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Final

from phonesync.domain.derivation import derive_email
from phonesync.domain.errors import (
    AccountConflictError,
    AccountNotFoundError,
    ConflictKey,
    IdentityStoreError,
    ServiceError,
)
from phonesync.domain.model import OutcomeKind, ReconciliationOutcome
from phonesync.domain.phone import is_canonical

if TYPE_CHECKING:
    from collections.abc import Awaitable

    from phonesync.domain.model import CandidateEntry, IdentityAccount
    from phonesync.domain.ports import DirectoryStore, IdentityStore

log = getLogger(__name__)

MIN_PASSWORD_LENGTH: Final[int] = 6
DEFAULT_CALL_TIMEOUT_SECONDS: Final[float] = 15.0
TIMEOUT_DETAIL: Final[str] = "timeout"


@dataclass(frozen=True, slots=True)
class PasswordPolicy:
    """Shared batch password when one is given, otherwise a temporary one per account."""

    explicit: str | None = None

    def password_for_account(self) -> str:
        if self.explicit is not None and len(self.explicit) >= MIN_PASSWORD_LENGTH:
            return self.explicit
        return f"Temp{secrets.token_hex(4)}!1"


def classify_failure(exc: IdentityStoreError) -> OutcomeKind:
    if isinstance(exc, AccountConflictError):
        return OutcomeKind.CONFLICT
    if isinstance(exc, AccountNotFoundError):
        return OutcomeKind.NOT_FOUND
    return OutcomeKind.ERROR


async def call_with_timeout[T](awaitable: Awaitable[T], timeout: float | None) -> T:
    async with asyncio.timeout(timeout):
        return await awaitable


@dataclass(slots=True)
class AccountReconciler:
    """Create or update the identity account of one candidate and record its email."""

    identity: IdentityStore
    directory: DirectoryStore
    domain: str
    passwords: PasswordPolicy = field(default_factory=PasswordPolicy)
    dry_run: bool = False
    call_timeout: float | None = DEFAULT_CALL_TIMEOUT_SECONDS

    async def __call__(self, candidate: CandidateEntry) -> ReconciliationOutcome:
        return await self.reconcile(candidate)

    async def reconcile(self, candidate: CandidateEntry) -> ReconciliationOutcome:
        phone = candidate.canonical_phone
        if not is_canonical(phone):
            return ReconciliationOutcome(
                id=candidate.id,
                canonical_phone=phone,
                kind=OutcomeKind.INVALID,
                detail=f"unusable phone number: {phone!r}",
            )

        email = derive_email(phone, self.domain)
        if self.dry_run:
            return ReconciliationOutcome(
                id=candidate.id, canonical_phone=phone, kind=OutcomeKind.PLANNED, email=email
            )

        try:
            kind = await self._apply(candidate.id, email=email, phone=phone)
        except IdentityStoreError as exc:
            return ReconciliationOutcome(
                id=candidate.id,
                canonical_phone=phone,
                kind=classify_failure(exc),
                email=email,
                detail=exc.provider_code,
            )
        except TimeoutError:
            log.warning("Identity store call timed out for %s", candidate.id)
            return ReconciliationOutcome(
                id=candidate.id,
                canonical_phone=phone,
                kind=OutcomeKind.ERROR,
                email=email,
                detail=TIMEOUT_DETAIL,
            )

        return ReconciliationOutcome(
            id=candidate.id,
            canonical_phone=phone,
            kind=kind,
            email=email,
            detail=await self._write_back(candidate.id, email),
        )

    async def _apply(self, account_id: str, *, email: str, phone: str) -> OutcomeKind:
        existing: IdentityAccount | None = await call_with_timeout(
            self.identity.get_account(account_id), self.call_timeout
        )
        password = self.passwords.password_for_account()
        if existing is not None:
            await self._update(account_id, email=email, password=password, phone=phone)
            return OutcomeKind.UPDATED
        try:
            await call_with_timeout(
                self.identity.create_account(
                    account_id, email=email, password=password, phone_number=phone
                ),
                self.call_timeout,
            )
        except AccountConflictError as exc:
            if exc.key is not ConflictKey.ID:
                raise
            # a retried create whose first attempt already went through
            log.info("Account %s appeared during create; updating it instead", account_id)
            await self._update(account_id, email=email, password=password, phone=phone)
            return OutcomeKind.UPDATED
        return OutcomeKind.CREATED

    async def _update(self, account_id: str, *, email: str, password: str, phone: str) -> None:
        await call_with_timeout(
            self.identity.update_account(
                account_id, email=email, password=password, phone_number=phone
            ),
            self.call_timeout,
        )

    async def _write_back(self, record_id: str, email: str) -> str | None:
        # Not transactional with the account call: a later run re-derives the same email.
        try:
            await call_with_timeout(
                self.directory.update_fields(record_id, {"email": email}), self.call_timeout
            )
        except (ServiceError, TimeoutError) as exc:
            reason = str(exc) or TIMEOUT_DETAIL
            log.warning("Directory write-back failed for %s: %s", record_id, reason)
            return f"directory write-back failed: {reason}"
        return None


__all__ = [
    "DEFAULT_CALL_TIMEOUT_SECONDS",
    "MIN_PASSWORD_LENGTH",
    "AccountReconciler",
    "PasswordPolicy",
    "call_with_timeout",
    "classify_failure",
]
