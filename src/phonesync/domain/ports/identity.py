"""Ports for the identity-account store.

Implementations translate provider failures into
:class:`~phonesync.domain.errors.AccountConflictError`,
:class:`~phonesync.domain.errors.AccountNotFoundError` or a plain
:class:`~phonesync.domain.errors.IdentityStoreError`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from phonesync.domain.model import IdentityAccount


@runtime_checkable
class IdentityStore(Protocol):
    async def get_account(self, account_id: str) -> IdentityAccount | None:
        """Return the account or ``None`` when no account has this id."""
        ...

    async def create_account(
        self,
        account_id: str,
        *,
        email: str,
        password: str,
        phone_number: str,
    ) -> IdentityAccount: ...

    async def update_account(
        self,
        account_id: str,
        *,
        email: str | None = None,
        password: str | None = None,
        phone_number: str | None = None,
    ) -> IdentityAccount: ...


__all__ = ["IdentityStore"]
