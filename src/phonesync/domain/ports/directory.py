"""Ports for the user directory."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from phonesync.domain.model import DirectoryRecord


@runtime_checkable
class DirectoryStore(Protocol):
    """Document store holding one record per user."""

    async def list_records(self) -> Sequence[DirectoryRecord]: ...

    async def find_by_phone(self, phone: str, *, limit: int = 1) -> Sequence[DirectoryRecord]: ...

    async def get(self, record_id: str) -> DirectoryRecord | None: ...

    async def update_fields(self, record_id: str, fields: Mapping[str, str | None]) -> None:
        """Set only the given fields on the record, leaving the rest untouched."""
        ...


@runtime_checkable
class RoleResolver(Protocol):
    """Capability resolving the role of an authenticated caller."""

    async def resolve_role(self, caller_id: str) -> str | None: ...


__all__ = ["DirectoryStore", "RoleResolver"]
