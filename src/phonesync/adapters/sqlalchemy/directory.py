"""Directory store implementation backed by a SQLAlchemy engine."""

from __future__ import annotations

import asyncio
from contextlib import contextmanager
from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from phonesync.domain.errors import DirectoryUnavailableError, NotFoundError
from phonesync.domain.model import DirectoryRecord

from .mappings import COLUMN_BY_FIELD, users_table

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

    from sqlalchemy.engine import Engine, Row

log = getLogger(__name__)


class SqlAlchemyDirectoryStore:
    """User directory in a ``users`` table.

    Session work is blocking, so every public coroutine runs it in a worker
    thread with a session of its own.
    """

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self._session_factory: sessionmaker[Session] = sessionmaker(
            bind=engine, expire_on_commit=False
        )

    async def list_records(self) -> list[DirectoryRecord]:
        return await asyncio.to_thread(self._list_records)

    async def find_by_phone(self, phone: str, *, limit: int = 1) -> list[DirectoryRecord]:
        return await asyncio.to_thread(self._find_by_phone, phone, limit)

    async def get(self, record_id: str) -> DirectoryRecord | None:
        return await asyncio.to_thread(self._get, record_id)

    async def update_fields(self, record_id: str, fields: Mapping[str, str | None]) -> None:
        await asyncio.to_thread(self._update_fields, record_id, dict(fields))

    async def resolve_role(self, caller_id: str) -> str | None:
        record = await self.get(caller_id)
        return record.role if record is not None else None

    @contextmanager
    def _session(self) -> Iterator[Session]:
        try:
            with self._session_factory() as session:
                yield session
        except SQLAlchemyError as exc:
            log.exception("Directory store unavailable")
            raise DirectoryUnavailableError(f"Directory store unavailable: {exc}") from exc

    def _list_records(self) -> list[DirectoryRecord]:
        stmt = select(users_table).order_by(users_table.c.id)
        with self._session() as session:
            return [_to_record(row) for row in session.execute(stmt)]

    def _find_by_phone(self, phone: str, limit: int) -> list[DirectoryRecord]:
        stmt = select(users_table).where(users_table.c.phone == phone).order_by(users_table.c.id)
        if limit > 0:
            stmt = stmt.limit(limit)
        with self._session() as session:
            return [_to_record(row) for row in session.execute(stmt)]

    def _get(self, record_id: str) -> DirectoryRecord | None:
        stmt = select(users_table).where(users_table.c.id == record_id)
        with self._session() as session:
            row = session.execute(stmt).one_or_none()
        return _to_record(row) if row is not None else None

    def _update_fields(self, record_id: str, fields: dict[str, str | None]) -> None:
        unknown = set(fields).difference(COLUMN_BY_FIELD)
        if unknown:
            raise ValueError(f"Unknown directory fields: {', '.join(sorted(unknown))}")
        values = {COLUMN_BY_FIELD[name]: value for name, value in fields.items()}
        stmt = update(users_table).where(users_table.c.id == record_id).values(**values)
        with self._session() as session:
            result = session.execute(stmt)
            if result.rowcount == 0:
                raise NotFoundError(f"Directory record not found: {record_id}")
            session.commit()


def _to_record(row: Row[tuple[object, ...]]) -> DirectoryRecord:
    mapping = row._mapping  # noqa: SLF001
    return DirectoryRecord(
        id=str(mapping["id"]),
        phone=mapping["phone"],
        email=mapping["email"],
        name=mapping["name"],
        community_scope=mapping["service_community_code"],
        role=mapping["role"],
    )
