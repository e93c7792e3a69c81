"""SQLAlchemy table metadata for the user directory."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from sqlalchemy import Column, Index, MetaData, String, Table

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

metadata = MetaData()

users_table = Table(
    "users",
    metadata,
    Column("id", String(128), primary_key=True),
    Column("phone", String(64), nullable=True),
    Column("email", String(320), nullable=True),
    Column("name", String(255), nullable=True),
    Column("service_community_code", String(64), nullable=True),
    Column("role", String(32), nullable=True),
    Index("ix_users_phone", "phone"),
)

# DirectoryRecord attribute -> users column
COLUMN_BY_FIELD: Final[dict[str, str]] = {
    "phone": "phone",
    "email": "email",
    "name": "name",
    "community_scope": "service_community_code",
    "role": "role",
}


def create_all_tables(engine: Engine) -> None:
    metadata.create_all(engine, checkfirst=True)
