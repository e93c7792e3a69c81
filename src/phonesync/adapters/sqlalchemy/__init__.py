"""SQLAlchemy adapter package for the user directory."""

from __future__ import annotations

from .directory import SqlAlchemyDirectoryStore
from .mappings import create_all_tables, metadata, users_table

__all__ = [
    "SqlAlchemyDirectoryStore",
    "create_all_tables",
    "metadata",
    "users_table",
]
