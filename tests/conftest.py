from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002

from phonesync.adapters.sqlalchemy import SqlAlchemyDirectoryStore, create_all_tables

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


@pytest.fixture
def sqlite_engine(tmp_path: Path) -> Iterator[Engine]:
    # file-backed so worker threads share one database
    engine = create_engine(f"sqlite+pysqlite:///{tmp_path / 'directory.db'}", future=True)
    create_all_tables(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_directory(sqlite_engine: Engine) -> SqlAlchemyDirectoryStore:
    return SqlAlchemyDirectoryStore(sqlite_engine)
