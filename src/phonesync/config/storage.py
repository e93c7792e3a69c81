"""Directory database location."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

APP_DIR_NAME: Final[str] = "phonesync"
DEFAULT_DB_FILENAME: Final[str] = "directory.db"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path

    def database_uri(self) -> str:
        """SQLite URI inside ``data_dir``; the directory is created on demand."""

        data_dir = self.data_dir.expanduser().resolve()
        data_dir.mkdir(parents=True, exist_ok=True)
        return f"sqlite+pysqlite:///{data_dir / DEFAULT_DB_FILENAME}"


@dataclass(frozen=True, slots=True)
class DirectoryConfig:
    uri: str


def get_storage_config() -> StorageConfig:
    env_dir = os.getenv("PHONESYNC_DATA_DIR")
    if env_dir:
        return StorageConfig(data_dir=Path(env_dir))
    base = os.getenv("XDG_DATA_HOME")
    base_path = Path(base) if base else Path.home() / ".local" / "share"
    return StorageConfig(data_dir=base_path / APP_DIR_NAME)


def get_directory_config(*, storage: StorageConfig | None = None) -> DirectoryConfig:
    env_uri = os.getenv("DATABASE_URI")
    if env_uri:
        return DirectoryConfig(uri=env_uri)
    return DirectoryConfig(uri=(storage or get_storage_config()).database_uri())
