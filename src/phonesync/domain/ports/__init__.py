"""Domain port definitions for adapters."""

from __future__ import annotations

from .directory import DirectoryStore, RoleResolver
from .identity import IdentityStore

__all__ = [
    "DirectoryStore",
    "IdentityStore",
    "RoleResolver",
]
