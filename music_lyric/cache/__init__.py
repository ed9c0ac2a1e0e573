from __future__ import annotations

from pathlib import Path

from .memory import MemoryCache, MusicCache
from .sqlite import SqliteCache

__all__ = ["MemoryCache", "MusicCache", "SqliteCache", "build_cache", "default_cache"]

_DEFAULT_CACHE = MemoryCache()


def default_cache() -> MemoryCache:
    """Process-wide cache shared by APIs built without an explicit one."""
    return _DEFAULT_CACHE


def build_cache(backend: str, db_path: Path) -> MusicCache:
    if backend == "sqlite":
        return SqliteCache(db_path)
    return MemoryCache()
