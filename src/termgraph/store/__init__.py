"""Backing stores for the term graph."""

from __future__ import annotations

from ..config import Settings
from .base import GraphStore, WriteBatch
from .redis_store import RedisStore
from .sqlite_store import SQLiteStore


def open_store(settings: Settings) -> GraphStore:
    backend = settings.backend.strip().lower()
    if backend == "sqlite":
        return SQLiteStore(settings.sqlite_path)
    if backend == "redis":
        return RedisStore(host=settings.redis_host, port=settings.redis_port, db=settings.redis_db)
    raise ValueError(f"Unknown store backend: {settings.backend!r} (expected 'redis' or 'sqlite')")


__all__ = ["GraphStore", "RedisStore", "SQLiteStore", "WriteBatch", "open_store"]
