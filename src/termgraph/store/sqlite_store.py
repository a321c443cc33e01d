"""SQLite implementation of the graph store contract.

Strings live in ``kv`` and sorted sets in ``zset``. One connection is shared by
all threads and guarded by a lock, so every command, batch and multi-read runs
serialized against the others.
"""

from __future__ import annotations

import logging
import os
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Sequence

from ..errors import StoreCommandError, StoreConnectionError
from .base import READ_OPS, WRITE_OPS, WriteBatch, check_ops


SCHEMA_VERSION = 1

logger = logging.getLogger(__name__)


def connect(db_path: str | os.PathLike[str]) -> sqlite3.Connection:
    if str(db_path) != ":memory:":
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    try:
        conn = sqlite3.connect(str(db_path), check_same_thread=False, isolation_level=None)
    except sqlite3.Error as e:
        raise StoreConnectionError(f"Cannot open SQLite store at {db_path}: {e}") from e
    if str(db_path) != ":memory:":
        conn.execute("PRAGMA journal_mode=WAL;")
    conn.execute("PRAGMA synchronous=NORMAL;")
    return conn


def init_db(conn: sqlite3.Connection) -> None:
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS meta (
          key TEXT PRIMARY KEY,
          value TEXT NOT NULL
        );
        """
    )
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS kv (
          key TEXT PRIMARY KEY,
          value TEXT NOT NULL
        );
        """
    )
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS zset (
          key TEXT NOT NULL,
          member TEXT NOT NULL,
          score REAL NOT NULL,
          PRIMARY KEY (key, member)
        );
        """
    )
    conn.execute("CREATE INDEX IF NOT EXISTS idx_zset_key_score ON zset(key, score);")
    conn.execute(
        "INSERT OR REPLACE INTO meta(key, value) VALUES(?, ?)",
        ("schema_version", str(SCHEMA_VERSION)),
    )


def glob_to_sqlite(pattern: str) -> str:
    """Translate a Redis glob (backslash escapes) into SQLite GLOB syntax."""
    out: list[str] = []
    i = 0
    while i < len(pattern):
        ch = pattern[i]
        if ch == "\\" and i + 1 < len(pattern):
            nxt = pattern[i + 1]
            # GLOB has no escape character; bracket the literal instead.
            out.append(f"[{nxt}]" if nxt in "*?[" else nxt)
            i += 2
            continue
        out.append(ch)
        i += 1
    return "".join(out)


def _redis_slice(rows: list[Any], start: int, end: int) -> list[Any]:
    n = len(rows)
    if start < 0:
        start = max(n + start, 0)
    if end < 0:
        end = n + end
    if start > end or start >= n:
        return []
    return rows[start : end + 1]


class SQLiteStore:
    def __init__(self, db_path: str | os.PathLike[str] = ":memory:"):
        self.db_path = str(db_path)
        self._lock = threading.RLock()
        self.conn = connect(db_path)
        try:
            init_db(self.conn)
        except sqlite3.Error as e:
            raise StoreConnectionError(f"Cannot initialize SQLite store at {db_path}: {e}") from e

    @contextmanager
    def _transaction(self, mode: str = "DEFERRED") -> Iterator[sqlite3.Connection]:
        with self._lock:
            try:
                self.conn.execute(f"BEGIN {mode}")
                try:
                    yield self.conn
                except BaseException:
                    self.conn.execute("ROLLBACK")
                    raise
                self.conn.execute("COMMIT")
            except sqlite3.Error as e:
                raise StoreCommandError(f"SQLite command failed: {e}") from e

    # Single commands. The underscore variants assume the lock is held.

    def _get(self, key: str) -> str | None:
        row = self.conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        return None if row is None else str(row[0])

    def _set(self, key: str, value: str) -> None:
        self.conn.execute(
            "INSERT INTO kv(key, value) VALUES(?, ?) ON CONFLICT(key) DO UPDATE SET value = excluded.value",
            (key, str(value)),
        )

    def _incrby(self, key: str, amount: int) -> int:
        current = self._get(key)
        try:
            value = int(current or 0) + int(amount)
        except ValueError as e:
            raise StoreCommandError(f"Value at {key} is not an integer") from e
        self._set(key, str(value))
        return value

    def _zincrby(self, key: str, amount: float, member: str) -> float:
        self.conn.execute(
            """
            INSERT INTO zset(key, member, score) VALUES(?, ?, ?)
            ON CONFLICT(key, member) DO UPDATE SET score = score + excluded.score
            """,
            (key, member, float(amount)),
        )
        return float(self._zscore(key, member) or 0.0)

    def _zadd(self, key: str, mapping: dict[str, float]) -> int:
        added = 0
        for member, score in mapping.items():
            if self._zscore(key, member) is None:
                added += 1
            self.conn.execute(
                """
                INSERT INTO zset(key, member, score) VALUES(?, ?, ?)
                ON CONFLICT(key, member) DO UPDATE SET score = excluded.score
                """,
                (key, member, float(score)),
            )
        return added

    def _zcard(self, key: str) -> int:
        return int(self.conn.execute("SELECT COUNT(*) FROM zset WHERE key = ?", (key,)).fetchone()[0])

    def _zscore(self, key: str, member: str) -> float | None:
        row = self.conn.execute("SELECT score FROM zset WHERE key = ? AND member = ?", (key, member)).fetchone()
        return None if row is None else float(row[0])

    def _run(self, op: tuple[Any, ...]) -> Any:
        name, *args = op
        return getattr(self, "_" + name)(*args)

    def get(self, key: str) -> str | None:
        with self._transaction():
            return self._get(key)

    def set(self, key: str, value: str) -> None:
        with self._transaction("IMMEDIATE"):
            self._set(key, value)

    def mget(self, keys: Sequence[str]) -> list[str | None]:
        with self._transaction():
            return [self._get(k) for k in keys]

    def incrby(self, key: str, amount: int = 1) -> int:
        with self._transaction("IMMEDIATE"):
            return self._incrby(key, amount)

    def zincrby(self, key: str, amount: float, member: str) -> float:
        with self._transaction("IMMEDIATE"):
            return self._zincrby(key, amount, member)

    def zadd(self, key: str, mapping: dict[str, float]) -> int:
        with self._transaction("IMMEDIATE"):
            return self._zadd(key, mapping)

    def zrange(
        self,
        key: str,
        start: int,
        end: int,
        *,
        desc: bool = False,
        withscores: bool = False,
    ) -> list[Any]:
        # Redis orders equal scores lexicographically by member.
        order = "DESC" if desc else "ASC"
        with self._transaction():
            rows = self.conn.execute(
                f"SELECT member, score FROM zset WHERE key = ? ORDER BY score {order}, member {order}",
                (key,),
            ).fetchall()
        rows = _redis_slice(rows, int(start), int(end))
        if withscores:
            return [(str(m), float(s)) for m, s in rows]
        return [str(m) for m, _ in rows]

    def zcard(self, key: str) -> int:
        with self._transaction():
            return self._zcard(key)

    def zscore(self, key: str, member: str) -> float | None:
        with self._transaction():
            return self._zscore(key, member)

    def scan_keys(self, pattern: str) -> list[str]:
        glob = glob_to_sqlite(pattern)
        with self._transaction():
            rows = self.conn.execute(
                """
                SELECT key FROM kv WHERE key GLOB ?
                UNION
                SELECT DISTINCT key FROM zset WHERE key GLOB ?
                """,
                (glob, glob),
            ).fetchall()
        return [str(r[0]) for r in rows]

    def read_many(self, ops: Sequence[tuple[Any, ...]]) -> list[Any]:
        check_ops(ops, READ_OPS)
        with self._transaction():
            return [self._run(op) for op in ops]

    def apply(self, batch: WriteBatch, *, atomic: bool = True) -> None:
        # A single connection makes every batch one transaction; `atomic` only
        # matters for stores that can pipeline without MULTI.
        if not batch:
            return
        check_ops(batch.ops, WRITE_OPS)
        with self._transaction("IMMEDIATE"):
            for op in batch.ops:
                self._run(op)
        logger.debug("Applied %d writes to %s", len(batch), self.db_path)

    def ping(self) -> bool:
        with self._transaction():
            self.conn.execute("SELECT 1").fetchone()
        return True

    def close(self) -> None:
        with self._lock:
            self.conn.close()
