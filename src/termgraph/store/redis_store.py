"""Redis implementation of the graph store contract (redis-py, sync)."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Sequence

from redis import Redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError, TimeoutError as RedisTimeoutError

from ..errors import StoreCommandError, StoreConnectionError
from .base import READ_OPS, WRITE_OPS, WriteBatch, check_ops


logger = logging.getLogger(__name__)


class RedisStore:
    def __init__(
        self,
        *,
        host: str = "localhost",
        port: int = 6379,
        db: int = 0,
        password: str | None = None,
        client: Redis | None = None,
    ):
        self.host = host
        self.port = int(port)
        self.db = int(db)
        self.client = client or Redis(
            host=host,
            port=self.port,
            db=self.db,
            password=password,
            decode_responses=True,
        )

    @contextmanager
    def _errors(self, what: str) -> Iterator[None]:
        try:
            yield
        except (RedisConnectionError, RedisTimeoutError) as e:
            raise StoreConnectionError(f"Redis unreachable at {self.host}:{self.port}/{self.db}: {e}") from e
        except RedisError as e:
            raise StoreCommandError(f"Redis {what} failed: {e}") from e

    def get(self, key: str) -> str | None:
        with self._errors("GET"):
            return self.client.get(key)

    def set(self, key: str, value: str) -> None:
        with self._errors("SET"):
            self.client.set(key, value)

    def mget(self, keys: Sequence[str]) -> list[str | None]:
        if not keys:
            return []
        with self._errors("MGET"):
            return list(self.client.mget(list(keys)))

    def incrby(self, key: str, amount: int = 1) -> int:
        with self._errors("INCRBY"):
            return int(self.client.incrby(key, int(amount)))

    def zincrby(self, key: str, amount: float, member: str) -> float:
        with self._errors("ZINCRBY"):
            return float(self.client.zincrby(key, amount, member))

    def zadd(self, key: str, mapping: dict[str, float]) -> int:
        with self._errors("ZADD"):
            return int(self.client.zadd(key, mapping))

    def zrange(
        self,
        key: str,
        start: int,
        end: int,
        *,
        desc: bool = False,
        withscores: bool = False,
    ) -> list[Any]:
        with self._errors("ZRANGE"):
            if desc:
                rows = self.client.zrevrange(key, start, end, withscores=withscores)
            else:
                rows = self.client.zrange(key, start, end, withscores=withscores)
        if withscores:
            return [(str(m), float(s)) for m, s in rows]
        return [str(m) for m in rows]

    def zcard(self, key: str) -> int:
        with self._errors("ZCARD"):
            return int(self.client.zcard(key))

    def zscore(self, key: str, member: str) -> float | None:
        with self._errors("ZSCORE"):
            score = self.client.zscore(key, member)
        return None if score is None else float(score)

    def scan_keys(self, pattern: str) -> list[str]:
        with self._errors("SCAN"):
            # SCAN may return a key more than once.
            return list(dict.fromkeys(str(k) for k in self.client.scan_iter(match=pattern, count=1000)))

    def read_many(self, ops: Sequence[tuple[Any, ...]]) -> list[Any]:
        check_ops(ops, READ_OPS)
        with self._errors("MULTI/EXEC"):
            pipe = self.client.pipeline(transaction=True)
            for name, *args in ops:
                getattr(pipe, name)(*args)
            return list(pipe.execute())

    def apply(self, batch: WriteBatch, *, atomic: bool = True) -> None:
        if not batch:
            return
        check_ops(batch.ops, WRITE_OPS)
        with self._errors("pipeline"):
            pipe = self.client.pipeline(transaction=atomic)
            for name, *args in batch.ops:
                getattr(pipe, name)(*args)
            pipe.execute()
        logger.debug("Applied %d writes (atomic=%s)", len(batch), atomic)

    def ping(self) -> bool:
        with self._errors("PING"):
            return bool(self.client.ping())

    def close(self) -> None:
        self.client.close()
