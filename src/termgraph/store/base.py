from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, Sequence


# Read commands accepted by `GraphStore.read_many`.
READ_OPS = {"get", "zcard", "zscore"}
WRITE_OPS = {"set", "incrby", "zincrby", "zadd"}


@dataclass
class WriteBatch:
    """Queued store writes, applied together by `GraphStore.apply`.

    Commands use Redis argument order so a Redis pipeline can replay them
    verbatim.
    """

    ops: list[tuple[Any, ...]] = field(default_factory=list)

    def set(self, key: str, value: str) -> "WriteBatch":
        self.ops.append(("set", key, value))
        return self

    def incrby(self, key: str, amount: int = 1) -> "WriteBatch":
        self.ops.append(("incrby", key, int(amount)))
        return self

    def zincrby(self, key: str, amount: float, member: str) -> "WriteBatch":
        self.ops.append(("zincrby", key, amount, member))
        return self

    def zadd(self, key: str, mapping: dict[str, float]) -> "WriteBatch":
        self.ops.append(("zadd", key, dict(mapping)))
        return self

    def clear(self) -> None:
        self.ops.clear()

    def __len__(self) -> int:
        return len(self.ops)


class GraphStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def mget(self, keys: Sequence[str]) -> list[str | None]: ...

    def incrby(self, key: str, amount: int = 1) -> int: ...

    def zincrby(self, key: str, amount: float, member: str) -> float: ...

    def zadd(self, key: str, mapping: dict[str, float]) -> int: ...

    def zrange(
        self,
        key: str,
        start: int,
        end: int,
        *,
        desc: bool = False,
        withscores: bool = False,
    ) -> list[Any]: ...

    def zcard(self, key: str) -> int: ...

    def zscore(self, key: str, member: str) -> float | None: ...

    def scan_keys(self, pattern: str) -> list[str]: ...

    def read_many(self, ops: Sequence[tuple[Any, ...]]) -> list[Any]:
        """Run read commands as one consistent unit and return their results in order."""
        ...

    def apply(self, batch: WriteBatch, *, atomic: bool = True) -> None: ...

    def ping(self) -> bool: ...

    def close(self) -> None: ...


def check_ops(ops: Sequence[tuple[Any, ...]], allowed: set[str]) -> None:
    for op in ops:
        if not op or op[0] not in allowed:
            raise ValueError(f"Unsupported store command: {op!r}")
