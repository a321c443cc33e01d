from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union


@dataclass(frozen=True)
class Leaf:
    tag: str
    term: str
    filtered: bool = False
    # Overrides the lower-cased term in the node key when set.
    distinct: str | None = None


@dataclass(frozen=True)
class Group:
    """A phrase node (`orig`) expanded into its component words."""

    orig: Leaf
    children: tuple[Leaf, ...] = field(default_factory=tuple)
    filtered: bool = False


Node = Union[Leaf, Group]
