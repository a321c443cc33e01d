"""Term cooccurrence graph: key layout, node descriptors and ingestion."""

from .build import GraphBuilder
from .keys import KeyCodec
from .nodes import Group, Leaf, Node

__all__ = ["GraphBuilder", "Group", "KeyCodec", "Leaf", "Node"]
