"""Ingestion of tagged node sequences into the cooccurrence graph.

Each recorded node occurrence bumps the node's corpus frequency, the symmetric
document <-> node edge, and the directed edge from the previously recorded node.
"""

from __future__ import annotations

import logging
from typing import Iterable

from ..store.base import GraphStore, WriteBatch
from .keys import CONTENT, NEXT, TOTAL, KeyCodec
from .nodes import Group, Leaf, Node


logger = logging.getLogger(__name__)


class GraphBuilder:
    def __init__(self, store: GraphStore, codec: KeyCodec, *, buffered: bool = True):
        self.store = store
        self.codec = codec
        # buffered: one pipelined batch per document (no cross-key ordering).
        # unbuffered: every node occurrence is applied as its own atomic batch.
        self.buffered = bool(buffered)

    def increment_edges(self, batch: WriteBatch, document_id: str, key: str, prev_key: str | None) -> str:
        batch.incrby(self.codec.format(TOTAL, key), 1)

        batch.zincrby(self.codec.format(document_id), 1, key)
        batch.zincrby(self.codec.format(key), 1, document_id)

        if prev_key:
            batch.zincrby(self.codec.format(NEXT, prev_key), 1, key)

        return key

    def ingest(self, document_id: str, nodes: Iterable[Node], content: str | None = None) -> int:
        """Record a document's node sequence. Returns the number of occurrences recorded.

        `content`, when given, is stored verbatim in the same batch as the counters.
        """
        batch = WriteBatch()
        batch.incrby(self.codec.format(TOTAL), 1)
        if content is not None:
            batch.set(self.codec.format(CONTENT, document_id), content)

        prev: str | None = None
        recorded = 0

        def record(leaf: Leaf) -> None:
            nonlocal prev, recorded
            prev = self.increment_edges(batch, document_id, self.codec.node_key(leaf), prev)
            recorded += 1
            if not self.buffered:
                self.store.apply(batch, atomic=True)
                batch.clear()

        for node in nodes:
            if isinstance(node, Leaf):
                if not node.filtered:
                    record(node)
            elif isinstance(node, Group):
                if node.filtered:
                    continue
                if not node.orig.filtered:
                    record(node.orig)
                for child in node.children:
                    if not child.filtered:
                        record(child)
            else:
                raise TypeError(f"Expected Leaf or Group, got {type(node).__name__}")

        self.store.apply(batch, atomic=not self.buffered)
        logger.debug("Ingested %s: %d node occurrences", document_id, recorded)
        return recorded
