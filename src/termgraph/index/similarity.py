from __future__ import annotations

from typing import Collection

import numpy as np

from ..graph.keys import WEIGHT, KeyCodec
from ..store.base import GraphStore


CONCEPT_TAGS = frozenset({"noun", "adj"})


class SimilarityEngine:
    def __init__(self, store: GraphStore, codec: KeyCodec):
        self.store = store
        self.codec = codec

    def weight_vector(self, document_id: str, tags: Collection[str] | None = None) -> dict[str, float]:
        rows = self.store.zrange(self.codec.format(WEIGHT, document_id), 0, -1, withscores=True)
        vec = {str(term): float(score) for term, score in rows}
        if tags:
            # The tag is the first component of a node key ("noun" in "noun:cat").
            vec = {t: s for t, s in vec.items() if t.split(self.codec.separator, 1)[0] in tags}
        return vec

    def cosine_similarity(self, id1: str, id2: str, tags: Collection[str] | None = None) -> float:
        """Cosine of two documents' tf-idf vectors, optionally restricted to `tags`.

        The dot product runs over shared terms; each magnitude covers the whole
        (filtered) vector. A zero magnitude gives 0.0.
        """
        v1 = self.weight_vector(id1, tags)
        v2 = self.weight_vector(id2, tags)

        shared = sorted(v1.keys() & v2.keys())
        a = np.array([v1[t] for t in shared], dtype=np.float64)
        b = np.array([v2[t] for t in shared], dtype=np.float64)
        dot = float(a @ b) if shared else 0.0

        mag1 = float(np.linalg.norm(np.fromiter(v1.values(), dtype=np.float64, count=len(v1))))
        mag2 = float(np.linalg.norm(np.fromiter(v2.values(), dtype=np.float64, count=len(v2))))
        if mag1 == 0.0 or mag2 == 0.0:
            return 0.0
        return dot / (mag1 * mag2)

    def concept_similarity(self, id1: str, id2: str) -> float:
        return self.cosine_similarity(id1, id2, CONCEPT_TAGS)
