from __future__ import annotations

import logging
from typing import Iterable

from ..errors import StoreCommandError
from ..graph.keys import WEIGHT, KeyCodec
from ..store.base import GraphStore


logger = logging.getLogger(__name__)


class SearchEngine:
    def __init__(self, store: GraphStore, codec: KeyCodec, *, search_limit: int = 100):
        self.store = store
        self.codec = codec
        self.search_limit = int(search_limit)

    def resolve(self, term: str) -> list[str]:
        """Expand a bare term ("cat") to the node keys ending in it ("noun:cat", ...).

        Terms that already contain the separator are returned as-is.
        """
        if self.codec.is_qualified(term):
            return [term]

        keys = self.store.scan_keys(self.codec.term_pattern(term))
        return sorted({self.codec.strip_prefix(k) for k in keys if not self.codec.is_reserved(k)})

    def search(self, terms: Iterable[str], search_limit: int | None = None) -> tuple[list[str], dict[str, float]]:
        """Rank documents by the summed tf-idf of the given terms.

        Returns (ids, scores): ids sorted by descending score, ties broken by
        ascending id.
        """
        limit = int(search_limit or self.search_limit)

        resolved: list[str] = []
        for term in terms:
            try:
                resolved.extend(self.resolve(term))
            except StoreCommandError as e:
                logger.warning("Could not resolve search term %r: %s", term, e)

        scores: dict[str, float] = {}
        for key in resolved:
            try:
                hits = self.store.zrange(self.codec.format(WEIGHT, key), 0, limit - 1, desc=True, withscores=True)
            except StoreCommandError as e:
                logger.warning("Could not read weights for %s: %s", key, e)
                continue
            for doc_id, weight in hits:
                scores[doc_id] = scores.get(doc_id, 0.0) + float(weight)

        ids = sorted(scores, key=lambda d: (-scores[d], d))
        return ids, scores
