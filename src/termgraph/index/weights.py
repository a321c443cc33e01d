from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Callable, Iterable

from ..errors import StoreCommandError
from ..graph.keys import WEIGHT, KeyCodec
from ..store.base import GraphStore, WriteBatch
from .tfidf import TFIDFCalculator


# Fixed bound on documents indexed at once.
MAX_CONCURRENCY = 8

logger = logging.getLogger(__name__)

ProgressFn = Callable[[dict[str, Any]], None]


class WeightIndexer:
    def __init__(self, store: GraphStore, codec: KeyCodec, calculator: TFIDFCalculator):
        self.store = store
        self.codec = codec
        self.calculator = calculator

    def _write_weight(self, document_id: str, term: str) -> None:
        result = self.calculator.compute(term, document_id)
        batch = WriteBatch()
        batch.zadd(self.codec.format(WEIGHT, document_id), {term: result.tfidf})
        batch.zadd(self.codec.format(WEIGHT, term), {document_id: result.tfidf})
        self.store.apply(batch, atomic=True)

    def _write_all(self, pairs: Iterable[tuple[str, str]]) -> bool:
        ok = True
        for document_id, term in pairs:
            try:
                self._write_weight(document_id, term)
            except StoreCommandError as e:
                logger.warning("Failed to index %s in %s: %s", term, document_id, e)
                ok = False
        return ok

    def index_weights(self, document_id: str) -> bool:
        """Recompute and store tf-idf for every term of a document.

        Returns False when the document has no terms or any term failed; the
        remaining terms are still written.
        """
        terms = self.store.zrange(self.codec.format(document_id), 0, -1)
        if not terms:
            logger.info("No terms recorded for %s; nothing to index", document_id)
            return False
        return self._write_all((document_id, term) for term in terms)

    def index_term(self, term: str, document_ids: Iterable[str]) -> bool:
        """Recompute one term's weight against the given documents."""
        return self._write_all((document_id, term) for document_id in document_ids)

    def document_ids(self) -> list[str]:
        keys = self.store.scan_keys(self.codec.content_pattern())
        return sorted({self.codec.content_id(k) for k in keys})

    def index_all_weights(self, progress: ProgressFn | None = None) -> dict[str, int]:
        """Index every document with stored content, MAX_CONCURRENCY at a time.

        `progress` gets {"total", "count", "percent"} after each document,
        whether or not it indexed cleanly.
        """
        ids = self.document_ids()
        total = len(ids)
        count = 0
        failed = 0

        with ThreadPoolExecutor(max_workers=MAX_CONCURRENCY) as pool:
            futures = {pool.submit(self.index_weights, doc_id): doc_id for doc_id in ids}
            for fut in as_completed(futures):
                try:
                    if not fut.result():
                        failed += 1
                except StoreCommandError as e:
                    logger.warning("Indexing %s failed: %s", futures[fut], e)
                    failed += 1

                count += 1
                if progress is not None:
                    progress({"total": total, "count": count, "percent": int(count / total * 100.0 + 0.5)})

        logger.info("Indexed %d/%d documents (%d incomplete)", count, total, failed)
        return {"total": total, "count": count}
