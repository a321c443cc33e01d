"""Operations facade over one store: ingest, index, search and compare documents."""

from __future__ import annotations

from typing import Any, Callable, Iterable, Sequence

from .config import Settings
from .graph.build import GraphBuilder
from .graph.extract import tag_text
from .graph.keys import CONTENT, NEXT, TOTAL, KeyCodec
from .graph.nodes import Node
from .index.search import SearchEngine
from .index.similarity import SimilarityEngine
from .index.tfidf import TFIDF, TFIDFCalculator
from .index.weights import ProgressFn, WeightIndexer
from .store import GraphStore, open_store


Tokenizer = Callable[[str], Sequence[Node]]


class DocumentGraph:
    def __init__(
        self,
        store: GraphStore,
        settings: Settings | None = None,
        *,
        tokenizer: Tokenizer = tag_text,
        buffered: bool = True,
    ):
        self.settings = settings or Settings()
        self.store = store
        self.codec = KeyCodec(prefix=self.settings.ns_prefix, separator=self.settings.separator)
        self.tokenizer = tokenizer

        self.builder = GraphBuilder(store, self.codec, buffered=buffered)
        self.calculator = TFIDFCalculator(store, self.codec)
        self.indexer = WeightIndexer(store, self.codec, self.calculator)
        self.engine = SearchEngine(store, self.codec, search_limit=self.settings.search_limit)
        self.similarity = SimilarityEngine(store, self.codec)

    @classmethod
    def from_settings(cls, settings: Settings | None = None, **kwargs: Any) -> "DocumentGraph":
        settings = settings or Settings()
        return cls(open_store(settings), settings, **kwargs)

    def close(self) -> None:
        self.store.close()

    # Writes

    def ingest_document(self, document_id: str, text: str) -> int:
        """Tokenize `text`, then store it verbatim under `document_id` along with its counters."""
        nodes = list(self.tokenizer(text))
        return self.builder.ingest(document_id, nodes, content=text)

    def ingest_nodes(self, document_id: str, nodes: Iterable[Node]) -> int:
        return self.builder.ingest(document_id, nodes)

    def index_weights(self, document_id: str) -> bool:
        return self.indexer.index_weights(document_id)

    def index_term(self, term: str, document_ids: Iterable[str]) -> bool:
        return self.indexer.index_term(term, document_ids)

    def index_all_weights(self, progress: ProgressFn | None = None) -> dict[str, int]:
        return self.indexer.index_all_weights(progress)

    # Reads

    def search(self, terms: Iterable[str], search_limit: int | None = None) -> tuple[list[str], dict[str, float]]:
        return self.engine.search(terms, search_limit)

    def get_contents(self, document_ids: Sequence[str]) -> list[str | None]:
        return self.store.mget([self.codec.format(CONTENT, d) for d in document_ids])

    def compute_tfidf(self, term: str, document_id: str | None = None) -> TFIDF:
        return self.calculator.compute(term, document_id)

    def cosine_similarity(self, id1: str, id2: str) -> float:
        return self.similarity.cosine_similarity(id1, id2)

    def concept_similarity(self, id1: str, id2: str) -> float:
        return self.similarity.concept_similarity(id1, id2)

    def next_keys(self, key: str, limit: int = 10) -> list[tuple[str, float]]:
        """Nodes that followed `key` in ingested text, most frequent first."""
        return self.store.zrange(self.codec.format(NEXT, key), 0, int(limit) - 1, desc=True, withscores=True)

    def document_count(self) -> int:
        return int(self.store.get(self.codec.format(TOTAL)) or 0)
