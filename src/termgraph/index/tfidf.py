from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any

from ..graph.keys import TOTAL, KeyCodec
from ..store.base import GraphStore


@dataclass(frozen=True)
class TFIDF:
    key: str
    rawtf: int
    df: int
    n: int
    idf: float
    tf: float
    tfidf: float

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


def _as_int(value: Any) -> int:
    if value is None:
        return 0
    return int(float(value))


def tfidf_metrics(key: str, *, rawtf: int, df: int, n: int) -> TFIDF:
    """Log-scaled tf-idf.

    An absent term (rawtf == 0) has tf == 0, and a term no document contains
    (df == 0) has idf == 0; both give tfidf == 0 instead of a non-finite value.
    """
    tf = 1.0 + math.log10(rawtf) if rawtf > 0 else 0.0
    idf = math.log10(n / df) if df > 0 and n > 0 else 0.0
    return TFIDF(key=key, rawtf=rawtf, df=df, n=n, idf=idf, tf=tf, tfidf=tf * idf)


class TFIDFCalculator:
    def __init__(self, store: GraphStore, codec: KeyCodec):
        self.store = store
        self.codec = codec

    def compute(self, term: str, document_id: str | None = None) -> TFIDF:
        """tf-idf of `term`, relative to `document_id` when given, else corpus-wide.

        The counters are read in one atomic round trip so they are consistent
        with each other.
        """
        ops: list[tuple[Any, ...]] = [
            ("get", self.codec.format(TOTAL, term)),
            ("get", self.codec.format(TOTAL)),
            ("zcard", self.codec.format(term)),
        ]
        if document_id:
            ops.append(("zscore", self.codec.format(document_id), term))

        results = self.store.read_many(ops)

        rawtf = _as_int(results[0])
        n = _as_int(results[1])
        df = _as_int(results[2])
        if document_id:
            rawtf = _as_int(results[3])

        return tfidf_metrics(term, rawtf=rawtf, df=df, n=n)
