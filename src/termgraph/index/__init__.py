"""Derived scores over the graph: tf-idf weights, search and similarity."""

from .search import SearchEngine
from .similarity import SimilarityEngine
from .tfidf import TFIDF, TFIDFCalculator
from .weights import MAX_CONCURRENCY, WeightIndexer

__all__ = [
    "MAX_CONCURRENCY",
    "SearchEngine",
    "SimilarityEngine",
    "TFIDF",
    "TFIDFCalculator",
    "WeightIndexer",
]
