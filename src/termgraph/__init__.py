"""termgraph: incremental term cooccurrence graph with tf-idf search and similarity."""

from .config import Settings
from .document_graph import DocumentGraph
from .errors import StoreCommandError, StoreConnectionError, StoreError, TermGraphError

__all__ = [
    "DocumentGraph",
    "Settings",
    "StoreCommandError",
    "StoreConnectionError",
    "StoreError",
    "TermGraphError",
]

__version__ = "0.1.0"
