import math
import unittest

from termgraph.config import Settings
from termgraph.document_graph import DocumentGraph
from termgraph.graph.nodes import Leaf
from termgraph.store.sqlite_store import SQLiteStore


CAT = Leaf(tag="noun", term="cat")
RUN = Leaf(tag="verb", term="run")
DOG = Leaf(tag="noun", term="dog")
HAPPY = Leaf(tag="adj", term="happy")


def build(prefix: str = "") -> tuple[SQLiteStore, DocumentGraph]:
    store = SQLiteStore(":memory:")
    graph = DocumentGraph(store, Settings(ns_prefix=prefix, separator=":", search_limit=100))
    graph.ingest_nodes("d1", [CAT, RUN, CAT])
    graph.ingest_nodes("d2", [CAT, DOG])
    graph.ingest_nodes("d3", [DOG, HAPPY])
    for doc in ("d1", "d2", "d3"):
        graph.index_weights(doc)
    return store, graph


class TestSearch(unittest.TestCase):
    def setUp(self):
        self.store, self.graph = build()

    def tearDown(self):
        self.store.close()

    def test_bare_term_resolves_to_node_keys(self):
        self.assertEqual(self.graph.engine.resolve("cat"), ["noun:cat"])
        self.assertEqual(self.graph.engine.resolve("noun:cat"), ["noun:cat"])

    def test_glob_characters_in_terms_are_literal(self):
        self.assertEqual(self.graph.engine.resolve("c*t"), [])
        self.assertEqual(self.graph.engine.resolve("ca?"), [])

    def test_single_term_ranking(self):
        ids, scores = self.graph.search(["cat"])
        self.assertEqual(ids, ["d1", "d2"])
        self.assertAlmostEqual(scores["d1"], (1 + math.log10(2)) * math.log10(1.5))
        self.assertAlmostEqual(scores["d2"], math.log10(1.5))

    def test_scores_are_summed_across_terms(self):
        ids, scores = self.graph.search(["cat", "run"])
        self.assertEqual(ids[0], "d1")
        self.assertAlmostEqual(scores["d1"], (1 + math.log10(2)) * math.log10(1.5) + math.log10(3))

    def test_ties_break_by_document_id(self):
        ids, scores = self.graph.search(["noun:dog"])
        self.assertAlmostEqual(scores["d2"], scores["d3"])
        self.assertEqual(ids, ["d2", "d3"])

    def test_search_limit(self):
        ids, _ = self.graph.search(["noun:cat"], search_limit=1)
        self.assertEqual(ids, ["d1"])

    def test_unknown_term_is_empty(self):
        self.assertEqual(self.graph.search(["zzz-unknown"]), ([], {}))
        self.assertEqual(self.graph.search([]), ([], {}))

    def test_unindexed_key_is_empty(self):
        self.assertEqual(self.graph.search(["noun:unicorn"]), ([], {}))


class TestNamespacedSearch(unittest.TestCase):
    def test_prefix_is_stripped(self):
        store, graph = build(prefix="ns")
        try:
            self.assertEqual(graph.engine.resolve("happy"), ["adj:happy"])
            ids, _ = graph.search(["happy"])
            self.assertEqual(ids, ["d3"])
        finally:
            store.close()

    def test_glob_characters_in_prefix_match_literally(self):
        store, graph = build(prefix="n?")
        try:
            # Same term under a namespace the pattern must not reach.
            other = DocumentGraph(store, Settings(ns_prefix="nx", separator=":"))
            other.builder.ingest("x1", [HAPPY], content="happy")

            self.assertEqual(graph.engine.resolve("happy"), ["adj:happy"])
            self.assertEqual(graph.indexer.document_ids(), [])
            self.assertEqual(other.indexer.document_ids(), ["x1"])
        finally:
            store.close()


if __name__ == "__main__":
    unittest.main()
