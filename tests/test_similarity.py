import math
import unittest

from termgraph.graph.keys import KeyCodec
from termgraph.index.similarity import SimilarityEngine
from termgraph.store.sqlite_store import SQLiteStore


class TestSimilarity(unittest.TestCase):
    def setUp(self):
        self.store = SQLiteStore(":memory:")
        self.store.zadd("w:a", {"noun:cat": 1.0, "verb:run": 2.0})
        self.store.zadd("w:b", {"noun:cat": 1.0, "adj:big": 1.0})
        self.store.zadd("w:c", {"pronoun:he": 3.0, "noun:cat": 1.0})
        self.store.zadd("w:zero", {"noun:cat": 0.0})
        self.sim = SimilarityEngine(self.store, KeyCodec())

    def tearDown(self):
        self.store.close()

    def test_self_similarity_is_one(self):
        self.assertAlmostEqual(self.sim.cosine_similarity("a", "a"), 1.0)

    def test_magnitudes_cover_full_vectors(self):
        self.assertAlmostEqual(self.sim.cosine_similarity("a", "b"), 1.0 / (math.sqrt(5) * math.sqrt(2)))

    def test_concept_similarity_filters_tags(self):
        # a keeps only noun:cat; b keeps noun:cat and adj:big.
        self.assertAlmostEqual(self.sim.concept_similarity("a", "b"), 1.0 / math.sqrt(2))

    def test_tag_filter_matches_whole_tag(self):
        self.assertAlmostEqual(self.sim.concept_similarity("a", "c"), 1.0)
        self.assertLess(self.sim.cosine_similarity("a", "c"), 1.0)

    def test_custom_tags(self):
        self.assertAlmostEqual(self.sim.cosine_similarity("a", "b", tags={"verb"}), 0.0)

    def test_zero_magnitude_is_zero(self):
        self.assertEqual(self.sim.cosine_similarity("a", "missing"), 0.0)
        self.assertEqual(self.sim.cosine_similarity("zero", "a"), 0.0)
        self.assertEqual(self.sim.concept_similarity("missing", "missing"), 0.0)


if __name__ == "__main__":
    unittest.main()
