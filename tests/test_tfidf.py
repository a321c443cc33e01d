import math
import unittest
from unittest import mock

from termgraph.graph.build import GraphBuilder
from termgraph.graph.keys import KeyCodec
from termgraph.graph.nodes import Leaf
from termgraph.index.tfidf import TFIDFCalculator, tfidf_metrics
from termgraph.store.sqlite_store import SQLiteStore


CAT = Leaf(tag="noun", term="cat")
RUN = Leaf(tag="verb", term="run")


class TestTfidfMetrics(unittest.TestCase):
    def test_single_occurrence_has_unit_tf(self):
        self.assertEqual(tfidf_metrics("noun:cat", rawtf=1, df=1, n=4).tf, 1.0)

    def test_term_in_every_document_has_zero_idf(self):
        m = tfidf_metrics("noun:cat", rawtf=7, df=5, n=5)
        self.assertEqual(m.idf, 0.0)
        self.assertEqual(m.tfidf, 0.0)
        self.assertGreater(m.tf, 1.0)

    def test_unseen_term_is_zero_not_nan(self):
        m = tfidf_metrics("noun:zzz", rawtf=0, df=0, n=5)
        self.assertEqual((m.tf, m.idf, m.tfidf), (0.0, 0.0, 0.0))

    def test_absent_from_document_is_zero(self):
        m = tfidf_metrics("noun:cat", rawtf=0, df=1, n=10)
        self.assertEqual(m.tf, 0.0)
        self.assertEqual(m.tfidf, 0.0)
        self.assertAlmostEqual(m.idf, 1.0)


class TestTfidfCalculator(unittest.TestCase):
    def setUp(self):
        self.store = SQLiteStore(":memory:")
        self.codec = KeyCodec()
        builder = GraphBuilder(self.store, self.codec)
        builder.ingest("d1", [CAT, RUN, CAT])
        builder.ingest("d2", [CAT])
        self.calc = TFIDFCalculator(self.store, self.codec)

    def tearDown(self):
        self.store.close()

    def test_document_relative(self):
        m = self.calc.compute("verb:run", "d1")
        self.assertEqual((m.key, m.rawtf, m.df, m.n), ("verb:run", 1, 1, 2))
        self.assertEqual(m.tf, 1.0)
        self.assertAlmostEqual(m.idf, math.log10(2))
        self.assertAlmostEqual(m.tfidf, math.log10(2))

    def test_corpus_wide(self):
        m = self.calc.compute("noun:cat")
        self.assertEqual(m.rawtf, 3)
        self.assertEqual(m.df, 2)
        self.assertAlmostEqual(m.tf, 1 + math.log10(3))
        self.assertEqual(m.idf, 0.0)
        self.assertEqual(m.tfidf, 0.0)

    def test_term_missing_from_document(self):
        m = self.calc.compute("verb:run", "d2")
        self.assertEqual(m.rawtf, 0)
        self.assertEqual(m.tfidf, 0.0)

    def test_unknown_term(self):
        m = self.calc.compute("noun:unicorn", "d1")
        self.assertEqual((m.rawtf, m.df, m.n), (0, 0, 2))
        self.assertEqual(m.tfidf, 0.0)

    def test_reads_counters_in_one_round_trip(self):
        store = mock.MagicMock(wraps=self.store)
        TFIDFCalculator(store, self.codec).compute("noun:cat", "d1")
        store.read_many.assert_called_once_with(
            [("get", "t:noun:cat"), ("get", "t"), ("zcard", "noun:cat"), ("zscore", "d1", "noun:cat")]
        )
        store.get.assert_not_called()

    def test_as_dict(self):
        d = self.calc.compute("verb:run", "d1").as_dict()
        self.assertEqual(set(d), {"key", "rawtf", "df", "n", "idf", "tf", "tfidf"})


if __name__ == "__main__":
    unittest.main()
