import unittest
from unittest import mock

from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import ResponseError

from termgraph.errors import StoreCommandError, StoreConnectionError
from termgraph.store.base import WriteBatch
from termgraph.store.redis_store import RedisStore


class TestRedisStore(unittest.TestCase):
    def setUp(self):
        self.client = mock.MagicMock()
        self.pipe = self.client.pipeline.return_value
        self.store = RedisStore(host="redis.local", port=6380, db=2, client=self.client)

    def test_settings_are_kept(self):
        self.assertEqual((self.store.host, self.store.port, self.store.db), ("redis.local", 6380, 2))

    def test_read_many_uses_a_transaction(self):
        self.pipe.execute.return_value = ["3", "2", 1]
        out = self.store.read_many([("get", "t:noun:cat"), ("get", "t"), ("zcard", "noun:cat")])

        self.assertEqual(out, ["3", "2", 1])
        self.client.pipeline.assert_called_once_with(transaction=True)
        self.pipe.get.assert_has_calls([mock.call("t:noun:cat"), mock.call("t")])
        self.pipe.zcard.assert_called_once_with("noun:cat")

    def test_apply_replays_batch(self):
        batch = WriteBatch().incrby("t", 1).zincrby("d1", 1, "noun:cat").zadd("w:d1", {"noun:cat": 0.5})
        self.store.apply(batch, atomic=False)

        self.client.pipeline.assert_called_once_with(transaction=False)
        self.pipe.incrby.assert_called_once_with("t", 1)
        self.pipe.zincrby.assert_called_once_with("d1", 1, "noun:cat")
        self.pipe.zadd.assert_called_once_with("w:d1", {"noun:cat": 0.5})
        self.pipe.execute.assert_called_once_with()

    def test_empty_batch_is_a_no_op(self):
        self.store.apply(WriteBatch())
        self.client.pipeline.assert_not_called()

    def test_zrange_desc_with_scores(self):
        self.client.zrevrange.return_value = [("d1", "2.5"), ("d2", 1)]
        out = self.store.zrange("w:noun:cat", 0, 9, desc=True, withscores=True)

        self.assertEqual(out, [("d1", 2.5), ("d2", 1.0)])
        self.client.zrevrange.assert_called_once_with("w:noun:cat", 0, 9, withscores=True)

    def test_scan_keys(self):
        self.client.scan_iter.return_value = iter(["noun:cat", "t:noun:cat"])
        self.assertEqual(self.store.scan_keys("*:cat"), ["noun:cat", "t:noun:cat"])
        self.client.scan_iter.assert_called_once_with(match="*:cat", count=1000)

    def test_scan_keys_drops_repeats(self):
        self.client.scan_iter.return_value = iter(["^:d1", "^:d2", "^:d1"])
        self.assertEqual(self.store.scan_keys("^:*"), ["^:d1", "^:d2"])

    def test_connection_errors_are_fatal(self):
        self.client.get.side_effect = RedisConnectionError("refused")
        with self.assertRaises(StoreConnectionError):
            self.store.get("t")

    def test_command_errors(self):
        self.client.incrby.side_effect = ResponseError("WRONGTYPE")
        with self.assertRaises(StoreCommandError):
            self.store.incrby("t")

    def test_zscore_missing(self):
        self.client.zscore.return_value = None
        self.assertIsNone(self.store.zscore("d1", "noun:cat"))

    def test_mget_empty(self):
        self.assertEqual(self.store.mget([]), [])
        self.client.mget.assert_not_called()


if __name__ == "__main__":
    unittest.main()
