import random
import unittest

from zcamgamut.color.hashtable import (
    Float64Table,
    init_runtime_seed,
    pack_key,
    runtime_seed,
)


class TestFloat64Table(unittest.TestCase):

    def test_against_dict(self) -> None:
        rng = random.Random(42)
        table = Float64Table(8, seed=0x5EED)
        reference: dict[int, float] = {}

        for _ in range(5000):
            key = rng.getrandbits(32)
            value = rng.random()
            table[key] = value
            reference[key] = value
        table[0] = -1.0
        reference[0] = -1.0

        self.assertGreater(table.tablesize, 5000)
        self.assertEqual(len(table), len(reference))
        self.assertEqual(dict(table.items()), reference)

        doomed = rng.sample(sorted(reference), len(reference) // 3)
        for key in doomed:
            del table[key]
            del reference[key]

        self.assertEqual(len(table), len(reference))
        self.assertEqual(dict(table.items()), reference)
        self.assertEqual(set(table), set(reference))
        for key in doomed[:100]:
            with self.subTest(key=key):
                self.assertNotIn(key, table)
                self.assertIsNone(table.get(key))

    def test_dense_clusters(self) -> None:
        rng = random.Random(665)
        table = Float64Table(1024, 1024, seed=3)
        keys = rng.sample(range(1, 1 << 32), 900)
        for key in keys:
            table.set(key, float(key))
        self.assertEqual(table.tablesize, 1024)

        removed = set(rng.sample(keys, 450))
        for key in removed:
            self.assertTrue(table.delete(key))
            self.assertFalse(table.delete(key))

        for key in keys:
            with self.subTest(key=key):
                if key in removed:
                    self.assertIsNone(table.get(key))
                else:
                    self.assertEqual(table.get(key), float(key))

    def test_bounded(self) -> None:
        table = Float64Table(32, 64, seed=7)
        inserted = set()
        for key in range(1, 10_001):
            table[key] = float(key)
            inserted.add(key)
            self.assertIn(key, table)

        self.assertEqual(table.maxsize, 64)
        self.assertEqual(table.tablesize, 64)
        self.assertLess(len(table), 64)
        self.assertGreater(len(table), 0)
        for key, value in table.items():
            self.assertIn(key, inserted)
            self.assertEqual(value, float(key))

    def test_purge_keeps_about_half(self) -> None:
        # Keys of equal parity must not all share the same fate
        for seed in (1, 2):
            with self.subTest(seed=seed):
                table = Float64Table(32, 32, seed=seed)
                purges = 0
                for key in range(2, 400, 2):
                    before = len(table)
                    table[key] = float(key)
                    after = len(table)
                    if after <= before:
                        purges += 1
                        self.assertGreaterEqual(after, 6)
                        self.assertLessEqual(after, 25)
                    self.assertEqual(table[key], float(key))
                self.assertGreater(purges, 5)
                self.assertEqual(table.tablesize, 32)

    def test_maxsize_is_power_of_two(self) -> None:
        table = Float64Table(128, 100, seed=7)
        self.assertEqual(table.maxsize, 64)
        peak = 0
        for key in range(1, 1000):
            table[key] = float(key)
            peak = max(peak, len(table))
        self.assertEqual(table.tablesize, 64)
        self.assertLessEqual(peak, 64)

    def test_key_zero(self) -> None:
        table = Float64Table(seed=1)
        self.assertNotIn(0, table)
        table[0] = 1.5
        self.assertIn(0, table)
        self.assertEqual(len(table), 1)
        self.assertEqual(table.size, 1)
        self.assertEqual(list(table.items()), [(0, 1.5)])
        del table[0]
        self.assertEqual(len(table), 0)
        with self.assertRaises(KeyError):
            del table[0]

    def test_mapping(self) -> None:
        table = Float64Table(seed=2)
        table.update({1: 2.0, 3: 4.0})
        self.assertEqual(table[3], 4.0)
        self.assertEqual(table.pop(1), 2.0)
        self.assertEqual(table.get(1, 6.0), 6.0)
        with self.assertRaises(KeyError):
            table[1]
        table.clear()
        self.assertEqual(len(table), 0)
        self.assertEqual(table.tablesize, 128)

    def test_invalid_keys(self) -> None:
        table = Float64Table(seed=2)
        with self.assertRaises(ValueError):
            table.get(-1)
        with self.assertRaises(ValueError):
            table.set(1 << 32, 0.0)
        self.assertNotIn(-1, table)
        self.assertNotIn('key', table)


class TestKeys(unittest.TestCase):

    def test_pack_key(self) -> None:
        self.assertEqual(pack_key(0, 0), 0)
        self.assertEqual(pack_key(360, 100), 0xFFFF)
        self.assertEqual(pack_key(180, 50), 0x8000 << 16 | 0x8000)
        self.assertEqual(pack_key(-90, 50), pack_key(270, 50))
        self.assertEqual(pack_key(180, 150), pack_key(180, 100))
        self.assertEqual(pack_key(180, -5), pack_key(180, 0))
        self.assertNotEqual(pack_key(180, 50), pack_key(180.01, 50))
        # The hue ring wraps without a seam at 0°
        self.assertEqual(pack_key(359.999, 50), pack_key(0, 50))
        self.assertEqual(pack_key(-0.001, 50), pack_key(0, 50))
        self.assertNotEqual(pack_key(359.99, 50), pack_key(0, 50))

    def test_runtime_seed(self) -> None:
        seed = runtime_seed()
        self.assertEqual(init_runtime_seed(), seed)
        self.assertEqual(init_runtime_seed(seed), seed)
        with self.assertRaises(RuntimeError):
            init_runtime_seed(seed ^ 1)


if __name__ == '__main__':
    unittest.main()
