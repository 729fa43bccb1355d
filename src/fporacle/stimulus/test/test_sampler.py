""" tests of the stratified random sampler
"""

import unittest

from fporacle.fpcommon.operation import UnitOperation
from fporacle.stimulus.regions import BitRegion, RegionTable, region_table
from fporacle.stimulus.sampler import StratifiedSampler


HALVES = RegionTable([BitRegion(0x00000000, 0x7fffffff, "pos", 1),
                      BitRegion(0x80000000, 0xffffffff, "neg", 1)])


class TestStratifiedSampler(unittest.TestCase):

    def test_deterministic(self):
        table = region_table(UnitOperation.DIV)
        s1 = StratifiedSampler(table, 2, seed=42)
        s2 = StratifiedSampler(table, 2, seed=42)
        v1 = [v.operands for v in s1.vectors(500)]
        v2 = [v.operands for v in s2.vectors(500)]
        self.assertEqual(v1, v2)
        s3 = StratifiedSampler(table, 2, seed=43)
        self.assertNotEqual(v1, [v.operands for v in s3.vectors(500)])

    def test_random_seed_recorded(self):
        s = StratifiedSampler(HALVES, 1)
        self.assertIsInstance(s.seed, int)

    def test_labels(self):
        s = StratifiedSampler(HALVES, 1, seed=0)
        labels = [v.label for v in s.vectors(3)]
        self.assertEqual(labels, ["RANDOM 0", "RANDOM 1", "RANDOM 2"])
        self.assertEqual(s.n_drawn, 3)

    def test_single_operand(self):
        s = StratifiedSampler(region_table(UnitOperation.SQRT), 1, seed=1)
        for v in s.vectors(100):
            self.assertIsNone(v.b)

    def test_region_hits_match_operands(self):
        s = StratifiedSampler(HALVES, 2, seed=7)
        n_neg = 0
        for v in s.vectors(1000):
            n_neg += v.a >> 31
        self.assertEqual(s.region_hits["neg"], n_neg)
        self.assertEqual(sum(s.region_hits.values()), 1000)

    def test_same_region_second_operand(self):
        s = StratifiedSampler(HALVES, 2, seed=3)
        for i, v in enumerate(s.vectors(300)):
            if i % 3 == 0:
                self.assertEqual(v.a >> 31, v.b >> 31, v)

    def test_singleton_region(self):
        table = RegionTable([BitRegion(0, 0x7fffffff, "pos", 1),
                             BitRegion(0x80000000, 0x80000000, "nz", 1000),
                             BitRegion(0x80000001, 0xffffffff, "neg", 1)])
        s = StratifiedSampler(table, 1, seed=5)
        drawn = [v.a for v in s.vectors(200)]
        self.assertEqual(drawn.count(0x80000000), s.region_hits["nz"])
        self.assertGreater(s.region_hits["nz"], 150)

    def test_distribution_converges(self):
        table = region_table(UnitOperation.DIV)
        s = StratifiedSampler(table, 2, seed=2024)
        for v in s.vectors(100000):
            pass
        expected = dict(table.expected_distribution())
        for label, percent in s.measured_distribution():
            self.assertLess(abs(percent - expected[label]), 2.0, label)

    def test_bad_arguments(self):
        with self.assertRaises(ValueError):
            StratifiedSampler(HALVES, 3)
        with self.assertRaises(ValueError):
            StratifiedSampler(HALVES, 2, same_region_period=0)


if __name__ == '__main__':
    unittest.main()
