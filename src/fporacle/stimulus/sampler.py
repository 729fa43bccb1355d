# SPDX-License-Identifier: LGPL-2.1-or-later
# See Notices.txt for copyright information

""" Weighted stratified random sampling of binary32 operands. """

import random
from collections import Counter

from fporacle.fpcommon.operation import TestVector


# offsets of the second and third random streams from the base seed
SAME_REGION_SEED_OFFSET = 12345
FULL_RANGE_SEED_OFFSET = 67890

# one second operand in every SAME_REGION_PERIOD is drawn from the same
# region as the first, the rest from the whole 32-bit space
SAME_REGION_PERIOD = 3


class StratifiedSampler:
    """ Draws operands region by region according to the table weights.

    three independent streams keep the operand distributions decorrelated:
    ``rng_region`` picks the region and the first operand, ``rng_same``
    draws a second operand inside that region, ``rng_full`` draws a second
    operand anywhere in the 32-bit space.

    :attribute table: the ``RegionTable`` being sampled.
    :attribute arity: 1 or 2 operands per vector.
    :attribute seed: base seed, recorded so a run can be replayed.
    :attribute region_hits: ``Counter`` of draws per region label.
    """

    def __init__(self, table, arity, seed=None,
                       same_region_period=SAME_REGION_PERIOD):
        if arity not in (1, 2):
            raise ValueError("arity must be 1 or 2")
        if same_region_period < 1:
            raise ValueError("same_region_period must be at least 1")
        if seed is None:
            seed = random.SystemRandom().getrandbits(32)
        self.table = table
        self.arity = arity
        self.seed = seed
        self.same_region_period = same_region_period
        self.rng_region = random.Random(seed)
        self.rng_same = random.Random(seed + SAME_REGION_SEED_OFFSET)
        self.rng_full = random.Random(seed + FULL_RANGE_SEED_OFFSET)
        self.region_hits = Counter()
        self.n_drawn = 0

    def pick_region(self):
        draw = self.rng_region.randrange(self.table.total_weight)
        return self.table.select(draw)

    def draw(self):
        """ Produce the next ``TestVector``. """
        idx = self.n_drawn
        region = self.pick_region()
        self.region_hits[region.label] += 1
        a = self.rng_region.randint(region.start, region.end)
        b = None
        if self.arity == 2:
            if idx % self.same_region_period == 0:
                b = self.rng_same.randint(region.start, region.end)
            else:
                b = self.rng_full.getrandbits(32)
        self.n_drawn += 1
        return TestVector(a, b, label="RANDOM %d" % idx)

    def vectors(self, count):
        """ yield ``count`` vectors, one at a time """
        for _ in range(count):
            yield self.draw()

    def measured_distribution(self):
        """ Get ``[(label, percent)]`` actually drawn so far. """
        total = sum(self.region_hits.values())
        if not total:
            return [(r.label, 0.0) for r in self.table]
        return [(r.label, 100.0 * self.region_hits[r.label] / total)
                for r in self.table]
