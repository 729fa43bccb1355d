# SPDX-License-Identifier: LGPL-2.1-or-later
# See Notices.txt for copyright information

""" Weighted partition of the 32-bit binary32 encoding space.

the stratified random sampler picks a region by weight and then draws
uniformly inside it.  weights are relative integers, not probabilities:
near-one and the special values get far more than their share of the
encoding space because that is where rounding and exception handling go
wrong.

bounds are inclusive.  consecutive regions may touch (share their
boundary pattern) but may not leave a gap, and the table as a whole must
span 0x00000000 to 0xffffffff.
"""

from collections import namedtuple

from fporacle.fpcommon.operation import UnitOperation


BitRegion = namedtuple("BitRegion", ["start", "end", "label", "weight"])


class RegionTableError(ValueError):
    pass


# relative sampling weights of the divider bands
WEIGHT_SUBNORMALS = 10
WEIGHT_SMALL_NORMALS = 8
WEIGHT_MEDIUM_NORMALS = 5
WEIGHT_NEAR_ONE = 15
WEIGHT_LARGE_NORMALS = 8
WEIGHT_NEAR_OVERFLOW = 10
WEIGHT_SPECIAL_VALUES = 12

# (start, end, label) of the positive magnitude bands
MAGNITUDE_BANDS = [
    (0x00000000, 0x00800000, "subnormals"),
    (0x00800000, 0x34000000, "small_normals"),
    (0x34000000, 0x3f000000, "medium_normals"),
    (0x3f000000, 0x40800000, "near_one"),
    (0x40800000, 0x7f000000, "large_normals"),
    (0x7f000000, 0x7f800000, "near_overflow"),
    (0x7f800000, 0x7fffffff, "special_values"),
]

DIV_WEIGHTS = [WEIGHT_SUBNORMALS, WEIGHT_SMALL_NORMALS,
               WEIGHT_MEDIUM_NORMALS, WEIGHT_NEAR_ONE, WEIGHT_LARGE_NORMALS,
               WEIGHT_NEAR_OVERFLOW, WEIGHT_SPECIAL_VALUES]

# sqrt leans harder on subnormals and near-one
SQRT_WEIGHTS = [15, 10, 8, 20, 12, 10, 15]


def mirrored_regions(weights):
    """ the seven magnitude bands plus their negative mirrors """
    pos = [BitRegion(start, end, label, w)
           for (start, end, label), w in zip(MAGNITUDE_BANDS, weights)]
    neg = [BitRegion(r.start | 0x80000000, r.end | 0x80000000,
                     "neg_" + r.label, r.weight) for r in pos]
    # the mirror of 0x7fffffff is 0xffffffff, so the top is covered
    return pos + neg


DIV_REGIONS = mirrored_regions(DIV_WEIGHTS)

# every negative non-zero input is the same "invalid" class for sqrt,
# only -0 (which returns -0) is worth singling out
SQRT_REGIONS = [BitRegion(start, end, label, w)
                for (start, end, label), w in zip(MAGNITUDE_BANDS,
                                                  SQRT_WEIGHTS)] + [
    BitRegion(0x80000000, 0x80000000, "neg_zero", 5),
    BitRegion(0x80000001, 0xffffffff, "negative_vals", 5),
]


class RegionTable:
    """ Validated, ordered set of ``BitRegion``s.

    :attribute regions: tuple of ``BitRegion`` in ascending order.
    :attribute total_weight: sum of all region weights.
    """

    def __init__(self, regions):
        self.regions = tuple(BitRegion(*r) for r in regions)
        self.validate()
        self.total_weight = sum(r.weight for r in self.regions)

    def validate(self):
        if not self.regions:
            raise RegionTableError("region table is empty")
        prev = None
        for r in self.regions:
            if not (0 <= r.start <= r.end <= 0xffffffff):
                raise RegionTableError("region %s: bad bounds 0x%x..0x%x" %
                                       (r.label, r.start, r.end))
            if not isinstance(r.weight, int) or r.weight <= 0:
                raise RegionTableError("region %s: weight must be a "
                                       "positive integer, got %r" %
                                       (r.label, r.weight))
            if prev is None:
                if r.start != 0:
                    raise RegionTableError("first region %s must start at 0"
                                           % r.label)
            elif r.start < prev.end:
                raise RegionTableError("regions %s and %s overlap" %
                                       (prev.label, r.label))
            elif r.start > prev.end + 1:
                raise RegionTableError("gap between regions %s and %s" %
                                       (prev.label, r.label))
            prev = r
        if prev.end != 0xffffffff:
            raise RegionTableError("last region %s must end at 0xffffffff"
                                   % prev.label)

    def __len__(self):
        return len(self.regions)

    def __iter__(self):
        return iter(self.regions)

    def select(self, draw):
        """ Pick the region for a weight draw in ``[0, total_weight)``.

        walks the table accumulating weights and returns the first region
        whose cumulative weight exceeds the draw.
        """
        if not 0 <= draw < self.total_weight:
            raise ValueError("draw %d outside [0, %d)" %
                             (draw, self.total_weight))
        cumulative = 0
        for region in self.regions:
            cumulative += region.weight
            if draw < cumulative:
                return region
        raise AssertionError("unreachable: weights do not add up")

    def expected_distribution(self):
        """ Get ``[(label, percent)]`` implied by the weights. """
        return [(r.label, 100.0 * r.weight / self.total_weight)
                for r in self.regions]


def region_table(op):
    """ Get the default region table for a ``UnitOperation``. """
    if op is UnitOperation.DIV:
        return RegionTable(DIV_REGIONS)
    return RegionTable(SQRT_REGIONS)
