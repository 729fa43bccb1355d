# SPDX-License-Identifier: LGPL-2.1-or-later
# See Notices.txt for copyright information

""" Hand-curated corner-case catalogs.

every operand is a literal binary32 bit pattern.  inputs that once
exposed a bug stay in the "previously observed" groups permanently; new
ones can also be supplied at run time with ``load_regressions``.
"""

from itertools import product

from fporacle.fpcommon.fpbase import FP32
from fporacle.fpcommon.operation import UnitOperation, TestVector


DIV_CORNER_CASES = [
    # special values
    (0x00000000, 0x00000000), # 0/0 -> NaN, invalid
    (0x00000000, 0x3f800000), # 0/1 -> 0
    (0x80000000, 0x3f800000), # -0/1 -> -0
    (0x3f800000, 0x00000000), # 1/0 -> inf, divzero
    (0x3f800000, 0x80000000), # 1/-0 -> -inf, divzero
    (0x7f800000, 0x3f800000), # inf/1 -> inf
    (0xff800000, 0x3f800000), # -inf/1 -> -inf
    (0x7f800000, 0x7f800000), # inf/inf -> NaN, invalid
    (0x7f800000, 0xff800000), # inf/-inf -> NaN, invalid
    (0x3f800000, 0x7f800000), # 1/inf -> 0
    (0x3f800000, 0xff800000), # 1/-inf -> -0
    (0x7fc00000, 0x3f800000), # qNaN/1 -> qNaN
    (0x7fa00000, 0x3f800000), # sNaN/1 -> qNaN, invalid
    (0x3f800000, 0x7fc00000), # 1/qNaN -> qNaN
    (0x3f800000, 0x7fa00000), # 1/sNaN -> qNaN, invalid

    # subnormal / normal transitions
    (0x00000001, 0x00000001), # min subnormal / min subnormal -> 1.0
    (0x00000001, 0x3f800000), # min subnormal / 1.0
    (0x007fffff, 0x3f800000), # max subnormal / 1.0
    (0x00800000, 0x00800000), # min normal / min normal -> 1.0
    (0x00800000, 0x40000000), # min normal / 2.0, gradual underflow
    (0x00800001, 0x40000000),
    (0x007fffff, 0x40000000), # max subnormal / 2.0

    # overflow boundaries
    (0x7f7fffff, 0x3f800000), # max finite / 1
    (0x7f7fffff, 0x3f000000), # max finite / 0.5 -> overflow
    (0x7f000000, 0x3f000000),
    (0x7e800000, 0x3e800000),

    # exact quotients
    (0x3f800000, 0x3f800000), # 1/1
    (0x40000000, 0x40000000), # 2/2
    (0x40400000, 0x40000000), # 3/2 -> 1.5
    (0x40800000, 0x40000000), # 4/2
    (0x41200000, 0x40800000), # 10/4 -> 2.5
    (0x42c80000, 0x41200000), # 100/10

    # rounding-critical ratios
    (0x3f800000, 0x40400000), # 1/3
    (0x40000000, 0x40400000), # 2/3
    (0x3f800000, 0x41200000), # 1/10
    (0x3f800000, 0x40e00000), # 1/7
    (0x41200000, 0x40400000), # 10/3

    # tie-to-even
    (0x40400000, 0x48000000), # 3/32768
    (0x40a00000, 0x48800000), # 5/65536
    (0x3f800001, 0x48000000),
    (0x3f7fffff, 0x48000000),

    # leading-zero normalisation of the quotient
    (0x3f800000, 0x4f800000),
    (0x3f800000, 0x70000000), # edge of subnormal
    (0x38800000, 0x7f000000), # deep subnormal
    (0x08000000, 0x4f800000), # deep underflow

    # sticky bit
    (0x40000001, 0x40400000),
    (0x40400001, 0x40000000),
    (0x7f7ffffe, 0x40000000),

    # sign combinations
    (0x80000000, 0x80000000), # -0/-0 -> NaN, invalid
    (0xbf800000, 0x3f800000),
    (0x3f800000, 0xbf800000),
    (0xbf800000, 0xbf800000),
    (0xff800000, 0x80000000), # -inf/-0 -> inf, no divzero
    (0x7f800000, 0x80000000), # inf/-0 -> -inf, no divzero

    # previously observed failures
    (0x3781fd3f, 0xf8480000), # underflow
    (0xaacf58b8, 0xeae1320a), # subnormal result
    (0x96042d06, 0x5d042d06),
    (0x9be34bb1, 0xe0988600),
    (0x0f8746fe, 0x514c0000),
    (0x920c6be1, 0x517da98a),
    (0x057e2068, 0xc4b49df2),
    (0xa8ec1495, 0x68a45fad),
    (0x325cd2c3, 0xf6209948), # exact subnormal
    (0x29eed5eb, 0xefbbfc00), # see KNOWN_DISCREPANCIES
    (0x0002b017, 0xff3807ab),
    (0xbf9b1e94, 0xc038ed3a),
    (0x34082401, 0xb328cd45),
    (0x05e8ef81, 0x0114f3db),
    (0x5c75da81, 0x2f642a39),
    (0x7f7ffffe, 0x70033181),
    (0x7f7ffffe, 0x70000001),
    (0x7f7ffcff, 0x70200201),
    (0x70200201, 0x7f7ffcff),

    # extreme exponent differences
    (0x34000000, 0x7f7fffff),
    (0x7f7fffff, 0x34000000),
    (0x00800000, 0x7f7fffff),
    (0x7f7fffff, 0x00800000),
    (0x00000001, 0x7f7fffff),
    (0x7f7fffff, 0x00000001),

    # quotient normalisation
    (0x3f000000, 0x3f800000), # 0.5/1
    (0x3e800000, 0x3f800000), # 0.25/1
    (0x3e000000, 0x3f800000), # 0.125/1
    (0x3d800000, 0x3f800000), # 0.0625/1

    # guard/round/sticky
    (0x40000003, 0x40400000),
    (0x40000005, 0x40400000),
    (0x40000007, 0x40400000),
    (0x4000000f, 0x40400000),
]


SQRT_CORNER_CASES = [
    # special values
    0x00000000, # +0 -> +0
    0x80000000, # -0 -> -0
    0x3f800000, # 1 -> 1
    0x7f800000, # inf -> inf
    0xff800000, # -inf -> NaN, invalid
    0x7fc00000, # qNaN -> qNaN
    0x7fa00000, # sNaN -> qNaN, invalid
    0xbf800000, # -1 -> NaN, invalid
    0x80000001, # -min subnormal -> NaN, invalid
    0x80800000, # -min normal -> NaN, invalid
    0xff7fffff, # -max finite -> NaN, invalid

    # subnormal / normal transitions
    0x00000001,
    0x00000002,
    0x00000004,
    0x00000100,
    0x007fffff, # max subnormal
    0x00800000, # min normal
    0x00800001,
    0x00800100,

    # perfect squares and near misses
    0x40000000, # 2
    0x40800000, # 4 -> 2
    0x41100000, # 9 -> 3
    0x41800000, # 16 -> 4
    0x42480000, # 50
    0x42c80000, # 100 -> 10
    0x447a0000, # 1000
    0x461c4000, # 10000 -> 100
    0x4b000000, # 2^23
    0x4c000000, # 2^24 -> 2^12

    # powers of two
    0x3e800000, # 0.25 -> 0.5
    0x3f000000, # 0.5
    0x41000000, # 8
    0x42000000, # 32

    # boundaries
    0x7f7fffff, # max finite
    0x3f7fffff, # just below 1
    0x3f800001, # just above 1
    0x34000000,
    0x7f000000,

    # irrational results
    0x3f490fdb, # pi/2
    0x40490fdb, # pi
    0x402df854, # e
    0x40c90fdb, # 2pi
    0x3eaaaaab, # 1/3
    0x3f2aaaab, # 2/3

    # tie-to-even candidates
    0x3f800100,
    0x3f800200,
    0x3f800300,
    0x40000100,
    0x40000200,

    # algorithm stress
    0x33800000,
    0x4f800000,
    0x70000000,
    0x0f800000,
    0x08000000,

    # root digit selection
    0x3f400000, # 0.75
    0x3fc00000, # 1.5
    0x40200000, # 2.5
    0x40600000, # 3.5
    0x40a00000, # 5
    0x40e00000, # 7

    # guard/round/sticky
    0x3f800003,
    0x3f800007,
    0x3f80000f,
    0x40000001,
    0x40000003,

    # previously observed failures
    0x40e4006e,
    0x016f609c,
    0x2812c1b1,
    0x67bee97d,
    0x1ab82050,
    0x59042172,
    0x321bbcdd,
    0x36a9405f,
    0x3fab6860,
    0x72cb1062,
    0x6e002f83,
    0x2605ba5a,
    0x429850b4,
    0x696c0b48,
    0x01cdf635,
    0x4b975f95,
    0x3b2c6f35,
    0x3449f9a9,
    0x1ba94baa,

    # small fractions
    0x3d800000, # 0.0625 -> 0.25
    0x3e000000, # 0.125
    0x3ec00000, # 0.375

    # subnormal magnitudes
    0x00000010,
    0x00001000,
    0x00010000,
    0x00100000,
    0x007f0000,

    # iteration convergence
    0x01000000,
    0x7e000000,
    0x02000000,

    # mantissa bit patterns
    0x3fe00000, # 1.75
    0x3ff00000, # 1.875
    0x3ff80000,
    0x3ffc0000,
    0x3ffe0000,
    0x3fff0000,
]


# catalog entries carrying an unresolved discrepancy note.  they are not
# exempt from comparison: a failure is still fatal, the note is only
# printed alongside the diagnostic.
KNOWN_DISCREPANCIES = {
    (0x29eed5eb, 0xefbbfc00):
        "open defect: rounding discrepancy previously reported as "
        "expected 0x8000028a, got 0x8000028b",
}


def special_values():
    """ ±0, ±inf, ±qNaN, ±sNaN, ±1.0, ±min subnormal, ±max finite """
    vals = []
    for s in (0, 1):
        vals += [FP32.zero(s), FP32.inf(s), FP32.nan(s),
                 FP32.create(s, FP32.exponent_inf_nan, 0x200000),
                 FP32.create(s, 0x7f, 0), FP32.create(s, 0, 1),
                 FP32.max_finite | (s << 31)]
    return vals


def special_value_cases(op):
    """ every special value (sqrt) or every ordered pair of them (div) """
    vals = special_values()
    if op.arity == 1:
        return list(vals)
    return list(product(vals, repeat=2))


def catalog(op):
    """ the curated list for ``op`` followed by the special-value cases """
    if op is UnitOperation.DIV:
        return list(DIV_CORNER_CASES) + special_value_cases(op)
    return list(SQRT_CORNER_CASES) + special_value_cases(op)


def load_regressions(path, op):
    """ read regression vectors, one per line as hex patterns

    ``a b`` per line for the divider, ``a`` for sqrt.  ``#`` starts a
    comment, blank lines are skipped.
    """
    cases = []
    with open(path) as f:
        for lineno, line in enumerate(f, 1):
            line = line.split("#", 1)[0].strip()
            if not line:
                continue
            fields = line.replace(",", " ").split()
            if len(fields) != op.arity:
                raise ValueError("%s:%d: expected %d operand(s), got %d" %
                                 (path, lineno, op.arity, len(fields)))
            try:
                ops = tuple(FP32.check(int(x, 16)) for x in fields)
            except (TypeError, ValueError) as e:
                raise ValueError("%s:%d: %s" % (path, lineno, e)) from e
            cases.append(ops if op.arity == 2 else ops[0])
    return cases


def corner_case_vectors(op, cases=None):
    """ yield the catalog (or ``cases``) as labelled ``TestVector``s """
    if cases is None:
        cases = catalog(op)
    for i, case in enumerate(cases):
        if op.arity == 2:
            a, b = case
            yield TestVector(a, b, label="CASE %d" % i)
        else:
            yield TestVector(case, label="CASE %d" % i)
