# SPDX-License-Identifier: LGPL-2.1-or-later
# See Notices.txt for copyright information

""" Deterministic boundary sweeps.

two sweeps per operation: the whole subnormal range walked with a stride
that does not line up with power-of-two structure, and a dense window of
patterns centred on the encoding of 1.0, where the exponent changes and
rounding decisions are most sensitive.
"""

from itertools import chain

from fporacle.fpcommon.fpbase import ONE
from fporacle.fpcommon.operation import UnitOperation, TestVector


SUBNORMAL_FIRST = 0x00000001
SUBNORMAL_LAST = 0x007fffff
SUBNORMAL_STRIDE = 0x1111

# divisors paired with every swept subnormal dividend: 1.0, 2.0, 0.5,
# 10.0, 0.25
SUBNORMAL_DIVISORS = [0x3f800000, 0x40000000, 0x3f000000, 0x41200000,
                      0x3e800000]

# near-one window half-widths, in bit patterns
DIV_NEAR_ONE_HALF_WINDOW = 0x8000
SQRT_NEAR_ONE_HALF_WINDOW = 0x1000

# stride of the divisor walk in the divider near-one sweep
NEAR_ONE_DIVISOR_STRIDE = 17


def strided(first, last, stride):
    """ first, first+stride, ... and finally ``last`` itself

    ``last`` is always visited: when the stride does not land on it the
    remaining partial step is taken as well.
    """
    if stride <= 0:
        raise ValueError("stride must be positive")
    x = first
    while x <= last:
        yield x
        prev = x
        x += stride
    if first <= last and prev != last:
        yield last


def subnormal_sweep(op, stride=SUBNORMAL_STRIDE, divisors=None):
    if divisors is None:
        divisors = SUBNORMAL_DIVISORS
    for a in strided(SUBNORMAL_FIRST, SUBNORMAL_LAST, stride):
        if op.arity == 1:
            yield TestVector(a, label="SUBNORMAL")
            continue
        for b in divisors:
            yield TestVector(a, b, label="SUBNORMAL")


def near_one_sweep(op, half_window=None):
    """ contiguous patterns around 1.0

    the divider walks the dividend one pattern at a time through
    ``[1.0 - half_window, 1.0 + half_window)`` while the divisor walks
    from the same start with a stride of 17 patterns.  sqrt covers
    ``[1.0 - half_window, 1.0 + half_window]`` inclusive.
    """
    if op is UnitOperation.DIV:
        if half_window is None:
            half_window = DIV_NEAR_ONE_HALF_WINDOW
        for i in range(2 * half_window):
            a = (ONE + i - half_window) & 0xffffffff
            b = (ONE + NEAR_ONE_DIVISOR_STRIDE * i - half_window) & 0xffffffff
            yield TestVector(a, b, label="NEAR_ONE")
    else:
        if half_window is None:
            half_window = SQRT_NEAR_ONE_HALF_WINDOW
        for a in range(ONE - half_window, ONE + half_window + 1):
            yield TestVector(a, label="NEAR_ONE")


def systematic_vectors(op, stride=SUBNORMAL_STRIDE, half_window=None):
    return chain(subnormal_sweep(op, stride),
                 near_one_sweep(op, half_window))
