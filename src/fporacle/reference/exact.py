# SPDX-License-Identifier: LGPL-2.1-or-later
# See Notices.txt for copyright information

""" Exact binary32 division and square root using only integer arithmetic.

follows Berkeley SoftFloat 3 (x86 specialisation, round-to-nearest-even,
tininess detected after rounding) result for result and flag for flag:

* the significand is computed exactly (integer quotient / integer square
  root) with a sticky bit for any non-zero remainder,
* ``round_pack`` rounds and packs exactly like ``softfloat_roundPackToF32``,
* NaN results follow the x86 rules: the default NaN is 0xffc00000 and an
  input NaN is propagated with its quiet bit set.

the flag state is local to each call, there is nothing sticky to reset.
"""

import math

from fporacle.fpcommon.flags import ExceptionFlags
from fporacle.fpcommon.fpbase import FP32


DEFAULT_NAN = 0xffc00000


def unpack_f32(ui):
    """ (sign, biased exponent field, fraction field) """
    return (FP32.get_sign(ui), FP32.get_exponent_field(ui),
            FP32.get_mantissa(ui))


def pack_f32(sign, exp, sig):
    """ packs using addition so a carry out of sig bumps the exponent """
    return ((sign << 31) + (exp << 23) + sig) & 0xffffffff


def shift_right_jam32(a, dist):
    """ shift right, ORing any bits shifted out into the LSB """
    if dist < 31:
        return (a >> dist) | (1 if a & ((1 << dist) - 1) else 0)
    return 1 if a else 0


def norm_subnormal_sig(sig):
    """ normalise a subnormal significand. returns (exp, sig) """
    shift = 24 - sig.bit_length()
    return 1 - shift, sig << shift


def propagate_nan(a, b, flags):
    if FP32.is_nan_signalling(a) or FP32.is_nan_signalling(b):
        flags |= ExceptionFlags.INVALID
    return (a if FP32.is_nan(a) else b) | FP32.quiet_bit, flags


def round_pack(sign, exp, sig, flags):
    """ round to nearest even and pack

    ``sig`` carries the leading one at bit 30 and seven round bits below
    the final LSB; the value is ``sig * 2**(exp - 156)``.
    """
    round_bits = sig & 0x7f
    if exp < 0 or exp >= 0xfd:
        if exp < 0:
            tiny = exp < -1 or sig + 0x40 < 0x80000000
            sig = shift_right_jam32(sig, -exp)
            exp = 0
            round_bits = sig & 0x7f
            if tiny and round_bits:
                flags |= ExceptionFlags.UNDERFLOW
        elif exp > 0xfd or sig + 0x40 >= 0x80000000:
            flags |= ExceptionFlags.OVERFLOW | ExceptionFlags.INEXACT
            return pack_f32(sign, 0xff, 0), flags
    sig = (sig + 0x40) >> 7
    if round_bits:
        flags |= ExceptionFlags.INEXACT
    if round_bits == 0x40:
        sig &= ~1
    if not sig:
        exp = 0
    return pack_f32(sign, exp, sig), flags


def reference_divide(a, b):
    """ a / b. returns (result bits, ExceptionFlags) """
    flags = ExceptionFlags.NONE
    sign_a, exp_a, sig_a = unpack_f32(a)
    sign_b, exp_b, sig_b = unpack_f32(b)
    sign_z = sign_a ^ sign_b

    if exp_a == 0xff:
        if sig_a:
            return propagate_nan(a, b, flags)
        if exp_b == 0xff:
            if sig_b:
                return propagate_nan(a, b, flags)
            return DEFAULT_NAN, flags | ExceptionFlags.INVALID
        return pack_f32(sign_z, 0xff, 0), flags
    if exp_b == 0xff:
        if sig_b:
            return propagate_nan(a, b, flags)
        return pack_f32(sign_z, 0, 0), flags

    if exp_b == 0:
        if sig_b == 0:
            if exp_a == 0 and sig_a == 0:
                return DEFAULT_NAN, flags | ExceptionFlags.INVALID
            return pack_f32(sign_z, 0xff, 0), flags | ExceptionFlags.DIVZERO
        exp_b, sig_b = norm_subnormal_sig(sig_b)
    if exp_a == 0:
        if sig_a == 0:
            return pack_f32(sign_z, 0, 0), flags
        exp_a, sig_a = norm_subnormal_sig(sig_a)

    exp_z = exp_a - exp_b + 0x7e
    sig_a |= 0x00800000
    sig_b |= 0x00800000
    if sig_a < sig_b:
        exp_z -= 1
        dividend = sig_a << 31
    else:
        dividend = sig_a << 30
    sig_z, rem = divmod(dividend, sig_b)
    if rem:
        sig_z |= 1
    return round_pack(sign_z, exp_z, sig_z, flags)


def reference_sqrt(a):
    """ sqrt(a). returns (result bits, ExceptionFlags) """
    flags = ExceptionFlags.NONE
    sign_a, exp_a, sig_a = unpack_f32(a)

    if exp_a == 0xff:
        if sig_a:
            return propagate_nan(a, 0, flags)
        if not sign_a:
            return a, flags
        return DEFAULT_NAN, flags | ExceptionFlags.INVALID
    if sign_a:
        if exp_a == 0 and sig_a == 0:
            return a, flags
        return DEFAULT_NAN, flags | ExceptionFlags.INVALID
    if exp_a == 0:
        if sig_a == 0:
            return a, flags
        exp_a, sig_a = norm_subnormal_sig(sig_a)

    # a = sig_a * 2**e with an even e, so sqrt(a) = sqrt(sig_a) * 2**(e/2)
    sig_a |= 0x00800000
    e = exp_a - 0x7f - 23
    if e & 1:
        sig_a <<= 1
        e -= 1
    # scale up far enough that the root has at least 31 bits
    radicand = sig_a << 40
    root = math.isqrt(radicand)
    sticky = radicand != root * root
    shift = root.bit_length() - 31
    if root & ((1 << shift) - 1):
        sticky = True
    sig_z = (root >> shift) | sticky
    exp_z = e // 2 - 20 + shift + 156
    return round_pack(0, exp_z, sig_z, flags)
