# SPDX-License-Identifier: LGPL-2.1-or-later
# See Notices.txt for copyright information

""" IEEE 754 binary format helpers operating on raw bit patterns.

operands, results and region boundaries are all carried around as plain
unsigned integers.  conversion to a python float only ever happens for
display, through an explicit reinterpretation of the 32-bit storage
(``bits_to_float``), so that NaN payloads, the signalling bit and the sign
of zero are never disturbed by a numeric conversion.
"""

import math
import struct


class FPFormat:
    """ Class describing binary floating-point formats based on IEEE 754.

    :attribute e_width: the number of bits in the exponent field.
    :attribute m_width: the number of bits stored in the mantissa
        field.
    """

    def __init__(self, e_width, m_width):
        """ Create ``FPFormat`` instance. """
        self.e_width = e_width
        self.m_width = m_width

    def __eq__(self, other):
        """ Check for equality. """
        if not isinstance(other, FPFormat):
            return NotImplemented
        return (self.e_width == other.e_width and
                self.m_width == other.m_width)

    def __repr__(self):
        """ Get repr. """
        return f"FPFormat({self.e_width}, {self.m_width})"

    def check(self, x):
        """ returns x unchanged if it is a valid bit pattern for this format
        """
        if not isinstance(x, int) or isinstance(x, bool):
            raise TypeError("bit pattern must be an int, got %r" % (x,))
        if x < 0 or x > self.mask:
            raise ValueError("bit pattern 0x%x does not fit in %d bits" %
                             (x, self.width))
        return x

    def get_sign(self, x):
        """ returns the sign bit of x
        """
        return (x >> (self.e_width + self.m_width)) & 1

    def get_exponent_field(self, x):
        """ returns the biased exponent field of x
        """
        return (x >> self.m_width) & self.exponent_inf_nan

    def get_mantissa(self, x):
        """ returns the mantissa (fraction) field of x
        """
        return x & self.mantissa_mask

    def magnitude(self, x):
        """ returns x with the sign bit cleared
        """
        return x & (self.mask >> 1)

    def create(self, s, e, m):
        """ packs a sign, biased exponent field and mantissa field
        """
        return (s << (self.width - 1)) | (e << self.m_width) | m

    def zero(self, s):
        return self.create(s, 0, 0)

    def inf(self, s):
        return self.create(s, self.exponent_inf_nan, 0)

    def nan(self, s):
        """ returns the canonical quiet NaN with the given sign
        """
        return self.create(s, self.exponent_inf_nan, self.quiet_bit)

    def is_zero(self, x):
        return self.magnitude(x) == 0

    def is_subnormal(self, x):
        return (self.get_exponent_field(x) == 0 and
                self.get_mantissa(x) != 0)

    def is_inf(self, x):
        return (self.get_exponent_field(x) == self.exponent_inf_nan and
                self.get_mantissa(x) == 0)

    def is_nan(self, x):
        """ returns true if x is any NaN, quiet or signalling
        """
        return (self.get_exponent_field(x) == self.exponent_inf_nan and
                self.get_mantissa(x) != 0)

    def is_nan_signalling(self, x):
        """ returns true if x is a signalling nan
        """
        return self.is_nan(x) and (self.get_mantissa(x) & self.quiet_bit) == 0

    def classify(self, x):
        """ short human-readable class of x, used in diagnostics
        """
        sign = "-" if self.get_sign(x) else "+"
        if self.is_nan(x):
            return "sNaN" if self.is_nan_signalling(x) else "qNaN"
        if self.is_inf(x):
            return sign + "inf"
        if self.is_zero(x):
            return sign + "zero"
        if self.is_subnormal(x):
            return sign + "subnormal"
        return sign + "normal"

    @property
    def width(self):
        """ Get the total number of bits in the FP format. """
        return 1 + self.e_width + self.m_width

    @property
    def mask(self):
        return (1 << self.width) - 1

    @property
    def quiet_bit(self):
        """ Get the mantissa bit that marks a NaN as quiet. """
        return 1 << (self.m_width - 1)

    @property
    def mantissa_mask(self):
        """ Get the mask covering the mantissa field. """
        return (1 << self.m_width) - 1

    @property
    def exponent_inf_nan(self):
        """ Get the value of the exponent field designating infinity/NaN. """
        return (1 << self.e_width) - 1

    @property
    def max_finite(self):
        return self.create(0, self.exponent_inf_nan - 1, self.mantissa_mask)


FP32 = FPFormat(8, 23)

ONE = 0x3f800000


def bits_to_float(x):
    """ reinterprets a 32-bit pattern as a binary32 value (display only)
    """
    return struct.unpack("<f", struct.pack("<I", FP32.check(x)))[0]


def float_repr(x):
    """ decimal rendering of a 32-bit pattern, NaNs marked by class
    """
    if FP32.is_nan(x):
        return "-" + FP32.classify(x) if FP32.get_sign(x) else \
               FP32.classify(x)
    f = bits_to_float(x)
    if math.isinf(f):
        return "-inf" if f < 0 else "inf"
    return "%.9g" % f


def hex32(x):
    return "0x%08x" % x
