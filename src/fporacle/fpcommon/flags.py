# SPDX-License-Identifier: LGPL-2.1-or-later
# See Notices.txt for copyright information

""" IEEE 754 exception flags packed into one ordered 5-bit set.

the bit positions match the Berkeley SoftFloat ``softfloat_flag_*``
constants, so a raw SoftFloat flag word can be used directly.
"""

import enum


class ExceptionFlags(enum.IntFlag):
    """ Exception flags raised by a single arithmetic operation.

    :attribute INVALID: invalid operation (bit 4).
    :attribute DIVZERO: division of a finite number by zero (bit 3).
    :attribute OVERFLOW: rounded result too large (bit 2).
    :attribute UNDERFLOW: tiny and inexact result (bit 1).
    :attribute INEXACT: rounded result differs from the exact one (bit 0).
    """

    NONE = 0
    INEXACT = 1 << 0
    UNDERFLOW = 1 << 1
    OVERFLOW = 1 << 2
    DIVZERO = 1 << 3
    INVALID = 1 << 4

    @classmethod
    def pack(cls, invalid, divzero, overflow, underflow, inexact):
        """ Build a flag set from five separate flag outputs. """
        return cls((bool(invalid) << 4) | (bool(divzero) << 3) |
                   (bool(overflow) << 2) | (bool(underflow) << 1) |
                   bool(inexact))

    def names(self):
        """ Get the names of the raised flags, highest bit first. """
        return [f.name.lower() for f in ORDER if f & self]

    def describe(self):
        return "|".join(self.names()) or "none"


ORDER = (ExceptionFlags.INVALID, ExceptionFlags.DIVZERO,
         ExceptionFlags.OVERFLOW, ExceptionFlags.UNDERFLOW,
         ExceptionFlags.INEXACT)


def flag_mismatch(rtl_flags, ref_flags):
    """ Describe how two flag sets differ.

    :returns: empty string if they agree, otherwise ``missing=...`` for
        flags the reference raised but the unit did not, and
        ``unexpected=...`` for the reverse.
    """
    missing = ExceptionFlags(int(ref_flags) & ~int(rtl_flags) & 0x1f)
    unexpected = ExceptionFlags(int(rtl_flags) & ~int(ref_flags) & 0x1f)
    parts = []
    if missing:
        parts.append("missing=" + missing.describe())
    if unexpected:
        parts.append("unexpected=" + unexpected.describe())
    return " ".join(parts)
