# SPDX-License-Identifier: LGPL-2.1-or-later
# See Notices.txt for copyright information

""" Berkeley SoftFloat reference, through the sfpy bindings.

an int given to Float32 is taken as its bit pattern.  SoftFloat
accumulates exception flags in one process-wide sticky word, so it is
cleared before every operation and read straight after.
"""

import sfpy.float
from sfpy import Float32

from fporacle.fpcommon.flags import ExceptionFlags


def softfloat_flags():
    """ read the SoftFloat sticky flags as an ``ExceptionFlags`` """
    return ExceptionFlags.pack(sfpy.float.flag_get_invalid(),
                               sfpy.float.flag_get_infinite(),
                               sfpy.float.flag_get_overflow(),
                               sfpy.float.flag_get_underflow(),
                               sfpy.float.flag_get_inexact())


def reference_divide(a, b):
    """ a / b. returns (result bits, ExceptionFlags) """
    fa = Float32(a)
    fb = Float32(b)
    sfpy.float.flag_reset()
    z = fa / fb
    return z.bits, softfloat_flags()


def reference_sqrt(a):
    """ sqrt(a). returns (result bits, ExceptionFlags) """
    fa = Float32(a)
    sfpy.float.flag_reset()
    z = fa.sqrt()
    return z.bits, softfloat_flags()
