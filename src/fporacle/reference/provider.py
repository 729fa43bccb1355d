# SPDX-License-Identifier: LGPL-2.1-or-later
# See Notices.txt for copyright information

""" Selection of the software reference for an operation. """

import importlib

from fporacle.fpcommon.fpbase import FP32
from fporacle.fpcommon.operation import UnitOperation


# reference name -> module providing reference_divide / reference_sqrt.
# softfloat needs the optional sfpy package, so it is imported on demand.
REFERENCE_MODULES = {
    "exact": "fporacle.reference.exact",
    "softfloat": "fporacle.reference.softfloat",
}


class ReferenceProvider:
    """ Binds one reference implementation to one operation.

    calling it with the operand bit patterns returns ``(bits, flags)``.

    :attribute name: key into ``REFERENCE_MODULES``.
    :attribute op: the ``UnitOperation``.
    """

    def __init__(self, name, op):
        if name not in REFERENCE_MODULES:
            raise ValueError("unknown reference %r, expected one of %s" %
                             (name, ", ".join(sorted(REFERENCE_MODULES))))
        self.name = name
        self.op = op
        mod = importlib.import_module(REFERENCE_MODULES[name])
        if op is UnitOperation.DIV:
            self.fn = mod.reference_divide
        else:
            self.fn = mod.reference_sqrt

    def __call__(self, *operands):
        if len(operands) != self.op.arity:
            raise TypeError("%s takes %d operand(s), got %d" %
                            (self.op, self.op.arity, len(operands)))
        return self.fn(*(FP32.check(x) for x in operands))

    def __repr__(self):
        return f"ReferenceProvider({self.name!r}, {self.op})"
