# SPDX-License-Identifier: LGPL-2.1-or-later
# See Notices.txt for copyright information

""" A software model presented as a unit under test.

with no design to check, the CLI drives the exact reference model
through this adapter against the chosen reference: a loopback self-test
of the harness (or, against ``softfloat``, of one model against the
other).
"""

from fporacle.fpcommon.fpbase import FP32
from fporacle.unit.base import UnitUnderTest


class ModelUnit(UnitUnderTest):
    """ Wraps ``fn(*operands) -> (bits, ExceptionFlags)`` as a unit.

    :attribute fn: the model function.
    :attribute arity: number of operands ``fn`` takes.
    """

    def __init__(self, fn, arity):
        self.fn = fn
        self.arity = arity
        self.inputs = None
        self.outputs = None

    def set_inputs(self, a, b=None):
        self._check_inputs(a, b)
        if b is None:
            self.inputs = (FP32.check(a),)
        else:
            self.inputs = (FP32.check(a), FP32.check(b))
        self.outputs = None

    def evaluate(self):
        if self.inputs is None:
            raise RuntimeError("evaluate() called before set_inputs()")
        self.outputs = self.fn(*self.inputs)

    def result(self):
        return self.outputs[0]

    def exception_outputs(self):
        flags = int(self.outputs[1])
        return tuple(bool(flags & (1 << bit)) for bit in (4, 3, 2, 1, 0))
