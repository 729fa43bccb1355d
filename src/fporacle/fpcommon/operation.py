# SPDX-License-Identifier: LGPL-2.1-or-later
# See Notices.txt for copyright information

""" Operations performed by the units under test. """

import enum


class UnitOperation(enum.Enum):
    """ Operation implemented by a unit under test.

    :attribute DIV: binary32 division, two operands.
    :attribute SQRT: binary32 square root, one operand.
    """

    DIV = "div"
    SQRT = "sqrt"

    def __str__(self):
        return self.value

    @property
    def arity(self):
        """ Get the number of operands. """
        return 2 if self is UnitOperation.DIV else 1

    @property
    def title(self):
        """ Get the banner name used in reports. """
        if self is UnitOperation.DIV:
            return "IEEE-754 FP32 Combinational Divider"
        return "IEEE-754 FP32 Combinational Square Root"


class TestVector:
    """ One or two raw binary32 operand patterns.

    :attribute a: first operand (dividend or radicand).
    :attribute b: second operand (divisor), ``None`` for single-operand units.
    :attribute label: name of the vector in diagnostics.
    """

    __slots__ = ("a", "b", "label")

    # not a test case, despite the name
    __test__ = False

    def __init__(self, a, b=None, label=""):
        self.a = a
        self.b = b
        self.label = label

    @property
    def operands(self):
        if self.b is None:
            return (self.a,)
        return (self.a, self.b)

    def __eq__(self, other):
        if not isinstance(other, TestVector):
            return NotImplemented
        return self.operands == other.operands

    def __hash__(self):
        return hash(self.operands)

    def __repr__(self):
        ops = ", ".join("0x%08x" % x for x in self.operands)
        return f"TestVector({ops}, label={self.label!r})"
