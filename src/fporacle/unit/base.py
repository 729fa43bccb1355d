# SPDX-License-Identifier: LGPL-2.1-or-later
# See Notices.txt for copyright information

""" Contract of a unit under test.

a unit is purely combinational: inputs are written, one evaluation is
performed, outputs are read back.  nothing observable may survive from
one evaluation to the next.
"""

# names of the five exception outputs, in ExceptionFlags.pack order
EXCEPTION_OUTPUTS = ("exc_invalid", "exc_divzero", "exc_overflow",
                     "exc_underflow", "exc_inexact")


class UnitUnderTest:
    """ Base class for units under test.

    :attribute arity: number of operand inputs (1 or 2).
    """

    arity = 2

    def set_inputs(self, a, b=None):
        """ Present the operand bit patterns. """
        raise NotImplementedError

    def evaluate(self):
        """ Evaluate the unit with the current inputs. """
        raise NotImplementedError

    def result(self):
        """ Get the 32-bit result pattern of the last evaluation. """
        raise NotImplementedError

    def exception_outputs(self):
        """ Get the five exception outputs of the last evaluation.

        :returns: ``(invalid, divzero, overflow, underflow, inexact)``
        """
        raise NotImplementedError

    def debug_taps(self):
        """ Get internal debug signals of the last evaluation, if any.

        :returns: mapping of tap name to integer value.
        """
        return {}

    def _check_inputs(self, a, b):
        if (b is None) != (self.arity == 1):
            raise TypeError("%s takes %d operand(s)" %
                            (type(self).__name__, self.arity))
