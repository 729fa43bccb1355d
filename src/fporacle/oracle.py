# SPDX-License-Identifier: LGPL-2.1-or-later
# See Notices.txt for copyright information

""" Comparison oracle: one vector in, one judged ``EvaluationRecord`` out.

equivalence policy
==================

value: two NaNs are equal whatever their payload or signalling bit.
otherwise the distance is measured in units in the last place, as an
integer difference of the encodings with the sign handled separately:

* bit-identical results: 0
* +0 against -0: 0 (value comparison only, flags are still compared)
* opposite signs: ``mag(rtl) + mag(ref)``, the distance through zero
* same sign: ``|mag(rtl) - mag(ref)|``

a result passes when the distance is at most ``ulp_tolerance``, which is
0 (strict, exact equivalence) unless a caller asks otherwise.

flags: the five exception flags must match exactly.
"""

from fporacle.fpcommon.fpbase import FP32, float_repr, hex32
from fporacle.fpcommon.flags import ExceptionFlags, flag_mismatch


def ulp_diff(rtl, ref):
    """ distance between two binary32 encodings, see module docstring """
    if FP32.is_nan(rtl) and FP32.is_nan(ref):
        return 0
    if rtl == ref:
        return 0
    if FP32.is_zero(rtl) and FP32.is_zero(ref):
        return 0
    rtl_mag = FP32.magnitude(rtl)
    ref_mag = FP32.magnitude(ref)
    if FP32.get_sign(rtl) != FP32.get_sign(ref):
        return rtl_mag + ref_mag
    return abs(rtl_mag - ref_mag)


class EvaluationRecord:
    """ Outcome of evaluating one ``TestVector``.

    :attribute vector: the vector evaluated.
    :attribute rtl_bits: result pattern from the unit under test.
    :attribute rtl_flags: ``ExceptionFlags`` from the unit under test.
    :attribute ref_bits: result pattern from the reference.
    :attribute ref_flags: ``ExceptionFlags`` from the reference.
    :attribute ulp_diff: distance between the two results.
    :attribute nan_case: both results are NaN.
    :attribute value_pass: result equivalent under the policy.
    :attribute flag_pass: flags identical.
    :attribute debug_taps: internal signals exposed by the unit, if any.
    """

    def __init__(self, vector, rtl_bits, rtl_flags, ref_bits, ref_flags,
                 ulp_tolerance=0, debug_taps=None):
        self.vector = vector
        self.rtl_bits = rtl_bits
        self.rtl_flags = ExceptionFlags(rtl_flags)
        self.ref_bits = ref_bits
        self.ref_flags = ExceptionFlags(ref_flags)
        self.nan_case = FP32.is_nan(rtl_bits) and FP32.is_nan(ref_bits)
        self.ulp_diff = ulp_diff(rtl_bits, ref_bits)
        self.value_pass = self.nan_case or self.ulp_diff <= ulp_tolerance
        self.flag_pass = self.rtl_flags == self.ref_flags
        self.debug_taps = debug_taps or {}

    @property
    def passed(self):
        return self.value_pass and self.flag_pass

    @property
    def failure_kind(self):
        """ None, "value", "flags" or "both" """
        if self.passed:
            return None
        if not self.value_pass and not self.flag_pass:
            return "both"
        return "value" if not self.value_pass else "flags"

    def __repr__(self):
        return ("EvaluationRecord(%r, rtl=%s, ref=%s, ulp_diff=%d, %s)" %
                (self.vector, hex32(self.rtl_bits), hex32(self.ref_bits),
                 self.ulp_diff, "PASS" if self.passed else "FAIL"))


class ComparisonOracle:
    """ Drives a unit under test and judges it against a reference.

    :attribute unit: a ``UnitUnderTest``.
    :attribute reference: callable ``(*operands) -> (bits, flags)``.
    :attribute ulp_tolerance: largest ``ulp_diff`` accepted as equal.
    """

    def __init__(self, unit, reference, ulp_tolerance=0):
        if ulp_tolerance < 0:
            raise ValueError("ulp_tolerance must not be negative")
        self.unit = unit
        self.reference = reference
        self.ulp_tolerance = ulp_tolerance

    def evaluate(self, vector):
        self.unit.set_inputs(vector.a, vector.b)
        self.unit.evaluate()
        rtl_bits = self.unit.result()
        rtl_flags = ExceptionFlags.pack(*self.unit.exception_outputs())
        taps = self.unit.debug_taps()

        ref_bits, ref_flags = self.reference(*vector.operands)

        return EvaluationRecord(vector, rtl_bits, rtl_flags,
                                ref_bits, ref_flags,
                                ulp_tolerance=self.ulp_tolerance,
                                debug_taps=taps)


def format_operand(x):
    return "%s(%s)" % (float_repr(x), hex32(x))


def format_record(record, note=None):
    """ one diagnostic line for a record """
    v = record.vector
    parts = []
    if v.label:
        parts.append("[%s]" % v.label)
    parts.append("a=" + format_operand(v.a))
    if v.b is not None:
        parts.append("b=" + format_operand(v.b))
    parts.append("RTL=" + format_operand(record.rtl_bits))
    parts.append("Ref=" + format_operand(record.ref_bits))
    parts.append("ulp_diff=%d" % record.ulp_diff)
    parts.append("PASS" if record.value_pass else "FAIL")
    parts.append("|FLAG=%s" % ("PASS" if record.flag_pass else "FAIL"))
    parts.append("RTL_flags=0x%02x" % int(record.rtl_flags))
    parts.append("Ref_flags=0x%02x" % int(record.ref_flags))
    if not record.flag_pass:
        parts.append(flag_mismatch(record.rtl_flags, record.ref_flags))
    if record.debug_taps:
        parts.append("|" + " ".join("%s=%#x" % (name, value)
                                    for name, value in
                                    sorted(record.debug_taps.items())))
    if note:
        parts.append("|NOTE: " + note)
    return " ".join(parts)
