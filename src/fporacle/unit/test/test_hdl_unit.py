# SPDX-License-Identifier: LGPL-2.1-or-later
# See Notices.txt for copyright information

import unittest

from fporacle.fpcommon.flags import ExceptionFlags
from fporacle.unit.hdl import HDLUnit, DesignError, load_design
from fporacle.unit.test.designs import (SpecialCaseDivider, PassThroughSqrt,
                                        NarrowResult)


class TestHDLUnit(unittest.TestCase):

    def test_ports(self):
        unit = HDLUnit(SpecialCaseDivider())
        self.assertEqual(unit.arity, 2)
        self.assertEqual(list(unit.taps), ["dbg_sign"])
        unit = HDLUnit(PassThroughSqrt())
        self.assertEqual(unit.arity, 1)
        self.assertIsNone(unit.b)
        self.assertEqual(list(unit.taps), ["dbg_exp"])

    def test_divide(self):
        unit = HDLUnit(SpecialCaseDivider())
        unit.set_inputs(0xc0400000, 0x3f800000) # -3 / 1
        unit.evaluate()
        self.assertEqual(unit.result(), 0xc0400000)
        self.assertEqual(unit.exception_outputs(),
                         (False, False, False, False, False))
        self.assertEqual(unit.debug_taps(), {"dbg_sign": 1})

        unit.set_inputs(0x3f800000, 0x80000000) # 1 / -0
        unit.evaluate()
        self.assertEqual(unit.result(), 0xff800000)
        flags = ExceptionFlags.pack(*unit.exception_outputs())
        self.assertEqual(flags, ExceptionFlags.DIVZERO)

    def test_evaluations_independent(self):
        unit = HDLUnit(SpecialCaseDivider())
        unit.set_inputs(0x3f800000, 0x00000000)
        unit.evaluate()
        unit.set_inputs(0x40400000, 0x3f800000)
        unit.evaluate()
        self.assertEqual(unit.result(), 0x40400000)
        self.assertFalse(any(unit.exception_outputs()))

    def test_sqrt(self):
        unit = HDLUnit(PassThroughSqrt())
        unit.set_inputs(0x7f800000)
        unit.evaluate()
        self.assertEqual(unit.result(), 0x7f800000)
        self.assertEqual(unit.debug_taps(), {"dbg_exp": 0xff})

    def test_input_checks(self):
        unit = HDLUnit(PassThroughSqrt())
        with self.assertRaises(TypeError):
            unit.set_inputs(0x3f800000, 0x3f800000)
        with self.assertRaises(ValueError):
            unit.set_inputs(1 << 32)
        with self.assertRaises(RuntimeError):
            unit.evaluate()

    def test_bad_designs(self):
        with self.assertRaises(DesignError):
            HDLUnit(NarrowResult())
        with self.assertRaises(DesignError):
            HDLUnit(object())


class TestLoadDesign(unittest.TestCase):

    def test_class(self):
        design = load_design("fporacle.unit.test.designs:SpecialCaseDivider")
        self.assertIsInstance(design, SpecialCaseDivider)

    def test_factory(self):
        design = load_design("fporacle.unit.test.designs:make_sqrt")
        self.assertIsInstance(design, PassThroughSqrt)

    def test_errors(self):
        with self.assertRaises(DesignError):
            load_design("fporacle.unit.test.designs")
        with self.assertRaises(DesignError):
            load_design("fporacle.no_such_module:Design")
        with self.assertRaises(DesignError):
            load_design("fporacle.unit.test.designs:NoSuchDesign")
        with self.assertRaises(DesignError):
            load_design("fporacle.unit.hdl:EXCEPTION_OUTPUTS")


if __name__ == '__main__':
    unittest.main()
