""" tests of the phase sequencing, fail-fast and reporting
"""

import io
import unittest

from fporacle.fpcommon.flags import ExceptionFlags
from fporacle.fpcommon.operation import UnitOperation, TestVector
from fporacle.oracle import ComparisonOracle
from fporacle.reference.exact import reference_divide
from fporacle.reference.provider import ReferenceProvider
from fporacle.runner import (RunController, Reporter, RunTally, Phase,
                             VectorMismatch)
from fporacle.stimulus.regions import region_table
from fporacle.stimulus.sampler import StratifiedSampler
from fporacle.unit.model import ModelUnit

DIV = UnitOperation.DIV
SQRT = UnitOperation.SQRT


class RecordingDivider(ModelUnit):
    """ exact divider that logs every vector and breaks on request """

    def __init__(self, faulty=()):
        ModelUnit.__init__(self, self.divide, 2)
        self.faulty = set(faulty)
        self.seen = []

    def divide(self, a, b):
        self.seen.append((a, b))
        z, flags = reference_divide(a, b)
        if (a, b) in self.faulty:
            z ^= 1
        return z, flags


def make_controller(unit, op=DIV, corner_cases=None, systematic=None,
                    verbose=False, notes=None, seed=1):
    stream = io.StringIO()
    oracle = ComparisonOracle(unit, ReferenceProvider("exact", op))
    sampler = StratifiedSampler(region_table(op), op.arity, seed=seed)
    controller = RunController(oracle, op, sampler,
                               reporter=Reporter(stream), verbose=verbose,
                               corner_cases=corner_cases,
                               systematic=systematic, notes=notes)
    return controller, stream


CORNERS = [TestVector(0x3f800000, 0x40400000, "CASE 0"),
           TestVector(0x40000000, 0x3f800000, "CASE 1")]
SWEEP = [TestVector(0x00000001, 0x3f800000, "SUBNORMAL"),
         TestVector(0x3f800000, 0x3f800000, "NEAR_ONE")]


class TestRunTally(unittest.TestCase):

    def test_count(self):
        t = RunTally()
        t.count(Phase.CORNER_CASES)
        t.count(Phase.STRATIFIED_RANDOM)
        t.count(Phase.STRATIFIED_RANDOM)
        self.assertEqual((t.corner_cases, t.systematic, t.random), (1, 0, 2))
        self.assertEqual(t.total, 3)
        with self.assertRaises(ValueError):
            t.count(Phase.REPORT)


class TestRunController(unittest.TestCase):

    def test_phase_order(self):
        unit = RecordingDivider()
        controller, stream = make_controller(unit, corner_cases=CORNERS,
                                             systematic=SWEEP)
        tally = controller.run(5)
        self.assertEqual(unit.seen[:4], [v.operands for v in CORNERS + SWEEP])
        self.assertEqual(len(unit.seen), 9)
        self.assertEqual((tally.corner_cases, tally.systematic, tally.random),
                         (2, 2, 5))
        self.assertIs(controller.phase, Phase.REPORT)
        out = stream.getvalue()
        self.assertLess(out.index("=== Corner-case tests ==="),
                        out.index("=== Systematic tests ==="))
        self.assertLess(out.index("=== Systematic tests ==="),
                        out.index("=== Stratified random tests ==="))
        self.assertIn("Total test vectors: 9", out)
        self.assertIn("near_one: 11.0%", out)
        self.assertNotIn("(measured)", out)
        self.assertNotIn("[CASE 0]", out)

    def test_fail_fast_in_corner_cases(self):
        unit = RecordingDivider(faulty=[CORNERS[0].operands])
        controller, stream = make_controller(unit, corner_cases=CORNERS,
                                             systematic=SWEEP)
        with self.assertRaises(VectorMismatch) as cm:
            controller.run(100)
        e = cm.exception
        self.assertIs(e.phase, Phase.CORNER_CASES)
        self.assertEqual(e.record.vector.label, "CASE 0")
        self.assertEqual(e.record.failure_kind, "value")
        self.assertEqual(e.tally.total, 1)
        # nothing after the failing vector was evaluated
        self.assertEqual(unit.seen, [CORNERS[0].operands])
        out = stream.getvalue()
        self.assertIn("*** corner-case test FAILED (value mismatch)", out)
        self.assertIn("[CASE 0]", out)
        self.assertNotIn("Systematic tests", out)
        self.assertNotIn("Coverage Summary", out)

    def test_fail_fast_in_sweep(self):
        unit = RecordingDivider(faulty=[SWEEP[0].operands])
        controller, stream = make_controller(unit, corner_cases=CORNERS,
                                             systematic=SWEEP)
        with self.assertRaises(VectorMismatch) as cm:
            controller.run(100)
        self.assertIs(cm.exception.phase, Phase.SYSTEMATIC_SWEEP)
        self.assertIs(controller.phase, Phase.SYSTEMATIC_SWEEP)
        self.assertEqual(len(unit.seen), 3)
        self.assertIn("Corner-case tests completed: 2", stream.getvalue())

    def test_fail_in_random_phase(self):
        # every random vector is broken, so the first one fails
        class BrokenRandom(RecordingDivider):
            def divide(self, a, b):
                z, flags = RecordingDivider.divide(self, a, b)
                if len(self.seen) > 4:
                    flags |= ExceptionFlags.INVALID
                return z, flags

        unit = BrokenRandom()
        controller, stream = make_controller(unit, corner_cases=CORNERS,
                                             systematic=SWEEP)
        with self.assertRaises(VectorMismatch) as cm:
            controller.run(10)
        self.assertIs(cm.exception.phase, Phase.STRATIFIED_RANDOM)
        self.assertEqual(cm.exception.record.vector.label, "RANDOM 0")
        self.assertIn(cm.exception.record.failure_kind, ("flags", "both"))
        self.assertEqual(len(unit.seen), 5)

    def test_verbose(self):
        unit = RecordingDivider()
        controller, stream = make_controller(unit, corner_cases=CORNERS,
                                             systematic=SWEEP, verbose=True)
        controller.run(3)
        out = stream.getvalue()
        self.assertIn("[CASE 0] a=1(0x3f800000) b=3(0x40400000)", out)
        self.assertIn("[RANDOM 2]", out)
        self.assertIn("Verbose mode: ON", out)
        self.assertIn("=== Random Test Distribution (measured) ===", out)

    def test_known_discrepancy_note(self):
        pair = (0x29eed5eb, 0xefbbfc00)
        unit = RecordingDivider(faulty=[pair])
        controller, stream = make_controller(
                    unit, corner_cases=[TestVector(*pair, label="CASE 0")],
                    systematic=[])
        with self.assertRaises(VectorMismatch):
            controller.run(0)
        self.assertIn("|NOTE: open defect", stream.getvalue())

    def test_zero_random(self):
        unit = RecordingDivider()
        controller, stream = make_controller(unit, corner_cases=[],
                                             systematic=[])
        tally = controller.run(0)
        self.assertEqual(tally.total, 0)
        self.assertIn("Stratified random tests: 0", stream.getvalue())

    def test_sqrt_defaults(self):
        # full default catalog and sweeps against the loopback model
        ref = ReferenceProvider("exact", SQRT)
        controller, stream = make_controller(ModelUnit(ref, 1), op=SQRT)
        tally = controller.run(2000)
        self.assertEqual(tally.systematic, 1922 + 0x2001)
        self.assertEqual(tally.random, 2000)
        self.assertIn("IEEE-754 FP32 Combinational Square Root",
                      stream.getvalue())

    def test_run_twice_defaults(self):
        ref = ReferenceProvider("exact", SQRT)
        controller, stream = make_controller(ModelUnit(ref, 1), op=SQRT)
        first = controller.run(10)
        second = controller.run(10)
        self.assertEqual((second.corner_cases, second.systematic),
                         (first.corner_cases, first.systematic))
        self.assertGreater(second.corner_cases, 0)
        self.assertGreater(second.systematic, 0)

    def test_run_twice_supplied_generators(self):
        unit = RecordingDivider()
        controller, stream = make_controller(unit,
                                             corner_cases=iter(CORNERS),
                                             systematic=iter(SWEEP))
        controller.run(0)
        tally = controller.run(0)
        self.assertEqual((tally.corner_cases, tally.systematic), (2, 2))
        self.assertEqual(unit.seen, [v.operands for v in CORNERS + SWEEP] * 2)


if __name__ == '__main__':
    unittest.main()
