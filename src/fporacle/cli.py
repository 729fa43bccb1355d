# SPDX-License-Identifier: LGPL-2.1-or-later
# See Notices.txt for copyright information

""" Command line entry points: ``fpdiv-oracle`` and ``fpsqrt-oracle``.

exit status: 0 when every vector passed, 1 on the first mismatch, 2 on
a usage or setup error.
"""

import argparse
import sys

from fporacle.fpcommon.operation import UnitOperation
from fporacle.oracle import ComparisonOracle
from fporacle.reference.provider import ReferenceProvider, REFERENCE_MODULES
from fporacle.runner import RunController, Reporter, VectorMismatch
from fporacle.stimulus.corner_cases import (catalog, corner_case_vectors,
                                            load_regressions)
from fporacle.stimulus.regions import region_table
from fporacle.stimulus.sampler import StratifiedSampler
from fporacle.unit.hdl import HDLUnit, DesignError, load_design
from fporacle.unit.model import ModelUnit


# random vectors per run unless --count says otherwise.  every HDL vector
# is a fresh simulation (around a millisecond even for a trivial design),
# so a simulated design gets a far smaller default than the software model
DEFAULT_RANDOM_COUNT = 60000000
DEFAULT_HDL_RANDOM_COUNT = 100000

EXIT_PASS = 0
EXIT_MISMATCH = 1
EXIT_SETUP = 2


def build_parser(op=None):
    prog = {None: "fporacle", UnitOperation.DIV: "fpdiv-oracle",
            UnitOperation.SQRT: "fpsqrt-oracle"}[op]
    p = argparse.ArgumentParser(
        prog=prog,
        description="differential test of a combinational binary32 "
                    "divide/sqrt unit against a software reference")
    if op is None:
        p.add_argument("op", choices=[o.value for o in UnitOperation],
                       help="operation implemented by the unit")
    p.add_argument("-v", "--verbose", action="store_true",
                   help="print a diagnostic line for passing vectors too")
    p.add_argument("--count", type=int, default=None,
                   help="number of stratified random vectors (default %d, "
                        "or %d with --design: each simulated vector costs "
                        "about a millisecond)" %
                        (DEFAULT_RANDOM_COUNT, DEFAULT_HDL_RANDOM_COUNT))
    p.add_argument("--seed", type=int, default=None,
                   help="base seed of the random streams")
    p.add_argument("--design", metavar="MODULE:ATTR", default=None,
                   help="amaranth design (class, factory or instance) to "
                        "test; without it the exact model is checked")
    p.add_argument("--reference", choices=sorted(REFERENCE_MODULES),
                   default="exact", help="software reference "
                                         "(default %(default)s)")
    p.add_argument("--regressions", metavar="FILE", default=None,
                   help="extra corner cases, hex patterns one vector "
                        "per line")
    p.add_argument("--ulp-tolerance", type=int, default=0,
                   help="largest ulp distance accepted as equal "
                        "(default %(default)d, exact equivalence)")
    return p


def create_unit(op, design_spec):
    if design_spec is None:
        return ModelUnit(ReferenceProvider("exact", op), op.arity)
    unit = HDLUnit(load_design(design_spec))
    if unit.arity != op.arity:
        raise DesignError("%s has %d operand input(s), %s needs %d" %
                          (design_spec, unit.arity, op, op.arity))
    return unit


def random_count(args):
    """ --count, or the default for the kind of unit being checked """
    if args.count is not None:
        return args.count
    if args.design is None:
        return DEFAULT_RANDOM_COUNT
    return DEFAULT_HDL_RANDOM_COUNT


def run(op, args, stream=None):
    """ set everything up from parsed ``args`` and run it

    :returns: the process exit status.
    """
    reporter = Reporter(stream)
    count = random_count(args)
    if count < 0:
        raise ValueError("--count must not be negative")
    reference = ReferenceProvider(args.reference, op)
    unit = create_unit(op, args.design)
    if args.design is None:
        reporter.print("no design given: checking the exact model against "
                       "the %s reference" % args.reference)

    cases = catalog(op)
    if args.regressions is not None:
        cases += load_regressions(args.regressions, op)

    sampler = StratifiedSampler(region_table(op), op.arity, seed=args.seed)
    oracle = ComparisonOracle(unit, reference,
                              ulp_tolerance=args.ulp_tolerance)
    controller = RunController(oracle, op, sampler, reporter=reporter,
                               verbose=args.verbose,
                               corner_cases=corner_case_vectors(op, cases))
    try:
        controller.run(count)
    except VectorMismatch as e:
        reporter.print("Aborted after %d vector(s); replay with --seed %d" %
                       (e.tally.total, sampler.seed))
        return EXIT_MISMATCH
    return EXIT_PASS


def main(argv=None, op=None, stream=None):
    parser = build_parser(op)
    args = parser.parse_args(argv)
    if op is None:
        op = UnitOperation(args.op)
    try:
        return run(op, args, stream)
    except (DesignError, ImportError, OSError, ValueError) as e:
        print("%s: error: %s" % (parser.prog, e), file=sys.stderr)
        return EXIT_SETUP


def div_main():
    sys.exit(main(op=UnitOperation.DIV))


def sqrt_main():
    sys.exit(main(op=UnitOperation.SQRT))


if __name__ == '__main__':
    sys.exit(main())
