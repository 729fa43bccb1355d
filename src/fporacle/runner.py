# SPDX-License-Identifier: LGPL-2.1-or-later
# See Notices.txt for copyright information

""" Sequences the vector sources through the oracle.

phases run strictly in order::

    CORNER_CASES -> SYSTEMATIC_SWEEP -> STRATIFIED_RANDOM -> REPORT

the first failing vector in any phase ends the run: its diagnostic is
printed and ``VectorMismatch`` is raised.  there is no retry and nothing
after the failing vector is evaluated.
"""

import enum
import sys

from fporacle.oracle import format_record
from fporacle.stimulus.corner_cases import (corner_case_vectors,
                                            KNOWN_DISCREPANCIES)
from fporacle.stimulus.sweep import systematic_vectors


class Phase(enum.Enum):
    CORNER_CASES = "corner-case"
    SYSTEMATIC_SWEEP = "systematic"
    STRATIFIED_RANDOM = "stratified random"
    REPORT = "report"


class RunTally:
    """ Number of vectors executed per phase. """

    def __init__(self):
        self.corner_cases = 0
        self.systematic = 0
        self.random = 0

    def count(self, phase):
        if phase is Phase.CORNER_CASES:
            self.corner_cases += 1
        elif phase is Phase.SYSTEMATIC_SWEEP:
            self.systematic += 1
        elif phase is Phase.STRATIFIED_RANDOM:
            self.random += 1
        else:
            raise ValueError("no vectors are run in phase %s" % phase)

    @property
    def total(self):
        return self.corner_cases + self.systematic + self.random

    def __repr__(self):
        return ("RunTally(corner_cases=%d, systematic=%d, random=%d)" %
                (self.corner_cases, self.systematic, self.random))


class VectorMismatch(Exception):
    """ The unit under test disagreed with the reference.

    :attribute phase: the ``Phase`` the vector belonged to.
    :attribute record: the failing ``EvaluationRecord``.
    :attribute tally: the ``RunTally`` up to and including the failure.
    """

    def __init__(self, phase, record, tally):
        self.phase = phase
        self.record = record
        self.tally = tally
        super().__init__("%s mismatch in %s phase: %s" %
                         (record.failure_kind, phase.value,
                          format_record(record)))


class Reporter:
    """ Prints progress, diagnostics and the final summary. """

    def __init__(self, stream=None):
        self.stream = stream if stream is not None else sys.stdout

    def print(self, *args):
        print(*args, file=self.stream)

    def banner(self, op, random_count, verbose, seed=None):
        title = "=== %s Test Suite ===" % op.title
        self.print(title)
        self.print("Target random vectors:", random_count)
        if seed is not None:
            self.print("Random seed:", seed)
        self.print("Verbose mode:", "ON" if verbose else "OFF")
        self.print("=" * len(title))

    def phase_start(self, phase):
        self.print("=== %s tests ===" % phase.value.capitalize())

    def phase_done(self, phase, count):
        self.print("%s tests completed: %d" %
                   (phase.value.capitalize(), count))

    def record(self, record, note=None):
        self.print(format_record(record, note))

    def failure(self, phase, record, note=None):
        self.print("*** %s test FAILED (%s mismatch)" %
                   (phase.value, record.failure_kind))
        self.print(format_record(record, note))

    def summary(self, tally, table, measured=None):
        self.print()
        self.print("=== Test Coverage Summary ===")
        self.print("Corner cases:", tally.corner_cases)
        self.print("Systematic tests:", tally.systematic)
        self.print("Stratified random tests:", tally.random)
        self.print("Total test vectors:", tally.total)
        self.print()
        self.print("=== Random Test Distribution (expected) ===")
        for label, percent in table.expected_distribution():
            self.print("%s: %.1f%%" % (label, percent))
        if measured is not None:
            self.print()
            self.print("=== Random Test Distribution (measured) ===")
            for label, percent in measured:
                self.print("%s: %.1f%%" % (label, percent))


class RunController:
    """ Runs every phase against one ``ComparisonOracle``.

    :attribute oracle: the ``ComparisonOracle``.
    :attribute op: the ``UnitOperation`` under test.
    :attribute sampler: ``StratifiedSampler`` for the random phase.
    :attribute reporter: ``Reporter`` receiving all output.
    :attribute verbose: print a diagnostic line for passing vectors too.
    :attribute phase: the current ``Phase``, ``None`` before ``run``.
    """

    def __init__(self, oracle, op, sampler, reporter=None, verbose=False,
                       corner_cases=None, systematic=None, notes=None):
        self.oracle = oracle
        self.op = op
        self.sampler = sampler
        self.reporter = reporter if reporter is not None else Reporter()
        self.verbose = verbose
        # caller-supplied vectors are held as lists so that every run
        # replays all of them; the defaults are regenerated per run
        self.corner_cases = None
        if corner_cases is not None:
            self.corner_cases = list(corner_cases)
        self.systematic = None
        if systematic is not None:
            self.systematic = list(systematic)
        self.notes = KNOWN_DISCREPANCIES if notes is None else notes
        self.phase = None

    def run_phase(self, phase, vectors, tally):
        self.phase = phase
        self.reporter.phase_start(phase)
        n = 0
        for vector in vectors:
            record = self.oracle.evaluate(vector)
            tally.count(phase)
            n += 1
            note = self.notes.get(vector.operands)
            if not record.passed:
                self.reporter.failure(phase, record, note)
                raise VectorMismatch(phase, record, tally)
            if self.verbose:
                self.reporter.record(record, note)
        self.reporter.phase_done(phase, n)

    def run(self, random_count):
        """ Run all phases.

        :returns: the ``RunTally``.
        :raises VectorMismatch: on the first failing vector.
        """
        corner_cases = self.corner_cases
        if corner_cases is None:
            corner_cases = corner_case_vectors(self.op)
        systematic = self.systematic
        if systematic is None:
            systematic = systematic_vectors(self.op)
        tally = RunTally()
        self.reporter.banner(self.op, random_count, self.verbose,
                             self.sampler.seed)
        self.run_phase(Phase.CORNER_CASES, corner_cases, tally)
        self.run_phase(Phase.SYSTEMATIC_SWEEP, systematic, tally)
        self.run_phase(Phase.STRATIFIED_RANDOM,
                       self.sampler.vectors(random_count), tally)
        self.phase = Phase.REPORT
        measured = None
        if self.verbose:
            measured = self.sampler.measured_distribution()
        self.reporter.summary(tally, self.sampler.table, measured)
        return tally
