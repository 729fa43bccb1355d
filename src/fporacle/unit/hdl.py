# SPDX-License-Identifier: LGPL-2.1-or-later
# See Notices.txt for copyright information

""" Drives a combinational amaranth design as a unit under test.

the design exposes its ports as attributes:

* ``a``, ``b`` (divider only), ``y``: 32-bit operands and result
* ``exc_invalid``, ``exc_divzero``, ``exc_overflow``, ``exc_underflow``,
  ``exc_inexact``: one bit each
* any number of ``dbg_*`` signals, read back as debug taps

every evaluation runs a fresh simulation of the design: inputs are set,
the combinational logic settles, outputs are sampled.  no simulator
state is carried from one vector to the next.
"""

import importlib

from amaranth.hdl import Signal
from amaranth.sim import Simulator

from fporacle.fpcommon.fpbase import FP32
from fporacle.unit.base import UnitUnderTest, EXCEPTION_OUTPUTS


class DesignError(ValueError):
    pass


def get_port(design, name, width):
    port = getattr(design, name, None)
    if not isinstance(port, Signal):
        raise DesignError("%s has no signal %r" %
                          (type(design).__name__, name))
    if len(port) != width:
        raise DesignError("%s.%s is %d bits wide, expected %d" %
                          (type(design).__name__, name, len(port), width))
    return port


class HDLUnit(UnitUnderTest):
    """ Unit under test backed by an amaranth simulation.

    :attribute design: the ``Elaboratable`` under test.
    :attribute arity: 2 if the design has a ``b`` input, else 1.
    :attribute taps: ``{name: Signal}`` of the ``dbg_*`` signals.
    """

    def __init__(self, design):
        self.design = design
        self.a = get_port(design, "a", 32)
        self.b = None
        if getattr(design, "b", None) is not None:
            self.b = get_port(design, "b", 32)
        self.arity = 1 if self.b is None else 2
        self.y = get_port(design, "y", 32)
        self.exc = [get_port(design, name, 1) for name in EXCEPTION_OUTPUTS]
        self.taps = {name: sig for name, sig in sorted(vars(design).items())
                     if name.startswith("dbg_") and isinstance(sig, Signal)}
        self.inputs = None
        self.outputs = None

    def set_inputs(self, a, b=None):
        self._check_inputs(a, b)
        self.inputs = (FP32.check(a), None if b is None else FP32.check(b))
        self.outputs = None

    def evaluate(self):
        if self.inputs is None:
            raise RuntimeError("evaluate() called before set_inputs()")
        a, b = self.inputs
        outputs = {}

        async def bench(ctx):
            ctx.set(self.a, a)
            if self.b is not None:
                ctx.set(self.b, b)
            outputs["y"] = ctx.get(self.y)
            outputs["exc"] = tuple(bool(ctx.get(s)) for s in self.exc)
            outputs["taps"] = {name: ctx.get(sig)
                               for name, sig in self.taps.items()}

        sim = Simulator(self.design)
        sim.add_testbench(bench)
        sim.run()
        self.outputs = outputs

    def result(self):
        return self.outputs["y"]

    def exception_outputs(self):
        return self.outputs["exc"]

    def debug_taps(self):
        return dict(self.outputs["taps"])


def load_design(spec):
    """ Instantiate a design from a ``module:attr`` string.

    ``attr`` may name an ``Elaboratable`` class or factory (called with no
    arguments) or an already constructed instance.
    """
    modname, sep, attr = spec.partition(":")
    if not sep or not modname or not attr:
        raise DesignError("design must be given as MODULE:ATTR, got %r" %
                          spec)
    try:
        mod = importlib.import_module(modname)
    except ImportError as e:
        raise DesignError("cannot import %s: %s" % (modname, e)) from e
    try:
        obj = getattr(mod, attr)
    except AttributeError:
        raise DesignError("%s has no attribute %r" % (modname, attr)) \
            from None
    if isinstance(obj, type) or not hasattr(obj, "elaborate"):
        if not callable(obj):
            raise DesignError("%s is neither a design nor a factory" % spec)
        obj = obj()
    return obj
