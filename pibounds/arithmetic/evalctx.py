"""Evaluation contexts: run a computation with every operation rounded
in one direction, on one numeric backend.
"""

import collections
import contextlib
import logging

from ..errors import UnsupportedOperationError
from ..numeric.ops import OP, parse_rm


logger = logging.getLogger(__name__)


binary16_synonyms = {'binary16', 'float16', 'float16_t', 'half'}
binary32_synonyms = {'binary32', 'float32', 'float32_t', 'single', 'float'}
binary64_synonyms = {'binary64', 'float64', 'float64_t', 'double'}
binary80_synonyms = {'binary80', 'float80', 'extended', 'longdouble'}
binary128_synonyms = {'binary128', 'float128', 'float128_t', 'quadruple'}

IEEE_esnbits = {}
IEEE_esnbits.update((k, (5, 16)) for k in binary16_synonyms)
IEEE_esnbits.update((k, (8, 32)) for k in binary32_synonyms)
IEEE_esnbits.update((k, (11, 64)) for k in binary64_synonyms)
IEEE_esnbits.update((k, (15, 79)) for k in binary80_synonyms)
IEEE_esnbits.update((k, (15, 128)) for k in binary128_synonyms)


Evaluation = collections.namedtuple('Evaluation', ['value', 'rm', 'used', 'uncertified'])


class RoundedOps(object):
    """Arithmetic on one backend, with every result rounded in one direction.

    Instances are created by `RoundedNumeric.scope()` and handed to the
    computation running in that scope. They stop working when the scope
    closes, so a rounding direction can never be used outside the block
    that selected it.
    """

    def __init__(self, backend, rm):
        self._backend = backend
        self._rm = rm
        self._active = True
        self._used = set()

    @property
    def rm(self):
        """The rounding direction applied to every operation."""
        return self._rm

    @property
    def backend(self):
        return self._backend

    @property
    def used(self):
        """Operations performed so far in this scope."""
        return frozenset(self._used)

    @property
    def uncertified(self):
        """Operations performed so far that the backend does not
        guarantee to round correctly in the requested direction.
        """
        return frozenset(op for op in self._used if op not in self._backend.certified)

    def close(self):
        self._active = False

    def _enter(self, op):
        if not self._active:
            raise RuntimeError('{} for {} used outside of its rounding scope'
                               .format(type(self).__name__, self._rm.name))
        if op not in self._backend.supported:
            raise UnsupportedOperationError('{} has no rounding-aware implementation of {}'
                                            .format(self._backend.name, op.name))
        self._used.add(op)

    # must be implemented in subclasses

    def _compute(self, op, args):
        raise ValueError('virtual method: unimplemented')

    def convert(self, x):
        """Round an arbitrary real `x` (int, Fraction, decimal string, ...)
        into the backend, in the direction of this scope.
        """
        raise ValueError('virtual method: unimplemented')

    def zero(self):
        raise ValueError('virtual method: unimplemented')

    # operations

    def compute(self, op, *args):
        """Perform `op` on `args`, which are treated as exact."""
        self._enter(op)
        coerce = self._backend.coerce
        return self._compute(op, [coerce(x) for x in args])

    def add(self, a, b):
        return self.compute(OP.add, a, b)

    def sub(self, a, b):
        return self.compute(OP.sub, a, b)

    def mul(self, a, b):
        return self.compute(OP.mul, a, b)

    def div(self, a, b):
        return self.compute(OP.div, a, b)

    def neg(self, a):
        return self.compute(OP.neg, a)

    def sqrt(self, a):
        return self.compute(OP.sqrt, a)

    def fma(self, a, b, c):
        return self.compute(OP.fma, a, b, c)


class RoundedNumeric(object):
    """Capability interface for a numeric backend with directed rounding.

    A backend fixes its precision when it is constructed. It reports which
    operations it can perform under a rounding direction (`supported`) and
    which of those it rounds correctly in that direction (`certified`).
    """

    name = 'abstract'
    precision = 0
    supported = frozenset()
    certified = frozenset()

    # must be implemented in subclasses

    def _make_ops(self, rm):
        raise ValueError('virtual method: unimplemented')

    def _rounding(self, rm):
        """Context manager that installs any ambient state `rm` needs."""
        raise ValueError('virtual method: unimplemented')

    def coerce(self, x):
        """Accept `x` as an exact operand: backend values of this precision
        and integers. Raises `PrecisionMismatchError` for values that belong
        to a backend of another precision.
        """
        raise ValueError('virtual method: unimplemented')

    def is_value(self, x):
        """Is `x` a value of this backend's type (of any precision)?"""
        raise ValueError('virtual method: unimplemented')

    # shared behavior

    @contextlib.contextmanager
    def scope(self, rm):
        """Open a rounding scope and yield its `RoundedOps`.
        Whatever ambient state the backend needs is restored on exit,
        whether or not the block raises.
        """
        rm = parse_rm(rm)
        ops = self._make_ops(rm)
        try:
            with self._rounding(rm):
                yield ops
        finally:
            ops.close()

    def is_certified(self, op):
        return op in self.certified

    def __repr__(self):
        return '{}(precision={})'.format(type(self).__name__, repr(self.precision))

    def __str__(self):
        return self.name


class RoundedArithmeticContext(object):
    """Evaluates callbacks under an explicitly selected rounding direction.

    The callback receives a `RoundedOps` object and must do all of its
    arithmetic through it:

        ctx = RoundedArithmeticContext(MPFRBackend(200))
        third = ctx.evaluate(RM.DOWN, lambda ops: ops.div(1, 3))
    """

    def __init__(self, backend):
        self._backend = backend

    @property
    def backend(self):
        return self._backend

    def trace(self, rm, thunk):
        """Run `thunk(ops)` under `rm` and return an `Evaluation` recording
        the result and the operations it performed.
        """
        with self._backend.scope(rm) as ops:
            value = thunk(ops)
            if self._backend.is_value(value):
                value = self._backend.coerce(value)
            evaluation = Evaluation(value, ops.rm, ops.used, ops.uncertified)

        if evaluation.uncertified:
            logger.debug('%s: %s not certified under %s',
                         self._backend.name, ', '.join(op.name for op in evaluation.uncertified), evaluation.rm.name)
        return evaluation

    def evaluate(self, rm, thunk):
        """Run `thunk(ops)` under `rm` and return its result."""
        return self.trace(rm, thunk).value

    def __repr__(self):
        return '{}({})'.format(type(self).__name__, repr(self._backend))
