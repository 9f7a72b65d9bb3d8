"""Fast backend using builtin Python floats (IEEE 754 binary64).

Floats always round to nearest, so directed results are recovered from
error-free transformations (see `pibounds.numeric.floatmath`). Nothing here
touches the processor's rounding mode: the direction travels with the
`FloatOps` object, so concurrent scopes cannot interfere.
"""

import contextlib
from fractions import Fraction

from ..errors import PrecisionMismatchError
from ..numeric import floatmath, gmpmath
from ..numeric.ops import OP
from . import evalctx


_MAX_EXACT_INT = 1 << 53


class FloatOps(evalctx.RoundedOps):
    """Rounded operations on Python floats.
    Integer operands too wide for a float arrive as Fractions; any
    operation involving one is computed exactly and rounded once.
    """

    def _compute(self, op, args):
        rm = self._rm
        if not all(type(x) is float for x in args):
            return self._compute_exact(op, args)
        if op == OP.add:
            return floatmath.directed_add(args[0], args[1], rm)
        elif op == OP.sub:
            return floatmath.directed_sub(args[0], args[1], rm)
        elif op == OP.mul:
            return floatmath.directed_mul(args[0], args[1], rm)
        elif op == OP.div:
            return floatmath.directed_div(args[0], args[1], rm)
        elif op == OP.neg:
            return -args[0]
        elif op == OP.fabs:
            return abs(args[0])
        elif op == OP.sqrt:
            if self._backend.verify_sqrt:
                return floatmath.directed_sqrt(args[0], rm)
            else:
                return floatmath.outward_sqrt(args[0], rm)
        elif op == OP.fma:
            return floatmath.directed_fma(args[0], args[1], args[2], rm)
        else:
            raise ValueError('unknown operation {}'.format(repr(op)))

    def _compute_exact(self, op, args):
        args = [Fraction(x) for x in args]
        if op == OP.add:
            result = args[0] + args[1]
        elif op == OP.sub:
            result = args[0] - args[1]
        elif op == OP.mul:
            result = args[0] * args[1]
        elif op == OP.div:
            if args[1] == 0:
                raise ZeroDivisionError('division of {} by zero'.format(args[0]))
            result = args[0] / args[1]
        elif op == OP.neg:
            result = -args[0]
        elif op == OP.fabs:
            result = abs(args[0])
        elif op == OP.fma:
            result = args[0] * args[1] + args[2]
        else:
            raise PrecisionMismatchError('{} cannot compute {} of an integer wider than a float'
                                         .format(self._backend.name, op.name))
        return floatmath.round_fraction(result, self._rm)

    def add(self, a, b):
        self._enter(OP.add)
        coerce = self._backend.coerce
        a = coerce(a)
        b = coerce(b)
        if type(a) is float and type(b) is float:
            return floatmath.directed_add(a, b, self._rm)
        return self._compute_exact(OP.add, [a, b])

    def div(self, a, b):
        self._enter(OP.div)
        coerce = self._backend.coerce
        a = coerce(a)
        b = coerce(b)
        if type(a) is float and type(b) is float:
            return floatmath.directed_div(a, b, self._rm)
        return self._compute_exact(OP.div, [a, b])

    def convert(self, x):
        if isinstance(x, float):
            return x
        elif isinstance(x, gmpmath.mpfr_type):
            n, d = x.as_integer_ratio()
            return floatmath.round_fraction(Fraction(int(n), int(d)), self._rm)
        else:
            return floatmath.round_fraction(Fraction(x), self._rm)

    def zero(self):
        return 0.0


class FloatBackend(evalctx.RoundedNumeric):
    """Directed rounding on native binary64 floats.

    With `verify_sqrt=True` (the default) every square root is checked
    against its exact residual, and the backend certifies it. With
    `verify_sqrt=False` the platform `math.sqrt` is trusted and widened by
    one ulp; that is only as sound as the C library, so square roots are
    then reported as uncertified.
    """

    name = 'native'
    precision = 53
    supported = frozenset([OP.add, OP.sub, OP.mul, OP.div, OP.neg, OP.fabs, OP.sqrt, OP.fma])

    def __init__(self, verify_sqrt=True):
        self.verify_sqrt = verify_sqrt
        if verify_sqrt:
            self.certified = self.supported
        else:
            self.certified = self.supported - {OP.sqrt}

    def _make_ops(self, rm):
        return FloatOps(self, rm)

    def _rounding(self, rm):
        return contextlib.nullcontext()

    def is_value(self, x):
        return isinstance(x, float)

    def coerce(self, x):
        if isinstance(x, float):
            return x
        elif isinstance(x, (int, gmpmath.mpz_type)) and not isinstance(x, bool):
            x = int(x)
            if -_MAX_EXACT_INT <= x <= _MAX_EXACT_INT or _is_exact_float(x):
                return float(x)
            else:
                return Fraction(x)
        elif isinstance(x, gmpmath.mpfr_type):
            if x.precision != self.precision:
                raise PrecisionMismatchError('{} cannot take a {:d}-bit value {}'
                                             .format(self.name, x.precision, str(x)))
            f = float(x)
            if f != x:
                raise PrecisionMismatchError('{} cannot represent {} exactly'.format(self.name, str(x)))
            return f
        else:
            raise TypeError('{} cannot use {} as an exact operand'.format(self.name, repr(x)))

    def __repr__(self):
        return '{}(verify_sqrt={})'.format(type(self).__name__, repr(self.verify_sqrt))


def _is_exact_float(x):
    try:
        return int(float(x)) == x
    except OverflowError:
        return False
