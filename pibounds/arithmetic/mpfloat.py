"""Arbitrary-precision backend using gmpy2 (MPFR).

MPFR rounds every operation correctly in any direction, so everything this
backend supports is certified. The same backend emulates IEEE 754 formats
by restricting the exponent range and rounding subnormals.
"""

import gmpy2 as gmp

from ..errors import PrecisionMismatchError
from ..numeric import gmpmath
from ..numeric.ops import OP
from . import evalctx


class MPFROps(evalctx.RoundedOps):
    """Rounded operations inside a gmpy2 context.
    The context does the rounding; this object checks operands.
    """

    def _compute(self, op, args):
        return gmpmath.compute(op, *args)

    def add(self, a, b):
        self._enter(OP.add)
        coerce = self._backend.coerce
        return gmp.add(coerce(a), coerce(b))

    def div(self, a, b):
        self._enter(OP.div)
        coerce = self._backend.coerce
        return gmp.div(coerce(a), coerce(b))

    def convert(self, x):
        if isinstance(x, str):
            return gmp.mpfr(x)
        elif self._backend.is_value(x):
            # rounding a wider value into this precision is deliberate here
            return gmp.mpfr(x)
        else:
            return gmp.mpfr(gmp.mpq(x))

    def zero(self):
        return gmp.mpfr(0)


class MPFRBackend(evalctx.RoundedNumeric):
    """Directed rounding with MPFR at a fixed precision.

    `MPFRBackend(200)` works at 200 bits with an effectively unbounded
    exponent range; `MPFRBackend.ieee('binary64')` reproduces IEEE 754
    double precision exactly, including overflow and subnormals.
    """

    supported = frozenset(gmpmath.gmp_ops)
    certified = frozenset(gmpmath.gmp_ops)

    def __init__(self, precision=53, emin=None, emax=None, subnormalize=False, name=None):
        precision = int(precision)
        if precision < 2:
            raise ValueError('MPFR precision must be at least 2 bits, got {}'.format(repr(precision)))
        self.precision = precision
        self._emin = emin
        self._emax = emax
        self._subnormalize = subnormalize
        if name is None:
            self.name = 'mpfr{:d}'.format(precision)
        else:
            self.name = name

    @classmethod
    def ieee(cls, fmt='binary64'):
        """Build a backend emulating the IEEE 754 format named `fmt`
        ('binary32', 'double', ...), or given as an (es, nbits) pair.
        """
        if isinstance(fmt, str):
            try:
                es, nbits = evalctx.IEEE_esnbits[fmt.lower()]
            except KeyError:
                raise ValueError('unsupported IEEE 754 format {}'.format(repr(fmt)))
            name = fmt.lower()
        else:
            es, nbits = fmt
            name = 'float({:d},{:d})'.format(es, nbits)
        p, emin, emax = gmpmath.ieee_params(es, nbits)
        return cls(precision=p, emin=emin, emax=emax, subnormalize=True, name=name)

    @property
    def emin(self):
        return self._emin

    @property
    def emax(self):
        return self._emax

    def _make_ops(self, rm):
        return MPFROps(self, rm)

    def _rounding(self, rm):
        return gmpmath.rounding_context(self.precision, rm, emin=self._emin, emax=self._emax,
                                        subnormalize=self._subnormalize)

    def is_value(self, x):
        return isinstance(x, gmpmath.mpfr_type)

    def coerce(self, x):
        if isinstance(x, gmpmath.mpfr_type):
            if x.precision != self.precision:
                raise PrecisionMismatchError('{} cannot take a {:d}-bit value {}'
                                             .format(self.name, x.precision, str(x)))
            return x
        elif isinstance(x, float):
            if self.precision != 53:
                raise PrecisionMismatchError('{} cannot take a 53-bit float {}'
                                             .format(self.name, repr(x)))
            return gmpmath.exact_mpfr(x)
        elif isinstance(x, (int, gmpmath.mpz_type)) and not isinstance(x, bool):
            if int(x).bit_length() <= self.precision:
                # fits, so the active context converts it exactly
                return gmp.mpfr(x)
            else:
                return gmpmath.exact_mpfr(x)
        else:
            raise TypeError('{} cannot use {} as an exact operand'.format(self.name, repr(x)))

    def __repr__(self):
        if self._subnormalize:
            return '{}.ieee({})'.format(type(self).__name__, repr(self.name))
        else:
            return super().__repr__()
