"""Guaranteed enclosures of real numbers, and their propagation through
non-decreasing functions.
"""

import logging
import math
import warnings
from fractions import Fraction

from ..errors import UnsoundTransformWarning
from ..numeric.ops import RM, parse_rm
from . import evalctx


logger = logging.getLogger(__name__)


def to_fraction(x):
    """Exact rational value of a float, MPFR value, or integer."""
    if isinstance(x, (int, Fraction)):
        return Fraction(x)
    n, d = x.as_integer_ratio()
    return Fraction(int(n), int(d))


def _is_finite(x):
    if isinstance(x, (int, Fraction)):
        return True
    return not (x != x or abs(x) == math.inf)


class Interval(object):
    """An enclosure [lo, hi] of an unknown real number.

    The endpoints are values of one backend. An interval never changes
    after construction; refining it produces a new interval. `certified`
    is False when some operation that produced an endpoint was not
    guaranteed to round in the right direction.
    """

    def __init__(self, lo, hi, backend=None, certified=True):
        if backend is not None:
            for x in (lo, hi):
                if not backend.is_value(x):
                    raise TypeError('{} is not a {} value'.format(repr(x), backend.name))
            lo = backend.coerce(lo)
            hi = backend.coerce(hi)

        if lo != lo or hi != hi:
            raise ValueError('invalid interval: lo={}, hi={}'.format(lo, hi))
        if lo > hi:
            raise ValueError('invalid interval: lo={}, hi={}'.format(lo, hi))

        self._lo = lo
        self._hi = hi
        self._backend = backend
        self._certified = bool(certified)

    # the internal state is not directly visible: expose it with properties

    @property
    def lo(self):
        """The lower bound."""
        return self._lo

    @property
    def hi(self):
        """The upper bound."""
        return self._hi

    @property
    def backend(self):
        """The backend the endpoints belong to, or None for plain numbers."""
        return self._backend

    @property
    def certified(self):
        """Is the enclosure guaranteed?"""
        return self._certified

    def __iter__(self):
        yield self._lo
        yield self._hi

    def __eq__(self, other):
        if not isinstance(other, Interval):
            return NotImplemented
        return (self._lo == other._lo and self._hi == other._hi
                and self._certified == other._certified)

    def __hash__(self):
        return hash((self._lo, self._hi, self._certified))

    def __repr__(self):
        return '{}(lo={}, hi={}, backend={}, certified={})'.format(
            type(self).__name__, repr(self._lo), repr(self._hi), repr(self._backend), repr(self._certified)
        )

    def __str__(self):
        s = '[{}, {}]'.format(str(self._lo), str(self._hi))
        if self._certified:
            return s
        else:
            return s + ' (uncertified)'

    def is_point(self) -> bool:
        return self._lo == self._hi

    def contains(self, x) -> bool:
        """Does the interval contain `x`?"""
        return self._lo <= x and x <= self._hi

    def encloses(self, other) -> bool:
        """Does this interval contain every point of `other`?"""
        return self._lo <= other.lo and other.hi <= self._hi

    @property
    def width(self):
        """hi - lo, rounded up in the interval's backend."""
        if self._backend is None:
            return self._hi - self._lo
        with self._backend.scope(RM.RTP) as ops:
            return ops.sub(self._hi, self._lo)

    @property
    def midpoint(self):
        """(lo + hi) / 2 with ordinary rounding; not itself a bound."""
        if self._backend is None:
            return (self._lo + self._hi) / 2
        with self._backend.scope(RM.RNE) as ops:
            return ops.div(ops.add(self._lo, self._hi), 2)

    def agreeing_digits(self, limit=100):
        """Count the decimal digits after the point on which both endpoints agree.
        Every one of them is then a correct digit of the enclosed number
        (truncated, not rounded).
        """
        if not (_is_finite(self._lo) and _is_finite(self._hi)):
            return 0
        lo = to_fraction(self._lo)
        hi = to_fraction(self._hi)
        digits = 0
        scale = 1
        while digits < limit:
            scale *= 10
            if math.floor(lo * scale) != math.floor(hi * scale):
                break
            digits += 1
        return digits


class MonotoneTransform(object):
    """A non-decreasing function, evaluated with rounded operations.

    `fn(ops, x)` must perform its arithmetic through `ops`. When each step
    is non-decreasing in its inputs and rounded in one direction, so is the
    whole composition.
    """

    def __init__(self, fn, name=None):
        self._fn = fn
        if name is None:
            self.name = getattr(fn, '__name__', 'transform')
        else:
            self.name = name

    def __call__(self, ops, x):
        return self._fn(ops, x)

    def __repr__(self):
        return '{}({})'.format(type(self).__name__, self.name)


class MonotoneEnclosure(object):
    """Propagates an enclosure through a non-decreasing function.

    If lo <= x <= hi and f is non-decreasing, then f(lo) rounded down
    and f(hi) rounded up enclose f(x).
    """

    def __init__(self, backend):
        self._ctx = evalctx.RoundedArithmeticContext(backend)

    @property
    def backend(self):
        return self._ctx.backend

    def apply(self, interval, fn, mode_lo=RM.RTN, mode_hi=RM.RTP, correctly_rounded=None, stacklevel=2):
        """Return the enclosure [fn(lo) rounded down, fn(hi) rounded up].

        `correctly_rounded` overrides what the backend reports about the
        operations `fn` performs. When the result cannot be certified an
        `UnsoundTransformWarning` is issued and the interval is returned
        with `certified=False`. `stacklevel` is passed on to `warnings.warn`.
        """
        mode_lo = parse_rm(mode_lo)
        mode_hi = parse_rm(mode_hi)
        if mode_lo != RM.RTN:
            raise ValueError('the lower endpoint must be rounded down, got {}'.format(mode_lo.name))
        if mode_hi != RM.RTP:
            raise ValueError('the upper endpoint must be rounded up, got {}'.format(mode_hi.name))

        lo = self._ctx.trace(mode_lo, lambda ops: fn(ops, interval.lo))
        hi = self._ctx.trace(mode_hi, lambda ops: fn(ops, interval.hi))

        uncertified = lo.uncertified | hi.uncertified
        if correctly_rounded is None:
            certified = interval.certified and not uncertified
        else:
            certified = interval.certified and bool(correctly_rounded)

        if not certified:
            if not interval.certified:
                reason = 'input interval is not certified'
            elif uncertified:
                reason = '{} cannot certify {}'.format(self.backend.name, ', '.join(sorted(op.name for op in uncertified)))
            else:
                reason = 'caller marked {} as not correctly rounded'.format(self.backend.name)
            logger.warning('degraded enclosure of %s: %s', _fn_name(fn), reason)
            warnings.warn('enclosure of {} is not guaranteed: {}'.format(_fn_name(fn), reason),
                          UnsoundTransformWarning, stacklevel=stacklevel)

        return Interval(lo.value, hi.value, backend=self.backend, certified=certified)


def _fn_name(fn):
    return getattr(fn, 'name', None) or getattr(fn, '__name__', repr(fn))
