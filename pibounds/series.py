"""Partial sums of series under directed rounding, and their tail bounds."""

import logging
from enum import IntEnum, unique

from .errors import InvalidRangeError
from .numeric.ops import RM, parse_rm, is_directed
from .arithmetic import evalctx


logger = logging.getLogger(__name__)


@unique
class Order(IntEnum):
    """Which end of the index range a partial sum starts from."""
    FORWARD = 0
    REVERSE = 1

forward_synonyms = {'forward', 'fwd', 'ascending', 'up'}
reverse_synonyms = {'reverse', 'rev', 'backward', 'descending', 'down'}

_order_names = {}
_order_names.update((k, Order.FORWARD) for k in forward_synonyms)
_order_names.update((k, Order.REVERSE) for k in reverse_synonyms)

def parse_order(order):
    if isinstance(order, Order):
        return order
    elif isinstance(order, int) and not isinstance(order, bool):
        try:
            return Order(order)
        except ValueError:
            raise ValueError('unsupported summation order {}'.format(repr(order)))
    try:
        return _order_names[str(order).lower()]
    except KeyError:
        raise ValueError('unsupported summation order {}'.format(repr(order)))


def check_terms(n):
    """Validate a number of terms, returning it as an int."""
    if isinstance(n, bool):
        raise InvalidRangeError('number of terms must be an integer, got {}'.format(repr(n)))
    try:
        as_int = int(n)
    except (TypeError, ValueError, OverflowError):
        raise InvalidRangeError('number of terms must be an integer, got {}'.format(repr(n)))
    if as_int != n:
        raise InvalidRangeError('number of terms must be an integer, got {}'.format(repr(n)))
    if as_int < 1:
        raise InvalidRangeError('number of terms must be at least 1, got {}'.format(repr(n)))
    return as_int


class SeriesSpec(object):
    """A convergent series of non-negative terms, with closed-form bounds
    on its remainder.

    `term(ops, n)` is the n-th term (n >= 1). `tail_low(ops, N)` and
    `tail_high(ops, N)` bound the sum of all terms after the N-th from below
    and above. All three do their arithmetic through `ops`, and must be
    non-decreasing in every rounded operation they perform, so that rounding
    each step down (or up) rounds the whole expression down (or up).

    The tail functions are trusted: that they really bound the remainder
    is the caller's mathematical obligation, and is not checked here.
    """

    def __init__(self, term, tail_low, tail_high, name='series'):
        self.term = term
        self.tail_low = tail_low
        self.tail_high = tail_high
        self.name = name

    def __repr__(self):
        return '{}({})'.format(type(self).__name__, repr(self.name))


def p_series(p):
    """The series sum 1/n**p for an integer p >= 2, with integral-test tail bounds
        1/((p-1)(N+1)**(p-1)) <= sum_{n>N} 1/n**p <= 1/((p-1)N**(p-1)).
    """
    if isinstance(p, bool) or not isinstance(p, int) or p < 2:
        raise ValueError('p-series needs an integer p >= 2, got {}'.format(repr(p)))

    def term(ops, n):
        return ops.div(1, n ** p)

    def tail_low(ops, N):
        return ops.div(1, (p - 1) * (N + 1) ** (p - 1))

    def tail_high(ops, N):
        return ops.div(1, (p - 1) * N ** (p - 1))

    return SeriesSpec(term, tail_low, tail_high, name='zeta({:d})'.format(p))

basel = p_series(2)


def sum_terms(ops, term, n, order=Order.REVERSE):
    """Sum term(ops, i) for i in 1..n with `ops`, in the given order.
    Under RTN the result is at most the exact sum, under RTP at least.
    """
    n = check_terms(n)
    order = parse_order(order)

    if order == Order.FORWARD:
        indices = range(1, n + 1)
    else:
        # smallest terms first, while the accumulator is still small
        indices = range(n, 0, -1)

    acc = ops.zero()
    for i in indices:
        acc = ops.add(acc, term(ops, i))
    return acc

def partial_sum(term, n, order, rm, backend):
    """Compute the sum of term(ops, i) for i in 1..n, rounded toward `rm`."""
    n = check_terms(n)
    order = parse_order(order)
    ctx = evalctx.RoundedArithmeticContext(backend)
    return ctx.evaluate(rm, lambda ops: sum_terms(ops, term, n, order))


def tail_term(ops, spec, n):
    """The remainder bound matching the rounding direction of `ops`."""
    if not is_directed(ops.rm):
        raise ValueError('tail bounds need a directed rounding mode, got {}'.format(ops.rm.name))
    elif ops.rm == RM.RTN:
        return spec.tail_low(ops, n)
    else:
        return spec.tail_high(ops, n)

def tail_bound(spec, n, direction, backend):
    """spec.tail_low(n) rounded down, or spec.tail_high(n) rounded up."""
    n = check_terms(n)
    direction = parse_rm(direction)
    ctx = evalctx.RoundedArithmeticContext(backend)
    return ctx.evaluate(direction, lambda ops: tail_term(ops, spec, n))
