"""Rigorous enclosures of constants defined by monotone transforms of series.

For a series with non-negative terms and known remainder bounds,

    S_N(rounded down) + tail_low(N)(rounded down)  <=  sum  <=
    S_N(rounded up)   + tail_high(N)(rounded up),

and a non-decreasing transform f then gives f(lower) rounded down <=
f(sum) <= f(upper) rounded up. For the Basel series, sum = pi**2/6 and
f(x) = sqrt(6x).
"""

import logging

from .series import Order, basel, p_series, sum_terms, tail_term, check_terms, parse_order
from .numeric.ops import RM
from .arithmetic import evalctx
from .arithmetic.interval import Interval, MonotoneTransform, MonotoneEnclosure
from .arithmetic.mpfloat import MPFRBackend


logger = logging.getLogger(__name__)


def _basel_to_pi(ops, x):
    return ops.sqrt(ops.mul(6, x))

def _zeta4_to_pi(ops, x):
    return ops.sqrt(ops.sqrt(ops.mul(90, x)))

basel_pi = MonotoneTransform(_basel_to_pi, name='sqrt(6x)')
zeta4_pi = MonotoneTransform(_zeta4_to_pi, name='sqrt(sqrt(90x))')

pi_series = {
    'basel': (basel, basel_pi),
    'zeta2': (basel, basel_pi),
    'zeta4': (p_series(4), zeta4_pi),
}


def default_backend():
    return MPFRBackend.ieee('binary64')


def _raw_bound(ctx, spec, n, order, rm):
    def bound(ops):
        partial = sum_terms(ops, spec.term, n, order)
        return ops.add(partial, tail_term(ops, spec, n))
    return ctx.trace(rm, bound)


def bound_constant(spec, transform, n, order=Order.REVERSE, backend=None, correctly_rounded=None):
    """Enclose transform(sum of `spec`) using the first `n` terms.

    The lower end sums the terms and adds the lower tail bound in a single
    round-down scope; the upper end does the same with the upper tail bound
    in a round-up scope. The pair is then pushed through `transform`, which
    must be non-decreasing.

    Returns a new `Interval` in `backend` (binary64 by default).
    """
    return _bound(spec, transform, n, order, backend, correctly_rounded)


def _bound(spec, transform, n, order, backend, correctly_rounded):
    # warnings are reported at the caller of bound_constant or bound_pi
    n = check_terms(n)
    order = parse_order(order)
    if backend is None:
        backend = default_backend()

    logger.debug('bounding %s of %s with n=%d, order=%s, backend=%s',
                 getattr(transform, 'name', transform), spec.name, n, order.name, backend.name)

    ctx = evalctx.RoundedArithmeticContext(backend)
    lower = _raw_bound(ctx, spec, n, order, RM.RTN)
    upper = _raw_bound(ctx, spec, n, order, RM.RTP)
    logger.debug('raw enclosure of %s: [%s, %s]', spec.name, lower.value, upper.value)

    certified = not (lower.uncertified or upper.uncertified)
    raw = Interval(lower.value, upper.value, backend=backend, certified=certified)

    enclosure = MonotoneEnclosure(backend)
    result = enclosure.apply(raw, transform, RM.RTN, RM.RTP, correctly_rounded=correctly_rounded, stacklevel=4)
    if logger.isEnabledFor(logging.INFO):
        logger.info('%s over %d terms (%s, %s): %s, width %s',
                    getattr(transform, 'name', 'transform'), n, order.name.lower(), backend.name, result, result.width)
    return result


def bound_pi(n, order=Order.REVERSE, backend=None, series='basel', correctly_rounded=None):
    """Enclose pi from the first `n` terms of a zeta series.

    With the default Basel series, sum 1/k**2 = pi**2/6, so
    pi = sqrt(6 * sum). `series='zeta4'` uses sum 1/k**4 = pi**4/90 instead.
    """
    try:
        spec, transform = pi_series[str(series).lower()]
    except KeyError:
        raise ValueError('unknown series for pi {}'.format(repr(series)))
    return _bound(spec, transform, n, order, backend, correctly_rounded)


def estimate(spec, transform, n, order=Order.REVERSE, backend=None):
    """Evaluate the same pipeline with ordinary rounding to nearest,
    using the midpoint of the tail bounds. The result is an approximation
    with no guarantee, useful only for comparison.
    """
    n = check_terms(n)
    order = parse_order(order)
    if backend is None:
        backend = default_backend()

    def approx(ops):
        partial = sum_terms(ops, spec.term, n, order)
        tail = ops.div(ops.add(spec.tail_low(ops, n), spec.tail_high(ops, n)), 2)
        return transform(ops, ops.add(partial, tail))

    ctx = evalctx.RoundedArithmeticContext(backend)
    return ctx.evaluate(RM.RNE, approx)


def estimate_pi(n, order=Order.REVERSE, backend=None, series='basel'):
    try:
        spec, transform = pi_series[str(series).lower()]
    except KeyError:
        raise ValueError('unknown series for pi {}'.format(repr(series)))
    return estimate(spec, transform, n, order=order, backend=backend)
