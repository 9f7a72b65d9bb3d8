"""Directed rounding for native Python floats.

Python floats always round to nearest. To round in a given direction we
compute the nearest result, recover the exact rounding error with an
error-free transformation (Knuth's TwoSum, Dekker's TwoProduct), and step
one ulp when the nearest result landed on the wrong side of the exact one.
Where the transformations could overflow or underflow, the exact result is
computed with Fractions instead.
"""


import math
from fractions import Fraction

from .ops import RM


# 2**27 + 1, for Veltkamp splitting of binary64
_SPLITTER = 134217729.0

# TwoProduct is exact when neither operand is too large to split
# and the product does not lose bits to underflow
_SPLIT_MAX = 2.0 ** 995
_PRODUCT_MIN = 2.0 ** -969
# and none of the partial products in TwoProduct can overflow
_PRODUCT_MAX = 2.0 ** 1021

_FLOAT_MAX = 1.7976931348623157e308


def next_up(x):
    return math.nextafter(x, math.inf)

def next_down(x):
    return math.nextafter(x, -math.inf)


def split(a):
    """Split `a` into high and low halves of 26 bits each, with a == hi + lo."""
    c = _SPLITTER * a
    hi = c - (c - a)
    lo = a - hi
    return hi, lo

def two_sum(a, b):
    """Return (s, e) where s = fl(a + b) and a + b == s + e exactly."""
    s = a + b
    bb = s - a
    e = (a - (s - bb)) + (b - bb)
    return s, e

def two_product(a, b):
    """Return (p, e) where p = fl(a * b) and a * b == p + e exactly.
    Only valid when `product_is_safe(a, b, p)`.
    """
    p = a * b
    a_hi, a_lo = split(a)
    b_hi, b_lo = split(b)
    err1 = p - a_hi * b_hi
    err2 = err1 - a_lo * b_hi
    err3 = err2 - a_hi * b_lo
    e = a_lo * b_lo - err3
    return p, e

def product_is_safe(a, b, p):
    return (abs(a) < _SPLIT_MAX
            and abs(b) < _SPLIT_MAX
            and _PRODUCT_MIN <= abs(p) < _PRODUCT_MAX)


def adjust(x, sign, rm):
    """Move the nearest result `x` to the directed result, given the sign
    of (exact - x): positive if the exact value is above `x`.
    """
    if rm == RM.RTN and sign < 0:
        return next_down(x)
    elif rm == RM.RTP and sign > 0:
        return next_up(x)
    else:
        return x


def round_fraction(q, rm):
    """Round an exact rational `q` to a float in the direction `rm`."""
    try:
        # int / int is correctly rounded to nearest
        f = q.numerator / q.denominator
    except OverflowError:
        if q > 0:
            return _FLOAT_MAX if rm == RM.RTN else math.inf
        else:
            return -math.inf if rm != RM.RTP else -_FLOAT_MAX

    exact = Fraction(f)
    if exact == q:
        return f
    elif exact < q:
        return adjust(f, 1, rm)
    else:
        return adjust(f, -1, rm)

def directed_add(a, b, rm):
    s = a + b
    if rm == RM.RNE:
        return s
    if not math.isfinite(s):
        if math.isfinite(a) and math.isfinite(b):
            return round_fraction(Fraction(a) + Fraction(b), rm)
        else:
            return s
    s, e = two_sum(a, b)
    return adjust(s, e, rm)

def directed_sub(a, b, rm):
    return directed_add(a, -b, rm)

def directed_mul(a, b, rm):
    p = a * b
    if rm == RM.RNE:
        return p
    if not (math.isfinite(a) and math.isfinite(b)) or a == 0.0 or b == 0.0:
        return p
    if product_is_safe(a, b, p):
        p, e = two_product(a, b)
        return adjust(p, e, rm)
    else:
        return round_fraction(Fraction(a) * Fraction(b), rm)

def directed_div(a, b, rm):
    if b == 0.0:
        raise ZeroDivisionError('division of {} by zero'.format(repr(a)))
    q = a / b
    if rm == RM.RNE:
        return q
    if not (math.isfinite(a) and math.isfinite(b)) or a == 0.0:
        return q
    if _PRODUCT_MIN <= abs(q) and math.isfinite(q) and product_is_safe(q, b, q * b):
        # a - q*b is the exact residual; a - p is exact since p is within
        # a factor of two of a
        p, e = two_product(q, b)
        d = a - p
        if d > e:
            residual = 1
        elif d < e:
            residual = -1
        else:
            residual = 0
        # exact - q = residual / b
        if b < 0:
            residual = -residual
        return adjust(q, residual, rm)
    else:
        return round_fraction(Fraction(a) / Fraction(b), rm)

def _square_residual(s, x):
    """Sign of the exact value x - s*s."""
    if product_is_safe(s, s, s * s):
        p, e = two_product(s, s)
        # x - p is exact when p is within a factor of two of x
        if 0.5 * x <= p <= 2.0 * x:
            d = x - p
            return (d > e) - (d < e)
    square = Fraction(s) ** 2
    exact = Fraction(x)
    return (square < exact) - (square > exact)

def directed_sqrt(x, rm):
    """Square root of `x` rounded in the direction `rm`.
    The result of `math.sqrt` is checked against the exact residual x - s*s
    and stepped until it lies on the requested side, so the bound does not
    depend on the platform square root being correctly rounded.
    """
    if x < 0.0:
        raise ValueError('square root of negative value {}'.format(repr(x)))
    s = math.sqrt(x)
    if rm == RM.RNE or x == 0.0 or not math.isfinite(x):
        return s
    residual = _square_residual(s, x)
    if rm == RM.RTN:
        while residual < 0:
            s = next_down(s)
            residual = _square_residual(s, x)
    else:
        while residual > 0:
            s = next_up(s)
            residual = _square_residual(s, x)
    return s

def outward_sqrt(x, rm):
    """Square root of `x` stepped one ulp in the direction `rm` from the
    platform's `math.sqrt`, without checking the residual.
    Sound only if `math.sqrt` is faithfully rounded.
    """
    if x < 0.0:
        raise ValueError('square root of negative value {}'.format(repr(x)))
    s = math.sqrt(x)
    if rm == RM.RTN and s > 0.0:
        return next_down(s)
    elif rm == RM.RTP and math.isfinite(s):
        return next_up(s)
    else:
        return s

def directed_fma(a, b, c, rm):
    return round_fraction(Fraction(a) * Fraction(b) + Fraction(c), rm)
