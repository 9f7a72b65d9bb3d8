"""Common arithmetic operations (+-*/ sqrt log exp etc.)
implemented with GMP/MPFR as a backend, under an explicit rounding direction.
"""


import gmpy2 as gmp

from .ops import OP, RM


_gmp_rm = {
    RM.RNE: gmp.RoundToNearest,
    RM.RTP: gmp.RoundUp,
    RM.RTN: gmp.RoundDown,
}

mpfr_type = type(gmp.mpfr(0))
mpz_type = type(gmp.mpz(0))


def rounding_context(prec, rm, emin=None, emax=None, subnormalize=False):
    """Build a gmpy2 context that rounds every operation to `prec` bits
    in the direction `rm`.
    By default the exponent range is as wide as MPFR allows; IEEE 754
    formats pass their own `emin` and `emax` (see `ieee_params()`).
    """
    if emin is None:
        emin = gmp.get_emin_min()
    if emax is None:
        emax = gmp.get_emax_max()

    return gmp.context(
        precision=prec,
        emin=emin,
        emax=emax,
        subnormalize=subnormalize,
        # overflow and underflow still round in the right direction
        trap_underflow=False,
        trap_overflow=False,
        trap_inexact=False,
        # but a nan can never be a bound
        trap_invalid=True,
        trap_erange=True,
        trap_divzero=True,
        round=_gmp_rm[rm],
    )


def ieee_params(es, nbits):
    """Compute the MPFR precision and exponent range that emulate
    an IEEE 754 format with `es` exponent bits and `nbits` total bits.
    MPFR significands live in [0.5, 1), so its exponents are one larger
    than IEEE's, and the smallest subnormal sets the minimum.
    """
    p = nbits - es
    emax = (1 << (es - 1)) - 1
    emin = 1 - emax
    return p, emin - p + 2, emax + 1


def exact_mpfr(x):
    """Convert an integer or float to an MPFR value with no rounding at all.
    The precision of the result is whatever it takes to hold `x`.
    """
    if isinstance(x, float):
        prec = 53
    else:
        prec = max(2, int(x).bit_length())

    with gmp.context(
            precision=prec,
            emin=gmp.get_emin_min(),
            emax=gmp.get_emax_max(),
            trap_underflow=True,
            trap_overflow=True,
            trap_inexact=True,
            trap_invalid=True,
            trap_erange=True,
            trap_divzero=True,
    ):
        return gmp.mpfr(x)


gmp_ops = {
    OP.add: gmp.add,
    OP.sub: gmp.sub,
    OP.mul: gmp.mul,
    OP.div: gmp.div,
    OP.neg: lambda x: -x,
    OP.sqrt: gmp.sqrt,
    OP.fma: gmp.fma,
    OP.fabs: lambda x: abs(x),
    OP.cbrt: gmp.cbrt,
    OP.exp: gmp.exp,
    OP.exp2: gmp.exp2,
    OP.log: gmp.log,
    OP.log2: gmp.log2,
    OP.atan: gmp.atan,
    OP.hypot: gmp.hypot,
}


def compute(opcode, *args):
    """Compute op(*args) in the current gmpy2 context.
    Arguments are MPFR values and are treated as exact; MPFR rounds the
    single result correctly in the direction of the context.
    """
    try:
        op = gmp_ops[opcode]
    except KeyError:
        raise ValueError('unknown operation {}'.format(repr(opcode)))
    return op(*args)


constant_exprs = {
    'PI' : gmp.const_pi,
    'LN2' : gmp.const_log2,
    'E' : lambda : gmp.exp(1),
    'SQRT2': lambda: gmp.sqrt(2),
}

def compute_constant(name, prec=53, rm=RM.RNE):
    """Compute a named mathematical constant to `prec` bits,
    correctly rounded in the direction `rm`.
    """
    with rounding_context(prec, rm):
        try:
            return constant_exprs[name]()
        except KeyError as e:
            raise ValueError('unknown constant {}'.format(repr(e.args[0])))


def const_pi(prec=256):
    """Return (lo, hi), MPFR values with `prec` bits such that lo <= pi <= hi."""
    return compute_constant('PI', prec=prec, rm=RM.RTN), compute_constant('PI', prec=prec, rm=RM.RTP)
