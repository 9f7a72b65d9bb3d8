"""Command line driver: print rigorous bounds on pi."""

import argparse
import logging
import sys
import warnings

from . import bounds
from .errors import BoundsError, UnsoundTransformWarning
from .series import parse_order, Order
from .arithmetic.backends import parse_backend


def describe(label, result):
    print('{}: [{}, {}]'.format(label, str(result.lo), str(result.hi)))
    print('    width:  {}'.format(str(result.width)))
    print('    digits: {:d}'.format(result.agreeing_digits()))
    if not result.certified:
        print('    WARNING: not certified')


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog='pibounds',
        description='rigorous enclosures of pi from zeta series under directed rounding')
    parser.add_argument('-n', '--terms', type=int, default=1000000,
                        help='number of series terms to sum')
    parser.add_argument('--order', type=str, default='reverse',
                        help='summation order: forward, reverse, or both')
    parser.add_argument('--backend', type=str, default='binary64',
                        help='numeric backend: native, native-unverified, binary32, binary64, mpfr:<bits>')
    parser.add_argument('--series', type=str, default='basel', choices=sorted(bounds.pi_series),
                        help='series to bound pi with')
    parser.add_argument('--estimate', action='store_true',
                        help='also print the round-to-nearest estimate (not a bound)')
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help='log progress; repeat for debug output')
    args = parser.parse_args(argv)

    if args.verbose >= 2:
        level = logging.DEBUG
    elif args.verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format='%(levelname)s %(name)s: %(message)s')

    try:
        backend = parse_backend(args.backend)
        if args.order.lower() == 'both':
            orders = [Order.FORWARD, Order.REVERSE]
        else:
            orders = [parse_order(args.order)]
    except ValueError as e:
        parser.error(str(e))

    print('pi with {:d} terms of {}, backend {}'.format(args.terms, args.series, backend.name))
    try:
        with warnings.catch_warnings():
            # already reported through logging and in the output
            warnings.simplefilter('ignore', UnsoundTransformWarning)
            for order in orders:
                result = bounds.bound_pi(args.terms, order=order, backend=backend, series=args.series)
                describe(order.name.lower(), result)
                if args.estimate:
                    approx = bounds.estimate_pi(args.terms, order=order, backend=backend, series=args.series)
                    print('    nearest estimate: {}'.format(str(approx)))
    except BoundsError as e:
        print('error: {}'.format(e), file=sys.stderr)
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
