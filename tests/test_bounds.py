"""
Tests for rigorous enclosures of pi
"""

import math
import warnings
from concurrent.futures import ThreadPoolExecutor

import pytest

from pibounds.errors import InvalidRangeError, UnsoundTransformWarning
from pibounds.numeric.ops import RM
from pibounds.arithmetic.mpfloat import MPFRBackend
from pibounds.arithmetic.native import FloatBackend
from pibounds.arithmetic.interval import Interval, to_fraction
from pibounds.series import Order, basel
from pibounds import bounds


def encloses_pi(result, pi_ref):
    pi_lo, pi_hi = pi_ref
    return result.lo <= pi_lo and pi_hi <= result.hi


backends = [
    MPFRBackend.ieee('binary64'),
    MPFRBackend.ieee('binary32'),
    MPFRBackend(200),
    FloatBackend(),
]


@pytest.fixture(scope='module')
def million():
    """The two orders at N = 10**6 in binary64, computed once."""
    backend = MPFRBackend.ieee('binary64')
    return {order: bounds.bound_pi(10 ** 6, order=order, backend=backend)
            for order in (Order.FORWARD, Order.REVERSE)}


class TestContainment:

    @pytest.mark.parametrize('backend', backends, ids=str)
    @pytest.mark.parametrize('order', [Order.FORWARD, Order.REVERSE])
    @pytest.mark.parametrize('n', [1, 2, 3, 10, 99, 1000])
    def test_encloses_pi(self, pi_ref, backend, order, n):
        result = bounds.bound_pi(n, order=order, backend=backend)
        assert encloses_pi(result, pi_ref)
        assert result.certified
        assert result.backend is backend

    def test_one_term(self, binary64):
        # 1 + 1/2 <= zeta(2) <= 1 + 1, so the bounds are near sqrt(9) and sqrt(12)
        result = bounds.bound_pi(1, backend=binary64)
        assert result.lo == 3
        assert 3.4641 < result.hi < 3.4642
        assert bounds.bound_pi(1, order=Order.FORWARD, backend=binary64) == result

    def test_default_backend(self, pi_ref):
        result = bounds.bound_pi(100)
        assert result.backend.name == 'binary64'
        assert encloses_pi(result, pi_ref)

    def test_zeta4(self, pi_ref, binary64):
        basel_result = bounds.bound_pi(1000, backend=binary64)
        zeta4_result = bounds.bound_pi(1000, backend=binary64, series='zeta4')
        assert encloses_pi(zeta4_result, pi_ref)
        assert zeta4_result.width < basel_result.width

    def test_high_precision(self, pi_ref, mpfr200, binary64):
        wide = bounds.bound_pi(10000, backend=mpfr200)
        assert encloses_pi(wide, pi_ref)
        # at 200 bits only the tail gap is left: about (3/pi) * (1/N - 1/(N+1))
        assert to_fraction(wide.width) < 1e-8
        assert wide.width <= bounds.bound_pi(10000, backend=binary64).width

    def test_unknown_series(self):
        with pytest.raises(ValueError):
            bounds.bound_pi(10, series='leibniz')


class TestWidth:

    @pytest.mark.parametrize('backend', [MPFRBackend.ieee('binary64'), FloatBackend()], ids=str)
    def test_narrows_with_more_terms(self, backend):
        widths = [bounds.bound_pi(n, order=Order.REVERSE, backend=backend).width
                  for n in (1, 10, 100, 1000, 10000)]
        for wider, narrower in zip(widths, widths[1:]):
            assert narrower <= wider

    def test_native_matches_mpfr(self, binary64, native):
        # both round every operation correctly in the same format
        for order in (Order.FORWARD, Order.REVERSE):
            a = bounds.bound_pi(2000, order=order, backend=binary64)
            b = bounds.bound_pi(2000, order=order, backend=native)
            assert a.lo == b.lo
            assert a.hi == b.hi


class TestMillionTerms:

    def test_forward(self, million, pi_ref):
        forward = million[Order.FORWARD]
        assert encloses_pi(forward, pi_ref)
        # rounding drift dominates: about 1e-10 on each side
        assert 3.14159265345 < forward.lo < 3.14159265351
        assert 3.14159265366 < forward.hi < 3.14159265372
        assert forward.agreeing_digits() >= 9

    def test_reverse(self, million, pi_ref):
        reverse = million[Order.REVERSE]
        assert encloses_pi(reverse, pi_ref)
        assert 3.1415926535890 < reverse.lo < 3.1415926535898
        assert 3.1415926535898 < reverse.hi < 3.1415926535906
        assert to_fraction(reverse.width) < 2e-12
        assert reverse.agreeing_digits() >= 10

    def test_reverse_is_tighter(self, million):
        forward = million[Order.FORWARD]
        reverse = million[Order.REVERSE]
        assert to_fraction(forward.width) > 1e-10
        assert reverse.width < forward.width
        assert forward.encloses(reverse)


class TestRepeatability:

    def test_idempotent(self, binary64):
        first = bounds.bound_pi(5000, backend=binary64)
        second = bounds.bound_pi(5000, backend=binary64)
        assert first == second

    def test_threads(self, binary64):
        sizes = [10, 100, 1000, 3000, 10, 100, 1000, 3000]
        expected = [bounds.bound_pi(n, backend=binary64) for n in sizes]
        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(pool.map(lambda n: bounds.bound_pi(n, backend=binary64), sizes))
        assert results == expected

    def test_threads_mixed_backends(self, pi_ref):
        jobs = [(n, backend) for n in (50, 500) for backend in backends]
        with ThreadPoolExecutor(max_workers=len(jobs)) as pool:
            results = list(pool.map(lambda job: bounds.bound_pi(job[0], backend=job[1]), jobs))
        for (n, backend), result in zip(jobs, results):
            assert encloses_pi(result, pi_ref)
            assert result == bounds.bound_pi(n, backend=backend)


class TestErrors:

    @pytest.mark.parametrize('n', [0, -1, 1.5])
    def test_invalid_terms(self, n):
        with pytest.raises(InvalidRangeError):
            bounds.bound_pi(n)

    def test_invalid_order(self):
        with pytest.raises(ValueError):
            bounds.bound_pi(10, order='sideways')

    def test_unverified_sqrt(self, pi_ref):
        backend = FloatBackend(verify_sqrt=False)
        with pytest.warns(UnsoundTransformWarning):
            result = bounds.bound_pi(1000, backend=backend)
        assert not result.certified
        # still a valid enclosure on any platform with a faithful sqrt
        assert encloses_pi(result, pi_ref)

    def test_warning_points_at_caller(self):
        backend = FloatBackend(verify_sqrt=False)
        with pytest.warns(UnsoundTransformWarning) as record:
            bounds.bound_pi(10, backend=backend)
        assert record[0].filename == __file__
        with pytest.warns(UnsoundTransformWarning) as record:
            bounds.bound_constant(basel, bounds.basel_pi, 10, backend=backend)
        assert record[0].filename == __file__

    def test_caller_vouches(self):
        backend = FloatBackend(verify_sqrt=False)
        with warnings.catch_warnings():
            warnings.simplefilter('error', UnsoundTransformWarning)
            result = bounds.bound_pi(100, backend=backend, correctly_rounded=True)
        assert result.certified


class TestGeneric:

    def test_bound_constant(self, pi_ref, binary64):
        def pi_squared_over_6(ops, x):
            return x

        result = bounds.bound_constant(basel, pi_squared_over_6, 1000, backend=binary64)
        pi_lo, pi_hi = pi_ref
        assert to_fraction(result.lo) <= to_fraction(pi_lo) ** 2 / 6
        assert to_fraction(pi_hi) ** 2 / 6 <= to_fraction(result.hi)


class TestEstimate:

    @pytest.mark.parametrize('series', ['basel', 'zeta4'])
    def test_close_to_pi(self, series, binary64):
        approx = bounds.estimate_pi(1000, backend=binary64, series=series)
        assert abs(approx - math.pi) < 1e-6

    def test_inside_bounds(self, binary64):
        approx = bounds.estimate_pi(1000, backend=binary64)
        assert bounds.bound_pi(1000, backend=binary64).contains(approx)

    def test_native(self, native):
        assert abs(bounds.estimate_pi(100, backend=native) - math.pi) < 1e-4


class TestIntervalResult:

    def test_is_interval(self, binary64):
        result = bounds.bound_pi(10, backend=binary64)
        assert isinstance(result, Interval)
        lo, hi = result
        assert lo < hi
        with binary64.scope(RM.UP) as ops:
            assert result.width == ops.sub(hi, lo)
