"""
Tests for intervals and monotone enclosures
"""

import math
import warnings
from fractions import Fraction

import pytest

from pibounds.errors import UnsoundTransformWarning, UnsupportedOperationError
from pibounds.numeric.ops import RM, OP
from pibounds.arithmetic.evalctx import RoundedArithmeticContext
from pibounds.arithmetic.mpfloat import MPFRBackend
from pibounds.arithmetic.native import FloatBackend
from pibounds.arithmetic.interval import Interval, MonotoneTransform, MonotoneEnclosure, to_fraction


def square_root(ops, x):
    return ops.sqrt(x)

sqrt_transform = MonotoneTransform(square_root, name='sqrt')


def make(backend, lo, hi):
    ctx = RoundedArithmeticContext(backend)
    return Interval(ctx.evaluate(RM.DOWN, lambda ops: ops.convert(lo)),
                    ctx.evaluate(RM.UP, lambda ops: ops.convert(hi)),
                    backend=backend)


class TestInterval:

    def test_endpoints(self):
        iv = Interval(1.0, 2.0)
        assert iv.lo == 1.0
        assert iv.hi == 2.0
        assert tuple(iv) == (1.0, 2.0)
        assert iv.certified
        assert iv.backend is None

    def test_inverted(self):
        with pytest.raises(ValueError):
            Interval(2.0, 1.0)

    def test_nan(self):
        with pytest.raises(ValueError):
            Interval(math.nan, 1.0)

    def test_immutable(self):
        iv = Interval(1.0, 2.0)
        with pytest.raises(AttributeError):
            iv.lo = 0.0

    def test_wrong_backend(self):
        with pytest.raises(TypeError):
            Interval(1, 2, backend=FloatBackend())

    def test_point(self):
        assert Interval(3.0, 3.0).is_point()
        assert not Interval(3.0, 4.0).is_point()

    def test_contains(self):
        iv = Interval(1.0, 2.0)
        assert iv.contains(1.0)
        assert iv.contains(1.5)
        assert iv.contains(2.0)
        assert not iv.contains(2.5)

    def test_encloses(self):
        outer = Interval(1.0, 4.0)
        assert outer.encloses(Interval(2.0, 3.0))
        assert outer.encloses(outer)
        assert not Interval(2.0, 3.0).encloses(outer)

    def test_width_rounds_up(self):
        backend = FloatBackend()
        iv = Interval(1.0, 1.0 + 2.0 ** -52 + 2.0 ** -51, backend=backend)
        assert iv.width == 3 * 2.0 ** -52
        iv = Interval(-1e-30, 1.0, backend=backend)
        assert iv.width > 1.0

    def test_midpoint(self):
        assert Interval(1.0, 2.0, backend=FloatBackend()).midpoint == 1.5
        assert Interval(1, 2).midpoint == 1.5

    def test_agreeing_digits(self):
        iv = Interval(Fraction(314159, 100000), Fraction(314160, 100000))
        assert iv.agreeing_digits() == 3
        assert Interval(Fraction(1, 3), Fraction(1, 3)).agreeing_digits(limit=20) == 20
        assert Interval(0.0, 1.0).agreeing_digits() == 0

    def test_agreeing_digits_unbounded(self):
        assert Interval(3.0, math.inf).agreeing_digits() == 0
        assert Interval(-math.inf, 3.0).agreeing_digits() == 0

    def test_equality(self):
        assert Interval(1.0, 2.0) == Interval(1.0, 2.0)
        assert Interval(1.0, 2.0) != Interval(1.0, 2.0, certified=False)
        assert len({Interval(1.0, 2.0), Interval(1.0, 2.0)}) == 1

    def test_str(self):
        assert str(Interval(1.0, 2.0)) == '[1.0, 2.0]'
        assert str(Interval(1.0, 2.0, certified=False)).endswith('(uncertified)')


class TestMonotoneEnclosure:

    @pytest.mark.parametrize('backend', [MPFRBackend(100), MPFRBackend.ieee('binary64'), FloatBackend()], ids=str)
    def test_sqrt(self, backend):
        iv = make(backend, 2, 3)
        result = MonotoneEnclosure(backend).apply(iv, sqrt_transform)
        assert result.certified
        assert to_fraction(result.lo) ** 2 <= 2
        assert to_fraction(result.hi) ** 2 >= 3
        assert result.backend is backend

    def test_composition(self):
        backend = MPFRBackend(120)
        iv = make(backend, 1, 2)

        def fn(ops, x):
            return ops.add(ops.compute(OP.exp, x), ops.mul(x, x))

        result = MonotoneEnclosure(backend).apply(iv, fn)
        # e + 1 and e**2 + 4
        assert 3.71828 < result.lo < 3.71829
        assert 11.38905 < result.hi < 11.38906
        assert result.certified

    def test_unsupported(self):
        backend = FloatBackend()
        iv = make(backend, 1, 2)
        with pytest.raises(UnsupportedOperationError):
            MonotoneEnclosure(backend).apply(iv, lambda ops, x: ops.compute(OP.exp, x))

    @pytest.mark.parametrize('mode_lo, mode_hi', [
        (RM.UP, RM.UP),
        (RM.DOWN, RM.DOWN),
        (RM.NEAREST, RM.UP),
        (RM.DOWN, RM.NEAREST),
        (RM.UP, RM.DOWN),
    ])
    def test_modes(self, mode_lo, mode_hi):
        backend = FloatBackend()
        with pytest.raises(ValueError):
            MonotoneEnclosure(backend).apply(make(backend, 2, 3), sqrt_transform, mode_lo, mode_hi)

    def test_mode_names(self):
        backend = FloatBackend()
        result = MonotoneEnclosure(backend).apply(make(backend, 2, 3), sqrt_transform, 'down', 'up')
        assert result.certified

    def test_unverified_sqrt_warns(self):
        backend = FloatBackend(verify_sqrt=False)
        iv = make(backend, 2, 3)
        with pytest.warns(UnsoundTransformWarning):
            result = MonotoneEnclosure(backend).apply(iv, sqrt_transform)
        assert not result.certified
        assert to_fraction(result.lo) ** 2 <= 2 <= 3 <= to_fraction(result.hi) ** 2

    def test_caller_vouches(self):
        backend = FloatBackend(verify_sqrt=False)
        iv = make(backend, 2, 3)
        with warnings.catch_warnings():
            warnings.simplefilter('error', UnsoundTransformWarning)
            result = MonotoneEnclosure(backend).apply(iv, sqrt_transform, correctly_rounded=True)
        assert result.certified

    def test_caller_doubts(self):
        backend = MPFRBackend(100)
        iv = make(backend, 2, 3)
        with pytest.warns(UnsoundTransformWarning):
            result = MonotoneEnclosure(backend).apply(iv, sqrt_transform, correctly_rounded=False)
        assert not result.certified

    def test_uncertified_input(self):
        backend = MPFRBackend(100)
        good = make(backend, 2, 3)
        iv = Interval(good.lo, good.hi, backend=backend, certified=False)
        with pytest.warns(UnsoundTransformWarning):
            result = MonotoneEnclosure(backend).apply(iv, sqrt_transform, correctly_rounded=True)
        assert not result.certified

    def test_input_unchanged(self):
        backend = MPFRBackend(100)
        iv = make(backend, 2, 3)
        lo, hi = iv.lo, iv.hi
        MonotoneEnclosure(backend).apply(iv, sqrt_transform)
        assert iv.lo == lo and iv.hi == hi
