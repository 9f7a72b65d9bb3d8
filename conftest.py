"""Shared fixtures for the pibounds tests."""

import pytest

from pibounds.numeric import gmpmath
from pibounds.arithmetic.mpfloat import MPFRBackend
from pibounds.arithmetic.native import FloatBackend


@pytest.fixture(scope='session')
def pi_ref():
    """A 256-bit enclosure (lo, hi) of pi, far tighter than anything under test."""
    return gmpmath.const_pi(256)


@pytest.fixture
def binary64():
    return MPFRBackend.ieee('binary64')


@pytest.fixture
def native():
    return FloatBackend()


@pytest.fixture
def mpfr200():
    return MPFRBackend(200)
