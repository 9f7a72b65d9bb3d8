"""Backend selection by name."""

from . import evalctx
from .mpfloat import MPFRBackend
from .native import FloatBackend


native_synonyms = {'native', 'python', 'pyfloat', 'hardware'}
native_unverified_synonyms = {'native-unverified', 'python-unverified', 'hardware-unverified'}


def parse_backend(name):
    """Build a backend from a format name:

        'native'             builtin floats, verified square root
        'native-unverified'  builtin floats, platform square root
        'binary64', 'double', 'binary32', 'float', ...
                             MPFR emulating an IEEE 754 format
        'mpfr:200', 'mpfr200'
                             MPFR at 200 bits
    """
    if isinstance(name, evalctx.RoundedNumeric):
        return name

    key = str(name).lower().strip()
    if key in native_synonyms:
        return FloatBackend()
    elif key in native_unverified_synonyms:
        return FloatBackend(verify_sqrt=False)
    elif key in evalctx.IEEE_esnbits:
        return MPFRBackend.ieee(key)
    elif key.startswith('mpfr'):
        digits = key[len('mpfr'):].lstrip(':')
        try:
            precision = int(digits)
        except ValueError:
            raise ValueError('unsupported backend {}: expected mpfr:<bits>'.format(repr(name)))
        return MPFRBackend(precision)
    else:
        raise ValueError('unsupported backend {}'.format(repr(name)))
