"""Standard operation codes and rounding modes, shared by all numerical backends."""

from enum import IntEnum, unique

class RM(IntEnum):
    ROUND_NEAREST_EVEN = 0
    RNE = 0
    NEAREST = 0
    ROUND_UP = 2
    RTP = 2
    UP = 2
    ROUND_DOWN = 3
    RTN = 3
    DOWN = 3

RoundingMode = RM

@unique
class OP(IntEnum):
    add = 0
    sub = 1
    mul = 2
    div = 3
    neg = 4
    sqrt = 5
    fma = 6
    fabs = 7
    cbrt = 8
    exp = 9
    exp2 = 10
    log = 11
    log2 = 12
    atan = 13
    hypot = 14


RNE_synonyms = {'rne', 'nearest', 'nearesteven', 'roundnearesteven', 'nearesttiestoeven', 'roundnearesttiestoeven'}
RTP_synonyms = {'rtp', 'up', 'roundup', 'topositive', 'roundtopositive', 'towardpositive', 'roundtowardpositive'}
RTN_synonyms = {'rtn', 'down', 'rounddown', 'tonegative', 'roundtonegative', 'towardnegative', 'roundtowardnegative'}

_rm_names = {}
_rm_names.update((k, RM.RNE) for k in RNE_synonyms)
_rm_names.update((k, RM.RTP) for k in RTP_synonyms)
_rm_names.update((k, RM.RTN) for k in RTN_synonyms)

def parse_rm(rounding):
    """Interpret `rounding` as a rounding mode.
    Accepts members of `RM`, their integer codes, and the usual IEEE 754 names
    ('rtn', 'roundTowardNegative', 'down', ...), case insensitively.
    """
    if isinstance(rounding, RM):
        return rounding
    elif isinstance(rounding, int) and not isinstance(rounding, bool):
        try:
            return RM(rounding)
        except ValueError:
            raise ValueError('unsupported rounding mode {}'.format(repr(rounding)))
    try:
        return _rm_names[str(rounding).lower().replace('_', '').replace('-', '')]
    except KeyError:
        raise ValueError('unsupported rounding mode {}'.format(repr(rounding)))

def is_directed(rm):
    """Does `rm` give a one-sided guarantee?"""
    return rm == RM.RTN or rm == RM.RTP
