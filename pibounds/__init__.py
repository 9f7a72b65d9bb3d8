from .numeric import ops, gmpmath, floatmath
from .arithmetic import evalctx, mpfloat, native, interval, backends
from . import errors, series, bounds

RM = ops.RM
RoundingMode = ops.RoundingMode
OP = ops.OP

RoundedArithmeticContext = evalctx.RoundedArithmeticContext
RoundedNumeric = evalctx.RoundedNumeric
MPFRBackend = mpfloat.MPFRBackend
FloatBackend = native.FloatBackend
parse_backend = backends.parse_backend

Interval = interval.Interval
MonotoneTransform = interval.MonotoneTransform
MonotoneEnclosure = interval.MonotoneEnclosure

Order = series.Order
SeriesSpec = series.SeriesSpec
partial_sum = series.partial_sum
tail_bound = series.tail_bound

bound_constant = bounds.bound_constant
bound_pi = bounds.bound_pi
estimate = bounds.estimate
estimate_pi = bounds.estimate_pi

BoundsError = errors.BoundsError
InvalidRangeError = errors.InvalidRangeError
PrecisionMismatchError = errors.PrecisionMismatchError
UnsupportedOperationError = errors.UnsupportedOperationError
UnsoundTransformWarning = errors.UnsoundTransformWarning
