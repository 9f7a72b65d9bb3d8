"""Exceptions and warnings raised while computing rigorous bounds."""


class BoundsError(Exception):
    """Base class for errors raised by pibounds."""


class InvalidRangeError(BoundsError, ValueError):
    """The number of series terms is not a positive integer."""


class PrecisionMismatchError(BoundsError, TypeError):
    """A single bound computation mixed values of different precisions."""


class UnsupportedOperationError(BoundsError, NotImplementedError):
    """The backend has no rounding-aware implementation of an operation."""


class UnsoundTransformWarning(UserWarning):
    """An enclosure was computed with at least one operation that is not
    certified to round correctly in the requested direction.
    The interval is still returned, but marked as uncertified.
    """