"""
Validation functions for attrs.
"""
import math

from attrs import define

from pixelcomp.errors import InvalidArgument

__all__ = ["range_", "finite"]


@define(frozen=True, repr=False)
class _RangeValidator:
    minimum: float
    maximum: float

    def __call__(self, inst, attribute, value):
        try:
            in_range = self.minimum <= value <= self.maximum
        except TypeError:
            in_range = False
        if not in_range:
            raise InvalidArgument(
                "'%s' must be in range [%r, %r], got %r"
                % (attribute.name, self.minimum, self.maximum, value)
            )

    def __repr__(self):
        return "<range_ validator with [%r, %r]>" % (self.minimum, self.maximum)


def range_(minimum, maximum):
    """
    An attrs validator that raises :exc:`InvalidArgument` unless
    ``minimum <= value <= maximum``. Both bounds are inclusive.
    """
    return _RangeValidator(minimum, maximum)


def finite(inst, attribute, value):
    """Reject NaN and infinities."""
    try:
        ok = math.isfinite(value)
    except TypeError:
        ok = False
    if not ok:
        raise InvalidArgument(
            "'%s' must be a finite number, got %r" % (attribute.name, value)
        )
