"""
Color manipulation helpers.

All helpers accept a canonical pixel or any color model instance and return a
fresh unpremultiplied sRGB :py:class:`~pixelcomp.color.rgba64.RGBA64`.
"""

import math
from typing import Any

from pixelcomp.color.models import HSL
from pixelcomp.color.rgba64 import RGBA64
from pixelcomp.errors import InvalidArgument


def _pixel(color: Any) -> RGBA64:
    if color is None:
        raise InvalidArgument("color must not be None")
    return color.to_rgba64()


def _with_hsl(color: Any, fn) -> RGBA64:
    hsl = HSL.from_rgba64(_pixel(color))
    fn(hsl)
    return hsl.to_rgba64()


def lighten(color: Any, amount: float) -> RGBA64:
    """Increase HSL lightness by `amount`, saturating at 1."""
    return _with_hsl(color, lambda c: setattr(c, "l", min(1.0, c.l + amount)))


def darken(color: Any, amount: float) -> RGBA64:
    """Decrease HSL lightness by `amount`, saturating at 0."""
    return _with_hsl(color, lambda c: setattr(c, "l", max(0.0, c.l - amount)))


def saturate(color: Any, amount: float) -> RGBA64:
    return _with_hsl(color, lambda c: setattr(c, "s", min(1.0, c.s + amount)))


def desaturate(color: Any, amount: float) -> RGBA64:
    return _with_hsl(color, lambda c: setattr(c, "s", max(0.0, c.s - amount)))


def rotate_hue(color: Any, degrees: float) -> RGBA64:
    """Rotate the hue, wrapping into [0, 360)."""
    return _with_hsl(color, lambda c: setattr(c, "h", (c.h + degrees) % 360.0))


def mix(color: Any, other: Any, ratio: float) -> RGBA64:
    """
    Linear interpolation of the straight sRGB channels.

    :param ratio: 0 returns `color`, 1 returns `other`.
    """
    a = _pixel(color).straight()
    b = _pixel(other).straight()
    return RGBA64(*(x * (1.0 - ratio) + y * ratio for x, y in zip(a, b)))


def distance(color: Any, other: Any) -> float:
    """Euclidean distance of the straight sRGB channels, alpha excluded."""
    a = _pixel(color).straight()
    b = _pixel(other).straight()
    return math.sqrt(sum((x - y) ** 2 for x, y in zip(a[:3], b[:3])))


def is_similar(color: Any, other: Any, tolerance: float) -> bool:
    return distance(color, other) <= tolerance
