"""
Canonical pixel type.

:py:class:`RGBA64` holds four float channels together with two state flags:
``linear`` (linear light versus sRGB encoded) and ``premultiplied`` (RGB
already multiplied by alpha). Arithmetic never clamps; clamping and
quantization happen at the boundaries only.

Example::

    from pixelcomp.color import RGBA64

    pixel = RGBA64(1.0, 0.5, 0.25, 0.5)
    pixel.premultiply()

    # Work on linear, unpremultiplied values; the state is restored afterwards.
    pixel.process(True, True, lambda p: setattr(p, "g", p.g * 0.5))
    assert pixel.premultiplied and not pixel.linear
"""

import logging
import math
from typing import Any, Callable, Tuple, TypeVar

from attrs import define, field

from pixelcomp.color.convert import linear_to_srgb, srgb_to_linear
from pixelcomp.color.meta import ChannelMeta, ModelMeta
from pixelcomp.constants import ALPHA_EPSILON, QUANTIZE_SLACK
from pixelcomp.validators import finite

logger = logging.getLogger(__name__)

T = TypeVar("T")


@define(eq=False)
class RGBA64:
    """
    Float RGBA pixel with explicit color space and premultiplication state.

    .. py:attribute:: r
    .. py:attribute:: g
    .. py:attribute:: b
    .. py:attribute:: a

        Channel values, nominally in [0, 1].

    .. py:attribute:: linear

        `True` when RGB holds linear light, `False` for sRGB.

    .. py:attribute:: premultiplied

        `True` when RGB has been multiplied by alpha.
    """

    NAME = "RGBA64"
    META = ModelMeta(
        "RGBA64",
        "Canonical float RGBA with explicit space and premultiplication state.",
        [
            ChannelMeta("R", 0, 1, "", "Red channel."),
            ChannelMeta("G", 0, 1, "", "Green channel."),
            ChannelMeta("B", 0, 1, "", "Blue channel."),
            ChannelMeta("A", 0, 1, "", "Alpha channel."),
        ],
    )

    r: float = field(default=0.0, converter=float, validator=finite)
    g: float = field(default=0.0, converter=float, validator=finite)
    b: float = field(default=0.0, converter=float, validator=finite)
    a: float = field(default=1.0, converter=float, validator=finite)
    linear: bool = False
    premultiplied: bool = False

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RGBA64):
            return NotImplemented
        return (
            self.linear == other.linear
            and self.premultiplied == other.premultiplied
            and all(
                abs(x - y) < ALPHA_EPSILON for x, y in zip(self.values(), other.values())
            )
        )

    __hash__ = None  # type: ignore[assignment]

    def values(self) -> Tuple[float, float, float, float]:
        return (self.r, self.g, self.b, self.a)

    def copy(self) -> "RGBA64":
        return RGBA64(self.r, self.g, self.b, self.a, self.linear, self.premultiplied)

    def to_linear(self) -> "RGBA64":
        """Convert to linear light in place. Premultiplication is kept."""
        if self.linear:
            return self
        premultiplied = self.premultiplied
        if premultiplied:
            self.unpremultiply()
        self.r, self.g, self.b = (float(c) for c in srgb_to_linear(self.values()[:3]))
        self.linear = True
        if premultiplied:
            self.premultiply()
        return self

    def to_srgb(self) -> "RGBA64":
        """Convert to sRGB in place. Premultiplication is kept."""
        if not self.linear:
            return self
        premultiplied = self.premultiplied
        if premultiplied:
            self.unpremultiply()
        self.r, self.g, self.b = (float(c) for c in linear_to_srgb(self.values()[:3]))
        self.linear = False
        if premultiplied:
            self.premultiply()
        return self

    def premultiply(self) -> "RGBA64":
        if self.premultiplied:
            return self
        if abs(self.a) < ALPHA_EPSILON:
            self.r = self.g = self.b = 0.0
        else:
            self.r *= self.a
            self.g *= self.a
            self.b *= self.a
        self.premultiplied = True
        return self

    def unpremultiply(self) -> "RGBA64":
        if not self.premultiplied:
            return self
        if abs(self.a) < ALPHA_EPSILON:
            self.r = self.g = self.b = 0.0
        else:
            self.r /= self.a
            self.g /= self.a
            self.b /= self.a
        self.premultiplied = False
        return self

    def clamp(self) -> "RGBA64":
        """
        Clamp alpha to [0, 1] and RGB to [0, A] when premultiplied, to [0, 1]
        otherwise.
        """
        self.a = min(1.0, max(0.0, self.a))
        limit = self.a if self.premultiplied else 1.0
        self.r = min(limit, max(0.0, self.r))
        self.g = min(limit, max(0.0, self.g))
        self.b = min(limit, max(0.0, self.b))
        return self

    def set_state(self, linear: bool, premultiplied: bool) -> "RGBA64":
        """Convert in place into the given state."""
        if self.linear != linear:
            if linear:
                self.to_linear()
            else:
                self.to_srgb()
        if self.premultiplied != premultiplied:
            if premultiplied:
                self.premultiply()
            else:
                self.unpremultiply()
        return self

    def process(
        self, unpremultiplied: bool, linear: bool, fn: Callable[["RGBA64"], T]
    ) -> T:
        """
        Run `fn` on this pixel in the requested working state.

        The pixel is converted to unpremultiplied (or premultiplied) and linear
        (or sRGB) form, `fn` is invoked with it, and the original state is
        restored afterwards, also when `fn` raises.

        :param unpremultiplied: Work on unpremultiplied values.
        :param linear: Work on linear light values.
        :param fn: Callable receiving the pixel.
        :return: Whatever `fn` returns.
        """
        linear_before, premultiplied_before = self.linear, self.premultiplied
        self.set_state(linear, not unpremultiplied)
        try:
            return fn(self)
        finally:
            self.set_state(linear_before, premultiplied_before)

    def canonical(self) -> "RGBA64":
        """Clamped sRGB, premultiplied copy."""
        return self.copy().set_state(False, True).clamp()

    def straight(self) -> Tuple[float, float, float, float]:
        """Unpremultiplied sRGB channel values."""
        return self.copy().set_state(False, False).values()

    def _quantize(self, scale: int) -> Tuple[int, int, int, int]:
        pixel = self.copy().to_srgb().clamp()
        return tuple(  # type: ignore[return-value]
            int(c * scale + QUANTIZE_SLACK) for c in pixel.values()
        )

    def to_8bit(self) -> Tuple[int, int, int, int]:
        """sRGB channels scaled to 0..255 and truncated."""
        return self._quantize(255)

    def to_16bit(self) -> Tuple[int, int, int, int]:
        """sRGB channels scaled to 0..65535 and truncated."""
        return self._quantize(65535)

    @classmethod
    def from_8bit(
        cls, r: int, g: int, b: int, a: int = 255, premultiplied: bool = False
    ) -> "RGBA64":
        return cls(r / 255.0, g / 255.0, b / 255.0, a / 255.0, False, premultiplied)

    @classmethod
    def from_16bit(
        cls, r: int, g: int, b: int, a: int = 65535, premultiplied: bool = False
    ) -> "RGBA64":
        return cls(
            r / 65535.0, g / 65535.0, b / 65535.0, a / 65535.0, False, premultiplied
        )

    # Color model protocol.

    def to_rgba64(self) -> "RGBA64":
        return self.copy()

    @classmethod
    def from_rgba64(cls, pixel: "RGBA64") -> "RGBA64":
        return pixel.copy()

    @classmethod
    def from_values(cls, values: Any) -> "RGBA64":
        values = tuple(values)
        cls.META.validate(values)
        return cls(*values)

    def is_close(self, other: "RGBA64", tolerance: float = 1e-3) -> bool:
        """Compare unpremultiplied sRGB values within `tolerance`."""
        return all(
            math.isclose(x, y, abs_tol=tolerance)
            for x, y in zip(self.straight(), other.straight())
        )
