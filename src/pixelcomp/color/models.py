"""
Color models.

Each model is a small mutable record with model specific channels and an
alpha channel. All models share the :py:class:`ColorModel` protocol:

- ``META``: a :py:class:`~pixelcomp.color.meta.ModelMeta` descriptor,
- ``to_rgba64()``: conversion to the canonical pixel (sRGB, unpremultiplied),
- ``from_rgba64(pixel)``: conversion from any canonical pixel,
- ``from_values(values)``: construction from a sequence validated against
  ``META``.

Models are registered by name in :py:data:`MODELS`::

    from pixelcomp.color import MODELS

    hsl = MODELS.get("HSL").from_rgba64(pixel)
    hsl.h = (hsl.h + 30) % 360
    pixel = hsl.to_rgba64()
"""

import logging
import re
from typing import Any, Dict, Sequence, Type, TypeVar

import attrs
import numpy as np
from attrs import define, field

from pixelcomp.color import convert
from pixelcomp.color.meta import ChannelMeta, ModelMeta
from pixelcomp.color.rgba64 import RGBA64
from pixelcomp.constants import EPSILON, WAVELENGTH_MAX, WAVELENGTH_MIN, GrayscaleMethod
from pixelcomp.errors import InvalidArgument
from pixelcomp.registry import new_registry

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="ColorModel")

MODELS, register = new_registry("color model", attribute="NAME")

RGBA32_MAX = 4294967295.0

_ALPHA = ChannelMeta("Alpha", 0, 1, "", "Alpha channel.")


def _float(value: Any) -> float:
    return float(value)


def _straight(pixel: RGBA64):
    if pixel is None:
        raise InvalidArgument("pixel must not be None")
    return pixel.straight()


class ColorModel:
    """Shared behavior of all color models."""

    NAME: str = ""
    META: ModelMeta

    def values(self) -> tuple:
        return attrs.astuple(self, recurse=False)

    def channels(self) -> Dict[str, Any]:
        """Mapping of channel display names to values."""
        return dict(zip(self.META.channel_names, self.values()))

    def _field_name(self, name: str) -> str:
        key = name.lower()
        for channel, attribute in zip(self.META.channels, attrs.fields(type(self))):
            if key in (channel.name.lower(), attribute.name.lower()):
                return attribute.name
        raise InvalidArgument("unknown channel %r for %s" % (name, self.NAME))

    def get_channel(self, name: str) -> Any:
        return getattr(self, self._field_name(name))

    def set_channel(self, name: str, value: Any) -> None:
        setattr(self, self._field_name(name), value)

    @classmethod
    def from_values(cls: Type[T], values: Sequence[Any]) -> T:
        """
        Create a model instance from channel values.

        :raises InvalidArgument: If the values do not match the metadata.
        """
        values = tuple(values)
        cls.META.validate(values)
        return cls(*values)

    def to_rgba64(self) -> RGBA64:
        raise NotImplementedError

    @classmethod
    def from_rgba64(cls: Type[T], pixel: RGBA64) -> T:
        raise NotImplementedError


@register("RGB")
@define
class RGB8(ColorModel):
    """8-bit RGB. Channels are floats on the 0..255 scale; alpha is in [0, 1]."""

    META = ModelMeta(
        "RGB",
        "8-bit per channel RGB with float alpha.",
        [
            ChannelMeta("R", 0, 255, "", "Red channel."),
            ChannelMeta("G", 0, 255, "", "Green channel."),
            ChannelMeta("B", 0, 255, "", "Blue channel."),
            _ALPHA,
        ],
    )

    r: float = field(default=0.0, converter=_float)
    g: float = field(default=0.0, converter=_float)
    b: float = field(default=0.0, converter=_float)
    alpha: float = field(default=1.0, converter=_float)

    def to_rgba64(self) -> RGBA64:
        return RGBA64(self.r / 255.0, self.g / 255.0, self.b / 255.0, self.alpha)

    @classmethod
    def from_rgba64(cls, pixel: RGBA64) -> "RGB8":
        r, g, b, a = _straight(pixel)
        return cls(r * 255.0, g * 255.0, b * 255.0, a)


@register("RGBA16")
@define
class RGBA16(ColorModel):
    """16-bit RGBA on the 0..65535 scale."""

    META = ModelMeta(
        "RGBA16",
        "16-bit per channel RGBA.",
        [
            ChannelMeta("R", 0, 65535, "", "Red channel."),
            ChannelMeta("G", 0, 65535, "", "Green channel."),
            ChannelMeta("B", 0, 65535, "", "Blue channel."),
            ChannelMeta("Alpha", 0, 65535, "", "Alpha channel."),
        ],
    )

    r: float = field(default=0.0, converter=_float)
    g: float = field(default=0.0, converter=_float)
    b: float = field(default=0.0, converter=_float)
    alpha: float = field(default=65535.0, converter=_float)

    def to_rgba64(self) -> RGBA64:
        return RGBA64(*(c / 65535.0 for c in self.values()))

    @classmethod
    def from_rgba64(cls, pixel: RGBA64) -> "RGBA16":
        return cls(*(c * 65535.0 for c in _straight(pixel)))


@register("RGBA32")
@define
class RGBA32(ColorModel):
    """32-bit RGBA on the 0..2**32-1 scale."""

    META = ModelMeta(
        "RGBA32",
        "32-bit per channel RGBA.",
        [
            ChannelMeta("R", 0, RGBA32_MAX, "", "Red component."),
            ChannelMeta("G", 0, RGBA32_MAX, "", "Green component."),
            ChannelMeta("B", 0, RGBA32_MAX, "", "Blue component."),
            ChannelMeta("Alpha", 0, RGBA32_MAX, "", "Alpha channel."),
        ],
    )

    r: float = field(default=0.0, converter=_float)
    g: float = field(default=0.0, converter=_float)
    b: float = field(default=0.0, converter=_float)
    alpha: float = field(default=RGBA32_MAX, converter=_float)

    def to_rgba64(self) -> RGBA64:
        return RGBA64(*(c / RGBA32_MAX for c in self.values()))

    @classmethod
    def from_rgba64(cls, pixel: RGBA64) -> "RGBA32":
        return cls(*(c * RGBA32_MAX for c in _straight(pixel)))


@register("HSL")
@define
class HSL(ColorModel):
    """Hue, saturation, lightness."""

    META = ModelMeta(
        "HSL",
        "Hue, saturation and lightness.",
        [
            ChannelMeta("H", 0, 360, "°", "Hue in degrees."),
            ChannelMeta("S", 0, 1, "", "Saturation."),
            ChannelMeta("L", 0, 1, "", "Lightness."),
            _ALPHA,
        ],
    )

    h: float = field(default=0.0, converter=_float)
    s: float = field(default=0.0, converter=_float)
    l: float = field(default=0.0, converter=_float)  # noqa: E741
    alpha: float = field(default=1.0, converter=_float)

    def to_rgba64(self) -> RGBA64:
        r, g, b = convert.hsl_to_rgb(self.h, self.s, self.l)
        return RGBA64(r, g, b, self.alpha)

    @classmethod
    def from_rgba64(cls, pixel: RGBA64) -> "HSL":
        r, g, b, a = _straight(pixel)
        h, s, l = convert.rgb_to_hsl(r, g, b)
        return cls(h, s, l, a)


@register("HSB")
@define
class HSB(ColorModel):
    """Hue, saturation, brightness (also known as HSV)."""

    META = ModelMeta(
        "HSB",
        "Hue, saturation and brightness.",
        [
            ChannelMeta("H", 0, 360, "°", "Hue in degrees."),
            ChannelMeta("S", 0, 1, "", "Saturation."),
            ChannelMeta("B", 0, 1, "", "Brightness."),
            _ALPHA,
        ],
    )

    h: float = field(default=0.0, converter=_float)
    s: float = field(default=0.0, converter=_float)
    b: float = field(default=0.0, converter=_float)
    alpha: float = field(default=1.0, converter=_float)

    def to_rgba64(self) -> RGBA64:
        r, g, b = convert.hsb_to_rgb(self.h, self.s, self.b)
        return RGBA64(r, g, b, self.alpha)

    @classmethod
    def from_rgba64(cls, pixel: RGBA64) -> "HSB":
        r, g, b, a = _straight(pixel)
        return cls(*convert.rgb_to_hsb(r, g, b), a)


@register("CMY")
@define
class CMY(ColorModel):
    """Subtractive cyan, magenta, yellow in percent."""

    META = ModelMeta(
        "CMY",
        "Cyan, magenta and yellow percentages.",
        [
            ChannelMeta("C", 0, 100, "%", "Cyan percentage."),
            ChannelMeta("M", 0, 100, "%", "Magenta percentage."),
            ChannelMeta("Y", 0, 100, "%", "Yellow percentage."),
            _ALPHA,
        ],
    )

    c: float = field(default=0.0, converter=_float)
    m: float = field(default=0.0, converter=_float)
    y: float = field(default=0.0, converter=_float)
    alpha: float = field(default=1.0, converter=_float)

    def to_rgba64(self) -> RGBA64:
        return RGBA64(
            1.0 - self.c / 100.0, 1.0 - self.m / 100.0, 1.0 - self.y / 100.0, self.alpha
        )

    @classmethod
    def from_rgba64(cls, pixel: RGBA64) -> "CMY":
        r, g, b, a = _straight(pixel)
        return cls((1.0 - r) * 100.0, (1.0 - g) * 100.0, (1.0 - b) * 100.0, a)


@register("CMYK")
@define
class CMYK(ColorModel):
    """Cyan, magenta, yellow and key (black) in percent."""

    META = ModelMeta(
        "CMYK",
        "Cyan, magenta, yellow and key percentages.",
        [
            ChannelMeta("C", 0, 100, "%", "Cyan percentage."),
            ChannelMeta("M", 0, 100, "%", "Magenta percentage."),
            ChannelMeta("Y", 0, 100, "%", "Yellow percentage."),
            ChannelMeta("K", 0, 100, "%", "Key (black) percentage."),
            _ALPHA,
        ],
    )

    c: float = field(default=0.0, converter=_float)
    m: float = field(default=0.0, converter=_float)
    y: float = field(default=0.0, converter=_float)
    k: float = field(default=0.0, converter=_float)
    alpha: float = field(default=1.0, converter=_float)

    def to_rgba64(self) -> RGBA64:
        r, g, b = convert.cmyk_to_rgb(
            self.c / 100.0, self.m / 100.0, self.y / 100.0, self.k / 100.0
        )
        return RGBA64(r, g, b, self.alpha)

    @classmethod
    def from_rgba64(cls, pixel: RGBA64) -> "CMYK":
        r, g, b, a = _straight(pixel)
        c, m, y, k = convert.rgb_to_cmyk(r, g, b)
        return cls(c * 100.0, m * 100.0, y * 100.0, k * 100.0, a)


@register("XYZ")
@define
class XYZ(ColorModel):
    """CIE 1931 XYZ relative to the D65 white point."""

    META = ModelMeta(
        "XYZ",
        "CIE 1931 XYZ tristimulus values (D65).",
        [
            ChannelMeta("X", 0, 0.95047, "", "X component."),
            ChannelMeta("Y", 0, 1.0, "", "Y component (luminance)."),
            ChannelMeta("Z", 0, 1.08883, "", "Z component."),
            _ALPHA,
        ],
    )

    x: float = field(default=0.0, converter=_float)
    y: float = field(default=0.0, converter=_float)
    z: float = field(default=0.0, converter=_float)
    alpha: float = field(default=1.0, converter=_float)

    def to_rgba64(self) -> RGBA64:
        return RGBA64(*convert.xyz_to_rgb(self.x, self.y, self.z), self.alpha)

    @classmethod
    def from_rgba64(cls, pixel: RGBA64) -> "XYZ":
        r, g, b, a = _straight(pixel)
        return cls(*convert.rgb_to_xyz(r, g, b), a)


@register("LAB")
@define
class LAB(ColorModel):
    """CIE L*a*b* (D65)."""

    META = ModelMeta(
        "LAB",
        "CIE L*a*b* perceptual color space (D65).",
        [
            ChannelMeta("L", 0, 100, "", "Lightness."),
            ChannelMeta("A", -128, 127, "", "Green to red."),
            ChannelMeta("B", -128, 127, "", "Blue to yellow."),
            _ALPHA,
        ],
    )

    l: float = field(default=0.0, converter=_float)  # noqa: E741
    a: float = field(default=0.0, converter=_float)
    b: float = field(default=0.0, converter=_float)
    alpha: float = field(default=1.0, converter=_float)

    def to_rgba64(self) -> RGBA64:
        return RGBA64(*convert.lab_to_rgb(self.l, self.a, self.b), self.alpha)

    @classmethod
    def from_rgba64(cls, pixel: RGBA64) -> "LAB":
        r, g, b, a = _straight(pixel)
        return cls(*convert.rgb_to_lab(r, g, b), a)


@register("LCH")
@define
class LCH(ColorModel):
    """Polar form of LAB: lightness, chroma, hue."""

    META = ModelMeta(
        "LCH",
        "Cylindrical L*a*b*: lightness, chroma and hue.",
        [
            ChannelMeta("L", 0, 100, "", "Lightness."),
            ChannelMeta("C", 0, 150, "", "Chroma."),
            ChannelMeta("H", 0, 360, "°", "Hue in degrees."),
            _ALPHA,
        ],
    )

    l: float = field(default=0.0, converter=_float)  # noqa: E741
    c: float = field(default=0.0, converter=_float)
    h: float = field(default=0.0, converter=_float)
    alpha: float = field(default=1.0, converter=_float)

    def to_rgba64(self) -> RGBA64:
        lab = convert.lch_to_lab(self.l, self.c, self.h)
        return RGBA64(*convert.lab_to_rgb(*lab), self.alpha)

    @classmethod
    def from_rgba64(cls, pixel: RGBA64) -> "LCH":
        r, g, b, a = _straight(pixel)
        return cls(*convert.lab_to_lch(*convert.rgb_to_lab(r, g, b)), a)


@register("HCL")
@define
class HCL(ColorModel):
    """LCH with the channels ordered hue, chroma, lightness."""

    META = ModelMeta(
        "HCL",
        "Hue, chroma and lightness derived from L*a*b*.",
        [
            ChannelMeta("H", 0, 360, "°", "Hue angle."),
            ChannelMeta("C", 0, 150, "", "Chroma (colorfulness)."),
            ChannelMeta("L", 0, 100, "", "Lightness."),
            _ALPHA,
        ],
    )

    h: float = field(default=0.0, converter=_float)
    c: float = field(default=0.0, converter=_float)
    l: float = field(default=0.0, converter=_float)  # noqa: E741
    alpha: float = field(default=1.0, converter=_float)

    def to_rgba64(self) -> RGBA64:
        lab = convert.lch_to_lab(self.l, self.c, self.h)
        return RGBA64(*convert.lab_to_rgb(*lab), self.alpha)

    @classmethod
    def from_rgba64(cls, pixel: RGBA64) -> "HCL":
        r, g, b, a = _straight(pixel)
        l, c, h = convert.lab_to_lch(*convert.rgb_to_lab(r, g, b))
        return cls(h, c, l, a)


@register("LUV")
@define
class LUV(ColorModel):
    """CIE L*u*v* (D65)."""

    META = ModelMeta(
        "LUV",
        "CIE L*u*v* perceptual color space (D65).",
        [
            ChannelMeta("L", 0, 100, "", "Lightness."),
            ChannelMeta("U", -134, 220, "", "u component."),
            ChannelMeta("V", -140, 122, "", "v component."),
            _ALPHA,
        ],
    )

    l: float = field(default=0.0, converter=_float)  # noqa: E741
    u: float = field(default=0.0, converter=_float)
    v: float = field(default=0.0, converter=_float)
    alpha: float = field(default=1.0, converter=_float)

    def to_rgba64(self) -> RGBA64:
        return RGBA64(*convert.luv_to_rgb(self.l, self.u, self.v), self.alpha)

    @classmethod
    def from_rgba64(cls, pixel: RGBA64) -> "LUV":
        r, g, b, a = _straight(pixel)
        return cls(*convert.rgb_to_luv(r, g, b), a)


@register("YUV")
@define
class YUV(ColorModel):
    """BT.601 luma with U/V chrominance."""

    META = ModelMeta(
        "YUV",
        "Luma and chrominance (BT.601).",
        [
            ChannelMeta("Y", 0, 1, "", "Luminance."),
            ChannelMeta("U", -0.436, 0.436, "", "Blue chrominance."),
            ChannelMeta("V", -0.615, 0.615, "", "Red chrominance."),
            _ALPHA,
        ],
    )

    y: float = field(default=0.0, converter=_float)
    u: float = field(default=0.0, converter=_float)
    v: float = field(default=0.0, converter=_float)
    alpha: float = field(default=1.0, converter=_float)

    def to_rgba64(self) -> RGBA64:
        return RGBA64(*convert.yuv_to_rgb(self.y, self.u, self.v), self.alpha)

    @classmethod
    def from_rgba64(cls, pixel: RGBA64) -> "YUV":
        r, g, b, a = _straight(pixel)
        return cls(*convert.rgb_to_yuv(r, g, b), a)


@register("YIQ")
@define
class YIQ(ColorModel):
    """NTSC luma with in-phase and quadrature chrominance."""

    META = ModelMeta(
        "YIQ",
        "Luma, in-phase and quadrature (NTSC).",
        [
            ChannelMeta("Y", 0, 1, "", "Luminance."),
            ChannelMeta("I", -0.5957, 0.5957, "", "In-phase."),
            ChannelMeta("Q", -0.5226, 0.5226, "", "Quadrature."),
            _ALPHA,
        ],
    )

    y: float = field(default=0.0, converter=_float)
    i: float = field(default=0.0, converter=_float)
    q: float = field(default=0.0, converter=_float)
    alpha: float = field(default=1.0, converter=_float)

    def to_rgba64(self) -> RGBA64:
        return RGBA64(*convert.yiq_to_rgb(self.y, self.i, self.q), self.alpha)

    @classmethod
    def from_rgba64(cls, pixel: RGBA64) -> "YIQ":
        r, g, b, a = _straight(pixel)
        return cls(*convert.rgb_to_yiq(r, g, b), a)


@register("YCbCr")
@define
class YCbCr(ColorModel):
    """Full range BT.601 YCbCr as used by JPEG."""

    META = ModelMeta(
        "YCbCr",
        "Luma with blue and red difference chroma (BT.601, full range).",
        [
            ChannelMeta("Y", 0, 1, "", "Luminance."),
            ChannelMeta("Cb", -0.5, 0.5, "", "Blue chrominance."),
            ChannelMeta("Cr", -0.5, 0.5, "", "Red chrominance."),
            _ALPHA,
        ],
    )

    y: float = field(default=0.0, converter=_float)
    cb: float = field(default=0.0, converter=_float)
    cr: float = field(default=0.0, converter=_float)
    alpha: float = field(default=1.0, converter=_float)

    def to_rgba64(self) -> RGBA64:
        return RGBA64(*convert.ycbcr_to_rgb(self.y, self.cb, self.cr), self.alpha)

    @classmethod
    def from_rgba64(cls, pixel: RGBA64) -> "YCbCr":
        r, g, b, a = _straight(pixel)
        return cls(*convert.rgb_to_ycbcr(r, g, b), a)


def gray_value(r, g, b, method: GrayscaleMethod = GrayscaleMethod.LUMINANCE):
    """
    Reduce RGB to a single intensity.

    :param method: One of :py:class:`~pixelcomp.constants.GrayscaleMethod`.
    """
    method = GrayscaleMethod(method)
    if method == GrayscaleMethod.LUMINANCE:
        return convert.luminance(r, g, b, convert.BT601)
    if method == GrayscaleMethod.LUMINOSITY:
        return convert.luminance(r, g, b, convert.BT709)
    if method == GrayscaleMethod.AVERAGE:
        return (np.asarray(r, dtype=np.float64) + g + b) / 3.0
    return convert.rgb_to_hsl(r, g, b)[2]


@register("Grayscale")
@define
class Grayscale(ColorModel):
    """Single intensity channel."""

    META = ModelMeta(
        "Grayscale",
        "Single channel intensity.",
        [ChannelMeta("Gray", 0, 1, "", "Grayscale intensity."), _ALPHA],
    )

    gray: float = field(default=0.0, converter=_float)
    alpha: float = field(default=1.0, converter=_float)

    def to_rgba64(self) -> RGBA64:
        return RGBA64(self.gray, self.gray, self.gray, self.alpha)

    @classmethod
    def from_rgba64(
        cls, pixel: RGBA64, method: GrayscaleMethod = GrayscaleMethod.LUMINANCE
    ) -> "Grayscale":
        r, g, b, a = _straight(pixel)
        return cls(gray_value(r, g, b, method), a)


_HEX_PATTERN = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


def _normalize_hex(value: Any) -> str:
    if isinstance(value, int):
        if not 0 <= value <= 0xFFFFFF:
            raise InvalidArgument("hex value out of range: %r" % value)
        return "#%06X" % value
    match = _HEX_PATTERN.match(str(value).strip())
    if match is None:
        raise InvalidArgument("malformed hex color: %r" % (value,))
    digits = match.group(1)
    if len(digits) == 3:
        digits = "".join(c * 2 for c in digits)
    return "#" + digits.upper()


@register("Hex")
@define
class Hex(ColorModel):
    """``#RRGGBB`` string with a separate alpha."""

    META = ModelMeta(
        "Hex",
        "Hexadecimal #RRGGBB notation.",
        [
            ChannelMeta("Hex", 0, 0xFFFFFF, "", "Hexadecimal color value."),
            _ALPHA,
        ],
    )

    value: str = field(default="#000000", converter=_normalize_hex)
    alpha: float = field(default=1.0, converter=_float)

    @classmethod
    def from_values(cls, values: Sequence[Any]) -> "Hex":
        values = tuple(values)
        if len(values) != 2:
            raise InvalidArgument("Hex expects 2 values, got %d" % len(values))
        _ALPHA.validate(values[1])
        return cls(*values)

    def to_rgba64(self) -> RGBA64:
        packed = int(self.value[1:], 16)
        return RGBA64(
            ((packed >> 16) & 0xFF) / 255.0,
            ((packed >> 8) & 0xFF) / 255.0,
            (packed & 0xFF) / 255.0,
            self.alpha,
        )

    @classmethod
    def from_rgba64(cls, pixel: RGBA64) -> "Hex":
        r, g, b, a = _straight(pixel)
        channels = [int(round(min(1.0, max(0.0, c)) * 255)) for c in (r, g, b)]
        return cls("#%02X%02X%02X" % tuple(channels), a)


def from_hex(text: str) -> RGBA64:
    """Parse ``#RRGGBB`` or ``#RGB`` into an opaque pixel."""
    return Hex(text).to_rgba64()


def to_hex(pixel: RGBA64) -> str:
    """Format a pixel as uppercase ``#RRGGBB``; alpha is dropped."""
    return Hex.from_rgba64(pixel).value


_WAVELENGTH = ChannelMeta(
    "λ", WAVELENGTH_MIN, WAVELENGTH_MAX, "nm", "Wavelength in nanometers."
)


@register("LSB")
@define
class LSB(ColorModel):
    """Dominant wavelength with HSB saturation and brightness."""

    META = ModelMeta(
        "LSB",
        "Wavelength, saturation and brightness.",
        [
            _WAVELENGTH,
            ChannelMeta("S", 0, 1, "", "Saturation."),
            ChannelMeta("B", 0, 1, "", "Brightness."),
            _ALPHA,
        ],
    )

    wavelength: float = field(default=WAVELENGTH_MIN, converter=_float)
    s: float = field(default=0.0, converter=_float)
    b: float = field(default=0.0, converter=_float)
    alpha: float = field(default=1.0, converter=_float)

    def to_rgba64(self) -> RGBA64:
        h = convert.wavelength_to_hue(self.wavelength)
        return RGBA64(*convert.hsb_to_rgb(h, self.s, self.b), self.alpha)

    @classmethod
    def from_rgba64(cls, pixel: RGBA64) -> "LSB":
        r, g, b, a = _straight(pixel)
        h, s, v = (float(c) for c in convert.rgb_to_hsb(r, g, b))
        if s < EPSILON:
            return cls(WAVELENGTH_MIN, s, v, a)
        return cls(convert.hue_to_wavelength(h), s, v, a)


@register("LSL")
@define
class LSL(ColorModel):
    """Dominant wavelength with HSL saturation and lightness."""

    META = ModelMeta(
        "LSL",
        "Wavelength, saturation and lightness.",
        [
            _WAVELENGTH,
            ChannelMeta("S", 0, 1, "", "Saturation."),
            ChannelMeta("L", 0, 1, "", "Lightness."),
            _ALPHA,
        ],
    )

    wavelength: float = field(default=WAVELENGTH_MIN, converter=_float)
    s: float = field(default=0.0, converter=_float)
    l: float = field(default=0.0, converter=_float)  # noqa: E741
    alpha: float = field(default=1.0, converter=_float)

    def to_rgba64(self) -> RGBA64:
        h = convert.wavelength_to_hue(self.wavelength)
        return RGBA64(*convert.hsl_to_rgb(h, self.s, self.l), self.alpha)

    @classmethod
    def from_rgba64(cls, pixel: RGBA64) -> "LSL":
        r, g, b, a = _straight(pixel)
        h, s, l = (float(c) for c in convert.rgb_to_hsl(r, g, b))
        if s < EPSILON:
            return cls(WAVELENGTH_MIN, s, l, a)
        return cls(convert.hue_to_wavelength(h), s, l, a)


register("RGBA64")(RGBA64)


def get_model(name: str) -> Any:
    """
    Look up a color model class by its canonical name.

    :raises InvalidArgument: If the name is unknown.
    """
    return MODELS.get(name)


def list_models() -> list:
    return MODELS.names()


def register_model(model: Any) -> Any:
    """
    Register an additional model class under ``model.META.name``.

    :raises DuplicateRegistration: If the name is taken.
    """
    return register(model.META.name)(model)


def convert_color(color: Any, target: str) -> Any:
    """Convert a model instance (or canonical pixel) into the named model."""
    if color is None:
        raise InvalidArgument("color must not be None")
    return get_model(target).from_rgba64(color.to_rgba64())
