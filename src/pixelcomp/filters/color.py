"""
Color filters.

Pixel filters read unpremultiplied sRGB values, adjust them either directly
or in HSL, and keep the source alpha.
"""

import logging
from typing import Callable, Tuple

import numpy as np
from numpy.typing import NDArray

from pixelcomp.color.convert import BT601, hsl_to_rgb, luminance, rgb_to_hsl
from pixelcomp.color.rgba64 import RGBA64
from pixelcomp.filters.registry import FilterArg, register
from pixelcomp.image.buffer import Image

logger = logging.getLogger(__name__)

#: Preview color of the hue and saturation filters.
RED = RGBA64(1.0, 0.0, 0.0, 1.0)

HSLFunction = Callable[[NDArray, NDArray, NDArray], Tuple[NDArray, NDArray, NDArray]]


def amount(
    default: float = 0.0, minimum: float = -1.0, maximum: float = 1.0, description=""
) -> FilterArg:
    return FilterArg(
        "amount",
        "float",
        default=default,
        min=minimum,
        max=maximum,
        step=0.01,
        description=description or "Strength of the effect.",
    )


def map_rgb(image: Image, fn: Callable[[NDArray], NDArray]) -> Image:
    """New image with ``fn`` applied to the straight RGB channels."""
    array = image.numpy()
    array[..., :3] = np.clip(fn(array[..., :3]), 0.0, 1.0)
    return Image.fromarray(array, metadata=image.metadata.derive())


def map_hsl(image: Image, fn: HSLFunction) -> Image:
    """New image with ``fn(h, s, l)`` applied in HSL."""

    def _apply(rgb):
        h, s, l = rgb_to_hsl(rgb[..., 0], rgb[..., 1], rgb[..., 2])  # noqa: E741
        h, s, l = fn(h, s, l)  # noqa: E741
        return np.stack(
            hsl_to_rgb(np.mod(h, 360.0), np.clip(s, 0.0, 1.0), np.clip(l, 0.0, 1.0)),
            axis=-1,
        )

    return map_rgb(image, _apply)


def _lerp(a: NDArray, b: NDArray, t: float) -> NDArray:
    return a + (b - a) * t


@register(
    "hue",
    "Rotates the hue.",
    [amount(description="Fraction of a full turn.")],
    RED,
)
def hue(image: Image, amount: float) -> Image:
    return map_hsl(image, lambda h, s, l: (h + amount * 360.0, s, l))


@register("saturation", "Scales the saturation.", [amount()], RED)
def saturation(image: Image, amount: float) -> Image:
    return map_hsl(image, lambda h, s, l: (h, s * (1.0 + amount), l))


@register(
    "saturation_contrast",
    "Pulls the saturation towards or away from 50%.",
    [amount()],
)
def saturation_contrast(image: Image, amount: float) -> Image:
    return map_hsl(image, lambda h, s, l: (h, s + (0.5 - s) * amount, l))


@register(
    "luminance",
    "Lightens towards white for positive amounts, darkens towards black otherwise.",
    [amount()],
)
def luminance_filter(image: Image, amount: float) -> Image:
    def _fn(h, s, l):  # noqa: E741
        if amount >= 0:
            return h, s, l + (1.0 - l) * amount
        return h, s, l * (1.0 + amount)

    return map_hsl(image, _fn)


@register("vibrance", "Raises the saturation towards full.", [amount()], RED)
def vibrance(image: Image, amount: float) -> Image:
    return map_hsl(image, lambda h, s, l: (h, s + (1.0 - s) * amount, l))


@register(
    "threshold",
    "Black and white by comparing the lightness with a threshold.",
    [amount(0.5, 0.0, 1.0, "Lightness threshold.")],
)
def threshold(image: Image, amount: float) -> Image:
    def _fn(h, s, l):  # noqa: E741
        return h, np.zeros_like(s), np.where(l > amount, 1.0, 0.0)

    return map_hsl(image, _fn)


@register("contrast", "Scales every channel around 50%.", [amount()])
def contrast(image: Image, amount: float) -> Image:
    return map_rgb(image, lambda rgb: (rgb - 0.5) * (1.0 + amount) + 0.5)


@register(
    "luminance_contrast",
    "Scales the lightness around 50%, keeping hue and saturation.",
    [amount()],
)
def luminance_contrast(image: Image, amount: float) -> Image:
    return map_hsl(image, lambda h, s, l: (h, s, (l - 0.5) * (1.0 + amount) + 0.5))


@register(
    "gamma",
    "Gamma correction with gamma = 1 + amount.",
    [amount(0.0, 0.0, 5.0, "Gamma minus one; 0 leaves the image unchanged.")],
)
def gamma(image: Image, amount: float) -> Image:
    return map_rgb(image, lambda rgb: np.power(rgb, 1.0 / (1.0 + amount)))


@register(
    "grayscale",
    "Blends towards the BT.601 luminance.",
    [amount(1.0, 0.0, 1.0)],
)
def grayscale(image: Image, amount: float) -> Image:
    def _fn(rgb):
        gray = luminance(rgb[..., 0], rgb[..., 1], rgb[..., 2], BT601)[..., np.newaxis]
        return _lerp(rgb, np.repeat(gray, 3, axis=-1), amount)

    return map_rgb(image, _fn)


@register("invert", "Blends towards the inverted color.", [amount(1.0, 0.0, 1.0)])
def invert(image: Image, amount: float) -> Image:
    return map_rgb(image, lambda rgb: _lerp(rgb, 1.0 - rgb, amount))


@register(
    "pastelize",
    "Lowers the saturation and raises the lightness.",
    [amount(0.5, 0.0, 1.0)],
)
def pastelize(image: Image, amount: float) -> Image:
    return map_hsl(
        image, lambda h, s, l: (h, s * (1.0 - amount), l + (1.0 - l) * amount)
    )


SEPIA = np.array(
    [
        [0.393, 0.769, 0.189],
        [0.349, 0.686, 0.168],
        [0.272, 0.534, 0.131],
    ]
)


@register("sepia", "Blends towards a sepia tone.", [amount(1.0, 0.0, 1.0)])
def sepia(image: Image, amount: float) -> Image:
    return map_rgb(image, lambda rgb: _lerp(rgb, rgb @ SEPIA.T, amount))
