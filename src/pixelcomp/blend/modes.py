"""
Blend mode implementations.

Each function takes the backdrop color ``Cb`` and the source color ``Cs`` as
float arrays of shape ``(..., 3)`` holding unpremultiplied values in [0, 1]
and returns the mixed color ``B(Cb, Cs)``. Alpha is handled uniformly by
:py:mod:`pixelcomp.blend.composite`.

Every mode works on the stored sRGB values; nothing is converted to linear
light first. Component modes (hue, saturation, color, luminosity) use HSL
derived from those sRGB values, and the special modes (reflect, glow,
average, negation) mix the sRGB values directly.
"""

import logging

import numpy as np

from pixelcomp.blend.composite import destination_out
from pixelcomp.blend.registry import register
from pixelcomp.color.convert import BT709, hsl_to_rgb, luminance, rgb_to_hsl
from pixelcomp.constants import EPSILON, BlendCategory

logger = logging.getLogger(__name__)


# Basic
@register("normal", "Places the top color over the bottom color.", BlendCategory.BASIC)
def normal(Cb, Cs):
    return Cs


@register(
    "erase",
    "Removes the bottom color where the top color is opaque.",
    BlendCategory.BASIC,
    operator=destination_out,
)
def erase(Cb, Cs):
    return Cb


# Darken
@register("darken", "Keeps the darker of both colors.", BlendCategory.DARKEN)
def darken(Cb, Cs):
    return np.minimum(Cb, Cs)


@register("multiply", "Multiplies both colors.", BlendCategory.DARKEN)
def multiply(Cb, Cs):
    return Cb * Cs


@register(
    "colorburn",
    "Darkens the bottom color by increasing the contrast.",
    BlendCategory.DARKEN,
)
def color_burn(Cb, Cs):
    B = 1.0 - (1.0 - Cb) / Cs
    return np.where(Cs <= 0.0, 0.0, np.maximum(0.0, B))


@register(
    "linearburn",
    "Darkens the bottom color by decreasing the brightness.",
    BlendCategory.DARKEN,
)
def linear_burn(Cb, Cs):
    return np.maximum(0.0, Cb + Cs - 1.0)


@register(
    "darkercolor",
    "Keeps the color with the lower luminance.",
    BlendCategory.DARKEN,
)
def darker_color(Cb, Cs):
    index = _lum(Cs) < _lum(Cb)
    return np.where(index, Cs, Cb)


# Lighten
@register("lighten", "Keeps the lighter of both colors.", BlendCategory.LIGHTEN)
def lighten(Cb, Cs):
    return np.maximum(Cb, Cs)


@register(
    "screen",
    "Multiplies the inverse of both colors, resulting in a lighter color.",
    BlendCategory.LIGHTEN,
)
def screen(Cb, Cs):
    return Cb + Cs - (Cb * Cs)


@register(
    "colordodge",
    "Brightens the bottom color by decreasing the contrast.",
    BlendCategory.LIGHTEN,
)
def color_dodge(Cb, Cs):
    B = Cb / (1.0 - Cs)
    return np.where(Cs >= 1.0, 1.0, np.minimum(1.0, B))


@register("add", "Adds both colors (linear dodge).", BlendCategory.LIGHTEN)
def linear_dodge(Cb, Cs):
    return np.minimum(1.0, Cb + Cs)


@register(
    "lightercolor",
    "Keeps the color with the higher luminance.",
    BlendCategory.LIGHTEN,
)
def lighter_color(Cb, Cs):
    index = _lum(Cs) > _lum(Cb)
    return np.where(index, Cs, Cb)


# Contrast
@register(
    "overlay",
    "Multiplies or screens depending on the bottom color.",
    BlendCategory.CONTRAST,
)
def overlay(Cb, Cs):
    return hard_light(Cs, Cb)


@register(
    "softlight",
    "Darkens or lightens depending on the top color, like a diffused spotlight.",
    BlendCategory.CONTRAST,
)
def soft_light(Cb, Cs):
    dark = Cb - (1.0 - 2.0 * Cs) * Cb * (1.0 - Cb)
    light = Cb + (2.0 * Cs - 1.0) * (np.sqrt(np.maximum(Cb, 0.0)) - Cb)
    return np.where(Cs <= 0.5, dark, light)


@register(
    "hardlight",
    "Multiplies or screens depending on the top color.",
    BlendCategory.CONTRAST,
)
def hard_light(Cb, Cs):
    return np.where(Cs <= 0.5, 2.0 * Cb * Cs, 1.0 - 2.0 * (1.0 - Cb) * (1.0 - Cs))


@register(
    "vividlight",
    """
    Burns or dodges the colors by increasing or decreasing the contrast,
    depending on the top color.
    """.strip(),
    BlendCategory.CONTRAST,
)
def vivid_light(Cb, Cs):
    """
    Burns or dodges the colors by increasing or decreasing the contrast,
    depending on the blend color. If the blend color (light source) is lighter
    than 50% gray, the image is lightened by decreasing the contrast. If the
    blend color is darker than 50% gray, the image is darkened by increasing
    the contrast.
    """
    return np.where(
        Cs <= 0.5, color_burn(Cb, 2.0 * Cs), color_dodge(Cb, 2.0 * (Cs - 0.5))
    )


@register(
    "linearlight",
    "Burns or dodges the colors by changing the brightness.",
    BlendCategory.CONTRAST,
)
def linear_light(Cb, Cs):
    """
    Burns or dodges the colors by decreasing or increasing the brightness,
    depending on the blend color. If the blend color (light source) is lighter
    than 50% gray, the image is lightened by increasing the brightness. If the
    blend color is darker than 50% gray, the image is darkened by decreasing
    the brightness.
    """
    return np.where(
        Cs <= 0.5,
        np.maximum(0.0, Cb + 2.0 * Cs - 1.0),
        np.minimum(1.0, Cb + 2.0 * (Cs - 0.5)),
    )


@register(
    "pinlight",
    "Replaces colors depending on the brightness of the top color.",
    BlendCategory.CONTRAST,
)
def pin_light(Cb, Cs):
    """
    Replaces the colors, depending on the blend color. If the blend color
    (light source) is lighter than 50% gray, pixels darker than the blend color
    are replaced, and pixels lighter than the blend color do not change. If the
    blend color is darker than 50% gray, pixels lighter than the blend color
    are replaced, and pixels darker than the blend color do not change.
    """
    return np.where(
        Cs <= 0.5, np.minimum(Cb, 2.0 * Cs), np.maximum(Cb, 2.0 * Cs - 1.0)
    )


@register(
    "hardmix",
    "Posterizes each channel to 0 or 1 based on the sum of both colors.",
    BlendCategory.CONTRAST,
)
def hard_mix(Cb, Cs):
    """
    Adds the channel values of the blend color to the base color. If the sum
    for a channel exceeds 1 it receives 1, otherwise 0. All blended pixels
    therefore end up as primary additive colors, white or black.
    """
    return np.where(Cb + Cs > 1.0, 1.0, 0.0)


# Comparative
@register(
    "difference",
    "Absolute difference of both colors.",
    BlendCategory.COMPARATIVE,
)
def difference(Cb, Cs):
    return np.abs(Cb - Cs)


@register(
    "exclusion",
    "Like difference but with lower contrast.",
    BlendCategory.COMPARATIVE,
)
def exclusion(Cb, Cs):
    return Cb + Cs - 2.0 * Cb * Cs


@register(
    "subtract",
    "Subtracts the top color from the bottom color.",
    BlendCategory.COMPARATIVE,
)
def subtract(Cb, Cs):
    return np.maximum(0.0, Cb - Cs)


@register(
    "divide",
    "Divides the bottom color by the top color.",
    BlendCategory.COMPARATIVE,
)
def divide(Cb, Cs):
    """
    Looks at the color information in each channel and divides the blend color
    from the base color.
    """
    B = Cb / Cs
    return np.where(Cs <= 0.0, 1.0, np.minimum(1.0, B))


@register(
    "negation",
    "Inverted difference of the inverted sum.",
    BlendCategory.COMPARATIVE,
)
def negation(Cb, Cs):
    return 1.0 - np.abs(1.0 - Cb - Cs)


@register(
    "contrastnegate",
    "Difference shifted towards mid gray.",
    BlendCategory.COMPARATIVE,
)
def contrast_negate(Cb, Cs):
    return np.minimum(1.0, np.abs(Cb - Cs) + 0.5)


# Component modes work on HSL triples of the whole sRGB color.
def _hsl(C):
    return rgb_to_hsl(C[..., 0], C[..., 1], C[..., 2])


def _rgb(h, s, l):
    return np.stack(hsl_to_rgb(h, s, l), axis=-1)


@register(
    "hue",
    "Hue of the top color with saturation and lightness of the bottom color.",
    BlendCategory.COMPONENT,
)
def hue(Cb, Cs):
    hb, sb, lb = _hsl(Cb)
    hs, _, _ = _hsl(Cs)
    gray = (sb < EPSILON)[..., None]
    return np.where(gray, Cs, _rgb(hs, sb, lb))


@register(
    "saturation",
    "Saturation of the top color with hue and lightness of the bottom color.",
    BlendCategory.COMPONENT,
)
def saturation(Cb, Cs):
    hb, sb, lb = _hsl(Cb)
    _, ss, _ = _hsl(Cs)
    gray = (sb < EPSILON)[..., None]
    return np.where(gray, Cs, _rgb(hb, ss, lb))


@register(
    "color",
    "Hue and saturation of the bottom color with lightness of the top color.",
    BlendCategory.COMPONENT,
)
def color(Cb, Cs):
    hb, sb, _ = _hsl(Cb)
    _, _, ls = _hsl(Cs)
    return _rgb(hb, sb, ls)


@register(
    "luminosity",
    "Lightness of the top color with hue and saturation of the bottom color.",
    BlendCategory.COMPONENT,
)
def luminosity(Cb, Cs):
    hb, sb, _ = _hsl(Cb)
    _, _, ls = _hsl(Cs)
    return _rgb(hb, sb, ls)


# Special, mixed in sRGB like every other mode
@register(
    "reflect",
    "Squared bottom color divided by the inverted top color.",
    BlendCategory.SPECIAL,
)
def reflect(Cb, Cs):
    B = Cb * Cb / (1.0 - Cs)
    return np.where(Cs <= 0.0, 0.0, np.where(Cs >= 1.0, 1.0, np.minimum(1.0, B)))


@register(
    "glow",
    "Reflect with the roles of both colors swapped.",
    BlendCategory.SPECIAL,
)
def glow(Cb, Cs):
    return reflect(Cs, Cb)


@register("average", "Arithmetic mean of both colors.", BlendCategory.SPECIAL)
def average(Cb, Cs):
    return (Cb + Cs) / 2.0


def _lum(C):
    return luminance(C[..., 0:1], C[..., 1:2], C[..., 2:3], BT709)
