"""
Color subsystem.

- :py:mod:`pixelcomp.color.rgba64`: the canonical pixel
- :py:mod:`pixelcomp.color.convert`: numpy conversion kernels
- :py:mod:`pixelcomp.color.models`: color models and their registry
"""

from pixelcomp.color.manipulate import (
    darken,
    desaturate,
    distance,
    is_similar,
    lighten,
    mix,
    rotate_hue,
    saturate,
)
from pixelcomp.color.meta import ChannelMeta, ModelMeta
from pixelcomp.color.models import (
    CMY,
    CMYK,
    HCL,
    HSB,
    HSL,
    LAB,
    LCH,
    LSB,
    LSL,
    LUV,
    MODELS,
    RGB8,
    RGBA16,
    RGBA32,
    XYZ,
    YIQ,
    YUV,
    ColorModel,
    Grayscale,
    Hex,
    YCbCr,
    convert_color,
    from_hex,
    get_model,
    list_models,
    register_model,
    to_hex,
)
from pixelcomp.color.parse import MATERIAL_DESIGN, WEB_SAFE, Palette, parse_color
from pixelcomp.color.rgba64 import RGBA64

__all__ = [
    "RGBA64",
    "ChannelMeta",
    "ModelMeta",
    "ColorModel",
    "MODELS",
    "RGB8",
    "RGBA16",
    "RGBA32",
    "HSL",
    "HSB",
    "CMY",
    "CMYK",
    "LAB",
    "LCH",
    "HCL",
    "LUV",
    "XYZ",
    "YUV",
    "YIQ",
    "YCbCr",
    "Grayscale",
    "Hex",
    "LSB",
    "LSL",
    "get_model",
    "list_models",
    "register_model",
    "convert_color",
    "from_hex",
    "to_hex",
    "parse_color",
    "Palette",
    "WEB_SAFE",
    "MATERIAL_DESIGN",
    "lighten",
    "darken",
    "saturate",
    "desaturate",
    "rotate_hue",
    "mix",
    "distance",
    "is_similar",
]
