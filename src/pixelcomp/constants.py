"""
Various constants for pixelcomp
"""
from enum import Enum

#: General floating point tolerance.
EPSILON = 1e-10

#: Tolerance used when comparing alpha values.
ALPHA_EPSILON = 1e-8

#: Top alpha below which a blend returns the bottom pixel unchanged.
TRANSPARENT_THRESHOLD = 1e-4

#: Added to scaled channels before truncating to 8 or 16 bits, so that exact
#: integer levels survive float error.
QUANTIZE_SLACK = 1e-6

# sRGB transfer function.
SRGB_DECODE_THRESHOLD = 0.04045
SRGB_ENCODE_THRESHOLD = 0.0031308
SRGB_LINEAR_SCALE = 12.92
SRGB_GAMMA = 2.4
SRGB_OFFSET = 0.055
SRGB_SCALE = 1.055

# D65 reference white.
WHITE_X = 0.95047
WHITE_Y = 1.0
WHITE_Z = 1.08883

# CIE constants.
LAB_EPSILON = 216.0 / 24389.0
LAB_KAPPA = 24389.0 / 27.0

# Visible spectrum in nanometers.
WAVELENGTH_MIN = 380.0
WAVELENGTH_MAX = 750.0

#: Default JPEG quality.
JPEG_QUALITY = 90

# Bitmap font cell geometry.
CHAR_WIDTH = 6
CHAR_HEIGHT = 8
SPRITESHEET_COLUMNS = 16


class BlendCategory(str, Enum):
    """
    Blend mode categories.
    """
    BASIC = "basic"
    DARKEN = "darken"
    LIGHTEN = "lighten"
    CONTRAST = "contrast"
    COMPARATIVE = "comparative"
    COMPONENT = "component"
    SPECIAL = "special"


class ResizeMethod(str, Enum):
    """
    Resampling methods.
    """
    NEAREST = "nearest"
    BILINEAR = "bilinear"
    BICUBIC = "bicubic"
    LANCZOS = "lanczos"


class ArgType(str, Enum):
    """
    Filter argument types.
    """
    FLOAT = "float"
    INT = "int"
    STRING = "string"
    CHOICE = "choice"
    MATRIX = "matrix"


class GrayscaleMethod(str, Enum):
    """
    Luminance weighting used by the grayscale model.
    """
    LUMINANCE = "luminance"
    AVERAGE = "average"
    LIGHTNESS = "lightness"
    LUMINOSITY = "luminosity"


class ImageFormat(str, Enum):
    """
    Encodable file formats.
    """
    PNG = "png"
    JPEG = "jpeg"

    @staticmethod
    def from_extension(ext):
        return {
            ".png": ImageFormat.PNG,
            ".jpg": ImageFormat.JPEG,
            ".jpeg": ImageFormat.JPEG,
        }.get(ext.lower())
