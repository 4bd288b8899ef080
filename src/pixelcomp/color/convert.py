"""
Color space conversion kernels.

Every function here is written against numpy so the same code converts a
single color (python floats) and a whole image plane (``ndarray``). Inputs are
channel values, outputs are tuples of channel values; the caller decides
whether to stack them.

RGB inputs and outputs are sRGB encoded and unpremultiplied unless a function
name says otherwise. Hue angles are in degrees, in ``[0, 360)``.
"""

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pixelcomp.constants import (
    EPSILON,
    LAB_EPSILON,
    LAB_KAPPA,
    SRGB_DECODE_THRESHOLD,
    SRGB_ENCODE_THRESHOLD,
    SRGB_GAMMA,
    SRGB_LINEAR_SCALE,
    SRGB_OFFSET,
    SRGB_SCALE,
    WAVELENGTH_MAX,
    WAVELENGTH_MIN,
    WHITE_X,
    WHITE_Y,
    WHITE_Z,
)

RGB_TO_XYZ = np.array(
    [
        [0.4124564, 0.3575761, 0.1804375],
        [0.2126729, 0.7151522, 0.0721750],
        [0.0193339, 0.1191920, 0.9503041],
    ]
)

XYZ_TO_RGB = np.array(
    [
        [3.2404542, -1.5371385, -0.4985314],
        [-0.9692660, 1.8760108, 0.0415560],
        [0.0556434, -0.2040259, 1.0572252],
    ]
)

# BT.601 luma/chroma matrices. The inverses are derived so that a forward and
# backward pass is exact up to float rounding.
RGB_TO_YUV = np.array(
    [
        [0.299, 0.587, 0.114],
        [-0.14713, -0.28886, 0.436],
        [0.615, -0.51499, -0.10001],
    ]
)
YUV_TO_RGB = np.linalg.inv(RGB_TO_YUV)

RGB_TO_YIQ = np.array(
    [
        [0.299, 0.587, 0.114],
        [0.596, -0.275, -0.321],
        [0.212, -0.523, 0.311],
    ]
)
YIQ_TO_RGB = np.linalg.inv(RGB_TO_YIQ)

RGB_TO_YCBCR = np.array(
    [
        [0.299, 0.587, 0.114],
        [-0.168736, -0.331264, 0.5],
        [0.5, -0.418688, -0.081312],
    ]
)
YCBCR_TO_RGB = np.linalg.inv(RGB_TO_YCBCR)

# Grayscale weights.
BT601 = (0.299, 0.587, 0.114)
BT709 = (0.2126, 0.7152, 0.0722)

# Hue anchors of the wavelength mapping. Hue 0..300 runs from deep red down to
# violet; the non-spectral magentas above 300 fold onto the far red end.
_HUE_ANCHORS = np.array([0.0, 60.0, 120.0, 180.0, 240.0, 300.0])
_WAVELENGTH_ANCHORS = np.array([700.0, 590.0, 530.0, 495.0, 450.0, WAVELENGTH_MIN])
_RED_EDGE = 700.0


def _asarray(x: ArrayLike) -> NDArray[np.float64]:
    return np.asarray(x, dtype=np.float64)


def _matmul(matrix: NDArray, a: ArrayLike, b: ArrayLike, c: ArrayLike) -> tuple:
    a, b, c = _asarray(a), _asarray(b), _asarray(c)
    return tuple(m[0] * a + m[1] * b + m[2] * c for m in matrix)


def srgb_to_linear(c: ArrayLike) -> NDArray[np.float64]:
    """Decode sRGB values into linear light."""
    c = _asarray(c)
    return np.where(
        c <= SRGB_DECODE_THRESHOLD,
        c / SRGB_LINEAR_SCALE,
        ((np.maximum(c, 0.0) + SRGB_OFFSET) / SRGB_SCALE) ** SRGB_GAMMA,
    )


def linear_to_srgb(c: ArrayLike) -> NDArray[np.float64]:
    """Encode linear light values as sRGB."""
    c = _asarray(c)
    return np.where(
        c <= SRGB_ENCODE_THRESHOLD,
        c * SRGB_LINEAR_SCALE,
        SRGB_SCALE * np.maximum(c, 0.0) ** (1.0 / SRGB_GAMMA) - SRGB_OFFSET,
    )


def _hue(r, g, b, cmax, delta):
    with np.errstate(divide="ignore", invalid="ignore"):
        h = np.where(
            cmax == r,
            np.mod((g - b) / delta, 6.0),
            np.where(cmax == g, (b - r) / delta + 2.0, (r - g) / delta + 4.0),
        )
    h = np.where(delta < EPSILON, 0.0, h * 60.0)
    return np.mod(h, 360.0)


def _sector(h, c, x, m):
    h = np.mod(_asarray(h), 360.0) / 60.0
    sector = np.clip(np.floor(h).astype(int), 0, 5)
    zero = np.zeros_like(c)
    r = np.choose(sector, [c, x, zero, zero, x, c])
    g = np.choose(sector, [x, c, c, x, zero, zero])
    b = np.choose(sector, [zero, zero, x, c, c, x])
    return r + m, g + m, b + m


def rgb_to_hsl(r: ArrayLike, g: ArrayLike, b: ArrayLike) -> tuple:
    """RGB to (hue, saturation, lightness). Gray colors get hue 0."""
    r, g, b = _asarray(r), _asarray(g), _asarray(b)
    cmax = np.maximum(np.maximum(r, g), b)
    cmin = np.minimum(np.minimum(r, g), b)
    delta = cmax - cmin
    l = (cmax + cmin) / 2.0
    with np.errstate(divide="ignore", invalid="ignore"):
        s = np.where(
            l > 0.5, delta / (2.0 - cmax - cmin), delta / (cmax + cmin)
        )
    s = np.where(delta < EPSILON, 0.0, s)
    return _hue(r, g, b, cmax, delta), s, l


def hsl_to_rgb(h: ArrayLike, s: ArrayLike, l: ArrayLike) -> tuple:
    """(hue, saturation, lightness) to RGB."""
    s, l = _asarray(s), _asarray(l)
    c = (1.0 - np.abs(2.0 * l - 1.0)) * s
    hp = np.mod(_asarray(h), 360.0) / 60.0
    x = c * (1.0 - np.abs(np.mod(hp, 2.0) - 1.0))
    return _sector(h, c, x, l - c / 2.0)


def rgb_to_hsb(r: ArrayLike, g: ArrayLike, b: ArrayLike) -> tuple:
    """RGB to (hue, saturation, brightness)."""
    r, g, b = _asarray(r), _asarray(g), _asarray(b)
    cmax = np.maximum(np.maximum(r, g), b)
    cmin = np.minimum(np.minimum(r, g), b)
    delta = cmax - cmin
    with np.errstate(divide="ignore", invalid="ignore"):
        s = np.where(cmax < EPSILON, 0.0, delta / cmax)
    s = np.where(delta < EPSILON, 0.0, s)
    return _hue(r, g, b, cmax, delta), s, cmax


def hsb_to_rgb(h: ArrayLike, s: ArrayLike, v: ArrayLike) -> tuple:
    """(hue, saturation, brightness) to RGB."""
    s, v = _asarray(s), _asarray(v)
    c = v * s
    hp = np.mod(_asarray(h), 360.0) / 60.0
    x = c * (1.0 - np.abs(np.mod(hp, 2.0) - 1.0))
    return _sector(h, c, x, v - c)


def rgb_to_xyz(r: ArrayLike, g: ArrayLike, b: ArrayLike) -> tuple:
    """sRGB to CIE XYZ (D65)."""
    return _matmul(RGB_TO_XYZ, srgb_to_linear(r), srgb_to_linear(g), srgb_to_linear(b))


def xyz_to_rgb(x: ArrayLike, y: ArrayLike, z: ArrayLike) -> tuple:
    """CIE XYZ (D65) to sRGB."""
    return tuple(linear_to_srgb(c) for c in _matmul(XYZ_TO_RGB, x, y, z))


def _lab_f(t):
    return np.where(t > LAB_EPSILON, np.cbrt(t), (LAB_KAPPA * t + 16.0) / 116.0)


def _lab_f_inv(f):
    f3 = f**3
    return np.where(f3 > LAB_EPSILON, f3, (116.0 * f - 16.0) / LAB_KAPPA)


def xyz_to_lab(x: ArrayLike, y: ArrayLike, z: ArrayLike) -> tuple:
    fx = _lab_f(_asarray(x) / WHITE_X)
    fy = _lab_f(_asarray(y) / WHITE_Y)
    fz = _lab_f(_asarray(z) / WHITE_Z)
    return 116.0 * fy - 16.0, 500.0 * (fx - fy), 200.0 * (fy - fz)


def lab_to_xyz(l: ArrayLike, a: ArrayLike, b: ArrayLike) -> tuple:
    l = _asarray(l)
    fy = (l + 16.0) / 116.0
    fx = fy + _asarray(a) / 500.0
    fz = fy - _asarray(b) / 200.0
    yr = np.where(l > LAB_KAPPA * LAB_EPSILON, fy**3, l / LAB_KAPPA)
    return _lab_f_inv(fx) * WHITE_X, yr * WHITE_Y, _lab_f_inv(fz) * WHITE_Z


def rgb_to_lab(r: ArrayLike, g: ArrayLike, b: ArrayLike) -> tuple:
    """sRGB to CIE L*a*b* (D65)."""
    return xyz_to_lab(*rgb_to_xyz(r, g, b))


def lab_to_rgb(l: ArrayLike, a: ArrayLike, b: ArrayLike) -> tuple:
    """CIE L*a*b* (D65) to sRGB."""
    return xyz_to_rgb(*lab_to_xyz(l, a, b))


def lab_to_lch(l: ArrayLike, a: ArrayLike, b: ArrayLike) -> tuple:
    """Polar form of LAB. Hue is canonicalized to 0 when chroma vanishes."""
    a, b = _asarray(a), _asarray(b)
    c = np.hypot(a, b)
    h = np.mod(np.degrees(np.arctan2(b, a)), 360.0)
    return _asarray(l), c, np.where(c < EPSILON, 0.0, h)


def lch_to_lab(l: ArrayLike, c: ArrayLike, h: ArrayLike) -> tuple:
    c = _asarray(c)
    rad = np.radians(_asarray(h))
    c = np.where(c < EPSILON, 0.0, c)
    return _asarray(l), c * np.cos(rad), c * np.sin(rad)


_WHITE_DENOMINATOR = WHITE_X + 15.0 * WHITE_Y + 3.0 * WHITE_Z
_UN = 4.0 * WHITE_X / _WHITE_DENOMINATOR
_VN = 9.0 * WHITE_Y / _WHITE_DENOMINATOR


def xyz_to_luv(x: ArrayLike, y: ArrayLike, z: ArrayLike) -> tuple:
    x, y, z = _asarray(x), _asarray(y), _asarray(z)
    yr = y / WHITE_Y
    l = np.where(yr > LAB_EPSILON, 116.0 * np.cbrt(yr) - 16.0, LAB_KAPPA * yr)
    denominator = x + 15.0 * y + 3.0 * z
    with np.errstate(divide="ignore", invalid="ignore"):
        u_prime = 4.0 * x / denominator
        v_prime = 9.0 * y / denominator
    black = denominator < EPSILON
    u = np.where(black, 0.0, 13.0 * l * (u_prime - _UN))
    v = np.where(black, 0.0, 13.0 * l * (v_prime - _VN))
    return l, u, v


def luv_to_xyz(l: ArrayLike, u: ArrayLike, v: ArrayLike) -> tuple:
    l, u, v = _asarray(l), _asarray(u), _asarray(v)
    dark = l < EPSILON
    with np.errstate(divide="ignore", invalid="ignore"):
        u_prime = u / (13.0 * l) + _UN
        v_prime = v / (13.0 * l) + _VN
        y = np.where(
            l > LAB_KAPPA * LAB_EPSILON, ((l + 16.0) / 116.0) ** 3, l / LAB_KAPPA
        ) * WHITE_Y
        x = y * 9.0 * u_prime / (4.0 * v_prime)
        z = y * (12.0 - 3.0 * u_prime - 20.0 * v_prime) / (4.0 * v_prime)
    return (
        np.where(dark, 0.0, x),
        np.where(dark, 0.0, y),
        np.where(dark, 0.0, z),
    )


def rgb_to_luv(r: ArrayLike, g: ArrayLike, b: ArrayLike) -> tuple:
    """sRGB to CIE L*u*v* (D65)."""
    return xyz_to_luv(*rgb_to_xyz(r, g, b))


def luv_to_rgb(l: ArrayLike, u: ArrayLike, v: ArrayLike) -> tuple:
    """CIE L*u*v* (D65) to sRGB."""
    return xyz_to_rgb(*luv_to_xyz(l, u, v))


def rgb_to_yuv(r: ArrayLike, g: ArrayLike, b: ArrayLike) -> tuple:
    return _matmul(RGB_TO_YUV, r, g, b)


def yuv_to_rgb(y: ArrayLike, u: ArrayLike, v: ArrayLike) -> tuple:
    return _matmul(YUV_TO_RGB, y, u, v)


def rgb_to_yiq(r: ArrayLike, g: ArrayLike, b: ArrayLike) -> tuple:
    return _matmul(RGB_TO_YIQ, r, g, b)


def yiq_to_rgb(y: ArrayLike, i: ArrayLike, q: ArrayLike) -> tuple:
    return _matmul(YIQ_TO_RGB, y, i, q)


def rgb_to_ycbcr(r: ArrayLike, g: ArrayLike, b: ArrayLike) -> tuple:
    return _matmul(RGB_TO_YCBCR, r, g, b)


def ycbcr_to_rgb(y: ArrayLike, cb: ArrayLike, cr: ArrayLike) -> tuple:
    return _matmul(YCBCR_TO_RGB, y, cb, cr)


def rgb_to_cmyk(r: ArrayLike, g: ArrayLike, b: ArrayLike) -> tuple:
    """RGB to CMYK fractions in [0, 1]."""
    r, g, b = _asarray(r), _asarray(g), _asarray(b)
    k = 1.0 - np.maximum(np.maximum(r, g), b)
    with np.errstate(divide="ignore", invalid="ignore"):
        scale = np.where(k > 1.0 - EPSILON, 0.0, 1.0 / (1.0 - k))
    return (1.0 - r - k) * scale, (1.0 - g - k) * scale, (1.0 - b - k) * scale, k


def cmyk_to_rgb(c: ArrayLike, m: ArrayLike, y: ArrayLike, k: ArrayLike) -> tuple:
    k = _asarray(k)
    return tuple((1.0 - _asarray(v)) * (1.0 - k) for v in (c, m, y))


def luminance(r: ArrayLike, g: ArrayLike, b: ArrayLike, weights=BT601) -> NDArray:
    """Weighted sum of RGB channels."""
    return weights[0] * _asarray(r) + weights[1] * _asarray(g) + weights[2] * _asarray(b)


def hue_to_wavelength(h: ArrayLike) -> NDArray[np.float64]:
    """Map a hue angle onto the visible spectrum in nanometers."""
    h = np.mod(_asarray(h), 360.0)
    spectral = np.interp(h, _HUE_ANCHORS, _WAVELENGTH_ANCHORS)
    folded = WAVELENGTH_MAX - (h - 300.0) / 60.0 * (WAVELENGTH_MAX - _RED_EDGE)
    return np.where(h > 300.0, folded, spectral)


def wavelength_to_hue(w: ArrayLike) -> NDArray[np.float64]:
    """Inverse of :py:func:`hue_to_wavelength`."""
    w = np.clip(_asarray(w), WAVELENGTH_MIN, WAVELENGTH_MAX)
    spectral = np.interp(w, _WAVELENGTH_ANCHORS[::-1], _HUE_ANCHORS[::-1])
    folded = 300.0 + (WAVELENGTH_MAX - w) / (WAVELENGTH_MAX - _RED_EDGE) * 60.0
    return np.mod(np.where(w > _RED_EDGE, folded, spectral), 360.0)
