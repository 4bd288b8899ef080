"""
Spatial filters built on :py:mod:`scipy.ndimage`.

Blurring works on premultiplied values so that transparent neighbors do not
bleed their (black) color. Convolution kernels work on straight color and keep
the source alpha.
"""

import logging

import numpy as np
from numpy.typing import NDArray

from pixelcomp._compat import require_scipy
from pixelcomp.color.convert import BT601, luminance
from pixelcomp.errors import InvalidArgument
from pixelcomp.filters.color import amount, map_rgb
from pixelcomp.filters.registry import FilterArg, register
from pixelcomp.image.buffer import Image

logger = logging.getLogger(__name__)

SHARPEN = np.array([[0, -1, 0], [-1, 5, -1], [0, -1, 0]], dtype=np.float64)
EMBOSS = np.array([[-2, -1, 0], [-1, 1, 1], [0, 1, 2]], dtype=np.float64)


def _convolve(rgb: NDArray, kernel: NDArray) -> NDArray:
    from scipy import ndimage

    return np.stack(
        [ndimage.convolve(rgb[..., c], kernel, mode="nearest") for c in range(3)],
        axis=-1,
    )


@register(
    "blur",
    "Gaussian blur.",
    [
        FilterArg(
            "radius",
            "float",
            default=1.0,
            min=0.0,
            max=100.0,
            step=0.5,
            description="Blur radius in pixels; sigma is half of it.",
        )
    ],
)
@require_scipy
def blur(image: Image, radius: float) -> Image:
    from scipy import ndimage

    array = image.numpy(premultiplied=True)
    if radius > 0:
        array = ndimage.gaussian_filter(
            array, sigma=(radius / 2.0, radius / 2.0, 0), mode="nearest"
        )
    return Image.fromarray(array, premultiplied=True, metadata=image.metadata.derive())


@register("sharpen", "Sharpens edges.", [amount(1.0, 0.0, 1.0)])
@require_scipy
def sharpen(image: Image, amount: float) -> Image:
    return map_rgb(image, lambda rgb: rgb + (_convolve(rgb, SHARPEN) - rgb) * amount)


@register(
    "enhance",
    "Unsharp mask: adds the difference to a blurred copy.",
    [amount(0.5, 0.0, 5.0)],
)
@require_scipy
def enhance(image: Image, amount: float) -> Image:
    from scipy import ndimage

    def _fn(rgb):
        blurred = ndimage.gaussian_filter(rgb, sigma=(1.0, 1.0, 0), mode="nearest")
        return rgb + (rgb - blurred) * amount

    return map_rgb(image, _fn)


@register("emboss", "Relief effect.", [amount(1.0, 0.0, 1.0)])
@require_scipy
def emboss(image: Image, amount: float) -> Image:
    return map_rgb(image, lambda rgb: rgb + (_convolve(rgb, EMBOSS) - rgb) * amount)


@register(
    "edge_detect",
    "Sobel edge detection: white edges on black.",
    [amount(0.1, 0.0, 1.0, "Minimum gradient magnitude of an edge.")],
)
@require_scipy
def edge_detect(image: Image, amount: float) -> Image:
    from scipy import ndimage

    def _fn(rgb):
        gray = luminance(rgb[..., 0], rgb[..., 1], rgb[..., 2], BT601)
        gx = ndimage.sobel(gray, axis=1, mode="nearest")
        gy = ndimage.sobel(gray, axis=0, mode="nearest")
        # Sobel responses reach 4 for a unit step.
        magnitude = np.hypot(gx, gy) / 4.0
        edges = np.where(magnitude > amount, 1.0, 0.0)
        return np.repeat(edges[..., np.newaxis], 3, axis=-1)

    return map_rgb(image, _fn)


@register(
    "convolution",
    "Convolves the color channels with a custom kernel.",
    [
        FilterArg(
            "matrix",
            "matrix",
            required=True,
            description="Kernel rows, e.g. [[0, -1, 0], [-1, 5, -1], [0, -1, 0]].",
        ),
        FilterArg(
            "divisor",
            "float",
            default=1.0,
            description="The result is divided by this value.",
        ),
        FilterArg(
            "offset",
            "float",
            default=0.0,
            min=-1.0,
            max=1.0,
            step=0.01,
            description="Added after division.",
        ),
    ],
)
@require_scipy
def convolution(image: Image, matrix: NDArray, divisor: float, offset: float) -> Image:
    if divisor == 0:
        raise InvalidArgument("divisor must not be zero")
    return map_rgb(image, lambda rgb: _convolve(rgb, matrix) / divisor + offset)
