"""
Alpha compositing of blended colors.

Colors are unpremultiplied sRGB float arrays of shape ``(..., 3)`` and alpha
arrays have shape ``(..., 1)``. The user opacity ``alpha`` scales the source
alpha before it enters the compositing equation::

    color_t = (1 - as) * ab * Cb + as * ((1 - ab) * Cs + ab * B(Cb, Cs))
    A = union(ab, as)
    C = color_t / A
"""

import logging
from typing import Callable, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from pixelcomp import utils
from pixelcomp.constants import ALPHA_EPSILON, TRANSPARENT_THRESHOLD

logger = logging.getLogger(__name__)

BlendFunction = Callable[[NDArray, NDArray], NDArray]
Alpha = Union[float, NDArray[np.floating]]


def source_over(
    blend_fn: BlendFunction,
    Cb: NDArray[np.floating],
    Ab: NDArray[np.floating],
    Cs: NDArray[np.floating],
    As: NDArray[np.floating],
    alpha: Alpha = 1.0,
) -> Tuple[NDArray[np.floating], NDArray[np.floating]]:
    """
    Composite the source over the backdrop using `blend_fn` for the overlap.

    :return: Tuple of unpremultiplied color and alpha, both clipped.
    """
    alpha_s = alpha * As
    alpha_b = Ab
    color_t = (1.0 - alpha_s) * alpha_b * Cb + alpha_s * (
        (1.0 - alpha_b) * Cs + alpha_b * blend_fn(Cb, Cs)
    )
    A = utils.clip(utils.union(alpha_b, alpha_s))
    C = utils.clip(utils.safe_divide(color_t, A))
    C = np.where(A > 0.0, C, 0.0)
    return _keep_transparent(Cb, Ab, As, C, A)


def destination_out(
    blend_fn: BlendFunction,
    Cb: NDArray[np.floating],
    Ab: NDArray[np.floating],
    Cs: NDArray[np.floating],
    As: NDArray[np.floating],
    alpha: Alpha = 1.0,
) -> Tuple[NDArray[np.floating], NDArray[np.floating]]:
    """
    Remove backdrop coverage where the source is opaque. The backdrop color is
    kept.
    """
    A = utils.clip(Ab * (1.0 - alpha * As))
    C = np.where(A > 0.0, utils.clip(Cb), 0.0)
    return _keep_transparent(Cb, Ab, As, C, A)


def _keep_transparent(Cb, Ab, As, C, A):
    # Sources below the visibility threshold leave the backdrop untouched.
    skip = As < TRANSPARENT_THRESHOLD
    if not np.any(skip):
        return C, A
    Ab = utils.clip(Ab)
    Cb = np.where(Ab > 0.0, utils.clip(Cb), 0.0)
    return np.where(skip, Cb, C), np.where(skip, Ab, A)


def is_noop(alpha: float) -> bool:
    """Opacity below which a blend returns the backdrop."""
    return alpha < ALPHA_EPSILON
