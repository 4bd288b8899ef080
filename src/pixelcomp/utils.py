"""
Array helpers shared by the blending and buffer code.

Colors handled here are float arrays in the ``[0, 1]`` range with the
channel axis last; alpha arrays keep a trailing axis of length one so that
they broadcast against the color channels.
"""

from typing import Tuple, Union

import numpy as np
from numpy.typing import NDArray

Box = Tuple[int, int, int, int]
Scalar = Union[float, NDArray[np.floating]]

#: Box returned when two regions do not overlap.
EMPTY_BOX: Box = (0, 0, 0, 0)


def safe_divide(
    numerator: NDArray[np.floating],
    denominator: NDArray[np.floating],
    fill: float = 1.0,
) -> NDArray[np.floating]:
    """Divide element-wise, replacing non-finite results by ``fill``."""
    with np.errstate(divide="ignore", invalid="ignore"):
        quotient = np.true_divide(numerator, denominator)
    return np.where(np.isfinite(quotient), quotient, fill)


def intersect(*boxes: Box) -> Box:
    """
    Overlap of ``(left, top, right, bottom)`` boxes.

    :return: the common region, or :py:data:`EMPTY_BOX` when there is none.
    """
    left = max(box[0] for box in boxes)
    top = max(box[1] for box in boxes)
    right = min(box[2] for box in boxes)
    bottom = min(box[3] for box in boxes)
    if right <= left or bottom <= top:
        return EMPTY_BOX
    return left, top, right, bottom


def union(backdrop: Scalar, source: Scalar) -> Scalar:
    """Coverage of two stacked alpha values, ``b + s - b * s``."""
    return backdrop + source * (1.0 - backdrop)


def clip(x: NDArray[np.floating]) -> NDArray[np.floating]:
    """Clip between [0, 1]."""
    return np.clip(x, 0.0, 1.0)


def premultiply(
    color: NDArray[np.floating], alpha: NDArray[np.floating]
) -> NDArray[np.floating]:
    """Multiply color by alpha; fully transparent pixels become black."""
    return np.where(alpha > 0.0, color * alpha, 0.0)


def unpremultiply(
    color: NDArray[np.floating], alpha: NDArray[np.floating]
) -> NDArray[np.floating]:
    """Divide color by alpha; fully transparent pixels become black."""
    with np.errstate(divide="ignore", invalid="ignore"):
        return np.where(alpha > 0.0, color / alpha, 0.0)
