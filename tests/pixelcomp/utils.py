import logging
import math
from typing import List, Tuple

import numpy as np
import pytest

from pixelcomp import Image, RGBA64
from pixelcomp._compat import HAS_SCIPY

logging.basicConfig(level=logging.DEBUG)

# Marker to skip tests that require scipy
skip_without_scipy = pytest.mark.skipif(
    not HAS_SCIPY,
    reason="Requires spatial dependencies: pip install 'pixelcomp[spatial]'",
)

RED = (1.0, 0.0, 0.0, 1.0)
GREEN = (0.0, 1.0, 0.0, 1.0)
BLUE = (0.0, 0.0, 1.0, 1.0)
WHITE = (1.0, 1.0, 1.0, 1.0)
BLACK = (0.0, 0.0, 0.0, 1.0)
GRAY = (0.5, 0.5, 0.5, 1.0)

# Primaries, secondaries, grays, near-black, near-white and a semi-transparent
# red.
PALETTE: List[Tuple[float, float, float, float]] = [
    RED,
    GREEN,
    BLUE,
    (0.0, 1.0, 1.0, 1.0),
    (1.0, 0.0, 1.0, 1.0),
    (1.0, 1.0, 0.0, 1.0),
    BLACK,
    (0.25, 0.25, 0.25, 1.0),
    GRAY,
    (0.75, 0.75, 0.75, 1.0),
    WHITE,
    (0.01, 0.01, 0.01, 1.0),
    (0.99, 0.99, 0.99, 1.0),
    (1.0, 0.0, 0.0, 0.5),
]

GRAYS = [c for c in PALETTE if c[0] == c[1] == c[2]]


def pixel(values) -> RGBA64:
    return RGBA64(*values)


def max_error(a: RGBA64, b: RGBA64) -> float:
    """Largest straight channel difference."""
    return max(abs(x - y) for x, y in zip(a.straight(), b.straight()))


def assert_pixel(actual: RGBA64, expected, tolerance: float = 1e-3) -> None:
    if not isinstance(expected, RGBA64):
        expected = RGBA64(*expected)
    error = max_error(actual, expected)
    assert error <= tolerance, "%r vs %r" % (actual.straight(), expected.straight())


def assert_close(x: float, y: float, tolerance: float = 1e-6) -> None:
    assert math.isclose(x, y, abs_tol=tolerance), "%r vs %r" % (x, y)


def solid(width: int, height: int, values=WHITE) -> Image:
    return Image.new(width, height, RGBA64(*values))


def gradient(width: int = 16, height: int = 12) -> Image:
    """Opaque image whose red grows with x and green with y."""
    ys, xs = np.mgrid[0:height, 0:width]
    array = np.zeros((height, width, 4))
    array[..., 0] = xs / max(1, width - 1)
    array[..., 1] = ys / max(1, height - 1)
    array[..., 2] = 0.25
    array[..., 3] = 1.0
    return Image.fromarray(array)


def checkerboard(size: int = 64, cell: int = 32) -> Image:
    """Opaque black and white checkerboard."""
    ys, xs = np.mgrid[0:size, 0:size]
    on = ((xs // cell) + (ys // cell)) % 2 == 0
    array = np.zeros((size, size, 4))
    array[on, :3] = 1.0
    array[..., 3] = 1.0
    return Image.fromarray(array)


def to_8bit(image: Image) -> np.ndarray:
    return np.asarray(image.topil(), dtype=np.int64)
