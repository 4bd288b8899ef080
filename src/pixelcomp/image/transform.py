"""
Geometric transforms.

All transforms return a new :py:class:`~pixelcomp.image.buffer.Image` and keep
the source metadata, annotated with what was done. Resampling works on
premultiplied values; samples outside of the source are fully transparent.
"""

import logging
import math
from typing import Callable, Dict, Tuple

import numpy as np
from numpy.typing import NDArray

from pixelcomp.constants import ResizeMethod
from pixelcomp.errors import InvalidArgument, OutOfBounds
from pixelcomp.image.buffer import Image, QUANTUM, quantize

logger = logging.getLogger(__name__)


def _resize_method(method) -> ResizeMethod:
    try:
        return ResizeMethod(method)
    except ValueError:
        raise InvalidArgument("unknown resize method: %r" % (method,)) from None


def _storage(image: Image) -> NDArray[np.float64]:
    return image.storage().astype(np.float64) / QUANTUM


def _result(array: NDArray, image: Image, **properties) -> Image:
    return Image._from_storage(quantize(array), image.metadata.derive(**properties))


# Resampling kernels: offsets of the taps relative to floor(position) and
# the weight of a tap at distance t.


def _bicubic(t: NDArray, a: float = -0.5) -> NDArray:
    t = np.abs(t)
    return np.where(
        t <= 1.0,
        (a + 2.0) * t**3 - (a + 3.0) * t**2 + 1.0,
        np.where(t < 2.0, a * t**3 - 5.0 * a * t**2 + 8.0 * a * t - 4.0 * a, 0.0),
    )


def _lanczos(t: NDArray, a: int = 3) -> NDArray:
    return np.where(np.abs(t) < a, np.sinc(t) * np.sinc(t / a), 0.0)


def _triangle(t: NDArray) -> NDArray:
    return np.maximum(0.0, 1.0 - np.abs(t))


KERNELS: Dict[ResizeMethod, Tuple[Callable, int]] = {
    ResizeMethod.BILINEAR: (_triangle, 1),
    ResizeMethod.BICUBIC: (_bicubic, 2),
    ResizeMethod.LANCZOS: (_lanczos, 3),
}


def _taps(
    source: int, target: int, method: ResizeMethod
) -> Tuple[NDArray[np.intp], NDArray[np.float64]]:
    """Source indices and normalized weights for every target position."""
    positions = np.arange(target) * (source / target)
    if method == ResizeMethod.NEAREST:
        index = np.minimum(positions.astype(np.intp), source - 1)
        return index[:, np.newaxis], np.ones((target, 1))

    kernel, support = KERNELS[method]
    base = np.floor(positions).astype(np.intp)
    offsets = np.arange(1 - support, support + 1)
    index = base[:, np.newaxis] + offsets[np.newaxis, :]
    weights = kernel(positions[:, np.newaxis] - index)
    # Edge pixels are repeated.
    index = np.clip(index, 0, source - 1)
    weights /= weights.sum(axis=1, keepdims=True)
    return index, weights


def _resample_axis(array: NDArray, size: int, axis: int, method) -> NDArray:
    index, weights = _taps(array.shape[axis], size, method)
    moved = np.moveaxis(array, axis, 0)
    out = np.einsum("ij,ij...->i...", weights, moved[index])
    return np.moveaxis(out, 0, axis)


def resize(image: Image, width: int, height: int, method="bilinear") -> Image:
    """
    Resize to `width` x `height`.

    Target pixel ``x`` samples the source at ``x * source_width / width``.
    Nearest takes the pixel at the truncated position; bilinear, bicubic
    (Catmull-Rom) and lanczos (a = 3) weigh neighbors with their kernels and
    repeat edge pixels. Resizing to the same size returns an identical copy.

    :param method: One of :py:class:`~pixelcomp.constants.ResizeMethod`.
    :raises InvalidArgument: For non-positive sizes or unknown methods.
    """
    method = _resize_method(method)
    if (
        not isinstance(width, (int, np.integer))
        or not isinstance(height, (int, np.integer))
        or width <= 0
        or height <= 0
    ):
        raise InvalidArgument("invalid target size %rx%r" % (width, height))
    array = _storage(image)
    if (width, height) != image.size:
        array = _resample_axis(array, int(height), 0, method)
        array = _resample_axis(array, int(width), 1, method)
    logger.debug(
        "Resized %dx%d to %dx%d (%s)",
        image.width,
        image.height,
        width,
        height,
        method.value,
    )
    return _result(
        array,
        image,
        resized_from_width=image.width,
        resized_from_height=image.height,
        resize_method=method.value,
    )


def scale(image: Image, factor: float, method="bilinear") -> Image:
    """Resize by a factor, keeping at least one pixel per side."""
    if not math.isfinite(factor) or factor <= 0:
        raise InvalidArgument("scale factor must be positive, got %r" % factor)
    width = max(1, int(round(image.width * factor)))
    height = max(1, int(round(image.height * factor)))
    return resize(image, width, height, method)


def crop(image: Image, x: int, y: int, width: int, height: int) -> Image:
    """
    Copy the region at (x, y) of size `width` x `height`.

    :raises OutOfBounds: If the region is empty or leaves the image.
    """
    if (
        width <= 0
        or height <= 0
        or x < 0
        or y < 0
        or x + width > image.width
        or y + height > image.height
    ):
        raise OutOfBounds(
            "crop region (%r, %r, %r, %r) outside of %dx%d image"
            % (x, y, width, height, image.width, image.height)
        )
    data = image.storage()[y : y + height, x : x + width]
    return Image._from_storage(
        data.copy(),
        image.metadata.derive(
            cropped_from_x=x,
            cropped_from_y=y,
            cropped_from_width=image.width,
            cropped_from_height=image.height,
        ),
    )


def _extent(value: float) -> int:
    # Rounding absorbs trig noise such as cos(90 deg) = 6e-17.
    return max(1, int(math.ceil(round(value, 6))))


def sample_bilinear(
    array: NDArray[np.float64], xs: NDArray[np.float64], ys: NDArray[np.float64]
) -> NDArray[np.float64]:
    """
    Bilinear sampling of a premultiplied array at fractional positions.

    Neighbors outside of the array count as fully transparent.
    """
    height, width = array.shape[:2]
    x0 = np.floor(xs).astype(np.intp)
    y0 = np.floor(ys).astype(np.intp)
    wx = (xs - x0)[..., np.newaxis]
    wy = (ys - y0)[..., np.newaxis]
    out = np.zeros(xs.shape + (array.shape[2],), dtype=np.float64)
    for dy, fy in ((0, 1.0 - wy), (1, wy)):
        for dx, fx in ((0, 1.0 - wx), (1, wx)):
            px, py = x0 + dx, y0 + dy
            inside = (px >= 0) & (px < width) & (py >= 0) & (py < height)
            values = array[np.clip(py, 0, height - 1), np.clip(px, 0, width - 1)]
            out += np.where(inside[..., np.newaxis], values, 0.0) * fx * fy
    return out


def rotate(image: Image, angle: float) -> Image:
    """
    Rotate by `angle` degrees clockwise around the center.

    The output is the bounding box of the rotated source. Every output pixel
    samples the source bilinearly at its inversely rotated position; pixels
    that map outside of the source are transparent.
    """
    if not math.isfinite(angle):
        raise InvalidArgument("angle must be finite, got %r" % angle)
    theta = math.radians(angle)
    cos, sin = math.cos(theta), math.sin(theta)
    width = _extent(abs(image.width * cos) + abs(image.height * sin))
    height = _extent(abs(image.width * sin) + abs(image.height * cos))

    cx, cy = (image.width - 1) / 2.0, (image.height - 1) / 2.0
    ox, oy = (width - 1) / 2.0, (height - 1) / 2.0
    dy, dx = np.mgrid[0:height, 0:width].astype(np.float64)
    dx -= ox
    dy -= oy
    xs = dx * cos + dy * sin + cx
    ys = -dx * sin + dy * cos + cy
    array = sample_bilinear(_storage(image), xs, ys)
    return _result(array, image, rotated_angle_degrees=angle)


def flip_h(image: Image) -> Image:
    """Mirror left to right."""
    return Image._from_storage(
        image.storage()[:, ::-1].copy(),
        image.metadata.derive(flipped_horizontally=True),
    )


def flip_v(image: Image) -> Image:
    """Mirror top to bottom."""
    return Image._from_storage(
        image.storage()[::-1].copy(),
        image.metadata.derive(flipped_vertically=True),
    )


def translate(image: Image, dx: int, dy: int, wrap: bool = False) -> Image:
    """
    Shift pixels by (dx, dy).

    Exposed pixels become transparent, or receive the pixels shifted out on
    the opposite side when `wrap` is set.
    """
    dx, dy = int(dx), int(dy)
    data = image.storage()
    if wrap:
        shifted = np.roll(data, (dy, dx), axis=(0, 1))
    else:
        shifted = np.zeros_like(data)
        height, width = data.shape[:2]
        if abs(dx) < width and abs(dy) < height:
            shifted[
                max(0, dy) : height + min(0, dy), max(0, dx) : width + min(0, dx)
            ] = data[
                max(0, -dy) : height + min(0, -dy), max(0, -dx) : width + min(0, -dx)
            ]
    return Image._from_storage(
        shifted,
        image.metadata.derive(
            translated_x_offset=dx, translated_y_offset=dy, translated_wrap=wrap
        ),
    )
