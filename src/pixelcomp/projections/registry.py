"""
Map projection registry and resampling.

A :py:class:`Projection` converts between geographic coordinates (latitude
and longitude in degrees) and pixel coordinates of a ``width`` x ``height``
image. Functions are vectorized; points a projection cannot represent come
back as NaN.
"""

import logging
from typing import Callable, List, Optional, Tuple, Union

import numpy as np
from attrs import define
from numpy.typing import ArrayLike, NDArray

from pixelcomp.errors import InvalidArgument
from pixelcomp.registry import Registry

logger = logging.getLogger(__name__)

PROJECTIONS = Registry("projection")

Pair = Tuple[NDArray[np.float64], NDArray[np.float64]]


@define(frozen=True)
class Projection:
    """
    Projection descriptor.

    .. py:attribute:: forward

        ``forward(lat, lon, width, height) -> (x, y)``

    .. py:attribute:: inverse

        ``inverse(x, y, width, height) -> (lat, lon)``
    """

    name: str
    description: str
    forward: Callable[..., Pair]
    inverse: Callable[..., Pair]

    def to_xy(self, lat: ArrayLike, lon: ArrayLike, width: float, height: float) -> Pair:
        """Geographic coordinates to pixel coordinates."""
        lat = np.asarray(lat, dtype=np.float64)
        lon = np.asarray(lon, dtype=np.float64)
        with np.errstate(divide="ignore", invalid="ignore"):
            return self.forward(lat, lon, float(width), float(height))

    def to_latlon(self, x: ArrayLike, y: ArrayLike, width: float, height: float) -> Pair:
        """Pixel coordinates to geographic coordinates."""
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)
        with np.errstate(divide="ignore", invalid="ignore"):
            return self.inverse(x, y, float(width), float(height))


def register(projection: Projection) -> Projection:
    """
    Register a projection under its name.

    :raises DuplicateRegistration: If the name is taken.
    """
    if not isinstance(projection, Projection):
        raise InvalidArgument("expected Projection, got %r" % (projection,))
    return PROJECTIONS.add(projection.name, projection)


def get_projection(name: Union[str, Projection]) -> Projection:
    """
    Look up a projection by name. Projection instances pass through.

    :raises InvalidArgument: If the name is unknown.
    """
    if isinstance(name, Projection):
        return name
    return PROJECTIONS.get(name)


def list_projections() -> List[str]:
    """Sorted projection names."""
    return PROJECTIONS.names()


def project(
    image,
    source: Union[str, Projection],
    destination: Union[str, Projection],
    width: Optional[int] = None,
    height: Optional[int] = None,
):
    """
    Resample `image` from one projection into another.

    Every destination pixel center is converted to latitude and longitude with
    the destination projection and then into source pixel coordinates, where
    the source is sampled bilinearly. Pixels that either projection cannot
    represent stay transparent.

    :param image: :py:class:`~pixelcomp.image.buffer.Image` in the `source`
        projection.
    :param width: Output width, default is the source width.
    :param height: Output height, default is the source height.
    :return: New :py:class:`~pixelcomp.image.buffer.Image`.
    """
    from pixelcomp.image.buffer import Image
    from pixelcomp.image.transform import sample_bilinear

    src, dst = get_projection(source), get_projection(destination)
    width = width or image.width
    height = height or image.height
    ys, xs = np.mgrid[0:height, 0:width].astype(np.float64)
    lat, lon = dst.to_latlon(xs + 0.5, ys + 0.5, width, height)
    sx, sy = src.to_xy(lat, lon, image.width, image.height)
    valid = np.isfinite(sx) & np.isfinite(sy)
    sx = np.where(valid, sx - 0.5, -2.0)
    sy = np.where(valid, sy - 0.5, -2.0)
    array = sample_bilinear(image.numpy(premultiplied=True), sx, sy)
    array[~valid] = 0.0
    logger.debug("Projected %s to %s at %dx%d", src.name, dst.name, width, height)
    return Image.fromarray(
        array,
        premultiplied=True,
        metadata=image.metadata.derive(
            projected_from=src.name, projected_to=dst.name
        ),
    )
