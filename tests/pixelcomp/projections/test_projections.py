import logging

import numpy as np
import pytest

from pixelcomp.errors import DuplicateRegistration, InvalidArgument
from pixelcomp.projections import (
    EQUIRECTANGULAR,
    MERCATOR,
    POLAR,
    PROJECTIONS,
    SINUSOIDAL,
    STEREOGRAPHIC,
    Projection,
    get_projection,
    list_projections,
    project,
    register,
)
from pixelcomp.projections.models import MERCATOR_MAX_LATITUDE

from ..utils import RED, assert_pixel, gradient, solid

logger = logging.getLogger(__name__)

WIDTH, HEIGHT = 360, 180


def _grid(max_lat, max_lon, n=9):
    lat, lon = np.meshgrid(
        np.linspace(-max_lat, max_lat, n), np.linspace(-max_lon, max_lon, n)
    )
    return lat.ravel(), lon.ravel()


@pytest.mark.parametrize(
    "projection, max_lat, max_lon",
    [
        (EQUIRECTANGULAR, 89.0, 179.0),
        (MERCATOR, 80.0, 179.0),
        (SINUSOIDAL, 80.0, 179.0),
        (STEREOGRAPHIC, 80.0, 80.0),
        (POLAR, 85.0, 179.0),
    ],
)
def test_roundtrip(projection, max_lat, max_lon):
    lat, lon = _grid(max_lat, max_lon)
    x, y = projection.to_xy(lat, lon, WIDTH, HEIGHT)
    assert np.all(np.isfinite(x)) and np.all(np.isfinite(y))
    assert np.all((x >= 0) & (x <= WIDTH) & (y >= 0) & (y <= HEIGHT))
    lat2, lon2 = projection.to_latlon(x, y, WIDTH, HEIGHT)
    assert np.allclose(lat2, lat, atol=1e-6)
    assert np.allclose(lon2, lon, atol=1e-6)


def test_equirectangular():
    x, y = EQUIRECTANGULAR.to_xy(0.0, 0.0, WIDTH, HEIGHT)
    assert (float(x), float(y)) == (180.0, 90.0)
    x, y = EQUIRECTANGULAR.to_xy(90.0, -180.0, WIDTH, HEIGHT)
    assert (float(x), float(y)) == (0.0, 0.0)
    lat, lon = EQUIRECTANGULAR.to_latlon([-1.0, 10.0], [10.0, 181.0], WIDTH, HEIGHT)
    assert np.all(np.isnan(lat)) and np.all(np.isnan(lon))


def test_mercator_clips_latitude():
    _, top = MERCATOR.to_xy(90.0, 0.0, WIDTH, HEIGHT)
    _, limit = MERCATOR.to_xy(MERCATOR_MAX_LATITUDE, 0.0, WIDTH, HEIGHT)
    assert float(top) == float(limit)
    assert abs(float(top)) < 1e-6
    lat, _ = MERCATOR.to_latlon(WIDTH / 2.0, 0.0, WIDTH, HEIGHT)
    assert abs(float(lat) - MERCATOR_MAX_LATITUDE) < 1e-6
    _, equator = MERCATOR.to_xy(0.0, 0.0, WIDTH, HEIGHT)
    assert abs(float(equator) - HEIGHT / 2.0) < 1e-9


def test_sinusoidal_outside():
    lat, lon = SINUSOIDAL.to_latlon(1.0, 10.0, WIDTH, HEIGHT)
    assert np.isnan(lat) and np.isnan(lon)
    lat, lon = SINUSOIDAL.to_latlon(WIDTH / 2.0, 10.0, WIDTH, HEIGHT)
    assert abs(float(lon)) < 1e-9 and abs(float(lat) - 80.0) < 1e-9


def test_stereographic():
    x, y = STEREOGRAPHIC.to_xy(0.0, 0.0, WIDTH, HEIGHT)
    assert (float(x), float(y)) == (WIDTH / 2.0, HEIGHT / 2.0)
    x, _ = STEREOGRAPHIC.to_xy(0.0, 90.0, WIDTH, HEIGHT)
    assert abs(float(x) - WIDTH) < 1e-9
    x, y = STEREOGRAPHIC.to_xy(0.0, 180.0, WIDTH, HEIGHT)
    assert np.isnan(x) and np.isnan(y)
    lat, lon = STEREOGRAPHIC.to_latlon(WIDTH / 2.0, HEIGHT / 2.0, WIDTH, HEIGHT)
    assert (float(lat), float(lon)) == (0.0, 0.0)


def test_polar():
    x, y = POLAR.to_xy(90.0, 45.0, WIDTH, HEIGHT)
    assert (float(x), float(y)) == (WIDTH / 2.0, HEIGHT / 2.0)
    x, y = POLAR.to_xy(-90.0, 0.0, WIDTH, HEIGHT)
    assert abs(float(x) - WIDTH / 2.0) < 1e-9 and abs(float(y) - HEIGHT) < 1e-9
    lat, lon = POLAR.to_latlon(0.0, 0.0, WIDTH, HEIGHT)
    assert np.isnan(lat) and np.isnan(lon)


def test_registry():
    assert list_projections() == [
        "equirectangular",
        "mercator",
        "polar",
        "sinusoidal",
        "stereographic",
    ]
    assert get_projection("mercator") is MERCATOR
    assert get_projection(POLAR) is POLAR
    with pytest.raises(InvalidArgument):
        get_projection("robinson")


def test_register():
    with pytest.raises(DuplicateRegistration):
        register(Projection("mercator", "", MERCATOR.forward, MERCATOR.inverse))
    with pytest.raises(InvalidArgument):
        register("mercator")

    flipped = register(
        Projection(
            "test_flipped",
            "Equirectangular upside down.",
            lambda lat, lon, w, h: EQUIRECTANGULAR.forward(-lat, lon, w, h),
            lambda x, y, w, h: EQUIRECTANGULAR.inverse(x, h - y, w, h),
        )
    )
    try:
        assert "test_flipped" in list_projections()
        image = gradient(16, 8)
        result = project(image, "equirectangular", flipped)
        assert_pixel(result.get_pixel(3, 0), image.get_pixel(3, 7), 1e-3)
    finally:
        PROJECTIONS._items.pop("test_flipped", None)


def test_project_identity():
    image = gradient(16, 8)
    result = project(image, "equirectangular", "equirectangular")
    assert result.size == image.size
    assert np.allclose(result.numpy(), image.numpy(), atol=1e-3)
    assert result.metadata.properties["projected_from"] == "equirectangular"
    assert result.metadata.properties["projected_to"] == "equirectangular"


def test_project_size():
    result = project(solid(36, 18, RED), EQUIRECTANGULAR, MERCATOR, 20, 30)
    assert result.size == (20, 30)
    assert_pixel(result.get_pixel(10, 15), RED)


def test_project_to_polar():
    image = solid(36, 18, RED)
    result = project(image, "equirectangular", "polar")
    assert result.size == image.size
    assert result.get_pixel(0, 0).a == 0.0
    assert_pixel(result.get_pixel(18, 9), RED)


def test_project_from_stereographic():
    result = project(solid(20, 20, RED), STEREOGRAPHIC, EQUIRECTANGULAR, 36, 18)
    assert_pixel(result.get_pixel(18, 9), RED)
    assert result.get_pixel(0, 9).a == 0.0


def test_project_unknown():
    with pytest.raises(InvalidArgument):
        project(gradient(), "equirectangular", "unknown")
