"""
Built-in projections.

Pixel coordinates put (0, 0) at the top left corner of the image; latitudes
grow to the north (up) and longitudes to the east (right).
"""

import numpy as np

from pixelcomp.projections.registry import Projection, register

MERCATOR_MAX_LATITUDE = 85.05112878


def _nan(mask, *values):
    return tuple(np.where(mask, v, np.nan) for v in values)


def _equirectangular_to(lat, lon, w, h):
    return (lon + 180.0) / 360.0 * w, (90.0 - lat) / 180.0 * h


def _equirectangular_from(x, y, w, h):
    lat, lon = 90.0 - y / h * 180.0, x / w * 360.0 - 180.0
    return _nan((np.abs(lat) <= 90.0) & (np.abs(lon) <= 180.0), lat, lon)


def _mercator_to(lat, lon, w, h):
    phi = np.radians(np.clip(lat, -MERCATOR_MAX_LATITUDE, MERCATOR_MAX_LATITUDE))
    y = (1.0 - np.log(np.tan(np.pi / 4.0 + phi / 2.0)) / np.pi) / 2.0 * h
    return (lon + 180.0) / 360.0 * w, y


def _mercator_from(x, y, w, h):
    lat = np.degrees(2.0 * np.arctan(np.exp(np.pi * (1.0 - 2.0 * y / h))) - np.pi / 2.0)
    lon = x / w * 360.0 - 180.0
    return _nan(np.abs(lon) <= 180.0, lat, lon)


def _sinusoidal_to(lat, lon, w, h):
    return (lon * np.cos(np.radians(lat)) + 180.0) / 360.0 * w, (90.0 - lat) / 180.0 * h


def _sinusoidal_from(x, y, w, h):
    lat = 90.0 - y / h * 180.0
    lon = (x / w * 360.0 - 180.0) / np.cos(np.radians(lat))
    return _nan((np.abs(lat) <= 90.0) & (np.abs(lon) <= 180.0), lat, lon)


def _stereographic_to(lat, lon, w, h):
    phi, lam = np.radians(lat), np.radians(lon)
    k = 2.0 / (1.0 + np.cos(phi) * np.cos(lam))
    x = w / 2.0 + k * np.cos(phi) * np.sin(lam) * w / 4.0
    y = h / 2.0 - k * np.sin(phi) * h / 4.0
    return _nan(np.isfinite(k), x, y)


def _stereographic_from(x, y, w, h):
    xn = 4.0 * (x - w / 2.0) / w
    yn = 4.0 * (h / 2.0 - y) / h
    rho = np.hypot(xn, yn)
    c = 2.0 * np.arctan2(rho, 2.0)
    lat = np.where(rho > 0.0, np.arcsin(np.clip(yn * np.sin(c) / rho, -1.0, 1.0)), 0.0)
    lon = np.arctan2(xn * np.sin(c), rho * np.cos(c))
    return np.degrees(lat), np.degrees(lon)


def _polar_to(lat, lon, w, h):
    r = (90.0 - lat) / 180.0
    lam = np.radians(lon)
    return w / 2.0 * (1.0 + r * np.sin(lam)), h / 2.0 * (1.0 + r * np.cos(lam))


def _polar_from(x, y, w, h):
    xn = 2.0 * x / w - 1.0
    yn = 2.0 * y / h - 1.0
    r = np.hypot(xn, yn)
    lat = 90.0 - r * 180.0
    lon = np.degrees(np.arctan2(xn, yn))
    return _nan(r <= 1.0, lat, lon)


EQUIRECTANGULAR = register(
    Projection(
        "equirectangular",
        "Plate carree: longitude and latitude map linearly to x and y.",
        _equirectangular_to,
        _equirectangular_from,
    )
)

MERCATOR = register(
    Projection(
        "mercator",
        "Conformal cylindrical projection, clipped at +/-85.05 degrees latitude.",
        _mercator_to,
        _mercator_from,
    )
)

SINUSOIDAL = register(
    Projection(
        "sinusoidal",
        "Equal-area pseudocylindrical projection.",
        _sinusoidal_to,
        _sinusoidal_from,
    )
)

STEREOGRAPHIC = register(
    Projection(
        "stereographic",
        "Conformal azimuthal projection centered on (0, 0); the equator "
        "spans half of the image width.",
        _stereographic_to,
        _stereographic_from,
    )
)

POLAR = register(
    Projection(
        "polar",
        "Azimuthal equidistant projection around the north pole; the south "
        "pole is the inscribed circle.",
        _polar_to,
        _polar_from,
    )
)
