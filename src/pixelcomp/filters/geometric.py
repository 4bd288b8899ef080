"""
Geometric filters wrapping :py:mod:`pixelcomp.image.transform`.
"""

import numpy as np

from pixelcomp.constants import ResizeMethod
from pixelcomp.filters.registry import FilterArg, register
from pixelcomp.image import transform
from pixelcomp.image.buffer import Image


def _int(name: str, description: str, required: bool = True, **kwargs) -> FilterArg:
    return FilterArg(name, "int", required=required, description=description, **kwargs)


def _offset(name: str) -> FilterArg:
    return FilterArg(
        name,
        "float",
        default=0.0,
        min=-1.0,
        max=1.0,
        step=0.01,
        description="Center offset as a fraction of the half size.",
    )


@register("flip_h", "Mirrors the image left to right.")
def flip_h(image: Image) -> Image:
    return transform.flip_h(image)


@register("flip_v", "Mirrors the image top to bottom.")
def flip_v(image: Image) -> Image:
    return transform.flip_v(image)


@register(
    "rotate",
    "Rotates clockwise; the canvas grows to fit.",
    [
        FilterArg(
            "angle",
            "float",
            required=True,
            min=-360.0,
            max=360.0,
            step=1.0,
            description="Angle in degrees.",
        )
    ],
)
def rotate(image: Image, angle: float) -> Image:
    return transform.rotate(image, angle)


@register(
    "scale",
    "Scales by a factor.",
    [
        FilterArg(
            "factor",
            "float",
            required=True,
            min=0.01,
            max=100.0,
            step=0.01,
            description="Scale factor.",
        ),
        FilterArg(
            "method",
            "choice",
            default=ResizeMethod.BILINEAR.value,
            choices=[m.value for m in ResizeMethod],
            description="Resampling method.",
        ),
    ],
)
def scale(image: Image, factor: float, method: str) -> Image:
    return transform.scale(image, factor, method)


@register(
    "crop",
    "Keeps a rectangular region.",
    [
        _int("x", "Left edge.", min=0),
        _int("y", "Top edge.", min=0),
        _int("width", "Region width.", min=1),
        _int("height", "Region height.", min=1),
    ],
)
def crop(image: Image, x: int, y: int, width: int, height: int) -> Image:
    return transform.crop(image, x, y, width, height)


@register(
    "crop_circle",
    "Makes everything outside of a circle transparent.",
    [
        FilterArg(
            "radius",
            "float",
            default=1.0,
            min=0.0,
            max=2.0,
            step=0.01,
            description="Radius as a fraction of half the shorter side.",
        ),
        _offset("offset_x"),
        _offset("offset_y"),
    ],
)
def crop_circle(image: Image, radius: float, offset_x: float, offset_y: float) -> Image:
    half_w, half_h = image.width / 2.0, image.height / 2.0
    cx = half_w + offset_x * half_w
    cy = half_h + offset_y * half_h
    limit = radius * min(half_w, half_h)
    ys, xs = np.mgrid[0 : image.height, 0 : image.width]
    inside = (xs + 0.5 - cx) ** 2 + (ys + 0.5 - cy) ** 2 <= limit * limit
    array = image.numpy(premultiplied=True)
    array[~inside] = 0.0
    return Image.fromarray(
        array,
        premultiplied=True,
        metadata=image.metadata.derive(cropped_circle_radius=limit),
    )


@register(
    "translate",
    "Shifts the image; exposed pixels become transparent.",
    [_int("dx", "Horizontal shift."), _int("dy", "Vertical shift.")],
)
def translate(image: Image, dx: int, dy: int) -> Image:
    return transform.translate(image, dx, dy)


@register(
    "translate_wrap",
    "Shifts the image; pixels shifted out re-enter on the opposite side.",
    [_int("dx", "Horizontal shift."), _int("dy", "Vertical shift.")],
)
def translate_wrap(image: Image, dx: int, dy: int) -> Image:
    return transform.translate(image, dx, dy, wrap=True)


@register(
    "to_polar",
    "Wraps the image around its center: columns become angles, rows radii.",
    [
        FilterArg(
            "rotation",
            "float",
            default=0.0,
            min=-360.0,
            max=360.0,
            step=1.0,
            description="Angle in degrees where the left edge starts.",
        )
    ],
)
def to_polar(image: Image, rotation: float) -> Image:
    width, height = image.size
    cx, cy = width / 2.0, height / 2.0
    max_r = min(cx, cy)
    ys, xs = np.mgrid[0:height, 0:width].astype(np.float64)
    dx, dy = xs + 0.5 - cx, ys + 0.5 - cy
    r = np.hypot(dx, dy)
    theta = np.mod(np.degrees(np.arctan2(dy, dx)) - rotation, 360.0)
    src_x = theta / 360.0 * (width - 1)
    src_y = r / max_r * (height - 1)
    array = transform.sample_bilinear(image.numpy(premultiplied=True), src_x, src_y)
    array[r > max_r] = 0.0
    return Image.fromarray(
        array,
        premultiplied=True,
        metadata=image.metadata.derive(polar_rotation_degrees=rotation),
    )
