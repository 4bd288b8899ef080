"""
Drawing primitives.

Every primitive blends its color onto the target image in place with the
style's blend mode and opacity. Pixels outside of the image are clipped, and a
pixel whose blend fails is skipped so that the rest of the stroke survives.

Example::

    from pixelcomp.image.draw import FillStyle, LineStyle, circle, line

    style = LineStyle(width=3, color=RGBA64(1.0, 0.0, 0.0, 1.0))
    line(image, 0, 0, 63, 63, style)
    circle(image, 32, 32, 10, style, fill=FillStyle(RGBA64(0.0, 0.0, 1.0, 1.0)))
"""

import logging
from typing import Iterable, Optional, Set, Tuple

from attrs import define, field

from pixelcomp.blend import BlendMode, get_mode
from pixelcomp.color.rgba64 import RGBA64
from pixelcomp.errors import InvalidArgument, PixelCompError
from pixelcomp.image import font
from pixelcomp.image.buffer import Image
from pixelcomp.validators import range_

logger = logging.getLogger(__name__)

Point = Tuple[int, int]


def _black() -> RGBA64:
    return RGBA64(0.0, 0.0, 0.0, 1.0)


@define
class LineStyle:
    """
    Stroke settings.

    .. py:attribute:: width

        Side of the square brush in pixels.
    """

    width: int = field(default=1, converter=int, validator=range_(1, 4096))
    color: RGBA64 = field(factory=_black)
    blend_mode: str = "normal"
    alpha: float = field(default=1.0, converter=float, validator=range_(0.0, 1.0))


@define
class FillStyle:
    """Fill settings."""

    color: RGBA64 = field(factory=_black)
    blend_mode: str = "normal"
    alpha: float = field(default=1.0, converter=float, validator=range_(0.0, 1.0))


def plot(
    image: Image, points: Iterable[Point], color: RGBA64, mode: BlendMode, alpha: float
) -> int:
    """
    Blend `color` onto each of `points` once.

    :return: Number of pixels written.
    """
    count = 0
    for x, y in points:
        if not image.contains(x, y):
            continue
        try:
            image.set_pixel(x, y, mode.blend(image.get_pixel(x, y), color, alpha))
        except PixelCompError as e:
            logger.debug("Skipping pixel (%d, %d): %s", x, y, e)
            continue
        count += 1
    return count


def _brush(points: Iterable[Point], width: int) -> Set[Point]:
    half = width // 2
    offsets = range(-half, width - half)
    return {(x + dx, y + dy) for x, y in points for dx in offsets for dy in offsets}


def bresenham(x0: int, y0: int, x1: int, y1: int) -> Iterable[Point]:
    """Integer points of the line from (x0, y0) to (x1, y1), both included."""
    dx, dy = abs(x1 - x0), -abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx + dy
    while True:
        yield x0, y0
        if x0 == x1 and y0 == y1:
            return
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x0 += sx
        if e2 <= dx:
            err += dx
            y0 += sy


def midpoint_circle(cx: int, cy: int, radius: int) -> Set[Point]:
    """Outline points of a circle using the midpoint algorithm."""
    points: Set[Point] = set()
    x, y = radius, 0
    err = 1 - radius
    while x >= y:
        for px, py in ((x, y), (y, x), (-y, x), (-x, y)):
            points.add((cx + px, cy + py))
            points.add((cx + px, cy - py))
        y += 1
        if err < 0:
            err += 2 * y + 1
        else:
            x -= 1
            err += 2 * (y - x) + 1
    return points


def line(
    image: Image, x0: int, y0: int, x1: int, y1: int, style: Optional[LineStyle] = None
) -> Image:
    """Draw a line between two integer points."""
    style = style or LineStyle()
    points = _brush(bresenham(int(x0), int(y0), int(x1), int(y1)), style.width)
    plot(image, points, style.color, get_mode(style.blend_mode), style.alpha)
    return image


def rectangle(
    image: Image,
    x: int,
    y: int,
    width: int,
    height: int,
    style: Optional[LineStyle] = None,
    fill: Optional[FillStyle] = None,
) -> Image:
    """
    Draw a rectangle with its top left corner at (x, y).

    The optional fill covers the interior first, then the four edges are
    stroked. Pass ``style=None`` together with a fill for a borderless box.
    """
    right, bottom = x + width - 1, y + height - 1
    if fill is not None:
        points = [(px, py) for py in range(y, bottom + 1) for px in range(x, right + 1)]
        plot(image, points, fill.color, get_mode(fill.blend_mode), fill.alpha)
    if style is not None or fill is None:
        style = style or LineStyle()
        edges: Set[Point] = set()
        for start, end in (
            ((x, y), (right, y)),
            ((right, y), (right, bottom)),
            ((right, bottom), (x, bottom)),
            ((x, bottom), (x, y)),
        ):
            edges.update(bresenham(*start, *end))
        plot(
            image,
            _brush(edges, style.width),
            style.color,
            get_mode(style.blend_mode),
            style.alpha,
        )
    return image


def circle(
    image: Image,
    cx: int,
    cy: int,
    radius: int,
    style: Optional[LineStyle] = None,
    fill: Optional[FillStyle] = None,
) -> Image:
    """
    Draw a circle around (cx, cy).

    The optional fill covers every pixel with ``dx**2 + dy**2 <= radius**2``.
    """
    radius = int(radius)
    if radius < 0:
        raise InvalidArgument("radius must not be negative, got %r" % radius)
    if fill is not None:
        points = [
            (cx + dx, cy + dy)
            for dy in range(-radius, radius + 1)
            for dx in range(-radius, radius + 1)
            if dx * dx + dy * dy <= radius * radius
        ]
        plot(image, points, fill.color, get_mode(fill.blend_mode), fill.alpha)
    if style is not None or fill is None:
        style = style or LineStyle()
        points = _brush(midpoint_circle(cx, cy, radius), style.width)
        plot(image, points, style.color, get_mode(style.blend_mode), style.alpha)
    return image


def draw_image(
    image: Image, source: Image, x: int, y: int, mode: str = "normal", alpha: float = 1.0
) -> Image:
    """Blit `source` with its top left corner at (x, y)."""
    return image.paste(source, x, y, mode, alpha)


def draw_text(
    image: Image,
    text: str,
    x: int,
    y: int,
    color: Optional[RGBA64] = None,
    glow: bool = False,
    mode: str = "normal",
) -> Image:
    """
    Draw `text` with the embedded bitmap font.

    The first glyph cell starts at (x, y); the one pixel outline extends
    beyond it. The opacity comes from the alpha of `color`. See
    :py:mod:`pixelcomp.image.font` for markup.
    """
    color = color or RGBA64(1.0, 1.0, 1.0, 1.0)
    rendered = font.render(text, color, glow)
    alpha = color.straight()[3]
    return image.paste(rendered, x - 1, y - 1, mode, alpha)
