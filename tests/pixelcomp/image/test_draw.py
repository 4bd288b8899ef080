import logging

import pytest

from pixelcomp import Image, RGBA64
from pixelcomp.blend import BLEND_MODES, register
from pixelcomp.errors import InvalidArgument
from pixelcomp.image.draw import (
    FillStyle,
    LineStyle,
    bresenham,
    circle,
    draw_image,
    draw_text,
    line,
    midpoint_circle,
    plot,
    rectangle,
)

from ..utils import BLACK, RED, WHITE, assert_pixel, solid

logger = logging.getLogger(__name__)

TRANSPARENT = (0.0, 0.0, 0.0, 0.0)


def painted(image):
    return {
        (x, y)
        for y in range(image.height)
        for x in range(image.width)
        if image.get_pixel(x, y).a > 0.0
    }


def test_bresenham():
    points = list(bresenham(0, 0, 3, 1))
    assert points == [(0, 0), (1, 0), (2, 1), (3, 1)]
    assert list(bresenham(2, 2, 2, 2)) == [(2, 2)]
    assert list(bresenham(3, 0, 0, 0)) == [(3, 0), (2, 0), (1, 0), (0, 0)]


def test_midpoint_circle():
    points = midpoint_circle(5, 5, 3)
    assert {(8, 5), (2, 5), (5, 8), (5, 2)} <= points
    assert (5, 5) not in points
    assert midpoint_circle(1, 1, 0) == {(1, 1)}


def test_line():
    image = Image(5, 5)
    line(image, 0, 0, 3, 0)
    assert painted(image) == {(0, 0), (1, 0), (2, 0), (3, 0)}
    assert_pixel(image.get_pixel(1, 0), BLACK)


@pytest.mark.parametrize("width, rows", [(1, {2}), (2, {1, 2}), (3, {1, 2, 3})])
def test_line_width(width, rows):
    image = Image(8, 6)
    line(image, 2, 2, 5, 2, LineStyle(width=width, color=RGBA64(*RED)))
    assert {y for _, y in painted(image)} == rows
    assert_pixel(image.get_pixel(3, 2), RED)


def test_line_clipped():
    image = Image(4, 4)
    line(image, -5, -5, 10, 10)
    assert painted(image) == {(0, 0), (1, 1), (2, 2), (3, 3)}


def test_line_alpha_and_mode():
    image = solid(3, 1, WHITE)
    line(image, 0, 0, 2, 0, LineStyle(alpha=0.5))
    assert_pixel(image.get_pixel(1, 0), (0.5, 0.5, 0.5, 1.0), 1e-3)

    image = solid(3, 1, RED)
    line(image, 0, 0, 2, 0, LineStyle(color=RGBA64(*WHITE), blend_mode="multiply"))
    assert_pixel(image.get_pixel(1, 0), RED, 1e-3)


def test_line_style_validation():
    with pytest.raises(InvalidArgument):
        LineStyle(width=0)
    with pytest.raises(InvalidArgument):
        LineStyle(alpha=1.5)
    with pytest.raises(InvalidArgument):
        FillStyle(alpha=-0.5)


def test_rectangle_outline():
    image = Image(6, 5)
    rectangle(image, 1, 1, 4, 3)
    result = painted(image)
    assert {(1, 1), (4, 1), (4, 3), (1, 3), (2, 1), (1, 2)} <= result
    assert (2, 2) not in result
    assert (0, 0) not in result
    assert (5, 4) not in result


def test_rectangle_fill():
    image = Image(6, 5)
    rectangle(image, 1, 1, 4, 3, fill=FillStyle(RGBA64(*RED)))
    assert painted(image) == {(x, y) for x in range(1, 5) for y in range(1, 4)}
    assert_pixel(image.get_pixel(1, 1), RED)

    rectangle(image, 1, 1, 4, 3, LineStyle(), FillStyle(RGBA64(*RED)))
    assert_pixel(image.get_pixel(1, 1), BLACK)
    assert_pixel(image.get_pixel(2, 2), RED)


def test_circle():
    image = Image(11, 11)
    circle(image, 5, 5, 3)
    assert painted(image) == midpoint_circle(5, 5, 3)

    image = Image(11, 11)
    circle(image, 5, 5, 3, fill=FillStyle(RGBA64(*RED)))
    result = painted(image)
    assert (5, 5) in result
    assert (8, 5) in result
    assert (8, 8) not in result


def test_circle_negative_radius():
    with pytest.raises(InvalidArgument):
        circle(Image(4, 4), 2, 2, -1)


def test_plot_skips_failing_pixels():
    name = "test-failing"

    @register(name, "Always fails.", "special")
    def failing(Cb, Cs):
        raise InvalidArgument("cannot blend")

    try:
        image = solid(3, 3, WHITE)
        count = plot(image, [(0, 0), (1, 1), (5, 5)], RGBA64(*RED), BLEND_MODES.get(name), 1.0)
        assert count == 0
        assert_pixel(image.get_pixel(1, 1), WHITE)
    finally:
        BLEND_MODES._items.pop(name)


def test_plot_counts():
    image = Image(3, 3)
    count = plot(image, [(0, 0), (2, 2), (3, 3)], RGBA64(*RED), BLEND_MODES.get("normal"), 1.0)
    assert count == 2


def test_draw_image():
    image = solid(4, 4, WHITE)
    draw_image(image, solid(2, 2, RED), 1, 1, alpha=0.5)
    assert_pixel(image.get_pixel(1, 1), (1.0, 0.5, 0.5, 1.0), 1e-3)
    assert_pixel(image.get_pixel(0, 0), WHITE)


def test_draw_text():
    image = Image(20, 20)
    draw_text(image, "-", 10, 10)
    # The dash occupies row 3 of the glyph cell.
    for x in range(10, 15):
        assert_pixel(image.get_pixel(x, 13), WHITE)
    # Dark outline around the glyph.
    assert_pixel(image.get_pixel(9, 13), (0.1, 0.1, 0.1, 1.0))
    assert_pixel(image.get_pixel(12, 12), (0.1, 0.1, 0.1, 1.0))
    assert image.get_pixel(12, 10).a == 0.0


def test_draw_text_alpha():
    image = solid(20, 20, BLACK)
    draw_text(image, "-", 0, 0, color=RGBA64(1.0, 1.0, 1.0, 0.5))
    assert_pixel(image.get_pixel(1, 3), (0.5, 0.5, 0.5, 1.0), 1e-3)
