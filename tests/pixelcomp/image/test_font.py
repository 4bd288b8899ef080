import numpy as np
import pytest

from pixelcomp import RGBA64
from pixelcomp.color import HSL
from pixelcomp.constants import CHAR_HEIGHT, CHAR_WIDTH
from pixelcomp.image import font

from ..utils import assert_pixel

RED = RGBA64(1.0, 0.0, 0.0, 1.0)


def test_spritesheet_read_only():
    assert not font.SPRITESHEET.flags.writeable
    assert len(font.GLYPHS) == 95


def test_glyph():
    cell = font.glyph("A")
    assert cell.shape == (CHAR_HEIGHT, CHAR_WIDTH)
    assert cell.any()
    assert not font.glyph(" ").any()
    # The last column and row are spacing.
    assert not cell[:, -1].any()
    assert not cell[-1, :].any()
    assert np.array_equal(font.glyph("|")[:, 2], [1, 1, 1, 1, 1, 1, 1, 0])


@pytest.mark.parametrize("char", ["é", "\t", "\x7f"])
def test_glyph_unknown(char):
    assert not font.glyph(char).any()


@pytest.mark.parametrize(
    "text, expected",
    [
        ("a", (6, 8)),
        ("abc", (18, 8)),
        ("ab\nc", (12, 16)),
        ("[:r:]hi[::]", (12, 8)),
        ("[:240:1.0:0.5:]x", (6, 8)),
    ],
)
def test_measure(text, expected):
    assert font.measure(text) == expected


def test_strip_markup():
    assert font.strip_markup("[:gon:]a[:y:]b[::]c[:10:0.5:0.5:]") == "abc"
    assert font.strip_markup("[not markup]") == "[not markup]"


def test_layout():
    items = list(font.layout("a\n[:g:]b", font.Style(0.0, 1.0, 0.5)))
    assert [(c, line, ch) for c, line, ch, _ in items] == [(0, 0, "a"), (0, 1, "b")]
    assert items[0][3].h == 0.0
    assert items[1][3].h == 120.0


def test_style_apply():
    initial = font.Style(0.0, 1.0, 0.5)
    style = font.Style(0.0, 1.0, 0.5)
    for word, attribute, value in [
        ("b", "h", 240.0),
        ("white", "l", 1.0),
        ("gray", "s", 0.0),
        ("color", "s", 0.5),
        ("black", "l", 0.0),
        ("gon", "glow", True),
        ("goff", "glow", False),
    ]:
        style.apply(word, initial)
        assert getattr(style, attribute) == value
    style.apply("", initial)
    assert (style.h, style.s, style.l) == (0.0, 1.0, 0.5)


def test_render_dash():
    image = font.render("-")
    assert image.size == (CHAR_WIDTH + 2, CHAR_HEIGHT + 2)
    for x in range(1, 6):
        assert_pixel(image.get_pixel(x, 4), (1.0, 1.0, 1.0, 1.0))
    assert_pixel(image.get_pixel(0, 4), (0.1, 0.1, 0.1, 1.0))
    assert image.get_pixel(7, 4).a == 0.0
    assert image.get_pixel(3, 0).a == 0.0


def test_render_markup_colors():
    image = font.render("[:g:]-[::]-", RED)
    assert_pixel(image.get_pixel(1, 4), (0.0, 1.0, 0.0, 1.0))
    assert_pixel(image.get_pixel(0, 4), (0.0, 0.2, 0.0, 1.0))
    assert_pixel(image.get_pixel(7, 4), (1.0, 0.0, 0.0, 1.0))

    image = font.render("[:240:1.0:0.5:]-", RED)
    assert_pixel(image.get_pixel(1, 4), (0.0, 0.0, 1.0, 1.0))


def test_render_glow():
    image = font.render("-", RED, glow=True)
    assert_pixel(image.get_pixel(1, 4), (1.0, 0.0, 0.0, 1.0))
    outline = HSL(0.0, 0.75, 0.2).to_rgba64()
    assert_pixel(image.get_pixel(0, 4), outline)


def test_render_empty():
    image = font.render("")
    assert image.size == (3, 10)
    assert image.get_pixel(1, 1).a == 0.0
