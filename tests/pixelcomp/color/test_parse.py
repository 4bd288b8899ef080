import pytest

from pixelcomp.color import MATERIAL_DESIGN, RGB8, WEB_SAFE, Palette, parse_color
from pixelcomp.errors import InvalidArgument

from ..utils import assert_pixel


@pytest.mark.parametrize(
    "text, expected",
    [
        ("#FF0000", (1.0, 0.0, 0.0, 1.0)),
        ("#0f0", (0.0, 1.0, 0.0, 1.0)),
        ("rgb(0, 0, 255)", (0.0, 0.0, 1.0, 1.0)),
        ("rgba(255, 255, 255, 0.5)", (1.0, 1.0, 1.0, 0.5)),
        ("hsl(0, 100%, 50%)", (1.0, 0.0, 0.0, 1.0)),
        ("HSL(120, 100, 25)", (0.0, 0.5, 0.0, 1.0)),
        ("white", (1.0, 1.0, 1.0, 1.0)),
        (" Black ", (0.0, 0.0, 0.0, 1.0)),
        ("transparent", (0.0, 0.0, 0.0, 0.0)),
    ],
)
def test_parse_color(text, expected):
    assert_pixel(parse_color(text), expected, 1e-3)


@pytest.mark.parametrize("text", ["", "rgb(1, 2)", "nocolor", "#12", 42])
def test_parse_color_invalid(text):
    with pytest.raises(InvalidArgument):
        parse_color(text)


def test_palettes():
    assert len(WEB_SAFE) == 6
    assert len(MATERIAL_DESIGN) == 16
    assert isinstance(MATERIAL_DESIGN.get(0), RGB8)
    with pytest.raises(InvalidArgument):
        WEB_SAFE.get(6)
    with pytest.raises(InvalidArgument):
        WEB_SAFE.get(-1)


def test_palette_add():
    palette = Palette("custom").add(RGB8(1, 2, 3))
    assert list(palette) == [RGB8(1, 2, 3)]
