import logging

import numpy as np
import pytest

from pixelcomp.color import RGBA64
from pixelcomp.color.convert import linear_to_srgb, srgb_to_linear
from pixelcomp.errors import InvalidArgument

from ..utils import PALETTE, assert_close

logger = logging.getLogger(__name__)


@pytest.mark.parametrize("value", np.linspace(0.0, 1.0, 21))
def test_linear_srgb_involution(value):
    pixel = RGBA64(value, value, value, 1.0, linear=True)
    pixel.to_srgb().to_linear()
    for channel in pixel.values()[:3]:
        assert_close(channel, value, 1e-9)
    assert_close(float(srgb_to_linear(linear_to_srgb(value))), value, 1e-9)


@pytest.mark.parametrize("values", PALETTE)
def test_premultiply_involution(values):
    r, g, b, a = values
    pixel = RGBA64(r * a, g * a, b * a, a, premultiplied=True)
    original = pixel.values()
    pixel.unpremultiply().premultiply()
    for x, y in zip(pixel.values(), original):
        assert_close(x, y, 1e-12)


def test_premultiply_transparent():
    pixel = RGBA64(0.5, 0.5, 0.5, 0.0).premultiply()
    assert pixel.values() == (0.0, 0.0, 0.0, 0.0)
    assert pixel.premultiplied


def test_state_conversion_keeps_premultiplication():
    pixel = RGBA64(0.5, 0.25, 1.0, 0.5).premultiply()
    pixel.to_linear()
    assert pixel.linear and pixel.premultiplied
    pixel.to_srgb().unpremultiply()
    assert_close(pixel.r, 0.5, 1e-12)
    assert_close(pixel.g, 0.25, 1e-12)


def test_process_restores_state():
    pixel = RGBA64(0.5, 0.5, 0.5, 0.5).premultiply()

    def fn(p):
        assert p.linear and not p.premultiplied
        p.r = 0.0
        return "done"

    assert pixel.process(True, True, fn) == "done"
    assert pixel.premultiplied and not pixel.linear
    assert pixel.r == 0.0


def test_process_restores_state_on_error():
    pixel = RGBA64(0.5, 0.5, 0.5, 0.5)

    def fn(p):
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        pixel.process(False, True, fn)
    assert not pixel.linear and not pixel.premultiplied
    assert_close(pixel.r, 0.5, 1e-12)


def test_canonical():
    pixel = RGBA64(1.5, -0.5, 0.5, 1.2)
    canonical = pixel.canonical()
    assert canonical.premultiplied and not canonical.linear
    assert canonical.values() == (1.0, 0.0, 0.5, 1.0)
    # Source untouched.
    assert pixel.r == 1.5


def test_straight():
    pixel = RGBA64(0.2, 0.1, 0.05, 0.5, premultiplied=True)
    r, g, b, a = pixel.straight()
    assert_close(r, 0.4)
    assert_close(g, 0.2)
    assert_close(b, 0.1)
    assert a == 0.5


def test_8bit():
    assert RGBA64(1.0, 0.5, 0.0, 1.0).to_8bit() == (255, 127, 0, 255)
    assert RGBA64.from_8bit(255, 0, 0).values() == (1.0, 0.0, 0.0, 1.0)
    assert RGBA64(1.0, 0.0, 0.0, 1.0).to_16bit() == (65535, 0, 0, 65535)


def test_equality():
    assert RGBA64(0.1, 0.2, 0.3, 1.0) == RGBA64(0.1, 0.2, 0.3 + 1e-12, 1.0)
    assert RGBA64(0.1, 0.2, 0.3, 1.0) != RGBA64(0.1, 0.2, 0.3, 1.0, linear=True)
    assert RGBA64(0.1, 0.2, 0.3, 1.0).is_close(RGBA64(0.1, 0.2, 0.3005, 1.0))


@pytest.mark.parametrize("value", [float("nan"), float("inf"), "red"])
def test_invalid_channel(value):
    with pytest.raises((InvalidArgument, ValueError)):
        RGBA64(value, 0.0, 0.0, 1.0)


def test_from_values():
    assert RGBA64.from_values([0.0, 0.5, 1.0, 1.0]).g == 0.5
    with pytest.raises(InvalidArgument):
        RGBA64.from_values([0.0, 0.5, 1.0])
    with pytest.raises(InvalidArgument):
        RGBA64.from_values([0.0, 0.5, 2.0, 1.0])
