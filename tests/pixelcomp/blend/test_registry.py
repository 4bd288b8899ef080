import logging

import numpy as np
import pytest

from pixelcomp.blend import (
    BLEND_MODES,
    BlendMode,
    blend,
    by_category,
    categories,
    check_alpha,
    doc,
    get_mode,
    list_modes,
    register,
)
from pixelcomp.color import RGBA64
from pixelcomp.constants import BlendCategory
from pixelcomp.errors import DuplicateRegistration, InvalidArgument

logger = logging.getLogger(__name__)

CANONICAL_NAMES = [
    "normal",
    "erase",
    "darken",
    "multiply",
    "colorburn",
    "linearburn",
    "darkercolor",
    "lighten",
    "screen",
    "colordodge",
    "add",
    "lightercolor",
    "overlay",
    "softlight",
    "hardlight",
    "vividlight",
    "linearlight",
    "pinlight",
    "hardmix",
    "difference",
    "exclusion",
    "subtract",
    "divide",
    "negation",
    "contrastnegate",
    "hue",
    "saturation",
    "color",
    "luminosity",
    "reflect",
    "glow",
    "average",
]


@pytest.mark.parametrize("name", CANONICAL_NAMES)
def test_canonical_names(name):
    mode = get_mode(name)
    assert isinstance(mode, BlendMode)
    assert mode.name == name
    assert mode.description


def test_list_modes_sorted():
    names = list_modes()
    assert names == sorted(names)
    assert set(CANONICAL_NAMES) <= set(names)


def test_unknown_mode():
    with pytest.raises(InvalidArgument):
        get_mode("dissolve")
    with pytest.raises(InvalidArgument):
        blend(RGBA64(), RGBA64(), "dissolve")


def test_categories():
    assert categories() == [
        BlendCategory.BASIC,
        BlendCategory.DARKEN,
        BlendCategory.LIGHTEN,
        BlendCategory.CONTRAST,
        BlendCategory.COMPARATIVE,
        BlendCategory.COMPONENT,
        BlendCategory.SPECIAL,
    ]


@pytest.mark.parametrize("category", list(BlendCategory))
def test_by_category(category):
    modes = by_category(category)
    assert modes
    assert all(mode.category == category for mode in modes)
    assert [m.name for m in modes] == sorted(m.name for m in modes)


def test_category_coverage():
    names = [mode.name for c in categories() for mode in by_category(c)]
    assert sorted(names) == list_modes()
    assert by_category("component") == by_category(BlendCategory.COMPONENT)


def test_unknown_category():
    with pytest.raises(InvalidArgument):
        by_category("bogus")


def test_register_duplicate():
    before = get_mode("multiply")
    with pytest.raises(DuplicateRegistration):
        register("multiply", "Other.", BlendCategory.DARKEN, lambda Cb, Cs: Cb)
    assert get_mode("multiply") is before


def test_register_custom():
    name = "test-keep-bottom"

    @register(name, "Keeps the bottom color.", "special")
    def keep(Cb, Cs):
        return Cb

    try:
        mode = get_mode(name)
        assert mode.category == BlendCategory.SPECIAL
        result = mode.blend(RGBA64(0.2, 0.4, 0.6, 1.0), RGBA64(1.0, 1.0, 1.0, 1.0))
        assert result.is_close(RGBA64(0.2, 0.4, 0.6, 1.0))
    finally:
        BLEND_MODES._items.pop(name)


@pytest.mark.parametrize("alpha", [-0.1, 1.1, float("nan"), float("inf"), "half", None])
def test_check_alpha_invalid(alpha):
    with pytest.raises(InvalidArgument):
        check_alpha(alpha)


def test_check_alpha_tolerance():
    assert check_alpha(1.0 + 1e-9) == 1.0
    assert check_alpha(-1e-9) == 0.0
    assert check_alpha(0.25) == 0.25


@pytest.mark.parametrize("bottom, top", [(None, RGBA64()), (RGBA64(), None), ((0, 0, 0, 1), RGBA64())])
def test_blend_invalid_pixels(bottom, top):
    with pytest.raises(InvalidArgument):
        get_mode("normal").blend(bottom, top)


def test_blend_does_not_mutate():
    bottom = RGBA64(0.2, 0.4, 0.6, 0.5)
    top = RGBA64(0.8, 0.1, 0.3, 0.7)
    get_mode("overlay").blend(bottom, top, 0.5)
    assert bottom.values() == (0.2, 0.4, 0.6, 0.5)
    assert not bottom.premultiplied
    assert top.values() == (0.8, 0.1, 0.3, 0.7)


def test_blend_arrays_matches_pixels():
    mode = get_mode("softlight")
    rng = np.random.default_rng(0)
    Cb, Cs = rng.random((8, 3)), rng.random((8, 3))
    Ab, As = rng.random((8, 1)), rng.random((8, 1))
    color, shape = mode.blend_arrays(Cb, Ab, Cs, As, 0.6)
    for i in range(8):
        pixel = mode.blend(RGBA64(*Cb[i], Ab[i, 0]), RGBA64(*Cs[i], As[i, 0]), 0.6)
        r, g, b, a = pixel.straight()
        np.testing.assert_allclose([r, g, b], color[i], atol=1e-9)
        np.testing.assert_allclose(a, shape[i, 0], atol=1e-12)


def test_doc():
    text = doc()
    assert text.startswith("| Category | Mode | Description |")
    for name in CANONICAL_NAMES:
        assert "`%s`" % name in text
