import logging
import threading
import time

import numpy as np
import pytest
from PIL import Image as PILImage

from pixelcomp import Image, RGBA64
from pixelcomp.errors import InternalInvariant, InvalidArgument, OutOfBounds
from pixelcomp.image.buffer import Metadata, quantize

from ..utils import RED, WHITE, assert_pixel, gradient, solid

logger = logging.getLogger(__name__)


@pytest.mark.parametrize("width, height", [(0, 1), (1, 0), (-1, 5), (2.5, 2), (True, 1)])
def test_invalid_size(width, height):
    with pytest.raises(InvalidArgument):
        Image(width, height)


def test_new():
    image = Image.new(4, 3)
    assert image.size == (4, 3)
    assert image.bounds == (0, 0, 4, 3)
    assert image.get_pixel(0, 0).values() == (0.0, 0.0, 0.0, 0.0)
    assert "width=4" in repr(image)
    image = Image.new(2, 2, RGBA64(1.0, 0.0, 0.0, 0.5))
    pixel = image.get_pixel(1, 1)
    assert pixel.premultiplied and not pixel.linear
    assert_pixel(pixel, (1.0, 0.0, 0.0, 0.5), 1e-4)


def test_get_set_pixel():
    image = Image(4, 4)
    image.set_pixel(2, 3, RGBA64(0.25, 0.5, 0.75, 1.0))
    assert_pixel(image.get_pixel(2, 3), (0.25, 0.5, 0.75, 1.0), 1e-4)
    assert image.get_pixel(3, 2).a == 0.0


def test_set_pixel_canonicalizes():
    image = Image(1, 1)
    image.set_pixel(0, 0, RGBA64(0.5, 0.5, 0.5, 1.0, linear=True))
    assert_pixel(image.get_pixel(0, 0), RGBA64(0.5, 0.5, 0.5, 1.0, linear=True), 1e-4)
    image.set_pixel(0, 0, RGBA64(2.0, -1.0, 0.5, 1.0))
    assert_pixel(image.get_pixel(0, 0), (1.0, 0.0, 0.5, 1.0), 1e-4)


@pytest.mark.parametrize("x, y", [(-1, 0), (0, -1), (4, 0), (0, 4)])
def test_out_of_bounds(x, y):
    image = Image(4, 4)
    with pytest.raises(OutOfBounds):
        image.get_pixel(x, y)
    with pytest.raises(IndexError):
        image.set_pixel(x, y, RGBA64())


def test_set_pixel_invalid():
    with pytest.raises(InvalidArgument):
        Image(1, 1).set_pixel(0, 0, (1, 1, 1, 1))


def test_clone_is_deep():
    image = solid(3, 3, RED)
    image.metadata = Metadata("red.png", {"key": 1})
    copy = image.clone()
    copy.set_pixel(0, 0, RGBA64(0.0, 0.0, 1.0, 1.0))
    copy.metadata.properties["key"] = 2
    assert_pixel(image.get_pixel(0, 0), RED, 1e-4)
    assert image.metadata.properties["key"] == 1
    assert copy.metadata.source == "red.png"


def test_metadata_derive():
    metadata = Metadata("a.png", {"x": 1})
    derived = metadata.derive(y=2)
    assert derived.properties == {"x": 1, "y": 2}
    assert metadata.properties == {"x": 1}
    assert derived.source == "a.png"


def test_quantize():
    data = quantize(np.array([[[0.8, 0.2, -0.1, 0.5]]]))
    assert data.dtype == np.uint16
    assert data.tolist() == [[[32767, 13107, 0, 32767]]]


def test_quantize_truncates_like_pixel():
    pixel = RGBA64(0.5, 0.5, 0.5, 1.0)
    image = Image.new(1, 1, pixel)
    assert tuple(image.storage()[0, 0]) == pixel.to_16bit()
    assert image.topil().getpixel((0, 0)) == pixel.to_8bit()


def test_quantize_keeps_8bit_levels():
    levels = np.arange(256, dtype=np.uint8)
    array = np.stack([levels, levels, levels, np.full(256, 255, np.uint8)], axis=-1)
    image = Image.fromarray(array[np.newaxis])
    assert np.array_equal(np.asarray(image.topil()), array[np.newaxis])


@pytest.mark.parametrize(
    "array, expected",
    [
        (np.full((2, 2), 128, dtype=np.uint8), (128 / 255.0,) * 3 + (1.0,)),
        (np.full((2, 2, 2), 0.5), (0.5, 0.5, 0.5, 0.5)),
        (np.full((2, 2, 3), 65535, dtype=np.uint16), (1.0, 1.0, 1.0, 1.0)),
        (np.array([[[1.0, 0.0, 0.0, 0.5]]]), (1.0, 0.0, 0.0, 0.5)),
    ],
)
def test_fromarray(array, expected):
    image = Image.fromarray(array)
    assert_pixel(image.get_pixel(0, 0), expected, 1e-4)


def test_fromarray_premultiplied():
    image = Image.fromarray(np.array([[[0.5, 0.0, 0.0, 0.5]]]), premultiplied=True)
    assert_pixel(image.get_pixel(0, 0), (1.0, 0.0, 0.0, 0.5), 1e-4)


@pytest.mark.parametrize(
    "array",
    [
        np.zeros((2, 2, 5)),
        np.zeros((2,)),
        np.zeros((2, 2, 4), dtype=np.int32),
        np.full((2, 2, 4), np.nan),
        np.zeros((0, 2, 4)),
    ],
)
def test_fromarray_invalid(array):
    with pytest.raises(InvalidArgument):
        Image.fromarray(array)


def test_numpy():
    image = Image.new(2, 1, RGBA64(1.0, 0.5, 0.0, 0.5))
    straight = image.numpy()
    assert straight.shape == (1, 2, 4)
    np.testing.assert_allclose(straight[0, 0], [1.0, 0.5, 0.0, 0.5], atol=1e-4)
    premultiplied = image.numpy(premultiplied=True)
    np.testing.assert_allclose(premultiplied[0, 0], [0.5, 0.25, 0.0, 0.5], atol=1e-4)


def test_pil_conversion():
    image = gradient(5, 4)
    pil_image = image.topil()
    assert pil_image.mode == "RGBA"
    assert pil_image.size == (5, 4)
    restored = Image.frompil(pil_image)
    np.testing.assert_allclose(restored.numpy(), image.numpy(), atol=1.0 / 255)


@pytest.mark.parametrize("mode", ["RGB", "L", "LA", "P"])
def test_frompil_modes(mode):
    pil_image = PILImage.new("RGB", (3, 2), (255, 255, 255)).convert(mode)
    image = Image.frompil(pil_image)
    assert image.size == (3, 2)
    assert image.get_pixel(0, 0).a == pytest.approx(1.0)


def test_from_decoded_pixels():
    assert Image.from_decoded_pixels(np.zeros((2, 3, 4))).size == (3, 2)
    assert Image.from_decoded_pixels(PILImage.new("RGBA", (3, 2))).size == (3, 2)
    with pytest.raises(InvalidArgument):
        Image.from_decoded_pixels(b"\x89PNG")


def test_replace():
    image = Image(2, 2)
    image.replace(np.ones((2, 2, 4)))
    assert_pixel(image.get_pixel(1, 1), WHITE, 1e-4)
    image.replace(np.full((2, 2, 4), 0.5), premultiplied=False)
    assert_pixel(image.get_pixel(1, 1), (0.5, 0.5, 0.5, 0.5), 1e-4)
    with pytest.raises(InvalidArgument):
        image.replace(np.ones((3, 2, 4)))


def test_fill():
    image = Image(3, 2).fill(RGBA64(0.0, 1.0, 0.0, 1.0))
    assert np.all(image.numpy()[..., 1] == 1.0)
    with pytest.raises(InvalidArgument):
        image.fill(None)


def _invert(x, y, pixel):
    r, g, b, a = pixel.straight()
    return RGBA64(1.0 - r, 1.0 - g, 1.0 - b, a)


def _position(x, y, pixel):
    return RGBA64(x / 31.0, y / 23.0, (x * y) % 7 / 7.0, 1.0)


@pytest.mark.parametrize("fn", [_invert, _position])
@pytest.mark.parametrize("workers", [None, 1, 3, 8])
def test_parallel_equals_sequential(fn, workers):
    source = gradient(32, 24)
    parallel = source.clone().process_parallel(fn, workers=workers)
    sequential = source.clone().process_sequential(fn)
    assert np.array_equal(parallel.storage(), sequential.storage())


def test_process_is_parallel():
    image = gradient(8, 8)
    expected = image.clone().process_sequential(_invert)
    assert np.array_equal(image.process(_invert).storage(), expected.storage())


def test_process_sequential_order():
    visited = []

    def fn(x, y, pixel):
        visited.append((x, y))
        return pixel

    Image(3, 2).process_sequential(fn)
    assert visited == [(0, 0), (1, 0), (2, 0), (0, 1), (1, 1), (2, 1)]


def test_process_visits_every_pixel_once():
    lock = threading.Lock()
    counts = {}

    def fn(x, y, pixel):
        with lock:
            counts[(x, y)] = counts.get((x, y), 0) + 1
        return pixel

    Image(17, 13).process_parallel(fn, workers=4)
    assert len(counts) == 17 * 13
    assert set(counts.values()) == {1}


@pytest.mark.parametrize("method", ["process_parallel", "process_sequential"])
def test_process_error_commits_and_raises(method):
    image = solid(4, 4, WHITE)

    def fn(x, y, pixel):
        if (x, y) == (1, 2):
            raise ValueError("bad pixel")
        return RGBA64(0.0, 0.0, 0.0, 1.0)

    with pytest.raises(ValueError, match="bad pixel"):
        getattr(image, method)(fn)
    # The pass completed; the failing pixel kept its value.
    assert_pixel(image.get_pixel(1, 2), WHITE, 1e-4)
    assert_pixel(image.get_pixel(0, 0), (0.0, 0.0, 0.0, 1.0), 1e-4)
    assert_pixel(image.get_pixel(3, 3), (0.0, 0.0, 0.0, 1.0), 1e-4)


def test_process_invalid_result():
    image = solid(2, 2, WHITE)
    with pytest.raises(InternalInvariant):
        image.process_sequential(lambda x, y, p: (0, 0, 0, 1))
    assert_pixel(image.get_pixel(0, 0), WHITE, 1e-4)


def test_process_function_may_read_image():
    image = gradient(6, 4)
    expected = image.numpy()

    def fn(x, y, pixel):
        return image.get_pixel(x, y)

    image.process_parallel(fn, workers=2)
    np.testing.assert_allclose(image.numpy(), expected, atol=1e-4)


@pytest.mark.parametrize("method", ["process_parallel", "process_sequential"])
def test_process_blocks_concurrent_writes(method):
    image = solid(6, 6, (0.0, 0.0, 0.0, 1.0))
    started = threading.Event()

    def fn(x, y, pixel):
        if (x, y) == (0, 0):
            started.set()
            time.sleep(0.2)
        return pixel

    def write():
        started.wait(5.0)
        image.set_pixel(3, 3, RGBA64(*RED))

    writer = threading.Thread(target=write)
    writer.start()
    getattr(image, method)(fn)
    writer.join(5.0)
    assert not writer.is_alive()
    assert_pixel(image.get_pixel(3, 3), RED, 1e-4)


def test_process_invalid_workers():
    with pytest.raises(InvalidArgument):
        Image(2, 2).process_parallel(_invert, workers=-1)


def test_blend():
    bottom = solid(4, 4, (0.5, 0.5, 0.5, 1.0))
    top = solid(2, 2, (0.0, 0.0, 0.0, 1.0))
    result = bottom.blend(top, "screen", x=1, y=1)
    assert_pixel(result.get_pixel(1, 1), (0.5, 0.5, 0.5, 1.0), 1e-4)
    result = bottom.blend(top, "multiply", alpha=1.0, x=1, y=1)
    assert_pixel(result.get_pixel(1, 1), (0.0, 0.0, 0.0, 1.0), 1e-4)
    assert_pixel(result.get_pixel(0, 0), (0.5, 0.5, 0.5, 1.0), 1e-4)
    # Source untouched.
    assert_pixel(bottom.get_pixel(1, 1), (0.5, 0.5, 0.5, 1.0), 1e-4)


def test_paste_matches_pixel_blend():
    from pixelcomp.blend import get_mode

    bottom = gradient(6, 5)
    top = Image.new(6, 5, RGBA64(0.9, 0.2, 0.4, 0.6))
    expected = get_mode("overlay").blend(bottom.get_pixel(3, 2), top.get_pixel(3, 2), 0.5)
    bottom.paste(top, mode="overlay", alpha=0.5)
    assert_pixel(bottom.get_pixel(3, 2), expected, 1e-4)


def test_paste_clips():
    bottom = solid(4, 4, WHITE)
    top = solid(4, 4, RED)
    bottom.paste(top, x=3, y=-3)
    assert_pixel(bottom.get_pixel(3, 0), RED, 1e-4)
    assert_pixel(bottom.get_pixel(2, 0), WHITE, 1e-4)
    assert_pixel(bottom.get_pixel(3, 1), WHITE, 1e-4)
    bottom.paste(top, x=10, y=10)


def test_paste_invalid():
    with pytest.raises(InvalidArgument):
        Image(2, 2).paste(np.zeros((2, 2, 4)))
    with pytest.raises(InvalidArgument):
        Image(2, 2).paste(Image(2, 2), mode="nope")
    with pytest.raises(InvalidArgument):
        Image(2, 2).paste(Image(2, 2), alpha=2.0)
