"""
Image buffer.

:py:class:`Image` stores pixels as a ``(height, width, 4)`` ``uint16`` numpy
array of premultiplied sRGB values behind a lock. Single pixel access goes
through :py:class:`~pixelcomp.color.rgba64.RGBA64`; bulk operations work on
float arrays.

Example::

    from pixelcomp import Image, RGBA64

    image = Image.new(64, 64, RGBA64(1.0, 1.0, 1.0, 1.0))
    image.set_pixel(3, 4, RGBA64(1.0, 0.0, 0.0, 0.5))

    def invert(x, y, pixel):
        r, g, b, a = pixel.straight()
        return RGBA64(1.0 - r, 1.0 - g, 1.0 - b, a)

    image.process(invert)
"""

import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, Iterable, Optional, Tuple, Union

import numpy as np
from attrs import define, field
from numpy.typing import NDArray
from PIL import Image as PILImage

from pixelcomp import utils
from pixelcomp.color.rgba64 import RGBA64
from pixelcomp.constants import QUANTIZE_SLACK
from pixelcomp.errors import InternalInvariant, InvalidArgument, OutOfBounds

logger = logging.getLogger(__name__)

QUANTUM = 65535.0

PixelFunction = Callable[[int, int, RGBA64], RGBA64]


@define
class Metadata:
    """
    Image provenance.

    .. py:attribute:: source

        Where the pixels came from, e.g. a file name. Empty for new images.

    .. py:attribute:: properties

        Free-form annotations. Transforms record what they did here, e.g.
        ``resized_from_width``.
    """

    source: str = ""
    properties: Dict[str, Any] = field(factory=dict)

    def derive(self, **properties: Any) -> "Metadata":
        """Copy with additional annotations."""
        merged = dict(self.properties)
        merged.update(properties)
        return Metadata(self.source, merged)


def quantize(array: NDArray[np.floating]) -> NDArray[np.uint16]:
    """Premultiplied float RGBA to clamped 16-bit storage, truncated."""
    array = np.asarray(array, dtype=np.float64)
    alpha = np.clip(array[..., 3:4], 0.0, 1.0)
    color = np.clip(array[..., :3], 0.0, alpha)
    out = np.concatenate([color, alpha], axis=-1)
    return np.floor(out * QUANTUM + QUANTIZE_SLACK).astype(np.uint16)


def _check_size(width: Any, height: Any) -> Tuple[int, int]:
    for name, value in (("width", width), ("height", height)):
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
            raise InvalidArgument("%s must be an integer, got %r" % (name, value))
        if value <= 0:
            raise InvalidArgument("%s must be positive, got %r" % (name, value))
    return int(width), int(height)


class Image:
    """
    Thread-safe 2D pixel grid with metadata.

    Storage access is serialized on one lock. Writers also hold a second lock
    for their whole duration, so a bulk pass that reads from a snapshot and
    swaps the result in cannot lose a concurrent write.

    :param width: Width in pixels.
    :param height: Height in pixels.
    :param metadata: Optional :py:class:`Metadata`.
    :raises InvalidArgument: For non-positive dimensions.
    """

    def __init__(
        self, width: int, height: int, metadata: Optional[Metadata] = None
    ) -> None:
        width, height = _check_size(width, height)
        self._data = np.zeros((height, width, 4), dtype=np.uint16)
        self._lock = threading.RLock()
        self._write_lock = threading.RLock()
        self.metadata = metadata if metadata is not None else Metadata()

    def __repr__(self) -> str:
        return "%s(width=%d, height=%d)" % (
            self.__class__.__name__,
            self.width,
            self.height,
        )

    @classmethod
    def new(
        cls,
        width: int,
        height: int,
        color: Optional[RGBA64] = None,
        metadata: Optional[Metadata] = None,
    ) -> "Image":
        """
        Create a new image.

        :param width: Width in pixels.
        :param height: Height in pixels.
        :param color: Fill color. Default is fully transparent.
        :return: :py:class:`Image`
        """
        image = cls(width, height, metadata)
        if color is not None:
            image.fill(color)
        return image

    @classmethod
    def _from_storage(
        cls, data: NDArray[np.uint16], metadata: Optional[Metadata] = None
    ) -> "Image":
        if data.ndim != 3 or data.shape[2] != 4:
            raise InternalInvariant("unexpected storage shape %r" % (data.shape,))
        image = cls(data.shape[1], data.shape[0], metadata)
        image._data = np.ascontiguousarray(data, dtype=np.uint16)
        return image

    @classmethod
    def fromarray(
        cls,
        array: NDArray,
        premultiplied: bool = False,
        metadata: Optional[Metadata] = None,
    ) -> "Image":
        """
        Create an image from a numpy array.

        Float arrays hold values in [0, 1]; ``uint8`` and ``uint16`` arrays
        are scaled accordingly. Gray, gray+alpha, RGB and RGBA layouts are
        accepted.

        :param array: Array of shape ``(height, width)`` or
            ``(height, width, channels)``.
        :param premultiplied: Whether color is already multiplied by alpha.
        :return: :py:class:`Image`
        """
        array = np.asarray(array)
        if array.dtype == np.uint8:
            array = array.astype(np.float64) / 255.0
        elif array.dtype == np.uint16:
            array = array.astype(np.float64) / QUANTUM
        elif np.issubdtype(array.dtype, np.floating):
            array = array.astype(np.float64)
        else:
            raise InvalidArgument("unsupported array dtype %s" % array.dtype)
        if array.ndim == 2:
            array = array[:, :, np.newaxis]
        if array.ndim != 3 or array.shape[2] not in (1, 2, 3, 4):
            raise InvalidArgument("unsupported array shape %r" % (array.shape,))
        if not np.all(np.isfinite(array)):
            raise InvalidArgument("array contains non-finite values")

        channels = array.shape[2]
        if channels in (1, 2):
            color = np.repeat(array[:, :, :1], 3, axis=2)
        else:
            color = array[:, :, :3]
        if channels in (2, 4):
            alpha = array[:, :, -1:]
        else:
            alpha = np.ones(array.shape[:2] + (1,), dtype=np.float64)
        if not premultiplied:
            color = utils.premultiply(np.clip(color, 0.0, 1.0), np.clip(alpha, 0.0, 1.0))
        _check_size(array.shape[1], array.shape[0])
        return cls._from_storage(
            quantize(np.concatenate([color, alpha], axis=2)), metadata
        )

    @classmethod
    def frompil(
        cls, image: PILImage.Image, metadata: Optional[Metadata] = None
    ) -> "Image":
        """
        Create an image from a PIL Image.

        :param image: PIL Image object in any mode.
        :return: :py:class:`Image`
        """
        if image.mode == "I;16":
            array = np.asarray(image, dtype=np.uint16)
        else:
            if image.mode != "RGBA":
                image = image.convert("RGBA")
            array = np.asarray(image, dtype=np.uint8)
        return cls.fromarray(array, metadata=metadata)

    @classmethod
    def from_decoded_pixels(
        cls, src: Union[PILImage.Image, NDArray], metadata: Optional[Metadata] = None
    ) -> "Image":
        """
        Create an image from decoded raster pixels.

        :param src: PIL Image or numpy array.
        :return: :py:class:`Image`
        """
        if isinstance(src, PILImage.Image):
            return cls.frompil(src, metadata)
        if isinstance(src, np.ndarray):
            return cls.fromarray(src, metadata=metadata)
        raise InvalidArgument("cannot read pixels from %s" % type(src).__name__)

    @classmethod
    def open(cls, fp: Any) -> "Image":
        """
        Open a PNG or JPEG image.

        :param fp: filename or file-like object.
        :return: :py:class:`Image`
        """
        from pixelcomp.image.io import load

        return load(fp)

    @property
    def width(self) -> int:
        """
        Image width.

        :return: `int`
        """
        return self._data.shape[1]

    @property
    def height(self) -> int:
        """
        Image height.

        :return: `int`
        """
        return self._data.shape[0]

    @property
    def size(self) -> Tuple[int, int]:
        """
        (width, height) tuple.

        :return: `tuple`
        """
        return self.width, self.height

    @property
    def bounds(self) -> Tuple[int, int, int, int]:
        """
        Bounding box of the pixel grid.

        :return: (left, top, right, bottom) `tuple`.
        """
        return 0, 0, self.width, self.height

    def contains(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def _check_point(self, x: int, y: int) -> None:
        if not self.contains(x, y):
            raise OutOfBounds(
                "pixel (%r, %r) outside of %dx%d image"
                % (x, y, self.width, self.height)
            )

    def get_pixel(self, x: int, y: int) -> RGBA64:
        """
        Read one pixel.

        :return: Canonical :py:class:`~pixelcomp.color.rgba64.RGBA64`
            (sRGB, premultiplied).
        :raises OutOfBounds: If (x, y) lies outside of the image.
        """
        with self._lock:
            self._check_point(x, y)
            values = self._data[y, x].astype(np.float64) / QUANTUM
        return RGBA64(*values, linear=False, premultiplied=True)

    def set_pixel(self, x: int, y: int, pixel: RGBA64) -> None:
        """
        Write one pixel. The pixel is canonicalized and quantized.

        :raises OutOfBounds: If (x, y) lies outside of the image.
        :raises InvalidArgument: If `pixel` is not an RGBA64.
        """
        if not isinstance(pixel, RGBA64):
            raise InvalidArgument("expected RGBA64, got %s" % type(pixel).__name__)
        value = quantize(pixel.canonical().values())
        with self._write_lock, self._lock:
            self._check_point(x, y)
            self._data[y, x] = value

    def fill(self, pixel: RGBA64) -> "Image":
        """Set every pixel to `pixel`."""
        if not isinstance(pixel, RGBA64):
            raise InvalidArgument("expected RGBA64, got %s" % type(pixel).__name__)
        value = quantize(pixel.canonical().values())
        with self._write_lock, self._lock:
            self._data[:, :] = value
        return self

    def clone(self) -> "Image":
        """
        Deep copy of pixels and metadata.

        :return: :py:class:`Image`
        """
        with self._lock:
            data = self._data.copy()
        return Image._from_storage(
            data, Metadata(self.metadata.source, dict(self.metadata.properties))
        )

    copy = clone

    def storage(self) -> NDArray[np.uint16]:
        """Copy of the raw premultiplied 16-bit storage."""
        with self._lock:
            return self._data.copy()

    def numpy(self, premultiplied: bool = False) -> NDArray[np.float64]:
        """
        Get a float RGBA array of shape ``(height, width, 4)``.

        :param premultiplied: Return premultiplied instead of straight color.
        :return: :py:class:`numpy.ndarray`
        """
        with self._lock:
            array = self._data.astype(np.float64) / QUANTUM
        if not premultiplied:
            array[:, :, :3] = utils.unpremultiply(array[:, :, :3], array[:, :, 3:])
        return array

    def topil(self) -> PILImage.Image:
        """
        Get an 8-bit RGBA PIL Image.

        :return: :py:class:`PIL.Image`
        """
        array = np.clip(self.numpy(), 0.0, 1.0) * 255.0
        array = np.floor(array + QUANTIZE_SLACK).astype(np.uint8)
        return PILImage.fromarray(array)

    def replace(self, array: NDArray, premultiplied: bool = True) -> None:
        """
        Swap in new pixel values of the same size.

        :param array: Float RGBA array of shape ``(height, width, 4)``.
        """
        array = np.asarray(array, dtype=np.float64)
        if array.shape != self._data.shape:
            raise InvalidArgument(
                "expected shape %r, got %r" % (self._data.shape, array.shape)
            )
        if not premultiplied:
            array = np.concatenate(
                [utils.premultiply(array[..., :3], array[..., 3:]), array[..., 3:]],
                axis=-1,
            )
        data = quantize(array)
        with self._write_lock, self._lock:
            self._data = data

    def process(self, fn: PixelFunction, workers: Optional[int] = None) -> "Image":
        """
        Replace every pixel with ``fn(x, y, pixel)``. Runs in parallel.

        See :py:meth:`process_parallel`.
        """
        return self.process_parallel(fn, workers=workers)

    def process_sequential(self, fn: PixelFunction) -> "Image":
        """
        Replace every pixel with ``fn(x, y, pixel)`` in row-major order.

        `fn` receives canonical pixels and must return an RGBA64. When `fn`
        raises, the pixel keeps its value, the pass continues, and the last
        error is raised after the result has been committed. Other writers
        wait until the pass is committed; `fn` may read this image but must
        not write to it.
        """
        errors = _ErrorSink()
        with self._write_lock:
            with self._lock:
                snapshot = self._data.copy()
            destination = snapshot.copy()
            _process_rows(fn, snapshot, destination, range(snapshot.shape[0]), errors)
            with self._lock:
                self._data = destination
        errors.reraise()
        return self

    def process_parallel(
        self, fn: PixelFunction, workers: Optional[int] = None
    ) -> "Image":
        """
        Replace every pixel with ``fn(x, y, pixel)`` using a thread pool.

        Rows are split into blocks handled by up to `workers` threads
        (default: the number of logical CPUs). Each block reads from a snapshot
        and writes its own rows of a fresh destination, which replaces the
        pixels once all blocks are done. There is no ordering between pixels.
        Errors and concurrent writers are handled as in
        :py:meth:`process_sequential`.

        :param fn: Pixel function.
        :param workers: Number of worker threads.
        """
        workers = workers or os.cpu_count() or 1
        if workers < 1:
            raise InvalidArgument("workers must be positive, got %r" % workers)
        errors = _ErrorSink()
        with self._write_lock:
            with self._lock:
                snapshot = self._data.copy()
            destination = snapshot.copy()
            blocks = [
                block
                for block in np.array_split(np.arange(snapshot.shape[0]), workers * 4)
                if len(block)
            ]
            logger.debug(
                "Processing %dx%d pixels in %d blocks on %d workers",
                snapshot.shape[1],
                snapshot.shape[0],
                len(blocks),
                workers,
            )
            with ThreadPoolExecutor(max_workers=workers) as executor:
                futures = [
                    executor.submit(
                        _process_rows, fn, snapshot, destination, block, errors
                    )
                    for block in blocks
                ]
                for future in futures:
                    future.result()
            with self._lock:
                self._data = destination
        errors.reraise()
        return self

    def blend(
        self,
        other: "Image",
        mode: str = "normal",
        alpha: float = 1.0,
        x: int = 0,
        y: int = 0,
    ) -> "Image":
        """
        Blend `other` over this image into a new image.

        :param other: Source image placed at (x, y).
        :param mode: Blend mode name.
        :param alpha: Opacity in [0, 1].
        :return: :py:class:`Image`
        """
        result = self.clone()
        result.paste(other, x, y, mode, alpha)
        return result

    def paste(
        self,
        other: "Image",
        x: int = 0,
        y: int = 0,
        mode: str = "normal",
        alpha: float = 1.0,
    ) -> "Image":
        """
        Blend `other` onto this image in place at (x, y).

        Only the intersection with this image is touched; fully transparent
        source pixels leave the destination unchanged.
        """
        from pixelcomp.blend import get_mode

        if not isinstance(other, Image):
            raise InvalidArgument("expected Image, got %s" % type(other).__name__)
        blend_mode = get_mode(mode)
        left, top, right, bottom = utils.intersect(
            self.bounds, (x, y, x + other.width, y + other.height)
        )
        if left == right or top == bottom:
            return self
        source = other.numpy()[top - y : bottom - y, left - x : right - x]
        with self._write_lock, self._lock:
            target = self._data[top:bottom, left:right].astype(np.float64) / QUANTUM
            Cb = utils.unpremultiply(target[..., :3], target[..., 3:])
            color, shape = blend_mode.blend_arrays(
                Cb, target[..., 3:], source[..., :3], source[..., 3:], alpha
            )
            self._data[top:bottom, left:right] = quantize(
                np.concatenate([utils.premultiply(color, shape), shape], axis=-1)
            )
        return self

    # Transforms

    def resize(self, width: int, height: int, method: str = "bilinear") -> "Image":
        """See :py:func:`pixelcomp.image.transform.resize`."""
        from pixelcomp.image.transform import resize

        return resize(self, width, height, method)

    def scale(self, factor: float, method: str = "bilinear") -> "Image":
        """See :py:func:`pixelcomp.image.transform.scale`."""
        from pixelcomp.image.transform import scale

        return scale(self, factor, method)

    def crop(self, x: int, y: int, width: int, height: int) -> "Image":
        """See :py:func:`pixelcomp.image.transform.crop`."""
        from pixelcomp.image.transform import crop

        return crop(self, x, y, width, height)

    sub_image = crop

    def rotate(self, angle: float) -> "Image":
        """See :py:func:`pixelcomp.image.transform.rotate`."""
        from pixelcomp.image.transform import rotate

        return rotate(self, angle)

    def flip_h(self) -> "Image":
        """See :py:func:`pixelcomp.image.transform.flip_h`."""
        from pixelcomp.image.transform import flip_h

        return flip_h(self)

    def flip_v(self) -> "Image":
        """See :py:func:`pixelcomp.image.transform.flip_v`."""
        from pixelcomp.image.transform import flip_v

        return flip_v(self)

    def translate(self, dx: int, dy: int, wrap: bool = False) -> "Image":
        """See :py:func:`pixelcomp.image.transform.translate`."""
        from pixelcomp.image.transform import translate

        return translate(self, dx, dy, wrap)

    def apply_filter(self, name: str, **kwargs: Any) -> "Image":
        """Apply a registered filter. See :py:mod:`pixelcomp.filters`."""
        from pixelcomp.filters import get_filter

        return get_filter(name).apply(self, **kwargs)

    def save(self, fp: Any, format: Optional[str] = None, **kwargs: Any) -> None:
        """See :py:func:`pixelcomp.image.io.save`."""
        from pixelcomp.image.io import save

        save(self, fp, format=format, **kwargs)


class _ErrorSink:
    """Keeps the last error raised by any worker."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.error: Optional[BaseException] = None
        self.count = 0

    def add(self, error: BaseException) -> None:
        with self._lock:
            self.error = error
            self.count += 1

    def reraise(self) -> None:
        if self.error is not None:
            logger.debug("%d pixel(s) failed; last error: %s", self.count, self.error)
            raise self.error


def _process_rows(
    fn: PixelFunction,
    source: NDArray[np.uint16],
    destination: NDArray[np.uint16],
    rows: Iterable[int],
    errors: _ErrorSink,
) -> None:
    width = source.shape[1]
    for y in rows:
        y = int(y)
        values = source[y].astype(np.float64) / QUANTUM
        for x in range(width):
            pixel = RGBA64(*values[x], linear=False, premultiplied=True)
            try:
                result = fn(x, y, pixel)
                if not isinstance(result, RGBA64):
                    raise InternalInvariant(
                        "pixel function returned %s instead of RGBA64"
                        % type(result).__name__
                    )
                destination[y, x] = quantize(result.canonical().values())
            except Exception as e:
                errors.add(e)
