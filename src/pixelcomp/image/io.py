"""
PNG and JPEG decode and encode with Pillow.

Example::

    from pixelcomp.image import io

    image = io.load("input.png")
    io.save(image, "output.jpg", quality=85)
"""

import io
import logging
import os
from typing import Any, BinaryIO, Union

import numpy as np
from PIL import Image as PILImage
from PIL import UnidentifiedImageError

from pixelcomp.constants import JPEG_QUALITY, QUANTIZE_SLACK, ImageFormat
from pixelcomp.errors import DecodeError, EncodeError, InvalidArgument
from pixelcomp.image.buffer import Image, Metadata

logger = logging.getLogger(__name__)

PathOrFile = Union[str, bytes, os.PathLike, BinaryIO]

_PIL_FORMATS = {ImageFormat.PNG: "PNG", ImageFormat.JPEG: "JPEG"}


def _format(format: Union[str, ImageFormat, None], fp: Any) -> ImageFormat:
    if format is not None:
        name = format.value if isinstance(format, ImageFormat) else str(format)
        name = name.lower().lstrip(".")
        result = ImageFormat.from_extension("." + name)
        if result is None:
            raise InvalidArgument("unsupported image format: %r" % (format,))
        return result
    if isinstance(fp, (str, bytes, os.PathLike)):
        ext = os.path.splitext(os.fsdecode(fp))[1]
        result = ImageFormat.from_extension(ext)
        if result is None:
            raise InvalidArgument("unsupported file extension: %r" % ext)
        return result
    raise InvalidArgument("format is required when writing to a file object")


def _open(fp: Any, source: str) -> Image:
    try:
        with PILImage.open(fp) as pil_image:
            pil_image.load()
            image = Image.frompil(pil_image, Metadata(source))
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as e:
        raise DecodeError("cannot decode image %s: %s" % (source or "data", e)) from e
    logger.debug("Decoded %s (%dx%d)", source or "image data", image.width, image.height)
    return image


def load(fp: PathOrFile) -> Image:
    """
    Load a PNG or JPEG image.

    :param fp: filename or file-like object.
    :return: :py:class:`~pixelcomp.image.buffer.Image`
    :raises DecodeError: If the data is not a readable image.
    """
    if isinstance(fp, (str, bytes, os.PathLike)):
        with open(fp, "rb") as f:
            return _open(f, os.fsdecode(fp))
    return _open(fp, getattr(fp, "name", ""))


def decode(data: bytes) -> Image:
    """
    Decode PNG or JPEG bytes.

    :raises DecodeError: If the bytes are not a readable image.
    """
    return _open(io.BytesIO(data), "")


def _flatten(image: Image) -> PILImage.Image:
    # JPEG has no alpha; composite over opaque white.
    array = image.numpy(premultiplied=True)
    color = array[..., :3] + (1.0 - array[..., 3:])
    return PILImage.fromarray(
        np.floor(np.clip(color, 0.0, 1.0) * 255.0 + QUANTIZE_SLACK).astype(np.uint8)
    )


def _write(image: Image, fp: Any, format: ImageFormat, quality: int) -> None:
    if not isinstance(image, Image):
        raise InvalidArgument("expected Image, got %s" % type(image).__name__)
    if not 1 <= quality <= 100:
        raise InvalidArgument("quality must be within [1, 100], got %r" % quality)
    try:
        if format == ImageFormat.JPEG:
            _flatten(image).save(fp, _PIL_FORMATS[format], quality=quality)
        else:
            image.topil().save(fp, _PIL_FORMATS[format])
    except (OSError, ValueError, KeyError) as e:
        raise EncodeError("cannot encode %s: %s" % (format.value, e)) from e


def save(
    image: Image,
    fp: PathOrFile,
    format: Union[str, ImageFormat, None] = None,
    quality: int = JPEG_QUALITY,
) -> None:
    """
    Save an image as PNG or JPEG.

    :param fp: filename or file-like object.
    :param format: ``png`` or ``jpeg``. Default is to guess from the file
        extension (``.png``, ``.jpg``, ``.jpeg``).
    :param quality: JPEG quality in [1, 100].
    :raises InvalidArgument: For unknown formats or extensions.
    :raises EncodeError: If writing fails.
    """
    format = _format(format, fp)
    _write(image, fp, format, quality)
    logger.debug("Saved %dx%d image as %s", image.width, image.height, format.value)


def encode(
    image: Image,
    format: Union[str, ImageFormat] = ImageFormat.PNG,
    quality: int = JPEG_QUALITY,
) -> bytes:
    """
    Encode an image to PNG or JPEG bytes.

    :raises EncodeError: If encoding fails.
    """
    buffer = io.BytesIO()
    _write(image, buffer, _format(format, None), quality)
    return buffer.getvalue()
