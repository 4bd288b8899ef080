"""
Exception hierarchy.

All errors raised by pixelcomp derive from :py:class:`PixelCompError` and
additionally from the closest builtin exception, so callers may catch either::

    try:
        image.get_pixel(-1, 0)
    except IndexError:
        ...
"""


class PixelCompError(Exception):
    """Base class of every pixelcomp error."""


class InvalidArgument(PixelCompError, ValueError):
    """Out-of-range value, unknown name or malformed input."""


class OutOfBounds(InvalidArgument, IndexError):
    """Pixel coordinates or a region outside of the image bounds."""


class Unsupported(PixelCompError, NotImplementedError):
    """Operation the requested model or method does not provide."""


class DuplicateRegistration(PixelCompError, KeyError):
    """Name already present in a registry."""

    def __str__(self) -> str:
        # KeyError quotes its argument.
        return str(self.args[0]) if self.args else ""


class DecodeError(PixelCompError, IOError):
    """Image bytes could not be decoded."""


class EncodeError(PixelCompError, IOError):
    """Image could not be encoded."""


class InternalInvariant(PixelCompError, AssertionError):
    """Guard violation. Always a bug."""
