"""
Image buffer, transforms, drawing and I/O.
"""

from pixelcomp.image.buffer import Image, Metadata
from pixelcomp.image.draw import (
    FillStyle,
    LineStyle,
    circle,
    draw_image,
    draw_text,
    line,
    rectangle,
)
from pixelcomp.image.io import decode, encode, load, save

__all__ = [
    "FillStyle",
    "Image",
    "LineStyle",
    "Metadata",
    "circle",
    "decode",
    "draw_image",
    "draw_text",
    "encode",
    "line",
    "load",
    "rectangle",
    "save",
]
