"""
pixelcomp: raster compositing and color processing.

This package models colors in many color spaces around one canonical pixel,
composites images with a catalog of blend modes, and applies parametric
filters, transforms and drawing primitives.

Basic usage::

    from pixelcomp import RGBA64, Image

    base = Image.new(128, 128, RGBA64(1.0, 1.0, 1.0, 1.0))
    overlay = Image.open("overlay.png")
    result = base.blend(overlay, "multiply", alpha=0.75)
    result = result.apply_filter("saturation", amount=0.2)
    result.save("output.png")

Architecture:

- :py:mod:`pixelcomp.color`: Canonical pixel, color models and conversion
- :py:mod:`pixelcomp.blend`: Blend mode registry and kernels
- :py:mod:`pixelcomp.image`: Image buffer, transforms, drawing and I/O
- :py:mod:`pixelcomp.filters`: Filter registry and built-in filters
- :py:mod:`pixelcomp.projections`: Map projections
- :py:mod:`pixelcomp.composition`: Layer stacks
"""

from pixelcomp.color.rgba64 import RGBA64
from pixelcomp.image.buffer import Image
from pixelcomp.version import __version__

__all__ = ["Image", "RGBA64", "__version__"]
