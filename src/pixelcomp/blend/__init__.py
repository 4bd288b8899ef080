"""
Blend modes.

Importing this package registers every built-in mode in
:py:data:`BLEND_MODES`.
"""

from pixelcomp.blend import modes  # noqa: F401
from pixelcomp.blend.registry import (
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

__all__ = [
    "BLEND_MODES",
    "BlendMode",
    "blend",
    "by_category",
    "categories",
    "check_alpha",
    "doc",
    "get_mode",
    "list_modes",
    "register",
]
