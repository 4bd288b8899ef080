"""
Image filters.

Importing this package registers the built-in filters in :py:data:`FILTERS`.
Spatial filters need scipy (``pip install 'pixelcomp[spatial]'``).
"""

from pixelcomp.filters import color, effects, geometric, spatial  # noqa: F401
from pixelcomp.filters.registry import (
    FILTERS,
    Filter,
    FilterArg,
    apply_filter,
    doc,
    get_filter,
    list_filters,
    register,
)

__all__ = [
    "FILTERS",
    "Filter",
    "FilterArg",
    "apply_filter",
    "doc",
    "get_filter",
    "list_filters",
    "register",
]
