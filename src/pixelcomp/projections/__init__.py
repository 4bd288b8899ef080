"""
Map projections.
"""

from pixelcomp.projections.models import (
    EQUIRECTANGULAR,
    MERCATOR,
    POLAR,
    SINUSOIDAL,
    STEREOGRAPHIC,
)
from pixelcomp.projections.registry import (
    PROJECTIONS,
    Projection,
    get_projection,
    list_projections,
    project,
    register,
)

__all__ = [
    "EQUIRECTANGULAR",
    "MERCATOR",
    "POLAR",
    "PROJECTIONS",
    "Projection",
    "SINUSOIDAL",
    "STEREOGRAPHIC",
    "get_projection",
    "list_projections",
    "project",
    "register",
]
