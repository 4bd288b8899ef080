"""Compatibility module for optional dependencies."""

import functools
from typing import Callable, TYPE_CHECKING, TypeVar

F = TypeVar("F", bound=Callable)

if TYPE_CHECKING:
    # Type checkers see these as always available
    from scipy import ndimage  # type: ignore[import-untyped]

# Check for optional dependencies
try:
    from scipy import ndimage  # noqa: F401  # type: ignore[import-untyped,no-redef]

    HAS_SCIPY = True
except ImportError:
    HAS_SCIPY = False


def require_scipy(func: F) -> F:
    """
    Decorator to check if scipy is available before calling the function.

    Required for spatial filters (blur, sharpen, convolution, edge detection).

    Raises:
        ImportError: If scipy is not installed.

    Example:
        >>> @require_scipy
        ... def blur(image, radius):
        ...     return ndimage.gaussian_filter(array, radius / 2.0)
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        if not HAS_SCIPY:
            raise ImportError(
                "Spatial filters require: scipy\n\n"
                "Install with:\n"
                "    pip install 'pixelcomp[spatial]'\n"
                "Or:\n"
                "    pip install scipy"
            )
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]
