"""
Blend mode registry.

A blend mode is a :py:class:`BlendMode` descriptor holding the mode name,
category, a vectorized color function ``B(Cb, Cs)`` and the compositing
operator applied around it. Modes register themselves at import time::

    from pixelcomp.blend import get_mode

    mode = get_mode("multiply")
    out = mode.blend(bottom, top, 0.5)
"""

import logging
import math
from typing import Callable, List, Optional, Tuple, Union

import numpy as np
from attrs import define, field
from numpy.typing import NDArray

from pixelcomp.blend.composite import is_noop, source_over
from pixelcomp.color.rgba64 import RGBA64
from pixelcomp.constants import ALPHA_EPSILON, TRANSPARENT_THRESHOLD, BlendCategory
from pixelcomp.errors import InvalidArgument
from pixelcomp.registry import Registry

logger = logging.getLogger(__name__)

BLEND_MODES = Registry("blend mode")


def _category(value: Union[str, BlendCategory]) -> BlendCategory:
    try:
        return BlendCategory(value)
    except ValueError:
        raise InvalidArgument("unknown blend category: %r" % (value,)) from None


def check_alpha(alpha: float) -> float:
    """Validate a user opacity and clamp it into [0, 1]."""
    try:
        alpha = float(alpha)
    except (TypeError, ValueError):
        raise InvalidArgument("alpha must be a number, got %r" % (alpha,)) from None
    if not math.isfinite(alpha) or not (
        -ALPHA_EPSILON <= alpha <= 1.0 + ALPHA_EPSILON
    ):
        raise InvalidArgument("alpha must be within [0, 1], got %r" % alpha)
    return min(1.0, max(0.0, alpha))


@define(frozen=True)
class BlendMode:
    """
    Blend mode descriptor.

    .. py:attribute:: name
    .. py:attribute:: description
    .. py:attribute:: category

        :py:class:`~pixelcomp.constants.BlendCategory` of the mode.

    .. py:attribute:: fn

        Vectorized color function ``fn(Cb, Cs)`` on unpremultiplied sRGB
        arrays of shape ``(..., 3)``.

    .. py:attribute:: operator

        Compositing operator, :py:func:`~pixelcomp.blend.composite.source_over`
        for all modes but erase.
    """

    name: str
    description: str
    category: BlendCategory = field(converter=_category)
    fn: Callable[[NDArray, NDArray], NDArray]
    operator: Callable = source_over

    def blend(self, bottom: RGBA64, top: RGBA64, alpha: float = 1.0) -> RGBA64:
        """
        Blend `top` over `bottom` with opacity `alpha`.

        Inputs are not modified. The result is a canonical pixel: sRGB,
        premultiplied and clamped.

        :raises InvalidArgument: For missing pixels or alpha outside [0, 1].
        """
        if bottom is None or top is None:
            raise InvalidArgument("blend %r requires two pixels" % self.name)
        if not isinstance(bottom, RGBA64) or not isinstance(top, RGBA64):
            raise InvalidArgument(
                "blend %r requires RGBA64 pixels, got %s and %s"
                % (self.name, type(bottom).__name__, type(top).__name__)
            )
        alpha = check_alpha(alpha)
        if top.a < TRANSPARENT_THRESHOLD or is_noop(alpha):
            return bottom.canonical()

        b = np.array(bottom.straight(), dtype=np.float64).reshape(1, 4)
        t = np.array(top.straight(), dtype=np.float64).reshape(1, 4)
        color, shape = self.blend_arrays(b[:, :3], b[:, 3:], t[:, :3], t[:, 3:], alpha)
        r, g, bl = (float(c) for c in color[0])
        return RGBA64(r, g, bl, float(shape[0, 0])).premultiply().clamp()

    __call__ = blend

    def blend_arrays(
        self,
        Cb: NDArray[np.floating],
        Ab: NDArray[np.floating],
        Cs: NDArray[np.floating],
        As: NDArray[np.floating],
        alpha: float = 1.0,
    ) -> Tuple[NDArray[np.floating], NDArray[np.floating]]:
        """
        Blend whole arrays of unpremultiplied sRGB colors.

        :param Cb: Backdrop color, shape ``(..., 3)``.
        :param Ab: Backdrop alpha, shape ``(..., 1)``.
        :param Cs: Source color, shape ``(..., 3)``.
        :param As: Source alpha, shape ``(..., 1)``.
        :param alpha: Opacity in [0, 1].
        :return: Tuple of unpremultiplied color and alpha.
        """
        alpha = check_alpha(alpha)
        Cb, Ab = np.asarray(Cb, dtype=np.float64), np.asarray(Ab, dtype=np.float64)
        Cs, As = np.asarray(Cs, dtype=np.float64), np.asarray(As, dtype=np.float64)
        if is_noop(alpha):
            Ab = np.clip(Ab, 0.0, 1.0)
            return np.where(Ab > 0.0, np.clip(Cb, 0.0, 1.0), 0.0), Ab
        with np.errstate(divide="ignore", invalid="ignore"):
            return self.operator(self.fn, Cb, Ab, Cs, As, alpha)


def register(
    name: str,
    description: str,
    category: Union[str, BlendCategory],
    fn: Optional[Callable] = None,
    operator: Callable = source_over,
):
    """
    Register a blend mode.

    Used either as a plain call with `fn`, or as a decorator::

        @register("average", "Arithmetic mean.", BlendCategory.SPECIAL)
        def average(Cb, Cs):
            return (Cb + Cs) / 2.0

    :raises DuplicateRegistration: If `name` is already registered.
    """

    def decorator(func: Callable) -> Callable:
        BLEND_MODES.add(name, BlendMode(name, description, category, func, operator))
        return func

    if fn is not None:
        return decorator(fn)
    return decorator


def get_mode(name: str) -> BlendMode:
    """
    Look up a blend mode by its name.

    :raises InvalidArgument: If the name is unknown.
    """
    return BLEND_MODES.get(name)


def list_modes() -> List[str]:
    """Sorted names of all blend modes."""
    return BLEND_MODES.names()


def categories() -> List[BlendCategory]:
    """All blend categories in display order."""
    return list(BlendCategory)


def by_category(category: Union[str, BlendCategory]) -> List[BlendMode]:
    """Blend modes of one category, sorted by name."""
    category = _category(category)
    return [mode for mode in BLEND_MODES.values() if mode.category == category]


def blend(
    bottom: RGBA64, top: RGBA64, mode: str = "normal", alpha: float = 1.0
) -> RGBA64:
    """Blend two pixels with the named mode."""
    return get_mode(mode).blend(bottom, top, alpha)


def doc() -> str:
    """Markdown table of all blend modes grouped by category."""
    lines = ["| Category | Mode | Description |", "|---|---|---|"]
    for category in categories():
        for mode in by_category(category):
            lines.append(
                "| %s | `%s` | %s |" % (category.value, mode.name, mode.description)
            )
    return "\n".join(lines) + "\n"

