"""
Filter registry.

A filter is a named image operation with typed, documented arguments::

    from pixelcomp.filters import get_filter

    result = get_filter("hue").apply(image, amount=0.25)

Arguments are declared with :py:class:`FilterArg` so that parsers and
documentation generators can work from the metadata alone.
"""

import logging
import math
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np
from attrs import define, field

from pixelcomp.color.rgba64 import RGBA64
from pixelcomp.constants import ArgType
from pixelcomp.errors import InternalInvariant, InvalidArgument
from pixelcomp.registry import Registry

logger = logging.getLogger(__name__)

FILTERS = Registry("filter")


def _arg_type(value: Any) -> ArgType:
    try:
        return ArgType(value)
    except ValueError:
        raise InvalidArgument("unknown filter argument type: %r" % (value,)) from None


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float, np.integer, np.floating)) and not isinstance(
        value, (bool, np.bool_)
    )


@define(frozen=True)
class FilterArg:
    """
    Filter argument metadata.

    .. py:attribute:: name
    .. py:attribute:: type

        :py:class:`~pixelcomp.constants.ArgType`. Unknown types are rejected.

    .. py:attribute:: required
    .. py:attribute:: default
    .. py:attribute:: min
    .. py:attribute:: max
    .. py:attribute:: step

        Numeric bounds and suggested increment for ``float`` and ``int``.

    .. py:attribute:: description
    .. py:attribute:: choices

        Allowed values for ``choice`` arguments.
    """

    name: str
    type: ArgType = field(converter=_arg_type)
    required: bool = False
    default: Any = None
    min: Optional[float] = None
    max: Optional[float] = None
    step: Optional[float] = None
    description: str = ""
    choices: Tuple[str, ...] = field(default=(), converter=tuple)

    def __attrs_post_init__(self) -> None:
        if not self.name.isidentifier():
            raise InvalidArgument("invalid argument name: %r" % self.name)
        if self.type == ArgType.CHOICE and not self.choices:
            raise InvalidArgument("choice argument %r needs choices" % self.name)
        if not self.required and self.default is None:
            raise InvalidArgument("optional argument %r needs a default" % self.name)

    def resolve(self, value: Any) -> Any:
        """
        Check and normalize a value for this argument.

        :raises InvalidArgument: On type or range mismatch.
        """
        if self.type == ArgType.FLOAT:
            if not _is_number(value) or not math.isfinite(value):
                raise self._error(value, "a finite number")
            value = float(value)
        elif self.type == ArgType.INT:
            if _is_number(value) and float(value).is_integer():
                value = int(value)
            else:
                raise self._error(value, "an integer")
        elif self.type == ArgType.STRING:
            if not isinstance(value, str):
                raise self._error(value, "a string")
        elif self.type == ArgType.CHOICE:
            if value not in self.choices:
                raise self._error(value, "one of %s" % ", ".join(self.choices))
        elif self.type == ArgType.MATRIX:
            value = self._matrix(value)

        if self.type in (ArgType.FLOAT, ArgType.INT):
            if self.min is not None and value < self.min:
                raise self._error(value, ">= %r" % self.min)
            if self.max is not None and value > self.max:
                raise self._error(value, "<= %r" % self.max)
        return value

    def _matrix(self, value: Any) -> np.ndarray:
        try:
            matrix = np.array(value, dtype=np.float64)
        except (TypeError, ValueError):
            raise self._error(value, "a rectangular matrix of numbers") from None
        if matrix.ndim != 2 or matrix.size == 0 or not np.all(np.isfinite(matrix)):
            raise self._error(value, "a rectangular matrix of numbers")
        return matrix

    def _error(self, value: Any, expected: str) -> InvalidArgument:
        return InvalidArgument(
            "argument %r must be %s, got %r" % (self.name, expected, value)
        )


@define(frozen=True)
class Filter:
    """
    Filter descriptor.

    `fn` receives the source image and resolved keyword arguments and returns
    a new image; the source is never modified. `sample` is the color shown
    when previewing the filter on its own.
    """

    name: str
    description: str
    fn: Callable
    args: Tuple[FilterArg, ...] = field(default=(), converter=tuple)
    sample: RGBA64 = field(factory=lambda: RGBA64(0.5, 0.5, 0.5, 1.0))

    def __attrs_post_init__(self) -> None:
        names = set()
        for arg in self.args:
            if not isinstance(arg, FilterArg):
                raise InvalidArgument(
                    "filter %r: expected FilterArg, got %r" % (self.name, arg)
                )
            if arg.name in names:
                raise InvalidArgument(
                    "filter %r: duplicate argument %r" % (self.name, arg.name)
                )
            names.add(arg.name)
        if not isinstance(self.sample, RGBA64):
            raise InvalidArgument(
                "filter %r: sample must be RGBA64, got %r" % (self.name, self.sample)
            )

    def validate(self, **kwargs: Any) -> Dict[str, Any]:
        """
        Resolve keyword arguments against the declared arguments.

        Fills in defaults, rejects unknown and missing required arguments, and
        checks types and ranges.

        :return: `dict` of resolved arguments.
        :raises InvalidArgument: On any mismatch.
        """
        known = {arg.name for arg in self.args}
        unknown = sorted(set(kwargs) - known)
        if unknown:
            raise InvalidArgument(
                "filter %r got unknown argument(s): %s" % (self.name, ", ".join(unknown))
            )
        resolved = {}
        for arg in self.args:
            if arg.name in kwargs:
                resolved[arg.name] = arg.resolve(kwargs[arg.name])
            elif arg.required:
                raise InvalidArgument(
                    "filter %r requires argument %r" % (self.name, arg.name)
                )
            else:
                resolved[arg.name] = arg.resolve(arg.default)
        return resolved

    def apply(self, image, **kwargs: Any):
        """
        Apply the filter to `image`.

        :return: New :py:class:`~pixelcomp.image.buffer.Image`.
        """
        from pixelcomp.image.buffer import Image

        if not isinstance(image, Image):
            raise InvalidArgument("expected Image, got %s" % type(image).__name__)
        resolved = self.validate(**kwargs)
        logger.debug("Applying filter %s%r", self.name, resolved)
        result = self.fn(image, **resolved)
        if not isinstance(result, Image):
            raise InternalInvariant(
                "filter %r returned %s" % (self.name, type(result).__name__)
            )
        return result

    __call__ = apply

    def preview(self, **kwargs: Any) -> RGBA64:
        """Apply the filter to a single pixel of :py:attr:`sample`."""
        from pixelcomp.image.buffer import Image

        return self.apply(Image.new(1, 1, self.sample), **kwargs).get_pixel(0, 0)

    def doc(self) -> str:
        """Markdown description with an argument table."""
        lines = ["### %s" % self.name, "", self.description, ""]
        if self.args:
            lines += [
                "| Argument | Type | Required | Default | Min | Max | Step | Description |",
                "|---|---|---|---|---|---|---|---|",
            ]
            for arg in self.args:
                description = arg.description
                if arg.choices:
                    description += " (%s)" % ", ".join(arg.choices)
                lines.append(
                    "| %s | %s | %s | %s | %s | %s | %s | %s |"
                    % (
                        arg.name,
                        arg.type.value,
                        "yes" if arg.required else "no",
                        _cell(arg.default),
                        _cell(arg.min),
                        _cell(arg.max),
                        _cell(arg.step),
                        description,
                    )
                )
            lines.append("")
        return "\n".join(lines)


def _cell(value: Any) -> str:
    return "" if value is None else "`%s`" % (value,)


def register(
    name: str,
    description: str,
    args: Sequence[FilterArg] = (),
    sample: Optional[RGBA64] = None,
):
    """
    Decorator registering a filter function::

        @register("invert", "Inverts colors.", [FilterArg("amount", "float", default=1.0)])
        def invert(image, amount):
            ...

    :param sample: Preview color, default is mid gray.
    :raises DuplicateRegistration: If `name` is already registered.
    :raises InvalidArgument: For malformed argument metadata.
    """

    def decorator(func: Callable) -> Callable:
        if sample is None:
            descriptor = Filter(name, description, func, args)
        else:
            descriptor = Filter(name, description, func, args, sample)
        FILTERS.add(name, descriptor)
        return func

    return decorator


def get_filter(name: str) -> Filter:
    """
    Look up a filter by name.

    :raises InvalidArgument: If the name is unknown.
    """
    return FILTERS.get(name)


def list_filters() -> List[str]:
    """Sorted filter names."""
    return FILTERS.names()


def apply_filter(image, name: str, **kwargs: Any):
    """Apply the named filter to `image`."""
    return get_filter(name).apply(image, **kwargs)


def doc() -> str:
    """Markdown documentation of all filters."""
    return "\n".join(f.doc() for f in FILTERS.values())
