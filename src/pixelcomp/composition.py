"""
Layer compositions.

A :py:class:`Composition` stacks :py:class:`Layer` records bottom-up onto a
canvas, the way a composition loader describes them::

    from pixelcomp.composition import Composition, Layer

    composition = Composition(
        256,
        256,
        background=RGBA64(1.0, 1.0, 1.0, 1.0),
        layers=[
            Layer("photo.png", filters=[("grayscale", {"amount": 1.0})]),
            Layer("texture.png", blend_mode="multiply", alpha=0.5),
        ],
        filters=[("vibrance", {"amount": 0.2})],
    )
    image = composition.render()
"""

import logging
import os
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from attrs import define, field

from pixelcomp.blend import check_alpha, get_mode
from pixelcomp.color.rgba64 import RGBA64
from pixelcomp.errors import InvalidArgument
from pixelcomp.filters import get_filter
from pixelcomp.image import io
from pixelcomp.image.buffer import Image, Metadata

logger = logging.getLogger(__name__)

FilterCall = Tuple[str, Dict[str, Any]]


def _filter_calls(value: Sequence[Any]) -> List[FilterCall]:
    calls = []
    for item in value:
        if isinstance(item, str):
            name, kwargs = item, {}
        else:
            try:
                name, kwargs = item
            except (TypeError, ValueError):
                raise InvalidArgument(
                    "filter invocation must be a name or (name, kwargs), got %r"
                    % (item,)
                ) from None
        if not isinstance(kwargs, dict):
            raise InvalidArgument("filter %r arguments must be a dict" % (name,))
        calls.append((name, dict(kwargs)))
    return calls


def _check_mode(instance, attribute, value):
    get_mode(value)


def _apply_filters(image: Image, calls: Sequence[FilterCall]) -> Image:
    for name, kwargs in calls:
        image = get_filter(name).apply(image, **kwargs)
    return image


@define
class Layer:
    """
    One layer of a :py:class:`Composition`.

    .. py:attribute:: source

        :py:class:`~pixelcomp.image.buffer.Image` or a PNG/JPEG path.

    .. py:attribute:: blend_mode

        Registered blend mode name.

    .. py:attribute:: alpha

        Layer opacity in [0, 1].

    .. py:attribute:: filters

        ``(name, kwargs)`` filter invocations applied before blending. A bare
        name applies the filter with its defaults.
    """

    source: Union[Image, str, os.PathLike]
    blend_mode: str = field(default="normal", validator=_check_mode)
    alpha: float = field(default=1.0, converter=check_alpha)
    filters: List[FilterCall] = field(factory=list, converter=_filter_calls)
    x: int = 0
    y: int = 0

    def image(self) -> Image:
        """
        Source pixels with the layer filters applied.

        :return: :py:class:`~pixelcomp.image.buffer.Image`
        :raises DecodeError: If a source file cannot be decoded.
        """
        if isinstance(self.source, Image):
            image = self.source
        elif isinstance(self.source, (str, os.PathLike)):
            image = io.load(self.source)
        else:
            raise InvalidArgument(
                "layer source must be an Image or a path, got %s"
                % type(self.source).__name__
            )
        return _apply_filters(image, self.filters)


@define
class Composition:
    """
    Canvas description.

    :param width: Canvas width.
    :param height: Canvas height.
    :param background: Optional fill color; default is transparent.
    :param layers: :py:class:`Layer` list, bottom first.
    :param filters: Filter invocations applied to the final canvas.
    """

    width: int
    height: int
    background: Optional[RGBA64] = None
    layers: List[Layer] = field(factory=list)
    filters: List[FilterCall] = field(factory=list, converter=_filter_calls)

    def add(self, layer: Layer) -> "Composition":
        """Append a layer on top."""
        if not isinstance(layer, Layer):
            raise InvalidArgument("expected Layer, got %s" % type(layer).__name__)
        self.layers.append(layer)
        return self

    def render(self) -> Image:
        """
        Render the composition.

        The canvas is filled with the background, each layer is filtered and
        blended at its offset with its mode and opacity, bottom first, and
        the composition filters run last.

        :return: :py:class:`~pixelcomp.image.buffer.Image`
        """
        canvas = Image.new(
            self.width, self.height, self.background, metadata=Metadata("composition")
        )
        for index, layer in enumerate(self.layers):
            logger.debug(
                "Compositing layer %d (%s, alpha=%g)", index, layer.blend_mode, layer.alpha
            )
            canvas.paste(layer.image(), layer.x, layer.y, layer.blend_mode, layer.alpha)
        return _apply_filters(canvas, self.filters)
