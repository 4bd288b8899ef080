"""
Channel effects: color shift, channel extraction and noise.
"""

import logging

import numpy as np

from pixelcomp.filters.color import amount, map_rgb
from pixelcomp.filters.registry import FilterArg, register
from pixelcomp.image.buffer import Image

logger = logging.getLogger(__name__)


def _shift(name: str) -> FilterArg:
    return FilterArg(
        name,
        "float",
        default=0.0,
        min=-1.0,
        max=1.0,
        step=0.01,
        description="Offset added to the %s channel." % name,
    )


@register(
    "colorshift",
    "Adds constant offsets to the RGB channels.",
    [_shift("red"), _shift("green"), _shift("blue")],
)
def colorshift(image: Image, red: float, green: float, blue: float) -> Image:
    offset = np.array([red, green, blue])
    return map_rgb(image, lambda rgb: rgb + offset)


@register(
    "extract",
    "Keeps a single channel. Color channels become opaque.",
    [
        FilterArg(
            "channel",
            "choice",
            default="r",
            choices=("r", "g", "b", "a"),
            description="Channel to keep.",
        )
    ],
)
def extract(image: Image, channel: str) -> Image:
    array = image.numpy()
    result = np.zeros_like(array)
    if channel == "a":
        result[..., 3] = array[..., 3]
    else:
        index = "rgb".index(channel)
        result[..., index] = array[..., index]
        result[..., 3] = 1.0
    return Image.fromarray(result, metadata=image.metadata.derive())


@register(
    "noise",
    "Scales the color of each pixel by a random factor.",
    [
        amount(0.1, 0.0, 1.0, "Maximum relative change."),
        FilterArg("seed", "int", default=0, min=0, description="Random seed."),
    ],
)
def noise(image: Image, amount: float, seed: int) -> Image:
    logger.debug("Noise of amount %g with seed %d", amount, seed)
    rng = np.random.default_rng(seed)
    factor = 1.0 + (rng.random((image.height, image.width, 1)) * 2.0 - 1.0) * amount
    return map_rgb(image, lambda rgb: rgb * factor)
