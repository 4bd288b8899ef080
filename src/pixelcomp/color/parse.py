"""
Parsing of textual colors and predefined palettes.
"""

import logging
import re
from typing import Any, List

from attrs import define, field

from pixelcomp.color.models import HSL, RGB8, from_hex
from pixelcomp.color.rgba64 import RGBA64
from pixelcomp.errors import InvalidArgument

logger = logging.getLogger(__name__)

_NUMBER = r"\s*([-+]?\d*\.?\d+)\s*"
_RGB_PATTERN = re.compile(r"^rgb\(%s,%s,%s\)$" % ((_NUMBER,) * 3), re.I)
_RGBA_PATTERN = re.compile(r"^rgba\(%s,%s,%s,%s\)$" % ((_NUMBER,) * 4), re.I)
_HSL_PATTERN = re.compile(
    r"^hsl\(%s,%s%%?,%s%%?\)$" % ((_NUMBER,) * 3), re.I
)

NAMED_COLORS = {
    "black": "#000000",
    "white": "#FFFFFF",
    "red": "#FF0000",
    "green": "#00FF00",
    "blue": "#0000FF",
    "yellow": "#FFFF00",
    "cyan": "#00FFFF",
    "magenta": "#FF00FF",
    "gray": "#808080",
    "grey": "#808080",
    "orange": "#FFA500",
    "purple": "#800080",
    "pink": "#FFC0CB",
    "brown": "#A52A2A",
}


def parse_color(text: str) -> RGBA64:
    """
    Parse a textual color.

    Accepted forms are ``#RGB``, ``#RRGGBB``, ``rgb(r, g, b)``,
    ``rgba(r, g, b, a)`` with 8-bit channels and float alpha,
    ``hsl(h, s%, l%)``, ``transparent`` and the names in
    :py:data:`NAMED_COLORS`.

    :raises InvalidArgument: If the text matches none of the forms.
    """
    if not isinstance(text, str):
        raise InvalidArgument("color text must be a string, got %r" % (text,))
    value = text.strip()
    lowered = value.lower()
    if lowered == "transparent":
        return RGBA64(0.0, 0.0, 0.0, 0.0)
    if lowered in NAMED_COLORS:
        return from_hex(NAMED_COLORS[lowered])
    if value.startswith("#"):
        return from_hex(value)

    match = _RGB_PATTERN.match(value)
    if match:
        return RGB8(*(float(v) for v in match.groups())).to_rgba64()
    match = _RGBA_PATTERN.match(value)
    if match:
        return RGB8(*(float(v) for v in match.groups())).to_rgba64()
    match = _HSL_PATTERN.match(value)
    if match:
        h, s, l = (float(v) for v in match.groups())
        return HSL(h, s / 100.0, l / 100.0).to_rgba64()
    raise InvalidArgument("invalid color format: %r" % text)


@define
class Palette:
    """
    Named, ordered collection of colors.
    """

    name: str
    colors: List[Any] = field(factory=list)

    def add(self, color: Any) -> "Palette":
        self.colors.append(color)
        return self

    def get(self, index: int) -> Any:
        """
        :raises InvalidArgument: If the index is out of range.
        """
        if not 0 <= index < len(self.colors):
            raise InvalidArgument(
                "palette index %d out of range [0, %d)" % (index, len(self.colors))
            )
        return self.colors[index]

    def __len__(self) -> int:
        return len(self.colors)

    def __iter__(self):
        return iter(self.colors)


def _palette(name: str, *rgb) -> Palette:
    return Palette(name, [RGB8(r, g, b) for r, g, b in rgb])


WEB_SAFE = _palette(
    "Web Safe",
    (0, 0, 0),
    (51, 51, 51),
    (102, 102, 102),
    (153, 153, 153),
    (204, 204, 204),
    (255, 255, 255),
)

MATERIAL_DESIGN = _palette(
    "Material Design",
    (244, 67, 54),  # Red
    (233, 30, 99),  # Pink
    (156, 39, 176),  # Purple
    (103, 58, 183),  # Deep Purple
    (63, 81, 181),  # Indigo
    (33, 150, 243),  # Blue
    (3, 169, 244),  # Light Blue
    (0, 188, 212),  # Cyan
    (0, 150, 136),  # Teal
    (76, 175, 80),  # Green
    (139, 195, 74),  # Light Green
    (205, 220, 57),  # Lime
    (255, 235, 59),  # Yellow
    (255, 193, 7),  # Amber
    (255, 152, 0),  # Orange
    (255, 87, 34),  # Deep Orange
)
