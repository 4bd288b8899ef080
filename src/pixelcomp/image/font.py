"""
Embedded bitmap font and text rendering.

The font is a classic 5x7 face for printable ASCII laid out in cells of
:py:data:`~pixelcomp.constants.CHAR_WIDTH` x
:py:data:`~pixelcomp.constants.CHAR_HEIGHT` pixels on a sprite sheet with
:py:data:`~pixelcomp.constants.SPRITESHEET_COLUMNS` columns. The sheet is
built once at import and never modified.

Text may carry inline markup that recolors the following glyphs:

- ``[:white:]``, ``[:black:]``, ``[:gray:]``, ``[:color:]``
- ``[:r:]``, ``[:g:]``, ``[:b:]``, ``[:c:]``, ``[:m:]``, ``[:y:]`` set the hue
- ``[:gon:]`` / ``[:goff:]`` toggle the glow outline
- ``[::]`` restores the initial color
- ``[:H:S:L:]`` sets an absolute color, e.g. ``[:120:0.5:0.5:]``
"""

import logging
import re
from typing import Iterator, List, Tuple, Union

import numpy as np
from attrs import define
from numpy.typing import NDArray

from pixelcomp.color.models import HSL
from pixelcomp.color.rgba64 import RGBA64
from pixelcomp.constants import CHAR_HEIGHT, CHAR_WIDTH, SPRITESHEET_COLUMNS
from pixelcomp.image.buffer import Image

logger = logging.getLogger(__name__)

FIRST_CHAR = 0x20

# Column bytes of each glyph from 0x20 to 0x7E; bit 0 is the top row.
GLYPHS = (
    "00 00 00 00 00",  # space
    "00 00 5F 00 00",  # !
    "00 07 00 07 00",  # "
    "14 7F 14 7F 14",  # #
    "24 2A 7F 2A 12",  # $
    "23 13 08 64 62",  # %
    "36 49 55 22 50",  # &
    "00 05 03 00 00",  # '
    "00 1C 22 41 00",  # (
    "00 41 22 1C 00",  # )
    "14 08 3E 08 14",  # *
    "08 08 3E 08 08",  # +
    "00 50 30 00 00",  # ,
    "08 08 08 08 08",  # -
    "00 60 60 00 00",  # .
    "20 10 08 04 02",  # /
    "3E 51 49 45 3E",  # 0
    "00 42 7F 40 00",  # 1
    "42 61 51 49 46",  # 2
    "21 41 45 4B 31",  # 3
    "18 14 12 7F 10",  # 4
    "27 45 45 45 39",  # 5
    "3C 4A 49 49 30",  # 6
    "01 71 09 05 03",  # 7
    "36 49 49 49 36",  # 8
    "06 49 49 29 1E",  # 9
    "00 36 36 00 00",  # :
    "00 56 36 00 00",  # ;
    "08 14 22 41 00",  # <
    "14 14 14 14 14",  # =
    "00 41 22 14 08",  # >
    "02 01 51 09 06",  # ?
    "32 49 79 41 3E",  # @
    "7E 11 11 11 7E",  # A
    "7F 49 49 49 36",  # B
    "3E 41 41 41 22",  # C
    "7F 41 41 22 1C",  # D
    "7F 49 49 49 41",  # E
    "7F 09 09 01 01",  # F
    "3E 41 41 51 32",  # G
    "7F 08 08 08 7F",  # H
    "00 41 7F 41 00",  # I
    "20 40 41 3F 01",  # J
    "7F 08 14 22 41",  # K
    "7F 40 40 40 40",  # L
    "7F 02 04 02 7F",  # M
    "7F 04 08 10 7F",  # N
    "3E 41 41 41 3E",  # O
    "7F 09 09 09 06",  # P
    "3E 41 51 21 5E",  # Q
    "7F 09 19 29 46",  # R
    "46 49 49 49 31",  # S
    "01 01 7F 01 01",  # T
    "3F 40 40 40 3F",  # U
    "1F 20 40 20 1F",  # V
    "7F 20 18 20 7F",  # W
    "63 14 08 14 63",  # X
    "03 04 78 04 03",  # Y
    "61 51 49 45 43",  # Z
    "00 7F 41 41 00",  # [
    "02 04 08 10 20",  # backslash
    "00 41 41 7F 00",  # ]
    "04 02 01 02 04",  # ^
    "40 40 40 40 40",  # _
    "00 01 02 04 00",  # `
    "20 54 54 54 78",  # a
    "7F 48 44 44 38",  # b
    "38 44 44 44 20",  # c
    "38 44 44 48 7F",  # d
    "38 54 54 54 18",  # e
    "08 7E 09 01 02",  # f
    "08 14 54 54 3C",  # g
    "7F 08 04 04 78",  # h
    "00 44 7D 40 00",  # i
    "20 40 44 3D 00",  # j
    "00 7F 10 28 44",  # k
    "00 41 7F 40 00",  # l
    "7C 04 18 04 78",  # m
    "7C 08 04 04 78",  # n
    "38 44 44 44 38",  # o
    "7C 14 14 14 08",  # p
    "08 14 14 18 7C",  # q
    "7C 08 04 04 08",  # r
    "48 54 54 54 20",  # s
    "04 3F 44 40 20",  # t
    "3C 40 40 20 7C",  # u
    "1C 20 40 20 1C",  # v
    "3C 40 30 40 3C",  # w
    "44 28 10 28 44",  # x
    "0C 50 50 50 3C",  # y
    "44 64 54 4C 44",  # z
    "00 08 36 41 00",  # {
    "00 00 7F 00 00",  # |
    "00 41 36 08 00",  # }
    "02 01 02 04 02",  # ~
)


def _build_sheet() -> NDArray[np.bool_]:
    rows = -(-len(GLYPHS) // SPRITESHEET_COLUMNS)
    sheet = np.zeros(
        (rows * CHAR_HEIGHT, SPRITESHEET_COLUMNS * CHAR_WIDTH), dtype=np.bool_
    )
    bits = np.arange(CHAR_HEIGHT - 1)
    for index, glyph in enumerate(GLYPHS):
        columns = np.array([int(value, 16) for value in glyph.split()])
        cell = (columns[np.newaxis, :] >> bits[:, np.newaxis]) & 1
        top = (index // SPRITESHEET_COLUMNS) * CHAR_HEIGHT
        left = (index % SPRITESHEET_COLUMNS) * CHAR_WIDTH
        sheet[top : top + cell.shape[0], left : left + cell.shape[1]] = cell
    sheet.setflags(write=False)
    return sheet


#: Read-only sprite sheet of all glyphs.
SPRITESHEET = _build_sheet()


def glyph(char: str) -> NDArray[np.bool_]:
    """
    Bitmap of one character as a ``(CHAR_HEIGHT, CHAR_WIDTH)`` bool array.

    Characters without a glyph map to space.
    """
    index = ord(char) - FIRST_CHAR
    if not 0 <= index < len(GLYPHS):
        index = 0
    top = (index // SPRITESHEET_COLUMNS) * CHAR_HEIGHT
    left = (index % SPRITESHEET_COLUMNS) * CHAR_WIDTH
    return SPRITESHEET[top : top + CHAR_HEIGHT, left : left + CHAR_WIDTH]


_MARKUP = re.compile(r"\[:(gon|goff|white|black|gray|color|r|g|b|c|m|y|):\]")
_MARKUP_HSL = re.compile(r"\[:(\d{1,3}):(\d\.\d+):(\d\.\d+):\]")

_HUES = {"r": 0.0, "g": 120.0, "b": 240.0, "c": 180.0, "m": 300.0, "y": 60.0}


@define
class Style:
    """Color and glow state while walking marked-up text."""

    h: float
    s: float
    l: float  # noqa: E741
    glow: bool = False

    def apply(self, word: str, initial: "Style") -> None:
        if word == "":
            self.h, self.s, self.l = initial.h, initial.s, initial.l
        elif word == "white":
            self.s, self.l = 0.0, 1.0
        elif word == "black":
            self.s, self.l = 0.0, 0.0
        elif word == "gray":
            self.s = 0.0
        elif word == "color":
            self.s = 0.5
        elif word == "gon":
            self.glow = True
        elif word == "goff":
            self.glow = False
        else:
            self.h = _HUES[word]

    def colors(self) -> Tuple[RGBA64, RGBA64]:
        """Fill and outline colors."""
        if self.glow:
            fill = HSL(self.h, min(1.0, self.s * 1.25), self.l)
            outline = HSL(self.h, self.s * 0.75, self.l * 0.4)
        else:
            fill = HSL(self.h, self.s, self.l)
            outline = HSL(self.h, self.s, 0.1)
        return fill.to_rgba64(), outline.to_rgba64()


def layout(text: str, style: Style) -> Iterator[Tuple[int, int, str, Style]]:
    """
    Walk `text` yielding ``(column, line, char, style)`` for each glyph.

    Markup is consumed and updates a copy of `style`.
    """
    initial = Style(style.h, style.s, style.l, style.glow)
    current = Style(style.h, style.s, style.l, style.glow)
    column = line = 0
    i = 0
    while i < len(text):
        char = text[i]
        if char == "\n":
            line += 1
            column = 0
            i += 1
            continue
        if char == "[":
            match = _MARKUP.match(text, i)
            if match:
                current.apply(match.group(1), initial)
                i = match.end()
                continue
            match = _MARKUP_HSL.match(text, i)
            if match:
                current.h = float(int(match.group(1)))
                current.s = float(match.group(2))
                current.l = float(match.group(3))
                i = match.end()
                continue
        yield column, line, char, Style(current.h, current.s, current.l, current.glow)
        column += 1
        i += 1


def strip_markup(text: str) -> str:
    """Text without markup."""
    return _MARKUP.sub("", _MARKUP_HSL.sub("", text))


def measure(text: str) -> Tuple[int, int]:
    """
    Size of rendered `text` without its outline.

    :return: (width, height) `tuple`.
    """
    lines = strip_markup(text).split("\n")
    return max(len(line) for line in lines) * CHAR_WIDTH, len(lines) * CHAR_HEIGHT


def _dilate(mask: NDArray[np.bool_]) -> NDArray[np.bool_]:
    padded = np.pad(mask, 1)
    out = np.zeros_like(padded)
    height, width = mask.shape
    for dy in (0, 1, 2):
        for dx in (0, 1, 2):
            out[dy : dy + height, dx : dx + width] |= mask
    return out


def render(
    text: str, color: Union[RGBA64, HSL, None] = None, glow: bool = False
) -> Image:
    """
    Render `text` into a new opaque-glyph image.

    The result has a one pixel margin on every side holding the outline, so
    glyph cell (0, 0) starts at pixel (1, 1).

    :param color: Initial text color, white by default.
    :param glow: Start with the glow outline enabled.
    :return: :py:class:`~pixelcomp.image.buffer.Image`
    """
    if color is None:
        color = RGBA64(1.0, 1.0, 1.0, 1.0)
    hsl = color if isinstance(color, HSL) else HSL.from_rgba64(color)
    width, height = measure(text)
    width, height = max(1, width) + 2, height + 2
    canvas = np.zeros((height, width, 4), dtype=np.float64)
    glyphs: List[Tuple[int, int, NDArray[np.bool_], RGBA64]] = []

    for column, line, char, style in layout(text, Style(hsl.h, hsl.s, hsl.l, glow)):
        mask = glyph(char)
        if not mask.any():
            continue
        fill, outline = style.colors()
        x, y = column * CHAR_WIDTH, line * CHAR_HEIGHT
        region = canvas[y : y + CHAR_HEIGHT + 2, x : x + CHAR_WIDTH + 2]
        region[_dilate(mask)] = (*outline.straight()[:3], 1.0)
        glyphs.append((x, y, mask, fill))

    for x, y, mask, fill in glyphs:
        region = canvas[y + 1 : y + 1 + CHAR_HEIGHT, x + 1 : x + 1 + CHAR_WIDTH]
        region[mask] = (*fill.straight()[:3], 1.0)

    logger.debug("Rendered %d glyphs into %dx%d", len(glyphs), width, height)
    return Image.fromarray(canvas)
