"""
Font descriptors, text measurement and label placement.

Fonts are written in chart documents as descriptor strings such as
``"Monospace 12"`` or ``"Liberation Sans Bold Italic 22"``: a family name,
optional weight and slant words, and a trailing point size. Text is measured
with matplotlib's font machinery at 72 dpi, so one point is one pixel.
"""

import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Tuple

from matplotlib.font_manager import FontProperties
from matplotlib.textpath import TextToPath

logger = logging.getLogger("panel_charts.rendering.text")

_SIZE_PATTERN = re.compile(r"\d{1,2}$")
_SLANT_PATTERN = re.compile(r"Italic|Oblique")
_WEIGHT_PATTERN = re.compile(r"Bold")
_REGULAR_PATTERN = re.compile(r"\bRegular\b")

# Generic family names understood by matplotlib
_GENERIC_FAMILIES = {
    "monospace": "monospace",
    "mono": "monospace",
    "sans": "sans-serif",
    "sans-serif": "sans-serif",
    "serif": "serif",
    "cursive": "cursive",
    "fantasy": "fantasy",
}


@dataclass(frozen=True)
class FontData:
    """Parsed font descriptor.

    Attributes:
        family: Font family name as written in the descriptor
        size: Font size in points
        bold: Bold weight
        slant: "normal", "italic" or "oblique"
    """

    family: str = "Monospace"
    size: int = 12
    bold: bool = False
    slant: str = "normal"

    @classmethod
    def from_string(cls, descriptor: str) -> "FontData":
        """
        Parse a descriptor such as ``"Monospace Regular 12"``.

        Descriptors without a trailing size keep the default size.

        Example:
            >>> FontData.from_string("Sans Bold Italic 14")
            FontData(family='Sans', size=14, bold=True, slant='italic')
        """
        text = descriptor.strip()
        size = cls.size
        size_match = _SIZE_PATTERN.search(text)
        if size_match:
            size = int(size_match.group())
            text = text[:size_match.start()]
        else:
            logger.debug(f"No size in font descriptor '{descriptor}', using {size}")

        slant = "normal"
        slant_match = _SLANT_PATTERN.search(text)
        if slant_match:
            slant = slant_match.group().lower()
            text = text[:slant_match.start()]

        bold = False
        weight_match = _WEIGHT_PATTERN.search(text)
        if weight_match:
            bold = True
            text = text[:weight_match.start()]

        family = _REGULAR_PATTERN.sub("", text).strip() or cls.family
        return cls(family=family, size=size, bold=bold, slant=slant)

    def description(self) -> str:
        parts = [self.family]
        if self.slant != "normal":
            parts.append(self.slant.capitalize())
        if self.bold:
            parts.append("Bold")
        parts.append(str(self.size))
        return " ".join(parts)

    def font_properties(self) -> FontProperties:
        family = _GENERIC_FAMILIES.get(self.family.lower(), self.family)
        return FontProperties(
            family=family,
            style=self.slant,
            weight="bold" if self.bold else "normal",
            size=self.size,
        )


class TextMeasurer:
    """Measure text extents in pixels for a font descriptor."""

    def __init__(self):
        self._text_to_path = TextToPath()

    def extents(self, text: str, font: FontData) -> Tuple[float, float]:
        """Return ``(advance, height)`` of ``text`` rendered with ``font``."""
        return self._measure(text, font)

    @lru_cache(maxsize=1024)
    def _measure(self, text: str, font: FontData) -> Tuple[float, float]:
        if not text:
            return 0.0, 0.0
        width, height, _descent = self._text_to_path.get_text_width_height_descent(
            text, font.font_properties(), ismath=False
        )
        return float(width), float(height)


def draw_label(
    surface,
    font: FontData,
    label: str,
    pos: Tuple[float, float],
    rotate: bool = False,
    center: Tuple[bool, bool] = (True, True),
    off_x: Optional[float] = None,
    off_y: Optional[float] = None,
) -> None:
    """
    Draw a text label relative to a pixel position.

    The label baseline starts at ``pos``, shifted left by half its advance
    when horizontally centred and down by half its height when vertically
    centred. ``off_x``/``off_y`` add further shifts expressed as multiples of
    the label advance and height. Rotated labels read bottom to top and are
    centred on ``pos``.

    Args:
        surface: DrawingSurface receiving the text
        font: Font of the label
        label: Text to draw
        pos: Pixel position
        rotate: Rotate the label by 90 degrees
        center: Horizontal and vertical centring
        off_x: Extra horizontal shift in label advances
        off_y: Extra vertical shift in label heights
    """
    if not label:
        return
    x, y = pos
    if rotate:
        surface.show_text(x, y, label, font, rotation=90.0, centered=True)
        return

    advance, height = surface.text_extents(label, font)
    x_center_off = -advance / 2.0 if center[0] else 0.0
    y_center_off = height / 2.0 if center[1] else 0.0
    x += (off_x or 0.0) * advance + x_center_off
    y += (off_y or 0.0) * height + y_center_off
    surface.show_text(x, y, label, font)
