"""
Resolved visual design of a panel.

PlotDesign is the drawing-side counterpart of ``model.DesignConfig``: colours
are parsed into RGBA tuples and the font descriptor into a FontData, once,
when the panel is built.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from matplotlib.colors import to_hex, to_rgba

from .text import FontData
from ..constants import DEFAULT_BG_COLOR, DEFAULT_FONT, DEFAULT_GRID_COLOR, DEFAULT_GRID_WIDTH, TICK_LABEL_COLOR
from ..model import DesignConfig

RGBA = Tuple[float, float, float, float]


def parse_color(value: str) -> RGBA:
    """Convert a '#rrggbb' or '#rrggbbaa' string into an RGBA tuple in [0, 1]."""
    return to_rgba(value)


@dataclass
class PlotDesign:
    """
    Design shared by every plot of a panel.

    Attributes:
        bgcolor: Plot background colour (RGBA)
        fgcolor: Grid line colour (RGBA)
        width: Grid line width in pixels
        font: Font of grid values and axis names
        label_color: Colour of the grid values (RGBA)
    """

    bgcolor: RGBA = field(default_factory=lambda: parse_color(DEFAULT_BG_COLOR))
    fgcolor: RGBA = field(default_factory=lambda: parse_color(DEFAULT_GRID_COLOR))
    width: float = DEFAULT_GRID_WIDTH
    font: FontData = field(default_factory=lambda: FontData.from_string(DEFAULT_FONT))
    label_color: RGBA = field(default_factory=lambda: parse_color(TICK_LABEL_COLOR))

    @classmethod
    def from_config(cls, config: Optional[DesignConfig], label_color: str = TICK_LABEL_COLOR) -> "PlotDesign":
        """Build a design from a document record (None gives the defaults)."""
        config = config if config is not None else DesignConfig()
        config.validate()
        return cls(
            bgcolor=parse_color(config.bgcolor),
            fgcolor=parse_color(config.fgcolor),
            width=config.width,
            font=FontData.from_string(config.font),
            label_color=parse_color(label_color),
        )

    def description(self) -> Dict[str, str]:
        return {
            "bgcolor": to_hex(self.bgcolor, keep_alpha=True),
            "fgcolor": to_hex(self.fgcolor, keep_alpha=True),
            "width": str(self.width),
            "font": self.font.description(),
        }
