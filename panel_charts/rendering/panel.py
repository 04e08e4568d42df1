"""
Panel composition and output.

A Panel places one to four plots on a canvas according to a split topology
and two split ratios, draws them with a shared design and encodes the result
as PNG, SVG, PostScript or PDF.

Example:
    >>> panel = Panel.from_json('{"plots": [{"mappings": []}, {"mappings": []}], '
    ...                         '"layout": {"width": 600, "height": 300, "split": "horizontal"}}')
    >>> panel.sub_regions()
    [((0.05, 0.05), (300, 300)), ((300.0, 0.05), (300, 300))]
    >>> png = panel.png()
"""

import base64
import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union

from .design import PlotDesign
from .mappings import Limits
from .plot import Plot
from .surface import DrawingSurface
from .text import TextMeasurer
from ..config import RenderConfig
from ..constants import (
    DEFAULT_H_RATIO,
    DEFAULT_V_RATIO,
    OUTPUT_FORMATS,
    PANEL_ORIGIN_PAD,
    SPLIT_BY_COUNT,
    SPLIT_LAYOUT,
    SPLIT_PLOT_COUNT,
)
from ..exceptions import LayoutError, PanelError, RenderIOError
from ..model import PanelConfig

logger = logging.getLogger("panel_charts.rendering.panel")

Region = Tuple[Tuple[float, float], Tuple[int, int]]


class Panel:
    """
    One to four plots sharing a canvas and a design.

    Attributes:
        plots: Plots in placement order
        design: Shared design
        split: Split topology keyword
        width, height: Canvas size in pixels
        hratio, vratio: Split ratios in [0, 1]
        render_config: Output settings (resolution, canvas colour)
    """

    def __init__(
        self,
        plots: Sequence[Plot],
        design: Optional[PlotDesign] = None,
        split: Optional[str] = None,
        width: Optional[int] = None,
        height: Optional[int] = None,
        hratio: float = DEFAULT_H_RATIO,
        vratio: float = DEFAULT_V_RATIO,
        render_config: Optional[RenderConfig] = None,
    ):
        self.render_config = render_config if render_config is not None else RenderConfig()
        self.plots: List[Plot] = list(plots)
        if split is None:
            if len(self.plots) not in SPLIT_BY_COUNT:
                raise PanelError(f"Invalid number of plots informed: {len(self.plots)} (expected 1 - 4)")
            split = SPLIT_BY_COUNT[len(self.plots)]
        expected = SPLIT_PLOT_COUNT.get(split)
        if expected is None:
            raise LayoutError(f"Invalid value for 'split': {split!r}")
        if expected != len(self.plots):
            raise PanelError(f"Split '{split}' requires {expected} plot(s), but {len(self.plots)} informed")

        self.split = split
        self.design = design if design is not None else PlotDesign.from_config(
            None, self.render_config.tick_label_color
        )
        self.width = width if width is not None else self.render_config.default_width
        self.height = height if height is not None else self.render_config.default_height
        if self.width <= 0 or self.height <= 0:
            raise LayoutError(f"Invalid canvas dimensions: {self.width}x{self.height}")
        self.hratio = hratio
        self.vratio = vratio
        self.set_aspect_ratio(hratio, vratio)
        self._measurer = TextMeasurer()

    def __repr__(self) -> str:
        return f"Panel(split={self.split!r}, plots={len(self.plots)}, size={self.width}x{self.height})"

    @classmethod
    def from_config(cls, config: PanelConfig, render_config: Optional[RenderConfig] = None) -> "Panel":
        """
        Build a panel from a document record.

        The record is validated as a whole before any plot is built, so an
        invalid document never produces a partial panel.

        Raises:
            InvalidParameterError: (or a subclass) if the document is invalid
        """
        render_config = render_config if render_config is not None else RenderConfig()
        config.validate()
        split = config.resolve_split()
        layout = config.layout
        width = layout.width if layout is not None else render_config.default_width
        height = layout.height if layout is not None else render_config.default_height

        plots = [
            Plot.from_config(p, width=width, height=height, surface_density=render_config.surface_density)
            for p in config.plots
        ]
        panel = cls(
            plots,
            design=PlotDesign.from_config(config.design, render_config.tick_label_color),
            split=split,
            width=width,
            height=height,
            hratio=layout.hratio if layout is not None else DEFAULT_H_RATIO,
            vratio=layout.vratio if layout is not None else DEFAULT_V_RATIO,
            render_config=render_config,
        )
        logger.info(f"Built {panel!r}")
        return panel

    @classmethod
    def from_json(cls, text: str, render_config: Optional[RenderConfig] = None) -> "Panel":
        """Build a panel from a panel or single plot JSON document."""
        return cls.from_config(PanelConfig.from_json(text), render_config)

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def set_aspect_ratio(self, horizontal: Optional[float] = None, vertical: Optional[float] = None) -> None:
        """Change the split ratios; None keeps the current value."""
        if horizontal is not None:
            if not 0.0 <= horizontal <= 1.0:
                raise LayoutError("'hratio' should be in the interval 0.0 - 1.0")
            self.hratio = horizontal
        if vertical is not None:
            if not 0.0 <= vertical <= 1.0:
                raise LayoutError("'vratio' should be in the interval 0.0 - 1.0")
            self.vratio = vertical

    def aspect_ratio(self) -> Tuple[float, float]:
        return self.hratio, self.vratio

    def sub_regions(self) -> List[Region]:
        """
        Origin and size in pixels of every plot, in plot order.

        Raises:
            LayoutError: If the placement table has no entry for a plot
        """
        w, h = self.width, self.height
        origins = {
            "left": PANEL_ORIGIN_PAD,
            "top": PANEL_ORIGIN_PAD,
            "right": w * self.hratio,
            "bottom": h * self.vratio,
        }
        factors = {
            "full": 1.0,
            "h": self.hratio,
            "h_compl": 1.0 - self.hratio,
            "v": self.vratio,
            "v_compl": 1.0 - self.vratio,
        }
        placements = SPLIT_LAYOUT.get(self.split, [])
        regions = []
        for i in range(len(self.plots)):
            if i >= len(placements):
                raise LayoutError(f"No placement for plot {i} in split '{self.split}'")
            (origin_x, origin_y), (factor_x, factor_y) = placements[i]
            size = (int(w * factors[factor_x]), int(h * factors[factor_y]))
            regions.append(((origins[origin_x], origins[origin_y]), size))
        return regions

    # ------------------------------------------------------------------
    # Drawing and output
    # ------------------------------------------------------------------

    def draw(self, surface: DrawingSurface) -> None:
        """Draw every plot into its region of ``surface``."""
        for plot, ((ox, oy), (pw, ph)) in zip(self.plots, self.sub_regions()):
            surface.save()
            surface.translate(ox, oy)
            plot.draw(surface, self.design, pw, ph)
            surface.restore()

    def _new_surface(self) -> DrawingSurface:
        return DrawingSurface(
            self.width,
            self.height,
            dpi=self.render_config.dpi,
            canvas_color=self.render_config.canvas_color,
            measurer=self._measurer,
        )

    def figure(self):
        """
        Draw the panel and return the matplotlib ``(figure, axes)`` holding it.

        Useful for interactive display or further matplotlib customisation.
        """
        surface = self._new_surface()
        self.draw(surface)
        return surface.fig, surface.ax

    def render(self, fmt: str) -> bytes:
        """Encode the panel as ``png``, ``svg``, ``eps``, ``ps`` or ``pdf`` bytes."""
        surface = self._new_surface()
        try:
            self.draw(surface)
            return surface.to_bytes(fmt)
        finally:
            surface.close()

    def png(self) -> bytes:
        return self.render("png")

    def svg(self) -> str:
        return self.render("svg").decode("utf-8")

    def eps(self) -> bytes:
        return self.render("eps")

    def html_img_tag(self) -> str:
        """PNG rendering wrapped in an HTML ``<img>`` tag with a data URI."""
        encoded = base64.b64encode(self.png()).decode("ascii")
        return f"<img src='data:image/png;base64,{encoded}' />"

    def draw_to_file(self, path: Union[str, Path]) -> Path:
        """
        Render to a file whose extension selects the format.

        Args:
            path: Output path ending in .svg, .png, .eps, .ps or .pdf

        Returns:
            The written path

        Raises:
            RenderIOError: If the parent directory does not exist, the
                extension is missing or unknown, or writing fails
        """
        path = Path(path)
        if not path.parent.exists():
            raise RenderIOError(f"Parent directory for image path {path} does not exist")
        fmt = path.suffix.lower().lstrip(".")
        if not fmt:
            raise RenderIOError("No valid extension informed for image export file")
        if fmt not in OUTPUT_FORMATS:
            raise RenderIOError(f"Invalid image export extension: {fmt}")

        surface = self._new_surface()
        try:
            self.draw(surface)
            return surface.write(path, fmt)
        finally:
            surface.close()

    # ------------------------------------------------------------------
    # Plot access
    # ------------------------------------------------------------------

    @property
    def n_plots(self) -> int:
        return len(self.plots)

    def plot(self, ix: int) -> Plot:
        if not 0 <= ix < len(self.plots):
            raise PanelError(f"No plot at position {ix} (panel has {len(self.plots)})")
        return self.plots[ix]

    def dimensions(self) -> Tuple[int, int]:
        return self.width, self.height

    def data_limits(self, ix: int) -> Optional[Limits]:
        return self.plot(ix).max_data_limits()

    def update_mapping(self, ix: int, mapping_ix: int, columns: Dict[str, Sequence]) -> None:
        self.plot(ix).update_mapping(mapping_ix, columns)

    def adjust_scales(self) -> None:
        for plot in self.plots:
            plot.adjust_scales()

    def clear_all_data(self) -> None:
        for plot in self.plots:
            plot.clear_all_data()

    def mapping_info(self, ix: int):
        return self.plot(ix).mapping_info()

    def scale_info(self, ix: int, axis: str) -> Dict[str, str]:
        return self.plot(ix).scale_info(axis)

    def design_info(self) -> Dict[str, str]:
        return self.design.description()

    def sources(self) -> List[str]:
        """Provenance of every mapping, in plot and drawing order."""
        return [m.source for plot in self.plots for m in plot.mappings]
