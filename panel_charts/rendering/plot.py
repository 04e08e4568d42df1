"""
A single plot: two scales, a coordinate mapper and an ordered list of mappings.

The Plot keeps its scales and mapper in step with its data. Every mutation
(adding, removing or updating a mapping, changing a scale) ends with
``adjust_scales()``, which refits the scales to the aggregated data limits and
pushes the new domain into the mapper.

Example:
    >>> from panel_charts.model import PlotConfig
    >>> config = PlotConfig.from_dict({
    ...     "x": {"from": 0, "to": 10, "adjust": "tight"},
    ...     "y": {"from": 0, "to": 1},
    ...     "mappings": [{"kind": "line", "map": {"x": [2, 4, 6], "y": [0.1, 0.5, 0.2]}}],
    ... })
    >>> plot = Plot.from_config(config)
    >>> (plot.x.start, plot.x.end)
    (2.0, 6.0)
"""

import logging
import math
from typing import Dict, List, Optional, Sequence, Tuple, Union

from .context_mapper import ContextMapper
from .design import PlotDesign
from .layers import draw_mapping
from .mappings import Limits, Mapping, new_mapping
from .scale import Scale, fit_segment
from .text import draw_label
from ..constants import DEFAULT_HEIGHT, DEFAULT_SURFACE_DENSITY, DEFAULT_WIDTH, EPSILON, PLOT_MARGIN
from ..exceptions import MappingError, ScaleError
from ..model import MappingConfig, PlotConfig

logger = logging.getLogger("panel_charts.rendering.plot")


def _valid_domain(start: float, end: float, log: bool) -> bool:
    return end > start and (not log or start > 0.0)


def _min_span(scale: Scale, value: float) -> float:
    return scale.n_intervals * EPSILON * max(1.0, abs(value))


def _fit_scale(scale: Scale, data_min: float, data_max: float) -> None:
    """Apply the scale adjustment, falling back to a drawable domain."""
    fitted = fit_segment(scale, scale.adjustment, data_min, data_max)
    if fitted is None:
        return
    for candidate in (fitted, (data_min, data_max)):
        if _valid_domain(candidate[0], candidate[1], scale.log):
            if candidate is not fitted:
                logger.debug(
                    f"Domain [{fitted[0]}, {fitted[1]}] cannot be drawn, using [{candidate[0]}, {candidate[1]}]"
                )
            scale.extension(*candidate)
            return
    logger.debug(f"Domain [{fitted[0]}, {fitted[1]}] cannot be drawn, keeping [{scale.start}, {scale.end}]")


class Plot:
    """
    One chart area with its axes and data series.

    Mappings are drawn in list order, so later mappings cover earlier ones.

    Attributes:
        x: Horizontal scale
        y: Vertical scale
        mapper: Data to pixel mapper, owned by this plot
        mappings: Ordered data series
        surface_density: Mesh density given to new surface mappings
    """

    def __init__(
        self,
        x: Optional[Scale] = None,
        y: Optional[Scale] = None,
        mappings: Optional[Sequence[Mapping]] = None,
        width: float = DEFAULT_WIDTH,
        height: float = DEFAULT_HEIGHT,
        surface_density: int = DEFAULT_SURFACE_DENSITY,
    ):
        self.x = x if x is not None else Scale()
        self.y = y if y is not None else Scale()
        self.mappings: List[Mapping] = list(mappings) if mappings else []
        self.surface_density = surface_density
        self._ensure_span(self.x)
        self._ensure_span(self.y)
        self.mapper = ContextMapper(
            self.x.start, self.x.end, self.y.start, self.y.end,
            xlog=self.x.log, ylog=self.y.log,
            xinv=self.x.invert, yinv=self.y.invert,
            width=width, height=height,
        )
        self.adjust_scales()

    def __repr__(self) -> str:
        return f"Plot(x={self.x!r}, y={self.y!r}, mappings={len(self.mappings)})"

    @classmethod
    def from_config(
        cls,
        config: PlotConfig,
        width: float = DEFAULT_WIDTH,
        height: float = DEFAULT_HEIGHT,
        surface_density: int = DEFAULT_SURFACE_DENSITY,
    ) -> "Plot":
        """
        Build a plot from a document record.

        Raises:
            ScaleError: If a scale is invalid
            MappingError: If a mapping is invalid
        """
        x = Scale.from_config(config.x)
        y = Scale.from_config(config.y)
        mappings = [new_mapping(m, surface_density) for m in config.mappings]
        return cls(x, y, mappings, width=width, height=height, surface_density=surface_density)

    @staticmethod
    def _ensure_span(scale: Scale) -> None:
        if scale.end <= scale.start:
            scale.extension(scale.start, scale.start + _min_span(scale, scale.start))

    def _sync_mapper(self) -> None:
        self.mapper.set_mode(self.x.invert, self.x.log, self.y.invert, self.y.log)
        self.mapper.update_data_extensions(self.x.start, self.x.end, self.y.start, self.y.end)

    # ------------------------------------------------------------------
    # Scale fitting
    # ------------------------------------------------------------------

    def max_data_limits(self) -> Optional[Limits]:
        """Union of the data limits of every mapping, or None without data."""
        limits = [m.data_limits() for m in self.mappings]
        limits = [lim for lim in limits if lim is not None]
        if not limits:
            return None
        xmin = min(lim[0][0] for lim in limits)
        xmax = max(lim[0][1] for lim in limits)
        ymin = min(lim[1][0] for lim in limits)
        ymax = max(lim[1][1] for lim in limits)
        return (xmin, xmax), (ymin, ymax)

    def adjust_scales(self) -> None:
        """Refit both scales to the data and update the mapper domain."""
        limits = self.max_data_limits()
        if limits is not None:
            (xmin, xmax), (ymin, ymax) = limits
            if abs(xmax - xmin) < _min_span(self.x, xmin):
                logger.debug(f"Degenerate x data span at {xmin}, widening")
                xmax = xmin + _min_span(self.x, xmin)
            if abs(ymax - ymin) < _min_span(self.y, ymin):
                logger.debug(f"Degenerate y data span at {ymin}, widening")
                ymax = ymin + _min_span(self.y, ymin)
            _fit_scale(self.x, xmin, xmax)
            _fit_scale(self.y, ymin, ymax)
        self._sync_mapper()

    # ------------------------------------------------------------------
    # Mapping management
    # ------------------------------------------------------------------

    def _mapping_at(self, ix: int) -> Mapping:
        if not 0 <= ix < len(self.mappings):
            raise MappingError(f"No mapping at position {ix} (plot has {len(self.mappings)})")
        return self.mappings[ix]

    def add_mapping(self, mapping: Union[Mapping, MappingConfig], index: Optional[int] = None) -> Mapping:
        """
        Insert a mapping, by default on top of the others.

        Args:
            mapping: Mapping instance or document record
            index: Position in the drawing order (default: last)

        Returns:
            The inserted mapping
        """
        if isinstance(mapping, MappingConfig):
            mapping = new_mapping(mapping, self.surface_density)
        if index is None:
            index = len(self.mappings)
        if not 0 <= index <= len(self.mappings):
            raise MappingError(
                f"Tried to insert mapping at position {index}, but plot has only {len(self.mappings)} elements"
            )
        self.mappings.insert(index, mapping)
        self.adjust_scales()
        return mapping

    def remove_mapping(self, ix: int) -> Mapping:
        mapping = self._mapping_at(ix)
        del self.mappings[ix]
        self.adjust_scales()
        return mapping

    def update_mapping(self, ix: int, columns: Dict[str, Sequence]) -> None:
        """Replace the data of the mapping at ``ix``."""
        self._mapping_at(ix).update_data(columns)
        self.adjust_scales()

    def update_mapping_from_config(self, ix: int, config: MappingConfig) -> None:
        """Apply a document record to the mapping at ``ix``."""
        self._mapping_at(ix).update_from_config(config)
        self.adjust_scales()

    def update_scale(self, axis: str, **changes) -> None:
        """Change fields of the "x" or "y" scale, e.g. ``update_scale("x", log=True)``."""
        scale = self._scale(axis)
        start = changes.get("start", scale.start)
        end = changes.get("end", scale.end)
        if not _valid_domain(start, end, changes.get("log", scale.log)):
            raise ScaleError(f"Scale {axis} cannot be drawn over [{start}, {end}]")
        scale.update(**changes)
        self.adjust_scales()

    def clear_all_data(self) -> None:
        for mapping in self.mappings:
            mapping.clear()
        self.adjust_scales()

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def _scale(self, axis: str) -> Scale:
        if axis == "x":
            return self.x
        if axis == "y":
            return self.y
        raise ScaleError(f"Invalid scale name: {axis!r} (expected 'x' or 'y')")

    def scale_info(self, axis: str) -> Dict[str, str]:
        return self._scale(axis).description()

    def mapping_info(self) -> List[Tuple[str, str, Dict[str, str]]]:
        """(position, kind, properties) of every mapping, in drawing order."""
        return [(str(i), m.kind, m.properties()) for i, m in enumerate(self.mappings)]

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------

    def draw(self, surface, design: PlotDesign, width: float, height: float) -> None:
        """Draw background, grid, axis names and mappings into a width x height area."""
        self.mapper.update_dimensions(width, height)
        self._draw_background(surface, design)
        self._draw_grid(surface, design)
        for mapping in self.mappings:
            draw_mapping(mapping, self.mapper, surface)

    def _draw_background(self, surface, design: PlotDesign) -> None:
        w, h = self.mapper.w, self.mapper.h
        surface.save()
        surface.set_line_width(0.0)
        surface.set_color(design.bgcolor)
        surface.rectangle(PLOT_MARGIN * w, PLOT_MARGIN * h, (1 - 2 * PLOT_MARGIN) * w, (1 - 2 * PLOT_MARGIN) * h)
        surface.fill()
        surface.restore()

    def _draw_grid_line(self, surface, design: PlotDesign, start, end) -> None:
        surface.save()
        surface.set_color(design.fgcolor)
        surface.move_to(*start)
        surface.line_to(*end)
        surface.stroke()
        surface.restore()

    def _draw_grid_value(self, surface, design: PlotDesign, value: str, pos, center_x: bool, off_y: float) -> None:
        surface.save()
        surface.set_color(design.label_color)
        draw_label(surface, design.font, value, pos, center=(center_x, True), off_x=0.0, off_y=off_y)
        surface.restore()

    @staticmethod
    def _mirror(value: float, vmin: float, vmax: float, log: bool) -> float:
        if log:
            return 10 ** (math.log10(vmin) + math.log10(vmax) - math.log10(value))
        return vmin + vmax - value

    def _draw_grid(self, surface, design: PlotDesign) -> None:
        mapper = self.mapper
        surface.save()
        surface.set_line_width(design.width)

        if self.x.guide:
            x_labels = self.x.labels()
            if mapper.xinv:
                x_labels.reverse()
            y_start, y_end = (mapper.ymax, mapper.ymin) if mapper.yinv else (mapper.ymin, mapper.ymax)
            for x, label in zip(self.x.steps, x_labels):
                if mapper.xinv:
                    x = self._mirror(x, mapper.xmin, mapper.xmax, mapper.xlog)
                start = mapper.map(x, y_start)
                end = mapper.map(x, y_end)
                self._draw_grid_line(surface, design, start, end)
                self._draw_grid_value(surface, design, label, start, True, 1.5)

        if self.y.guide:
            y_labels = self.y.labels()
            if mapper.yinv:
                y_labels.reverse()
            max_extent = max((surface.text_extents(label, design.font)[0] for label in y_labels), default=0.0)
            x_start, x_end = (mapper.xmax, mapper.xmin) if mapper.xinv else (mapper.xmin, mapper.xmax)
            for y, label in zip(self.y.steps, y_labels):
                if mapper.yinv:
                    y = self._mirror(y, mapper.ymin, mapper.ymax, mapper.ylog)
                start = mapper.map(x_start, y)
                end = mapper.map(x_end, y)
                self._draw_grid_line(surface, design, start, end)
                label_pos = (start[0] - 1.1 * max_extent, start[1])
                self._draw_grid_value(surface, design, label, label_pos, False, 0.0)

        self._draw_scale_names(surface, design)
        surface.restore()

    def _draw_scale_names(self, surface, design: PlotDesign) -> None:
        w, h = self.mapper.w, self.mapper.h
        surface.save()
        surface.set_color(design.label_color)
        draw_label(surface, design.font, self.x.label, (w * 0.5, h * 0.975))
        draw_label(surface, design.font, self.y.label, (w * 0.025, h * 0.5), rotate=True)
        surface.restore()
