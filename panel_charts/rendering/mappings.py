"""
Data series of a plot.

Each mapping kind owns its data columns and its style. Every kind offers the
same operations:

- ``data_limits()``: ``((xmin, xmax), (ymin, ymax))`` of the data, or None
  when the mapping holds no data
- ``update_data(columns)``: replace all data columns at once
- ``update_from_config(config)``: apply style and data from a MappingConfig
- ``properties()``: summary of style, data shape and provenance

Drawing lives in ``layers.py``, keyed by ``Mapping.kind``.

Example:
    >>> from panel_charts.model import MappingConfig
    >>> mapping = new_mapping(MappingConfig.from_dict(
    ...     {"kind": "bar", "map": {"x": [1.0, 3.0, 2.0]}, "center": True, "spacing": 2.0}
    ... ))
    >>> mapping.bases
    [-1.0, 1.0, 3.0]
"""

import logging
from typing import ClassVar, Dict, List, Optional, Sequence, Tuple

import numpy as np

from ..constants import (
    DEFAULT_BAR_SPACING,
    DEFAULT_BAR_WIDTH,
    DEFAULT_COLOR,
    DEFAULT_COLOR_FINAL,
    DEFAULT_DASH,
    DEFAULT_FONT,
    DEFAULT_LIMIT_SIZE,
    DEFAULT_LINE_WIDTH,
    DEFAULT_RADIUS,
    DEFAULT_SURFACE_DENSITY,
    DEFAULT_Z_RANGE,
    MAPPING_COLUMNS,
)
from ..exceptions import MappingError
from ..model import MappingConfig, validate_color

logger = logging.getLogger("panel_charts.rendering.mappings")

Limits = Tuple[Tuple[float, float], Tuple[float, float]]


def _column_range(values: np.ndarray) -> Tuple[float, float]:
    return float(np.min(values)), float(np.max(values))


class Mapping:
    """
    Base class of the mapping kinds.

    Subclasses declare ``kind`` and keep their data as numpy arrays named
    after the document columns (``x``, ``y``, ``z``, ``text``).

    Attributes:
        color: Colour as '#rrggbb' or '#rrggbbaa'
        source: Free-form identifier of where the data came from
        columns: Names of the data columns at their source
    """

    kind: ClassVar[str] = ""

    def __init__(self, color: str = DEFAULT_COLOR, source: str = "", columns: Optional[List[str]] = None):
        self.color = color
        self.source = source
        self.columns = list(columns) if columns else []
        for name in self.required_columns():
            setattr(self, name, self._empty(name))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(n={len(self)}, color={self.color!r})"

    def __len__(self) -> int:
        return len(getattr(self, self.required_columns()[0]))

    @classmethod
    def required_columns(cls) -> Tuple[str, ...]:
        return MAPPING_COLUMNS[cls.kind]

    @staticmethod
    def _empty(name: str):
        return [] if name == "text" else np.empty(0, dtype=float)

    def is_empty(self) -> bool:
        return len(self) == 0

    def update_data(self, columns: Dict[str, Sequence]) -> None:
        """
        Replace every data column.

        The new columns are checked together and either all of them are
        applied or none is.

        Args:
            columns: Mapping from column name to values; must hold exactly the
                columns this kind requires, all of the same length

        Raises:
            MappingError: On a missing, unexpected or mismatched column
        """
        required = self.required_columns()
        if set(columns) != set(required):
            raise MappingError(
                f"Invalid data update for {self.kind} (required {', '.join(required)}, "
                f"informed {', '.join(columns) or 'nothing'})"
            )

        converted = {}
        for name in required:
            if name == "text":
                converted[name] = [str(v) for v in columns[name]]
                continue
            try:
                values = np.asarray(columns[name], dtype=float).reshape(-1)
            except (TypeError, ValueError) as e:
                raise MappingError(f"Column '{name}' should hold numbers: {e}") from e
            if not np.all(np.isfinite(values)):
                raise MappingError(f"Column '{name}' holds NaN or infinite values")
            converted[name] = values

        n = len(converted[required[0]])
        for name in required[1:]:
            if len(converted[name]) != n:
                raise MappingError(
                    f"Data length mismatch (expected {n}, but informed {len(converted[name])} for {name})"
                )
        self._check_data(converted)

        for name, values in converted.items():
            setattr(self, name, values)
        self._data_changed()

    def _check_data(self, columns: Dict[str, Sequence]) -> None:
        """Hook for kind-specific checks of new data."""

    def _data_changed(self) -> None:
        """Hook called after the data or a layout property changed."""

    def clear(self) -> None:
        """Drop all data, keeping the style."""
        for name in self.required_columns():
            setattr(self, name, self._empty(name))
        self._data_changed()

    def update_from_config(self, config: MappingConfig) -> None:
        """
        Apply a validated document record.

        Style properties absent from the record keep their current values.
        """
        config.validate()
        if config.kind != self.kind:
            raise MappingError(f"Cannot update a {self.kind} mapping from a {config.kind} record")
        if config.color is not None:
            self.color = config.color
        if config.source:
            self.source = config.source
        if config.columns:
            self.columns = list(config.columns)
        self._apply_style(config)
        self.update_data({name: getattr(config.map, name) for name in self.required_columns()})

    def _apply_style(self, config: MappingConfig) -> None:
        """Copy the kind-specific properties that are set in ``config``."""

    def set_color(self, color: str) -> None:
        if not validate_color(color):
            raise MappingError(f"Invalid RGB/RGBA color: {color!r}")
        self.color = color

    def data_limits(self) -> Optional[Limits]:
        if self.is_empty():
            return None
        return _column_range(self.x), _column_range(self.y)

    def style(self) -> Dict[str, str]:
        return {}

    def properties(self) -> Dict[str, str]:
        """Kind, colour, data shape, style and provenance of this mapping."""
        info = {
            "kind": self.kind,
            "color": self.color,
            "map": "(" + ",".join("t" if c == "text" else c for c in self.required_columns()) + ")",
            "length": str(len(self)),
        }
        info.update(self.style())
        info["source"] = self.source
        info["columns"] = ",".join(self.columns)
        return info


class LineMapping(Mapping):
    """Points joined by straight segments in data order.

    Attributes:
        width: Line width in pixels
        dash: Number of dashes per 10 pixel cycle (1 draws a solid line)
    """

    kind = "line"

    def __init__(self, width: float = DEFAULT_LINE_WIDTH, dash: int = DEFAULT_DASH, **kwargs):
        super().__init__(**kwargs)
        self.width = width
        self.dash = dash

    def _apply_style(self, config: MappingConfig) -> None:
        if config.width is not None:
            self.width = config.width
        if config.spacing is not None:
            self.dash = max(1, int(round(config.spacing)))

    def style(self) -> Dict[str, str]:
        return {"width": str(self.width), "spacing": str(self.dash)}


class ScatterMapping(Mapping):
    """One filled circle per point."""

    kind = "scatter"

    def __init__(self, radius: float = DEFAULT_RADIUS, **kwargs):
        super().__init__(**kwargs)
        self.radius = radius

    def _apply_style(self, config: MappingConfig) -> None:
        if config.radius is not None:
            self.radius = config.radius

    def style(self) -> Dict[str, str]:
        return {"radius": str(self.radius)}


class BarMapping(Mapping):
    """
    Regularly spaced bars.

    Only the bar extents are data (column ``x``). The position of bar ``i``
    along the varying axis is ``origin + spacing * i``, moved back by half a
    spacing when ``center`` is set. Bars grow from zero along the other axis
    and are ``spacing * width / 100`` thick.

    Attributes:
        width: Bar thickness as a percentage of the spacing
        spacing: Distance between consecutive bar positions, in data units
        origin: Position of the first bar
        center: Centre bars on their positions instead of starting there
        vertical: Vertical bars (heights along y); horizontal bars otherwise
        bases: Derived start position of each bar along the varying axis
        thickness: Derived bar thickness in data units
    """

    kind = "bar"

    def __init__(
        self,
        width: float = DEFAULT_BAR_WIDTH,
        spacing: float = DEFAULT_BAR_SPACING,
        origin: float = 0.0,
        center: bool = False,
        vertical: bool = True,
        **kwargs,
    ):
        self.width = width
        self.spacing = spacing
        self.origin = origin
        self.center = center
        self.vertical = vertical
        self.bases: List[float] = []
        self.thickness = 0.0
        super().__init__(**kwargs)

    def _apply_style(self, config: MappingConfig) -> None:
        if config.width is not None:
            self.width = config.width
        if config.spacing is not None:
            self.spacing = config.spacing
        if config.origin is not None:
            self.origin = config.origin
        if config.center is not None:
            self.center = config.center
        if config.vertical is not None:
            self.vertical = config.vertical

    def set_layout(self, **changes) -> None:
        """Change width, spacing, origin, center or vertical and re-derive the bars."""
        for name, value in changes.items():
            if name not in ("width", "spacing", "origin", "center", "vertical"):
                raise MappingError(f"Invalid mapping property for bar: {name}")
            setattr(self, name, value)
        self._data_changed()

    def _first_base(self) -> float:
        return self.origin - (self.spacing / 2.0 if self.center else 0.0)

    def _data_changed(self) -> None:
        first = self._first_base()
        self.bases = [first + self.spacing * i for i in range(len(self.x))]
        self.thickness = self.spacing * (self.width / 100.0)

    def bar_coordinates(self) -> List[Tuple[Tuple[float, float], ...]]:
        """Data space corners of every bar, counter-clockwise from the base."""
        bars = []
        for base, extent in zip(self.bases, self.x):
            extent = float(extent)
            if self.vertical:
                corners = ((base, 0.0), (base + self.thickness, 0.0),
                           (base + self.thickness, extent), (base, extent))
            else:
                corners = ((0.0, base), (extent, base),
                           (extent, base + self.thickness), (0.0, base + self.thickness))
            bars.append(corners)
        return bars

    def data_limits(self) -> Optional[Limits]:
        if self.is_empty():
            return None
        first = self._first_base()
        along = (first, first + len(self.x) * self.spacing)
        across = (min(0.0, float(np.min(self.x))), max(0.0, float(np.max(self.x))))
        if self.vertical:
            return along, across
        return across, along

    def style(self) -> Dict[str, str]:
        return {
            "width": str(self.width),
            "spacing": str(self.spacing),
            "origin": str(self.origin),
            "center": str(self.center).lower(),
            "vertical": str(self.vertical).lower(),
        }


class AreaMapping(Mapping):
    """Filled band between a lower (``y``) and an upper (``z``) bound along ``x``."""

    kind = "area"

    def data_limits(self) -> Optional[Limits]:
        if self.is_empty():
            return None
        return _column_range(self.x), (float(np.min(self.y)), float(np.max(self.z)))


class IntervalMapping(Mapping):
    """
    Error bars: a spine from the lower (``y``) to the upper (``z``) bound at
    each ``x``, capped at both ends.

    Attributes:
        width: Line width in pixels
        dash: Number of dashes per 10 pixel cycle
        limits: Cap length in data units
        vertical: Vertical spines; horizontal spines read ``x`` along y
    """

    kind = "interval"

    def __init__(
        self,
        width: float = DEFAULT_LINE_WIDTH,
        dash: int = DEFAULT_DASH,
        limits: float = DEFAULT_LIMIT_SIZE,
        vertical: bool = True,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.width = width
        self.dash = dash
        self.limits = limits
        self.vertical = vertical

    def _apply_style(self, config: MappingConfig) -> None:
        if config.width is not None:
            self.width = config.width
        if config.spacing is not None:
            self.dash = max(1, int(round(config.spacing)))
        if config.limits is not None:
            self.limits = config.limits
        if config.vertical is not None:
            self.vertical = config.vertical

    def _check_data(self, columns: Dict[str, Sequence]) -> None:
        if np.any(columns["y"] > columns["z"]):
            raise MappingError("Interval lower bound (y) exceeds its upper bound (z)")

    def data_limits(self) -> Optional[Limits]:
        if self.is_empty():
            return None
        half = self.limits / 2.0
        centre = (float(np.min(self.x)) - half, float(np.max(self.x)) + half)
        bounds = (float(np.min(self.y)), float(np.max(self.z)))
        if self.vertical:
            return centre, bounds
        return bounds, centre

    def style(self) -> Dict[str, str]:
        return {
            "width": str(self.width),
            "spacing": str(self.dash),
            "limits": str(self.limits),
            "vertical": str(self.vertical).lower(),
        }


class TextMapping(Mapping):
    """Text labels centred on their points."""

    kind = "text"

    def __init__(self, font: str = DEFAULT_FONT, **kwargs):
        super().__init__(**kwargs)
        self.font = font

    def _apply_style(self, config: MappingConfig) -> None:
        if config.font is not None:
            self.font = config.font

    def style(self) -> Dict[str, str]:
        return {"font": self.font}


class SurfaceMapping(Mapping):
    """
    Colour gradient over the plot area driven by scattered ``z`` values.

    Attributes:
        color_final: Colour at ``z_end`` (``color`` is the colour at ``z_start``)
        z_start, z_end: z values mapped to the two colours
        density: Mesh patches per side
    """

    kind = "surface"

    def __init__(
        self,
        color_final: str = DEFAULT_COLOR_FINAL,
        z_start: float = DEFAULT_Z_RANGE[0],
        z_end: float = DEFAULT_Z_RANGE[1],
        density: int = DEFAULT_SURFACE_DENSITY,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.color_final = color_final
        self.z_start = z_start
        self.z_end = z_end
        self.density = density

    def _apply_style(self, config: MappingConfig) -> None:
        if config.color_final is not None:
            self.color_final = config.color_final
        if config.z_start is not None:
            self.z_start = config.z_start
        if config.z_end is not None:
            self.z_end = config.z_end
        if config.density is not None:
            self.density = config.density

    def style(self) -> Dict[str, str]:
        return {
            "color_final": self.color_final,
            "z_start": str(self.z_start),
            "z_end": str(self.z_end),
            "density": str(self.density),
        }


_MAPPING_TYPES = {
    cls.kind: cls
    for cls in (LineMapping, ScatterMapping, BarMapping, AreaMapping, IntervalMapping, TextMapping, SurfaceMapping)
}


def new_mapping(config: MappingConfig, surface_density: int = DEFAULT_SURFACE_DENSITY) -> Mapping:
    """
    Create the mapping for a document record.

    Args:
        config: Mapping record
        surface_density: Mesh density for surface mappings without their own

    Returns:
        Mapping of the kind named by the record, holding its style and data

    Raises:
        MappingError: If the record is invalid
    """
    mapping_cls = _MAPPING_TYPES.get(config.kind)
    if mapping_cls is None:
        raise MappingError(f"Invalid mapping kind: {config.kind}")
    if mapping_cls is SurfaceMapping:
        mapping = SurfaceMapping(density=surface_density)
    else:
        mapping = mapping_cls()
    mapping.update_from_config(config)
    logger.debug(f"Created {mapping!r}")
    return mapping
