"""
Chart document records for PanelCharts package.

A chart document is a JSON object describing either a single plot or a panel
of up to four plots. This module turns plain dictionaries into typed records
and validates them. The records may hold invalid values until validate() is
called; the rendering classes only ever see validated records.

Example:
    >>> from panel_charts.model import PanelConfig
    >>>
    >>> doc = '''{"x": {"from": 0, "to": 10}, "y": {"from": 0, "to": 1},
    ...          "mappings": [{"kind": "line", "map": {"x": [0, 10], "y": [0, 1]}}]}'''
    >>> panel = PanelConfig.from_json(doc)
    >>> panel.validate()
    >>> len(panel.plots)
    1
"""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .constants import (
    ADJUSTMENTS,
    DARK_BG_COLOR,
    DARK_GRID_COLOR,
    DEFAULT_ADJUSTMENT,
    DEFAULT_BG_COLOR,
    DEFAULT_FONT,
    DEFAULT_GRID_COLOR,
    DEFAULT_GRID_WIDTH,
    DEFAULT_GUIDE,
    DEFAULT_HEIGHT,
    DEFAULT_H_RATIO,
    DEFAULT_INTERVALS,
    DEFAULT_INVERT,
    DEFAULT_LOG,
    DEFAULT_OFFSET,
    DEFAULT_PRECISION,
    DEFAULT_V_RATIO,
    DEFAULT_WIDTH,
    MAPPING_COLUMNS,
    MAPPING_KINDS,
    MAPPING_PROPERTIES,
    MAX_GRID_WIDTH,
    SPLIT_BY_COUNT,
    SPLIT_PLOT_COUNT,
)
from .exceptions import (
    DesignError,
    InvalidParameterError,
    LayoutError,
    MappingError,
    PanelError,
    ScaleError,
)

logger = logging.getLogger(__name__)

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}([0-9a-fA-F]{2})?$")

_COLUMN_NAMES = ("x", "y", "z", "text")
_COLUMN_ABBREVIATIONS = {"x": "x", "y": "y", "z": "z", "text": "t"}


def validate_color(value: Any) -> bool:
    """Return True for '#rrggbb' or '#rrggbbaa' colour strings."""
    return isinstance(value, str) and _HEX_COLOR.match(value) is not None


# ============================================================================
# Value coercion
# ============================================================================

def _require_dict(data: Any, what: str, error_cls=InvalidParameterError) -> Dict[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise error_cls(f"'{what}' should be an object, got {type(data).__name__}")
    return data


def _number(value: Any, name: str, error_cls) -> float:
    # bool is an int subclass but never a valid number here
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise error_cls(f"'{name}' should be a number, got {value!r}")
    return float(value)


def _integer(value: Any, name: str, error_cls) -> int:
    if isinstance(value, bool):
        raise error_cls(f"'{name}' should be an integer, got {value!r}")
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if not isinstance(value, int):
        raise error_cls(f"'{name}' should be an integer, got {value!r}")
    return value


def _boolean(value: Any, name: str, error_cls) -> bool:
    if not isinstance(value, bool):
        raise error_cls(f"'{name}' should be true or false, got {value!r}")
    return value


def _string(value: Any, name: str, error_cls) -> str:
    if not isinstance(value, str):
        raise error_cls(f"'{name}' should be a string, got {value!r}")
    return value


def _optional(data: Dict[str, Any], key: str, convert, error_cls, default=None):
    value = data.get(key)
    if value is None:
        return default
    return convert(value, key, error_cls)


def _number_column(values: Any, column: str) -> List[float]:
    if not isinstance(values, list):
        raise MappingError(f"Column '{column}' should be an array")
    result = []
    for i, value in enumerate(values):
        if value is None:
            # NaN values arrive as JSON null
            raise MappingError(
                f"Column '{column}' has a null value at position {i} "
                "(missing or NaN values are not supported)"
            )
        result.append(_number(value, f"{column}[{i}]", MappingError))
    return result


def _text_column(values: Any) -> List[str]:
    if not isinstance(values, list):
        raise MappingError("Column 'text' should be an array")
    return [str(v) if v is not None else "" for v in values]


# ============================================================================
# Design and Layout
# ============================================================================

@dataclass
class DesignConfig:
    """Visual design shared by all plots of a panel.

    Attributes:
        bgcolor: Plot background colour.
        fgcolor: Grid line colour.
        width: Grid line width in pixels.
        font: Font descriptor used for grid values and axis names.
    """

    bgcolor: str = DEFAULT_BG_COLOR
    fgcolor: str = DEFAULT_GRID_COLOR
    width: float = DEFAULT_GRID_WIDTH
    font: str = DEFAULT_FONT

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "DesignConfig":
        data = _require_dict(data, "design", DesignError)
        return cls(
            bgcolor=_optional(data, "bgcolor", _string, DesignError, DEFAULT_BG_COLOR),
            fgcolor=_optional(data, "fgcolor", _string, DesignError, DEFAULT_GRID_COLOR),
            width=_optional(data, "width", _number, DesignError, DEFAULT_GRID_WIDTH),
            font=_optional(data, "font", _string, DesignError, DEFAULT_FONT),
        )

    @classmethod
    def dark(cls) -> "DesignConfig":
        """Design preset with a dark background."""
        return cls(bgcolor=DARK_BG_COLOR, fgcolor=DARK_GRID_COLOR)

    def validate(self) -> None:
        if self.width < 0 or self.width > MAX_GRID_WIDTH:
            raise DesignError(f"Invalid grid width: {self.width} (expected 0 - {MAX_GRID_WIDTH})")
        if not validate_color(self.fgcolor):
            raise DesignError(f"Invalid grid color: {self.fgcolor!r}")
        if not validate_color(self.bgcolor):
            raise DesignError(f"Invalid background color: {self.bgcolor!r}")

    def to_dict(self) -> Dict[str, Any]:
        return {"bgcolor": self.bgcolor, "fgcolor": self.fgcolor, "width": self.width, "font": self.font}


@dataclass
class LayoutConfig:
    """Canvas size and split of a panel.

    Attributes:
        width: Canvas width in pixels.
        height: Canvas height in pixels.
        hratio: Horizontal split ratio in [0, 1].
        vratio: Vertical split ratio in [0, 1].
        split: Split keyword, or None to infer it from the number of plots.
    """

    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    hratio: float = DEFAULT_H_RATIO
    vratio: float = DEFAULT_V_RATIO
    split: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "LayoutConfig":
        data = _require_dict(data, "layout", LayoutError)
        split = _optional(data, "split", _string, LayoutError)
        return cls(
            width=_optional(data, "width", _integer, LayoutError, DEFAULT_WIDTH),
            height=_optional(data, "height", _integer, LayoutError, DEFAULT_HEIGHT),
            hratio=_optional(data, "hratio", _number, LayoutError, DEFAULT_H_RATIO),
            vratio=_optional(data, "vratio", _number, LayoutError, DEFAULT_V_RATIO),
            split=split.lower() if split is not None else None,
        )

    def validate(self) -> None:
        if self.width <= 0:
            raise LayoutError("'width' should be strictly positive")
        if self.height <= 0:
            raise LayoutError("'height' should be strictly positive")
        if not 0.0 <= self.hratio <= 1.0:
            raise LayoutError("'hratio' should be in the interval 0.0 - 1.0")
        if not 0.0 <= self.vratio <= 1.0:
            raise LayoutError("'vratio' should be in the interval 0.0 - 1.0")
        if self.split is not None and self.split not in SPLIT_PLOT_COUNT:
            expected = ", ".join(f"'{s}'" for s in SPLIT_PLOT_COUNT)
            raise LayoutError(f"Invalid value for 'split': {self.split!r}. Expected one of {expected}")

    def to_dict(self) -> Dict[str, Any]:
        data = {"width": self.width, "height": self.height, "hratio": self.hratio, "vratio": self.vratio}
        if self.split is not None:
            data["split"] = self.split
        return data


# ============================================================================
# Scale
# ============================================================================

@dataclass
class ScaleConfig:
    """Axis definition as written in a chart document.

    The document keys ``from`` and ``to`` are stored as ``start`` and ``end``.
    """

    label: str = ""
    start: float = 0.0
    end: float = 1.0
    precision: int = DEFAULT_PRECISION
    intervals: int = DEFAULT_INTERVALS
    log: bool = DEFAULT_LOG
    invert: bool = DEFAULT_INVERT
    offset: int = DEFAULT_OFFSET
    adjust: str = DEFAULT_ADJUSTMENT
    guide: bool = DEFAULT_GUIDE

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ScaleConfig":
        data = _require_dict(data, "scale", ScaleError)
        adjust = _optional(data, "adjust", _string, ScaleError, DEFAULT_ADJUSTMENT)
        return cls(
            label=_optional(data, "label", _string, ScaleError, ""),
            start=_optional(data, "from", _number, ScaleError, 0.0),
            end=_optional(data, "to", _number, ScaleError, 1.0),
            precision=_optional(data, "precision", _integer, ScaleError, DEFAULT_PRECISION),
            intervals=_optional(data, "intervals", _integer, ScaleError, DEFAULT_INTERVALS),
            log=_optional(data, "log", _boolean, ScaleError, DEFAULT_LOG),
            invert=_optional(data, "invert", _boolean, ScaleError, DEFAULT_INVERT),
            offset=_optional(data, "offset", _integer, ScaleError, DEFAULT_OFFSET),
            adjust=adjust.lower(),
            guide=_optional(data, "guide", _boolean, ScaleError, DEFAULT_GUIDE),
        )

    def validate(self) -> None:
        if self.start > self.end:
            raise ScaleError(f"Inverted range (from={self.start} > to={self.end})")
        if self.log and self.start <= 0:
            raise ScaleError(f"Logarithmic scale requires a strictly positive domain (from={self.start})")
        if not 0 <= self.offset <= 100:
            raise ScaleError(f"Invalid offset: {self.offset} (expected 0 - 100)")
        if self.adjust not in ADJUSTMENTS:
            raise ScaleError(f"Invalid adjustment: {self.adjust!r} (expected tight, round or off)")
        if self.intervals < 1:
            raise ScaleError(f"Invalid number of intervals: {self.intervals}")
        if 2 * self.offset >= 100 * self.intervals:
            raise ScaleError(f"Offset {self.offset}% leaves no room for {self.intervals} interval(s)")
        if self.precision < 0:
            raise ScaleError(f"Invalid precision: {self.precision}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "from": self.start,
            "to": self.end,
            "precision": self.precision,
            "intervals": self.intervals,
            "log": self.log,
            "invert": self.invert,
            "offset": self.offset,
            "adjust": self.adjust,
            "guide": self.guide,
        }


# ============================================================================
# Mapping
# ============================================================================

@dataclass
class MapData:
    """Data columns of a mapping; absent columns are None."""

    x: Optional[List[float]] = None
    y: Optional[List[float]] = None
    z: Optional[List[float]] = None
    text: Optional[List[str]] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "MapData":
        data = _require_dict(data, "map", MappingError)
        for key in data:
            if key not in _COLUMN_NAMES:
                raise MappingError(f"Invalid data column: {key!r} (expected x, y, z or text)")
        return cls(
            x=_number_column(data["x"], "x") if data.get("x") is not None else None,
            y=_number_column(data["y"], "y") if data.get("y") is not None else None,
            z=_number_column(data["z"], "z") if data.get("z") is not None else None,
            text=_text_column(data["text"]) if data.get("text") is not None else None,
        )

    def columns(self) -> tuple:
        return tuple(name for name in _COLUMN_NAMES if getattr(self, name) is not None)

    def description(self, columns: Optional[tuple] = None) -> str:
        columns = self.columns() if columns is None else columns
        return "(" + ",".join(_COLUMN_ABBREVIATIONS[c] for c in columns) + ")"

    def to_dict(self) -> Dict[str, Any]:
        return {name: list(getattr(self, name)) for name in self.columns()}


# Keys with a fixed meaning for every mapping kind
_COMMON_MAPPING_KEYS = ("kind", "map", "color", "source", "columns")


@dataclass
class MappingConfig:
    """One data series as written in a chart document.

    Only the properties that apply to ``kind`` may be set; see
    ``constants.MAPPING_PROPERTIES``.
    """

    kind: str
    map: MapData = field(default_factory=MapData)
    color: Optional[str] = None
    width: Optional[float] = None
    spacing: Optional[float] = None
    vertical: Optional[bool] = None
    font: Optional[str] = None
    radius: Optional[float] = None
    limits: Optional[float] = None
    center: Optional[bool] = None
    origin: Optional[float] = None
    color_final: Optional[str] = None
    z_start: Optional[float] = None
    z_end: Optional[float] = None
    density: Optional[int] = None
    source: str = ""
    columns: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MappingConfig":
        data = _require_dict(data, "mapping", MappingError)
        known = set(_COMMON_MAPPING_KEYS)
        for props in MAPPING_PROPERTIES.values():
            known.update(props)
        for key in data:
            if key not in known:
                raise MappingError(f"Invalid mapping property: {key}")
        if "kind" not in data:
            raise MappingError("Missing mapping 'kind'")
        columns = data.get("columns") or []
        if not isinstance(columns, list):
            raise MappingError("'columns' should be an array of names")
        return cls(
            kind=_string(data["kind"], "kind", MappingError).lower(),
            map=MapData.from_dict(data.get("map")),
            color=_optional(data, "color", _string, MappingError),
            width=_optional(data, "width", _number, MappingError),
            spacing=_optional(data, "spacing", _number, MappingError),
            vertical=_optional(data, "vertical", _boolean, MappingError),
            font=_optional(data, "font", _string, MappingError),
            radius=_optional(data, "radius", _number, MappingError),
            limits=_optional(data, "limits", _number, MappingError),
            center=_optional(data, "center", _boolean, MappingError),
            origin=_optional(data, "origin", _number, MappingError),
            color_final=_optional(data, "color_final", _string, MappingError),
            z_start=_optional(data, "z_start", _number, MappingError),
            z_end=_optional(data, "z_end", _number, MappingError),
            density=_optional(data, "density", _integer, MappingError),
            source=_optional(data, "source", _string, MappingError, ""),
            columns=[str(c) for c in columns],
        )

    def properties(self) -> List[str]:
        """Names of the kind-specific properties that are set."""
        names = []
        for props in MAPPING_PROPERTIES.values():
            for name in props:
                if name not in names and getattr(self, name) is not None:
                    names.append(name)
        return names

    def validate(self) -> None:
        if self.kind not in MAPPING_KINDS:
            raise MappingError(
                f"Invalid mapping kind: {self.kind} (expected {', '.join(MAPPING_KINDS)})"
            )
        if self.map.x is None:
            raise MappingError("Missing first mapping data column (x)")

        nx = len(self.map.x)
        for column in ("y", "z", "text"):
            values = getattr(self.map, column)
            if values is not None and len(values) != nx:
                raise MappingError(
                    f"Data length mismatch (expected {nx}, but informed {len(values)} for {column})"
                )

        if self.color is not None and not validate_color(self.color):
            raise MappingError(f"Invalid RGB/RGBA color: {self.color!r}")

        required = MAPPING_COLUMNS[self.kind]
        if set(self.map.columns()) != set(required):
            raise MappingError(
                f"Invalid data mapping for {self.kind} (required {self.map.description(required)} "
                f"but informed {self.map.description()})"
            )

        allowed = MAPPING_PROPERTIES[self.kind]
        for name in self.properties():
            if name not in allowed:
                raise MappingError(f"Invalid mapping property for {self.kind}: {name}")

        if self.width is not None and self.width < 0:
            raise MappingError(f"'width' should not be negative ({self.width})")
        if self.spacing is not None and self.spacing <= 0:
            raise MappingError(f"'spacing' should be strictly positive ({self.spacing})")
        if self.radius is not None and self.radius < 0:
            raise MappingError(f"'radius' should not be negative ({self.radius})")
        if self.limits is not None and self.limits < 0:
            raise MappingError(f"'limits' should not be negative ({self.limits})")
        if self.density is not None and self.density < 1:
            raise MappingError(f"'density' should be at least 1 ({self.density})")
        if self.color_final is not None and not validate_color(self.color_final):
            raise MappingError(f"Invalid RGB/RGBA color: {self.color_final!r}")
        if self.z_start is not None and self.z_end is not None and self.z_start == self.z_end:
            raise MappingError("'z_start' and 'z_end' should differ")

    def to_dict(self) -> Dict[str, Any]:
        data = {"kind": self.kind, "map": self.map.to_dict()}
        if self.color is not None:
            data["color"] = self.color
        for name in self.properties():
            data[name] = getattr(self, name)
        if self.source:
            data["source"] = self.source
        if self.columns:
            data["columns"] = list(self.columns)
        return data


# ============================================================================
# Plot and Panel
# ============================================================================

@dataclass
class PlotConfig:
    """A plot: two scales and an ordered list of mappings.

    A stand-alone plot document may carry its own design and layout, which
    then apply to the implicit one-plot panel around it.
    """

    mappings: List[MappingConfig] = field(default_factory=list)
    x: ScaleConfig = field(default_factory=ScaleConfig)
    y: ScaleConfig = field(default_factory=ScaleConfig)
    design: Optional[DesignConfig] = None
    layout: Optional[LayoutConfig] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlotConfig":
        data = _require_dict(data, "plot")
        mappings = data.get("mappings") or []
        if not isinstance(mappings, list):
            raise MappingError("'mappings' should be an array")
        for key in data:
            if key not in ("mappings", "x", "y", "design", "layout"):
                logger.warning(f"Ignoring unknown plot key '{key}'")
        return cls(
            mappings=[MappingConfig.from_dict(m) for m in mappings],
            x=ScaleConfig.from_dict(data.get("x")),
            y=ScaleConfig.from_dict(data.get("y")),
            design=DesignConfig.from_dict(data["design"]) if data.get("design") is not None else None,
            layout=LayoutConfig.from_dict(data["layout"]) if data.get("layout") is not None else None,
        )

    def validate(self) -> None:
        if self.design is not None:
            self.design.validate()
        if self.layout is not None:
            self.layout.validate()
        self.x.validate()
        self.y.validate()
        for mapping in self.mappings:
            mapping.validate()

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "x": self.x.to_dict(),
            "y": self.y.to_dict(),
            "mappings": [m.to_dict() for m in self.mappings],
        }
        if self.design is not None:
            data["design"] = self.design.to_dict()
        if self.layout is not None:
            data["layout"] = self.layout.to_dict()
        return data


@dataclass
class PanelConfig:
    """A panel: one to four plots sharing a design and a layout."""

    plots: List[PlotConfig] = field(default_factory=lambda: [PlotConfig()])
    design: Optional[DesignConfig] = None
    layout: Optional[LayoutConfig] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PanelConfig":
        """Build a panel from a panel document or a single plot document."""
        data = _require_dict(data, "panel")
        if "plots" not in data:
            return cls.from_plot(PlotConfig.from_dict(data))

        plots = data["plots"]
        if not isinstance(plots, list):
            raise PanelError("'plots' should be an array")
        panel = cls(
            plots=[PlotConfig.from_dict(p) for p in plots],
            design=DesignConfig.from_dict(data["design"]) if data.get("design") is not None else None,
            layout=LayoutConfig.from_dict(data["layout"]) if data.get("layout") is not None else None,
        )
        for i, plot in enumerate(panel.plots):
            if plot.design is not None or plot.layout is not None:
                logger.warning(f"Plot {i} carries its own design/layout; panel settings apply instead")
                plot.design = None
                plot.layout = None
        return panel

    @classmethod
    def from_plot(cls, plot: PlotConfig) -> "PanelConfig":
        """Wrap a single plot; its design and layout become the panel's."""
        design, layout = plot.design, plot.layout
        plot.design = None
        plot.layout = None
        return cls(plots=[plot], design=design, layout=layout)

    @classmethod
    def from_json(cls, text: str) -> "PanelConfig":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise InvalidParameterError(f"Invalid chart document: {e}") from e
        return cls.from_dict(data)

    def resolve_split(self) -> str:
        """Return the split topology for this panel.

        Raises:
            PanelError: If the declared split does not match the number of
                plots, or no split exists for that many plots.
        """
        n_plots = len(self.plots)
        declared = self.layout.split if self.layout is not None else None
        if declared is not None:
            expected = SPLIT_PLOT_COUNT.get(declared)
            if expected is None:
                raise LayoutError(f"Invalid value for 'split': {declared!r}")
            if expected != n_plots:
                raise PanelError(
                    f"Split '{declared}' requires {expected} plot(s), but {n_plots} informed"
                )
            return declared
        if n_plots not in SPLIT_BY_COUNT:
            raise PanelError(f"Invalid number of plots informed: {n_plots} (expected 1 - 4)")
        return SPLIT_BY_COUNT[n_plots]

    def validate(self) -> None:
        if self.design is not None:
            self.design.validate()
        if self.layout is not None:
            self.layout.validate()
        self.resolve_split()
        for plot in self.plots:
            plot.validate()

    def to_dict(self) -> Dict[str, Any]:
        data = {"plots": [p.to_dict() for p in self.plots]}
        if self.design is not None:
            data["design"] = self.design.to_dict()
        if self.layout is not None:
            data["layout"] = self.layout.to_dict()
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict())
