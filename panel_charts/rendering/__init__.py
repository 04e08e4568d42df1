"""
Rendering subsystem for PanelCharts.

This package turns validated chart records into drawings. It is organised
bottom-up:

- ``Scale`` and ``ContextMapper`` hold axis domains and the data to pixel
  transform
- the mapping kinds (line, scatter, bar, area, interval, text, surface) hold
  data series and are drawn by the functions in ``layers``
- ``Plot`` combines two scales and its mappings
- ``Panel`` places one to four plots on a canvas and encodes the result

Drawing goes through ``DrawingSurface``, a path-based surface over a
matplotlib Figure; text is measured with matplotlib's font machinery.

Example:
    >>> from panel_charts.rendering import Panel
    >>>
    >>> doc = '''{"x": {"from": 0, "to": 10}, "y": {"from": 0, "to": 1},
    ...          "mappings": [{"kind": "scatter", "map": {"x": [1, 5, 9], "y": [0.2, 0.8, 0.4]}}]}'''
    >>> panel = Panel.from_json(doc)
    >>> svg = panel.svg()
"""

from .context_mapper import ContextMapper, round_to_most_extreme
from .scale import Scale, adjust_segment, define_steps
from .text import FontData, TextMeasurer, draw_label
from .design import PlotDesign
from .surface import DrawingSurface
from .mappings import (
    AreaMapping,
    BarMapping,
    IntervalMapping,
    LineMapping,
    Mapping,
    ScatterMapping,
    SurfaceMapping,
    TextMapping,
    new_mapping,
)
from .layers import build_dash, draw_mapping
from .plot import Plot
from .panel import Panel

__all__ = [
    "ContextMapper",
    "round_to_most_extreme",
    "Scale",
    "adjust_segment",
    "define_steps",
    "FontData",
    "TextMeasurer",
    "draw_label",
    "PlotDesign",
    "DrawingSurface",
    "Mapping",
    "LineMapping",
    "ScatterMapping",
    "BarMapping",
    "AreaMapping",
    "IntervalMapping",
    "TextMapping",
    "SurfaceMapping",
    "new_mapping",
    "build_dash",
    "draw_mapping",
    "Plot",
    "Panel",
]
