"""
PanelCharts - Lightweight Python package for rendering declarative charts.

This package turns JSON chart documents into static images. A document
describes one plot, or a panel of up to four plots, each with two scales and
an ordered list of data mappings (lines, scatter points, bars, areas,
intervals, text labels and colour surfaces). Charts are encoded as PNG, SVG,
PostScript or PDF.

Quick Start:
    >>> from panel_charts import create_chart
    >>>
    >>> doc = {
    ...     "x": {"from": 0, "to": 10, "label": "time"},
    ...     "y": {"from": 0, "to": 100, "label": "value"},
    ...     "mappings": [{"kind": "line", "map": {"x": [0, 5, 10], "y": [10, 80, 40]}}],
    ... }
    >>> create_chart(doc, output_path="chart.png")

    >>> # Batch rendering of document files
    >>> from panel_charts import BatchRenderer
    >>>
    >>> batch = BatchRenderer()
    >>> result = batch.render_files(["a.json", "b.json"], output_dir="out", fmt="svg")

Advanced Usage:
    >>> # Direct access to components
    >>> from panel_charts import Panel, PanelConfig, RenderConfig
    >>>
    >>> config = RenderConfig(dpi=144, canvas_color="#ffffff")
    >>> panel = Panel.from_config(PanelConfig.from_json(text), config)
    >>> panel.update_mapping(0, 0, {"x": [1, 2, 3], "y": [4, 5, 6]})
    >>> png = panel.png()
"""

__version__ = "0.1.0"

# Initialize logging with default settings
from .logging_config import setup_logging
setup_logging()

# Configuration
from .config import RenderConfig, get_default_config

# Chart document records
from .model import (
    DesignConfig,
    LayoutConfig,
    MapData,
    MappingConfig,
    PanelConfig,
    PlotConfig,
    ScaleConfig,
)

# Rendering components
from .rendering import ContextMapper, Panel, Plot, Scale, new_mapping

# User-facing API
from .api import create_chart, document_to_json, html_img_tag, load_chart, render_chart

# Batch processing
from .batch import BatchRenderer

# Exceptions
from .exceptions import (
    PanelChartsError,
    InvalidParameterError,
    DesignError,
    LayoutError,
    ScaleError,
    MappingError,
    PanelError,
    RenderError,
    RenderIOError,
)

__all__ = [
    # Version info
    "__version__",

    # Configuration
    "RenderConfig",
    "get_default_config",

    # Document records
    "DesignConfig",
    "LayoutConfig",
    "MapData",
    "MappingConfig",
    "PanelConfig",
    "PlotConfig",
    "ScaleConfig",

    # Core components
    "ContextMapper",
    "Scale",
    "Plot",
    "Panel",
    "new_mapping",

    # User-facing API
    "create_chart",
    "render_chart",
    "load_chart",
    "html_img_tag",
    "document_to_json",

    # Batch
    "BatchRenderer",

    # Exceptions
    "PanelChartsError",
    "InvalidParameterError",
    "DesignError",
    "LayoutError",
    "ScaleError",
    "MappingError",
    "PanelError",
    "RenderError",
    "RenderIOError",
]
