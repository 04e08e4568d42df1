"""
Main API module for PanelCharts package.

This module provides simplified user-facing functions that load a chart
document, build the panel and render it in a single call. A chart document may
be given as JSON text, as an already parsed dictionary, or as a path to a
.json file.

Example:
    >>> from panel_charts import create_chart
    >>>
    >>> doc = {
    ...     "x": {"from": 0, "to": 10, "label": "time"},
    ...     "y": {"from": 0, "to": 100, "label": "value"},
    ...     "mappings": [{"kind": "line", "map": {"x": [0, 5, 10], "y": [10, 80, 40]}}],
    ... }
    >>>
    >>> # Save to file (format follows the extension)
    >>> create_chart(doc, output_path="chart.svg")

    >>> # Interactive use (returns figure and axes)
    >>> fig, ax = create_chart(doc)
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from matplotlib.axes import Axes
from matplotlib.figure import Figure

from .config import RenderConfig
from .exceptions import InvalidParameterError, PanelChartsError, RenderError, RenderIOError
from .model import PanelConfig
from .rendering import Panel

logger = logging.getLogger(__name__)

ChartSource = Union[str, Path, Dict[str, Any], PanelConfig]


def _read_document(source: ChartSource) -> PanelConfig:
    if isinstance(source, PanelConfig):
        return source
    if isinstance(source, dict):
        return PanelConfig.from_dict(source)
    if isinstance(source, str) and source.lstrip().startswith("{"):
        return PanelConfig.from_json(source)

    path = Path(source)
    if not path.exists():
        raise InvalidParameterError(f"Chart document not found: {path}")
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise InvalidParameterError(f"Failed to read chart document {path}: {e}") from e
    logger.debug(f"Read chart document {path}")
    return PanelConfig.from_json(text)


def load_chart(source: ChartSource, config: Optional[RenderConfig] = None) -> Panel:
    """
    Build a validated panel from a chart document.

    Args:
        source: JSON text, parsed dictionary, PanelConfig or path to a .json file
        config: Optional RenderConfig; if None, uses default configuration

    Returns:
        Panel ready to render

    Raises:
        InvalidParameterError: (or a subclass) if the document is unreadable or invalid
    """
    if config is None:
        config = RenderConfig()
        logger.debug("Using default configuration")
    config.validate()
    return Panel.from_config(_read_document(source), config)


def render_chart(
    source: Union[ChartSource, Panel],
    fmt: str = "png",
    config: Optional[RenderConfig] = None,
) -> bytes:
    """
    Render a chart document to encoded bytes.

    Args:
        source: Chart document (see load_chart) or an existing Panel
        fmt: Output format: png, svg, eps, ps or pdf
        config: Optional RenderConfig

    Returns:
        Encoded image

    Raises:
        InvalidParameterError: If the document is invalid
        RenderError: If drawing or encoding fails
    """
    panel = source if isinstance(source, Panel) else load_chart(source, config)
    logger.info(f"Rendering chart as {fmt}")
    try:
        return panel.render(fmt)
    except PanelChartsError:
        raise
    except (ValueError, RuntimeError) as e:
        raise RenderError(f"Failed to render chart: {e}") from e


def create_chart(
    source: Union[ChartSource, Panel],
    output_path: Optional[Union[str, Path]] = None,
    config: Optional[RenderConfig] = None,
) -> Union[str, Tuple[Figure, Axes]]:
    """
    Create a chart from a document.

    Args:
        source: Chart document (see load_chart) or an existing Panel
        output_path: Output file path; if None, returns (fig, ax) for interactive use
        config: Optional RenderConfig

    Returns:
        If output_path provided: path to saved chart file
        If output_path is None: tuple of (figure, axes) for interactive use

    Raises:
        InvalidParameterError: If the document is invalid
        RenderError: If chart rendering or saving fails
    """
    panel = source if isinstance(source, Panel) else load_chart(source, config)

    if output_path is None:
        logger.info("Returning figure and axes for interactive use")
        try:
            return panel.figure()
        except (ValueError, RuntimeError) as e:
            raise RenderError(f"Failed to render chart: {e}") from e

    output_path = Path(output_path)
    logger.info(f"Saving chart to {output_path}")
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise RenderIOError(f"Failed to create output directory {output_path.parent}: {e}") from e

    try:
        saved_path = panel.draw_to_file(output_path)
    except PanelChartsError:
        raise
    except (ValueError, RuntimeError) as e:
        raise RenderError(f"Failed to save chart to {output_path}: {e}") from e
    return str(saved_path)


def html_img_tag(source: Union[ChartSource, Panel], config: Optional[RenderConfig] = None) -> str:
    """
    Render a chart document as PNG wrapped in an HTML ``<img>`` tag.

    Example:
        >>> tag = html_img_tag('{"mappings": []}')
        >>> tag.startswith("<img src='data:image/png;base64,")
        True
    """
    panel = source if isinstance(source, Panel) else load_chart(source, config)
    try:
        return panel.html_img_tag()
    except PanelChartsError:
        raise
    except (ValueError, RuntimeError) as e:
        raise RenderError(f"Failed to render chart: {e}") from e


def document_to_json(source: ChartSource) -> str:
    """Normalise a chart document: parse it, validate it and dump it back to JSON."""
    config = _read_document(source)
    config.validate()
    return json.dumps(config.to_dict(), indent=2)
