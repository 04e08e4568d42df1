"""
Basic Chart Example

This example demonstrates how to render a single chart with the PanelCharts
package. It shows the simplest workflow: write a chart document (a plain
dictionary here), then render it to a file whose extension picks the format.

Output: output/basic_chart.png and output/basic_chart.svg showing a measured
series, its error bars and a shaded tolerance band.
"""

import logging
import math
from pathlib import Path

from panel_charts import PanelChartsError, RenderConfig, create_chart


def build_document() -> dict:
    """Chart document for one day of hourly readings."""
    hours = list(range(0, 25))
    readings = [20.0 + 6.0 * math.sin((h - 8) / 24.0 * 2.0 * math.pi) for h in hours]
    sampled = hours[::4]

    return {
        "x": {"from": 0, "to": 24, "label": "hour", "precision": 0, "intervals": 6},
        "y": {"from": 0, "to": 40, "label": "temperature", "precision": 1, "adjust": "round"},
        "mappings": [
            {
                "kind": "area",
                "map": {"x": hours, "y": [r - 2.0 for r in readings], "z": [r + 2.0 for r in readings]},
                "color": "#729fcf55",
            },
            {"kind": "line", "map": {"x": hours, "y": readings}, "color": "#204a87", "width": 2.0},
            {
                "kind": "interval",
                "map": {
                    "x": sampled,
                    "y": [readings[h] - 1.5 for h in sampled],
                    "z": [readings[h] + 1.5 for h in sampled],
                },
                "color": "#cc0000",
                "limits": 0.8,
            },
            {"kind": "scatter", "map": {"x": sampled, "y": [readings[h] for h in sampled]}, "radius": 3.0},
            {"kind": "text", "map": {"x": [14], "y": [27.5], "text": ["max"]}, "font": "Sans Bold 10"},
        ],
        "design": {"bgcolor": "#fafafa", "fgcolor": "#d3d7cf", "width": 1, "font": "Sans 10"},
        "layout": {"width": 800, "height": 500},
    }


def main():
    logging.basicConfig(level=logging.INFO)
    output_dir = Path("output")
    output_dir.mkdir(exist_ok=True)

    config = RenderConfig(canvas_color="#ffffff", dpi=144)
    document = build_document()

    try:
        for name in ("basic_chart.png", "basic_chart.svg"):
            path = create_chart(document, output_path=output_dir / name, config=config)
            print(f"Saved {path}")
    except PanelChartsError as e:
        print(f"Failed to render chart: {e}")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
