"""
Panel Layout Example

Builds a three-plot panel ("threeleft": one tall plot on the left, two stacked
plots on the right), then updates one series in place and renders again, the
way a dashboard refreshes a chart as new data arrives.

Output:
    - output/panel_before.png
    - output/panel_after.png
    - output/panel.html (the final chart embedded as an <img> tag)
"""

import random
from pathlib import Path

from panel_charts import Panel, PanelConfig, RenderConfig


def _bars(values):
    return {"kind": "bar", "map": {"x": values}, "spacing": 1.0, "width": 70.0, "center": True, "origin": 1.0}


def build_config() -> PanelConfig:
    rng = random.Random(7)
    xs = [rng.uniform(0, 10) for _ in range(40)]
    ys = [rng.uniform(0, 10) for _ in range(40)]
    zs = [x * y / 100.0 for x, y in zip(xs, ys)]

    return PanelConfig.from_dict({
        "plots": [
            {
                "x": {"from": 0, "to": 10, "label": "x"},
                "y": {"from": 0, "to": 10, "label": "y"},
                "mappings": [
                    {"kind": "surface", "map": {"x": xs, "y": ys, "z": zs},
                     "color": "#fce94f", "color_final": "#a40000", "density": 12},
                    {"kind": "scatter", "map": {"x": xs, "y": ys}, "radius": 2.0, "color": "#2e3436"},
                ],
            },
            {
                "x": {"from": 0, "to": 8, "label": "bucket", "precision": 0, "intervals": 8},
                "y": {"from": 0, "to": 10, "label": "count", "precision": 0, "adjust": "round"},
                "mappings": [_bars([3, 5, 8, 6, 2, 1, 4])],
            },
            {
                "x": {"from": 1, "to": 1000, "label": "size", "log": True, "intervals": 3, "precision": 0},
                "y": {"from": 0, "to": 1, "label": "share", "invert": True},
                "mappings": [
                    {"kind": "line", "map": {"x": [1, 10, 100, 1000], "y": [0.9, 0.6, 0.3, 0.1]},
                     "spacing": 4, "color": "#4e9a06"},
                ],
            },
        ],
        "layout": {"width": 900, "height": 600, "split": "threeleft", "hratio": 0.55, "vratio": 0.5},
        "design": {"font": "Sans 9"},
    })


def main():
    output_dir = Path("output")
    output_dir.mkdir(exist_ok=True)

    panel = Panel.from_config(build_config(), RenderConfig(canvas_color="#ffffff"))
    for i, ((x, y), (w, h)) in enumerate(panel.sub_regions()):
        print(f"Plot {i}: origin=({x:.0f}, {y:.0f}) size={w}x{h}")
    panel.draw_to_file(output_dir / "panel_before.png")

    # New counts arrive for the histogram; its "round" y scale refits itself
    panel.update_mapping(1, 0, {"x": [12, 18, 25, 14, 9, 3, 7]})
    print(f"Histogram limits after update: {panel.data_limits(1)}")
    panel.draw_to_file(output_dir / "panel_after.png")

    (output_dir / "panel.html").write_text(f"<html><body>{panel.html_img_tag()}</body></html>\n")
    print("Saved output/panel_before.png, output/panel_after.png and output/panel.html")


if __name__ == "__main__":
    main()
