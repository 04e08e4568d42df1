from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path

from matplotlib.figure import Figure

from panel_charts import (
    InvalidParameterError,
    MappingError,
    PanelConfig,
    RenderConfig,
    RenderIOError,
    create_chart,
    document_to_json,
    html_img_tag,
    load_chart,
    render_chart,
)

DOC = {
    "x": {"from": 0, "to": 10, "label": "time"},
    "y": {"from": 0, "to": 100, "label": "value"},
    "mappings": [{"kind": "line", "map": {"x": [0, 5, 10], "y": [10, 80, 40]}}],
}


class LoadChartTests(unittest.TestCase):
    def test_sources(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "chart.json"
            path.write_text(json.dumps(DOC))
            for source in (DOC, json.dumps(DOC), path, str(path), PanelConfig.from_dict(DOC)):
                panel = load_chart(source)
                self.assertEqual(panel.n_plots, 1)

    def test_missing_file(self) -> None:
        with self.assertRaises(InvalidParameterError):
            load_chart("does/not/exist.json")

    def test_invalid_document(self) -> None:
        bad = dict(DOC, mappings=[{"kind": "line", "map": {"x": [0, 1], "y": [1]}}])
        with self.assertRaises(MappingError):
            load_chart(bad)

    def test_render_config_is_applied(self) -> None:
        panel = load_chart({"mappings": []}, RenderConfig(default_width=200, default_height=100))
        self.assertEqual(panel.dimensions(), (200, 100))


class RenderTests(unittest.TestCase):
    def test_render_chart_formats(self) -> None:
        self.assertTrue(render_chart(DOC).startswith(b"\x89PNG"))
        self.assertIn(b"<svg", render_chart(DOC, fmt="svg"))
        self.assertTrue(render_chart(DOC, fmt="pdf").startswith(b"%PDF"))
        with self.assertRaises(RenderIOError):
            render_chart(DOC, fmt="gif")

    def test_create_chart_to_file_makes_directories(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            output = Path(tmp) / "nested" / "chart.png"
            result = create_chart(DOC, output_path=output)
            self.assertEqual(result, str(output))
            self.assertTrue(output.exists())

    def test_create_chart_interactive(self) -> None:
        fig, ax = create_chart(DOC)
        self.assertIsInstance(fig, Figure)
        self.assertIn(ax, fig.axes)

    def test_html_img_tag(self) -> None:
        self.assertTrue(html_img_tag(DOC).startswith("<img src='data:image/png;base64,"))

    def test_document_to_json(self) -> None:
        data = json.loads(document_to_json(json.dumps(DOC)))
        self.assertEqual(len(data["plots"]), 1)
        self.assertEqual(data["plots"][0]["x"]["label"], "time")


if __name__ == "__main__":
    unittest.main()
