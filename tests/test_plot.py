from __future__ import annotations

import unittest

from panel_charts.exceptions import MappingError, ScaleError
from panel_charts.model import MappingConfig, PlotConfig
from panel_charts.rendering.design import PlotDesign
from panel_charts.rendering.mappings import LineMapping, ScatterMapping
from panel_charts.rendering.plot import Plot
from panel_charts.rendering.scale import Scale
from panel_charts.rendering.surface import DrawingSurface


def _plot(**x_scale) -> Plot:
    x = {"from": 0, "to": 10, "adjust": "tight"}
    x.update(x_scale)
    return Plot.from_config(PlotConfig.from_dict({
        "x": x,
        "y": {"from": 0, "to": 1},
        "mappings": [{"kind": "line", "map": {"x": [2, 4, 6], "y": [0.1, 0.5, 0.2]}}],
    }))


class ScaleFittingTests(unittest.TestCase):
    def test_tight_scale_follows_data(self) -> None:
        plot = _plot()
        self.assertEqual((plot.x.start, plot.x.end), (2.0, 6.0))
        self.assertEqual((plot.y.start, plot.y.end), (0.0, 1.0))
        self.assertEqual(plot.mapper.data_extensions(), (2.0, 6.0, 0.0, 1.0))

    def test_off_scale_keeps_document_domain(self) -> None:
        plot = _plot(adjust="off")
        self.assertEqual((plot.x.start, plot.x.end), (0.0, 10.0))

    def test_single_point_gets_positive_span(self) -> None:
        plot = Plot(Scale(), Scale())
        line = LineMapping()
        line.update_data({"x": [5.0], "y": [5.0]})
        plot.add_mapping(line)
        self.assertGreater(plot.x.end, plot.x.start)
        self.assertGreater(plot.mapper.xext, 0.0)
        self.assertGreater(plot.mapper.yext, 0.0)

    def test_max_data_limits_merges_mappings(self) -> None:
        plot = _plot()
        scatter = ScatterMapping()
        scatter.update_data({"x": [-1.0, 3.0], "y": [0.3, 2.0]})
        plot.add_mapping(scatter)
        self.assertEqual(plot.max_data_limits(), ((-1.0, 6.0), (0.1, 2.0)))
        self.assertEqual(plot.x.start, -1.0)

    def test_log_scale_keeps_domain_when_data_reaches_zero(self) -> None:
        plot = _plot(**{"from": 1, "to": 1000, "log": True})
        plot.update_mapping(0, {"x": [0, 10, 100], "y": [0.1, 0.5, 0.2]})
        self.assertEqual((plot.x.start, plot.x.end), (2.0, 6.0))
        plot.update_mapping(0, {"x": [10, 100], "y": [0.1, 0.5]})
        self.assertEqual((plot.x.start, plot.x.end), (10.0, 100.0))
        self.assertEqual(plot.x.steps[0], 10.0)
        self.assertEqual(plot.x.steps[-1], 100.0)

    def test_clear_all_data(self) -> None:
        plot = _plot()
        plot.clear_all_data()
        self.assertIsNone(plot.max_data_limits())
        self.assertEqual((plot.x.start, plot.x.end), (2.0, 6.0))


class MappingManagementTests(unittest.TestCase):
    def test_add_and_remove(self) -> None:
        plot = _plot()
        config = MappingConfig.from_dict({"kind": "scatter", "map": {"x": [8], "y": [0.5]}})
        plot.add_mapping(config, index=0)
        self.assertEqual([m.kind for m in plot.mappings], ["scatter", "line"])
        self.assertEqual(plot.x.end, 8.0)
        removed = plot.remove_mapping(0)
        self.assertEqual(removed.kind, "scatter")
        self.assertEqual(plot.x.end, 6.0)

    def test_invalid_positions(self) -> None:
        plot = _plot()
        with self.assertRaises(MappingError):
            plot.add_mapping(LineMapping(), index=5)
        with self.assertRaises(MappingError):
            plot.remove_mapping(3)
        with self.assertRaises(MappingError):
            plot.update_mapping(1, {"x": [1], "y": [1]})

    def test_update_mapping_refits(self) -> None:
        plot = _plot()
        plot.update_mapping(0, {"x": [1, 9], "y": [0.2, 0.4]})
        self.assertEqual((plot.x.start, plot.x.end), (1.0, 9.0))

    def test_update_scale(self) -> None:
        plot = _plot(adjust="off")
        plot.update_scale("x", label="time", n_intervals=2)
        self.assertEqual(plot.x.label, "time")
        self.assertEqual(len(plot.x.steps), 3)
        with self.assertRaises(ScaleError):
            plot.update_scale("z", label="depth")
        with self.assertRaises(ScaleError):
            plot.update_scale("x", log=True)
        with self.assertRaises(ScaleError):
            plot.update_scale("x", offset=100, n_intervals=1)
        self.assertEqual(len(plot.x.steps), 3)

    def test_mapping_info(self) -> None:
        info = _plot().mapping_info()
        self.assertEqual(len(info), 1)
        position, kind, props = info[0]
        self.assertEqual((position, kind), ("0", "line"))
        self.assertEqual(props["length"], "3")
        self.assertEqual(_plot().scale_info("x")["adjustment"], "tight")


class PlotDrawingTests(unittest.TestCase):
    def test_draw_adds_background_grid_and_data(self) -> None:
        plot = _plot()
        plot.update_scale("x", label="time")
        surface = DrawingSurface(400, 300)
        plot.draw(surface, PlotDesign.from_config(None), 400, 300)
        # background, grid lines for both axes and the data line
        self.assertGreaterEqual(len(surface.ax.patches), 1 + 6 + 6 + 1)
        self.assertTrue(any(t.get_text() == "time" for t in surface.ax.texts))
        surface.close()

    def test_guide_off_skips_grid(self) -> None:
        plot = _plot()
        plot.update_scale("x", guide=False)
        plot.update_scale("y", guide=False)
        surface = DrawingSurface(400, 300)
        plot.draw(surface, PlotDesign.from_config(None), 400, 300)
        self.assertEqual(len(surface.ax.patches), 2)
        surface.close()


if __name__ == "__main__":
    unittest.main()
