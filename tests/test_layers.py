from __future__ import annotations

import unittest
from unittest.mock import MagicMock

import numpy as np

from panel_charts.exceptions import RenderError
from panel_charts.rendering.context_mapper import ContextMapper
from panel_charts.rendering.layers import (
    build_dash,
    create_uniform_coords,
    draw_area,
    draw_bar,
    draw_interval,
    draw_line,
    draw_mapping,
    draw_scatter,
    draw_surface,
    interpolate_idw,
)
from panel_charts.rendering.mappings import (
    AreaMapping,
    BarMapping,
    IntervalMapping,
    LineMapping,
    ScatterMapping,
    SurfaceMapping,
)
from panel_charts.rendering.surface import DrawingSurface


def _mapper() -> ContextMapper:
    return ContextMapper(0.0, 10.0, 0.0, 5.0, width=800, height=600)


def _log_mapper() -> ContextMapper:
    return ContextMapper(1.0, 100.0, 1.0, 100.0, xlog=True, ylog=True, width=800, height=600)


class DashTests(unittest.TestCase):
    def test_solid_and_dashed(self) -> None:
        self.assertEqual(build_dash(1), [])
        self.assertEqual(build_dash(2), [5.0])
        self.assertEqual(len(build_dash(4)), 3)


class DrawFunctionTests(unittest.TestCase):
    def test_area_path_runs_forward_then_back(self) -> None:
        area = AreaMapping()
        area.update_data({"x": [1, 2, 3], "y": [1, 1, 1], "z": [2, 3, 2]})
        surface = MagicMock()
        draw_area(area, _mapper(), surface)
        self.assertEqual(surface.move_to.call_count, 1)
        self.assertEqual(surface.line_to.call_count, 5)
        surface.set_fill_rule.assert_called_once_with("winding")
        surface.close_path.assert_called_once()
        surface.fill.assert_called_once()

    def test_area_boundary_has_two_points_per_sample(self) -> None:
        area = AreaMapping()
        area.update_data({"x": [0, 1, 2], "y": [0, 0, 0], "z": [1, 1, 1]})
        surface = MagicMock()
        draw_area(area, _mapper(), surface)
        visited = surface.move_to.call_count + surface.line_to.call_count
        self.assertEqual(visited, 2 * 3)

    def test_line_needs_two_points(self) -> None:
        line = LineMapping()
        line.update_data({"x": [1], "y": [1]})
        surface = MagicMock()
        draw_line(line, _mapper(), surface)
        surface.stroke.assert_not_called()

    def test_line_skips_points_out_of_bounds(self) -> None:
        line = LineMapping()
        line.update_data({"x": [1, 2, 20, 3], "y": [1, 2, 2, 3]})
        surface = MagicMock()
        draw_line(line, _mapper(), surface)
        self.assertEqual(surface.move_to.call_count, 1)
        self.assertEqual(surface.line_to.call_count, 2)
        surface.stroke.assert_called_once()
        surface.set_dash.assert_called_once_with([])

    def test_scatter_draws_points_in_bounds(self) -> None:
        scatter = ScatterMapping(radius=3.0)
        scatter.update_data({"x": [1, 2, 11], "y": [1, 2, 2]})
        surface = MagicMock()
        draw_scatter(scatter, _mapper(), surface)
        self.assertEqual(surface.arc.call_count, 2)
        self.assertEqual(surface.arc.call_args[0][2], 3.0)

    def test_bar_outside_domain_is_skipped(self) -> None:
        bars = BarMapping(spacing=1.0)
        bars.update_data({"x": [3.0, 10.0]})
        surface = MagicMock()
        draw_bar(bars, _mapper(), surface)
        surface.fill.assert_called_once()
        self.assertEqual(surface.line_to.call_count, 3)

    def test_interval_strokes_caps_and_spine(self) -> None:
        interval = IntervalMapping()
        interval.update_data({"x": [5.0], "y": [1.0], "z": [4.0]})
        surface = MagicMock()
        draw_interval(interval, _mapper(), surface)
        self.assertEqual(surface.stroke.call_count, 3)

    def test_area_lower_bound_at_zero_on_log_axis(self) -> None:
        area = AreaMapping()
        area.update_data({"x": [1, 10, 50], "y": [0, 0, 0], "z": [10, 50, 20]})
        surface = MagicMock()
        draw_area(area, _log_mapper(), surface)
        self.assertEqual(surface.move_to.call_count, 1)
        self.assertEqual(surface.line_to.call_count, 2)
        surface.fill.assert_called_once()

    def test_area_out_of_bounds_draws_nothing(self) -> None:
        area = AreaMapping()
        area.update_data({"x": [20, 30], "y": [0, 0], "z": [1, 1]})
        surface = MagicMock()
        draw_area(area, _mapper(), surface)
        surface.fill.assert_not_called()
        surface.move_to.assert_not_called()

    def test_interval_cap_cut_at_log_domain_edge(self) -> None:
        interval = IntervalMapping(limits=2.0)
        interval.update_data({"x": [1.0], "y": [2.0], "z": [50.0]})
        surface = MagicMock()
        mapper = _log_mapper()
        draw_interval(interval, mapper, surface)
        self.assertEqual(surface.stroke.call_count, 3)
        surface.move_to.assert_any_call(*mapper.map(1.0, 2.0))
        surface.line_to.assert_any_call(*mapper.map(2.0, 2.0))

    def test_horizontal_interval_cap_cut_at_domain_edge(self) -> None:
        interval = IntervalMapping(limits=4.0, vertical=False)
        interval.update_data({"x": [4.0], "y": [1.0], "z": [9.0]})
        surface = MagicMock()
        mapper = _mapper()
        draw_interval(interval, mapper, surface)
        self.assertEqual(surface.stroke.call_count, 3)
        surface.move_to.assert_any_call(*mapper.map(1.0, 2.0))
        surface.line_to.assert_any_call(*mapper.map(1.0, 5.0))

    def test_surface_paints_one_mesh(self) -> None:
        mapping = SurfaceMapping(density=3)
        mapping.update_data({"x": [1, 9, 5], "y": [1, 4, 2], "z": [0.0, 1.0, 0.5]})
        surface = MagicMock()
        draw_surface(mapping, _mapper(), surface)
        surface.gradient_mesh.assert_called_once()
        patches, ratios, _start, _end = surface.gradient_mesh.call_args[0]
        self.assertEqual(len(patches), 9)
        self.assertEqual(len(ratios), 9)
        self.assertTrue(all(0.0 <= r <= 1.0 for patch in ratios for r in patch))

    def test_surface_without_data_in_bounds(self) -> None:
        mapping = SurfaceMapping()
        mapping.update_data({"x": [20], "y": [20], "z": [1.0]})
        surface = MagicMock()
        draw_surface(mapping, _mapper(), surface)
        surface.gradient_mesh.assert_not_called()

    def test_draw_mapping_dispatches_on_kind(self) -> None:
        line = LineMapping()
        line.update_data({"x": [1, 2], "y": [1, 2]})
        surface = MagicMock()
        draw_mapping(line, _mapper(), surface)
        surface.stroke.assert_called_once()


class SurfaceMeshTests(unittest.TestCase):
    def test_uniform_coords(self) -> None:
        patches = create_uniform_coords(ContextMapper(width=800, height=600), 2)
        self.assertEqual(len(patches), 4)
        self.assertEqual(patches[0], ((80.0, 300.0), (80.0, 60.0), (400.0, 60.0), (400.0, 300.0)))

    def test_idw_hits_known_points(self) -> None:
        points = np.array([[0.0, 0.0], [1.0, 0.0]])
        values = np.array([1.0, 3.0])
        targets = np.array([[0.0, 0.0], [0.5, 0.0], [1.0, 0.0]])
        np.testing.assert_allclose(interpolate_idw(points, values, targets), [1.0, 2.0, 3.0])


class DrawingSurfaceTests(unittest.TestCase):
    def test_state_stack(self) -> None:
        surface = DrawingSurface(100, 100)
        surface.save()
        surface.translate(10, 5)
        surface.set_line_width(3)
        surface.restore()
        self.assertEqual(surface._translation, (0.0, 0.0))
        self.assertEqual(surface._line_width, 1.0)
        with self.assertRaises(RenderError):
            surface.restore()
        surface.close()

    def test_odd_dash_is_doubled(self) -> None:
        surface = DrawingSurface(100, 100)
        surface.set_dash([2.0])
        self.assertEqual(surface._dash, (2.0, 2.0))
        surface.close()

    def test_only_winding_fill_rule(self) -> None:
        surface = DrawingSurface(100, 100)
        with self.assertRaises(RenderError):
            surface.set_fill_rule("even-odd")
        surface.close()

    def test_painting_adds_artists(self) -> None:
        surface = DrawingSurface(100, 100)
        surface.rectangle(10, 10, 20, 20)
        surface.fill()
        surface.move_to(0, 0)
        surface.line_to(50, 50)
        surface.stroke()
        self.assertEqual(len(surface.ax.patches), 2)
        self.assertTrue(surface.to_bytes("png").startswith(b"\x89PNG"))
        surface.close()


if __name__ == "__main__":
    unittest.main()
