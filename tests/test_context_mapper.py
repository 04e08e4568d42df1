from __future__ import annotations

import unittest

from panel_charts.rendering.context_mapper import (
    ContextMapper,
    log_units,
    round_to,
    round_to_closest,
    round_to_most_extreme,
)


class ContextMapperTests(unittest.TestCase):
    def test_domain_corners_map_inside_margins(self) -> None:
        mapper = ContextMapper(0.0, 10.0, 0.0, 1.0, width=800, height=600)
        self.assertEqual(mapper.map(0.0, 0.0), (80.0, 540.0))
        self.assertEqual(mapper.map(10.0, 1.0), (720.0, 60.0))

    def test_unmap_inverts_map(self) -> None:
        mapper = ContextMapper(-5.0, 5.0, 1.0, 1000.0, ylog=True, xinv=True, width=400, height=300)
        for point in [(-5.0, 1.0), (0.0, 10.0), (2.5, 500.0)]:
            x, y = mapper.unmap(*mapper.map(*point))
            self.assertAlmostEqual(x, point[0])
            self.assertAlmostEqual(y, point[1])

    def test_inversion_flips_direction(self) -> None:
        mapper = ContextMapper(0.0, 10.0, 0.0, 10.0, width=800, height=600)
        self.assertLess(mapper.map(2.0, 0.0)[0], mapper.map(8.0, 0.0)[0])
        # larger y is higher on the canvas, i.e. a smaller pixel row
        self.assertGreater(mapper.map(0.0, 2.0)[1], mapper.map(0.0, 8.0)[1])

        mapper.set_mode(xinv=True, xlog=False, yinv=True, ylog=False)
        self.assertGreater(mapper.map(2.0, 0.0)[0], mapper.map(8.0, 0.0)[0])
        self.assertLess(mapper.map(0.0, 2.0)[1], mapper.map(0.0, 8.0)[1])

    def test_log_axis_places_decades_evenly(self) -> None:
        mapper = ContextMapper(1.0, 100.0, 0.0, 1.0, xlog=True, width=800, height=600)
        self.assertAlmostEqual(mapper.map(10.0, 0.0)[0], 400.0)

    def test_check_bounds_ignores_inversion(self) -> None:
        mapper = ContextMapper(0.0, 10.0, 0.0, 1.0)
        inside = [mapper.check_bounds(x, y) for x, y in [(0.0, 0.0), (10.0, 1.0), (11.0, 0.5), (5.0, -0.1)]]
        mapper.set_mode(xinv=True, xlog=False, yinv=True, ylog=False)
        inverted = [mapper.check_bounds(x, y) for x, y in [(0.0, 0.0), (10.0, 1.0), (11.0, 0.5), (5.0, -0.1)]]
        self.assertEqual(inside, [True, True, False, False])
        self.assertEqual(inside, inverted)

    def test_extensions_follow_domain_updates(self) -> None:
        mapper = ContextMapper(0.0, 1.0, 0.0, 1.0, width=800, height=600)
        mapper.update_data_extensions(2.0, 6.0, -1.0, 1.0)
        self.assertEqual((mapper.xext, mapper.yext), (4.0, 2.0))
        self.assertEqual(mapper.data_extensions(), (2.0, 6.0, -1.0, 1.0))
        self.assertEqual(mapper.coord_extensions(), (640.0, 480.0))


class SignificantRoundingTests(unittest.TestCase):
    def test_log_units_is_mantissa(self) -> None:
        self.assertAlmostEqual(log_units(612.0), 6.12)
        self.assertAlmostEqual(log_units(-0.05), 5.0)

    def test_round_to_direction(self) -> None:
        self.assertAlmostEqual(round_to(6.12, 1, up=True), 6.2)
        self.assertAlmostEqual(round_to(6.12, 1, up=False), 6.1)

    def test_round_to_closest(self) -> None:
        self.assertEqual(round_to_closest(612.0, up=False), 610.0)
        self.assertEqual(round_to_closest(612.0, up=True), 620.0)
        self.assertEqual(round_to_closest(-612.0, up=True), -620.0)

    def test_round_to_most_extreme_positive_range(self) -> None:
        self.assertEqual(round_to_most_extreme(612.0, 625.0), (610.0, 630.0))

    def test_round_to_most_extreme_negative_range(self) -> None:
        self.assertEqual(round_to_most_extreme(-625.0, -612.0), (-630.0, -610.0))

    def test_round_to_most_extreme_range_across_zero(self) -> None:
        self.assertEqual(round_to_most_extreme(-612.0, 625.0), (-620.0, 630.0))


if __name__ == "__main__":
    unittest.main()
