from __future__ import annotations

import unittest

from panel_charts.exceptions import ScaleError
from panel_charts.model import ScaleConfig
from panel_charts.rendering.scale import Scale, adjust_segment, define_steps


class DefineStepsTests(unittest.TestCase):
    def test_linear_steps(self) -> None:
        self.assertEqual(define_steps(4, 0.0, 1.0, 0, False), [0.0, 0.25, 0.5, 0.75, 1.0])

    def test_steps_span_domain_and_increase(self) -> None:
        cases = [(1, -3.0, 7.0), (5, 0.0, 1.0), (7, 2.5, 1000.0), (10, -55.7, -11.3), (3, 0.1, 0.7)]
        for n, start, end in cases:
            steps = define_steps(n, start, end, 0, False)
            self.assertEqual(len(steps), n + 1)
            self.assertEqual(steps[0], start)
            self.assertEqual(steps[-1], end)
            self.assertTrue(all(a < b for a, b in zip(steps, steps[1:])))

    def test_log_steps_end_on_domain_bounds(self) -> None:
        steps = define_steps(3, 2.0, 700.0, 0, True)
        self.assertEqual(steps[0], 2.0)
        self.assertEqual(steps[-1], 700.0)

    def test_offset_pads_by_share_of_one_interval(self) -> None:
        self.assertEqual(define_steps(2, 0.0, 100.0, 10, False), [5.0, 50.0, 95.0])

    def test_large_offset_keeps_steps_increasing(self) -> None:
        for offset in (50, 60, 99, 100):
            steps = define_steps(4, 0.0, 100.0, offset, False)
            self.assertTrue(all(a < b for a, b in zip(steps, steps[1:])), steps)
            log_steps = define_steps(4, 1.0, 1000.0, offset, True)
            self.assertTrue(all(a < b for a, b in zip(log_steps, log_steps[1:])), log_steps)
        self.assertEqual(define_steps(4, 0.0, 100.0, 60, False), [15.0, 32.5, 50.0, 67.5, 85.0])

    def test_offset_that_collapses_ticks_rejected(self) -> None:
        with self.assertRaises(ScaleError):
            define_steps(1, 0.0, 1.0, 50, False)
        with self.assertRaises(ScaleError):
            define_steps(2, 1.0, 10.0, 100, True)
        scale = Scale(start=0.0, end=1.0, n_intervals=1)
        with self.assertRaises(ScaleError):
            scale.update(offset=80)
        self.assertEqual(scale.offset, 0)
        self.assertEqual(scale.steps, [0.0, 1.0])

    def test_log_steps_are_even_in_log_space(self) -> None:
        steps = define_steps(2, 1.0, 100.0, 0, True)
        self.assertEqual(len(steps), 3)
        for step, expected in zip(steps, [1.0, 10.0, 100.0]):
            self.assertAlmostEqual(step, expected)


class ScaleTests(unittest.TestCase):
    def test_steps_track_intervals(self) -> None:
        scale = Scale(start=0.0, end=1.0, n_intervals=4)
        self.assertEqual(len(scale.steps), 5)
        scale.update(n_intervals=2)
        self.assertEqual(scale.steps, [0.0, 0.5, 1.0])

    def test_label_change_keeps_steps(self) -> None:
        scale = Scale(start=0.0, end=1.0)
        steps = scale.steps
        scale.update(label="time")
        self.assertIs(scale.steps, steps)
        self.assertEqual(scale.label, "time")

    def test_labels_use_precision(self) -> None:
        scale = Scale(precision=1, start=0.0, end=1.0, n_intervals=2)
        self.assertEqual(scale.labels(), ["0.0", "0.5", "1.0"])

    def test_invalid_adjustment_rejected(self) -> None:
        with self.assertRaises(ScaleError):
            Scale(adjustment="loose")
        scale = Scale()
        with self.assertRaises(ScaleError):
            scale.update(adjustment="loose")
        with self.assertRaises(ScaleError):
            scale.update(colour="red")

    def test_from_config_rejects_inverted_range(self) -> None:
        with self.assertRaises(ScaleError):
            Scale.from_config(ScaleConfig(start=2.0, end=1.0))

    def test_from_config_copies_fields(self) -> None:
        scale = Scale.from_config(ScaleConfig(label="y", start=1.0, end=100.0, intervals=2, log=True, adjust="round"))
        self.assertEqual(scale.label, "y")
        self.assertTrue(scale.log)
        self.assertEqual(scale.adjustment, "round")
        self.assertEqual(len(scale.steps), 3)

    def test_description(self) -> None:
        info = Scale(label="t", start=0.0, end=2.0, invert=True).description()
        self.assertEqual(info["label"], "t")
        self.assertEqual(info["invert"], "true")
        self.assertEqual(info["log_scaling"], "false")
        self.assertEqual(info["to"], "2.0")


class AdjustSegmentTests(unittest.TestCase):
    def test_tight_is_idempotent(self) -> None:
        scale = Scale(start=0.0, end=10.0)
        adjust_segment(scale, "tight", 2.0, 6.0)
        self.assertEqual((scale.start, scale.end), (2.0, 6.0))
        adjust_segment(scale, "tight", 2.0, 6.0)
        self.assertEqual((scale.start, scale.end), (2.0, 6.0))

    def test_round_changes_large_padding(self) -> None:
        scale = Scale(start=0.0, end=1000.0)
        adjust_segment(scale, "round", 612.0, 625.0)
        self.assertEqual((scale.start, scale.end), (610.0, 630.0))
        adjust_segment(scale, "round", 612.0, 625.0)
        self.assertEqual((scale.start, scale.end), (610.0, 630.0))

    def test_round_keeps_small_padding(self) -> None:
        scale = Scale(start=0.0, end=100.0)
        adjust_segment(scale, "round", 10.0, 90.0)
        self.assertEqual((scale.start, scale.end), (0.0, 100.0))

    def test_round_extends_clipped_data(self) -> None:
        scale = Scale(start=0.0, end=100.0)
        adjust_segment(scale, "round", 10.0, 120.0)
        self.assertGreaterEqual(scale.end, 120.0)

    def test_off_keeps_domain(self) -> None:
        scale = Scale(start=0.0, end=1.0)
        adjust_segment(scale, "off", 5.0, 50.0)
        self.assertEqual((scale.start, scale.end), (0.0, 1.0))

    def test_unknown_adjustment(self) -> None:
        with self.assertRaises(ScaleError):
            adjust_segment(Scale(), "loose", 0.0, 1.0)


if __name__ == "__main__":
    unittest.main()
