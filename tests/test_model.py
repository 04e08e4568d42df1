from __future__ import annotations

import json
import unittest

from panel_charts.exceptions import (
    DesignError,
    InvalidParameterError,
    LayoutError,
    MappingError,
    PanelError,
    ScaleError,
)
from panel_charts.model import (
    DesignConfig,
    LayoutConfig,
    MappingConfig,
    PanelConfig,
    ScaleConfig,
    validate_color,
)


def _line(**extra):
    data = {"kind": "line", "map": {"x": [0, 1, 2], "y": [1, 2, 3]}}
    data.update(extra)
    return data


class ColorTests(unittest.TestCase):
    def test_hex_colors(self) -> None:
        self.assertTrue(validate_color("#a0b1c2"))
        self.assertTrue(validate_color("#a0b1c2ff"))
        self.assertFalse(validate_color("#fff"))
        self.assertFalse(validate_color("red"))
        self.assertFalse(validate_color(None))


class DocumentParsingTests(unittest.TestCase):
    def test_invalid_json(self) -> None:
        with self.assertRaises(InvalidParameterError):
            PanelConfig.from_json("{not json")

    def test_single_plot_document_becomes_unique_panel(self) -> None:
        doc = {"x": {"from": 0, "to": 2}, "mappings": [_line()], "layout": {"width": 300, "height": 200}}
        panel = PanelConfig.from_dict(doc)
        panel.validate()
        self.assertEqual(len(panel.plots), 1)
        self.assertEqual(panel.resolve_split(), "unique")
        self.assertEqual(panel.layout.width, 300)
        self.assertIsNone(panel.plots[0].layout)

    def test_plot_design_inside_panel_is_dropped(self) -> None:
        doc = {"plots": [{"mappings": [], "design": {"width": 2}}, {"mappings": []}]}
        panel = PanelConfig.from_dict(doc)
        self.assertIsNone(panel.plots[0].design)
        self.assertEqual(panel.resolve_split(), "horizontal")

    def test_scale_keys_from_and_to(self) -> None:
        scale = ScaleConfig.from_dict({"from": -1, "to": 4, "adjust": "ROUND"})
        self.assertEqual((scale.start, scale.end), (-1.0, 4.0))
        self.assertEqual(scale.adjust, "round")
        self.assertEqual(scale.to_dict()["from"], -1.0)

    def test_to_json_is_stable(self) -> None:
        doc = {
            "plots": [{"mappings": [_line(color="#ff0000", width=2.0)]}, {"mappings": []}],
            "layout": {"split": "vertical"},
            "design": {"bgcolor": "#000000"},
        }
        config = PanelConfig.from_dict(doc)
        again = PanelConfig.from_json(config.to_json())
        self.assertEqual(again.to_dict(), config.to_dict())
        self.assertEqual(json.loads(config.to_json())["layout"]["split"], "vertical")


class SplitResolutionTests(unittest.TestCase):
    def test_split_inferred_from_count(self) -> None:
        for n, split in [(1, "unique"), (2, "horizontal"), (3, "threetop"), (4, "four")]:
            panel = PanelConfig.from_dict({"plots": [{"mappings": []} for _ in range(n)]})
            self.assertEqual(panel.resolve_split(), split)

    def test_declared_split_must_match_count(self) -> None:
        panel = PanelConfig.from_dict({"plots": [{}, {}], "layout": {"split": "four"}})
        with self.assertRaises(PanelError):
            panel.validate()

    def test_too_many_plots(self) -> None:
        panel = PanelConfig.from_dict({"plots": [{} for _ in range(5)]})
        with self.assertRaises(PanelError):
            panel.resolve_split()

    def test_unknown_split(self) -> None:
        panel = PanelConfig.from_dict({"plots": [{}], "layout": {"split": "diagonal"}})
        with self.assertRaises(LayoutError):
            panel.validate()


class ValidationTests(unittest.TestCase):
    def test_design_limits(self) -> None:
        with self.assertRaises(DesignError):
            DesignConfig(width=51).validate()
        with self.assertRaises(DesignError):
            DesignConfig(bgcolor="#fff").validate()
        with self.assertRaises(DesignError):
            DesignConfig.from_dict({"width": "thick"})
        DesignConfig.dark().validate()

    def test_layout_limits(self) -> None:
        with self.assertRaises(LayoutError):
            LayoutConfig(hratio=1.5).validate()
        with self.assertRaises(LayoutError):
            LayoutConfig(width=0).validate()

    def test_scale_limits(self) -> None:
        with self.assertRaises(ScaleError):
            ScaleConfig(start=0.0, end=10.0, log=True).validate()
        with self.assertRaises(ScaleError):
            ScaleConfig(offset=101).validate()
        with self.assertRaises(ScaleError):
            ScaleConfig(offset=50, intervals=1).validate()
        ScaleConfig(offset=100, intervals=3).validate()
        with self.assertRaises(ScaleError):
            ScaleConfig(intervals=0).validate()
        with self.assertRaises(ScaleError):
            ScaleConfig.from_dict({"log": "yes"})

    def test_unknown_kind(self) -> None:
        with self.assertRaises(MappingError):
            MappingConfig.from_dict({"kind": "pie", "map": {"x": [1]}}).validate()

    def test_unknown_property(self) -> None:
        with self.assertRaises(MappingError):
            MappingConfig.from_dict(_line(thickness=3))

    def test_property_of_other_kind(self) -> None:
        with self.assertRaises(MappingError):
            MappingConfig.from_dict(_line(radius=2.0)).validate()

    def test_columns_must_match_kind(self) -> None:
        config = MappingConfig.from_dict({"kind": "area", "map": {"x": [1, 2], "y": [0, 0]}})
        with self.assertRaises(MappingError):
            config.validate()

    def test_length_mismatch(self) -> None:
        config = MappingConfig.from_dict({"kind": "scatter", "map": {"x": [1, 2, 3], "y": [1, 2]}})
        with self.assertRaises(MappingError):
            config.validate()

    def test_null_values_rejected(self) -> None:
        with self.assertRaises(MappingError):
            MappingConfig.from_dict({"kind": "line", "map": {"x": [1, None], "y": [1, 2]}})

    def test_invalid_color(self) -> None:
        with self.assertRaises(MappingError):
            MappingConfig.from_dict(_line(color="blue")).validate()

    def test_valid_mapping(self) -> None:
        config = MappingConfig.from_dict(_line(color="#00ff0080", spacing=3, source="db", columns=["t", "v"]))
        config.validate()
        self.assertEqual(config.properties(), ["spacing"])
        self.assertEqual(config.to_dict()["columns"], ["t", "v"])


if __name__ == "__main__":
    unittest.main()
