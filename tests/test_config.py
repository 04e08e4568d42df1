from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from panel_charts.config import RenderConfig, get_default_config


class RenderConfigTests(unittest.TestCase):
    def test_defaults_are_valid(self) -> None:
        config = get_default_config()
        self.assertTrue(config.validate())
        self.assertEqual(config.dpi, 72)
        self.assertIsNone(config.canvas_color)

    def test_yaml_and_json_round_trip(self) -> None:
        config = RenderConfig(dpi=144, canvas_color="#ffffff", surface_density=8, output_dir="charts")
        with tempfile.TemporaryDirectory() as tmp:
            for name in ("render.yaml", "render.json"):
                path = Path(tmp) / name
                config.save_to_file(path)
                self.assertEqual(RenderConfig.load_from_file(path), config)

    def test_unsupported_suffix(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(ValueError):
                RenderConfig().save_to_file(Path(tmp) / "render.toml")
            path = Path(tmp) / "render.ini"
            path.write_text("dpi = 10")
            with self.assertRaises(ValueError):
                RenderConfig.load_from_file(path)

    def test_missing_file(self) -> None:
        with self.assertRaises(FileNotFoundError):
            RenderConfig.load_from_file(Path("no/such/render.yaml"))

    def test_validate(self) -> None:
        for kwargs in (
            {"dpi": 0},
            {"default_width": -1},
            {"surface_density": 0},
            {"default_format": "gif"},
            {"canvas_color": ""},
            {"max_workers": 0},
        ):
            with self.subTest(**kwargs):
                with self.assertRaises(ValueError):
                    RenderConfig(**kwargs).validate()

    def test_output_dir_is_path(self) -> None:
        self.assertIsInstance(RenderConfig(output_dir="out").output_dir, Path)


if __name__ == "__main__":
    unittest.main()
