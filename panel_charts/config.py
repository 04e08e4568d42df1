"""
Configuration management for PanelCharts package.

This module provides rendering options that are not part of a chart document:
fallback canvas size, raster resolution, surface mesh density, output and
batch settings.
"""

import json
import yaml
from dataclasses import dataclass, asdict, field
from pathlib import Path
from typing import Optional

from .constants import (
    DEFAULT_WIDTH,
    DEFAULT_HEIGHT,
    BASE_DPI,
    DEFAULT_SURFACE_DENSITY,
    OUTPUT_FORMATS,
    TICK_LABEL_COLOR,
)


@dataclass
class RenderConfig:
    """Configuration for chart rendering.

    Attributes:
        default_width: Canvas width in pixels for charts without a layout.
        default_height: Canvas height in pixels for charts without a layout.
        dpi: Raster resolution. At 72 one layout pixel is one image pixel;
            higher values produce proportionally larger PNG images.
        surface_density: Default number of mesh patches per side for surface
            mappings that do not set their own density.
        default_format: Output format used when none can be derived.
        canvas_color: Colour painted under the whole canvas. None keeps the
            canvas transparent outside the plot backgrounds.
        tick_label_color: Colour of the grid value labels.
        output_dir: Directory for batch rendered charts.
        max_workers: Number of worker processes for parallel batch rendering.
    """

    default_width: int = DEFAULT_WIDTH
    default_height: int = DEFAULT_HEIGHT
    dpi: int = BASE_DPI
    surface_density: int = DEFAULT_SURFACE_DENSITY
    default_format: str = "png"
    canvas_color: Optional[str] = None
    tick_label_color: str = TICK_LABEL_COLOR
    output_dir: Path = field(default_factory=lambda: Path("./output"))
    max_workers: int = 4

    def __post_init__(self):
        """Convert string paths to Path objects if necessary."""
        if isinstance(self.output_dir, str):
            self.output_dir = Path(self.output_dir)

    @classmethod
    def load_from_file(cls, path: Path) -> "RenderConfig":
        """Load configuration from a YAML or JSON file.

        Args:
            path: Path to configuration file (.yaml, .yml, or .json).

        Returns:
            RenderConfig instance with loaded settings.

        Raises:
            ValueError: If file format is not supported.
            FileNotFoundError: If file does not exist.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path, 'r') as f:
            if path.suffix in ['.yaml', '.yml']:
                data = yaml.safe_load(f)
            elif path.suffix == '.json':
                data = json.load(f)
            else:
                raise ValueError(f"Unsupported file format: {path.suffix}. Use .yaml, .yml, or .json")

        data = data or {}
        if 'output_dir' in data:
            data['output_dir'] = Path(data['output_dir'])

        return cls(**data)

    def save_to_file(self, path: Path) -> None:
        """Save configuration to a YAML or JSON file.

        Args:
            path: Path where configuration should be saved.

        Raises:
            ValueError: If file format is not supported.
        """
        path = Path(path)
        if path.suffix not in ['.yaml', '.yml', '.json']:
            raise ValueError(f"Unsupported file format: {path.suffix}. Use .yaml, .yml, or .json")
        path.parent.mkdir(parents=True, exist_ok=True)

        data = asdict(self)
        data['output_dir'] = str(data['output_dir'])

        with open(path, 'w') as f:
            if path.suffix in ['.yaml', '.yml']:
                yaml.dump(data, f, default_flow_style=False, sort_keys=False)
            else:
                json.dump(data, f, indent=2)

    def validate(self) -> bool:
        """Validate configuration parameters.

        Returns:
            True if configuration is valid.

        Raises:
            ValueError: If any configuration parameter is invalid.
        """
        if self.default_width <= 0 or self.default_height <= 0:
            raise ValueError("Default canvas dimensions must be positive")

        if self.dpi <= 0:
            raise ValueError("dpi must be positive")

        if not isinstance(self.surface_density, int) or self.surface_density < 1:
            raise ValueError("surface_density must be an integer >= 1")

        if str(self.default_format).lower() not in OUTPUT_FORMATS:
            raise ValueError(f"default_format must be one of: {', '.join(OUTPUT_FORMATS)}")

        if self.canvas_color is not None and (not isinstance(self.canvas_color, str) or not self.canvas_color):
            raise ValueError("canvas_color must be a non-empty string or None")

        if not isinstance(self.tick_label_color, str) or not self.tick_label_color:
            raise ValueError("tick_label_color must be a non-empty string")

        if not isinstance(self.max_workers, int) or self.max_workers < 1:
            raise ValueError("max_workers must be an integer >= 1")

        return True

    def ensure_directories(self) -> None:
        """Create the output directory if it doesn't exist."""
        self.output_dir.mkdir(parents=True, exist_ok=True)


def get_default_config() -> RenderConfig:
    """Get a RenderConfig instance with default settings.

    Returns:
        RenderConfig instance initialized with default values.
    """
    return RenderConfig()
