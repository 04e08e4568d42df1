"""
2D drawing surface over a matplotlib Figure.

DrawingSurface offers path-based drawing in pixel coordinates (origin at the
top-left corner, rows growing downward): build a path with move_to/line_to/
rectangle/arc, then stroke or fill it with the current colour, line width and
dash pattern. Each stroke, fill or text run becomes one matplotlib artist with
an increasing zorder, so later drawing covers earlier drawing.

The figure is sized so that one canvas pixel is one point at 72 dpi; line
widths and font sizes in points are therefore pixel sizes. Raster output is
scaled by the configured dpi.

Example:
    >>> surface = DrawingSurface(200, 100)
    >>> surface.set_color((1.0, 0.0, 0.0, 1.0))
    >>> surface.rectangle(10, 10, 50, 20)
    >>> surface.fill()
    >>> png = surface.to_bytes("png")
"""

import io
import logging
import math
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np
from matplotlib.colors import LinearSegmentedColormap
from matplotlib.figure import Figure
from matplotlib.patches import PathPatch
from matplotlib.path import Path as MplPath
from matplotlib.tri import Triangulation

from .design import RGBA
from .text import FontData, TextMeasurer
from ..constants import BASE_DPI, OUTPUT_FORMATS
from ..exceptions import RenderError, RenderIOError

logger = logging.getLogger("panel_charts.rendering.surface")

Point = Tuple[float, float]

_FILL_RULES = ("winding",)
_ARC_SEGMENTS = 64


class _SubPath:
    __slots__ = ("points", "closed")

    def __init__(self, start: Point):
        self.points: List[Point] = [start]
        self.closed = False


class DrawingSurface:
    """
    Path-based drawing surface backed by a matplotlib Figure.

    Attributes:
        width: Canvas width in pixels
        height: Canvas height in pixels
        dpi: Resolution of raster output
        fig: Matplotlib Figure holding the drawing
        ax: Matplotlib Axes covering the whole figure in pixel coordinates
    """

    def __init__(
        self,
        width: float,
        height: float,
        dpi: int = BASE_DPI,
        canvas_color: Optional[str] = None,
        measurer: Optional[TextMeasurer] = None,
    ):
        if width <= 0 or height <= 0:
            raise RenderIOError(f"Cannot create a {width}x{height} surface")
        self.width = width
        self.height = height
        self.dpi = dpi
        self.measurer = measurer if measurer is not None else TextMeasurer()

        try:
            self.fig = Figure(figsize=(width / BASE_DPI, height / BASE_DPI), dpi=BASE_DPI)
            self.fig.patch.set_facecolor(canvas_color if canvas_color is not None else "none")
            self.ax = self.fig.add_axes([0.0, 0.0, 1.0, 1.0])
        except ValueError as e:
            raise RenderIOError(f"Failed to create drawing surface: {e}") from e

        self.ax.set_xlim(0, width)
        self.ax.set_ylim(height, 0)
        self.ax.set_axis_off()
        self.ax.patch.set_visible(False)

        self._translation: Point = (0.0, 0.0)
        self._color: RGBA = (0.0, 0.0, 0.0, 1.0)
        self._line_width = 1.0
        self._dash: Tuple[float, ...] = ()
        self._fill_rule = "winding"
        self._stack: List[tuple] = []
        self._path: List[_SubPath] = []
        self._zorder = 0

    # ------------------------------------------------------------------
    # Graphics state
    # ------------------------------------------------------------------

    def save(self) -> None:
        self._stack.append(
            (self._translation, self._color, self._line_width, self._dash, self._fill_rule)
        )

    def restore(self) -> None:
        if not self._stack:
            raise RenderError("restore() without a matching save()")
        (self._translation, self._color, self._line_width,
         self._dash, self._fill_rule) = self._stack.pop()

    def translate(self, dx: float, dy: float) -> None:
        tx, ty = self._translation
        self._translation = (tx + dx, ty + dy)

    def set_color(self, color: RGBA) -> None:
        self._color = tuple(color)

    def set_line_width(self, width: float) -> None:
        self._line_width = float(width)

    def set_dash(self, dashes: Sequence[float]) -> None:
        """
        Set the dash pattern as alternating on/off lengths in pixels.

        An empty sequence draws solid lines. Odd-length sequences repeat so
        that each length is used once as "on" and once as "off".
        """
        dashes = tuple(float(d) for d in dashes)
        if len(dashes) % 2 == 1:
            dashes = dashes * 2
        self._dash = dashes

    def set_fill_rule(self, rule: str) -> None:
        # matplotlib fills paths with the nonzero winding rule
        if rule not in _FILL_RULES:
            raise RenderError(f"Unsupported fill rule: {rule!r}")
        self._fill_rule = rule

    # ------------------------------------------------------------------
    # Path construction
    # ------------------------------------------------------------------

    def _device(self, x: float, y: float) -> Point:
        tx, ty = self._translation
        return (x + tx, y + ty)

    def _current(self) -> Optional[_SubPath]:
        if self._path and not self._path[-1].closed:
            return self._path[-1]
        return None

    def move_to(self, x: float, y: float) -> None:
        self._path.append(_SubPath(self._device(x, y)))

    def line_to(self, x: float, y: float) -> None:
        current = self._current()
        if current is None:
            self.move_to(x, y)
            return
        current.points.append(self._device(x, y))

    def close_path(self) -> None:
        current = self._current()
        if current is not None:
            current.closed = True

    def rectangle(self, x: float, y: float, width: float, height: float) -> None:
        self.move_to(x, y)
        self.line_to(x + width, y)
        self.line_to(x + width, y + height)
        self.line_to(x, y + height)
        self.close_path()

    def arc(self, xc: float, yc: float, radius: float, angle1: float, angle2: float) -> None:
        """Add a circular arc; it is joined to the current point by a line."""
        while angle2 < angle1:
            angle2 += 2 * math.pi
        angles = np.linspace(angle1, angle2, _ARC_SEGMENTS + 1)
        for angle in angles:
            self.line_to(xc + radius * math.cos(angle), yc + radius * math.sin(angle))

    def new_path(self) -> None:
        self._path = []

    def _build_path(self) -> Optional[MplPath]:
        vertices: List[Point] = []
        codes: List[int] = []
        for sub in self._path:
            if len(sub.points) < 2:
                continue
            vertices.extend(sub.points)
            codes.append(MplPath.MOVETO)
            codes.extend([MplPath.LINETO] * (len(sub.points) - 1))
            if sub.closed:
                vertices.append(sub.points[0])
                codes.append(MplPath.CLOSEPOLY)
        if not vertices:
            return None
        return MplPath(vertices, codes)

    def _next_zorder(self) -> int:
        self._zorder += 1
        return self._zorder

    # ------------------------------------------------------------------
    # Painting
    # ------------------------------------------------------------------

    def stroke(self, preserve: bool = False) -> None:
        path = self._build_path()
        if path is not None:
            patch = PathPatch(
                path,
                fill=False,
                edgecolor=self._color,
                linewidth=self._line_width,
                capstyle="butt",
                joinstyle="miter",
                zorder=self._next_zorder(),
            )
            if self._dash and self._line_width > 0:
                # matplotlib scales dash lengths by the line width
                patch.set_linestyle((0, [d / self._line_width for d in self._dash]))
            self.ax.add_patch(patch)
        if not preserve:
            self.new_path()

    def fill(self, preserve: bool = False) -> None:
        path = self._build_path()
        if path is not None:
            patch = PathPatch(
                path,
                facecolor=self._color,
                edgecolor="none",
                linewidth=0,
                zorder=self._next_zorder(),
            )
            self.ax.add_patch(patch)
        if not preserve:
            self.new_path()

    def show_text(
        self,
        x: float,
        y: float,
        text: str,
        font: FontData,
        rotation: float = 0.0,
        centered: bool = False,
    ) -> None:
        """Draw text with its baseline starting at (x, y), or centred on it."""
        px, py = self._device(x, y)
        self.ax.text(
            px,
            py,
            text,
            fontproperties=font.font_properties(),
            color=self._color,
            rotation=rotation,
            rotation_mode="anchor",
            ha="center" if centered else "left",
            va="center" if centered else "baseline",
            zorder=self._next_zorder(),
        )

    def text_extents(self, text: str, font: FontData) -> Tuple[float, float]:
        return self.measurer.extents(text, font)

    def gradient_mesh(
        self,
        patches: Sequence[Sequence[Point]],
        ratios: Sequence[Sequence[float]],
        color_start: RGBA,
        color_end: RGBA,
    ) -> None:
        """
        Paint quadrilateral patches shaded between two colours.

        Args:
            patches: Four corners per patch, in drawing order
            ratios: Colour ratio in [0, 1] per corner (0 is ``color_start``)
            color_start: Colour at ratio 0
            color_end: Colour at ratio 1
        """
        if not patches:
            return
        xs, ys, values, triangles = [], [], [], []
        for corners, corner_ratios in zip(patches, ratios):
            base = len(xs)
            for (x, y), ratio in zip(corners, corner_ratios):
                px, py = self._device(x, y)
                xs.append(px)
                ys.append(py)
                values.append(ratio)
            triangles.append((base, base + 1, base + 2))
            triangles.append((base, base + 2, base + 3))

        cmap = LinearSegmentedColormap.from_list("surface", [color_start, color_end])
        triangulation = Triangulation(np.asarray(xs), np.asarray(ys), np.asarray(triangles))
        self.ax.tripcolor(
            triangulation,
            np.asarray(values),
            shading="gouraud",
            cmap=cmap,
            vmin=0.0,
            vmax=1.0,
            zorder=self._next_zorder(),
        )

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def to_bytes(self, fmt: str) -> bytes:
        """Encode the drawing as png, svg, eps, ps or pdf bytes."""
        fmt = fmt.lower()
        if fmt not in OUTPUT_FORMATS:
            raise RenderIOError(f"Unsupported output format: {fmt} (expected {', '.join(OUTPUT_FORMATS)})")
        buffer = io.BytesIO()
        try:
            self.fig.savefig(buffer, format=fmt, dpi=self.dpi)
        except (ValueError, RuntimeError, OSError) as e:
            raise RenderIOError(f"Failed to encode {fmt} output: {e}") from e
        return buffer.getvalue()

    def write(self, path: Union[str, Path], fmt: str) -> Path:
        """Encode the drawing and write it to ``path``."""
        path = Path(path)
        data = self.to_bytes(fmt)
        try:
            path.write_bytes(data)
        except OSError as e:
            raise RenderIOError(f"Failed to write {path}: {e}") from e
        logger.info(f"Chart saved to {path}")
        return path

    def close(self) -> None:
        self.fig.clear()
