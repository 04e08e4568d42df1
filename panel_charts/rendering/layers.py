"""
Drawing functions for the mapping kinds.

Each ``draw_<kind>`` function renders one mapping onto a DrawingSurface using
a ContextMapper for data to pixel conversion. Data points outside the mapper
domain are skipped, never extrapolated. ``draw_mapping`` dispatches on the
mapping kind.
"""

import logging
import math
from typing import Callable, Dict, List, Tuple

import numpy as np

from .context_mapper import ContextMapper
from .design import parse_color
from .mappings import (
    AreaMapping,
    BarMapping,
    IntervalMapping,
    LineMapping,
    Mapping,
    ScatterMapping,
    SurfaceMapping,
    TextMapping,
)
from .text import FontData, draw_label
from ..constants import DASH_CYCLE

logger = logging.getLogger("panel_charts.rendering.layers")

Point = Tuple[float, float]


def build_dash(n: int) -> List[float]:
    """
    Dash pattern with ``n`` dashes per cycle.

    Example:
        >>> build_dash(1)
        []
        >>> build_dash(3)
        [3.3333333333333335, 3.3333333333333335]
    """
    dash_size = DASH_CYCLE / n
    return [dash_size] * (n - 1)


def _stroke_segment(surface, start: Point, end: Point) -> None:
    surface.move_to(*start)
    surface.line_to(*end)
    surface.stroke()


def draw_line(mapping: LineMapping, mapper: ContextMapper, surface) -> None:
    """Join the points in data order, dropping segments that end out of bounds."""
    if len(mapping) < 2:
        logger.debug("Line mapping with fewer than two points, nothing drawn")
        return
    surface.save()
    surface.set_color(parse_color(mapping.color))
    surface.set_line_width(mapping.width)
    surface.set_dash(build_dash(mapping.dash))

    started = False
    for x, y in zip(mapping.x, mapping.y):
        if not mapper.check_bounds(x, y):
            continue
        px, py = mapper.map(x, y)
        if started:
            surface.line_to(px, py)
        else:
            surface.move_to(px, py)
            started = True
    surface.stroke()
    surface.restore()


def draw_scatter(mapping: ScatterMapping, mapper: ContextMapper, surface) -> None:
    surface.save()
    surface.set_color(parse_color(mapping.color))
    skipped = 0
    for x, y in zip(mapping.x, mapping.y):
        if not mapper.check_bounds(x, y):
            skipped += 1
            continue
        px, py = mapper.map(x, y)
        surface.arc(px, py, mapping.radius, 0.0, 2.0 * math.pi)
        surface.fill(preserve=True)
        surface.stroke()
    if skipped:
        logger.debug(f"Scatter mapping: {skipped} point(s) out of bounds")
    surface.restore()


def draw_bar(mapping: BarMapping, mapper: ContextMapper, surface) -> None:
    """Fill one polygon per bar; bars with any corner out of bounds are skipped."""
    surface.save()
    surface.set_color(parse_color(mapping.color))
    for corners in mapping.bar_coordinates():
        if not all(mapper.check_bounds(x, y) for x, y in corners):
            continue
        pixels = [mapper.map(x, y) for x, y in corners]
        surface.move_to(*pixels[0])
        for px, py in pixels[1:]:
            surface.line_to(px, py)
        surface.close_path()
        surface.fill()
    surface.restore()


def draw_area(mapping: AreaMapping, mapper: ContextMapper, surface) -> None:
    """
    Fill the band between the lower and upper bounds.

    The boundary runs forward along the lower bound, up to the last upper
    point, then back along the upper bound. Points out of bounds are left out
    of the boundary; the path starts at the first point in bounds.
    """
    if mapping.is_empty():
        return
    xs, lower, upper = mapping.x, mapping.y, mapping.z
    boundary = list(zip(xs, lower)) + list(zip(reversed(xs), reversed(upper)))
    pixels = [mapper.map(x, y) for x, y in boundary if mapper.check_bounds(x, y)]
    if not pixels:
        logger.debug("Area mapping: no boundary point in bounds, nothing drawn")
        return

    surface.save()
    surface.set_color(parse_color(mapping.color))
    surface.set_fill_rule("winding")
    surface.move_to(*pixels[0])
    for px, py in pixels[1:]:
        surface.line_to(px, py)
    surface.close_path()
    surface.fill()
    surface.restore()


def draw_interval(mapping: IntervalMapping, mapper: ContextMapper, surface) -> None:
    """
    Stroke a lower cap, an upper cap and a spine per interval.

    Caps are cut at the domain edge so that their ends always map.
    """
    surface.save()
    surface.set_color(parse_color(mapping.color))
    surface.set_line_width(mapping.width)
    surface.set_dash(build_dash(mapping.dash))
    half = mapping.limits / 2.0

    for centre, low, high in zip(mapping.x, mapping.y, mapping.z):
        if mapping.vertical:
            if not (mapper.check_bounds(centre, low) and mapper.check_bounds(centre, high)):
                continue
            left = max(centre - half, mapper.xmin)
            right = min(centre + half, mapper.xmax)
            _stroke_segment(surface, mapper.map(left, low), mapper.map(right, low))
            _stroke_segment(surface, mapper.map(left, high), mapper.map(right, high))
            _stroke_segment(surface, mapper.map(centre, low), mapper.map(centre, high))
        else:
            if not (mapper.check_bounds(low, centre) and mapper.check_bounds(high, centre)):
                continue
            bottom = max(centre - half, mapper.ymin)
            top = min(centre + half, mapper.ymax)
            _stroke_segment(surface, mapper.map(low, bottom), mapper.map(low, top))
            _stroke_segment(surface, mapper.map(high, bottom), mapper.map(high, top))
            _stroke_segment(surface, mapper.map(low, centre), mapper.map(high, centre))
    surface.restore()


def draw_text(mapping: TextMapping, mapper: ContextMapper, surface) -> None:
    surface.save()
    surface.set_color(parse_color(mapping.color))
    font = FontData.from_string(mapping.font)
    for x, y, label in zip(mapping.x, mapping.y, mapping.text):
        if mapper.check_bounds(x, y):
            draw_label(surface, font, label, mapper.map(x, y))
    surface.restore()


# ============================================================================
# Surface mesh
# ============================================================================

def create_uniform_coords(mapper: ContextMapper, n: int) -> List[Tuple[Point, Point, Point, Point]]:
    """
    Split the mapped plot area into ``n`` x ``n`` equal patches.

    Returns:
        Patches as (bottom-left, top-left, top-right, bottom-right) pixel corners
    """
    x_ext, y_ext = mapper.coord_extensions()
    bounds = mapper.coord_bounds()
    left = min(p[0] for p in bounds)
    top = min(p[1] for p in bounds)
    x_space = x_ext / n
    y_space = y_ext / n

    rows = [
        [(left + c * x_space, top + r * y_space) for c in range(n + 1)]
        for r in range(n + 1)
    ]
    patches = []
    for top_row, bottom_row in zip(rows, rows[1:]):
        for c in range(n):
            patches.append((bottom_row[c], top_row[c], top_row[c + 1], bottom_row[c + 1]))
    return patches


def interpolate_idw(points: np.ndarray, values: np.ndarray, targets: np.ndarray, power: float = 2.0) -> np.ndarray:
    """
    Inverse distance weighted interpolation.

    Args:
        points: (n, 2) known positions
        values: (n,) known values
        targets: (m, 2) positions to estimate
        power: Distance exponent

    Returns:
        (m,) estimated values; a target on a known point takes its value
    """
    distances = np.linalg.norm(targets[:, None, :] - points[None, :, :], axis=2)
    exact = distances == 0.0
    with np.errstate(divide="ignore"):
        weights = 1.0 / distances ** power
    weights[exact] = 0.0
    estimates = (weights @ values) / weights.sum(axis=1)

    hit_rows = exact.any(axis=1)
    if hit_rows.any():
        estimates[hit_rows] = values[exact[hit_rows].argmax(axis=1)]
    return estimates


def draw_surface(mapping: SurfaceMapping, mapper: ContextMapper, surface) -> None:
    """Paint a gradient mesh whose corner colours follow the interpolated z."""
    inside = [
        i for i, (x, y) in enumerate(zip(mapping.x, mapping.y)) if mapper.check_bounds(x, y)
    ]
    if not inside:
        logger.debug("Surface mapping has no data inside the plot area, nothing drawn")
        return

    points = np.array([mapper.map(mapping.x[i], mapping.y[i]) for i in inside], dtype=float)
    values = np.asarray(mapping.z, dtype=float)[inside]

    patches = create_uniform_coords(mapper, mapping.density)
    corners = np.array([corner for patch in patches for corner in patch], dtype=float)
    z_corners = interpolate_idw(points, values, corners)
    ratios = np.clip((z_corners - mapping.z_start) / (mapping.z_end - mapping.z_start), 0.0, 1.0)

    surface.save()
    surface.gradient_mesh(
        patches,
        ratios.reshape(len(patches), 4).tolist(),
        parse_color(mapping.color),
        parse_color(mapping.color_final),
    )
    surface.restore()


_RENDERERS: Dict[str, Callable[[Mapping, ContextMapper, object], None]] = {
    LineMapping.kind: draw_line,
    ScatterMapping.kind: draw_scatter,
    BarMapping.kind: draw_bar,
    AreaMapping.kind: draw_area,
    IntervalMapping.kind: draw_interval,
    TextMapping.kind: draw_text,
    SurfaceMapping.kind: draw_surface,
}


def draw_mapping(mapping: Mapping, mapper: ContextMapper, surface) -> None:
    """Draw any mapping with the renderer registered for its kind."""
    _RENDERERS[mapping.kind](mapping, mapper, surface)
