"""
Data to pixel coordinate mapping.

The ContextMapper converts points between the data domain of a plot and the
pixel rectangle the plot occupies. The drawable area is inset by 10% of the
canvas on every side, leaving room for grid values and axis names. Pixel rows
grow downward, so data "up" maps to smaller pixel rows.

This module also holds the significant-digit rounding helpers used by the
"round" scale adjustment.

Example:
    >>> mapper = ContextMapper(0.0, 10.0, 0.0, 1.0, width=800, height=600)
    >>> mapper.map(0.0, 0.0)
    (80.0, 540.0)
    >>> mapper.map(10.0, 1.0)
    (720.0, 60.0)
"""

import math
from typing import Tuple

from ..constants import DEFAULT_WIDTH, DEFAULT_HEIGHT, EPSILON, PLOT_MARGIN

Coord = Tuple[float, float]


def _extension(vmin: float, vmax: float, log: bool) -> float:
    if log:
        return abs(math.log10(vmax) - math.log10(vmin))
    return abs(vmax - vmin)


def _proportion(value: float, vmin: float, vmax: float, ext: float, log: bool, invert: bool) -> float:
    if log:
        if invert:
            return (math.log10(vmax) - math.log10(value)) / ext
        return (math.log10(value) - math.log10(vmin)) / ext
    if invert:
        return (vmax - value) / ext
    return (value - vmin) / ext


def _from_proportion(prop: float, vmin: float, vmax: float, ext: float, log: bool, invert: bool) -> float:
    if log:
        if invert:
            return 10 ** (math.log10(vmax) - prop * ext)
        return 10 ** (math.log10(vmin) + prop * ext)
    if invert:
        return vmax - prop * ext
    return vmin + prop * ext


class ContextMapper:
    """
    Map a 2D data domain onto a pixel rectangle.

    Spans (``xext``/``yext``) are computed once whenever the domain, the
    scaling flags or the dimensions change, and reused by every map() call.
    A span of zero is degenerate; the owning Plot guarantees a positive span
    before drawing.

    Attributes:
        xmin, xmax, ymin, ymax: Data domain
        xlog, ylog: Logarithmic scaling per axis
        xinv, yinv: Inverted direction per axis
        w, h: Canvas dimensions in pixels
        xext, yext: Cached domain spans (log10 space on log axes)
    """

    def __init__(
        self,
        xmin: float = 0.0,
        xmax: float = 1.0,
        ymin: float = 0.0,
        ymax: float = 1.0,
        xlog: bool = False,
        ylog: bool = False,
        xinv: bool = False,
        yinv: bool = False,
        width: float = DEFAULT_WIDTH,
        height: float = DEFAULT_HEIGHT,
    ):
        self.xmin = xmin
        self.xmax = xmax
        self.ymin = ymin
        self.ymax = ymax
        self.xlog = xlog
        self.ylog = ylog
        self.xinv = xinv
        self.yinv = yinv
        self.w = width
        self.h = height
        self.xext = 0.0
        self.yext = 0.0
        self._calc_ext()

    def __repr__(self) -> str:
        return (
            f"ContextMapper(x=[{self.xmin}, {self.xmax}], y=[{self.ymin}, {self.ymax}], "
            f"log=({self.xlog}, {self.ylog}), inv=({self.xinv}, {self.yinv}), "
            f"size=({self.w}, {self.h}))"
        )

    def _calc_ext(self) -> None:
        self.xext = _extension(self.xmin, self.xmax, self.xlog)
        self.yext = _extension(self.ymin, self.ymax, self.ylog)

    def update_data_extensions(self, xmin: float, xmax: float, ymin: float, ymax: float) -> None:
        self.xmin = xmin
        self.xmax = xmax
        self.ymin = ymin
        self.ymax = ymax
        self._calc_ext()

    def update_dimensions(self, width: float, height: float) -> None:
        self.w = width
        self.h = height

    def set_mode(self, xinv: bool, xlog: bool, yinv: bool, ylog: bool) -> None:
        self.xinv = xinv
        self.xlog = xlog
        self.yinv = yinv
        self.ylog = ylog
        self._calc_ext()

    def data_extensions(self) -> Tuple[float, float, float, float]:
        return self.xmin, self.xmax, self.ymin, self.ymax

    def _padding(self) -> Tuple[float, float, float, float]:
        padw = PLOT_MARGIN * self.w
        padh = PLOT_MARGIN * self.h
        return padw, padh, self.w - 2 * padw, self.h - 2 * padh

    def map(self, x: float, y: float) -> Coord:
        """Convert a data point into pixel coordinates."""
        padw, padh, dataw, datah = self._padding()
        xprop = _proportion(x, self.xmin, self.xmax, self.xext, self.xlog, self.xinv)
        yprop = 1.0 - _proportion(y, self.ymin, self.ymax, self.yext, self.ylog, self.yinv)
        return padw + dataw * xprop, padh + datah * yprop

    def unmap(self, px: float, py: float) -> Coord:
        """Convert pixel coordinates back into a data point."""
        padw, padh, dataw, datah = self._padding()
        xprop = (px - padw) / dataw
        yprop = 1.0 - (py - padh) / datah
        return (
            _from_proportion(xprop, self.xmin, self.xmax, self.xext, self.xlog, self.xinv),
            _from_proportion(yprop, self.ymin, self.ymax, self.yext, self.ylog, self.yinv),
        )

    def check_bounds(self, x: float, y: float) -> bool:
        """Whether a data point lies inside the domain (inversion is irrelevant)."""
        return self.xmin <= x <= self.xmax and self.ymin <= y <= self.ymax

    def coord_bounds(self) -> Tuple[Coord, Coord, Coord, Coord]:
        """Mapped corners: (xmin, ymin), (xmax, ymin), (xmax, ymax), (xmin, ymax)."""
        return (
            self.map(self.xmin, self.ymin),
            self.map(self.xmax, self.ymin),
            self.map(self.xmax, self.ymax),
            self.map(self.xmin, self.ymax),
        )

    def coord_extensions(self) -> Tuple[float, float]:
        """Pixel width and height of the mapped domain rectangle."""
        origin = self.map(self.xmin, self.ymin)
        right = self.map(self.xmax, self.ymin)
        top = self.map(self.xmin, self.ymax)
        return math.dist(origin, right), math.dist(origin, top)


# ============================================================================
# Significant-digit rounding
# ============================================================================

def _round_half_away(value: float) -> float:
    return math.copysign(math.floor(abs(value) + 0.5), value)


def log_units(value: float) -> float:
    """Mantissa of ``value`` as a number in [1, 10)."""
    if value == 0.0:
        value = EPSILON
    exponent = math.log10(abs(value))
    return 10 ** (exponent - math.floor(exponent))


def round_to(value: float, place: int, up: bool) -> float:
    """Round ``value`` up or down to ``place`` decimal places."""
    factor = 10 ** place
    scaled = value * factor
    rounded = math.ceil(scaled) if up else math.floor(scaled)
    return rounded / factor


def round_to_closest(value: float, up: bool) -> float:
    """Round the magnitude of ``value`` to two significant digits.

    ``up`` rounds the magnitude away from zero, otherwise toward zero; the
    sign is restored afterwards and the result is rounded to an integer.
    """
    if value == 0.0:
        value = EPSILON
    closest_log = math.floor(math.log10(abs(value)))
    rounded = round_to(log_units(value), 1, up)
    magnitude = (10 ** closest_log) * rounded
    if value < 0.0:
        magnitude = -magnitude
    return _round_half_away(magnitude)


def round_to_most_extreme(vmin: float, vmax: float) -> Tuple[float, float]:
    """Round a data interval outward to nearby round numbers."""
    if vmin > 0.0:
        return round_to_closest(vmin, False), round_to_closest(vmax, True)
    if vmax > 0.0:
        return round_to_closest(vmin, True), round_to_closest(vmax, True)
    return round_to_closest(vmin, True), round_to_closest(vmax, False)
