"""
Axis scales and automatic range fitting.

A Scale owns one axis' domain, its tick ("step") positions and the policy used
to refit the domain when the plotted data changes:

- ``tight``: the domain becomes exactly the data range
- ``round``: the domain becomes a nearby round-number range, but only when the
  current domain clips the data or pads it by more than 25%
- ``off``: the domain written by the user is kept

Example:
    >>> scale = Scale(start=0.0, end=1.0, n_intervals=4)
    >>> scale.steps
    [0.0, 0.25, 0.5, 0.75, 1.0]
    >>> adjust_segment(scale, "tight", 2.0, 6.0)
    >>> scale.steps
    [2.0, 3.0, 4.0, 5.0, 6.0]
"""

import logging
import math
from typing import Dict, List, Optional, Tuple

from .context_mapper import round_to_most_extreme
from ..constants import (
    ADJUSTMENTS,
    ROUND_PAD_TOLERANCE,
    SCALE_ADJUSTMENT,
    SCALE_INTERVALS,
    SCALE_PRECISION,
)
from ..exceptions import ScaleError
from ..model import ScaleConfig

logger = logging.getLogger("panel_charts.rendering.scale")


def define_steps(n_intervals: int, start: float, end: float, offset: float, log: bool) -> List[float]:
    """
    Compute the tick positions of an axis.

    Both ends of the domain are pulled in by ``offset`` percent of one
    interval (multiplicatively on log axes), then the remaining range is
    divided into ``n_intervals`` equal intervals (equal in log10 space on log
    axes). The first and last ticks are exactly the padded bounds.

    Args:
        n_intervals: Number of intervals between ticks
        start: Domain lower bound
        end: Domain upper bound
        offset: Padding as a percentage (0 - 100) of one interval
        log: Space the ticks evenly in log10 space

    Returns:
        List of ``n_intervals + 1`` tick positions

    Raises:
        ScaleError: If the padding leaves no room between the first and last tick
    """
    check_offset(n_intervals, offset)
    share = offset / 100.0
    if log:
        log_start, log_end = math.log10(start), math.log10(end)
        off_prop = 10 ** ((log_end - log_start) / n_intervals * share)
        start_offset, end_offset = start * off_prop, end / off_prop
        base = math.log10(start_offset)
        span = math.log10(end_offset) - base
        inner = [10 ** (base + span * i / n_intervals) for i in range(1, n_intervals)]
    else:
        off_prop = (end - start) / n_intervals * share
        start_offset, end_offset = start + off_prop, end - off_prop
        span = end_offset - start_offset
        inner = [start_offset + span * i / n_intervals for i in range(1, n_intervals)]
    return [start_offset] + inner + [end_offset]


def check_offset(n_intervals: int, offset: float) -> None:
    """Reject a padding that would collapse or reverse the tick sequence."""
    if 2 * offset >= 100 * n_intervals:
        raise ScaleError(
            f"Offset {offset}% of one interval leaves no room for {n_intervals} interval(s)"
        )


class Scale:
    """
    One axis: domain, tick layout and adjustment policy.

    Steps are recomputed whenever a field other than the label changes, so
    ``len(steps) == n_intervals + 1`` always holds.

    Attributes:
        label: Axis name drawn next to the axis
        precision: Decimal places of the grid value labels
        start, end: Domain bounds
        n_intervals: Number of tick intervals
        log: Logarithmic axis
        invert: Inverted axis direction
        offset: Tick padding as a percentage of one interval
        adjustment: One of "tight", "round", "off"
        guide: Draw grid lines and values for this axis
        steps: Cached tick positions
    """

    _STEP_FIELDS = ("start", "end", "n_intervals", "log", "invert", "offset")

    def __init__(
        self,
        label: str = "",
        precision: int = SCALE_PRECISION,
        start: float = 0.0,
        end: float = 1.0,
        n_intervals: int = SCALE_INTERVALS,
        log: bool = False,
        invert: bool = False,
        offset: int = 0,
        adjustment: str = SCALE_ADJUSTMENT,
        guide: bool = True,
    ):
        if adjustment not in ADJUSTMENTS:
            raise ScaleError(f"Invalid adjustment: {adjustment!r}")
        self.label = label
        self.precision = precision
        self.start = start
        self.end = end
        self.n_intervals = n_intervals
        self.log = log
        self.invert = invert
        self.offset = offset
        self.adjustment = adjustment
        self.guide = guide
        self.steps: List[float] = []
        self.update_steps()

    def __repr__(self) -> str:
        return (
            f"Scale(label={self.label!r}, from={self.start}, to={self.end}, "
            f"n_intervals={self.n_intervals}, log={self.log}, invert={self.invert}, "
            f"adjustment={self.adjustment!r})"
        )

    @classmethod
    def from_config(cls, config: ScaleConfig) -> "Scale":
        """
        Build a scale from a validated document record.

        Raises:
            ScaleError: If the record is invalid or the tick sequence does not
                have ``intervals + 1`` entries
        """
        config.validate()
        scale = cls(
            label=config.label,
            precision=config.precision,
            start=config.start,
            end=config.end,
            n_intervals=config.intervals,
            log=config.log,
            invert=config.invert,
            offset=config.offset,
            adjustment=config.adjust,
            guide=config.guide,
        )
        if len(scale.steps) != scale.n_intervals + 1:
            raise ScaleError(
                f"Number of steps ({len(scale.steps)}) does not match intervals + 1 "
                f"({scale.n_intervals + 1})"
            )
        return scale

    def update_steps(self) -> None:
        self.steps = define_steps(self.n_intervals, self.start, self.end, self.offset, self.log)

    def update(self, **changes) -> None:
        """Set one or more fields; steps are recomputed unless only the label changed."""
        for name, value in changes.items():
            if not hasattr(self, name) or name == "steps":
                raise ScaleError(f"Unknown scale property: {name}")
            if name == "adjustment" and value not in ADJUSTMENTS:
                raise ScaleError(f"Invalid adjustment: {value!r}")
        check_offset(changes.get("n_intervals", self.n_intervals), changes.get("offset", self.offset))

        recompute = False
        for name, value in changes.items():
            setattr(self, name, value)
            if name in self._STEP_FIELDS:
                recompute = True
        if recompute:
            self.update_steps()

    def extension(self, start: float, end: float) -> None:
        """Replace the domain and recompute the steps."""
        self.start = start
        self.end = end
        self.update_steps()

    def labels(self) -> List[str]:
        """Grid value labels formatted with the scale precision."""
        return [f"{step:.{self.precision}f}" for step in self.steps]

    def description(self) -> Dict[str, str]:
        return {
            "label": self.label,
            "precision": str(self.precision),
            "from": str(self.start),
            "to": str(self.end),
            "n_intervals": str(self.n_intervals),
            "invert": str(self.invert).lower(),
            "log_scaling": str(self.log).lower(),
            "grid_offset": str(self.offset),
            "adjustment": self.adjustment,
            "guide": str(self.guide).lower(),
        }


def fit_segment(
    scale: Scale, adjustment: str, data_min: float, data_max: float
) -> Optional[Tuple[float, float]]:
    """
    Domain an adjustment policy would give a scale for a data range.

    Returns:
        The new (start, end), or None when the domain stays as it is
    """
    if adjustment == "tight":
        return data_min, data_max
    if adjustment == "round":
        ideal_min, ideal_max = round_to_most_extreme(data_min, data_max)
        amplitude = abs(data_max - data_min)
        if amplitude == 0.0:
            should_change = data_min < scale.start or data_max > scale.end
        else:
            large_pad_from = abs(data_min - scale.start) / amplitude > ROUND_PAD_TOLERANCE
            large_pad_to = abs(data_max - scale.end) / amplitude > ROUND_PAD_TOLERANCE
            should_change = (
                data_min < scale.start or data_max > scale.end or large_pad_from or large_pad_to
            )
        if should_change:
            logger.debug(f"Rounding scale domain to [{ideal_min}, {ideal_max}]")
            return ideal_min, ideal_max
        return None
    if adjustment != "off":
        raise ScaleError(f"Invalid adjustment: {adjustment!r}")
    return None


def adjust_segment(scale: Scale, adjustment: str, data_min: float, data_max: float) -> None:
    """
    Refit a scale domain to a data range according to an adjustment policy.

    Args:
        scale: Scale to update in place
        adjustment: "tight", "round" or "off"
        data_min: Smallest data value on this axis
        data_max: Largest data value on this axis
    """
    domain = fit_segment(scale, adjustment, data_min, data_max)
    if domain is not None:
        scale.extension(*domain)
