from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
import logging
import math
from typing import Sequence

import numpy as np

from tschart.config import LineMode, RenderConfig, UnitSystem
from tschart.errors import ConfigurationError
from tschart.series import AxisSide, Series

LOGGER = logging.getLogger(__name__)

NICE_MULTIPLIERS = (1.0, 2.0, 5.0)
MIN_GRID_LINES = 4
MAX_GRID_LINES = 8
MAX_OVERRIDE_GRID_LINES = 100

UNIT_SYSTEMS: dict[str, tuple[tuple[str, int], ...]] = {
    "binary": (
        ("Pi", 1024**5),
        ("Ti", 1024**4),
        ("Gi", 1024**3),
        ("Mi", 1024**2),
        ("Ki", 1024),
    ),
    "si": (
        ("P", 1000**5),
        ("T", 1000**4),
        ("G", 1000**3),
        ("M", 1000**2),
        ("K", 1000),
    ),
}


@dataclass(frozen=True)
class YAxisScale:
    """Value-axis domain for one side.

    ``y_min``/``y_max`` are the (possibly overridden) data bounds; ``y_bottom``
    and ``y_top`` are the grid bounds snapped to ``y_step``.
    """

    y_min: float
    y_max: float
    y_step: float
    y_bottom: float
    y_top: float
    side: AxisSide = "primary"
    unit_system: UnitSystem | None = None

    def ticks(self) -> np.ndarray:
        # No tick past y_top when a pinned bound is off the step grid.
        count = int(math.floor((self.y_top - self.y_bottom) / self.y_step + 1e-9)) + 1
        ticks = self.y_bottom + np.arange(max(1, count), dtype=np.float64) * self.y_step
        # Normalize floating-point drift so values like -4.44e-16 become 0.
        ticks[np.isclose(ticks, 0.0, rtol=0.0, atol=self.y_step * 1e-9)] = 0.0
        return ticks

    def labels(self) -> list[str]:
        return [format_y_tick(float(v), self.y_step, unit_system=self.unit_system) for v in self.ticks()]

    @property
    def grid_line_count(self) -> int:
        return grid_line_count(self.y_top - self.y_bottom, self.y_step)


def grid_line_count(span: float, step: float) -> int:
    return int(math.ceil(span / step - 1e-9))


def nice_step(span: float, *, max_lines: int = MAX_GRID_LINES) -> float:
    """Smallest step from {1, 2, 5} x 10^k giving at most ``max_lines`` grid lines.

    Consecutive candidates differ by at most 2.5x, so with the default window the
    chosen step always yields at least MIN_GRID_LINES lines.
    """

    if not math.isfinite(span) or span <= 0:
        raise ValueError("span must be a positive finite number")
    if max_lines <= 0:
        raise ValueError("max_lines must be > 0")
    exp = int(math.floor(math.log10(span / max_lines))) - 1
    while True:
        for mult in NICE_MULTIPLIERS:
            step = _scaled(mult, exp)
            if grid_line_count(span, step) <= max_lines:
                return step
        exp += 1


def next_nice_step(step: float) -> float:
    exp = int(math.floor(math.log10(step)))
    mantissa = step / 10.0**exp
    for mult in NICE_MULTIPLIERS[1:] + (10.0,):
        if mult > mantissa * (1 + 1e-9):
            return _scaled(mult, exp)
    return _scaled(NICE_MULTIPLIERS[1], exp + 1)


def _scaled(mult: float, exp: int) -> float:
    return mult * 10.0**exp if exp >= 0 else mult / 10.0 ** (-exp)


def stacked_max(series: Sequence[Series]) -> float:
    """Largest per-index sum across series; gaps contribute zero."""

    if not series:
        return 0.0
    length = max(s.point_count for s in series)
    if length == 0:
        return 0.0
    totals = np.zeros(length, dtype=np.float64)
    for s in series:
        filled = s.filled_values()
        totals[: filled.size] += filled
    return float(np.max(totals))


def effective_line_mode(series: Sequence[Series], line_mode: LineMode) -> LineMode:
    if series and all(s.point_count == 1 for s in series):
        return "staircase"
    return line_mode


def compute_y_axis(series: Sequence[Series], config: RenderConfig, *, side: AxisSide = "primary") -> YAxisScale:
    subset = [s for s in series if s.axis_side == side]
    scaled = [s for s in subset if not (s.draw_as_infinite or config.draw_as_infinite)]

    if config.area_mode == "stacked" and len(scaled) > 1:
        y_min = 0.0
        y_max = stacked_max(scaled)
    else:
        chunks = [s.present_values() for s in scaled]
        chunks = [c for c in chunks if c.size]
        if chunks:
            merged = np.concatenate(chunks)
            y_min = float(np.min(merged))
            y_max = float(np.max(merged))
        else:
            y_min = 0.0
            y_max = 0.0

    if y_max < 0 and config.draw_null_as_zero and any(s.has_absent for s in subset):
        y_max = 0.0

    override_min, override_max = config.y_min, config.y_max
    try:
        _check_bounds_override(override_min, override_max)
    except ConfigurationError as exc:
        LOGGER.warning("ignoring y-axis bounds override: %s", exc)
        override_min = override_max = None
    if override_min is not None:
        y_min = float(override_min)
    if override_max is not None:
        y_max = float(override_max)

    if y_max <= y_min:
        if override_max is None:
            y_max = y_min + max(abs(y_min), 1.0)
        else:
            y_min = y_max - max(abs(y_max), 1.0)

    y_step = None
    if config.y_step is not None:
        try:
            y_step = _checked_step_override(config.y_step, y_max - y_min)
        except ConfigurationError as exc:
            LOGGER.warning("ignoring y-axis step override: %s", exc)
    auto_step = y_step is None
    if y_step is None:
        y_step = nice_step(y_max - y_min)

    y_bottom, y_top = _snap(y_min, y_max, y_step, override_min, override_max)
    # Snapping outward can push the grid past MAX_GRID_LINES.
    while auto_step and grid_line_count(y_top - y_bottom, y_step) > MAX_GRID_LINES:
        y_step = next_nice_step(y_step)
        y_bottom, y_top = _snap(y_min, y_max, y_step, override_min, override_max)
    return YAxisScale(
        y_min=y_min,
        y_max=y_max,
        y_step=y_step,
        y_bottom=y_bottom,
        y_top=y_top,
        side=side,
        unit_system=config.y_unit_system,
    )


def _check_bounds_override(y_min: float | None, y_max: float | None) -> None:
    for value in (y_min, y_max):
        if value is not None and not math.isfinite(value):
            raise ConfigurationError(f"non-finite bound {value!r}")
    if y_min is not None and y_max is not None and y_min >= y_max:
        raise ConfigurationError(f"y_min {y_min:g} must be < y_max {y_max:g}")


def _checked_step_override(step: float, span: float) -> float:
    if not math.isfinite(step) or step <= 0:
        raise ConfigurationError(f"step must be a positive number, got {step!r}")
    if grid_line_count(span, step) > MAX_OVERRIDE_GRID_LINES:
        raise ConfigurationError(f"step {step:g} gives more than {MAX_OVERRIDE_GRID_LINES} grid lines over {span:g}")
    return float(step)


def _snap(
    y_min: float,
    y_max: float,
    step: float,
    override_min: float | None,
    override_max: float | None,
) -> tuple[float, float]:
    bottom = y_min if override_min is not None else math.floor(y_min / step + 1e-9) * step
    top = y_max if override_max is not None else math.ceil(y_max / step - 1e-9) * step
    return bottom, top


def format_y_tick(value: float, step: float, *, unit_system: UnitSystem | None = None) -> str:
    if unit_system is None:
        return format_tick(value, step=step)
    for prefix, factor in UNIT_SYSTEMS[unit_system]:
        if abs(step) >= factor:
            return format_tick(value / factor, step=step / factor) + prefix
    return format_tick(value, step=step)


def format_tick(value: float, *, step: float | None = None) -> str:
    if not math.isfinite(value):
        return str(value)
    if step is not None and math.isfinite(step) and step > 0 and abs(value) <= step * 1e-9:
        value = 0.0
    magnitude = abs(value)
    if magnitude and (magnitude >= 1e15 or magnitude < 1e-6 or (step is not None and abs(step) < 1e-4)):
        return f"{value:.4e}"

    places = 6 if step is None else _decimals_from_step(step)
    try:
        text = format(Decimal(str(value)).quantize(Decimal(1).scaleb(-places)), "f")
    except InvalidOperation:
        text = format(Decimal(str(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def _decimals_from_step(step: float) -> int:
    if not (math.isfinite(step) and step > 0):
        return 6
    exponent = Decimal(str(step)).normalize().as_tuple().exponent
    return min(12, max(0, -int(exponent)))
