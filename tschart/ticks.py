from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timezone, tzinfo
import logging
import math
from zoneinfo import ZoneInfo

from tschart.errors import ConfigurationError

LOGGER = logging.getLogger(__name__)

SECOND = 1
MINUTE = 60
HOUR = 60 * MINUTE
DAY = 24 * HOUR

MAX_X_STEP_LABELS = 1000


@dataclass(frozen=True)
class TickSpec:
    """One row of the X-axis table.

    ``seconds`` is the density threshold in seconds per pixel; ``max_interval``
    is the longest total time range (seconds) the row is meant for.
    """

    seconds: float
    minor_grid_unit: int
    minor_grid_step: float
    major_grid_unit: int
    major_grid_step: float
    label_unit: int
    label_step: float
    format: str
    max_interval: int

    @property
    def minor_grid_interval(self) -> float:
        return self.minor_grid_unit * self.minor_grid_step

    @property
    def major_grid_interval(self) -> float:
        return self.major_grid_unit * self.major_grid_step

    @property
    def label_interval(self) -> float:
        return self.label_unit * self.label_step


def _row(
    seconds: float,
    minor: tuple[int, float],
    major: tuple[int, float],
    label: tuple[int, float],
    fmt: str,
    max_interval: int,
) -> TickSpec:
    return TickSpec(
        seconds=seconds,
        minor_grid_unit=minor[0],
        minor_grid_step=minor[1],
        major_grid_unit=major[0],
        major_grid_step=major[1],
        label_unit=label[0],
        label_step=label[1],
        format=fmt,
        max_interval=max_interval,
    )


# Ordered by ascending density threshold.
X_AXIS_TICKS: tuple[TickSpec, ...] = (
    _row(0.00, (SECOND, 5), (MINUTE, 1), (SECOND, 5), "%H:%M:%S", 10 * MINUTE),
    _row(0.07, (SECOND, 10), (MINUTE, 1), (SECOND, 10), "%H:%M:%S", 20 * MINUTE),
    _row(0.14, (SECOND, 15), (MINUTE, 1), (SECOND, 15), "%H:%M:%S", 30 * MINUTE),
    _row(0.27, (SECOND, 30), (MINUTE, 2), (MINUTE, 1), "%H:%M", 2 * HOUR),
    _row(0.5, (MINUTE, 1), (MINUTE, 2), (MINUTE, 1), "%H:%M", 2 * HOUR),
    _row(1.2, (MINUTE, 1), (MINUTE, 4), (MINUTE, 2), "%H:%M", 3 * HOUR),
    _row(2, (MINUTE, 1), (MINUTE, 10), (MINUTE, 5), "%H:%M", 6 * HOUR),
    _row(5, (MINUTE, 2), (MINUTE, 10), (MINUTE, 10), "%H:%M", 12 * HOUR),
    _row(10, (MINUTE, 5), (MINUTE, 20), (MINUTE, 20), "%H:%M", 1 * DAY),
    _row(30, (MINUTE, 10), (HOUR, 1), (HOUR, 1), "%H:%M", 2 * DAY),
    _row(60, (MINUTE, 30), (HOUR, 2), (HOUR, 2), "%H:%M", 2 * DAY),
    _row(100, (HOUR, 2), (HOUR, 4), (HOUR, 4), "%a %I%p", 2 * DAY),
    _row(255, (HOUR, 6), (HOUR, 12), (HOUR, 12), "%a %I%p", 10 * DAY),
    _row(600, (HOUR, 6), (DAY, 1), (DAY, 1), "%m/%d", 14 * DAY),
    _row(1200, (HOUR, 12), (DAY, 1), (DAY, 1), "%m/%d", 365 * DAY),
    _row(2000, (DAY, 1), (DAY, 2), (DAY, 2), "%m/%d", 365 * DAY),
    _row(4000, (DAY, 2), (DAY, 4), (DAY, 4), "%m/%d", 365 * DAY),
    _row(8000, (DAY, 3.5), (DAY, 7), (DAY, 7), "%m/%d", 365 * DAY),
    _row(16000, (DAY, 7), (DAY, 14), (DAY, 14), "%m/%d", 365 * DAY),
    _row(32000, (DAY, 15), (DAY, 30), (DAY, 30), "%m/%d", 365 * DAY),
    _row(64000, (DAY, 30), (DAY, 60), (DAY, 60), "%m/%d %Y", 365 * DAY),
    _row(100000, (DAY, 60), (DAY, 120), (DAY, 120), "%m/%d %Y", 365 * DAY),
    _row(120000, (DAY, 120), (DAY, 240), (DAY, 240), "%m/%d %Y", 365 * DAY),
)


def select_x_axis_ticks(
    time_range: float,
    pixel_width: float,
    table: tuple[TickSpec, ...] = X_AXIS_TICKS,
) -> TickSpec:
    """Pick the first row fine enough for the pixel density that also covers the range."""

    if pixel_width <= 0:
        raise ValueError("pixel_width must be > 0")
    if not table:
        raise ValueError("tick table is empty")
    density = float(time_range) / float(pixel_width)
    for spec in table:
        if spec.seconds >= density and spec.max_interval >= time_range:
            return spec
    return table[-1]


@dataclass(frozen=True)
class XAxisScale:
    start: float
    end: float
    pixel_width: float
    tick: TickSpec
    tz: str = "UTC"

    @property
    def time_range(self) -> float:
        return self.end - self.start

    @property
    def density(self) -> float:
        return self.time_range / self.pixel_width

    def label_times(self) -> list[float]:
        return _aligned_times(self.start, self.end, self.tick.label_interval)

    def major_grid_times(self) -> list[float]:
        return _aligned_times(self.start, self.end, self.tick.major_grid_interval)

    def minor_grid_times(self) -> list[float]:
        return _aligned_times(self.start, self.end, self.tick.minor_grid_interval)

    def format_label(self, timestamp: float) -> str:
        return datetime.fromtimestamp(timestamp, tz=_zone(self.tz)).strftime(self.tick.format)

    def labels(self) -> list[str]:
        return [self.format_label(t) for t in self.label_times()]


def compute_x_axis(
    start: float,
    end: float,
    pixel_width: float,
    *,
    x_min: float | None = None,
    x_max: float | None = None,
    x_step: float | None = None,
    tz: str = "UTC",
) -> XAxisScale:
    if x_min is not None or x_max is not None:
        try:
            _check_x_bounds(start, end, x_min, x_max)
        except ConfigurationError as exc:
            LOGGER.warning("ignoring x-axis bounds override: %s", exc)
            x_min = x_max = None
    if x_min is not None:
        start = float(x_min)
    if x_max is not None:
        end = float(x_max)
    tick = select_x_axis_ticks(end - start, pixel_width)
    if x_step is not None and not (x_step > 0 and (end - start) / x_step <= MAX_X_STEP_LABELS):
        LOGGER.warning("ignoring x-axis step override %r", x_step)
        x_step = None
    if x_step is not None:
        tick = replace(tick, label_unit=SECOND, label_step=x_step, major_grid_unit=SECOND, major_grid_step=x_step)
    return XAxisScale(start=float(start), end=float(end), pixel_width=float(pixel_width), tick=tick, tz=tz)


def _check_x_bounds(start: float, end: float, x_min: float | None, x_max: float | None) -> None:
    lo = start if x_min is None else x_min
    hi = end if x_max is None else x_max
    if not (math.isfinite(lo) and math.isfinite(hi)):
        raise ConfigurationError(f"non-finite bound in [{lo!r}, {hi!r}]")
    if hi <= lo:
        raise ConfigurationError(f"x_min {lo:g} must be < x_max {hi:g}")


def _aligned_times(start: float, end: float, interval: float) -> list[float]:
    if interval <= 0 or end < start:
        return []
    first = math.ceil(start / interval) * interval
    count = int(math.floor((end - first) / interval)) + 1
    return [first + i * interval for i in range(max(0, count))]


def _zone(name: str) -> tzinfo:
    if name.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(name)
