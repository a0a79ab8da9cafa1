from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Sequence

import numpy as np

from tschart.errors import InconsistentSeriesError


AxisSide = Literal["primary", "secondary"]


@dataclass
class Series:
    """One named time series plus the attributes filled in during layout."""

    name: str
    start_time: int
    stop_time: int
    step_time: int
    values: np.ndarray
    absent: np.ndarray | None = None
    axis_side: AxisSide = "primary"
    draw_as_infinite: bool = False
    color: str | None = None
    line_width: float | None = None
    dashed: bool | None = None

    def __post_init__(self) -> None:
        if self.axis_side not in {"primary", "secondary"}:
            raise InconsistentSeriesError(f"{self.name}: unknown axis side {self.axis_side!r}")
        values = np.asarray(self.values, dtype=np.float64)
        if values.ndim != 1:
            raise InconsistentSeriesError(f"{self.name}: values must be 1-D")
        if self.absent is None:
            absent = np.zeros(values.shape, dtype=bool)
        else:
            absent = np.asarray(self.absent, dtype=bool)
            if absent.ndim != 1:
                raise InconsistentSeriesError(f"{self.name}: absent flags must be 1-D")
        if absent.shape != values.shape:
            raise InconsistentSeriesError(
                f"{self.name}: values/absent length mismatch: {values.size} != {absent.size}"
            )
        self.values = values
        self.absent = absent

    @classmethod
    def from_points(
        cls,
        name: str,
        points: Sequence[float | None],
        *,
        start_time: int = 0,
        step_time: int = 60,
        **kwargs: Any,
    ) -> "Series":
        # None marks a gap.
        values = np.asarray([np.nan if v is None else float(v) for v in points], dtype=np.float64)
        absent = np.asarray([v is None for v in points], dtype=bool)
        return cls(
            name=name,
            start_time=int(start_time),
            stop_time=int(start_time + step_time * len(points)),
            step_time=int(step_time),
            values=values,
            absent=absent,
            **kwargs,
        )

    @property
    def is_secondary(self) -> bool:
        return self.axis_side == "secondary"

    @property
    def point_count(self) -> int:
        return int(self.values.size)

    @property
    def present_mask(self) -> np.ndarray:
        assert self.absent is not None
        return ~self.absent & np.isfinite(self.values)

    @property
    def has_absent(self) -> bool:
        return bool(np.any(~self.present_mask))

    def present_values(self) -> np.ndarray:
        return self.values[self.present_mask]

    def filled_values(self) -> np.ndarray:
        """Values with gaps contributing zero."""
        return np.where(self.present_mask, self.values, 0.0)


@dataclass(frozen=True)
class SeriesStyle:
    name: str
    color: str
    rgba: tuple[int, int, int, int]
    line_width: float
    dashed: bool
    axis_side: AxisSide = "primary"
