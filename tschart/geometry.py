from __future__ import annotations

from dataclasses import dataclass

from tschart.errors import LayoutGeometryError


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class Area:
    """Remaining plot region. Every reservation returns a smaller copy."""

    xmin: float
    xmax: float
    ymin: float
    ymax: float

    @classmethod
    def from_canvas(cls, width: float, height: float, margin: float) -> "Area":
        area = cls(xmin=float(margin), xmax=float(width - margin), ymin=float(margin), ymax=float(height - margin))
        area.check("init")
        return area

    @property
    def width(self) -> float:
        return self.xmax - self.xmin

    @property
    def height(self) -> float:
        return self.ymax - self.ymin

    def check(self, stage: str) -> None:
        if not self.xmax > self.xmin:
            raise LayoutGeometryError(stage, f"plot area has no width (xmin={self.xmin:g}, xmax={self.xmax:g})")
        if not self.ymax > self.ymin:
            raise LayoutGeometryError(stage, f"plot area has no height (ymin={self.ymin:g}, ymax={self.ymax:g})")

    def shrink(
        self,
        *,
        top: float = 0.0,
        bottom: float = 0.0,
        left: float = 0.0,
        right: float = 0.0,
        stage: str = "reserve",
    ) -> "Area":
        if min(top, bottom, left, right) < 0:
            raise ValueError("reservations must be >= 0")
        out = Area(
            xmin=self.xmin + left,
            xmax=self.xmax - right,
            ymin=self.ymin + top,
            ymax=self.ymax - bottom,
        )
        out.check(stage)
        return out

    def with_x(self, *, xmin: float | None = None, xmax: float | None = None, stage: str = "reserve") -> "Area":
        # Only ever moves an edge inward.
        new_xmin = self.xmin if xmin is None else max(self.xmin, float(xmin))
        new_xmax = self.xmax if xmax is None else min(self.xmax, float(xmax))
        out = Area(xmin=new_xmin, xmax=new_xmax, ymin=self.ymin, ymax=self.ymax)
        out.check(stage)
        return out
