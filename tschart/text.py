from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Literal, Protocol

from tschart.config import FontSpec

HAlign = Literal["left", "center", "right"]
VAlign = Literal["top", "center", "bottom", "baseline"]


@dataclass(frozen=True)
class TextExtents:
    width: float
    height: float


@dataclass(frozen=True)
class FontExtents:
    ascent: float
    descent: float
    height: float


class TextMeasurer(Protocol):
    def measure_text(self, text: str, font: FontSpec) -> TextExtents:
        ...

    def font_metrics(self, font: FontSpec) -> FontExtents:
        ...


class Canvas(TextMeasurer, Protocol):
    """Drawing capability the layout result is handed to."""

    def set_color(self, color: tuple[int, int, int, int]) -> None:
        ...

    def fill_rect(self, x: float, y: float, width: float, height: float) -> None:
        ...

    def stroke_rect(self, x: float, y: float, width: float, height: float) -> None:
        ...

    def draw_text_at_anchor(
        self,
        text: str,
        x: float,
        y: float,
        font: FontSpec,
        *,
        align: HAlign = "left",
        valign: VAlign = "top",
        rotation: float = 0.0,
    ) -> None:
        ...

    def push_transform(self) -> None:
        ...

    def pop_transform(self) -> None:
        ...


@dataclass(frozen=True)
class TextAnchor:
    """Offsets that move a requested anchor point to the text fill origin.

    ``dx``/``dy`` move the pen before rotation; ``h_offset`` is applied along the
    rotated baseline. ``fill_dx``/``fill_dy`` combine both in canvas space.
    """

    dx: float
    dy: float
    h_offset: float
    v_offset: float
    angle: float

    @property
    def fill_dx(self) -> float:
        return self.dx - self.h_offset * math.cos(self.angle)

    @property
    def fill_dy(self) -> float:
        return self.dy - self.h_offset * math.sin(self.angle)

    def fill_point(self, x: float, y: float) -> tuple[float, float]:
        return (x + self.fill_dx, y + self.fill_dy)


def horizontal_offset(text_extents: TextExtents, align: HAlign) -> float:
    if align == "left":
        return 0.0
    if align == "center":
        return text_extents.width / 2.0
    if align == "right":
        return text_extents.width
    raise ValueError(f"unknown horizontal alignment: {align!r}")


def vertical_offset(font_extents: FontExtents, valign: VAlign) -> float:
    if valign == "top":
        return font_extents.ascent
    if valign == "center":
        return font_extents.height / 2.0 - font_extents.descent / 2.0
    if valign == "bottom":
        return -font_extents.descent
    if valign == "baseline":
        return 0.0
    raise ValueError(f"unknown vertical alignment: {valign!r}")


def anchor(
    text_extents: TextExtents,
    font_extents: FontExtents,
    align: HAlign,
    valign: VAlign,
    rotation_degrees: float = 0.0,
) -> TextAnchor:
    h = horizontal_offset(text_extents, align)
    v = vertical_offset(font_extents, valign)
    angle = math.radians(rotation_degrees)
    return TextAnchor(
        dx=math.sin(angle) * -v,
        dy=math.cos(angle) * v,
        h_offset=h,
        v_offset=v,
        angle=angle,
    )


@dataclass(frozen=True)
class TextPlacement:
    text: str
    x: float
    y: float
    font: FontSpec
    align: HAlign = "left"
    valign: VAlign = "top"
    rotation: float = 0.0
    color: str | None = None

    def resolve(self, measurer: TextMeasurer) -> tuple[float, float]:
        """Canvas point the text baseline starts from."""
        extents = measurer.measure_text(self.text, self.font)
        metrics = measurer.font_metrics(self.font)
        return anchor(extents, metrics, self.align, self.valign, self.rotation).fill_point(self.x, self.y)
