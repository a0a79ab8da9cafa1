from __future__ import annotations

import math

import numpy as np

from tschart.config import FontSpec
from tschart.raster.draw_text import FontMeasurer, render_text_mask, rotate_mask
from tschart.text import FontExtents, HAlign, TextExtents, VAlign, anchor


RGBA = tuple[int, int, int, int]


def new_canvas(width: int, height: int, color: RGBA = (0, 0, 0, 255)) -> np.ndarray:
    canvas = np.zeros((height, width, 4), dtype=np.uint8)
    canvas[:, :, 0] = color[0]
    canvas[:, :, 1] = color[1]
    canvas[:, :, 2] = color[2]
    canvas[:, :, 3] = color[3]
    return canvas


def blend_rect(dst: np.ndarray, x0: int, y0: int, x1: int, y1: int, color: RGBA) -> None:
    xa = max(0, min(x0, x1))
    xb = min(dst.shape[1], max(x0, x1))
    ya = max(0, min(y0, y1))
    yb = min(dst.shape[0], max(y0, y1))
    if xa >= xb or ya >= yb:
        return
    patch = dst[ya:yb, xa:xb]
    a = color[3] / 255.0
    inv = 1.0 - a
    patch[:, :, :3] = (np.asarray(color[0:3], dtype=np.float32) * a + patch[:, :, :3].astype(np.float32) * inv).astype(np.uint8)
    patch[:, :, 3] = 255


def blend_mask(dst: np.ndarray, x: int, y: int, mask: np.ndarray, color: RGBA) -> None:
    h, w = mask.shape
    x0 = max(0, x)
    y0 = max(0, y)
    x1 = min(dst.shape[1], x + w)
    y1 = min(dst.shape[0], y + h)
    if x1 <= x0 or y1 <= y0:
        return

    cov = mask[y0 - y : y1 - y, x0 - x : x1 - x].astype(np.float32) / 255.0
    src_alpha = (color[3] / 255.0) * cov
    if not np.any(src_alpha > 0):
        return
    patch = dst[y0:y1, x0:x1]
    dst_rgb = patch[:, :, :3].astype(np.float32)
    dst_alpha = patch[:, :, 3].astype(np.float32) / 255.0
    src_rgb = np.asarray(color[:3], dtype=np.float32).reshape(1, 1, 3)
    out_alpha = src_alpha + dst_alpha * (1.0 - src_alpha)
    out_rgb_num = src_rgb * src_alpha[:, :, None] + dst_rgb * dst_alpha[:, :, None] * (1.0 - src_alpha[:, :, None])
    safe_alpha = np.where(out_alpha > 1e-6, out_alpha, 1.0)
    patch[:, :, :3] = np.clip(out_rgb_num / safe_alpha[:, :, None], 0, 255).astype(np.uint8)
    patch[:, :, 3] = np.clip(out_alpha * 255.0, 0, 255).astype(np.uint8)


class RasterCanvas:
    """RGBA pixel buffer implementing the Canvas drawing and measurement calls.

    The transform is a translation stack; text rotation is applied per call and
    never persists.
    """

    def __init__(self, width: int, height: int, *, background: RGBA = (255, 255, 255, 255)) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("width and height must be > 0")
        self.pixels = new_canvas(width, height, color=background)
        self.color: RGBA = (0, 0, 0, 255)
        self.origin: tuple[float, float] = (0.0, 0.0)
        self._saved: list[tuple[float, float]] = []
        self._measurer = FontMeasurer()

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    def measure_text(self, text: str, font: FontSpec) -> TextExtents:
        return self._measurer.measure_text(text, font)

    def font_metrics(self, font: FontSpec) -> FontExtents:
        return self._measurer.font_metrics(font)

    def set_color(self, color: RGBA) -> None:
        self.color = color

    def push_transform(self) -> None:
        self._saved.append(self.origin)

    def pop_transform(self) -> None:
        if not self._saved:
            raise RuntimeError("pop_transform without matching push_transform")
        self.origin = self._saved.pop()

    def translate(self, dx: float, dy: float) -> None:
        ox, oy = self.origin
        self.origin = (ox + dx, oy + dy)

    def fill_rect(self, x: float, y: float, width: float, height: float) -> None:
        x0, y0 = self._to_pixels(x, y)
        x1, y1 = self._to_pixels(x + width, y + height)
        blend_rect(self.pixels, x0, y0, x1, y1, self.color)

    def stroke_rect(self, x: float, y: float, width: float, height: float) -> None:
        x0, y0 = self._to_pixels(x, y)
        x1, y1 = self._to_pixels(x + width, y + height)
        blend_rect(self.pixels, x0, y0, x1, y0 + 1, self.color)
        blend_rect(self.pixels, x0, y1 - 1, x1, y1, self.color)
        blend_rect(self.pixels, x0, y0 + 1, x0 + 1, y1 - 1, self.color)
        blend_rect(self.pixels, x1 - 1, y0 + 1, x1, y1 - 1, self.color)

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
        if not text:
            return
        offsets = anchor(self.measure_text(text, font), self.font_metrics(font), align, valign, rotation)
        self.push_transform()
        try:
            self.translate(x + offsets.dx, y + offsets.dy)
            # Move along the rotated baseline.
            self.translate(-offsets.h_offset * math.cos(offsets.angle), -offsets.h_offset * math.sin(offsets.angle))
            mask, origin = render_text_mask(text, font)
            mask, (col, row) = rotate_mask(mask, origin, rotation)
            px, py = self._to_pixels(0.0, 0.0)
            blend_mask(self.pixels, px - col, py - row, mask, self.color)
        finally:
            self.pop_transform()

    def _to_pixels(self, x: float, y: float) -> tuple[int, int]:
        ox, oy = self.origin
        return int(round(ox + x)), int(round(oy + y))
