from __future__ import annotations

from functools import lru_cache
from pathlib import Path

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from tschart.config import FontSpec
from tschart.text import FontExtents, TextExtents


SANS_FONT_FALLBACK_PATTERNS = (
    "dejavusans",
    "dejavu sans",
    "liberationsans",
    "arial",
    "helvetica",
    "freesans",
)
FONT_DIRS = (
    Path.home() / "Library" / "Fonts",
    Path("/Library/Fonts"),
    Path("/System/Library/Fonts"),
    Path("/System/Library/Fonts/Supplemental"),
    Path("/usr/share/fonts"),
    Path("/usr/local/share/fonts"),
)

PILFont = ImageFont.FreeTypeFont | ImageFont.ImageFont


class FontMeasurer:
    """Text measurement backed by Pillow font metrics."""

    def measure_text(self, text: str, font: FontSpec) -> TextExtents:
        return text_extents(text, font)

    def font_metrics(self, font: FontSpec) -> FontExtents:
        return font_extents(font)


def text_extents(text: str, font: FontSpec) -> TextExtents:
    if not text:
        return TextExtents(width=0.0, height=0.0)
    left, top, right, bottom = load_font(font).getbbox(text)
    return TextExtents(width=float(max(0, right - left)), height=float(max(0, bottom - top)))


@lru_cache(maxsize=64)
def font_extents(font: FontSpec) -> FontExtents:
    pil = load_font(font)
    if isinstance(pil, ImageFont.FreeTypeFont):
        ascent, descent = pil.getmetrics()
    else:
        _, top, _, bottom = pil.getbbox("Ag")
        ascent, descent = bottom - top, 0
    return FontExtents(ascent=float(ascent), descent=float(descent), height=float(ascent + descent))


@lru_cache(maxsize=128)
def render_text_mask(text: str, font: FontSpec) -> tuple[np.ndarray, tuple[int, int]]:
    """Coverage mask for ``text`` plus the (column, row) of its baseline origin."""

    pil = load_font(font)
    if not text:
        return np.zeros((1, 1), dtype=np.uint8), (0, 0)
    if isinstance(pil, ImageFont.FreeTypeFont):
        left, top, right, bottom = pil.getbbox(text, anchor="ls")
        origin = (-left, -top)
        kwargs = {"anchor": "ls"}
    else:
        left, top, right, bottom = pil.getbbox(text)
        origin = (-left, bottom - top)
        kwargs = {}
    width = max(1, int(right - left))
    height = max(1, int(bottom - top))
    image = Image.new("L", (width, height), 0)
    draw = ImageDraw.Draw(image)
    draw.text((-left, -top), text, fill=255, font=pil, **kwargs)
    return np.asarray(image, dtype=np.uint8), (int(origin[0]), int(origin[1]))


def rotate_mask(mask: np.ndarray, origin: tuple[int, int], rotation: float) -> tuple[np.ndarray, tuple[int, int]]:
    """Rotate clockwise on screen by a multiple of 90 degrees, tracking the origin."""

    turns = quarter_turns(rotation)
    h, w = mask.shape
    col, row = origin
    if turns == 0:
        return mask, origin
    # np.rot90 turns counter-clockwise; a clockwise quarter turn is k=3.
    k = (-turns) % 4
    rotated = np.rot90(mask, k=k)
    if k == 1:
        return rotated, (row, w - 1 - col)
    if k == 2:
        return rotated, (w - 1 - col, h - 1 - row)
    return rotated, (h - 1 - row, col)


def quarter_turns(rotation: float) -> int:
    if rotation % 90 != 0:
        raise ValueError("rotation must be a multiple of 90 degrees")
    return int(rotation // 90) % 4


@lru_cache(maxsize=64)
def load_font(font: FontSpec) -> PILFont:
    size = max(1, int(round(font.size)))
    font_path = _resolve_font_path(font.name, font.bold, font.italic)
    if font_path is not None:
        try:
            return ImageFont.truetype(str(font_path), size=size)
        except OSError:
            pass
    return ImageFont.load_default(size=size)


@lru_cache(maxsize=32)
def _resolve_font_path(name: str, bold: bool, italic: bool) -> Path | None:
    wanted = name.strip().lower()
    patterns = ((wanted,) if wanted and wanted != "sans" else ()) + SANS_FONT_FALLBACK_PATTERNS
    style = ("bold" if bold else "") + ("oblique" if italic else "")

    candidates: list[Path] = []
    for base in FONT_DIRS:
        if not base.exists():
            continue
        for ext in ("*.ttf", "*.otf", "*.ttc"):
            candidates.extend(sorted(base.rglob(ext)))

    for pattern in patterns:
        p = pattern.replace(" ", "")
        for path in candidates:
            stem = path.stem.lower().replace(" ", "").replace("-", "")
            if not stem.startswith(p):
                continue
            suffix = stem[len(p) :]
            if style and suffix.replace("italic", "oblique") == style:
                return path
            if not style and suffix in {"", "regular", "book"}:
                return path
    return None
