from __future__ import annotations

import re
from typing import Iterable

from tschart.config import RenderConfig
from tschart.series import Series

RGBA = tuple[int, int, int, int]

# Process-wide lookup; never mutated after import.
COLOR_ALIASES: dict[str, RGBA] = {
    "black": (0, 0, 0, 255),
    "white": (255, 255, 255, 255),
    "blue": (100, 100, 255, 255),
    "green": (0, 200, 0, 255),
    "red": (200, 0, 50, 255),
    "yellow": (255, 255, 0, 255),
    "orange": (255, 165, 0, 255),
    "purple": (200, 100, 255, 255),
    "brown": (150, 100, 50, 255),
    "cyan": (0, 255, 255, 255),
    "aqua": (0, 150, 150, 255),
    "gray": (175, 175, 175, 255),
    "grey": (175, 175, 175, 255),
    "magenta": (255, 0, 255, 255),
    "pink": (255, 100, 100, 255),
    "gold": (200, 200, 0, 255),
    "rose": (200, 150, 200, 255),
    "darkblue": (0, 0, 255, 255),
    "darkgreen": (0, 255, 0, 255),
    "darkred": (255, 0, 0, 255),
    "darkgray": (111, 111, 111, 255),
    "darkgrey": (111, 111, 111, 255),
}

SWATCH_BORDER_COLOR = "darkgray"

_HEX_COLOR = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")


def parse_color(color: str) -> RGBA:
    """Resolve a color alias or ``#rgb``/``#rrggbb``/``#rrggbbaa`` string.

    Anything else resolves to opaque black.
    """

    key = color.strip()
    alias = COLOR_ALIASES.get(key.lower())
    if alias is not None:
        return alias
    match = _HEX_COLOR.match(key)
    if match is None:
        return (0, 0, 0, 255)
    digits = match.group(1)
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    r = int(digits[0:2], 16)
    g = int(digits[2:4], 16)
    b = int(digits[4:6], 16)
    a = int(digits[6:8], 16) if len(digits) == 8 else 255
    return (r, g, b, a)


def is_dual_axis(series: Iterable[Series]) -> bool:
    return any(s.is_secondary for s in series)


def assign_colors(series: list[Series], config: RenderConfig, *, dual_axis: bool | None = None) -> None:
    """Give every series a color, line width and dash flag in place.

    Series are walked in input order. In dual-axis mode the per-side style
    overrides apply first. A series that already carries a color keeps it and
    does not advance the palette cursor.
    """

    if dual_axis is None:
        dual_axis = is_dual_axis(series)
    palette = config.palette
    cursor = 0
    for s in series:
        if dual_axis:
            _apply_side_overrides(s, config)
        if s.line_width is None:
            s.line_width = config.line_width
        if s.dashed is None:
            s.dashed = config.dashed
        if s.color:
            continue
        s.color = palette[cursor]
        cursor = (cursor + 1) % len(palette)


def _apply_side_overrides(s: Series, config: RenderConfig) -> None:
    if s.is_secondary:
        width, dashed, color = config.right_width, config.right_dashed, config.right_color
    else:
        width, dashed, color = config.left_width, config.left_dashed, config.left_color
    if width is not None:
        s.line_width = width
    if dashed is not None:
        s.dashed = dashed
    if color:
        s.color = color
