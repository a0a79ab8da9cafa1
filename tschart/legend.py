from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from typing import Literal, Sequence

from tschart.config import RenderConfig
from tschart.geometry import Area, Rect
from tschart.palette import is_dual_axis
from tschart.series import AxisSide, Series
from tschart.text import TextMeasurer, TextPlacement

LOGGER = logging.getLogger(__name__)

LEGEND_PADDING = 5
DUAL_COLUMN_SLACK = 50

LegendMode = Literal["single", "dual"]


@dataclass(frozen=True)
class LegendEntry:
    name: str
    color: str
    axis_side: AxisSide = "primary"


@dataclass(frozen=True)
class LegendPlacement:
    entry: LegendEntry
    swatch: Rect
    label: TextPlacement


@dataclass(frozen=True)
class LegendResult:
    entries: tuple[LegendEntry, ...]
    placements: tuple[LegendPlacement, ...]
    mode: LegendMode
    columns: int
    rows: int
    label_width: float
    reserved_height: float
    area: Area


def build_legend_entries(series: Sequence[Series], *, unique: bool = False) -> list[LegendEntry]:
    entries: list[LegendEntry] = []
    seen: set[str] = set()
    for s in series:
        if unique:
            if s.name in seen:
                continue
            seen.add(s.name)
        entries.append(LegendEntry(name=s.name, color=s.color or "", axis_side=s.axis_side))
    return entries


def layout_legend(
    series: Sequence[Series],
    config: RenderConfig,
    area: Area,
    measurer: TextMeasurer,
    *,
    dual_axis: bool | None = None,
) -> LegendResult:
    """Lay out one swatch+label per legend entry below the plot.

    Returns the placements and a copy of ``area`` with the legend rows
    reserved from the bottom.
    """

    if dual_axis is None:
        dual_axis = is_dual_axis(series)
    entries = build_legend_entries(series, unique=config.unique_legend)
    font = config.font
    metrics = measurer.font_metrics(font)
    box_size = metrics.height - 1
    line_height = metrics.height + 1
    padding = LEGEND_PADDING

    if not entries:
        return LegendResult(
            entries=(),
            placements=(),
            mode="single",
            columns=0,
            rows=0,
            label_width=0.0,
            reserved_height=0.0,
            area=area,
        )

    widest = max(entries, key=lambda e: measurer.measure_text(e.name, font).width).name
    name_width = measurer.measure_text(widest, font).width
    label_width = name_width + 2 * (box_size + padding)

    dual_columns = False
    if dual_axis:
        pair_width = measurer.measure_text(widest + " " + widest, font).width + 2 * (metrics.height + padding)
        dual_columns = pair_width + DUAL_COLUMN_SLACK < config.width

    if dual_columns:
        left = [e for e in entries if e.axis_side == "primary"]
        right = [e for e in entries if e.axis_side == "secondary"]
        columns = max(1, math.floor(math.floor((config.width - area.xmin) / label_width) / 2.0))
        rows = max(1, math.ceil(max(len(left), len(right)) / columns))
    else:
        columns = max(1, math.floor(config.width / label_width))
        rows = math.ceil(len(entries) / columns)

    reserved = rows * (line_height + padding)
    new_area = area.shrink(bottom=reserved, stage="legend_reserved")
    y0 = new_area.ymax + 2 * padding
    LOGGER.debug(
        "legend: %d entries, mode=%s columns=%d rows=%d reserved=%.1f",
        len(entries),
        "dual" if dual_columns else "single",
        columns,
        rows,
        reserved,
    )

    placements: list[LegendPlacement] = []
    if dual_columns:
        x, y = new_area.xmin, y0
        x_right, y_right = new_area.xmax, y0
        n_left = n_right = 0
        for entry in entries:
            if entry.axis_side == "secondary":
                placements.append(_right_aligned(entry, x_right, y_right, box_size, padding, config))
                n_right += 1
                x_right -= label_width
                if n_right % columns == 0:
                    x_right = new_area.xmax
                    y_right += line_height
            else:
                placements.append(_left_aligned(entry, x, y, box_size, padding, config))
                n_left += 1
                x += label_width
                if n_left % columns == 0:
                    x = new_area.xmin
                    y += line_height
    else:
        x, y = new_area.xmin, y0
        for i, entry in enumerate(entries):
            if entry.axis_side == "secondary":
                # Label first, swatch at the right edge of the cell.
                placements.append(_right_aligned(entry, x + label_width, y, box_size, padding, config))
            else:
                placements.append(_left_aligned(entry, x, y, box_size, padding, config))
            x += label_width
            if (i + 1) % columns == 0:
                x = new_area.xmin
                y += line_height

    return LegendResult(
        entries=tuple(entries),
        placements=tuple(placements),
        mode="dual" if dual_columns else "single",
        columns=columns,
        rows=rows,
        label_width=label_width,
        reserved_height=reserved,
        area=new_area,
    )


def _left_aligned(entry: LegendEntry, x: float, y: float, box_size: float, padding: int, config: RenderConfig) -> LegendPlacement:
    return LegendPlacement(
        entry=entry,
        swatch=Rect(x, y, box_size, box_size),
        label=TextPlacement(
            entry.name,
            x + box_size + padding,
            y,
            config.font,
            align="left",
            valign="top",
            color=config.fg_color,
        ),
    )


def _right_aligned(entry: LegendEntry, x: float, y: float, box_size: float, padding: int, config: RenderConfig) -> LegendPlacement:
    return LegendPlacement(
        entry=entry,
        swatch=Rect(x - box_size, y, box_size, box_size),
        label=TextPlacement(
            entry.name,
            x - box_size - padding,
            y,
            config.font,
            align="right",
            valign="top",
            color=config.fg_color,
        ),
    )
