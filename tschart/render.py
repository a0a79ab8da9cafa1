from __future__ import annotations

import logging

from tschart.config import RenderConfig
from tschart.layout import ChartLayout, NoDataLayout
from tschart.palette import SWATCH_BORDER_COLOR, parse_color
from tschart.scales import YAxisScale
from tschart.text import Canvas, TextPlacement

LOGGER = logging.getLogger(__name__)

Y_LABEL_GAP = 2.0


def draw_layout(canvas: Canvas, layout: ChartLayout | NoDataLayout, config: RenderConfig) -> None:
    """Paint a converged layout; background is the canvas' own fill."""

    if isinstance(layout, NoDataLayout):
        draw_placement(canvas, layout.placement, config)
        return

    for placement in layout.titles:
        draw_placement(canvas, placement, config)

    if layout.legend is not None:
        border = parse_color(SWATCH_BORDER_COLOR)
        for item in layout.legend.placements:
            swatch = item.swatch
            canvas.set_color(parse_color(item.entry.color))
            canvas.fill_rect(swatch.x, swatch.y, swatch.width, swatch.height)
            canvas.set_color(border)
            canvas.stroke_rect(swatch.x, swatch.y, swatch.width, swatch.height)
            draw_placement(canvas, item.label, config)

    if not config.grid_hidden:
        draw_grid(canvas, layout, config)

    if config.axes_hidden:
        return

    area = layout.area
    canvas.set_color(parse_color(config.fg_color))
    canvas.stroke_rect(area.xmin, area.ymin, area.width, area.height)

    if not config.y_axis_hidden:
        if layout.dual_axis:
            _draw_y_labels(canvas, layout, layout.y_axis, config, right=False)
            assert layout.y_axis_right is not None
            _draw_y_labels(canvas, layout, layout.y_axis_right, config, right=True)
        else:
            _draw_y_labels(canvas, layout, layout.y_axis, config, right=layout.y_axis_side == "right")

    x_axis = layout.x_axis
    span = x_axis.end - x_axis.start
    if span <= 0:
        return
    for ts, label in zip(x_axis.label_times(), x_axis.labels()):
        x = area.xmin + (ts - x_axis.start) / span * area.width
        draw_placement(
            canvas,
            TextPlacement(label, x, area.ymax + Y_LABEL_GAP, config.font, align="center", valign="top"),
            config,
        )
    LOGGER.debug("drew layout: %d titles, area %.1fx%.1f", len(layout.titles), area.width, area.height)


def draw_grid(canvas: Canvas, layout: ChartLayout, config: RenderConfig) -> None:
    """One-pixel minor and major time lines, then a major line per Y tick."""

    area = layout.area
    x_axis = layout.x_axis
    span = x_axis.end - x_axis.start
    if span > 0:
        for color, times in (
            (config.minor_line_color, x_axis.minor_grid_times()),
            (config.major_line_color, x_axis.major_grid_times()),
        ):
            canvas.set_color(parse_color(color))
            for ts in times:
                canvas.fill_rect(area.xmin + (ts - x_axis.start) / span * area.width, area.ymin, 1, area.height)

    scale = layout.y_axis
    y_span = scale.y_top - scale.y_bottom
    if y_span > 0:
        canvas.set_color(parse_color(config.major_line_color))
        for tick in scale.ticks():
            canvas.fill_rect(area.xmin, area.ymax - (float(tick) - scale.y_bottom) / y_span * area.height, area.width, 1)


def draw_placement(canvas: Canvas, placement: TextPlacement, config: RenderConfig) -> None:
    canvas.set_color(parse_color(placement.color or config.fg_color))
    canvas.draw_text_at_anchor(
        placement.text,
        placement.x,
        placement.y,
        placement.font,
        align=placement.align,
        valign=placement.valign,
        rotation=placement.rotation,
    )


def _draw_y_labels(canvas: Canvas, layout: ChartLayout, scale: YAxisScale, config: RenderConfig, *, right: bool) -> None:
    area = layout.area
    span = scale.y_top - scale.y_bottom
    if span <= 0:
        return
    for tick, label in zip(scale.ticks(), scale.labels()):
        y = area.ymax - (float(tick) - scale.y_bottom) / span * area.height
        if right:
            placement = TextPlacement(label, area.xmax + Y_LABEL_GAP, y, config.font, align="left", valign="center")
        else:
            placement = TextPlacement(label, area.xmin - Y_LABEL_GAP, y, config.font, align="right", valign="center")
        draw_placement(canvas, placement, config)
