from __future__ import annotations

from typing import Any, Mapping, Sequence

import numpy as np

from tschart.config import RenderConfig, resolve_render_config
from tschart.layout import ChartLayout, NoDataLayout, converge
from tschart.palette import parse_color
from tschart.raster import FontMeasurer, RasterCanvas
from tschart.render import draw_layout
from tschart.series import Series
from tschart.text import TextMeasurer


def _coerce_config(config: RenderConfig | Mapping[str, Any] | None) -> RenderConfig:
    if config is None:
        return RenderConfig()
    if isinstance(config, RenderConfig):
        return config
    return resolve_render_config(config)


def layout_chart(
    series: Sequence[Series],
    config: RenderConfig | Mapping[str, Any] | None = None,
    *,
    measurer: TextMeasurer | None = None,
) -> ChartLayout | NoDataLayout:
    resolved = _coerce_config(config)
    return converge(series, resolved, measurer if measurer is not None else FontMeasurer())


def render_chart(
    series: Sequence[Series],
    config: RenderConfig | Mapping[str, Any] | None = None,
) -> np.ndarray:
    """Lay out and paint ``series``; returns an (height, width, 4) uint8 RGBA array."""

    resolved = _coerce_config(config)
    canvas = RasterCanvas(
        int(round(resolved.width)),
        int(round(resolved.height)),
        background=parse_color(resolved.bg_color),
    )
    layout = converge(series, resolved, canvas)
    draw_layout(canvas, layout, resolved)
    return canvas.pixels
