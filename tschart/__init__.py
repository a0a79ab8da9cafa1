from tschart.api import layout_chart, render_chart
from tschart.config import FontSpec, RenderConfig, resolve_render_config
from tschart.errors import (
    ChartError,
    ConfigurationError,
    DegenerateInputError,
    InconsistentSeriesError,
    LayoutGeometryError,
    LayoutNonConvergenceError,
    UnimplementedModeError,
)
from tschart.geometry import Area, Rect
from tschart.layout import ChartLayout, GeometryConverger, NoDataLayout
from tschart.legend import LegendResult, layout_legend
from tschart.palette import assign_colors, parse_color
from tschart.scales import YAxisScale, compute_y_axis, nice_step
from tschart.series import Series, SeriesStyle
from tschart.text import FontExtents, TextExtents, TextPlacement, anchor
from tschart.ticks import X_AXIS_TICKS, TickSpec, XAxisScale, compute_x_axis, select_x_axis_ticks

__all__ = [
    "Area",
    "ChartError",
    "ChartLayout",
    "ConfigurationError",
    "DegenerateInputError",
    "FontExtents",
    "FontSpec",
    "GeometryConverger",
    "InconsistentSeriesError",
    "LayoutGeometryError",
    "LayoutNonConvergenceError",
    "LegendResult",
    "NoDataLayout",
    "Rect",
    "RenderConfig",
    "Series",
    "SeriesStyle",
    "TextExtents",
    "TextPlacement",
    "TickSpec",
    "UnimplementedModeError",
    "XAxisScale",
    "X_AXIS_TICKS",
    "YAxisScale",
    "anchor",
    "assign_colors",
    "compute_x_axis",
    "compute_y_axis",
    "layout_chart",
    "nice_step",
    "parse_color",
    "render_chart",
    "resolve_render_config",
    "select_x_axis_ticks",
]
