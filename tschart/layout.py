from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from typing import Literal, Sequence

from tschart.config import LineMode, RenderConfig, YAxisSide
from tschart.errors import DegenerateInputError, InconsistentSeriesError, LayoutNonConvergenceError, UnimplementedModeError
from tschart.geometry import Area
from tschart.legend import LegendResult, layout_legend
from tschart.palette import assign_colors, is_dual_axis, parse_color
from tschart.scales import YAxisScale, compute_y_axis, effective_line_mode
from tschart.series import Series, SeriesStyle
from tschart.text import TextMeasurer, TextPlacement
from tschart.ticks import XAxisScale, compute_x_axis

LOGGER = logging.getLogger(__name__)

LayoutStage = Literal[
    "init",
    "title_reserved",
    "vtitle_reserved",
    "legend_reserved",
    "axis_converged",
    "done",
    "no_data",
]

Y_LABEL_WIDTH_FACTOR = 1.02
NO_DATA_TEXT = "No Data"
NO_DATA_COLOR = "red"


@dataclass(frozen=True)
class ChartLayout:
    area: Area
    y_axis: YAxisScale
    y_axis_right: YAxisScale | None
    x_axis: XAxisScale
    series_styles: tuple[SeriesStyle, ...]
    legend: LegendResult | None
    titles: tuple[TextPlacement, ...]
    line_mode: LineMode
    y_axis_side: YAxisSide
    iterations: int
    trace: tuple[tuple[LayoutStage, Area], ...]

    stage: LayoutStage = "done"

    @property
    def dual_axis(self) -> bool:
        return self.y_axis_right is not None


@dataclass(frozen=True)
class NoDataLayout:
    placement: TextPlacement
    reason: str

    stage: LayoutStage = "no_data"


def merge_time_range(series: Sequence[Series]) -> tuple[int, int]:
    if not series:
        raise DegenerateInputError("no series to plot")
    start = min(s.start_time for s in series)
    end = max(s.stop_time for s in series)
    if end - start <= 0 or all(s.stop_time <= s.start_time for s in series):
        raise DegenerateInputError(f"empty time range [{start}, {end}]")
    for s in series:
        if s.stop_time < s.start_time:
            raise InconsistentSeriesError(f"{s.name}: stop time {s.stop_time} precedes start time {s.start_time}")
    return start, end


def plotted_end_time(series: Sequence[Series], start: int, end: int, line_mode: LineMode) -> int:
    """End of the X axis; sloped lines stop at the last point, not the last step."""

    if line_mode == "staircase" or {s.point_count for s in series} == {2}:
        return end
    last = max(s.stop_time - s.step_time for s in series)
    if last < start:
        raise InconsistentSeriesError(f"last point {last} precedes start time {start}")
    return last


class GeometryConverger:
    """Reserves titles, legend and axis labels until the plot area is stable."""

    def __init__(self, config: RenderConfig, measurer: TextMeasurer) -> None:
        self.config = config
        self.measurer = measurer
        self.stage: LayoutStage = "init"
        self._trace: list[tuple[LayoutStage, Area]] = []

    def converge(self, series: Sequence[Series]) -> ChartLayout | NoDataLayout:
        config = self.config
        if config.graph_type != "line":
            raise UnimplementedModeError(f"graph type {config.graph_type!r} has no layout")
        self._trace = []
        series = list(series)
        try:
            start, end = merge_time_range(series)
        except DegenerateInputError as exc:
            LOGGER.info("rendering placeholder: %s", exc)
            return self._no_data(str(exc))

        dual_axis = is_dual_axis(series)
        y_axis_side: YAxisSide = "left" if dual_axis else config.y_axis_side
        line_mode = effective_line_mode(series, config.line_mode)
        if line_mode != config.line_mode:
            LOGGER.debug("line mode %s forced to %s for single-point series", config.line_mode, line_mode)
        assign_colors(series, config, dual_axis=dual_axis)

        area = Area.from_canvas(config.width, config.height, config.margin)
        self._enter("init", area)

        titles: list[TextPlacement] = []
        area = self._reserve_title(area, titles)
        self._enter("title_reserved", area)

        area = self._reserve_vtitles(area, titles, dual_axis=dual_axis)
        self._enter("vtitle_reserved", area)

        legend = None
        if not config.legend_hidden(len(series)):
            legend = layout_legend(series, config, area, self.measurer, dual_axis=dual_axis)
            area = legend.area
        self._enter("legend_reserved", area)

        area, y_axis, y_axis_right, iterations = self._converge_axes(series, area, dual_axis=dual_axis, y_axis_side=y_axis_side)
        if not config.axes_hidden:
            ascent = self.measurer.font_metrics(config.font).ascent
            area = area.shrink(bottom=ascent * 2, stage="axis_converged")
        x_axis = compute_x_axis(
            start,
            plotted_end_time(series, start, end, line_mode),
            area.width,
            x_min=config.x_min,
            x_max=config.x_max,
            x_step=config.x_step,
            tz=config.tz,
        )
        self._enter("axis_converged", area)

        styles = tuple(
            SeriesStyle(
                name=s.name,
                color=s.color or "",
                rgba=parse_color(s.color or ""),
                line_width=float(s.line_width if s.line_width is not None else config.line_width),
                dashed=bool(s.dashed),
                axis_side=s.axis_side,
            )
            for s in series
        )
        self._enter("done", area)
        return ChartLayout(
            area=area,
            y_axis=y_axis,
            y_axis_right=y_axis_right,
            x_axis=x_axis,
            series_styles=styles,
            legend=legend,
            titles=tuple(titles),
            line_mode=line_mode,
            y_axis_side=y_axis_side,
            iterations=iterations,
            trace=tuple(self._trace),
        )

    def _enter(self, stage: LayoutStage, area: Area) -> None:
        area.check(stage)
        self.stage = stage
        self._trace.append((stage, area))
        LOGGER.debug(
            "layout stage %s: area x=[%.1f, %.1f] y=[%.1f, %.1f]",
            stage,
            area.xmin,
            area.xmax,
            area.ymin,
            area.ymax,
        )

    def _no_data(self, reason: str) -> NoDataLayout:
        config = self.config
        font = config.font.scaled(math.log(config.width * config.height))
        placement = TextPlacement(
            NO_DATA_TEXT,
            config.width / 2.0,
            config.height / 2.0,
            font,
            align="center",
            valign="top",
            color=NO_DATA_COLOR,
        )
        self.stage = "no_data"
        return NoDataLayout(placement=placement, reason=reason)

    def _reserve_title(self, area: Area, titles: list[TextPlacement]) -> Area:
        config = self.config
        if not config.title:
            return area
        font = config.title_font
        line_height = self.measurer.font_metrics(font).height
        lines = config.title.split("\n")
        for i, line in enumerate(lines):
            titles.append(
                TextPlacement(
                    line,
                    config.width / 2.0,
                    area.ymin + i * line_height,
                    font,
                    align="center",
                    valign="top",
                    color=config.fg_color,
                )
            )
        return area.shrink(top=len(lines) * line_height + config.margin, stage="title_reserved")

    def _reserve_vtitles(self, area: Area, titles: list[TextPlacement], *, dual_axis: bool) -> Area:
        config = self.config
        font = config.title_font
        line_height = self.measurer.font_metrics(font).height
        middle = config.height / 2.0
        if config.vtitle:
            lines = config.vtitle.split("\n")
            for i, line in enumerate(lines):
                titles.append(
                    TextPlacement(
                        line,
                        area.xmin + (i + 1) * line_height,
                        middle,
                        font,
                        align="center",
                        valign="baseline",
                        rotation=270.0,
                        color=config.fg_color,
                    )
                )
            area = area.shrink(left=len(lines) * line_height + config.margin, stage="vtitle_reserved")
        if dual_axis and config.vtitle_right:
            lines = config.vtitle_right.split("\n")
            for i, line in enumerate(lines):
                titles.append(
                    TextPlacement(
                        line,
                        area.xmax - (i + 1) * line_height,
                        middle,
                        font,
                        align="center",
                        valign="baseline",
                        rotation=90.0,
                        color=config.fg_color,
                    )
                )
            area = area.shrink(right=len(lines) * line_height + config.margin, stage="vtitle_reserved")
        return area

    def _converge_axes(
        self,
        series: Sequence[Series],
        area: Area,
        *,
        dual_axis: bool,
        y_axis_side: YAxisSide,
    ) -> tuple[Area, YAxisScale, YAxisScale | None, int]:
        config = self.config
        base = area
        limit = config.max_layout_iterations
        for iteration in range(1, limit + 1):
            y_axis = compute_y_axis(series, config, side="primary")
            y_axis_right = compute_y_axis(series, config, side="secondary") if dual_axis else None
            if config.y_axis_hidden:
                return area, y_axis, y_axis_right, iteration
            left_width = self._label_width(y_axis)
            if dual_axis:
                assert y_axis_right is not None
                right_width = self._label_width(y_axis_right)
                new_area = area.with_x(
                    xmin=base.xmin + left_width * Y_LABEL_WIDTH_FACTOR,
                    xmax=base.xmax - right_width * Y_LABEL_WIDTH_FACTOR,
                    stage="axis_converged",
                )
            elif y_axis_side == "right":
                new_area = area.with_x(xmax=base.xmax - left_width * Y_LABEL_WIDTH_FACTOR, stage="axis_converged")
            else:
                new_area = area.with_x(xmin=base.xmin + left_width * Y_LABEL_WIDTH_FACTOR, stage="axis_converged")
            LOGGER.debug("axis iteration %d: xmin=%.2f xmax=%.2f", iteration, new_area.xmin, new_area.xmax)
            if new_area.xmin == area.xmin and new_area.xmax == area.xmax:
                return area, y_axis, y_axis_right, iteration
            area = new_area
        raise LayoutNonConvergenceError(limit)

    def _label_width(self, scale: YAxisScale) -> float:
        font = self.config.font
        return max((self.measurer.measure_text(label, font).width for label in scale.labels()), default=0.0)


def converge(series: Sequence[Series], config: RenderConfig, measurer: TextMeasurer) -> ChartLayout | NoDataLayout:
    return GeometryConverger(config, measurer).converge(series)
