from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
import logging
import math
from typing import Any, Literal, Mapping

from tschart.errors import ConfigurationError

LOGGER = logging.getLogger(__name__)

LineMode = Literal["slope", "staircase", "connected"]
AreaMode = Literal["none", "first", "all", "stacked"]
PieMode = Literal["maximum", "minimum", "average"]
YAxisSide = Literal["left", "right"]
GraphType = Literal["line", "pie"]
UnitSystem = Literal["si", "binary"]

LINE_MODES: frozenset[str] = frozenset({"slope", "staircase", "connected"})
AREA_MODES: frozenset[str] = frozenset({"none", "first", "all", "stacked"})
PIE_MODES: frozenset[str] = frozenset({"maximum", "minimum", "average"})
Y_AXIS_SIDES: frozenset[str] = frozenset({"left", "right"})
GRAPH_TYPES: frozenset[str] = frozenset({"line", "pie"})
UNIT_SYSTEM_NAMES: frozenset[str] = frozenset({"si", "binary"})

DEFAULT_PALETTE: tuple[str, ...] = (
    "blue",
    "green",
    "red",
    "purple",
    "brown",
    "yellow",
    "aqua",
    "grey",
    "magenta",
    "pink",
    "gold",
    "rose",
)

AUTO_HIDE_LEGEND_SERIES_COUNT = 10
DEFAULT_MAX_LAYOUT_ITERATIONS = 10


@dataclass(frozen=True)
class FontSpec:
    name: str = "Sans"
    size: float = 10.0
    bold: bool = False
    italic: bool = False

    def scaled(self, size: float) -> "FontSpec":
        return FontSpec(name=self.name, size=float(size), bold=self.bold, italic=self.italic)


@dataclass(frozen=True)
class RenderConfig:
    """Resolved, typed rendering options for one chart.

    Optional numeric overrides use ``None`` for "auto"; nothing here is a NaN
    sentinel. ``pie_mode`` and ``connected_limit`` are not used by the layout;
    they are carried through for the adapter that strokes the series paths.
    """

    width: float = 600.0
    height: float = 300.0
    margin: int = 10
    font: FontSpec = field(default_factory=FontSpec)
    fg_color: str = "black"
    bg_color: str = "white"
    major_line_color: str = "rose"
    minor_line_color: str = "grey"

    graph_type: GraphType = "line"
    graph_only: bool = False
    hide_legend: bool | None = None
    hide_grid: bool = False
    hide_axes: bool = False
    hide_y_axis: bool = False
    y_axis_side: YAxisSide = "left"

    title: str = ""
    vtitle: str = ""
    vtitle_right: str = ""
    tz: str = "UTC"

    line_mode: LineMode = "slope"
    area_mode: AreaMode = "none"
    pie_mode: PieMode = "average"
    palette: tuple[str, ...] = DEFAULT_PALETTE
    line_width: float = 1.2
    dashed: bool = False
    connected_limit: float = math.inf

    y_min: float | None = None
    y_max: float | None = None
    y_step: float | None = None
    x_min: float | None = None
    x_max: float | None = None
    x_step: float | None = None
    y_unit_system: UnitSystem | None = None

    left_color: str | None = None
    left_width: float | None = None
    left_dashed: bool | None = None
    right_color: str | None = None
    right_width: float | None = None
    right_dashed: bool | None = None

    unique_legend: bool = False
    draw_null_as_zero: bool = False
    draw_as_infinite: bool = False
    max_layout_iterations: int = DEFAULT_MAX_LAYOUT_ITERATIONS

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("width and height must be > 0")
        if self.margin < 0:
            raise ValueError("margin must be >= 0")
        if self.font.size <= 0:
            raise ValueError("font size must be > 0")
        if not self.palette:
            raise ValueError("palette must contain at least one color")
        if self.max_layout_iterations <= 0:
            raise ValueError("max_layout_iterations must be > 0")
        _require_member("graph_type", self.graph_type, GRAPH_TYPES)
        _require_member("line_mode", self.line_mode, LINE_MODES)
        _require_member("area_mode", self.area_mode, AREA_MODES)
        _require_member("pie_mode", self.pie_mode, PIE_MODES)
        _require_member("y_axis_side", self.y_axis_side, Y_AXIS_SIDES)
        if self.y_unit_system is not None:
            _require_member("y_unit_system", self.y_unit_system, UNIT_SYSTEM_NAMES)

    def legend_hidden(self, series_count: int) -> bool:
        if self.graph_only:
            return True
        if self.hide_legend is None:
            return series_count > AUTO_HIDE_LEGEND_SERIES_COUNT
        return self.hide_legend

    @property
    def axes_hidden(self) -> bool:
        return self.graph_only or self.hide_axes

    @property
    def y_axis_hidden(self) -> bool:
        return self.graph_only or self.hide_axes or self.hide_y_axis

    @property
    def grid_hidden(self) -> bool:
        return self.graph_only or self.hide_grid

    @property
    def title_font(self) -> FontSpec:
        size = self.font.size
        return self.font.scaled(size + math.floor(math.log(size)))


def _require_member(name: str, value: str, allowed: frozenset[str]) -> None:
    if value not in allowed:
        raise ValueError(f"{name} must be one of {sorted(allowed)}, got {value!r}")


_FONT_KEYS = {"font_name": "name", "font_size": "size", "font_bold": "bold", "font_italic": "italic"}
_FLOAT_KEYS = {"width", "height", "line_width", "connected_limit", "left_width", "right_width"}
_OPTIONAL_FLOAT_KEYS = {"y_min", "y_max", "y_step", "x_min", "x_max", "x_step"}
_INT_KEYS = {"margin", "max_layout_iterations"}
_BOOL_KEYS = {
    "graph_only",
    "hide_grid",
    "hide_axes",
    "hide_y_axis",
    "dashed",
    "unique_legend",
    "draw_null_as_zero",
    "draw_as_infinite",
}
_OPTIONAL_BOOL_KEYS = {"hide_legend", "left_dashed", "right_dashed"}
_MODE_KEYS = {
    "graph_type": GRAPH_TYPES,
    "line_mode": LINE_MODES,
    "area_mode": AREA_MODES,
    "pie_mode": PIE_MODES,
    "y_axis_side": Y_AXIS_SIDES,
    "y_unit_system": UNIT_SYSTEM_NAMES,
}
_TRUE_STRINGS = {"true", "1", "yes", "on"}
_FALSE_STRINGS = {"false", "0", "no", "off"}


def resolve_render_config(params: Mapping[str, Any] | None = None) -> RenderConfig:
    """Build a RenderConfig from loosely typed parameters.

    Unknown keys are rejected. A malformed value for a known key is logged
    and replaced by its default, so a bad override never fails the render.
    """

    defaults = RenderConfig()
    raw: dict[str, Any] = {f.name: getattr(defaults, f.name) for f in fields(RenderConfig)}
    font: dict[str, Any] = asdict(defaults.font)
    known = set(raw) | set(_FONT_KEYS)
    for key, value in (params or {}).items():
        if key not in known:
            raise ValueError(f"Unknown render option: {key}")
        if value is None or value == "":
            continue
        try:
            if key in _FONT_KEYS:
                attr = _FONT_KEYS[key]
                font[attr] = _parse_value(key, value)
            else:
                raw[key] = _parse_value(key, value)
        except ConfigurationError as exc:
            LOGGER.warning("ignoring render option %s: %s", key, exc)

    if font["size"] <= 0:
        LOGGER.warning("ignoring non-positive font size %r", font["size"])
        font["size"] = defaults.font.size
    raw["font"] = FontSpec(**font)
    return RenderConfig(**raw)


def _parse_value(key: str, value: Any) -> Any:
    if key in _OPTIONAL_FLOAT_KEYS or key in _FLOAT_KEYS or key == "font_size":
        return parse_float(value)
    if key in _INT_KEYS:
        return parse_int(value)
    if key in _BOOL_KEYS or key in _OPTIONAL_BOOL_KEYS or key in {"font_bold", "font_italic"}:
        return parse_bool(value)
    if key in _MODE_KEYS:
        text = str(value).strip().lower()
        if text not in _MODE_KEYS[key]:
            raise ConfigurationError(f"unknown mode {value!r}")
        return text
    if key == "palette":
        return parse_palette(value)
    return str(value)


def parse_float(value: Any) -> float:
    if isinstance(value, bool):
        raise ConfigurationError(f"expected a number, got {value!r}")
    try:
        out = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"expected a number, got {value!r}") from exc
    if math.isnan(out):
        raise ConfigurationError("NaN is not a valid override")
    return out


def parse_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"expected an integer, got {value!r}")
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError as exc:
        raise ConfigurationError(f"expected an integer, got {value!r}") from exc


def parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_STRINGS:
        return True
    if text in _FALSE_STRINGS:
        return False
    raise ConfigurationError(f"expected a boolean, got {value!r}")


def parse_palette(value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        items = [part.strip() for part in value.split(",")]
    else:
        items = [str(part).strip() for part in value]
    colors = tuple(item for item in items if item)
    if not colors:
        raise ConfigurationError("palette is empty")
    return colors
