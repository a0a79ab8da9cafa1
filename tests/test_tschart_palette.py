from __future__ import annotations

import unittest

from tschart.config import DEFAULT_PALETTE, RenderConfig
from tschart.palette import assign_colors, is_dual_axis, parse_color
from tschart.series import Series


def _named(*names: str, **kwargs) -> list[Series]:
    return [Series.from_points(name, [1.0, 2.0], **kwargs) for name in names]


class ParseColorTests(unittest.TestCase):
    def test_aliases_resolve_case_insensitively(self) -> None:
        self.assertEqual(parse_color("Blue"), (100, 100, 255, 255))
        self.assertEqual(parse_color("grey"), parse_color("gray"))

    def test_hex_forms(self) -> None:
        self.assertEqual(parse_color("#fff"), (255, 255, 255, 255))
        self.assertEqual(parse_color("#102030"), (16, 32, 48, 255))
        self.assertEqual(parse_color("10203080"), (16, 32, 48, 128))

    def test_unknown_string_is_opaque_black(self) -> None:
        self.assertEqual(parse_color("not-a-color"), (0, 0, 0, 255))


class AssignColorsTests(unittest.TestCase):
    def test_palette_is_walked_in_input_order(self) -> None:
        series = _named("a", "b", "c")
        assign_colors(series, RenderConfig())
        self.assertEqual([s.color for s in series], list(DEFAULT_PALETTE[:3]))

    def test_palette_wraps_around(self) -> None:
        series = _named("a", "b", "c")
        assign_colors(series, RenderConfig(palette=("red", "blue")))
        self.assertEqual([s.color for s in series], ["red", "blue", "red"])

    def test_explicit_color_is_kept_and_does_not_advance_cursor(self) -> None:
        series = _named("a", "b", "c")
        series[0].color = "#123456"
        assign_colors(series, RenderConfig(palette=("red", "blue", "green")))
        self.assertEqual([s.color for s in series], ["#123456", "red", "blue"])

    def test_assignment_is_deterministic_and_idempotent(self) -> None:
        first = _named("a", "b", "c", "d")
        second = _named("a", "b", "c", "d")
        config = RenderConfig()
        assign_colors(first, config)
        assign_colors(second, config)
        self.assertEqual([s.color for s in first], [s.color for s in second])
        before = [s.color for s in first]
        assign_colors(first, config)
        self.assertEqual([s.color for s in first], before)

    def test_width_and_dash_default_from_config(self) -> None:
        series = _named("a", "b")
        series[1].line_width = 4.0
        assign_colors(series, RenderConfig(line_width=2.5, dashed=True))
        self.assertEqual(series[0].line_width, 2.5)
        self.assertEqual(series[1].line_width, 4.0)
        self.assertTrue(series[0].dashed)

    def test_side_overrides_apply_only_in_dual_axis_mode(self) -> None:
        config = RenderConfig(left_color="black", right_color="orange", right_width=3.0, right_dashed=True)
        single = _named("a", "b")
        assign_colors(single, config)
        self.assertFalse(is_dual_axis(single))
        self.assertEqual([s.color for s in single], ["blue", "green"])

        left = Series.from_points("left", [1.0, 2.0])
        right = Series.from_points("right", [1.0, 2.0], axis_side="secondary")
        dual = [left, right]
        assign_colors(dual, config)
        self.assertEqual(left.color, "black")
        self.assertEqual(right.color, "orange")
        self.assertEqual(right.line_width, 3.0)
        self.assertTrue(right.dashed)
        self.assertEqual(left.line_width, config.line_width)


if __name__ == "__main__":
    unittest.main()
