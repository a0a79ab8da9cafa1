from __future__ import annotations

import math
import unittest

from tschart.config import RenderConfig
from tschart.scales import (
    compute_y_axis,
    effective_line_mode,
    format_tick,
    format_y_tick,
    grid_line_count,
    next_nice_step,
    nice_step,
    stacked_max,
)
from tschart.series import Series


def _series(name: str, points, **kwargs) -> Series:
    return Series.from_points(name, points, start_time=0, step_time=60, **kwargs)


class NiceStepTests(unittest.TestCase):
    def test_nice_step_is_one_two_five_times_power_of_ten(self) -> None:
        for span in (0.37, 1.0, 9.0, 23.0, 100.0, 4321.0, 1e9):
            step = nice_step(span)
            mantissa = step / 10.0 ** math.floor(math.log10(step))
            self.assertTrue(any(math.isclose(mantissa, m, rel_tol=1e-9) for m in (1.0, 2.0, 5.0)), (span, step))

    def test_nice_step_keeps_grid_between_four_and_eight_lines(self) -> None:
        for span in (0.37, 1.0, 3.3, 9.0, 23.0, 77.0, 100.0, 4321.0, 1e9):
            lines = grid_line_count(span, nice_step(span))
            self.assertGreaterEqual(lines, 4, span)
            self.assertLessEqual(lines, 8, span)

    def test_nice_step_picks_smallest_fitting_candidate(self) -> None:
        self.assertAlmostEqual(nice_step(100.0), 20.0)
        self.assertAlmostEqual(nice_step(1.0), 0.2)
        self.assertAlmostEqual(nice_step(23.0), 5.0)

    def test_next_nice_step_walks_the_sequence(self) -> None:
        for step, expected in ((1.0, 2.0), (2.0, 5.0), (5.0, 10.0), (0.5, 1.0), (0.2, 0.5), (20.0, 50.0)):
            self.assertAlmostEqual(next_nice_step(step), expected)

    def test_nice_step_rejects_empty_span(self) -> None:
        with self.assertRaises(ValueError):
            nice_step(0.0)


class ComputeYAxisTests(unittest.TestCase):
    def test_bounds_enclose_every_present_value(self) -> None:
        series = [_series("a", [3.5, None, -2.25, 8.0]), _series("b", [1.0, 11.5])]
        scale = compute_y_axis(series, RenderConfig())
        for s in series:
            for v in s.present_values():
                self.assertLessEqual(scale.y_min, v)
                self.assertGreaterEqual(scale.y_max, v)
        self.assertLessEqual(scale.y_bottom, scale.y_min)
        self.assertGreaterEqual(scale.y_top, scale.y_max)
        self.assertLessEqual(grid_line_count(scale.y_max - scale.y_min, scale.y_step), 8)

    def test_y_min_override_replaces_lower_bound(self) -> None:
        series = [_series("a", list(range(11)))]
        scale = compute_y_axis(series, RenderConfig(y_min=5.0))
        self.assertEqual(scale.y_min, 5.0)
        self.assertEqual(scale.y_bottom, 5.0)
        self.assertEqual(scale.y_max, 10.0)
        self.assertAlmostEqual(scale.y_step, 1.0)
        self.assertEqual(scale.labels()[0], "5")

    def test_stacked_area_uses_per_index_sum(self) -> None:
        series = [_series("a", list(range(10))), _series("b", list(range(5, 15)))]
        scale = compute_y_axis(series, RenderConfig(area_mode="stacked"))
        self.assertEqual(scale.y_min, 0.0)
        self.assertEqual(scale.y_max, 23.0)
        self.assertAlmostEqual(scale.y_step, 5.0)
        self.assertAlmostEqual(scale.y_top, 25.0)

    def test_stacked_max_counts_gaps_as_zero(self) -> None:
        series = [_series("a", [1.0, None, 4.0]), _series("b", [2.0, 9.0])]
        self.assertEqual(stacked_max(series), 9.0)

    def test_draw_null_as_zero_lifts_negative_maximum(self) -> None:
        series = [_series("a", [-5.0, None, -3.0])]
        plain = compute_y_axis(series, RenderConfig())
        lifted = compute_y_axis(series, RenderConfig(draw_null_as_zero=True))
        self.assertEqual(plain.y_max, -3.0)
        self.assertEqual(lifted.y_max, 0.0)
        self.assertEqual(lifted.y_min, -5.0)

    def test_constant_series_gets_a_nonzero_span(self) -> None:
        scale = compute_y_axis([_series("flat", [7.0, 7.0, 7.0])], RenderConfig())
        self.assertGreater(scale.y_max, scale.y_min)
        self.assertEqual(scale.y_min, 7.0)

    def test_no_present_values_yields_unit_span(self) -> None:
        scale = compute_y_axis([_series("gaps", [None, None])], RenderConfig())
        self.assertEqual(scale.y_min, 0.0)
        self.assertEqual(scale.y_max, 1.0)

    def test_inverted_override_falls_back_to_auto_with_warning(self) -> None:
        series = [_series("a", [1.0, 2.0, 3.0])]
        with self.assertLogs("tschart.scales", level="WARNING"):
            scale = compute_y_axis(series, RenderConfig(y_min=10.0, y_max=2.0))
        self.assertEqual(scale.y_min, 1.0)
        self.assertEqual(scale.y_max, 3.0)

    def test_non_positive_step_override_is_ignored(self) -> None:
        series = [_series("a", [0.0, 100.0])]
        with self.assertLogs("tschart.scales", level="WARNING"):
            scale = compute_y_axis(series, RenderConfig(y_step=-5.0))
        self.assertAlmostEqual(scale.y_step, 20.0)

    def test_step_override_with_too_many_lines_is_ignored(self) -> None:
        series = [_series("a", [0.0, 100.0])]
        with self.assertLogs("tschart.scales", level="WARNING"):
            scale = compute_y_axis(series, RenderConfig(y_step=1e-7))
        self.assertAlmostEqual(scale.y_step, 20.0)
        self.assertEqual(len(scale.ticks()), 6)

    def test_pinned_bound_off_the_step_grid_keeps_ticks_inside(self) -> None:
        scale = compute_y_axis([_series("a", [2.0, 24.0])], RenderConfig(y_min=2.0))
        self.assertAlmostEqual(scale.y_step, 5.0)
        self.assertEqual((scale.y_bottom, scale.y_top), (2.0, 25.0))
        ticks = list(scale.ticks())
        self.assertEqual(ticks, [2.0, 7.0, 12.0, 17.0, 22.0])
        self.assertLessEqual(max(ticks), scale.y_top)
        self.assertEqual(len(scale.labels()), len(ticks))

    def test_snapped_grid_stays_within_line_limit(self) -> None:
        scale = compute_y_axis([_series("a", [0.5, 8.4])], RenderConfig())
        self.assertAlmostEqual(scale.y_step, 2.0)
        self.assertEqual((scale.y_bottom, scale.y_top), (0.0, 10.0))
        self.assertLessEqual(scale.grid_line_count, 8)

    def test_step_override_is_used_verbatim(self) -> None:
        scale = compute_y_axis([_series("a", [0.0, 100.0])], RenderConfig(y_step=25.0))
        self.assertEqual(scale.y_step, 25.0)
        self.assertEqual(list(scale.ticks()), [0.0, 25.0, 50.0, 75.0, 100.0])

    def test_secondary_series_scale_independently(self) -> None:
        series = [_series("a", [0.0, 10.0]), _series("b", [0.0, 5000.0], axis_side="secondary")]
        left = compute_y_axis(series, RenderConfig(), side="primary")
        right = compute_y_axis(series, RenderConfig(), side="secondary")
        self.assertEqual(left.y_max, 10.0)
        self.assertEqual(right.y_max, 5000.0)
        self.assertEqual(right.side, "secondary")

    def test_draw_as_infinite_series_do_not_stretch_bounds(self) -> None:
        series = [_series("a", [0.0, 10.0]), _series("marker", [1e6], draw_as_infinite=True)]
        scale = compute_y_axis(series, RenderConfig())
        self.assertEqual(scale.y_max, 10.0)


class LineModeTests(unittest.TestCase):
    def test_single_point_series_force_staircase(self) -> None:
        series = [_series("a", [1.0]), _series("b", [2.0])]
        self.assertEqual(effective_line_mode(series, "slope"), "staircase")
        self.assertEqual(effective_line_mode(series, "connected"), "staircase")

    def test_multi_point_series_keep_configured_mode(self) -> None:
        series = [_series("a", [1.0]), _series("b", [2.0, 3.0])]
        self.assertEqual(effective_line_mode(series, "slope"), "slope")


class TickFormatTests(unittest.TestCase):
    def test_format_tick_uses_step_precision(self) -> None:
        self.assertEqual(format_tick(0.30000000000000004, step=0.1), "0.3")
        self.assertEqual(format_tick(40.0, step=10.0), "40")
        self.assertEqual(format_tick(-1e-17, step=0.5), "0")

    def test_unit_system_prefixes_by_step(self) -> None:
        self.assertEqual(format_y_tick(2_000_000.0, 500_000.0, unit_system="si"), "2000K")
        self.assertEqual(format_y_tick(3 * 1024**3, 1024**3, unit_system="binary"), "3Gi")
        self.assertEqual(format_y_tick(12.0, 2.0, unit_system="si"), "12")


if __name__ == "__main__":
    unittest.main()
