from __future__ import annotations

import unittest

from tschart.ticks import DAY, HOUR, MINUTE, X_AXIS_TICKS, TickSpec, compute_x_axis, select_x_axis_ticks


class TickTableTests(unittest.TestCase):
    def test_table_is_ordered_by_density_threshold(self) -> None:
        thresholds = [spec.seconds for spec in X_AXIS_TICKS]
        self.assertEqual(thresholds, sorted(thresholds))
        self.assertIsInstance(X_AXIS_TICKS, tuple)

    def test_one_hour_over_580_pixels_uses_twenty_minute_labels(self) -> None:
        spec = select_x_axis_ticks(HOUR, 580)
        self.assertEqual(spec.seconds, 10)
        self.assertEqual(spec.label_interval, 20 * MINUTE)
        self.assertEqual(spec.format, "%H:%M")

    def test_selected_row_covers_density_and_range(self) -> None:
        for time_range in (300, 3 * HOUR, 2 * DAY, 30 * DAY):
            spec = select_x_axis_ticks(time_range, 600)
            self.assertGreaterEqual(spec.seconds, time_range / 600)
            self.assertGreaterEqual(spec.max_interval, time_range)

    def test_label_interval_grows_with_time_range(self) -> None:
        ranges = [60, 10 * MINUTE, HOUR, 6 * HOUR, DAY, 7 * DAY, 90 * DAY, 365 * DAY]
        intervals = [select_x_axis_ticks(r, 600).label_interval for r in ranges]
        self.assertEqual(intervals, sorted(intervals))

    def test_falls_back_to_last_row_when_nothing_matches(self) -> None:
        self.assertIs(select_x_axis_ticks(20 * 365 * DAY, 100), X_AXIS_TICKS[-1])

    def test_custom_table_is_honored(self) -> None:
        only = TickSpec(1, 1, 1, 1, 1, 1, 1, "%S", 10)
        self.assertIs(select_x_axis_ticks(10_000, 10, table=(only,)), only)

    def test_density_threshold_never_drops_as_width_shrinks(self) -> None:
        selected = [select_x_axis_ticks(DAY, width).seconds for width in (2000, 1000, 600, 300, 100, 50, 10)]
        self.assertEqual(selected, sorted(selected))

    def test_rejects_non_positive_width(self) -> None:
        with self.assertRaises(ValueError):
            select_x_axis_ticks(HOUR, 0)


class XAxisScaleTests(unittest.TestCase):
    def test_label_times_are_aligned_and_within_range(self) -> None:
        start = 1_700_000_123
        axis = compute_x_axis(start, start + HOUR, 580)
        times = axis.label_times()
        self.assertTrue(times)
        for t in times:
            self.assertGreaterEqual(t, start)
            self.assertLessEqual(t, start + HOUR)
            self.assertEqual(t % (20 * MINUTE), 0)

    def test_labels_render_with_row_format_in_utc(self) -> None:
        axis = compute_x_axis(0, 2 * HOUR, 600, tz="UTC")
        self.assertEqual(axis.format_label(0), "00:00")

    def test_x_bounds_and_step_overrides(self) -> None:
        axis = compute_x_axis(0, DAY, 600, x_min=HOUR, x_max=3 * HOUR, x_step=900)
        self.assertEqual(axis.start, HOUR)
        self.assertEqual(axis.end, 3 * HOUR)
        self.assertEqual(axis.tick.label_interval, 900)
        self.assertEqual(axis.tick.major_grid_interval, 900)
        self.assertEqual(len(axis.label_times()), 9)


    def test_inverted_x_bounds_fall_back_with_warning(self) -> None:
        with self.assertLogs("tschart.ticks", level="WARNING"):
            axis = compute_x_axis(0, DAY, 600, x_min=3 * HOUR, x_max=HOUR)
        self.assertEqual((axis.start, axis.end), (0.0, float(DAY)))
        self.assertTrue(axis.label_times())

    def test_unusable_x_step_keeps_table_row(self) -> None:
        expected = select_x_axis_ticks(DAY, 600)
        for step in (-5.0, 0.0, 1e-6):
            with self.assertLogs("tschart.ticks", level="WARNING"):
                axis = compute_x_axis(0, DAY, 600, x_step=step)
            self.assertEqual(axis.tick, expected)


if __name__ == "__main__":
    unittest.main()
