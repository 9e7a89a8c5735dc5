from __future__ import annotations

import math
import unittest

from plot_grid.colors import blend_alpha, parse_color
from plot_grid.presets import number_labels, power_of_ten_label
from plot_grid.ticks import (
    format_time_tick,
    nice_step,
    ticks_in_range,
    time_step,
)
from plot_grid.units import parse_unit, to_px


class TickHelperTests(unittest.TestCase):
    def test_nice_step_rounds_to_one_two_five(self) -> None:
        self.assertEqual(nice_step(120.0), 100.0)
        self.assertEqual(nice_step(40.0), 50.0)
        self.assertEqual(nice_step(25.0), 20.0)
        self.assertAlmostEqual(nice_step(0.9), 1.0)
        with self.assertRaises(ValueError):
            nice_step(0.0)

    def test_ticks_in_range_snap_to_step(self) -> None:
        self.assertEqual(ticks_in_range(-0.25, 1.0, 0.5), [0.0, 0.5, 1.0])
        self.assertEqual(ticks_in_range(0.1, 0.2, 1.0), [])
        self.assertEqual(ticks_in_range(0.0, float("inf"), 1.0), [])

    def test_ticks_in_range_has_no_drift_or_negative_zero(self) -> None:
        ticks = ticks_in_range(-0.35, 0.35, 0.1)
        self.assertEqual(len(ticks), 7)
        self.assertEqual(ticks[3], 0.0)
        self.assertEqual(math.copysign(1.0, ticks[3]), 1.0)
        self.assertAlmostEqual(ticks[0], -0.3)
        self.assertEqual(ticks_in_range(-0.4, -0.1, 0.5), [])

    def test_tick_formatting_uses_consistent_decimals_from_step(self) -> None:
        self.assertEqual(number_labels([1.5, 2.0, 2.5, 3.0]), ["1.5", "2", "2.5", "3"])
        self.assertEqual(number_labels([20.0, 30.0, 40.0]), ["20", "30", "40"])
        self.assertEqual(number_labels([-1.0, -4.4409e-16, 1.0])[1], "0")
        self.assertEqual(number_labels([]), [])

    def test_number_labels_edge_cases(self) -> None:
        self.assertEqual(number_labels([100.0]), ["100"])
        self.assertEqual(number_labels([0.1, 0.2, 0.30000000000000004]), ["0.1", "0.2", "0.3"])
        self.assertEqual(number_labels([0.0, 2e6]), ["0", "2.0000e+06"])
        self.assertEqual(number_labels([1e-5, 2e-5]), ["1.0000e-05", "2.0000e-05"])

    def test_time_steps(self) -> None:
        self.assertEqual(time_step(90.0), (120.0, "%H:%M"))
        self.assertEqual(time_step(0.5), (1.0, "%H:%M:%S"))
        self.assertEqual(format_time_tick(86400.0 * 365, "%Y"), "1971")

    def test_power_of_ten_labels(self) -> None:
        self.assertEqual(power_of_ten_label(3.0), "1000")
        self.assertEqual(power_of_ten_label(-2.0), "0.01")
        self.assertEqual(power_of_ten_label(9.0), "1e9")


class UnitAndColorTests(unittest.TestCase):
    def test_parse_unit(self) -> None:
        self.assertEqual(parse_unit("10pt"), (10.0, "pt"))
        self.assertEqual(parse_unit(" 1.5em "), (1.5, "em"))
        self.assertEqual(parse_unit("12"), (12.0, ""))
        with self.assertRaises(ValueError):
            parse_unit("big")

    def test_to_px(self) -> None:
        self.assertAlmostEqual(to_px(12, "pt"), 16.0)
        self.assertEqual(to_px(1, "in"), 96.0)
        with self.assertRaises(ValueError):
            to_px(1, "furlong")

    def test_parse_color(self) -> None:
        self.assertEqual(parse_color("#ff000080"), (255, 0, 0, 128))
        self.assertEqual(parse_color("rgb(0,0,255)"), (0, 0, 255, 255))
        self.assertEqual(parse_color((1, 2, 3)), (1, 2, 3, 255))
        with self.assertRaises(ValueError):
            parse_color("nope")
        with self.assertRaises(ValueError):
            parse_color(0.5)

    def test_blend_alpha_scales_existing_alpha(self) -> None:
        self.assertEqual(blend_alpha("#ffffff", 0.5), (255, 255, 255, 128))
        self.assertEqual(blend_alpha("#ffffff80", 1.0), (255, 255, 255, 128))
        self.assertEqual(blend_alpha("#000000", 2.0), (0, 0, 0, 255))


if __name__ == "__main__":
    unittest.main()
