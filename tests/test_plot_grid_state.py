from __future__ import annotations

import math
import unittest

import numpy as np

from plot_grid import ConfigurationError, Viewport, build_axis_config, compute_axis_state


VP = Viewport(0.0, 0.0, 200.0, 100.0)


def _state(kind: str, option: object, viewport: Viewport = VP, **kwargs):
    return compute_axis_state(build_axis_config(kind, option), viewport, **kwargs)


class AxisRangeAndOffsetTests(unittest.TestCase):
    def test_window_wider_than_bounds_keeps_lower_bound(self) -> None:
        state = _state("x", {"min": 0, "max": 100, "scale": 1, "offset": 0, "origin": 0})
        self.assertEqual(state.range, 200.0)
        self.assertEqual(state.offset, 0.0)

    def test_offset_clamped_to_upper_bound(self) -> None:
        state = _state("x", {"min": 0, "max": 1000, "offset": 900, "origin": 0})
        self.assertEqual(state.offset, 800.0)
        self.assertLessEqual(state.offset, 1000 - state.range)

    def test_upper_bound_reachable_at_default_origin(self) -> None:
        state = _state("x", {"min": 0, "max": 1000, "offset": 950})
        self.assertEqual(state.offset, 800.0)
        self.assertEqual(state.offset + state.range, 1000.0)

    def test_origin_shifts_offset(self) -> None:
        state = _state("x", {"offset": 100})
        self.assertEqual(state.offset, 0.0)
        state = _state("x", {"offset": 100, "origin": 1.7})
        self.assertEqual(state.offset, -100.0)

    def test_range_follows_orientation_and_scale(self) -> None:
        self.assertEqual(_state("x", {"scale": 2}).range, 400.0)
        self.assertEqual(_state("y", {"scale": 2}).range, 200.0)
        self.assertEqual(_state("r", True).range, 50.0)
        self.assertEqual(_state("a", True).range, 360.0)

    def test_non_finite_range_skips_clamp(self) -> None:
        with self.assertLogs("plot_grid.state", level="WARNING"):
            state = _state("x", {"get_range": lambda s: math.inf, "offset": 3, "origin": 0})
        self.assertEqual(state.offset, 3.0)
        self.assertFalse(math.isnan(state.offset))
        self.assertEqual(state.values, [])
        self.assertEqual(state.labels, [])

    def test_disabled_axis_is_empty(self) -> None:
        state = _state("x", False)
        self.assertTrue(state.disabled)
        self.assertEqual(state.values, [])
        self.assertEqual(state.subvalues, [])
        self.assertEqual(state.labels, [])
        self.assertEqual(state.coords(), [])


class AxisStyleTests(unittest.TestCase):
    def test_alpha_colors_blend_with_base_color(self) -> None:
        state = _state("x", {"color": "#ff0000", "line_color": 0.5, "axis_color": "#00ff00", "subline_color": None})
        self.assertEqual(state.color, (255, 0, 0, 255))
        self.assertEqual(state.label_color, (255, 0, 0, 255))
        self.assertEqual(state.line_color, (255, 0, 0, 128))
        self.assertEqual(state.axis_color, (0, 255, 0, 255))
        self.assertEqual(state.subline_color, (255, 0, 0, 255))

    def test_default_alphas(self) -> None:
        state = _state("x", True)
        self.assertEqual(state.axis_color, (0, 0, 0, 255))
        self.assertEqual(state.line_color, (0, 0, 0, 102))

    def test_custom_blend_collaborator(self) -> None:
        state = _state("x", {"color": "#ff0000", "line_color": 0.5}, blend=lambda c, a: ("blend", c, a))
        self.assertEqual(state.line_color, ("blend", "#ff0000", 0.5))

    def test_bad_color_names_field(self) -> None:
        with self.assertRaises(ConfigurationError) as ctx:
            _state("y", {"axis_color": "not-a-color"})
        self.assertEqual((ctx.exception.axis, ctx.exception.field), ("y", "axis_color"))

    def test_padding_forms(self) -> None:
        self.assertEqual(_state("x", {"padding": 4}).padding, (4.0, 4.0, 4.0, 4.0))
        self.assertEqual(_state("x", {"padding": lambda s: [1, 2, 3, 4]}).padding, (1.0, 2.0, 3.0, 4.0))
        self.assertEqual(_state("x", {"padding": (0, 5, 0, 5)}).padding, (0.0, 5.0, 0.0, 5.0))
        with self.assertRaises(ConfigurationError):
            _state("x", {"padding": [1, 2, 3]})

    def test_font_size_units(self) -> None:
        self.assertAlmostEqual(_state("x", True).font_size, 10.0 * 96.0 / 72.0)
        self.assertEqual(_state("x", {"font_size": 12}).font_size, 12.0)
        self.assertEqual(_state("x", {"font_size": "10pt"}, to_px=lambda m, u: m * 2).font_size, 20.0)
        with self.assertRaises(ConfigurationError) as ctx:
            _state("x", {"font_size": "10furlong"})
        self.assertEqual(ctx.exception.field, "font_size")


class AxisValuesTests(unittest.TestCase):
    def test_linear_generator_ticks_and_labels(self) -> None:
        state = _state("x", True)
        self.assertEqual(state.offset, -100.0)
        self.assertEqual(state.values, [-100.0, 0.0, 100.0])
        self.assertEqual(state.labels, ["-100", "0", "100"])

    def test_auto_sublines_are_a_subset_of_lines(self) -> None:
        for scale in (0.01, 0.37, 1.0, 3.3, 250.0):
            state = _state("x", {"scale": scale, "offset": 17.5})
            self.assertTrue(state.values)
            for value in state.subvalues:
                self.assertIn(value, state.values)

    def test_literal_lines_do_not_derive_sublines(self) -> None:
        state = _state("x", {"lines": [0, 50, 100], "labels": True})
        self.assertEqual(state.values, [0.0, 50.0, 100.0])
        self.assertEqual(state.subvalues, [])
        self.assertEqual(state.labels, [0.0, 50.0, 100.0])

    def test_numpy_lines_and_explicit_sublines(self) -> None:
        state = _state("x", {"lines": np.asarray([1.0, 2.0]), "sublines": lambda s: [1.5], "labels": False})
        self.assertEqual(state.values, [1.0, 2.0])
        self.assertEqual(state.subvalues, [1.5])
        self.assertEqual(state.labels, [None, None])

    def test_generator_returning_non_sequence_rejected(self) -> None:
        with self.assertRaises(ConfigurationError) as ctx:
            _state("x", {"lines": lambda s: 5})
        self.assertEqual((ctx.exception.axis, ctx.exception.field), ("x", "lines"))
        with self.assertRaises(ConfigurationError):
            _state("x", {"lines": [0], "sublines": lambda s: "0"})

    def test_label_mapping_relabels_and_appends(self) -> None:
        state = _state("x", {"lines": [0, 10], "labels": {10: "ten", "20": "twenty"}})
        self.assertEqual(state.values, [0.0, 10.0, 20.0])
        self.assertEqual(state.labels, [None, "ten", "twenty"])

    def test_label_generator_may_return_mapping(self) -> None:
        state = _state("x", {"lines": [0, 10], "labels": lambda s: {0: "origin"}})
        self.assertEqual(state.values, [0.0, 10.0])
        self.assertEqual(state.labels, ["origin", None])

    def test_label_mapping_with_bad_key_rejected(self) -> None:
        with self.assertRaises(ConfigurationError) as ctx:
            _state("x", {"lines": [0], "labels": {"abc": "x"}})
        self.assertEqual(ctx.exception.field, "labels")

    def test_label_count_must_match_ticks(self) -> None:
        with self.assertRaises(ConfigurationError):
            _state("x", {"lines": [0, 1, 2], "labels": ["a", "b"]})
        state = _state("x", {"lines": [0, 1], "labels": ["a", "b"]})
        self.assertEqual(len(state.values), len(state.labels))

    def test_log_preset(self) -> None:
        state = _state("y", {"type": "log", "offset": 0, "origin": 0, "scale": 0.01})
        self.assertEqual(state.values, [0.0, 1.0])
        self.assertEqual(state.labels, ["1", "10"])
        self.assertEqual(state.subvalues, [])

        fine = _state("y", {"type": "log", "offset": 0, "origin": 0, "scale": 0.008})
        self.assertEqual(len(fine.subvalues), 5)
        self.assertAlmostEqual(fine.subvalues[0], math.log10(2))

    def test_time_preset(self) -> None:
        state = _state("x", {"type": "time", "offset": 0, "origin": 0})
        self.assertEqual(state.values, [0.0, 120.0])
        self.assertEqual(state.labels, ["00:00", "00:02"])


class AxisGeometryTests(unittest.TestCase):
    def test_x_coords_are_vertical_segments(self) -> None:
        state = _state("x", True)
        self.assertEqual(state.ratio(0.0), 0.5)
        self.assertEqual(state.coords([0.0]), [0.5, 0.0, 0.5, 1.0])

    def test_y_ratio_is_inverted(self) -> None:
        state = _state("y", True)
        self.assertEqual(state.offset, -50.0)
        self.assertEqual(state.ratio(50.0), 0.0)
        self.assertEqual(state.ratio(-50.0), 1.0)
        self.assertEqual(state.coords([50.0]), [0.0, 0.0, 1.0, 0.0])

    def test_polar_axes_have_no_default_coords(self) -> None:
        self.assertEqual(_state("r", True).coords(), [])
        custom = _state("a", {"get_coords": lambda values, s: [len(values)]})
        self.assertEqual(custom.coords([1.0, 2.0]), [2])


if __name__ == "__main__":
    unittest.main()
