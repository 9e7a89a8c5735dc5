from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any, Mapping

from plot_grid.errors import ConfigurationError
from plot_grid.ticks import (
    format_time_tick,
    nice_step,
    ticks_in_range,
    time_step,
)

if TYPE_CHECKING:
    from plot_grid.state import AxisState


def _visible_span(state: "AxisState") -> tuple[float, float] | None:
    if not math.isfinite(state.range) or not math.isfinite(state.offset) or state.range <= 0:
        return None
    return (state.offset, state.offset + state.range)


def linear_lines(state: "AxisState") -> list[float]:
    span = _visible_span(state)
    if span is None:
        return []
    step = nice_step(state.config.distance * state.scale)
    return ticks_in_range(span[0], span[1], step)


def _step_decimals(step: float) -> int:
    # Fewest decimals that still spell the step exactly.
    if not math.isfinite(step) or step <= 0:
        return 6
    for decimals in range(13):
        if math.isclose(round(step, decimals), step, rel_tol=1e-9):
            return decimals
    return 12


def _number_label(value: float, decimals: int, *, scientific: bool = False) -> str:
    if not math.isfinite(value):
        return str(value)
    magnitude = abs(value)
    if magnitude and (scientific or magnitude >= 1e6 or magnitude < 1e-6):
        return f"{value:.4e}"
    text = f"{value:.{decimals}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def number_labels(values) -> list[str]:
    """Label evenly spaced values with the precision their spacing needs."""
    if len(values) == 0:
        return []
    step = abs(float(values[1]) - float(values[0])) if len(values) > 1 else 0.0
    decimals = _step_decimals(step) if step else 6
    scientific = 0 < step < 1e-4
    out = []
    for value in values:
        value = float(value)
        if step and abs(value) <= step * 1e-9:
            value = 0.0
        out.append(_number_label(value, decimals, scientific=scientific))
    return out


def power_of_ten_label(exponent: float) -> str:
    k = int(round(exponent))
    if -4 <= k <= 5:
        return _number_label(10.0**k, max(0, -k))
    return f"1e{k}"


def linear_labels(state: "AxisState") -> list[str]:
    return number_labels(state.values)


def log_lines(state: "AxisState") -> list[float]:
    # Coordinates are decimal exponents, one unit per decade.
    span = _visible_span(state)
    if span is None:
        return []
    decades = state.config.distance * state.scale
    stride = 1.0 if decades <= 1.0 else math.ceil(nice_step(decades))
    return ticks_in_range(span[0], span[1], stride)


def log_sublines(state: "AxisState") -> list[float]:
    span = _visible_span(state)
    if span is None:
        return []
    decade_px = 1.0 / state.scale
    if decade_px < state.config.distance:
        return []
    out: list[float] = []
    for k in range(math.floor(span[0]), math.ceil(span[1]) + 1):
        for m in range(2, 10):
            value = k + math.log10(m)
            if span[0] <= value <= span[1]:
                out.append(value)
    return out


def log_labels(state: "AxisState") -> list[str]:
    return [power_of_ten_label(v) for v in state.values]


def time_lines(state: "AxisState") -> list[float]:
    span = _visible_span(state)
    if span is None:
        return []
    step, _ = time_step(state.config.distance * state.scale)
    return ticks_in_range(span[0], span[1], step)


def time_labels(state: "AxisState") -> list[str]:
    _, pattern = time_step(state.config.distance * state.scale)
    out: list[str] = []
    for value in state.values:
        try:
            out.append(format_time_tick(value, pattern))
        except (OverflowError, OSError, ValueError):
            out.append(_number_label(value, 6))
    return out


TYPE_PRESETS: dict[str, dict[str, Any]] = {
    "linear": {
        "lines": linear_lines,
        "sublines": True,
        "labels": linear_labels,
    },
    "log": {
        "lines": log_lines,
        "sublines": log_sublines,
        "labels": log_labels,
    },
    "time": {
        "lines": time_lines,
        "sublines": True,
        "labels": time_labels,
        "units": "s",
    },
}


def get_preset(name: str) -> dict[str, Any]:
    try:
        return dict(TYPE_PRESETS[name])
    except KeyError:
        raise ConfigurationError(f"unknown axis type: {name!r}", field="type") from None


def register_preset(name: str, fields: Mapping[str, Any]) -> None:
    if not name or not isinstance(name, str):
        raise ValueError("preset name must be a non-empty string")
    if "type" in fields:
        raise ValueError("preset fields must not set `type`")
    TYPE_PRESETS[name] = dict(fields)


def apply_preset(fragment: Mapping[str, Any]) -> dict[str, Any]:
    """Expand ``fragment['type']`` so the fragment's own fields override the preset."""
    name = fragment.get("type")
    if name is None:
        return dict(fragment)
    merged = get_preset(name)
    merged.update(fragment)
    return merged
