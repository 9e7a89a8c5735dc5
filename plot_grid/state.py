from __future__ import annotations

from dataclasses import dataclass, field, replace
import logging
import math
import sys
from typing import Any, Callable, Mapping, Sequence

import numpy as np

from plot_grid.colors import blend_alpha, parse_color
from plot_grid.config import AxisConfig, GeneratedSource, Orientation, Viewport, as_source
from plot_grid.errors import ConfigurationError
from plot_grid.units import parse_unit, to_px as default_to_px


LOGGER = logging.getLogger(__name__)
MAX_NUMBER = sys.float_info.max

ToPx = Callable[[float, str], float]
Blend = Callable[[Any, float], Any]


@dataclass
class AxisState:
    """Resolved rendering state of one axis for one viewport."""

    orientation: Orientation
    config: AxisConfig = field(repr=False, compare=False)
    viewport: Viewport
    disabled: bool = False
    scale: float = 1.0
    range: float = 0.0
    offset: float = 0.0
    values: list[float] = field(default_factory=list)
    subvalues: list[float] = field(default_factory=list)
    labels: list[Any] = field(default_factory=list)
    color: Any = (0, 0, 0, 255)
    label_color: Any = (0, 0, 0, 255)
    axis_color: Any = (0, 0, 0, 255)
    line_color: Any = (0, 0, 0, 255)
    subline_color: Any = (0, 0, 0, 255)
    axis_width: float = 0.0
    line_width: float = 0.0
    tick: float = 0.0
    subtick: float = 0.0
    tick_align: float = 0.5
    padding: tuple[float, float, float, float] = (0.0, 0.0, 0.0, 0.0)
    font_size: float = 0.0
    font_family: str = "sans-serif"
    opposite: "AxisState | None" = field(default=None, repr=False, compare=False)

    def ratio(self, value: float) -> float:
        return self.config.get_ratio(value, self)

    def coords(self, values: Sequence[float] | None = None) -> list[float]:
        if self.disabled:
            return []
        return list(self.config.get_coords(self.values if values is None else values, self))


def _clamp(value: float, lo: float, hi: float) -> float:
    # Lower bound wins when the window is wider than the bounds.
    return max(lo, min(hi, value))


def compute_axis_state(
    config: AxisConfig,
    viewport: Viewport,
    *,
    to_px: ToPx = default_to_px,
    blend: Blend = blend_alpha,
) -> AxisState:
    state = AxisState(orientation=config.orientation, config=config, viewport=viewport, scale=config.scale)
    if config.disabled:
        state.disabled = True
        state.offset = config.offset
        return state

    axis = config.kind
    state.range = float(config.get_range(state))
    state.offset = resolve_offset(config, state.range)

    _resolve_style(state, config, blend)
    state.padding = _resolve_padding(config, state)
    state.font_size = _resolve_font_size(config, to_px)
    state.font_family = config.font_family or "sans-serif"

    lines = as_source(config.lines)
    if isinstance(lines, GeneratedSource):
        state.values = _as_values(lines.generator(state), axis=axis, field="lines")
    else:
        state.values = _literal_values(lines.values, axis=axis, field="lines")

    sublines = as_source(config.sublines)
    if isinstance(sublines, GeneratedSource):
        state.subvalues = _as_values(sublines.generator(state), axis=axis, field="sublines")
    elif (sublines.values is True or sublines.values is None) and isinstance(lines, GeneratedSource):
        finer = replace(state, scale=state.scale / 3.0)
        candidates = _as_values(lines.generator(finer), axis=axis, field="lines")
        state.subvalues = _refine(candidates, state.values)
    else:
        state.subvalues = _literal_values(sublines.values, axis=axis, field="sublines")

    state.values, state.labels = _resolve_labels(config, state)

    LOGGER.debug(
        "axis %s: range=%s offset=%s ticks=%d subticks=%d",
        axis,
        state.range,
        state.offset,
        len(state.values),
        len(state.subvalues),
    )
    return state


def resolve_offset(config: AxisConfig, range_: float) -> float:
    """Start of the visible window: the origin-anchored offset clamped to the axis bounds."""
    if not math.isfinite(range_):
        LOGGER.warning("axis %s has a non-finite range; offset clamp skipped", config.kind)
        return config.offset
    origin = _clamp(config.origin, 0.0, 1.0)
    return _clamp(
        config.offset - range_ * origin,
        max(config.min, -MAX_NUMBER),
        min(config.max, MAX_NUMBER) - range_,
    )


def _resolve_style(state: AxisState, config: AxisConfig, blend: Blend) -> None:
    try:
        state.color = parse_color(config.color)
    except ValueError as exc:
        raise ConfigurationError(str(exc), axis=config.kind, field="color") from exc
    state.label_color = state.color
    for name in ("axis_color", "line_color", "subline_color"):
        setattr(state, name, _resolve_color(config, name, blend))
    state.line_width = config.line_width
    state.axis_width = config.axis_width or config.line_width
    state.tick = config.tick
    state.subtick = config.subtick
    state.tick_align = config.tick_align


def _resolve_color(config: AxisConfig, name: str, blend: Blend) -> Any:
    value = getattr(config, name)
    try:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return blend(config.color, max(0.0, min(1.0, float(value))))
        if value is None or value is False:
            return parse_color(config.color)
        return parse_color(value)
    except ValueError as exc:
        raise ConfigurationError(str(exc), axis=config.kind, field=name) from exc


def _resolve_padding(config: AxisConfig, state: AxisState) -> tuple[float, float, float, float]:
    padding = config.padding
    if isinstance(padding, (int, float)) and not isinstance(padding, bool):
        return (float(padding),) * 4
    source = as_source(padding)
    raw = source.generator(state) if isinstance(source, GeneratedSource) else source.values
    if not _is_sequence(raw) or len(raw) != 4:
        raise ConfigurationError(f"expected 4 values, got {raw!r}", axis=config.kind, field="padding")
    top, right, bottom, left = (float(v) for v in raw)
    return (top, right, bottom, left)


def _resolve_font_size(config: AxisConfig, to_px: ToPx) -> float:
    size = config.font_size
    if isinstance(size, (int, float)) and not isinstance(size, bool):
        return float(size)
    try:
        magnitude, unit = parse_unit(size)
        return float(to_px(magnitude, unit))
    except ValueError as exc:
        raise ConfigurationError(str(exc), axis=config.kind, field="font_size") from exc


def _is_sequence(value: Any) -> bool:
    if isinstance(value, np.ndarray):
        return value.ndim == 1
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def _as_values(result: Any, *, axis: str, field: str) -> list[float]:
    if not _is_sequence(result):
        raise ConfigurationError(
            f"generator must return a sequence, got {type(result).__name__}",
            axis=axis,
            field=field,
        )
    try:
        return [float(v) for v in result]
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"non-numeric value in {result!r}", axis=axis, field=field) from exc


def _literal_values(value: Any, *, axis: str, field: str) -> list[float]:
    if value is None or isinstance(value, bool):
        return []
    return _as_values(value, axis=axis, field=field)


def _refine(candidates: Sequence[float], primary: Sequence[float]) -> list[float]:
    """Keep the candidates that coincide with a primary value."""
    if not primary:
        return []
    ref = np.asarray(primary, dtype=np.float64)
    out: list[float] = []
    for value in candidates:
        hits = np.flatnonzero(np.isclose(ref, value, rtol=1e-9, atol=1e-12))
        if hits.size:
            out.append(primary[int(hits[0])])
    return out


def _resolve_labels(config: AxisConfig, state: AxisState) -> tuple[list[float], list[Any]]:
    values = list(state.values)
    labels_opt = config.labels
    if labels_opt is True:
        labels: Any = list(values)
    else:
        source = as_source(labels_opt)
        labels = source.generator(state) if isinstance(source, GeneratedSource) else source.values

    if isinstance(labels, Mapping):
        return _merge_label_mapping(labels, values, axis=config.kind)
    if isinstance(labels, np.ndarray):
        labels = labels.tolist()
    if labels is None or isinstance(labels, bool):
        labels = [None] * len(values)
    elif not _is_sequence(labels):
        raise ConfigurationError(
            f"labels must be a sequence or mapping, got {type(labels).__name__}",
            axis=config.kind,
            field="labels",
        )
    labels = list(labels)
    if len(labels) != len(values):
        raise ConfigurationError(
            f"{len(labels)} labels for {len(values)} ticks",
            axis=config.kind,
            field="labels",
        )
    return values, labels


def _merge_label_mapping(
    mapping: Mapping[Any, Any],
    values: list[float],
    *,
    axis: str,
) -> tuple[list[float], list[Any]]:
    # Mapped label wins on an existing tick; unknown values become extra ticks.
    labels: list[Any] = [None] * len(values)
    for key, label in mapping.items():
        try:
            value = float(key)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"label key {key!r} is not a number", axis=axis, field="labels") from exc
        if math.isnan(value):
            raise ConfigurationError(f"label key {key!r} is not a number", axis=axis, field="labels")
        matched = False
        for i, existing in enumerate(values):
            if math.isclose(existing, value, rel_tol=1e-9, abs_tol=1e-12):
                labels[i] = label
                matched = True
        if not matched:
            values.append(value)
            labels.append(label)
    return values, labels
