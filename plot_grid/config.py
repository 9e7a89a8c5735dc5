from __future__ import annotations

from dataclasses import dataclass, fields, replace
from enum import Enum
import math
import re
import sys
from typing import TYPE_CHECKING, Any, Callable, Mapping, NamedTuple, Sequence, Union

from plot_grid.errors import ConfigurationError
from plot_grid.presets import apply_preset

if TYPE_CHECKING:
    from plot_grid.state import AxisState


class Orientation(str, Enum):
    X = "x"
    Y = "y"
    R = "r"
    A = "a"


class Viewport(NamedTuple):
    left: float
    top: float
    width: float
    height: float


def as_viewport(value: Viewport | Sequence[float]) -> Viewport:
    if len(value) != 4:
        raise ValueError("viewport must be (left, top, width, height)")
    left, top, width, height = (float(v) for v in value)
    if not (width > 0 and height > 0):
        raise ValueError("viewport width/height must be > 0")
    return Viewport(left, top, width, height)


@dataclass(frozen=True)
class StaticSource:
    values: Any


@dataclass(frozen=True)
class GeneratedSource:
    generator: Callable[["AxisState"], Any]


ValueSource = Union[StaticSource, GeneratedSource]


def as_source(value: Any) -> ValueSource:
    """Classify a value-or-generator option (`lines`, `sublines`, `labels`, `padding`)."""
    if callable(value):
        return GeneratedSource(value)
    return StaticSource(value)


def _ratio(value: float, state: "AxisState") -> float:
    if not math.isfinite(state.range) or state.range == 0:
        return 0.0
    return (value - state.offset) / state.range


def _x_ratio(value: float, state: "AxisState") -> float:
    return _ratio(value, state)


def _y_ratio(value: float, state: "AxisState") -> float:
    # Pixel row 0 is the top while values grow upward.
    return 1.0 - _ratio(value, state)


def _x_range(state: "AxisState") -> float:
    return state.viewport.width * state.scale


def _y_range(state: "AxisState") -> float:
    return state.viewport.height * state.scale


def _r_range(state: "AxisState") -> float:
    return min(state.viewport.width, state.viewport.height) * 0.5 * state.scale


def _a_range(state: "AxisState") -> float:
    return 360.0 * state.scale


def _x_coords(values: Sequence[float], state: "AxisState") -> list[float]:
    coords: list[float] = []
    for value in values:
        t = state.config.get_ratio(value, state)
        coords.extend((t, 0.0, t, 1.0))
    return coords


def _y_coords(values: Sequence[float], state: "AxisState") -> list[float]:
    coords: list[float] = []
    for value in values:
        t = state.config.get_ratio(value, state)
        coords.extend((0.0, t, 1.0, t))
    return coords


def _no_coords(values: Sequence[float], state: "AxisState") -> list[float]:
    return []


_GEOMETRY = {
    Orientation.X: (_x_coords, _x_range, _x_ratio),
    Orientation.Y: (_y_coords, _y_range, _y_ratio),
    Orientation.R: (_no_coords, _r_range, _ratio),
    Orientation.A: (_no_coords, _a_range, _ratio),
}


@dataclass
class AxisConfig:
    """Declarative settings for one axis, mutated in place by merges."""

    orientation: Orientation
    disabled: bool = True
    type: str = "linear"
    name: str = ""
    units: str = ""

    # visible range
    min: float = -math.inf
    max: float = math.inf
    offset: float = 0.0
    origin: float = 0.5
    scale: float = 1.0
    min_scale: float = sys.float_info.epsilon
    max_scale: float = sys.float_info.max
    zoom: Any = True
    pan: Any = True

    # labels
    labels: Any = True
    font_size: Any = "10pt"
    font_family: str = "sans-serif"
    padding: Any = 0
    color: Any = "#000000"

    # lines
    lines: Any = True
    sublines: Any = True
    tick: float = 8.0
    subtick: float = 0.0
    tick_align: float = 0.5
    line_width: float = 1.0
    distance: float = 120.0
    style: str = "lines"
    line_color: Any = 0.4
    subline_color: Any = 0.1

    # axis line
    axis: bool = True
    axis_origin: float = 0.0
    axis_width: float = 2.0
    axis_color: Any = 1.0

    get_coords: Callable[[Sequence[float], "AxisState"], Sequence[float]] | None = None
    get_range: Callable[["AxisState"], float] | None = None
    get_ratio: Callable[[float, "AxisState"], float] | None = None

    def __post_init__(self) -> None:
        self.orientation = Orientation(self.orientation)
        coords, rng, ratio = _GEOMETRY[self.orientation]
        if self.get_coords is None:
            self.get_coords = coords
        if self.get_range is None:
            self.get_range = rng
        if self.get_ratio is None:
            self.get_ratio = ratio

    @property
    def kind(self) -> str:
        return self.orientation.value

    def merge(self, fragment: Mapping[str, Any]) -> None:
        """Merge a partial option mapping; a `type` preset goes under the explicit fields.

        The merged values are validated on a copy first, so a rejected
        fragment leaves this config untouched.
        """
        normalized = {_normalize_key(key): value for key, value in fragment.items()}
        for key in normalized:
            if key not in _MERGEABLE_FIELDS:
                raise ConfigurationError("unknown option", axis=self.kind, field=key)
        values: dict[str, Any] = {}
        for key, value in apply_preset(normalized).items():
            if key in _FLOAT_FIELDS:
                value = _coerce_float(value, axis=self.kind, field=key)
            elif key in _GEOMETRY_FIELDS and value is None:
                value = getattr(_DEFAULT_GEOMETRY_SOURCE[self.orientation], key)
            values[key] = value
        candidate = replace(self, **values)
        candidate._validate()
        self.assign(candidate)

    def assign(self, other: "AxisConfig") -> None:
        """Copy every field of ``other`` onto this config, keeping its identity."""
        if other.orientation is not self.orientation:
            raise ValueError(f"cannot assign a {other.kind} config to a {self.kind} config")
        for item in fields(self):
            setattr(self, item.name, getattr(other, item.name))

    def _validate(self) -> None:
        if self.min > self.max:
            raise ConfigurationError(f"min {self.min} exceeds max {self.max}", axis=self.kind, field="min")
        if self.min_scale > self.max_scale:
            raise ConfigurationError(
                f"min_scale {self.min_scale} exceeds max_scale {self.max_scale}",
                axis=self.kind,
                field="min_scale",
            )
        if self.min_scale <= 0:
            raise ConfigurationError("min_scale must be > 0", axis=self.kind, field="min_scale")
        self.scale = min(max(self.scale, self.min_scale), self.max_scale)


_FLOAT_FIELDS = {"min", "max", "offset", "origin", "scale", "min_scale", "max_scale"}
_GEOMETRY_FIELDS = {"get_coords", "get_range", "get_ratio"}
_MERGEABLE_FIELDS = {f.name for f in fields(AxisConfig)} - {"orientation"}
_DEFAULT_GEOMETRY_SOURCE = {o: AxisConfig(orientation=o) for o in Orientation}
_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def _normalize_key(key: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", str(key)).lower()


def _coerce_float(value: Any, *, axis: str, field: str) -> float:
    if isinstance(value, bool):
        raise ConfigurationError(f"expected a number, got {value!r}", axis=axis, field=field)
    try:
        out = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"expected a number, got {value!r}", axis=axis, field=field) from exc
    if math.isnan(out):
        raise ConfigurationError("value must not be NaN", axis=axis, field=field)
    return out


def default_axis_config(kind: Orientation | str) -> AxisConfig:
    config = AxisConfig(orientation=Orientation(kind))
    config.merge({"type": config.type})
    return config


def build_axis_config(kind: Orientation | str, option: Any) -> AxisConfig:
    """Create the persistent config for one axis from a constructor option.

    ``False``/``None`` leaves the axis disabled, ``True`` enables it with
    defaults and a mapping enables it and merges the mapping on top.
    """
    config = default_axis_config(kind)
    apply_axis_option(config, option, enable=True)
    return config


def apply_axis_option(config: AxisConfig, option: Any, *, enable: bool = False) -> None:
    if option is None:
        return
    if isinstance(option, bool):
        config.disabled = not option
        return
    if not isinstance(option, Mapping):
        raise ConfigurationError(f"expected bool or mapping, got {type(option).__name__}", axis=config.kind)
    if enable:
        config.disabled = False
    config.merge(option)


def apply_axis_options(configs: Mapping[str, AxisConfig], options: Mapping[str, Any]) -> None:
    """Apply per-axis options to every config, or to none if any option is rejected."""
    staged = {kind: replace(config) for kind, config in configs.items()}
    for kind, config in staged.items():
        apply_axis_option(config, options.get(kind))
    for kind, config in configs.items():
        config.assign(staged[kind])
