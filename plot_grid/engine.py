from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from typing import Any, Callable, Mapping, Sequence, Union

from plot_grid.colors import blend_alpha
from plot_grid.config import (
    AxisConfig,
    Viewport,
    apply_axis_options,
    as_viewport,
    build_axis_config,
)
from plot_grid.errors import ConfigurationError
from plot_grid.interaction import PanZoomEvent, apply_pan_zoom
from plot_grid.state import AxisState, Blend, ToPx, compute_axis_state, resolve_offset
from plot_grid.units import to_px as default_to_px


LOGGER = logging.getLogger(__name__)

AXIS_KINDS = ("x", "y", "r", "a")

ViewportSource = Union[Viewport, Sequence[float], Callable[[], Sequence[float]]]
UpdateListener = Callable[[Mapping[str, Any] | None], None]
Renderer = Callable[["GridState"], None]


@dataclass
class GridState:
    x: AxisState
    y: AxisState
    r: AxisState
    a: AxisState

    def __getitem__(self, kind: str) -> AxisState:
        if kind not in AXIS_KINDS:
            raise KeyError(kind)
        return getattr(self, kind)


class GridEngine:
    """Owns the x/y/r/a axis configs and recomputes their states on every update.

    Updates run synchronously: merge options, recompute all axis states,
    link opposite axes, notify update listeners, then call the renderer.
    """

    def __init__(
        self,
        options: Mapping[str, Any] | None = None,
        *,
        viewport: ViewportSource,
        renderer: Renderer | None = None,
        to_px: ToPx = default_to_px,
        blend: Blend = blend_alpha,
    ) -> None:
        opts = dict(options or {})
        _check_axis_keys(opts)
        if all(opts.get(kind) is None for kind in AXIS_KINDS):
            opts["x"] = True
            opts["y"] = True
        self._viewport = viewport
        self._renderer = renderer
        self._to_px = to_px
        self._blend = blend
        self._listeners: list[UpdateListener] = []
        self._axes = {kind: build_axis_config(kind, opts.get(kind)) for kind in AXIS_KINDS}
        self._state: GridState | None = None
        self.update()

    @property
    def x(self) -> AxisConfig:
        return self._axes["x"]

    @property
    def y(self) -> AxisConfig:
        return self._axes["y"]

    @property
    def r(self) -> AxisConfig:
        return self._axes["r"]

    @property
    def a(self) -> AxisConfig:
        return self._axes["a"]

    @property
    def state(self) -> GridState:
        if self._state is None:
            raise RuntimeError("grid state has not been computed yet")
        return self._state

    @property
    def viewport(self) -> Viewport:
        source = self._viewport
        return as_viewport(source() if callable(source) else source)

    def add_listener(self, listener: UpdateListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def set_renderer(self, renderer: Renderer | None) -> None:
        self._renderer = renderer

    def update(self, options: Mapping[str, Any] | None = None) -> "GridEngine":
        if options:
            _check_axis_keys(options)
            apply_axis_options(self._axes, options)

        viewport = self.viewport
        for config in self._axes.values():
            if not config.disabled:
                _normalize_offset(config, viewport)

        states = {
            kind: compute_axis_state(config, viewport, to_px=self._to_px, blend=self._blend)
            for kind, config in self._axes.items()
        }
        states["x"].opposite = states["y"]
        states["y"].opposite = states["x"]
        states["r"].opposite = states["a"]
        states["a"].opposite = states["r"]
        self._state = GridState(**states)
        LOGGER.debug("grid updated for viewport %s with options %s", viewport, options)

        for listener in list(self._listeners):
            listener(options)
        if self._renderer is not None:
            self._renderer(self._state)
        return self

    def resize(self, viewport: ViewportSource | None = None) -> "GridEngine":
        if viewport is not None:
            self._viewport = viewport
        return self.update()

    def handle_gesture(self, event: PanZoomEvent) -> "GridEngine":
        fragment = apply_pan_zoom(event, self.x, self.y, self.viewport)
        return self.update(fragment)


def _check_axis_keys(options: Mapping[str, Any]) -> None:
    for key in options:
        if key not in AXIS_KINDS:
            raise ConfigurationError("unknown grid option", field=str(key))


def _normalize_offset(config: AxisConfig, viewport: Viewport) -> None:
    # The one in-place write to a config outside of merging. The stored
    # offset stays origin-anchored; it only moves when the window hit a bound.
    sizing = AxisState(orientation=config.orientation, config=config, viewport=viewport, scale=config.scale)
    range_ = config.get_range(sizing)
    if not math.isfinite(range_):
        return
    anchor = range_ * max(0.0, min(1.0, config.origin))
    start = resolve_offset(config, range_)
    if start != config.offset - anchor:
        config.offset = start + anchor
