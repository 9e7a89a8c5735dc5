from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from plot_grid.config import AxisConfig, Viewport, as_viewport


ZOOM_LIMIT = 0.75


@dataclass(frozen=True)
class PanZoomEvent:
    """One drag/wheel delta in viewport pixels, with the pointer position."""

    dx: float = 0.0
    dy: float = 0.0
    dz: float = 0.0
    x: float = 0.0
    y: float = 0.0


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def _pan_enabled(axis: AxisConfig, event: PanZoomEvent) -> bool:
    if callable(axis.pan):
        return bool(axis.pan(event))
    return bool(axis.pan)


def _zoom_enabled(axis: AxisConfig, event: PanZoomEvent) -> bool:
    if axis.zoom is False:
        return False
    if callable(axis.zoom):
        return bool(axis.zoom(event))
    return True


def apply_pan_zoom(
    event: PanZoomEvent,
    x_axis: AxisConfig,
    y_axis: AxisConfig,
    viewport: Viewport | Sequence[float],
) -> dict[str, dict[str, float]]:
    """Return the `{x: {offset, scale}, y: {offset, scale}}` fragment for one gesture.

    Zooming moves the offset so the value under the pointer keeps its
    position on screen. Configs are only read; the caller merges the result.
    """
    left, top, width, height = as_viewport(viewport)
    zoom = _clamp(-event.dz, -height * ZOOM_LIMIT, height * ZOOM_LIMIT) / height

    x = {"offset": x_axis.offset, "scale": x_axis.scale}
    y = {"offset": y_axis.offset, "scale": y_axis.scale}

    if not x_axis.disabled:
        if _pan_enabled(x_axis, event):
            x["offset"] -= x_axis.scale * event.dx
        if _zoom_enabled(x_axis, event):
            tx = (event.x - left) / width - x_axis.origin
            prev_scale = x["scale"]
            x["scale"] = _clamp(prev_scale * (1.0 - zoom), x_axis.min_scale, x_axis.max_scale)
            x["offset"] -= width * (x["scale"] - prev_scale) * tx

    if not y_axis.disabled:
        if _pan_enabled(y_axis, event):
            # Screen rows grow downward while values grow upward.
            y["offset"] += y_axis.scale * event.dy
        if _zoom_enabled(y_axis, event):
            ty = (1.0 - y_axis.origin) - (event.y - top) / height
            prev_scale = y["scale"]
            y["scale"] = _clamp(prev_scale * (1.0 - zoom), y_axis.min_scale, y_axis.max_scale)
            y["offset"] -= height * (y["scale"] - prev_scale) * ty

    return {"x": x, "y": y}


class GestureTracker:
    """Turns normalized pointer/wheel input into `PanZoomEvent` deltas.

    Drags report the pointer movement since the previous move while a button
    is held; wheel input reports its vertical delta as ``dz``.
    """

    def __init__(self) -> None:
        self._last: tuple[float, float] | None = None

    @property
    def dragging(self) -> bool:
        return self._last is not None

    def feed(self, event_type: str, payload: object) -> PanZoomEvent | None:
        if not isinstance(payload, Mapping):
            return None
        x = _number(payload.get("x"))
        y = _number(payload.get("y"))
        if event_type == "pointer_down":
            self._last = (x, y)
            return None
        if event_type == "pointer_up":
            self._last = None
            return None
        if event_type == "pointer_move":
            if self._last is None:
                return None
            last_x, last_y = self._last
            self._last = (x, y)
            return PanZoomEvent(dx=x - last_x, dy=y - last_y, x=x, y=y)
        if event_type == "wheel":
            return PanZoomEvent(dz=_number(payload.get("delta_y")), x=x, y=y)
        return None


def _number(value: Any) -> float:
    if value is None:
        return 0.0
    return float(value)
