from plot_grid.config import AxisConfig, Orientation, Viewport, build_axis_config, default_axis_config
from plot_grid.engine import GridEngine, GridState
from plot_grid.errors import ConfigurationError
from plot_grid.interaction import GestureTracker, PanZoomEvent, apply_pan_zoom
from plot_grid.presets import TYPE_PRESETS, register_preset
from plot_grid.state import AxisState, compute_axis_state

__all__ = [
    "AxisConfig",
    "AxisState",
    "ConfigurationError",
    "GestureTracker",
    "GridEngine",
    "GridState",
    "Orientation",
    "PanZoomEvent",
    "TYPE_PRESETS",
    "Viewport",
    "apply_pan_zoom",
    "build_axis_config",
    "compute_axis_state",
    "default_axis_config",
    "register_preset",
]
