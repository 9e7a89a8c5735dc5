from __future__ import annotations

from datetime import datetime, timezone
import math

import numpy as np


MAX_TICKS = 10_000

_MINUTE = 60.0
_HOUR = 3600.0
_DAY = 86400.0

# (step seconds, strftime pattern for labels at that step)
TIME_STEPS: tuple[tuple[float, str], ...] = (
    (1.0, "%H:%M:%S"),
    (2.0, "%H:%M:%S"),
    (5.0, "%H:%M:%S"),
    (10.0, "%H:%M:%S"),
    (15.0, "%H:%M:%S"),
    (30.0, "%H:%M:%S"),
    (_MINUTE, "%H:%M"),
    (2 * _MINUTE, "%H:%M"),
    (5 * _MINUTE, "%H:%M"),
    (10 * _MINUTE, "%H:%M"),
    (15 * _MINUTE, "%H:%M"),
    (30 * _MINUTE, "%H:%M"),
    (_HOUR, "%H:%M"),
    (2 * _HOUR, "%H:%M"),
    (3 * _HOUR, "%H:%M"),
    (6 * _HOUR, "%d %H:%M"),
    (12 * _HOUR, "%d %H:%M"),
    (_DAY, "%Y-%m-%d"),
    (2 * _DAY, "%Y-%m-%d"),
    (7 * _DAY, "%Y-%m-%d"),
    (30 * _DAY, "%Y-%m"),
    (91 * _DAY, "%Y-%m"),
    (365 * _DAY, "%Y"),
)


def nice_step(value: float) -> float:
    """Round a positive span to 1, 2 or 5 times a power of ten."""
    if not np.isfinite(value) or value <= 0:
        raise ValueError("step must be a positive finite number")
    exp = np.floor(np.log10(value))
    frac = value / (10**exp)
    if frac < 1.5:
        nice_frac = 1.0
    elif frac < 3.0:
        nice_frac = 2.0
    elif frac < 7.0:
        nice_frac = 5.0
    else:
        nice_frac = 10.0
    return float(nice_frac * (10**exp))


def ticks_in_range(start: float, end: float, step: float) -> list[float]:
    """Multiples of ``step`` inside ``[start, end]``.

    Ticks are built from integer step indices, so index 0 is always an exact 0.0.
    """
    if not (np.isfinite(start) and np.isfinite(end) and np.isfinite(step)) or step <= 0:
        return []
    first = math.ceil(min(start, end) / step)
    last = math.floor(max(start, end) / step)
    if last < first or last - first + 1 > MAX_TICKS:
        return []
    return [float(index * step) for index in range(first, last + 1)]


def time_step(min_seconds: float) -> tuple[float, str]:
    for step, pattern in TIME_STEPS:
        if step >= min_seconds:
            return step, pattern
    last_step, pattern = TIME_STEPS[-1]
    years = nice_step(min_seconds / last_step)
    return last_step * max(1.0, years), pattern


def format_time_tick(seconds: float, pattern: str) -> str:
    return datetime.fromtimestamp(float(seconds), tz=timezone.utc).strftime(pattern)
