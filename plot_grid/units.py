from __future__ import annotations

import re


CSS_DPI = 96.0
DEFAULT_EM_PX = 16.0

_UNIT_RE = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)\s*([a-zA-Z%]*)\s*$")

_PX_PER_UNIT = {
    "": 1.0,
    "px": 1.0,
    "pt": CSS_DPI / 72.0,
    "pc": CSS_DPI / 6.0,
    "in": CSS_DPI,
    "cm": CSS_DPI / 2.54,
    "mm": CSS_DPI / 25.4,
    "q": CSS_DPI / 101.6,
    "em": DEFAULT_EM_PX,
    "rem": DEFAULT_EM_PX,
}


def parse_unit(value: str) -> tuple[float, str]:
    """Split a CSS-like length such as ``"10pt"`` into ``(10.0, "pt")``."""
    match = _UNIT_RE.match(str(value))
    if match is None:
        raise ValueError(f"cannot parse length: {value!r}")
    return float(match.group(1)), match.group(2).lower()


def to_px(magnitude: float, unit: str) -> float:
    factor = _PX_PER_UNIT.get(unit.lower())
    if factor is None:
        raise ValueError(f"unsupported unit: {unit!r}")
    return float(magnitude) * factor
