from __future__ import annotations

from typing import Any

from PIL import ImageColor


RGBA = tuple[int, int, int, int]


def parse_color(value: Any) -> RGBA:
    """Resolve a CSS color string or an RGB(A) tuple to an RGBA tuple."""
    if isinstance(value, str):
        try:
            rgb = ImageColor.getrgb(value)
        except ValueError as exc:
            raise ValueError(f"unknown color: {value!r}") from exc
        if len(rgb) == 3:
            return (int(rgb[0]), int(rgb[1]), int(rgb[2]), 255)
        return (int(rgb[0]), int(rgb[1]), int(rgb[2]), int(rgb[3]))
    if isinstance(value, (tuple, list)) and len(value) in (3, 4):
        channels = [max(0, min(255, int(c))) for c in value]
        if len(channels) == 3:
            channels.append(255)
        return (channels[0], channels[1], channels[2], channels[3])
    raise ValueError(f"unsupported color value: {value!r}")


def blend_alpha(color: Any, alpha: float) -> RGBA:
    r, g, b, a = parse_color(color)
    out_a = int(round(max(0.0, min(1.0, float(alpha))) * a))
    return (r, g, b, out_a)
