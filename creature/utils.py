#!/usr/bin/env python3
"""
General utilities for Procedural Creature: number parsing and RGB colour helpers.

Colours are RGB tuples in 0..255, the form pygame and Dear PyGui both accept.
"""
from typing import Optional, Sequence, Tuple

Color = Tuple[int, int, int]


def try_float(val) -> Optional[float]:
    try:
        return float(val)
    except (TypeError, ValueError):
        return None


def _channel(x: float) -> int:
    return max(0, min(255, int(round(x))))


def coerce_color(c: Optional[Sequence], default: Color) -> Color:
    """Clamp a JSON/UI colour to an RGB tuple; anything unreadable gives `default`."""
    try:
        channels = [try_float(x) for x in c[:3]]
    except TypeError:
        return default
    if len(channels) < 3 or None in channels:
        return default
    return (_channel(channels[0]), _channel(channels[1]), _channel(channels[2]))


def hex_to_rgb(value: int) -> Color:
    """0xRRGGBB -> (r, g, b)."""
    return ((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF)


def color_mul(a: Color, b: Color) -> Color:
    """Component-wise product, treating each channel as a 0..1 fraction."""
    return tuple(_channel(x * y / 255.0) for x, y in zip(a, b))


def color_mix(a: Color, b: Color, t: float) -> Color:
    """Blend from a (t=0) to b (t=1)."""
    return tuple(_channel(x + (y - x) * t) for x, y in zip(a, b))
