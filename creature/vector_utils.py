#!/usr/bin/env python3
"""
Vector helper functions for 2D operations.

These are small, fast functions for vector math used throughout the solver.
Vectors are plain (x, y) tuples; angles are radians measured counter-clockwise
from the +x axis (screen y points down, so on screen that reads clockwise).
"""
import math
from typing import Tuple

Vec2 = Tuple[float, float]

ZERO: Vec2 = (0.0, 0.0)

# Direction used when a zero-length vector has to be normalized.
DEFAULT_DIRECTION: Vec2 = (1.0, 0.0)


def clamp(x: float, a: float, b: float) -> float:
    """Clamp x to the inclusive range [a, b]."""
    return max(a, min(b, x))


def vec_add(a: Vec2, b: Vec2) -> Vec2:
    return (a[0] + b[0], a[1] + b[1])


def vec_sub(a: Vec2, b: Vec2) -> Vec2:
    return (a[0] - b[0], a[1] - b[1])


def vec_scale(a: Vec2, s: float) -> Vec2:
    return (a[0] * s, a[1] * s)


def vec_len(a: Vec2) -> float:
    return math.hypot(a[0], a[1])


def vec_len_sq(a: Vec2) -> float:
    return a[0] * a[0] + a[1] * a[1]


def vec_distance(a: Vec2, b: Vec2) -> float:
    return math.hypot(b[0] - a[0], b[1] - a[1])


def vec_norm(a: Vec2) -> Vec2:
    """Unit vector in the direction of a, or DEFAULT_DIRECTION for a zero vector."""
    l = vec_len(a)
    if l == 0:
        return DEFAULT_DIRECTION
    return (a[0] / l, a[1] / l)


def vec_dot(a: Vec2, b: Vec2) -> float:
    return a[0] * b[0] + a[1] * b[1]


def vec_perp_dot(a: Vec2, b: Vec2) -> float:
    """2D cross product; negative when b is clockwise from a."""
    return a[0] * b[1] - a[1] * b[0]


def vec_from_angle(angle: float) -> Vec2:
    return (math.cos(angle), math.sin(angle))


def vec_to_angle(a: Vec2) -> float:
    return math.atan2(a[1], a[0])


def vec_angle_between(a: Vec2, b: Vec2) -> float:
    """Signed angle in (-pi, pi] that rotates a onto b."""
    return math.atan2(vec_perp_dot(a, b), vec_dot(a, b))


def vec_lerp(a: Vec2, b: Vec2, t: float) -> Vec2:
    """Linear interpolation; t=0 gives a, t=1 gives b."""
    return (a[0] + (b[0] - a[0]) * t, a[1] + (b[1] - a[1]) * t)
