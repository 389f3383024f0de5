#!/usr/bin/env python3
"""
Vector helper functions for 2D operations.

These are small, fast functions for vector math used throughout the app.
"""
import math
from typing import Tuple


def vec_add(a: Tuple[float, float], b: Tuple[float, float]) -> Tuple[float, float]:
    return (a[0] + b[0], a[1] + b[1])


def vec_sub(a: Tuple[float, float], b: Tuple[float, float]) -> Tuple[float, float]:
    return (a[0] - b[0], a[1] - b[1])


def vec_scale(a: Tuple[float, float], s: float) -> Tuple[float, float]:
    return (a[0] * s, a[1] * s)


def vec_len(a: Tuple[float, float]) -> float:
    return math.hypot(a[0], a[1])


def vec_cross(a: Tuple[float, float], b: Tuple[float, float]) -> float:
    """z-component of the 3D cross product of two planar vectors."""
    return a[0] * b[1] - a[1] * b[0]


def vec_is_finite(a: Tuple[float, float]) -> bool:
    return math.isfinite(a[0]) and math.isfinite(a[1])
