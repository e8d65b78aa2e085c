#!/usr/bin/env python3
"""
sim/physics.py
==============
Low-level kinematic helpers used by :mod:`sim.vehicle` and :mod:`sim.world`.

Keeping these in a separate module avoids circular imports and makes unit
testing straightforward.
"""

from __future__ import annotations

import math

from sim.geometry import Rect


def rects_overlap(a: Rect, b: Rect, margin: float = 0.0) -> bool:
    """True when *a* and *b* overlap after both are shrunk by *margin*.

    Touching edges do not count as an overlap.
    """
    a = a.shrink(margin)
    b = b.shrink(margin)
    return (
        a.x < b.right
        and b.x < a.right
        and a.y < b.bottom
        and b.y < a.bottom
    )


def time_to_reach(distance: float, speed: float) -> float:
    """Ticks needed to cover *distance* at *speed* units per tick.

    Returns ``math.inf`` for a stationary (or reversing) vehicle so
    callers never divide by zero.
    """
    if speed <= 0.0:
        return math.inf
    return distance / speed


def step_toward(value: float, target: float, step: float) -> float:
    """Move *value* toward *target* by at most *step*."""
    if abs(target - value) <= step:
        return target
    return value + step if target > value else value - step


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))
