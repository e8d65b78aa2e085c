#!/usr/bin/env python3
"""
sim/geometry.py
===============
Static layout of the single four-way intersection.

Screen coordinates: origin at the top-left of the world, *x* grows to the
right and *y* grows downward.  Traffic keeps to the right-hand lane of each
road.  This module is a leaf: it never imports from other project modules.
"""

from __future__ import annotations

from typing import NamedTuple, Tuple


class Rect(NamedTuple):
    """Axis-aligned rectangle anchored at its top-left corner."""

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x + self.width / 2.0, self.y + self.height / 2.0)

    def shrink(self, margin: float) -> "Rect":
        """Return a copy pulled in by *margin* on every side."""
        return Rect(
            self.x + margin,
            self.y + margin,
            max(0.0, self.width - 2.0 * margin),
            max(0.0, self.height - 2.0 * margin),
        )


# ── World ────────────────────────────────────────────────────────────────────
WORLD_WIDTH: int = 800
WORLD_HEIGHT: int = 600
CENTER_X: float = WORLD_WIDTH / 2
CENTER_Y: float = WORLD_HEIGHT / 2

# ── Roads & lanes ────────────────────────────────────────────────────────────
ROAD_WIDTH: float = 100.0
LANE_WIDTH: float = ROAD_WIDTH / 2
LANE_OFFSET: float = LANE_WIDTH / 4
"""Distance of every lane centre from the intersection centre."""

NORTHBOUND_LANE_X: float = CENTER_X + LANE_OFFSET
SOUTHBOUND_LANE_X: float = CENTER_X - LANE_OFFSET
EASTBOUND_LANE_Y: float = CENTER_Y + LANE_OFFSET
WESTBOUND_LANE_Y: float = CENTER_Y - LANE_OFFSET

# ── Intersection box ─────────────────────────────────────────────────────────
INTERSECTION_MARGIN: float = 5.0
INTERSECTION_HALF: float = ROAD_WIDTH / 2 + INTERSECTION_MARGIN
INTERSECTION_BOX: Rect = Rect(
    CENTER_X - INTERSECTION_HALF,
    CENTER_Y - INTERSECTION_HALF,
    2 * INTERSECTION_HALF,
    2 * INTERSECTION_HALF,
)

# Stop lines sit on the approach side of the road edge.
STOP_LINE_NORTHBOUND_Y: float = CENTER_Y + ROAD_WIDTH / 2
STOP_LINE_SOUTHBOUND_Y: float = CENTER_Y - ROAD_WIDTH / 2
STOP_LINE_EASTBOUND_X: float = CENTER_X - ROAD_WIDTH / 2
STOP_LINE_WESTBOUND_X: float = CENTER_X + ROAD_WIDTH / 2

# ── Vehicles ─────────────────────────────────────────────────────────────────
VEHICLE_LENGTH: float = 40.0
VEHICLE_WIDTH: float = 20.0

SPAWN_OFFSET: float = 50.0
"""How far beyond the world edge new vehicles appear."""

EVICTION_MARGIN: float = 100.0
"""Vehicles further than this outside the world are removed."""


def in_world(rect: Rect, margin: float = EVICTION_MARGIN) -> bool:
    """True while *rect*'s anchor lies within the world grown by *margin*."""
    return (
        -margin <= rect.x <= WORLD_WIDTH + margin
        and -margin <= rect.y <= WORLD_HEIGHT + margin
    )
