"""
sim/types.py
============
Small closed enumerations shared by the simulation core.
"""

from __future__ import annotations

import random
from enum import Enum
from typing import Dict, Optional, Tuple

ColorRGB = Tuple[int, int, int]


class Direction(Enum):
    """Heading of a vehicle (the way it is travelling *towards*)."""

    NORTH = "N"
    SOUTH = "S"
    EAST = "E"
    WEST = "W"

    @property
    def axis(self) -> str:
        """Signal axis this heading belongs to: ``"NS"`` or ``"EW"``."""
        return "NS" if self in (Direction.NORTH, Direction.SOUTH) else "EW"

    @property
    def is_vertical(self) -> bool:
        return self.axis == "NS"

    @property
    def opposite(self) -> "Direction":
        return _OPPOSITE[self]

    @property
    def vector(self) -> Tuple[int, int]:
        """Unit step in screen coordinates (y grows downward)."""
        return _VECTORS[self]

    def is_perpendicular_to(self, other: "Direction") -> bool:
        return self.axis != other.axis

    def turned(self, turn: "Turn") -> "Direction":
        """Heading after performing *turn* (right-hand traffic)."""
        if turn is Turn.RIGHT:
            return _RIGHT_OF[self]
        if turn is Turn.LEFT:
            return _LEFT_OF[self]
        return self

    @classmethod
    def parse(cls, raw: str) -> "Direction":
        """Accept ``"N"`` / ``"north"`` / ``"NORTH"`` style names."""
        key = str(raw).strip().upper()
        for d in cls:
            if key in (d.value, d.name):
                return d
        raise ValueError(f"unknown direction: {raw!r}")

    @classmethod
    def random(cls, rng: Optional[random.Random] = None) -> "Direction":
        return (rng or random).choice(list(cls))


_OPPOSITE: Dict[Direction, Direction] = {
    Direction.NORTH: Direction.SOUTH,
    Direction.SOUTH: Direction.NORTH,
    Direction.EAST: Direction.WEST,
    Direction.WEST: Direction.EAST,
}

_VECTORS: Dict[Direction, Tuple[int, int]] = {
    Direction.NORTH: (0, -1),
    Direction.SOUTH: (0, 1),
    Direction.EAST: (1, 0),
    Direction.WEST: (-1, 0),
}

_RIGHT_OF: Dict[Direction, Direction] = {
    Direction.NORTH: Direction.EAST,
    Direction.EAST: Direction.SOUTH,
    Direction.SOUTH: Direction.WEST,
    Direction.WEST: Direction.NORTH,
}
_LEFT_OF: Dict[Direction, Direction] = {v: k for k, v in _RIGHT_OF.items()}


class Turn(Enum):
    """Intended manoeuvre at the intersection."""

    LEFT = "LEFT"
    RIGHT = "RIGHT"
    STRAIGHT = "STRAIGHT"

    @property
    def color(self) -> ColorRGB:
        """Display colour encoding the intent."""
        return _TURN_COLORS[self]

    @classmethod
    def random(cls, rng: Optional[random.Random] = None) -> "Turn":
        return (rng or random).choice(list(cls))


_TURN_COLORS: Dict[Turn, ColorRGB] = {
    Turn.LEFT: (255, 0, 0),
    Turn.RIGHT: (0, 255, 0),
    Turn.STRAIGHT: (0, 0, 255),
}


class StopReason(Enum):
    """Why a vehicle is currently halted."""

    NONE = "NONE"
    TRAFFIC_LIGHT = "TRAFFIC_LIGHT"
    VEHICLE_AHEAD = "VEHICLE_AHEAD"
    INTERSECTION_CONFLICT = "INTERSECTION_CONFLICT"


class LightState(Enum):
    RED = "RED"
    GREEN = "GREEN"
