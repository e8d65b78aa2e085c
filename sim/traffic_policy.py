#!/usr/bin/env python3
"""
sim/traffic_policy.py
=====================
Tunable kinematic, arbitration and signal-timing parameters for the
intersection simulation.  Every constant lives in the frozen
:class:`TrafficPolicy` dataclass so that experiments can swap policies
without touching code.

Also provides the right-of-way tables used when two vehicles contest the
intersection:

* :func:`priority_yield`: direction/turn priority lookup.
* :func:`must_yield`: full decision including the distance fallback.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Optional, Tuple

from sim.types import Direction, Turn


@dataclass(frozen=True)
class TrafficPolicy:
    """Immutable bag of every tunable simulation parameter.

    Groups: kinematics, car-following, intersection arbitration,
    traffic-light reaction, turning, safety net, signal timing.
    Distances are in world units, times in ticks unless noted.
    """

    # ── Kinematics ────────────────────────────────────────────────────────
    max_speed: float = 3.0
    """Cruising speed (units per tick)."""

    acceleration: float = 0.1
    """Speed gained per tick when the road ahead is clear."""

    deceleration: float = 0.2
    """Largest speed drop per tick under the proportional following law.

    The plain law sets speed to clamp(gap × gain) outright.  This cap only
    bites for policies with a small ``min_gap``; with the defaults any gap
    short enough to need it already stops the vehicle.
    """

    # ── Car-following ─────────────────────────────────────────────────────
    following_distance: float = 50.0
    """Gap below which the vehicle ahead constrains our speed."""

    min_gap: float = 20.0
    """Gap below which a follower stops outright."""

    critical_gap: float = 2.0
    """Gap below which the follower is nudged backward by one unit."""

    follow_gain: float = 0.8
    """Proportional factor: target speed = gap × gain."""

    min_follow_speed: float = 1.0
    """Floor of the proportional following law."""

    # ── Intersection arbitration ──────────────────────────────────────────
    approach_zone: float = 80.0
    """Distance before the stop line at which arbitration starts."""

    opposing_window: float = 20.0
    """Max ETA difference (ticks) for a head-on left-turn conflict."""

    perpendicular_window: float = 15.0
    """Base ETA difference (ticks) for a crossing conflict."""

    deadlock_release_ticks: int = 100
    """Period of the forced release for vehicles stuck inside the box."""

    # ── Traffic-light reaction ────────────────────────────────────────────
    light_stop_window: float = 30.0
    """A red light stops vehicles whose bumper is this close to the line."""

    # ── Turning ───────────────────────────────────────────────────────────
    turn_zone: float = 5.0
    """Half-width of the band around the centre where turns execute."""

    turn_mutation_probability: float = 0.3
    """Per-tick chance that an approaching driver re-decides the turn."""

    lane_adjust_step: float = 1.0
    """Lateral units per tick used to re-centre after a turn."""

    # ── Safety net ────────────────────────────────────────────────────────
    collision_margin: float = 2.0
    """Shrink applied to rectangles before overlap tests."""

    # ── Signal timing (wall-clock seconds) ────────────────────────────────
    default_cycle_s: float = 5.0
    min_cycle_s: float = 3.0
    max_cycle_s: float = 10.0

    high_congestion: int = 4
    """Stopped-at-red count at which an axis counts as congested."""

    low_congestion: int = 2
    """Both axes below this count means traffic is light."""


# ── Right-of-way tables ──────────────────────────────────────────────────────

# (own heading, other heading): crossing traffic we must give way to.
CROSS_YIELDS: FrozenSet[Tuple[Direction, Direction]] = frozenset({
    (Direction.NORTH, Direction.EAST),
    (Direction.EAST, Direction.SOUTH),
    (Direction.SOUTH, Direction.WEST),
    (Direction.WEST, Direction.NORTH),
})

# (own turn, oncoming turn): head-on pairings where we give way.
OPPOSING_YIELDS: FrozenSet[Tuple[Turn, Turn]] = frozenset({
    (Turn.LEFT, Turn.STRAIGHT),
    (Turn.LEFT, Turn.RIGHT),
    (Turn.STRAIGHT, Turn.RIGHT),
})


def priority_yield(
    direction: Direction,
    turn: Turn,
    other_direction: Direction,
    other_turn: Turn,
) -> Optional[bool]:
    """Look up the direction/turn priority table.

    Returns ``True`` (yield), ``False`` (keep going) or ``None`` when the
    table has no rule for the pairing (same heading, or oncoming vehicles
    with the same intent).
    """
    if direction.is_perpendicular_to(other_direction):
        return (direction, other_direction) in CROSS_YIELDS
    if other_direction is direction.opposite:
        if (turn, other_turn) in OPPOSING_YIELDS:
            return True
        if (other_turn, turn) in OPPOSING_YIELDS:
            return False
    return None


def must_yield(
    direction: Direction,
    turn: Turn,
    distance: float,
    other_direction: Direction,
    other_turn: Turn,
    other_distance: float,
) -> bool:
    """Decide whether a vehicle gives way, falling back to the rule that
    the vehicle farther from the intersection centre yields.
    """
    rule = priority_yield(direction, turn, other_direction, other_turn)
    if rule is not None:
        return rule
    return distance > other_distance
