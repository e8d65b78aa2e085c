#!/usr/bin/env python3
"""
sim/vehicle.py
==============
A single vehicle agent and its per-tick decision pipeline.

Each tick the agent:
  - may re-decide its turn while still approaching,
  - follows the vehicle ahead in its lane,
  - arbitrates right of way with crossing / oncoming traffic,
  - reacts to the traffic light for its heading,
  - and, if nothing holds it, turns, moves and re-centres in its lane.

The agent only ever mutates itself.  Other vehicles are seen through the
tick-start snapshot handed to :meth:`Vehicle.step`.
"""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Sequence, Tuple

from sim.geometry import (
    CENTER_X, CENTER_Y, EASTBOUND_LANE_Y, INTERSECTION_BOX, LANE_WIDTH,
    NORTHBOUND_LANE_X, SOUTHBOUND_LANE_X, SPAWN_OFFSET,
    STOP_LINE_EASTBOUND_X, STOP_LINE_NORTHBOUND_Y, STOP_LINE_SOUTHBOUND_Y,
    STOP_LINE_WESTBOUND_X, VEHICLE_LENGTH, VEHICLE_WIDTH, WESTBOUND_LANE_Y,
    WORLD_HEIGHT, WORLD_WIDTH, Rect,
)
from sim.physics import clamp, rects_overlap, step_toward, time_to_reach
from sim.traffic_policy import TrafficPolicy, must_yield
from sim.types import ColorRGB, Direction, LightState, StopReason, Turn

log = logging.getLogger("vehicle")

_DEFAULT_POLICY = TrafficPolicy()

# Lateral coordinate of the lane centre for each heading.
LANE_CENTER: Dict[Direction, float] = {
    Direction.NORTH: NORTHBOUND_LANE_X,
    Direction.SOUTH: SOUTHBOUND_LANE_X,
    Direction.EAST: EASTBOUND_LANE_Y,
    Direction.WEST: WESTBOUND_LANE_Y,
}

# Fields restored by the orchestrator when a move is rejected.
_POSE_FIELDS: Tuple[str, ...] = (
    "x", "y", "width", "height", "direction",
    "stopped", "stop_reason", "yielding_to",
    "has_turned", "turn_executed", "target_x", "target_y",
)


def spawn_rect(direction: Direction) -> Rect:
    """Off-screen starting rectangle for a vehicle heading *direction*."""
    lane = LANE_CENTER[direction]
    if direction is Direction.NORTH:
        return Rect(lane - VEHICLE_WIDTH / 2, WORLD_HEIGHT + SPAWN_OFFSET,
                    VEHICLE_WIDTH, VEHICLE_LENGTH)
    if direction is Direction.SOUTH:
        return Rect(lane - VEHICLE_WIDTH / 2, -SPAWN_OFFSET - VEHICLE_LENGTH,
                    VEHICLE_WIDTH, VEHICLE_LENGTH)
    if direction is Direction.EAST:
        return Rect(-SPAWN_OFFSET - VEHICLE_LENGTH, lane - VEHICLE_WIDTH / 2,
                    VEHICLE_LENGTH, VEHICLE_WIDTH)
    return Rect(WORLD_WIDTH + SPAWN_OFFSET, lane - VEHICLE_WIDTH / 2,
                VEHICLE_LENGTH, VEHICLE_WIDTH)


@dataclass
class Vehicle:
    """A vehicle agent.

    Attributes
    ----------
    id : str
        Unique identifier (e.g. ``CAR_000``).
    x, y : float
        Top-left corner of the vehicle rectangle (screen coordinates).
    direction : Direction
        Current heading.  Rewritten when a turn executes.
    turn : Turn
        Intended manoeuvre; also selects the display colour.
    width, height : float
        Footprint; swapped whenever the heading rotates by 90°.
    stopped, stop_reason
        Halt flag and its cause.  ``stop_reason`` is ``NONE`` whenever
        ``stopped`` is false.
    arrival_time : int or None
        Value of :attr:`ticks` when the vehicle entered the approach zone.
    ticks : int
        Number of decision steps this vehicle has run.
    has_turned, turn_executed : bool
        Heading changed / turn decision taken for this pass.
    target_x, target_y : float or None
        Lane-centre coordinate the vehicle re-centres on after a turn.
    yielding_to : str or None
        Id of the vehicle this one is giving way to.  The hold lasts until
        that vehicle has left the approach zone and the intersection box.
    """

    id: str
    x: float
    y: float
    direction: Direction
    turn: Turn = Turn.STRAIGHT
    width: float = VEHICLE_WIDTH
    height: float = VEHICLE_LENGTH
    stopped: bool = False
    stop_reason: StopReason = StopReason.NONE
    max_speed: float = _DEFAULT_POLICY.max_speed
    current_speed: float = _DEFAULT_POLICY.max_speed
    acceleration: float = _DEFAULT_POLICY.acceleration
    deceleration: float = _DEFAULT_POLICY.deceleration
    following_distance: float = _DEFAULT_POLICY.following_distance
    arrival_time: Optional[int] = None
    ticks: int = 0
    has_turned: bool = False
    turn_executed: bool = False
    target_x: Optional[float] = None
    target_y: Optional[float] = None
    yielding_to: Optional[str] = None
    policy: TrafficPolicy = field(default=_DEFAULT_POLICY, repr=False, compare=False)
    _conflict_hold: bool = field(default=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        # Long side along the heading.
        long_side = max(self.width, self.height)
        short_side = min(self.width, self.height)
        if self.direction.is_vertical:
            self.width, self.height = short_side, long_side
        else:
            self.width, self.height = long_side, short_side
        if self.target_x is None and self.target_y is None:
            self._set_target_lane(self.direction)

    @classmethod
    def spawn(
        cls,
        direction: Direction,
        vehicle_id: str,
        rng: Optional[random.Random] = None,
        policy: Optional[TrafficPolicy] = None,
        turn: Optional[Turn] = None,
    ) -> "Vehicle":
        """Create a vehicle at the off-screen spawn point for *direction*.

        The turn intent is drawn uniformly at random unless *turn* is given.
        """
        policy = policy or _DEFAULT_POLICY
        rect = spawn_rect(direction)
        return cls(
            id=vehicle_id,
            x=rect.x,
            y=rect.y,
            direction=direction,
            turn=turn if turn is not None else Turn.random(rng),
            width=rect.width,
            height=rect.height,
            max_speed=policy.max_speed,
            current_speed=policy.max_speed,
            acceleration=policy.acceleration,
            deceleration=policy.deceleration,
            following_distance=policy.following_distance,
            policy=policy,
        )

    # ── geometry queries ──────────────────────────────────────────────────

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.width, self.height)

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x + self.width / 2.0, self.y + self.height / 2.0)

    @property
    def color(self) -> ColorRGB:
        return self.turn.color

    def lateral(self) -> float:
        """Centre coordinate across the direction of travel."""
        cx, cy = self.center
        return cx if self.direction.is_vertical else cy

    def distance_to_stop_line(self) -> float:
        """Signed distance from the front bumper to this heading's stop line.

        Positive → the line is still ahead; zero / negative → passed it.
        """
        if self.direction is Direction.NORTH:
            return self.y - STOP_LINE_NORTHBOUND_Y
        if self.direction is Direction.SOUTH:
            return STOP_LINE_SOUTHBOUND_Y - (self.y + self.height)
        if self.direction is Direction.EAST:
            return STOP_LINE_EASTBOUND_X - (self.x + self.width)
        return self.x - STOP_LINE_WESTBOUND_X

    def distance_to_center(self) -> float:
        cx, cy = self.center
        return math.hypot(cx - CENTER_X, cy - CENTER_Y)

    def time_to_center(self) -> float:
        """Estimated ticks to the intersection centre (``inf`` when parked)."""
        return time_to_reach(self.distance_to_center(), self.current_speed)

    def in_intersection(self) -> bool:
        return rects_overlap(self.rect, INTERSECTION_BOX)

    def is_approaching(self) -> bool:
        """Within the approach zone but short of the stop line."""
        return 0.0 < self.distance_to_stop_line() <= self.policy.approach_zone

    def in_approach_zone(self) -> bool:
        """Approaching, or still occupying the intersection box."""
        return self.is_approaching() or self.in_intersection()

    def same_lane(self, other: "Vehicle") -> bool:
        if self.direction.is_vertical != other.direction.is_vertical:
            return False
        return abs(self.lateral() - other.lateral()) < LANE_WIDTH / 2

    def gap_to(self, other: "Vehicle") -> float:
        """Signed bumper-to-bumper gap to *other* along our heading.

        Positive when *other* is ahead of us.
        """
        if self.direction is Direction.NORTH:
            return self.y - (other.y + other.height)
        if self.direction is Direction.SOUTH:
            return other.y - (self.y + self.height)
        if self.direction is Direction.EAST:
            return other.x - (self.x + self.width)
        return self.x - (other.x + other.width)

    def bounding_box_collision(self, other: "Vehicle", margin: Optional[float] = None) -> bool:
        if margin is None:
            margin = self.policy.collision_margin
        return rects_overlap(self.rect, other.rect, margin)

    # ── decision pipeline ─────────────────────────────────────────────────

    def step(
        self,
        peers: Sequence["Vehicle"],
        own_index: int,
        controller: Any,
        rng: Optional[random.Random] = None,
    ) -> None:
        """Run one decision tick and move if nothing holds the vehicle.

        Parameters
        ----------
        peers : sequence of Vehicle
            Tick-start snapshot of the whole population (this vehicle
            included, at *own_index*).
        own_index : int
            Position of this vehicle inside *peers*.
        controller
            Anything exposing ``light_for(direction)``.
        rng : random.Random or None
            Source for the late turn decision.
        """
        self.ticks += 1
        self._conflict_hold = (
            self.stopped and self.stop_reason is StopReason.INTERSECTION_CONFLICT
        )
        if self.stop_reason is not StopReason.TRAFFIC_LIGHT:
            self._release()

        self.maybe_change_turn(rng or random)
        self.check_same_direction_vehicles(peers, own_index)
        self.check_intersection_conflicts(peers, own_index)
        self.check_traffic_light(controller)

        if (self.stopped
                and self.stop_reason is StopReason.INTERSECTION_CONFLICT
                and self.in_intersection()
                and self.ticks % self.policy.deadlock_release_ticks == 0):
            log.debug("%s deadlock release inside the box at tick %d", self.id, self.ticks)
            self._release()
            self.yielding_to = None
            self.current_speed = max(self.current_speed, self.policy.min_follow_speed)

        if not self.stopped:
            self.handle_intersection_turn()
            self.update_position()
            self.adjust_lane_position()

    def maybe_change_turn(self, rng: Any) -> None:
        """Late re-decision of the turn while still short of the box."""
        if self.stopped or self.has_turned or self.turn_executed:
            return
        if not self.is_approaching() or self.in_intersection():
            return
        if rng.random() < self.policy.turn_mutation_probability:
            self.turn = Turn.random(rng)

    def check_same_direction_vehicles(self, peers: Sequence["Vehicle"], own_index: int) -> None:
        """Car-following against the closest vehicle ahead in our lane."""
        leader: Optional[Vehicle] = None
        gap = math.inf
        for idx, other in enumerate(peers):
            if idx == own_index or other.direction is not self.direction:
                continue
            if not self.same_lane(other):
                continue
            g = self.gap_to(other)
            if 0.0 < g < gap:
                leader, gap = other, g

        if leader is None or gap > self.following_distance:
            self.current_speed = min(self.max_speed, self.current_speed + self.acceleration)
            return

        if leader.stopped or gap < self.policy.min_gap:
            self._stop(StopReason.VEHICLE_AHEAD)
            self.current_speed = 0.0
            if gap < self.policy.critical_gap:
                dx, dy = self.direction.vector
                self.x -= dx
                self.y -= dy
            return

        target = clamp(gap * self.policy.follow_gain,
                       self.policy.min_follow_speed, self.max_speed)
        if target < self.current_speed:
            self.current_speed = max(target, self.current_speed - self.deceleration)
        else:
            self.current_speed = target

    def check_intersection_conflicts(self, peers: Sequence["Vehicle"], own_index: int) -> None:
        """Right-of-way arbitration with traffic contesting the intersection."""
        self._update_arrival()
        if self.stopped and self.stop_reason is StopReason.TRAFFIC_LIGHT:
            return
        if self.arrival_time is None:
            self.yielding_to = None
            return

        winner = self._still_yielding_to(peers, own_index)
        if winner is not None:
            self._stop(StopReason.INTERSECTION_CONFLICT)
            self.current_speed = 0.0
            return

        for idx, other in enumerate(peers):
            if idx == own_index or not other.in_approach_zone():
                continue
            if other.stopped and other.stop_reason is StopReason.TRAFFIC_LIGHT:
                continue
            if not self.will_collide(other):
                continue
            if self._must_yield_to(other):
                if self.yielding_to != other.id:
                    log.debug("%s yields to %s (arrival %s vs %s)",
                              self.id, other.id, self.arrival_time, other.arrival_time)
                self._stop(StopReason.INTERSECTION_CONFLICT)
                self.current_speed = 0.0
                self.yielding_to = other.id
                return
            break

        if self.yielding_to is not None:
            log.debug("%s no longer yields to %s", self.id, self.yielding_to)
        self.yielding_to = None
        if self.stop_reason is StopReason.INTERSECTION_CONFLICT:
            self._release()

    def should_yield_to(self, other: "Vehicle") -> bool:
        """Direction/turn priority, falling back to distance from the centre."""
        return must_yield(
            self.direction, self.turn, self.distance_to_center(),
            other.direction, other.turn, other.distance_to_center(),
        )

    def will_collide(self, other: "Vehicle") -> bool:
        """Predict whether *other*'s path through the intersection meets ours."""
        if self.in_intersection() and not self.stopped and not self._conflict_hold:
            return False

        if (self._conflict_hold and other.stopped
                and other.stop_reason is StopReason.INTERSECTION_CONFLICT):
            return self._younger_than(other)

        if other.direction is self.direction.opposite:
            if not (self._turning_left() or other._turning_left()):
                return False
            return self._eta_within(other, self.policy.opposing_window)

        if self.direction.is_perpendicular_to(other.direction):
            window = (self.policy.perpendicular_window
                      + (self.current_speed + other.current_speed) / 4.0)
            return self._eta_within(other, window)

        return self.same_lane(other) and self.bounding_box_collision(other)

    def check_traffic_light(self, controller: Any) -> None:
        """Hold at the stop line while our light is red."""
        if self.stop_reason is StopReason.TRAFFIC_LIGHT:
            self._release()
        if controller.light_for(self.direction) is not LightState.RED:
            return
        distance = self.distance_to_stop_line()
        if 0.0 < distance < self.policy.light_stop_window:
            self._stop(StopReason.TRAFFIC_LIGHT)

    # ── motion ────────────────────────────────────────────────────────────

    def handle_intersection_turn(self) -> None:
        """Execute the intended turn when crossing the intersection centre."""
        if self.turn_executed:
            return
        cx, cy = self.center
        along, centre = (cy, CENTER_Y) if self.direction.is_vertical else (cx, CENTER_X)
        if abs(along - centre) > self.policy.turn_zone:
            return

        self.turn_executed = True
        if self.turn is Turn.STRAIGHT:
            self._set_target_lane(self.direction)
            return

        old = self.direction
        self.direction = old.turned(self.turn)
        self.width, self.height = self.height, self.width
        # Same spot along the new heading, centred on the new lane.
        lane = LANE_CENTER[self.direction]
        if self.direction.is_vertical:
            self.x = lane - self.width / 2.0
            self.y = cy - self.height / 2.0
        else:
            self.x = cx - self.width / 2.0
            self.y = lane - self.height / 2.0
        self.has_turned = True
        self._set_target_lane(self.direction)
        log.debug("%s turned %s: %s -> %s at (%.1f, %.1f)",
                  self.id, self.turn.value, old.value, self.direction.value, cx, cy)

    def update_position(self) -> None:
        dx, dy = self.direction.vector
        self.x += dx * self.current_speed
        self.y += dy * self.current_speed

    def adjust_lane_position(self) -> None:
        """Slide back onto the lane centre after a turn, once clear of the box."""
        if not self.has_turned or self.in_intersection():
            return
        step = self.policy.lane_adjust_step
        cx, cy = self.center
        if self.direction.is_vertical and self.target_x is not None:
            self.x += step_toward(cx, self.target_x, step) - cx
        elif not self.direction.is_vertical and self.target_y is not None:
            self.y += step_toward(cy, self.target_y, step) - cy

    # ── orchestrator support ──────────────────────────────────────────────

    def pose(self) -> Dict[str, Any]:
        """Snapshot of everything a rejected move may have changed."""
        return {name: getattr(self, name) for name in _POSE_FIELDS}

    def restore(self, pose: Dict[str, Any]) -> None:
        for name, value in pose.items():
            setattr(self, name, value)

    def as_dict(self) -> Dict[str, Any]:
        """Render / HUD payload."""
        return {
            "id": self.id,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "direction": self.direction.value,
            "turn": self.turn.value,
            "color": self.color,
            "speed": self.current_speed,
            "stopped": self.stopped,
            "stop_reason": self.stop_reason.value,
            "arrival_time": self.arrival_time,
            "yielding_to": self.yielding_to,
        }

    # ── internals ─────────────────────────────────────────────────────────

    def _stop(self, reason: StopReason) -> None:
        self.stopped = True
        self.stop_reason = reason

    def _release(self) -> None:
        self.stopped = False
        self.stop_reason = StopReason.NONE

    def _update_arrival(self) -> None:
        if not self.in_approach_zone():
            self.arrival_time = None
        elif self.arrival_time is None:
            self.arrival_time = self.ticks

    def _turning_left(self) -> bool:
        return self.turn is Turn.LEFT and not self.turn_executed

    def _eta_within(self, other: "Vehicle", window: float) -> bool:
        mine = self.time_to_center()
        theirs = other.time_to_center()
        if math.isinf(mine) or math.isinf(theirs):
            return False
        return abs(mine - theirs) < window

    def _still_yielding_to(
        self, peers: Sequence["Vehicle"], own_index: int,
    ) -> Optional["Vehicle"]:
        """Peer we gave way to last tick, while it has yet to clear the box.

        A peer that is itself held for a conflict or a red light no longer
        keeps us waiting; the regular arbitration takes over.
        """
        if not self._conflict_hold or self.yielding_to is None:
            return None
        for idx, other in enumerate(peers):
            if idx == own_index or other.id != self.yielding_to:
                continue
            if other.stopped and other.stop_reason in (
                    StopReason.INTERSECTION_CONFLICT, StopReason.TRAFFIC_LIGHT):
                return None
            return other if other.in_approach_zone() else None
        return None

    def _younger_than(self, other: "Vehicle") -> bool:
        if self.ticks != other.ticks:
            return self.ticks < other.ticks
        return self.id > other.id

    def _must_yield_to(self, other: "Vehicle") -> bool:
        if (self._conflict_hold and other.stopped
                and other.stop_reason is StopReason.INTERSECTION_CONFLICT):
            return self._younger_than(other)
        mine, theirs = self.arrival_time, other.arrival_time
        if mine is not None and theirs is not None:
            if mine != theirs:
                return mine > theirs
            return self.should_yield_to(other)
        if mine is None and theirs is not None:
            return True
        if theirs is None and mine is not None:
            return False
        return self.should_yield_to(other)

    def _set_target_lane(self, direction: Direction) -> None:
        if direction.is_vertical:
            self.target_x, self.target_y = LANE_CENTER[direction], None
        else:
            self.target_x, self.target_y = None, LANE_CENTER[direction]
