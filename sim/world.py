#!/usr/bin/env python3
"""
sim/world.py
============
Single-intersection world.

This module owns the flat list of :class:`~sim.vehicle.Vehicle` agents and
the :class:`~sim.traffic_light.TrafficLightController`.  The
:class:`World` class runs the fixed tick order (signal update, per-vehicle
decisions against a tick-start snapshot, overlap safety net, eviction),
handles spawning and exposes a read-only render snapshot.
"""

from __future__ import annotations

import copy
import logging
import random
from typing import Any, Dict, List, Optional

from sim.geometry import EVICTION_MARGIN, in_world
from sim.physics import rects_overlap
from sim.traffic_light import TrafficLightController
from sim.traffic_policy import TrafficPolicy
from sim.types import Direction, Turn
from sim.vehicle import Vehicle, spawn_rect

log = logging.getLogger("world")

# Per-tick state dumps are written every this many ticks.
_DEBUG_SAMPLE_TICKS = 30


class World:
    """The intersection, its signal and every live vehicle.

    Parameters
    ----------
    policy : TrafficPolicy or None
        Tunable constants; uses defaults when *None*.
    seed : int or None
        Random seed for reproducibility (ignored when *rng* is given).
    controller : TrafficLightController or None
        Signal controller; built from *policy* when *None*.  Anything with
        the controller's update methods and ``light_for`` works.
    rng : random.Random or None
        Random source for spawn directions and turn decisions.
    """

    def __init__(
        self,
        policy: Optional[TrafficPolicy] = None,
        seed: Optional[int] = None,
        controller: Optional[Any] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.policy = policy or TrafficPolicy()
        self._rng = rng or random.Random(seed)
        self._custom_controller = controller is not None
        self.controller = controller or TrafficLightController.from_policy(self.policy)
        self.vehicles: List[Vehicle] = []
        self.tick_count: int = 0
        self.spawned: int = 0
        self.evicted: int = 0
        self.safety_reverts: int = 0
        self.rejected_spawns: int = 0
        self._next_id: int = 0

    # ── spawning ──────────────────────────────────────────────────────────

    def spawn(self, direction: Direction, turn: Optional[Turn] = None) -> Optional[Vehicle]:
        """Add a vehicle at the spawn point for *direction*.

        Returns ``None`` when the spawn point is still occupied.
        """
        if not self._spawn_is_clear(direction):
            self.rejected_spawns += 1
            log.debug("Spawn %s refused: spawn point occupied", direction.value)
            return None
        vehicle = Vehicle.spawn(
            direction,
            f"CAR_{self._next_id:03d}",
            rng=self._rng,
            policy=self.policy,
            turn=turn,
        )
        self._next_id += 1
        self.vehicles.append(vehicle)
        self.spawned += 1
        log.info("Spawned %s heading %s turning %s",
                 vehicle.id, direction.name, vehicle.turn.value)
        return vehicle

    def spawn_random(self) -> Optional[Vehicle]:
        return self.spawn(Direction.random(self._rng))

    def _spawn_is_clear(self, direction: Direction) -> bool:
        rect = spawn_rect(direction)
        for vehicle in self.vehicles:
            if rects_overlap(rect, vehicle.rect):
                return False
        return True

    # ── tick ──────────────────────────────────────────────────────────────

    def tick(self) -> None:
        """Advance the world by one tick."""
        self.tick_count += 1
        tick = self.tick_count

        self.controller.advance_phase()
        self.controller.sample_congestion(self.vehicles)
        self.controller.adapt_timing()

        snapshot = [copy.copy(v) for v in self.vehicles]

        if tick % _DEBUG_SAMPLE_TICKS == 1:
            self._debug_dump(tick)

        margin = self.policy.collision_margin
        for idx, vehicle in enumerate(self.vehicles):
            before = vehicle.pose()
            vehicle.step(snapshot, idx, self.controller, self._rng)
            if self._overlaps_any(vehicle, margin):
                vehicle.restore(before)
                self.safety_reverts += 1
                log.debug("Tick %d: reverted %s move (would overlap)", tick, vehicle.id)

        self._evict()

    def _overlaps_any(self, vehicle: Vehicle, margin: float) -> bool:
        for other in self.vehicles:
            if other is vehicle:
                continue
            if rects_overlap(vehicle.rect, other.rect, margin):
                return True
        return False

    def _evict(self) -> None:
        kept: List[Vehicle] = []
        for vehicle in self.vehicles:
            if in_world(vehicle.rect, EVICTION_MARGIN):
                kept.append(vehicle)
            else:
                self.evicted += 1
                log.info("Evicted %s at (%.0f, %.0f)", vehicle.id, vehicle.x, vehicle.y)
        self.vehicles = kept

    def _debug_dump(self, tick: int) -> None:
        if not log.isEnabledFor(logging.DEBUG):
            return
        log.debug("=== TICK %d === lights=%s cycle=%.1fs",
                  tick, self.controller.colors(), self.controller.cycle_length)
        for v in self.vehicles:
            log.debug(
                "  %s dir=%s turn=%s pos=(%.1f,%.1f) spd=%.2f stopped=%s reason=%s "
                "arrival=%s ticks=%d d_line=%.1f turned=%s",
                v.id, v.direction.value, v.turn.value, v.x, v.y, v.current_speed,
                v.stopped, v.stop_reason.value, v.arrival_time, v.ticks,
                v.distance_to_stop_line(), v.has_turned,
            )

    # ── read accessors ────────────────────────────────────────────────────

    def render_state(self) -> Dict[str, Any]:
        """Read-only snapshot for the renderer."""
        return {
            "lights": self.controller.colors(),
            "vehicles": [v.as_dict() for v in self.vehicles],
        }

    def stats(self) -> Dict[str, Any]:
        return {
            "ticks": self.tick_count,
            "live": len(self.vehicles),
            "spawned": self.spawned,
            "evicted": self.evicted,
            "rejected_spawns": self.rejected_spawns,
            "safety_reverts": self.safety_reverts,
            "ns_congestion": self.controller.ns_congestion,
            "ew_congestion": self.controller.ew_congestion,
            "cycle_length": self.controller.cycle_length,
        }

    def reset(self) -> None:
        """Drop every vehicle, zero the counters and restart the signal."""
        self.vehicles = []
        self.tick_count = 0
        self.spawned = 0
        self.evicted = 0
        self.safety_reverts = 0
        self.rejected_spawns = 0
        self._next_id = 0
        if not self._custom_controller:
            self.controller = TrafficLightController.from_policy(self.policy)
        log.info("World reset")
