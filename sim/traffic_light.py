#!/usr/bin/env python3
"""
sim/traffic_light.py
====================
Two-phase traffic-light controller whose cycle length adapts to congestion.

North and south always share a state, as do east and west, and exactly one
of the two pairs is green.  The controller measures congestion as the number
of vehicles waiting at a red light on each axis and uses it to shorten,
keep or stretch the current phase.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Dict, Iterable, Optional

from sim.traffic_policy import TrafficPolicy
from sim.types import Direction, LightState, StopReason

log = logging.getLogger("traffic_light")

_OTHER_AXIS: Dict[str, str] = {"NS": "EW", "EW": "NS"}


class TrafficLightController:
    """Signal controller for the intersection.

    Parameters
    ----------
    clock : callable
        Returns the current time in seconds.  Tests inject a fake clock.
    default_cycle, min_cycle, max_cycle : float
        Phase lengths in seconds.
    high_congestion, low_congestion : int
        Waiting-vehicle thresholds used by :meth:`adapt_timing`.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        default_cycle: float = 5.0,
        min_cycle: float = 3.0,
        max_cycle: float = 10.0,
        high_congestion: int = 4,
        low_congestion: int = 2,
    ) -> None:
        if min_cycle <= 0 or not (min_cycle <= default_cycle <= max_cycle):
            raise ValueError(
                "cycle lengths must satisfy 0 < min <= default <= max, got "
                f"min={min_cycle} default={default_cycle} max={max_cycle}"
            )
        self._clock = clock
        self.default_cycle = float(default_cycle)
        self.min_cycle = float(min_cycle)
        self.max_cycle = float(max_cycle)
        self.high_congestion = int(high_congestion)
        self.low_congestion = int(low_congestion)

        self.north_state = LightState.RED
        self.south_state = LightState.RED
        self.east_state = LightState.GREEN
        self.west_state = LightState.GREEN
        self.last_change: float = clock()
        self.cycle_length: float = self.default_cycle
        self.ns_congestion: int = 0
        self.ew_congestion: int = 0
        self.phase_changes: int = 0

    @classmethod
    def from_policy(
        cls,
        policy: TrafficPolicy,
        clock: Callable[[], float] = time.monotonic,
    ) -> "TrafficLightController":
        return cls(
            clock=clock,
            default_cycle=policy.default_cycle_s,
            min_cycle=policy.min_cycle_s,
            max_cycle=policy.max_cycle_s,
            high_congestion=policy.high_congestion,
            low_congestion=policy.low_congestion,
        )

    # ── queries ───────────────────────────────────────────────────────────

    @property
    def green_axis(self) -> str:
        return "NS" if self.north_state is LightState.GREEN else "EW"

    def light_for(self, direction: Direction) -> LightState:
        return {
            Direction.NORTH: self.north_state,
            Direction.SOUTH: self.south_state,
            Direction.EAST: self.east_state,
            Direction.WEST: self.west_state,
        }[direction]

    def is_green(self, direction: Direction) -> bool:
        return self.light_for(direction) is LightState.GREEN

    def colors(self) -> Dict[str, str]:
        """Per-approach colour names for the renderer."""
        return {d.value: self.light_for(d).value for d in Direction}

    def time_in_phase(self) -> float:
        return self._clock() - self.last_change

    def time_remaining(self) -> float:
        return max(0.0, self.cycle_length - self.time_in_phase())

    def congestion(self, axis: str) -> int:
        return self.ns_congestion if axis == "NS" else self.ew_congestion

    # ── per-tick updates ──────────────────────────────────────────────────

    def advance_phase(self) -> bool:
        """Flip the green pair once the current phase has run its course.

        Returns ``True`` when the phase changed this call.
        """
        now = self._clock()
        if now - self.last_change < self.cycle_length:
            return False
        self._set_green_axis(_OTHER_AXIS[self.green_axis])
        self.last_change = now
        self.phase_changes += 1
        log.info(
            "Phase change #%d: %s green (cycle=%.1fs, NS waiting=%d, EW waiting=%d)",
            self.phase_changes, self.green_axis, self.cycle_length,
            self.ns_congestion, self.ew_congestion,
        )
        return True

    def sample_congestion(self, vehicles: Iterable[object]) -> None:
        """Count vehicles held at a red light, per axis.

        Must run before :meth:`adapt_timing` each tick.
        """
        ns = ew = 0
        for vehicle in vehicles:
            if not vehicle.stopped or vehicle.stop_reason is not StopReason.TRAFFIC_LIGHT:
                continue
            if vehicle.direction.axis == "NS":
                ns += 1
            else:
                ew += 1
        self.ns_congestion = ns
        self.ew_congestion = ew

    def adapt_timing(self) -> None:
        """Pick the current phase length from the measured congestion."""
        ns_green = self.north_state is LightState.GREEN
        red_waiting = self.ew_congestion if ns_green else self.ns_congestion

        both_high = (self.ns_congestion >= self.high_congestion
                     and self.ew_congestion >= self.high_congestion)
        both_low = (self.ns_congestion < self.low_congestion
                    and self.ew_congestion < self.low_congestion)

        if both_high:
            cycle = self.default_cycle
        elif red_waiting >= self.high_congestion:
            cycle = self.min_cycle
        elif both_low:
            cycle = self.max_cycle
        else:
            cycle = self.default_cycle

        if cycle != self.cycle_length:
            log.info(
                "Cycle length %.1fs -> %.1fs (green=%s, NS waiting=%d, EW waiting=%d)",
                self.cycle_length, cycle, self.green_axis,
                self.ns_congestion, self.ew_congestion,
            )
            self.cycle_length = cycle

    # ── internals ─────────────────────────────────────────────────────────

    def _set_green_axis(self, axis: str) -> None:
        ns = LightState.GREEN if axis == "NS" else LightState.RED
        ew = LightState.RED if axis == "NS" else LightState.GREEN
        self.north_state = self.south_state = ns
        self.east_state = self.west_state = ew

    def state(self, now: Optional[float] = None) -> Dict[str, object]:
        """Full controller state dict (for the HUD / logs)."""
        elapsed = (self._clock() if now is None else now) - self.last_change
        return {
            "green_axis": self.green_axis,
            "colors": self.colors(),
            "cycle_length": self.cycle_length,
            "remaining": round(max(0.0, self.cycle_length - elapsed), 1),
            "ns_congestion": self.ns_congestion,
            "ew_congestion": self.ew_congestion,
        }
