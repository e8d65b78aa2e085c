"""
sim/sim_bridge.py
=================
Orchestrator tying :mod:`sim.world` to the input and render collaborators.
The world can be stepped synchronously (:meth:`SimBridge.step`) or from a
background thread (:meth:`SimBridge.start`); either way the UI polls the
bridge for the latest snapshot without blocking.

Public API consumed by :mod:`ui.pygame_view`
--------------------------------------------
* ``request_spawn(direction)``  → ``Vehicle | None``
* ``get_vehicles()``            → ``List[dict]``
* ``get_lights()``              → ``Dict[str, str]``
* ``get_stats()``               → ``dict``
* ``is_paused()``               → ``bool``
* ``reset()``                   → ``None``
* ``set_paused(bool)``          → ``None``
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable, Dict, List, Optional

from sim.types import Direction
from sim.vehicle import Vehicle
from sim.world import World

log = logging.getLogger("sim_bridge")


class SpawnThrottle:
    """Allows at most one spawn per *cooldown_s* seconds.

    Parameters
    ----------
    cooldown_s : float
        Minimum time between two accepted spawns.
    clock : callable
        Returns the current time in seconds.  Tests inject a fake clock.
    """

    def __init__(
        self,
        cooldown_s: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if cooldown_s < 0:
            raise ValueError(f"cooldown must be non-negative, got {cooldown_s}")
        self.cooldown_s = float(cooldown_s)
        self._clock = clock
        self._last: Optional[float] = None

    def ready(self) -> bool:
        if self._last is None:
            return True
        return self._clock() - self._last >= self.cooldown_s

    def mark(self) -> None:
        self._last = self._clock()

    def reset(self) -> None:
        self._last = None


class SimBridge:
    """Simulation orchestrator.

    Parameters
    ----------
    world : World or None
        The simulation; a default :class:`World` when *None*.
    cooldown_s : float
        Spawn rate limit shared by every spawn request.
    clock : callable
        Time source for the spawn throttle.
    tick_rate_hz : float
        Tick frequency of the optional background thread.
    """

    def __init__(
        self,
        world: Optional[World] = None,
        cooldown_s: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
        tick_rate_hz: float = 60.0,
    ) -> None:
        self._world = world or World()
        self._throttle = SpawnThrottle(cooldown_s, clock)
        self._tick_rate_hz = tick_rate_hz

        self._lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None
        self._running = False
        self._paused = False

    @property
    def world(self) -> World:
        return self._world

    # ── Lifecycle ─────────────────────────────────────────────────────────────

    def start(self) -> None:
        """Spawn the background simulation thread."""
        if self._running:
            return
        self._running = True
        self._thread = threading.Thread(
            target=self._loop, daemon=True, name="SimBridge"
        )
        self._thread.start()
        log.info("SimBridge started at %.1f Hz", self._tick_rate_hz)

    def stop(self) -> None:
        """Signal the thread to stop and wait for it to join."""
        self._running = False
        if self._thread:
            self._thread.join(timeout=2.0)
            self._thread = None
        log.info("SimBridge stopped")

    # ── Input ─────────────────────────────────────────────────────────────────

    def request_spawn(self, direction: Optional[Direction] = None) -> Optional[Vehicle]:
        """Spawn one vehicle heading *direction* (random when *None*).

        Returns ``None`` while the cooldown is running or when the spawn
        point is occupied.  Only accepted spawns restart the cooldown.
        """
        if not self._throttle.ready():
            log.debug("Spawn request ignored: cooldown")
            return None
        with self._lock:
            if direction is None:
                vehicle = self._world.spawn_random()
            else:
                vehicle = self._world.spawn(direction)
        if vehicle is not None:
            self._throttle.mark()
        return vehicle

    def set_paused(self, paused: bool) -> None:
        """Pause / unpause the simulation tick."""
        self._paused = paused
        log.info("Simulation %s", "paused" if paused else "resumed")

    def is_paused(self) -> bool:
        return self._paused

    def reset(self) -> None:
        """Clear every vehicle and restart the signal cycle."""
        with self._lock:
            self._world.reset()
        self._throttle.reset()
        log.info("SimBridge reset")

    # ── Ticking ───────────────────────────────────────────────────────────────

    def step(self) -> bool:
        """Advance the world one tick unless paused; returns whether it ran."""
        if self._paused:
            return False
        with self._lock:
            self._world.tick()
        return True

    def _loop(self) -> None:
        dt = 1.0 / self._tick_rate_hz
        while self._running:
            t0 = time.perf_counter()
            try:
                self.step()
            except Exception:
                log.exception("SimBridge tick error")
            time.sleep(max(0.0, dt - (time.perf_counter() - t0)))

    # ── Read accessors ────────────────────────────────────────────────────────

    def get_vehicles(self) -> List[Dict[str, Any]]:
        with self._lock:
            return [v.as_dict() for v in self._world.vehicles]

    def get_lights(self) -> Dict[str, str]:
        with self._lock:
            return self._world.controller.colors()

    def get_stats(self) -> Dict[str, Any]:
        with self._lock:
            stats = self._world.stats()
            controller = self._world.controller
            stats["green_axis"] = controller.green_axis
            stats["time_remaining"] = round(controller.time_remaining(), 1)
        stats["paused"] = self._paused
        return stats
