#!/usr/bin/env python3
"""
Headless demo: runs the simulation without a window, spawning a random
vehicle every few ticks, and logs a summary at the end.

Useful for soak-testing right-of-way arbitration.

Usage:
    python3 demo.py [ticks] [seed]
"""

import logging
import sys
from typing import Dict, Optional

import config
from logging_setup import setup_logging
from sim.sim_bridge import SimBridge
from sim.traffic_light import TrafficLightController
from sim.traffic_policy import TrafficPolicy
from sim.world import World

log = logging.getLogger("demo")


class TickClock:
    """Simulated clock advanced by the demo loop instead of wall time."""

    def __init__(self, tick_seconds: float = config.DEMO_TICK_SECONDS) -> None:
        self.tick_seconds = tick_seconds
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def advance(self) -> None:
        self.now += self.tick_seconds


def run_demo(
    ticks: int = config.DEMO_TICKS,
    seed: Optional[int] = None,
    spawn_every: int = config.DEMO_SPAWN_EVERY_TICKS,
) -> Dict[str, object]:
    """Run *ticks* headless ticks and return the final world stats."""
    clock = TickClock()
    policy = TrafficPolicy()
    controller = TrafficLightController.from_policy(policy, clock=clock)
    world = World(policy=policy, seed=seed, controller=controller)
    bridge = SimBridge(world, cooldown_s=config.SPAWN_COOLDOWN_S, clock=clock)

    for tick in range(1, ticks + 1):
        if tick % spawn_every == 0:
            bridge.request_spawn(None)
        bridge.step()
        clock.advance()
        if tick % 600 == 0:
            log.info("tick %d: %s", tick, world.stats())

    stats = bridge.get_stats()
    log.info("Demo finished: %s", stats)
    return stats


if __name__ == "__main__":
    setup_logging(logging.INFO, world_debug=False)
    n_ticks = int(sys.argv[1]) if len(sys.argv) > 1 else config.DEMO_TICKS
    demo_seed = int(sys.argv[2]) if len(sys.argv) > 2 else config.DEFAULT_SEED
    run_demo(n_ticks, demo_seed)
