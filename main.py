#!/usr/bin/env python3
"""
main.py
=======
Interactive entry point: opens the pygame window over a fresh world.

Environment overrides: ``CROSSROADS_SEED``, ``CROSSROADS_LOG_LEVEL``,
``CROSSROADS_FPS``.
"""

import logging
import os
import sys
from typing import Mapping, Optional

import config
# Logging
from logging_setup import setup_logging
# World simulation
from sim.sim_bridge import SimBridge
from sim.world import World

log = logging.getLogger("main")


def _env_int(env: Mapping[str, str], name: str, default: Optional[int]) -> Optional[int]:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        log.warning("Ignoring %s=%r (not an integer), using %s", name, raw, default)
        return default


def _env_log_level(env: Mapping[str, str], default: int) -> int:
    raw = env.get(config.ENV_LOG_LEVEL)
    if not raw:
        return default
    level = logging.getLevelName(raw.strip().upper())
    if isinstance(level, int):
        return level
    log.warning("Ignoring %s=%r (unknown level)", config.ENV_LOG_LEVEL, raw)
    return default


def main(env: Optional[Mapping[str, str]] = None) -> int:
    env = os.environ if env is None else env
    setup_logging(_env_log_level(env, config.DEFAULT_LOG_LEVEL))

    seed = _env_int(env, config.ENV_SEED, config.DEFAULT_SEED)
    fps = _env_int(env, config.ENV_FPS, config.TARGET_FPS)
    if fps is None or fps <= 0:
        log.warning("Ignoring non-positive FPS %s, using %d", fps, config.TARGET_FPS)
        fps = config.TARGET_FPS

    log.info("Starting traffic simulation (seed=%s, fps=%d)", seed, fps)
    bridge = SimBridge(World(seed=seed), cooldown_s=config.SPAWN_COOLDOWN_S)

    # The window layer is imported late so headless tools never need a display.
    from ui.pygame_view import WindowInitError, run_pygame_view

    try:
        run_pygame_view(
            bridge,
            width=config.WINDOW_WIDTH,
            height=config.WINDOW_HEIGHT,
            fps=fps,
            title=config.WINDOW_TITLE,
        )
    except WindowInitError:
        log.exception("Could not start the window")
        return 1
    except KeyboardInterrupt:
        log.info("Interrupted")

    log.info("Shutting down... %s", bridge.get_stats())
    return 0


if __name__ == "__main__":
    sys.exit(main())
