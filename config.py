#!/usr/bin/env python3
"""
config.py
=========
Application-wide configuration constants.

Values can be overridden via environment variables (see :mod:`main`).
This module is a thin, import-safe leaf — it never imports from
other project packages.
"""

import logging
from typing import Optional

# ── Simulation defaults ──────────────────────────────────────────────────────
DEFAULT_SEED: Optional[int] = None
SPAWN_COOLDOWN_S: float = 1.0

# ── UI defaults ──────────────────────────────────────────────────────────────
WINDOW_TITLE: str = "Traffic Simulation"
WINDOW_WIDTH: int = 800
WINDOW_HEIGHT: int = 600
TARGET_FPS: int = 60

# ── Logging ──────────────────────────────────────────────────────────────────
DEFAULT_LOG_LEVEL: int = logging.INFO
LOG_FILE: str = "crossroads.log"
WORLD_DEBUG_LOG_FILE: str = "world_debug.log"

# ── Headless demo ────────────────────────────────────────────────────────────
DEMO_TICKS: int = 3600
DEMO_SPAWN_EVERY_TICKS: int = 30
DEMO_TICK_SECONDS: float = 1.0 / TARGET_FPS

# ── Environment overrides (read by main.py) ─────────────────────────────────
ENV_SEED: str = "CROSSROADS_SEED"
ENV_LOG_LEVEL: str = "CROSSROADS_LOG_LEVEL"
ENV_FPS: str = "CROSSROADS_FPS"
