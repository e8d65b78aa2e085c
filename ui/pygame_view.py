#!/usr/bin/env python3
"""
Main view class — combines all UI mixins into one runnable Pygame window.

Module layout
─────────────
    ui/
    ├── types.py           – ColorRGB, ColorRGBA, LightHousing
    ├── constants.py       – ViewConstants mixin (all class-level constants)
    ├── helpers.py         – ViewHelpers mixin  (static utilities)
    ├── draw_road.py       – RoadRenderer mixin (roads, markings, lights)
    ├── draw_vehicles.py   – VehicleRenderer mixin (vehicle rectangles)
    ├── hud.py             – HudRenderer mixin  (HUD, legend, debug, pause)
    └── pygame_view.py     – PygameIntersectionView (this file – main loop)
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import pygame

from sim.types import Direction

from .constants import ViewConstants
from .draw_road import RoadRenderer
from .draw_vehicles import VehicleRenderer
from .helpers import ViewHelpers
from .hud import HudRenderer

log = logging.getLogger("ui")

# Arrow keys name the edge the vehicle enters from, not its heading.
SPAWN_KEYS: Dict[int, Direction] = {
    pygame.K_UP: Direction.SOUTH,
    pygame.K_DOWN: Direction.NORTH,
    pygame.K_LEFT: Direction.EAST,
    pygame.K_RIGHT: Direction.WEST,
}


class WindowInitError(RuntimeError):
    """The window or its drawing surface could not be created."""


class PygameIntersectionView(
    ViewConstants,
    ViewHelpers,
    RoadRenderer,
    VehicleRenderer,
    HudRenderer,
):
    """Intersection visualiser powered by Pygame.

    Inherits drawing logic from focused mixin modules so each file
    stays small and single-purpose.  The view owns the frame clock and
    steps the bridge once per frame.
    """

    def __init__(
        self,
        bridge: Any,
        width: int = 800,
        height: int = 600,
        fps: int = 60,
        title: str = "Traffic Simulation",
    ):
        self.bridge = bridge
        self.width = width
        self.height = height
        self.fps = fps
        self.title = title

        self.screen: Optional[pygame.Surface] = None
        self.clock: Optional[pygame.time.Clock] = None
        self.font_small: Optional[pygame.font.Font] = None
        self.font_tiny: Optional[pygame.font.Font] = None
        self.font_title: Optional[pygame.font.Font] = None

        # UI state
        self.paused = False
        self.show_debug = False
        self.show_legend = True

    # ------------------------------------------------------------------ #
    #  Setup                                                               #
    # ------------------------------------------------------------------ #
    def _open_window(self) -> None:
        try:
            pygame.init()
            pygame.display.set_caption(self.title)
            self.screen = pygame.display.set_mode((self.width, self.height))
            self.font_small = self._load_font(13, bold=False)
            self.font_tiny = self._load_font(11, bold=False)
            self.font_title = self._load_font(28, bold=True)
        except pygame.error as exc:
            pygame.quit()
            raise WindowInitError(f"could not open {self.width}x{self.height} window: {exc}") from exc
        self.clock = pygame.time.Clock()
        log.info("Window %dx%d opened at %d FPS", self.width, self.height, self.fps)

    # ------------------------------------------------------------------ #
    #  Input                                                               #
    # ------------------------------------------------------------------ #
    def _handle_key(self, key: int) -> bool:
        """Apply one key press; returns ``False`` when the user quits."""
        if key == pygame.K_ESCAPE:
            return False
        if key in SPAWN_KEYS:
            self.bridge.request_spawn(SPAWN_KEYS[key])
        elif key == pygame.K_r:
            self.bridge.request_spawn(None)
        elif key == pygame.K_SPACE:
            self.paused = not self.paused
            self.bridge.set_paused(self.paused)
        elif key == pygame.K_c:
            self.bridge.reset()
        elif key == pygame.K_l:
            self.show_legend = not self.show_legend
        elif key == pygame.K_F3:
            self.show_debug = not self.show_debug
        return True

    # ------------------------------------------------------------------ #
    #  Main loop                                                           #
    # ------------------------------------------------------------------ #
    def run(self) -> None:
        self._open_window()

        running = True
        while running:
            delta_time = self.clock.tick(self.fps) / 1000.0

            # ---- events ------------------------------------------------- #
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    running = self._handle_key(event.key) and running

            # ---- simulation tick ---------------------------------------- #
            self.bridge.step()
            vehicles = self.bridge.get_vehicles()
            lights = self.bridge.get_lights()
            stats = self.bridge.get_stats()

            # ---- render ------------------------------------------------- #
            self.screen.fill(self.BG_COLOR)
            self.draw_road(self.screen)
            self.draw_lane_markings(self.screen)
            self.draw_stop_lines(self.screen)
            self.draw_traffic_lights(self.screen, lights)
            for vehicle in vehicles:
                self.draw_vehicle(self.screen, vehicle)

            self.draw_hud(self.screen, stats)
            if self.show_legend:
                self._draw_legend(self.screen)
            if self.show_debug:
                self._draw_debug_overlay(self.screen, vehicles, stats, delta_time)
            if self.paused:
                self._draw_pause_banner(self.screen)

            pygame.display.flip()

        log.info("Window closed")
        pygame.quit()


# ---------------------------------------------------------------------- #
#  Convenience entry point                                                 #
# ---------------------------------------------------------------------- #
def run_pygame_view(
    bridge: Any,
    width: int = 800,
    height: int = 600,
    fps: int = 60,
    title: str = "Traffic Simulation",
) -> None:
    view = PygameIntersectionView(bridge=bridge, width=width, height=height,
                                  fps=fps, title=title)
    view.run()


if __name__ == "__main__":
    raise SystemExit(
        "pygame_view.py needs a bridge object. Run `python main.py` "
        "or call run_pygame_view(your_bridge)."
    )
