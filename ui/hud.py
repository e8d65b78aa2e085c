#!/usr/bin/env python3
"""HUD panel, legend, debug overlay and pause banner (mixin)."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

import pygame


class HudRenderer:
    """Mixin that draws every overlay / HUD element."""

    # ------------------------------------------------------------------ #
    #  Main HUD panel                                                      #
    # ------------------------------------------------------------------ #

    def draw_hud(self, surface: pygame.Surface, stats: Mapping[str, Any]) -> None:
        if self.font_small is None:
            return
        lines = [
            f"VEHICLES  {stats.get('live', 0)}",
            f"NS WAIT   {stats.get('ns_congestion', 0)}",
            f"EW WAIT   {stats.get('ew_congestion', 0)}",
            f"GREEN     {stats.get('green_axis', '?')}",
            f"CYCLE     {float(stats.get('cycle_length', 0.0)):.1f}s",
            f"REMAINING {float(stats.get('time_remaining', 0.0)):.1f}s",
        ]
        panel = pygame.Rect(10, 10, 170, 14 + 18 * len(lines))
        pygame.draw.rect(surface, self.HUD_BG_COLOR, panel, border_radius=6)
        pygame.draw.rect(surface, self.HUD_BORDER_COLOR, panel, width=1, border_radius=6)
        y = panel.y + 7
        for line in lines:
            self.render_text(surface, self.font_small, line, (panel.x + 10, y),
                             color=self.HUD_TEXT_COLOR)
            y += 18

    # ------------------------------------------------------------------ #
    #  Legend                                                               #
    # ------------------------------------------------------------------ #

    def _draw_legend(self, surface: pygame.Surface) -> None:
        if self.font_tiny is None:
            return
        rows = len(self.LEGEND_ITEMS) + len(self.CONTROLS_HELP)
        box_w, box_h = 200, rows * 16 + 14
        x = self.width - box_w - 10
        y = self.height - box_h - 10
        pygame.draw.rect(surface, self.HUD_BG_COLOR, (x, y, box_w, box_h), border_radius=4)
        pygame.draw.rect(surface, self.HUD_BORDER_COLOR, (x, y, box_w, box_h),
                         width=1, border_radius=4)
        ty = y + 7
        for label, color in self.LEGEND_ITEMS:
            pygame.draw.rect(surface, color, (x + 8, ty + 2, 10, 10))
            self.render_text(surface, self.font_tiny, label, (x + 24, ty),
                             color=self.HUD_TEXT_COLOR)
            ty += 16
        for line in self.CONTROLS_HELP:
            self.render_text(surface, self.font_tiny, line, (x + 8, ty),
                             color=(150, 150, 150))
            ty += 16

    # ------------------------------------------------------------------ #
    #  Debug / FPS overlay                                                 #
    # ------------------------------------------------------------------ #

    def _draw_debug_overlay(
        self,
        surface: pygame.Surface,
        vehicles: Sequence[Any],
        stats: Mapping[str, Any],
        dt: float,
    ) -> None:
        if self.font_tiny is None:
            return
        fps = self.clock.get_fps() if self.clock else 0.0
        lines = [
            f"FPS     {fps:.1f}",
            f"DT      {dt * 1000:.1f} ms",
            f"TICK    {stats.get('ticks', 0)}",
            f"SPAWNED {stats.get('spawned', 0)}",
            f"EVICTED {stats.get('evicted', 0)}",
            f"REVERTS {stats.get('safety_reverts', 0)}",
        ]
        x, y = self.width - 130, 10
        for line in lines:
            self.render_text(surface, self.font_tiny, line, (x, y),
                             color=self.DEBUG_TEXT_COLOR)
            y += 14
        for vehicle in vehicles:
            self.draw_vehicle_label(surface, vehicle)

    # ------------------------------------------------------------------ #
    #  Pause banner                                                        #
    # ------------------------------------------------------------------ #

    def _draw_pause_banner(self, surface: pygame.Surface) -> None:
        self.draw_alpha_rect(surface, (0, 0, 0, self.PAUSE_OVERLAY_ALPHA),
                             pygame.Rect(0, 0, self.width, self.height))
        self.render_text(surface, self.font_title, "PAUSED",
                         (self.width // 2, self.height // 2),
                         color=(220, 220, 220), anchor="center")
