#!/usr/bin/env python3
"""Vehicle rectangles and per-vehicle debug labels (mixin)."""

from __future__ import annotations

from typing import Any

import pygame

from .types import ColorRGB


class VehicleRenderer:
    """Mixin that draws vehicles from the bridge's render payloads."""

    def draw_vehicle(self, surface: pygame.Surface, vehicle: Any) -> None:
        rect = pygame.Rect(
            int(self._get(vehicle, "x", default=0.0)),
            int(self._get(vehicle, "y", default=0.0)),
            int(self._get(vehicle, "width", default=20)),
            int(self._get(vehicle, "height", default=40)),
        )
        pygame.draw.rect(surface, self._vehicle_color(vehicle), rect)
        outline = (self.STOPPED_OUTLINE_COLOR
                   if self._get(vehicle, "stopped", default=False)
                   else self.VEHICLE_OUTLINE_COLOR)
        pygame.draw.rect(surface, outline, rect, width=1)

    def draw_vehicle_label(self, surface: pygame.Surface, vehicle: Any) -> None:
        """Id and stop reason next to the vehicle (debug overlay only)."""
        x = int(self._get(vehicle, "x", default=0.0))
        y = int(self._get(vehicle, "y", default=0.0))
        vehicle_id = self._vehicle_id(vehicle)
        reason = str(self._get(vehicle, "stop_reason", default="NONE"))
        label = vehicle_id if reason == "NONE" else f"{vehicle_id} {reason}"
        self.render_text(surface, self.font_tiny, label, (x, y - 12),
                         color=self.DEBUG_TEXT_COLOR)

    # ------------------------------------------------------------------ #
    #  Vehicle identity / color                                            #
    # ------------------------------------------------------------------ #

    def _vehicle_id(self, vehicle: Any) -> str:
        identifier = self._get(vehicle, "id", "vehicle_id", "name")
        if identifier is None:
            return f"VEH-{id(vehicle)}"
        return str(identifier).upper()

    def _vehicle_color(self, vehicle: Any) -> ColorRGB:
        raw = self._get(vehicle, "color", "colour")
        if isinstance(raw, (tuple, list)) and len(raw) >= 3:
            return int(raw[0]), int(raw[1]), int(raw[2])
        return self.STOPPED_OUTLINE_COLOR
