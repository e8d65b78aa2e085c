"""
ui/draw_road.py
===============
Renders the static scene: road surfaces, the intersection box, dashed
centre lines, stop lines and the four signal heads.

World coordinates map one-to-one onto window pixels.
"""

from __future__ import annotations

from typing import Dict, Mapping

import pygame

from sim.geometry import (
    CENTER_X, CENTER_Y, ROAD_WIDTH,
    STOP_LINE_EASTBOUND_X, STOP_LINE_NORTHBOUND_Y,
    STOP_LINE_SOUTHBOUND_Y, STOP_LINE_WESTBOUND_X,
    WORLD_HEIGHT, WORLD_WIDTH,
)

from .types import LightHousing

_HALF = int(ROAD_WIDTH // 2)
_CX = int(CENTER_X)
_CY = int(CENTER_Y)

# Each head stands on the driver's right, just before the stop line.
_HOUSINGS: Dict[str, LightHousing] = {
    "N": LightHousing("N", _CX + _HALF + 6, _CY + _HALF + 6),
    "S": LightHousing("S", _CX - _HALF - 24, _CY - _HALF - 46),
    "E": LightHousing("E", _CX - _HALF - 24, _CY + _HALF + 6),
    "W": LightHousing("W", _CX + _HALF + 6, _CY - _HALF - 46),
}


class RoadRenderer:
    """Mixin that draws roads, markings and traffic lights."""

    def draw_road(self, surface: pygame.Surface) -> None:
        pygame.draw.rect(surface, self.ROAD_COLOR,
                         (0, _CY - _HALF, WORLD_WIDTH, 2 * _HALF))
        pygame.draw.rect(surface, self.ROAD_COLOR,
                         (_CX - _HALF, 0, 2 * _HALF, WORLD_HEIGHT))
        pygame.draw.rect(surface, self.INTERSECTION_COLOR,
                         (_CX - _HALF, _CY - _HALF, 2 * _HALF, 2 * _HALF))

    def draw_lane_markings(self, surface: pygame.Surface) -> None:
        """Dashed yellow centre lines on every arm, none inside the box."""
        period = self.DASH_LEN + self.DASH_GAP
        w = self.CENTER_LINE_W

        for start, stop in ((0, _CX - _HALF), (_CX + _HALF, WORLD_WIDTH)):
            x = start
            while x < stop:
                length = min(self.DASH_LEN, stop - x)
                pygame.draw.rect(surface, self.CENTER_LINE_COLOR,
                                 (x, _CY - w // 2, length, w))
                x += period

        for start, stop in ((0, _CY - _HALF), (_CY + _HALF, WORLD_HEIGHT)):
            y = start
            while y < stop:
                length = min(self.DASH_LEN, stop - y)
                pygame.draw.rect(surface, self.CENTER_LINE_COLOR,
                                 (_CX - w // 2, y, w, length))
                y += period

    def draw_stop_lines(self, surface: pygame.Surface) -> None:
        """White bars across the inbound lane of each approach."""
        w = self.STOP_LINE_W
        c = self.STOP_LINE_COLOR
        # Northbound lane: right half of the vertical road, below the box.
        pygame.draw.line(surface, c, (_CX, STOP_LINE_NORTHBOUND_Y),
                         (_CX + _HALF, STOP_LINE_NORTHBOUND_Y), w)
        pygame.draw.line(surface, c, (_CX - _HALF, STOP_LINE_SOUTHBOUND_Y),
                         (_CX, STOP_LINE_SOUTHBOUND_Y), w)
        pygame.draw.line(surface, c, (STOP_LINE_EASTBOUND_X, _CY),
                         (STOP_LINE_EASTBOUND_X, _CY + _HALF), w)
        pygame.draw.line(surface, c, (STOP_LINE_WESTBOUND_X, _CY - _HALF),
                         (STOP_LINE_WESTBOUND_X, _CY), w)

    def draw_traffic_lights(self, surface: pygame.Surface, lights: Mapping[str, str]) -> None:
        """One housing per approach; the active bulb bright, the other dim."""
        for approach, housing in _HOUSINGS.items():
            state = str(lights.get(approach, "RED")).upper()
            pygame.draw.rect(surface, self.LIGHT_HOUSING_COLOR,
                             (housing.x, housing.y, housing.w, housing.h),
                             border_radius=3)
            red = self.LIGHT_RED_ON if state == "RED" else self.LIGHT_RED_OFF
            green = self.LIGHT_GREEN_ON if state == "GREEN" else self.LIGHT_GREEN_OFF
            pygame.draw.circle(surface, red, housing.red_bulb, self.LIGHT_BULB_RADIUS)
            pygame.draw.circle(surface, green, housing.green_bulb, self.LIGHT_BULB_RADIUS)
