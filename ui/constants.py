#!/usr/bin/env python3
"""Visual constants shared across all renderers."""

from __future__ import annotations

from typing import Sequence, Tuple

from sim.types import Turn

from .types import ColorRGB


class ViewConstants:
    """Mixin providing every visual / layout constant."""

    BG_COLOR: ColorRGB = (100, 100, 100)
    ROAD_COLOR: ColorRGB = (50, 50, 50)
    CENTER_LINE_COLOR: ColorRGB = (255, 255, 0)
    STOP_LINE_COLOR: ColorRGB = (255, 255, 255)
    INTERSECTION_COLOR: ColorRGB = (60, 60, 60)
    HUD_BG_COLOR: ColorRGB = (22, 22, 22)
    HUD_BORDER_COLOR: ColorRGB = (42, 42, 42)
    HUD_TEXT_COLOR: ColorRGB = (220, 220, 220)
    DEBUG_TEXT_COLOR: ColorRGB = (0, 255, 127)
    VEHICLE_OUTLINE_COLOR: ColorRGB = (20, 20, 20)
    STOPPED_OUTLINE_COLOR: ColorRGB = (255, 255, 255)

    LIGHT_HOUSING_COLOR: ColorRGB = (30, 30, 30)
    LIGHT_RED_ON: ColorRGB = (255, 0, 0)
    LIGHT_RED_OFF: ColorRGB = (80, 0, 0)
    LIGHT_GREEN_ON: ColorRGB = (0, 255, 0)
    LIGHT_GREEN_OFF: ColorRGB = (0, 80, 0)
    LIGHT_BULB_RADIUS = 6

    DASH_LEN = 20
    DASH_GAP = 20
    CENTER_LINE_W = 2
    STOP_LINE_W = 3
    PAUSE_OVERLAY_ALPHA = 100

    LEGEND_ITEMS: Sequence[Tuple[str, ColorRGB]] = (
        ("LEFT", Turn.LEFT.color),
        ("RIGHT", Turn.RIGHT.color),
        ("STRAIGHT", Turn.STRAIGHT.color),
    )

    CONTROLS_HELP: Sequence[str] = (
        "UP/DOWN/LEFT/RIGHT  Spawn",
        "R      Random spawn",
        "SPACE  Pause/Resume",
        "C      Clear",
        "L      Toggle legend",
        "F3     Debug overlay",
        "ESC    Quit",
    )
