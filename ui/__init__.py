#!/usr/bin/env python3

from .types import ColorRGB, ColorRGBA, LightHousing
from .constants import ViewConstants
from .helpers import ViewHelpers
from .draw_road import RoadRenderer
from .draw_vehicles import VehicleRenderer
from .hud import HudRenderer
from .pygame_view import (
    SPAWN_KEYS,
    PygameIntersectionView,
    WindowInitError,
    run_pygame_view,
)

__all__ = [
    "ColorRGB",
    "ColorRGBA",
    "LightHousing",
    "ViewConstants",
    "ViewHelpers",
    "RoadRenderer",
    "VehicleRenderer",
    "HudRenderer",
    "SPAWN_KEYS",
    "PygameIntersectionView",
    "WindowInitError",
    "run_pygame_view",
]
