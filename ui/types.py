"""
ui/types.py
===========
Lightweight data containers used across every UI module.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple

ColorRGB = Tuple[int, int, int]
ColorRGBA = Tuple[int, int, int, int]


@dataclass
class LightHousing:
    """Screen placement of one signal head."""
    approach: str
    x: int
    y: int
    w: int = 18
    h: int = 40

    @property
    def red_bulb(self) -> Tuple[int, int]:
        return self.x + self.w // 2, self.y + self.h // 4

    @property
    def green_bulb(self) -> Tuple[int, int]:
        return self.x + self.w // 2, self.y + 3 * self.h // 4
