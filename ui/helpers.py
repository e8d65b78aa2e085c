"""
ui/helpers.py
=============
Utility mixin shared across UI modules: font loading, alpha-surface
drawing, text rendering and tolerant field access on vehicle payloads.
"""

from __future__ import annotations

from typing import Any, Optional, Tuple

import pygame


class ViewHelpers:
    """Mixin of static helpers (no view state)."""

    @staticmethod
    def _load_font(size: int, bold: bool = False) -> pygame.font.Font:
        """Monospace system font, falling back to pygame's bundled default."""
        name = pygame.font.match_font("dejavusansmono,consolas,menlo,monospace")
        font = pygame.font.Font(name, size)
        font.set_bold(bold)
        return font

    @staticmethod
    def _get(vehicle: Any, *keys: str, default: Any = None) -> Any:
        """First present field among *keys* on a dict or object."""
        for key in keys:
            if isinstance(vehicle, dict):
                if key in vehicle:
                    return vehicle[key]
            elif hasattr(vehicle, key):
                return getattr(vehicle, key)
        return default

    @staticmethod
    def draw_alpha_rect(
        target: pygame.Surface,
        color: Tuple[int, ...],
        rect: pygame.Rect,
        border_radius: int = 0,
    ) -> None:
        """Draw a semi-transparent rectangle (colour tuple with 4 channels)."""
        tmp = pygame.Surface((rect.w, rect.h), pygame.SRCALPHA)
        pygame.draw.rect(tmp, color, (0, 0, rect.w, rect.h), border_radius=border_radius)
        target.blit(tmp, rect.topleft)

    @staticmethod
    def render_text(
        surface: pygame.Surface,
        font: Optional[pygame.font.Font],
        text: str,
        pos: Tuple[int, int],
        color: Tuple[int, ...] = (230, 230, 235),
        anchor: str = "topleft",
    ) -> Optional[pygame.Rect]:
        """Render text with flexible *anchor* ('topleft', 'center', 'midright' …)."""
        if font is None:
            return None
        img = font.render(text, True, color)
        rect = img.get_rect(**{anchor: pos})
        surface.blit(img, rect)
        return rect
