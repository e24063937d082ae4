"""Rendered text labels positioned by their centre."""

from __future__ import annotations

from pathlib import Path

import pygame


def load_font(path, size: int) -> pygame.font.Font:
    """Open a font file at ``size`` points; ``None`` selects the default font."""
    if not pygame.font.get_init():
        pygame.font.init()
    if path is not None and not Path(path).is_file():
        raise FileNotFoundError(f"font not found: {path}")
    return pygame.font.Font(path, size)


class Text:
    """A string rendered once in a solid colour and centred on a point."""

    def __init__(self, font: pygame.font.Font, string: str, color, center) -> None:
        self.string = string
        self.color = tuple(color)
        self.surface = font.render(string, False, self.color)
        self.rect = self.surface.get_rect(center=tuple(center))

    def draw(self, surface: pygame.Surface) -> None:
        """Blit the label onto ``surface``."""
        surface.blit(self.surface, self.rect)