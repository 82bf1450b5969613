from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import pygame


Color = Tuple[int, int, int]
Point = Tuple[int, int]


@dataclass
class Button:
    rect: pygame.Rect
    label: str = ""
    fill: Optional[Color] = None
    border_color: Optional[Color] = (30, 30, 30)
    border_width: int = 0
    enabled: bool = True

    def draw(self, surface: pygame.Surface, font: Optional[pygame.font.Font] = None) -> None:
        if self.fill is not None:
            pygame.draw.rect(surface, self.fill, self.rect, border_radius=12)
        if self.border_color is not None and self.border_width > 0:
            pygame.draw.rect(
                surface,
                self.border_color,
                self.rect,
                width=self.border_width,
                border_radius=12,
            )
        if self.label and font is not None:
            color = (20, 20, 20) if self.enabled else (150, 150, 150)
            text = font.render(self.label, True, color)
            surface.blit(text, text.get_rect(center=self.rect.center))

    def hit(self, pos: Tuple[int, int]) -> bool:
        return self.rect.collidepoint(pos)


def create_window(size: Tuple[int, int] = (0, 0), *, fullscreen: bool = True) -> Tuple[pygame.Surface, pygame.Rect]:
    pygame.init()
    flags = pygame.FULLSCREEN if fullscreen else pygame.RESIZABLE
    screen = pygame.display.set_mode(size, flags)
    pygame.mouse.set_visible(True)
    return screen, screen.get_rect()


def draw_toast(surface: pygame.Surface, font: pygame.font.Font, message: str, bottom: int) -> None:
    text = font.render(message, True, (250, 250, 250))
    rect = text.get_rect(midbottom=(surface.get_width() // 2, bottom))
    backdrop = rect.inflate(32, 16)
    pygame.draw.rect(surface, (50, 50, 50), backdrop, border_radius=16)
    surface.blit(text, rect)
