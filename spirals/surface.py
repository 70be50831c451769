"""Surfaces the controller can present its RGBA buffer to."""
from __future__ import annotations

from typing import Optional, Protocol, Tuple

import pygame


class Surface(Protocol):
    width: int
    height: int

    def present(self, buffer: bytearray) -> None:
        ...


class MemorySurface:
    """Headless surface: keeps a copy of the last presented frame."""

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"surface size must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.frame: Optional[bytes] = None
        self.present_count = 0

    def present(self, buffer: bytearray) -> None:
        self.frame = bytes(buffer)
        self.present_count += 1

    def get_at(self, x: int, y: int) -> Tuple[int, int, int, int]:
        if self.frame is None:
            return (0, 0, 0, 0)
        i = (y * self.width + x) * 4
        r, g, b, a = self.frame[i:i + 4]
        return (r, g, b, a)


class PygameSurface:
    """
    Presents into a pygame surface (usually the display).

    The buffer is blitted at ``offset``; flipping the display is left to the
    caller so overlays such as the control bar can be drawn on top first.
    """

    def __init__(
        self,
        target: pygame.Surface,
        size: Optional[Tuple[int, int]] = None,
        offset: Tuple[int, int] = (0, 0),
        bg: Tuple[int, int, int] = (0, 0, 0),
    ) -> None:
        self.target = target
        self.width, self.height = size if size is not None else target.get_size()
        self.offset = offset
        self.bg = bg

    def present(self, buffer: bytearray) -> None:
        image = pygame.image.frombuffer(buffer, (self.width, self.height), "RGBA")
        # the buffer starts fully transparent, so paint the backdrop first
        self.target.fill(self.bg, pygame.Rect(self.offset, (self.width, self.height)))
        self.target.blit(image, self.offset)
