# spirals/ui/widgets.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple
import pygame


@dataclass
class WidgetContext:
    """
    Lightweight context passed into widget methods.

    - surface: the surface the widget draws into (normally the display)
    - font:    font used for labels
    """
    surface: pygame.Surface
    font: pygame.font.Font
    fg: Tuple[int, int, int] = (220, 230, 240)
    dim: Tuple[int, int, int] = (120, 130, 150)
    sel: Tuple[int, int, int] = (255, 230, 120)


class Widget:
    """
    Minimal base class for UI widgets: a rect, optional children, and
    overridable layout / draw / handle_event hooks.
    """

    def __init__(self) -> None:
        self.rect: pygame.Rect = pygame.Rect(0, 0, 0, 0)
        self.visible: bool = True
        self.enabled: bool = True
        self.children: List[Widget] = []

    def add_child(self, child: "Widget") -> None:
        self.children.append(child)

    def layout(self, ctx: WidgetContext) -> None:
        for child in self.children:
            child.layout(ctx)

    def draw(self, ctx: WidgetContext) -> None:
        if not self.visible:
            return
        for child in self.children:
            child.draw(ctx)

    def handle_event(self, event, ctx: WidgetContext) -> bool:
        """
        Give this widget a chance to consume an event.
        Return True if the event is handled and should not propagate further.
        """
        # later-added children are treated as on top
        for child in reversed(self.children):
            if child.handle_event(event, ctx):
                return True
        return False


class ButtonWidget(Widget):
    def __init__(
        self,
        text: str,
        *,
        on_click: Optional[Callable[["ButtonWidget"], None]] = None,
        hotkey: Optional[int] = None,
        padding_x: int = 12,
        padding_y: int = 4,
    ) -> None:
        super().__init__()
        self.text = text
        self.on_click = on_click
        self.hotkey = hotkey
        self.padding_x = padding_x
        self.padding_y = padding_y
        self.hovered = False
        self.pressed = False
        self.active = False  # drawn highlighted, e.g. "Start" while running

    def click(self) -> None:
        if self.on_click:
            self.on_click(self)

    def layout(self, ctx: WidgetContext) -> None:
        w, h = ctx.font.size(self.text)
        self.rect.width = w + 2 * self.padding_x
        self.rect.height = h + 2 * self.padding_y
        super().layout(ctx)

    def draw(self, ctx: WidgetContext) -> None:
        if not self.visible:
            return

        bg_col = (60, 55, 40) if self.active else (30, 30, 50)
        border_col = ctx.sel if (self.hovered or self.pressed or self.active) else ctx.dim
        fg = ctx.fg if self.enabled else ctx.dim

        pygame.draw.rect(ctx.surface, bg_col, self.rect)
        pygame.draw.rect(ctx.surface, border_col, self.rect, 1)

        text_surf = ctx.font.render(self.text, True, fg)
        tx = self.rect.x + (self.rect.width - text_surf.get_width()) // 2
        ty = self.rect.y + (self.rect.height - text_surf.get_height()) // 2
        ctx.surface.blit(text_surf, (tx, ty))

        super().draw(ctx)

    def handle_event(self, event, ctx: WidgetContext) -> bool:
        if not (self.visible and self.enabled):
            return False

        if event.type == pygame.MOUSEMOTION:
            self.hovered = self.rect.collidepoint(event.pos)

        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                self.pressed = True
                return True  # consume click-down

        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            was_pressed = self.pressed
            self.pressed = False
            if was_pressed and self.rect.collidepoint(event.pos):
                self.click()
                return True  # consume click-up

        elif event.type == pygame.KEYDOWN and self.hotkey is not None and event.key == self.hotkey:
            self.click()
            return True

        return super().handle_event(event, ctx)


class HBox(Widget):
    """
    Horizontal layout container.

    - Positions children left → right
    - Uses spacing and padding
    - Centers children vertically in the row
    """

    def __init__(
        self,
        *,
        spacing: int = 4,
        padding: int = 0,
    ) -> None:
        super().__init__()
        self.spacing = spacing
        self.padding = padding

    def layout(self, ctx: WidgetContext) -> None:
        for child in self.children:
            child.layout(ctx)

        max_h = max((child.rect.height for child in self.children), default=0)
        if self.rect.height == 0:
            self.rect.height = max_h + 2 * self.padding

        x = self.rect.x + self.padding
        for child in self.children:
            child_y = self.rect.y + (self.rect.height - child.rect.height) // 2
            child.rect.topleft = (x, child_y)
            x += child.rect.width + self.spacing

        if self.rect.width == 0:
            self.rect.width = (x - self.rect.x) + self.padding - self.spacing
