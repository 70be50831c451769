from __future__ import annotations

import pygame

from spirals.ui.widgets import ButtonWidget, HBox, WidgetContext


class ControlBar(HBox):
    """The Start / Stop pair. Clicks and hotkeys go straight to the controller."""

    def __init__(self, control, *, x: int = 8, y: int = 8) -> None:
        super().__init__(spacing=8, padding=0)
        self.control = control
        self.rect.topleft = (x, y)
        self.start_button = ButtonWidget("Start", on_click=self._on_start, hotkey=pygame.K_s)
        self.stop_button = ButtonWidget("Stop", on_click=self._on_stop, hotkey=pygame.K_x)
        self.add_child(self.start_button)
        self.add_child(self.stop_button)

    def _on_start(self, _button: ButtonWidget) -> None:
        self.control.start()

    def _on_stop(self, _button: ButtonWidget) -> None:
        self.control.stop()

    def draw(self, ctx: WidgetContext) -> None:
        self.start_button.active = self.control.running
        super().draw(ctx)
