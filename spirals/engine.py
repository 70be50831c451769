from __future__ import annotations

"""
Engine: owns the pygame window and the loop.

Each iteration ticks the pygame clock, feeds the elapsed milliseconds to the
scheduler (which runs SpiralControl.advance_frame while started), routes
events to the control bar and flips the display.
"""

import logging
import random

import pygame

from spirals.config import SpiralConfig
from spirals.control import SpiralControl
from spirals.scheduler import IntervalScheduler
from spirals.surface import PygameSurface
from spirals.ui.controls import ControlBar
from spirals.ui.widgets import WidgetContext

logger = logging.getLogger(__name__)


class Engine:
    def __init__(self, cfg: SpiralConfig, *, autostart: bool = False) -> None:
        pygame.init()
        self.cfg = cfg
        self.display = pygame.display.set_mode((cfg.view_width, cfg.view_height))
        pygame.display.set_caption("Spirals")
        self.font = pygame.font.SysFont("consolas", 18)
        self.clock = pygame.time.Clock()
        self.scheduler = IntervalScheduler()
        self.surface = PygameSurface(self.display)
        self.control = SpiralControl(
            self.surface,
            cfg=cfg,
            rng=random.Random(cfg.seed),
            scheduler=self.scheduler,
            layout=cfg.layout,
        )
        self.controls = ControlBar(self.control)
        self.ctx = WidgetContext(surface=self.display, font=self.font)
        self.controls.layout(self.ctx)
        self.running = True
        # show the empty canvas before the first frame
        self.control.decorate_canvas()
        if autostart:
            self.control.start()

    def handle_event(self, event) -> None:
        if event.type == pygame.QUIT:
            self.running = False
            return
        if self.controls.handle_event(event, self.ctx):
            return
        if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
            self.running = False

    def step(self, dt: int) -> None:
        for event in pygame.event.get():
            self.handle_event(event)
        if self.scheduler.tick(dt):
            logger.debug(
                "t=%dms frame=%d spirals=%d", self.scheduler.now, self.control.frame, len(self.control.spirals)
            )
        else:
            # nothing presented this tick; repaint so the buttons stay responsive
            self.control.decorate_canvas()
        self.controls.draw(self.ctx)
        pygame.display.flip()

    def run(self) -> None:
        try:
            while self.running:
                # let the loop run faster than the animation so timers land close to due
                dt = self.clock.tick(self.cfg.fps * 2)
                self.step(dt)
        finally:
            pygame.quit()
