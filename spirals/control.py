from __future__ import annotations

"""
SpiralControl: owns the RGBA image and every spiral drawn into it.

One call to advance_frame() grows each live spiral by a segment, copies the
new pixels into the image, retires spirals that have run out of speed,
occasionally sprouts a branch, and presents the result.
"""

import logging
import math
import random
from typing import Callable, List, Optional

from spirals.config import RGB, SpiralConfig
from spirals.path import Spiral
from spirals import raster
from spirals.scheduler import IntervalScheduler
from spirals.surface import Surface

logger = logging.getLogger(__name__)

# ms after construction at which the "four" layout adds its 2nd..4th spirals
FOUR_LAYOUT_DELAYS = (1000, 1500, 2000)


class SpiralControl:
    def __init__(
        self,
        surface: Surface,
        fps: Optional[int] = None,
        *,
        cfg: Optional[SpiralConfig] = None,
        rng: Optional[random.Random] = None,
        scheduler: Optional[IntervalScheduler] = None,
        layout: Optional[str] = None,
    ) -> None:
        self.cfg = cfg or SpiralConfig()
        self.fps = fps if fps is not None else self.cfg.fps
        if self.fps <= 0:
            raise ValueError(f"fps must be positive, got {self.fps}")
        self.mspf = 1000.0 / self.fps
        self.debug_messages = self.cfg.debug_messages
        self.func_debug_messages = self.cfg.func_debug_messages

        self.surface = surface
        self.width = surface.width
        self.height = surface.height
        self.image_data = bytearray(self.width * self.height * 4)

        self.rng = rng if rng is not None else random.Random(self.cfg.seed)
        self.scheduler = scheduler if scheduler is not None else IntervalScheduler()
        self.refresh_interval: Optional[int] = None
        self.frame = 0
        self.spirals: List[Spiral] = []

        layout = layout or self.cfg.layout
        if layout == "single":
            self._layout_single()
        elif layout == "four":
            self._layout_four()
        elif layout != "empty":
            raise ValueError(f"unknown layout {layout!r}")
        self.debug(f"{layout} layout on {self.width}x{self.height} at {self.fps} fps")

    # ------------------------------------------------------------------ #
    # Layouts

    def _layout_single(self) -> None:
        self.add_spiral(
            self.width / 2,
            self.height,
            0.0,
            -self.cfg.angular_accel_magnitude,
            color=self.cfg.initial_color,
        )

    def _layout_four(self) -> None:
        """Four spirals from the center, a quarter turn apart, alternating turn bias."""
        cx = self.width / 2
        cy = self.height / 2
        mag = self.cfg.angular_accel_magnitude

        def spawner(i: int) -> Callable[[], None]:
            bias = mag if i % 2 == 0 else -mag
            return lambda: self.add_spiral(cx, cy, i * math.pi / 2, bias)

        spawner(0)()
        for i, delay in enumerate(FOUR_LAYOUT_DELAYS, start=1):
            self.scheduler.schedule_once(spawner(i), delay)

    def add_spiral(
        self,
        x: float,
        y: float,
        direction: float,
        angular_accel: float,
        size: Optional[float] = None,
        color: Optional[RGB] = None,
    ) -> Spiral:
        spiral = Spiral(
            x,
            y,
            direction,
            angular_accel,
            size if size is not None else self.random_size(),
            color if color is not None else self.random_color(),
            self.cfg,
        )
        self.spirals.append(spiral)
        self.debug(f"added {spiral!r}")
        return spiral

    # ------------------------------------------------------------------ #
    # Frame

    def advance_frame(self) -> None:
        self.func_debug("advance_frame")
        self.frame += 1
        # branches spawned this frame start growing next frame
        for spiral in list(self.spirals):
            if not spiral.stopped:
                spiral.advance()
                self.absorb_updates(spiral)
                if spiral.speed < 0:
                    spiral.stopped = True
                    self.debug(f"frame {self.frame}: stopped {spiral!r}")
            if spiral.branch_point is not None and self.rng.random() < self.cfg.branch_probability:
                self.branch(spiral)
        self.decorate_canvas()

    # same entry point under the name scene-style loops call
    update = advance_frame

    def absorb_updates(self, spiral: Spiral) -> int:
        """Copy a spiral's pending pixels into the image; returns how many were dropped."""
        dropped = 0
        for x, y, color in spiral.drain():
            if self.in_canvas(x, y):
                self.set_pixel(x, y, color[0], color[1], color[2])
            else:
                dropped += 1
        if dropped:
            self.debug(f"frame {self.frame}: dropped {dropped} off-canvas pixels")
        return dropped

    def branch(self, spiral: Spiral) -> Optional[Spiral]:
        bp = spiral.take_branch_point()
        if bp is None:
            return None
        child = self.add_spiral(
            bp.x,
            bp.y,
            bp.direction,
            -self.sign(bp.angular_accel) * self.cfg.angular_accel_magnitude,
            color=spiral.color,
        )
        self.debug(f"frame {self.frame}: branched at ({bp.x:.1f}, {bp.y:.1f})")
        return child

    def decorate_canvas(self) -> None:
        self.surface.present(self.image_data)

    def set_pixel(self, x: int, y: int, r: int, g: int, b: int, alpha: int = 255) -> None:
        position = (self.width * y + x) * 4
        self.image_data[position] = r
        self.image_data[position + 1] = g
        self.image_data[position + 2] = b
        self.image_data[position + 3] = alpha

    # ------------------------------------------------------------------ #
    # Refresh loop

    @property
    def running(self) -> bool:
        return self.refresh_interval is not None

    def start(self, function_to_run: Optional[Callable[[], None]] = None) -> None:
        self.func_debug("start")
        if self.running:
            self.warning("start() called while running; restarting the refresh loop")
            self.scheduler.cancel(self.refresh_interval)
        self.refresh_interval = self.scheduler.schedule(function_to_run or self.advance_frame, self.mspf)

    def stop(self) -> None:
        self.func_debug("stop")
        self.scheduler.cancel(self.refresh_interval)
        self.refresh_interval = None

    # ------------------------------------------------------------------ #
    # Bounds

    def in_canvas(self, x: float, y: float) -> bool:
        return self.in_x_range(x) and self.in_y_range(y)

    @staticmethod
    def in_range(num: float, end1: float, end2: float) -> bool:
        return raster.in_range(num, end1, end2)

    def in_x_range(self, num: float) -> bool:
        return self.in_range(num, 0, self.width)

    def in_y_range(self, num: float) -> bool:
        return self.in_range(num, 0, self.height)

    # ------------------------------------------------------------------ #
    # Random helpers

    def random_color(self) -> RGB:
        return (self.rng.randint(0, 255), self.rng.randint(0, 255), self.rng.randint(0, 255))

    def random_size(self) -> float:
        return self.rng.uniform(self.cfg.size_min, self.cfg.size_max)

    @staticmethod
    def sign(x: float) -> int:
        return raster.sign(x)

    # ------------------------------------------------------------------ #
    # Messages

    def debug(self, message: str) -> None:
        if self.debug_messages:
            logger.debug(message)

    def func_debug(self, name: str) -> None:
        if self.func_debug_messages:
            logger.debug("Function %s was called.", name)

    def warning(self, message: str) -> None:
        logger.warning(message)
