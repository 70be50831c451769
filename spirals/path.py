from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

from spirals.config import SpiralConfig
from spirals.raster import RGB, Pixel, rasterize_line


@dataclass(frozen=True)
class BranchPoint:
    """Kinematic snapshot a branch can later grow from."""
    x: float
    y: float
    direction: float
    angular_accel: float


class Spiral:
    """
    One growing spiral.

    Every ``advance`` moves the tip along the current heading, records the
    pixels crossed in ``updated`` and then slows down and turns. The owner is
    expected to ``drain`` ``updated`` once per frame.
    """

    def __init__(
        self,
        start_x: float,
        start_y: float,
        start_dir: float,
        angular_accel: float,
        size: float,
        color: RGB,
        cfg: Optional[SpiralConfig] = None,
    ) -> None:
        self.cfg = cfg or SpiralConfig()
        self.root: Tuple[float, float] = (start_x, start_y)
        self.tip: List[float] = [start_x, start_y]
        self.dir = start_dir
        self.angular_accel = angular_accel
        self.size = size
        self.color = color
        self.speed = self.cfg.initial_speed_factor * size
        self.frames_since_branch_window_start = 0
        self.branch_point: Optional[BranchPoint] = None
        self.branch_recorded = False
        self.stopped = False
        # pixels not yet copied into the image; the controller empties this
        self.updated: List[Pixel] = []

    def __repr__(self) -> str:
        state = "stopped" if self.stopped else f"speed={self.speed:.4f}"
        return f"Spiral(root={self.root}, tip=({self.tip[0]:.1f}, {self.tip[1]:.1f}), {state})"

    def advance(self) -> None:
        if self.stopped:
            return
        old_tip = (self.tip[0], self.tip[1])
        self.tip[0] += self.speed * math.cos(self.dir)
        self.tip[1] += self.speed * math.sin(self.dir)
        self.updated.extend(
            rasterize_line(old_tip, (self.tip[0], self.tip[1]), self.color, self.cfg.line_step)
        )

        self.speed = self.speed * self.cfg.speed_decay - self.cfg.speed_drag * self.size

        if self.frames_since_branch_window_start < self.cfg.branch_threshold_frames:
            self.frames_since_branch_window_start += 1
            self.dir += self.angular_accel / 2
        else:
            self.dir += self.angular_accel
            if not self.branch_recorded:
                self.branch_point = BranchPoint(self.tip[0], self.tip[1], self.dir, self.angular_accel)
                self.branch_recorded = True

    def drain(self) -> List[Pixel]:
        """Take all pending pixels, most recently added first."""
        out = self.updated[::-1]
        self.updated.clear()
        return out

    def take_branch_point(self) -> Optional[BranchPoint]:
        bp = self.branch_point
        self.branch_point = None
        return bp
