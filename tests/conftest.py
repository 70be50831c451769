import os

# no window during tests
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pygame
import pytest

from spirals.config import SpiralConfig
from spirals.control import SpiralControl
from spirals.scheduler import IntervalScheduler
from spirals.surface import MemorySurface


@pytest.fixture
def surface():
    return MemorySurface(100, 100)


@pytest.fixture
def scheduler():
    return IntervalScheduler()


@pytest.fixture
def empty_control(surface, scheduler):
    """Controller with no spirals; tests add their own."""
    return SpiralControl(surface, cfg=SpiralConfig(seed=7), scheduler=scheduler, layout="empty")


@pytest.fixture
def font():
    pygame.font.init()
    yield pygame.font.Font(None, 18)
    pygame.font.quit()
