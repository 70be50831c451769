"""Growing, branching spirals rasterized into an RGBA buffer."""
from spirals.config import SpiralConfig, load_config
from spirals.control import SpiralControl
from spirals.path import BranchPoint, Spiral
from spirals.raster import rasterize_line
from spirals.scheduler import IntervalScheduler
from spirals.surface import MemorySurface

__all__ = [
    "BranchPoint",
    "IntervalScheduler",
    "MemorySurface",
    "Spiral",
    "SpiralConfig",
    "SpiralControl",
    "load_config",
    "rasterize_line",
]
