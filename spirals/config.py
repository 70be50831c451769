from __future__ import annotations

import logging
import pathlib
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional, Tuple

import yaml

logger = logging.getLogger(__name__)

RGB = Tuple[int, int, int]

LAYOUTS = ("single", "four", "empty")


@dataclass
class SpiralConfig:
    fps: int = 60
    initial_color: Optional[RGB] = None  # None = random per spiral
    angular_accel_magnitude: float = 0.05  # radians per frame, sign picks the turn
    branch_probability: float = 0.001  # per frame, once a branch point exists
    branch_threshold_frames: int = 25  # frames of half-strength turning before branching is possible
    speed_decay: float = 0.993  # multiplicative, per frame
    speed_drag: float = 0.0016  # linear, scaled by spiral size
    initial_speed_factor: float = 3.0
    size_min: float = 0.30
    size_max: float = 0.34
    line_step: float = 0.5  # px along the major axis
    debug_messages: bool = False
    func_debug_messages: bool = False
    # window / shell
    view_width: int = 800
    view_height: int = 600
    layout: str = "single"
    seed: Optional[int] = None

    def validate(self) -> "SpiralConfig":
        if self.fps <= 0:
            raise ValueError(f"fps must be positive, got {self.fps}")
        if self.initial_color is not None:
            if len(self.initial_color) != 3 or any(not 0 <= c <= 255 for c in self.initial_color):
                raise ValueError(f"initial_color must be three values in [0, 255], got {self.initial_color}")
        if not 0.0 <= self.branch_probability <= 1.0:
            raise ValueError(f"branch_probability must be in [0, 1], got {self.branch_probability}")
        if self.branch_threshold_frames < 0:
            raise ValueError("branch_threshold_frames must not be negative")
        if self.size_min > self.size_max:
            raise ValueError(f"size_min ({self.size_min}) is larger than size_max ({self.size_max})")
        if self.line_step <= 0:
            raise ValueError("line_step must be positive")
        if self.view_width <= 0 or self.view_height <= 0:
            raise ValueError("view size must be positive")
        if self.layout not in LAYOUTS:
            raise ValueError(f"unknown layout {self.layout!r}, expected one of {', '.join(LAYOUTS)}")
        return self


INT_KEYS = ("fps", "branch_threshold_frames", "view_width", "view_height")
FLOAT_KEYS = (
    "angular_accel_magnitude",
    "branch_probability",
    "speed_decay",
    "speed_drag",
    "initial_speed_factor",
    "size_min",
    "size_max",
    "line_step",
)
BOOL_KEYS = ("debug_messages", "func_debug_messages")


def _is_int(value: Any) -> bool:
    # bool is an int subclass; "yes" in YAML must not become fps 1
    return isinstance(value, int) and not isinstance(value, bool)


def _coerce(key: str, value: Any) -> Any:
    """Check a raw value's type for ``key``; raises ValueError naming the key."""
    if key in INT_KEYS:
        if not _is_int(value):
            raise ValueError(f"{key} must be an integer, got {value!r}")
        return value
    if key in FLOAT_KEYS:
        if not (_is_int(value) or isinstance(value, float)):
            raise ValueError(f"{key} must be a number, got {value!r}")
        return float(value)
    if key in BOOL_KEYS:
        if not isinstance(value, bool):
            raise ValueError(f"{key} must be true or false, got {value!r}")
        return value
    if key == "layout":
        if not isinstance(value, str):
            raise ValueError(f"layout must be a string, got {value!r}")
        return value
    if key == "seed":
        if value is not None and not _is_int(value):
            raise ValueError(f"seed must be an integer, got {value!r}")
        return value
    if key == "initial_color":
        if value is None:
            return None
        if not isinstance(value, (list, tuple)) or not all(_is_int(c) for c in value):
            raise ValueError(f"initial_color must be a list of three integers, got {value!r}")
        return tuple(value)
    return value


def config_from_dict(data: Dict[str, Any], base: Optional[SpiralConfig] = None) -> SpiralConfig:
    """Overlay a plain mapping onto ``base`` (or the defaults) and validate."""
    cfg = base if base is not None else SpiralConfig()
    known = {f.name for f in fields(SpiralConfig)}
    values: Dict[str, Any] = {}
    for key, value in data.items():
        if key not in known:
            logger.warning("Ignoring unknown config key %r", key)
            continue
        values[key] = _coerce(key, value)
    merged = SpiralConfig(**{**{f.name: getattr(cfg, f.name) for f in fields(SpiralConfig)}, **values})
    return merged.validate()


def load_config(path: str | pathlib.Path) -> SpiralConfig:
    path = pathlib.Path(path)
    with path.open("r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"{path}: not valid YAML: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at the top level")
    logger.debug("Loaded config from %s", path)
    return config_from_dict(data)
