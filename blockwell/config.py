"""
Game configuration for Blockwell.
Holds timing constants, the level speed table, and JSON config loading.
"""

import json
from dataclasses import dataclass, fields, asdict
from typing import Any, Dict, Optional

from .exceptions import ConfigurationException


# Gravity multiplier per level, in cells per frame. Index 0 is unused.
GAME_SPEED = [
    0, 0.01667, 0.021217, 0.026977, 0.035256, 0.04693, 0.06361, 0.0899,
    0.1312, 0.1775, 0.2598, 0.388, 0.59, 0.92, 1.46, 2.36
]

WELL_WIDTH = 10
WELL_HEIGHT = 20


@dataclass
class GameConfig:
    """Configuration for a game session."""
    frame_rate: int = 60  # Master ticks per second
    lock_delay_ticks: int = 30  # Lock-delay ticks before a resting piece locks
    clear_interval_ms: float = 30.0  # Line-clear animation step
    clear_alpha_step: float = 0.1
    clear_cue_alpha: float = 0.8  # Alpha above which the clear cue fires
    lines_per_level: int = 10
    max_level: int = 15
    preview_count: int = 5  # Upcoming pieces exposed to the renderer
    message_ascent_frames: int = 30
    message_fade_frames: int = 30
    seed: Optional[int] = None  # Bag randomizer seed

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name == "seed":
                if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
                    raise ConfigurationException(f"seed must be an integer or None, got {value!r}")
            elif isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigurationException(f"{f.name} must be a number, got {value!r}")

        if self.frame_rate <= 0:
            raise ConfigurationException(f"frame_rate must be positive, got {self.frame_rate}")
        if self.lock_delay_ticks <= 0:
            raise ConfigurationException(f"lock_delay_ticks must be positive, got {self.lock_delay_ticks}")
        if self.clear_interval_ms <= 0 or self.clear_alpha_step <= 0:
            raise ConfigurationException("line clear interval and alpha step must be positive")
        if not 1 <= self.max_level < len(GAME_SPEED):
            raise ConfigurationException(
                f"max_level must be between 1 and {len(GAME_SPEED) - 1}, got {self.max_level}"
            )
        if self.lines_per_level <= 0:
            raise ConfigurationException(f"lines_per_level must be positive, got {self.lines_per_level}")

    @property
    def update_frequency(self) -> float:
        """Length of one master tick in milliseconds."""
        return 1000 / self.frame_rate

    def gravity_interval(self, level: int) -> float:
        """Milliseconds between gravity steps at the given level."""
        level = max(1, min(level, self.max_level))
        return self.update_frequency / GAME_SPEED[level]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GameConfig':
        """Build a config from a mapping, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigurationException(f"Unknown config keys: {', '.join(sorted(unknown))}")
        return cls(**data)


def load_config(path: str) -> GameConfig:
    """Load a GameConfig from a JSON file."""
    with open(path, "r", encoding="utf-8") as fh:
        try:
            data = json.load(fh)
        except json.JSONDecodeError as e:
            raise ConfigurationException(f"Invalid config file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationException(f"Config file {path} must contain a JSON object")
    return GameConfig.from_dict(data)
