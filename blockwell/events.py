"""
Discrete events crossing the engine boundary: normalized input commands
coming in from the input decoder, and named audio cues going out.
"""

from enum import Enum


class Command(Enum):
    """Normalized player commands."""
    MOVE_LEFT = "move-left"
    MOVE_RIGHT = "move-right"
    MOVE_DOWN = "move-down"
    ROTATE_CW = "rotate-cw"
    ROTATE_CCW = "rotate-ccw"
    HARD_DROP = "hard-drop"
    HOLD = "hold"
    PAUSE = "pause"


class Cue(Enum):
    """Audio cues fired at game transitions."""
    CLEAR = "clear"
    LEVELUP = "levelup"
    PAUSE = "pause"
    SELECT = "select"
    CHANGE = "change"
    BACK = "back"
    START = "start"
