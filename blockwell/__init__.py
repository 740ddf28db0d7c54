"""
Blockwell: a falling-block puzzle engine.
Contains the grid, pieces, lock delay, line-clear sequencing and the game session.
"""

from .session import GameSession, GameState
from .config import GameConfig, load_config
from .grid import Grid
from .pieces import Piece, PieceType, Position, Direction
from .well import Well
from .bag import PieceBag
from .events import Command, Cue
from .exceptions import (InvalidPieceTypeException, GridIndexException, InvalidCellValueException,
                         ConfigurationException)

__version__ = "0.1.0"

__all__ = ['GameSession', 'GameState', 'GameConfig', 'load_config', 'Grid', 'Piece',
           'PieceType', 'Position', 'Direction', 'Well', 'PieceBag', 'Command', 'Cue',
           'InvalidPieceTypeException', 'GridIndexException', 'InvalidCellValueException',
           'ConfigurationException']
