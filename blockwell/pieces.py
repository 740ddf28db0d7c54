"""
Tetromino definitions and operations for Blockwell.
Includes the 7 piece types, their start positions and rotation transforms,
and the Piece class that moves, rotates and hard-drops against the grid.
"""

import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from .exceptions import InvalidPieceTypeException
from .lock_timer import LockTimer

logger = logging.getLogger(__name__)


class PieceType(Enum):
    """The 7 standard pieces. Value + 1 is the cell colour index."""
    I = 0
    J = 1
    L = 2
    O = 3
    S = 4
    T = 5
    Z = 6

    @property
    def color_index(self) -> int:
        return self.value + 1

    @classmethod
    def parse(cls, value) -> 'PieceType':
        """Resolve a PieceType from an enum member or a letter."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str) and value in cls.__members__:
            return cls[value]
        raise InvalidPieceTypeException(f"Unknown piece type: {value!r}")


@dataclass(frozen=True)
class Position:
    """A single cell of a piece on the board."""
    row: int
    col: int

    def shifted(self, d_row: int, d_col: int) -> 'Position':
        return Position(self.row + d_row, self.col + d_col)


class Direction(Enum):
    LEFT = "left"
    RIGHT = "right"
    DOWN = "down"
    GRAVITY = "gravity"


MOVE_OFFSETS: Dict[Direction, Tuple[int, int]] = {
    Direction.LEFT: (0, -1),
    Direction.RIGHT: (0, 1),
    Direction.DOWN: (1, 0),
    Direction.GRAVITY: (1, 0),
}

# Rows above the well a piece may occupy while spawning or rotating
TOP_BUFFER = 3

START_POSITIONS: Dict[PieceType, Tuple[Position, ...]] = {
    PieceType.I: (Position(0, 3), Position(0, 4), Position(0, 5), Position(0, 6)),
    PieceType.J: (Position(0, 3), Position(1, 3), Position(1, 4), Position(1, 5)),
    PieceType.L: (Position(0, 5), Position(1, 3), Position(1, 4), Position(1, 5)),
    PieceType.O: (Position(0, 4), Position(0, 5), Position(1, 4), Position(1, 5)),
    PieceType.S: (Position(0, 4), Position(0, 5), Position(1, 3), Position(1, 4)),
    PieceType.T: (Position(0, 4), Position(1, 3), Position(1, 4), Position(1, 5)),
    PieceType.Z: (Position(0, 3), Position(0, 4), Position(1, 4), Position(1, 5)),
}

# Per-block (d_row, d_col) for a clockwise turn out of each rotation state.
# Block order matches START_POSITIONS. A counter-clockwise turn into state s
# applies the negation of entry s.
ROTATION_TRANSFORMS: Dict[PieceType, List[List[Tuple[int, int]]]] = {
    PieceType.I: [
        [(-1, 2), (0, 1), (1, 0), (2, -1)],
        [(2, 1), (1, 0), (0, -1), (-1, -2)],
        [(1, -2), (0, -1), (-1, 0), (-2, 1)],
        [(-2, -1), (-1, 0), (0, 1), (1, 2)],
    ],
    PieceType.J: [
        [(0, 2), (-1, 1), (0, 0), (1, -1)],
        [(2, 0), (1, 1), (0, 0), (-1, -1)],
        [(0, -2), (1, -1), (0, 0), (-1, 1)],
        [(-2, 0), (-1, -1), (0, 0), (1, 1)],
    ],
    PieceType.L: [
        [(2, 0), (-1, 1), (0, 0), (1, -1)],
        [(0, -2), (1, 1), (0, 0), (-1, -1)],
        [(-2, 0), (1, -1), (0, 0), (-1, 1)],
        [(0, 2), (-1, -1), (0, 0), (1, 1)],
    ],
    PieceType.O: [
        [(0, 0), (0, 0), (0, 0), (0, 0)],
        [(0, 0), (0, 0), (0, 0), (0, 0)],
        [(0, 0), (0, 0), (0, 0), (0, 0)],
        [(0, 0), (0, 0), (0, 0), (0, 0)],
    ],
    PieceType.S: [
        [(1, 1), (2, 0), (-1, 1), (0, 0)],
        [(1, -1), (0, -2), (1, 1), (0, 0)],
        [(-1, -1), (-2, 0), (1, -1), (0, 0)],
        [(-1, 1), (0, 2), (-1, -1), (0, 0)],
    ],
    PieceType.T: [
        [(1, 1), (-1, 1), (0, 0), (1, -1)],
        [(1, -1), (1, 1), (0, 0), (-1, -1)],
        [(-1, -1), (1, -1), (0, 0), (-1, 1)],
        [(-1, 1), (-1, -1), (0, 0), (1, 1)],
    ],
    PieceType.Z: [
        [(0, 2), (1, 1), (0, 0), (1, -1)],
        [(2, 0), (1, -1), (0, 0), (-1, -1)],
        [(0, -2), (-1, -1), (0, 0), (-1, 1)],
        [(-2, 0), (-1, 1), (0, 0), (1, 1)],
    ],
}

# Kick directions tried after the unkicked rotation, as (d_row, d_col) units.
# The last one is the upward floor kick.
KICK_OFFSETS = [(0, 1), (0, -1), (-1, 0)]
FLOOR_KICK = (-1, 0)


def kick_range(piece_type: PieceType) -> int:
    """Widest kick magnitude for a piece type."""
    return 3 if piece_type == PieceType.I else 2


class Piece:
    """A live tetromino in the well.

    A real piece owns one ghost piece, created at construction. The ghost
    mirrors the real piece's cells and hard-drops to show the landing spot.
    Both consult the session's grid for every move.
    """

    def __init__(self, piece_type, session, is_ghost: bool = False,
                 positions: Optional[Sequence[Position]] = None):
        self.piece_type = PieceType.parse(piece_type)
        self.session = session
        self.is_ghost = is_ghost
        self.positions: List[Position] = list(
            positions if positions is not None else START_POSITIONS[self.piece_type]
        )
        self._rotation = deque([0, 1, 2, 3])
        self.floor_kicked = False
        self.locked = False
        self.gravity = None  # Scheduler handle, owned by the session

        self.lock_timer = None
        self.ghost: Optional['Piece'] = None
        self.spawn_valid = all(self.check_valid_move(p) for p in self.positions)

        if is_ghost:
            self.hard_drop()
        else:
            self.lock_timer = LockTimer(
                session.scheduler,
                session.config.update_frequency,
                session.config.lock_delay_ticks,
                self._on_lock_delay_expired,
            )
            self.ghost = Piece(self.piece_type, session, is_ghost=True, positions=self.positions)

    @property
    def rotation_state(self) -> int:
        return self._rotation[0]

    @property
    def lock_percentage(self) -> float:
        return self.lock_timer.percentage if self.lock_timer else 0.0

    @property
    def grid(self):
        return self.session.grid

    def check_valid_move(self, position: Position) -> bool:
        """Whether a single cell may be occupied.

        Cells at or above row 0 are never tested against the grid, which lets
        pieces spawn and rotate into the buffer above the well.
        """
        row, col = position.row, position.col
        if row < -TOP_BUFFER or row >= self.grid.height:
            return False
        if col < 0 or col >= self.grid.width:
            return False
        return row <= 0 or self.grid.cell_at(row, col) == 0

    def fits(self, positions: Sequence[Position]) -> bool:
        return all(self.check_valid_move(p) for p in positions)

    def move(self, direction: Direction) -> bool:
        """Shift all four cells one step. Returns False and keeps the old cells if blocked."""
        if self.locked:
            return False

        d_row, d_col = MOVE_OFFSETS[direction]
        candidate = [p.shifted(d_row, d_col) for p in self.positions]

        if self.fits(candidate):
            self.positions = candidate
            if not self.is_ghost:
                if direction == Direction.DOWN:
                    self.session.add_score(1)
                else:
                    self.cancel_lock_delay()
                self._sync_ghost()
            return True

        if not self.is_ghost:
            if direction == Direction.DOWN:
                self._lock()
            elif direction == Direction.GRAVITY and not self.lock_timer.running:
                logger.debug("%s resting, lock delay started", self.piece_type.name)
                self.lock_timer.start()
        return False

    def hard_drop(self) -> int:
        """Drop until blocked. Returns rows descended.

        A real piece already in lock delay locks in place instead, so a hard
        drop cannot be used to restart the delay.
        """
        if not self.is_ghost and self.lock_timer.percentage > 0:
            self.lock_timer.force()
            self._lock()
            return 0

        rows = 0
        while self.move(Direction.DOWN):
            rows += 1

        if not self.is_ghost:
            # move(DOWN) already paid one point per row
            self.session.add_score(rows)
        return rows

    def rotate(self, direction: Direction) -> bool:
        """Rotate a quarter turn with wall kicks. Returns False and rolls back if no kick fits."""
        if self.locked:
            return False
        if direction not in (Direction.LEFT, Direction.RIGHT):
            raise ValueError(f"Cannot rotate {direction.value}")

        table = ROTATION_TRANSFORMS[self.piece_type]
        if direction == Direction.RIGHT:
            transform = table[self._rotation[0]]
            self._rotation.rotate(-1)
            sign = 1
        else:
            self._rotation.rotate(1)
            transform = table[self._rotation[0]]
            sign = -1

        rotated = [
            Position(p.row + sign * d_row, p.col + sign * d_col)
            for p, (d_row, d_col) in zip(self.positions, transform)
        ]

        for kick in self._kick_candidates():
            candidate = [p.shifted(*kick) for p in rotated]
            if self.fits(candidate):
                self.positions = candidate
                if kick[0] < 0:
                    self.floor_kicked = True
                if not self.is_ghost:
                    self.cancel_lock_delay()
                    self._sync_ghost()
                return True

        # No kick fits: restore the rotation sequence
        if direction == Direction.RIGHT:
            self._rotation.rotate(1)
        else:
            self._rotation.rotate(-1)
        return False

    def _kick_candidates(self) -> Iterator[Tuple[int, int]]:
        yield (0, 0)
        for magnitude in range(1, kick_range(self.piece_type) + 1):
            for d_row, d_col in KICK_OFFSETS:
                if (d_row, d_col) == FLOOR_KICK and self.floor_kicked:
                    continue
                yield (d_row * magnitude, d_col * magnitude)

    def set_positions(self, positions: Sequence[Position]):
        """Reposition a ghost before it is recast downward."""
        if self.is_ghost:
            self.positions = list(positions)

    def cancel_lock_delay(self):
        if self.lock_timer is None:
            return
        if self.lock_timer.running:
            logger.debug("%s lock delay reset", self.piece_type.name)
        self.lock_timer.cancel()

    def cancel_timers(self):
        """Stop gravity and lock delay. Called when the piece leaves play."""
        self.cancel_lock_delay()
        self.session.scheduler.clear_interval(self.gravity)
        self.gravity = None

    def cells(self) -> List[Tuple[int, int]]:
        return [(p.row, p.col) for p in self.positions]

    def _sync_ghost(self):
        self.ghost.set_positions(self.positions)
        self.ghost.hard_drop()

    def _lock(self):
        if not self.locked:
            self.session.well.lock_piece(self)

    def _on_lock_delay_expired(self):
        self._lock()

    def __repr__(self):
        kind = "Ghost" if self.is_ghost else "Piece"
        return f"{kind}({self.piece_type.name}, r={self.rotation_state}, cells={self.cells()})"
