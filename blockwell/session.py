"""
Game session for Blockwell.
Owns the active, ghost and held pieces, the bag, level and gravity, and drives
everything from a single master frame tick.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple
import numpy as np

from .bag import PieceBag
from .config import GameConfig
from .events import Command, Cue
from .grid import Grid
from .messages import MessageQueue
from .pieces import Direction, Piece, PieceType
from .scheduler import Scheduler
from .well import Well

logger = logging.getLogger(__name__)


@dataclass
class GameState:
    """Read-only snapshot handed to renderers."""
    grid: np.ndarray
    active_type: Optional[PieceType]
    active_cells: List[Tuple[int, int]]
    ghost_cells: List[Tuple[int, int]]
    lock_percentage: float
    clearing_rows: List[int]
    clear_alpha: float
    score: int
    level: int
    lines_cleared: int
    held_type: Optional[PieceType]
    upcoming: List[PieceType]
    messages: List[str] = field(default_factory=list)
    paused: bool = False
    game_over: bool = False
    elapsed_ms: float = 0.0
    high_score: int = 0


class GameSession:
    """A single game of Blockwell.

    The host calls `tick(dt_ms)` with elapsed time. The session advances its
    scheduler, which fires the master frame, gravity, lock-delay and
    line-clear timers in due order.
    """

    def __init__(self, config: Optional[GameConfig] = None, high_score: int = 0):
        self.config = config or GameConfig()
        self.scheduler = Scheduler()
        self.grid = Grid()
        self.well = Well(self)
        self.bag = PieceBag(self.config.seed)
        self.messages = MessageQueue(self.config.message_ascent_frames,
                                     self.config.message_fade_frames)

        # Game state
        self.active_piece: Optional[Piece] = None
        self.ghost_piece: Optional[Piece] = None
        self.held_type: Optional[PieceType] = None
        self.hold_lock = False
        self.spawn_lock = False

        # Game stats
        self.score = 0
        self.level = 1
        self.lines_cleared = 0
        self.high_score = high_score
        self.elapsed_ms = 0.0

        # Game flags
        self.running = False
        self.paused = False
        self.game_over = False
        self._frame_timer = None

        # Callbacks
        self.on_cue: Optional[Callable[[Cue], None]] = None
        self.on_line_clear: Optional[Callable[[int, List[int]], None]] = None
        self.on_level_up: Optional[Callable[[int], None]] = None
        self.on_piece_locked: Optional[Callable[[Piece], None]] = None
        self.on_game_over: Optional[Callable[[], None]] = None

    def new_game(self):
        """Reset the well and stats and start the master tick."""
        self.scheduler.reset()
        self.well.reset()
        self.bag = PieceBag(self.config.seed)
        self.messages.clear()

        self.active_piece = None
        self.ghost_piece = None
        self.held_type = None
        self.hold_lock = False
        self.spawn_lock = False

        self.score = 0
        self.level = 1
        self.lines_cleared = 0
        self.elapsed_ms = 0.0

        self.running = True
        self.paused = False
        self.game_over = False
        self._frame_timer = self.scheduler.set_interval(self.update, self.config.update_frequency)

        logger.info("New game started")
        self.emit_cue(Cue.START)

    def tick(self, dt: float):
        """Advance the game clock by `dt` milliseconds."""
        if not self.running or self.paused or self.game_over:
            return
        self.scheduler.advance(dt)

    def step(self, frames: int = 1):
        """Advance by whole master frames."""
        for _ in range(frames):
            self.tick(self.config.update_frequency)

    def update(self):
        """One master frame. The step order is fixed."""
        if not self.running or self.paused or self.game_over:
            return

        self._check_level_up()

        self.bag.refill()

        if self.active_piece is None and not self.spawn_lock:
            self.well.clear_lines()

            if self.active_piece is None and not self.spawn_lock:
                self.spawn_piece()

        if self.game_over:
            return

        if self.active_piece is not None and self.active_piece.gravity is None:
            self._arm_gravity(self.active_piece)

        self.messages.tick()
        self.elapsed_ms += self.config.update_frequency

    def _check_level_up(self):
        target = self.lines_cleared // self.config.lines_per_level + 1
        if target > self.level and self.level < self.config.max_level:
            self.level += 1
            logger.info("Level up: %d", self.level)
            self.messages.push(f"LEVEL {self.level}")
            self.emit_cue(Cue.LEVELUP)

            # Re-armed below at the new speed
            if self.active_piece is not None:
                self.scheduler.clear_interval(self.active_piece.gravity)
                self.active_piece.gravity = None

            if self.on_level_up:
                self.on_level_up(self.level)

    def spawn_piece(self, piece_type=None) -> Optional[Piece]:
        """Make a new active piece, from the bag unless a type is given.

        A blocked spawn ends the game rather than raising. A piece still in
        play is retired first so its timers cannot lock it later.
        """
        if self.active_piece is not None:
            self.active_piece.cancel_timers()
            self.active_piece = None
            self.ghost_piece = None

        piece_type = self.bag.draw() if piece_type is None else PieceType.parse(piece_type)
        piece = Piece(piece_type, self)

        if not piece.spawn_valid:
            logger.info("Spawn blocked for %s", piece_type.name)
            self.end_game()
            return None

        self.active_piece = piece
        self.ghost_piece = piece.ghost
        logger.debug("Spawned %s", piece_type.name)
        return piece

    def _arm_gravity(self, piece: Piece):
        interval = self.config.gravity_interval(self.level)
        piece.gravity = self.scheduler.set_interval(lambda: self._apply_gravity(piece), interval)

    def _apply_gravity(self, piece: Piece):
        # Stale timer from a piece that already left play
        if piece is not self.active_piece or piece.locked:
            self.scheduler.clear_interval(piece.gravity)
            return
        piece.move(Direction.GRAVITY)

    def lock_active_piece(self, piece: Piece):
        """Release a piece that the well has just written into the grid."""
        piece.locked = True
        piece.cancel_timers()

        if piece is self.active_piece:
            self.active_piece = None
            self.ghost_piece = None
        self.hold_lock = False

        if self.on_piece_locked:
            self.on_piece_locked(piece)

    def hold(self) -> bool:
        """Swap the active piece into the hold slot."""
        if self.hold_lock or self.active_piece is None:
            return False

        outgoing = self.active_piece
        outgoing.cancel_timers()

        previous = self.held_type
        self.held_type = outgoing.piece_type
        self.active_piece = None
        self.ghost_piece = None
        self.hold_lock = True
        logger.debug("Held %s", outgoing.piece_type.name)

        # With an empty hold slot the next frame spawns from the bag
        if previous is not None:
            self.spawn_piece(previous)
        return True

    def pause(self) -> bool:
        """Toggle pause. Timers stay registered but the clock stops."""
        if not self.running or self.game_over:
            return False
        self.paused = not self.paused
        logger.info("Game %s", "paused" if self.paused else "unpaused")
        self.emit_cue(Cue.PAUSE)
        return True

    def end_game(self):
        """Enter the terminal game-over state."""
        if self.game_over:
            return

        self.game_over = True
        if self.active_piece is not None:
            self.active_piece.cancel_timers()
        self.active_piece = None
        self.ghost_piece = None
        self.scheduler.clear_all()
        self._frame_timer = None

        if self.score > self.high_score:
            self.high_score = self.score
        logger.info("Game over: score=%d lines=%d level=%d", self.score, self.lines_cleared, self.level)

        if self.on_game_over:
            self.on_game_over()

    def handle_command(self, command) -> bool:
        """Apply a normalized input command. Returns whether it had an effect."""
        command = Command(command)

        if command == Command.PAUSE:
            return self.pause()

        if not self.running or self.paused or self.game_over:
            return False
        if command == Command.HOLD:
            return self.hold()

        piece = self.active_piece
        if piece is None:
            return False

        if command == Command.MOVE_LEFT:
            return piece.move(Direction.LEFT)
        elif command == Command.MOVE_RIGHT:
            return piece.move(Direction.RIGHT)
        elif command == Command.MOVE_DOWN:
            return piece.move(Direction.DOWN)
        elif command == Command.ROTATE_CW:
            return piece.rotate(Direction.RIGHT)
        elif command == Command.ROTATE_CCW:
            return piece.rotate(Direction.LEFT)
        elif command == Command.HARD_DROP:
            piece.hard_drop()
            return True
        return False

    def add_score(self, points: int):
        self.score += points

    def emit_cue(self, cue: Cue):
        if self.on_cue:
            self.on_cue(cue)

    @property
    def upcoming(self) -> List[PieceType]:
        return self.bag.peek(self.config.preview_count)

    @property
    def lock_percentage(self) -> float:
        return self.active_piece.lock_percentage if self.active_piece else 0.0

    @property
    def game_time(self) -> str:
        """Elapsed play time as MM:SS."""
        seconds = int(self.elapsed_ms // 1000)
        return f"{seconds // 60:02d}:{seconds % 60:02d}"

    def get_game_state(self) -> GameState:
        """Get the current game state."""
        return GameState(
            grid=self.grid.snapshot(),
            active_type=self.active_piece.piece_type if self.active_piece else None,
            active_cells=self.active_piece.cells() if self.active_piece else [],
            ghost_cells=self.ghost_piece.cells() if self.ghost_piece else [],
            lock_percentage=self.lock_percentage,
            clearing_rows=list(self.well.clearing_rows),
            clear_alpha=self.well.clear_alpha,
            score=self.score,
            level=self.level,
            lines_cleared=self.lines_cleared,
            held_type=self.held_type,
            upcoming=self.upcoming,
            messages=self.messages.texts(),
            paused=self.paused,
            game_over=self.game_over,
            elapsed_ms=self.elapsed_ms,
            high_score=self.high_score,
        )

    def __str__(self):
        """String representation of the game state."""
        rows = [list(line) for line in str(self.grid).split("\n")]
        if self.ghost_piece:
            for row, col in self.ghost_piece.cells():
                if self.grid.in_bounds(row, col):
                    rows[row][col] = "░"
        if self.active_piece:
            for row, col in self.active_piece.cells():
                if self.grid.in_bounds(row, col):
                    rows[row][col] = "○"

        result = [
            f"Level: {self.level}",
            f"Lines: {self.lines_cleared}",
            f"Score: {self.score}",
            f"Time: {self.game_time}",
            "",
        ]
        result.extend("".join(row) for row in rows)
        return "\n".join(result)

    def __repr__(self):
        return f"GameSession(level={self.level}, lines={self.lines_cleared}, score={self.score})"
