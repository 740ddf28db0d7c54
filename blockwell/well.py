"""
Line clearing for Blockwell.
The Well commits locked pieces to the grid, finds full rows, plays the timed
clear animation, and scores the clear when the animation completes.
"""

import logging
from typing import List

from .events import Cue

logger = logging.getLogger(__name__)


def line_score(lines: int, level: int) -> int:
    """Points for clearing `lines` rows at once."""
    if lines <= 0:
        return 0
    score = 200 * lines
    if lines < 4:
        score -= 100
    return score * level


def clear_message(lines: int) -> str:
    return "TETRIS!" if lines == 4 else f"LINE CLEAR x{lines}"


class Well:
    """Owns piece locking and the line-clear sequence for one session."""

    def __init__(self, session):
        self.session = session
        self.clearing_rows: List[int] = []
        self.clear_alpha = 0.0
        self._clear_timer = None
        self._cue_fired = False
        self._completing = False

    @property
    def grid(self):
        return self.session.grid

    @property
    def animating(self) -> bool:
        return self._clear_timer is not None

    def reset(self):
        self.session.scheduler.clear_interval(self._clear_timer)
        self._clear_timer = None
        self.clearing_rows = []
        self.clear_alpha = 0.0
        self._cue_fired = False
        self._completing = False
        self.grid.reset()

    def lock_piece(self, piece):
        """Write a piece into the grid and release it from the session."""
        color = piece.piece_type.color_index
        lock_out = False

        for position in piece.positions:
            if position.row < 0:
                lock_out = True
                continue
            self.grid.set_cell(position.row, position.col, color)

        logger.debug("Locked %s at %s", piece.piece_type.name, piece.cells())
        self.session.lock_active_piece(piece)

        if lock_out:
            logger.info("Piece locked above the well")
            self.session.end_game()

    def clear_lines(self):
        """Start clearing any full rows. Does nothing while an animation runs."""
        if self.animating:
            return

        self.session.spawn_lock = True
        self.clearing_rows = self.grid.full_rows()

        if not self.clearing_rows:
            self.session.spawn_lock = False
            return

        logger.debug("Clearing rows %s", self.clearing_rows)
        self.clear_alpha = 0.0
        self._cue_fired = False
        self._completing = False
        self._clear_timer = self.session.scheduler.set_interval(
            self._animate, self.session.config.clear_interval_ms
        )

    def _animate(self):
        config = self.session.config
        self.clear_alpha = min(1.0, round(self.clear_alpha + config.clear_alpha_step, 6))

        if self.clear_alpha > config.clear_cue_alpha and not self._cue_fired:
            self._cue_fired = True
            self.session.emit_cue(Cue.CLEAR)

        if self.clear_alpha >= 1.0 and not self._completing:
            self._completing = True
            self._commit()

    def _commit(self):
        rows = list(self.clearing_rows)

        # Ascending order keeps the lower pending indices valid after each shift
        for row in sorted(rows):
            self.grid.clear_row(row)

        lines = len(rows)
        score = line_score(lines, self.session.level)
        self.session.add_score(score)
        self.session.lines_cleared += lines
        self.session.messages.push(clear_message(lines))
        logger.info("%s scored %d", clear_message(lines), score)

        self.session.scheduler.clear_interval(self._clear_timer)
        self._clear_timer = None
        self.clearing_rows = []
        self.clear_alpha = 0.0
        self._completing = False
        self.session.spawn_lock = False

        if self.session.on_line_clear:
            self.session.on_line_clear(lines, rows)

    def __repr__(self):
        return f"Well(clearing={self.clearing_rows}, alpha={self.clear_alpha:.1f})"
