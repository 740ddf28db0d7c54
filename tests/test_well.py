"""
Tests for locking pieces and the line-clear sequence.
"""

import unittest
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from blockwell.config import GameConfig
from blockwell.events import Cue
from blockwell.pieces import Direction, PieceType
from blockwell.session import GameSession
from blockwell.well import clear_message, line_score


class TestScoring(unittest.TestCase):

    def test_line_scores_at_level_one(self):
        self.assertEqual(line_score(1, 1), 100)
        self.assertEqual(line_score(2, 1), 300)
        self.assertEqual(line_score(3, 1), 500)
        self.assertEqual(line_score(4, 1), 800)

    def test_line_score_scales_with_level(self):
        self.assertEqual(line_score(4, 2), 1600)
        self.assertEqual(line_score(1, 5), 500)
        self.assertEqual(line_score(0, 3), 0)

    def test_messages(self):
        self.assertEqual(clear_message(1), "LINE CLEAR x1")
        self.assertEqual(clear_message(3), "LINE CLEAR x3")
        self.assertEqual(clear_message(4), "TETRIS!")


class TestLineClear(unittest.TestCase):

    def setUp(self):
        self.session = GameSession(GameConfig(seed=3))
        self.well = self.session.well
        self.grid = self.session.grid
        self.cues = []
        self.cleared = []
        self.session.on_cue = self.cues.append
        self.session.on_line_clear = lambda n, rows: self.cleared.append((n, rows))
        self.interval = self.session.config.clear_interval_ms

    def animate(self, steps):
        for _ in range(steps):
            self.session.scheduler.advance(self.interval)

    def test_lock_piece_writes_color_index(self):
        piece = self.session.spawn_piece(PieceType.J)
        piece.hard_drop()
        colored = [(r, c) for r in range(20) for c in range(10) if self.grid.cell_at(r, c)]
        self.assertEqual(len(colored), 4)
        for row, col in colored:
            self.assertEqual(self.grid.cell_at(row, col), 2)

    def test_lock_releases_hold_lock(self):
        piece = self.session.spawn_piece(PieceType.T)
        self.session.hold_lock = True
        piece.hard_drop()
        self.assertFalse(self.session.hold_lock)

    def test_clear_lines_on_empty_grid_is_a_no_op(self):
        self.well.clear_lines()
        self.assertFalse(self.session.spawn_lock)
        self.assertFalse(self.well.animating)
        self.assertEqual(self.session.scheduler.pending(), 0)
        self.assertEqual(self.well.clearing_rows, [])

    def test_single_line_clear_shifts_rows_down(self):
        for col in range(8):
            self.grid.set_cell(19, col, 1)
        self.grid.set_cell(17, 0, 2)

        piece = self.session.spawn_piece(PieceType.O)
        for _ in range(4):
            self.assertTrue(piece.move(Direction.RIGHT))
        for _ in range(18):
            self.assertTrue(piece.move(Direction.DOWN))
        self.assertFalse(piece.move(Direction.DOWN))
        self.assertTrue(self.grid.is_row_full(19))

        self.well.clear_lines()
        self.assertTrue(self.session.spawn_lock)
        self.assertEqual(self.well.clearing_rows, [19])

        self.animate(9)
        self.assertAlmostEqual(self.well.clear_alpha, 0.9)
        self.assertEqual(self.cues, [Cue.CLEAR])
        self.assertTrue(self.grid.is_row_full(19))

        self.animate(1)
        self.assertEqual(list(self.grid.cells[0]), [0] * 10)
        self.assertEqual(list(self.grid.cells[19]), [0] * 8 + [4, 4])
        self.assertEqual(self.grid.cell_at(18, 0), 2)
        self.assertEqual(self.session.score, 18 + 100)
        self.assertEqual(self.session.lines_cleared, 1)
        self.assertEqual(self.session.messages.texts(), ["LINE CLEAR x1"])
        self.assertFalse(self.session.spawn_lock)
        self.assertEqual(self.well.clear_alpha, 0.0)
        self.assertEqual(self.cleared, [(1, [19])])

    def test_commit_happens_once(self):
        for col in range(10):
            self.grid.set_cell(19, col, 1)
        self.grid.set_cell(18, 2, 5)

        self.well.clear_lines()
        self.animate(10)
        snapshot = self.grid.snapshot()
        score = self.session.score

        self.animate(20)
        self.assertTrue((self.grid.snapshot() == snapshot).all())
        self.assertEqual(self.session.score, score)
        self.assertEqual(self.session.lines_cleared, 1)
        self.assertEqual(self.cues, [Cue.CLEAR])

    def test_clear_lines_ignored_while_animating(self):
        for col in range(10):
            self.grid.set_cell(19, col, 1)
        self.well.clear_lines()
        self.well.clear_lines()
        self.assertEqual(self.session.scheduler.pending(), 1)

    def test_tetris_with_i_piece(self):
        for row in range(16, 20):
            for col in range(9):
                self.grid.set_cell(row, col, 3)

        piece = self.session.spawn_piece(PieceType.I)
        self.assertTrue(piece.rotate(Direction.RIGHT))
        for _ in range(4):
            self.assertTrue(piece.move(Direction.RIGHT))
        self.assertEqual(piece.hard_drop(), 17)
        self.assertEqual(self.session.score, 34)

        self.well.clear_lines()
        self.assertEqual(self.well.clearing_rows, [16, 17, 18, 19])
        self.animate(10)

        self.assertEqual(self.session.score, 34 + 800)
        self.assertEqual(self.session.lines_cleared, 4)
        self.assertEqual(self.session.messages.texts(), ["TETRIS!"])
        self.assertEqual(int(self.grid.cells.sum()), 0)

    def test_tetris_at_level_two(self):
        self.session.level = 2
        for row in range(16, 20):
            for col in range(10):
                self.grid.set_cell(row, col, 1)
        self.well.clear_lines()
        self.animate(10)
        self.assertEqual(self.session.score, 1600)

    def test_separated_rows_clear_together(self):
        for col in range(10):
            self.grid.set_cell(19, col, 1)
            self.grid.set_cell(17, col, 1)
        self.grid.set_cell(18, 0, 6)
        self.grid.set_cell(16, 9, 7)

        self.well.clear_lines()
        self.assertEqual(self.well.clearing_rows, [17, 19])
        self.animate(10)

        self.assertEqual(self.grid.cell_at(19, 0), 6)
        self.assertEqual(self.grid.cell_at(18, 9), 7)
        self.assertEqual(self.session.score, 300)

    def test_lock_above_well_ends_game(self):
        piece = self.session.spawn_piece(PieceType.I)
        piece.rotate(Direction.RIGHT)
        self.grid.set_cell(3, 5, 1)

        self.assertFalse(piece.move(Direction.DOWN))
        self.assertTrue(self.session.game_over)
        for row in range(3):
            self.assertEqual(self.grid.cell_at(row, 5), PieceType.I.color_index)


if __name__ == '__main__':
    unittest.main()
