"""
Grid storage for Blockwell.
The well is a fixed 20x10 matrix of cell values: 0 is empty and 1-7 holds the
colour index of the piece type that locked there.
"""

from typing import List
import numpy as np

from .config import WELL_HEIGHT, WELL_WIDTH
from .exceptions import GridIndexException, InvalidCellValueException


class Grid:
    """Fixed-size cell matrix, indexed (row, col) with rows growing downward."""

    def __init__(self, width: int = WELL_WIDTH, height: int = WELL_HEIGHT):
        self._width = width
        self._height = height
        self.cells = np.zeros((height, width), dtype=np.int8)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def reset(self):
        """Empty every cell."""
        self.cells.fill(0)

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self._height and 0 <= col < self._width

    def cell_at(self, row: int, col: int) -> int:
        self._check(row, col)
        return int(self.cells[row, col])

    def set_cell(self, row: int, col: int, value: int):
        self._check(row, col)
        if not 0 <= value <= 7:
            raise InvalidCellValueException(f"Cell value must be in 0..7, got {value}")
        self.cells[row, col] = value

    def is_row_full(self, row: int) -> bool:
        self._check(row, 0)
        return bool(np.all(self.cells[row] != 0))

    def full_rows(self) -> List[int]:
        """Indices of full rows, top to bottom."""
        return [row for row in range(self._height) if self.is_row_full(row)]

    def clear_row(self, row: int):
        """Remove a row and push a fresh empty row in at the top."""
        self._check(row, 0)
        remaining = np.delete(self.cells, row, axis=0)
        self.cells = np.vstack([np.zeros((1, self._width), dtype=np.int8), remaining])

    def snapshot(self) -> np.ndarray:
        return self.cells.copy()

    def _check(self, row: int, col: int):
        if not self.in_bounds(row, col):
            raise GridIndexException(
                f"Cell ({row}, {col}) is outside the {self._height}x{self._width} well"
            )

    def __str__(self):
        """Text rendering of the well."""
        return "\n".join(
            "".join("█" if cell else "·" for cell in row) for row in self.cells
        )

    def __repr__(self):
        return f"Grid({self._height}x{self._width}, filled={int(np.count_nonzero(self.cells))})"
