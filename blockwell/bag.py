"""
7-bag randomizer for Blockwell.
Keeps a primary bag and an already-shuffled backup bag so the preview can
look several pieces ahead without breaking the one-of-each guarantee.
"""

from typing import List, Optional
import numpy as np

from .pieces import PieceType


def fisher_yates(items: List, rng: np.random.Generator) -> List:
    """Uniform in-place shuffle."""
    for i in range(len(items) - 1, 0, -1):
        j = int(rng.integers(0, i + 1))
        items[i], items[j] = items[j], items[i]
    return items


def new_bag(rng: np.random.Generator) -> List[PieceType]:
    """One of each piece type in random order."""
    return fisher_yates(list(PieceType), rng)


class PieceBag:
    """Double-buffered 7-bag. Never holds more than 14 upcoming pieces."""

    def __init__(self, seed: Optional[int] = None):
        self.rng = np.random.default_rng(seed)
        self.primary: List[PieceType] = new_bag(self.rng)
        self.backup: List[PieceType] = new_bag(self.rng)

    def refill(self) -> bool:
        """Promote the backup once the primary bag is empty."""
        if self.primary:
            return False
        self.primary = self.backup
        self.backup = new_bag(self.rng)
        return True

    def draw(self) -> PieceType:
        self.refill()
        return self.primary.pop(0)

    def peek(self, count: int = 5) -> List[PieceType]:
        """Upcoming piece types, nearest first."""
        return (self.primary + self.backup)[:count]

    def __len__(self):
        return len(self.primary) + len(self.backup)
