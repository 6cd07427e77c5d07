"""
A square on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

# Draughts board is 8x8 for Russian checkers. Rows and columns are 0-based, row 0 is Black's back row.
BOARD_DIMENSIONS = (8, 8)


@dataclass(frozen=True, order=True)
class Square:
    row: int
    col: int

    @classmethod
    def from_pair(cls, pair: Sequence[int]) -> Square:
        """(row, col) as it arrives from the transport layer"""
        row, col = pair
        return cls(row, col)

    def to_pair(self) -> tuple[int, int]:
        return (self.row, self.col)

    def is_within_bounds(self) -> bool:
        return (0 <= self.row < BOARD_DIMENSIONS[0]) and (
            0 <= self.col < BOARD_DIMENSIONS[1]
        )

    def is_dark(self) -> bool:
        return (self.row + self.col) % 2 == 1

    def is_playable(self) -> bool:
        """All play happens on the dark squares."""
        return self.is_within_bounds() and self.is_dark()

    def offset(self, d_row: int, d_col: int) -> Square:
        return Square(self.row + d_row, self.col + d_col)
