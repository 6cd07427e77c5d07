"""Defines the draughts pieces: a color and a rank (man or king)"""

from dataclasses import dataclass
from typing import Self

from src.checkers.square import BOARD_DIMENSIONS, Square
from src.core.shared_types import Color, Rank

CHAR_TO_PIECE: dict[str, tuple[Color, Rank]] = {
    "w": (Color.WHITE, Rank.MAN),
    "W": (Color.WHITE, Rank.KING),
    "b": (Color.BLACK, Rank.MAN),
    "B": (Color.BLACK, Rank.KING),
}

PIECE_TO_CHAR: dict[tuple[Color, Rank], str] = {
    value: key for key, value in CHAR_TO_PIECE.items()
}

# White starts on rows 5-7 and moves up the board, Black starts on rows 0-2 and moves down.
FORWARD: dict[Color, int] = {Color.WHITE: -1, Color.BLACK: 1}
PROMOTION_ROW: dict[Color, int] = {Color.WHITE: 0, Color.BLACK: BOARD_DIMENSIONS[0] - 1}


def opponent(color: Color) -> Color:
    return Color.BLACK if color == Color.WHITE else Color.WHITE


@dataclass(frozen=True)
class Piece:
    color: Color
    rank: Rank = Rank.MAN

    @classmethod
    def from_char(cls, character: str) -> Self:
        # lower case: men, upper case: kings
        color, rank = CHAR_TO_PIECE[character]
        return cls(color, rank)

    def to_char(self) -> str:
        return PIECE_TO_CHAR[(self.color, self.rank)]

    @property
    def is_king(self) -> bool:
        return self.rank == Rank.KING

    def reaches_promotion(self, square: Square) -> bool:
        """A man standing on the far row (seen from its own side) must become a king."""
        return not self.is_king and square.row == PROMOTION_ROW[self.color]

    def promoted(self) -> Self:
        """Pieces are immutable so boards can share them. Promotion hands out a new piece."""
        return type(self)(self.color, Rank.KING)
