"""The Game board holds the `position` (the configuration of pieces on the dark squares)"""

from dataclasses import dataclass
from typing import Optional, Self

from src.checkers.notation import EMPTY_POSITION, STARTING_POSITION, is_valid_position
from src.checkers.pieces import Piece
from src.checkers.square import BOARD_DIMENSIONS, Square
from src.core.exceptions import InvalidNotationError
from src.core.shared_types import Color


@dataclass
class Board:
    """
    Only occupied squares are stored. A square missing from `position` is empty.

    No validation happens here: callers (the move resolver / Game) decide what is legal.
    """

    position: dict[Square, Piece]

    @classmethod
    def starting(cls) -> Self:
        """Men on the dark squares of the three back rows of each side."""
        return cls.from_notation(STARTING_POSITION)

    @classmethod
    def empty(cls) -> Self:
        return cls.from_notation(EMPTY_POSITION)

    @classmethod
    def from_notation(cls, notation: str) -> Self:
        """Construct a board from the compact position notation (see src/checkers/notation.py)."""
        if not is_valid_position(notation):
            raise InvalidNotationError(f"Not a valid board position: {notation!r}")

        position: dict[Square, Piece] = {}
        for row, row_notation in enumerate(notation.split("/")):
            col = 0
            for character in row_notation:
                if character.isdigit():
                    col += int(character)
                else:
                    position[Square(row, col)] = Piece.from_char(character)
                    col += 1
        return cls(position)

    def to_notation(self) -> str:
        return "/".join(self._row_to_notation(row) for row in range(BOARD_DIMENSIONS[0]))

    def _row_to_notation(self, row: int) -> str:
        characters: list[str] = []
        empty_count = 0
        for col in range(BOARD_DIMENSIONS[1]):
            piece = self.piece(Square(row, col))
            if piece is None:
                empty_count += 1
                continue
            if empty_count > 0:
                characters.append(str(empty_count))
                empty_count = 0
            characters.append(piece.to_char())

        if empty_count > 0:
            characters.append(str(empty_count))
        return "".join(characters)

    # --- CELL ACCESS ---
    def piece(self, square: Square) -> Optional[Piece]:
        return self.position.get(square)

    def is_empty(self, square: Square) -> bool:
        return square not in self.position

    def place_piece(self, piece: Piece, square: Square) -> None:
        self.position[square] = piece

    def clear(self, square: Square) -> None:
        self.position.pop(square, None)

    def copy(self) -> Self:
        """Pieces are immutable, so a new dict is enough to get an independent board."""
        return type(self)(dict(self.position))

    # --- QUERIES ---
    def locate_color(self, color: Color) -> list[Square]:
        return sorted(
            square for square, piece in self.position.items() if piece.color == color
        )

    def count_pieces(self) -> dict[Color, int]:
        return {color: len(self.locate_color(color)) for color in Color}

    def to_grid(self) -> list[list[Optional[Piece]]]:
        """8x8 rows of pieces / None, row 0 first"""
        num_rows, num_cols = BOARD_DIMENSIONS
        return [
            [self.piece(Square(row, col)) for col in range(num_cols)]
            for row in range(num_rows)
        ]
