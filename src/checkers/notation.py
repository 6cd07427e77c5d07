"""
Compact text notation of a board position.

Modelled after the board part of a FEN string:
* rows are separated by slashes, row 0 (Black's back row) comes first
* `w`/`b` are white/black men, `W`/`B` white/black kings
* a digit denotes that many consecutive empty squares

ex. the starting position:
1b1b1b1b/b1b1b1b1/1b1b1b1b/8/8/w1w1w1w1/1w1w1w1w/w1w1w1w1
"""

from src.checkers.pieces import CHAR_TO_PIECE
from src.checkers.square import BOARD_DIMENSIONS, Square

STARTING_POSITION = "1b1b1b1b/b1b1b1b1/1b1b1b1b/8/8/w1w1w1w1/1w1w1w1w/w1w1w1w1"
EMPTY_POSITION = "/".join(["8"] * BOARD_DIMENSIONS[0])


def is_valid_position(position: str) -> bool:
    """Eight rows of eight squares, only known piece characters, and pieces on dark squares only."""
    num_rows, num_cols = BOARD_DIMENSIONS
    row_notations = position.split("/")
    if len(row_notations) != num_rows:
        return False

    for row, row_notation in enumerate(row_notations):
        col = 0
        for character in row_notation:
            if character.isdigit():
                col += int(character)
            elif character in CHAR_TO_PIECE:
                if not Square(row, col).is_playable():
                    return False
                col += 1
            else:
                return False
        if col != num_cols:
            return False
    return True

