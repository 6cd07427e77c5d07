"""Unit tests for /src/checkers/square.py"""

import pytest

from src.checkers.square import Square


@pytest.mark.parametrize("pair", [(0, 1), (7, 6), (3, 4), (5, 0)])
def test_square_from_and_to_pair(pair: tuple[int, int]) -> None:
    """Coordinates arrive as (row, col) pairs from the transport layer."""
    square = Square.from_pair(pair)
    assert square.to_pair() == pair


def test_square_from_list() -> None:
    """JSON gives us lists, not tuples."""
    assert Square.from_pair([2, 3]) == Square(2, 3)


@pytest.mark.parametrize(
    "row, col, expected",
    [
        (0, 0, True),
        (7, 7, True),
        (-1, 0, False),
        (0, -1, False),
        (8, 1, False),
        (1, 8, False),
    ],
)
def test_within_bounds(row: int, col: int, expected: bool) -> None:
    assert Square(row, col).is_within_bounds() is expected


@pytest.mark.parametrize(
    "row, col, expected",
    [
        (0, 1, True),
        (1, 0, True),
        (7, 0, True),
        (0, 0, False),
        (3, 3, False),
        (7, 7, False),
    ],
)
def test_dark_squares(row: int, col: int, expected: bool) -> None:
    """Dark squares: row + col is odd"""
    assert Square(row, col).is_dark() is expected


@pytest.mark.parametrize(
    "row, col, expected",
    [
        (5, 0, True),
        (4, 0, False),
        (-1, 0, False),
        (8, 1, False),
    ],
)
def test_playable_squares(row: int, col: int, expected: bool) -> None:
    """Off the board is never playable, even when the parity matches."""
    assert Square(row, col).is_playable() is expected


def test_offset() -> None:
    assert Square(5, 2).offset(-1, 1) == Square(4, 3)
    assert Square(0, 0).offset(-1, -1) == Square(-1, -1)


def test_squares_are_ordered_row_first() -> None:
    squares = [Square(2, 1), Square(0, 7), Square(2, 0)]
    assert sorted(squares) == [Square(0, 7), Square(2, 0), Square(2, 1)]
