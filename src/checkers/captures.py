"""
Capture sequences (Russian checkers)

Key idea: same strategy pattern as the simple movement rules, one capture rule per rank.

A capture sequence is the ordered list of landing squares of one piece during a single turn.
Only *maximal* sequences are produced: a sequence stops only when the piece cannot capture any further.

Rules implemented here:
* men capture two squares diagonally, in all four directions (backwards too)
* kings are "flying": they capture a piece anywhere along a diagonal and may land on any
  empty square behind it
* a man that lands on its promotion row becomes a king immediately and keeps capturing as a king
* a piece can only be captured once per sequence
"""

from typing import Callable, Protocol

from src.checkers.pieces import Piece
from src.checkers.square import Square
from src.core.shared_types import Rank


class Board(Protocol):
    """Just the parts the capture rules need"""

    def piece(self, square: Square) -> Piece | None: ...
    def is_empty(self, square: Square) -> bool: ...
    def place_piece(self, piece: Piece, square: Square) -> None: ...
    def clear(self, square: Square) -> None: ...
    def copy(self) -> "Board": ...


Vector = tuple[int, int]
CaptureSequence = list[Square]

DIAGONALS: list[Vector] = [(-1, -1), (-1, 1), (1, -1), (1, 1)]


def capture_sequences(
    square: Square, board: Board, captured: frozenset[Square] = frozenset()
) -> list[CaptureSequence]:
    """Every maximal capture sequence for the piece standing on `square` (empty list if it cannot capture)."""
    piece = board.piece(square)
    if piece is None:
        return []
    capture_rule: CaptureSequencesFn = CAPTURE_RULES[piece.rank]
    return capture_rule(square, board, captured)


def _jump(board: Board, origin: Square, jumped: Square, landing: Square) -> Board:
    """
    Simulate a single jump on a copy of the board.

    Every branch of the search gets its own board, so no hypothetical jump ever leaks into another branch.
    """
    piece = board.piece(origin)
    branch = board.copy()
    branch.clear(origin)
    branch.clear(jumped)
    if piece.reaches_promotion(landing):
        piece = piece.promoted()
    branch.place_piece(piece, landing)
    return branch


def _continue_from(
    board: Board, landing: Square, captured: frozenset[Square]
) -> list[CaptureSequence]:
    """Prefix every continuation with the landing square, or stop here if there is none."""
    continuations = capture_sequences(landing, board, captured)
    if not continuations:
        return [[landing]]
    return [[landing, *continuation] for continuation in continuations]


def man_capture_sequences(
    square: Square, board: Board, captured: frozenset[Square]
) -> list[CaptureSequence]:
    """A man jumps over an adjacent opponent piece onto the empty square right behind it."""
    piece = board.piece(square)
    sequences: list[CaptureSequence] = []
    for d_row, d_col in DIAGONALS:
        jumped = square.offset(d_row, d_col)
        landing = square.offset(2 * d_row, 2 * d_col)
        if not landing.is_playable():
            continue

        target = board.piece(jumped)
        if target is None or target.color == piece.color or jumped in captured:
            continue
        if not board.is_empty(landing):
            continue

        branch = _jump(board, square, jumped, landing)
        sequences.extend(_continue_from(branch, landing, captured | {jumped}))
    return sequences


def king_capture_sequences(
    square: Square, board: Board, captured: frozenset[Square]
) -> list[CaptureSequence]:
    """
    Raycasting, as for sliding moves.

    Walk along every diagonal. Empty squares before an opponent piece are skipped,
    the first opponent piece becomes the capture target, and every empty square after it is a landing option.
    The ray ends at the first own piece, at a second piece after the target, or at the edge of the board.
    """
    piece = board.piece(square)
    sequences: list[CaptureSequence] = []
    for d_row, d_col in DIAGONALS:
        jumped: Square | None = None
        current = square.offset(d_row, d_col)
        while current.is_within_bounds():
            occupant = board.piece(current)
            if occupant is None:
                if jumped is not None:
                    branch = _jump(board, square, jumped, current)
                    sequences.extend(
                        _continue_from(branch, current, captured | {jumped})
                    )
            elif occupant.color == piece.color or jumped is not None:
                break
            elif current in captured:
                break
            else:
                jumped = current
            current = current.offset(d_row, d_col)
    return sequences


# -- STRATEGY PATTERN: CAPTURE RULES ---
CaptureSequencesFn = Callable[[Square, Board, frozenset[Square]], list[CaptureSequence]]
CAPTURE_RULES: dict[Rank, CaptureSequencesFn] = {
    Rank.MAN: man_capture_sequences,
    Rank.KING: king_capture_sequences,
}
