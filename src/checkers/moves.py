"""
Simple (non-capturing) movement rules and the move-set resolver.

Key idea: Use strategy pattern to define the simple moves for each rank, the capture rules live in captures.py.

The resolver combines both into the set of legal moves for one side:
1. if any capture exists, capturing is mandatory
2. only capture sequences as long as the longest one available (across ALL pieces) are legal
3. only when nothing can be captured, the simple moves are legal
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Protocol, Self, Sequence

from src.checkers.captures import DIAGONALS, CaptureSequence, capture_sequences
from src.checkers.pieces import FORWARD, Piece
from src.checkers.square import Square
from src.core.exceptions import IllegalMoveError
from src.core.shared_types import Color, Rank

logger = logging.getLogger(__name__)


class Board(Protocol):
    """Just the parts the movement strategies need"""

    def piece(self, square: Square) -> Optional[Piece]: ...
    def is_empty(self, square: Square) -> bool: ...
    def locate_color(self, color: Color) -> list[Square]: ...
    def copy(self) -> "Board": ...


@dataclass(frozen=True)
class Move:
    """A single step: for a capture chain, every jump is its own Move."""

    from_square: Square
    to_square: Square

    @classmethod
    def from_pairs(cls, from_pair: Sequence[int], to_pair: Sequence[int]) -> Self:
        return cls(Square.from_pair(from_pair), Square.from_pair(to_pair))

    @property
    def is_diagonal(self) -> bool:
        d_row = self.to_square.row - self.from_square.row
        d_col = self.to_square.col - self.from_square.col
        return d_row != 0 and abs(d_row) == abs(d_col)


@dataclass
class MoveRecord:
    """What actually happened when a Move got accepted."""

    by: str
    from_square: Square
    to_square: Square
    captured: Optional[Square] = None
    promoted: bool = False

    @property
    def was_capture(self) -> bool:
        return self.captured is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "by": self.by,
            "from": list(self.from_square.to_pair()),
            "to": list(self.to_square.to_pair()),
            "captured": list(self.captured.to_pair()) if self.captured else None,
            "promoted": self.promoted,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        captured = data.get("captured")
        return cls(
            by=data["by"],
            from_square=Square.from_pair(data["from"]),
            to_square=Square.from_pair(data["to"]),
            captured=Square.from_pair(captured) if captured else None,
            promoted=data.get("promoted", False),
        )


@dataclass
class PendingChain:
    """
    A capture chain that has started but not finished yet.

    `remaining_sequences` are complete landing sequences (from the start of the chain),
    `steps_taken` counts the landings already made, so the next landing of a sequence is `sequence[steps_taken]`.
    """

    color: Color
    start: Square
    current: Square
    steps_taken: int
    remaining_sequences: list[CaptureSequence]

    def next_steps(self) -> set[Square]:
        return {
            sequence[self.steps_taken]
            for sequence in self.remaining_sequences
            if len(sequence) > self.steps_taken
        }

    def has_next(self) -> bool:
        return len(self.next_steps()) > 0

    def advance(self, landing: Square) -> None:
        """Keep only the sequences that agree with the landing just made."""
        self.remaining_sequences = [
            sequence
            for sequence in self.remaining_sequences
            if len(sequence) > self.steps_taken and sequence[self.steps_taken] == landing
        ]
        self.current = landing
        self.steps_taken += 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "color": self.color.value,
            "start": list(self.start.to_pair()),
            "current": list(self.current.to_pair()),
            "steps_taken": self.steps_taken,
            "remaining_sequences": [
                [list(square.to_pair()) for square in sequence]
                for sequence in self.remaining_sequences
            ],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            color=Color(data["color"]),
            start=Square.from_pair(data["start"]),
            current=Square.from_pair(data["current"]),
            steps_taken=data["steps_taken"],
            remaining_sequences=[
                [Square.from_pair(pair) for pair in sequence]
                for sequence in data["remaining_sequences"]
            ],
        )


@dataclass
class LegalMoves:
    """
    Output of the resolver.

    `destinations` only holds the FIRST step of every legal sequence. Later steps of a chain
    are resolved turn-by-turn through the PendingChain.
    """

    destinations: dict[Square, set[Square]] = field(default_factory=dict)
    sequences: dict[Square, list[CaptureSequence]] = field(default_factory=dict)
    must_capture: bool = False
    mid_chain: bool = False
    max_capture: int = 0

    def allows(self, move: Move) -> bool:
        return move.to_square in self.destinations.get(move.from_square, set())

    def has_moves(self) -> bool:
        return any(self.destinations.values())

    def moves(self) -> list[Move]:
        """Flat, sorted list of every allowed single step (handy for bots and tests)."""
        return [
            Move(origin, target)
            for origin in sorted(self.destinations)
            for target in sorted(self.destinations[origin])
        ]


# --- SIMPLE MOVEMENT RULES ---
def simple_man_moves(square: Square, board: Board) -> set[Square]:
    """A man steps one square diagonally forward onto an empty dark square."""
    forward = FORWARD[board.piece(square).color]
    targets: set[Square] = set()
    for d_col in (-1, 1):
        target = square.offset(forward, d_col)
        if target.is_playable() and board.is_empty(target):
            targets.add(target)
    return targets


def simple_king_moves(square: Square, board: Board) -> set[Square]:
    """Raycasting: a king slides along any diagonal until it hits a piece or the edge of the board."""
    targets: set[Square] = set()
    for d_row, d_col in DIAGONALS:
        target = square.offset(d_row, d_col)
        while target.is_playable() and board.is_empty(target):
            targets.add(target)
            target = target.offset(d_row, d_col)
    return targets


# -- STRATEGY PATTERN: MOVEMENT RULES ---
SimpleMovesFn = Callable[[Square, Board], set[Square]]
MOVEMENT_RULES: dict[Rank, SimpleMovesFn] = {
    Rank.MAN: simple_man_moves,
    Rank.KING: simple_king_moves,
}


# --- RESOLVER ---
def capture_plans(board: Board, color: Color) -> tuple[dict[Square, list[CaptureSequence]], int]:
    """All capture sequences per origin square, already pruned to the longest length found across all origins."""
    plans: dict[Square, list[CaptureSequence]] = {}
    for square in board.locate_color(color):
        sequences = capture_sequences(square, board)
        if sequences:
            plans[square] = sequences

    max_capture = max(
        (len(sequence) for sequences in plans.values() for sequence in sequences),
        default=0,
    )
    pruned = {
        origin: [sequence for sequence in sequences if len(sequence) == max_capture]
        for origin, sequences in plans.items()
    }
    return {origin: kept for origin, kept in pruned.items() if kept}, max_capture


def resolve_legal_moves(
    board: Board, color: Color, pending: Optional[PendingChain] = None
) -> LegalMoves:
    """
    Legal move set for `color` on `board`.
    ----

    While a capture chain is pending for this color, only the bound piece may move,
    and only to a square that continues one of the remaining sequences.
    """
    if pending is not None and pending.color == color:
        return LegalMoves(
            destinations={pending.current: pending.next_steps()},
            sequences={pending.current: pending.remaining_sequences},
            must_capture=True,
            mid_chain=True,
            max_capture=max(
                (len(sequence) for sequence in pending.remaining_sequences), default=0
            ),
        )

    plans, max_capture = capture_plans(board, color)
    if plans:
        return LegalMoves(
            destinations={
                origin: {sequence[0] for sequence in sequences}
                for origin, sequences in plans.items()
            },
            sequences=plans,
            must_capture=True,
            max_capture=max_capture,
        )

    destinations: dict[Square, set[Square]] = {}
    for square in board.locate_color(color):
        movement_rule: SimpleMovesFn = MOVEMENT_RULES[board.piece(square).rank]
        targets = movement_rule(square, board)
        if targets:
            destinations[square] = targets
    return LegalMoves(destinations=destinations)


def find_captured_square(board: Board, move: Move) -> Optional[Square]:
    """
    The single piece standing between origin and destination of a diagonal move (None for a quiet move).

    More than one piece on the way means the move bypassed the resolver: reject it, never guess.
    """
    if not move.is_diagonal:
        raise IllegalMoveError(f"Not a diagonal move: {move.from_square} -> {move.to_square}")

    d_row = 1 if move.to_square.row > move.from_square.row else -1
    d_col = 1 if move.to_square.col > move.from_square.col else -1
    found: Optional[Square] = None
    square = move.from_square.offset(d_row, d_col)
    while square != move.to_square:
        if not board.is_empty(square):
            if found is not None:
                logger.warning(
                    "More than one piece between %s and %s", move.from_square, move.to_square
                )
                raise IllegalMoveError(
                    f"Cannot jump over more than one piece: {move.from_square} -> {move.to_square}"
                )
            found = square
        square = square.offset(d_row, d_col)
    return found
