"""
The Game applies moves to the board.
It owns the board, whose turn it is and the pending capture chain, and decides when a turn is over and
when the game is over. Seats/identities are the Room's business (src/checkers/room.py): the Game only knows colors.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Self

from src.checkers.board import Board
from src.checkers.moves import (
    LegalMoves,
    Move,
    MoveRecord,
    PendingChain,
    find_captured_square,
    resolve_legal_moves,
)
from src.checkers.pieces import opponent
from src.checkers.square import Square
from src.core.exceptions import (
    GameOverError,
    IllegalMoveError,
    MustContinueChainError,
    NotYourTurnError,
    OutOfBoundsError,
)
from src.core.shared_types import Color, FinishReason

logger = logging.getLogger(__name__)


@dataclass
class Game:
    board: Board
    turn: Color = Color.WHITE
    pending: Optional[PendingChain] = None
    winner: Optional[Color] = None
    finish_reason: Optional[FinishReason] = None
    history: list[MoveRecord] = field(default_factory=list)

    @classmethod
    def new_game(cls, position: Optional[str] = None) -> Self:
        """White always moves first. A custom position is only used for setting up tests/puzzles."""
        board = Board.from_notation(position) if position else Board.starting()
        return cls(board=board)

    @property
    def is_over(self) -> bool:
        return self.winner is not None

    @property
    def last_move(self) -> Optional[MoveRecord]:
        return self.history[-1] if self.history else None

    def legal_moves(self, color: Color) -> LegalMoves:
        """Legal moves for `color`. Nothing is legal when it is not your turn or the game has ended."""
        if self.is_over or color != self.turn:
            return LegalMoves()
        return resolve_legal_moves(self.board, color, self.pending)

    def make_move(self, color: Color, move: Move, by: str = "") -> MoveRecord:
        """
        Attempt a single step.
        -----

        Everything is validated before the board is touched:
        1. game still running / your turn / squares on the dark part of the board
        2. a pending chain binds the move to one piece
        3. you move your own piece, diagonally, to an empty square
        4. the step is in the resolved legal set (mandatory and maximum capture)
        5. a capture jumps exactly one opponent piece

        Then: update the board, the pending chain, and (if the turn is over) the turn and the game status.
        """
        if self.is_over:
            raise GameOverError("Game has already finished.")

        if color != self.turn:
            raise NotYourTurnError(f"It is not your turn. Waiting for {self.turn} to move.")

        if not (move.from_square.is_playable() and move.to_square.is_playable()):
            raise OutOfBoundsError(
                f"Squares must be dark squares on the 8x8 board: {move.from_square} -> {move.to_square}"
            )

        if self.pending is not None and move.from_square != self.pending.current:
            raise MustContinueChainError(
                f"Capture chain must be continued with the piece on {self.pending.current}."
            )

        piece = self.board.piece(move.from_square)
        if piece is None or piece.color != color:
            raise IllegalMoveError(f"No piece of yours on {move.from_square}.")

        if not move.is_diagonal:
            raise IllegalMoveError("Pieces only move diagonally.")

        if not self.board.is_empty(move.to_square):
            raise IllegalMoveError(f"Destination {move.to_square} is occupied.")

        legal_moves = self.legal_moves(color)
        if not legal_moves.allows(move):
            raise IllegalMoveError(f"Move not allowed: {move.from_square} -> {move.to_square}")

        captured = find_captured_square(self.board, move)
        self._assert_capture_target(color, captured, legal_moves.must_capture)

        record = self._update_board(move, captured, by)
        self.history.append(record)

        if captured is not None:
            self._update_chain(color, move, legal_moves)

        if self.pending is None:
            self._end_turn(color)
        return record

    def finish(self, winner: Color, reason: FinishReason) -> None:
        self.winner = winner
        self.finish_reason = reason
        self.pending = None
        logger.info("Game finished: %s wins (%s)", winner, reason)

    # -- PRIVATE HELPERS ---
    def _assert_capture_target(
        self, color: Color, captured: Optional[Square], must_capture: bool
    ) -> None:
        """A capture must jump exactly one opponent piece, a quiet move must not jump anything."""
        if must_capture and captured is None:
            raise IllegalMoveError("A capture is mandatory this turn.")
        if not must_capture and captured is not None:
            raise IllegalMoveError("Nothing can be captured this turn.")
        if captured is not None and self.board.piece(captured).color == color:
            raise IllegalMoveError(f"Cannot capture your own piece on {captured}.")

    def _update_board(self, move: Move, captured: Optional[Square], by: str) -> MoveRecord:
        piece = self.board.piece(move.from_square)
        promoted = piece.reaches_promotion(move.to_square)
        if promoted:
            piece = piece.promoted()

        self.board.clear(move.from_square)
        if captured is not None:
            self.board.clear(captured)
        self.board.place_piece(piece, move.to_square)
        return MoveRecord(
            by=by,
            from_square=move.from_square,
            to_square=move.to_square,
            captured=captured,
            promoted=promoted,
        )

    def _update_chain(self, color: Color, move: Move, legal_moves: LegalMoves) -> None:
        """Bind the chain to the landing square, or release it when no sequence continues from here."""
        if self.pending is None:
            matching = [
                sequence
                for sequence in legal_moves.sequences.get(move.from_square, [])
                if sequence[0] == move.to_square
            ]
            self.pending = PendingChain(
                color=color,
                start=move.from_square,
                current=move.to_square,
                steps_taken=1,
                remaining_sequences=matching,
            )
        else:
            self.pending.advance(move.to_square)

        if not self.pending.has_next():
            self.pending = None

    def _end_turn(self, color: Color) -> None:
        """
        Hand the turn over and check whether the game has ended.

        No legal moves for the next player covers both "no pieces left" and "all pieces blocked".
        """
        self.turn = opponent(color)
        if not resolve_legal_moves(self.board, self.turn).has_moves():
            self.finish(winner=color, reason=FinishReason.NO_MOVES)
