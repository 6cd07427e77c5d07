"""
The Room is the entrypoint into the domain layer for the service layer.

It wraps one Game with everything that is about *who* plays it: the two seats, spectators,
players that left and may still come back, bots, and the room status
(waiting for players -> playing -> finished -> rematch).
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Self

from src.checkers.board import Board
from src.checkers.game import Game
from src.checkers.moves import LegalMoves, Move, MoveRecord, PendingChain
from src.checkers.pieces import opponent
from src.core.exceptions import (
    GameNotFinishedError,
    GameNotStartedError,
    GameOverError,
    NoSeatError,
    PlayerPresentError,
    RoomFullError,
)
from src.core.models import SessionModel
from src.core.shared_types import Color, FinishReason, LeavePolicy, Role, Status

logger = logging.getLogger(__name__)

# White's seat is handed out first
SEAT_ORDER: tuple[Color, ...] = (Color.WHITE, Color.BLACK)


@dataclass
class Room:
    game: Game
    seats: dict[Color, str]
    status: Status = Status.WAITING
    spectators: list[str] = field(default_factory=list)
    away: dict[str, datetime] = field(default_factory=dict)
    bots: list[str] = field(default_factory=list)

    # --- CONVERSION FROM/TO THE SERVICE CONTRACT ---
    @classmethod
    def create(cls, identity: str, position: Optional[str] = None) -> Self:
        """Creator gets the white seat, board in starting position."""
        return cls(game=Game.new_game(position), seats={Color.WHITE: identity})

    @classmethod
    def from_model(cls, model: SessionModel) -> Self:
        """Define how to construct a Room from the information the Service layer actually has"""
        game = Game(
            board=Board.from_notation(model.board),
            turn=Color(model.turn),
            pending=PendingChain.from_dict(model.pending) if model.pending else None,
            winner=Color(model.winner) if model.winner else None,
            finish_reason=FinishReason(model.reason) if model.reason else None,
            history=[MoveRecord.from_dict(record) for record in model.history],
        )
        return cls(
            game=game,
            seats={Color(color): identity for color, identity in model.seats.items()},
            status=Status(model.status),
            spectators=list(model.spectators),
            away={
                identity: datetime.fromisoformat(left_at)
                for identity, left_at in model.away.items()
            },
            bots=list(model.bots),
        )

    def to_model(self) -> SessionModel:
        """Encode back into a format the Service layer uses"""
        last_move = self.game.last_move
        return SessionModel(
            board=self.game.board.to_notation(),
            turn=self.game.turn.value,
            seats={color.value: identity for color, identity in self.seats.items()},
            status=self.status.value,
            winner=self.game.winner.value if self.game.winner else None,
            reason=self.game.finish_reason.value if self.game.finish_reason else None,
            pending=self.game.pending.to_dict() if self.game.pending else None,
            last_move=last_move.to_dict() if last_move else None,
            history=[record.to_dict() for record in self.game.history],
            spectators=list(self.spectators),
            away={identity: left_at.isoformat() for identity, left_at in self.away.items()},
            bots=list(self.bots),
        )

    # --- QUERIES ---
    def seat_of(self, identity: str) -> Optional[Color]:
        return next(
            (color for color, seated in self.seats.items() if seated == identity), None
        )

    @property
    def is_abandoned(self) -> bool:
        """No human left in the room (bots do not keep a room alive)."""
        humans = [identity for identity in self.seats.values() if identity not in self.bots]
        return not humans and not self.spectators

    def legal_moves(self, identity: str) -> LegalMoves:
        color = self._assert_seated(identity)
        if self.status != Status.PLAYING:
            return LegalMoves()
        return self.game.legal_moves(color)

    # --- SEATS ---
    def join(self, identity: str, allow_spectators: bool = True) -> Role:
        """
        Seat a player.

        * someone already seated gets the same seat back (and is no longer away)
        * otherwise the first free seat (white before black), a spectator taking it stops spectating
        * otherwise a spectator, if the room allows them
        """
        color = self.seat_of(identity)
        if color is not None:
            self.away.pop(identity, None)
            return Role(color.value)

        free_seat = self._free_seat()
        if free_seat is not None:
            self.seats[free_seat] = identity
            if identity in self.spectators:
                self.spectators.remove(identity)
            self._start_if_full()
            return Role(free_seat.value)

        if not allow_spectators:
            raise RoomFullError("Both seats are taken.")
        if identity not in self.spectators:
            self.spectators.append(identity)
        return Role.SPECTATOR

    def add_bot(self, identity: str) -> Color:
        free_seat = self._free_seat()
        if free_seat is None:
            raise RoomFullError("No free seat for a bot.")
        self.seats[free_seat] = identity
        self.bots.append(identity)
        self._start_if_full()
        return free_seat

    def leave(self, identity: str, policy: LeavePolicy, now: datetime) -> None:
        """
        Player (or spectator) leaves the room.
        ----

        While a game is running, the policy decides: forfeit immediately, or keep the seat and mark
        the player away (a later `forfeit()` ends the game if they do not come back).
        """
        if identity in self.spectators:
            self.spectators.remove(identity)
            return

        color = self._assert_seated(identity)
        if self.status == Status.PLAYING and policy == LeavePolicy.GRACE:
            self.away[identity] = now
            return

        if self.status == Status.PLAYING:
            self._finish(winner=opponent(color), reason=FinishReason.FORFEIT)
        self._vacate(color)

    def forfeit(self, identity: str) -> Color:
        """Grace window ran out. Only valid while the game runs and the player is still seated and away."""
        color = self._assert_seated(identity)
        self._assert_playing()
        if identity not in self.away:
            raise PlayerPresentError(f"{identity} is back in the room, nothing to forfeit.")

        winner = opponent(color)
        self._finish(winner=winner, reason=FinishReason.FORFEIT)
        self._vacate(color)
        return winner

    # --- PLAYING ---
    def make_move(self, identity: str, move: Move) -> MoveRecord:
        color = self._assert_seated(identity)
        self._assert_playing()
        record = self.game.make_move(color, move, by=identity)
        if self.game.is_over:
            self.status = Status.FINISHED
        return record

    def resign(self, identity: str) -> Color:
        color = self._assert_seated(identity)
        self._assert_playing()
        winner = opponent(color)
        self._finish(winner=winner, reason=FinishReason.RESIGN)
        return winner

    def rematch(self, identity: str, swap_colors: bool = True) -> None:
        """Fresh board for the same room. By default the players swap colors."""
        self._assert_seated(identity)
        if self.status != Status.FINISHED:
            raise GameNotFinishedError(f"Rematch only after the game has finished. status: {self.status}")

        if swap_colors:
            self.seats = {opponent(color): seated for color, seated in self.seats.items()}
        self.game = Game.new_game()
        self.away.clear()
        self.status = Status.WAITING
        self._start_if_full()

    # -- PRIVATE HELPERS ---
    def _free_seat(self) -> Optional[Color]:
        return next((color for color in SEAT_ORDER if color not in self.seats), None)

    def _start_if_full(self) -> None:
        if self.status == Status.WAITING and all(color in self.seats for color in SEAT_ORDER):
            self.status = Status.PLAYING
            logger.info("Both seats taken, game starts: %s", self.seats)

    def _vacate(self, color: Color) -> None:
        identity = self.seats.pop(color)
        self.away.pop(identity, None)
        if identity in self.bots:
            self.bots.remove(identity)

    def _finish(self, winner: Color, reason: FinishReason) -> None:
        self.game.finish(winner, reason)
        self.status = Status.FINISHED

    def _assert_seated(self, identity: str) -> Color:
        color = self.seat_of(identity)
        if color is None:
            raise NoSeatError(f"{identity} does not occupy a seat in this room.")
        return color

    def _assert_playing(self) -> None:
        if self.status == Status.FINISHED:
            raise GameOverError("Game has already finished.")
        if self.status == Status.WAITING:
            raise GameNotStartedError("Waiting for a second player.")
