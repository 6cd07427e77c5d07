"""Unit tests for /src/checkers/room.py"""

from datetime import datetime, timezone

import pytest

from src.checkers.moves import Move
from src.checkers.notation import STARTING_POSITION
from src.checkers.room import Room
from src.checkers.square import Square
from src.core.exceptions import (
    GameNotFinishedError,
    GameNotStartedError,
    GameOverError,
    NoSeatError,
    PlayerPresentError,
    RoomFullError,
)
from src.core.shared_types import (
    Color,
    FinishReason,
    LeavePolicy,
    RejectionReason,
    Role,
    Status,
)

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
CHAIN_POSITION = "7b/8/3b4/8/1b6/w7/7w/8"


def opening_move() -> Move:
    return Move.from_pairs((5, 0), (4, 1))


@pytest.fixture
def playing_room() -> Room:
    room = Room.create("alice")
    room.join("bob")
    return room


# -- SEATS --
def test_create_room() -> None:
    room = Room.create("alice")
    assert room.seats == {Color.WHITE: "alice"}
    assert room.status == Status.WAITING
    assert room.game.board.to_notation() == STARTING_POSITION


def test_second_player_starts_the_game(playing_room: Room) -> None:
    assert playing_room.seats == {Color.WHITE: "alice", Color.BLACK: "bob"}
    assert playing_room.status == Status.PLAYING


def test_join_roles(playing_room: Room) -> None:
    """Seated players get their seat back, everybody else watches."""
    assert playing_room.join("alice") == Role.WHITE
    assert playing_room.join("bob") == Role.BLACK
    assert playing_room.join("carol") == Role.SPECTATOR
    assert playing_room.join("carol") == Role.SPECTATOR
    assert playing_room.spectators == ["carol"]


def test_room_without_spectators(playing_room: Room) -> None:
    with pytest.raises(RoomFullError) as exc_info:
        playing_room.join("carol", allow_spectators=False)
    assert exc_info.value.reason == RejectionReason.ROOM_FULL


def test_spectator_takes_freed_seat_and_leaves(playing_room: Room) -> None:
    """Once seated, a former spectator is only a player: leaving vacates the seat."""
    assert playing_room.join("carol") == Role.SPECTATOR
    playing_room.resign("bob")
    playing_room.leave("bob", LeavePolicy.IMMEDIATE, NOW)

    assert playing_room.join("carol") == Role.BLACK
    assert playing_room.spectators == []
    assert playing_room.seats == {Color.WHITE: "alice", Color.BLACK: "carol"}

    playing_room.leave("carol", LeavePolicy.IMMEDIATE, NOW)
    assert playing_room.seats == {Color.WHITE: "alice"}
    assert playing_room.spectators == []


def test_add_bot() -> None:
    room = Room.create("alice")
    assert room.add_bot("bot") == Color.BLACK
    assert room.bots == ["bot"]
    assert room.status == Status.PLAYING

    with pytest.raises(RoomFullError):
        room.add_bot("another-bot")


# -- PLAYING --
def test_move_by_seated_player(playing_room: Room) -> None:
    record = playing_room.make_move("alice", opening_move())
    assert record.by == "alice"
    assert playing_room.game.turn == Color.BLACK


def test_move_by_spectator(playing_room: Room) -> None:
    playing_room.join("carol")
    with pytest.raises(NoSeatError) as exc_info:
        playing_room.make_move("carol", opening_move())
    assert exc_info.value.reason == RejectionReason.NO_SEAT


def test_move_before_game_started() -> None:
    room = Room.create("alice")
    with pytest.raises(GameNotStartedError):
        room.make_move("alice", opening_move())


def test_unseated_identity_in_waiting_room() -> None:
    """Seat errors come before game-state errors."""
    room = Room.create("alice")
    assert room.status == Status.WAITING

    with pytest.raises(NoSeatError):
        room.make_move("carol", opening_move())
    with pytest.raises(NoSeatError):
        room.resign("carol")


def test_legal_moves(playing_room: Room) -> None:
    assert playing_room.legal_moves("alice").has_moves()
    assert not playing_room.legal_moves("bob").has_moves()
    with pytest.raises(NoSeatError):
        playing_room.legal_moves("carol")


def test_legal_moves_while_waiting() -> None:
    room = Room.create("alice")
    assert not room.legal_moves("alice").has_moves()


def test_resign(playing_room: Room) -> None:
    assert playing_room.resign("bob") == Color.WHITE
    assert playing_room.status == Status.FINISHED
    assert playing_room.game.finish_reason == FinishReason.RESIGN

    with pytest.raises(GameOverError):
        playing_room.make_move("alice", opening_move())


def test_game_ending_move_finishes_room() -> None:
    room = Room.create("alice", "8/8/1b6/2w5/8/8/8/8")
    room.join("bob")
    room.make_move("alice", Move.from_pairs((3, 2), (1, 0)))
    assert room.status == Status.FINISHED
    assert room.game.winner == Color.WHITE


# -- LEAVING --
def test_leave_immediately_forfeits(playing_room: Room) -> None:
    playing_room.leave("alice", LeavePolicy.IMMEDIATE, NOW)
    assert playing_room.status == Status.FINISHED
    assert playing_room.game.winner == Color.BLACK
    assert playing_room.game.finish_reason == FinishReason.FORFEIT
    assert playing_room.seats == {Color.BLACK: "bob"}


def test_leave_with_grace_keeps_the_seat(playing_room: Room) -> None:
    playing_room.leave("alice", LeavePolicy.GRACE, NOW)
    assert playing_room.status == Status.PLAYING
    assert playing_room.seats[Color.WHITE] == "alice"
    assert playing_room.away == {"alice": NOW}


def test_forfeit_after_grace(playing_room: Room) -> None:
    playing_room.leave("alice", LeavePolicy.GRACE, NOW)
    assert playing_room.forfeit("alice") == Color.BLACK
    assert playing_room.status == Status.FINISHED
    assert playing_room.game.finish_reason == FinishReason.FORFEIT
    assert Color.WHITE not in playing_room.seats
    assert playing_room.away == {}


def test_returning_player_cannot_be_forfeited(playing_room: Room) -> None:
    playing_room.leave("alice", LeavePolicy.GRACE, NOW)
    assert playing_room.join("alice") == Role.WHITE
    assert playing_room.away == {}

    with pytest.raises(PlayerPresentError) as exc_info:
        playing_room.forfeit("alice")
    assert exc_info.value.reason == RejectionReason.PLAYER_PRESENT


def test_leave_while_waiting_abandons_room() -> None:
    room = Room.create("alice")
    room.leave("alice", LeavePolicy.GRACE, NOW)
    assert room.seats == {}
    assert room.is_abandoned


def test_spectator_leaves(playing_room: Room) -> None:
    playing_room.join("carol")
    playing_room.leave("carol", LeavePolicy.IMMEDIATE, NOW)
    assert playing_room.spectators == []
    assert playing_room.status == Status.PLAYING


def test_leave_unknown_identity(playing_room: Room) -> None:
    with pytest.raises(NoSeatError):
        playing_room.leave("mallory", LeavePolicy.IMMEDIATE, NOW)


def test_bot_does_not_keep_room_alive() -> None:
    room = Room.create("alice")
    room.add_bot("bot")
    assert not room.is_abandoned
    room.leave("alice", LeavePolicy.IMMEDIATE, NOW)
    assert room.is_abandoned


# -- REMATCH --
def test_rematch_before_game_finished(playing_room: Room) -> None:
    with pytest.raises(GameNotFinishedError) as exc_info:
        playing_room.rematch("alice")
    assert exc_info.value.reason == RejectionReason.NOT_FINISHED


def test_rematch_swaps_colors(playing_room: Room) -> None:
    playing_room.make_move("alice", opening_move())
    playing_room.resign("bob")
    playing_room.rematch("bob")

    assert playing_room.seats == {Color.WHITE: "bob", Color.BLACK: "alice"}
    assert playing_room.status == Status.PLAYING
    assert playing_room.game.board.to_notation() == STARTING_POSITION
    assert playing_room.game.history == []
    assert not playing_room.game.is_over


def test_rematch_keeps_colors(playing_room: Room) -> None:
    playing_room.resign("bob")
    playing_room.rematch("alice", swap_colors=False)
    assert playing_room.seats == {Color.WHITE: "alice", Color.BLACK: "bob"}


def test_rematch_with_a_seat_missing(playing_room: Room) -> None:
    """The leaver's seat is free again: the room waits for a new opponent."""
    playing_room.leave("alice", LeavePolicy.IMMEDIATE, NOW)
    playing_room.rematch("bob")
    assert playing_room.seats == {Color.WHITE: "bob"}
    assert playing_room.status == Status.WAITING


# -- CONVERSION --
def test_model_round_trip_mid_chain() -> None:
    """A room stored in the middle of a capture chain comes back exactly the same."""
    room = Room.create("alice", CHAIN_POSITION)
    room.join("bob")
    room.join("carol")
    room.make_move("alice", Move.from_pairs((5, 0), (3, 2)))
    room.leave("bob", LeavePolicy.GRACE, NOW)

    assert room.game.pending is not None
    restored = Room.from_model(room.to_model())
    assert restored == room
    assert restored.game.pending.current == Square(3, 2)
    assert restored.away == {"bob": NOW}


def test_model_round_trip_finished(playing_room: Room) -> None:
    playing_room.resign("alice")
    model = playing_room.to_model()
    assert model.winner == "black"
    assert model.reason == "resign"
    assert Room.from_model(model) == playing_room
