"""Unit tests for src/db/sql_repository.py"""

from uuid import uuid4

import pytest
from sqlalchemy.orm import Session

from src.api.models import CreateSessionRequest, JoinSessionRequest, MoveRequest
from src.checkers.notation import STARTING_POSITION
from src.core.models import SessionModel
from src.db.sql_repository import SQLSessionRepository
from src.services.session_service import SessionService


@pytest.fixture
def mid_game_model() -> SessionModel:
    """A session in the middle of a capture chain, with someone away and a spectator."""
    return SessionModel(
        board="7b/8/8/4w3/8/w7/7w/8",
        turn="white",
        seats={"white": "alice", "black": "bob"},
        status="playing",
        pending={
            "color": "white",
            "start": [5, 0],
            "current": [3, 2],
            "steps_taken": 1,
            "remaining_sequences": [[[3, 2], [1, 4]]],
        },
        last_move={"by": "alice", "from": [5, 0], "to": [3, 2], "captured": [4, 1], "promoted": False},
        history=[{"by": "alice", "from": [5, 0], "to": [3, 2], "captured": [4, 1], "promoted": False}],
        spectators=["carol"],
        away={"bob": "2026-03-01T12:00:00+00:00"},
    )


def test_create_session(db_session_repo: Session, mid_game_model: SessionModel) -> None:
    """Conversion from a SessionModel to DBSession for a new entry to the database."""
    repo = SQLSessionRepository(db_session_repo)
    record_in_db, session_id = repo.create_session(mid_game_model)
    assert isinstance(record_in_db, SessionModel)
    assert record_in_db == mid_game_model
    assert session_id is not None


def test_get_session_by_id(db_session_repo: Session, mid_game_model: SessionModel) -> None:
    repo = SQLSessionRepository(db_session_repo)
    expected, session_id = repo.create_session(mid_game_model)
    assert repo.get_session(session_id) == expected


def test_get_unknown_session(db_session_repo: Session, mid_game_model: SessionModel) -> None:
    """NOTE with an empty database, any id is a valid test case."""
    repo = SQLSessionRepository(db_session_repo)
    assert repo.get_session(uuid4()) is None

    repo.create_session(mid_game_model)
    assert repo.get_session(uuid4()) is None


def test_update_session(db_session_repo: Session, mid_game_model: SessionModel) -> None:
    """JSON columns (pending/history/spectators) must pick up the new values."""
    repo = SQLSessionRepository(db_session_repo)
    _, session_id = repo.create_session(mid_game_model)

    mid_game_model.history.append(
        {"by": "alice", "from": [3, 2], "to": [1, 4], "captured": [2, 3], "promoted": False}
    )
    mid_game_model.pending = None
    mid_game_model.turn = "black"
    mid_game_model.spectators.append("dave")
    mid_game_model.away.clear()

    updated = repo.update_session(session_id, mid_game_model)
    assert updated == mid_game_model

    db_session_repo.expire_all()
    stored = repo.get_session(session_id)
    assert stored == mid_game_model
    assert len(stored.history) == 2
    assert stored.pending is None
    assert stored.spectators == ["carol", "dave"]
    assert stored.away == {}


def test_update_unknown_session(db_session_repo: Session, mid_game_model: SessionModel) -> None:
    repo = SQLSessionRepository(db_session_repo)
    assert repo.update_session(uuid4(), mid_game_model) is None


def test_delete_session(db_session_repo: Session, mid_game_model: SessionModel) -> None:
    repo = SQLSessionRepository(db_session_repo)
    _, session_id = repo.create_session(mid_game_model)

    deleted = repo.delete_session(session_id)
    assert deleted == mid_game_model
    assert repo.get_session(session_id) is None
    assert repo.delete_session(session_id) is None


def test_service_on_sql_repository(db_session_repo: Session) -> None:
    """Full round trip: create, join and move with the SQL store behind the service."""
    service = SessionService(SQLSessionRepository(db_session_repo))
    created = service.create_session(CreateSessionRequest(identity="alice"))
    session_id = created.state.session_id
    service.join_session(JoinSessionRequest(session_id=session_id, identity="bob"))

    response = service.submit_move(
        MoveRequest(session_id=session_id, identity="alice", from_square=(5, 0), to_square=(4, 1))
    )
    assert response.accepted

    stored = SQLSessionRepository(db_session_repo).get_session(session_id)
    assert stored.board != STARTING_POSITION
    assert stored.turn == "black"
    assert stored.status == "playing"
    assert stored.seats == {"white": "alice", "black": "bob"}
    assert stored.history[0]["to"] == [4, 1]
