"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Callable, Generator

import pytest
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.checkers.board import Board
from src.checkers.pieces import Piece
from src.checkers.square import Square
from src.db.memory_repository import InMemorySessionRepository
from src.db.schema import Base

# Setup an in-memory SQLite database for testing
DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)

PiecesLayout = dict[tuple[int, int], str]


@pytest.fixture
def db_session_repo() -> Generator[Session, None, None]:
    """Connection to a test database. Tables are removed at teardown to make unit tests of repository independent of each other."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        Base.metadata.drop_all(bind=engine)
        db.close()


@pytest.fixture
def memory_repo() -> InMemorySessionRepository:
    return InMemorySessionRepository()


@pytest.fixture
def make_board() -> Callable[[PiecesLayout], Board]:
    """Build a board from {(row, col): piece character}. Everything else is empty."""

    def _create_board(layout: PiecesLayout) -> Board:
        board = Board.empty()
        for (row, col), character in layout.items():
            board.place_piece(Piece.from_char(character), Square(row, col))
        return board

    return _create_board
