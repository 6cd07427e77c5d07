"""Implementation of (Session)Repository using SQLAlchemy"""

import logging
from copy import deepcopy
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.core.models import SessionModel
from src.db.schema import DBSession

logger = logging.getLogger(__name__)


class SQLSessionRepository:
    """
    Data stored using SQL / methods implemented using SQLAlchemy

    NOTE: a SQLAlchemy Session is not thread-safe. Use one repository (and service) per request/thread.
    """

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_session(self, session_id: UUID) -> SessionModel | None:
        """Get session by ID, if record exists."""
        session_db = self._fetch_session(session_id)
        if session_db:
            return self._to_model(session_db)
        return None

    def create_session(self, session: SessionModel) -> tuple[SessionModel, UUID]:
        """Store new session and return the stored data + newly created session ID."""
        new_id = uuid4()
        session_db = DBSession(id=new_id)
        self._copy_into(session_db, session)
        self.db.add(session_db)
        self.db.commit()
        self.db.refresh(session_db)
        logger.debug("Stored new session %s", new_id)
        return self._to_model(session_db), new_id

    def update_session(self, session_id: UUID, session: SessionModel) -> SessionModel | None:
        """Add new info to existing record."""
        session_db = self._fetch_session(session_id)
        if not session_db:
            return None
        self._copy_into(session_db, session)
        self.db.commit()
        self.db.refresh(session_db)
        return self._to_model(session_db)

    def delete_session(self, session_id: UUID) -> SessionModel | None:
        """Remove a session's record."""
        session_db = self._fetch_session(session_id)
        if not session_db:
            return None
        session_model = self._to_model(session_db)
        self.db.delete(session_db)
        self.db.commit()
        return session_model

    def _fetch_session(self, session_id: UUID) -> DBSession | None:
        query = select(DBSession).where(DBSession.id == session_id)
        return self.db.scalar(query)

    def _copy_into(self, session_db: DBSession, session: SessionModel) -> None:
        """
        JSON columns get fresh objects on every write: SQLAlchemy only notices a change
        when the attribute is re-assigned, not when the stored list/dict is mutated in place.
        """
        session_db.board = session.board
        session_db.turn = session.turn
        session_db.seats = dict(session.seats)
        session_db.status = session.status
        session_db.winner = session.winner
        session_db.reason = session.reason
        session_db.pending = deepcopy(session.pending)
        session_db.last_move = deepcopy(session.last_move)
        session_db.history = deepcopy(session.history)
        session_db.spectators = list(session.spectators)
        session_db.away = dict(session.away)
        session_db.bots = list(session.bots)

    def _to_model(self, session_db: DBSession) -> SessionModel:
        """Convert SQLAlchemy model to data transfer model."""
        return SessionModel(
            board=session_db.board,
            turn=session_db.turn,
            seats=dict(session_db.seats),
            status=session_db.status,
            winner=session_db.winner,
            reason=session_db.reason,
            pending=deepcopy(session_db.pending),
            last_move=deepcopy(session_db.last_move),
            history=deepcopy(session_db.history),
            spectators=list(session_db.spectators),
            away=dict(session_db.away),
            bots=list(session_db.bots),
        )
