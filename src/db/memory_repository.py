"""Implementation of (Session)Repository keeping everything in a dictionary"""

from copy import deepcopy
from uuid import UUID, uuid4

from src.core.models import SessionModel


class InMemorySessionRepository:
    """
    Process-local store of sessions.

    Models are copied on the way in and on the way out, so a caller mutating what it got back
    never changes the stored record behind the repository's back (same as a real database).
    """

    def __init__(self) -> None:
        self._sessions: dict[UUID, SessionModel] = {}

    def get_session(self, session_id: UUID) -> SessionModel | None:
        session = self._sessions.get(session_id)
        return deepcopy(session) if session is not None else None

    def create_session(self, session: SessionModel) -> tuple[SessionModel, UUID]:
        session_id = uuid4()
        self._sessions[session_id] = deepcopy(session)
        return deepcopy(session), session_id

    def update_session(self, session_id: UUID, session: SessionModel) -> SessionModel | None:
        if session_id not in self._sessions:
            return None
        self._sessions[session_id] = deepcopy(session)
        return deepcopy(session)

    def delete_session(self, session_id: UUID) -> SessionModel | None:
        return self._sessions.pop(session_id, None)

    def clear(self) -> None:
        """Clear the repository (useful in between tests)"""
        self._sessions.clear()
