"""One lock per session: moves/seat changes of the same session never interleave, different sessions never wait on each other."""

import threading
from contextlib import contextmanager
from typing import Iterator
from uuid import UUID


class SessionLocks:
    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[UUID, threading.Lock] = {}

    def lock_for(self, session_id: UUID) -> threading.Lock:
        with self._guard:
            return self._locks.setdefault(session_id, threading.Lock())

    @contextmanager
    def hold(self, session_id: UUID) -> Iterator[None]:
        with self.lock_for(session_id):
            yield

    def discard(self, session_id: UUID) -> None:
        """Forget the lock of a deleted session."""
        with self._guard:
            self._locks.pop(session_id, None)
