"""Orchestration of communication from the transport layer to business logic and persistence layers (and the reverse direction)."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, TypeVar
from uuid import UUID

from src.api.models import (
    AddBotRequest,
    CreateSessionRequest,
    DeleteSessionRequest,
    ForfeitRequest,
    GetSessionRequest,
    JoinResponse,
    JoinSessionRequest,
    LeaveRequest,
    LeaveResponse,
    LegalMoveHint,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRecordState,
    MoveRequest,
    PieceState,
    RematchRequest,
    ResignRequest,
    ServiceResponse,
    SessionState,
    StateResponse,
)
from src.checkers.moves import Move
from src.checkers.room import Room
from src.core.config import Settings
from src.core.exceptions import GameError, RepositoryError
from src.core.models import SessionModel
from src.core.shared_types import Role
from src.db.repository import SessionRepository
from src.services.locks import SessionLocks

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R", bound=ServiceResponse)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SessionService:
    """
    Orchestration of layers for a draughts room.

    Every public method returns a response object. Failures never escape as exceptions:
    they come back as `accepted=False` with a RejectionReason, and nothing gets stored.
    """

    def __init__(
        self,
        repository: SessionRepository,
        settings: Optional[Settings] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.repo = repository
        self.settings = settings or Settings()
        self.locks = SessionLocks()
        self._clock = clock

    # -- Session operations ---
    def create_session(self, request: CreateSessionRequest) -> StateResponse:
        """First player requested to create a new room."""
        try:
            room = Room.create(request.identity, request.starting_position)
        except GameError as exc:
            return self._reject(StateResponse, exc)

        _, session_id = self.repo.create_session(room.to_model())
        logger.info("Session %s created by %s", session_id, request.identity)
        return StateResponse(state=self._session_state(session_id, room))

    def join_session(self, request: JoinSessionRequest) -> JoinResponse:
        """Take a free seat, get your own seat back, or watch."""
        try:
            room, role = self._mutate(
                request.session_id,
                lambda room: room.join(request.identity, self.settings.allow_spectators),
            )
        except GameError as exc:
            return self._reject(JoinResponse, exc)

        logger.info("%s joined session %s as %s", request.identity, request.session_id, role)
        return JoinResponse(role=role, state=self._session_state(request.session_id, room))

    def add_bot(self, request: AddBotRequest) -> JoinResponse:
        """Seat a bot in the free seat. Playing its moves is up to src/services/bot.py."""
        try:
            room, color = self._mutate(
                request.session_id, lambda room: room.add_bot(request.bot_identity)
            )
        except GameError as exc:
            return self._reject(JoinResponse, exc)

        logger.info("Bot %s seated as %s in session %s", request.bot_identity, color, request.session_id)
        return JoinResponse(
            role=Role(color.value), state=self._session_state(request.session_id, room)
        )

    def submit_move(self, request: MoveRequest) -> StateResponse:
        """Attempt a single step (a full simple move, or one jump of a capture chain)."""
        move = Move.from_pairs(request.from_square, request.to_square)
        try:
            room, record = self._mutate(
                request.session_id, lambda room: room.make_move(request.identity, move)
            )
        except GameError as exc:
            return self._reject(StateResponse, exc)

        logger.debug(
            "Session %s: %s moved %s -> %s (capture: %s)",
            request.session_id,
            request.identity,
            record.from_square,
            record.to_square,
            record.was_capture,
        )
        return StateResponse(state=self._session_state(request.session_id, room))

    def resign(self, request: ResignRequest) -> StateResponse:
        try:
            room, winner = self._mutate(
                request.session_id, lambda room: room.resign(request.identity)
            )
        except GameError as exc:
            return self._reject(StateResponse, exc)

        logger.info("%s resigned in session %s, %s wins", request.identity, request.session_id, winner)
        return StateResponse(state=self._session_state(request.session_id, room))

    def leave(self, request: LeaveRequest) -> LeaveResponse:
        """
        Player/spectator leaves the room.
        ----

        With the grace policy, a player leaving a running game keeps the seat: the response carries the
        deadline after which the caller's timer should send a ForfeitRequest.
        """
        now = self._clock()
        try:
            room, _ = self._mutate(
                request.session_id,
                lambda room: room.leave(request.identity, self.settings.leave_policy, now),
            )
        except GameError as exc:
            return self._reject(LeaveResponse, exc)

        if room.is_abandoned:
            logger.info("Session %s closed, nobody left", request.session_id)
            return LeaveResponse(session_closed=True)

        deadline = None
        if request.identity in room.away:
            deadline = room.away[request.identity] + timedelta(
                seconds=self.settings.grace_period_s
            )
        return LeaveResponse(
            forfeit_deadline=deadline,
            state=self._session_state(request.session_id, room),
        )

    def forfeit(self, request: ForfeitRequest) -> StateResponse:
        """The grace period of a player that left has expired."""
        try:
            room, winner = self._mutate(
                request.session_id, lambda room: room.forfeit(request.identity)
            )
        except GameError as exc:
            return self._reject(StateResponse, exc)

        logger.info("%s forfeited session %s, %s wins", request.identity, request.session_id, winner)
        if room.is_abandoned:
            return StateResponse()
        return StateResponse(state=self._session_state(request.session_id, room))

    def rematch(self, request: RematchRequest) -> StateResponse:
        try:
            room, _ = self._mutate(
                request.session_id,
                lambda room: room.rematch(
                    request.identity, swap_colors=self.settings.rematch_swaps_colors
                ),
            )
        except GameError as exc:
            return self._reject(StateResponse, exc)

        logger.info("Rematch started in session %s", request.session_id)
        return StateResponse(state=self._session_state(request.session_id, room))

    def get_session_state(self, request: GetSessionRequest) -> StateResponse:
        """
        Retrieve current session state.
        ----
        Used by the transport layer to (re)send the full state to a participant.
        """
        try:
            room = Room.from_model(self._fetch_session(request.session_id))
        except GameError as exc:
            return self._reject(StateResponse, exc)
        return StateResponse(state=self._session_state(request.session_id, room))

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """Legal-moves hint for UI highlighting. Empty when it is not the caller's turn."""
        try:
            room = Room.from_model(self._fetch_session(request.session_id))
            legal_moves = room.legal_moves(request.identity)
        except GameError as exc:
            return self._reject(
                LegalMovesResponse,
                exc,
                session_id=request.session_id,
                identity=request.identity,
            )

        return LegalMovesResponse(
            session_id=request.session_id,
            identity=request.identity,
            color=room.seat_of(request.identity),
            moves=[
                LegalMoveHint(
                    from_square=origin.to_pair(),
                    to_squares=[target.to_pair() for target in sorted(targets)],
                )
                for origin, targets in sorted(legal_moves.destinations.items())
                if targets
            ],
            must_capture=legal_moves.must_capture,
            mid_chain=legal_moves.mid_chain,
        )

    def delete_session(self, request: DeleteSessionRequest) -> ServiceResponse:
        """Handle a request to delete a session record."""
        with self.locks.hold(request.session_id):
            deleted = self.repo.delete_session(request.session_id)
        self.locks.discard(request.session_id)
        if deleted is None:
            return self._reject(
                ServiceResponse,
                RepositoryError(f"Session with {request.session_id=} not found."),
            )
        return ServiceResponse()

    # -- Internal helpers --
    def _mutate(self, session_id: UUID, action: Callable[[Room], T]) -> tuple[Room, T]:
        """
        Load -> act -> store, with the session's lock held the whole time.

        If the action raises, nothing is stored: the next request starts again from the stored record.
        """
        with self.locks.hold(session_id):
            room = Room.from_model(self._fetch_session(session_id))
            result = action(room)
            if room.is_abandoned:
                self.repo.delete_session(session_id)
            else:
                self.repo.update_session(session_id, room.to_model())

        if room.is_abandoned:
            self.locks.discard(session_id)
        return room, result

    def _fetch_session(self, session_id: UUID) -> SessionModel:
        """Attempt to find the session in the repository and raise error if it fails."""
        session_model = self.repo.get_session(session_id)
        if session_model is None:
            raise RepositoryError(f"Session with {session_id=} not found.")
        return session_model

    def _reject(self, response_cls: type[R], exc: GameError, **fields) -> R:
        logger.debug("Request rejected (%s): %s", exc.reason, exc)
        return response_cls(accepted=False, reason=exc.reason, detail=str(exc), **fields)

    def _session_state(self, session_id: UUID, room: Room) -> SessionState:
        """Convert a Room into the snapshot sent to the transport layer."""
        game = room.game
        last_move = game.last_move
        return SessionState(
            session_id=session_id,
            seats=dict(room.seats),
            spectators=list(room.spectators),
            board=[
                [
                    PieceState(color=piece.color, rank=piece.rank) if piece else None
                    for piece in row
                ]
                for row in game.board.to_grid()
            ],
            turn=game.turn,
            status=room.status,
            winner=game.winner,
            reason=game.finish_reason,
            last_move=(
                MoveRecordState(
                    by=last_move.by,
                    from_square=last_move.from_square.to_pair(),
                    to_square=last_move.to_square.to_pair(),
                    captured=last_move.captured.to_pair() if last_move.captured else None,
                    was_capture=last_move.was_capture,
                    promoted=last_move.promoted,
                )
                if last_move
                else None
            ),
            pending_square=game.pending.current.to_pair() if game.pending else None,
        )
