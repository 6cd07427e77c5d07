"""
Bot opponent, layered on top of the SessionService by composition.

The bot has no privileged path into a session: it reads the same legal-moves hint a human client gets
and submits its steps through `submit_move`, so it is serialized by the same per-session lock.
"""

import logging
import random
from typing import Any, Optional, TypeVar
from uuid import UUID

from src.api.models import (
    AddBotRequest,
    GetSessionRequest,
    JoinResponse,
    JoinSessionRequest,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRequest,
    RematchRequest,
    SessionState,
    StateResponse,
)
from src.core.shared_types import Status
from src.services.session_service import SessionService

logger = logging.getLogger(__name__)

Step = tuple[tuple[int, int], tuple[int, int]]
R = TypeVar("R", bound=StateResponse)


class RandomBot:
    """Picks a uniformly random legal step."""

    def __init__(self, identity: str = "bot", seed: Optional[int] = None) -> None:
        self.identity = identity
        self._rng = random.Random(seed)

    def choose_step(self, hint: LegalMovesResponse) -> Optional[Step]:
        steps: list[Step] = [
            (option.from_square, target)
            for option in hint.moves
            for target in option.to_squares
        ]
        if not steps:
            return None
        return self._rng.choice(steps)


class BotOpponentService:
    """
    Decorates a SessionService: after every accepted move, join, rematch or bot seating,
    a seated bot whose turn it is answers right away.

    Any operation not overridden here is passed straight through to the wrapped service.
    """

    def __init__(self, service: SessionService, bot: RandomBot) -> None:
        self._service = service
        self.bot = bot

    def __getattr__(self, name: str) -> Any:
        return getattr(self._service, name)

    def add_bot(self, request: AddBotRequest) -> JoinResponse:
        """The seated bot is always this decorator's bot, whatever identity the request names."""
        request = request.model_copy(update={"bot_identity": self.bot.identity})
        return self._answer(request.session_id, self._service.add_bot(request))

    def join_session(self, request: JoinSessionRequest) -> JoinResponse:
        return self._answer(request.session_id, self._service.join_session(request))

    def submit_move(self, request: MoveRequest) -> StateResponse:
        return self._answer(request.session_id, self._service.submit_move(request))

    def rematch(self, request: RematchRequest) -> StateResponse:
        return self._answer(request.session_id, self._service.rematch(request))

    def play_turn(self, session_id: UUID) -> list[StateResponse]:
        """Let the bot make every step of its turn (several when it is in a capture chain)."""
        responses: list[StateResponse] = []
        while self._is_bot_turn(self._refresh(session_id)):
            hint = self._service.legal_moves(
                LegalMovesRequest(session_id=session_id, identity=self.bot.identity)
            )
            step = self.bot.choose_step(hint)
            if step is None:
                break

            from_square, to_square = step
            response = self._service.submit_move(
                MoveRequest(
                    session_id=session_id,
                    identity=self.bot.identity,
                    from_square=from_square,
                    to_square=to_square,
                )
            )
            responses.append(response)
            if not response.accepted:
                logger.warning(
                    "Bot move %s -> %s rejected in session %s: %s",
                    from_square,
                    to_square,
                    session_id,
                    response.reason,
                )
                break
        return responses

    def _answer(self, session_id: UUID, response: R) -> R:
        """After an accepted request, let the bot move if it is its turn now, and report the state after that."""
        if response.accepted:
            self.play_turn(session_id)
            response.state = self._refresh(session_id) or response.state
        return response

    def _is_bot_turn(self, state: Optional[SessionState]) -> bool:
        if state is None or state.status != Status.PLAYING:
            return False
        return state.seats.get(state.turn) == self.bot.identity

    def _refresh(self, session_id: UUID) -> Optional[SessionState]:
        return self._service.get_session_state(GetSessionRequest(session_id=session_id)).state
