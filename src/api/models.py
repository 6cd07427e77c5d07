"""Requests and Response models"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import (
    Color,
    FinishReason,
    Rank,
    RejectionReason,
    Role,
    Status,
)

PlayerName = str
Coordinates = tuple[int, int]


# --- REQUEST MODELS ---
class PlayerRequest(BaseModel):
    """Anything a seated player / visitor asks about one session."""

    session_id: UUID
    identity: PlayerName

    @field_validator("identity")
    @classmethod
    def validate_identity(cls, value: str) -> str:
        if not value.strip():
            raise InvalidRequestError("Player identity cannot be empty.")
        return value


class CreateSessionRequest(BaseModel):
    identity: PlayerName
    starting_position: Optional[str] = None

    @field_validator("identity")
    @classmethod
    def validate_identity(cls, value: str) -> str:
        if not value.strip():
            raise InvalidRequestError("Player identity cannot be empty.")
        return value

    @field_validator("starting_position")
    @classmethod
    def validate_starting_position(cls, value: Optional[str]) -> Optional[str]:
        """Only the structure is checked here. Which pieces stand where is up to the domain layer."""
        if value is None:
            return value

        rows = value.strip().split("/")
        if len(rows) != 8:
            raise InvalidRequestError(
                "Board position must contain 8 slash-separated rows."
            )
        return value.strip()


class JoinSessionRequest(PlayerRequest):
    pass


class LegalMovesRequest(PlayerRequest):
    pass


class ResignRequest(PlayerRequest):
    pass


class LeaveRequest(PlayerRequest):
    pass


class ForfeitRequest(PlayerRequest):
    """Sent by whatever runs the grace-period timer once it expires."""


class RematchRequest(PlayerRequest):
    pass


class AddBotRequest(BaseModel):
    session_id: UUID
    bot_identity: PlayerName = "bot"


class MoveRequest(PlayerRequest):
    """
    A single step. For a capture chain, every jump is sent as its own MoveRequest.

    NOTE: bounds are NOT checked here: an out of bounds square is a rejection (OUT_OF_BOUNDS) the service
    reports, not a malformed request.
    """

    from_square: Coordinates
    to_square: Coordinates


class GetSessionRequest(BaseModel):
    session_id: UUID


class DeleteSessionRequest(BaseModel):
    session_id: UUID


# --- RESPONSE MODELS ---
class PieceState(BaseModel):
    color: Color
    rank: Rank


class MoveRecordState(BaseModel):
    by: PlayerName
    from_square: Coordinates
    to_square: Coordinates
    captured: Optional[Coordinates] = None
    was_capture: bool
    promoted: bool


class SessionState(BaseModel):
    """Snapshot of a session, as sent to every participant after a change."""

    session_id: UUID
    seats: dict[Color, PlayerName]
    spectators: list[PlayerName]
    board: list[list[Optional[PieceState]]]
    turn: Color
    status: Status
    winner: Optional[Color] = None
    reason: Optional[FinishReason] = None
    last_move: Optional[MoveRecordState] = None
    pending_square: Optional[Coordinates] = None


class ServiceResponse(BaseModel):
    """Rejections are returned as values: accepted=False + a reason code."""

    accepted: bool = True
    reason: Optional[RejectionReason] = None
    detail: Optional[str] = None


class StateResponse(ServiceResponse):
    state: Optional[SessionState] = None


class JoinResponse(StateResponse):
    role: Optional[Role] = None


class LeaveResponse(StateResponse):
    forfeit_deadline: Optional[datetime] = None
    session_closed: bool = False


class LegalMoveHint(BaseModel):
    from_square: Coordinates
    to_squares: list[Coordinates]


class LegalMovesResponse(ServiceResponse):
    session_id: UUID
    identity: PlayerName
    color: Optional[Color] = None
    moves: list[LegalMoveHint] = []
    must_capture: bool = False
    mid_chain: bool = False
