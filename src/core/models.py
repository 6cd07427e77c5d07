"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Both the domain layer (Room/Game) and the db layer (repositories) send to/receive from the Service
using the model defined here, so neither needs to know how the other stores a session.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

# Type aliases to make SessionModel easier to read
PieceColor = str
PlayerName = str
JSONDict = dict[str, Any]


@dataclass
class SessionModel:
    """Transport-safe representation of a room (board + seats + turn state)."""

    board: str
    turn: PieceColor
    seats: dict[PieceColor, PlayerName]
    status: str
    winner: Optional[PieceColor] = None
    reason: Optional[str] = None
    pending: Optional[JSONDict] = None
    last_move: Optional[JSONDict] = None
    history: list[JSONDict] = field(default_factory=list)
    spectators: list[PlayerName] = field(default_factory=list)
    away: dict[PlayerName, str] = field(default_factory=dict)  # identity -> ISO timestamp of leaving
    bots: list[PlayerName] = field(default_factory=list)
