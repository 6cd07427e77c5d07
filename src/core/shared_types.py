"""
Type definitions used across layers
"""

from enum import StrEnum


class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"


class Rank(StrEnum):
    MAN = "man"
    KING = "king"


class Status(StrEnum):
    WAITING = "waiting"
    PLAYING = "playing"
    FINISHED = "finished"


class FinishReason(StrEnum):
    NO_MOVES = "no_moves"
    RESIGN = "resign"
    FORFEIT = "forfeit"


class Role(StrEnum):
    """What a joining identity ended up as."""

    WHITE = "white"
    BLACK = "black"
    SPECTATOR = "spectator"


class RejectionReason(StrEnum):
    NOT_FOUND = "NOT_FOUND"
    NOT_YOUR_TURN = "NOT_YOUR_TURN"
    NO_SEAT = "NO_SEAT"
    OUT_OF_BOUNDS = "OUT_OF_BOUNDS"
    ILLEGAL_MOVE = "ILLEGAL_MOVE"
    MUST_CONTINUE_CHAIN = "MUST_CONTINUE_CHAIN"
    GAME_OVER = "GAME_OVER"
    ROOM_FULL = "ROOM_FULL"
    GAME_NOT_STARTED = "GAME_NOT_STARTED"
    NOT_FINISHED = "NOT_FINISHED"
    PLAYER_PRESENT = "PLAYER_PRESENT"
    INVALID_POSITION = "INVALID_POSITION"


class LeavePolicy(StrEnum):
    IMMEDIATE = "immediate"  # leaving a running game forfeits it on the spot
    GRACE = "grace"  # seat is kept, forfeit only comes through a later forfeit call
