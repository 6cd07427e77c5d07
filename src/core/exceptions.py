"""
Custom exceptions raised by the domain, persistence and API layers.

Every GameError carries the RejectionReason the service hands back to its caller,
so the service can turn any of them into a rejection value without a lookup table.
"""

from src.core.shared_types import RejectionReason


class GameError(Exception):
    """Top-level exception for anything that makes a request fail."""

    reason: RejectionReason = RejectionReason.ILLEGAL_MOVE


# --- PERSISTENCE ---
class RepositoryError(GameError):
    reason = RejectionReason.NOT_FOUND


# --- REQUESTS ---
class InvalidRequestError(GameError):
    """Request could not even be interpreted."""


class InvalidNotationError(GameError):
    reason = RejectionReason.INVALID_POSITION


# --- GAME / ROOM STATE ---
class GameStateError(GameError):
    reason = RejectionReason.GAME_OVER


class GameOverError(GameStateError):
    reason = RejectionReason.GAME_OVER


class GameNotStartedError(GameStateError):
    reason = RejectionReason.GAME_NOT_STARTED


class GameNotFinishedError(GameStateError):
    reason = RejectionReason.NOT_FINISHED


class RoomFullError(GameStateError):
    reason = RejectionReason.ROOM_FULL


class PlayerPresentError(GameStateError):
    reason = RejectionReason.PLAYER_PRESENT


class NoSeatError(GameError):
    reason = RejectionReason.NO_SEAT


class NotYourTurnError(GameError):
    reason = RejectionReason.NOT_YOUR_TURN


# --- MOVES ---
class IllegalMoveError(GameError):
    reason = RejectionReason.ILLEGAL_MOVE


class OutOfBoundsError(IllegalMoveError):
    reason = RejectionReason.OUT_OF_BOUNDS


class MustContinueChainError(IllegalMoveError):
    reason = RejectionReason.MUST_CONTINUE_CHAIN


# --- CONFIGURATION ---
class ConfigError(Exception):
    """Settings file holds something we cannot use. Not a request failure."""
