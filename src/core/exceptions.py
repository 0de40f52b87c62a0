"""
Custom exceptions shared by all layers.

Everything derives from GameError, so the service / API layers can catch one type.
EngineError subclasses are recoverable rejections of a single request: the match state is left untouched.
"""

from src.core.shared_types import ErrorKind


class GameError(Exception):
    """Root of all exceptions raised on purpose by this package."""


# --- ENGINE REJECTIONS ---
class EngineError(GameError):
    kind: ErrorKind

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class GameNotActiveError(EngineError):
    kind = ErrorKind.GAME_NOT_ACTIVE


class NotYourTurnError(EngineError):
    kind = ErrorKind.NOT_YOUR_TURN


class TileNotInHandError(EngineError):
    kind = ErrorKind.TILE_NOT_IN_HAND


class TileDoesNotMatchError(EngineError):
    kind = ErrorKind.TILE_DOES_NOT_MATCH


class InvalidSideError(EngineError):
    kind = ErrorKind.INVALID_SIDE


class NoTilesToDrawError(EngineError):
    kind = ErrorKind.NO_TILES_TO_DRAW


class DrawNotAllowedError(EngineError):
    """Drawing is a fallback: refused while a legal placement exists."""

    kind = ErrorKind.DRAW_NOT_ALLOWED


class InvalidParticipantCountError(EngineError):
    kind = ErrorKind.INVALID_PARTICIPANT_COUNT


# --- COORDINATOR LEVEL ---
class RepositoryError(GameError):
    pass


class SessionNotFoundError(RepositoryError):
    kind = ErrorKind.SESSION_NOT_FOUND


class SessionError(GameError):
    kind: ErrorKind


class SessionFullError(SessionError):
    kind = ErrorKind.SESSION_FULL


class SessionClosedError(SessionError):
    """Joining or readying up after the match has left the forming phase."""

    kind = ErrorKind.SESSION_CLOSED


class ParticipantNotFoundError(SessionError):
    kind = ErrorKind.PARTICIPANT_NOT_FOUND


class RematchNotAllowedError(SessionError):
    """A rematch can only be requested once the match is over."""

    kind = ErrorKind.REMATCH_NOT_ALLOWED


class InvalidRequestError(GameError):
    """Raised by request model validators."""


class GameStateError(GameError):
    """Corrupted or inconsistent match state. Programming error, not a rejection."""
