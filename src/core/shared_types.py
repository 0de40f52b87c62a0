"""
Type definitions used across layers
"""

from enum import StrEnum


class Phase(StrEnum):
    FORMING = "forming"
    ACTIVE = "active"
    CONCLUDED = "concluded"


class Side(StrEnum):
    LEFT = "left"
    RIGHT = "right"


class Orientation(StrEnum):
    """Rendering hint only: doubles are laid across the chain."""

    STRAIGHT = "straight"
    TURNED = "turned"


class MoveKind(StrEnum):
    PLACE = "place"
    PASS = "pass"
    DRAW = "draw"


class Difficulty(StrEnum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class ErrorKind(StrEnum):
    """Names clients use to pick the message to render for a rejected request."""

    NOT_YOUR_TURN = "NotYourTurn"
    TILE_NOT_IN_HAND = "TileNotInHand"
    TILE_DOES_NOT_MATCH = "TileDoesNotMatch"
    INVALID_SIDE = "InvalidSide"
    NO_TILES_TO_DRAW = "NoTilesToDraw"
    DRAW_NOT_ALLOWED = "DrawNotAllowed"
    INVALID_PARTICIPANT_COUNT = "InvalidParticipantCount"
    GAME_NOT_ACTIVE = "GameNotActive"
    SESSION_NOT_FOUND = "SessionNotFound"
    SESSION_FULL = "SessionFull"
    SESSION_CLOSED = "SessionClosed"
    PARTICIPANT_NOT_FOUND = "ParticipantNotFound"
    REMATCH_NOT_ALLOWED = "RematchNotAllowed"
