"""Requests and Response models"""

import re
from typing import Annotated, Literal, Optional, Union
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from src.core.config import default_difficulty
from src.core.exceptions import EngineError, GameError, InvalidRequestError
from src.core.shared_types import Difficulty, ErrorKind, Phase
from src.dominoes.moves import DrawMove, Move, PassMove, PlaceMove

ParticipantId = str
TILE_ID_PATTERN = re.compile(r"^\d+-\d+$")


def _validate_player_name(value: str) -> str:
    name = value.strip()
    if not name:
        raise InvalidRequestError("Player name cannot be empty.")
    return name


# --- REQUEST MODELS ---
class CreateSessionRequest(BaseModel):
    """With a player name the creator joins the new session right away."""

    player_name: Optional[str] = None

    @field_validator("player_name")
    @classmethod
    def validate_player_name(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        return _validate_player_name(value)


class JoinSessionRequest(BaseModel):
    session_id: UUID
    player_name: str

    @field_validator("player_name")
    @classmethod
    def validate_player_name(cls, value: str) -> str:
        return _validate_player_name(value)


class ReadyRequest(BaseModel):
    participant_id: ParticipantId


class PlacePayload(BaseModel):
    kind: Literal["place"] = "place"
    tile_id: str
    # Not an enum on purpose: which sides exist depends on the board, the engine decides.
    side: str = "left"

    @field_validator("tile_id")
    @classmethod
    def validate_tile_id(cls, value: str) -> str:
        if not TILE_ID_PATTERN.match(value):
            raise InvalidRequestError(f"Cannot interpret tile_id: {value!r} as a tile ('low-high').")
        return value


class PassPayload(BaseModel):
    kind: Literal["pass"] = "pass"


class DrawPayload(BaseModel):
    kind: Literal["draw"] = "draw"


MovePayload = Annotated[
    Union[PlacePayload, PassPayload, DrawPayload], Field(discriminator="kind")
]


class MoveRequest(BaseModel):
    participant_id: ParticipantId
    move: MovePayload

    def to_move(self) -> Move:
        """Tagged payload -> engine move."""
        if isinstance(self.move, PlacePayload):
            return PlaceMove(self.participant_id, tile_id=self.move.tile_id, side=self.move.side)
        if isinstance(self.move, PassPayload):
            return PassMove(self.participant_id)
        return DrawMove(self.participant_id)


class DrawRequest(BaseModel):
    participant_id: ParticipantId


class LeaveRequest(BaseModel):
    participant_id: ParticipantId


class RematchRequest(BaseModel):
    participant_id: ParticipantId


class LegalMovesRequest(BaseModel):
    participant_id: ParticipantId


class GetSessionRequest(BaseModel):
    session_id: UUID


class LocalMatchRequest(BaseModel):
    """One human against the computer, played in-process."""

    player_name: str
    difficulty: Difficulty = Field(default_factory=default_difficulty)
    seed: Optional[int] = None

    @field_validator("player_name")
    @classmethod
    def validate_player_name(cls, value: str) -> str:
        return _validate_player_name(value)


# --- RESPONSE MODELS ---
class TileResponse(BaseModel):
    id: str
    left: int
    right: int
    is_double: bool


class PlacedTileResponse(BaseModel):
    tile_id: str
    left: int
    right: int
    is_double: bool
    orientation: str
    is_flipped: bool


class BoardEndResponse(BaseModel):
    side: str
    value: int


class ParticipantResponse(BaseModel):
    id: ParticipantId
    name: str
    hand: list[TileResponse]
    tile_count: int
    score: int
    is_automated: bool
    is_ready: bool


class MatchResponse(BaseModel):
    session_id: UUID
    phase: Phase
    participants: list[ParticipantResponse]
    current_index: int
    current_participant_id: Optional[ParticipantId]
    board: list[PlacedTileResponse]
    board_ends: list[BoardEndResponse]
    boneyard_count: int
    consecutive_passes: int
    winner: Optional[ParticipantId]
    is_over: bool
    rematch_requests: list[ParticipantId]


class CreateSessionResponse(BaseModel):
    session_id: UUID
    participant_id: Optional[ParticipantId]
    match: MatchResponse


class JoinSessionResponse(BaseModel):
    participant_id: ParticipantId
    match: MatchResponse


class LegalMoveResponse(BaseModel):
    tile_id: str
    side: str


class LegalMovesResponse(BaseModel):
    session_id: UUID
    participant_id: ParticipantId
    moves: list[LegalMoveResponse]
    # each playable tile once, whatever the number of sides it fits
    playable_tile_ids: list[str]
    can_draw: bool


class ErrorResponse(BaseModel):
    """What the submitting participant (and only them) gets back for a rejected request."""

    kind: Optional[ErrorKind]
    message: str

    @classmethod
    def from_error(cls, error: GameError) -> "ErrorResponse":
        kind = getattr(error, "kind", None)
        message = error.message if isinstance(error, EngineError) else str(error)
        return cls(kind=kind, message=message)
