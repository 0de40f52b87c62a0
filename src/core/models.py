"""
Boundary layer data model(s).

These objects are used to communicate with the Service.
The repository stores them and the domain layer builds a Match from them (and back),
so none of the layers needs to know the data model specific to another layer.
Only primitive values in here: tiles travel as their id string ("2-5").
"""

from dataclasses import dataclass, field
from typing import Optional

TileId = str
ParticipantId = str


@dataclass
class ParticipantModel:
    id: ParticipantId
    name: str
    hand: list[TileId] = field(default_factory=list)
    score: int = 0
    is_automated: bool = False
    is_ready: bool = False


@dataclass
class PlacedTileModel:
    """A tile on the chain: which pip faces left, which faces right."""

    tile_id: TileId
    left: int
    right: int
    orientation: str


@dataclass
class MatchModel:
    """Transport-safe representation of a match used between Service, DB, and domain layers."""

    participants: list[ParticipantModel]
    current_index: int
    board: list[PlacedTileModel]
    boneyard: list[TileId]
    consecutive_passes: int
    phase: str
    winner: Optional[ParticipantId] = None
    rematch_requests: list[ParticipantId] = field(default_factory=list)
