"""
The Match is the value the engine works on: everything needed to play the next turn.

It is immutable. The engine never changes a Match in place, it returns a new one (dataclasses.replace),
so a rejected request cannot leave a half-applied state behind and before/after snapshots compare with ==.
Conversion from/to the transport-safe MatchModel mirrors what the Service layer stores in the repository.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, Optional, Self

from src.core.exceptions import GameStateError, ParticipantNotFoundError
from src.core.models import MatchModel, ParticipantModel, PlacedTileModel
from src.core.shared_types import Orientation, Phase
from src.dominoes.board import Board, BoardEnds, PlacedTile
from src.dominoes.tiles import Tile


def compute_score(hand: Iterable[Tile]) -> int:
    """Pips left in a hand. Lowest score wins a blocked match."""
    return sum(tile.pips for tile in hand)


@dataclass(frozen=True)
class Participant:
    id: str
    name: str
    hand: tuple[Tile, ...] = ()
    score: int = 0
    is_automated: bool = False
    is_ready: bool = False

    def holds(self, tile_id: str) -> bool:
        return any(tile.id == tile_id for tile in self.hand)

    def without_tile(self, tile_id: str) -> Participant:
        return replace(self, hand=tuple(tile for tile in self.hand if tile.id != tile_id))

    def with_tile(self, tile: Tile) -> Participant:
        return replace(self, hand=self.hand + (tile,))


@dataclass(frozen=True)
class Match:
    # --- DOMAIN LAYER VALUE PASSED AROUND BY THE SERVICE ---

    participants: tuple[Participant, ...] = ()
    current_index: int = 0
    board: Board = Board()
    boneyard: tuple[Tile, ...] = ()
    consecutive_passes: int = 0
    phase: Phase = Phase.FORMING
    winner_id: Optional[str] = None
    rematch_requests: tuple[str, ...] = ()

    @classmethod
    def from_model(cls, model: MatchModel) -> Self:
        """Define how to construct a Match from the information the Service layer actually has"""

        # Validation
        if model.phase not in [phase.value for phase in Phase]:
            raise GameStateError(
                f"Invalid phase: {model.phase!r}. \nPick one from {','.join(phase.value for phase in Phase)}"
            )

        participants = tuple(
            Participant(
                id=p.id,
                name=p.name,
                hand=tuple(Tile.from_id(tile_id) for tile_id in p.hand),
                score=p.score,
                is_automated=p.is_automated,
                is_ready=p.is_ready,
            )
            for p in model.participants
        )
        board = Board(
            tuple(
                PlacedTile(
                    tile=Tile.from_id(placed.tile_id),
                    left=placed.left,
                    right=placed.right,
                    orientation=Orientation(placed.orientation),
                )
                for placed in model.board
            )
        )
        if not board.is_consistent():
            raise GameStateError("Stored board breaks the matching rule between neighbouring tiles.")

        return cls(
            participants=participants,
            current_index=model.current_index,
            board=board,
            boneyard=tuple(Tile.from_id(tile_id) for tile_id in model.boneyard),
            consecutive_passes=model.consecutive_passes,
            phase=Phase(model.phase),
            winner_id=model.winner,
            rematch_requests=tuple(model.rematch_requests),
        )

    def to_model(self) -> MatchModel:
        """Encode back into a format the Service layer uses"""

        return MatchModel(
            participants=[
                ParticipantModel(
                    id=p.id,
                    name=p.name,
                    hand=[tile.id for tile in p.hand],
                    score=p.score,
                    is_automated=p.is_automated,
                    is_ready=p.is_ready,
                )
                for p in self.participants
            ],
            current_index=self.current_index,
            board=[
                PlacedTileModel(
                    tile_id=placed.tile.id,
                    left=placed.left,
                    right=placed.right,
                    orientation=placed.orientation.value,
                )
                for placed in self.board.tiles
            ],
            boneyard=[tile.id for tile in self.boneyard],
            consecutive_passes=self.consecutive_passes,
            phase=self.phase.value,
            winner=self.winner_id,
            rematch_requests=list(self.rematch_requests),
        )

    @property
    def board_ends(self) -> BoardEnds:
        return self.board.ends()

    @property
    def is_over(self) -> bool:
        return self.phase == Phase.CONCLUDED

    @property
    def participant_count(self) -> int:
        return len(self.participants)

    @property
    def current_participant(self) -> Participant:
        """Out of range index means the state is corrupt, not that the request was bad."""
        if not 0 <= self.current_index < self.participant_count:
            raise GameStateError(
                f"current_index {self.current_index} out of range for {self.participant_count} participants."
            )
        return self.participants[self.current_index]

    def index_of(self, participant_id: str) -> int:
        for index, participant in enumerate(self.participants):
            if participant.id == participant_id:
                return index
        raise ParticipantNotFoundError(f"No participant with id {participant_id!r} in this match.")

    def participant(self, participant_id: str) -> Participant:
        return self.participants[self.index_of(participant_id)]

    def humans(self) -> list[Participant]:
        return [p for p in self.participants if not p.is_automated]

    def with_participant(self, index: int, participant: Participant) -> Match:
        participants = list(self.participants)
        participants[index] = participant
        return replace(self, participants=tuple(participants))

    def next_index(self) -> int:
        return (self.current_index + 1) % self.participant_count

    def concluded(self, winner_id: Optional[str]) -> Match:
        """
        End the match with the given winner.
        ---
        Final scores (pips left in every hand) are only meaningful from here on.
        Also used directly by the Service when a departure leaves a single human in the match.
        """
        return replace(
            self,
            participants=tuple(
                replace(p, score=compute_score(p.hand)) for p in self.participants
            ),
            phase=Phase.CONCLUDED,
            winner_id=winner_id,
        )
