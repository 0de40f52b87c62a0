"""
Move definitions and the matching rule

Key idea: a submitted move is a tagged union (place / pass / draw), and legal placements are
enumerated from a hand and the open board ends only. Nothing in here looks at whose turn it is:
that is checked later by the engine.
"""

from dataclasses import dataclass
from typing import Iterable, Union

from src.core.shared_types import MoveKind, Side
from src.dominoes.board import BoardEnds
from src.dominoes.tiles import Tile


@dataclass(frozen=True)
class PlaceMove:
    participant_id: str
    tile_id: str
    # Kept as the raw submitted value: an unknown side is only an error once the board has ends.
    side: str = Side.LEFT
    kind: MoveKind = MoveKind.PLACE


@dataclass(frozen=True)
class PassMove:
    participant_id: str
    kind: MoveKind = MoveKind.PASS


@dataclass(frozen=True)
class DrawMove:
    participant_id: str
    kind: MoveKind = MoveKind.DRAW


Move = Union[PlaceMove, PassMove, DrawMove]


@dataclass(frozen=True)
class ValidMove:
    """A (tile, side) pair the hand could legally play right now."""

    tile: Tile
    side: Side


def can_place(tile: Tile, end_value: int) -> bool:
    return tile.has(end_value)


def valid_moves(hand: Iterable[Tile], board_ends: BoardEnds) -> list[ValidMove]:
    """
    Every legal (tile, side) pair.
    ----

    * Empty board: every tile can open the chain. Reported against the left side by convention.
    * Otherwise a tile is a candidate on each end it shares a pip with. A tile matching both ends shows up twice,
      once per side, and either submission has to be accepted.
    """
    if not board_ends:
        return [ValidMove(tile, Side.LEFT) for tile in hand]

    moves: list[ValidMove] = []
    seen: set[tuple[str, Side]] = set()
    for tile in hand:
        for end in board_ends:
            key = (tile.id, end.side)
            if can_place(tile, end.value) and key not in seen:
                seen.add(key)
                moves.append(ValidMove(tile, end.side))
    return moves


def can_move(hand: Iterable[Tile], board_ends: BoardEnds) -> bool:
    if not board_ends:
        return True
    return len(valid_moves(hand, board_ends)) > 0


def playable_tile_ids(hand: Iterable[Tile], board_ends: BoardEnds) -> list[str]:
    """Tile ids that can be played on at least one end, each listed once."""
    return list(dict.fromkeys(move.tile.id for move in valid_moves(hand, board_ends)))
