"""The Board implements all rules that affect the chain of placed tiles (in dominoes: the line of play)"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from src.core.exceptions import InvalidSideError, TileDoesNotMatchError
from src.core.shared_types import Orientation, Side
from src.dominoes.tiles import Tile


@dataclass(frozen=True)
class PlacedTile:
    """A tile on the chain. `left` / `right` are the pips facing each end of the board."""

    tile: Tile
    left: int
    right: int
    orientation: Orientation = Orientation.STRAIGHT

    @property
    def is_flipped(self) -> bool:
        """Laid with its declared second (high) value on the left."""
        return self.left != self.tile.low


@dataclass(frozen=True)
class BoardEnd:
    side: Side
    value: int


BoardEnds = tuple[BoardEnd, ...]


@dataclass(frozen=True)
class Board:
    tiles: tuple[PlacedTile, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.tiles

    def ends(self) -> BoardEnds:
        """
        Open values at both extremities.
        ---
        Always derived from the current leftmost / rightmost tile, never stored alongside the chain.
        """
        if self.is_empty:
            return ()
        return (
            BoardEnd(Side.LEFT, self.tiles[0].left),
            BoardEnd(Side.RIGHT, self.tiles[-1].right),
        )

    def end_value(self, side: Side) -> Optional[int]:
        return next((end.value for end in self.ends() if end.side == side), None)

    def place(self, tile: Tile, side: Side) -> Board:
        """
        Return a new board with the tile added on the given side.

        ---
        1. Empty board: the tile is laid as declared (low on the left).
        2. Right side: the half equal to the right end touches the chain, the other half becomes the new right end.
        3. Left side: mirror image of 2.

        For a double both halves are equal, so the orientation of its pips cannot change.
        """
        orientation = Orientation.TURNED if tile.is_double else Orientation.STRAIGHT

        if self.is_empty:
            placed = PlacedTile(tile, left=tile.low, right=tile.high, orientation=orientation)
            return Board((placed,))

        end_value = self.end_value(side)
        if end_value is None:
            raise InvalidSideError(f"The board has no {side!r} end.")
        if not tile.has(end_value):
            raise TileDoesNotMatchError(
                f"Tile {tile.id} does not match the {side} end ({end_value})."
            )

        if side == Side.RIGHT:
            placed = PlacedTile(
                tile, left=end_value, right=tile.other(end_value), orientation=orientation
            )
            return Board(self.tiles + (placed,))

        placed = PlacedTile(
            tile, left=tile.other(end_value), right=end_value, orientation=orientation
        )
        return Board((placed,) + self.tiles)

    def is_consistent(self) -> bool:
        """Every pair of neighbours touches with equal pips."""
        return all(
            left.right == right.left for left, right in zip(self.tiles, self.tiles[1:])
        )

    def tile_ids(self) -> list[str]:
        return [placed.tile.id for placed in self.tiles]
