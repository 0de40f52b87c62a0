"""
Domino tiles and the tile set

(placed in its own module as every other domain module needs to import it)
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Optional, Sequence

from src.core.exceptions import GameStateError

# Standard set is double-six. Kept as a parameter so other sets (double-nine, ...) stay possible.
DOUBLE_SIX = 6


@dataclass(frozen=True)
class Tile:
    """Unordered pair of pips. Always stored with low <= high so equal tiles compare equal."""

    low: int
    high: int

    def __post_init__(self) -> None:
        if self.low > self.high:
            raise GameStateError(f"Tile must be stored as (low, high), got ({self.low}, {self.high})")

    @classmethod
    def of(cls, a: int, b: int) -> Tile:
        """Build a tile from two pips given in any order."""
        return cls(min(a, b), max(a, b))

    @classmethod
    def from_id(cls, tile_id: str) -> Tile:
        """Tile ids look like '2-5'."""
        try:
            a, b = tile_id.split("-")
            return cls.of(int(a), int(b))
        except ValueError as exc:
            raise GameStateError(f"Cannot interpret {tile_id!r} as a tile id.") from exc

    @property
    def id(self) -> str:
        return f"{self.low}-{self.high}"

    @property
    def is_double(self) -> bool:
        return self.low == self.high

    @property
    def pips(self) -> int:
        return self.low + self.high

    def has(self, value: int) -> bool:
        return value in (self.low, self.high)

    def other(self, value: int) -> int:
        """The pip on the opposite half from `value` (the same pip for a double)."""
        if value == self.low:
            return self.high
        if value == self.high:
            return self.low
        raise GameStateError(f"Tile {self.id} has no half with value {value}.")


def generate_tile_set(max_pip: int = DOUBLE_SIX) -> list[Tile]:
    """All combinations a <= b in [0, max_pip]. Deterministic: 28 tiles for double-six."""
    return [Tile(a, b) for a in range(max_pip + 1) for b in range(a, max_pip + 1)]


def tile_set_size(max_pip: int = DOUBLE_SIX) -> int:
    return (max_pip + 1) * (max_pip + 2) // 2


def shuffle(tiles: Sequence[Tile], rng: Optional[random.Random] = None) -> list[Tile]:
    """
    Uniform random permutation of a copy of `tiles`.

    random.Random.shuffle is a Fisher-Yates shuffle. Pass a seeded Random to make it reproducible.
    """
    rng = rng or random.Random()
    shuffled = list(tiles)
    rng.shuffle(shuffled)
    return shuffled
