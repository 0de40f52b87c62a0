"""Dealing the tile set and picking who opens the match. The only place randomness enters a match."""

import random
from dataclasses import dataclass
from typing import Optional, Sequence

from src.core.exceptions import InvalidParticipantCountError
from src.dominoes.match import Participant
from src.dominoes.tiles import DOUBLE_SIX, Tile, generate_tile_set, shuffle, tile_set_size

HAND_SIZE = 7


@dataclass(frozen=True)
class Deal:
    hands: tuple[tuple[Tile, ...], ...]
    boneyard: tuple[Tile, ...]


def max_participants(hand_size: int = HAND_SIZE, max_pip: int = DOUBLE_SIX) -> int:
    """How many full hands one tile set can supply (4 for double-six with 7 tiles each)."""
    return tile_set_size(max_pip) // hand_size


def deal(
    participant_count: int,
    rng: Optional[random.Random] = None,
    hand_size: int = HAND_SIZE,
    max_pip: int = DOUBLE_SIX,
) -> Deal:
    """
    Shuffle a fresh set and hand out `hand_size` tiles to each participant, front of the shuffled set first.
    Whatever is left over becomes the boneyard.
    """
    if not 1 <= participant_count <= max_participants(hand_size, max_pip):
        raise InvalidParticipantCountError(
            f"Cannot deal {hand_size} tiles to {participant_count} participants from a double-{max_pip} set."
        )

    tiles = shuffle(generate_tile_set(max_pip), rng)
    hands = tuple(
        tuple(tiles[i * hand_size : (i + 1) * hand_size]) for i in range(participant_count)
    )
    boneyard = tuple(tiles[participant_count * hand_size :])
    return Deal(hands=hands, boneyard=boneyard)


def choose_starting_participant(participants: Sequence[Participant]) -> int:
    """
    Index of the participant holding the highest double.
    ---
    NOTE: Falls back to index 0 when nobody holds a double, or when more than one participant
    holds that same highest double (cannot happen with a single set, but stored states are not trusted).
    """
    highest: Optional[int] = None
    owners: list[int] = []
    for index, participant in enumerate(participants):
        for tile in participant.hand:
            if not tile.is_double:
                continue
            if highest is None or tile.low > highest:
                highest = tile.low
                owners = [index]
            elif tile.low == highest and index not in owners:
                owners.append(index)

    if len(owners) != 1:
        return 0
    return owners[0]
