"""
Move selection for automated participants.

Only uses the public engine contract (valid_moves / compute_score). The chosen move is submitted through
apply_move like any other, so the computer gets validated exactly like a human.
"""

import random
from typing import Callable, Optional

from src.core.shared_types import Difficulty
from src.dominoes.board import BoardEnds
from src.dominoes.engine import (
    DrawMove,
    Match,
    PassMove,
    PlaceMove,
    ValidMove,
    compute_score,
    valid_moves,
)
from src.dominoes.moves import Move, can_place
from src.dominoes.tiles import Tile

# Seconds before an automated move is applied (plus up to 0.5s of jitter)
THINKING_DELAYS: dict[Difficulty, float] = {
    Difficulty.EASY: 0.5,
    Difficulty.MEDIUM: 1.0,
    Difficulty.HARD: 1.5,
}


def thinking_delay(difficulty: Difficulty, rng: Optional[random.Random] = None) -> float:
    rng = rng or random.Random()
    return THINKING_DELAYS[difficulty] + rng.random() * 0.5


def choose_move(
    state: Match,
    participant_id: str,
    difficulty: Difficulty = Difficulty.MEDIUM,
    rng: Optional[random.Random] = None,
) -> Move:
    """
    Pick the move for the automated participant.
    ---
    * nothing fits: draw while the boneyard has tiles, pass otherwise
    * easy: any legal move
    * medium: the most valuable tile (see `tile_value`)
    * hard: like medium, but prefer leaving an open value the other hands hold little of
    """
    rng = rng or random.Random()
    player = state.participant(participant_id)
    ends = state.board_ends
    candidates = valid_moves(player.hand, ends)

    if not candidates:
        if state.boneyard:
            return DrawMove(participant_id)
        return PassMove(participant_id)

    if difficulty == Difficulty.EASY:
        best = rng.choice(candidates)
    elif difficulty == Difficulty.MEDIUM:
        best = _first_best(candidates, lambda move: tile_value(move.tile, ends))
    else:
        best = _first_best(candidates, lambda move: _strategic_value(state, player.hand, move))

    return PlaceMove(participant_id, tile_id=best.tile.id, side=best.side)


def tile_value(tile: Tile, board_ends: BoardEnds) -> float:
    """Heavy tiles first, doubles a bit more, and a big bonus for a tile that fits both ends."""
    value: float = compute_score([tile])
    if tile.is_double:
        value += 2
    if board_ends and all(can_place(tile, end.value) for end in board_ends):
        value += 10
    return value


def count_holding(value: int, state: Match) -> int:
    """How many tiles in all hands carry the given pip."""
    return sum(1 for p in state.participants for tile in p.hand if tile.has(value))


def _strategic_value(state: Match, hand: tuple[Tile, ...], move: ValidMove) -> float:
    score = tile_value(move.tile, state.board_ends)

    # the value this move would leave open on that end
    end_value = state.board.end_value(move.side)
    open_value = move.tile.other(end_value) if end_value is not None else move.tile.high
    score -= count_holding(open_value, state) * 3

    # get rid of heavy tiles before a block can punish them
    score += compute_score([move.tile]) * 0.5

    if move.tile.is_double and len(hand) <= 3:
        score += 5
    return score


def _first_best(
    candidates: list[ValidMove], value: Callable[[ValidMove], float]
) -> ValidMove:
    """Highest value wins, the earliest candidate keeps ties."""
    best = candidates[0]
    best_value = value(best)
    for move in candidates[1:]:
        move_value = value(move)
        if move_value > best_value:
            best, best_value = move, move_value
    return best
