"""
The engine is the entrypoint into the domain layer for the service layer.

Pure functions: (state, request) -> new state, or a typed EngineError. The state passed in is never modified,
so the same calls give the same results whether they come from the relay or from a local match against the computer.
Randomness only enters through `start_match` (dealing), never during a turn.
"""

import random
from dataclasses import replace
from typing import Optional, Sequence

from src.core.exceptions import (
    DrawNotAllowedError,
    GameNotActiveError,
    InvalidSideError,
    NoTilesToDrawError,
    NotYourTurnError,
    SessionClosedError,
    SessionFullError,
    TileDoesNotMatchError,
    TileNotInHandError,
)
from src.core.shared_types import MoveKind, Phase, Side
from src.dominoes.board import Board
from src.dominoes.dealing import (
    HAND_SIZE,
    choose_starting_participant,
    deal,
    max_participants,
)
from src.dominoes.match import Match, Participant, compute_score
from src.dominoes.moves import (
    DrawMove,
    Move,
    PassMove,
    PlaceMove,
    ValidMove,
    can_move,
    can_place,
    valid_moves,
)
from src.dominoes.tiles import Tile, generate_tile_set, shuffle

# Re-exported: together with the functions below this is the whole contract the service and the opponent use.
__all__ = [
    "Match",
    "Participant",
    "DrawMove",
    "PassMove",
    "PlaceMove",
    "ValidMove",
    "add_participant",
    "apply_draw",
    "apply_move",
    "blocked_winner",
    "can_move",
    "choose_starting_participant",
    "compute_score",
    "deal",
    "generate_tile_set",
    "is_blocked",
    "new_match",
    "remove_participant",
    "settle_if_blocked",
    "shuffle",
    "start_match",
    "valid_moves",
    "winner",
]


# --- MATCH LIFECYCLE ---
def new_match() -> Match:
    """An empty match waiting for participants."""
    return Match()


def add_participant(
    state: Match, participant: Participant, capacity: Optional[int] = None
) -> Match:
    """Participants can only join while the match is forming."""
    capacity = capacity or max_participants()
    if state.phase != Phase.FORMING:
        raise SessionClosedError("Match already started. Not accepting new participants.")
    if state.participant_count >= capacity:
        raise SessionFullError(f"Match is full ({capacity} participants).")
    return replace(state, participants=state.participants + (participant,))


def remove_participant(state: Match, participant_id: str) -> Match:
    """
    Drop a participant (their tiles leave the match with them).
    ---
    The turn stays with the same participant it was with. If the one leaving was to move,
    the turn goes to whoever sat after them (wrapping around to 0).
    """
    index = state.index_of(participant_id)
    participants = state.participants[:index] + state.participants[index + 1 :]

    current_index = state.current_index
    if index < current_index:
        current_index -= 1
    if current_index >= len(participants):
        current_index = 0

    return replace(
        state,
        participants=participants,
        current_index=current_index,
        rematch_requests=tuple(pid for pid in state.rematch_requests if pid != participant_id),
    )


def start_match(
    state: Match, rng: Optional[random.Random] = None, hand_size: int = HAND_SIZE
) -> Match:
    """
    Deal and pick the opening participant. Used for the first start and for every rematch.
    ---
    Everything from a previous match (board, scores, winner, rematch requests) is reset.
    """
    dealt = deal(state.participant_count, rng=rng, hand_size=hand_size)
    participants = tuple(
        replace(p, hand=hand, score=0, is_ready=True)
        for p, hand in zip(state.participants, dealt.hands)
    )
    return replace(
        state,
        participants=participants,
        current_index=choose_starting_participant(participants),
        board=Board(),
        boneyard=dealt.boneyard,
        consecutive_passes=0,
        phase=Phase.ACTIVE,
        winner_id=None,
        rematch_requests=(),
    )


# --- TURN TRANSITIONS ---
def apply_move(state: Match, move: Move) -> Match:
    """
    Attempt a move
    -----

    1. the match must be active
    2. it must be the submitting participant's turn
    3. a pass skips the tile checks
    4. the tile must be in the participant's hand
    5. on a non-empty board the side must exist and the tile must match that end

    Draws are dispatched to `apply_draw`.
    """
    if move.kind == MoveKind.DRAW:
        return apply_draw(state, move.participant_id)

    _assert_active(state)
    _assert_your_turn(state, move.participant_id)

    if move.kind == MoveKind.PASS:
        return _apply_pass(state)
    return _apply_place(state, move)


def apply_draw(state: Match, participant_id: str) -> Match:
    """
    Take one tile from the front of the boneyard.
    ---
    Only allowed when the participant has no legal placement. If the drawn tile still does not fit,
    the turn moves on by itself (no explicit pass needed). Otherwise the participant keeps the turn.
    """
    _assert_active(state)
    _assert_your_turn(state, participant_id)

    index = state.current_index
    participant = state.current_participant
    if not state.boneyard:
        raise NoTilesToDrawError("No tiles left to draw.")
    if valid_moves(participant.hand, state.board_ends):
        raise DrawNotAllowedError("You can still place a tile. Draw only when no tile fits.")

    drawn, boneyard = state.boneyard[0], state.boneyard[1:]
    holder = participant.with_tile(drawn)
    after = replace(
        state.with_participant(index, holder),
        boneyard=boneyard,
        consecutive_passes=0,
    )
    if can_move(holder.hand, after.board_ends):
        return after
    return replace(after, current_index=state.next_index())


# --- TERMINAL CONDITIONS ---
def is_blocked(state: Match) -> bool:
    """Nobody can place and there is nothing left to draw."""
    if not state.participants or state.boneyard:
        return False
    ends = state.board_ends
    return not any(can_move(p.hand, ends) for p in state.participants)


def blocked_winner(participants: Sequence[Participant]) -> Optional[str]:
    """Strictly lowest pip count wins. On a tie the first one in seating order keeps it."""
    best: Optional[Participant] = None
    for participant in participants:
        if best is None or compute_score(participant.hand) < compute_score(best.hand):
            best = participant
    return best.id if best else None


def winner(state: Match) -> Optional[str]:
    if state.is_over:
        return state.winner_id
    if is_blocked(state):
        return blocked_winner(state.participants)
    return None


def settle_if_blocked(state: Match) -> Match:
    """Conclude an active match that nobody can continue. Called after every placement and draw."""
    if state.phase == Phase.ACTIVE and is_blocked(state):
        return state.concluded(blocked_winner(state.participants))
    return state


# -- PRIVATE HELPERS ---
def _assert_active(state: Match) -> None:
    if state.phase != Phase.ACTIVE:
        raise GameNotActiveError(f"Match is not in progress. phase: {state.phase}")


def _assert_your_turn(state: Match, participant_id: str) -> None:
    """You must wait for your turn before placing, passing or drawing."""
    participant_to_move = state.current_participant
    if participant_id != participant_to_move.id:
        raise NotYourTurnError(
            f"It is not your turn. Waiting for {participant_to_move.name} to make a move first."
        )


def _resolve_side(board: Board, side: str) -> Side:
    """Any side opens an empty board. After that it has to name one of the two ends."""
    try:
        return Side(side)
    except ValueError:
        if board.is_empty:
            return Side.LEFT
        raise InvalidSideError(f"Unknown side {side!r}. Pick one from {','.join(Side)}.")


def _apply_pass(state: Match) -> Match:
    """Everybody passing in a row blocks the match."""
    passes = state.consecutive_passes + 1
    after = replace(state, consecutive_passes=passes)
    if passes >= state.participant_count:
        return after.concluded(blocked_winner(after.participants))
    return replace(after, current_index=state.next_index())


def _apply_place(state: Match, move: PlaceMove) -> Match:
    index = state.current_index
    participant = state.current_participant
    if not participant.holds(move.tile_id):
        raise TileNotInHandError(f"Tile {move.tile_id!r} is not in your hand.")

    tile = Tile.from_id(move.tile_id)
    side = _resolve_side(state.board, move.side)
    if not state.board.is_empty:
        end_value = state.board.end_value(side)
        if end_value is None or not can_place(tile, end_value):
            raise TileDoesNotMatchError(
                f"Tile {tile.id} does not match the {side} end ({end_value})."
            )

    # Board.place orients the tile; the ends are read back from the new chain.
    after = replace(
        state.with_participant(index, participant.without_tile(tile.id)),
        board=state.board.place(tile, side),
        consecutive_passes=0,
    )

    # An empty hand wins before any other end condition is looked at.
    if not after.participants[index].hand:
        return after.concluded(participant.id)
    return replace(after, current_index=state.next_index())
