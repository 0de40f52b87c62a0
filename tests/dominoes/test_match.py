"""Unit tests for src/dominoes/match.py"""

import pytest

from src.core.exceptions import GameStateError, ParticipantNotFoundError
from src.core.models import MatchModel, ParticipantModel, PlacedTileModel
from src.core.shared_types import Orientation, Phase, Side
from src.dominoes.board import Board
from src.dominoes.match import Match, Participant
from src.dominoes.tiles import Tile


@pytest.fixture
def model() -> MatchModel:
    return MatchModel(
        participants=[
            ParticipantModel(id="a", name="Ann", hand=["1-2", "6-6"], is_ready=True),
            ParticipantModel(id="b", name="Bot", hand=["0-4"], is_automated=True, is_ready=True),
        ],
        current_index=1,
        board=[
            PlacedTileModel(tile_id="3-3", left=3, right=3, orientation="turned"),
            PlacedTileModel(tile_id="2-3", left=3, right=2, orientation="straight"),
        ],
        boneyard=["5-5", "0-1"],
        consecutive_passes=1,
        phase="active",
    )


# -- CREATION LOGIC --
def test_match_from_model_roundtrip(model: MatchModel) -> None:
    match = Match.from_model(model)

    assert match.phase == Phase.ACTIVE
    assert match.participants[0].hand == (Tile(1, 2), Tile(6, 6))
    assert match.participants[1].is_automated
    assert match.board.tiles[0].orientation == Orientation.TURNED
    assert match.board.tiles[1].is_flipped
    assert match.boneyard == (Tile(5, 5), Tile(0, 1))
    assert match.current_participant.id == "b"

    assert match.to_model() == model


def test_board_ends_are_derived_after_loading(model: MatchModel) -> None:
    match = Match.from_model(model)
    assert [(end.side, end.value) for end in match.board_ends] == [(Side.LEFT, 3), (Side.RIGHT, 2)]


def test_unknown_phase(model: MatchModel) -> None:
    model.phase = "halftime"
    with pytest.raises(GameStateError):
        _ = Match.from_model(model)


def test_inconsistent_board(model: MatchModel) -> None:
    model.board[1] = PlacedTileModel(tile_id="2-4", left=4, right=2, orientation="straight")
    with pytest.raises(GameStateError):
        _ = Match.from_model(model)


def test_current_index_out_of_range(model: MatchModel) -> None:
    model.current_index = 5
    match = Match.from_model(model)
    with pytest.raises(GameStateError):
        _ = match.current_participant


# -- PARTICIPANTS --
def test_participant_lookup(model: MatchModel) -> None:
    match = Match.from_model(model)
    assert match.index_of("b") == 1
    assert match.participant("a").name == "Ann"
    assert [p.id for p in match.humans()] == ["a"]

    with pytest.raises(ParticipantNotFoundError):
        _ = match.participant("zz")


def test_participant_hand_changes_return_new_values() -> None:
    participant = Participant("a", "Ann", hand=(Tile(1, 2),))
    more = participant.with_tile(Tile(3, 3))
    less = more.without_tile("1-2")

    assert participant.hand == (Tile(1, 2),)
    assert more.holds("3-3") and more.holds("1-2")
    assert less.hand == (Tile(3, 3),)


def test_next_index_wraps(model: MatchModel) -> None:
    match = Match.from_model(model)
    assert match.next_index() == 0


def test_concluded_sets_scores_and_winner(model: MatchModel) -> None:
    match = Match.from_model(model).concluded("a")
    assert match.is_over
    assert match.winner_id == "a"
    assert [p.score for p in match.participants] == [15, 4]
    # nothing else moves
    assert match.current_index == 1
    assert match.board.tile_ids() == ["3-3", "2-3"]


def test_default_match_is_forming() -> None:
    match = Match()
    assert match.phase == Phase.FORMING
    assert match.board == Board()
    assert not match.is_over
