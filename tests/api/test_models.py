from uuid import UUID, uuid4

import pytest
from pydantic import ValidationError

from src.api.models import (
    CreateSessionRequest,
    ErrorResponse,
    JoinSessionRequest,
    LocalMatchRequest,
    MoveRequest,
)
from src.core.config import Config
from src.core.exceptions import (
    InvalidRequestError,
    NotYourTurnError,
    SessionNotFoundError,
)
from src.core.shared_types import Difficulty, ErrorKind, Side
from src.dominoes.moves import DrawMove, PassMove, PlaceMove


@pytest.fixture
def mock_id() -> UUID:
    return uuid4()


# -- Validation - player names --
def test_player_name_is_stripped(mock_id: UUID) -> None:
    request = JoinSessionRequest(session_id=mock_id, player_name="  don't hate the player  ")
    assert request.player_name == "don't hate the player"


def test_player_name_is_optional_when_creating() -> None:
    """Should be able to not supply a name, and validator just returns None."""
    assert CreateSessionRequest().player_name is None
    assert CreateSessionRequest(player_name="Ann").player_name == "Ann"


@pytest.mark.parametrize("name", ["", "   "])
def test_empty_player_name(mock_id: UUID, name: str) -> None:
    with pytest.raises(InvalidRequestError):
        _ = JoinSessionRequest(session_id=mock_id, player_name=name)
    with pytest.raises(InvalidRequestError):
        _ = CreateSessionRequest(player_name=name)
    with pytest.raises(InvalidRequestError):
        _ = LocalMatchRequest(player_name=name)


def test_local_match_defaults() -> None:
    request = LocalMatchRequest(player_name="Ann")
    assert request.difficulty == Difficulty.MEDIUM
    assert request.seed is None


# -- Validation - MoveRequest --
def test_place_payload_to_move() -> None:
    request = MoveRequest.model_validate(
        {"participant_id": "p1", "move": {"kind": "place", "tile_id": "2-5", "side": "right"}}
    )
    assert request.to_move() == PlaceMove("p1", tile_id="2-5", side=Side.RIGHT)


def test_place_payload_side_defaults_to_left() -> None:
    request = MoveRequest.model_validate(
        {"participant_id": "p1", "move": {"kind": "place", "tile_id": "3-3"}}
    )
    assert request.to_move() == PlaceMove("p1", tile_id="3-3", side=Side.LEFT)


def test_unknown_side_is_left_to_the_engine() -> None:
    """Which sides exist depends on the board, so the request model lets any side through."""
    request = MoveRequest.model_validate(
        {"participant_id": "p1", "move": {"kind": "place", "tile_id": "3-3", "side": "middle"}}
    )
    assert isinstance(request.to_move(), PlaceMove)


@pytest.mark.parametrize("kind, expected", [("pass", PassMove("p1")), ("draw", DrawMove("p1"))])
def test_pass_and_draw_payloads(kind: str, expected: PassMove | DrawMove) -> None:
    request = MoveRequest.model_validate({"participant_id": "p1", "move": {"kind": kind}})
    assert request.to_move() == expected


@pytest.mark.parametrize(
    "tile_id",
    [
        "25",  # no separator
        "a-b",  # not numbers
        "2-5-6",  # three values
    ],
)
def test_invalid_tile_id(tile_id: str) -> None:
    with pytest.raises(InvalidRequestError):
        _ = MoveRequest.model_validate(
            {"participant_id": "p1", "move": {"kind": "place", "tile_id": tile_id}}
        )


def test_unknown_move_kind() -> None:
    with pytest.raises(ValidationError):
        _ = MoveRequest.model_validate({"participant_id": "p1", "move": {"kind": "shuffle"}})


# -- ErrorResponse --
def test_error_response_from_engine_error() -> None:
    response = ErrorResponse.from_error(NotYourTurnError("Wait for Bob."))
    assert response.kind == ErrorKind.NOT_YOUR_TURN
    assert response.message == "Wait for Bob."


def test_error_response_from_coordinator_error() -> None:
    response = ErrorResponse.from_error(SessionNotFoundError("gone"))
    assert response.kind == ErrorKind.SESSION_NOT_FOUND
    assert response.message == "gone"

    response = ErrorResponse.from_error(InvalidRequestError("bad"))
    assert response.kind is None


# -- Configured defaults --
@pytest.mark.parametrize(
    "configured, expected",
    [
        ("HARD", Difficulty.HARD),
        ("easy", Difficulty.EASY),
        ("impossible", Difficulty.MEDIUM),  # not a difficulty: fall back instead of failing
    ],
)
def test_local_match_difficulty_from_config(
    monkeypatch: pytest.MonkeyPatch, configured: str, expected: Difficulty
) -> None:
    monkeypatch.setattr(Config, "AI_DIFFICULTY", configured)
    assert LocalMatchRequest(player_name="Ann").difficulty == expected
