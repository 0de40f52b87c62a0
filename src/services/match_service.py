"""Orchestration of communication from the transport to the domain and persistence layers (and the reverse direction)."""

import logging
import random
import threading
from dataclasses import replace
from typing import Callable, Optional
from uuid import UUID, uuid4

from src.api.models import (
    BoardEndResponse,
    CreateSessionRequest,
    CreateSessionResponse,
    DrawRequest,
    GetSessionRequest,
    JoinSessionRequest,
    JoinSessionResponse,
    LeaveRequest,
    LegalMoveResponse,
    LegalMovesRequest,
    LegalMovesResponse,
    LocalMatchRequest,
    MatchResponse,
    MoveRequest,
    ParticipantResponse,
    PlacedTileResponse,
    ReadyRequest,
    RematchRequest,
    TileResponse,
)
from src.core.config import Config, default_difficulty
from src.core.exceptions import (
    EngineError,
    GameNotActiveError,
    ParticipantNotFoundError,
    RematchNotAllowedError,
    SessionClosedError,
    SessionNotFoundError,
)
from src.core.shared_types import Difficulty, MoveKind, Phase
from src.db.repository import MatchRepository
from src.dominoes.engine import (
    DrawMove,
    Match,
    Participant,
    add_participant,
    apply_move,
    new_match,
    remove_participant,
    settle_if_blocked,
    start_match,
    valid_moves,
)
from src.dominoes.moves import Move, playable_tile_ids
from src.dominoes.opponent import choose_move, thinking_delay
from src.services.notifier import (
    MATCH_STARTED,
    MATCH_UPDATED,
    PARTICIPANT_JOINED,
    PARTICIPANT_LEFT,
    REMATCH_STARTED,
    Notifier,
    NullNotifier,
)

logger = logging.getLogger(__name__)

AUTOMATED_NAME = "Computer"


class MatchService:
    """
    Orchestration of layers for dominoes sessions.

    ---
    At most one request per session is applied at a time (one lock per session); different sessions do not wait for each other.
    `pause` receives the automated opponent's thinking delay in seconds (e.g. time.sleep). Without it automated moves are immediate.
    """

    def __init__(
        self,
        repository: MatchRepository,
        notifier: Optional[Notifier] = None,
        rng: Optional[random.Random] = None,
        pause: Optional[Callable[[float], None]] = None,
    ) -> None:
        self.repo = repository
        self.notifier = notifier or NullNotifier()
        self.rng = rng or random.Random()
        self.pause = pause
        self._participant_sessions: dict[str, UUID] = {}
        self._difficulties: dict[UUID, Difficulty] = {}
        self._rngs: dict[UUID, random.Random] = {}
        self._locks: dict[UUID, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    # -- SESSION LIFECYCLE ---
    def create_session(self, request: CreateSessionRequest) -> CreateSessionResponse:
        """Open an empty session. The creator joins it when a player name is given."""
        _, session_id = self.repo.create_match(new_match().to_model())
        logger.info("session=%s created", session_id)

        if request.player_name is None:
            return CreateSessionResponse(
                session_id=session_id,
                participant_id=None,
                match=self._create_match_response(session_id, new_match()),
            )

        joined = self.join_session(
            JoinSessionRequest(session_id=session_id, player_name=request.player_name)
        )
        return CreateSessionResponse(
            session_id=session_id, participant_id=joined.participant_id, match=joined.match
        )

    def join_session(self, request: JoinSessionRequest) -> JoinSessionResponse:
        """A participant asked to join a session that is still forming."""
        session_id = request.session_id
        with self._lock_for(session_id):
            match = self._fetch_match(session_id)
            participant = Participant(id=uuid4().hex, name=request.player_name)
            match = add_participant(match, participant, capacity=Config.MAX_PARTICIPANTS)
            self._save(session_id, match)
            self._participant_sessions[participant.id] = session_id

            logger.info(
                "session=%s participant=%s (%s) joined", session_id, participant.id, participant.name
            )
            response = self._create_match_response(session_id, match)
            self.notifier.publish(session_id, PARTICIPANT_JOINED, response)
        return JoinSessionResponse(participant_id=participant.id, match=response)

    def mark_ready(self, request: ReadyRequest) -> MatchResponse:
        """Once everybody (and at least MIN_PARTICIPANTS) is ready, tiles get dealt."""
        session_id = self._session_of(request.participant_id)
        with self._lock_for(session_id):
            match = self._fetch_match(session_id)
            if match.phase != Phase.FORMING:
                raise SessionClosedError("Match already started.")

            index = match.index_of(request.participant_id)
            match = match.with_participant(index, replace(match.participants[index], is_ready=True))

            event = MATCH_UPDATED
            everyone_ready = all(p.is_ready for p in match.participants)
            if match.participant_count >= Config.MIN_PARTICIPANTS and everyone_ready:
                match = start_match(match, rng=self._rng_for(session_id), hand_size=Config.HAND_SIZE)
                event = MATCH_STARTED
                logger.info(
                    "session=%s match started, %s opens",
                    session_id,
                    match.current_participant.name,
                )

            self._save(session_id, match)
            response = self._create_match_response(session_id, match)
            self.notifier.publish(session_id, event, response)
        return response

    def leave_session(self, request: LeaveRequest) -> Optional[MatchResponse]:
        """
        A participant left (or got disconnected).
        ---
        * nobody human left: the session is removed (returns None)
        * a running match down to a single human: that human wins by default
        """
        session_id = self._session_of(request.participant_id)
        with self._lock_for(session_id):
            match = self._fetch_match(session_id)
            humans_before = len(match.humans())
            match = remove_participant(match, request.participant_id)
            self._participant_sessions.pop(request.participant_id, None)
            logger.info("session=%s participant=%s left", session_id, request.participant_id)

            remaining_humans = match.humans()
            if not remaining_humans:
                self._close_session(session_id)
                return None

            if match.phase == Phase.ACTIVE and len(remaining_humans) == 1 and humans_before > 1:
                match = match.concluded(remaining_humans[0].id)
                logger.info(
                    "session=%s %s wins by default", session_id, remaining_humans[0].name
                )
            match = settle_if_blocked(match)

            self._save(session_id, match)
            response = self._create_match_response(session_id, match)
            self.notifier.publish(session_id, PARTICIPANT_LEFT, response)
        return response

    def request_rematch(self, request: RematchRequest) -> MatchResponse:
        """When every participant asked for it, deal again with the same seating."""
        session_id = self._session_of(request.participant_id)
        with self._lock_for(session_id):
            match = self._fetch_match(session_id)
            if not match.is_over:
                raise RematchNotAllowedError("The match is not over yet.")

            match.index_of(request.participant_id)
            if request.participant_id not in match.rematch_requests:
                match = replace(
                    match, rematch_requests=match.rematch_requests + (request.participant_id,)
                )

            event = MATCH_UPDATED
            # automated participants always accept
            if all(p.is_automated or p.id in match.rematch_requests for p in match.participants):
                match = start_match(match, rng=self._rng_for(session_id), hand_size=Config.HAND_SIZE)
                event = REMATCH_STARTED
                logger.info("session=%s rematch started", session_id)

            self._save(session_id, match)
            self.notifier.publish(
                session_id, event, self._create_match_response(session_id, match)
            )
            match = self._play_automated_turns(session_id, match)
        return self._create_match_response(session_id, match)

    # -- TURNS ---
    def submit_move(self, request: MoveRequest) -> MatchResponse:
        """Place / pass / draw. A rejected move leaves the stored match untouched and is raised to the caller only."""
        session_id = self._session_of(request.participant_id)
        with self._lock_for(session_id):
            match = self._fetch_match(session_id)
            match = self._apply(session_id, match, request.to_move())
            match = self._play_automated_turns(session_id, match)
        return self._create_match_response(session_id, match)

    def submit_draw(self, request: DrawRequest) -> MatchResponse:
        session_id = self._session_of(request.participant_id)
        with self._lock_for(session_id):
            match = self._fetch_match(session_id)
            match = self._apply(session_id, match, DrawMove(request.participant_id))
            match = self._play_automated_turns(session_id, match)
        return self._create_match_response(session_id, match)

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """Placements the participant could make right now (for highlighting playable tiles)."""
        session_id = self._session_of(request.participant_id)
        match = self._fetch_match(session_id)
        if match.phase != Phase.ACTIVE:
            raise GameNotActiveError(f"Match is not in progress. phase: {match.phase}")

        participant = match.participant(request.participant_id)
        moves = valid_moves(participant.hand, match.board_ends)
        is_turn = match.current_participant.id == participant.id
        return LegalMovesResponse(
            session_id=session_id,
            participant_id=participant.id,
            moves=[LegalMoveResponse(tile_id=m.tile.id, side=m.side) for m in moves],
            playable_tile_ids=playable_tile_ids(participant.hand, match.board_ends),
            can_draw=is_turn and not moves and bool(match.boneyard),
        )

    def get_match_state(self, request: GetSessionRequest) -> MatchResponse:
        """Retrieve current match state."""
        match = self._fetch_match(request.session_id)
        return self._create_match_response(request.session_id, match)

    # -- LOCAL PLAY AGAINST THE COMPUTER ---
    def start_local_match(self, request: LocalMatchRequest) -> JoinSessionResponse:
        """One human against one automated opponent. Dealt right away, nobody needs to ready up."""
        human = Participant(id=uuid4().hex, name=request.player_name, is_ready=True)
        computer = Participant(
            id=uuid4().hex, name=AUTOMATED_NAME, is_automated=True, is_ready=True
        )
        rng = random.Random(request.seed) if request.seed is not None else self.rng

        match = add_participant(new_match(), human)
        match = add_participant(match, computer)
        match = start_match(match, rng=rng, hand_size=Config.HAND_SIZE)

        _, session_id = self.repo.create_match(match.to_model())
        self._participant_sessions[human.id] = session_id
        self._difficulties[session_id] = request.difficulty
        self._rngs[session_id] = rng
        logger.info(
            "session=%s local match for %s (%s)", session_id, human.name, request.difficulty
        )

        with self._lock_for(session_id):
            self.notifier.publish(
                session_id, MATCH_STARTED, self._create_match_response(session_id, match)
            )
            match = self._play_automated_turns(session_id, match)
        return JoinSessionResponse(
            participant_id=human.id, match=self._create_match_response(session_id, match)
        )

    def play_automated_turns(self, request: GetSessionRequest) -> MatchResponse:
        """Let automated participants move until it is a human's turn or the match is over."""
        with self._lock_for(request.session_id):
            match = self._fetch_match(request.session_id)
            match = self._play_automated_turns(request.session_id, match)
        return self._create_match_response(request.session_id, match)

    # -- Internal helpers --
    def _apply(self, session_id: UUID, match: Match, move: Move) -> Match:
        """Run one engine transition, store it and tell everybody. Caller holds the session lock."""
        try:
            after = apply_move(match, move)
        except EngineError as exc:
            logger.warning(
                "session=%s participant=%s %s rejected: %s",
                session_id,
                move.participant_id,
                move.kind,
                exc.kind,
            )
            raise

        # A pass has its own end condition inside the engine; placements and draws can block the match too.
        if move.kind != MoveKind.PASS:
            after = settle_if_blocked(after)

        logger.info("session=%s participant=%s %s", session_id, move.participant_id, move.kind)
        if after.is_over:
            logger.info("session=%s match over, winner=%s", session_id, after.winner_id)

        self._save(session_id, after)
        self.notifier.publish(session_id, MATCH_UPDATED, self._create_match_response(session_id, after))
        return after

    def _play_automated_turns(self, session_id: UUID, match: Match) -> Match:
        """Caller holds the session lock. Every iteration draws, places or passes, so the loop ends."""
        difficulty = self._difficulties.get(session_id) or default_difficulty()
        rng = self._rng_for(session_id)
        while match.phase == Phase.ACTIVE and match.current_participant.is_automated:
            if self.pause is not None:
                self.pause(thinking_delay(difficulty, rng))
            participant_id = match.current_participant.id
            move = choose_move(match, participant_id, difficulty, rng)
            match = self._apply(session_id, match, move)
        return match

    def _lock_for(self, session_id: UUID) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(session_id, threading.Lock())

    def _discard_lock(self, session_id: UUID) -> None:
        with self._locks_guard:
            self._locks.pop(session_id, None)

    def _rng_for(self, session_id: UUID) -> random.Random:
        return self._rngs.get(session_id, self.rng)

    def _session_of(self, participant_id: str) -> UUID:
        session_id = self._participant_sessions.get(participant_id)
        if session_id is None:
            raise ParticipantNotFoundError(f"Participant {participant_id!r} is not in any session.")
        return session_id

    def _close_session(self, session_id: UUID) -> None:
        """Caller holds the session lock. Anyone still waiting on it finds the session gone once inside."""
        self.repo.delete_match(session_id)
        self._difficulties.pop(session_id, None)
        self._rngs.pop(session_id, None)
        for participant_id, sid in list(self._participant_sessions.items()):
            if sid == session_id:
                del self._participant_sessions[participant_id]
        self._discard_lock(session_id)
        logger.info("session=%s closed", session_id)

    def _fetch_match(self, session_id: UUID) -> Match:
        """Attempt to find the match in the repository and raise error if it fails."""
        match_model = self.repo.get_match(session_id)
        if match_model is None:
            self._discard_lock(session_id)
            raise SessionNotFoundError(f"Session with {session_id=} not found.")
        return Match.from_model(match_model)

    def _save(self, session_id: UUID, match: Match) -> None:
        if self.repo.update_match(session_id, match.to_model()) is None:
            raise SessionNotFoundError(f"Session with {session_id=} not found.")

    def _create_match_response(self, session_id: UUID, match: Match) -> MatchResponse:
        """Convert a Match to a MatchResponse (for the session with given ID.)"""
        current = (
            match.current_participant.id
            if match.phase == Phase.ACTIVE and match.participants
            else None
        )
        return MatchResponse(
            session_id=session_id,
            phase=match.phase,
            participants=[
                ParticipantResponse(
                    id=p.id,
                    name=p.name,
                    hand=[
                        TileResponse(id=t.id, left=t.low, right=t.high, is_double=t.is_double)
                        for t in p.hand
                    ],
                    tile_count=len(p.hand),
                    score=p.score,
                    is_automated=p.is_automated,
                    is_ready=p.is_ready,
                )
                for p in match.participants
            ],
            current_index=match.current_index,
            current_participant_id=current,
            board=[
                PlacedTileResponse(
                    tile_id=placed.tile.id,
                    left=placed.left,
                    right=placed.right,
                    is_double=placed.tile.is_double,
                    orientation=placed.orientation,
                    is_flipped=placed.is_flipped,
                )
                for placed in match.board.tiles
            ],
            board_ends=[BoardEndResponse(side=end.side, value=end.value) for end in match.board_ends],
            boneyard_count=len(match.boneyard),
            consecutive_passes=match.consecutive_passes,
            winner=match.winner_id,
            is_over=match.is_over,
            rematch_requests=list(match.rematch_requests),
        )
