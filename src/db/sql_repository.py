"""Implementation of (Match)Repository using SQLAlchemy"""

import threading
from dataclasses import asdict
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from src.core.models import MatchModel, ParticipantModel, PlacedTileModel
from src.db.schema import DBMatch


class SQLMatchRepository:
    """
    Data stored using SQL / methods implemented using SQLAlchemy

    ---
    Every call opens its own short-lived Session from the factory, so matches handled in different threads
    never share one. Calls are serialized: an in-memory SQLite database is a single connection (StaticPool)
    behind every Session.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self.session_factory = session_factory
        self._lock = threading.Lock()

    def get_match(self, match_id: UUID) -> MatchModel | None:
        """Get match by ID, if record exists."""
        with self._lock, self.session_factory() as db:
            match_db = self._fetch_match(db, match_id)
            if match_db:
                return self._to_model(match_db)
            return None

    def create_match(self, match: MatchModel) -> tuple[MatchModel, UUID]:
        """Store new match and return the stored data + newly created match ID."""

        new_id = uuid4()
        with self._lock, self.session_factory() as db:
            match_db = DBMatch(id=new_id)
            self._copy_into(match_db, match)
            db.add(match_db)
            db.commit()
            db.refresh(match_db)
            return self._to_model(match_db), new_id

    def update_match(self, match_id: UUID, match: MatchModel) -> MatchModel | None:
        """Replace the stored state of an existing record."""
        with self._lock, self.session_factory() as db:
            match_db = self._fetch_match(db, match_id)
            if not match_db:
                return None
            self._copy_into(match_db, match)
            db.commit()
            db.refresh(match_db)
            return self._to_model(match_db)

    def delete_match(self, match_id: UUID) -> MatchModel | None:
        """Remove a match's record."""
        with self._lock, self.session_factory() as db:
            match_db = self._fetch_match(db, match_id)
            if not match_db:
                return None
            match_model = self._to_model(match_db)
            db.delete(match_db)
            db.commit()
            return match_model

    def _fetch_match(self, db: Session, match_id: UUID) -> DBMatch | None:
        query = select(DBMatch).where(DBMatch.id == match_id)
        return db.scalar(query)

    def _copy_into(self, match_db: DBMatch, match: MatchModel) -> None:
        """JSON columns get fresh lists so SQLAlchemy notices the change."""
        match_db.participants = [asdict(p) for p in match.participants]
        match_db.current_index = match.current_index
        match_db.board = [asdict(placed) for placed in match.board]
        match_db.boneyard = list(match.boneyard)
        match_db.consecutive_passes = match.consecutive_passes
        match_db.phase = match.phase
        match_db.winner = match.winner
        match_db.rematch_requests = list(match.rematch_requests)

    def _to_model(self, match_db: DBMatch) -> MatchModel:
        """Convert SQLAlchemy model to data transfer model."""
        return MatchModel(
            participants=[ParticipantModel(**p) for p in match_db.participants],
            current_index=match_db.current_index,
            board=[PlacedTileModel(**placed) for placed in match_db.board],
            boneyard=list(match_db.boneyard),
            consecutive_passes=match_db.consecutive_passes,
            phase=match_db.phase,
            winner=match_db.winner,
            rematch_requests=list(match_db.rematch_requests),
        )
