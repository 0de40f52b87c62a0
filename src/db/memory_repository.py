"""Implementation of (Match)Repository keeping every match in a dictionary. Default store of the Service."""

from copy import deepcopy
from uuid import UUID, uuid4

from src.core.models import MatchModel


class InMemoryMatchRepository:
    """Stores copies, so a caller holding a model cannot change the stored record by accident."""

    def __init__(self) -> None:
        self._matches: dict[UUID, MatchModel] = {}

    def get_match(self, match_id: UUID) -> MatchModel | None:
        match = self._matches.get(match_id)
        return deepcopy(match) if match is not None else None

    def create_match(self, match: MatchModel) -> tuple[MatchModel, UUID]:
        match_id = uuid4()
        self._matches[match_id] = deepcopy(match)
        return deepcopy(match), match_id

    def update_match(self, match_id: UUID, match: MatchModel) -> MatchModel | None:
        if match_id not in self._matches:
            return None
        self._matches[match_id] = deepcopy(match)
        return deepcopy(match)

    def delete_match(self, match_id: UUID) -> MatchModel | None:
        return self._matches.pop(match_id, None)
