"""
Where accepted state changes go.

The transport (websocket relay, local UI loop, ...) implements Notifier. Rejections are never published:
they are raised back to whoever submitted the request.
"""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from pydantic import BaseModel

# Event names
PARTICIPANT_JOINED = "participant-joined"
PARTICIPANT_LEFT = "participant-left"
MATCH_STARTED = "match-started"
MATCH_UPDATED = "match-updated"
REMATCH_STARTED = "rematch-started"


class Notifier(Protocol):
    def publish(self, session_id: UUID, event: str, payload: BaseModel) -> None:
        """Send the payload to every participant of the session."""
        ...


class NullNotifier:
    """Default when no transport is attached: accepted changes are only stored, never sent."""

    def publish(self, session_id: UUID, event: str, payload: BaseModel) -> None:
        return None


@dataclass(frozen=True)
class PublishedEvent:
    session_id: UUID
    event: str
    payload: BaseModel


class InMemoryNotifier:
    """Keeps everything that was published. For callers that poll, and for tests."""

    def __init__(self) -> None:
        self.events: list[PublishedEvent] = []

    def publish(self, session_id: UUID, event: str, payload: BaseModel) -> None:
        self.events.append(PublishedEvent(session_id, event, payload))

    def events_for(self, session_id: UUID) -> list[PublishedEvent]:
        return [e for e in self.events if e.session_id == session_id]

    def event_names(self, session_id: UUID) -> list[str]:
        return [e.event for e in self.events_for(session_id)]
