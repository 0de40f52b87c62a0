"""Database tables / schema"""

from datetime import datetime, timezone
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import JSON
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBMatch(Base):
    __tablename__ = "matches"
    id: Mapped[UUID] = mapped_column(primary_key=True)
    # participants / board are lists of plain dicts (dataclasses.asdict of the core models)
    participants: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)
    current_index: Mapped[int] = mapped_column(default=0)
    board: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)
    boneyard: Mapped[list[str]] = mapped_column(JSON, default=list)
    consecutive_passes: Mapped[int] = mapped_column(default=0)
    phase: Mapped[str]
    winner: Mapped[Optional[str]]
    rematch_requests: Mapped[list[str]] = mapped_column(JSON, default=list)
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)
