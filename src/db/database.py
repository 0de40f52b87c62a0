"""Generate database session"""

from typing import Generator

from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.core.config import Config
from src.db.schema import Base

# An in-memory SQLite database only lives as long as its single connection
_memory = Config.DATABASE_URL.startswith("sqlite") and ":memory:" in Config.DATABASE_URL
engine = create_engine(
    Config.DATABASE_URL,
    echo=Config.DATABASE_ECHO,
    **(
        {"connect_args": {"check_same_thread": False}, "poolclass": StaticPool}
        if _memory
        else {}
    ),
)
SessionLocal = sessionmaker(bind=engine)

# Ensure all tables are created
Base.metadata.create_all(bind=engine)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
