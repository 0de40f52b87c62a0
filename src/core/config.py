import logging
import os

from src.core.shared_types import Difficulty

logger = logging.getLogger(__name__)


class Config:
    # In-memory by default: match state is not meant to survive a restart
    DATABASE_URL = os.environ.get("DATABASE_URL") or "sqlite:///:memory:"
    DATABASE_ECHO = os.environ.get("DATABASE_ECHO", "").strip().lower() in ("1", "true", "yes")
    # Session capacity (a double-six set deals 7 tiles to at most 4 participants)
    MIN_PARTICIPANTS = int(os.environ.get("MIN_PARTICIPANTS", "2"))
    MAX_PARTICIPANTS = int(os.environ.get("MAX_PARTICIPANTS", "4"))
    HAND_SIZE = int(os.environ.get("HAND_SIZE", "7"))
    # Automated opponent used for local matches
    AI_DIFFICULTY = os.environ.get("AI_DIFFICULTY", "medium")
    LOG_LEVEL = os.environ.get("DOMINOES_LOG_LEVEL", "INFO").upper()


def default_difficulty() -> Difficulty:
    """Configured AI_DIFFICULTY, or medium when the configured value is not a difficulty."""
    try:
        return Difficulty(Config.AI_DIFFICULTY.strip().lower())
    except ValueError:
        logger.warning(
            "Unknown AI_DIFFICULTY %r, using %s. Pick one from %s.",
            Config.AI_DIFFICULTY,
            Difficulty.MEDIUM,
            ",".join(Difficulty),
        )
        return Difficulty.MEDIUM
