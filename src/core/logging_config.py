"""Logging setup: one stderr handler on the package logger, modules log through logging.getLogger(__name__)."""

import logging
import sys
from typing import Optional

from src.core.config import Config

LOGGER_NAME = "src"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
HANDLER_NAME = "dominoes-stderr"


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Attach the stderr handler once. Calling it again only changes the level.
    Handlers added by a host application are left alone.
    """
    level_name = (level or Config.LOG_LEVEL).upper()
    log_level = getattr(logging, level_name, logging.INFO)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(log_level)
    handler = next((h for h in logger.handlers if h.get_name() == HANDLER_NAME), None)
    if handler is None:
        handler = logging.StreamHandler(sys.stderr)
        handler.set_name(HANDLER_NAME)
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)
    handler.setLevel(log_level)

    # SQL echo is noisy at INFO
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    return logger
