"""Unit tests for src/core/logging_config.py"""

import logging
from typing import Generator

import pytest

from src.core.logging_config import LOGGER_NAME, setup_logging


@pytest.fixture
def package_logger() -> Generator[logging.Logger, None, None]:
    """Restore the package logger after each test."""
    logger = logging.getLogger(LOGGER_NAME)
    level, handlers = logger.level, list(logger.handlers)
    logger.handlers[:] = []
    yield logger
    logger.setLevel(level)
    logger.handlers[:] = handlers


def test_setup_logging_attaches_single_handler(package_logger: logging.Logger) -> None:
    setup_logging("debug")
    setup_logging("warning")

    assert len(package_logger.handlers) == 1
    assert package_logger.level == logging.WARNING
    assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING


def test_unknown_level_falls_back_to_info(package_logger: logging.Logger) -> None:
    setup_logging("chatty")
    assert package_logger.level == logging.INFO


def test_module_loggers_propagate_to_package_logger(
    package_logger: logging.Logger, caplog: pytest.LogCaptureFixture
) -> None:
    setup_logging("info")
    with caplog.at_level(logging.INFO, logger=LOGGER_NAME):
        logging.getLogger("src.services.match_service").info("session=%s created", "abc")
    assert "session=abc created" in caplog.text


def test_host_handlers_are_kept(package_logger: logging.Logger) -> None:
    host_handler = logging.NullHandler()
    package_logger.addHandler(host_handler)

    setup_logging("info")
    setup_logging("debug")

    assert host_handler in package_logger.handlers
    assert len(package_logger.handlers) == 2
