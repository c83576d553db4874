"""Tests for the logging bootstrap."""

import logging
from pathlib import Path

from spdxtree.config.models import LoggingSettings
from spdxtree.log import configure_logging


def test_configure_logging_writes_rotating_file(tmp_path: Path) -> None:
    log_path = tmp_path / "logs" / "spdxtree.log"
    logger = logging.getLogger("spdxtree")

    try:
        configure_logging(LoggingSettings(level="WARNING", file=str(log_path)), level="info")
        logging.getLogger("spdxtree.collection.collector").info("collected %d files", 3)
        for handler in logger.handlers:
            handler.flush()

        assert logger.level == logging.INFO
        assert "collected 3 files" in log_path.read_text(encoding="utf-8")
    finally:
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        logger.setLevel(logging.NOTSET)


def test_configure_logging_replaces_previous_handlers() -> None:
    logger = logging.getLogger("spdxtree")

    try:
        configure_logging(LoggingSettings())
        configure_logging(LoggingSettings(level="debug"))

        assert len(logger.handlers) == 1
        assert logger.level == logging.DEBUG
    finally:
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        logger.setLevel(logging.NOTSET)
