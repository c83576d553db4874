"""Logging bootstrap for the spdxtree CLI."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from spdxtree.config.models import LoggingSettings

_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(settings: LoggingSettings, *, level: str | None = None) -> None:
    """Install stderr (and optional rotating file) handlers on the package logger.

    Args:
        settings: Logging section of the effective configuration.
        level: Explicit level overriding ``settings.level``.
    """
    logger = logging.getLogger("spdxtree")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.setLevel((level or settings.level).upper())

    logger.addHandler(
        RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=False)
    )
    if settings.file:
        path = Path(settings.file).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            path,
            maxBytes=settings.max_size_mb * 1024 * 1024,
            backupCount=settings.backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(file_handler)


__all__ = ["configure_logging"]
