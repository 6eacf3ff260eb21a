"""Loguru setup for the bookmarks CLI and embedding hosts.

The engine itself only calls ``loguru.logger``; configuring sinks is left
to whoever owns the process.  ``setup_logging`` is the default used by the
CLI: one stderr sink, an optional rotating file sink next to the data, and
stdlib ``logging`` records routed into loguru.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from loguru import logger

_STDERR_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)
_FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}"


class _InterceptHandler(logging.Handler):
    """Forward stdlib records to loguru, keeping the original call site."""

    def emit(self, record: logging.LogRecord) -> None:
        # Custom stdlib levels have no loguru name
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Skip logging's own frames so {name}:{line} point at the caller
        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame, depth = frame.f_back, depth + 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(level: str = "INFO", log_file: Path | None = None) -> None:
    """Replace loguru's default sink.  Safe to call more than once."""
    level = level.upper()

    logger.remove()
    logger.add(sys.stderr, level=level, format=_STDERR_FORMAT)
    if log_file is not None:
        logger.add(
            log_file,
            level=level,
            format=_FILE_FORMAT,
            rotation="1 MB",
            retention=3,
            encoding="utf-8",
        )

    logging.basicConfig(handlers=[_InterceptHandler()], level=0, force=True)
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    logger.debug("Logging initialised (level={}, file={})", level, log_file)
