"""Root logger setup for the NiceTimer entry points.

Library modules only ever call ``logging.getLogger(__name__)``; handlers
are installed once, by whoever owns the process.
"""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path

from .database.db import APP_SUPPORT_DIR

LOG_DIR = APP_SUPPORT_DIR / "logs"
LOG_FILE = LOG_DIR / "nicetimer.log"

_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    level: int | str = logging.INFO,
    log_file: Path | None = LOG_FILE,
) -> logging.Logger:
    """Configure the root logger with a rotating file and a console handler.

    Pass ``log_file=None`` to log to the console only.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger()  # root
    logger.setLevel(level)

    # Clear duplicate handlers if reinit
    for h in list(logger.handlers):
        logger.removeHandler(h)

    fmt = logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.handlers.RotatingFileHandler(
            log_file, maxBytes=1_000_000, backupCount=3, encoding="utf-8"
        )
        fh.setFormatter(fmt)
        fh.setLevel(level)
        logger.addHandler(fh)

    ch = logging.StreamHandler()
    ch.setFormatter(fmt)
    ch.setLevel(level)
    logger.addHandler(ch)

    logger.debug("NiceTimer logging initialised (%s)", log_file or "console")
    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger under the ``nicetimer`` namespace."""
    return logging.getLogger(name or "nicetimer")
