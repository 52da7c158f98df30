"""Application-wide logger writing to platformdirs user_log_dir.

Modules log through ``logging.getLogger(__name__)``. Those loggers live under
the ``sentience_cli`` namespace, so once a command calls ``get_logger()`` they
share its rotating file handler. Set ``SENTIENCE_LOG_LEVEL`` (e.g. ``INFO``)
to make the log quieter.
"""

from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path

from platformdirs import user_log_dir

_APP_NAME = "sentience_cli"
_LOG_FILE = "sentience.log"
_MAX_BYTES = 5 * 1024 * 1024  # 5 MB
_BACKUP_COUNT = 3
_LEVEL_ENV = "SENTIENCE_LOG_LEVEL"

_logger: logging.Logger | None = None


def _resolve_level() -> int:
    name = os.environ.get(_LEVEL_ENV, "DEBUG").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.DEBUG


def get_log_path() -> Path:
    """Location of the current log file."""
    return Path(user_log_dir(_APP_NAME)) / _LOG_FILE


def _build_file_handler() -> logging.Handler:
    log_path = get_log_path()
    log_path.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.handlers.RotatingFileHandler(
        log_path,
        maxBytes=_MAX_BYTES,
        backupCount=_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )
    return handler


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the application logger, initialising it on first call.

    Handlers other code attached to the ``sentience_cli`` logger (pytest's
    caplog, a host application) are kept; the rotating file handler is
    added unless one is already there.

    With ``name`` the matching child logger (``sentience_cli.<name>``) is
    returned instead; it writes through the application logger's handler.
    """
    global _logger
    if _logger is None:
        logger = logging.getLogger(_APP_NAME)
        logger.setLevel(_resolve_level())
        if not any(
            isinstance(h, logging.handlers.RotatingFileHandler) for h in logger.handlers
        ):
            logger.addHandler(_build_file_handler())
        logger.propagate = False
        _logger = logger

    if name:
        return _logger.getChild(name)
    return _logger
