from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional

from ..config import get_settings

LOG_FILE_NAME = "calendar_state.log"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
MAX_LOG_BYTES = 1_000_000
LOG_BACKUPS = 5

_INITIALIZED = False


def _build_handlers(log_file: Path) -> List[logging.Handler]:
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: List[logging.Handler] = [
        RotatingFileHandler(str(log_file), maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUPS, encoding="utf-8"),
        logging.StreamHandler(),
    ]
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def configure_logging(level: Optional[str] = None, *, log_dir: Optional[Path] = None) -> Path:
    """Install a console handler and a rotating ``calendar_state.log`` on the root logger.

    Only the first call has an effect; later calls return the log path without
    touching the handlers.
    """

    global _INITIALIZED
    settings = get_settings().logging
    log_file = (log_dir or settings.log_dir) / LOG_FILE_NAME
    if _INITIALIZED:
        return log_file

    log_file.parent.mkdir(parents=True, exist_ok=True)
    root = logging.getLogger()
    root.setLevel(getattr(logging, (level or settings.level).upper(), logging.INFO))
    for handler in _build_handlers(log_file):
        root.addHandler(handler)

    _INITIALIZED = True
    logging.getLogger(__name__).debug("Logging to %s at %s", log_file, logging.getLevelName(root.level))
    return log_file


__all__ = ["configure_logging"]
