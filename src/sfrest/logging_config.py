from __future__ import annotations

import logging
import os
from typing import Optional

_DEFAULT_FMT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_DEFAULT_DATEFMT = "%H:%M:%S"

# Libraries whose DEBUG output would otherwise drown ours (and echo headers).
_QUIET_LOGGERS = ("urllib3.connection", "urllib3.connectionpool")


def _level_from_env() -> int:
    name = os.getenv("SF_LOG_LEVEL", "").upper()
    level = logging.getLevelName(name) if name else logging.WARNING
    return level if isinstance(level, int) else logging.WARNING


def configure_logging(level: Optional[int]) -> None:
    """Configure root logging once; safe to call multiple times.

    ``level`` comes from the CLI's -v/-vv flags. Without a flag the
    SF_LOG_LEVEL environment variable is used, then WARNING.
    """
    lvl = level if level is not None else _level_from_env()
    root = logging.getLogger()

    if root.handlers:
        # Logging already configured elsewhere, just adjust the level.
        root.setLevel(lvl)
    else:
        logging.basicConfig(
            level=lvl,
            format=_DEFAULT_FMT,
            datefmt=_DEFAULT_DATEFMT,
        )

    for name in _QUIET_LOGGERS:
        lib_logger = logging.getLogger(name)
        if lib_logger.level == logging.NOTSET or lib_logger.level < logging.WARNING:
            lib_logger.setLevel(logging.WARNING)
