"""Logging configuration for Si Core."""

import logging
import sys

from si.config import LOG_LEVEL


def setup_logging(level: int | str = LOG_LEVEL) -> logging.Logger:
    """Configure and return the "si" logger.

    Level names such as "DEBUG" are accepted as well as numeric levels.
    Calling it again only changes the level; the stdout handler is added once.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger("si")
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    for handler in logger.handlers:
        handler.setLevel(level)

    return logger


logger = setup_logging()
