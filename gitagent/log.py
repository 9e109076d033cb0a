"""Logging configuration for git-agent."""

import logging
import os
from typing import Optional, Set

from rich.console import Console
from rich.logging import RichHandler

LOG_LEVEL_ENV = "GITAGENT_LOG_LEVEL"

_REGISTERED_LOGGERS: Set[logging.Logger] = set()


def _parse_level_from_env() -> Optional[int]:
    """Return the log level named in the environment, if any."""
    level_name = os.getenv(LOG_LEVEL_ENV)
    if not level_name:
        return None
    return getattr(logging, level_name.upper(), None)


def get_logger(name: str) -> logging.Logger:
    """Return a logger that renders through rich on stderr."""
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = RichHandler(
            console=Console(stderr=True),
            show_time=False,
            show_path=False,
            markup=False,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)

    env_level = _parse_level_from_env()
    logger.setLevel(env_level if env_level is not None else logging.WARNING)
    _REGISTERED_LOGGERS.add(logger)

    return logger


def set_log_level(level_name: str) -> None:
    """Set the level of every git-agent logger."""
    os.environ[LOG_LEVEL_ENV] = level_name
    level = _parse_level_from_env()
    if level is None:
        return

    for logger in _REGISTERED_LOGGERS:
        logger.setLevel(level)
