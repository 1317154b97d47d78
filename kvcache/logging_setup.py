"""
kvcache — Logging Setup

Library modules only create loggers (``logging.getLogger(__name__)``); the
application decides where records go. ``configure_logging`` is a convenience
for scripts and examples.
"""

import logging

from .config import LogLevel, get_config

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: LogLevel | str | None = None) -> logging.Logger:
    """
    Attach a single stream handler to the ``kvcache`` logger.

    Calling it again replaces the handler instead of stacking another one.

    Args:
        level: Log level name or LogLevel (default: LOG_LEVEL from the loaded configuration)

    Returns:
        The configured package logger
    """
    if level is None:
        level = get_config().log_level
    level_name = level.value if isinstance(level, LogLevel) else str(level).upper()

    logger = logging.getLogger("kvcache")
    logger.handlers.clear()

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(level_name)

    return logger
