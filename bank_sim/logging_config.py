"""Logging configuration utilities for bank_sim.

The library is silent by default (a NullHandler is attached to the
``bank_sim`` logger). Enable output explicitly:

    import bank_sim
    bank_sim.enable_console_logging(level="DEBUG")

or through the environment:

    BANK_SIM_LOGGING=DEBUG python -m experiments.run_experiments
"""

from __future__ import annotations

import logging
import os
from typing import Literal, Optional

__all__ = [
    "configure_from_env",
    "disable_logging",
    "enable_console_logging",
    "set_level",
]

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOGGER_NAME = "bank_sim"
ENV_VAR = "BANK_SIM_LOGGING"

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _get_level(level: str | int) -> int:
    """Convert a level string or int to a logging level constant."""
    if isinstance(level, int):
        return level
    return getattr(logging, level.upper(), logging.INFO)


def _get_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)


def _clear_handlers() -> None:
    """Remove and close every handler except the NullHandler."""
    logger = _get_logger()
    for handler in logger.handlers[:]:
        if not isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)
            handler.close()


def enable_console_logging(
    level: LogLevel | int = "INFO",
    format: str = DEFAULT_FORMAT,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> logging.StreamHandler:
    """Enable console (stderr) logging for bank_sim.

    Args:
        level: Log level name or int.
        format: Log message format string.
        date_format: Date format string for %(asctime)s.

    Returns:
        The created StreamHandler.
    """
    logger = _get_logger()
    logger.setLevel(_get_level(level))

    handler = logging.StreamHandler()
    handler.setLevel(_get_level(level))
    handler.setFormatter(logging.Formatter(format, date_format))

    logger.addHandler(handler)
    return handler


def set_level(level: LogLevel | int) -> None:
    """Change the level of the bank_sim logger and all its handlers."""
    logger = _get_logger()
    logger.setLevel(_get_level(level))
    for handler in logger.handlers:
        handler.setLevel(_get_level(level))


def disable_logging() -> None:
    """Drop every configured handler, returning the library to silence."""
    _clear_handlers()
    _get_logger().setLevel(logging.WARNING)


def configure_from_env() -> Optional[logging.StreamHandler]:
    """Enable console logging when BANK_SIM_LOGGING names a level."""
    level = os.environ.get(ENV_VAR)
    if not level:
        return None
    _clear_handlers()
    return enable_console_logging(level=level.upper())
