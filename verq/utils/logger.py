"""
Logging helpers.

Every module asks for its own named logger at import time with
``setup_logger("<module>")``. The level is settled later, once settings are
loaded, through ``set_log_level``.
"""
import logging
import sys
from pathlib import Path
from typing import Optional

from .config import LOG_LEVEL

DEFAULT_FORMAT = (
    "%(asctime)s - %(name)s - %(levelname)s - "
    "[%(filename)s:%(lineno)d] - %(message)s"
)

# Names handed out by setup_logger
_LOGGER_NAMES = set()


def _to_level(log_level: str) -> int:
    return getattr(logging, str(log_level).upper(), logging.INFO)


def setup_logger(
    name: str = "verq",
    log_level: str = LOG_LEVEL,
    log_file: Optional[Path] = None,
    format_string: str = DEFAULT_FORMAT
) -> logging.Logger:
    """
    Get a named logger writing to stdout and, optionally, a file.

    Calling it again for the same name returns the logger unchanged.

    Args:
        name: Logger name, usually the module's short name
        log_level: Level name such as "INFO" or "DEBUG"
        log_file: Extra file to append records to
        format_string: Record format

    Returns:
        logging.Logger
    """
    logger = logging.getLogger(name)
    if name in _LOGGER_NAMES:
        return logger

    level = _to_level(log_level)
    logger.setLevel(level)
    formatter = logging.Formatter(format_string, datefmt="%Y-%m-%d %H:%M:%S")

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, mode='a'))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    _LOGGER_NAMES.add(name)
    return logger


def set_log_level(log_level: str):
    """Apply a level to every logger created by ``setup_logger``."""
    level = _to_level(log_level)
    for name in _LOGGER_NAMES:
        logger = logging.getLogger(name)
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)
