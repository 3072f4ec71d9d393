"""
Logging configuration for ledgersheet.

Every module logs through a child of the "ledgersheet" logger. The stdout
handler is installed on that root once, and the run's level is applied there
by configure_logging.
"""
import logging
import os
import sys
from typing import Optional

ROOT_LOGGER_NAME = "ledgersheet"
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _resolve_level(level: Optional[str]) -> str:
    log_level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    if log_level not in VALID_LOG_LEVELS:
        return "INFO"
    return log_level


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Configure the application root logger.

    Safe to call more than once: the handler is added only the first time,
    later calls just change the level.

    Args:
        level: Log level name. Defaults to env LOG_LEVEL or INFO.

    Returns:
        The root application logger
    """
    log_level = _resolve_level(level)

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(log_level)
    root.propagate = False

    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
        root.addHandler(handler)

    return root


def setup_logger(name: str) -> logging.Logger:
    """
    Get a module logger under the application root.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Child logger that inherits the root's level and handler
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not root.handlers:
        configure_logging()

    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return root.getChild(name)
