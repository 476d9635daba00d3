"""Stream logging shared by every module in the package."""

import logging
import sys
from typing import Optional, TextIO

PACKAGE_LOGGER_PREFIX = "report_extractor"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Stream used for handlers created from now on
_log_stream: TextIO = sys.stdout


def _level(name: str) -> int:
    return getattr(logging, name.upper())


def _package_loggers():
    for name, logger in logging.Logger.manager.loggerDict.items():
        if name.startswith(PACKAGE_LOGGER_PREFIX) and isinstance(logger, logging.Logger):
            yield logger


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """Return the logger ``name`` with a stream handler attached once.

    Args:
        name: Usually ``__name__`` of the calling module
        level: Level name; defaults to INFO

    Returns:
        logging.Logger
    """
    logger = logging.getLogger(name)
    numeric_level = _level(level or "INFO")
    logger.setLevel(numeric_level)

    if not logger.handlers:
        handler = logging.StreamHandler(_log_stream)
        handler.setLevel(numeric_level)
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)

    return logger


def set_log_level(level: str) -> None:
    """Apply ``level`` to every logger created under this package."""
    numeric_level = _level(level)
    for logger in _package_loggers():
        logger.setLevel(numeric_level)
        for handler in logger.handlers:
            handler.setLevel(numeric_level)


def configure_cli_logging(level: str, stream: Optional[TextIO] = None) -> None:
    """Send package logs to stderr (or ``stream``) so stdout carries only command output.

    Args:
        level: Level name applied to every package logger
        stream: Target stream; defaults to the current ``sys.stderr``
    """
    global _log_stream
    _log_stream = stream or sys.stderr
    for logger in _package_loggers():
        for handler in logger.handlers:
            if isinstance(handler, logging.StreamHandler):
                handler.setStream(_log_stream)
    set_log_level(level)
