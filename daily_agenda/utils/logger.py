# File: logger.py
"""
Centralized logging configuration for Daily Agenda.
"""

import logging
import sys
from datetime import datetime
from typing import Optional

from daily_agenda.core.config_manager import Config

def setup_logger(name: str = "daily_agenda", level: Optional[int] = None) -> logging.Logger:
    """
    Configure and return a logger instance.

    Args:
        name: Logger name
        level: Logging level (default: Config.LOG_LEVEL)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Prevent duplicate handlers
    if logger.handlers:
        return logger

    if level is None:
        level = logging.getLevelName(Config.LOG_LEVEL)
        if not isinstance(level, int):
            level = logging.INFO

    logger.setLevel(level)

    # Console handler on stderr; stdout carries the agenda
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)

    # Detailed format for console
    console_format = logging.Formatter(
        '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
        datefmt='%H:%M:%S'
    )
    console_handler.setFormatter(console_format)
    logger.addHandler(console_handler)

    # File handler for persistent logs
    try:
        Config.LOG_DIR.mkdir(parents=True, exist_ok=True)
    except OSError:
        # Read-only working directory: console logging only
        return logger

    log_file = Config.LOG_DIR / f"daily_agenda_{datetime.now().strftime('%Y%m%d')}.log"
    file_handler = logging.FileHandler(log_file, encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)

    # More detailed format for file
    file_format = logging.Formatter(
        '%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    file_handler.setFormatter(file_format)
    logger.addHandler(file_handler)

    return logger


class LoggerMixin:
    """Mixin to add logging capability to any class."""

    @property
    def logger(self) -> logging.Logger:
        """Get logger for this class."""
        if not hasattr(self, '_logger'):
            self._logger = setup_logger(f"daily_agenda.{self.__class__.__name__}")
        return self._logger
