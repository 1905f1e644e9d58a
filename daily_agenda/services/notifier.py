# File: daily_agenda/services/notifier.py
"""
User-facing status messages.
"""

import sys
from typing import Optional, Protocol, TextIO

from daily_agenda.utils.logger import setup_logger

logger = setup_logger(__name__)


class Notifier(Protocol):
    """Fire-and-forget status channel."""

    def info(self, message: str) -> None: ...

    def success(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class ConsoleNotifier:
    """Prints short status lines to stderr and mirrors them to the log."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream or sys.stderr

    def _emit(self, icon: str, message: str) -> None:
        print(f"{icon} {message}", file=self.stream)

    def info(self, message: str) -> None:
        logger.info(message)
        self._emit("ℹ️", message)

    def success(self, message: str) -> None:
        logger.info(message)
        self._emit("✅", message)

    def warning(self, message: str) -> None:
        logger.warning(message)
        self._emit("⚠️", message)

    def error(self, message: str) -> None:
        logger.error(message)
        self._emit("❌", message)
