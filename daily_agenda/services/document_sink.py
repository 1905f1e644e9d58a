# File: daily_agenda/services/document_sink.py
"""
Destinations for a rendered agenda block.
"""

import os
import sys
import tempfile
from pathlib import Path
from typing import Optional, Protocol, TextIO

from daily_agenda.core.config_manager import Config
from daily_agenda.core.exceptions import NoInsertionTargetError
from daily_agenda.utils.logger import setup_logger

logger = setup_logger(__name__)


class DocumentSink(Protocol):
    """Something that can receive the agenda text."""

    def insert(self, text: str) -> None:
        """Insert text at the current position; raise NoInsertionTargetError if there is none."""
        ...


class StdoutSink:
    """Writes the agenda to a stream (stdout by default)."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream or sys.stdout

    def insert(self, text: str) -> None:
        self.stream.write(text)
        self.stream.flush()


class MarkdownFileSink:
    """
    Inserts the agenda into an existing Markdown note.

    The first `{{agenda}}` marker acts as the cursor and is replaced;
    without a marker the block is appended at the end of the note.
    """

    def __init__(self, path: Path, marker: str = Config.INSERTION_MARKER):
        self.path = Path(path).expanduser()
        self.marker = marker

    def insert(self, text: str) -> None:
        if not self.path.is_file():
            logger.error(f"Note not found: {self.path}")
            raise NoInsertionTargetError(f"No active note open: {self.path} does not exist")

        content = self.path.read_text(encoding='utf-8')

        if self.marker in content:
            logger.debug(f"Replacing insertion marker in {self.path}")
            updated = content.replace(self.marker, text.rstrip("\n"), 1)
        else:
            logger.debug(f"Appending agenda to {self.path}")
            updated = content.rstrip("\n") + "\n\n" + text if content.strip() else text

        self._write_atomic(updated)
        logger.info(f"Agenda written to {self.path}")

    def _write_atomic(self, content: str) -> None:
        fd, tmp_path = tempfile.mkstemp(dir=str(self.path.parent), prefix=f".{self.path.name}.", suffix='.tmp')
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                f.write(content)
            os.replace(tmp_path, self.path)
        except OSError:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
