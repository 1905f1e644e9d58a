# File: daily_agenda/core/settings_store.py
"""
JSON settings file holding the OAuth credential and the calendar list.
Writes are atomic so a crash never leaves a half-written token behind.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Optional

from daily_agenda.core.config_manager import Config
from daily_agenda.core.exceptions import ConfigurationError
from daily_agenda.models.config import AppSettings
from daily_agenda.models.credential import Credential
from daily_agenda.utils.logger import setup_logger

logger = setup_logger(__name__)


class SettingsStore:
    """Load/save pair over a single JSON file."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else Config.SETTINGS_FILE

    def load(self) -> AppSettings:
        """
        Read settings, falling back to defaults when the file does not exist.

        Raises:
            ConfigurationError: If the file exists but cannot be parsed
        """
        if not self.path.exists():
            logger.debug(f"No settings file at {self.path}, using defaults")
            return AppSettings.from_dict({})

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Could not read settings file {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Settings file {self.path} does not contain a JSON object")

        try:
            return AppSettings.from_dict(data)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid settings in {self.path}: {e}") from e

    def save(self, settings: AppSettings) -> None:
        """
        Write settings atomically (temp file + rename).

        Raises:
            ConfigurationError: If the file cannot be written
        """
        tmp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                mode='w',
                dir=str(self.path.parent),
                prefix=f".{self.path.name}.",
                suffix='.tmp',
                delete=False,
                encoding='utf-8'
            ) as tmp:
                tmp_path = tmp.name
                json.dump(settings.to_dict(), tmp, indent=2)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.chmod(tmp_path, 0o600)
            os.replace(tmp_path, self.path)
            tmp_path = None
            logger.debug(f"Settings saved to {self.path}")
        except OSError as e:
            raise ConfigurationError(f"Could not write settings file {self.path}: {e}") from e
        finally:
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)

    def save_credential(self, settings: AppSettings, credential: Credential) -> None:
        """Persist a new credential alongside the current sources."""
        self.save(AppSettings(credential=credential, sources=settings.sources))
