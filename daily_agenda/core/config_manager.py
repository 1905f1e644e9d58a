# File: daily_agenda/core/config_manager.py
"""
Centralized configuration management for Daily Agenda.
Loads settings from environment variables and the .env file.
"""

import os
import re
from pathlib import Path
from typing import List
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

class Config:
    """Application configuration singleton."""

    # Base directories
    BASE_DIR = Path(__file__).parent.parent.parent  # Go up 3 levels from daily_agenda/core/
    LOG_DIR = Path(os.getenv("DAILY_AGENDA_LOG_DIR", "logs"))
    LOG_LEVEL = os.getenv("DAILY_AGENDA_LOG_LEVEL", "INFO").upper()

    # Files
    SETTINGS_FILE = Path(
        os.getenv("DAILY_AGENDA_SETTINGS", str(Path.home() / ".daily_agenda" / "settings.json"))
    ).expanduser()
    ENV_FILE = BASE_DIR / ".env"

    # OAuth client (fallbacks when the settings file has no values)
    GOOGLE_CLIENT_ID = os.getenv("GOOGLE_CLIENT_ID", "")
    GOOGLE_CLIENT_SECRET = os.getenv("GOOGLE_CLIENT_SECRET", "")

    # Google endpoints
    AUTH_URI = "https://accounts.google.com/o/oauth2/v2/auth"
    TOKEN_URI = "https://oauth2.googleapis.com/token"
    REDIRECT_URI = os.getenv("GOOGLE_REDIRECT_URI", "urn:ietf:wg:oauth:2.0:oob")
    GOOGLE_SCOPES = [
        'https://www.googleapis.com/auth/calendar.readonly',
    ]

    # Token lifecycle
    EXPIRY_BUFFER_MS = 60_000       # access token must outlive now by one minute
    DEFAULT_EXPIRES_IN = 3600       # seconds, when the provider omits expires_in
    REQUEST_TIMEOUT = 60            # seconds, handed to the HTTP transport

    # Agenda rendering
    DEFAULT_CALENDAR_ID = "primary"
    NO_TITLE = "(No title)"
    ALL_DAY_LABEL = "All day"
    HEADER_TEMPLATE = "## Calendar Events for {date}"
    INSERTION_MARKER = "{{agenda}}"

    DATE_PATTERNS = [
        ("%Y-%m-%d", re.compile(r"^\d{4}-\d{2}-\d{2}$")),    # 2025-11-18
        ("%Y/%m/%d", re.compile(r"^\d{4}/\d{2}/\d{2}$")),    # 2025/11/18
        ("%d-%m-%Y", re.compile(r"^\d{2}-\d{2}-\d{4}$")),    # 18-11-2025
        ("%d.%m.%Y", re.compile(r"^\d{2}\.\d{2}\.\d{4}$")),  # 18.11.2025
        ("%Y.%m.%d", re.compile(r"^\d{4}\.\d{2}\.\d{2}$")),  # 2025.11.18
    ]

    @classmethod
    def validate(cls, settings) -> List[str]:
        """
        Check that a loaded AppSettings is ready for fetching.

        Args:
            settings: AppSettings instance

        Returns:
            List of human-readable problems (empty when valid)
        """
        errors = []
        credential = settings.credential

        if not credential.client_id:
            errors.append("Client ID not set (run 'daily-agenda set-client' or set GOOGLE_CLIENT_ID)")

        if not credential.client_secret:
            errors.append("Client secret not set (run 'daily-agenda set-client' or set GOOGLE_CLIENT_SECRET)")

        if not credential.refresh_token:
            errors.append("Not authenticated (run 'daily-agenda auth-url' then 'daily-agenda exchange CODE')")

        if not settings.sources:
            errors.append("No calendars configured (run 'daily-agenda sources add primary')")

        return errors
