# File: daily_agenda/models/config.py
"""
Data models for Daily Agenda persisted settings.
"""

from dataclasses import dataclass, field
from daily_agenda.core.config_manager import Config
from .credential import Credential
from .sources import CalendarSource, Sources, sources_from_list

@dataclass
class AppSettings:
    """Everything the settings file stores."""
    credential: Credential = field(default_factory=Credential)
    sources: Sources = field(
        default_factory=lambda: (CalendarSource(id=Config.DEFAULT_CALENDAR_ID),)
    )

    @classmethod
    def from_dict(cls, data: dict) -> 'AppSettings':
        """Create AppSettings from the stored blob, filling gaps with defaults."""
        credential = Credential(
            client_id=str(data.get('clientId') or Config.GOOGLE_CLIENT_ID),
            client_secret=str(data.get('clientSecret') or Config.GOOGLE_CLIENT_SECRET),
            refresh_token=str(data.get('refreshToken') or ''),
            access_token=str(data.get('accessToken') or ''),
            access_token_expiry=int(data.get('accessTokenExpiry') or 0),
        )

        if 'sources' in data:
            sources = sources_from_list(data['sources'])
        elif data.get('calendarId'):
            # Single-calendar settings written before multi-calendar support
            sources = sources_from_list([{'id': data['calendarId']}])
        else:
            sources = (CalendarSource(id=Config.DEFAULT_CALENDAR_ID),)

        return cls(credential=credential, sources=sources)

    def to_dict(self) -> dict:
        """Convert to the stored blob layout."""
        return {
            'clientId': self.credential.client_id,
            'clientSecret': self.credential.client_secret,
            'refreshToken': self.credential.refresh_token,
            'accessToken': self.credential.access_token,
            'accessTokenExpiry': self.credential.access_token_expiry,
            'sources': [s.to_dict() for s in self.sources],
        }
