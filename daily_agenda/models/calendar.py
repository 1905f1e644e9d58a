# File: daily_agenda/models/calendar.py

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from daily_agenda.core.config_manager import Config
from .common import parse_iso_datetime
from .sources import CalendarSource

@dataclass(frozen=True)
class NormalizedEvent:
    """A calendar event reduced to what the agenda needs."""
    title: str
    is_all_day: bool
    start_instant: Optional[datetime]
    raw_start_label: str
    source_label: str
    source_order: int
    description: Optional[str] = None

    @property
    def start_marker(self) -> str:
        """Text shown in parentheses after the title."""
        return Config.ALL_DAY_LABEL if self.is_all_day else self.raw_start_label

    def sort_key(self) -> tuple:
        """
        All-day before timed, then by start instant, then by configured
        calendar order. Events whose start could not be resolved sort after
        the resolved ones of the same kind.
        """
        return (
            0 if self.is_all_day else 1,
            self.start_instant is None,
            self.start_instant.timestamp() if self.start_instant else 0.0,
            self.source_order,
        )


def event_from_dict(data: dict, source: CalendarSource) -> NormalizedEvent:
    """Create NormalizedEvent from a Google Calendar API event resource."""
    start = data.get('start') or {}
    start_date_time = start.get('dateTime')
    start_date = start.get('date')
    raw_start = start_date_time or start_date or ''

    return NormalizedEvent(
        title=data.get('summary') or Config.NO_TITLE,
        is_all_day=not start_date_time,
        start_instant=parse_iso_datetime(raw_start),
        raw_start_label=raw_start,
        description=data.get('description') or None,
        source_label=source.label,
        source_order=source.order,
    )
