# File: daily_agenda/models/api.py
"""
Result models returned by the event aggregator.
"""

from dataclasses import dataclass, field
from typing import List, Union
from .sources import CalendarSource

@dataclass(frozen=True)
class SourceFailure:
    """A calendar that could not be read during one aggregation."""
    source: CalendarSource
    detail: str

    def __str__(self) -> str:
        return f"Calendar '{self.source.display_name()}' failed: {self.detail}"


@dataclass
class FormattedOutput:
    """Rendered agenda for a day with at least one event."""
    text: str
    event_count: int
    source_count: int
    failures: List[SourceFailure] = field(default_factory=list)

    @property
    def has_events(self) -> bool:
        return True


@dataclass
class NoEvents:
    """Every calendar answered (or failed) and none had events that day."""
    date: str
    failures: List[SourceFailure] = field(default_factory=list)

    @property
    def has_events(self) -> bool:
        return False


AggregationResult = Union[FormattedOutput, NoEvents]
