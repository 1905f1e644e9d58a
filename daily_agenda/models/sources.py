# File: daily_agenda/models/sources.py
"""
Configured calendar sources and the list operations used to edit them.

Every operation returns a new tuple; `order` always equals the position
in the tuple after an edit.
"""

from dataclasses import dataclass, replace
from typing import Iterable, Tuple

from daily_agenda.core.config_manager import Config

@dataclass(frozen=True)
class CalendarSource:
    """One remote calendar to pull events from."""
    id: str
    label: str = ""
    order: int = 0

    def display_name(self) -> str:
        """Label when set, calendar id otherwise."""
        return self.label or self.id

    def to_dict(self) -> dict:
        return {'id': self.id, 'label': self.label}


Sources = Tuple[CalendarSource, ...]


def renumber(sources: Iterable[CalendarSource]) -> Sources:
    """Assign `order` from list position."""
    return tuple(
        source if source.order == index else replace(source, order=index)
        for index, source in enumerate(sources)
    )


def sources_from_list(data: list) -> Sources:
    """Build sources from the stored list of {'id', 'label'} dicts."""
    sources = []
    for item in data or []:
        if isinstance(item, str):
            item = {'id': item}
        calendar_id = str(item.get('id') or '').strip()
        if not calendar_id:
            continue
        sources.append(CalendarSource(id=calendar_id, label=str(item.get('label') or '').strip()))
    return renumber(sources)


def add_source(sources: Sources, calendar_id: str, label: str = "") -> Sources:
    """
    Append a calendar to the end of the list.

    Raises:
        ValueError: If the calendar is already configured
    """
    calendar_id = calendar_id.strip() or Config.DEFAULT_CALENDAR_ID
    if any(s.id == calendar_id for s in sources):
        raise ValueError(f"Calendar already configured: {calendar_id}")
    return renumber(tuple(sources) + (CalendarSource(id=calendar_id, label=label.strip()),))


def remove_source(sources: Sources, index: int) -> Sources:
    """
    Drop the calendar at `index`.

    Raises:
        IndexError: If index is out of range
    """
    if not 0 <= index < len(sources):
        raise IndexError(f"No calendar at position {index}")
    return renumber(sources[:index] + sources[index + 1:])


def move_source(sources: Sources, index: int, offset: int) -> Sources:
    """
    Move the calendar at `index` by `offset` positions, clamped to the list bounds.

    Raises:
        IndexError: If index is out of range
    """
    if not 0 <= index < len(sources):
        raise IndexError(f"No calendar at position {index}")
    target = max(0, min(len(sources) - 1, index + offset))
    remaining = sources[:index] + sources[index + 1:]
    return renumber(remaining[:target] + (sources[index],) + remaining[target:])
