# File: daily_agenda/processors/agenda_formatter.py
"""
Agenda ordering and rendering.
Turns normalized events from every calendar into one Markdown block.
"""

from typing import Iterable, List

from daily_agenda.core.config_manager import Config
from daily_agenda.models import NormalizedEvent


def sort_events(events: Iterable[NormalizedEvent]) -> List[NormalizedEvent]:
    """
    Merge events into their display order.

    The result does not depend on the input order except between events
    that are identical in kind, start and calendar.
    """
    return sorted(events, key=NormalizedEvent.sort_key)


def format_event(event: NormalizedEvent) -> str:
    """Render one event as a list item, plus an indented description line."""
    line = f"- **{event.title}**"
    if event.source_label:
        line += f" [{event.source_label}]"
    line += f" ({event.start_marker})"
    if event.description:
        line += f"\n  {event.description}"
    return line


def render_agenda(date_str: str, events: List[NormalizedEvent]) -> str:
    """
    Build the agenda text block for a day.

    Args:
        date_str: Day in YYYY-MM-DD format
        events: Events already in display order

    Returns:
        Header, blank line, then one item per event
    """
    lines = [Config.HEADER_TEMPLATE.format(date=date_str), ""]
    lines.extend(format_event(e) for e in events)
    return "\n".join(lines) + "\n"
