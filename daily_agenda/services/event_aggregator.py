# File: daily_agenda/services/event_aggregator.py
"""
Multi-calendar event aggregation.
Fetches one day from every configured calendar, merges and renders it.
"""

import datetime
from typing import Callable, List, Optional, Sequence, Tuple, Union

from googleapiclient.errors import HttpError

from daily_agenda.core.exceptions import NoSourcesConfiguredError
from daily_agenda.models import (
    AggregationResult,
    CalendarSource,
    FormattedOutput,
    NoEvents,
    NormalizedEvent,
    SourceFailure,
    event_from_dict,
    utc_day_bounds,
)
from daily_agenda.processors.agenda_formatter import render_agenda, sort_events
from daily_agenda.services.calendar_service import GoogleCalendarService
from daily_agenda.services.service_factory import ServiceFactory
from daily_agenda.utils.logger import LoggerMixin


def _describe_http_error(error: HttpError) -> str:
    status = getattr(error.resp, 'status', '?')
    return f"HTTP {status}: {error.reason}"


def _fetch_source(
    calendar: GoogleCalendarService,
    source: CalendarSource,
    time_min: str,
    time_max: str
) -> Tuple[List[NormalizedEvent], Optional[SourceFailure]]:
    """Fetch and normalize one calendar, turning any failure into a SourceFailure."""
    try:
        raw_events = calendar.list_events(source.id, time_min, time_max)
        return [event_from_dict(raw, source) for raw in raw_events], None
    except HttpError as e:
        return [], SourceFailure(source=source, detail=_describe_http_error(e))
    except Exception as e:
        return [], SourceFailure(source=source, detail=str(e) or e.__class__.__name__)


def collect_events(
    calendar: GoogleCalendarService,
    sources: Sequence[CalendarSource],
    time_min: str,
    time_max: str
) -> Tuple[List[NormalizedEvent], List[SourceFailure]]:
    """
    Query each calendar in configured order.

    A calendar that fails is recorded in the failure list and contributes
    no events; the remaining calendars are still queried.

    Returns:
        (normalized events in fetch order, failures in source order)
    """
    events: List[NormalizedEvent] = []
    failures: List[SourceFailure] = []

    for source in sources:
        source_events, failure = _fetch_source(calendar, source, time_min, time_max)
        events.extend(source_events)
        if failure:
            failures.append(failure)

    return events, failures


class EventAggregator(LoggerMixin):
    """Builds the agenda for one UTC day across several calendars."""

    def __init__(
        self,
        service_factory: Callable[[str], GoogleCalendarService] = ServiceFactory.create_calendar_service
    ):
        """
        Initialize the aggregator.

        Args:
            service_factory: Builds a calendar client from an access token
        """
        self.service_factory = service_factory

    def fetch_and_format(
        self,
        date: Union[datetime.date, str],
        sources: Sequence[CalendarSource],
        access_token: str
    ) -> AggregationResult:
        """
        Fetch, merge, sort and render one day of events.

        Args:
            date: Day to fetch (date or YYYY-MM-DD string)
            sources: Calendars in configured order
            access_token: Valid bearer token

        Returns:
            FormattedOutput, or NoEvents when no calendar had anything that day.
            Calendars that failed are listed in the result's `failures`.

        Raises:
            NoSourcesConfiguredError: If `sources` is empty
        """
        date_str = date if isinstance(date, str) else date.strftime("%Y-%m-%d")
        time_min, time_max = utc_day_bounds(date_str)

        if not sources:
            raise NoSourcesConfiguredError()

        self.logger.info(f"Fetching events for {date_str} from {len(sources)} calendar(s)")

        calendar = self.service_factory(access_token)
        events, failures = collect_events(calendar, sources, time_min, time_max)

        for failure in failures:
            self.logger.warning(str(failure))
        if failures:
            self.logger.warning(f"{len(failures)} of {len(sources)} calendar(s) failed")

        if not events:
            self.logger.info(f"No events on {date_str}")
            return NoEvents(date=date_str, failures=failures)

        ordered = sort_events(events)
        text = render_agenda(date_str, ordered)

        self.logger.info(f"Rendered {len(ordered)} event(s) for {date_str}")
        return FormattedOutput(
            text=text,
            event_count=len(ordered),
            source_count=len(sources) - len(failures),
            failures=failures,
        )
