# File: daily_agenda/services/calendar_service.py

from typing import Any, Dict, List
from googleapiclient.discovery import Resource

from daily_agenda.utils.logger import setup_logger

logger = setup_logger(__name__)


class GoogleCalendarService:
    """Read-only access to Google Calendar event lists."""

    def __init__(self, calendar_service: Resource):
        """
        Initialize calendar service.

        Args:
            calendar_service: Authenticated Google Calendar API resource
        """
        self.service = calendar_service

    def list_events(
        self,
        calendar_id: str,
        time_min: str,
        time_max: str
    ) -> List[Dict[str, Any]]:
        """
        Fetch the events of one calendar inside a time window.

        Recurring events come back expanded into single instances, ordered
        by start time.

        Args:
            calendar_id: "primary" or a calendar address
            time_min: ISO-8601 UTC lower bound
            time_max: ISO-8601 UTC upper bound

        Returns:
            Raw event resources (empty when the response has no items)

        Raises:
            googleapiclient.errors.HttpError: On API errors
        """
        logger.debug(f"Listing events for calendar {calendar_id} between {time_min} and {time_max}")

        events_result = self.service.events().list(
            calendarId=calendar_id,
            timeMin=time_min,
            timeMax=time_max,
            singleEvents=True,
            orderBy='startTime'
        ).execute()

        events = events_result.get('items') or []
        logger.info(f"Found {len(events)} events in calendar {calendar_id}")
        return events
