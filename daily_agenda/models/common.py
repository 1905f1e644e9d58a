# File: daily_agenda/models/common.py

from datetime import datetime
from typing import Optional

import pytz

def parse_iso_datetime(date_str: Optional[str]) -> Optional[datetime]:
    """
    Robustly parse Google Calendar date/dateTime strings into aware datetimes.

    Date-only values (all-day events) become midnight UTC; date-times without
    an offset are taken as UTC.
    """
    if not date_str:
        return None
    try:
        # specific fix for Python < 3.11 which doesn't handle 'Z' natively in fromisoformat
        clean_str = date_str.replace('Z', '+00:00')
        parsed = datetime.fromisoformat(clean_str)
    except ValueError:
        # Fallback for simple date strings without time
        try:
            parsed = datetime.strptime(date_str, "%Y-%m-%d")
        except ValueError:
            return None

    if parsed.tzinfo is None:
        parsed = pytz.utc.localize(parsed)
    return parsed


def utc_day_bounds(date_str: str) -> tuple[str, str]:
    """Return (timeMin, timeMax) covering one UTC calendar day."""
    return f"{date_str}T00:00:00Z", f"{date_str}T23:59:59Z"
