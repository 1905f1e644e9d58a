from .common import parse_iso_datetime, utc_day_bounds
from .credential import Credential, TokenStatus
from .sources import (
    CalendarSource,
    Sources,
    add_source,
    move_source,
    remove_source,
    renumber,
    sources_from_list,
)
from .calendar import NormalizedEvent, event_from_dict
from .api import SourceFailure, FormattedOutput, NoEvents, AggregationResult
from .config import AppSettings

__all__ = [
    "parse_iso_datetime",
    "utc_day_bounds",
    "Credential",
    "TokenStatus",
    "CalendarSource",
    "Sources",
    "add_source",
    "move_source",
    "remove_source",
    "renumber",
    "sources_from_list",
    "NormalizedEvent",
    "event_from_dict",
    "SourceFailure",
    "FormattedOutput",
    "NoEvents",
    "AggregationResult",
    "AppSettings"
]
