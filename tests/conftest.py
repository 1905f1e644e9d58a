# File: tests/conftest.py
"""
Pytest configuration and shared fixtures.
Provides reusable test data and mocks for all tests.
"""

import os
import sys
import tempfile
from pathlib import Path
from unittest.mock import Mock

import pytest

# Keep tests away from the user's real settings, logs and .env values
_TEST_HOME = Path(tempfile.mkdtemp(prefix="daily_agenda_tests_"))
os.environ["DAILY_AGENDA_LOG_DIR"] = str(_TEST_HOME / "logs")
os.environ["DAILY_AGENDA_SETTINGS"] = str(_TEST_HOME / "settings.json")
os.environ["GOOGLE_CLIENT_ID"] = ""
os.environ["GOOGLE_CLIENT_SECRET"] = ""

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from daily_agenda.models import AppSettings, CalendarSource, Credential
from daily_agenda.services.calendar_service import GoogleCalendarService


NOW_MS = 1_710_489_600_000  # 2024-03-15T08:00:00Z


# ==================== Credential Fixtures ====================

@pytest.fixture
def now_ms():
    """Fixed clock value in epoch milliseconds."""
    return NOW_MS


@pytest.fixture
def clock(now_ms):
    """Clock callable returning the fixed time."""
    return lambda: now_ms


@pytest.fixture
def unauthenticated_credential():
    """Client configured but OAuth never completed."""
    return Credential(client_id="client-123.apps.googleusercontent.com", client_secret="shh")


@pytest.fixture
def stale_credential(now_ms):
    """Authenticated credential whose access token expires inside the buffer."""
    return Credential(
        client_id="client-123.apps.googleusercontent.com",
        client_secret="shh",
        refresh_token="refresh-abc",
        access_token="old-access",
        access_token_expiry=now_ms + 30_000,
    )


@pytest.fixture
def fresh_credential(now_ms):
    """Authenticated credential with a token valid for another hour."""
    return Credential(
        client_id="client-123.apps.googleusercontent.com",
        client_secret="shh",
        refresh_token="refresh-abc",
        access_token="live-access",
        access_token_expiry=now_ms + 3_600_000,
    )


# ==================== Source Fixtures ====================

@pytest.fixture
def work_source():
    return CalendarSource(id="primary", label="Work", order=0)


@pytest.fixture
def personal_source():
    return CalendarSource(id="me@example.com", label="Personal", order=1)


@pytest.fixture
def family_source():
    return CalendarSource(id="family@group.calendar.google.com", label="Family", order=2)


@pytest.fixture
def three_sources(work_source, personal_source, family_source):
    return (work_source, personal_source, family_source)


@pytest.fixture
def settings(fresh_credential, work_source, personal_source):
    return AppSettings(credential=fresh_credential, sources=(work_source, personal_source))


# ==================== Event Fixtures ====================

@pytest.fixture
def standup_event():
    """Timed event as returned by the Calendar API."""
    return {
        'summary': 'Standup',
        'start': {'dateTime': '2024-03-15T09:00:00Z'},
        'end': {'dateTime': '2024-03-15T09:15:00Z'},
    }


@pytest.fixture
def birthday_event():
    """All-day event as returned by the Calendar API."""
    return {
        'summary': 'Birthday',
        'start': {'date': '2024-03-15'},
        'end': {'date': '2024-03-16'},
    }


@pytest.fixture
def review_event():
    """Timed event with an offset and a description."""
    return {
        'summary': 'Quarterly review',
        'description': 'Bring the numbers',
        'start': {'dateTime': '2024-03-15T14:30:00+01:00'},
        'end': {'dateTime': '2024-03-15T15:30:00+01:00'},
    }


# ==================== Service Mocks ====================

def make_calendar(responses: dict) -> Mock:
    """
    Mock GoogleCalendarService answering per calendar id.

    Values are either a list of raw events or an exception to raise.
    """
    calendar = Mock(spec=GoogleCalendarService)

    def list_events(calendar_id, time_min, time_max):
        value = responses.get(calendar_id, [])
        if isinstance(value, Exception):
            raise value
        return value

    calendar.list_events.side_effect = list_events
    return calendar


@pytest.fixture
def calendar_factory():
    """Build a mock calendar plus a service factory returning it."""
    def _factory(responses: dict):
        calendar = make_calendar(responses)
        service_factory = Mock(return_value=calendar)
        return calendar, service_factory
    return _factory


def token_response(payload=None, status_code=200, json_error=None) -> Mock:
    """Mock requests.Response from the token endpoint."""
    response = Mock()
    response.status_code = status_code
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = payload
    return response


@pytest.fixture
def make_token_response():
    """Builder for token endpoint responses."""
    return token_response
