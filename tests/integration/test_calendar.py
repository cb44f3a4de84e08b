"""Integration tests for interview availability.

Runs the real availability service and calendar client against a mocked
HTTP session.
"""

from datetime import date
from unittest.mock import MagicMock

import pytest
import requests

from ats.calendar import GoogleCalendarClient, InterviewAvailabilityService
from ats.config.models import CalendarConfig
from ats.oauth import GoogleOAuthClient
from tests.helpers import make_response


@pytest.fixture
def http_session():
    session = MagicMock(spec=requests.Session)
    session.headers = {}
    session.post.return_value = make_response(json_data={"access_token": "ya29.cal"})
    return session


@pytest.fixture
def service(http_session):
    oauth_client = GoogleOAuthClient("id", "secret", "refresh", session=http_session)
    client = GoogleCalendarClient(oauth_client, session=http_session)
    return InterviewAvailabilityService(client, CalendarConfig(timezone="Australia/Brisbane"))


def test_busy_time_from_provider_marks_slots(service, http_session):
    # 10:15-10:45 Brisbane, reported in UTC
    http_session.request.return_value = make_response(
        json_data={
            "calendars": {
                "primary": {"busy": [{"start": "2025-03-10T00:15:00Z", "end": "2025-03-10T00:45:00Z"}]}
            }
        }
    )

    slots = service.get_available_slots(date(2025, 3, 10))

    assert len(slots) == 16
    assert [s.time for s in slots if not s.available] == ["10:00 AM", "10:30 AM"]
    body = http_session.request.call_args.kwargs["json"]
    assert body["timeMin"] == "2025-03-10T09:00:00+10:00"
    assert body["timeMax"] == "2025-03-10T17:00:00+10:00"
    assert http_session.request.call_args.kwargs["headers"] == {"Authorization": "Bearer ya29.cal"}


def test_provider_outage_is_reported(service, http_session):
    http_session.request.return_value = make_response(status_code=503, reason="Service Unavailable")

    result = service.query_availability(date(2025, 3, 10))

    assert result.ok is False
    assert result.slots == []
    assert service.get_available_slots(date(2025, 3, 10)) == []


def test_missing_credentials_make_no_requests(http_session):
    oauth_client = GoogleOAuthClient(None, None, None, session=http_session)
    service = InterviewAvailabilityService(GoogleCalendarClient(oauth_client, session=http_session))

    result = service.query_availability(date(2025, 3, 10))

    assert result.ok is False
    assert "GMAIL_CLIENT_ID" in result.error
    http_session.post.assert_not_called()
    http_session.request.assert_not_called()
