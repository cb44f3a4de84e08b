"""Unit tests for the Google Calendar REST client."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
import requests

from ats.calendar.client import GOOGLE_CALENDAR_API_URL, GoogleCalendarClient
from ats.calendar.exceptions import (
    CalendarAuthError,
    CalendarConfigurationError,
    CalendarHTTPError,
    CalendarResponseError,
    CalendarTimeoutError,
)
from ats.oauth import OAuthConfigurationError, OAuthTokenError
from tests.helpers import make_response

UTC = timezone.utc


@pytest.fixture
def session():
    session = MagicMock(spec=requests.Session)
    session.headers = {}
    return session


@pytest.fixture
def client(oauth_client, session):
    return GoogleCalendarClient(
        oauth_client=oauth_client,
        calendar_id="primary",
        timeout=15,
        user_agent="Test/1.0",
        session=session,
    )


def window():
    return datetime(2025, 3, 9, 23, 0, tzinfo=UTC), datetime(2025, 3, 10, 7, 0, tzinfo=UTC)


class TestQueryFreeBusy:
    def test_parses_busy_intervals(self, client, session):
        session.request.return_value = make_response(
            json_data={
                "calendars": {
                    "primary": {
                        "busy": [
                            {"start": "2025-03-10T00:00:00Z", "end": "2025-03-10T00:30:00Z"},
                            {"start": "2025-03-10T14:00:00+10:00", "end": "2025-03-10T15:00:00+10:00"},
                        ]
                    }
                }
            }
        )

        busy = client.query_free_busy(*window(), time_zone="Australia/Brisbane")

        assert len(busy) == 2
        assert busy[0].start == datetime(2025, 3, 10, 0, 0, tzinfo=UTC)
        assert busy[1].end == datetime(2025, 3, 10, 5, 0, tzinfo=UTC)

        kwargs = session.request.call_args.kwargs
        assert kwargs["method"] == "POST"
        assert kwargs["url"] == f"{GOOGLE_CALENDAR_API_URL}/freeBusy"
        assert kwargs["headers"] == {"Authorization": "Bearer ya29.test-token"}
        assert kwargs["timeout"] == 15
        assert kwargs["json"] == {
            "timeMin": "2025-03-09T23:00:00+00:00",
            "timeMax": "2025-03-10T07:00:00+00:00",
            "items": [{"id": "primary"}],
            "timeZone": "Australia/Brisbane",
        }

    def test_primary_echoed_under_owner_address(self, client, session):
        session.request.return_value = make_response(
            json_data={
                "calendars": {
                    "hr@acme.example": {
                        "busy": [{"start": "2025-03-10T00:00:00Z", "end": "2025-03-10T01:00:00Z"}]
                    }
                }
            }
        )

        assert len(client.query_free_busy(*window())) == 1

    def test_no_busy_time(self, client, session):
        session.request.return_value = make_response(json_data={"calendars": {"primary": {"busy": []}}})

        assert client.query_free_busy(*window()) == []

    def test_calendar_error_reported_by_provider(self, client, session):
        session.request.return_value = make_response(
            json_data={"calendars": {"primary": {"errors": [{"domain": "global", "reason": "notFound"}]}}}
        )

        with pytest.raises(CalendarResponseError, match="notFound"):
            client.query_free_busy(*window())

    def test_malformed_interval(self, client, session):
        session.request.return_value = make_response(
            json_data={"calendars": {"primary": {"busy": [{"start": "yesterday", "end": None}]}}}
        )

        with pytest.raises(CalendarResponseError):
            client.query_free_busy(*window())


class TestMakeRequest:
    def test_user_agent_on_session(self, client, session):
        assert session.headers["User-Agent"] == "Test/1.0"

    def test_missing_credentials_make_no_request(self, client, session, oauth_client):
        oauth_client.fetch_access_token.side_effect = OAuthConfigurationError(["GMAIL_CLIENT_ID"])

        with pytest.raises(CalendarConfigurationError, match="GMAIL_CLIENT_ID"):
            client.get_event("evt-1")

        session.request.assert_not_called()

    def test_token_failure(self, client, session, oauth_client):
        oauth_client.fetch_access_token.side_effect = OAuthTokenError("invalid_grant")

        with pytest.raises(CalendarAuthError):
            client.get_event("evt-1")

        session.request.assert_not_called()

    def test_unauthorized(self, client, session):
        session.request.return_value = make_response(
            status_code=401, reason="Unauthorized", json_data={"error": {"message": "Invalid Credentials"}}
        )

        with pytest.raises(CalendarAuthError, match="Invalid Credentials"):
            client.get_event("evt-1")

    def test_not_found(self, client, session):
        session.request.return_value = make_response(
            status_code=404, reason="Not Found", json_data={"error": {"message": "Not Found"}}
        )

        with pytest.raises(CalendarHTTPError) as exc_info:
            client.get_event("evt-1")

        assert exc_info.value.status_code == 404
        assert exc_info.value.url.endswith("/calendars/primary/events/evt-1")

    def test_timeout(self, client, session):
        session.request.side_effect = requests.exceptions.Timeout("slow")

        with pytest.raises(CalendarTimeoutError):
            client.list_calendars()

    def test_connection_error(self, client, session):
        session.request.side_effect = requests.exceptions.ConnectionError("refused")

        with pytest.raises(CalendarHTTPError) as exc_info:
            client.list_calendars()

        assert exc_info.value.status_code == 0

    def test_invalid_json(self, client, session):
        response = make_response()
        response.content = b"<html>"
        session.request.return_value = response

        with pytest.raises(CalendarResponseError):
            client.list_calendars()


class TestEvents:
    def test_insert_with_conference(self, client, session):
        session.request.return_value = make_response(json_data={"id": "evt-1"})

        assert client.insert_event({"summary": "x"}, conference=True) == {"id": "evt-1"}

        kwargs = session.request.call_args.kwargs
        assert kwargs["method"] == "POST"
        assert kwargs["url"] == f"{GOOGLE_CALENDAR_API_URL}/calendars/primary/events"
        assert kwargs["params"] == {"sendUpdates": "all", "conferenceDataVersion": "1"}
        assert kwargs["json"] == {"summary": "x"}

    def test_insert_without_conference(self, client, session):
        session.request.return_value = make_response(json_data={"id": "evt-1"})

        client.insert_event({"summary": "x"})

        assert session.request.call_args.kwargs["params"] == {"sendUpdates": "all"}

    def test_patch(self, client, session):
        session.request.return_value = make_response(json_data={"id": "evt-1"})

        client.patch_event("evt-1", {"description": "d"})

        kwargs = session.request.call_args.kwargs
        assert kwargs["method"] == "PATCH"
        assert kwargs["url"].endswith("/calendars/primary/events/evt-1")

    def test_delete_handles_empty_body(self, client, session):
        session.request.return_value = make_response(status_code=204)

        assert client.delete_event("evt-1") is None

        kwargs = session.request.call_args.kwargs
        assert kwargs["method"] == "DELETE"
        assert kwargs["params"] == {"sendUpdates": "all"}

    def test_calendar_id_is_url_encoded(self, oauth_client, session):
        client = GoogleCalendarClient(oauth_client, calendar_id="hr@acme.example", session=session)
        session.request.return_value = make_response(json_data={"id": "evt-1"})

        client.get_event("evt-1")

        assert "/calendars/hr%40acme.example/events/evt-1" in session.request.call_args.kwargs["url"]

    def test_list_calendars(self, client, session):
        session.request.return_value = make_response(
            json_data={"items": [{"id": "primary", "summary": "HR"}]}
        )

        assert client.list_calendars() == [{"id": "primary", "summary": "HR"}]
        assert session.request.call_args.kwargs["url"].endswith("/users/me/calendarList")
