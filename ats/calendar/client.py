"""Thin REST client for the Google Calendar v3 API.

Every request obtains a fresh access token from the shared
GoogleOAuthClient and sends it as a bearer token. Provider and transport
failures are translated into the CalendarError hierarchy.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests

from ats.logging import get_logger
from ats.oauth import GoogleOAuthClient, OAuthConfigurationError, OAuthTokenError

from .exceptions import (
    CalendarAuthError,
    CalendarConfigurationError,
    CalendarHTTPError,
    CalendarResponseError,
    CalendarTimeoutError,
)
from .models import BusyInterval

logger = get_logger(__name__, component="calendar")

GOOGLE_CALENDAR_API_URL = "https://www.googleapis.com/calendar/v3"


class GoogleCalendarClient:
    """Calendar API client bound to one calendar.

    Attributes:
        calendar_id: Calendar to read and write ("primary" for the token owner)
        timeout: HTTP request timeout in seconds
        user_agent: User-Agent header for HTTP requests
    """

    def __init__(
        self,
        oauth_client: GoogleOAuthClient,
        calendar_id: str = "primary",
        timeout: float = 30,
        user_agent: str = "ATSNotifications/1.0",
        session: Optional[requests.Session] = None,
        api_url: str = GOOGLE_CALENDAR_API_URL,
    ) -> None:
        self.oauth_client = oauth_client
        self.calendar_id = calendar_id
        self.timeout = timeout
        self.user_agent = user_agent
        self.api_url = api_url.rstrip("/")

        self._session = session or requests.Session()
        self._session.headers.update({"User-Agent": self.user_agent})

    def query_free_busy(
        self,
        time_min: datetime,
        time_max: datetime,
        time_zone: Optional[str] = None,
    ) -> List[BusyInterval]:
        """Busy intervals of the calendar between two instants.

        Raises:
            CalendarError: On request failure or when the provider reports an
                error for this calendar
        """
        body: Dict[str, Any] = {
            "timeMin": time_min.isoformat(),
            "timeMax": time_max.isoformat(),
            "items": [{"id": self.calendar_id}],
        }
        if time_zone:
            body["timeZone"] = time_zone

        data = self._make_request("POST", "/freeBusy", json_data=body)

        calendars = data.get("calendars") or {}
        entry = calendars.get(self.calendar_id)
        if entry is None and len(calendars) == 1:
            # "primary" is echoed back under the owner's address
            entry = next(iter(calendars.values()))
        entry = entry or {}

        errors = entry.get("errors")
        if errors:
            reasons = ", ".join(str(err.get("reason", "unknown")) for err in errors)
            raise CalendarResponseError(
                f"Free/busy query failed for calendar '{self.calendar_id}': {reasons}"
            )

        busy = []
        for item in entry.get("busy") or []:
            start = self._parse_timestamp(item.get("start"))
            end = self._parse_timestamp(item.get("end"))
            if start is None or end is None:
                raise CalendarResponseError(f"Malformed busy interval in free/busy response: {item}")
            busy.append(BusyInterval(start=start, end=end))

        logger.debug(
            f"Free/busy returned {len(busy)} busy interval(s)",
            extra={"event": "calendar.freebusy.success", "busy_count": len(busy)},
        )
        return busy

    def insert_event(self, body: Dict[str, Any], conference: bool = False) -> Dict[str, Any]:
        """Create an event and notify attendees."""
        return self._make_request(
            "POST",
            self._events_path(),
            params=self._write_params(conference),
            json_data=body,
        )

    def get_event(self, event_id: str) -> Dict[str, Any]:
        return self._make_request("GET", self._events_path(event_id))

    def patch_event(
        self,
        event_id: str,
        body: Dict[str, Any],
        conference: bool = False,
    ) -> Dict[str, Any]:
        """Apply a partial update and notify attendees."""
        return self._make_request(
            "PATCH",
            self._events_path(event_id),
            params=self._write_params(conference),
            json_data=body,
        )

    def delete_event(self, event_id: str) -> None:
        self._make_request(
            "DELETE",
            self._events_path(event_id),
            params={"sendUpdates": "all"},
        )

    def list_calendars(self) -> List[Dict[str, Any]]:
        """Calendars visible to the token owner."""
        data = self._make_request("GET", "/users/me/calendarList")
        return data.get("items") or []

    def _events_path(self, event_id: Optional[str] = None) -> str:
        path = f"/calendars/{quote(self.calendar_id, safe='')}/events"
        if event_id is not None:
            path += f"/{quote(event_id, safe='')}"
        return path

    @staticmethod
    def _write_params(conference: bool) -> Dict[str, str]:
        params = {"sendUpdates": "all"}
        if conference:
            params["conferenceDataVersion"] = "1"
        return params

    def _authorization_header(self) -> Dict[str, str]:
        try:
            token = self.oauth_client.fetch_access_token()
        except OAuthConfigurationError as e:
            raise CalendarConfigurationError(str(e)) from e
        except OAuthTokenError as e:
            raise CalendarAuthError(f"Could not obtain calendar access token: {e}") from e
        return {"Authorization": f"Bearer {token.token}"}

    def _make_request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, str]] = None,
        json_data: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Make an authenticated request with error handling.

        Args:
            method: HTTP method
            path: API path below the base URL
            params: Query parameters
            json_data: JSON body

        Returns:
            Parsed JSON response, or an empty dict for empty bodies

        Raises:
            CalendarConfigurationError: OAuth credentials are missing (no request made)
            CalendarAuthError: Token exchange failed or the API returned 401
            CalendarHTTPError: On other 4xx/5xx statuses or connection failures
            CalendarTimeoutError: On request timeout
            CalendarResponseError: On invalid JSON
        """
        url = f"{self.api_url}{path}"
        headers = self._authorization_header()

        try:
            logger.debug(
                f"HTTP {method} request to {url}",
                extra={
                    "event": "calendar.request",
                    "method": method,
                    "url": url,
                    "timeout": self.timeout,
                },
            )

            response = self._session.request(
                method=method,
                url=url,
                headers=headers,
                params=params,
                json=json_data,
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            logger.warning(
                f"Request to {url} timed out after {self.timeout} seconds",
                extra={"event": "calendar.request.timeout", "url": url, "timeout": self.timeout},
            )
            raise CalendarTimeoutError(
                f"Request to {url} timed out after {self.timeout} seconds",
                url=url,
            ) from e
        except requests.exceptions.RequestException as e:
            logger.error(
                f"Request to {url} failed: {e}",
                extra={
                    "event": "calendar.request.error",
                    "error_type": type(e).__name__,
                    "url": url,
                },
            )
            raise CalendarHTTPError(f"Request to {url} failed: {e}", status_code=0, url=url) from e

        if response.status_code >= 400:
            log_level = logging.WARNING if response.status_code >= 500 else logging.ERROR
            detail = self._error_detail(response)
            logger.log(
                log_level,
                f"HTTP {response.status_code} error from {url}",
                extra={
                    "event": "calendar.request.error",
                    "status_code": response.status_code,
                    "url": url,
                },
            )
            message = f"HTTP {response.status_code}: {detail or response.reason}"
            if response.status_code == 401:
                raise CalendarAuthError(message)
            raise CalendarHTTPError(message, status_code=response.status_code, url=url)

        if response.status_code == 204 or not response.content:
            return {}

        try:
            data = response.json()
        except ValueError as e:
            logger.error(
                f"Failed to parse JSON response from {url}",
                extra={"event": "calendar.request.error", "error_type": "JSONDecodeError", "url": url},
            )
            raise CalendarResponseError(f"Failed to parse JSON response from {url}: {e}") from e

        if not isinstance(data, dict):
            raise CalendarResponseError(f"Unexpected response shape from {url}")
        return data

    @staticmethod
    def _error_detail(response: requests.Response) -> Optional[str]:
        try:
            payload = response.json()
        except ValueError:
            return None
        if isinstance(payload, dict) and isinstance(payload.get("error"), dict):
            return payload["error"].get("message")
        return None

    @staticmethod
    def _parse_timestamp(timestamp_str: Optional[str]) -> Optional[datetime]:
        """Parse an RFC 3339 timestamp to an aware datetime."""
        if not timestamp_str:
            return None
        normalized = timestamp_str
        if normalized.endswith("Z"):
            normalized = normalized[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(normalized)
        except ValueError:
            return None
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return dt
