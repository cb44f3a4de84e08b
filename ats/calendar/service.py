"""Interview availability and scheduling on Google Calendar.

Availability is computed fresh on every call from the provider's free/busy
data; nothing is cached or stored. Event writes always notify attendees.
"""

import logging
import uuid
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional, Union
from zoneinfo import ZoneInfo

from ats.config.models import CalendarConfig
from ats.domain.models import InterviewRequest, InterviewUpdate
from ats.logging import get_logger
from ats.logging.context import log_context

from .client import GoogleCalendarClient
from .exceptions import CalendarError
from .models import AvailabilityResult, EventResult, TimeSlot
from .slots import WORKDAY_END, WORKDAY_START, build_time_slots

logger = get_logger(__name__, component="calendar")

VIDEO_LOCATION = "Google Meet (details in description)"
INTERVIEW_COLOR_ID = "2"
EMAIL_REMINDER_MINUTES = 24 * 60
POPUP_REMINDER_MINUTES = 30


class InterviewAvailabilityService:
    """Finds free interview slots and manages interview events.

    Naive datetimes are interpreted in the configured calendar timezone.

    Attributes:
        client: Calendar API client
        config: Calendar settings (timezone, default duration)
        tz: Timezone the working day and events are expressed in
    """

    def __init__(
        self,
        client: GoogleCalendarClient,
        config: Optional[CalendarConfig] = None,
        logger_instance: Optional[logging.Logger] = None,
    ) -> None:
        self.client = client
        self.config = config or CalendarConfig()
        self.tz = ZoneInfo(self.config.timezone)
        self.logger = logger_instance or logger

    @property
    def default_duration(self) -> timedelta:
        return timedelta(minutes=self.config.interview_duration_minutes)

    def get_available_slots(self, day: Union[date, datetime]) -> List[TimeSlot]:
        """All 16 slots of the working day with their availability.

        Returns:
            Ordered slots from 09:00 to 16:30, or an empty list when the
            calendar could not be read
        """
        return self.query_availability(day).slots

    def query_availability(self, day: Union[date, datetime]) -> AvailabilityResult:
        """Like get_available_slots, but reports provider failures.

        Returns:
            AvailabilityResult whose ``error`` is set when the free/busy query
            failed; ``slots`` is then empty
        """
        day = self._as_local_date(day)
        time_min = datetime.combine(day, WORKDAY_START, tzinfo=self.tz)
        time_max = datetime.combine(day, WORKDAY_END, tzinfo=self.tz)

        with log_context(calendar_date=day.isoformat()):
            try:
                busy = self.client.query_free_busy(time_min, time_max, self.config.timezone)
            except CalendarError as e:
                self.logger.error(
                    f"Error getting available time slots: {e}",
                    extra={"event": "calendar.availability.error", "error_type": type(e).__name__},
                )
                return AvailabilityResult(date=day, slots=[], error=str(e))

            slots = build_time_slots(day, self.tz, busy)
            self.logger.info(
                f"{sum(1 for s in slots if s.available)} of {len(slots)} slots available",
                extra={"event": "calendar.availability.success", "busy_count": len(busy)},
            )
            return AvailabilityResult(date=day, slots=slots)

    def check_availability(self, start: datetime, end: datetime) -> bool:
        """True if the calendar has no busy time between start and end.

        Provider failures count as not available.
        """
        try:
            busy = self.client.query_free_busy(self._localize(start), self._localize(end))
        except CalendarError as e:
            self.logger.error(
                f"Error checking availability: {e}",
                extra={"event": "calendar.availability.error", "error_type": type(e).__name__},
            )
            return False
        return not busy

    def create_event(self, request: InterviewRequest) -> EventResult:
        """Book an interview and invite the candidate and interviewer.

        Args:
            request: Interview details; ``end`` defaults to start plus the
                configured duration (45 minutes)

        Returns:
            EventResult with the new event id and Meet link for video interviews

        Raises:
            CalendarError: If the event could not be created
        """
        start = self._localize(request.start)
        end = self._localize(request.end) if request.end else start + self.default_duration

        body: Dict[str, Any] = {
            "summary": f"Interview: {request.candidate_name} - {request.position}",
            "description": self._description(request.position, request.notes),
            "start": self._event_time(start),
            "end": self._event_time(end),
            "attendees": [
                {"email": request.candidate_email, "displayName": request.candidate_name},
                {"email": request.interviewer_email, "displayName": request.interviewer_name},
            ],
            "colorId": INTERVIEW_COLOR_ID,
            "reminders": {
                "useDefault": False,
                "overrides": [
                    {"method": "email", "minutes": EMAIL_REMINDER_MINUTES},
                    {"method": "popup", "minutes": POPUP_REMINDER_MINUTES},
                ],
            },
        }
        if request.is_video_interview:
            body["conferenceData"] = self._conference_request()
            body["location"] = VIDEO_LOCATION
        elif request.location:
            body["location"] = request.location

        with log_context(application_id=request.application_id):
            try:
                event = self.client.insert_event(body, conference=request.is_video_interview)
            except CalendarError as e:
                self.logger.error(
                    f"Error creating interview event: {e}",
                    extra={"event": "calendar.event.create.error", "error_type": type(e).__name__},
                )
                raise

            event_id = event.get("id") or ""
            self.logger.info(
                f"Created interview event {event_id}",
                extra={
                    "event": "calendar.event.created",
                    "event_id": event_id,
                    "video": request.is_video_interview,
                },
            )
            return EventResult(event_id=event_id, video_link=self._video_link(event))

    def update_event(self, event_id: str, changes: InterviewUpdate) -> EventResult:
        """Patch an existing interview event.

        Only the fields set on ``changes`` are sent. New notes rebuild the
        description around ``changes.position`` or the position in the
        existing summary. Switching to video adds a Meet conference if the
        event has none; switching to in-person removes it.

        Raises:
            CalendarError: If the event could not be read or updated
        """
        with log_context(event_id=event_id):
            try:
                existing = self.client.get_event(event_id)
                body = self._build_patch(existing, changes)
                event = self.client.patch_event(
                    event_id, body, conference=changes.is_video_interview is not None
                )
            except CalendarError as e:
                self.logger.error(
                    f"Error updating interview event: {e}",
                    extra={"event": "calendar.event.update.error", "error_type": type(e).__name__},
                )
                raise

            self.logger.info(
                f"Updated interview event {event_id}",
                extra={"event": "calendar.event.updated", "fields": sorted(body)},
            )
            return EventResult(
                event_id=event.get("id") or event_id,
                video_link=self._video_link(event),
            )

    def cancel_event(self, event_id: str) -> bool:
        """Delete an interview event and notify attendees.

        Returns:
            True on success, False if the provider call failed
        """
        with log_context(event_id=event_id):
            try:
                self.client.delete_event(event_id)
            except CalendarError as e:
                self.logger.error(
                    f"Error canceling interview: {e}",
                    extra={"event": "calendar.event.cancel.error", "error_type": type(e).__name__},
                )
                return False

            self.logger.info("Cancelled interview event", extra={"event": "calendar.event.cancelled"})
            return True

    def get_event(self, event_id: str) -> Optional[Dict[str, Any]]:
        """Raw event resource, or None if it could not be fetched."""
        try:
            return self.client.get_event(event_id)
        except CalendarError as e:
            self.logger.error(
                f"Error getting interview event: {e}",
                extra={"event": "calendar.event.get.error", "event_id": event_id},
            )
            return None

    def list_calendars(self) -> List[Dict[str, Any]]:
        """Calendars visible to the authorized account.

        Raises:
            CalendarError: If the list could not be fetched
        """
        return self.client.list_calendars()

    def _build_patch(self, existing: Dict[str, Any], changes: InterviewUpdate) -> Dict[str, Any]:
        body: Dict[str, Any] = {}

        if changes.start is not None:
            body["start"] = self._event_time(self._localize(changes.start))
        if changes.end is not None:
            body["end"] = self._event_time(self._localize(changes.end))

        if changes.notes:
            position = changes.position or self._position_from_summary(existing.get("summary"))
            body["description"] = self._description(position, changes.notes)

        if changes.is_video_interview is not None:
            if changes.is_video_interview:
                if not existing.get("conferenceData"):
                    body["conferenceData"] = self._conference_request()
                body["location"] = VIDEO_LOCATION
            else:
                body["conferenceData"] = None
                body["location"] = changes.location or existing.get("location")
        elif changes.location:
            body["location"] = changes.location

        return body

    def _as_local_date(self, day: Union[date, datetime]) -> date:
        if isinstance(day, datetime):
            if day.tzinfo is not None:
                day = day.astimezone(self.tz)
            return day.date()
        return day

    def _localize(self, moment: datetime) -> datetime:
        if moment.tzinfo is None:
            return moment.replace(tzinfo=self.tz)
        return moment

    def _event_time(self, moment: datetime) -> Dict[str, str]:
        return {"dateTime": moment.isoformat(), "timeZone": self.config.timezone}

    @staticmethod
    def _description(position: Optional[str], notes: Optional[str]) -> str:
        return f"Interview for the {position} position.\n\n{notes or ''}"

    @staticmethod
    def _position_from_summary(summary: Optional[str]) -> Optional[str]:
        # Summaries are written as "Interview: <candidate> - <position>"
        if not summary or " - " not in summary:
            return None
        return summary.split(" - ", 1)[1]

    @staticmethod
    def _conference_request() -> Dict[str, Any]:
        return {
            "createRequest": {
                "requestId": f"interview-{uuid.uuid4().hex}",
                "conferenceSolutionKey": {"type": "hangoutsMeet"},
            }
        }

    @staticmethod
    def _video_link(event: Dict[str, Any]) -> Optional[str]:
        entry_points = (event.get("conferenceData") or {}).get("entryPoints") or []
        if entry_points:
            return entry_points[0].get("uri") or None
        return None
