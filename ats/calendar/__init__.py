"""Interview availability and scheduling on Google Calendar.

This module provides:
- InterviewAvailabilityService: slot availability and interview events
- GoogleCalendarClient: authenticated Calendar v3 REST calls
- CalendarError and subclasses: every failure the package raises
"""

from .client import GOOGLE_CALENDAR_API_URL, GoogleCalendarClient
from .exceptions import (
    CalendarAuthError,
    CalendarConfigurationError,
    CalendarError,
    CalendarHTTPError,
    CalendarResponseError,
    CalendarTimeoutError,
)
from .models import AvailabilityResult, BusyInterval, EventResult, TimeSlot
from .service import VIDEO_LOCATION, InterviewAvailabilityService
from .slots import SLOT_MINUTES, WORKDAY_END, WORKDAY_START, build_time_slots, overlaps

__all__ = [
    "InterviewAvailabilityService",
    "GoogleCalendarClient",
    "GOOGLE_CALENDAR_API_URL",
    "VIDEO_LOCATION",
    "TimeSlot",
    "BusyInterval",
    "EventResult",
    "AvailabilityResult",
    "build_time_slots",
    "overlaps",
    "WORKDAY_START",
    "WORKDAY_END",
    "SLOT_MINUTES",
    "CalendarError",
    "CalendarHTTPError",
    "CalendarTimeoutError",
    "CalendarResponseError",
    "CalendarAuthError",
    "CalendarConfigurationError",
]
