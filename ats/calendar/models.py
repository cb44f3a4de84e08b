"""Value objects returned by the availability service."""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class BusyInterval:
    """Half-open busy period ``[start, end)`` reported by free/busy."""

    start: datetime
    end: datetime


@dataclass(frozen=True)
class TimeSlot:
    """One 30-minute interview slot.

    Attributes:
        time: Display label in local time, e.g. "9:00 AM"
        start: Slot start (timezone-aware)
        end: Slot end (timezone-aware)
        available: False when any busy interval overlaps the slot
    """

    time: str
    start: datetime
    end: datetime
    available: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "time": self.time,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "available": self.available,
        }


@dataclass(frozen=True)
class EventResult:
    """Identifier of a created or updated event and its Meet link, if any."""

    event_id: str
    video_link: Optional[str] = None


@dataclass
class AvailabilityResult:
    """Slots for one day plus the provider error, if the query failed.

    An empty ``slots`` list with ``error`` set means the calendar could not be
    read. A fully booked day still has 16 slots, all unavailable.
    """

    date: date
    slots: List[TimeSlot] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def available_slots(self) -> List[TimeSlot]:
        return [slot for slot in self.slots if slot.available]
