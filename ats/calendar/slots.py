"""Interview slot enumeration and busy-interval overlap.

The working day is fixed: 09:00 to 17:00 local time in 30-minute steps,
which always yields 16 slots. Busy data only flips availability; it never
adds or removes slots.
"""

from datetime import date, datetime, time, timedelta, tzinfo
from typing import Iterable, List, Tuple

from .models import BusyInterval, TimeSlot

WORKDAY_START = time(9, 0)
WORKDAY_END = time(17, 0)
SLOT_MINUTES = 30


def generate_slot_bounds(day: date, tz: tzinfo) -> List[Tuple[datetime, datetime]]:
    """Start and end of every slot in the working day, in ``tz``."""
    step = timedelta(minutes=SLOT_MINUTES)
    current = datetime.combine(day, WORKDAY_START, tzinfo=tz)
    day_end = datetime.combine(day, WORKDAY_END, tzinfo=tz)

    bounds = []
    while current + step <= day_end:
        bounds.append((current, current + step))
        current += step
    return bounds


def overlaps(
    slot_start: datetime,
    slot_end: datetime,
    busy_start: datetime,
    busy_end: datetime,
) -> bool:
    """True if a slot and a busy interval overlap.

    Either the slot start falls inside the busy interval, the slot end falls
    inside it, or the busy interval lies entirely within the slot. Touching
    endpoints do not overlap.
    """
    return (
        (busy_start <= slot_start < busy_end)
        or (busy_start < slot_end <= busy_end)
        or (slot_start <= busy_start and slot_end >= busy_end)
    )


def format_slot_label(moment: datetime) -> str:
    """12-hour clock label without a leading zero, e.g. "9:00 AM"."""
    hour = moment.hour % 12 or 12
    suffix = "AM" if moment.hour < 12 else "PM"
    return f"{hour}:{moment.minute:02d} {suffix}"


def build_time_slots(day: date, tz: tzinfo, busy: Iterable[BusyInterval]) -> List[TimeSlot]:
    """Mark each slot of ``day`` available unless a busy interval overlaps it.

    Args:
        day: Calendar date in the ``tz`` timezone
        tz: Timezone the working day is defined in
        busy: Busy intervals (any timezone; compared as aware datetimes)

    Returns:
        16 TimeSlots ordered from 09:00 to 16:30
    """
    busy = list(busy)
    slots = []
    for start, end in generate_slot_bounds(day, tz):
        taken = any(overlaps(start, end, b.start, b.end) for b in busy)
        slots.append(
            TimeSlot(time=format_slot_label(start), start=start, end=end, available=not taken)
        )
    return slots
