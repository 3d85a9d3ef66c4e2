"""
Availability Service

Filters a day's candidate slots against existing bookings and the current
moment. Empty availability is a normal outcome and is returned as an empty
list.

The result reflects the snapshot handed in by the caller. Two callers holding
the same stale snapshot can both see a slot as free; committing a booking must
re-validate under the per-day lock (see salon.appointments.booking).
"""
from datetime import date, time
from typing import Iterable, List, Optional

from .clock import system_clock
from .overlap import find_conflicts
from .slots import generate_slot_minutes
from .hours import weekday_index
from .types import BookedInterval, MINUTES_PER_DAY, from_minutes, to_minutes


def get_available_slot_minutes(
    target_date: date,
    duration_minutes: int,
    existing: Iterable[BookedInterval],
    clock=None,
) -> List[int]:
    """
    Bookable start times for a date as minute offsets.

    Args:
        target_date: day being booked
        duration_minutes: aggregated length of the booking
        existing: appointments snapshot; other dates and inactive statuses
            are ignored
        clock: object with ``now()``; defaults to the system clock

    Returns:
        list[int]: ascending start offsets with no conflict

    Steps:
        1. Candidate slots for the weekday (empty when closed)
        2. Nothing for past dates; for today drop slots at or before the
           current time
        3. Drop slots whose [start, start + duration) hits an active appointment
    """
    if duration_minutes <= 0:
        return []

    candidates = generate_slot_minutes(weekday_index(target_date))
    if not candidates:
        return []

    same_day = [
        appt for appt in existing
        if appt.date == target_date and appt.is_active
    ]

    now = (clock or system_clock).now()
    if target_date < now.date():
        return []

    cutoff: Optional[int] = None
    if now.date() == target_date:
        cutoff = now.hour * 60 + now.minute

    available = []
    for start in candidates:
        if cutoff is not None and start <= cutoff:
            continue
        end = start + duration_minutes
        if end > MINUTES_PER_DAY:
            continue
        candidate = BookedInterval(target_date, start, end, status="pending")
        if find_conflicts(candidate, same_day):
            continue
        available.append(start)

    return available


def get_available_slots(
    target_date: date,
    duration_minutes: int,
    existing: Iterable[BookedInterval],
    clock=None,
) -> List[time]:
    return [
        from_minutes(m)
        for m in get_available_slot_minutes(target_date, duration_minutes, existing, clock=clock)
    ]


def is_slot_available(
    target_date: date,
    start,
    duration_minutes: int,
    existing: Iterable[BookedInterval],
    clock=None,
) -> bool:
    return to_minutes(start) in get_available_slot_minutes(
        target_date, duration_minutes, existing, clock=clock
    )
