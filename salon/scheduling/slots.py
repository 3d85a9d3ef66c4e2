"""
Slot Generation

Enumerates candidate start times inside a working window at the window's
granularity. The last slot starts one step before closing time.
"""
from datetime import date, time
from typing import List

from .hours import get_working_window, weekday_index
from .types import from_minutes


def generate_slot_minutes(weekday: int) -> List[int]:
    """
    Candidate start times for a weekday as minute offsets.

    Returns:
        list[int]: ascending offsets covering [open, close), empty when closed
    """
    window = get_working_window(weekday)
    if window is None:
        return []

    return list(range(
        window.open_minutes,
        window.close_minutes,
        window.granularity_minutes,
    ))


def generate_slots(weekday: int) -> List[time]:
    return [from_minutes(m) for m in generate_slot_minutes(weekday)]


def generate_slots_for_date(day: date) -> List[time]:
    return generate_slots(weekday_index(day))


def is_on_slot_grid(day: date, start) -> bool:
    """True when a start time is one of the generated slots for that day."""
    return start in generate_slots_for_date(day)
