"""
Working Hours Policy

Fixed business rule mapping a weekday to the studio's working window.
Weekday indexes count from Sunday (0) to Saturday (6).
"""
from datetime import date
from typing import Optional

from .types import WorkingWindow

SUNDAY, MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY, SATURDAY = range(7)

WEEKDAY_WINDOW = WorkingWindow(open_hour=8, close_hour=20, granularity_minutes=30)
FRIDAY_WINDOW = WorkingWindow(open_hour=8, close_hour=14, granularity_minutes=30)

WORKING_HOURS = {
    SUNDAY: WEEKDAY_WINDOW,
    MONDAY: WEEKDAY_WINDOW,
    TUESDAY: WEEKDAY_WINDOW,
    WEDNESDAY: WEEKDAY_WINDOW,
    THURSDAY: WEEKDAY_WINDOW,
    FRIDAY: FRIDAY_WINDOW,
    SATURDAY: None,
}


def weekday_index(day: date) -> int:
    """Sunday-based weekday index of a date (Python's weekday() starts on Monday)."""
    return day.isoweekday() % 7


def get_working_window(weekday: int) -> Optional[WorkingWindow]:
    """
    Return the working window for a weekday, or None when the studio is closed.

    Raises:
        ValueError: weekday outside 0..6
    """
    if weekday not in WORKING_HOURS:
        raise ValueError(f"weekday must be between 0 (Sunday) and 6 (Saturday), got {weekday}")
    return WORKING_HOURS[weekday]


def get_working_window_for_date(day: date) -> Optional[WorkingWindow]:
    return get_working_window(weekday_index(day))
