"""
Value types shared by the scheduling engine.

Times of day are handled as minute offsets from midnight internally and
converted to ``datetime.time`` at the edges.
"""
from dataclasses import dataclass
from datetime import date, time
from typing import Optional, Union

from .exceptions import InvalidIntervalError

MINUTES_PER_DAY = 24 * 60

# Statuses that occupy the calendar
ACTIVE_STATUSES = ("pending", "confirmed")

KIND_SERVICE = "service"
KIND_MANUAL = "manual"


def to_minutes(value: Union[time, str, int]) -> int:
    """Convert a time, 'HH:MM' string or minute offset to minutes from midnight."""
    if isinstance(value, int):
        return value
    if isinstance(value, time):
        return value.hour * 60 + value.minute
    if isinstance(value, str):
        hours, minutes = value.split(":")[:2]
        return int(hours) * 60 + int(minutes)
    raise TypeError(f"Cannot convert {type(value)} to minutes")


def from_minutes(minutes: int) -> time:
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise InvalidIntervalError(f"{minutes} minutes is outside a single day")
    return time(minutes // 60, minutes % 60)


def format_minutes(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


@dataclass(frozen=True)
class WorkingWindow:
    open_hour: int
    close_hour: int
    granularity_minutes: int

    @property
    def open_minutes(self) -> int:
        return self.open_hour * 60

    @property
    def close_minutes(self) -> int:
        return self.close_hour * 60


@dataclass(frozen=True)
class BookedInterval:
    """
    The scheduling view of an appointment: its day, its [start, end) span in
    minutes, its status and its variant tag.
    """
    date: date
    start: int
    end: int
    status: str = "confirmed"
    kind: str = KIND_SERVICE
    ident: Optional[int] = None

    def __post_init__(self):
        if self.end <= self.start:
            raise InvalidIntervalError(
                f"Interval {format_minutes(self.start)}-{format_minutes(self.end)} must end after it starts"
            )
        if self.end > MINUTES_PER_DAY:
            raise InvalidIntervalError("Appointments cannot span midnight")

    @classmethod
    def build(cls, day: date, start, end, status="confirmed", kind=KIND_SERVICE, ident=None):
        return cls(day, to_minutes(start), to_minutes(end), status, kind, ident)

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES

    @property
    def is_manual_event(self) -> bool:
        return self.kind == KIND_MANUAL

    @property
    def duration(self) -> int:
        return self.end - self.start
