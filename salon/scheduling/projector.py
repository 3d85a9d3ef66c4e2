"""
Calendar Projection

Maps an appointment's time span to a vertical position on a day column:
``offset`` from the top of the first displayed hour and ``extent`` (height).
No clipping is done; spans outside the displayed hours project outside it.
"""
from dataclasses import dataclass

from .types import to_minutes

DEFAULT_BASE_HOUR = 8
DEFAULT_HOUR_HEIGHT = 80
DEFAULT_INSET = 8


@dataclass(frozen=True)
class Projection:
    offset: float
    extent: float
    raw_extent: float


def project(start, end, hour_height=DEFAULT_HOUR_HEIGHT, base_hour=DEFAULT_BASE_HOUR, inset=DEFAULT_INSET):
    """
    Project [start, end) onto the calendar grid.

    offset = (start_hour - base_hour) * H + start_minute / 60 * H
    extent = duration_in_hours * H - inset, never below zero
    """
    start_minutes = to_minutes(start)
    end_minutes = to_minutes(end)

    offset = (start_minutes // 60 - base_hour) * hour_height + (start_minutes % 60) / 60 * hour_height
    raw_extent = max(0, end_minutes - start_minutes) / 60 * hour_height
    extent = max(0.0, raw_extent - inset)

    return Projection(offset=offset, extent=extent, raw_extent=raw_extent)
