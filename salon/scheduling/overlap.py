"""
Overlap Detection

Half-open interval overlap shared by client booking and the admin calendar.
Two appointments conflict when they fall on the same date, both are active
(pending or confirmed) and their [start, end) spans intersect. Abutting
appointments (one ends when the other starts) do not conflict.
"""
from itertools import combinations
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .types import BookedInterval


def intervals_overlap(start: int, end: int, other_start: int, other_end: int) -> bool:
    return start < other_end and end > other_start


def conflicts(candidate: BookedInterval, existing: BookedInterval) -> bool:
    """
    True when two booked intervals collide.

    Never compares across dates, never counts cancelled or completed
    appointments, and never reports an appointment against itself.
    """
    if candidate.date != existing.date:
        return False
    if not (candidate.is_active and existing.is_active):
        return False
    if candidate.ident is not None and candidate.ident == existing.ident:
        return False
    return intervals_overlap(candidate.start, candidate.end, existing.start, existing.end)


def find_conflicts(
    candidate: BookedInterval,
    existing: Iterable[BookedInterval],
    exclude: Optional[Any] = None,
) -> List[BookedInterval]:
    """Existing intervals that collide with the candidate, in input order."""
    return [
        other for other in existing
        if (exclude is None or other.ident != exclude) and conflicts(candidate, other)
    ]


def check_overlap(
    candidate: BookedInterval,
    existing: Iterable[BookedInterval],
    exclude: Optional[Any] = None,
) -> Dict[str, Any]:
    """
    Summarise collisions for a candidate interval.

    Args:
        candidate: interval to validate
        existing: snapshot of appointments, any dates and statuses
        exclude: ident to ignore (the appointment being edited)

    Returns:
        dict: {
            "has_overlap": bool,
            "overlapping_appointments": [idents],
        }
    """
    overlapping = find_conflicts(candidate, existing, exclude=exclude)
    return {
        "has_overlap": bool(overlapping),
        "overlapping_appointments": [o.ident for o in overlapping],
    }


def find_overlapping_pairs(intervals: Iterable[BookedInterval]) -> List[Tuple[BookedInterval, BookedInterval]]:
    """Every colliding pair in a snapshot, earliest start first."""
    ordered = sorted(intervals, key=lambda i: (i.date, i.start, i.end))
    return [(a, b) for a, b in combinations(ordered, 2) if conflicts(a, b)]
