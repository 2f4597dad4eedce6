# app/services/scheduling/overlap.py
"""
Overlap Detection

One interval rule for every availability path: bookings occupy the
half-open interval [booking_time, booking_time + duration). Touching
boundaries never conflict.
"""
from typing import Iterable, List, TypeVar

from app.services.scheduling.time_utils import to_minutes

T = TypeVar("T")


def overlaps(a_start: int, a_end: int, b_start: int, b_end: int) -> bool:
    """True when [a_start, a_end) and [b_start, b_end) share at least one minute"""
    if a_end <= a_start or b_end <= b_start:
        # Empty intervals occupy nothing
        return False
    return a_start < b_end and a_end > b_start


def booking_interval(booking) -> tuple:
    """(start, end) minutes-of-day occupied by anything with booking_time and duration"""
    start = to_minutes(booking.booking_time)
    return start, start + int(booking.duration or 0)


def find_conflicts(start: int, end: int, bookings: Iterable[T]) -> List[T]:
    """Bookings whose interval overlaps the candidate [start, end)"""
    conflicts = []
    for booking in bookings:
        booking_start, booking_end = booking_interval(booking)
        if overlaps(start, end, booking_start, booking_end):
            conflicts.append(booking)
    return conflicts


def is_slot_available(slot, bookings: Iterable) -> bool:
    """A slot is available when no existing booking overlaps it"""
    return not find_conflicts(slot.start, slot.end, bookings)
