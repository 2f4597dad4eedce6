# app/services/scheduling/slots.py
"""
Slot Generation

Cuts a working window into fixed-length candidate slots.
"""
from typing import List, NamedTuple

from app.core.exceptions import ValidationError
from app.services.scheduling.time_utils import to_minutes, format_minutes


class SlotWindow(NamedTuple):
    """A candidate slot as minutes-of-day, half-open: [start, end)"""
    start: int
    end: int

    @property
    def start_time(self) -> str:
        return format_minutes(self.start)

    @property
    def end_time(self) -> str:
        return format_minutes(self.end)


def generate_slots(start_time: str, end_time: str, slot_duration: int = 30) -> List[SlotWindow]:
    """
    Generate consecutive slots covering a working window.

    The first slot starts at start_time and each slot starts where the
    previous one ended. Generation stops once a slot would start at or after
    end_time, so the final slot can run past end_time when the window is not
    a multiple of slot_duration.

    Args:
        start_time: window opening, HH:MM
        end_time: window closing, HH:MM
        slot_duration: slot length in minutes

    Returns:
        Ordered list of SlotWindow; empty when end_time <= start_time

    Raises:
        ValidationError: malformed times or a non-positive slot_duration
    """
    if slot_duration <= 0:
        raise ValidationError("Slot duration must be a positive number of minutes")

    window_start = to_minutes(start_time)
    window_end = to_minutes(end_time)

    slots = []
    current = window_start
    while current < window_end:
        slots.append(SlotWindow(current, current + slot_duration))
        current += slot_duration

    return slots
