# app/services/scheduling/__init__.py
from .time_utils import Weekday, parse_hhmm, to_minutes, format_minutes
from .slots import SlotWindow, generate_slots
from .overlap import overlaps, find_conflicts, is_slot_available

__all__ = [
    "Weekday",
    "parse_hhmm",
    "to_minutes",
    "format_minutes",
    "SlotWindow",
    "generate_slots",
    "overlaps",
    "find_conflicts",
    "is_slot_available",
]
