"""
Tests for scheduling/slots.py

Tests discrete slot generation for UI display.
"""
import unittest

from app.core.exceptions import ValidationError
from app.services.scheduling.slots import SlotWindow, generate_slots


class TestSlots(unittest.TestCase):
    """Tests for slot generation functions."""

    def test_full_working_day(self):
        """09:00-18:00 in 30 minute steps gives 18 slots."""
        slots = generate_slots("09:00", "18:00", 30)

        self.assertEqual(len(slots), 18)
        self.assertEqual(slots[0].start_time, "09:00")
        self.assertEqual(slots[0].end_time, "09:30")
        self.assertEqual(slots[-1].start_time, "17:30")
        self.assertEqual(slots[-1].end_time, "18:00")

    def test_slots_are_contiguous(self):
        slots = generate_slots("10:00", "16:00", 45)
        for previous, current in zip(slots, slots[1:]):
            self.assertEqual(previous.end, current.start)

    def test_last_slot_may_overrun_window(self):
        """A window that is not a multiple of the duration keeps the partial slot."""
        slots = generate_slots("09:00", "10:15", 30)

        self.assertEqual([s.start_time for s in slots], ["09:00", "09:30", "10:00"])
        self.assertEqual(slots[-1].end_time, "10:30")

    def test_empty_window(self):
        self.assertEqual(generate_slots("12:00", "12:00"), [])
        self.assertEqual(generate_slots("18:00", "09:00"), [])

    def test_rejects_non_positive_duration(self):
        with self.assertRaises(ValidationError):
            generate_slots("09:00", "18:00", 0)

    def test_rejects_malformed_time(self):
        with self.assertRaises(ValidationError):
            generate_slots("9am", "18:00")

    def test_slot_window_is_half_open_minutes(self):
        self.assertEqual(SlotWindow(540, 570), (540, 570))
