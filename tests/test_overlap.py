"""
Tests for scheduling/overlap.py

Tests the half-open interval rule used by every availability path.
"""
import unittest
from types import SimpleNamespace

from app.services.scheduling.overlap import find_conflicts, is_slot_available, overlaps
from app.services.scheduling.slots import SlotWindow


def booking(time, duration, booking_id=1):
    return SimpleNamespace(id=booking_id, booking_time=time, duration=duration)


class TestOverlaps(unittest.TestCase):
    """Tests for overlap detection functions."""

    def test_partial_overlap(self):
        self.assertTrue(overlaps(600, 660, 630, 690))

    def test_containment(self):
        self.assertTrue(overlaps(600, 720, 630, 660))
        self.assertTrue(overlaps(630, 660, 600, 720))

    def test_touching_boundaries_do_not_overlap(self):
        self.assertFalse(overlaps(600, 630, 630, 660))
        self.assertFalse(overlaps(630, 660, 600, 630))

    def test_disjoint(self):
        self.assertFalse(overlaps(540, 570, 600, 630))

    def test_empty_interval_never_overlaps(self):
        self.assertFalse(overlaps(600, 600, 540, 720))
        self.assertFalse(overlaps(540, 720, 600, 600))

    def test_symmetry(self):
        pairs = [((600, 660), (630, 690)), ((600, 630), (630, 660)), ((540, 720), (600, 610))]
        for a, b in pairs:
            with self.subTest(a=a, b=b):
                self.assertEqual(overlaps(*a, *b), overlaps(*b, *a))


class TestFindConflicts(unittest.TestCase):

    def test_returns_only_overlapping_bookings(self):
        bookings = [
            booking("09:00", 30, 1),
            booking("10:00", 60, 2),
            booking("11:00", 30, 3),
        ]

        conflicts = find_conflicts(10 * 60 + 30, 11 * 60, bookings)

        self.assertEqual([b.id for b in conflicts], [2])

    def test_zero_duration_booking_is_ignored(self):
        self.assertEqual(find_conflicts(600, 630, [booking("10:00", 0)]), [])


class TestIsSlotAvailable(unittest.TestCase):

    def test_slot_covered_by_long_booking(self):
        """A 90 minute booking at 10:00 blocks 10:00, 10:30 and 11:00."""
        bookings = [booking("10:00", 90)]

        self.assertTrue(is_slot_available(SlotWindow(570, 600), bookings))
        self.assertFalse(is_slot_available(SlotWindow(600, 630), bookings))
        self.assertFalse(is_slot_available(SlotWindow(630, 660), bookings))
        self.assertFalse(is_slot_available(SlotWindow(660, 690), bookings))
        self.assertTrue(is_slot_available(SlotWindow(690, 720), bookings))

    def test_no_bookings(self):
        self.assertTrue(is_slot_available(SlotWindow(600, 630), []))
