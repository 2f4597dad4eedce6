"""
Tests for the recurrence expander and recurring series creation
"""
import unittest
from datetime import date
from unittest import mock

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.config.settings import Settings
from app.core.exceptions import ConflictError, InternalError, NotFoundError, ValidationError
from app.models import Booking
from app.schemas.booking import RecurringBookingCreate
from app.services.booking.recurrence_service import RecurrenceService, add_months, expand_occurrences
from tests.support import (
    add_booking,
    add_client,
    add_customer,
    add_service,
    add_staff,
    make_session_factory,
)


class TestAddMonths(unittest.TestCase):

    def test_same_day(self):
        self.assertEqual(add_months(date(2024, 1, 15), 1), date(2024, 2, 15))

    def test_clamps_to_month_end(self):
        self.assertEqual(add_months(date(2024, 1, 31), 1), date(2024, 2, 29))
        self.assertEqual(add_months(date(2023, 1, 31), 1), date(2023, 2, 28))

    def test_crosses_year(self):
        self.assertEqual(add_months(date(2024, 11, 30), 3), date(2025, 2, 28))


class TestExpandOccurrences(unittest.TestCase):

    def test_weekly(self):
        self.assertEqual(
            expand_occurrences(date(2024, 1, 1), date(2024, 1, 22), "weekly", 104),
            [date(2024, 1, 1), date(2024, 1, 8), date(2024, 1, 15), date(2024, 1, 22)]
        )

    def test_biweekly(self):
        self.assertEqual(
            expand_occurrences(date(2024, 1, 1), date(2024, 1, 31), "biweekly", 104),
            [date(2024, 1, 1), date(2024, 1, 15), date(2024, 1, 29)]
        )

    def test_monthly_keeps_anchor_day(self):
        self.assertEqual(
            expand_occurrences(date(2024, 1, 31), date(2024, 4, 30), "monthly", 104),
            [date(2024, 1, 31), date(2024, 2, 29), date(2024, 3, 31), date(2024, 4, 30)]
        )

    def test_end_date_equal_to_start(self):
        self.assertEqual(
            expand_occurrences(date(2024, 1, 1), date(2024, 1, 1), "weekly", 104),
            [date(2024, 1, 1)]
        )

    def test_end_before_start(self):
        with self.assertRaises(ValidationError):
            expand_occurrences(date(2024, 2, 1), date(2024, 1, 1), "weekly", 104)

    def test_invalid_pattern(self):
        with self.assertRaises(ValidationError) as ctx:
            expand_occurrences(date(2024, 1, 1), date(2024, 2, 1), "daily", 104)
        self.assertEqual(ctx.exception.message, "Invalid recurring pattern")

    def test_cap(self):
        self.assertEqual(
            len(expand_occurrences(date(2024, 1, 1), date(2024, 1, 29), "weekly", 5)), 5
        )
        with self.assertRaises(ValidationError):
            expand_occurrences(date(2024, 1, 1), date(2024, 2, 5), "weekly", 5)


class TestRecurrenceService(unittest.TestCase):
    """Tests for recurring series creation."""

    def setUp(self):
        self.engine, Session = make_session_factory()
        self.db = Session()
        self.client = add_client(self.db)
        self.service = add_service(self.db, self.client)
        self.staff = add_staff(self.db, self.client)
        self.customer = add_customer(self.db, self.client)
        self.recurrence = RecurrenceService(self.db)

    def tearDown(self):
        self.db.close()
        self.engine.dispose()

    def _request(self, **overrides):
        data = {
            "service_id": self.service.id,
            "customer_id": self.customer.id,
            "staff_id": self.staff.id,
            "start_date": date(2024, 1, 1),
            "start_time": "10:00",
            "duration": 30,
            "price": 25.0,
            "recurring_pattern": "weekly",
            "recurring_end_date": date(2024, 1, 22),
        }
        data.update(overrides)
        return RecurringBookingCreate(**data)

    def test_weekly_series(self):
        created = self.recurrence.create_series(self.client.id, self._request())

        self.assertEqual(len(created), 4)
        self.assertEqual(
            [b["booking_date"] for b in created],
            ["2024-01-01", "2024-01-08", "2024-01-15", "2024-01-22"]
        )
        parent_id = created[0]["id"]
        self.assertIsNone(created[0]["parent_booking_id"])
        self.assertTrue(all(b["parent_booking_id"] == parent_id for b in created[1:]))
        self.assertTrue(all(b["is_recurring"] and b["status"] == "pending" for b in created))
        self.assertEqual(created[0]["customer_name"], "Jamie")
        self.assertEqual(created[0]["service_name"], "Haircut")
        self.assertEqual(created[0]["staff_name"], "Alex")

    def test_monthly_series_clamps(self):
        created = self.recurrence.create_series(self.client.id, self._request(
            start_date=date(2024, 1, 31),
            recurring_pattern="monthly",
            recurring_end_date=date(2024, 4, 30),
        ))

        self.assertEqual(
            [b["booking_date"] for b in created],
            ["2024-01-31", "2024-02-29", "2024-03-31", "2024-04-30"]
        )

    def test_invalid_pattern_writes_nothing(self):
        with self.assertRaises(ValidationError):
            self.recurrence.create_series(self.client.id, self._request(recurring_pattern="daily"))
        self.assertEqual(self.db.query(Booking).count(), 0)

    def test_cap_from_settings(self):
        recurrence = RecurrenceService(self.db, Settings(MAX_RECURRING_OCCURRENCES=3))
        with self.assertRaises(ValidationError):
            recurrence.create_series(self.client.id, self._request())
        self.assertEqual(self.db.query(Booking).count(), 0)

    def test_conflict_rolls_back_whole_series(self):
        add_booking(self.db, self.client, self.service, self.staff,
                    booking_date=date(2024, 1, 15), booking_time="10:15", duration=30)

        with self.assertRaises(ConflictError) as ctx:
            self.recurrence.create_series(self.client.id, self._request())

        self.assertEqual(ctx.exception.errors[0]["date"], "2024-01-15")
        self.assertEqual(self.db.query(Booking).count(), 1)

    def test_unknown_references(self):
        with self.assertRaises(NotFoundError):
            self.recurrence.create_series(self.client.id, self._request(service_id=999))
        with self.assertRaises(NotFoundError):
            self.recurrence.create_series(self.client.id, self._request(customer_id=999))
        with self.assertRaises(NotFoundError):
            self.recurrence.create_series(self.client.id, self._request(staff_id=999))
        self.assertEqual(self.db.query(Booking).count(), 0)

    def _fail_on_third_add(self, error):
        real_add = self.recurrence.booking_repo.add
        calls = []

        def add(booking):
            calls.append(booking)
            if len(calls) == 3:
                raise error
            return real_add(booking)

        return mock.patch.object(self.recurrence.booking_repo, "add", side_effect=add)

    def test_storage_failure_mid_series_rolls_back_inserted_rows(self):
        with self._fail_on_third_add(SQLAlchemyError("disk I/O error")):
            with self.assertRaises(InternalError):
                self.recurrence.create_series(self.client.id, self._request())

        self.assertEqual(self.db.query(Booking).count(), 0)

    def test_unrelated_integrity_error_is_internal_error(self):
        failure = IntegrityError("INSERT INTO bookings ...", {}, Exception("FOREIGN KEY constraint failed"))

        with self._fail_on_third_add(failure):
            with self.assertRaises(InternalError):
                self.recurrence.create_series(self.client.id, self._request())

        self.assertEqual(self.db.query(Booking).count(), 0)

    def test_slot_index_mid_series_rolls_back_inserted_rows(self):
        """Only the unique index sees the clash on the third date."""
        existing = add_booking(self.db, self.client, self.service, self.staff,
                               booking_date=date(2024, 1, 15), booking_time="10:00", duration=30)

        with mock.patch.object(self.recurrence.booking_repo, "find_overlapping", return_value=[]):
            with self.assertRaises(ConflictError):
                self.recurrence.create_series(self.client.id, self._request())

        self.assertEqual([b.id for b in self.db.query(Booking).all()], [existing.id])
