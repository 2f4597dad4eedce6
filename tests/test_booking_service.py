"""
Tests for booking operations
"""
import unittest
from datetime import date
from unittest import mock

from sqlalchemy.exc import IntegrityError

from app.core.exceptions import ConflictError, InternalError, NotFoundError, ValidationError
from app.models import Booking, Customer
from app.schemas.booking import BookingCreate, BookingUpdate, CustomerBookingCreate
from app.repositories.booking_repository import is_slot_violation
from app.services.booking.booking_service import REQUIRED_BOOKING_FIELDS, BookingService
from tests.support import (
    MONDAY,
    add_booking,
    add_client,
    add_customer,
    add_service,
    add_staff,
    make_session_factory,
)


class BookingServiceTestCase(unittest.TestCase):

    def setUp(self):
        self.engine, Session = make_session_factory()
        self.db = Session()
        self.client = add_client(self.db)
        self.service = add_service(self.db, self.client, duration=45, price="30.00")
        self.staff = add_staff(self.db, self.client)
        self.customer = add_customer(self.db, self.client)
        self.bookings = BookingService(self.db)

    def tearDown(self):
        self.db.close()
        self.engine.dispose()


class TestCreateBooking(BookingServiceTestCase):

    def _request(self, **overrides):
        data = {
            "service_id": self.service.id,
            "customer_id": self.customer.id,
            "staff_id": self.staff.id,
            "booking_date": MONDAY,
            "booking_time": "10:00",
        }
        data.update(overrides)
        return BookingCreate(**data)

    def test_defaults_from_service(self):
        booking = self.bookings.create_booking(self.client.id, self._request())

        self.assertEqual(booking["duration"], 45)
        self.assertEqual(booking["price"], 30.0)
        self.assertEqual(booking["status"], "pending")
        self.assertEqual(booking["payment_status"], "pending")
        self.assertEqual(booking["customer_name"], "Jamie")

    def test_explicit_duration_and_price(self):
        booking = self.bookings.create_booking(self.client.id, self._request(duration=90, price=50))
        self.assertEqual((booking["duration"], booking["price"]), (90, 50.0))

    def test_overlap_is_rejected(self):
        self.bookings.create_booking(self.client.id, self._request())

        with self.assertRaises(ConflictError) as ctx:
            self.bookings.create_booking(self.client.id, self._request(booking_time="10:30"))

        self.assertEqual(ctx.exception.status_code, 409)
        self.assertEqual(self.db.query(Booking).count(), 1)

    def test_adjacent_booking_is_allowed(self):
        self.bookings.create_booking(self.client.id, self._request())
        self.bookings.create_booking(self.client.id, self._request(booking_time="10:45"))
        self.assertEqual(self.db.query(Booking).count(), 2)

    def test_unassigned_bookings_never_conflict(self):
        self.bookings.create_booking(self.client.id, self._request(staff_id=None))
        self.bookings.create_booking(self.client.id, self._request(staff_id=None))
        self.assertEqual(self.db.query(Booking).count(), 2)

    def test_slot_constraint_maps_to_conflict(self):
        """The unique index catches a double booking the overlap check missed."""
        self.bookings.create_booking(self.client.id, self._request())

        with mock.patch.object(self.bookings.bookings, "find_overlapping", return_value=[]):
            with self.assertRaises(ConflictError):
                self.bookings.create_booking(self.client.id, self._request())

        self.assertEqual(self.db.query(Booking).count(), 1)

    def test_cancelled_booking_frees_the_slot(self):
        add_booking(self.db, self.client, self.service, self.staff, booking_time="10:00", status="cancelled")
        self.bookings.create_booking(self.client.id, self._request())
        self.assertEqual(self.db.query(Booking).count(), 2)

    def test_unknown_references(self):
        with self.assertRaises(NotFoundError):
            self.bookings.create_booking(self.client.id, self._request(service_id=999))
        with self.assertRaises(NotFoundError):
            self.bookings.create_booking(self.client.id, self._request(staff_id=999))


class TestSlotConstraint(BookingServiceTestCase):

    def test_second_active_booking_at_same_start_fails(self):
        add_booking(self.db, self.client, self.service, self.staff, booking_time="10:00")
        with self.assertRaises(IntegrityError):
            add_booking(self.db, self.client, self.service, self.staff, booking_time="10:00")
        self.db.rollback()


class TestCustomerBooking(BookingServiceTestCase):

    def _request(self, **overrides):
        data = {
            "client_id": self.client.id,
            "service_id": self.service.id,
            "customer_name": "Robin",
            "customer_email": "robin@example.com",
            "customer_phone": "+15550100",
            "booking_date": MONDAY,
            "booking_time": "14:00",
        }
        data.update(overrides)
        return CustomerBookingCreate(**data)

    def test_creates_customer(self):
        booking = self.bookings.create_customer_booking(self._request())

        self.assertEqual(booking["customer_name"], "Robin")
        self.assertEqual(booking["duration"], 45)
        self.assertIsNone(booking["staff_id"])
        self.assertEqual(booking["staff_preference"], "any")

    def test_reuses_customer_by_email(self):
        self.bookings.create_customer_booking(self._request())
        self.bookings.create_customer_booking(self._request(customer_name="Robin B", booking_time="16:00"))

        customers = self.db.query(Customer).filter(Customer.email == "robin@example.com").all()
        self.assertEqual(len(customers), 1)
        self.assertEqual(customers[0].name, "Robin B")

    def test_specific_staff(self):
        booking = self.bookings.create_customer_booking(
            self._request(staff_preference="specific", staff_id=self.staff.id)
        )
        self.assertEqual(booking["staff_id"], self.staff.id)

    def test_unknown_business(self):
        with self.assertRaises(NotFoundError) as ctx:
            self.bookings.create_customer_booking(self._request(client_id=999))
        self.assertEqual(ctx.exception.message, "Business not found")

    def test_suspended_business(self):
        suspended = add_client(self.db, email="closed@example.com", status="suspended")
        with self.assertRaises(NotFoundError):
            self.bookings.create_customer_booking(self._request(client_id=suspended.id))


class TestReadUpdateDelete(BookingServiceTestCase):

    def test_get_is_tenant_scoped(self):
        booking = add_booking(self.db, self.client, self.service, self.staff)
        other = add_client(self.db, email="other@example.com")

        self.assertEqual(self.bookings.get_booking(self.client.id, booking.id)["id"], booking.id)
        with self.assertRaises(NotFoundError):
            self.bookings.get_booking(other.id, booking.id)

    def test_list_filters_and_paginates(self):
        for hour in ("09:00", "10:00", "11:00"):
            add_booking(self.db, self.client, self.service, self.staff, booking_time=hour)
        add_booking(self.db, self.client, self.service, self.staff,
                    booking_date=date(2024, 1, 16), booking_time="09:00", status="confirmed")

        result = self.bookings.list_bookings(self.client.id, booking_date=MONDAY, limit=2)

        self.assertEqual(len(result["data"]), 2)
        self.assertEqual(result["pagination"], {"page": 1, "limit": 2, "total": 3, "totalPages": 2})
        confirmed = self.bookings.list_bookings(self.client.id, status="confirmed")
        self.assertEqual(confirmed["pagination"]["total"], 1)

    def test_update_rechecks_overlap(self):
        add_booking(self.db, self.client, self.service, self.staff, booking_time="10:00", duration=60)
        moving = add_booking(self.db, self.client, self.service, self.staff, booking_time="12:00")

        with self.assertRaises(ConflictError):
            self.bookings.update_booking(self.client.id, moving.id, BookingUpdate(booking_time="10:30"))

        self.db.refresh(moving)
        self.assertEqual(moving.booking_time, "12:00")

    def test_update_own_slot_is_not_a_conflict(self):
        booking = add_booking(self.db, self.client, self.service, self.staff, booking_time="10:00")

        updated = self.bookings.update_booking(
            self.client.id, booking.id, BookingUpdate(duration=60, status="confirmed")
        )

        self.assertEqual((updated["duration"], updated["status"]), (60, "confirmed"))

    def test_delete(self):
        booking = add_booking(self.db, self.client, self.service, self.staff)
        self.bookings.delete_booking(self.client.id, booking.id)

        with self.assertRaises(NotFoundError):
            self.bookings.delete_booking(self.client.id, booking.id)

    def test_send_notification(self):
        booking = add_booking(self.db, self.client, self.service, self.staff, customer=self.customer)

        message = self.bookings.send_notification(self.client.id, booking.id, "reminder")

        self.assertEqual(message, "reminder notification sent successfully")
        with self.assertRaises(ValidationError):
            self.bookings.send_notification(self.client.id, booking.id, "fax")


class TestUpdateNullFields(BookingServiceTestCase):
    """A partial update may not clear a required column."""

    def test_each_required_field_rejects_null(self):
        booking = add_booking(self.db, self.client, self.service, self.staff, booking_time="10:00")

        for field in REQUIRED_BOOKING_FIELDS:
            with self.subTest(field=field):
                with self.assertRaises(ValidationError) as ctx:
                    self.bookings.update_booking(self.client.id, booking.id, BookingUpdate(**{field: None}))
                self.assertEqual(ctx.exception.status_code, 400)
                self.assertEqual(ctx.exception.errors, [{"field": field, "message": f"{field} cannot be null"}])

        self.db.refresh(booking)
        self.assertEqual((booking.booking_time, booking.duration, booking.status), ("10:00", 30, "pending"))

    def test_null_duration_on_staff_booking(self):
        booking = add_booking(self.db, self.client, self.service, self.staff, booking_time="10:00")

        with self.assertRaises(ValidationError):
            self.bookings.update_booking(self.client.id, booking.id, BookingUpdate(duration=None))

    def test_optional_fields_can_be_cleared(self):
        booking = add_booking(self.db, self.client, self.service, self.staff, customer=self.customer)

        updated = self.bookings.update_booking(
            self.client.id, booking.id, BookingUpdate(staff_id=None, customer_id=None, notes=None)
        )

        self.assertIsNone(updated["staff_id"])
        self.assertIsNone(updated["customer_id"])


def _integrity_error(message):
    return IntegrityError("INSERT INTO bookings ...", {}, Exception(message))


class TestIntegrityErrorMapping(BookingServiceTestCase):
    """Only the active-slot index means a double booking."""

    def test_slot_violation_sqlite(self):
        self.assertTrue(is_slot_violation(_integrity_error(
            "UNIQUE constraint failed: bookings.staff_id, bookings.booking_date, bookings.booking_time"
        )))

    def test_slot_violation_postgresql(self):
        self.assertTrue(is_slot_violation(_integrity_error(
            'duplicate key value violates unique constraint "uq_bookings_active_staff_slot"'
        )))

    def test_other_constraints_are_not_slot_violations(self):
        for message in (
                "NOT NULL constraint failed: bookings.status",
                "FOREIGN KEY constraint failed",
                "UNIQUE constraint failed: staff.username",
        ):
            with self.subTest(message=message):
                self.assertFalse(is_slot_violation(_integrity_error(message)))

    def test_not_null_failure_is_internal_error(self):
        request = BookingCreate(
            service_id=self.service.id,
            staff_id=self.staff.id,
            booking_date=MONDAY,
            booking_time="10:00",
        )
        failure = _integrity_error("NOT NULL constraint failed: bookings.status")

        with mock.patch.object(self.bookings.bookings, "add", side_effect=failure):
            with self.assertRaises(InternalError) as ctx:
                self.bookings.create_booking(self.client.id, request)

        self.assertEqual(ctx.exception.status_code, 500)
        self.assertEqual(self.db.query(Booking).count(), 0)
