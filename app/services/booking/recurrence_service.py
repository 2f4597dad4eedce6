# ============================================================================
# app/services/booking/recurrence_service.py
# Recurrence Expander - materializes a recurring request into bookings
# ============================================================================
"""
A recurring request becomes one booking row per occurrence. The first row
is the parent of every later row. The whole series is written in a single
transaction: one conflict or storage failure leaves nothing behind.
"""
import calendar
import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.config.settings import Settings, get_settings
from app.core.exceptions import AppError, ConflictError, InternalError, NotFoundError, ValidationError
from app.models.booking import Booking, BookingStatus, PaymentStatus, RecurringPattern
from app.repositories.booking_repository import BookingRepository, is_slot_violation
from app.repositories.customer_repository import CustomerRepository
from app.repositories.service_repository import ServiceRepository
from app.repositories.staff_repository import StaffRepository
from app.schemas.booking import RecurringBookingCreate

logger = logging.getLogger(__name__)

PATTERN_STEP_DAYS = {
    RecurringPattern.WEEKLY.value: 7,
    RecurringPattern.BIWEEKLY.value: 14,
}


def add_months(start: date, months: int) -> date:
    """Same day-of-month `months` later, clamped to the last day of a shorter month"""
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def expand_occurrences(
        start_date: date,
        end_date: date,
        pattern: str,
        max_occurrences: int
) -> List[date]:
    """
    Occurrence dates from start_date through end_date inclusive.

    Monthly steps are anchored on start_date's day-of-month, so
    2024-01-31 is followed by 2024-02-29, 2024-03-31 and 2024-04-30.

    Raises:
        ValidationError: unknown pattern, end before start, or more than
            max_occurrences dates
    """
    if pattern not in [p.value for p in RecurringPattern]:
        raise ValidationError("Invalid recurring pattern")
    if end_date < start_date:
        raise ValidationError("Recurring end date must be on or after the start date")

    occurrences = []
    current = start_date
    step = 0
    while current <= end_date:
        occurrences.append(current)
        if len(occurrences) > max_occurrences:
            raise ValidationError(
                f"Recurring series exceeds the maximum of {max_occurrences} occurrences"
            )

        step += 1
        if pattern == RecurringPattern.MONTHLY.value:
            current = add_months(start_date, step)
        else:
            current = start_date + timedelta(days=PATTERN_STEP_DAYS[pattern] * step)

    return occurrences


class RecurrenceService:
    """Creates recurring booking series"""

    def __init__(self, db: Session, settings: Optional[Settings] = None):
        self.db = db
        self.settings = settings or get_settings()
        self.booking_repo = BookingRepository(db)
        self.service_repo = ServiceRepository(db)
        self.staff_repo = StaffRepository(db)
        self.customer_repo = CustomerRepository(db)

    def create_series(self, client_id: int, request: RecurringBookingCreate) -> List[Dict]:
        """
        Insert every occurrence of a recurring request.

        Returns:
            The created bookings in date order, with customer, service and
            staff display names

        Raises:
            ValidationError: bad pattern, inverted range or too many occurrences
            NotFoundError: service, customer or staff not owned by the client
            ConflictError: an occurrence overlaps an active booking of the staff member
            InternalError: storage failure (the series is rolled back)
        """
        occurrences = expand_occurrences(
            request.start_date,
            request.recurring_end_date,
            request.recurring_pattern,
            self.settings.MAX_RECURRING_OCCURRENCES,
        )

        try:
            self._ensure_references(client_id, request)

            conflicts = []
            for occurrence in occurrences:
                overlapping = self.booking_repo.find_overlapping(
                    client_id, occurrence, request.start_time, request.duration,
                    staff_id=request.staff_id
                )
                conflicts.extend(
                    {"date": occurrence.isoformat(), "booking_id": b.id, "booking_time": b.booking_time}
                    for b in overlapping
                )
            if conflicts:
                raise ConflictError(
                    "One or more occurrences conflict with existing bookings",
                    errors=conflicts,
                )

            created = []
            parent_id = None
            for occurrence in occurrences:
                booking = self.booking_repo.add(Booking(
                    client_id=client_id,
                    service_id=request.service_id,
                    customer_id=request.customer_id,
                    staff_id=request.staff_id,
                    booking_date=occurrence,
                    booking_time=request.start_time,
                    duration=request.duration,
                    price=Decimal(str(request.price)),
                    status=BookingStatus.PENDING.value,
                    payment_status=PaymentStatus.PENDING.value,
                    notes=request.notes,
                    is_recurring=True,
                    recurring_pattern=request.recurring_pattern,
                    recurring_end_date=request.recurring_end_date,
                    parent_booking_id=parent_id,
                ))
                if parent_id is None:
                    parent_id = booking.id
                created.append(booking.id)

            self.db.commit()

        except AppError:
            self.db.rollback()
            raise
        except IntegrityError as e:
            self.db.rollback()
            if not is_slot_violation(e):
                logger.error(f"Integrity error creating recurring booking for client {client_id}: {e}", exc_info=True)
                raise InternalError("Failed to create recurring booking", error=str(e))
            logger.warning(f"Recurring series for client {client_id} hit the slot constraint: {e}")
            raise ConflictError(error=str(e.orig) if e.orig else str(e))
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error creating recurring booking for client {client_id}: {e}", exc_info=True)
            raise InternalError("Failed to create recurring booking", error=str(e))

        logger.info(
            f"Created {len(created)} {request.recurring_pattern} bookings for client {client_id} "
            f"(parent {parent_id})"
        )
        return self.booking_repo.get_detailed_many(client_id, created)

    def _ensure_references(self, client_id: int, request: RecurringBookingCreate):
        if not self.service_repo.get(client_id, request.service_id):
            raise NotFoundError("Service not found")
        if not self.customer_repo.get(client_id, request.customer_id):
            raise NotFoundError("Customer not found")
        if not self.staff_repo.get(client_id, request.staff_id):
            raise NotFoundError("Staff member not found")
