# app/services/availability/availability_service.py
"""
Availability Engine

Answers "which slots are free" and "does this request conflict" for a
single calendar date. Read-only: nothing here writes to the store.
"""
from datetime import date
from typing import List, Dict, Optional
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config.settings import Settings, get_settings
from app.core.exceptions import AppError, InternalError, NotFoundError, ValidationError
from app.models.staff import Staff
from app.repositories.booking_repository import BookingRepository
from app.repositories.service_repository import ServiceRepository
from app.repositories.staff_repository import (
    DEFAULT_WORKING_HOURS,
    StaffRepository,
    entry_for_day,
)
from app.schemas.booking import ConflictCheckResult, StaffSchedule, TimeSlot
from app.schemas.staff import WorkingHoursEntry
from app.services.scheduling.overlap import is_slot_available
from app.services.scheduling.slots import generate_slots
from app.services.scheduling.time_utils import Weekday, parse_hhmm

logger = logging.getLogger(__name__)


class AvailabilityService:
    """Composes the staff directory, the booking store, slot generation and overlap checks"""

    def __init__(
            self,
            staff_repo: StaffRepository,
            booking_repo: BookingRepository,
            service_repo: ServiceRepository,
            slot_duration: int = 30
    ):
        self.staff_repo = staff_repo
        self.booking_repo = booking_repo
        self.service_repo = service_repo
        self.slot_duration = slot_duration

    @classmethod
    def from_session(cls, db: Session, settings: Optional[Settings] = None) -> "AvailabilityService":
        settings = settings or get_settings()
        return cls(
            staff_repo=StaffRepository(db),
            booking_repo=BookingRepository(db),
            service_repo=ServiceRepository(db),
            slot_duration=settings.SLOT_DURATION_MINUTES,
        )

    def get_time_slots(
            self,
            client_id: int,
            booking_date: date,
            service_id: int,
            staff_id: Optional[int] = None
    ) -> List[Dict]:
        """
        Candidate slots for one day.

        With staff_id the staff member's own template and bookings are used;
        without it the default template is applied against every active
        booking of the client on that date.

        The default template is per weekday, so without staff_id Saturday
        slots end at 17:00 and Sunday has none (not a flat 09:00-18:00 day).

        Raises:
            ValidationError: missing date or service_id
            NotFoundError: unknown service or staff member
            InternalError: storage failure
        """
        if booking_date is None or service_id is None:
            raise ValidationError("Date and service_id are required")

        try:
            service = self.service_repo.get(client_id, service_id)
            if not service:
                raise NotFoundError("Service not found")

            if staff_id is not None:
                staff = self.staff_repo.get(client_id, staff_id)
                if not staff:
                    raise NotFoundError("Staff member not found")
                if not staff.active:
                    return []
                working_hours = self.staff_repo.working_hours_for(staff)
            else:
                working_hours = list(DEFAULT_WORKING_HOURS)

            return self._day_slots(client_id, booking_date, working_hours, staff_id)

        except AppError:
            raise
        except SQLAlchemyError as e:
            logger.error(f"Error fetching time slots for client {client_id}: {e}", exc_info=True)
            raise InternalError("Failed to fetch time slots", error=str(e))

    def get_staff_schedules(self, client_id: int, booking_date: date) -> List[Dict]:
        """
        One record per active staff member with their template and the
        computed slots for booking_date.
        """
        try:
            staff_members = self.staff_repo.list_active(client_id)
            logger.info(
                f"Building schedules for {len(staff_members)} staff of client {client_id} on {booking_date}"
            )

            schedules = []
            for staff in staff_members:
                schedules.append(self._staff_schedule(client_id, booking_date, staff))
            return schedules

        except AppError:
            raise
        except SQLAlchemyError as e:
            logger.error(f"Error fetching staff schedules for client {client_id}: {e}", exc_info=True)
            raise InternalError("Failed to fetch staff schedules", error=str(e))

    def check_conflicts(
            self,
            client_id: int,
            booking_date: date,
            booking_time: str,
            duration: int,
            staff_id: Optional[int] = None
    ) -> Dict:
        """Active bookings overlapping an ad-hoc [time, time + duration) window"""
        if booking_date is None or not booking_time or duration is None:
            raise ValidationError("Date, time, and duration are required")
        if duration < 1:
            raise ValidationError("Duration must be a positive integer")
        booking_time = parse_hhmm(booking_time)

        try:
            conflicts = self.booking_repo.find_overlapping(
                client_id, booking_date, booking_time, duration, staff_id=staff_id
            )
        except SQLAlchemyError as e:
            logger.error(f"Error checking conflicts for client {client_id}: {e}", exc_info=True)
            raise InternalError("Failed to check conflicts", error=str(e))

        return ConflictCheckResult(
            has_conflicts=len(conflicts) > 0,
            conflicts=[booking.to_dict() for booking in conflicts],
        ).model_dump()

    def _staff_schedule(self, client_id: int, booking_date: date, staff: Staff) -> Dict:
        working_hours = self.staff_repo.working_hours_for(staff)
        return StaffSchedule(
            staff_id=staff.id,
            staff_name=staff.name,
            working_hours=working_hours,
            available_slots=self._day_slots(client_id, booking_date, working_hours, staff.id),
        ).model_dump(mode="json")

    def _day_slots(
            self,
            client_id: int,
            booking_date: date,
            working_hours: List[WorkingHoursEntry],
            staff_id: Optional[int]
    ) -> List[Dict]:
        """Generate the day's slots and mark each against the active bookings"""
        working_day = entry_for_day(working_hours, Weekday.from_date(booking_date))
        if not working_day or not working_day.is_working:
            return []

        bookings = self.booking_repo.list_active_for_day(client_id, booking_date, staff_id)

        slots = []
        for index, window in enumerate(
                generate_slots(working_day.start_time, working_day.end_time, self.slot_duration)
        ):
            slots.append(TimeSlot(
                id=index + 1,
                start_time=window.start_time,
                end_time=window.end_time,
                is_available=is_slot_available(window, bookings),
                staff_id=staff_id,
            ).model_dump())

        return slots
