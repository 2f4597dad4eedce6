# app/repositories/booking_repository.py
"""
Booking Store

Durable reservations, always filtered by client_id.
"""
import logging
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError

from app.models.booking import Booking, ACTIVE_SLOT_INDEX, ACTIVE_STATUSES
from app.models.customer import Customer
from app.models.service import Service
from app.models.staff import Staff
from app.repositories.base import BaseRepository
from app.services.scheduling.overlap import find_conflicts
from app.services.scheduling.time_utils import to_minutes

logger = logging.getLogger(__name__)

# SQLite names the columns of a violated unique index, PostgreSQL names the index
_SQLITE_SLOT_COLUMNS = "bookings.staff_id, bookings.booking_date, bookings.booking_time"


def is_slot_violation(error: IntegrityError) -> bool:
    """True when an IntegrityError comes from the one-active-booking-per-slot index"""
    message = str(error.orig) if error.orig is not None else str(error)
    return ACTIVE_SLOT_INDEX in message or _SQLITE_SLOT_COLUMNS in message


class BookingRepository(BaseRepository):
    """Repository for booking-related database operations."""

    def get(self, client_id: int, booking_id: int) -> Optional[Booking]:
        return self.session.query(Booking).filter(
            Booking.id == booking_id,
            Booking.client_id == client_id
        ).first()

    def list_active_for_day(
            self,
            client_id: int,
            booking_date: date,
            staff_id: Optional[int] = None
    ) -> List[Booking]:
        """Pending and confirmed bookings on one date, optionally for one staff member"""
        query = self.session.query(Booking).filter(
            Booking.client_id == client_id,
            Booking.booking_date == booking_date,
            Booking.status.in_(ACTIVE_STATUSES)
        )
        if staff_id is not None:
            query = query.filter(Booking.staff_id == staff_id)

        return query.order_by(Booking.booking_time.asc(), Booking.id.asc()).all()

    def find_overlapping(
            self,
            client_id: int,
            booking_date: date,
            booking_time: str,
            duration: int,
            staff_id: Optional[int] = None,
            exclude_id: Optional[int] = None
    ) -> List[Booking]:
        """Active bookings whose interval overlaps [booking_time, booking_time + duration)"""
        start = to_minutes(booking_time)
        existing = self.list_active_for_day(client_id, booking_date, staff_id)
        if exclude_id is not None:
            existing = [b for b in existing if b.id != exclude_id]
        return find_conflicts(start, start + duration, existing)

    def _detailed_query(self):
        return self.session.query(
            Booking,
            Customer.name.label("customer_name"),
            Customer.phone.label("customer_phone"),
            Customer.email.label("customer_email"),
            Service.name.label("service_name"),
            Service.duration.label("service_duration"),
            Staff.name.label("staff_name"),
        ).outerjoin(
            Customer, Booking.customer_id == Customer.id
        ).outerjoin(
            Service, Booking.service_id == Service.id
        ).outerjoin(
            Staff, Booking.staff_id == Staff.id
        )

    @staticmethod
    def _serialize_row(row) -> Dict[str, Any]:
        data = row.Booking.to_dict()
        data.update({
            "customer_name": row.customer_name,
            "customer_phone": row.customer_phone,
            "customer_email": row.customer_email,
            "service_name": row.service_name,
            "service_duration": row.service_duration,
            "staff_name": row.staff_name,
        })
        return data

    def get_detailed(self, client_id: int, booking_id: int) -> Optional[Dict[str, Any]]:
        """A booking enriched with customer, service and staff display fields"""
        row = self._detailed_query().filter(
            Booking.id == booking_id,
            Booking.client_id == client_id
        ).first()
        return self._serialize_row(row) if row else None

    def get_detailed_many(self, client_id: int, booking_ids: List[int]) -> List[Dict[str, Any]]:
        """Detailed rows in the order of booking_ids"""
        if not booking_ids:
            return []
        rows = self._detailed_query().filter(
            Booking.client_id == client_id,
            Booking.id.in_(booking_ids)
        ).all()
        by_id = {row.Booking.id: self._serialize_row(row) for row in rows}
        return [by_id[booking_id] for booking_id in booking_ids if booking_id in by_id]

    def list(
            self,
            client_id: int,
            search: Optional[str] = None,
            status: Optional[str] = None,
            booking_date: Optional[date] = None,
            start_date: Optional[date] = None,
            end_date: Optional[date] = None,
            staff_id: Optional[int] = None,
            customer_id: Optional[int] = None,
            page: int = 1,
            limit: int = 10
    ) -> Tuple[List[Dict[str, Any]], int]:
        """Paginated, filtered booking list and the unpaginated total"""
        query = self._detailed_query().filter(Booking.client_id == client_id)

        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(
                Customer.name.ilike(pattern),
                Service.name.ilike(pattern),
                Staff.name.ilike(pattern),
            ))
        if status:
            query = query.filter(Booking.status == status)
        if booking_date:
            query = query.filter(Booking.booking_date == booking_date)
        if start_date and end_date:
            query = query.filter(Booking.booking_date.between(start_date, end_date))
        if staff_id is not None:
            query = query.filter(Booking.staff_id == staff_id)
        if customer_id is not None:
            query = query.filter(Booking.customer_id == customer_id)

        total = query.count()
        rows = query.order_by(
            Booking.booking_date.desc(),
            Booking.booking_time.asc()
        ).offset((page - 1) * limit).limit(limit).all()

        return [self._serialize_row(row) for row in rows], total

    def delete(self, client_id: int, booking_id: int) -> bool:
        booking = self.get(client_id, booking_id)
        if not booking:
            return False
        self.session.delete(booking)
        self.session.flush()
        return True
