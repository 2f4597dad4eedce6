# ============================================================================
# app/services/booking/booking_service.py
# Booking operations - no FastAPI dependencies, fully testable
# ============================================================================
"""Service for creating, reading, updating and deleting bookings"""
import logging
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.config.settings import Settings, get_settings
from app.core.exceptions import AppError, ConflictError, InternalError, NotFoundError, ValidationError
from app.models.booking import (
    ACTIVE_STATUSES,
    Booking,
    BookingStatus,
    PaymentStatus,
    StaffPreference,
)
from app.repositories.booking_repository import BookingRepository, is_slot_violation
from app.repositories.client_repository import ClientRepository
from app.repositories.customer_repository import CustomerRepository
from app.repositories.service_repository import ServiceRepository
from app.repositories.staff_repository import StaffRepository
from app.schemas.booking import BookingCreate, BookingUpdate, CustomerBookingCreate

logger = logging.getLogger(__name__)

NOTIFICATION_TYPES = ("confirmation", "reminder", "cancellation")

# Non-nullable booking columns a partial update may set but never clear
REQUIRED_BOOKING_FIELDS = (
    "service_id", "booking_date", "booking_time", "duration", "price", "status", "payment_status",
)


def _conflict_details(conflicts) -> list:
    return [
        {
            "booking_id": b.id,
            "booking_date": b.booking_date.isoformat(),
            "booking_time": b.booking_time,
            "duration": b.duration,
            "staff_id": b.staff_id,
        }
        for b in conflicts
    ]


class BookingService:
    """Handles booking operations for one database session"""

    def __init__(self, db: Session, settings: Optional[Settings] = None):
        self.db = db
        self.settings = settings or get_settings()
        self.bookings = BookingRepository(db)
        self.services = ServiceRepository(db)
        self.staff = StaffRepository(db)
        self.customers = CustomerRepository(db)
        self.clients = ClientRepository(db)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_booking(self, client_id: int, booking_id: int) -> Dict[str, Any]:
        booking = self._guard("Failed to fetch booking", self.bookings.get_detailed, client_id, booking_id)
        if not booking:
            raise NotFoundError("Booking not found")
        return booking

    def list_bookings(
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
    ) -> Dict[str, Any]:
        """Get paginated list of bookings with filters."""
        rows, total = self._guard(
            "Failed to fetch bookings",
            self.bookings.list,
            client_id,
            search=search,
            status=status,
            booking_date=booking_date,
            start_date=start_date,
            end_date=end_date,
            staff_id=staff_id,
            customer_id=customer_id,
            page=page,
            limit=limit,
        )
        return {
            "data": rows,
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "totalPages": (total + limit - 1) // limit if total > 0 else 0,
            },
        }

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create_booking(self, client_id: int, request: BookingCreate) -> Dict[str, Any]:
        """
        Create a pending booking.

        Duration and price fall back to the service's values when omitted.
        A staff member can hold only one active booking over any minute.
        """
        try:
            service = self.services.get(client_id, request.service_id)
            if not service:
                raise NotFoundError("Service not found")
            if request.customer_id is not None and not self.customers.get(client_id, request.customer_id):
                raise NotFoundError("Customer not found")
            if request.staff_id is not None and not self.staff.get(client_id, request.staff_id):
                raise NotFoundError("Staff member not found")

            duration = request.duration or service.duration
            price = Decimal(str(request.price)) if request.price is not None else service.price

            self._ensure_free(client_id, request.booking_date, request.booking_time, duration, request.staff_id)

            booking = self.bookings.add(Booking(
                client_id=client_id,
                service_id=request.service_id,
                customer_id=request.customer_id,
                staff_id=request.staff_id,
                booking_date=request.booking_date,
                booking_time=request.booking_time,
                duration=duration,
                price=price,
                status=BookingStatus.PENDING.value,
                payment_status=PaymentStatus.PENDING.value,
                notes=request.notes,
                is_recurring=request.is_recurring,
                recurring_pattern=request.recurring_pattern.value if request.recurring_pattern else None,
                recurring_end_date=request.recurring_end_date,
            ))
            self.db.commit()
        except Exception as e:
            self._fail(e, "Failed to create booking")

        logger.info(f"Created booking {booking.id} for client {client_id}")
        return self.bookings.get_detailed(client_id, booking.id)

    def create_customer_booking(self, request: CustomerBookingCreate) -> Dict[str, Any]:
        """
        Public booking from a client's website.

        The customer is matched by email within the client (and refreshed)
        or created. Duration and price always come from the service.
        """
        client_id = request.client_id
        try:
            client = self.clients.get(client_id)
            if not client or not client.is_active:
                raise NotFoundError("Business not found")

            service = self.services.get(client_id, request.service_id)
            if not service:
                raise NotFoundError("Service not found")

            staff_id = None
            if request.staff_preference == StaffPreference.SPECIFIC and request.staff_id:
                staff = self.staff.get(client_id, request.staff_id)
                if not staff or not staff.active:
                    raise NotFoundError("Staff member not found")
                staff_id = staff.id

            self._ensure_free(client_id, request.booking_date, request.booking_time, service.duration, staff_id)

            customer = self.customers.get_or_create_by_email(
                client_id,
                name=request.customer_name,
                email=request.customer_email,
                phone=request.customer_phone,
            )

            booking = self.bookings.add(Booking(
                client_id=client_id,
                service_id=service.id,
                customer_id=customer.id,
                staff_id=staff_id,
                booking_date=request.booking_date,
                booking_time=request.booking_time,
                duration=service.duration,
                price=service.price,
                status=BookingStatus.PENDING.value,
                payment_status=PaymentStatus.PENDING.value,
                notes=request.notes,
                staff_preference=request.staff_preference.value,
            ))
            self.db.commit()
        except Exception as e:
            self._fail(e, "Failed to create booking")

        logger.info(f"Created customer booking {booking.id} for client {client_id}")
        return self.bookings.get_detailed(client_id, booking.id)

    def update_booking(self, client_id: int, booking_id: int, request: BookingUpdate) -> Dict[str, Any]:
        """Apply a partial update, re-checking overlap when the slot can change"""
        changes = request.model_dump(exclude_unset=True)
        null_fields = [field for field in REQUIRED_BOOKING_FIELDS if field in changes and changes[field] is None]
        if null_fields:
            raise ValidationError(
                "Fields cannot be null",
                errors=[{"field": field, "message": f"{field} cannot be null"} for field in null_fields],
            )

        try:
            booking = self.bookings.get(client_id, booking_id)
            if not booking:
                raise NotFoundError("Booking not found")

            if changes.get("service_id") is not None and not self.services.get(client_id, changes["service_id"]):
                raise NotFoundError("Service not found")
            if changes.get("customer_id") is not None and not self.customers.get(client_id, changes["customer_id"]):
                raise NotFoundError("Customer not found")
            if changes.get("staff_id") is not None and not self.staff.get(client_id, changes["staff_id"]):
                raise NotFoundError("Staff member not found")

            for field, value in changes.items():
                if field == "price" and value is not None:
                    value = Decimal(str(value))
                if hasattr(value, "value"):
                    value = value.value
                setattr(booking, field, value)

            slot_fields = {"booking_date", "booking_time", "duration", "staff_id", "status"}
            if slot_fields & changes.keys() and booking.status in ACTIVE_STATUSES:
                self._ensure_free(
                    client_id, booking.booking_date, booking.booking_time, booking.duration,
                    booking.staff_id, exclude_id=booking.id
                )

            self.db.commit()
        except Exception as e:
            self._fail(e, "Failed to update booking")

        logger.info(f"Updated booking {booking_id} for client {client_id}: {sorted(changes)}")
        return self.bookings.get_detailed(client_id, booking_id)

    def delete_booking(self, client_id: int, booking_id: int) -> None:
        try:
            if not self.bookings.delete(client_id, booking_id):
                raise NotFoundError("Booking not found")
            self.db.commit()
        except Exception as e:
            self._fail(e, "Failed to delete booking")

        logger.info(f"Deleted booking {booking_id} for client {client_id}")

    def send_notification(self, client_id: int, booking_id: int, notification_type: str) -> str:
        """Record a customer notification; delivery channels are not wired up"""
        if notification_type not in NOTIFICATION_TYPES:
            raise ValidationError("Invalid notification type")

        booking = self.get_booking(client_id, booking_id)

        logger.info(
            f"Sending {notification_type} notification for booking {booking_id}",
            extra={
                "customer": booking["customer_name"],
                "email": booking["customer_email"],
                "phone": booking["customer_phone"],
                "service": booking["service_name"],
                "date": booking["booking_date"],
                "time": booking["booking_time"],
            }
        )
        return f"{notification_type} notification sent successfully"

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _ensure_free(
            self,
            client_id: int,
            booking_date: date,
            booking_time: str,
            duration: int,
            staff_id: Optional[int],
            exclude_id: Optional[int] = None
    ):
        """Raise ConflictError when the staff member already holds an overlapping active booking"""
        if staff_id is None:
            return
        conflicts = self.bookings.find_overlapping(
            client_id, booking_date, booking_time, duration,
            staff_id=staff_id, exclude_id=exclude_id
        )
        if conflicts:
            raise ConflictError(errors=_conflict_details(conflicts))

    def _guard(self, message: str, func, *args, **kwargs):
        try:
            return func(*args, **kwargs)
        except SQLAlchemyError as e:
            logger.error(f"{message}: {e}", exc_info=True)
            raise InternalError(message, error=str(e))

    def _fail(self, error: Exception, message: str):
        """Roll back and re-raise as a taxonomy error"""
        self.db.rollback()
        if isinstance(error, AppError):
            raise error
        if isinstance(error, IntegrityError) and is_slot_violation(error):
            logger.warning(f"{message}: slot constraint violated: {error}")
            raise ConflictError(error=str(error.orig) if error.orig else str(error)) from error
        if isinstance(error, SQLAlchemyError):
            logger.error(f"{message}: {error}", exc_info=True)
            raise InternalError(message, error=str(error)) from error
        raise error
