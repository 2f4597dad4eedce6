# ============================================================================
# FILE: app/api/v1/bookings.py
# Booking endpoints - thin HTTP layer over the booking services
# ============================================================================
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from app.api.dependencies import Principal, get_current_principal, optional_current_principal
from app.config.database import get_db
from app.core.exceptions import ValidationError
from app.schemas.booking import (
    BookingCreate,
    BookingUpdate,
    CustomerBookingCreate,
    NotificationRequest,
    RecurringBookingCreate,
)
from app.schemas.common import success_response
from app.services.availability.availability_service import AvailabilityService
from app.services.booking.booking_service import BookingService
from app.services.booking.recurrence_service import RecurrenceService

router = APIRouter(prefix="/bookings", tags=["bookings"])


# ============================================================================
# Public routes (no authentication required)
# ============================================================================

@router.post("/customer")
def create_customer_booking(
        request: CustomerBookingCreate,
        db: Session = Depends(get_db)
):
    """Customer self-service booking from a client's website"""
    booking = BookingService(db).create_customer_booking(request)
    return success_response(booking, message="Booking created successfully")


@router.get("/staff-schedules")
def get_staff_schedules(
        booking_date: Optional[date] = Query(None, alias="date", description="Defaults to today"),
        client_id: Optional[int] = Query(None, description="Required when no bearer token is sent"),
        principal: Optional[Principal] = Depends(optional_current_principal),
        db: Session = Depends(get_db)
):
    """
    All active staff with their working hours and computed slots for a date.
    The tenant comes from the bearer token when present, otherwise from client_id.
    """
    if principal:
        tenant_id = principal.client_id
    elif client_id is not None:
        tenant_id = client_id
    else:
        raise ValidationError("client_id is required when not authenticated")

    schedules = AvailabilityService.from_session(db).get_staff_schedules(
        tenant_id, booking_date or date.today()
    )
    return success_response(schedules)


# ============================================================================
# Protected routes (must come before /{booking_id})
# ============================================================================

@router.get("/time-slots")
def get_available_time_slots(
        booking_date: Optional[date] = Query(None, alias="date"),
        service_id: Optional[int] = Query(None),
        staff_id: Optional[int] = Query(None),
        principal: Principal = Depends(get_current_principal),
        db: Session = Depends(get_db)
):
    """Candidate slots for one staff member (or the default template) on one day"""
    slots = AvailabilityService.from_session(db).get_time_slots(
        principal.client_id, booking_date, service_id, staff_id
    )
    return success_response(slots)


@router.get("/check-conflicts")
def check_conflicts(
        booking_date: Optional[date] = Query(None, alias="date"),
        time: Optional[str] = Query(None, description="HH:MM"),
        duration: Optional[int] = Query(None),
        staff_id: Optional[int] = Query(None),
        principal: Principal = Depends(get_current_principal),
        db: Session = Depends(get_db)
):
    """Whether an ad-hoc slot overlaps any active booking"""
    result = AvailabilityService.from_session(db).check_conflicts(
        principal.client_id, booking_date, time, duration, staff_id
    )
    return success_response(result)


@router.post("/recurring")
def create_recurring_booking(
        request: RecurringBookingCreate,
        principal: Principal = Depends(get_current_principal),
        db: Session = Depends(get_db)
):
    """Create one booking per occurrence of a weekly, biweekly or monthly series"""
    bookings = RecurrenceService(db).create_series(principal.client_id, request)
    return success_response(bookings, message=f"Created {len(bookings)} recurring bookings")


# ============================================================================
# Basic CRUD operations
# ============================================================================

@router.get("")
def list_bookings(
        page: int = Query(1, ge=1),
        limit: int = Query(10, ge=1, le=100),
        search: Optional[str] = Query(None),
        status: Optional[str] = Query(None),
        booking_date: Optional[date] = Query(None, alias="date"),
        start_date: Optional[date] = Query(None),
        end_date: Optional[date] = Query(None),
        staff_id: Optional[int] = Query(None),
        customer_id: Optional[int] = Query(None),
        principal: Principal = Depends(get_current_principal),
        db: Session = Depends(get_db)
):
    result = BookingService(db).list_bookings(
        principal.client_id,
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
    return success_response(result["data"], pagination=result["pagination"])


@router.post("")
def create_booking(
        request: BookingCreate,
        principal: Principal = Depends(get_current_principal),
        db: Session = Depends(get_db)
):
    booking = BookingService(db).create_booking(principal.client_id, request)
    return success_response(booking, message="Booking created successfully")


@router.get("/{booking_id}")
def get_booking(
        booking_id: int = Path(..., description="The booking ID"),
        principal: Principal = Depends(get_current_principal),
        db: Session = Depends(get_db)
):
    return success_response(BookingService(db).get_booking(principal.client_id, booking_id))


@router.put("/{booking_id}")
def update_booking(
        request: BookingUpdate,
        booking_id: int = Path(..., description="The booking ID"),
        principal: Principal = Depends(get_current_principal),
        db: Session = Depends(get_db)
):
    booking = BookingService(db).update_booking(principal.client_id, booking_id, request)
    return success_response(booking, message="Booking updated successfully")


@router.delete("/{booking_id}")
def delete_booking(
        booking_id: int = Path(..., description="The booking ID"),
        principal: Principal = Depends(get_current_principal),
        db: Session = Depends(get_db)
):
    BookingService(db).delete_booking(principal.client_id, booking_id)
    return success_response(message="Booking deleted successfully")


@router.post("/{booking_id}/notifications")
def send_notification(
        request: NotificationRequest,
        booking_id: int = Path(..., description="The booking ID"),
        principal: Principal = Depends(get_current_principal),
        db: Session = Depends(get_db)
):
    message = BookingService(db).send_notification(principal.client_id, booking_id, request.type)
    return success_response(message=message)
