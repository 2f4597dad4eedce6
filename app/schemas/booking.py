"""
Pydantic schemas for booking requests and availability responses
"""
from datetime import date
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.models.booking import BookingStatus, PaymentStatus, RecurringPattern, StaffPreference
from app.schemas.common import validate_hhmm
from app.schemas.staff import WorkingHoursEntry


# ============================================================================
# Request Schemas
# ============================================================================

class BookingCreate(BaseModel):
    """Request body for a dashboard-created booking"""
    service_id: int
    customer_id: Optional[int] = None
    staff_id: Optional[int] = None
    booking_date: date
    booking_time: str
    duration: Optional[int] = Field(None, ge=1, description="Duration in minutes")
    price: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None
    is_recurring: bool = False
    recurring_pattern: Optional[RecurringPattern] = None
    recurring_end_date: Optional[date] = None

    @field_validator("booking_time")
    @classmethod
    def validate_time(cls, v):
        return validate_hhmm(v, "booking_time")


class BookingUpdate(BaseModel):
    """Partial update - only the fields sent are changed"""
    service_id: Optional[int] = None
    customer_id: Optional[int] = None
    staff_id: Optional[int] = None
    booking_date: Optional[date] = None
    booking_time: Optional[str] = None
    duration: Optional[int] = Field(None, ge=1)
    price: Optional[float] = Field(None, ge=0)
    status: Optional[BookingStatus] = None
    payment_status: Optional[PaymentStatus] = None
    notes: Optional[str] = None

    @field_validator("booking_time")
    @classmethod
    def validate_time(cls, v):
        return validate_hhmm(v, "booking_time")


class RecurringBookingCreate(BaseModel):
    """Request body for a recurring series"""
    service_id: int
    customer_id: int
    staff_id: int
    start_date: date
    start_time: str
    duration: int = Field(..., ge=1)
    price: float = Field(..., ge=0)
    # Checked by the recurrence service so direct callers get the same error
    recurring_pattern: str
    recurring_end_date: date
    notes: Optional[str] = None

    @field_validator("start_time")
    @classmethod
    def validate_time(cls, v):
        return validate_hhmm(v, "start_time")


class CustomerBookingCreate(BaseModel):
    """Public booking request submitted from a client's website"""
    client_id: int
    service_id: int
    customer_name: str = Field(..., min_length=1, max_length=255)
    customer_email: EmailStr
    customer_phone: Optional[str] = Field(None, max_length=50)
    booking_date: date
    booking_time: str
    notes: Optional[str] = None
    staff_preference: StaffPreference = StaffPreference.ANY
    staff_id: Optional[int] = None

    @field_validator("booking_time")
    @classmethod
    def validate_time(cls, v):
        return validate_hhmm(v, "booking_time")


class NotificationRequest(BaseModel):
    type: str = Field(..., pattern="^(confirmation|reminder|cancellation)$")


# ============================================================================
# Response Schemas
# ============================================================================

class TimeSlot(BaseModel):
    """A candidate slot; derived per request, never stored"""
    id: int
    start_time: str
    end_time: str
    is_available: bool
    staff_id: Optional[int] = None


class StaffSchedule(BaseModel):
    staff_id: int
    staff_name: str
    working_hours: List[WorkingHoursEntry]
    available_slots: List[TimeSlot]


class ConflictCheckResult(BaseModel):
    has_conflicts: bool
    conflicts: List[dict]
