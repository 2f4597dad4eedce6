# app/schemas/__init__.py
from .common import success_response

from .staff import (
    WorkingHoursEntry,
    StaffCreate,
    StaffUpdate
)

from .booking import (
    BookingCreate,
    BookingUpdate,
    RecurringBookingCreate,
    CustomerBookingCreate,
    NotificationRequest,
    TimeSlot,
    StaffSchedule,
    ConflictCheckResult
)

__all__ = [
    "success_response",
    "WorkingHoursEntry",
    "StaffCreate",
    "StaffUpdate",
    "BookingCreate",
    "BookingUpdate",
    "RecurringBookingCreate",
    "CustomerBookingCreate",
    "NotificationRequest",
    "TimeSlot",
    "StaffSchedule",
    "ConflictCheckResult",
]
