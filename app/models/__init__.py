# app/models/__init__.py
from .base import Base
from .client import Client, ClientStatus
from .staff import Staff, PortalAccess
from .service import Service
from .customer import Customer
from .booking import (
    Booking,
    BookingStatus,
    PaymentStatus,
    RecurringPattern,
    StaffPreference,
    ACTIVE_STATUSES,
)

__all__ = [
    "Base",
    "Client",
    "ClientStatus",
    "Staff",
    "PortalAccess",
    "Service",
    "Customer",
    "Booking",
    "BookingStatus",
    "PaymentStatus",
    "RecurringPattern",
    "StaffPreference",
    "ACTIVE_STATUSES",
]
