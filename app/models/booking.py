# app/models/booking.py
"""
Booking Model
A reservation of one service, optionally with a customer and a staff member,
at a wall-clock time on a calendar date. Recurring children point at the
first booking of their series through parent_booking_id.
"""
from sqlalchemy import Column, String, Integer, Boolean, Date, DateTime, Numeric, Text, ForeignKey, Index, text
from sqlalchemy.sql import func
import enum
from app.models.base import Base


class BookingStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"
    REFUNDED = "refunded"


class RecurringPattern(str, enum.Enum):
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"


class StaffPreference(str, enum.Enum):
    ANY = "any"
    SPECIFIC = "specific"


ACTIVE_STATUSES = (BookingStatus.CONFIRMED.value, BookingStatus.PENDING.value)

ACTIVE_SLOT_PREDICATE = "status IN ('pending', 'confirmed') AND staff_id IS NOT NULL"

ACTIVE_SLOT_INDEX = "uq_bookings_active_staff_slot"


class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        Index("idx_bookings_client_date", "client_id", "booking_date"),
        Index("idx_bookings_client_staff_date", "client_id", "staff_id", "booking_date"),
        Index("idx_bookings_client_status", "client_id", "status"),
        Index("idx_bookings_recurring_parent", "is_recurring", "parent_booking_id"),
        # At most one active booking per staff member and start time
        Index(
            ACTIVE_SLOT_INDEX,
            "staff_id", "booking_date", "booking_time",
            unique=True,
            sqlite_where=text(ACTIVE_SLOT_PREDICATE),
            postgresql_where=text(ACTIVE_SLOT_PREDICATE),
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)

    # References
    client_id = Column(Integer, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False)
    service_id = Column(Integer, ForeignKey("services.id", ondelete="CASCADE"), nullable=False, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id", ondelete="SET NULL"), nullable=True, index=True)
    staff_id = Column(Integer, ForeignKey("staff.id", ondelete="SET NULL"), nullable=True, index=True)

    # Booking details
    booking_date = Column(Date, nullable=False)
    booking_time = Column(String(5), nullable=False)  # HH:MM format
    duration = Column(Integer, nullable=False)  # minutes
    price = Column(Numeric(10, 2), nullable=False, default=0)
    notes = Column(Text, nullable=True)

    # Status tracking
    status = Column(String(20), default=BookingStatus.PENDING.value, nullable=False, index=True)
    payment_status = Column(String(20), default=PaymentStatus.PENDING.value, nullable=False)
    staff_preference = Column(String(20), default=StaffPreference.ANY.value, nullable=False)

    # Recurrence
    is_recurring = Column(Boolean, default=False, nullable=False)
    recurring_pattern = Column(String(20), nullable=True)
    recurring_end_date = Column(Date, nullable=True)
    parent_booking_id = Column(Integer, ForeignKey("bookings.id", ondelete="CASCADE"), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return (
            f"<Booking(id={self.id}, client_id={self.client_id}, staff_id={self.staff_id}, "
            f"{self.booking_date} {self.booking_time}, status={self.status})>"
        )

    def to_dict(self):
        """Convert to dictionary for API responses"""
        return {
            "id": self.id,
            "client_id": self.client_id,
            "service_id": self.service_id,
            "customer_id": self.customer_id,
            "staff_id": self.staff_id,
            "booking_date": self.booking_date.isoformat() if self.booking_date else None,
            "booking_time": self.booking_time,
            "duration": self.duration,
            "price": float(self.price) if self.price is not None else None,
            "status": self.status,
            "payment_status": self.payment_status,
            "staff_preference": self.staff_preference,
            "notes": self.notes,
            "is_recurring": self.is_recurring,
            "recurring_pattern": self.recurring_pattern,
            "recurring_end_date": self.recurring_end_date.isoformat() if self.recurring_end_date else None,
            "parent_booking_id": self.parent_booking_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
