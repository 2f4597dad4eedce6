# app/models/staff.py
"""
Staff Model
A staff member belongs to one client and declares a weekly working-hours
template (stored as JSON, one entry per weekday).
"""
from sqlalchemy import Column, String, Integer, Boolean, DateTime, ForeignKey, JSON
from sqlalchemy.sql import func
import enum
from app.models.base import Base
from app.models.client import pwd_context


class PortalAccess(str, enum.Enum):
    STAFF = "staff"
    CASHIER = "cashier"
    ADMIN = "admin"
    ALL = "all"


class Staff(Base):
    __tablename__ = "staff"

    id = Column(Integer, primary_key=True, autoincrement=True)
    client_id = Column(
        Integer,
        ForeignKey("clients.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)

    # [{"day": "monday", "start_time": "09:00", "end_time": "18:00", "is_working": true}, ...]
    working_hours = Column(JSON, nullable=True)
    active = Column(Boolean, default=True, nullable=False)

    # Portal login
    username = Column(String(100), unique=True, nullable=True)
    hashed_password = Column(String(255), nullable=True)
    portal_access = Column(String(20), default=PortalAccess.STAFF.value, nullable=False)
    can_login = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def verify_password(self, plain_password: str) -> bool:
        if not self.hashed_password:
            return False
        return pwd_context.verify(plain_password, self.hashed_password)

    def __repr__(self):
        return f"<Staff(id={self.id}, name={self.name}, client_id={self.client_id})>"

    def to_dict(self):
        """Convert to dictionary for API responses"""
        return {
            "id": self.id,
            "client_id": self.client_id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "working_hours": self.working_hours,
            "active": self.active,
            "username": self.username,
            "portal_access": self.portal_access,
            "can_login": self.can_login,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
