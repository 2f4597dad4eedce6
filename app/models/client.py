# ============================================================================
# FILE: app/models/client.py
# Tenant accounts - every business record is scoped by clients.id
# ============================================================================
from sqlalchemy import Column, String, Integer, DateTime
from sqlalchemy.sql import func
from passlib.context import CryptContext
import enum
from app.models.base import Base

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class ClientStatus(str, enum.Enum):
    """Account lifecycle of a business owner."""
    ACTIVE = "active"
    SUSPENDED = "suspended"
    TRIAL = "trial"


class Client(Base):
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=True)
    status = Column(String(20), default=ClientStatus.ACTIVE.value, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def verify_password(self, plain_password: str) -> bool:
        """Verify a plain password against the hashed password."""
        return pwd_context.verify(plain_password, self.hashed_password)

    @staticmethod
    def hash_password(plain_password: str) -> str:
        """Hash a plain password."""
        return pwd_context.hash(plain_password)

    @property
    def is_active(self) -> bool:
        # Trial accounts may use the system until suspended
        return self.status in (ClientStatus.ACTIVE.value, ClientStatus.TRIAL.value)

    def __repr__(self):
        return f"<Client {self.email} ({self.status})>"
