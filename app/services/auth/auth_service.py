# ============================================================================
# FILE: app/services/auth/auth_service.py
# Credential checks for business owners and staff portal logins
# ============================================================================
import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.models.client import Client
from app.models.staff import Staff
from app.repositories.client_repository import ClientRepository
from app.repositories.staff_repository import StaffRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Service layer for authentication."""

    @staticmethod
    def authenticate_client(db: Session, email: str, password: str) -> Optional[Client]:
        """
        Authenticate a business owner by email and password.
        Returns Client if valid, None if invalid credentials.
        """
        client = ClientRepository(db).get_by_email(email)
        if not client or not client.verify_password(password):
            logger.info(f"Failed login attempt for {email}")
            return None
        return client

    @staticmethod
    def authenticate_staff(db: Session, username: str, password: str) -> Optional[Staff]:
        """
        Authenticate a staff member by username and password.
        Only active staff with portal login enabled may sign in.
        """
        staff = StaffRepository(db).get_by_username(username)
        if not staff or not staff.can_login or not staff.active:
            logger.info(f"Rejected staff login for {username}")
            return None
        if not staff.verify_password(password):
            logger.info(f"Failed staff login attempt for {username}")
            return None
        return staff
