# ============================================================================
# FILE: app/services/staff/staff_service.py
# Staff management - creation, updates and schedule templates
# ============================================================================
import logging
from typing import Any, Dict, List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import AppError, InternalError, NotFoundError, ValidationError
from app.models.client import Client
from app.models.staff import Staff
from app.repositories.staff_repository import StaffRepository
from app.schemas.staff import StaffCreate, StaffUpdate

logger = logging.getLogger(__name__)


class StaffService:
    """Service layer for staff operations."""

    def __init__(self, db: Session):
        self.db = db
        self.repo = StaffRepository(db)

    def list_staff(self, client_id: int) -> List[Dict[str, Any]]:
        try:
            return [self._serialize(staff) for staff in self.repo.list(client_id)]
        except SQLAlchemyError as e:
            logger.error(f"Error fetching staff for client {client_id}: {e}", exc_info=True)
            raise InternalError("Failed to fetch staff", error=str(e))

    def get_staff(self, client_id: int, staff_id: int) -> Dict[str, Any]:
        staff = self.repo.get(client_id, staff_id)
        if not staff:
            raise NotFoundError("Staff member not found")
        return self._serialize(staff)

    def create_staff(self, client_id: int, request: StaffCreate) -> Dict[str, Any]:
        """
        Create a staff member.
        Raises ValidationError if the username is taken or login is enabled without credentials.
        """
        try:
            if request.username and self.repo.get_by_username(request.username):
                raise ValidationError("Username already taken")
            if request.can_login and not (request.username and request.password):
                raise ValidationError("Username and password are required when login is enabled")

            staff = self.repo.add(Staff(
                client_id=client_id,
                name=request.name,
                email=request.email,
                phone=request.phone,
                working_hours=self._dump_hours(request.working_hours),
                active=request.active,
                username=request.username,
                hashed_password=Client.hash_password(request.password) if request.password else None,
                portal_access=request.portal_access.value,
                can_login=request.can_login,
            ))
            self.db.commit()
            self.db.refresh(staff)
        except AppError:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error creating staff for client {client_id}: {e}", exc_info=True)
            raise InternalError("Failed to create staff member", error=str(e))

        logger.info(f"Created staff {staff.id}: {staff.name}")
        return self._serialize(staff)

    def update_staff(self, client_id: int, staff_id: int, request: StaffUpdate) -> Dict[str, Any]:
        changes = request.model_dump(exclude_unset=True)
        try:
            staff = self.repo.get(client_id, staff_id)
            if not staff:
                raise NotFoundError("Staff member not found")

            if "working_hours" in changes:
                staff.working_hours = self._dump_hours(request.working_hours)
            if "password" in changes:
                staff.hashed_password = Client.hash_password(request.password) if request.password else None
            if "portal_access" in changes and request.portal_access is not None:
                staff.portal_access = request.portal_access.value

            for field in ("name", "email", "phone", "active", "can_login"):
                if field in changes and changes[field] is not None:
                    setattr(staff, field, changes[field])

            self.db.commit()
            self.db.refresh(staff)
        except AppError:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error updating staff {staff_id}: {e}", exc_info=True)
            raise InternalError("Failed to update staff member", error=str(e))

        return self._serialize(staff)

    @staticmethod
    def _dump_hours(entries):
        if entries is None:
            return None
        return [entry.model_dump(mode="json") for entry in entries]

    def _serialize(self, staff: Staff) -> Dict[str, Any]:
        data = staff.to_dict()
        # Always expose the effective template
        data["working_hours"] = [
            entry.model_dump(mode="json") for entry in self.repo.working_hours_for(staff)
        ]
        return data
