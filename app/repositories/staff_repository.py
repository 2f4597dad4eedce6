# app/repositories/staff_repository.py
"""
Staff Directory

Read access to staff members and their weekly working-hours template,
always scoped to one client.
"""
import json
import logging
from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError

from app.models.staff import Staff
from app.repositories.base import BaseRepository
from app.schemas.staff import WorkingHoursEntry
from app.services.scheduling.time_utils import Weekday

logger = logging.getLogger(__name__)


# Applied when a staff member has no usable template of their own
DEFAULT_WORKING_HOURS: List[WorkingHoursEntry] = [
    WorkingHoursEntry(day=Weekday.MONDAY, start_time="09:00", end_time="18:00", is_working=True),
    WorkingHoursEntry(day=Weekday.TUESDAY, start_time="09:00", end_time="18:00", is_working=True),
    WorkingHoursEntry(day=Weekday.WEDNESDAY, start_time="09:00", end_time="18:00", is_working=True),
    WorkingHoursEntry(day=Weekday.THURSDAY, start_time="09:00", end_time="18:00", is_working=True),
    WorkingHoursEntry(day=Weekday.FRIDAY, start_time="09:00", end_time="18:00", is_working=True),
    WorkingHoursEntry(day=Weekday.SATURDAY, start_time="09:00", end_time="17:00", is_working=True),
    WorkingHoursEntry(day=Weekday.SUNDAY, start_time="10:00", end_time="16:00", is_working=False),
]


def parse_working_hours(raw) -> Optional[List[WorkingHoursEntry]]:
    """
    Parse a stored template (JSON text or already-decoded list).

    Returns None when the value is missing, empty or unparsable.
    """
    if raw is None:
        return None

    try:
        if isinstance(raw, (str, bytes)):
            raw = json.loads(raw)
        if not isinstance(raw, list) or not raw:
            return None
        return [WorkingHoursEntry.model_validate(entry) for entry in raw]
    except (ValueError, TypeError, PydanticValidationError) as e:
        logger.warning(f"Unparsable working hours template: {e}")
        return None


def entry_for_day(entries: List[WorkingHoursEntry], day: Weekday) -> Optional[WorkingHoursEntry]:
    return next((entry for entry in entries if entry.day == day), None)


class StaffRepository(BaseRepository):
    """Repository for staff lookups and schedule templates."""

    def list_active(self, client_id: int) -> List[Staff]:
        return self.session.query(Staff).filter(
            Staff.client_id == client_id,
            Staff.active == True  # noqa: E712
        ).order_by(Staff.id.asc()).all()

    def list(self, client_id: int) -> List[Staff]:
        return self.session.query(Staff).filter(
            Staff.client_id == client_id
        ).order_by(Staff.name.asc()).all()

    def get(self, client_id: int, staff_id: int) -> Optional[Staff]:
        return self.session.query(Staff).filter(
            Staff.id == staff_id,
            Staff.client_id == client_id
        ).first()

    def get_by_username(self, username: str) -> Optional[Staff]:
        return self.session.query(Staff).filter(Staff.username == username).first()

    def working_hours_for(self, staff: Staff) -> List[WorkingHoursEntry]:
        """The staff member's template, or DEFAULT_WORKING_HOURS when absent or unparsable"""
        entries = parse_working_hours(staff.working_hours)
        if entries is None:
            logger.debug(f"Using default working hours for staff {staff.id}")
            return list(DEFAULT_WORKING_HOURS)
        return entries
