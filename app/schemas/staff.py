"""
Pydantic schemas for staff members and their working-hours template
"""
from pydantic import BaseModel, Field, EmailStr, field_validator, model_validator
from typing import Optional, List

from app.models.staff import PortalAccess
from app.schemas.common import validate_hhmm
from app.services.scheduling.time_utils import Weekday, to_minutes


def _check_unique_days(entries):
    if entries is None:
        return entries
    days = [entry.day for entry in entries]
    if len(days) != len(set(days)):
        raise ValueError("Each weekday may appear only once in working_hours")
    return entries


class WorkingHoursEntry(BaseModel):
    """One weekday of a staff member's schedule template"""
    day: Weekday
    start_time: str = "09:00"
    end_time: str = "18:00"
    is_working: bool = True

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, v, info):
        return validate_hhmm(v, info.field_name)

    @model_validator(mode="after")
    def validate_window(self):
        if self.is_working and to_minutes(self.end_time) <= to_minutes(self.start_time):
            raise ValueError("end_time must be after start_time on a working day")
        return self


class StaffCreate(BaseModel):
    """Request body for creating a staff member"""
    name: str = Field(..., min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    working_hours: Optional[List[WorkingHoursEntry]] = None
    active: bool = True

    username: Optional[str] = Field(None, min_length=3, max_length=100)
    password: Optional[str] = Field(None, min_length=8)
    portal_access: PortalAccess = PortalAccess.STAFF
    can_login: bool = False

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError("Staff name is required")
        return v.strip()

    @field_validator("working_hours")
    @classmethod
    def validate_unique_days(cls, v):
        return _check_unique_days(v)


class StaffUpdate(BaseModel):
    """
    Request body for updating a staff member.
    All fields are optional - only send what you want to update.
    """
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    working_hours: Optional[List[WorkingHoursEntry]] = None
    active: Optional[bool] = None
    portal_access: Optional[PortalAccess] = None
    can_login: Optional[bool] = None
    password: Optional[str] = Field(None, min_length=8)

    @field_validator("working_hours")
    @classmethod
    def validate_unique_days(cls, v):
        return _check_unique_days(v)
