# ============================================================================
# FILE: app/api/v1/staff.py
# Staff management endpoints
# ============================================================================
from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session

from app.api.dependencies import Principal, get_current_principal
from app.config.database import get_db
from app.schemas.common import success_response
from app.schemas.staff import StaffCreate, StaffUpdate
from app.services.staff.staff_service import StaffService

router = APIRouter(prefix="/staff", tags=["staff"])


@router.get("")
def list_staff(
        principal: Principal = Depends(get_current_principal),
        db: Session = Depends(get_db)
):
    return success_response(StaffService(db).list_staff(principal.client_id))


@router.get("/{staff_id}")
def get_staff(
        staff_id: int = Path(...),
        principal: Principal = Depends(get_current_principal),
        db: Session = Depends(get_db)
):
    return success_response(StaffService(db).get_staff(principal.client_id, staff_id))


@router.post("")
def create_staff(
        request: StaffCreate,
        principal: Principal = Depends(get_current_principal),
        db: Session = Depends(get_db)
):
    staff = StaffService(db).create_staff(principal.client_id, request)
    return success_response(staff, message="Staff member created successfully")


@router.put("/{staff_id}")
def update_staff(
        request: StaffUpdate,
        staff_id: int = Path(...),
        principal: Principal = Depends(get_current_principal),
        db: Session = Depends(get_db)
):
    staff = StaffService(db).update_staff(principal.client_id, staff_id, request)
    return success_response(staff, message="Staff member updated successfully")
