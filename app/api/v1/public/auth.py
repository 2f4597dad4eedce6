# ============================================================================
# FILE: app/api/v1/public/auth.py
# Public authentication endpoints - owner and staff login
# ============================================================================
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from pydantic import BaseModel, EmailStr

from app.api.dependencies import get_db, get_current_principal, create_access_token, Principal
from app.core.exceptions import AuthenticationError
from app.schemas.common import success_response
from app.services.auth.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["Authentication"])


# ============================================================================
# Pydantic Schemas
# ============================================================================

class LoginRequest(BaseModel):
    """Request body for business owner login."""
    email: EmailStr
    password: str

    class Config:
        json_schema_extra = {
            "example": {
                "email": "owner@example.com",
                "password": "SecurePass123!"
            }
        }


class StaffLoginRequest(BaseModel):
    """Request body for staff portal login."""
    username: str
    password: str


# ============================================================================
# Endpoints
# ============================================================================

@router.post("/login")
def login(request: LoginRequest, db: Session = Depends(get_db)):
    """Exchange owner credentials for an access token"""
    client = AuthService.authenticate_client(db, request.email, request.password)
    if not client:
        raise AuthenticationError("Invalid credentials")
    if not client.is_active:
        raise AuthenticationError("Account is not active. Please contact support.")

    token = create_access_token({"sub": str(client.id), "client_id": client.id, "kind": "client"})
    return success_response(
        {
            "token": token,
            "token_type": "bearer",
            "user": {"id": client.id, "name": client.name, "email": client.email, "role": "client"},
        },
        message="Login successful",
    )


@router.post("/staff-login")
def staff_login(request: StaffLoginRequest, db: Session = Depends(get_db)):
    """Exchange staff portal credentials for an access token scoped to the employer"""
    staff = AuthService.authenticate_staff(db, request.username, request.password)
    if not staff:
        raise AuthenticationError("Invalid credentials")

    token = create_access_token({"sub": str(staff.id), "client_id": staff.client_id, "kind": "staff"})
    return success_response(
        {
            "token": token,
            "token_type": "bearer",
            "user": {
                "id": staff.id,
                "name": staff.name,
                "role": staff.portal_access,
                "business_id": staff.client_id,
            },
        },
        message="Login successful",
    )


@router.get("/me")
async def me(principal: Principal = Depends(get_current_principal)):
    return success_response(principal.model_dump())
