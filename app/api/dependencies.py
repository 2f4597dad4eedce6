# ============================================================================
# FILE: app/api/dependencies.py
# Authentication dependencies for JWT tokens
# ============================================================================
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import Optional
from datetime import datetime, timedelta, timezone
from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import BaseModel

from app.config.database import get_db
from app.config.settings import get_settings
from app.core.exceptions import AuthenticationError
from app.repositories.client_repository import ClientRepository
from app.repositories.staff_repository import StaffRepository

# ============================================================================
# Security Schemes
# ============================================================================

# auto_error is off so a missing header is rendered by our own 401 envelope
jwt_security = HTTPBearer(
    scheme_name="JWT Bearer Token",
    description="Enter your JWT access token",
    auto_error=False
)


class Principal(BaseModel):
    """The authenticated caller and the tenant it acts for"""
    kind: str  # "client" or "staff"
    id: int
    client_id: int
    name: str
    role: str


# ============================================================================
# JWT Token Functions
# ============================================================================

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token.

    Args:
        data: Dictionary with claims (should include 'sub', 'client_id' and 'kind')
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string
    """
    settings = get_settings()
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(
            minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES
        )

    to_encode.update({
        "exp": expire,
        "iat": datetime.now(timezone.utc),
        "type": "access"
    })

    return jwt.encode(
        to_encode,
        settings.JWT_SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM
    )


def verify_access_token(token: str) -> dict:
    """
    Verify and decode a JWT access token.

    Raises:
        AuthenticationError: If token is invalid or expired
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM]
        )
    except ExpiredSignatureError:
        raise AuthenticationError("Token expired. Please login again.")
    except JWTError:
        raise AuthenticationError("Invalid token.")

    if payload.get("type") != "access":
        raise AuthenticationError("Invalid token type")

    return payload


def resolve_principal(db: Session, token: str) -> Principal:
    """Map a verified token onto an active client or staff login"""
    payload = verify_access_token(token)

    try:
        subject_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise AuthenticationError("Invalid token.")

    kind = payload.get("kind", "client")

    if kind == "staff":
        staff = StaffRepository(db).get(payload.get("client_id"), subject_id)
        if not staff or not staff.active or not staff.can_login:
            raise AuthenticationError("Invalid token. User not found.")
        employer = ClientRepository(db).get(staff.client_id)
        if not employer or not employer.is_active:
            raise AuthenticationError("Account is not active. Please contact support.")
        return Principal(
            kind="staff",
            id=staff.id,
            client_id=staff.client_id,
            name=staff.name,
            role=staff.portal_access,
        )

    client = ClientRepository(db).get(subject_id)
    if not client:
        raise AuthenticationError("Invalid token. User not found.")
    if not client.is_active:
        raise AuthenticationError("Account is not active. Please contact support.")
    return Principal(kind="client", id=client.id, client_id=client.id, name=client.name, role="client")


# ============================================================================
# JWT Authentication Dependencies
# ============================================================================

async def get_current_principal(
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(jwt_security),
        db: Session = Depends(get_db)
) -> Principal:
    """
    Dependency to get the authenticated caller from the bearer token.

    Usage in routes:
        @router.get("/bookings")
        async def list_bookings(principal: Principal = Depends(get_current_principal)):
            return principal.client_id

    Raises:
        AuthenticationError 401: If token is missing, invalid or the account is gone
    """
    if not credentials:
        raise AuthenticationError("Access denied. No token provided.")

    return resolve_principal(db, credentials.credentials)


async def optional_current_principal(
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(jwt_security),
        db: Session = Depends(get_db)
) -> Optional[Principal]:
    """
    Optional JWT authentication dependency.
    Returns Principal if a valid token was provided, None otherwise.
    """
    if not credentials:
        return None

    try:
        return resolve_principal(db, credentials.credentials)
    except AuthenticationError:
        return None
