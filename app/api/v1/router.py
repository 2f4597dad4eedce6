"""
API router setup
Organized into: public auth routes and JWT-protected resource routes
"""
from fastapi import APIRouter

from app.api.v1 import bookings, services, staff
from app.api.v1.public import auth

api_router = APIRouter()

# ============================================================================
# PUBLIC ROUTES (No authentication required)
# ============================================================================
api_router.include_router(
    auth.router,
    # No prefix needed - auth.router already has "/auth" prefix
    tags=["Authentication"]
)

# ============================================================================
# RESOURCE ROUTES (JWT authentication; bookings has a few public endpoints)
# ============================================================================
api_router.include_router(bookings.router)
api_router.include_router(staff.router)
api_router.include_router(services.router)


# ============================================================================
# ROOT ENDPOINT - API Info
# ============================================================================
@api_router.get("/", tags=["Info"])
async def api_info():
    """
    API information and available endpoints.
    """
    return {
        "version": "1.0",
        "authentication": {
            "public": "POST /auth/login, POST /auth/staff-login, POST /bookings/customer, GET /bookings/staff-schedules",
            "protected": "JWT Bearer token required (owner or staff login)",
        }
    }
