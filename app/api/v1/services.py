# app/api/v1/services.py
"""
Service Management API Endpoints
Handles listing and creating bookable services
"""
from decimal import Decimal
from typing import Optional
import logging

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.api.dependencies import Principal, get_current_principal
from app.config.database import get_db
from app.core.exceptions import InternalError
from app.models.service import Service
from app.repositories.service_repository import ServiceRepository
from app.schemas.common import success_response

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/services", tags=["services"])


# ============================================================================
# Request Models
# ============================================================================

class ServiceCreate(BaseModel):
    """Request model for creating a service"""
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    price: float = Field(..., ge=0)
    duration: int = Field(30, ge=1, description="Duration in minutes")
    booking_enabled: bool = True


# ============================================================================
# Endpoints
# ============================================================================

@router.get("")
def list_services(
        active_only: bool = Query(False),
        principal: Principal = Depends(get_current_principal),
        db: Session = Depends(get_db)
):
    services = ServiceRepository(db).list(principal.client_id, active_only=active_only)
    return success_response([service.to_dict() for service in services])


@router.post("")
def create_service(
        service_data: ServiceCreate,
        principal: Principal = Depends(get_current_principal),
        db: Session = Depends(get_db)
):
    """
    Create a new service
    """
    try:
        service = ServiceRepository(db).add(Service(
            client_id=principal.client_id,
            name=service_data.name,
            description=service_data.description,
            price=Decimal(str(service_data.price)),
            duration=service_data.duration,
            booking_enabled=service_data.booking_enabled,
            active=True
        ))
        db.commit()
        db.refresh(service)
    except SQLAlchemyError as e:
        logger.error(f"Error creating service: {e}", exc_info=True)
        db.rollback()
        raise InternalError("Failed to create service", error=str(e))

    logger.info(f"Created service {service.id}: {service.name}")
    return success_response(service.to_dict(), message="Service created successfully")
