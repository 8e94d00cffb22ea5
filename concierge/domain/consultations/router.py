"""Consultation router - FastAPI endpoints for consultation requests"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_admin
from ...config import Settings, get_settings
from ...database import get_db
from ...email_service import EmailDispatcher, get_email_dispatcher
from ...models import Admin
from .schemas import (
    ConsultationActionResponse,
    ConsultationCreate,
    ConsultationResponse,
    ConsultationSubmitResponse,
    ConsultationUpdate,
    RequestNewTimes,
)
from .service import ConsultationService

router = APIRouter(prefix="/consultation-requests", tags=["Consultations"])


def get_consultation_service(
    db: Session = Depends(get_db),
    dispatcher: EmailDispatcher = Depends(get_email_dispatcher),
    settings: Settings = Depends(get_settings),
) -> ConsultationService:
    """Dependency injection for ConsultationService"""
    return ConsultationService(db, dispatcher, settings)


# ============================================================================
# PUBLIC ENDPOINTS
# ============================================================================


@router.post("", response_model=ConsultationSubmitResponse, status_code=201)
async def submit_consultation_request(
    data: ConsultationCreate,
    service: ConsultationService = Depends(get_consultation_service),
):
    """Public consultation booking form"""
    return await service.submit_request(data)


@router.post("/{consultation_id}/request-new-times", response_model=ConsultationSubmitResponse)
async def request_new_times(
    consultation_id: str,
    data: RequestNewTimes,
    service: ConsultationService = Depends(get_consultation_service),
):
    """Prospect submits three new preferred times after a reschedule request"""
    return await service.request_new_times(consultation_id, data)


# ============================================================================
# ADMIN ENDPOINTS
# ============================================================================


@router.get("", response_model=list[ConsultationResponse])
async def list_consultation_requests(
    status: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    current_admin: Admin = Depends(get_current_admin),
    service: ConsultationService = Depends(get_consultation_service),
):
    return service.list_requests(status, search, limit, offset)


@router.get("/{consultation_id}", response_model=ConsultationResponse)
async def get_consultation_request(
    consultation_id: str,
    current_admin: Admin = Depends(get_current_admin),
    service: ConsultationService = Depends(get_consultation_service),
):
    return service.get_request(consultation_id)


@router.patch("/{consultation_id}", response_model=ConsultationActionResponse)
async def update_consultation_request(
    consultation_id: str,
    data: ConsultationUpdate,
    current_admin: Admin = Depends(get_current_admin),
    service: ConsultationService = Depends(get_consultation_service),
):
    """Confirm, reschedule, waitlist, review, schedule, approve or reject a request"""
    return await service.update_status(consultation_id, data, current_admin)
