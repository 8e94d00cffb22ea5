"""Application router - FastAPI endpoints for application tracking"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_admin
from ...config import Settings, get_settings
from ...database import get_db
from ...email_service import EmailDispatcher, get_email_dispatcher
from ...models import Admin
from .schemas import (
    ApplicationCreate,
    ApplicationCreateResponse,
    ApplicationEmailResponse,
    ApplicationResponse,
    ApplicationUpdate,
    ApplicationUpdateEmail,
    ApplicationUpdateResponse,
)
from .service import ApplicationService

router = APIRouter(prefix="/applications", tags=["Applications"])


def get_application_service(
    db: Session = Depends(get_db),
    dispatcher: EmailDispatcher = Depends(get_email_dispatcher),
    settings: Settings = Depends(get_settings),
) -> ApplicationService:
    """Dependency injection for ApplicationService"""
    return ApplicationService(db, dispatcher, settings)


@router.get("", response_model=list[ApplicationResponse])
async def list_applications(
    client_id: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    current_admin: Admin = Depends(get_current_admin),
    service: ApplicationService = Depends(get_application_service),
):
    return service.list_applications(client_id, status, limit, offset)


@router.post("", response_model=ApplicationCreateResponse, status_code=201)
async def create_application(
    data: ApplicationCreate,
    current_admin: Admin = Depends(get_current_admin),
    service: ApplicationService = Depends(get_application_service),
):
    """Log an application submitted for a client and email them"""
    return await service.create_application(data, current_admin)


@router.get("/{application_id}", response_model=ApplicationResponse)
async def get_application(
    application_id: str,
    current_admin: Admin = Depends(get_current_admin),
    service: ApplicationService = Depends(get_application_service),
):
    return service.get_application(application_id)


@router.patch("/{application_id}", response_model=ApplicationUpdateResponse)
async def update_application(
    application_id: str,
    data: ApplicationUpdate,
    current_admin: Admin = Depends(get_current_admin),
    service: ApplicationService = Depends(get_application_service),
):
    return await service.update_application(application_id, data, current_admin)


@router.post("/{application_id}/send-update", response_model=ApplicationEmailResponse)
async def send_application_update(
    application_id: str,
    data: ApplicationUpdateEmail,
    current_admin: Admin = Depends(get_current_admin),
    service: ApplicationService = Depends(get_application_service),
):
    """Send the client a progress email about this application"""
    return await service.send_update_email(application_id, data, current_admin)
