"""Email action router - GET endpoints behind the buttons in notification emails"""

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from ...database import get_db
from .service import ActionOutcome, EmailActionService

router = APIRouter(prefix="/email-actions", tags=["Email Actions"])


def get_email_action_service(db: Session = Depends(get_db)) -> EmailActionService:
    """Dependency injection for EmailActionService"""
    return EmailActionService(db)


def _respond(outcome: ActionOutcome) -> HTMLResponse:
    return HTMLResponse(content=outcome.html, status_code=outcome.status_code)


@router.get("/health")
async def email_actions_health():
    return {"status": "ok", "service": "email-actions"}


# Tokens may contain "/" (base64 alphabet), hence the :path converter


@router.get("/consultation/{consultation_id}/confirm/{token:path}", response_class=HTMLResponse)
async def confirm_consultation(
    consultation_id: str,
    token: str,
    service: EmailActionService = Depends(get_email_action_service),
):
    return _respond(service.confirm_consultation(consultation_id, token))


@router.get("/consultation/{consultation_id}/waitlist/{token:path}", response_class=HTMLResponse)
async def waitlist_consultation(
    consultation_id: str,
    token: str,
    service: EmailActionService = Depends(get_email_action_service),
):
    return _respond(service.waitlist_consultation(consultation_id, token))


@router.get("/admin/{admin_id}/suspend/{token:path}", response_class=HTMLResponse)
async def suspend_admin(
    admin_id: str,
    token: str,
    service: EmailActionService = Depends(get_email_action_service),
):
    return _respond(service.suspend_admin(admin_id, token))


@router.get("/admin/{admin_id}/delete/{token:path}", response_class=HTMLResponse)
async def delete_admin(
    admin_id: str,
    token: str,
    service: EmailActionService = Depends(get_email_action_service),
):
    return _respond(service.delete_admin(admin_id, token))
