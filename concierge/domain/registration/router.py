"""Registration routers - admin payment confirmation and public client sign-up"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_admin
from ...config import Settings, get_settings
from ...database import get_db
from ...email_service import EmailDispatcher, get_email_dispatcher
from ...models import Admin
from .schemas import (
    PaymentConfirmation,
    PaymentConfirmationResponse,
    RegistrationComplete,
    RegistrationResponse,
    ResendToken,
    TokenValidationResponse,
)
from .service import RegistrationService

payments_router = APIRouter(prefix="/admin", tags=["Payments"])
router = APIRouter(prefix="/register", tags=["Registration"])


def get_registration_service(
    db: Session = Depends(get_db),
    dispatcher: EmailDispatcher = Depends(get_email_dispatcher),
    settings: Settings = Depends(get_settings),
) -> RegistrationService:
    """Dependency injection for RegistrationService"""
    return RegistrationService(db, dispatcher, settings)


@payments_router.post("/payment-confirmation", response_model=PaymentConfirmationResponse)
async def confirm_payment(
    data: PaymentConfirmation,
    current_admin: Admin = Depends(get_current_admin),
    service: RegistrationService = Depends(get_registration_service),
):
    """Record payment, move the consultation to onboarding and email the registration link"""
    return await service.confirm_payment(data, current_admin)


@router.get("/validate-token/{token}", response_model=TokenValidationResponse)
async def validate_registration_token(
    token: str,
    service: RegistrationService = Depends(get_registration_service),
):
    return service.validate_token(token)


@router.post("/complete", response_model=RegistrationResponse)
async def complete_registration(
    data: RegistrationComplete,
    service: RegistrationService = Depends(get_registration_service),
):
    return await service.complete_registration(data)


@router.post("/resend-token", response_model=RegistrationResponse)
async def resend_registration_token(
    data: ResendToken,
    service: RegistrationService = Depends(get_registration_service),
):
    return await service.resend_token(data.email)
