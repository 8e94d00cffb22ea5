"""
Registration service - payment confirmation and client account activation

Flow:
    admin confirms payment -> registered_users row + registration JWT -> email with link
    client opens link -> token validated -> password set -> account active
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...config import Settings
from ...email_service import EmailDispatcher
from ...models import CONSULTATION_ONBOARDING, Admin, RegisteredUser
from ...security_utils import (
    REGISTRATION_TOKEN_TYPE,
    create_registration_token,
    hash_password_bcrypt,
    verify_jwt_token,
)
from ..consultations.repository import ConsultationRepository
from .repository import RegisteredUserRepository
from .schemas import PaymentConfirmation, RegistrationComplete

logger = logging.getLogger(__name__)


class RegistrationTokenError(Exception):
    """A registration link that cannot be used"""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands back naive datetimes
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def format_expiry(expires_at: datetime) -> str:
    return expires_at.strftime("%B %d, %Y")


class RegistrationService:
    """Service layer for client registration"""

    def __init__(self, db: Session, dispatcher: EmailDispatcher, settings: Settings):
        self.db = db
        self.repo = RegisteredUserRepository()
        self.consultations = ConsultationRepository()
        self.dispatcher = dispatcher
        self.settings = settings

    def _registration_url(self, token: str) -> str:
        return self.settings.build_frontend_url(f"/register?token={token}")

    def _issue_token(self, email: str, name: Optional[str], consultation_id: Optional[str]):
        return create_registration_token(
            email,
            name,
            self.settings.secret_key,
            self.settings.registration_token_days,
            consultation_id=consultation_id,
        )

    # ------------------------------------------------------------------
    # Payment confirmation (admin)
    # ------------------------------------------------------------------

    async def confirm_payment(self, data: PaymentConfirmation, admin: Admin) -> dict:
        consultation = None
        if data.consultation_id:
            consultation = self.consultations.get_by_id(self.db, data.consultation_id)
            if not consultation:
                raise HTTPException(status_code=404, detail="Consultation request not found")

        user = self.repo.get_by_email(self.db, data.client_email)
        if user and user.token_used:
            raise HTTPException(status_code=409, detail="Client has already completed registration")

        token, expires_at = self._issue_token(data.client_email, data.client_name, data.consultation_id)
        now = datetime.now(timezone.utc)
        account = {
            "full_name": data.client_name,
            "payment_confirmed": True,
            "payment_confirmed_at": now,
            "registration_token": token,
            "token_expires_at": expires_at,
            "token_used": False,
            "consultation_id": data.consultation_id,
        }
        if user:
            user = self.repo.update(self.db, user, **account)
        else:
            user = self.repo.create(self.db, email=data.client_email, role="client", is_active=False, **account)

        if consultation:
            self.consultations.update(
                self.db,
                consultation,
                status=CONSULTATION_ONBOARDING,
                admin_status=CONSULTATION_ONBOARDING,
                pipeline_status="onboarding",
                payment_verified=True,
                payment_amount=data.payment_amount,
                package_tier=data.package_tier,
                admin_action_at=now,
            )

        logger.info(f"💳 Payment confirmed for {user.email} by {admin.email}")

        registration_url = self._registration_url(token)
        result = await self.dispatcher.send_email(
            user.email,
            "payment_confirmed_welcome",
            {
                "client_name": data.client_name,
                "payment_amount": data.payment_amount or "",
                "package_tier": data.package_tier or "",
                "next_steps": "Create your account using the button below to start onboarding.",
                "registration_url": registration_url,
                "token_expiry": format_expiry(expires_at),
                "user_id": user.id,
            },
        )

        return {
            "message": "Payment confirmed and registration link issued",
            "client_email": user.email,
            "consultation_id": data.consultation_id,
            "registration_url": registration_url,
            "token_expires_at": expires_at,
            "email_sent": result.success,
        }

    # ------------------------------------------------------------------
    # Registration (client)
    # ------------------------------------------------------------------

    def _resolve_token(self, token: str) -> RegisteredUser:
        """Return the account a registration token belongs to or raise RegistrationTokenError"""
        payload = verify_jwt_token(token, self.settings.secret_key)
        if not payload:
            raise RegistrationTokenError("Registration link expired")
        if payload.get("type") != REGISTRATION_TOKEN_TYPE or not payload.get("email"):
            raise RegistrationTokenError("Invalid registration link")

        user = self.repo.get_by_email(self.db, payload["email"])
        if not user:
            raise RegistrationTokenError("Registration link not found")
        if user.registration_token != token:
            raise RegistrationTokenError("Registration link mismatch")
        if user.token_used:
            raise RegistrationTokenError("Registration link already used")
        if not user.payment_confirmed:
            raise RegistrationTokenError("Payment not confirmed")

        expires_at = _as_utc(user.token_expires_at)
        if expires_at and datetime.now(timezone.utc) > expires_at:
            raise RegistrationTokenError("Registration link expired")

        return user

    def validate_token(self, token: str) -> dict:
        try:
            user = self._resolve_token(token)
        except RegistrationTokenError as e:
            logger.warning(f"⚠️ Registration token rejected: {e.reason}")
            raise HTTPException(status_code=400, detail=e.reason)

        return {
            "valid": True,
            "email": user.email,
            "full_name": user.full_name,
            "expires_at": user.token_expires_at,
        }

    async def complete_registration(self, data: RegistrationComplete) -> dict:
        try:
            user = self._resolve_token(data.token)
        except RegistrationTokenError as e:
            logger.warning(f"⚠️ Registration attempt with unusable token: {e.reason}")
            raise HTTPException(status_code=400, detail=e.reason)

        user = self.repo.update(
            self.db,
            user,
            passcode_hash=hash_password_bcrypt(data.password),
            token_used=True,
            is_active=True,
        )
        logger.info(f"✅ Client {user.email} completed registration")

        result = await self.dispatcher.send_email(
            user.email,
            "client_welcome",
            {
                "client_name": user.full_name,
                "dashboard_url": self.settings.build_frontend_url("/dashboard"),
                "user_id": user.id,
            },
        )
        return {"message": "Registration complete", "email": user.email, "email_sent": result.success}

    async def resend_token(self, email: str) -> dict:
        """Reissue the registration link for a paid client who has not registered yet"""
        user = self.repo.get_by_email(self.db, email)
        if not user or not user.payment_confirmed:
            raise HTTPException(status_code=404, detail="No pending registration for this email")
        if user.token_used:
            raise HTTPException(status_code=409, detail="Account already registered. Please log in instead.")

        token, expires_at = self._issue_token(user.email, user.full_name, user.consultation_id)
        user = self.repo.update(self.db, user, registration_token=token, token_expires_at=expires_at)
        logger.info(f"🔁 Registration link reissued for {user.email}")

        result = await self.dispatcher.send_email(
            user.email,
            "registration_token_resent",
            {
                "client_name": user.full_name,
                "registration_url": self._registration_url(token),
                "token_expiry": format_expiry(expires_at),
                "user_id": user.id,
            },
        )
        return {"message": "Registration link sent", "email": user.email, "email_sent": result.success}
