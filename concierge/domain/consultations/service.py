"""Consultation service - Business logic for consultation requests"""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...config import Settings
from ...email_service import EmailDispatcher
from ...models import (
    CONSULTATION_APPROVED,
    CONSULTATION_CONFIRMED,
    CONSULTATION_PENDING,
    CONSULTATION_REJECTED,
    CONSULTATION_RESCHEDULED,
    CONSULTATION_SCHEDULED,
    CONSULTATION_UNDER_REVIEW,
    CONSULTATION_WAITLISTED,
    Admin,
    ConsultationRequest,
)
from ..email_actions.tokens import generate_consultation_action_urls
from .repository import ConsultationRepository
from .schemas import ConsultationCreate, ConsultationUpdate, RequestNewTimes

logger = logging.getLogger(__name__)

# Statuses that also move the lead through the sales pipeline
PIPELINE_FOR_STATUS = {
    CONSULTATION_UNDER_REVIEW: "under_review",
    CONSULTATION_SCHEDULED: "scheduled",
    CONSULTATION_APPROVED: "approved",
    CONSULTATION_REJECTED: "rejected",
}


class ConsultationService:
    """Service layer for consultation business logic"""

    def __init__(self, db: Session, dispatcher: EmailDispatcher, settings: Settings):
        self.db = db
        self.repo = ConsultationRepository()
        self.dispatcher = dispatcher
        self.settings = settings

    def _admin_links(self, consultation: ConsultationRequest) -> dict:
        urls = generate_consultation_action_urls(
            consultation.id, consultation.email, base_url=self.settings.backend_url
        )
        return {
            "confirm_url": urls["confirm_url"],
            "waitlist_url": urls["waitlist_url"],
            "admin_dashboard_url": self.settings.build_frontend_url(
                f"/admin/consultations/{consultation.id}"
            ),
        }

    def list_requests(
        self,
        status: Optional[str] = None,
        search: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[ConsultationRequest]:
        return self.repo.list_requests(self.db, status, search, limit, offset)

    def get_request(self, consultation_id: str) -> ConsultationRequest:
        consultation = self.repo.get_by_id(self.db, consultation_id)
        if not consultation:
            raise HTTPException(status_code=404, detail="Consultation request not found")
        return consultation

    async def submit_request(self, data: ConsultationCreate) -> dict:
        """Store a public consultation request and notify the prospect and the admin inbox"""
        logger.info(f"📥 New consultation request from {data.email}")

        consultation = self.repo.create(
            self.db,
            full_name=data.full_name,
            email=data.email,
            phone=data.phone,
            message=data.message,
            preferred_slots=data.preferred_slots,
            request_type="consultation_booking",
            status=CONSULTATION_PENDING,
            admin_status=CONSULTATION_PENDING,
            pipeline_status="lead",
        )

        client_result = await self.dispatcher.send_email(
            consultation.email,
            "consultation_request_received",
            {
                "client_name": consultation.full_name,
                "confirmation_message": "We have received your consultation request and will review it shortly.",
                "request_id": consultation.id,
                "preferred_slots": consultation.preferred_slots,
                "next_steps": "Our team will confirm one of your preferred times within 24-48 hours.",
                "consultation_id": consultation.id,
            },
        )

        admin_result = await self.dispatcher.send_email(
            self.settings.admin_notification_email,
            "new_consultation_request",
            {
                "client_name": consultation.full_name,
                "client_email": consultation.email,
                "client_phone": consultation.phone,
                "client_message": consultation.message,
                "preferred_slots": consultation.preferred_slots,
                "consultation_id": consultation.id,
                "reply_to": consultation.email,
                **self._admin_links(consultation),
            },
        )

        if not client_result.success or not admin_result.success:
            logger.warning(f"⚠️ Consultation {consultation.id} stored but not every email was sent")

        return {
            "id": consultation.id,
            "status": consultation.status,
            "message": "Consultation request submitted successfully",
            "email_sent": client_result.success,
            "admin_notified": admin_result.success,
        }

    def _status_email(self, consultation: ConsultationRequest, data: ConsultationUpdate, admin: Admin):
        """Template and variables for the email that goes out with a status change"""
        client_name = consultation.full_name
        status = data.status

        if status == CONSULTATION_CONFIRMED:
            return "consultation_confirmed", {
                "client_name": client_name,
                "consultation_date": data.confirmed_slot,
                "meeting_details": data.meeting_details or "",
                "meeting_link": data.meeting_link or consultation.meeting_link or "",
                "admin_name": admin.full_name,
            }
        if status == CONSULTATION_RESCHEDULED:
            return "consultation_reschedule_request", {
                "client_name": client_name,
                "reschedule_reason": data.reschedule_reason or "",
                "new_times_url": self.settings.build_frontend_url(
                    f"/consultation/{consultation.id}/new-times"
                ),
            }
        if status == CONSULTATION_WAITLISTED:
            return "consultation_waitlisted", {
                "client_name": client_name,
                "admin_notes": data.admin_notes or "",
            }
        if status == CONSULTATION_UNDER_REVIEW:
            return "consultation_under_review", {
                "client_name": client_name,
                "next_steps": data.next_steps or "We will be in touch soon with the next steps.",
            }
        if status == CONSULTATION_SCHEDULED:
            return "consultation_scheduled", {
                "client_name": client_name,
                "scheduled_datetime": data.scheduled_datetime,
                "meeting_link": data.meeting_link or consultation.meeting_link or "",
            }
        if status == CONSULTATION_APPROVED:
            return "consultation_approved", {
                "client_name": client_name,
                "next_steps": data.next_steps or "Watch your inbox for payment and onboarding details.",
            }
        return "consultation_rejected", {
            "client_name": client_name,
            "reason": data.rejection_reason or "",
        }

    async def update_status(self, consultation_id: str, data: ConsultationUpdate, admin: Admin) -> dict:
        """Apply an admin status change and email the prospect"""
        consultation = self.get_request(consultation_id)

        if data.status == CONSULTATION_CONFIRMED and not data.confirmed_slot:
            raise HTTPException(status_code=400, detail="confirmed_slot is required to confirm a consultation")
        if data.status == CONSULTATION_SCHEDULED and not data.scheduled_datetime:
            raise HTTPException(status_code=400, detail="scheduled_datetime is required to schedule a consultation")

        logger.info(f"🔄 Admin {admin.email} setting consultation {consultation_id} to {data.status}")

        consultation = self.repo.update(
            self.db,
            consultation,
            status=data.status,
            admin_status=data.status,
            pipeline_status=PIPELINE_FOR_STATUS.get(data.status),
            admin_action_at=datetime.now(timezone.utc),
            confirmed_slot=data.confirmed_slot,
            scheduled_datetime=data.scheduled_datetime,
            meeting_link=data.meeting_link,
            admin_notes=data.admin_notes,
        )

        template_name, variables = self._status_email(consultation, data, admin)
        variables["consultation_id"] = consultation.id
        result = await self.dispatcher.send_email(consultation.email, template_name, variables)

        return {"consultation": consultation, "email_sent": result.success}

    async def request_new_times(self, consultation_id: str, data: RequestNewTimes) -> dict:
        """Store three new preferred slots from the prospect and put the request back to pending"""
        consultation = self.get_request(consultation_id)

        consultation = self.repo.update(
            self.db,
            consultation,
            preferred_slots=data.preferred_slots,
            status=CONSULTATION_PENDING,
            admin_status=CONSULTATION_PENDING,
        )
        logger.info(f"🔁 Consultation {consultation_id} received new preferred times")

        client_result = await self.dispatcher.send_email(
            consultation.email,
            "new_times_received",
            {
                "client_name": consultation.full_name,
                "preferred_slots": consultation.preferred_slots,
                "message": data.message or "",
                "consultation_id": consultation.id,
            },
        )

        admin_result = await self.dispatcher.send_email(
            self.settings.admin_notification_email,
            "client_updated_consultation_times",
            {
                "client_name": consultation.full_name,
                "client_email": consultation.email,
                "consultation_id": consultation.id,
                "preferred_slots": consultation.preferred_slots,
                "client_message": data.message or "",
                "reply_to": consultation.email,
                **self._admin_links(consultation),
            },
        )

        return {
            "id": consultation.id,
            "status": consultation.status,
            "message": "New preferred times submitted successfully",
            "email_sent": client_result.success,
            "admin_notified": admin_result.success,
        }
