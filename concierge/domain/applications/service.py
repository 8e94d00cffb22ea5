"""Application service - Business logic for tracked job applications"""

import logging
import re
from datetime import datetime, timezone
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...config import Settings
from ...email_service import EmailDispatcher
from ...models import APPLICATION_APPLIED, APPLICATION_INTERVIEW_REQUESTED, Admin, Application, RegisteredUser
from ..registration.repository import RegisteredUserRepository
from .repository import ApplicationRepository
from .schemas import ApplicationCreate, ApplicationUpdate, ApplicationUpdateEmail

logger = logging.getLogger(__name__)

NON_DIGITS = re.compile(r"\D")


def parse_salary_range(salary_range: Optional[str]) -> tuple[Optional[int], Optional[int]]:
    """
    "$90,000 - $110,000" -> (90000, 110000). Each bound keeps only its digits;
    a bound with no digits is None.
    """
    if not salary_range:
        return None, None

    bounds = []
    for part in salary_range.split("-")[:2]:
        digits = NON_DIGITS.sub("", part)
        bounds.append(int(digits) if digits else None)
    while len(bounds) < 2:
        bounds.append(None)
    return bounds[0], bounds[1]


def status_label(status: str) -> str:
    return status.replace("_", " ").title()


class ApplicationService:
    """Service layer for application tracking"""

    def __init__(self, db: Session, dispatcher: EmailDispatcher, settings: Settings):
        self.db = db
        self.repo = ApplicationRepository()
        self.clients = RegisteredUserRepository()
        self.dispatcher = dispatcher
        self.settings = settings

    def list_applications(
        self,
        client_id: Optional[str] = None,
        status: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Application]:
        return self.repo.list_applications(self.db, client_id, status, limit, offset)

    def get_application(self, application_id: str) -> Application:
        application = self.repo.get_by_id(self.db, application_id)
        if not application:
            raise HTTPException(status_code=404, detail="Application not found")
        return application

    def _get_client(self, client_id: str) -> RegisteredUser:
        client = self.clients.get_by_id(self.db, client_id)
        if not client:
            raise HTTPException(status_code=404, detail="Client not found")
        return client

    async def create_application(self, data: ApplicationCreate, admin: Admin) -> dict:
        """Record an application made on the client's behalf and tell the client"""
        client = self._get_client(data.client_id)
        salary_min, salary_max = parse_salary_range(data.salary_range)

        application = self.repo.create(
            self.db,
            client_id=client.id,
            company=data.company_name,
            job_title=data.job_title,
            title=f"{data.company_name} - {data.job_title}",
            description=data.job_description
            or f"Application for {data.job_title} position at {data.company_name}",
            job_url=data.job_link,
            job_type=data.job_type,
            location=data.location,
            salary_min=salary_min,
            salary_max=salary_max,
            application_strategy=data.application_strategy,
            admin_notes=data.admin_notes
            or data.notes
            or f"Application created by admin for {data.company_name} - {data.job_title}",
            status=APPLICATION_APPLIED,
            applied_by_admin=True,
        )
        logger.info(
            f"📝 Admin {admin.email} logged application {application.id} "
            f"({application.title}) for client {client.id}"
        )

        result = await self.dispatcher.send_email(
            client.email,
            "application_update",
            {
                "client_name": client.full_name,
                "employer_name": application.company,
                "position_title": application.job_title,
                "application_status": status_label(APPLICATION_APPLIED),
                "message": f"We've submitted your application for the {application.job_title} "
                f"position at {application.company}.",
                "next_steps": "We will monitor the application and keep you updated on any progress.",
                "consultant_email": self.settings.support_email,
                "user_id": client.id,
            },
        )

        return {
            "message": "Application created successfully",
            "application": application,
            "email_sent": result.success,
        }

    async def update_application(self, application_id: str, data: ApplicationUpdate, admin: Admin) -> dict:
        """
        Apply an admin update. The first move into interview_requested emails
        the client, later updates in that status do not.
        """
        application = self.get_application(application_id)
        previous_status = application.status

        is_interview_update = (
            data.status == APPLICATION_INTERVIEW_REQUESTED and previous_status != APPLICATION_INTERVIEW_REQUESTED
        )
        now = datetime.now(timezone.utc)

        application = self.repo.update(
            self.db,
            application,
            status=data.status,
            interview_date=data.interview_date,
            offer_amount=data.offer_amount,
            notes=data.notes,
            admin_notes=data.admin_notes,
            job_url=data.job_posting_link,
            interview_update_sent=True if is_interview_update else None,
            interview_notification_sent_at=now if is_interview_update else None,
        )
        logger.info(
            f"🔄 Admin {admin.email} updated application {application_id} "
            f"({previous_status} -> {application.status})"
        )

        notification_sent = False
        if is_interview_update:
            client = application.client
            result = await self.dispatcher.send_email(
                client.email,
                "interview_update_enhanced",
                {
                    "client_name": client.full_name,
                    "employer_name": application.company,
                    "job_title": application.job_title,
                    "job_search_email": client.email,
                    "interview_date": application.interview_date or "To be scheduled",
                    "job_posting_link": application.job_url or "Check your application email",
                    "application_date": (application.date_applied or application.created_at or now).strftime(
                        "%B %d, %Y"
                    ),
                    "message": "An interview request has been received for a role we applied to on your behalf.",
                    "next_steps": "Please check the application email account for details.",
                    "support_message": "We are monitoring alongside you and will support next steps as needed.",
                    "user_id": client.id,
                },
            )
            notification_sent = result.success

        return {
            "message": "Application updated successfully",
            "application": application,
            "status_changed": application.status != previous_status,
            "previous_status": previous_status,
            "interview_notification_sent": notification_sent,
        }

    async def send_update_email(self, application_id: str, data: ApplicationUpdateEmail, admin: Admin) -> dict:
        """Email the client a progress note about one application and log it on the record"""
        application = self.get_application(application_id)
        client = application.client
        if not client:
            raise HTTPException(status_code=404, detail="Client not found for this application")

        reply_to = data.consultant_email or self.settings.support_email
        variables = {
            "client_name": client.full_name,
            "employer_name": application.company,
            "position_title": application.job_title,
            "application_status": status_label(application.status),
            "message": data.message
            or "Your application is being reviewed and we will keep you updated on any progress.",
            "next_steps": data.next_steps or "",
            "consultant_email": reply_to,
            "reply_to": reply_to,
            "user_id": client.id,
        }
        if data.custom_subject:
            variables["subject"] = data.custom_subject

        result = await self.dispatcher.send_email(client.email, "application_update", variables)
        if not result.success:
            raise HTTPException(status_code=502, detail="Failed to send application update email")

        now = datetime.now(timezone.utc)
        note = f"[{now.isoformat()}] Update email sent to client by {admin.email}"
        self.repo.update(
            self.db,
            application,
            last_email_sent_at=now,
            admin_notes=f"{application.admin_notes}\n\n{note}" if application.admin_notes else note,
        )
        logger.info(f"📧 Application update email for {application_id} sent to {client.email}")

        return {
            "message": "Application update email sent successfully",
            "application_id": application.id,
            "email_id": result.id,
            "sent_to": client.email,
            "reply_to": reply_to,
        }
