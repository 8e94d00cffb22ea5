"""Email action service - one-shot state changes triggered by action-link clicks"""

import logging
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...models import CONSULTATION_CONFIRMED, CONSULTATION_WAITLISTED
from ..admins.repository import AdminRepository
from ..consultations.repository import ConsultationRepository
from . import pages
from .tokens import verify_action_token

logger = logging.getLogger(__name__)


@dataclass
class ActionOutcome:
    status_code: int
    html: str


class EmailActionService:
    """
    Validates action tokens and applies a single row update per click.

    Clicking the same link twice applies the same update twice; there is no
    idempotency or re-entrancy guard.
    """

    def __init__(self, db: Session):
        self.db = db
        self.consultations = ConsultationRepository()
        self.admins = AdminRepository()

    def _consultation_transition(
        self, consultation_id: str, token: str, status: str, title: str, message: str
    ) -> ActionOutcome:
        consultation = self.consultations.get_by_id(self.db, consultation_id)
        if not consultation:
            logger.warning(f"⚠️ Email action on missing consultation {consultation_id}")
            return ActionOutcome(404, pages.not_found_page())

        if not verify_action_token(consultation.id, consultation.email, token):
            logger.warning(f"⚠️ Invalid action token for consultation {consultation_id}")
            return ActionOutcome(403, pages.invalid_link_page())

        try:
            self.consultations.set_status(self.db, consultation, status)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to set consultation {consultation_id} to {status}: {e}")
            return ActionOutcome(500, pages.error_page())

        logger.info(f"✅ Consultation {consultation_id} set to {status} via email action")
        return ActionOutcome(200, pages.success_page(title, message.format(name=consultation.full_name)))

    def confirm_consultation(self, consultation_id: str, token: str) -> ActionOutcome:
        return self._consultation_transition(
            consultation_id,
            token,
            CONSULTATION_CONFIRMED,
            "Consultation Confirmed",
            "The consultation with {name} has been confirmed.",
        )

    def waitlist_consultation(self, consultation_id: str, token: str) -> ActionOutcome:
        return self._consultation_transition(
            consultation_id,
            token,
            CONSULTATION_WAITLISTED,
            "Added to Waitlist",
            "{name} has been added to the waitlist.",
        )

    def _load_admin(self, admin_id: str, token: str):
        """Return (admin, None) when the link is valid, else (None, outcome)"""
        admin = self.admins.get_by_id(self.db, admin_id)
        if not admin:
            logger.warning(f"⚠️ Email action on missing admin {admin_id}")
            return None, ActionOutcome(404, pages.not_found_page())

        if not verify_action_token(admin.id, admin.email, token):
            logger.warning(f"⚠️ Invalid action token for admin {admin_id}")
            return None, ActionOutcome(403, pages.invalid_link_page())

        if admin.is_super_admin:
            logger.warning(f"⚠️ Email action attempted on super admin {admin.email}")
            return None, ActionOutcome(
                403, pages.forbidden_page("The main admin account cannot be changed from an email link.")
            )

        return admin, None

    def suspend_admin(self, admin_id: str, token: str) -> ActionOutcome:
        admin, outcome = self._load_admin(admin_id, token)
        if outcome:
            return outcome

        try:
            self.admins.suspend(self.db, admin, reason="Suspended via email action")
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to suspend admin {admin_id}: {e}")
            return ActionOutcome(500, pages.error_page())

        logger.info(f"✅ Admin {admin.email} suspended via email action")
        return ActionOutcome(
            200, pages.success_page("Admin Suspended", f"{admin.full_name} has been suspended.")
        )

    def delete_admin(self, admin_id: str, token: str) -> ActionOutcome:
        admin, outcome = self._load_admin(admin_id, token)
        if outcome:
            return outcome

        name = admin.full_name
        try:
            self.admins.delete(self.db, admin)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to delete admin {admin_id}: {e}")
            return ActionOutcome(500, pages.error_page())

        logger.info(f"✅ Admin {admin_id} deleted via email action")
        return ActionOutcome(200, pages.success_page("Admin Deleted", f"{name} has been deleted."))
