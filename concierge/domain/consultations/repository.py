"""Consultation repository - Database operations for consultation requests"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from ...models import ConsultationRequest


class ConsultationRepository:
    """Repository for consultation request database operations"""

    @staticmethod
    def get_by_id(db: Session, consultation_id: str) -> Optional[ConsultationRequest]:
        return db.query(ConsultationRequest).filter(ConsultationRequest.id == consultation_id).first()

    @staticmethod
    def list_requests(
        db: Session,
        status: Optional[str] = None,
        search: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[ConsultationRequest]:
        """List consultation requests, newest first"""
        query = db.query(ConsultationRequest)

        if status and status != "all":
            query = query.filter(ConsultationRequest.status == status)

        if search:
            search_term = f"%{search.lower()}%"
            query = query.filter(
                (ConsultationRequest.full_name.ilike(search_term))
                | (ConsultationRequest.email.ilike(search_term))
                | (ConsultationRequest.message.ilike(search_term))
            )

        return (
            query.order_by(ConsultationRequest.created_at.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )

    @staticmethod
    def create(db: Session, **data) -> ConsultationRequest:
        consultation = ConsultationRequest(**data)
        db.add(consultation)
        db.commit()
        db.refresh(consultation)
        return consultation

    @staticmethod
    def update(db: Session, consultation: ConsultationRequest, **updates) -> ConsultationRequest:
        """Apply updates; None values are skipped"""
        for key, value in updates.items():
            if value is not None and hasattr(consultation, key):
                setattr(consultation, key, value)

        consultation.updated_at = datetime.now(timezone.utc)
        db.commit()
        db.refresh(consultation)
        return consultation

    @staticmethod
    def set_status(db: Session, consultation: ConsultationRequest, status: str) -> ConsultationRequest:
        """Single-row status transition used by email action links"""
        now = datetime.now(timezone.utc)
        consultation.status = status
        consultation.admin_status = status
        consultation.admin_action_at = now
        consultation.updated_at = now
        db.commit()
        db.refresh(consultation)
        return consultation
