"""Application repository - Database operations for tracked job applications"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Application


class ApplicationRepository:
    """Repository for application database operations"""

    @staticmethod
    def get_by_id(db: Session, application_id: str) -> Optional[Application]:
        return db.query(Application).filter(Application.id == application_id).first()

    @staticmethod
    def list_applications(
        db: Session,
        client_id: Optional[str] = None,
        status: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Application]:
        """List applications, newest first"""
        query = db.query(Application)

        if client_id:
            query = query.filter(Application.client_id == client_id)

        if status and status != "all":
            query = query.filter(Application.status == status)

        return query.order_by(Application.created_at.desc()).offset(offset).limit(limit).all()

    @staticmethod
    def create(db: Session, **data) -> Application:
        application = Application(**data)
        db.add(application)
        db.commit()
        db.refresh(application)
        return application

    @staticmethod
    def update(db: Session, application: Application, **updates) -> Application:
        """Apply updates; None values are skipped"""
        for key, value in updates.items():
            if value is not None and hasattr(application, key):
                setattr(application, key, value)

        application.updated_at = datetime.now(timezone.utc)
        db.commit()
        db.refresh(application)
        return application
