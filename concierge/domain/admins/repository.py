"""Admin repository - Database operations for admin accounts"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from ...models import ADMIN_ACTIVE, ADMIN_SUSPENDED, Admin


class AdminRepository:
    """Repository for admin database operations"""

    @staticmethod
    def get_by_id(db: Session, admin_id: str) -> Optional[Admin]:
        return db.query(Admin).filter(Admin.id == admin_id).first()

    @staticmethod
    def get_by_email(db: Session, email: str) -> Optional[Admin]:
        return db.query(Admin).filter(Admin.email == email.lower()).first()

    @staticmethod
    def list_admins(db: Session) -> list[Admin]:
        return db.query(Admin).order_by(Admin.created_at.desc()).all()

    @staticmethod
    def create(db: Session, **data) -> Admin:
        admin = Admin(**data)
        db.add(admin)
        db.commit()
        db.refresh(admin)
        return admin

    @staticmethod
    def suspend(db: Session, admin: Admin, reason: Optional[str] = None) -> Admin:
        now = datetime.now(timezone.utc)
        admin.status = ADMIN_SUSPENDED
        admin.is_active = False
        admin.suspended_at = now
        admin.suspension_reason = reason
        admin.updated_at = now
        db.commit()
        db.refresh(admin)
        return admin

    @staticmethod
    def reactivate(db: Session, admin: Admin) -> Admin:
        admin.status = ADMIN_ACTIVE
        admin.is_active = True
        admin.suspended_at = None
        admin.suspension_reason = None
        admin.updated_at = datetime.now(timezone.utc)
        db.commit()
        db.refresh(admin)
        return admin

    @staticmethod
    def delete(db: Session, admin: Admin) -> None:
        db.delete(admin)
        db.commit()
