"""Admin service - Authentication and admin account management"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...config import Settings
from ...email_service import EmailDispatcher
from ...models import ADMIN_ACTIVE, ADMIN_SUSPENDED, ROLE_ADMIN, Admin
from ...security_utils import create_access_token, hash_password_bcrypt, verify_password_bcrypt
from ..email_actions.tokens import generate_admin_action_urls
from .repository import AdminRepository
from .schemas import AdminCreate

logger = logging.getLogger(__name__)


class AdminService:
    """Service layer for admin business logic"""

    def __init__(self, db: Session, dispatcher: Optional[EmailDispatcher], settings: Settings):
        self.db = db
        self.repo = AdminRepository()
        self.dispatcher = dispatcher
        self.settings = settings

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    def authenticate(self, email: str, password: str) -> dict:
        admin = self.repo.get_by_email(self.db, email)
        if not admin or not verify_password_bcrypt(password, admin.password_hash):
            logger.warning(f"⚠️ Failed admin login for {email}")
            raise HTTPException(status_code=401, detail="Invalid email or password")

        if admin.status != ADMIN_ACTIVE or not admin.is_active:
            logger.warning(f"⚠️ Suspended admin {email} attempted to log in")
            raise HTTPException(status_code=403, detail="Admin account is suspended")

        token = create_access_token(
            admin.id,
            admin.email,
            admin.role,
            self.settings.secret_key,
            self.settings.access_token_expire_hours,
        )
        logger.info(f"✅ Admin {admin.email} logged in")
        return {
            "access_token": token,
            "token_type": "bearer",
            "expires_in": self.settings.access_token_expire_hours * 3600,
            "admin": admin,
        }

    # ------------------------------------------------------------------
    # Account management
    # ------------------------------------------------------------------

    def list_admins(self) -> list[Admin]:
        return self.repo.list_admins(self.db)

    def create_admin(self, email: str, full_name: str, password: str, role: str = ROLE_ADMIN) -> Admin:
        """Insert an admin row; no email is sent"""
        if self.repo.get_by_email(self.db, email):
            raise HTTPException(status_code=409, detail="An admin with this email already exists")

        admin = self.repo.create(
            self.db,
            email=email.lower(),
            full_name=full_name,
            password_hash=hash_password_bcrypt(password),
            role=role,
            status=ADMIN_ACTIVE,
            is_active=True,
        )
        logger.info(f"✅ Created {role} account for {admin.email}")
        return admin

    async def invite_admin(self, data: AdminCreate, created_by: Admin) -> dict:
        admin = self.create_admin(data.email, data.full_name, data.password)

        result = await self.dispatcher.send_email(
            admin.email,
            "admin_welcome",
            {
                "admin_name": admin.full_name,
                "admin_email": admin.email,
                "created_by": created_by.full_name,
                "login_url": self.settings.build_frontend_url("/admin/login"),
                "admin_id": admin.id,
            },
        )
        return {"admin": admin, "email_sent": result.success}

    def _get_manageable_admin(self, admin_id: str, current_admin: Admin) -> Admin:
        admin = self.repo.get_by_id(self.db, admin_id)
        if not admin:
            raise HTTPException(status_code=404, detail="Admin not found")
        if admin.id == current_admin.id:
            raise HTTPException(status_code=400, detail="You cannot change your own account")
        if admin.is_super_admin:
            raise HTTPException(status_code=403, detail="Super admin accounts cannot be changed")
        return admin

    async def suspend_admin(self, admin_id: str, reason: Optional[str], current_admin: Admin) -> dict:
        """Suspend an admin, tell them, and send the admin inbox one-click follow-up links"""
        admin = self._get_manageable_admin(admin_id, current_admin)
        if admin.status == ADMIN_SUSPENDED:
            raise HTTPException(status_code=400, detail="Admin is already suspended")

        admin = self.repo.suspend(self.db, admin, reason)
        logger.info(f"🚫 Admin {admin.email} suspended by {current_admin.email}")

        result = await self.dispatcher.send_email(
            admin.email,
            "admin_account_suspended",
            {
                "admin_name": admin.full_name,
                "suspended_by": current_admin.full_name,
                "reason": reason or "No reason provided",
                "admin_id": admin.id,
            },
        )

        urls = generate_admin_action_urls(admin.id, admin.email, base_url=self.settings.backend_url)
        await self.dispatcher.send_email(
            self.settings.admin_notification_email,
            "admin_action_required",
            {
                "admin_name": admin.full_name,
                "admin_email": admin.email,
                "admin_status": admin.status,
                "action_reason": reason or "No reason provided",
                "suspend_url": urls["suspend_url"],
                "delete_url": urls["delete_url"],
                "dashboard_url": self.settings.build_frontend_url("/admin/management"),
                "admin_id": admin.id,
            },
        )

        return {"admin": admin, "email_sent": result.success}

    async def reactivate_admin(self, admin_id: str, current_admin: Admin) -> dict:
        admin = self._get_manageable_admin(admin_id, current_admin)
        if admin.status != ADMIN_SUSPENDED:
            raise HTTPException(status_code=400, detail="Admin is not suspended")

        admin = self.repo.reactivate(self.db, admin)
        logger.info(f"✅ Admin {admin.email} reactivated by {current_admin.email}")

        result = await self.dispatcher.send_email(
            admin.email,
            "admin_account_reactivated",
            {
                "admin_name": admin.full_name,
                "reactivated_by": current_admin.full_name,
                "admin_id": admin.id,
            },
        )
        return {"admin": admin, "email_sent": result.success}

    async def delete_admin(self, admin_id: str, current_admin: Admin) -> dict:
        admin = self._get_manageable_admin(admin_id, current_admin)
        email, name = admin.email, admin.full_name

        self.repo.delete(self.db, admin)
        logger.info(f"🗑️ Admin {email} deleted by {current_admin.email}")

        result = await self.dispatcher.send_email(
            email,
            "admin_account_deleted",
            {"admin_name": name, "deleted_by": current_admin.full_name, "admin_id": admin_id},
        )
        return {"message": "Admin deleted", "email_sent": result.success}
