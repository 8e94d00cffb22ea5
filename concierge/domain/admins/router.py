"""Admin routers - login and admin account management"""

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_admin, require_super_admin
from ...config import Settings, get_settings
from ...database import get_db
from ...email_service import EmailDispatcher, get_email_dispatcher
from ...models import Admin
from .schemas import (
    AdminActionResponse,
    AdminCreate,
    AdminDeleteResponse,
    AdminLogin,
    AdminResponse,
    AdminSuspend,
    TokenResponse,
)
from .service import AdminService

auth_router = APIRouter(prefix="/auth", tags=["Authentication"])
router = APIRouter(prefix="/admin-management", tags=["Admin Management"])


def get_admin_service(
    db: Session = Depends(get_db),
    dispatcher: EmailDispatcher = Depends(get_email_dispatcher),
    settings: Settings = Depends(get_settings),
) -> AdminService:
    """Dependency injection for AdminService"""
    return AdminService(db, dispatcher, settings)


@auth_router.post("/login", response_model=TokenResponse)
async def login(data: AdminLogin, service: AdminService = Depends(get_admin_service)):
    return service.authenticate(data.email, data.password)


@router.get("/admins", response_model=list[AdminResponse])
async def list_admins(
    current_admin: Admin = Depends(get_current_admin),
    service: AdminService = Depends(get_admin_service),
):
    return service.list_admins()


@router.post("/admins", response_model=AdminActionResponse, status_code=201)
async def create_admin(
    data: AdminCreate,
    current_admin: Admin = Depends(require_super_admin),
    service: AdminService = Depends(get_admin_service),
):
    return await service.invite_admin(data, current_admin)


@router.put("/admins/{admin_id}/suspend", response_model=AdminActionResponse)
async def suspend_admin(
    admin_id: str,
    data: Optional[AdminSuspend] = None,
    current_admin: Admin = Depends(require_super_admin),
    service: AdminService = Depends(get_admin_service),
):
    return await service.suspend_admin(admin_id, data.reason if data else None, current_admin)


@router.put("/admins/{admin_id}/reactivate", response_model=AdminActionResponse)
async def reactivate_admin(
    admin_id: str,
    current_admin: Admin = Depends(require_super_admin),
    service: AdminService = Depends(get_admin_service),
):
    return await service.reactivate_admin(admin_id, current_admin)


@router.delete("/admins/{admin_id}", response_model=AdminDeleteResponse)
async def delete_admin(
    admin_id: str,
    current_admin: Admin = Depends(require_super_admin),
    service: AdminService = Depends(get_admin_service),
):
    return await service.delete_admin(admin_id, current_admin)
