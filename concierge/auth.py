import logging
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from .config import Settings, get_settings
from .database import get_db
from .models import ADMIN_ACTIVE, Admin
from .security_utils import ACCESS_TOKEN_TYPE, verify_jwt_token

logger = logging.getLogger(__name__)

# A missing header reaches get_current_admin as None
security = HTTPBearer(auto_error=False)


async def get_current_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> Admin:
    """Resolve the bearer token to an active admin"""
    if credentials is None:
        logger.warning("Authentication failed: missing Authorization header")
        raise HTTPException(
            status_code=401,
            detail="Not authenticated. Please provide a valid Bearer token in the Authorization header.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = verify_jwt_token(credentials.credentials, settings.secret_key)
    if not payload or payload.get("type") != ACCESS_TOKEN_TYPE:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    admin = db.query(Admin).filter(Admin.id == payload.get("sub")).first()
    if not admin:
        logger.warning(f"⚠️ Token subject {payload.get('sub')} has no admin record")
        raise HTTPException(status_code=401, detail="Admin not found")

    if admin.status != ADMIN_ACTIVE or not admin.is_active:
        logger.warning(f"⚠️ Suspended admin {admin.email} attempted access")
        raise HTTPException(status_code=403, detail="Admin account is suspended")

    return admin


async def require_super_admin(admin: Admin = Depends(get_current_admin)) -> Admin:
    if not admin.is_super_admin:
        raise HTTPException(status_code=403, detail="Super admin access required")
    return admin
