"""
Security Utilities
Password hashing and signed JWTs for admin sessions and client registration links
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

# Token generation and validation
from jose import JWTError
from jose import jwt as jose_jwt

# Password hashing
from passlib.context import CryptContext

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"

ACCESS_TOKEN_TYPE = "access"
REGISTRATION_TOKEN_TYPE = "registration"

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


# ============================================================================
# PASSWORD SECURITY
# ============================================================================


def hash_password_bcrypt(password: str) -> str:
    """Hash password using bcrypt"""
    return pwd_context.hash(password)


def verify_password_bcrypt(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verify password against bcrypt hash"""
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except Exception as e:
        logger.error(f"Password verification error: {e}")
        return False


# ============================================================================
# JWT TOKENS
# ============================================================================


def create_jwt_token(data: dict[str, Any], secret_key: str, expires_delta: timedelta) -> str:
    """
    Create a signed JWT with a fixed expiry

    Args:
        data: Claims to encode
        secret_key: HMAC signing key
        expires_delta: Lifetime of the token

    Returns:
        Encoded JWT string
    """
    to_encode = data.copy()
    now = datetime.now(timezone.utc)
    to_encode.update({"iat": now, "exp": now + expires_delta})
    return jose_jwt.encode(to_encode, secret_key, algorithm=ALGORITHM)


def verify_jwt_token(token: str, secret_key: str) -> Optional[dict[str, Any]]:
    """
    Verify and decode JWT token

    Returns:
        Decoded payload or None if invalid or expired
    """
    try:
        return jose_jwt.decode(token, secret_key, algorithms=[ALGORITHM])
    except JWTError as e:
        logger.warning(f"JWT verification failed: {e}")
        return None


def create_access_token(admin_id: str, email: str, role: str, secret_key: str, hours: int) -> str:
    return create_jwt_token(
        {"sub": admin_id, "email": email, "role": role, "type": ACCESS_TOKEN_TYPE},
        secret_key,
        timedelta(hours=hours),
    )


def create_registration_token(
    email: str,
    name: Optional[str],
    secret_key: str,
    days: int,
    consultation_id: Optional[str] = None,
) -> tuple[str, datetime]:
    """Registration link token; returns (token, expiry)"""
    expires_delta = timedelta(days=days)
    token = create_jwt_token(
        {
            "email": email,
            "name": name,
            "type": REGISTRATION_TOKEN_TYPE,
            "payment_confirmed": True,
            "consultation_id": consultation_id,
        },
        secret_key,
        expires_delta,
    )
    return token, datetime.now(timezone.utc) + expires_delta
