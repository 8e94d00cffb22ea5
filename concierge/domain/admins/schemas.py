"""Admin domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import validate_email, validate_required_text

MIN_PASSWORD_LENGTH = 8


class AdminLogin(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def validate_email_field(cls, v):
        return validate_email(validate_required_text(v, "email"))


class AdminCreate(BaseModel):
    """Schema for a super admin creating another admin"""

    email: str
    full_name: str
    password: str

    @field_validator("email")
    @classmethod
    def validate_email_field(cls, v):
        return validate_email(validate_required_text(v, "email"))

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, v):
        return validate_required_text(v, "full_name")

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        if len(v) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        return v


class AdminSuspend(BaseModel):
    reason: Optional[str] = None


class AdminResponse(BaseModel):
    """Schema for admin response"""

    id: str
    email: str
    full_name: str
    role: str
    status: str
    is_active: bool
    suspended_at: Optional[datetime] = None
    suspension_reason: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    admin: AdminResponse


class AdminActionResponse(BaseModel):
    admin: AdminResponse
    email_sent: bool


class AdminDeleteResponse(BaseModel):
    message: str
    email_sent: bool
