"""Registration domain schemas - payment confirmation and client sign-up"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator, model_validator

from ...shared.validators import validate_email, validate_required_text

MIN_PASSWORD_LENGTH = 8


class PaymentConfirmation(BaseModel):
    """Schema for an admin recording a client's payment"""

    client_email: str
    client_name: str
    consultation_id: Optional[str] = None
    payment_amount: Optional[str] = None
    package_tier: Optional[str] = None

    @field_validator("client_email")
    @classmethod
    def validate_email_field(cls, v):
        return validate_email(validate_required_text(v, "client_email"))

    @field_validator("client_name")
    @classmethod
    def validate_name(cls, v):
        return validate_required_text(v, "client_name")


class PaymentConfirmationResponse(BaseModel):
    message: str
    client_email: str
    consultation_id: Optional[str] = None
    registration_url: str
    token_expires_at: datetime
    email_sent: bool


class RegistrationComplete(BaseModel):
    token: str
    password: str
    confirm_password: str

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        if len(v) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
        return v

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class ResendToken(BaseModel):
    email: str

    @field_validator("email")
    @classmethod
    def validate_email_field(cls, v):
        return validate_email(validate_required_text(v, "email"))


class TokenValidationResponse(BaseModel):
    valid: bool
    email: str
    full_name: Optional[str] = None
    expires_at: Optional[datetime] = None


class RegistrationResponse(BaseModel):
    message: str
    email: str
    email_sent: bool
