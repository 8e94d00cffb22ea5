"""Consultation domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...models import (
    CONSULTATION_APPROVED,
    CONSULTATION_CONFIRMED,
    CONSULTATION_REJECTED,
    CONSULTATION_RESCHEDULED,
    CONSULTATION_SCHEDULED,
    CONSULTATION_UNDER_REVIEW,
    CONSULTATION_WAITLISTED,
)
from ...shared.validators import validate_email, validate_preferred_slots, validate_required_text

# Admin-facing verbs accepted alongside the stored status names
STATUS_ALIASES = {
    "confirm": CONSULTATION_CONFIRMED,
    "reschedule": CONSULTATION_RESCHEDULED,
    "waitlist": CONSULTATION_WAITLISTED,
    "schedule": CONSULTATION_SCHEDULED,
    "approve": CONSULTATION_APPROVED,
    "reject": CONSULTATION_REJECTED,
}

ADMIN_SETTABLE_STATUSES = (
    CONSULTATION_CONFIRMED,
    CONSULTATION_RESCHEDULED,
    CONSULTATION_WAITLISTED,
    CONSULTATION_UNDER_REVIEW,
    CONSULTATION_SCHEDULED,
    CONSULTATION_APPROVED,
    CONSULTATION_REJECTED,
)


class ConsultationCreate(BaseModel):
    """Schema for the public consultation request form"""

    full_name: str
    email: str
    phone: str
    message: str
    preferred_slots: list[dict] = []

    @field_validator("full_name", "phone", "message")
    @classmethod
    def validate_text(cls, v, info):
        return validate_required_text(v, info.field_name)

    @field_validator("email")
    @classmethod
    def validate_email_field(cls, v):
        return validate_email(validate_required_text(v, "email"))

    @field_validator("preferred_slots")
    @classmethod
    def validate_slots(cls, v):
        return validate_preferred_slots(v)


class ConsultationUpdate(BaseModel):
    """Schema for admin status changes on a consultation request"""

    status: str
    confirmed_slot: Optional[str] = None
    scheduled_datetime: Optional[str] = None
    meeting_link: Optional[str] = None
    meeting_details: Optional[str] = None
    admin_notes: Optional[str] = None
    reschedule_reason: Optional[str] = None
    rejection_reason: Optional[str] = None
    next_steps: Optional[str] = None

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        status = STATUS_ALIASES.get(v.strip().lower(), v.strip().lower())
        if status not in ADMIN_SETTABLE_STATUSES:
            raise ValueError(f"Invalid status. Must be one of: {', '.join(ADMIN_SETTABLE_STATUSES)}")
        return status


class RequestNewTimes(BaseModel):
    """Schema for a prospect proposing new times after a reschedule request"""

    preferred_slots: list[dict]
    message: Optional[str] = None

    @field_validator("preferred_slots")
    @classmethod
    def validate_slots(cls, v):
        return validate_preferred_slots(v, exact=3)


class ConsultationResponse(BaseModel):
    """Schema for consultation response"""

    id: str
    full_name: str
    email: str
    phone: Optional[str]
    message: Optional[str]
    preferred_slots: list[dict]
    request_type: str
    status: str
    admin_status: str
    pipeline_status: str
    admin_notes: Optional[str] = None
    confirmed_slot: Optional[str] = None
    scheduled_datetime: Optional[str] = None
    meeting_link: Optional[str] = None
    payment_verified: bool = False
    admin_action_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ConsultationSubmitResponse(BaseModel):
    id: str
    status: str
    message: str
    email_sent: bool
    admin_notified: bool


class ConsultationActionResponse(BaseModel):
    consultation: ConsultationResponse
    email_sent: bool
