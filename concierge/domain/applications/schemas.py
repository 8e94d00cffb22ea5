"""Application domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator, model_validator

from ...models import APPLICATION_STATUSES
from ...shared.validators import validate_email, validate_required_text


class ApplicationCreate(BaseModel):
    """
    Schema for an admin logging an application made for a client.
    company_name/company and job_title/role are interchangeable.
    """

    client_id: str
    company_name: Optional[str] = None
    company: Optional[str] = None
    job_title: Optional[str] = None
    role: Optional[str] = None
    job_description: Optional[str] = None
    job_link: Optional[str] = None
    salary_range: Optional[str] = None  # e.g. "$90,000 - $110,000"
    location: Optional[str] = None
    job_type: str = "full-time"
    application_strategy: Optional[str] = None
    admin_notes: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("client_id")
    @classmethod
    def validate_client_id(cls, v):
        return validate_required_text(v, "client_id")

    @model_validator(mode="after")
    def resolve_company_and_role(self):
        self.company_name = (self.company_name or self.company or "").strip()
        self.job_title = (self.job_title or self.role or "").strip()
        if not self.company_name:
            raise ValueError("company_name (or company) is required")
        if not self.job_title:
            raise ValueError("job_title (or role) is required")
        return self


class ApplicationUpdate(BaseModel):
    status: Optional[str] = None
    interview_date: Optional[str] = None
    offer_amount: Optional[str] = None
    notes: Optional[str] = None
    admin_notes: Optional[str] = None
    job_posting_link: Optional[str] = None

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        if v is None:
            return v
        status = v.strip().lower()
        if status not in APPLICATION_STATUSES:
            raise ValueError(f"Invalid status. Must be one of: {', '.join(APPLICATION_STATUSES)}")
        return status


class ApplicationUpdateEmail(BaseModel):
    """Schema for a manual progress email about one application"""

    message: Optional[str] = None
    next_steps: Optional[str] = None
    consultant_email: Optional[str] = None
    custom_subject: Optional[str] = None

    @field_validator("consultant_email")
    @classmethod
    def validate_consultant_email(cls, v):
        return validate_email(v)


class ApplicationResponse(BaseModel):
    """Schema for application response"""

    id: str
    client_id: str
    company: str
    job_title: str
    title: str
    description: Optional[str] = None
    job_url: Optional[str] = None
    job_type: str
    location: Optional[str] = None
    salary_min: Optional[int] = None
    salary_max: Optional[int] = None
    application_strategy: Optional[str] = None
    status: str
    admin_notes: Optional[str] = None
    notes: Optional[str] = None
    interview_date: Optional[str] = None
    offer_amount: Optional[str] = None
    interview_update_sent: bool = False
    last_email_sent_at: Optional[datetime] = None
    date_applied: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ApplicationCreateResponse(BaseModel):
    message: str
    application: ApplicationResponse
    email_sent: bool


class ApplicationUpdateResponse(BaseModel):
    message: str
    application: ApplicationResponse
    status_changed: bool
    previous_status: str
    interview_notification_sent: bool


class ApplicationEmailResponse(BaseModel):
    message: str
    application_id: str
    email_id: Optional[str] = None
    sent_to: str
    reply_to: str
