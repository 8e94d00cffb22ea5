import uuid

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base

# Consultation statuses
CONSULTATION_PENDING = "pending"
CONSULTATION_CONFIRMED = "confirmed"
CONSULTATION_WAITLISTED = "waitlisted"
CONSULTATION_RESCHEDULED = "rescheduled"
CONSULTATION_UNDER_REVIEW = "under_review"
CONSULTATION_SCHEDULED = "scheduled"
CONSULTATION_APPROVED = "approved"
CONSULTATION_REJECTED = "rejected"
CONSULTATION_ONBOARDING = "onboarding"

# Admin roles and statuses
ROLE_ADMIN = "admin"
ROLE_SUPER_ADMIN = "super_admin"
ADMIN_ACTIVE = "active"
ADMIN_SUSPENDED = "suspended"

# Job application statuses
APPLICATION_APPLIED = "applied"
APPLICATION_IN_REVIEW = "in_review"
APPLICATION_INTERVIEW_REQUESTED = "interview_requested"
APPLICATION_INTERVIEWING = "interviewing"
APPLICATION_OFFER = "offer"
APPLICATION_REJECTED = "rejected"
APPLICATION_WITHDRAWN = "withdrawn"
APPLICATION_STATUSES = (
    APPLICATION_APPLIED,
    APPLICATION_IN_REVIEW,
    APPLICATION_INTERVIEW_REQUESTED,
    APPLICATION_INTERVIEWING,
    APPLICATION_OFFER,
    APPLICATION_REJECTED,
    APPLICATION_WITHDRAWN,
)


def generate_uuid():
    return str(uuid.uuid4())


class ConsultationRequest(Base):
    __tablename__ = "consultation_requests"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    full_name = Column(String(255), nullable=False)
    email = Column(String(255), index=True, nullable=False)
    phone = Column(String(50), nullable=True)
    message = Column(Text, nullable=True)
    preferred_slots = Column(JSON, default=list, nullable=False)  # [{"date": ..., "time": ...}]
    request_type = Column(String(50), default="consultation_booking", nullable=False)
    status = Column(String(50), default=CONSULTATION_PENDING, nullable=False)
    admin_status = Column(String(50), default=CONSULTATION_PENDING, nullable=False)
    pipeline_status = Column(String(50), default="lead", nullable=False)
    admin_notes = Column(Text, nullable=True)
    confirmed_slot = Column(String(255), nullable=True)
    scheduled_datetime = Column(String(64), nullable=True)
    meeting_link = Column(String(500), nullable=True)
    payment_verified = Column(Boolean, default=False, nullable=False)
    payment_amount = Column(String(50), nullable=True)
    package_tier = Column(String(100), nullable=True)
    admin_action_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class Admin(Base):
    __tablename__ = "admins"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    email = Column(String(255), unique=True, index=True, nullable=False)
    full_name = Column(String(255), nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(50), default=ROLE_ADMIN, nullable=False)
    status = Column(String(50), default=ADMIN_ACTIVE, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    suspended_at = Column(DateTime(timezone=True), nullable=True)
    suspension_reason = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    @property
    def is_super_admin(self) -> bool:
        return self.role == ROLE_SUPER_ADMIN


class RegisteredUser(Base):
    __tablename__ = "registered_users"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    email = Column(String(255), unique=True, index=True, nullable=False)
    full_name = Column(String(255), nullable=True)
    role = Column(String(50), default="client", nullable=False)
    passcode_hash = Column(String(255), nullable=True)  # Set when registration completes
    is_active = Column(Boolean, default=False, nullable=False)
    payment_confirmed = Column(Boolean, default=False, nullable=False)
    payment_confirmed_at = Column(DateTime(timezone=True), nullable=True)
    registration_token = Column(Text, nullable=True)
    token_expires_at = Column(DateTime(timezone=True), nullable=True)
    token_used = Column(Boolean, default=False, nullable=False)
    profile_unlocked = Column(Boolean, default=False, nullable=False)
    onboarding_completed = Column(Boolean, default=False, nullable=False)
    consultation_id = Column(String(36), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    applications = relationship("Application", back_populates="client", cascade="all, delete-orphan")


class Application(Base):
    """A job application submitted on a client's behalf"""

    __tablename__ = "applications"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    client_id = Column(String(36), ForeignKey("registered_users.id", ondelete="CASCADE"), index=True, nullable=False)
    company = Column(String(255), nullable=False)
    job_title = Column(String(255), nullable=False)
    title = Column(String(512), nullable=False)  # "<company> - <job title>"
    description = Column(Text, nullable=True)
    job_url = Column(String(1000), nullable=True)
    job_type = Column(String(50), default="full-time", nullable=False)
    location = Column(String(255), nullable=True)
    salary_min = Column(Integer, nullable=True)
    salary_max = Column(Integer, nullable=True)
    application_strategy = Column(Text, nullable=True)
    status = Column(String(50), default=APPLICATION_APPLIED, nullable=False)
    applied_by_admin = Column(Boolean, default=True, nullable=False)
    admin_notes = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    interview_date = Column(String(64), nullable=True)
    offer_amount = Column(String(64), nullable=True)
    interview_update_sent = Column(Boolean, default=False, nullable=False)
    interview_notification_sent_at = Column(DateTime(timezone=True), nullable=True)
    last_email_sent_at = Column(DateTime(timezone=True), nullable=True)
    date_applied = Column(DateTime(timezone=True), server_default=func.now())
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    client = relationship("RegisteredUser", back_populates="applications")
