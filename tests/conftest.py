# tests/conftest.py
"""
Pytest configuration and fixtures for the concierge test suite.

Provides:
- In-memory SQLite database, recreated for every test
- FastAPI test client with the Resend API mocked out
- Admin accounts and bearer tokens
- Consultation request factory

Note: resend.Emails.send is always patched, tests never reach the email API.
"""

import os

# Set test environment before imports
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["RESEND_API_KEY"] = "re_test_key"
os.environ["EMAIL_TESTING_MODE"] = "false"
os.environ["BACKEND_URL"] = "http://api.concierge.test"
os.environ["FRONTEND_URL"] = "http://app.concierge.test"
os.environ["ADMIN_NOTIFICATION_EMAIL"] = "inbox@concierge.test"
os.environ["DB_LOG_SLOW_QUERIES"] = "false"

from typing import Any, Dict, List  # noqa: E402
from unittest.mock import patch  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from concierge.config import get_settings  # noqa: E402
from concierge.database import Base, SessionLocal, engine  # noqa: E402
from concierge.domain.admins.repository import AdminRepository  # noqa: E402
from concierge.domain.consultations.repository import ConsultationRepository  # noqa: E402
from concierge.email_service import EmailDispatcher  # noqa: E402
from concierge.main import app  # noqa: E402
from concierge.models import ROLE_ADMIN, ROLE_SUPER_ADMIN  # noqa: E402
from concierge.security_utils import create_access_token, hash_password_bcrypt  # noqa: E402

ADMIN_PASSWORD = "correct-horse-battery"

# Hashing once keeps the suite fast
_PASSWORD_HASH = hash_password_bcrypt(ADMIN_PASSWORD)


# ============== Database Fixtures ==============


@pytest.fixture(autouse=True)
def reset_database():
    """Fresh schema for every test."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def settings():
    return get_settings()


# ============== Email Fixtures ==============


@pytest.fixture
def mock_resend():
    """Patch the Resend SDK; every call returns a fake delivery id."""
    with patch("resend.Emails.send") as send:
        send.return_value = {"id": "email_test_123"}
        yield send


@pytest.fixture
def dispatcher(settings):
    return EmailDispatcher(settings)


@pytest.fixture
def sent_templates(mock_resend):
    """Template names of every email handed to Resend, in order."""

    def _templates() -> List[str]:
        return [call.args[0]["headers"]["X-Email-Template"] for call in mock_resend.call_args_list]

    return _templates


@pytest.fixture
def sent_email(mock_resend):
    """The Resend payload of the first email that used a template."""

    def _payload(template_name: str) -> Dict[str, Any]:
        for call in mock_resend.call_args_list:
            payload = call.args[0]
            if payload["headers"]["X-Email-Template"] == template_name:
                return payload
        raise AssertionError(f"No {template_name} email was sent")

    return _payload


# ============== Client Fixtures ==============


@pytest.fixture
def client(mock_resend):
    with TestClient(app) as test_client:
        yield test_client


# ============== Admin Fixtures ==============


@pytest.fixture
def admin_password():
    return ADMIN_PASSWORD


@pytest.fixture
def super_admin(db):
    return AdminRepository.create(
        db,
        email="owner@concierge.test",
        full_name="Olivia Owner",
        password_hash=_PASSWORD_HASH,
        role=ROLE_SUPER_ADMIN,
    )


@pytest.fixture
def regular_admin(db):
    return AdminRepository.create(
        db,
        email="staff@concierge.test",
        full_name="Sam Staff",
        password_hash=_PASSWORD_HASH,
        role=ROLE_ADMIN,
    )


@pytest.fixture
def headers_for(settings):
    """Bearer headers for any admin."""

    def _headers(admin) -> Dict[str, str]:
        token = create_access_token(admin.id, admin.email, admin.role, settings.secret_key, 1)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def super_headers(super_admin, headers_for):
    return headers_for(super_admin)


@pytest.fixture
def admin_headers(regular_admin, headers_for):
    return headers_for(regular_admin)


# ============== Consultation Fixtures ==============


@pytest.fixture
def consultation_payload():
    return {
        "full_name": "Ada Lovelace",
        "email": "ada@example.com",
        "phone": "+1 555 0100",
        "message": "Looking for help with a senior engineering job search.",
        "preferred_slots": [
            {"date": "2026-01-05", "time": "10:00"},
            {"date": "2026-01-06", "time": "14:30"},
        ],
    }


@pytest.fixture
def consultation_factory(db):
    """Insert consultation requests directly."""

    def _create(**overrides):
        data = {
            "full_name": "Ada Lovelace",
            "email": "ada@example.com",
            "phone": "+1 555 0100",
            "message": "Looking for help with a job search.",
            "preferred_slots": [{"date": "2026-01-05", "time": "10:00"}],
        }
        data.update(overrides)
        return ConsultationRepository.create(db, **data)

    return _create
