# tests/test_applications_api.py
"""
Tests for the /applications endpoints: logging applications made for a
client, status updates with interview notifications, and manual update emails.
"""

import pytest

from concierge.domain.applications.repository import ApplicationRepository
from concierge.domain.applications.service import parse_salary_range
from concierge.domain.registration.repository import RegisteredUserRepository
from concierge.models import Application


@pytest.fixture
def paid_client(db):
    """A registered client the team applies to jobs for."""
    return RegisteredUserRepository.create(
        db,
        email="ada@example.com",
        full_name="Ada Lovelace",
        payment_confirmed=True,
        token_used=True,
        is_active=True,
    )


@pytest.fixture
def application_factory(db, paid_client):
    def _create(**overrides):
        data = {
            "client_id": paid_client.id,
            "company": "Acme",
            "job_title": "Staff Engineer",
            "title": "Acme - Staff Engineer",
        }
        data.update(overrides)
        return ApplicationRepository.create(db, **data)

    return _create


class TestCreateApplication:
    def test_create(self, client, db, admin_headers, paid_client, sent_email, settings):
        response = client.post(
            "/applications",
            json={
                "client_id": paid_client.id,
                "company_name": "Acme",
                "job_title": "Staff Engineer",
                "job_link": "https://jobs.acme.test/42",
                "salary_range": "$180,000 - $210,000",
            },
            headers=admin_headers,
        )

        assert response.status_code == 201
        data = response.json()
        assert data["email_sent"] is True
        assert data["application"]["title"] == "Acme - Staff Engineer"
        assert data["application"]["status"] == "applied"
        assert data["application"]["salary_min"] == 180000
        assert data["application"]["salary_max"] == 210000

        stored = db.get(Application, data["application"]["id"])
        assert stored.client_id == paid_client.id
        assert stored.description == "Application for Staff Engineer position at Acme"
        assert stored.applied_by_admin is True

        email = sent_email("application_update")
        assert email["to"] == ["ada@example.com"]
        assert email["subject"] == "Update on your application to Acme"
        assert "Staff Engineer" in email["html"]
        assert f"{settings.company_name}. All rights reserved." in email["html"]

    def test_company_and_role_aliases(self, client, admin_headers, paid_client):
        response = client.post(
            "/applications",
            json={"client_id": paid_client.id, "company": "Globex", "role": "Data Scientist"},
            headers=admin_headers,
        )

        assert response.status_code == 201
        assert response.json()["application"]["company"] == "Globex"
        assert response.json()["application"]["job_title"] == "Data Scientist"

    @pytest.mark.parametrize(
        "body",
        [
            {"company_name": "Acme"},
            {"job_title": "Staff Engineer"},
            {"company_name": "  ", "job_title": "Staff Engineer"},
        ],
    )
    def test_company_and_role_required(self, client, admin_headers, paid_client, body):
        body["client_id"] = paid_client.id
        response = client.post("/applications", json=body, headers=admin_headers)
        assert response.status_code == 400

    def test_unknown_client(self, client, admin_headers, mock_resend):
        response = client.post(
            "/applications",
            json={"client_id": "missing", "company_name": "Acme", "job_title": "Staff Engineer"},
            headers=admin_headers,
        )

        assert response.status_code == 404
        mock_resend.assert_not_called()

    def test_requires_admin(self, client, paid_client):
        response = client.post(
            "/applications",
            json={"client_id": paid_client.id, "company_name": "Acme", "job_title": "Staff Engineer"},
        )
        assert response.status_code == 401


class TestListAndGet:
    def test_list_filters_by_client_and_status(self, client, db, admin_headers, application_factory):
        other = RegisteredUserRepository.create(db, email="grace@example.com", full_name="Grace Hopper")
        application_factory(company="Acme")
        application_factory(company="Initech", status="offer")
        application_factory(client_id=other.id, company="Globex")

        by_client = client.get(f"/applications?client_id={other.id}", headers=admin_headers)
        by_status = client.get("/applications?status=offer", headers=admin_headers)

        assert [a["company"] for a in by_client.json()] == ["Globex"]
        assert [a["company"] for a in by_status.json()] == ["Initech"]
        assert len(client.get("/applications", headers=admin_headers).json()) == 3

    def test_get_one(self, client, admin_headers, application_factory):
        application = application_factory()
        response = client.get(f"/applications/{application.id}", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["title"] == "Acme - Staff Engineer"

    def test_get_missing(self, client, admin_headers):
        assert client.get("/applications/missing", headers=admin_headers).status_code == 404


class TestUpdateApplication:
    def test_interview_request_notifies_client(self, client, db, admin_headers, application_factory, sent_email):
        application = application_factory(job_url="https://jobs.acme.test/42")

        response = client.patch(
            f"/applications/{application.id}",
            json={"status": "interview_requested", "interview_date": "2026-03-02 14:00"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["status_changed"] is True
        assert data["previous_status"] == "applied"
        assert data["interview_notification_sent"] is True
        assert data["application"]["interview_update_sent"] is True

        db.refresh(application)
        assert application.interview_notification_sent_at is not None

        email = sent_email("interview_update_enhanced")
        assert email["to"] == ["ada@example.com"]
        assert email["subject"] == "Interview request from Acme"
        assert "2026-03-02 14:00" in email["html"]
        assert "https://jobs.acme.test/42" in email["html"]

    def test_repeat_interview_status_does_not_notify_again(
        self, client, admin_headers, application_factory, sent_templates
    ):
        application = application_factory()
        url = f"/applications/{application.id}"

        client.patch(url, json={"status": "interview_requested"}, headers=admin_headers)
        response = client.patch(url, json={"status": "interview_requested", "notes": "Panel"}, headers=admin_headers)

        assert response.json()["interview_notification_sent"] is False
        assert response.json()["status_changed"] is False
        assert sent_templates() == ["interview_update_enhanced"]

    def test_other_updates_send_nothing(self, client, db, admin_headers, application_factory, mock_resend):
        application = application_factory()

        response = client.patch(
            f"/applications/{application.id}",
            json={"status": "offer", "offer_amount": "$200,000"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["interview_notification_sent"] is False
        mock_resend.assert_not_called()
        db.refresh(application)
        assert application.status == "offer"
        assert application.offer_amount == "$200,000"

    def test_unknown_status(self, client, admin_headers, application_factory):
        application = application_factory()
        response = client.patch(f"/applications/{application.id}", json={"status": "ghosted"}, headers=admin_headers)
        assert response.status_code == 400

    def test_missing_application(self, client, admin_headers):
        response = client.patch("/applications/missing", json={"status": "offer"}, headers=admin_headers)
        assert response.status_code == 404


class TestSendUpdate:
    def test_send_update(self, client, db, admin_headers, application_factory, sent_email):
        application = application_factory(admin_notes="Referral from Bob")

        response = client.post(
            f"/applications/{application.id}/send-update",
            json={
                "message": "The hiring manager reviewed your resume.",
                "next_steps": "Expect a call next week.",
                "consultant_email": "Coach@Concierge.test",
                "custom_subject": "Good news from Acme",
            },
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json() == {
            "message": "Application update email sent successfully",
            "application_id": application.id,
            "email_id": "email_test_123",
            "sent_to": "ada@example.com",
            "reply_to": "coach@concierge.test",
        }

        email = sent_email("application_update")
        assert email["subject"] == "Good news from Acme"
        assert email["reply_to"] == "coach@concierge.test"
        assert "The hiring manager reviewed your resume." in email["html"]

        db.refresh(application)
        assert application.last_email_sent_at is not None
        assert application.admin_notes.startswith("Referral from Bob\n\n[")
        assert application.admin_notes.endswith("Update email sent to client by staff@concierge.test")

    def test_defaults(self, client, admin_headers, application_factory, sent_email, settings):
        application = application_factory()

        response = client.post(f"/applications/{application.id}/send-update", json={}, headers=admin_headers)

        assert response.json()["reply_to"] == settings.support_email
        assert "being reviewed" in sent_email("application_update")["html"]

    def test_failed_send_is_reported(self, client, db, admin_headers, application_factory, mock_resend):
        application = application_factory()
        mock_resend.side_effect = Exception("Resend unavailable")

        response = client.post(f"/applications/{application.id}/send-update", json={}, headers=admin_headers)

        assert response.status_code == 502
        db.refresh(application)
        assert application.last_email_sent_at is None

    def test_missing_application(self, client, admin_headers):
        response = client.post("/applications/missing/send-update", json={}, headers=admin_headers)
        assert response.status_code == 404


class TestParseSalaryRange:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("$90,000 - $110,000", (90000, 110000)),
            ("120000", (120000, None)),
            ("competitive", (None, None)),
            (None, (None, None)),
        ],
    )
    def test_parse(self, text, expected):
        assert parse_salary_range(text) == expected
