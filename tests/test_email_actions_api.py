# tests/test_email_actions_api.py
"""
Tests for the one-click email action endpoints under /email-actions.
"""

from unittest.mock import patch

from sqlalchemy.exc import OperationalError

from concierge.domain.admins.repository import AdminRepository
from concierge.domain.consultations.repository import ConsultationRepository
from concierge.domain.email_actions.tokens import generate_action_token
from concierge.models import ADMIN_ACTIVE, ADMIN_SUSPENDED, ROLE_SUPER_ADMIN, Admin


def reload(db, model, entity_id):
    db.expire_all()
    return db.get(model, entity_id)


class TestHealth:
    def test_health(self, client):
        response = client.get("/email-actions/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "service": "email-actions"}


class TestConsultationActions:
    """Confirm and waitlist links."""

    def test_confirm(self, client, db, consultation_factory):
        consultation = consultation_factory()
        token = generate_action_token(consultation.id, consultation.email)

        response = client.get(f"/email-actions/consultation/{consultation.id}/confirm/{token}")

        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
        assert "Consultation Confirmed" in response.text

        updated = ConsultationRepository.get_by_id(db, consultation.id)
        db.refresh(updated)
        assert updated.status == "confirmed"
        assert updated.admin_status == "confirmed"
        assert updated.admin_action_at is not None

    def test_waitlist(self, client, db, consultation_factory):
        consultation = consultation_factory()
        token = generate_action_token(consultation.id, consultation.email)

        response = client.get(f"/email-actions/consultation/{consultation.id}/waitlist/{token}")

        assert response.status_code == 200
        assert "Added to Waitlist" in response.text
        db.refresh(consultation)
        assert consultation.status == "waitlisted"

    def test_invalid_token_leaves_row_untouched(self, client, db, consultation_factory):
        consultation = consultation_factory()

        response = client.get(f"/email-actions/consultation/{consultation.id}/confirm/not-the-token")

        assert response.status_code == 403
        assert "Link invalid or expired" in response.text
        db.refresh(consultation)
        assert consultation.status == "pending"
        assert consultation.admin_action_at is None

    def test_non_ascii_token_is_rejected(self, client, db, consultation_factory):
        consultation = consultation_factory()

        response = client.get(f"/email-actions/consultation/{consultation.id}/confirm/%C3%A9")

        assert response.status_code == 403
        assert "Link invalid or expired" in response.text
        db.refresh(consultation)
        assert consultation.status == "pending"
        assert consultation.admin_action_at is None

    def test_token_for_other_email_is_rejected(self, client, db, consultation_factory):
        consultation = consultation_factory(id="c-123", email="a@b.com")
        token = generate_action_token("c-123", "intruder@b.com")

        response = client.get(f"/email-actions/consultation/c-123/confirm/{token}")

        assert response.status_code == 403
        db.refresh(consultation)
        assert consultation.status == "pending"

    def test_unknown_consultation(self, client):
        token = generate_action_token("missing", "a@b.com")
        response = client.get(f"/email-actions/consultation/missing/confirm/{token}")
        assert response.status_code == 404
        assert "Not found" in response.text

    def test_clicking_twice_applies_again(self, client, db, consultation_factory):
        consultation = consultation_factory()
        token = generate_action_token(consultation.id, consultation.email)
        url = f"/email-actions/consultation/{consultation.id}/confirm/{token}"

        assert client.get(url).status_code == 200
        db.refresh(consultation)
        first_action_at = consultation.admin_action_at

        assert client.get(url).status_code == 200
        db.refresh(consultation)
        assert consultation.status == "confirmed"
        assert consultation.admin_action_at >= first_action_at

    def test_token_with_slash_routes(self, client, db, consultation_factory):
        """"ab?" encodes to "YWI/", so the token spans two path segments."""
        consultation = consultation_factory(id="ab?-slash", email="a@b.com")
        token = generate_action_token(consultation.id, consultation.email)
        assert "/" in token

        response = client.get(f"/email-actions/consultation/ab%3F-slash/waitlist/{token}")

        assert response.status_code == 200
        db.refresh(consultation)
        assert consultation.status == "waitlisted"

    def test_database_failure_returns_error_page(self, client, db, consultation_factory):
        consultation = consultation_factory()
        token = generate_action_token(consultation.id, consultation.email)

        with patch.object(
            ConsultationRepository,
            "set_status",
            side_effect=OperationalError("UPDATE", {}, Exception("database is locked")),
        ):
            response = client.get(f"/email-actions/consultation/{consultation.id}/confirm/{token}")

        assert response.status_code == 500
        assert "Something went wrong" in response.text


class TestAdminActions:
    """Suspend and delete links."""

    def test_suspend(self, client, db, regular_admin):
        token = generate_action_token(regular_admin.id, regular_admin.email)

        response = client.get(f"/email-actions/admin/{regular_admin.id}/suspend/{token}")

        assert response.status_code == 200
        assert "Admin Suspended" in response.text
        admin = reload(db, Admin, regular_admin.id)
        assert admin.status == ADMIN_SUSPENDED
        assert admin.is_active is False

    def test_delete(self, client, db, regular_admin):
        admin_id = regular_admin.id
        token = generate_action_token(admin_id, regular_admin.email)

        response = client.get(f"/email-actions/admin/{admin_id}/delete/{token}")

        assert response.status_code == 200
        assert "Admin Deleted" in response.text
        assert reload(db, Admin, admin_id) is None

    def test_delete_twice_is_not_found(self, client, regular_admin):
        token = generate_action_token(regular_admin.id, regular_admin.email)
        url = f"/email-actions/admin/{regular_admin.id}/delete/{token}"

        assert client.get(url).status_code == 200
        assert client.get(url).status_code == 404

    def test_invalid_token(self, client, db, regular_admin):
        response = client.get(f"/email-actions/admin/{regular_admin.id}/suspend/AAAAAAAAAAAAAAAA")

        assert response.status_code == 403
        admin = reload(db, Admin, regular_admin.id)
        assert admin.status == ADMIN_ACTIVE

    def test_non_ascii_token_leaves_admin_active(self, client, db, regular_admin):
        response = client.get(f"/email-actions/admin/{regular_admin.id}/suspend/%C3%A9t%C3%A9")

        assert response.status_code == 403
        admin = reload(db, Admin, regular_admin.id)
        assert admin.status == ADMIN_ACTIVE

    def test_super_admin_is_protected(self, client, db, super_admin):
        token = generate_action_token(super_admin.id, super_admin.email)

        suspend = client.get(f"/email-actions/admin/{super_admin.id}/suspend/{token}")
        delete = client.get(f"/email-actions/admin/{super_admin.id}/delete/{token}")

        assert suspend.status_code == 403
        assert delete.status_code == 403
        admin = reload(db, Admin, super_admin.id)
        assert admin.role == ROLE_SUPER_ADMIN
        assert admin.status == ADMIN_ACTIVE

    def test_unknown_admin(self, client):
        response = client.get("/email-actions/admin/missing/suspend/AAAAAAAAAAAAAAAA")
        assert response.status_code == 404

    def test_suspend_twice(self, client, db, regular_admin):
        token = generate_action_token(regular_admin.id, regular_admin.email)
        url = f"/email-actions/admin/{regular_admin.id}/suspend/{token}"

        assert client.get(url).status_code == 200
        assert client.get(url).status_code == 200
        assert AdminRepository.get_by_id(db, regular_admin.id) is not None
