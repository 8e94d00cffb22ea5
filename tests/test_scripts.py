# tests/test_scripts.py
"""
Tests for the command-line scripts at the project root: verify_templates.py
and create_admin.py. Both are driven through main() with sys.argv patched.
"""

import sys
from unittest.mock import patch

import pytest

import create_admin
import verify_templates
from concierge.domain.admins.repository import AdminRepository
from concierge.models import ROLE_ADMIN, ROLE_SUPER_ADMIN, Admin
from concierge.security_utils import verify_password_bcrypt

NEW_PASSWORD = "long-enough-pw"


def exit_code(module, *args):
    """Run a script's main() and return the code it exits with."""
    with patch.object(sys, "argv", [f"{module.__name__}.py", *args]):
        with pytest.raises(SystemExit) as exc:
            module.main()
    return exc.value.code


class TestVerifyTemplates:
    def test_shipped_templates_pass(self):
        assert exit_code(verify_templates) == 0

    def test_issues_exit_nonzero_without_touching_files(self, tmp_path):
        path = tmp_path / "welcome.html"
        path.write_text("<!-- SUBJECT: Hi -->\n<p>{{ client_name }}</p>  \n", encoding="utf-8")

        assert exit_code(verify_templates, str(tmp_path)) == 1
        assert path.read_text(encoding="utf-8") == "<!-- SUBJECT: Hi -->\n<p>{{ client_name }}</p>  \n"

    def test_fix_normalizes_and_exits_zero(self, tmp_path):
        path = tmp_path / "welcome.html"
        path.write_text("<!-- SUBJECT: Hi -->\n<p>{{ client_name }}</p>  \n", encoding="utf-8")

        assert exit_code(verify_templates, "--fix", str(tmp_path)) == 0
        assert path.read_text(encoding="utf-8") == "<!-- SUBJECT: Hi -->\n<p>{{client_name}}</p>\n"

    def test_fix_cannot_add_a_subject(self, tmp_path):
        (tmp_path / "bare.html").write_text("<p>{{client_name}}</p>\n", encoding="utf-8")
        assert exit_code(verify_templates, "--fix", str(tmp_path)) == 1


class TestCreateAdmin:
    def test_creates_super_admin(self, db):
        with patch.object(sys, "argv", ["create_admin.py", "New@Concierge.test", "Nia", "New", "--super"]):
            with patch("getpass.getpass", side_effect=[NEW_PASSWORD, NEW_PASSWORD]):
                create_admin.main()

        admin = AdminRepository.get_by_email(db, "new@concierge.test")
        assert admin.full_name == "Nia New"
        assert admin.role == ROLE_SUPER_ADMIN
        assert verify_password_bcrypt(NEW_PASSWORD, admin.password_hash)

    def test_default_role_is_admin(self, db):
        with patch.object(sys, "argv", ["create_admin.py", "staff2@concierge.test", "Sam"]):
            with patch("getpass.getpass", side_effect=[NEW_PASSWORD, NEW_PASSWORD]):
                create_admin.main()

        assert AdminRepository.get_by_email(db, "staff2@concierge.test").role == ROLE_ADMIN

    def test_duplicate_email(self, db, regular_admin):
        with patch("getpass.getpass", side_effect=[NEW_PASSWORD, NEW_PASSWORD]):
            assert exit_code(create_admin, regular_admin.email, "Someone Else") == 1
        assert db.query(Admin).count() == 1

    def test_password_mismatch(self, db):
        with patch("getpass.getpass", side_effect=[NEW_PASSWORD, "something-else"]):
            assert exit_code(create_admin, "nia@concierge.test", "Nia") == 1
        assert db.query(Admin).count() == 0

    def test_short_password(self, db):
        with patch("getpass.getpass", side_effect=["short", "short"]):
            assert exit_code(create_admin, "nia@concierge.test", "Nia") == 1
        assert db.query(Admin).count() == 0

    def test_invalid_email(self):
        assert exit_code(create_admin, "not-an-email", "Nia") == 1

    def test_usage(self):
        assert exit_code(create_admin, "nia@concierge.test") == 1
