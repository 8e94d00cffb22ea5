#!/usr/bin/env python3
"""
Script to create an admin account
Usage: python create_admin.py <email> <full name> [--super]
"""

import getpass
import logging
import sys

from fastapi import HTTPException

from concierge.config import get_settings
from concierge.database import Base, SessionLocal, engine
from concierge.domain.admins.service import AdminService
from concierge.models import ROLE_ADMIN, ROLE_SUPER_ADMIN
from concierge.shared.validators import validate_email

logging.basicConfig(level=logging.INFO, format="%(message)s")
logger = logging.getLogger(__name__)


def create_admin(email, full_name, password, role=ROLE_ADMIN):
    db = SessionLocal()
    try:
        service = AdminService(db, None, get_settings())
        admin = service.create_admin(email, full_name, password, role=role)
        logger.info(f"✅ Created {admin.role}: {admin.email} (id={admin.id})")
        return admin
    finally:
        db.close()


def main():
    """Main entry point"""
    args = [a for a in sys.argv[1:] if not a.startswith("--")]
    if len(args) < 2:
        logger.error("Usage: python create_admin.py <email> <full name> [--super]")
        sys.exit(1)

    try:
        email = validate_email(args[0])
    except ValueError as e:
        logger.error(f"❌ {e}")
        sys.exit(1)

    full_name = " ".join(args[1:])
    role = ROLE_SUPER_ADMIN if "--super" in sys.argv else ROLE_ADMIN

    password = getpass.getpass("Password: ")
    if password != getpass.getpass("Confirm password: "):
        logger.error("❌ Passwords do not match")
        sys.exit(1)
    if len(password) < 8:
        logger.error("❌ Password must be at least 8 characters")
        sys.exit(1)

    Base.metadata.create_all(bind=engine, checkfirst=True)
    try:
        create_admin(email, full_name, password, role)
    except HTTPException as e:
        logger.error(f"❌ {e.detail}")
        sys.exit(1)


if __name__ == "__main__":
    main()
