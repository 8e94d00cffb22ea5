"""Registered user repository - client accounts created after payment confirmation"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from ...models import RegisteredUser


class RegisteredUserRepository:
    """Repository for registered user database operations"""

    @staticmethod
    def get_by_id(db: Session, user_id: str) -> Optional[RegisteredUser]:
        return db.query(RegisteredUser).filter(RegisteredUser.id == user_id).first()

    @staticmethod
    def get_by_email(db: Session, email: str) -> Optional[RegisteredUser]:
        return db.query(RegisteredUser).filter(RegisteredUser.email == email.lower()).first()

    @staticmethod
    def create(db: Session, **data) -> RegisteredUser:
        user = RegisteredUser(**data)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def update(db: Session, user: RegisteredUser, **updates) -> RegisteredUser:
        for key, value in updates.items():
            if hasattr(user, key):
                setattr(user, key, value)

        user.updated_at = datetime.now(timezone.utc)
        db.commit()
        db.refresh(user)
        return user
