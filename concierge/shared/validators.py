"""Shared validation utilities"""

import re
from typing import Optional

EMAIL_PATTERN = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
MAX_PREFERRED_SLOTS = 3


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Args:
        email: Email address string

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()

    if not re.match(EMAIL_PATTERN, email):
        raise ValueError("Invalid email format")

    return email


def validate_required_text(value: Optional[str], field_name: str) -> str:
    if value is None or not value.strip():
        raise ValueError(f"{field_name} is required")
    return value.strip()


def validate_preferred_slots(slots: Optional[list], exact: Optional[int] = None) -> list:
    """
    Validate consultation time slots.

    Each slot needs a date and a time. At most three slots are accepted, or
    exactly `exact` slots when given.
    """
    slots = slots or []
    if exact is not None and len(slots) != exact:
        raise ValueError(f"Please provide exactly {exact} preferred time slots")
    if len(slots) > MAX_PREFERRED_SLOTS:
        raise ValueError(f"preferred_slots must have at most {MAX_PREFERRED_SLOTS} time slots")

    for i, slot in enumerate(slots, 1):
        if not slot.get("date") or not slot.get("time"):
            raise ValueError(f"Time slot {i} must have both date and time fields")
    return slots
