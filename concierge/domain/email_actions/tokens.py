"""
Action-link tokens embedded in emails ("Confirm Consultation", "Suspend Admin", ...)

token = base64(f"{entity_id}-{email}")[:16]

The token is deterministic, never expires, is not single-use and carries no
server secret. Anyone who knows an entity id and its email can derive it.
"""

import base64
import hmac
from typing import Optional

from ...config import get_settings

TOKEN_LENGTH = 16
ACTIONS_PREFIX = "/email-actions"


def generate_action_token(entity_id: str, email: str) -> str:
    raw = f"{entity_id}-{email}".encode("utf-8")
    return base64.b64encode(raw).decode("ascii")[:TOKEN_LENGTH]


def verify_action_token(entity_id: str, email: str, token: Optional[str]) -> bool:
    if not token:
        return False
    expected = generate_action_token(entity_id, email)
    # Bytes, since compare_digest rejects non-ASCII str operands
    return hmac.compare_digest(expected.encode("utf-8"), token.encode("utf-8"))


def build_action_url(base_url: str, kind: str, entity_id: str, action: str, token: str) -> str:
    # The base64 alphabet includes "/"; the router matches the token segment as a path
    return f"{base_url.rstrip('/')}{ACTIONS_PREFIX}/{kind}/{entity_id}/{action}/{token}"


def extract_token(action_url: str) -> str:
    """Recover the token from a URL built by build_action_url"""
    path = action_url.split(ACTIONS_PREFIX, 1)[1]
    # /<kind>/<id>/<action>/<token...>
    return path.lstrip("/").split("/", 3)[3]


def generate_consultation_action_urls(
    consultation_id: str, email: str, base_url: Optional[str] = None
) -> dict[str, str]:
    base_url = base_url or get_settings().backend_url
    token = generate_action_token(consultation_id, email)
    return {
        "token": token,
        "confirm_url": build_action_url(base_url, "consultation", consultation_id, "confirm", token),
        "waitlist_url": build_action_url(base_url, "consultation", consultation_id, "waitlist", token),
    }


def generate_admin_action_urls(
    admin_id: str, email: str, base_url: Optional[str] = None
) -> dict[str, str]:
    base_url = base_url or get_settings().backend_url
    token = generate_action_token(admin_id, email)
    return {
        "token": token,
        "suspend_url": build_action_url(base_url, "admin", admin_id, "suspend", token),
        "delete_url": build_action_url(base_url, "admin", admin_id, "delete", token),
    }
