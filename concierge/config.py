import os
import warnings
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DEFAULT_TEMPLATES_DIR = Path(__file__).resolve().parent / "templates" / "emails"


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration, built once at startup and injected where needed"""

    database_url: str
    secret_key: str
    access_token_expire_hours: int = 24
    registration_token_days: int = 15

    # Frontend base URL for registration/dashboard links
    frontend_url: str = "http://localhost:3000"
    # Public URL of this API, used to build email action links
    backend_url: str = "http://localhost:8000"

    # Resend Email Configuration
    resend_api_key: Optional[str] = None
    email_from_address: str = "Apply Bureau <admin@applybureau.com>"
    admin_notification_email: str = "admin@applybureau.com"
    support_email: str = "applybureau@gmail.com"
    company_name: str = "Apply Bureau"
    logo_url: str = "https://res.cloudinary.com/dbehg8jsv/image/upload/v1769345413/AB_LOGO_EDITED-removebg-preview_zrz8ai.png"

    # Testing mode redirects every outgoing email to a single verified inbox
    email_testing_mode: bool = False
    email_test_recipient: Optional[str] = None

    email_templates_dir: Path = DEFAULT_TEMPLATES_DIR
    allowed_origins: list[str] = field(default_factory=list)

    @classmethod
    def from_env(cls) -> "Settings":
        secret_key = os.getenv("SECRET_KEY")
        if not secret_key:
            warnings.warn(
                "SECRET_KEY not set! Using insecure default - DO NOT USE IN PRODUCTION",
                RuntimeWarning,
                stacklevel=2,
            )
            secret_key = "INSECURE-DEV-KEY-CHANGE-IN-PRODUCTION"  # noqa: S105 - Dev fallback only

        frontend_url = os.getenv("FRONTEND_URL", "http://localhost:3000").rstrip("/")

        return cls(
            database_url=os.getenv("DATABASE_URL", "sqlite:///./concierge.db"),
            secret_key=secret_key,
            access_token_expire_hours=int(os.getenv("ACCESS_TOKEN_EXPIRE_HOURS", "24")),
            registration_token_days=int(os.getenv("REGISTRATION_TOKEN_DAYS", "15")),
            frontend_url=frontend_url,
            backend_url=os.getenv("BACKEND_URL", "http://localhost:8000").rstrip("/"),
            resend_api_key=os.getenv("RESEND_API_KEY"),
            email_from_address=os.getenv(
                "EMAIL_FROM_ADDRESS", "Apply Bureau <admin@applybureau.com>"
            ),
            admin_notification_email=os.getenv(
                "ADMIN_NOTIFICATION_EMAIL", "admin@applybureau.com"
            ),
            support_email=os.getenv("SUPPORT_EMAIL", "applybureau@gmail.com"),
            company_name=os.getenv("COMPANY_NAME", "Apply Bureau"),
            logo_url=os.getenv("LOGO_URL", cls.logo_url),
            email_testing_mode=_env_bool("EMAIL_TESTING_MODE"),
            email_test_recipient=os.getenv("EMAIL_TEST_RECIPIENT"),
            email_templates_dir=Path(
                os.getenv("EMAIL_TEMPLATES_DIR", str(DEFAULT_TEMPLATES_DIR))
            ),
            allowed_origins=os.getenv(
                "ALLOWED_ORIGINS",
                f"{frontend_url},http://localhost:5173,http://localhost:3000",
            ).split(","),
        )

    def build_frontend_url(self, path: str) -> str:
        clean_path = path if path.startswith("/") else f"/{path}"
        return f"{self.frontend_url}{clean_path}"


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
