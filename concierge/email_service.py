"""
Transactional Email Service using Resend
Renders HTML templates from the template store and hands them to the Resend API
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional

import resend
from fastapi import Depends

from .config import Settings, get_settings
from .email_templates import extract_subject, find_placeholders, render_template, strip_subject

logger = logging.getLogger(__name__)

BODY_OPEN_PATTERN = re.compile(r"<body[^>]*>", re.IGNORECASE)
TAG_PATTERN = re.compile(r"<[^>]*>")


@dataclass
class EmailResult:
    """Outcome of a send attempt. Failures are reported, not raised."""

    success: bool
    recipient: str
    template: str
    subject: Optional[str] = None
    id: Optional[str] = None
    error: Optional[str] = None


def generate_preheader_text(title: str, content: str) -> str:
    """First sentence of the content, capped at 100 characters for the inbox preview"""
    clean_content = re.sub(r"\s+", " ", TAG_PATTERN.sub(" ", content or "")).strip()
    first_sentence = clean_content.split(".")[0] if clean_content else title
    if len(first_sentence) > 100:
        return first_sentence[:97] + "..."
    return first_sentence


def get_email_headers(template_name: str, entity_ref: str, unsubscribe_address: str) -> dict:
    """Headers that improve deliverability and make sends traceable"""
    return {
        "X-Email-Template": template_name,
        "X-Entity-Ref": entity_ref,
        "List-Unsubscribe": f"<mailto:{unsubscribe_address}?subject=Unsubscribe-{entity_ref}>",
    }


def testing_notice(original_recipient: str) -> str:
    return f"""
        <div style="background: #FEF3C7; border: 1px solid #F59E0B; padding: 15px; margin: 20px 0; border-radius: 6px;">
          <p style="color: #92400E; font-weight: bold; margin: 0 0 5px 0;">TESTING MODE</p>
          <p style="color: #92400E; margin: 0; font-size: 14px;">
            This email was originally intended for <strong>{original_recipient}</strong> but redirected for testing purposes.
          </p>
        </div>
    """


def insert_after_body_open(html: str, snippet: str) -> str:
    match = BODY_OPEN_PATTERN.search(html)
    if not match:
        return snippet + html
    return html[: match.end()] + snippet + html[match.end() :]


class EmailDispatcher:
    """Renders a named template and sends it through Resend"""

    def __init__(self, settings: Settings):
        self.settings = settings

    def default_variables(self, variables: dict) -> dict:
        return {
            "company_name": self.settings.company_name,
            "support_email": self.settings.support_email,
            "current_year": datetime.now(timezone.utc).year,
            "dashboard_link": self.settings.build_frontend_url("/dashboard"),
            "logo_url": self.settings.logo_url,
            "preheader_text": generate_preheader_text(
                variables.get("email_title") or f"{self.settings.company_name} Notification",
                variables.get("main_content") or variables.get("message") or "",
            ),
        }

    def build_email(self, template_name: str, variables: dict) -> tuple[str, str]:
        """Return (subject, html) for a template. Raises TemplateNotFoundError."""
        all_variables = {**self.default_variables(variables), **variables}
        html = render_template(
            template_name, all_variables, templates_dir=self.settings.email_templates_dir
        )

        leftover = find_placeholders(html)
        if leftover:
            logger.warning(
                f"⚠️ Template {template_name} rendered with unresolved placeholders: {leftover}"
            )

        subject = (
            variables.get("subject")
            or extract_subject(html)
            or f"Notification from {self.settings.company_name}"
        )
        return subject, strip_subject(html)

    async def send_email(
        self, to: str, template_name: str, variables: Optional[dict[str, Any]] = None
    ) -> EmailResult:
        """
        Send a templated email.

        Args:
            to: Recipient address
            template_name: Template file name without the .html suffix
            variables: Placeholder values; subject and reply_to are honoured when present

        Returns:
            EmailResult describing the delivery attempt. API failures are logged
            and reported through the result so callers can treat email as non-fatal.
        """
        variables = dict(variables or {})
        subject, html = self.build_email(template_name, variables)

        recipient = to
        if (
            self.settings.email_testing_mode
            and self.settings.email_test_recipient
            and to != self.settings.email_test_recipient
        ):
            recipient = self.settings.email_test_recipient
            logger.info(f"🧪 TESTING MODE: Redirecting email from {to} to {recipient}")
            html = insert_after_body_open(html, testing_notice(to))

        if not self.settings.resend_api_key:
            logger.error("❌ No email service configured - RESEND_API_KEY missing")
            return EmailResult(
                success=False,
                recipient=recipient,
                template=template_name,
                subject=subject,
                error="Email service not configured",
            )

        entity_ref = str(
            variables.get("user_id")
            or variables.get("consultation_id")
            or variables.get("admin_id")
            or "unknown"
        )
        email_data = {
            "from": self.settings.email_from_address,
            "to": [recipient],
            "subject": subject,
            "html": html,
            "headers": get_email_headers(template_name, entity_ref, self.settings.support_email),
            "reply_to": variables.get("reply_to") or self.settings.support_email,
        }

        resend.api_key = self.settings.resend_api_key
        try:
            logger.info(f"📧 Sending {template_name} email via Resend to: {recipient}")
            response = resend.Emails.send(email_data)
        except Exception as e:
            logger.error(f"❌ Email send error to {recipient} ({template_name}): {e}")
            return EmailResult(
                success=False,
                recipient=recipient,
                template=template_name,
                subject=subject,
                error=str(e),
            )

        email_id = response.get("id") if isinstance(response, dict) else getattr(response, "id", None)
        logger.info(f"✅ Email sent successfully via Resend: id={email_id} template={template_name}")
        return EmailResult(
            success=True,
            recipient=recipient,
            template=template_name,
            subject=subject,
            id=email_id,
        )

    async def send_simple_email(self, to: str, subject: str, message: str) -> EmailResult:
        """Send a plain notification using the generic template"""
        return await self.send_email(
            to,
            "simple_notification",
            {"subject": subject, "email_title": subject, "main_content": message},
        )


def get_email_dispatcher(settings: Settings = Depends(get_settings)) -> EmailDispatcher:
    """Dependency injection for EmailDispatcher"""
    return EmailDispatcher(settings)
