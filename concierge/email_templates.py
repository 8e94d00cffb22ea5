"""
HTML Email Templates
Templates live as static files under templates/emails/ with {{variable}} placeholders
"""

import json
import logging
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional

from .config import get_settings

logger = logging.getLogger(__name__)

PLACEHOLDER_PATTERN = re.compile(r"\{\{([A-Za-z0-9_]+)\}\}")
SUBJECT_PATTERN = re.compile(r"<!--\s*SUBJECT:\s*(.*?)\s*-->")
SUBJECT_STRIP_PATTERN = re.compile(r"^\s*<!--\s*SUBJECT:.*?-->[ \t]*\r?\n?", re.DOTALL)
TEMPLATE_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_\-]+$")


class TemplateNotFoundError(Exception):
    """Raised when a template name does not match a file in the template store"""

    def __init__(self, name: str):
        super().__init__(f"Email template {name} not found")
        self.name = name


def resolve_templates_dir(templates_dir: Optional[Path]) -> Path:
    return templates_dir or get_settings().email_templates_dir


def list_templates(templates_dir: Optional[Path] = None) -> list[str]:
    """Names of every template in the store, sorted"""
    return sorted(p.stem for p in resolve_templates_dir(templates_dir).glob("*.html"))


def load_template(name: str, templates_dir: Optional[Path] = None) -> str:
    if not TEMPLATE_NAME_PATTERN.match(name):
        raise TemplateNotFoundError(name)

    path = resolve_templates_dir(templates_dir) / f"{name}.html"
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        logger.error(f"❌ Template {name} not found at {path}")
        raise TemplateNotFoundError(name) from e


def _format_slot(slot: Any) -> str:
    if isinstance(slot, Mapping) and "date" in slot and "time" in slot:
        return f"{slot['date']} at {slot['time']}"
    if isinstance(slot, Mapping):
        return json.dumps(slot)
    return str(slot)


def format_value(value: Any) -> str:
    """Coerce a template variable to the text inserted into the HTML"""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return ", ".join(_format_slot(item) for item in value)
    if isinstance(value, Mapping):
        return json.dumps(value, indent=2)
    return str(value)


def render(template: str, variables: Mapping[str, Any]) -> str:
    """
    Substitute {{key}} placeholders with values from variables.

    Keys missing from variables are left as literal {{key}} text. Substitution
    is a single pass over the template, so inserted values are never expanded
    again. Values are inserted as-is, without HTML escaping.
    """

    def replace(match: re.Match) -> str:
        key = match.group(1)
        if key in variables:
            return format_value(variables[key])
        return match.group(0)

    return PLACEHOLDER_PATTERN.sub(replace, template)


def render_template(
    name: str, variables: Mapping[str, Any], templates_dir: Optional[Path] = None
) -> str:
    return render(load_template(name, templates_dir), variables)


def find_placeholders(html: str) -> list[str]:
    """Keys of placeholders still present in the text, in order of first appearance"""
    seen: list[str] = []
    for key in PLACEHOLDER_PATTERN.findall(html):
        if key not in seen:
            seen.append(key)
    return seen


def extract_subject(html: str) -> Optional[str]:
    match = SUBJECT_PATTERN.search(html)
    return match.group(1) if match else None


def strip_subject(html: str) -> str:
    """Drop the SUBJECT comment so the sent document starts at its doctype"""
    return SUBJECT_STRIP_PATTERN.sub("", html, count=1)
