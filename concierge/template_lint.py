"""
Email template lint and normalization

Run at build time (see verify_templates.py) instead of patching templates by hand.
normalize_template() is idempotent: normalizing twice gives the same text.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .email_templates import SUBJECT_PATTERN, list_templates, load_template, resolve_templates_dir

logger = logging.getLogger(__name__)

SPACED_PLACEHOLDER = re.compile(r"\{\{\s*([A-Za-z0-9_]+)\s*\}\}")
ANY_PLACEHOLDER = re.compile(r"\{\{(.*?)\}\}", re.DOTALL)
SNAKE_CASE = re.compile(r"^[a-z][a-z0-9_]*$")
TRAILING_WHITESPACE = re.compile(r"[ \t]+$", re.MULTILINE)


@dataclass
class LintIssue:
    template: str
    message: str
    line: Optional[int] = None

    def __str__(self) -> str:
        location = f"{self.template}:{self.line}" if self.line else self.template
        return f"{location}: {self.message}"


def normalize_template(html: str) -> str:
    """Normalize line endings, trailing whitespace and {{ key }} spacing"""
    text = html.replace("\r\n", "\n").replace("\r", "\n")
    text = TRAILING_WHITESPACE.sub("", text)
    text = SPACED_PLACEHOLDER.sub(lambda m: "{{" + m.group(1) + "}}", text)
    return text.rstrip("\n") + "\n"


def _line_of(html: str, index: int) -> int:
    return html.count("\n", 0, index) + 1


def lint_template(name: str, html: str) -> list[LintIssue]:
    issues = []

    if not SUBJECT_PATTERN.search(html):
        issues.append(LintIssue(name, "missing <!-- SUBJECT: ... --> comment"))

    for match in ANY_PLACEHOLDER.finditer(html):
        key = match.group(1)
        line = _line_of(html, match.start())
        if key != key.strip():
            issues.append(LintIssue(name, f"placeholder has surrounding spaces: {{{{{key}}}}}", line))
        elif not SNAKE_CASE.match(key):
            issues.append(LintIssue(name, f"placeholder is not snake_case: {{{{{key}}}}}", line))

    # Unbalanced braces left after removing well-formed placeholders
    stripped = ANY_PLACEHOLDER.sub("", html)
    for token in ("{{", "}}"):
        index = stripped.find(token)
        if index != -1:
            issues.append(LintIssue(name, f"unbalanced placeholder braces '{token}'"))

    if normalize_template(html) != html:
        issues.append(LintIssue(name, "not normalized (run with --fix)"))

    return issues


def lint_directory(templates_dir: Optional[Path] = None, fix: bool = False) -> list[LintIssue]:
    """Lint every template in the store, rewriting normalized text when fix is set"""
    issues = []
    for name in list_templates(templates_dir):
        html = load_template(name, templates_dir)
        if fix:
            normalized = normalize_template(html)
            if normalized != html:
                path = resolve_templates_dir(templates_dir) / f"{name}.html"
                path.write_text(normalized, encoding="utf-8")
                logger.info(f"🔧 Normalized {name}.html")
                html = normalized
        issues.extend(lint_template(name, html))
    return issues