#!/usr/bin/env python3
"""
Script to lint the email templates shipped with the package
Usage: python verify_templates.py [--fix] [templates_dir]
"""

import logging
import sys
from pathlib import Path

from concierge.email_templates import find_placeholders, list_templates, load_template
from concierge.template_lint import lint_directory

logging.basicConfig(level=logging.INFO, format="%(message)s")
logger = logging.getLogger(__name__)


def verify_templates(templates_dir=None, fix=False):
    """Lint every template; returns the number of issues found"""
    names = list_templates(templates_dir)
    logger.info(f"\n📋 Email Templates ({len(names)}):")
    for name in names:
        keys = find_placeholders(load_template(name, templates_dir))
        logger.info(f"  - {name}: {len(keys)} placeholder(s)")

    issues = lint_directory(templates_dir, fix=fix)

    logger.info(f"\n{'=' * 80}")
    if issues:
        for issue in issues:
            logger.warning(f"  ⚠️  {issue}")
        logger.error(f"\n❌ {len(issues)} issue(s) found")
    else:
        logger.info("✅ All templates passed")
    return len(issues)


def main():
    """Main entry point"""
    args = sys.argv[1:]
    fix = "--fix" in args
    paths = [a for a in args if not a.startswith("--")]
    templates_dir = Path(paths[0]) if paths else None

    if fix:
        logger.info("🔧 Linting templates and fixing normalization issues")
    else:
        logger.info("🔍 Linting templates")

    sys.exit(1 if verify_templates(templates_dir, fix=fix) else 0)


if __name__ == "__main__":
    main()
