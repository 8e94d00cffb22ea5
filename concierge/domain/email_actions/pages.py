"""Static HTML pages returned to someone clicking an email action link"""

from html import escape

SUCCESS_COLOR = "#10B981"
ERROR_COLOR = "#EF4444"


def render_page(title: str, message: str, color: str) -> str:
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{escape(title)}</title>
</head>
<body style="margin: 0; padding: 48px 16px; background-color: #f8fafc; font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Arial, sans-serif;">
  <div style="max-width: 480px; margin: 0 auto; background: #ffffff; border-radius: 8px; padding: 40px; text-align: center; border-top: 4px solid {color};">
    <h2 style="margin: 0 0 16px 0; color: #0f172a;">{escape(title)}</h2>
    <p style="margin: 0; color: #334155; line-height: 1.6;">{escape(message)}</p>
  </div>
</body>
</html>
"""


def success_page(title: str, message: str) -> str:
    return render_page(title, message, SUCCESS_COLOR)


def invalid_link_page() -> str:
    return render_page(
        "Link invalid or expired",
        "This link is invalid or has expired. Please use the admin dashboard instead.",
        ERROR_COLOR,
    )


def not_found_page() -> str:
    return render_page("Not found", "The record this link refers to no longer exists.", ERROR_COLOR)


def forbidden_page(message: str) -> str:
    return render_page("Action not allowed", message, ERROR_COLOR)


def error_page() -> str:
    return render_page(
        "Something went wrong", "We could not complete this action. Please try again later.", ERROR_COLOR
    )
