"""
Shared Jinja2 templates configuration.

All routers should import templates from here so filters and globals are available.
"""

from pathlib import Path

import bleach
import markdown
from fastapi.templating import Jinja2Templates
from markupsafe import Markup

from automation_library.settings import settings

TEMPLATES_DIR = Path(__file__).parent / "templates"

# Emoji offered on the detail page
QUICK_REACTIONS = ["👍", "❤️", "🔥", "🎉", "🚀", "💡"]

ALLOWED_TAGS = [
    'p', 'br', 'strong', 'b', 'em', 'i', 'u', 's', 'del', 'hr',
    'h1', 'h2', 'h3', 'h4', 'h5', 'h6',
    'ul', 'ol', 'li',
    'a', 'code', 'pre', 'blockquote',
    'table', 'thead', 'tbody', 'tr', 'th', 'td',
    'img',
]
ALLOWED_ATTRS = {
    'a': ['href', 'title', 'rel'],
    'img': ['src', 'alt', 'title'],
    'code': ['class'],
    'pre': ['class'],
}


def markdown_filter(text: str | None) -> Markup:
    """Convert submitted markdown to sanitized HTML."""
    if not text:
        return Markup("")

    html = markdown.markdown(
        text,
        extensions=['nl2br', 'fenced_code', 'tables'],
        output_format='html',
    )
    clean_html = bleach.clean(html, tags=ALLOWED_TAGS, attributes=ALLOWED_ATTRS, strip=True)
    return Markup(clean_html)


def date_filter(value) -> str:
    """Short display date, e.g. Jan 15, 2024."""
    if not value:
        return ""
    return f"{value:%b} {value.day}, {value.year}"


templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

templates.env.globals["app_name"] = settings.app_name
templates.env.globals["quick_reactions"] = QUICK_REACTIONS

templates.env.filters["markdown"] = markdown_filter
templates.env.filters["date"] = date_filter
templates.env.filters["zip"] = zip
