"""
Template Rendering Utilities

Provides Jinja2-based template rendering for report emails with:
    - Auto-escaping for .html templates (XSS protection)
    - Custom number/percent/date filters (locale-independent short dates)
    - Plain-text templates rendered without escaping

Usage:
    from weekly_digest.reports.renderer import render_template

    html = render_template("reports/weekly_report.html", {"report": report})
"""

from datetime import datetime
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape

from weekly_digest.core import get_logger
from weekly_digest.domain import month_day

logger = get_logger(__name__)

TEMPLATE_DIR = Path(__file__).parent.parent / "templates"

_jinja_env: Environment | None = None


def get_jinja_environment() -> Environment:
    """
    Get or create the Jinja2 environment (singleton pattern).

    :returns: Configured Jinja2 Environment with custom filters registered
    """
    global _jinja_env

    if _jinja_env is None:
        _jinja_env = Environment(
            loader=FileSystemLoader(TEMPLATE_DIR),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )

        _jinja_env.filters["format_number"] = format_number
        _jinja_env.filters["format_percent"] = format_percent
        _jinja_env.filters["format_signed"] = format_signed
        _jinja_env.filters["format_short_date"] = format_short_date

    return _jinja_env


def render_template(template_name: str, context: dict[str, Any]) -> str:
    """
    Render a template with context data.

    :param template_name: Template file name relative to the templates/ directory
    :param context: Dictionary of template variables
    :returns: Rendered string (HTML-escaped for .html templates)
    :raises jinja2.TemplateNotFound: If template file doesn't exist
    """
    env = get_jinja_environment()
    template = env.get_template(template_name)

    final_context = {"generation_date": datetime.now().strftime("%Y-%m-%d %H:%M:%S"), **context}
    rendered: str = template.render(**final_context)
    logger.debug(f"Rendered {template_name} ({len(rendered):,} chars)")
    return rendered


# Custom Jinja2 filters


def format_number(value: Any, decimals: int = 0) -> str:
    """
    Format number with thousand separators (Jinja2 filter).

    :param value: Numeric value to format
    :param decimals: Number of decimal places (default: 0)
    :returns: Formatted string with thousand separators

    Example:
        >>> format_number(1234567)
        '1,234,567'
        >>> format_number(1234.56, 2)
        '1,234.56'
    """
    try:
        num = float(value)
        if decimals == 0:
            return f"{int(num):,}"
        else:
            return f"{num:,.{decimals}f}"
    except (ValueError, TypeError):
        return str(value)


def format_percent(value: Any, decimals: int = 1) -> str:
    """
    Format number as percentage string (Jinja2 filter).

    Example:
        >>> format_percent(65.432)
        '65.4%'
    """
    try:
        num = float(value)
        return f"{num:.{decimals}f}%"
    except (ValueError, TypeError):
        return str(value)


def format_signed(value: Any) -> str:
    """
    Format a change with an explicit sign (Jinja2 filter).

    Zero and positive values get a leading '+'.

    Example:
        >>> format_signed(1500)
        '+1,500'
        >>> format_signed(-20)
        '-20'
    """
    try:
        num = float(value)
    except (ValueError, TypeError):
        return str(value)
    prefix = "+" if num >= 0 else ""
    return f"{prefix}{format_number(num)}"


def format_short_date(value: datetime | None) -> str:
    """
    Format a date the way the report period is labelled (Jinja2 filter).

    Month names are always English, whatever the process locale.

    Example:
        >>> format_short_date(datetime(2026, 10, 5))
        'Oct 5, 2026'
    """
    if value is None:
        return ""
    return f"{month_day(value)}, {value.year}"
