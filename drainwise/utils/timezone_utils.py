"""
Timezone utility functions for Drainwise.
Timestamps are stored in UTC and shown in the UK display timezone.
"""

from datetime import datetime, timezone
import pytz
from flask import current_app, has_app_context

DEFAULT_DISPLAY_TIMEZONE = "Europe/London"


def get_display_timezone() -> str:
    """
    Get the configured display timezone.
    Falls back to Europe/London outside an application context.
    """
    if has_app_context():
        return current_app.config.get('DISPLAY_TIMEZONE', DEFAULT_DISPLAY_TIMEZONE)
    return DEFAULT_DISPLAY_TIMEZONE


def utc_now() -> datetime:
    """
    Get current time in UTC.

    Returns:
        Current datetime in UTC
    """
    return datetime.now(timezone.utc)


def _as_utc(dt: datetime) -> datetime:
    # Naive values come back from SQLite and are UTC by convention
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_datetime_for_display(utc_dt: datetime, fmt: str = "%d/%m/%Y %H:%M") -> str:
    """
    Format a UTC datetime for display in the configured timezone.

    Args:
        utc_dt: UTC datetime object
        fmt: Output format string

    Returns:
        Formatted datetime string in display timezone
    """
    if utc_dt is None:
        return ""
    display_tz = pytz.timezone(get_display_timezone())
    return _as_utc(utc_dt).astimezone(display_tz).strftime(fmt)


def format_datetime_for_api(utc_dt: datetime) -> str:
    """
    Format a datetime for API responses in ISO format.

    Args:
        utc_dt: Datetime object (will be converted to UTC if needed)

    Returns:
        ISO formatted datetime string in UTC
    """
    if utc_dt is None:
        return ""
    return _as_utc(utc_dt).isoformat().replace('+00:00', 'Z')
