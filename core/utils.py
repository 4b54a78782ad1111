"""
Core utilities: injected clock, date parsing and the configured attendance date floor.
"""
from datetime import date, datetime

from django.conf import settings
from django.utils import timezone

from core.errors import DateTooEarlyError, ValidationError


def system_clock():
    """Default clock injected into services. Returns an aware datetime."""
    return timezone.now()


def parse_iso_date(value, field="date"):
    """
    Parse 'YYYY-MM-DD' (longer ISO strings are truncated to the date part).
    date objects pass through. Raises ValidationError(invalid_date).
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value:
        raise ValidationError(f"{field} is required (YYYY-MM-DD)", code="invalid_date")
    try:
        return datetime.strptime(str(value)[:10], "%Y-%m-%d").date()
    except (ValueError, TypeError):
        raise ValidationError(f"Invalid {field} format", code="invalid_date")


def get_min_attendance_date():
    """ATTENDANCE_MIN_DATE setting as a date (accepts str or date)."""
    return parse_iso_date(settings.ATTENDANCE_MIN_DATE, field="ATTENDANCE_MIN_DATE")


def ensure_date_allowed(lesson_date):
    """Reject dates before the configured floor."""
    min_date = get_min_attendance_date()
    if lesson_date < min_date:
        raise DateTooEarlyError(min_date)
    return lesson_date
