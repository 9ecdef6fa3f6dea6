"""
Booking validators

Field checks shared by the appointment and contact flows. Failures raise
InvalidInput with the message returned to the client.
"""

import re
from datetime import date, datetime

from booking_api.core.config import ScheduleConfig
from booking_api.core.errors import InvalidInput

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
_DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_TIME_PATTERN = re.compile(r"[0-9]{2}:[0-9]{2}")


def is_valid_email(email: str | None) -> bool:
    return bool(email) and EMAIL_PATTERN.fullmatch(email) is not None


def require_fields(message: str, *values: str | None) -> None:
    """Raise InvalidInput if any value is missing or empty."""
    if any(not v for v in values):
        raise InvalidInput(message)


def validate_email(email: str) -> str:
    """
    Validate email shape (local@domain.tld, no whitespace or extra @).

    Returns:
        Trimmed, lowercased email address

    Raises:
        InvalidInput: If the email does not match
    """
    if not is_valid_email(email):
        raise InvalidInput("Invalid email format")
    return email.strip().lower()


def parse_date(date_str: str) -> date:
    """
    Parse a YYYY-MM-DD calendar date.

    Raises:
        InvalidInput: If the string is not a real date in that exact format
    """
    if not _DATE_PATTERN.fullmatch(date_str):
        raise InvalidInput("Invalid date format")
    try:
        return datetime.strptime(date_str, "%Y-%m-%d").date()
    except ValueError as e:
        raise InvalidInput("Invalid date format") from e


def is_bookable_day(d: date, schedule: ScheduleConfig) -> bool:
    return d.weekday() in schedule.bookable_weekdays


def parse_time(time_str: str) -> str:
    """
    Check a zero-padded HH:MM time of day.

    Raises:
        InvalidInput: If the string is not a real time in that exact format
    """
    if not _TIME_PATTERN.fullmatch(time_str):
        raise InvalidInput("Invalid time format")
    try:
        datetime.strptime(time_str, "%H:%M")
    except ValueError as e:
        raise InvalidInput("Invalid time format") from e
    return time_str
