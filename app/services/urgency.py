# app/services/urgency.py
"""
Temporal urgency classification.

Everything here works on calendar dates: datetimes are reduced to their date
before subtracting, so the result only depends on the calendar-day
difference, never on the time of day the call happens.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Union
from zoneinfo import ZoneInfo

from app.core.config import app_timezone
from app.core.errors import InvalidArgument
from app.schemas.enums import UrgencyLevel

DateLike = Union[date, datetime, str, None]

# Upper bounds (inclusive) of each tier
CRITICAL_DAYS = 7
WARNING_DAYS = 30
ATTENTION_DAYS = 60


def local_today() -> date:
    """Calendar date of "today" in APP_TIMEZONE."""
    return datetime.now(ZoneInfo(app_timezone())).date()


def _in_app_zone(value: datetime) -> date:
    # naive datetimes are taken as already local
    if value.tzinfo is None:
        return value.date()
    return value.astimezone(ZoneInfo(app_timezone())).date()


def as_calendar_date(value: DateLike) -> Optional[date]:
    """
    Reduce a date, a datetime or an ISO string to a calendar date.
    Offset-aware values are converted to APP_TIMEZONE first; anything that is
    not a complete ISO date or datetime raises InvalidArgument.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return _in_app_zone(value)
    if isinstance(value, date):
        return value
    s = str(value).strip()
    if not s:
        return None
    try:
        return date.fromisoformat(s)
    except ValueError:
        pass
    try:
        parsed = datetime.fromisoformat(s.replace("Z", "+00:00"))
    except ValueError as e:
        raise InvalidArgument(f"Not an ISO date: {value!r}") from e
    return _in_app_zone(parsed)


def days_until(target: DateLike, today: DateLike = None) -> Optional[int]:
    """
    Days from `today` to `target`; negative once the target has passed.
    Returns None when there is no target date.
    """
    target_day = as_calendar_date(target)
    if target_day is None:
        return None
    ref = as_calendar_date(today) or local_today()
    return (target_day - ref).days


def urgency_level(days_remaining: Optional[int]) -> UrgencyLevel:
    """
    - critical: overdue or <= 7 days
    - warning: 8-30 days
    - attention: 31-60 days
    - ok: > 60 days or no expiration
    """
    if days_remaining is None:
        return UrgencyLevel.OK
    if days_remaining <= CRITICAL_DAYS:
        return UrgencyLevel.CRITICAL
    if days_remaining <= WARNING_DAYS:
        return UrgencyLevel.WARNING
    if days_remaining <= ATTENTION_DAYS:
        return UrgencyLevel.ATTENTION
    return UrgencyLevel.OK


def urgency_from_date(target: DateLike, today: DateLike = None) -> UrgencyLevel:
    return urgency_level(days_until(target, today))


def format_days_remaining(days_remaining: Optional[int]) -> str:
    if days_remaining is None:
        return "No expiration"
    if days_remaining < 0:
        overdue = abs(days_remaining)
        return "1 day overdue" if overdue == 1 else f"{overdue} days overdue"
    if days_remaining == 0:
        return "Expires today"
    if days_remaining == 1:
        return "1 day"
    return f"{days_remaining} days"
