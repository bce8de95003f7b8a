"""
UTC date helpers.

Motor returns naive datetimes unless the client is tz-aware, so every
comparison goes through ensure_utc first. Day boundaries are UTC days.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

from common.utils.exceptions import BadRequestException


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive datetimes, convert aware ones."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def start_of_day(value: datetime) -> datetime:
    """Midnight (UTC) of the day containing value."""
    value = ensure_utc(value)
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


def day_range(value: datetime) -> Tuple[datetime, datetime]:
    """Return [start, end) bounds of the UTC day containing value."""
    start = start_of_day(value)
    return start, start + timedelta(days=1)


def month_range(year: int, month: int) -> Tuple[datetime, datetime]:
    """Return [start, end) bounds of a calendar month."""
    start = datetime(year, month, 1, tzinfo=timezone.utc)
    if month == 12:
        end = datetime(year + 1, 1, 1, tzinfo=timezone.utc)
    else:
        end = datetime(year, month + 1, 1, tzinfo=timezone.utc)
    return start, end


def is_same_day(a: Optional[datetime], b: Optional[datetime]) -> bool:
    if a is None or b is None:
        return False
    return ensure_utc(a).date() == ensure_utc(b).date()


def is_previous_day(earlier: Optional[datetime], reference: datetime) -> bool:
    """True when earlier falls on the UTC day before reference."""
    if earlier is None:
        return False
    return ensure_utc(earlier).date() == ensure_utc(reference).date() - timedelta(days=1)


def today_string(now: Optional[datetime] = None) -> str:
    """Today's date as YYYY-MM-DD."""
    return (now or utc_now()).strftime("%Y-%m-%d")


def parse_date(value: str) -> datetime:
    """
    Parse a YYYY-MM-DD or ISO-8601 string into an aware UTC datetime.

    Raises:
        BadRequestException: If the string is not a date
    """
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (ValueError, AttributeError):
        raise BadRequestException(
            message=f"Invalid date: {value}",
            code="INVALID_DATE"
        )
    return ensure_utc(parsed)
