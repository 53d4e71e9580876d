"""
Date and Time utilities

This module handles date/time conversions for API input and output, and the
calendar-day windows used by the programme schedule.
"""
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
import logging

logger = logging.getLogger(__name__)


class DateFormatError(ValueError):
    """Raised when date format is invalid"""
    pass


def _normalize_iso8601_string(date_str: str) -> str:
    """Normalize ISO8601 string by replacing 'Z' with '+00:00'

    Args:
        date_str: ISO8601 datetime string

    Returns:
        Normalized string with explicit timezone offset
    """
    return date_str.replace('Z', '+00:00') if date_str.endswith('Z') else date_str


def parse_iso8601_to_utc(date_str: str) -> datetime:
    """
    Parse ISO8601 date string and convert to UTC datetime

    Args:
        date_str: ISO8601 datetime string (e.g., '2025-10-09T00:00:00Z' or '2025-10-09T00:00:00+01:00')

    Returns:
        Timezone-aware datetime in UTC

    Raises:
        DateFormatError: If the date string format is invalid
    """
    try:
        normalized = _normalize_iso8601_string(date_str)
        dt = datetime.fromisoformat(normalized)
        if dt.tzinfo is None:
            return dt.replace(tzinfo=timezone.utc)
        return dt.astimezone(timezone.utc)
    except (ValueError, AttributeError) as e:
        raise DateFormatError(f"Invalid ISO8601 datetime format: '{date_str}'") from e


def get_zone(tz_name: str) -> timezone | ZoneInfo:
    """
    Resolve 'UTC' or an IANA timezone name

    Raises:
        ValueError: If the timezone is unknown
    """
    if tz_name == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError, OSError) as e:
        raise ValueError(f"Invalid timezone: {tz_name}") from e


def convert_to_timezone(utc_time: datetime, target_tz: str) -> str:
    """
    Convert UTC timestamp to target timezone

    Args:
        utc_time: Timezone-aware UTC datetime
        target_tz: Target timezone (IANA format or 'UTC')

    Returns:
        ISO8601 timestamp in target timezone
    """
    if target_tz == "UTC":
        return utc_time.astimezone(timezone.utc).isoformat()

    return utc_time.astimezone(get_zone(target_tz)).isoformat()


def calculate_day_window(day_offset: int, tz_name: str, now: datetime | None = None) -> tuple[datetime, datetime]:
    """
    Calculate the calendar day `day_offset` days from today in a timezone

    Args:
        day_offset: 0 for today, negative for past days, positive for future days
        tz_name: Timezone whose midnight delimits the day
        now: Reference instant (defaults to current time)

    Returns:
        Tuple of (day_start, day_end) in UTC
    """
    zone = get_zone(tz_name)
    reference = now or datetime.now(timezone.utc)
    if reference.tzinfo is None:
        reference = reference.replace(tzinfo=timezone.utc)
    reference = reference.astimezone(zone)

    # Day arithmetic on wall-clock dates so DST transitions keep midnight aligned
    day = reference.date() + timedelta(days=day_offset)
    day_start = datetime(day.year, day.month, day.day, tzinfo=zone)
    next_day = day + timedelta(days=1)
    day_end = datetime(next_day.year, next_day.month, next_day.day, tzinfo=zone)

    logger.debug(f"Day window (offset {day_offset}, {tz_name}): {day_start.isoformat()} to {day_end.isoformat()}")

    return day_start.astimezone(timezone.utc), day_end.astimezone(timezone.utc)
