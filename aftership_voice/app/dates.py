"""Timezone-aware date helpers used across the narration pipeline."""

import logging
from datetime import date, datetime, time, timezone
from typing import Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..const import DEFAULT_TIMEZONE

_LOGGER = logging.getLogger(__name__)

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def get_zone(name: Optional[str], default: str = DEFAULT_TIMEZONE) -> ZoneInfo:
    """Return the timezone for a name, falling back to the default one if invalid."""
    if name:
        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError):
            _LOGGER.warning("Unknown timezone %s, using %s", name, default)
    return ZoneInfo(default)


def is_valid_zone(name: Optional[str]) -> bool:
    """Check if a timezone name is known."""
    if not name:
        return False
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return False
    return True


def parse_datetime(value: Union[str, datetime, None]) -> Optional[datetime]:
    """Parse an ISO 8601 timestamp, returning None when absent or invalid."""
    if value is None or isinstance(value, datetime):
        return value
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (ValueError, AttributeError):
        for fmt in ("%Y-%m-%dT%H:%M:%S", "%Y-%m-%d %H:%M:%S", "%Y-%m-%d"):
            try:
                return datetime.strptime(value, fmt)
            except ValueError:
                continue
        _LOGGER.warning("Failed to parse datetime: %s", value)
        return None


def to_timezone(value: datetime, zone: Union[str, ZoneInfo]) -> datetime:
    """Normalize a timestamp into a timezone.

    Offset-aware timestamps are converted. Naive timestamps keep their wall clock
    value and are labelled with the timezone.
    """
    if isinstance(zone, str):
        zone = get_zone(zone)
    if value.tzinfo is None:
        return value.replace(tzinfo=zone)
    return value.astimezone(zone)


def days_from_today(value: datetime, today: date) -> int:
    """Signed calendar day offset of a timestamp from today (future is positive)."""
    return (value.date() - today).days


def days_to_today(value: datetime, today: date) -> int:
    """Number of calendar days elapsed since a timestamp (past is positive)."""
    return -days_from_today(value, today)


def ordinal(number: int) -> str:
    """Return number with its English ordinal suffix."""
    if 10 <= number % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")
    return f"{number}{suffix}"


def calendar_phrase(value: datetime, today: date) -> str:
    """Human calendar phrase of a timestamp relative to today."""
    diff = days_from_today(value, today)
    weekday = WEEKDAYS[value.weekday()]
    if diff == 0:
        return "today"
    if diff == 1:
        return "tomorrow"
    if diff == -1:
        return "yesterday"
    if 1 < diff < 7:
        return f"on {weekday}"
    if -7 < diff < -1:
        return f"last {weekday}"
    return f"on {weekday}, {MONTHS[value.month - 1]} {ordinal(value.day)}"


def clock_time(value: datetime) -> str:
    """Clock time such as 3:05 PM."""
    hour = value.hour % 12 or 12
    meridiem = "AM" if value.hour < 12 else "PM"
    return f"{hour}:{value.minute:02d} {meridiem}"


def end_of_day(value: datetime) -> datetime:
    """Last microsecond of the timestamp's day, in its own timezone."""
    return datetime.combine(value.date(), time.max, tzinfo=value.tzinfo)


def to_iso(value: datetime) -> str:
    """UTC ISO 8601 string with millisecond precision."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
