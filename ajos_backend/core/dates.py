"""
Date utilities bound to the local wall clock

Calendar dates are produced from local year/month/day components. Formatting a UTC
instant with its own date fields shows the next day for users west of UTC late in
the evening, so every date string in the system goes through these helpers.
"""

import re
from datetime import date, datetime, timedelta, timezone
from typing import Optional, Union

DateLike = Union[date, datetime]

_DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")


def _to_local(value: Optional[DateLike]) -> DateLike:
    if value is None:
        return datetime.now()
    if isinstance(value, datetime) and value.tzinfo is not None:
        # Aware instants are shown in the machine's local zone
        return value.astimezone()
    return value


def get_local_date(value: Optional[DateLike] = None) -> str:
    """Return YYYY-MM-DD for the local calendar date of value (default: now)."""
    local = _to_local(value)
    return f"{local.year:04d}-{local.month:02d}-{local.day:02d}"


def get_local_iso_string(value: Optional[datetime] = None) -> str:
    """Return YYYY-MM-DDTHH:MM:SS.mmm built from local time components."""
    local = _to_local(value)
    if not isinstance(local, datetime):
        local = datetime(local.year, local.month, local.day)
    return (
        f"{get_local_date(local)}T{local.hour:02d}:{local.minute:02d}:"
        f"{local.second:02d}.{local.microsecond // 1000:03d}"
    )


def parse_local_date(text: Optional[str]) -> datetime:
    """Parse YYYY-MM-DD (or a timestamp starting with it) as local midnight.

    Empty input yields the current time, matching how the UI treats a missing date.
    """
    if not text:
        return datetime.now()

    parts = text.split("T")[0].split("-")
    if len(parts) == 3:
        try:
            return datetime(int(parts[0]), int(parts[1]), int(parts[2]))
        except ValueError:
            pass

    parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def parse_timestamp(text: Optional[str]) -> Optional[datetime]:
    """Parse an ISO timestamp (``Z`` suffix allowed); None when empty or invalid."""
    if not text:
        return None
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None


def timestamp_to_local_date(text: Optional[str]) -> Optional[str]:
    """Local calendar date of an ISO timestamp such as a todo's completedAt."""
    parsed = parse_timestamp(text)
    if parsed is None:
        return None
    return get_local_date(parsed)


def utc_timestamp(value: Optional[datetime] = None) -> str:
    """ISO timestamp in UTC with millisecond precision and a Z suffix."""
    moment = value or datetime.now()
    # Naive values are local wall-clock time
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def add_days(day: str, days: int) -> str:
    """Shift a YYYY-MM-DD string by a number of days."""
    return get_local_date(parse_local_date(day) + timedelta(days=days))


def days_between(start: str, end: str) -> int:
    """Whole calendar days from start to end (negative when end is earlier)."""
    return (parse_local_date(end).date() - parse_local_date(start).date()).days


def week_start(day: DateLike) -> date:
    """Monday of the week containing day."""
    as_date = day.date() if isinstance(day, datetime) else day
    return as_date - timedelta(days=as_date.weekday())


def format_short_date(day: str) -> str:
    """Render YYYY-MM-DD as e.g. "Mon, Feb 9"."""
    parsed = parse_local_date(day)
    return f"{parsed:%a, %b} {parsed.day}"


def ensure_local_date(text: str) -> str:
    """Validate a YYYY-MM-DD calendar date; a trailing time part is dropped.

    Raises ValueError for anything else, including impossible days like 2026-02-30.
    """
    day = str(text).split("T")[0].strip()
    if not _DATE_PATTERN.fullmatch(day):
        raise ValueError(f"expected a YYYY-MM-DD date, got {text!r}")
    date.fromisoformat(day)
    return day
