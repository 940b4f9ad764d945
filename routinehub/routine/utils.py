"""Shared day-key and calendar utilities for the routine engine.

Weekday indices follow the Sunday-first convention used throughout routinehub:
0 = Sunday, 1 = Monday, ... 6 = Saturday.
"""

import re
from datetime import date, datetime, time, timedelta

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")

DAY_LABELS = [
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
]

WEEKDAYS = [1, 2, 3, 4, 5]
EVERY_DAY = list(range(7))


class InvalidArgumentError(ValueError):
    """Raised when a query receives an argument outside its domain."""


def day_key(day: date | datetime) -> str:
    """Canonical YYYY-MM-DD key of the calendar day containing ``day``.

    Time-of-day is ignored, so every instant on the same calendar day maps to
    the same key.
    """
    if isinstance(day, datetime):
        day = day.date()
    return day.isoformat()


def weekday_index(day: date | datetime) -> int:
    """Weekday index of ``day`` with Sunday = 0."""
    return (day.weekday() + 1) % 7


def check_day_index(day_index: int) -> int:
    """Return ``day_index`` unchanged, or raise InvalidArgumentError if not 0-6."""
    if isinstance(day_index, bool) or not isinstance(day_index, int):
        raise InvalidArgumentError(f"Day index must be an integer, got {day_index!r}")
    if not 0 <= day_index <= 6:
        raise InvalidArgumentError(f"Day index {day_index} out of range: must be 0 (Sun) - 6 (Sat)")
    return day_index


def parse_time_of_day(value: str) -> time:
    """Parse an ``HH:MM`` wall-clock string.

    Raises ValueError on malformed or out-of-range input.
    """
    if not isinstance(value, str):
        raise ValueError(f"Time must be an HH:MM string, got {value!r}")
    m = _TIME_RE.match(value.strip())
    if not m:
        raise ValueError(f"Time must be HH:MM format, got {value!r}")
    hh, mm = int(m.group(1)), int(m.group(2))
    if not (0 <= hh <= 23 and 0 <= mm <= 59):
        raise ValueError(f"Time out of range: {value!r}")
    return time(hh, mm)


def format_time_of_day(value: time) -> str:
    """Format a wall-clock time the way the agenda shows it, e.g. ``8:05 AM``."""
    hour = value.hour % 12 or 12
    suffix = "AM" if value.hour < 12 else "PM"
    return f"{hour}:{value.minute:02d} {suffix}"


def truncate_to_minute(instant: datetime) -> datetime:
    """Drop seconds and sub-second components."""
    return instant.replace(second=0, microsecond=0)


def reference_date_for_day(day_index: int, reference: date | datetime) -> date:
    """Date with weekday ``day_index`` in the Sunday-started week containing ``reference``.

    Used by the weekly planner to project a selected weekday onto a concrete date.
    """
    check_day_index(day_index)
    if isinstance(reference, datetime):
        reference = reference.date()
    week_start = reference - timedelta(days=weekday_index(reference))
    return week_start + timedelta(days=day_index)


def format_days(days: list[int]) -> str:
    """Format a day-of-week list as a human-readable string."""
    days = sorted(set(days))
    if days == EVERY_DAY:
        return "Every day"
    if days == WEEKDAYS:
        return "Weekdays"
    if days == [0, 6]:
        return "Weekends"
    return ", ".join(DAY_LABELS[d][:3] for d in days)


def parse_datetime(dt_str: str) -> datetime:
    """Parse ISO datetime string to naive local-time datetime.

    If the input is timezone-aware, converts to local time first, then
    strips tzinfo so the result is comparable with other naive instants.
    If naive, returns as-is (assumed local time).

    Raises ValueError if dt_str is empty or not a valid ISO datetime.
    """
    if not isinstance(dt_str, str) or not dt_str:
        raise ValueError(f"Invalid datetime string: {dt_str!r}")
    dt = datetime.fromisoformat(dt_str.replace("Z", "+00:00"))
    if dt.tzinfo is not None:
        dt = dt.astimezone().replace(tzinfo=None)
    return dt


def normalize_iso_date(value: str) -> str | None:
    """Extract YYYY-MM-DD from a date or datetime string.

    Returns the date portion if valid, None otherwise.
    Handles both "2026-02-15" and "2026-02-15T09:00:00" formats.
    """
    if not value:
        return None
    value = value.strip()
    if _ISO_DATE_RE.match(value):
        try:
            date.fromisoformat(value)
        except ValueError:
            return None
        return value
    m = re.match(r"^(\d{4}-\d{2}-\d{2})", value)
    if m:
        candidate = m.group(1)
        try:
            date.fromisoformat(candidate)
        except ValueError:
            return None
        return candidate
    return None
