"""Calendar-day arithmetic for the planner.

Everything here works on ``datetime.date`` values, so results never depend
on the local time zone or on daylight-saving transitions.
"""
from __future__ import annotations

import calendar
import datetime as _dt
from typing import Any, Optional, Tuple

__all__ = [
    "add_days",
    "clamp_day",
    "clip_range",
    "days_in_month",
    "inclusive_days",
    "is_leap_year",
    "last_day_of_month",
    "time_of_day",
    "to_calendar_day",
    "year_bounds",
]


def year_bounds(year: int) -> Tuple[_dt.date, _dt.date]:
    """Return (Jan 1, Dec 31) of ``year``."""
    return _dt.date(year, 1, 1), _dt.date(year, 12, 31)


def is_leap_year(year: int) -> bool:
    return calendar.isleap(year)


def days_in_month(year: int, month: int) -> int:
    """Number of days in ``month`` (1-12)."""
    return calendar.monthrange(year, month)[1]


def last_day_of_month(year: int, month: int) -> _dt.date:
    return _dt.date(year, month, days_in_month(year, month))


def clamp_day(year: int, month: int, day: int) -> _dt.date:
    """Build a date, pulling a day past the month's end back to its last day.

    Examples:
        clamp_day(2025, 2, 31) -> 2025-02-28
        clamp_day(2024, 2, 30) -> 2024-02-29
    """
    return _dt.date(year, month, min(day, days_in_month(year, month)))


def add_days(d: _dt.date, days: int) -> _dt.date:
    return d + _dt.timedelta(days=days)


def inclusive_days(start: _dt.date, end: _dt.date) -> int:
    """Count of calendar days from start to end, both included."""
    return (end - start).days + 1


def clip_range(
    start: _dt.date, end: _dt.date, lo: _dt.date, hi: _dt.date
) -> Optional[Tuple[_dt.date, _dt.date]]:
    """Intersect [start, end] with [lo, hi]; None when they do not meet."""
    s = max(start, lo)
    e = min(end, hi)
    if s > e:
        return None
    return s, e


def to_calendar_day(value: Any) -> _dt.date:
    """Normalize a date, datetime or ISO string to a plain calendar day.

    Datetimes keep their own wall-clock date; aware values are not shifted
    into another zone first. ISO strings may carry a time and a ``Z`` or
    offset suffix ("2025-01-15T00:00:00.000Z"), only the date part is used.

    Raises:
        ValueError: when the value cannot be read as a date.
    """
    if isinstance(value, _dt.datetime):
        return value.date()
    if isinstance(value, _dt.date):
        return value
    text = str(value or "").strip()
    if not text:
        raise ValueError("empty date value")
    return _dt.date.fromisoformat(text[:10])


def time_of_day(value: Any) -> Optional[_dt.time]:
    """Extract the wall-clock time from a datetime/time/ISO string, if any.

    Plain dates and date-only strings carry no time and return None.
    """
    if isinstance(value, _dt.datetime):
        return value.time().replace(tzinfo=None)
    if isinstance(value, _dt.time):
        return value.replace(tzinfo=None)
    if isinstance(value, _dt.date) or value is None:
        return None
    text = str(value).strip()
    if "T" in text:
        text = text.split("T", 1)[1]
    elif " " in text:
        text = text.split(" ", 1)[1]
    if ":" not in text:
        return None
    # Zone designators and fractional seconds are not part of the wall-clock time
    for sep in ("Z", "z", "+", "-", "."):
        text = text.split(sep, 1)[0]
    return _dt.time.fromisoformat(text)
