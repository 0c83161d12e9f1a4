"""Shared day-of-week and ISO date helpers.

Weekday indexes follow Python's ``date.weekday()``: Monday=0 .. Sunday=6.
"""
from __future__ import annotations

import datetime as _dt
from typing import Any, Optional

__all__ = [
    "DAY_MAP",
    "DAY_NAMES",
    "MONTH_NAMES",
    "parse_weekday",
    "to_iso_str",
]

# Day-of-week name/abbreviation/RRULE code to weekday index
DAY_MAP = {
    "monday": 0,
    "mon": 0,
    "mo": 0,
    "tuesday": 1,
    "tue": 1,
    "tues": 1,
    "tu": 1,
    "wednesday": 2,
    "wed": 2,
    "we": 2,
    "thursday": 3,
    "thu": 3,
    "thur": 3,
    "thurs": 3,
    "th": 3,
    "friday": 4,
    "fri": 4,
    "fr": 4,
    "saturday": 5,
    "sat": 5,
    "sa": 5,
    "sunday": 6,
    "sun": 6,
    "su": 6,
}

# Display names, Monday-first
DAY_NAMES = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]

MONTH_NAMES = [
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
]


def parse_weekday(value: Any) -> Optional[int]:
    """Convert a weekday index, name or RRULE code to 0-6 (Monday=0).

    Examples:
        2 -> 2
        'Wednesday' -> 2
        'WE' -> 2
        ' sun ' -> 6
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if 0 <= value <= 6 else None
    text = str(value or "").strip().lower()
    if text.isdigit():
        idx = int(text)
        return idx if 0 <= idx <= 6 else None
    return DAY_MAP.get(text)


def to_iso_str(v: Any) -> Optional[str]:
    """Convert a date/datetime/time to its ISO string; strings pass through."""
    if v is None:
        return None
    if isinstance(v, str):
        return v
    if isinstance(v, (_dt.date, _dt.time)):
        return v.isoformat()
    return str(v)
