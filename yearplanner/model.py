"""Year planner data model.

Events are frozen dataclasses at calendar-day granularity. Templates are
the records an external store owns; instances are derived from recurring
templates for one year; positioned events are what the layout engine hands
to a renderer.
"""
from __future__ import annotations

import dataclasses
import datetime as _dt
import logging
from dataclasses import dataclass
from typing import Any, FrozenSet, Iterable, List, Optional, Set, Tuple

from .constants import MONTH_OVERFLOW_POLICIES, MONTHS_PER_YEAR, RECURRENCE_TYPES
from .dates import (
    inclusive_days,
    last_day_of_month,
    time_of_day,
    to_calendar_day,
    year_bounds,
)
from .errors import EventOutOfYearError

LOG = logging.getLogger(__name__)

Cell = Tuple[int, int]  # (month 0-11, weekday 0-6)


@dataclass(frozen=True)
class RecurrencePattern:
    """How a recurring template repeats.

    ``type`` is kept as given so a malformed record still loads; check
    ``is_valid`` before expanding.
    """

    type: str
    interval: int = 1
    days_of_week: Tuple[int, ...] = ()        # weekly only, Monday=0
    preserve_end_of_month: bool = True        # monthly only
    exclusions: FrozenSet[_dt.date] = frozenset()
    end_date: Optional[_dt.date] = None       # no instances after this day
    leap_day_fallback: Optional[str] = None   # annual Feb 29: "before"|"after"
    month_overflow: Optional[str] = None      # monthly short months: "clamp"|"skip"

    @property
    def is_valid(self) -> bool:
        return (
            self.type in RECURRENCE_TYPES
            and isinstance(self.interval, int)
            and not isinstance(self.interval, bool)
            and self.interval >= 1
            and (self.month_overflow is None or self.month_overflow in MONTH_OVERFLOW_POLICIES)
        )

    def allows(self, day: _dt.date) -> bool:
        """True unless ``day`` is excluded or past the rule's end date."""
        if day in self.exclusions:
            return False
        return self.end_date is None or day <= self.end_date

    def fingerprint(self) -> Tuple[Any, ...]:
        return (
            self.type,
            self.interval,
            tuple(sorted(self.days_of_week)),
            self.preserve_end_of_month,
            tuple(sorted(d.isoformat() for d in self.exclusions)),
            self.end_date.isoformat() if self.end_date else None,
            self.leap_day_fallback,
            self.month_overflow,
        )


@dataclass(frozen=True)
class Event:
    """Fields shared by stored templates and derived instances.

    Dates are normalized to plain calendar days; a datetime input also
    fills ``start_time``/``end_time`` when those are not given. An end
    before the start is swapped rather than rejected.
    """

    id: str
    title: str
    start_date: _dt.date
    end_date: _dt.date
    description: str = ""
    starts_pm: bool = False
    ends_am: bool = False
    is_public_holiday: bool = False
    start_time: Optional[_dt.time] = None
    end_time: Optional[_dt.time] = None
    is_recurring: bool = False
    recurrence_pattern: Optional[RecurrencePattern] = None
    is_recurrence_instance: bool = False
    original_event_id: Optional[str] = None

    def __post_init__(self) -> None:
        start_time = self.start_time if self.start_time is not None else time_of_day(self.start_date)
        end_time = self.end_time if self.end_time is not None else time_of_day(self.end_date)
        start = to_calendar_day(self.start_date)
        end = to_calendar_day(self.end_date)
        if end < start:
            LOG.debug("Event %s ends (%s) before it starts (%s); swapping dates", self.id, end, start)
            start, end = end, start
            start_time, end_time = end_time, start_time
        object.__setattr__(self, "start_date", start)
        object.__setattr__(self, "end_date", end)
        object.__setattr__(self, "start_time", start_time)
        object.__setattr__(self, "end_time", end_time)

    @property
    def duration(self) -> int:
        """Length in days, start and end included."""
        return inclusive_days(self.start_date, self.end_date)

    def overlaps(self, start: _dt.date, end: _dt.date) -> bool:
        return self.start_date <= end and self.end_date >= start


@dataclass(frozen=True)
class EventTemplate(Event):
    """A stored event record, possibly carrying a recurrence rule."""


@dataclass(frozen=True)
class EventInstance(Event):
    """One concrete occurrence of a recurring template."""

    is_recurrence_instance: bool = True


@dataclass(frozen=True)
class Segment:
    """The part of an event that falls in one (month row, week) cell run."""

    month: int          # 0-11
    start_day: int      # weekday, Monday=0
    end_day: int
    is_first_segment: bool
    is_last_segment: bool
    start_date: _dt.date
    end_date: _dt.date
    continues_up: bool = False     # previous segment sits in an earlier month row
    continues_down: bool = False   # next segment sits in a later month row

    @property
    def col_span(self) -> int:
        return (self.end_day - self.start_day) % 7 + 1

    @property
    def continues_left(self) -> bool:
        return not self.is_first_segment

    @property
    def continues_right(self) -> bool:
        return not self.is_last_segment

    @property
    def cells(self) -> List[Cell]:
        return [(self.month, (self.start_day + i) % 7) for i in range(self.col_span)]


@dataclass(frozen=True)
class PositionedEvent:
    """An event with its lane and display segments for one year grid."""

    event: Event
    swim_lane: int
    segments: Tuple[Segment, ...]
    start_date: _dt.date    # clipped to the year
    end_date: _dt.date
    row_start: int
    col_start: int
    row_span: int
    col_span: int           # 0 when the event is drawn per segment
    continues_left: bool = False
    continues_right: bool = False
    continues_up: bool = False
    continues_down: bool = False
    clipped_start: bool = False
    clipped_end: bool = False
    is_degraded: bool = False

    @property
    def id(self) -> str:
        return self.event.id

    @property
    def title(self) -> str:
        return self.event.title

    @property
    def is_public_holiday(self) -> bool:
        return self.event.is_public_holiday

    @property
    def is_multi_week(self) -> bool:
        return len(self.segments) > 1

    def cells(self) -> Set[Cell]:
        """(month, weekday) cells this event claims in its lane."""
        out: Set[Cell] = set()
        for seg in self.segments:
            out.update(seg.cells)
        return out


class YearPlanner:
    """The events of one planner year.

    Keeps insertion order; ``events`` returns a copy so callers cannot
    change the collection behind its back.
    """

    def __init__(self, year: int, events: Iterable[Event] = ()) -> None:
        self.year = year
        self._events: List[Event] = []
        for ev in events:
            self.add_event(ev)

    @property
    def events(self) -> List[Event]:
        return list(self._events)

    def _check_in_year(self, event: Event) -> None:
        start, end = year_bounds(self.year)
        if not event.overlaps(start, end):
            raise EventOutOfYearError(
                f"Event {event.id} ({event.start_date} - {event.end_date}) is outside {self.year}"
            )

    def add_event(self, event: Event) -> str:
        self._check_in_year(event)
        self._events.append(event)
        return event.id

    def remove_event(self, event_id: str) -> bool:
        before = len(self._events)
        self._events = [ev for ev in self._events if ev.id != event_id]
        return len(self._events) < before

    def get_event(self, event_id: str) -> Optional[Event]:
        for ev in self._events:
            if ev.id == event_id:
                return ev
        return None

    def update_event(self, event_id: str, **changes: Any) -> bool:
        """Replace fields of an event, keeping its id.

        Returns False when no event has ``event_id``; raises
        EventOutOfYearError when the update would move it out of the year.
        """
        for idx, ev in enumerate(self._events):
            if ev.id != event_id:
                continue
            changes.pop("id", None)
            updated = dataclasses.replace(ev, **changes)
            self._check_in_year(updated)
            self._events[idx] = updated
            return True
        return False

    def events_in_range(self, start: _dt.date, end: _dt.date) -> List[Event]:
        return [ev for ev in self._events if ev.overlaps(start, end)]

    def events_in_month(self, month: int) -> List[Event]:
        """Events touching ``month`` (0-11)."""
        if not 0 <= month < MONTHS_PER_YEAR:
            raise ValueError("Month must be between 0 and 11")
        first = _dt.date(self.year, month + 1, 1)
        return self.events_in_range(first, last_day_of_month(self.year, month + 1))

    def clear(self) -> None:
        self._events = []


def instance_id(template_id: str, day: _dt.date) -> str:
    """Stable id of the occurrence of ``template_id`` starting on ``day``."""
    return f"{template_id}_{day.isoformat()}"


__all__ = [
    "Cell",
    "Event",
    "EventInstance",
    "EventTemplate",
    "PositionedEvent",
    "RecurrencePattern",
    "Segment",
    "YearPlanner",
    "instance_id",
]
