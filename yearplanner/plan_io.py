"""Plan file reading and result serialization.

Plan files are loose, human-authored YAML (or JSON) holding event records:

    events:
      - id: standup
        title: Standup
        startDate: 2025-01-15
        endDate: 2025-01-15
        isRecurring: true
        recurrencePattern: {type: weekly, daysOfWeek: [Wed]}

Keys are accepted in camelCase, snake_case or kebab-case. Weekday indexes
are Monday=0; names and two-letter codes work too.
"""
from __future__ import annotations

import datetime as _dt
import uuid
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple

from core.cli_errors import NotFoundError
from core.date_utils import parse_weekday, to_iso_str
from core.yamlio import load_document

from .dates import to_calendar_day
from .errors import PlanError
from .model import Event, EventTemplate, PositionedEvent, RecurrencePattern, Segment


def _get(rec: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in rec and rec[key] is not None:
            return rec[key]
    return None


def _coerce_str(v: Any) -> Optional[str]:
    if v is None:
        return None
    s = str(v).strip()
    return s if s else None


def _coerce_bool(v: Any, default: bool = False) -> bool:
    if v is None:
        return default
    if isinstance(v, bool):
        return v
    if isinstance(v, (int, float)):
        return bool(v)
    s = str(v).strip().lower()
    if s in ("yes", "true", "on", "1", "y"):
        return True
    if s in ("no", "false", "off", "0", "n", ""):
        return False
    return default


def _split_list(v: Any) -> List[Any]:
    if v is None:
        return []
    if isinstance(v, str):
        return [t.strip() for t in v.replace(";", ",").split(",") if t.strip()]
    if isinstance(v, (list, tuple, set, frozenset)):
        return list(v)
    return [v]


def _day(v: Any, what: str, event_id: str) -> _dt.date:
    try:
        return to_calendar_day(v)
    except (TypeError, ValueError) as exc:
        raise PlanError(
            f"Event {event_id}: cannot read {what} {v!r}",
            hint="Use ISO dates such as 2025-01-15",
        ) from exc


def _weekdays(v: Any, event_id: str) -> Tuple[int, ...]:
    out: List[int] = []
    for token in _split_list(v):
        day = parse_weekday(token)
        if day is None:
            raise PlanError(f"Event {event_id}: unknown weekday {token!r}", hint="Use Mon..Sun or 0-6 (Monday=0)")
        if day not in out:
            out.append(day)
    return tuple(out)


def pattern_from_record(raw: Any, event_id: str = "?") -> Optional[RecurrencePattern]:
    """Build a RecurrencePattern from a string type or a mapping.

    Unknown types and bad intervals are kept as-is so the expander can
    report them and leave the event unexpanded.
    """
    if raw is None:
        return None
    if isinstance(raw, str):
        return RecurrencePattern(type=raw.strip().lower())
    if not isinstance(raw, Mapping):
        return RecurrencePattern(type=str(raw))
    rec: Dict[str, Any] = dict(raw)
    # Options may sit in a nested mapping
    if isinstance(rec.get("options"), Mapping):
        rec = {**rec["options"], **{k: v for k, v in rec.items() if k != "options"}}

    ptype = (_coerce_str(_get(rec, "type", "repeat", "frequency")) or "").lower()
    interval_raw = _get(rec, "interval", "every")
    interval: Any = 1
    if interval_raw is not None:
        try:
            interval = int(interval_raw)
        except (TypeError, ValueError):
            interval = interval_raw
    end_raw = _get(rec, "end_date", "endDate", "end-date", "until")
    exclusions: FrozenSet[_dt.date] = frozenset(
        _day(x, "exclusion", event_id) for x in _split_list(_get(rec, "exclusions", "exdates", "exceptions"))
    )
    fallback = _coerce_str(_get(rec, "leap_day_fallback", "leapDayFallback", "fallbackForLeapDay"))
    overflow = _coerce_str(_get(rec, "month_overflow", "monthOverflow", "month-overflow"))
    return RecurrencePattern(
        type=ptype,
        interval=interval,
        days_of_week=_weekdays(_get(rec, "days_of_week", "daysOfWeek", "days-of-week", "byday", "byDay"), event_id),
        preserve_end_of_month=_coerce_bool(
            _get(rec, "preserve_end_of_month", "preserveEndOfMonth", "preserve-end-of-month"), True
        ),
        exclusions=exclusions,
        end_date=_day(end_raw, "recurrence end date", event_id) if end_raw is not None else None,
        leap_day_fallback=fallback.lower() if fallback else None,
        month_overflow=overflow.lower() if overflow else None,
    )


def template_from_record(rec: Mapping[str, Any]) -> EventTemplate:
    """Revive one event record into an EventTemplate.

    Raises:
        PlanError: when the record is not a mapping or has no usable start date.
    """
    if not isinstance(rec, Mapping):
        raise PlanError(f"Event records must be mappings, got {type(rec).__name__}")
    event_id = _coerce_str(_get(rec, "id", "event_id", "eventId")) or uuid.uuid4().hex
    start_raw = _get(rec, "start_date", "startDate", "start-date", "start", "date")
    if start_raw is None:
        raise PlanError(f"Event {event_id} has no start date", hint="Add startDate: YYYY-MM-DD")
    end_raw = _get(rec, "end_date", "endDate", "end-date", "end")
    # Validate both boundaries here so the model only sees readable values
    _day(start_raw, "start date", event_id)
    if end_raw is not None:
        _day(end_raw, "end date", event_id)

    pattern = pattern_from_record(_get(rec, "recurrence_pattern", "recurrencePattern", "recurrence"), event_id)
    recurring = _coerce_bool(_get(rec, "is_recurring", "isRecurring", "recurring"), pattern is not None)
    try:
        return EventTemplate(
            id=event_id,
            title=_coerce_str(_get(rec, "title", "subject", "name")) or "",
            start_date=start_raw,
            end_date=end_raw if end_raw is not None else start_raw,
            description=_coerce_str(_get(rec, "description", "notes")) or "",
            starts_pm=_coerce_bool(_get(rec, "starts_pm", "startsPM", "startsPm")),
            ends_am=_coerce_bool(_get(rec, "ends_am", "endsAM", "endsAm")),
            is_public_holiday=_coerce_bool(_get(rec, "is_public_holiday", "isPublicHoliday", "holiday")),
            is_recurring=recurring,
            recurrence_pattern=pattern,
        )
    except ValueError as exc:
        raise PlanError(f"Event {event_id}: {exc}") from exc


def templates_from_records(records: Iterable[Mapping[str, Any]]) -> List[EventTemplate]:
    return [template_from_record(rec) for rec in records]


def load_plan(path: str) -> List[EventTemplate]:
    """Read a plan file into templates, keeping file order."""
    if not Path(path).exists():
        raise NotFoundError(f"Plan file not found: {path}", hint="Pass --plan with an existing YAML or JSON file")
    try:
        doc = load_document(path)
    except ValueError as exc:
        raise PlanError(str(exc)) from exc
    if doc is None:
        raise PlanError(f"Plan file is empty: {path}")
    records = doc.get("events") if isinstance(doc, dict) else doc
    if not isinstance(records, list):
        raise PlanError(
            f"Plan file {path} has no event list",
            hint="Use a top-level 'events:' list or a bare list of events",
        )
    return templates_from_records(records)


def pattern_to_dict(pattern: RecurrencePattern) -> Dict[str, Any]:
    out: Dict[str, Any] = {"type": pattern.type, "interval": pattern.interval}
    if pattern.days_of_week:
        out["days_of_week"] = list(pattern.days_of_week)
    out["preserve_end_of_month"] = pattern.preserve_end_of_month
    if pattern.exclusions:
        out["exclusions"] = sorted(d.isoformat() for d in pattern.exclusions)
    if pattern.end_date:
        out["end_date"] = pattern.end_date.isoformat()
    if pattern.leap_day_fallback:
        out["leap_day_fallback"] = pattern.leap_day_fallback
    if pattern.month_overflow:
        out["month_overflow"] = pattern.month_overflow
    return out


def event_to_dict(ev: Event) -> Dict[str, Any]:
    """Plain, YAML-safe dict of an event; empty optional fields are dropped."""
    out: Dict[str, Any] = {
        "id": ev.id,
        "title": ev.title,
        "start_date": ev.start_date.isoformat(),
        "end_date": ev.end_date.isoformat(),
        "description": ev.description or None,
        "start_time": to_iso_str(ev.start_time),
        "end_time": to_iso_str(ev.end_time),
        "starts_pm": ev.starts_pm,
        "ends_am": ev.ends_am,
        "is_public_holiday": ev.is_public_holiday,
        "is_recurring": ev.is_recurring,
        "recurrence_pattern": pattern_to_dict(ev.recurrence_pattern) if ev.recurrence_pattern else None,
        "is_recurrence_instance": ev.is_recurrence_instance,
        "original_event_id": ev.original_event_id,
    }
    return {k: v for k, v in out.items() if v is not None}


def segment_to_dict(seg: Segment) -> Dict[str, Any]:
    return {
        "month": seg.month,
        "start_day": seg.start_day,
        "end_day": seg.end_day,
        "start_date": seg.start_date.isoformat(),
        "end_date": seg.end_date.isoformat(),
        "is_first_segment": seg.is_first_segment,
        "is_last_segment": seg.is_last_segment,
        "continues_up": seg.continues_up,
        "continues_down": seg.continues_down,
    }


def positioned_to_dict(pos: PositionedEvent) -> Dict[str, Any]:
    out = event_to_dict(pos.event)
    out.update(
        {
            "swim_lane": pos.swim_lane,
            "display_start": pos.start_date.isoformat(),
            "display_end": pos.end_date.isoformat(),
            "row_start": pos.row_start,
            "col_start": pos.col_start,
            "row_span": pos.row_span,
            "col_span": pos.col_span,
            "continues_left": pos.continues_left,
            "continues_right": pos.continues_right,
            "continues_up": pos.continues_up,
            "continues_down": pos.continues_down,
            "is_degraded": pos.is_degraded,
            "segments": [segment_to_dict(s) for s in pos.segments],
        }
    )
    return out


__all__ = [
    "event_to_dict",
    "load_plan",
    "pattern_from_record",
    "pattern_to_dict",
    "positioned_to_dict",
    "segment_to_dict",
    "template_from_record",
    "templates_from_records",
]
