"""Recurrence expansion.

Turns recurring event templates into concrete, year-bounded instances.
Expansion is a pure function of the template's fields and the target year;
results are memoized per (template id, year) and invalidated by a content
fingerprint rather than by object identity.
"""
from __future__ import annotations

import datetime as _dt
import hashlib
import json
import logging
from typing import Dict, Iterable, List, Optional, Tuple

from .config import PlannerConfig
from .constants import (
    LEAP_DAY_AFTER,
    MONTH_OVERFLOW_SKIP,
    RECURRENCE_ANNUAL,
    RECURRENCE_MONTHLY,
    RECURRENCE_WEEKLY,
)
from .dates import add_days, clamp_day, days_in_month, is_leap_year, last_day_of_month, year_bounds
from .model import Event, EventInstance, RecurrencePattern, instance_id

LOG = logging.getLogger(__name__)

_CacheEntry = Tuple[str, Tuple[EventInstance, ...]]


def template_fingerprint(template: Event, config: Optional[PlannerConfig] = None) -> str:
    """Content hash over every field that feeds an instance.

    With ``config`` the expansion policies it supplies are hashed too, so a
    cached result never outlives a policy change.
    """
    pattern = template.recurrence_pattern
    parts = [
        template.id,
        template.title,
        template.description,
        template.start_date.isoformat(),
        template.end_date.isoformat(),
        template.start_time.isoformat() if template.start_time else None,
        template.end_time.isoformat() if template.end_time else None,
        template.starts_pm,
        template.ends_am,
        template.is_public_holiday,
        template.is_recurring,
        list(pattern.fingerprint()) if pattern else None,
        [config.month_overflow, config.leap_day_fallback] if config else None,
    ]
    blob = json.dumps(parts, default=str)
    return hashlib.sha256(blob.encode("utf-8")).hexdigest()


def make_instance(template: Event, day: _dt.date, year_end: _dt.date) -> EventInstance:
    """Copy ``template`` onto ``day``, keeping its length, clipped to the year."""
    end = min(add_days(day, template.duration - 1), year_end)
    return EventInstance(
        id=instance_id(template.id, day),
        title=template.title,
        start_date=day,
        end_date=end,
        description=template.description,
        starts_pm=template.starts_pm,
        ends_am=template.ends_am,
        is_public_holiday=template.is_public_holiday,
        start_time=template.start_time,
        end_time=template.end_time,
        original_event_id=template.id,
    )


class RecurrenceExpander:
    """Expand recurring templates for one year at a time.

    One expander may serve many years; its cache is the only state kept
    between calls. Entries are replaced whole, so a concurrent recompute of
    the same key simply leaves the last result in place.
    """

    def __init__(self, config: Optional[PlannerConfig] = None) -> None:
        self.config = config or PlannerConfig()
        self._cache: Dict[Tuple[str, int], _CacheEntry] = {}

    def clear_cache(self) -> None:
        self._cache = {}

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    def expand(
        self,
        templates: Iterable[Event],
        year: int,
        config: Optional[PlannerConfig] = None,
    ) -> List[Event]:
        """Replace every recurring template by its instances for ``year``.

        Non-recurring templates pass through unchanged, in input order.
        ``config`` overrides the expander's own for this call.
        """
        config = config or self.config
        out: List[Event] = []
        for template in templates:
            if not template.is_recurring:
                out.append(template)
                continue
            out.extend(self.instances_for(template, year, config))
        LOG.debug("Expanded templates into %d events for %d", len(out), year)
        return out

    def instances_for(self, template: Event, year: int, config: Optional[PlannerConfig] = None) -> List[Event]:
        """Cached expansion of one recurring template.

        A malformed rule yields ``[template]`` so the rest of the year's
        events are unaffected.
        """
        config = config or self.config
        pattern = template.recurrence_pattern
        if pattern is None or not pattern.is_valid:
            LOG.warning(
                "Event %s is recurring but has no valid recurrence pattern (%r); leaving it unexpanded",
                template.id,
                pattern.type if pattern else None,
            )
            return [template]

        key = (template.id, year)
        fingerprint = template_fingerprint(template, config)
        cached = self._cache.get(key)
        if cached is not None and cached[0] == fingerprint:
            return list(cached[1])

        try:
            instances = tuple(self.generate_instances(template, year, config))
        except (ValueError, OverflowError) as exc:
            LOG.warning("Could not expand event %s for %d: %s; leaving it unexpanded", template.id, year, exc)
            return [template]
        self._cache[key] = (fingerprint, instances)
        return list(instances)

    def generate_instances(
        self,
        template: Event,
        year: int,
        config: Optional[PlannerConfig] = None,
    ) -> List[EventInstance]:
        """Uncached expansion of one template.

        Raises:
            ValueError: when the template has no recurrence pattern or an
                unsupported type.
        """
        config = config or self.config
        pattern = template.recurrence_pattern
        if pattern is None:
            raise ValueError(f"event {template.id} has no recurrence pattern")
        if template.start_date.year > year:
            return []
        if pattern.type == RECURRENCE_WEEKLY:
            days = self._weekly_dates(template, pattern, year)
        elif pattern.type == RECURRENCE_MONTHLY:
            days = self._monthly_dates(template, pattern, year, config)
        elif pattern.type == RECURRENCE_ANNUAL:
            days = self._annual_dates(template, pattern, year, config)
        else:
            raise ValueError(f"unsupported recurrence type {pattern.type!r}")

        year_start, year_end = year_bounds(year)
        kept = sorted({d for d in days if year_start <= d <= year_end and pattern.allows(d)})
        return [make_instance(template, d, year_end) for d in kept]

    def _weekly_dates(self, template: Event, pattern: RecurrencePattern, year: int) -> List[_dt.date]:
        year_start, year_end = year_bounds(year)
        origin = template.start_date
        anchor = max(origin, year_start)
        step = 7 * pattern.interval
        weekdays = pattern.days_of_week or (origin.weekday(),)
        out: List[_dt.date] = []
        for weekday in weekdays:
            # Phase is counted from the first matching day on or after the template start
            first = add_days(origin, (weekday - origin.weekday()) % 7)
            gap = (anchor - first).days
            skip = -(-gap // step) if gap > 0 else 0
            d = add_days(first, skip * step)
            while d <= year_end:
                out.append(d)
                d = add_days(d, step)
        return out

    def _monthly_dates(
        self, template: Event, pattern: RecurrencePattern, year: int, config: PlannerConfig
    ) -> List[_dt.date]:
        origin = template.start_date
        overflow = pattern.month_overflow or config.month_overflow
        first_month = origin.month if origin.year == year else 1
        ends_month = origin.day == days_in_month(origin.year, origin.month)
        out: List[_dt.date] = []
        for month in range(first_month, 13):
            elapsed = (year - origin.year) * 12 + (month - origin.month)
            if elapsed % pattern.interval:
                continue
            if pattern.preserve_end_of_month and ends_month:
                out.append(last_day_of_month(year, month))
            elif origin.day > days_in_month(year, month) and overflow == MONTH_OVERFLOW_SKIP:
                LOG.debug("Event %s: no day %d in %d-%02d, skipping", template.id, origin.day, year, month)
            else:
                out.append(clamp_day(year, month, origin.day))
        return out

    def _annual_dates(
        self, template: Event, pattern: RecurrencePattern, year: int, config: PlannerConfig
    ) -> List[_dt.date]:
        origin = template.start_date
        if (year - origin.year) % pattern.interval:
            return []
        if (origin.month, origin.day) == (2, 29) and not is_leap_year(year):
            fallback = pattern.leap_day_fallback or config.leap_day_fallback
            if fallback == LEAP_DAY_AFTER:
                return [_dt.date(year, 3, 1)]
            return [_dt.date(year, 2, 28)]
        return [_dt.date(year, origin.month, origin.day)]


__all__ = [
    "RecurrenceExpander",
    "make_instance",
    "template_fingerprint",
]
