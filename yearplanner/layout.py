"""Swim-lane layout for a 12-month x 7-weekday year grid.

Each month is one grid row and each weekday one column; a day cell holds a
fixed number of parallel lanes. Events are packed greedily (longest first)
into the lowest free lane; when every lane is taken somewhere along an
event's span, the lane with the fewest clashes is used and the placement is
flagged as degraded. Nothing is ever dropped for lack of room.
"""
from __future__ import annotations

import datetime as _dt
import functools
import logging
from typing import Iterable, List, Optional, Sequence, Set, Tuple

from .config import PlannerConfig
from .constants import DAYS_PER_WEEK, MONTHS_PER_YEAR
from .dates import add_days, clip_range, inclusive_days, last_day_of_month, year_bounds
from .model import Cell, Event, PositionedEvent, Segment

LOG = logging.getLogger(__name__)


@functools.lru_cache(maxsize=512)
def week_boundaries(year: int, month: int, week_start: int = 0) -> Tuple[Tuple[_dt.date, _dt.date], ...]:
    """(first, last) day of each week of ``month`` (0-11), split at the month edges."""
    day = _dt.date(year, month + 1, 1)
    last = last_day_of_month(year, month + 1)
    weeks: List[Tuple[_dt.date, _dt.date]] = []
    begin = day
    while day <= last:
        nxt = add_days(day, 1)
        if day == last or nxt.weekday() == week_start:
            weeks.append((begin, day))
            begin = nxt
        day = nxt
    return tuple(weeks)


def segment_range(start: _dt.date, end: _dt.date, week_start: int = 0) -> List[Segment]:
    """Split [start, end] (one calendar year) into per month/week segments."""
    if start.year != end.year:
        raise ValueError(f"segment range must lie in one year: {start} - {end}")
    pieces: List[Tuple[int, _dt.date, _dt.date]] = []
    for month in range(start.month - 1, end.month):
        for week_first, week_last in week_boundaries(start.year, month, week_start):
            hit = clip_range(start, end, week_first, week_last)
            if hit:
                pieces.append((month, hit[0], hit[1]))

    segments: List[Segment] = []
    last_idx = len(pieces) - 1
    for idx, (month, seg_start, seg_end) in enumerate(pieces):
        segments.append(
            Segment(
                month=month,
                start_day=seg_start.weekday(),
                end_day=seg_end.weekday(),
                is_first_segment=idx == 0,
                is_last_segment=idx == last_idx,
                start_date=seg_start,
                end_date=seg_end,
                continues_up=idx > 0 and pieces[idx - 1][0] < month,
                continues_down=idx < last_idx and pieces[idx + 1][0] > month,
            )
        )
    return segments


def segment_cells(segments: Iterable[Segment]) -> Set[Cell]:
    cells: Set[Cell] = set()
    for seg in segments:
        cells.update(seg.cells)
    return cells


class OccupancyGrid:
    """months x weekdays x lanes of claimed flags for one layout pass."""

    def __init__(self, lanes: int) -> None:
        if lanes < 1:
            raise ValueError("an occupancy grid needs at least one lane")
        self.lanes = lanes
        self._cells: List[List[List[bool]]] = []
        self.reset()

    def reset(self) -> None:
        self._cells = [
            [[False] * self.lanes for _ in range(DAYS_PER_WEEK)] for _ in range(MONTHS_PER_YEAR)
        ]

    def occupied(self, month: int, weekday: int, lane: int) -> bool:
        return self._cells[month][weekday][lane]

    def conflicts(self, cells: Iterable[Cell], lane: int) -> int:
        return sum(1 for month, weekday in cells if self._cells[month][weekday][lane])

    def is_free(self, cells: Iterable[Cell], lane: int) -> bool:
        return all(not self._cells[month][weekday][lane] for month, weekday in cells)

    def mark(self, cells: Iterable[Cell], lane: int) -> None:
        for month, weekday in cells:
            self._cells[month][weekday][lane] = True

    def lane_usage(self, lane: int) -> int:
        return sum(1 for row in self._cells for col in row if col[lane])


class LayoutEngine:
    """Assign swim lanes and display segments to one year's events."""

    def __init__(self, config: Optional[PlannerConfig] = None) -> None:
        self.config = config or PlannerConfig()

    def layout(self, events: Sequence[Event], year: int) -> List[PositionedEvent]:
        year_start, year_end = year_bounds(year)
        grid = OccupancyGrid(self.config.lane_count)

        clipped: List[Tuple[Event, _dt.date, _dt.date]] = []
        for ev in events:
            hit = clip_range(ev.start_date, ev.end_date, year_start, year_end)
            if hit is None:
                LOG.debug("Event %s (%s - %s) is outside %d; not laid out", ev.id, ev.start_date, ev.end_date, year)
                continue
            clipped.append((ev, hit[0], hit[1]))

        # Holidays first, then longest, then earliest
        clipped.sort(key=lambda item: (not item[0].is_public_holiday, -inclusive_days(item[1], item[2]), item[1], item[0].id))

        placed: List[PositionedEvent] = []
        degraded = 0
        for ev, start, end in clipped:
            pos = self._place(grid, ev, start, end, year_start, year_end)
            degraded += pos.is_degraded
            placed.append(pos)
        if degraded:
            LOG.info("Layout for %d: %d of %d events share a lane with another event", year, degraded, len(placed))
        return placed

    def _place(
        self,
        grid: OccupancyGrid,
        ev: Event,
        start: _dt.date,
        end: _dt.date,
        year_start: _dt.date,
        year_end: _dt.date,
    ) -> PositionedEvent:
        segments = segment_range(start, end, self.config.week_start)
        cells = segment_cells(segments)

        is_degraded = False
        if ev.is_public_holiday:
            lane = self.config.reserved_holiday_lane
            if not grid.is_free(cells, lane):
                LOG.debug("Holiday %s shares the holiday lane with another holiday", ev.id)
        else:
            lane, is_degraded = self._choose_lane(grid, cells)
            if is_degraded:
                LOG.info("No free lane for event %s (%s - %s); placed in lane %d with fewest clashes", ev.id, start, end, lane)
        grid.mark(cells, lane)

        row_span = end.month - start.month + 1
        starts_before = ev.start_date < year_start
        return PositionedEvent(
            event=ev,
            swim_lane=lane,
            segments=tuple(segments),
            start_date=start,
            end_date=end,
            row_start=start.month - 1,
            col_start=start.weekday(),
            row_span=row_span,
            col_span=segments[0].col_span if len(segments) == 1 else 0,
            continues_left=starts_before,
            continues_right=len(segments) > 1,
            continues_up=starts_before,
            continues_down=row_span > 1,
            clipped_start=starts_before,
            clipped_end=ev.end_date > year_end,
            is_degraded=is_degraded,
        )

    def _choose_lane(self, grid: OccupancyGrid, cells: Set[Cell]) -> Tuple[int, bool]:
        """Lowest fully free regular lane, else the one with the best score."""
        lanes = self.config.regular_lanes
        for lane in lanes:
            if grid.is_free(cells, lane):
                return lane, False
        total = len(cells) or 1
        best_lane, best_score = lanes[0], -1.0
        for lane in lanes:
            score = 1 - grid.conflicts(cells, lane) / total
            if score > best_score:
                best_lane, best_score = lane, score
        return best_lane, True


__all__ = [
    "LayoutEngine",
    "OccupancyGrid",
    "segment_cells",
    "segment_range",
    "week_boundaries",
]
