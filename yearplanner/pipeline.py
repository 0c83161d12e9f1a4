"""Year planner pipeline components.

``plan_year`` is the in-process entry point (expand, then lay out). The
request/processor/producer classes wrap it for the CLI.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from core.cli_errors import UsageError
from core.cli_output import OutputFormat, OutputWriter
from core.date_utils import DAY_NAMES, MONTH_NAMES
from core.pipeline import BaseProducer, SafeProcessor
from core.yamlio import dump_config as _dump_yaml

from .config import PlannerConfig
from .layout import LayoutEngine
from .model import Event, EventTemplate, PositionedEvent, Segment
from .plan_io import event_to_dict, load_plan, positioned_to_dict
from .recurrence import RecurrenceExpander

LOG = logging.getLogger(__name__)

STAGE_EXPAND = "expand"
STAGE_LAYOUT = "layout"
STAGES = (STAGE_EXPAND, STAGE_LAYOUT)


def plan_year(
    templates: Sequence[Event],
    year: int,
    config: Optional[PlannerConfig] = None,
    expander: Optional[RecurrenceExpander] = None,
) -> Tuple[List[Event], List[PositionedEvent]]:
    """Expand ``templates`` for ``year`` and lay the result out.

    Pass a long-lived ``expander`` to reuse its cache across calls. Expansion
    and layout both run with ``config``, falling back to the expander's own
    when none is given.
    """
    config = config or (expander.config if expander else PlannerConfig())
    expander = expander or RecurrenceExpander(config)
    events = expander.expand(templates, year, config)
    positioned = LayoutEngine(config).layout(events, year)
    return events, positioned


@dataclass
class YearPlanRequest:
    plan_path: str
    year: int
    stage: str = STAGE_LAYOUT
    config: PlannerConfig = field(default_factory=PlannerConfig)
    out_path: Optional[Path] = None


@dataclass
class YearPlanResult:
    year: int
    stage: str
    events: List[Event]
    positioned: List[PositionedEvent]
    out_path: Optional[Path] = None

    @property
    def degraded(self) -> List[PositionedEvent]:
        return [p for p in self.positioned if p.is_degraded]

    def document(self) -> Dict[str, Any]:
        if self.stage == STAGE_EXPAND:
            return {"year": self.year, "events": [event_to_dict(ev) for ev in self.events]}
        return {"year": self.year, "events": [positioned_to_dict(p) for p in self.positioned]}


class YearPlanProcessor(SafeProcessor[YearPlanRequest, YearPlanResult]):
    def __init__(
        self,
        loader: Callable[[str], List[EventTemplate]] = load_plan,
        expander: Optional[RecurrenceExpander] = None,
    ) -> None:
        self._loader = loader
        self._expander = expander

    def _process_safe(self, payload: YearPlanRequest) -> YearPlanResult:
        if payload.stage not in STAGES:
            raise UsageError(f"Unknown stage {payload.stage!r}", hint=f"Use one of: {', '.join(STAGES)}")
        templates = self._loader(payload.plan_path)
        LOG.debug("Loaded %d templates from %s", len(templates), payload.plan_path)
        expander = self._expander or RecurrenceExpander(payload.config)
        if payload.stage == STAGE_EXPAND:
            events = expander.expand(templates, payload.year, payload.config)
            positioned: List[PositionedEvent] = []
        else:
            events, positioned = plan_year(templates, payload.year, payload.config, expander)
        return YearPlanResult(
            year=payload.year,
            stage=payload.stage,
            events=events,
            positioned=positioned,
            out_path=payload.out_path,
        )


def _describe_event(ev: Event) -> str:
    span = ev.start_date.isoformat()
    if ev.end_date != ev.start_date:
        span += f"..{ev.end_date.isoformat()}"
    flag = " [holiday]" if ev.is_public_holiday else ""
    return f"{span}  {ev.title or ev.id}{flag}"


def _describe_segment(seg: Segment) -> str:
    return (
        f"{MONTH_NAMES[seg.month]} {DAY_NAMES[seg.start_day]}-{DAY_NAMES[seg.end_day]}"
        f"  {seg.start_date.isoformat()}..{seg.end_date.isoformat()}"
    )


def _describe_positioned(pos: PositionedEvent) -> str:
    month = MONTH_NAMES[pos.row_start]
    day = DAY_NAMES[pos.col_start]
    extra = ""
    if pos.is_multi_week:
        extra = f" ({len(pos.segments)} segments)"
    if pos.is_degraded:
        extra += " [overlaps]"
    return f"lane {pos.swim_lane}  {month} {day}  {_describe_event(pos.event)}{extra}"


class YearPlanProducer(BaseProducer):
    def __init__(self, writer: Optional[OutputWriter] = None) -> None:
        self._writer = writer or OutputWriter()

    def _produce_success(self, payload: YearPlanResult, diagnostics: Optional[Dict[str, Any]]) -> None:
        w = self._writer
        if payload.out_path is not None:
            _dump_yaml(str(payload.out_path), payload.document())
            noun = "events" if payload.stage == STAGE_EXPAND else "positioned events"
            count = len(payload.events) if payload.stage == STAGE_EXPAND else len(payload.positioned)
            w.print(f"Wrote {count} {noun} for {payload.year} to {payload.out_path}")
            return

        fmt = w.config.format
        if fmt in (OutputFormat.JSON, OutputFormat.YAML):
            w.print_data(payload.document())
            return
        if fmt == OutputFormat.TABLE:
            if payload.stage == STAGE_EXPAND:
                rows = [
                    {"id": ev.id, "title": ev.title, "start": ev.start_date, "end": ev.end_date, "holiday": ev.is_public_holiday}
                    for ev in payload.events
                ]
            else:
                rows = [
                    {
                        "id": p.id,
                        "title": p.title,
                        "lane": p.swim_lane,
                        "start": p.start_date,
                        "end": p.end_date,
                        "segments": len(p.segments),
                        "degraded": p.is_degraded,
                    }
                    for p in payload.positioned
                ]
            w.print_data(rows)
            return

        if payload.stage == STAGE_EXPAND:
            w.print(f"{len(payload.events)} events in {payload.year}")
            for ev in sorted(payload.events, key=lambda e: (e.start_date, e.id)):
                w.print(f"  {_describe_event(ev)}")
            return
        w.print(f"{len(payload.positioned)} events laid out for {payload.year}")
        for pos in payload.positioned:
            w.print(f"  {_describe_positioned(pos)}")
            if pos.is_multi_week:
                for seg in pos.segments:
                    w.print_verbose(f"      {_describe_segment(seg)}")
        if payload.degraded:
            w.print_warning(f"{len(payload.degraded)} events could not get a free lane and overlap others")


__all__ = [
    "STAGES",
    "STAGE_EXPAND",
    "STAGE_LAYOUT",
    "YearPlanProcessor",
    "YearPlanProducer",
    "YearPlanRequest",
    "YearPlanResult",
    "plan_year",
]
