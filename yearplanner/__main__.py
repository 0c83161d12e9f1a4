"""Year Planner CLI

Reads a plan file of event records, expands recurring events for one year
and assigns every event a swim lane in the 12-month x 7-weekday grid.

    python -m yearplanner expand --plan year.plan.yaml --year 2025
    python -m yearplanner layout --plan year.plan.yaml --year 2025 -o json
    python -m yearplanner layout --plan year.plan.yaml --out out/2025.layout.yaml
"""
from __future__ import annotations

import argparse
import datetime as _dt
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from core.cli_framework import CLIApp
from core.cli_output import OutputWriter
from core.pipeline import run_pipeline

from . import __version__
from .config import PlannerConfig, load_planner_config
from .constants import DEFAULT_PLAN_PATH, LEAP_DAY_FALLBACKS, MONTH_OVERFLOW_POLICIES
from .pipeline import (
    STAGE_EXPAND,
    STAGE_LAYOUT,
    YearPlanProcessor,
    YearPlanProducer,
    YearPlanRequest,
)

app = CLIApp(
    "year-planner",
    "Year Planner CLI: expand recurring events and lay out a year grid.",
    version=__version__,
)


def _config_from_args(args: argparse.Namespace) -> PlannerConfig:
    overrides: Dict[str, Any] = {
        "max_swim_lanes": getattr(args, "max_lanes", None),
        "holiday_lane": getattr(args, "holiday_lane", None),
        "week_start": getattr(args, "week_start", None),
        "month_overflow": getattr(args, "month_overflow", None),
        "leap_day_fallback": getattr(args, "leap_day", None),
    }
    return load_planner_config(getattr(args, "config", None), overrides)


def _run_stage(args: argparse.Namespace, stage: str) -> int:
    out = getattr(args, "out", None)
    request = YearPlanRequest(
        plan_path=getattr(args, "plan", DEFAULT_PLAN_PATH),
        year=int(getattr(args, "year", None) or _dt.date.today().year),
        stage=stage,
        config=_config_from_args(args),
        out_path=Path(out) if out else None,
    )
    writer: Optional[OutputWriter] = getattr(args, "_output", None)
    return run_pipeline(request, YearPlanProcessor(), YearPlanProducer(writer))


def _plan_arguments(func):
    """Arguments shared by expand and layout."""
    decorators = [
        app.argument("--plan", default=DEFAULT_PLAN_PATH, help=f"Plan YAML/JSON path (default {DEFAULT_PLAN_PATH})"),
        app.argument("--year", type=int, help="Target year (default: current year)"),
        app.argument("--config", help="Planner config YAML"),
        app.argument("--out", help="Write the result to this YAML file instead of printing it"),
        app.argument("--max-lanes", dest="max_lanes", type=int, help="Regular swim lanes per day (default 5)"),
        app.argument("--holiday-lane", dest="holiday_lane", type=int, help="Lane reserved for public holidays"),
        app.argument("--week-start", dest="week_start", help="First day of the week (default monday)"),
        app.argument("--month-overflow", dest="month_overflow", choices=list(MONTH_OVERFLOW_POLICIES), help="Monthly rules on short months"),
        app.argument("--leap-day", dest="leap_day", choices=list(LEAP_DAY_FALLBACKS), help="Annual Feb 29 in non-leap years"),
    ]
    for deco in reversed(decorators):
        func = deco(func)
    return func


@app.command(STAGE_EXPAND, help="Expand recurring events for a year")
@_plan_arguments
def cmd_expand(args: argparse.Namespace) -> int:
    return _run_stage(args, STAGE_EXPAND)


@app.command(STAGE_LAYOUT, help="Expand and assign swim lanes and segments")
@_plan_arguments
def cmd_layout(args: argparse.Namespace) -> int:
    return _run_stage(args, STAGE_LAYOUT)


@app.command("config", help="Show the effective planner configuration")
@app.argument("--config", help="Planner config YAML")
def cmd_config(args: argparse.Namespace) -> int:
    cfg = _config_from_args(args)
    writer: OutputWriter = getattr(args, "_output", None) or OutputWriter()
    writer.print_data(
        {
            "max_swim_lanes": cfg.max_swim_lanes,
            "holiday_lane": cfg.reserved_holiday_lane,
            "regular_lanes": cfg.regular_lanes,
            "week_start": cfg.week_start,
            "month_overflow": cfg.month_overflow,
            "leap_day_fallback": cfg.leap_day_fallback,
        }
    )
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    return app.run(argv)


if __name__ == "__main__":
    raise SystemExit(main())
