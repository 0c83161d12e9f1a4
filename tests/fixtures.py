"""Shared test fixtures and utilities.

Builders for planner events plus the YAML and stdout helpers used by the
CLI tests.
"""

from __future__ import annotations

import datetime as _dt
import importlib.util
import io
import os
import tempfile
from contextlib import contextmanager, redirect_stderr, redirect_stdout
from pathlib import Path
from typing import Any, Iterable, List, Optional, Tuple

REPO_ROOT = Path(__file__).resolve().parents[1]


# -----------------------------------------------------------------------------
# Path helpers
# -----------------------------------------------------------------------------


def repo_root() -> Path:
    return REPO_ROOT


def has_pyyaml() -> bool:
    try:
        return importlib.util.find_spec("yaml") is not None
    except Exception:
        return False


# -----------------------------------------------------------------------------
# YAML helpers
# -----------------------------------------------------------------------------


def write_yaml(data: Any, dir: Optional[str] = None, filename: str = "plan.yaml") -> str:
    """Write data to a temporary YAML file, return the path."""
    import yaml

    td = dir or tempfile.mkdtemp()
    p = os.path.join(td, filename)
    with open(p, "w", encoding="utf-8") as fh:
        yaml.safe_dump(data, fh, sort_keys=False)
    return p


# -----------------------------------------------------------------------------
# Output capture helpers
# -----------------------------------------------------------------------------


@contextmanager
def capture_stdout():
    """Context manager that captures stdout and yields a StringIO buffer."""
    buf = io.StringIO()
    with redirect_stdout(buf):
        yield buf


@contextmanager
def capture_output():
    """Capture stdout and stderr; yields (out, err) buffers."""
    out, err = io.StringIO(), io.StringIO()
    with redirect_stdout(out), redirect_stderr(err):
        yield out, err


# -----------------------------------------------------------------------------
# Planner event builders
# -----------------------------------------------------------------------------


def d(text: str) -> _dt.date:
    return _dt.date.fromisoformat(text)


def make_pattern(type: str = "weekly", **kwargs):
    from yearplanner.model import RecurrencePattern

    if "days_of_week" in kwargs:
        kwargs["days_of_week"] = tuple(kwargs["days_of_week"])
    if "exclusions" in kwargs:
        kwargs["exclusions"] = frozenset(d(x) if isinstance(x, str) else x for x in kwargs["exclusions"])
    if isinstance(kwargs.get("end_date"), str):
        kwargs["end_date"] = d(kwargs["end_date"])
    return RecurrencePattern(type=type, **kwargs)


def make_event(
    id: str,
    start: str,
    end: Optional[str] = None,
    *,
    title: Optional[str] = None,
    pattern=None,
    holiday: bool = False,
    **kwargs,
):
    """EventTemplate from ISO strings; a pattern makes it recurring."""
    from yearplanner.model import EventTemplate

    return EventTemplate(
        id=id,
        title=title or id,
        start_date=d(start) if len(start) == 10 else start,
        end_date=d(end or start) if len(end or start) == 10 else (end or start),
        is_public_holiday=holiday,
        is_recurring=pattern is not None,
        recurrence_pattern=pattern,
        **kwargs,
    )


def starts(events: Iterable[Any]) -> List[_dt.date]:
    return [ev.start_date for ev in events]


def spans(events: Iterable[Any]) -> List[Tuple[_dt.date, _dt.date]]:
    return [(ev.start_date, ev.end_date) for ev in events]
