"""Planner error types.

The engine itself never raises for bad calendar data; these cover the
boundary where event records are read and the YearPlanner collection.
"""
from __future__ import annotations

from core.cli_errors import DataError


class PlanError(DataError):
    """A plan file or event record that cannot be turned into events."""


class EventOutOfYearError(PlanError):
    """An event that does not touch the planner's year."""
