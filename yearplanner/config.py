"""Planner configuration.

Defaults live in ``constants``; a YAML file can override them:

    max_swim_lanes: 5
    holiday_lane: 5          # omit for "right after the regular lanes"
    week_start: monday
    month_overflow: clamp    # or skip
    leap_day_fallback: before  # or after
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from core.cli_errors import ConfigError
from core.date_utils import parse_weekday
from core.yamlio import load_config

from .constants import (
    DAYS_PER_WEEK,
    LEAP_DAY_BEFORE,
    LEAP_DAY_FALLBACKS,
    MAX_SWIM_LANES,
    MONTH_OVERFLOW_CLAMP,
    MONTH_OVERFLOW_POLICIES,
    MONTHS_PER_YEAR,
    WEEK_START,
)

# Accepted spellings for each setting
_KEY_ALIASES = {
    "max_swim_lanes": ("max_swim_lanes", "maxSwimLanes", "max-swim-lanes"),
    "holiday_lane": ("holiday_lane", "holidayLane", "holiday-lane"),
    "week_start": ("week_start", "weekStart", "week-start"),
    "month_overflow": ("month_overflow", "monthOverflow", "month-overflow"),
    "leap_day_fallback": ("leap_day_fallback", "leapDayFallback", "fallbackForLeapDay", "leap-day-fallback"),
}


@dataclass(frozen=True)
class PlannerConfig:
    max_swim_lanes: int = MAX_SWIM_LANES
    holiday_lane: Optional[int] = None
    week_start: int = WEEK_START
    month_overflow: str = MONTH_OVERFLOW_CLAMP
    leap_day_fallback: str = LEAP_DAY_BEFORE

    def __post_init__(self) -> None:
        if not isinstance(self.max_swim_lanes, int) or self.max_swim_lanes < 1:
            raise ConfigError(f"max_swim_lanes must be a positive integer, got {self.max_swim_lanes!r}")
        if self.holiday_lane is not None and (not isinstance(self.holiday_lane, int) or self.holiday_lane < 0):
            raise ConfigError(f"holiday_lane must be a non-negative integer, got {self.holiday_lane!r}")
        if not self.regular_lanes:
            raise ConfigError(
                "No swim lanes left for regular events",
                hint="Raise max_swim_lanes or move holiday_lane past the regular lanes",
            )
        if self.week_start not in range(DAYS_PER_WEEK):
            raise ConfigError(f"week_start must be a weekday 0-6 (Monday=0), got {self.week_start!r}")
        if self.month_overflow not in MONTH_OVERFLOW_POLICIES:
            raise ConfigError(
                f"month_overflow must be one of {', '.join(MONTH_OVERFLOW_POLICIES)}, got {self.month_overflow!r}"
            )
        if self.leap_day_fallback not in LEAP_DAY_FALLBACKS:
            raise ConfigError(
                f"leap_day_fallback must be one of {', '.join(LEAP_DAY_FALLBACKS)}, got {self.leap_day_fallback!r}"
            )

    @property
    def reserved_holiday_lane(self) -> int:
        return self.max_swim_lanes if self.holiday_lane is None else self.holiday_lane

    @property
    def regular_lanes(self) -> List[int]:
        """Lanes open to non-holiday events, lowest first."""
        return [lane for lane in range(self.max_swim_lanes) if lane != self.reserved_holiday_lane]

    @property
    def lane_count(self) -> int:
        """Lanes the occupancy grid must hold, the holiday lane included."""
        return max(self.max_swim_lanes, self.reserved_holiday_lane + 1)

    @property
    def grid_shape(self) -> tuple:
        return (MONTHS_PER_YEAR, DAYS_PER_WEEK, self.lane_count)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "PlannerConfig":
        """Build a config from a loose mapping (YAML file, CLI overrides)."""
        values: Dict[str, Any] = {}
        for name, aliases in _KEY_ALIASES.items():
            for alias in aliases:
                if alias in data and data[alias] is not None:
                    values[name] = data[alias]
                    break
        for name in ("max_swim_lanes", "holiday_lane"):
            if name in values:
                try:
                    values[name] = int(values[name])
                except (TypeError, ValueError) as exc:
                    raise ConfigError(f"{name} must be an integer, got {values[name]!r}") from exc
        if "week_start" in values:
            day = parse_weekday(values["week_start"])
            if day is None:
                raise ConfigError(f"Unknown week_start {values['week_start']!r}", hint="Use a weekday name or 0-6")
            values["week_start"] = day
        for name in ("month_overflow", "leap_day_fallback"):
            if name in values:
                values[name] = str(values[name]).strip().lower()
        return cls(**values)


def load_planner_config(path: Optional[str], overrides: Optional[Mapping[str, Any]] = None) -> PlannerConfig:
    """Read a YAML config file (optional) and apply explicit overrides."""
    try:
        data: Dict[str, Any] = dict(load_config(path))
    except ValueError as exc:
        raise ConfigError(str(exc)) from exc
    if isinstance(data.get("planner"), dict):
        data = dict(data["planner"])
    for key, value in (overrides or {}).items():
        if value is not None:
            data[key] = value
    return PlannerConfig.from_mapping(data)
