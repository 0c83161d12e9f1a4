"""Grid and recurrence constants for the year planner."""

from __future__ import annotations

# -----------------------------------------------------------------------------
# Grid shape
# -----------------------------------------------------------------------------

MONTHS_PER_YEAR = 12
DAYS_PER_WEEK = 7

# Monday; weekday indexes are Monday=0 .. Sunday=6 throughout
WEEK_START = 0

# Regular swim lanes per day cell
MAX_SWIM_LANES = 5


# -----------------------------------------------------------------------------
# Recurrence
# -----------------------------------------------------------------------------

RECURRENCE_WEEKLY = "weekly"
RECURRENCE_MONTHLY = "monthly"
RECURRENCE_ANNUAL = "annual"
RECURRENCE_TYPES = (RECURRENCE_WEEKLY, RECURRENCE_MONTHLY, RECURRENCE_ANNUAL)

# Where Feb 29 anchors land in non-leap years
LEAP_DAY_BEFORE = "before"  # Feb 28
LEAP_DAY_AFTER = "after"    # Mar 1
LEAP_DAY_FALLBACKS = (LEAP_DAY_BEFORE, LEAP_DAY_AFTER)

# What monthly rules do when the anchor day does not exist in a month
MONTH_OVERFLOW_CLAMP = "clamp"
MONTH_OVERFLOW_SKIP = "skip"
MONTH_OVERFLOW_POLICIES = (MONTH_OVERFLOW_CLAMP, MONTH_OVERFLOW_SKIP)


# -----------------------------------------------------------------------------
# CLI defaults
# -----------------------------------------------------------------------------

DEFAULT_PLAN_PATH = "year.plan.yaml"
