"""Year planner engine.

Expands recurring event templates into concrete instances for one year and
lays the year's events out on a 12-month x 7-weekday grid of swim lanes.
"""

__version__ = "0.1.0"

from .config import PlannerConfig  # noqa: E402
from .layout import LayoutEngine  # noqa: E402
from .model import (  # noqa: E402
    Event,
    EventInstance,
    EventTemplate,
    PositionedEvent,
    RecurrencePattern,
    Segment,
    YearPlanner,
)
from .pipeline import plan_year  # noqa: E402
from .recurrence import RecurrenceExpander  # noqa: E402

__all__ = [
    "Event",
    "EventInstance",
    "EventTemplate",
    "LayoutEngine",
    "PlannerConfig",
    "PositionedEvent",
    "RecurrenceExpander",
    "RecurrencePattern",
    "Segment",
    "YearPlanner",
    "plan_year",
    "__version__",
]
